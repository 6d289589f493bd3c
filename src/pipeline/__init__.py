"""
Pipeline Module.

Orchestrates one document through acquisition, extraction, validation
and confidence scoring.
"""

from .processor import DocumentMetadata, DocumentProcessor, ProcessedDocument, ProcessingOptions

__all__ = [
    'DocumentMetadata',
    'DocumentProcessor',
    'ProcessedDocument',
    'ProcessingOptions'
]
