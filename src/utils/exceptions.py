"""
Custom Exceptions Module.

This module defines all custom exceptions used throughout the judgment
extraction system.

Only two kinds of failure are hard failures: text acquisition (the
document yielded no text at all) and invalid formula input (a caller
contract violation). Field-level parse failures and schema problems are
reported as validation flags, never raised.

Exception Hierarchy:
    JudgmentProcessingError (base)
    ├── AcquisitionError
    │   ├── UnsupportedFileTypeError
    │   ├── DocumentNotFoundError
    │   ├── CorruptedFileError
    │   ├── EmptyDocumentError
    │   └── OCRError
    │       ├── OCREngineNotAvailableError
    │       └── OCRProcessingError
    └── FormulaInputError
"""


class JudgmentProcessingError(Exception):
    """
    Base exception for all judgment processing errors.

    Attributes:
        message: Human-readable error message.
        details: Optional dictionary with additional error details.
    """

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# ACQUISITION ERRORS
# =============================================================================

class AcquisitionError(JudgmentProcessingError):
    """Raised when text cannot be obtained from a document at all."""
    pass


class UnsupportedFileTypeError(AcquisitionError):
    """
    Raised when an unsupported file type is provided.

    Example:
        >>> raise UnsupportedFileTypeError(".odt", [".pdf", ".docx"])
    """

    def __init__(self, file_type: str, supported_types: list):
        message = f"Unsupported file type: '{file_type}'"
        details = {"file_type": file_type, "supported_types": supported_types}
        super().__init__(message, details)


class DocumentNotFoundError(AcquisitionError):
    """Raised when the input document cannot be found."""

    def __init__(self, filepath: str):
        message = f"File not found: {filepath}"
        details = {"filepath": filepath}
        super().__init__(message, details)


class CorruptedFileError(AcquisitionError):
    """Raised when a file appears to be corrupted or unreadable."""

    def __init__(self, filepath: str, reason: str = None):
        message = f"Corrupted or unreadable file: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


class EmptyDocumentError(AcquisitionError):
    """Raised when a document was read but yielded no text."""

    def __init__(self, filepath: str, reason: str = None):
        message = f"No text could be acquired from: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


class OCRError(AcquisitionError):
    """Base exception for OCR-related errors."""
    pass


class OCREngineNotAvailableError(OCRError):
    """Raised when the OCR engine is not available."""

    def __init__(self, engine_name: str):
        message = f"OCR engine not available: {engine_name}"
        details = {"engine": engine_name}
        super().__init__(message, details)


class OCRProcessingError(OCRError):
    """Raised when OCR processing fails."""

    def __init__(self, filepath: str, reason: str = None):
        message = f"OCR processing failed for: {filepath}"
        details = {"filepath": filepath, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# FORMULA ERRORS
# =============================================================================

class FormulaInputError(JudgmentProcessingError):
    """
    Raised when the formula engine receives an invalid salary or award
    selector.

    Example:
        >>> raise FormulaInputError("Salary cannot be negative", salary=-1)
    """

    def __init__(self, reason: str, **details):
        super().__init__(f"Invalid formula input: {reason}", details)


__all__ = [
    'JudgmentProcessingError',
    'AcquisitionError',
    'UnsupportedFileTypeError',
    'DocumentNotFoundError',
    'CorruptedFileError',
    'EmptyDocumentError',
    'OCRError',
    'OCREngineNotAvailableError',
    'OCRProcessingError',
    'FormulaInputError',
]
