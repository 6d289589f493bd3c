"""
Document Processor Module.

This module provides the DocumentProcessor class that orchestrates the
judgment extraction pipeline for one document.

Pipeline:
    Text acquisition -> (Template matching | Pattern extraction |
    Entity recognition) -> Merge -> Validation -> Confidence aggregation

The three extractors share the same immutable text and may run in a
thread pool; all of them finish before validation starts.

Author: ML Engineering Team
"""

import json
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from config import get_config
from src.extraction import EntityRecognizer, ExtractedRecord, PatternExtractor, TemplateMatcher
from src.postprocessor import (
    ConfidenceAggregator,
    ConfidenceMetrics,
    ValidationFlag,
    Validator,
)
from src.utils.exceptions import AcquisitionError, EmptyDocumentError
from src.utils.helpers import generate_document_id
from src.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


@dataclass
class ProcessingOptions:
    """
    Per-call switches for the pipeline.

    Attributes:
        enable_ocr: Allow OCR during acquisition and report its confidence
        enable_template_matching: Run the template matcher
        enable_entity_recognition: Run the entity recognizer
        strict_validation: Flag missing required fields
    """
    enable_ocr: bool = True
    enable_template_matching: bool = True
    enable_entity_recognition: bool = True
    strict_validation: bool = False


@dataclass
class DocumentMetadata:
    """Page count, detected language and matched template of a document."""

    page_count: int = 1
    language: str = "en-SG"
    template: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'page_count': self.page_count,
            'language': self.language,
            'template': self.template,
        }


@dataclass
class ProcessedDocument:
    """
    Full result of processing one document.

    Attributes:
        document_id: Unique id of this processing run
        file_name: Source file name, if any
        file_type: 'pdf', 'docx', 'txt', 'image' or 'text'
        status: 'completed' or 'failed'
        record: Merged extraction record
        confidence: Stage confidences and overall score
        flags: Validation flags
        metadata: Page count, language, template
        processed_at: ISO timestamp
        processing_time: Seconds spent
    """
    document_id: str
    file_name: Optional[str]
    file_type: str
    status: str
    record: ExtractedRecord
    confidence: ConfidenceMetrics
    flags: List[ValidationFlag] = field(default_factory=list)
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)
    processed_at: str = field(default_factory=lambda: datetime.now().isoformat())
    processing_time: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.status == 'completed'

    @property
    def requires_review(self) -> bool:
        """Any error or high-severity flag needs a human look."""
        return any(f.type == 'error' or f.severity == 'high' for f in self.flags)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'document_id': self.document_id,
            'file_name': self.file_name,
            'file_type': self.file_type,
            'status': self.status,
            'record': self.record.to_dict(),
            'confidence': self.confidence.to_dict(),
            'flags': [flag.to_dict() for flag in self.flags],
            'metadata': self.metadata.to_dict(),
            'requires_review': self.requires_review,
            'processed_at': self.processed_at,
            'processing_time': round(self.processing_time, 4),
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


class DocumentProcessor:
    """
    Orchestrates acquisition, extraction, validation and scoring.

    Components are passed in or built from configuration. The text
    acquirer can be any object with ``acquire(path, enable_ocr)``
    returning an object with text, page_count, file_type, ocr_used and
    ocr_confidence attributes.

    Example:
        >>> processor = DocumentProcessor()
        >>> result = processor.process_text(judgment_text)
        >>> result.record.nafkah_iddah_amount
        >>> result.confidence.overall
    """

    def __init__(
        self,
        acquirer: Optional[Any] = None,
        extractor: Optional[PatternExtractor] = None,
        template_matcher: Optional[TemplateMatcher] = None,
        entity_recognizer: Optional[EntityRecognizer] = None,
        validator: Optional[Validator] = None,
        aggregator: Optional[ConfidenceAggregator] = None,
        parallel: Optional[bool] = None,
        max_workers: Optional[int] = None
    ) -> None:
        """
        Initialize the document processor.

        Args:
            acquirer: Text acquisition collaborator. If None, an
                      InputHandler is created on first file.
            extractor: Pattern extractor.
            template_matcher: Template matcher.
            entity_recognizer: Entity recognizer.
            validator: Record validator.
            aggregator: Confidence aggregator.
            parallel: Run extractors in a thread pool. If None, uses config.
            max_workers: Thread pool size. If None, uses config.
        """
        self._acquirer = acquirer
        self.extractor = extractor or PatternExtractor()
        self.template_matcher = template_matcher or TemplateMatcher()
        self.entity_recognizer = entity_recognizer or EntityRecognizer()
        self.validator = validator or Validator()
        self.aggregator = aggregator or ConfidenceAggregator()

        self.parallel = parallel if parallel is not None else get_config(
            "processing.parallel_execution", True
        )
        self.max_workers = max_workers or get_config("processing.max_workers", 3)

        self.malay_terms = [t.lower() for t in get_config(
            "language.malay_terms", ["syariah", "nafkah", "mutaah", "iddah", "talaq"]
        )]
        self.malay_min_matches = get_config("language.min_matches", 3)
        self.malay_language = get_config("language.malay", "ms-MY")
        self.default_language = get_config("language.default", "en-SG")

        logger.info(f"DocumentProcessor initialized (parallel={self.parallel})")

    @property
    def acquirer(self) -> Any:
        if self._acquirer is None:
            from src.input_handler import InputHandler
            self._acquirer = InputHandler()
        return self._acquirer

    def process_file(
        self,
        filepath: Union[str, Path],
        options: Optional[ProcessingOptions] = None
    ) -> ProcessedDocument:
        """
        Process a judgment file.

        Acquisition failures do not raise: they produce a failed
        ProcessedDocument with a single high-severity error flag.

        Args:
            filepath: Path to the document.
            options: Processing switches.

        Returns:
            ProcessedDocument.
        """
        options = options or ProcessingOptions()
        start_time = time.time()
        file_name = Path(filepath).name
        logger.info(f"Processing file: {file_name}")

        try:
            acquired = self.acquirer.acquire(filepath, enable_ocr=options.enable_ocr)
        except AcquisitionError as e:
            logger.warning(f"Acquisition failed for {file_name}: {e}")
            return self._failed(e, file_name, Path(filepath).suffix.lstrip('.') or 'unknown', start_time)

        ocr_confidence = None
        if options.enable_ocr and getattr(acquired, 'ocr_used', False):
            ocr_confidence = getattr(acquired, 'ocr_confidence', None)

        return self._process(
            acquired.text,
            file_name=file_name,
            file_type=getattr(acquired, 'file_type', 'unknown'),
            page_count=getattr(acquired, 'page_count', 1),
            ocr_confidence=ocr_confidence,
            options=options,
            start_time=start_time
        )

    def process_text(
        self,
        text: str,
        file_name: Optional[str] = None,
        options: Optional[ProcessingOptions] = None
    ) -> ProcessedDocument:
        """
        Process already-acquired judgment text.

        Args:
            text: Document text.
            file_name: Name to report in the result.
            options: Processing switches (enable_ocr has no effect here).

        Returns:
            ProcessedDocument.
        """
        return self._process(
            text,
            file_name=file_name,
            file_type='text',
            page_count=1,
            ocr_confidence=None,
            options=options or ProcessingOptions(),
            start_time=time.time()
        )

    def detect_language(self, text: str) -> str:
        """'ms-MY' when enough Malay legal terms occur, else the default."""
        lowered = text.lower()
        matches = sum(1 for term in self.malay_terms if term in lowered)
        return self.malay_language if matches >= self.malay_min_matches else self.default_language

    def _process(
        self,
        text: str,
        file_name: Optional[str],
        file_type: str,
        page_count: int,
        ocr_confidence: Optional[float],
        options: ProcessingOptions,
        start_time: float
    ) -> ProcessedDocument:
        if not text or not text.strip():
            error = EmptyDocumentError(file_name or '<text>', "Document text is empty")
            logger.warning(str(error))
            return self._failed(error, file_name, file_type, start_time)

        record, extraction_confidence, template, entities = self._run_extractors(text, options)

        if entities is not None:
            filled = record.merge(entities[0])
            logger.debug(f"Entity recognizer filled: {filled}")

        validation = self.validator.validate(record, strict=options.strict_validation)

        confidence = self.aggregator.aggregate(ConfidenceMetrics(
            extraction=extraction_confidence,
            ocr=ocr_confidence,
            entity_recognition=entities[1] if entities is not None else None,
            template_matching=template[1] if template is not None else None,
            data_validation=validation.confidence,
        ))

        result = ProcessedDocument(
            document_id=generate_document_id(),
            file_name=file_name,
            file_type=file_type,
            status='completed',
            record=record,
            confidence=confidence,
            flags=validation.flags,
            metadata=DocumentMetadata(
                page_count=page_count,
                language=self.detect_language(text),
                template=template[0] if template is not None else None,
            ),
            processing_time=time.time() - start_time
        )

        logger.info(
            f"Processed {file_name or 'text'}: {len(result.flags)} flag(s), "
            f"overall confidence {confidence.overall:.2f} "
            f"({result.processing_time:.3f}s)"
        )
        return result

    def _run_extractors(
        self,
        text: str,
        options: ProcessingOptions
    ) -> Tuple[ExtractedRecord, float, Optional[Tuple[str, float]], Optional[Tuple[Dict[str, Any], float]]]:
        """Run the extractors and wait for all of them."""
        tasks: Dict[str, Callable[[str], Any]] = {'patterns': self.extractor.extract}
        if options.enable_template_matching:
            tasks['template'] = self.template_matcher.match
        if options.enable_entity_recognition:
            tasks['entities'] = self.entity_recognizer.recognize

        if self.parallel and len(tasks) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = {name: executor.submit(task, text) for name, task in tasks.items()}
                results = {name: future.result() for name, future in futures.items()}
        else:
            results = {name: task(text) for name, task in tasks.items()}

        record, extraction_confidence = results['patterns']
        return record, extraction_confidence, results.get('template'), results.get('entities')

    def _failed(
        self,
        error: AcquisitionError,
        file_name: Optional[str],
        file_type: str,
        start_time: float
    ) -> ProcessedDocument:
        """Result for a document whose text could not be acquired."""
        return ProcessedDocument(
            document_id=generate_document_id(),
            file_name=file_name,
            file_type=file_type,
            status='failed',
            record=ExtractedRecord(),
            confidence=ConfidenceMetrics(overall=0.0),
            flags=[ValidationFlag(
                type='error',
                field='processing',
                severity='high',
                message=f"Document processing failed: {error.message}"
            )],
            metadata=DocumentMetadata(page_count=0, language=self.default_language),
            processing_time=time.time() - start_time
        )
