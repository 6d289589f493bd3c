"""Tests for the document processing pipeline."""

import json

import pytest

from conftest import SAMPLE_JUDGMENT, FakeAcquired, FakeAcquirer
from src.pipeline import DocumentProcessor, ProcessingOptions


def test_process_text_end_to_end(processor, sample_judgment) -> None:
    result = processor.process_text(sample_judgment, file_name='judgment.txt')

    assert result.status == 'completed'
    assert result.succeeded
    assert result.file_type == 'text'
    assert result.flags == []
    assert not result.requires_review

    record = result.record
    assert record.case_number == 'SYC1234/2023'
    assert record.husband_name == 'Ahmad bin Ismail'
    assert record.wife_ic == 'S7654321B'
    assert record.date_of_order == '12 March 2024'
    assert record.nafkah_iddah_amount == 400.0

    assert result.metadata.language == 'ms-MY'
    assert result.metadata.template == 'syariah_court_order'
    assert result.metadata.page_count == 1

    confidence = result.confidence
    assert confidence.extraction == 0.95
    assert confidence.ocr is None
    assert confidence.entity_recognition == 0.7
    assert confidence.template_matching == 1.0
    assert confidence.data_validation == 0.9
    assert confidence.overall == pytest.approx(0.8875)


def test_process_file_with_ocr(ocr_acquirer) -> None:
    processor = DocumentProcessor(acquirer=ocr_acquirer, parallel=False)
    result = processor.process_file('scan.pdf')

    assert ocr_acquirer.calls == [('scan.pdf', True)]
    assert result.file_name == 'scan.pdf'
    assert result.file_type == 'pdf'
    assert result.metadata.page_count == 3
    assert result.confidence.ocr == 0.8
    assert result.confidence.overall == pytest.approx(0.87)


def test_ocr_disabled_drops_ocr_signal(ocr_acquirer) -> None:
    processor = DocumentProcessor(acquirer=ocr_acquirer, parallel=False)
    result = processor.process_file('scan.pdf', ProcessingOptions(enable_ocr=False))

    assert ocr_acquirer.calls == [('scan.pdf', False)]
    assert result.confidence.ocr is None


def test_acquisition_failure_gives_failed_document(failing_acquirer) -> None:
    processor = DocumentProcessor(acquirer=failing_acquirer, parallel=False)
    result = processor.process_file('missing.pdf')

    assert result.status == 'failed'
    assert result.file_type == 'pdf'
    assert result.confidence.overall == 0.0
    assert result.metadata.page_count == 0
    assert len(result.flags) == 1
    flag = result.flags[0]
    assert (flag.type, flag.field, flag.severity) == ('error', 'processing', 'high')
    assert flag.message.startswith("Document processing failed:")
    assert result.record.extracted_fields == {}


@pytest.mark.parametrize("text", ["", "   \n\t  "])
def test_empty_text_fails(processor, text) -> None:
    result = processor.process_text(text)

    assert result.status == 'failed'
    assert result.flags[0].field == 'processing'


def test_disabled_extractors_are_absent_signals(processor, sample_judgment) -> None:
    options = ProcessingOptions(enable_template_matching=False, enable_entity_recognition=False)
    result = processor.process_text(sample_judgment, options=options)

    assert result.confidence.template_matching is None
    assert result.confidence.entity_recognition is None
    assert result.metadata.template is None
    assert result.record.husband_name is None
    assert result.confidence.overall == pytest.approx(0.9333, abs=1e-4)


def test_strict_validation_flags_missing_fields(processor) -> None:
    text = "In the Syariah Court. The Court orders nafkah iddah of $300."

    lenient = processor.process_text(text)
    strict = processor.process_text(text, options=ProcessingOptions(strict_validation=True))

    assert lenient.flags == []
    assert [f.field for f in strict.flags] == ['case_number', 'husband_income']


def test_parallel_and_sequential_agree(sample_judgment) -> None:
    sequential = DocumentProcessor(parallel=False).process_text(sample_judgment)
    parallel = DocumentProcessor(parallel=True, max_workers=3).process_text(sample_judgment)

    assert parallel.record.to_dict() == sequential.record.to_dict()
    assert parallel.confidence.to_dict() == sequential.confidence.to_dict()
    assert parallel.metadata.to_dict() == sequential.metadata.to_dict()


def test_english_text_keeps_default_language(processor) -> None:
    assert processor.detect_language("The husband earns $2,000 per month") == 'en-SG'


def test_result_serialises_to_json(processor, lump_sum_judgment) -> None:
    result = processor.process_text(lump_sum_judgment)
    data = json.loads(result.to_json())

    assert data['record']['mutaah_lump_sum'] == 36000.0
    assert data['record']['document_type'] == 'unknown'
    assert data['status'] == 'completed'
    assert set(data['confidence']) == {
        'extraction', 'ocr', 'entity_recognition', 'template_matching',
        'data_validation', 'overall'
    }


def test_requires_review_on_high_severity_flag() -> None:
    text = SAMPLE_JUDGMENT.replace("$400 per month", "$2,000 per month")
    processor = DocumentProcessor(
        acquirer=FakeAcquirer(FakeAcquired(text)), parallel=False
    )
    result = processor.process_file('judgment.pdf')

    assert result.requires_review
    assert result.confidence.data_validation == 0.8
