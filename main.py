#!/usr/bin/env python3
"""
Syariah Court Judgment Extraction System - Main Entry Point.

Command-line interface to the extraction pipeline and the statutory
formula engine. Results are printed as JSON.

Usage:
    Command Line:
        python main.py process --input judgment.pdf --output result.json
        python main.py process --input judgment.txt --text --strict
        python main.py formula --salary 2500 --award both

    Python:
        from main import run_processing
        result = run_processing("judgment.pdf")

Author: ML Engineering Team
Version: 1.0.0
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

# Import project modules
from config import ConfigurationManager
from src.formula import FormulaEngine
from src.pipeline import DocumentProcessor, ProcessingOptions
from src.utils.exceptions import CorruptedFileError, FormulaInputError, JudgmentProcessingError
from src.utils.helpers import ensure_directory
from src.utils.logger import LOGGER_NAMESPACE, get_logger, setup_logger_from_config


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Syariah Court Judgment Extraction System",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Extract from a judgment:
        python main.py process --input judgment.pdf

    Extract from plain text, flag missing required fields:
        python main.py process --input judgment.txt --text --strict

    Statutory formula:
        python main.py formula --salary 2500 --award nafkah_iddah
        """
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # process
    process_parser = subparsers.add_parser("process", help="Extract facts from a judgment")
    process_parser.add_argument(
        "--input", "-i",
        type=str,
        required=True,
        help="Judgment file (PDF, DOCX, TXT or image)"
    )
    process_parser.add_argument(
        "--text",
        action="store_true",
        help="Treat the input file as already-extracted UTF-8 text"
    )
    process_parser.add_argument(
        "--no-ocr",
        action="store_true",
        help="Disable OCR for scanned documents"
    )
    process_parser.add_argument(
        "--no-templates",
        action="store_true",
        help="Disable template matching"
    )
    process_parser.add_argument(
        "--no-entities",
        action="store_true",
        help="Disable entity recognition"
    )
    process_parser.add_argument(
        "--strict",
        action="store_true",
        help="Flag missing required fields"
    )
    process_parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Also write the JSON result to this file"
    )

    # formula
    formula_parser = subparsers.add_parser("formula", help="Compute statutory awards")
    formula_parser.add_argument(
        "--salary", "-s",
        type=float,
        required=True,
        help="Husband's monthly salary"
    )
    formula_parser.add_argument(
        "--award", "-a",
        choices=["nafkah_iddah", "mutaah", "both"],
        default="both",
        help="Award to compute (default: both)"
    )
    formula_parser.add_argument(
        "--specs",
        action="store_true",
        help="Include the formula descriptions in the output"
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Initialize configuration and logging.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Initialized configuration manager.
    """
    config = ConfigurationManager(args.config)

    logger = setup_logger_from_config()
    if args.debug:
        logging.getLogger(LOGGER_NAMESPACE).setLevel(logging.DEBUG)
        for handler in logging.getLogger(LOGGER_NAMESPACE).handlers:
            handler.setLevel(logging.DEBUG)

    logger.info(f"{config.get('project.name', 'syariah-judgment-extraction')} "
                f"v{config.get('project.version', '1.0.0')}")
    return config


def run_processing(
    input_path: str,
    as_text: bool = False,
    options: Optional[ProcessingOptions] = None,
    processor: Optional[DocumentProcessor] = None
) -> Dict[str, Any]:
    """
    Run the extraction pipeline on one document.

    Args:
        input_path: Judgment file.
        as_text: Read the file as UTF-8 text instead of acquiring it.
        options: Processing switches.
        processor: Processor to use. If None, one is created.

    Returns:
        ProcessedDocument as a dictionary.
    """
    processor = processor or DocumentProcessor()
    if as_text:
        try:
            text = Path(input_path).read_text(encoding='utf-8')
        except UnicodeDecodeError as e:
            raise CorruptedFileError(str(input_path), f"Not UTF-8 text: {e}")
        result = processor.process_text(text, file_name=Path(input_path).name, options=options)
    else:
        result = processor.process_file(input_path, options=options)
    return result.to_dict()


def run_formula(salary: float, award: str = "both", include_specs: bool = False) -> Dict[str, Any]:
    """
    Run the statutory formula engine.

    Raises:
        FormulaInputError: For an invalid salary or award.
    """
    engine = FormulaEngine()
    output = engine.calculate(salary, award).to_dict()
    if include_specs:
        output['specs'] = engine.formula_specs()
    return output


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function - entry point for command-line execution.

    Returns:
        Exit code (0 for success, 1 for errors or a failed document).
    """
    args = parse_arguments(argv)
    initialize_system(args)
    logger = get_logger(__name__)

    try:
        if args.command == "formula":
            output = run_formula(args.salary, args.award, args.specs)
        else:
            options = ProcessingOptions(
                enable_ocr=not args.no_ocr,
                enable_template_matching=not args.no_templates,
                enable_entity_recognition=not args.no_entities,
                strict_validation=args.strict
            )
            output = run_processing(args.input, as_text=args.text, options=options)

        rendered = json.dumps(output, indent=2)
        print(rendered)

        if args.command == "process" and args.output:
            output_path = Path(args.output)
            ensure_directory(output_path.parent)
            output_path.write_text(rendered + "\n", encoding='utf-8')
            logger.info(f"Result written to {output_path}")

        if args.command == "process" and output['status'] != 'completed':
            return 1
        return 0

    except FormulaInputError as e:
        logger.error(str(e))
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    except (JudgmentProcessingError, OSError) as e:
        logger.error(f"Processing error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
