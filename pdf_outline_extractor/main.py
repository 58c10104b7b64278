#!/usr/bin/env python3
"""
PDF Outline Extractor - command-line entry point

Extracts the title and heading outline of one document and writes it as
JSON. The input is either a PDF file or a JSON file of per-page text
fragments produced by another parser.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .config import BACKENDS, STRATEGIES, ExtractorConfig
from .extractor import OutlineExtractor
from .json_handler import JSONHandler
from .logging_config import PDFProcessingError, handle_pdf_error, setup_logging
from .pdf_extractor import load_fragment_file

SUPPORTED_SUFFIXES = {'.pdf', '.json'}


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        argparse.Namespace: Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description='Extract the title and heading outline of a PDF document',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pdf-outline report.pdf
  pdf-outline report.pdf --output report.json --strategy combined
  pdf-outline fragments.json --line-tolerance 2
        """
    )

    parser.add_argument('input', type=str,
                        help='PDF file, or JSON file of per-page text fragments')
    parser.add_argument('--output', '-o', type=str, default=None,
                        help='Output JSON file (default: stdout)')
    parser.add_argument('--backend', choices=BACKENDS, default=None,
                        help='PDF text extraction library (default: pymupdf)')
    parser.add_argument('--strategy', choices=STRATEGIES, default=None,
                        help='Heading classification strategy (default: font-rank)')
    parser.add_argument('--language', type=str, default=None,
                        help='Document language tag, e.g. en or ja')
    parser.add_argument('--line-tolerance', type=float, default=None,
                        help='Vertical step used to group fragments into lines')
    parser.add_argument('--title-tolerance', type=float, default=None,
                        help='Height tolerance for multi-line titles')
    parser.add_argument('--title-pages', type=int, default=None,
                        help='Number of opening pages searched for the title')
    parser.add_argument('--workers', type=int, default=None,
                        help='Worker threads for per-page line assembly')
    parser.add_argument('--max-size-mb', type=float, default=None,
                        help='Reject inputs larger than this many megabytes')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Logging level (default: WARNING)')

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ExtractorConfig:
    """Build the extraction configuration from parsed arguments."""
    return ExtractorConfig().with_overrides(
        backend=args.backend,
        strategy=args.strategy,
        language=args.language,
        line_grouping_tolerance=args.line_tolerance,
        title_height_tolerance=args.title_tolerance,
        title_pages=args.title_pages,
        page_workers=args.workers,
        max_file_size_mb=args.max_size_mb,
    ).validate()


def validate_input_file(input_path: str, config: ExtractorConfig) -> Path:
    """
    Check that the input exists, has a supported type and is not too large.

    Raises:
        ValueError: If the input cannot be accepted
    """
    path = Path(input_path)

    if not path.is_file():
        raise ValueError(f"Input file does not exist: {input_path}")

    if path.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported file type '{path.suffix}', expected a PDF or JSON file")

    size_mb = path.stat().st_size / (1024 * 1024)
    if size_mb > config.max_file_size_mb:
        raise ValueError(f"Input file is {size_mb:.1f} MB, the limit is {config.max_file_size_mb} MB")

    return path


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for outline extraction."""
    args = parse_arguments(argv)
    logger = setup_logging(args.log_level)

    try:
        config = build_config(args)
        input_path = validate_input_file(args.input, config)
    except ValueError as e:
        logger.error(str(e))
        return 1

    extractor = OutlineExtractor(config)
    json_handler = JSONHandler()

    try:
        if input_path.suffix.lower() == '.json':
            outline = extractor.extract_from_pages(load_fragment_file(input_path))
        else:
            outline = extractor.extract_from_pdf(input_path)

        json_data = json_handler.create_json_output(outline)

        if args.output:
            json_handler.write_json_file(json_data, args.output)
        else:
            sys.stdout.write(json_handler.serialize(json_data) + '\n')

    except PDFProcessingError as e:
        handle_pdf_error(str(input_path), e, logger)
        return 1
    except KeyboardInterrupt:
        logger.info("Processing interrupted by user")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
