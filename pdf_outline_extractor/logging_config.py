"""
Logging configuration and error handling framework for PDF Outline Extractor.
"""

import logging
import sys


LOGGER_NAME = "pdf_outline_extractor"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Set up logging configuration for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))

    # Avoid duplicate handlers
    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(getattr(logging, level.upper()))
        return logger

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, level.upper()))

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

    return logger


class PDFProcessingError(Exception):
    """Base exception for PDF processing errors."""
    pass


class PDFExtractionError(PDFProcessingError):
    """Exception raised when the fragment source cannot read a document."""
    pass


class EmptyExtractionError(PDFProcessingError):
    """Exception raised when no text could be extracted from any page."""
    pass


class NoStructureFoundError(PDFProcessingError):
    """Exception raised when neither a title nor any heading was found."""
    pass


class InvalidInputError(PDFProcessingError):
    """Exception raised for a single malformed text fragment."""
    pass


class JSONOutputError(PDFProcessingError):
    """Exception raised when JSON output generation fails."""
    pass


def handle_pdf_error(pdf_path: str, error: Exception, logger: logging.Logger) -> None:
    """
    Handle PDF processing errors with appropriate logging.

    Known processing errors are reported with their message only; anything
    else is logged with its traceback.

    Args:
        pdf_path: Path to the PDF file that caused the error
        error: The exception that occurred
        logger: Logger instance for error reporting
    """
    error_msg = f"Error processing PDF '{pdf_path}': {str(error)}"

    if isinstance(error, PDFProcessingError):
        logger.error(error_msg)
    else:
        logger.exception(error_msg)
