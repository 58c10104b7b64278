"""
JSON output handler with schema validation for PDF Outline Extractor.

This module handles the formatting and validation of extracted outlines
into JSON, with special attention to multilingual content and character
encoding preservation.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from jsonschema import ValidationError, validate

from .data_models import Outline
from .line_assembler import normalize_line_text
from .logging_config import JSONOutputError

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).parent / "schema" / "output_schema.json"


class JSONHandler:
    """
    Handles JSON output formatting and schema validation for outlines.

    Features:
    - Strict schema compliance validation
    - Unicode NFC normalization of titles and heading text
    - Multilingual content written without ASCII escaping
    """

    def __init__(self, schema_path: Optional[Union[str, Path]] = None):
        """
        Initialize the JSON handler.

        Args:
            schema_path: Path to the JSON schema file for validation
        """
        self.schema_path = Path(schema_path) if schema_path else DEFAULT_SCHEMA_PATH
        self.schema = self._load_schema()

    def _load_schema(self) -> Dict[str, Any]:
        """
        Load the JSON schema for validation.

        Raises:
            JSONOutputError: If the schema file is missing or unreadable
        """
        try:
            with open(self.schema_path, 'r', encoding='utf-8') as f:
                schema = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise JSONOutputError(f"Failed to load schema from {self.schema_path}: {e}") from e

        logger.debug(f"Loaded schema from {self.schema_path}")
        return schema

    @staticmethod
    def normalize_text(text: Optional[str]) -> str:
        """
        Normalize text for consistent character representation.

        Same canonical form as line assembly: NFC, single spaces, no control
        or format characters.
        """
        if not text:
            return ""
        return normalize_line_text(text)

    def format_output(self, outline: Outline) -> Dict[str, Any]:
        """
        Format an outline into the output structure.

        Args:
            outline: Extracted outline

        Returns:
            Dictionary matching the output schema
        """
        output = outline.to_json_dict()
        output['title'] = self.normalize_text(output['title'])

        # Normalization can make two entries equal; keep the first
        entries = []
        seen = set()
        for entry in output['outline']:
            entry['text'] = self.normalize_text(entry['text'])
            key = (entry['text'], entry['page'])
            if key in seen:
                logger.debug(f"Dropping duplicate heading '{entry['text']}' on page {entry['page']}")
                continue
            seen.add(key)
            entries.append(entry)
        output['outline'] = entries
        return output

    def validate_schema(self, json_data: Dict[str, Any]) -> bool:
        """
        Validate JSON data against the loaded schema.

        Args:
            json_data: Dictionary to validate

        Returns:
            True if validation passes, False otherwise
        """
        try:
            validate(instance=json_data, schema=self.schema)
        except ValidationError as e:
            logger.error(f"Schema validation failed: {e.message}")
            logger.debug(f"Validation error path: {list(e.absolute_path)}")
            return False

        logger.debug("Schema validation passed")
        return True

    def create_json_output(self, outline: Outline) -> Dict[str, Any]:
        """
        Create validated JSON output for an outline.

        Raises:
            JSONOutputError: If the output does not match the schema
        """
        json_data = self.format_output(outline)
        if not self.validate_schema(json_data):
            raise JSONOutputError("Generated JSON structure failed schema validation")
        return json_data

    @staticmethod
    def serialize(json_data: Dict[str, Any], indent: Optional[int] = 2) -> str:
        """Serialize with multilingual characters preserved."""
        return json.dumps(json_data, indent=indent, ensure_ascii=False)

    def write_json_file(self, json_data: Dict[str, Any], output_path: Union[str, Path]) -> None:
        """
        Write JSON data to file with proper encoding.

        Raises:
            JSONOutputError: If the file cannot be written
        """
        output_file = Path(output_path)
        try:
            output_file.parent.mkdir(parents=True, exist_ok=True)
            output_file.write_text(self.serialize(json_data) + '\n', encoding='utf-8')
        except OSError as e:
            raise JSONOutputError(f"Failed to write JSON file {output_path}: {e}") from e

        logger.info(f"Successfully wrote JSON output to {output_path}")
