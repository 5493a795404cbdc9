"""
Input validation and sanitization utilities.
"""

import re

from shared_utils.error_handler import ValidationError


_SOURCE_ID_PATTERN = re.compile(r"^[a-z][a-z0-9_-]{0,63}$")


class InputValidator:
    """Utility class for input validation."""

    @staticmethod
    def validate_source_id(value: str) -> str:
        """Validate a content source identifier (lowercase slug).

        Args:
            value: Path segment taken from ``/api/<source_id>``

        Returns:
            The unchanged id

        Raises:
            ValidationError: If the id contains anything but [a-z0-9_-]
        """
        if not isinstance(value, str) or not _SOURCE_ID_PATTERN.match(value):
            raise ValidationError("Invalid source id", context={"source_id": value})
        return value
