"""Shared error handling utilities for kittytap.

Provides the base exception and consistent error formatting across all
commands. Commands should handle their own business logic before using
these generic helpers.

PUBLIC API:
  - KittyTapError: Base exception for all kittytap failures
  - markdown_error_response: Create error response for markdown display
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class KittyTapError(Exception):
    """Base exception for all kittytap failures."""

    pass


def markdown_error_response(message: str, **frontmatter: Any) -> dict[str, Any]:
    """Create error response for markdown display commands.

    Args:
        message: The error message to display
        **frontmatter: Extra frontmatter fields

    Returns:
        Markdown display dict with error element
    """
    logger.warning(f"Command failed: {message}")
    return {
        "elements": [{"type": "text", "content": f"Error: {message}"}],
        "frontmatter": {"status": "error", **frontmatter},
    }
