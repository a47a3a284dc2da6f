"""Document normalization: uploaded files and HTML to plain text."""

from .html_text import html_to_text
from .text_extractor import ALLOWED_MEDIA_TYPES, TextExtractor

__all__ = ["ALLOWED_MEDIA_TYPES", "TextExtractor", "html_to_text"]
