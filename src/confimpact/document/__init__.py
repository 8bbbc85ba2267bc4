"""Document loading for JSON and YAML configuration files."""

from confimpact.document.loader import detect_format, load_document, parse_text

__all__ = ["detect_format", "load_document", "parse_text"]
