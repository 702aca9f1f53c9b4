from .loader import build_access_control, load_document, parse_document

__all__ = ["build_access_control", "load_document", "parse_document"]
