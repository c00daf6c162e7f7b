"""Document loading from files and strings."""

from .document_loader import DocumentLoader, document_loader, is_yaml_path, load_document

__all__ = ["DocumentLoader", "document_loader", "is_yaml_path", "load_document"]
