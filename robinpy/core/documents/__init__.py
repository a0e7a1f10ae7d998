"""Account documents: listing and throttled download."""
from .models import DocumentDescriptor
from .service import DocumentService
from .retriever import ThrottledDocumentRetriever

__all__ = [
    'DocumentDescriptor',
    'DocumentService',
    'ThrottledDocumentRetriever',
]
