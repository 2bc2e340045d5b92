"""Data models for remote Confluence content and the local page tree."""

from src.models.confluence_page import RemoteAttachmentRef, RemotePage, RemotePageRef
from src.models.content_model import ContentType, LocalPageNode

__all__ = [
    'RemotePageRef',
    'RemotePage',
    'RemoteAttachmentRef',
    'ContentType',
    'LocalPageNode',
]
