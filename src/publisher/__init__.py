"""Publisher library for Confluence page trees.

This package reconciles a locally rendered page tree with a Confluence space:
it creates, updates and deletes pages, attachments, content hash properties
and labels through the Confluence client library.
"""

from .config_loader import ConfigLoader
from .errors import (
    PublisherError,
    FilesystemError,
    PublishConfigError,
    ContentModelError,
    PublishError,
)
from .model_loader import ContentModelLoader
from .models import (
    OrphanRemovalStrategy,
    PublishConfig,
    PublishingStrategy,
    PublishResult,
)
from .publisher import ConfluencePublisher

__all__ = [
    'ConfigLoader',
    'ContentModelLoader',
    'ConfluencePublisher',
    'PublishConfig',
    'PublishResult',
    'PublishingStrategy',
    'OrphanRemovalStrategy',
    'PublisherError',
    'FilesystemError',
    'PublishConfigError',
    'ContentModelError',
    'PublishError',
]
