"""Local page tree handed to the publisher by the rendering stage."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


class ContentType(Enum):
    """Representation of a rendered page body."""
    STORAGE = "storage"
    WIKI = "wiki"

    @property
    def representation(self) -> str:
        """Body representation name expected by the Confluence REST API."""
        return self.value

    @classmethod
    def parse(cls, value: str) -> "ContentType":
        """Parse a content type name, ignoring case.

        Raises:
            ValueError: If the value names no known content type
        """
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ValueError(
                f"Unknown content type '{value}' (expected one of: {allowed})"
            ) from None


@dataclass(frozen=True)
class LocalPageNode:
    """A page of the local tree, immutable once built.

    Attributes:
        title: Page title (unique among siblings)
        body: Rendered page body
        content_type: Representation of the body
        attachments: Attachment file name mapped to the file holding its bytes
        labels: Labels the page should carry
        children: Child pages in publishing order
        source_path: Where the page was rendered from (for messages only)
    """
    title: str
    body: str
    content_type: ContentType = ContentType.STORAGE
    attachments: Mapping[str, Path] = field(default_factory=dict)
    labels: Tuple[str, ...] = ()
    children: Tuple["LocalPageNode", ...] = ()
    source_path: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'attachments', MappingProxyType(dict(self.attachments)))
        object.__setattr__(self, 'labels', tuple(self.labels))
        object.__setattr__(self, 'children', tuple(self.children))
