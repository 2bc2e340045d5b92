"""Data models for the publisher.

This module defines the publish configuration, the strategies it selects and
the result summary of a publish run. All models use dataclasses.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .errors import PublishError


class PublishingStrategy(Enum):
    """Where the top-level pages of the tree are published.

    APPEND_TO_ANCESTOR: top-level pages become children of the ancestor page
    REPLACE_ANCESTOR: the single top-level page replaces the ancestor page content
    """
    APPEND_TO_ANCESTOR = "APPEND_TO_ANCESTOR"
    REPLACE_ANCESTOR = "REPLACE_ANCESTOR"


class OrphanRemovalStrategy(Enum):
    """What happens to remote pages that are no longer in the local tree."""
    REMOVE_ORPHANS = "REMOVE_ORPHANS"
    KEEP_ORPHANS = "KEEP_ORPHANS"


@dataclass
class PublishConfig:
    """Settings of a publish run.

    Attributes:
        space_key: Space the pages are published to
        ancestor_id: Page under which the tree is published
        parent_page_title: Title of the ancestor page, used when ancestor_id is unset
        publishing_strategy: Placement of the top-level pages
        orphan_removal_strategy: Whether remote orphans are deleted
        version_message: Message attached to created and updated versions
        notify_watchers: Notify watchers on updates (otherwise minor edits)
        sync_labels: Reconcile page labels with the local tree
        min_seconds_between_requests: Minimum interval between API requests
        request_timeout: Connect/read timeout for API requests in seconds
        skip_ssl_verification: Disable TLS certificate verification
    """
    space_key: str
    ancestor_id: Optional[str] = None
    parent_page_title: Optional[str] = None
    publishing_strategy: PublishingStrategy = PublishingStrategy.APPEND_TO_ANCESTOR
    orphan_removal_strategy: OrphanRemovalStrategy = OrphanRemovalStrategy.REMOVE_ORPHANS
    version_message: Optional[str] = None
    notify_watchers: bool = True
    sync_labels: bool = True
    min_seconds_between_requests: float = 0.0
    request_timeout: float = 30
    skip_ssl_verification: bool = False


@dataclass
class PublishResult:
    """Summary of what a publish run changed in Confluence."""
    pages_created: int = 0
    pages_updated: int = 0
    pages_unchanged: int = 0
    pages_deleted: int = 0
    attachments_added: int = 0
    attachments_updated: int = 0
    attachments_unchanged: int = 0
    attachments_deleted: int = 0
    labels_added: int = 0
    labels_removed: int = 0
    failures: List[PublishError] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """True when no subtree failed."""
        return not self.failures
