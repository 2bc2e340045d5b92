"""Publishing of a local page tree to Confluence.

The publisher walks the local tree depth-first, parent before children. For
every page it resolves or creates the remote page, updates the body only when
the stored content hash differs, reconciles attachments and labels, publishes
the children and finally deletes remote children that are no longer part of
the local tree.

A failing page aborts its subtree: the Confluence error is re-raised as a
PublishError naming the title path and content id of the page.
"""

import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from src.confluence_client.api_client import ConfluenceApiClient
from src.confluence_client.errors import ConfluenceError, MultipleResultsError, NotFoundError
from src.confluence_client.result_resolver import resolve_single
from src.models.confluence_page import RemoteAttachmentRef
from src.models.content_model import LocalPageNode

from .errors import FilesystemError, PublishConfigError, PublishError
from .hashing import CONTENT_HASH_PROPERTY_KEY, attachment_hash_property_key, content_hash
from .models import OrphanRemovalStrategy, PublishConfig, PublishingStrategy, PublishResult

logger = logging.getLogger(__name__)

PagePath = Tuple[str, ...]


class ConfluencePublisher:
    """Reconciles a local page tree with the pages of a Confluence space.

    Example:
        >>> publisher = ConfluencePublisher(client, PublishConfig(space_key="DOCS", ancestor_id="42"))
        >>> result = publisher.publish(ContentModelLoader.load("model.yaml"))
        >>> result.pages_created
        3
    """

    def __init__(self, client: ConfluenceApiClient, config: PublishConfig):
        """Initialize the publisher.

        Args:
            client: Confluence content client
            config: Settings of the publish run
        """
        self._client = client
        self._config = config

    def publish(
        self,
        pages: Sequence[LocalPageNode],
        continue_on_error: bool = False,
    ) -> PublishResult:
        """Publish the top-level pages and their subtrees.

        Args:
            pages: Top-level pages of the local tree
            continue_on_error: Keep publishing the remaining top-level pages when
                one subtree fails. Ambiguous remote state always aborts the run.

        Returns:
            PublishResult summarizing the changes (and collected failures)

        Raises:
            PublishConfigError: If the tree does not fit the publishing strategy
            PublishError: If a subtree fails and continue_on_error is False
        """
        result = PublishResult()
        ancestor_id = self.resolve_ancestor_id()
        logger.info(
            f"Publishing {len(pages)} top-level page(s) to space '{self._config.space_key}' "
            f"under ancestor {ancestor_id} ({self._config.publishing_strategy.value})"
        )

        if self._config.publishing_strategy == PublishingStrategy.REPLACE_ANCESTOR:
            if len(pages) != 1:
                titles = ", ".join(f"'{page.title}'" for page in pages)
                raise PublishConfigError(
                    f"REPLACE_ANCESTOR requires exactly one top-level page, got {len(pages)} ({titles})",
                    'publishing_strategy'
                )
            self._publish_into_existing_page(ancestor_id, pages[0], result)
        else:
            self._publish_children(ancestor_id, pages, (), result, continue_on_error)

        return result

    def resolve_ancestor_id(self) -> str:
        """Return the id of the page the tree is published under.

        Uses the configured ancestor id, else looks up the configured parent
        page title, else falls back to the homepage of the space.

        Raises:
            PublishError: If the ancestor cannot be resolved
        """
        if self._config.ancestor_id:
            return self._config.ancestor_id

        space_key = self._config.space_key
        title = self._config.parent_page_title
        try:
            if title:
                return self._client.get_page_by_title(space_key, title)
            return self._client.get_space_homepage_id(space_key)
        except ConfluenceError as e:
            raise PublishError((title or f"homepage of {space_key}",), None, e) from e

    def _publish_children(
        self,
        parent_id: str,
        nodes: Sequence[LocalPageNode],
        parent_path: PagePath,
        result: PublishResult,
        continue_on_error: bool = False,
    ) -> None:
        for node in nodes:
            try:
                self._publish_page(parent_id, node, parent_path + (node.title,), result)
            except PublishError as e:
                if not continue_on_error or isinstance(e.cause, MultipleResultsError):
                    raise
                logger.error(f"{e}; continuing with the next page")
                result.failures.append(e)

        self._remove_orphan_pages(parent_id, nodes, parent_path, result)

    def _publish_page(
        self,
        ancestor_id: str,
        node: LocalPageNode,
        path: PagePath,
        result: PublishResult,
    ) -> None:
        content_id: Optional[str] = None
        try:
            content_id = self._find_page(node)
            if content_id is None:
                content_id = self._create_page(ancestor_id, node, result)
                self._client.set_property_by_key(
                    content_id, CONTENT_HASH_PROPERTY_KEY, content_hash(node.body)
                )
            else:
                self._update_content(content_id, ancestor_id, node, result)
            self._reconcile_attachments(content_id, node, result)
            self._reconcile_labels(content_id, node, result)
        except (ConfluenceError, FilesystemError) as e:
            raise PublishError(path, content_id, e) from e

        self._publish_children(content_id, node.children, path, result)

    def _publish_into_existing_page(
        self,
        content_id: str,
        node: LocalPageNode,
        result: PublishResult,
    ) -> None:
        path = (node.title,)
        try:
            self._update_content(content_id, None, node, result)
            self._reconcile_attachments(content_id, node, result)
            self._reconcile_labels(content_id, node, result)
        except (ConfluenceError, FilesystemError) as e:
            raise PublishError(path, content_id, e) from e

        self._publish_children(content_id, node.children, path, result)

    def _find_page(self, node: LocalPageNode) -> Optional[str]:
        try:
            return self._client.get_page_by_title(self._config.space_key, node.title)
        except NotFoundError:
            return None

    def _create_page(
        self,
        ancestor_id: str,
        node: LocalPageNode,
        result: PublishResult,
    ) -> str:
        content_id = self._client.add_page_under_ancestor(
            self._config.space_key,
            ancestor_id,
            node.title,
            node.body,
            node.content_type,
            self._config.version_message,
        )
        result.pages_created += 1
        logger.info(f"Created page '{node.title}' ({content_id})")
        return content_id

    def _update_content(
        self,
        content_id: str,
        ancestor_id: Optional[str],
        node: LocalPageNode,
        result: PublishResult,
    ) -> None:
        new_hash = content_hash(node.body)
        existing_hash = self._client.get_property_by_key(content_id, CONTENT_HASH_PROPERTY_KEY)
        if existing_hash == new_hash:
            result.pages_unchanged += 1
            logger.debug(f"Page '{node.title}' ({content_id}) is unchanged")
            return

        # A page whose update did not complete carries no hash
        if existing_hash is not None:
            self._client.delete_property_by_key(content_id, CONTENT_HASH_PROPERTY_KEY)

        current = self._client.get_page_with_view_content(content_id)
        self._client.update_page(
            content_id,
            ancestor_id,
            node.title,
            node.body,
            node.content_type,
            current.version + 1,
            self._config.version_message,
            self._config.notify_watchers,
        )
        self._client.set_property_by_key(content_id, CONTENT_HASH_PROPERTY_KEY, new_hash)
        result.pages_updated += 1
        logger.info(f"Updated page '{node.title}' ({content_id}) to version {current.version + 1}")

    def _reconcile_attachments(
        self,
        content_id: str,
        node: LocalPageNode,
        result: PublishResult,
    ) -> None:
        remote: Dict[str, List[RemoteAttachmentRef]] = defaultdict(list)
        for attachment in self._client.get_attachments(content_id):
            remote[attachment.file_name].append(attachment)

        for file_name, source in node.attachments.items():
            data = _read_attachment(source)
            new_hash = content_hash(data)
            hash_key = attachment_hash_property_key(file_name)

            if file_name in remote:
                existing = resolve_single(
                    remote[file_name], f"attachment '{file_name}' of page {content_id}"
                )
                stored_hash = self._client.get_property_by_key(content_id, hash_key)
                if stored_hash == new_hash:
                    result.attachments_unchanged += 1
                    continue
                if stored_hash is not None:
                    self._client.delete_property_by_key(content_id, hash_key)
                self._client.update_attachment_content(
                    content_id,
                    existing.attachment_id,
                    data,
                    self._config.notify_watchers,
                    file_name=file_name,
                )
                result.attachments_updated += 1
                logger.info(f"Updated attachment '{file_name}' of page '{node.title}'")
            else:
                # A hash left behind by an attachment deleted outside the publisher
                self._client.delete_property_by_key(content_id, hash_key)
                self._client.add_attachment(content_id, file_name, data)
                result.attachments_added += 1
                logger.info(f"Added attachment '{file_name}' to page '{node.title}'")

            self._client.set_property_by_key(content_id, hash_key, new_hash)

        for file_name, attachments in remote.items():
            if file_name in node.attachments:
                continue
            for attachment in attachments:
                self._client.delete_attachment(attachment.attachment_id)
                result.attachments_deleted += 1
            self._client.delete_property_by_key(content_id, attachment_hash_property_key(file_name))
            logger.info(f"Deleted orphan attachment '{file_name}' of page '{node.title}'")

    def _reconcile_labels(
        self,
        content_id: str,
        node: LocalPageNode,
        result: PublishResult,
    ) -> None:
        if not self._config.sync_labels:
            return

        # Confluence stores labels in lower case
        local_labels = list(dict.fromkeys(label.lower() for label in node.labels))
        remote_labels = self._client.get_labels(content_id)
        for label in remote_labels:
            if label.lower() not in local_labels:
                self._client.delete_label(content_id, label)
                result.labels_removed += 1

        remote_lower = {label.lower() for label in remote_labels}
        labels_to_add = [label for label in local_labels if label not in remote_lower]
        if labels_to_add:
            self._client.add_labels(content_id, labels_to_add)
            result.labels_added += len(labels_to_add)
            logger.debug(f"Added labels {labels_to_add} to page '{node.title}'")

    def _remove_orphan_pages(
        self,
        parent_id: str,
        nodes: Sequence[LocalPageNode],
        parent_path: PagePath,
        result: PublishResult,
    ) -> None:
        """Delete remote children of a page that have no local counterpart.

        Deleting a page also deletes its own children and attachments.
        """
        if self._config.orphan_removal_strategy == OrphanRemovalStrategy.KEEP_ORPHANS:
            return

        local_titles = {node.title for node in nodes}
        try:
            for child in self._client.get_child_pages(parent_id):
                if child.title in local_titles:
                    continue
                self._client.delete_page(child.content_id)
                result.pages_deleted += 1
                logger.info(f"Deleted orphan page '{child.title}' ({child.content_id})")
        except ConfluenceError as e:
            raise PublishError(parent_path or ("<ancestor>",), parent_id, e) from e


def _read_attachment(source: Path) -> bytes:
    try:
        return Path(source).read_bytes()
    except OSError as e:
        raise FilesystemError(str(source), 'read', str(e))
