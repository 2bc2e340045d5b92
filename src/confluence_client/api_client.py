"""Client for the Confluence REST API content endpoints.

This module exposes the page, attachment, content property and label
operations needed to publish a page tree. Every call goes through an
HttpTransport, so authentication, rate limiting and error translation apply
uniformly. Bulk listings are paginated with start/limit parameters.
"""

import logging
from typing import Any, BinaryIO, Callable, Dict, Iterable, List, Optional, TypeVar, Union

import requests

from src.models.confluence_page import RemoteAttachmentRef, RemotePage, RemotePageRef
from src.models.content_model import ContentType

from .errors import PaginationLimitExceededError, RequestFailedError
from .http_transport import HttpTransport
from .result_resolver import resolve_single

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Batch size of paginated listings
PAGE_SIZE = 25

# Upper bound on requests issued by a single paginated listing
MAX_PAGINATION_REQUESTS = 10_000

CONTENT_PATH = "rest/api/content"

AttachmentContent = Union[bytes, BinaryIO]


class ConfluenceApiClient:
    """Page, attachment, property and label operations on Confluence.

    Example:
        >>> client = ConfluenceApiClient(transport)
        >>> content_id = client.get_page_by_title("DOCS", "Getting Started")
        >>> client.get_child_pages(content_id)
        [RemotePageRef(content_id='42', title='Install', version=3)]
    """

    def __init__(self, transport: HttpTransport, page_size: int = PAGE_SIZE):
        """Initialize the client.

        Args:
            transport: Transport used for every request
            page_size: Number of items requested per batch in listings
        """
        self._transport = transport
        self.page_size = page_size

    # Pages

    def add_page_under_ancestor(
        self,
        space_key: str,
        ancestor_id: Optional[str],
        title: str,
        body: str,
        content_type: ContentType,
        version_message: Optional[str] = None,
    ) -> str:
        """Create a page and return its content id.

        Args:
            space_key: Space the page is created in
            ancestor_id: Parent page id (None creates a top-level page)
            title: Page title
            body: Page body in the given representation
            content_type: Representation of the body
            version_message: Optional message for the first version

        Returns:
            Content id of the created page

        Raises:
            RequestFailedError: If the request fails
        """
        payload: Dict[str, Any] = {
            "type": "page",
            "title": title,
            "space": {"key": space_key},
            "body": _body(body, content_type),
            "version": _version(1, version_message),
        }
        if ancestor_id:
            payload["ancestors"] = [{"id": ancestor_id}]

        response = self._transport.send("POST", CONTENT_PATH, json=payload)
        content_id = str(self._json(response, "POST", CONTENT_PATH)["id"])
        logger.debug(f"Created page '{title}' as {content_id} under {ancestor_id}")
        return content_id

    def update_page(
        self,
        content_id: str,
        ancestor_id: Optional[str],
        title: str,
        body: str,
        content_type: ContentType,
        new_version: int,
        version_message: Optional[str] = None,
        notify_watchers: bool = True,
    ) -> None:
        """Replace the title and body of a page.

        The server rejects the request unless new_version is exactly the
        current version plus one. Rejections are raised, never retried.

        Args:
            content_id: Page to update
            ancestor_id: New parent page id (None keeps the current parent)
            title: Page title
            body: Page body in the given representation
            content_type: Representation of the body
            new_version: Version number the page will have after the update
            version_message: Optional message for the new version
            notify_watchers: Whether watchers are notified (not a minor edit)

        Raises:
            RequestFailedError: If the request fails, including version conflicts
        """
        path = f"{CONTENT_PATH}/{content_id}"
        payload: Dict[str, Any] = {
            "id": content_id,
            "type": "page",
            "title": title,
            "body": _body(body, content_type),
            "version": _version(new_version, version_message, minor_edit=not notify_watchers),
        }
        if ancestor_id:
            payload["ancestors"] = [{"id": ancestor_id}]

        self._transport.send("PUT", path, json=payload)
        logger.debug(f"Updated page {content_id} to version {new_version}")

    def delete_page(self, content_id: str) -> None:
        """Delete a page; a page that no longer exists counts as deleted."""
        response = self._transport.send(
            "DELETE", f"{CONTENT_PATH}/{content_id}", ignore_status=(404,)
        )
        if response.status_code == 404:
            logger.debug(f"Page {content_id} was already deleted")

    def get_page_by_title(self, space_key: str, title: str) -> str:
        """Find the id of the page with the given title in a space.

        Raises:
            NotFoundError: If no page has this title
            MultipleResultsError: If more than one page has this title
            RequestFailedError: If the request fails
        """
        payload = self._get_json(CONTENT_PATH, params={
            "spaceKey": space_key,
            "title": title,
        })
        results = payload.get("results") or []
        page = resolve_single(
            results,
            f"page '{title}' in space '{space_key}'",
            size=payload.get("size"),
        )
        return str(page["id"])

    def get_page_with_view_content(self, content_id: str) -> RemotePage:
        """Fetch a page with its rendered body and current version."""
        payload = self._get_json(
            f"{CONTENT_PATH}/{content_id}",
            params={"expand": "body.view,version"},
        )
        return RemotePage(
            content_id=str(payload["id"]),
            title=payload.get("title", ""),
            body=payload.get("body", {}).get("view", {}).get("value", ""),
            version=_version_number(payload),
        )

    def get_child_pages(self, content_id: str) -> List[RemotePageRef]:
        """List all direct child pages of a page."""
        return self._paginate(
            f"{CONTENT_PATH}/{content_id}/child/page",
            {"expand": "version"},
            _page_ref,
        )

    def get_space_homepage_id(self, space_key: str) -> str:
        """Return the content id of the homepage of a space."""
        payload = self._get_json(
            f"rest/api/space/{space_key}", params={"expand": "homepage"}
        )
        homepage = payload.get("homepage") or {}
        if "id" not in homepage:
            raise RequestFailedError(
                "GET",
                self._transport.url_for(f"rest/api/space/{space_key}"),
                detail=f"space '{space_key}' has no homepage",
            )
        return str(homepage["id"])

    # Attachments

    def get_attachments(self, content_id: str) -> List[RemoteAttachmentRef]:
        """List all attachments of a page."""
        return self._paginate(
            f"{CONTENT_PATH}/{content_id}/child/attachment",
            {"expand": "version"},
            _attachment_ref,
        )

    def get_attachment_by_file_name(self, content_id: str, file_name: str) -> RemoteAttachmentRef:
        """Find the attachment with the given file name on a page.

        Raises:
            NotFoundError: If the page has no such attachment
            MultipleResultsError: If more than one attachment matches
            RequestFailedError: If the request fails
        """
        payload = self._get_json(
            f"{CONTENT_PATH}/{content_id}/child/attachment",
            params={"filename": file_name, "expand": "version"},
        )
        results = payload.get("results") or []
        attachment = resolve_single(
            results,
            f"attachment '{file_name}' of page {content_id}",
            size=payload.get("size"),
        )
        return _attachment_ref(attachment)

    def add_attachment(self, content_id: str, file_name: str, content: AttachmentContent) -> None:
        """Upload a new attachment to a page."""
        self._transport.send(
            "POST",
            f"{CONTENT_PATH}/{content_id}/child/attachment",
            files={"file": (file_name, _read_all(content))},
            headers={"X-Atlassian-Token": "no-check"},
        )
        logger.debug(f"Added attachment '{file_name}' to page {content_id}")

    def update_attachment_content(
        self,
        content_id: str,
        attachment_id: str,
        content: AttachmentContent,
        notify_watchers: bool = True,
        *,
        file_name: str,
    ) -> None:
        """Upload new content for an existing attachment.

        The uploaded file name becomes the attachment title, so it must be
        the current file name of the attachment.
        """
        self._transport.send(
            "POST",
            f"{CONTENT_PATH}/{content_id}/child/attachment/{attachment_id}/data",
            files={"file": (file_name, _read_all(content))},
            data={"minorEdit": "false" if notify_watchers else "true"},
            headers={"X-Atlassian-Token": "no-check"},
        )
        logger.debug(f"Updated content of attachment {attachment_id} on page {content_id}")

    def delete_attachment(self, attachment_id: str) -> None:
        """Delete an attachment; an attachment that no longer exists counts as deleted."""
        response = self._transport.send(
            "DELETE", f"{CONTENT_PATH}/{attachment_id}", ignore_status=(404,)
        )
        if response.status_code == 404:
            logger.debug(f"Attachment {attachment_id} was already deleted")

    # Content properties

    def get_property_by_key(self, content_id: str, key: str) -> Optional[Any]:
        """Return the value of a content property, or None if it does not exist."""
        path = f"{CONTENT_PATH}/{content_id}/property/{key}"
        response = self._transport.send(
            "GET", path, params={"expand": "value"}, ignore_status=(404,)
        )
        if response.status_code == 404:
            return None
        return self._json(response, "GET", path).get("value")

    def set_property_by_key(self, content_id: str, key: str, value: Any) -> None:
        """Store a content property on a page."""
        self._transport.send(
            "POST",
            f"{CONTENT_PATH}/{content_id}/property",
            json={"key": key, "value": value},
        )

    def delete_property_by_key(self, content_id: str, key: str) -> None:
        """Delete a content property.

        Confluence answers 403 for properties that do not exist; that answer
        is accepted as the property being absent.
        """
        response = self._transport.send(
            "DELETE",
            f"{CONTENT_PATH}/{content_id}/property/{key}",
            ignore_status=(403,),
        )
        if response.status_code == 403:
            # TODO: tell a missing property apart from a real permission error
            logger.debug(f"Ignoring 403 while deleting property '{key}' of page {content_id}")

    # Labels

    def get_labels(self, content_id: str) -> List[str]:
        """List the names of all labels on a page."""
        return self._paginate(
            f"{CONTENT_PATH}/{content_id}/label",
            {},
            lambda label: label["name"],
        )

    def add_labels(self, content_id: str, names: Iterable[str]) -> None:
        """Add global labels to a page."""
        payload = [{"prefix": "global", "name": name} for name in names]
        if not payload:
            return
        self._transport.send("POST", f"{CONTENT_PATH}/{content_id}/label", json=payload)

    def delete_label(self, content_id: str, name: str) -> None:
        """Remove a label from a page."""
        self._transport.send(
            "DELETE", f"{CONTENT_PATH}/{content_id}/label", params={"name": name}
        )

    # Helpers

    def _paginate(
        self,
        path: str,
        params: Dict[str, Any],
        convert: Callable[[Dict[str, Any]], T],
    ) -> List[T]:
        """Fetch every batch of a listing and convert the items in order.

        A batch whose reported size equals the page size is followed by
        another request, so a result count that is an exact multiple of the
        page size needs one extra (short or empty) batch to end the listing.
        """
        items: List[T] = []
        start = 0
        for _ in range(MAX_PAGINATION_REQUESTS):
            batch_params = dict(params, start=start, limit=self.page_size)
            payload = self._get_json(path, params=batch_params)
            results = payload.get("results") or []
            items.extend(convert(result) for result in results)

            size = payload.get("size")
            if size is None:
                size = len(results)
            if size < self.page_size:
                return items
            start += self.page_size

        raise PaginationLimitExceededError(path, MAX_PAGINATION_REQUESTS)

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        response = self._transport.send("GET", path, params=params)
        return self._json(response, "GET", path)

    def _json(self, response: requests.Response, method: str, path: str) -> Dict[str, Any]:
        try:
            return response.json()
        except ValueError as e:
            raise RequestFailedError(
                method,
                self._transport.url_for(path),
                cause=e,
                detail=f"response is not valid JSON ({e})",
            ) from e


def _body(body: str, content_type: ContentType) -> Dict[str, Any]:
    return {
        content_type.representation: {
            "value": body,
            "representation": content_type.representation,
        }
    }


def _version(number: int, message: Optional[str], minor_edit: Optional[bool] = None) -> Dict[str, Any]:
    version: Dict[str, Any] = {"number": number}
    if message:
        version["message"] = message
    if minor_edit is not None:
        version["minorEdit"] = minor_edit
    return version


def _version_number(payload: Dict[str, Any]) -> int:
    return int((payload.get("version") or {}).get("number", 1))


def _page_ref(payload: Dict[str, Any]) -> RemotePageRef:
    return RemotePageRef(
        content_id=str(payload["id"]),
        title=payload.get("title", ""),
        version=_version_number(payload),
    )


def _attachment_ref(payload: Dict[str, Any]) -> RemoteAttachmentRef:
    return RemoteAttachmentRef(
        attachment_id=str(payload["id"]),
        file_name=payload.get("title", ""),
        download_link=(payload.get("_links") or {}).get("download", ""),
        version=_version_number(payload),
    )


def _read_all(content: AttachmentContent) -> bytes:
    """Read attachment content fully so a retried upload can resend it."""
    if hasattr(content, "read"):
        return content.read()
    return content
