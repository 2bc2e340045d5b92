"""Remote Confluence content data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RemotePageRef:
    """Reference to a page that already exists in Confluence.

    Rebuilt from API responses on every run and never cached across runs.

    Attributes:
        content_id: Confluence content identifier
        title: Page title
        version: Current version number (updates must send version + 1)
    """
    content_id: str
    title: str
    version: int


@dataclass(frozen=True)
class RemotePage:
    """Confluence page fetched together with its rendered view content.

    Attributes:
        content_id: Confluence content identifier
        title: Page title
        body: Rendered (view) body of the page
        version: Current version number
    """
    content_id: str
    title: str
    body: str
    version: int


@dataclass(frozen=True)
class RemoteAttachmentRef:
    """Reference to an attachment stored under a Confluence page.

    The file name is the natural key within the attachment set of a page.

    Attributes:
        attachment_id: Confluence content identifier of the attachment
        file_name: Attachment file name (the attachment title)
        download_link: Download path relative to the Confluence base URL
        version: Current attachment version number
    """
    attachment_id: str
    file_name: str
    download_link: str
    version: int
