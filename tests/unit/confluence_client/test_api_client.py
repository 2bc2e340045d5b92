"""Unit tests for confluence_client.api_client module."""

import pytest
from unittest.mock import Mock

from src.confluence_client.api_client import (
    MAX_PAGINATION_REQUESTS,
    PAGE_SIZE,
    ConfluenceApiClient,
)
from src.confluence_client.errors import (
    MultipleResultsError,
    NotFoundError,
    PaginationLimitExceededError,
    RequestFailedError,
)
from src.confluence_client.http_transport import HttpTransport
from src.models.confluence_page import RemoteAttachmentRef, RemotePage, RemotePageRef
from src.models.content_model import ContentType


def _response(payload=None, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


def _client(*responses):
    transport = Mock(spec=HttpTransport)
    transport.send.side_effect = list(responses)
    transport.url_for.side_effect = lambda path: f"https://c.example.com/{path}"
    return ConfluenceApiClient(transport), transport


def _pages(start, count):
    return [
        {"id": str(i), "title": f"Page {i}", "version": {"number": 1}}
        for i in range(start, start + count)
    ]


class TestPages:
    """Test cases for page operations."""

    def test_add_page_under_ancestor(self):
        client, transport = _client(_response({"id": 4711}))

        content_id = client.add_page_under_ancestor(
            "DOCS", "42", "Install", "<p>x</p>", ContentType.STORAGE, "Published"
        )

        assert content_id == "4711"
        method, path = transport.send.call_args.args
        payload = transport.send.call_args.kwargs["json"]
        assert (method, path) == ("POST", "rest/api/content")
        assert payload["type"] == "page"
        assert payload["title"] == "Install"
        assert payload["space"] == {"key": "DOCS"}
        assert payload["ancestors"] == [{"id": "42"}]
        assert payload["body"] == {"storage": {"value": "<p>x</p>", "representation": "storage"}}
        assert payload["version"] == {"number": 1, "message": "Published"}

    def test_add_page_without_ancestor(self):
        client, transport = _client(_response({"id": "1"}))

        client.add_page_under_ancestor("DOCS", None, "Top", "h1. Top", ContentType.WIKI)

        payload = transport.send.call_args.kwargs["json"]
        assert "ancestors" not in payload
        assert payload["body"] == {"wiki": {"value": "h1. Top", "representation": "wiki"}}
        assert payload["version"] == {"number": 1}

    def test_update_page_sends_new_version(self):
        client, transport = _client(_response({}))

        client.update_page("7", "42", "Install", "<p>y</p>", ContentType.STORAGE, 4, "msg", notify_watchers=False)

        method, path = transport.send.call_args.args
        payload = transport.send.call_args.kwargs["json"]
        assert (method, path) == ("PUT", "rest/api/content/7")
        assert payload["id"] == "7"
        assert payload["ancestors"] == [{"id": "42"}]
        assert payload["version"] == {"number": 4, "message": "msg", "minorEdit": True}

    def test_update_page_rejection_is_raised(self):
        client, transport = _client()
        transport.send.side_effect = RequestFailedError("PUT", "u", status_code=409, reason="Conflict")

        with pytest.raises(RequestFailedError):
            client.update_page("7", None, "t", "b", ContentType.STORAGE, 2)
        assert transport.send.call_count == 1

    def test_delete_page_ignores_404(self):
        client, transport = _client(_response(status_code=404))

        client.delete_page("7")

        assert transport.send.call_args.args == ("DELETE", "rest/api/content/7")
        assert 404 in transport.send.call_args.kwargs["ignore_status"]

    def test_get_page_by_title(self):
        client, transport = _client(_response({"results": [{"id": "7"}], "size": 1}))

        assert client.get_page_by_title("DOCS", "Install") == "7"
        assert transport.send.call_args.kwargs["params"] == {"spaceKey": "DOCS", "title": "Install"}

    def test_get_page_by_title_not_found(self):
        client, _ = _client(_response({"results": [], "size": 0}))

        with pytest.raises(NotFoundError):
            client.get_page_by_title("DOCS", "Missing")

    def test_get_page_by_title_multiple_results(self):
        client, _ = _client(_response({"results": [{"id": "1"}, {"id": "2"}], "size": 2}))

        with pytest.raises(MultipleResultsError) as exc_info:
            client.get_page_by_title("DOCS", "Twice")
        assert exc_info.value.count == 2

    def test_get_page_by_title_reported_size_wins(self):
        client, _ = _client(_response({"results": [{"id": "1"}], "size": 2}))

        with pytest.raises(MultipleResultsError):
            client.get_page_by_title("DOCS", "Twice")

    def test_get_page_with_view_content(self):
        client, transport = _client(_response({
            "id": 7,
            "title": "Install",
            "body": {"view": {"value": "<p>rendered</p>"}},
            "version": {"number": 3},
        }))

        page = client.get_page_with_view_content("7")

        assert page == RemotePage("7", "Install", "<p>rendered</p>", 3)
        assert transport.send.call_args.kwargs["params"] == {"expand": "body.view,version"}

    def test_invalid_json_is_request_failure(self):
        response = _response()
        response.json.side_effect = ValueError("Expecting value")
        client, _ = _client(response)

        with pytest.raises(RequestFailedError, match="not valid JSON"):
            client.get_page_with_view_content("7")

    def test_get_space_homepage_id(self):
        client, transport = _client(_response({"key": "DOCS", "homepage": {"id": 99}}))

        assert client.get_space_homepage_id("DOCS") == "99"
        assert transport.send.call_args.args == ("GET", "rest/api/space/DOCS")

    def test_space_without_homepage(self):
        client, _ = _client(_response({"key": "DOCS"}))

        with pytest.raises(RequestFailedError, match="no homepage"):
            client.get_space_homepage_id("DOCS")


class TestPagination:
    """Test cases for paginated listings."""

    def test_single_short_batch(self):
        client, transport = _client(_response({"results": _pages(0, 3), "size": 3}))

        children = client.get_child_pages("42")

        assert [c.content_id for c in children] == ["0", "1", "2"]
        assert children[0] == RemotePageRef("0", "Page 0", 1)
        assert transport.send.call_count == 1
        params = transport.send.call_args.kwargs["params"]
        assert params["start"] == 0
        assert params["limit"] == PAGE_SIZE

    def test_49_results_need_two_requests(self):
        client, transport = _client(
            _response({"results": _pages(0, 25), "size": 25}),
            _response({"results": _pages(25, 24), "size": 24}),
        )

        children = client.get_child_pages("42")

        assert len(children) == 49
        assert [c.content_id for c in children] == [str(i) for i in range(49)]
        starts = [call.kwargs["params"]["start"] for call in transport.send.call_args_list]
        assert starts == [0, 25]

    def test_exact_multiple_needs_trailing_empty_batch(self):
        client, transport = _client(
            _response({"results": _pages(0, 25), "size": 25}),
            _response({"results": [], "size": 0}),
        )

        assert len(client.get_child_pages("42")) == 25
        assert transport.send.call_count == 2

    def test_items_kept_when_reported_size_is_zero(self):
        client, _ = _client(_response({"results": _pages(0, 2), "size": 0}))

        assert len(client.get_child_pages("42")) == 2

    def test_null_size_uses_result_count(self):
        client, transport = _client(_response({"results": _pages(0, 3), "size": None}))

        assert len(client.get_child_pages("42")) == 3
        assert transport.send.call_count == 1

    def test_listing_that_never_ends_is_bounded(self):
        transport = Mock(spec=HttpTransport)
        transport.send.return_value = _response({"results": [], "size": PAGE_SIZE})
        client = ConfluenceApiClient(transport)

        with pytest.raises(PaginationLimitExceededError):
            client.get_child_pages("42")
        assert transport.send.call_count == MAX_PAGINATION_REQUESTS

    def test_custom_page_size(self):
        transport = Mock(spec=HttpTransport)
        transport.send.side_effect = [
            _response({"results": _pages(0, 2), "size": 2}),
            _response({"results": _pages(2, 1), "size": 1}),
        ]
        client = ConfluenceApiClient(transport, page_size=2)

        assert len(client.get_child_pages("42")) == 3
        assert transport.send.call_args.kwargs["params"]["limit"] == 2


class TestAttachments:
    """Test cases for attachment operations."""

    ATTACHMENT = {
        "id": "att1",
        "title": "diagram.png",
        "_links": {"download": "/download/attachments/7/diagram.png"},
        "version": {"number": 2},
    }

    def test_get_attachments(self):
        client, transport = _client(_response({"results": [self.ATTACHMENT], "size": 1}))

        attachments = client.get_attachments("7")

        assert attachments == [
            RemoteAttachmentRef("att1", "diagram.png", "/download/attachments/7/diagram.png", 2)
        ]
        assert transport.send.call_args.args == ("GET", "rest/api/content/7/child/attachment")

    def test_get_attachment_by_file_name(self):
        client, transport = _client(_response({"results": [self.ATTACHMENT], "size": 1}))

        attachment = client.get_attachment_by_file_name("7", "diagram.png")

        assert attachment.attachment_id == "att1"
        assert transport.send.call_args.kwargs["params"]["filename"] == "diagram.png"

    def test_get_attachment_by_file_name_not_found(self):
        client, _ = _client(_response({"results": [], "size": 0}))

        with pytest.raises(NotFoundError):
            client.get_attachment_by_file_name("7", "missing.png")

    def test_get_attachment_by_file_name_multiple(self):
        client, _ = _client(_response({"results": [self.ATTACHMENT, self.ATTACHMENT], "size": 2}))

        with pytest.raises(MultipleResultsError):
            client.get_attachment_by_file_name("7", "diagram.png")

    def test_add_attachment_is_multipart(self):
        client, transport = _client(_response({}))

        client.add_attachment("7", "diagram.png", b"\x89PNG")

        kwargs = transport.send.call_args.kwargs
        assert transport.send.call_args.args == ("POST", "rest/api/content/7/child/attachment")
        assert kwargs["files"] == {"file": ("diagram.png", b"\x89PNG")}
        assert kwargs["headers"] == {"X-Atlassian-Token": "no-check"}

    def test_add_attachment_reads_stream(self):
        client, transport = _client(_response({}))
        stream = Mock()
        stream.read.return_value = b"data"

        client.add_attachment("7", "notes.txt", stream)

        assert transport.send.call_args.kwargs["files"]["file"][1] == b"data"

    def test_update_attachment_content(self):
        client, transport = _client(_response({}))

        client.update_attachment_content("7", "att1", b"new", notify_watchers=False, file_name="diagram.png")

        kwargs = transport.send.call_args.kwargs
        assert transport.send.call_args.args == ("POST", "rest/api/content/7/child/attachment/att1/data")
        assert kwargs["data"] == {"minorEdit": "true"}
        assert kwargs["files"] == {"file": ("diagram.png", b"new")}

    def test_delete_attachment_ignores_404(self):
        client, transport = _client(_response(status_code=404))

        client.delete_attachment("att1")

        assert transport.send.call_args.args == ("DELETE", "rest/api/content/att1")
        assert 404 in transport.send.call_args.kwargs["ignore_status"]


class TestProperties:
    """Test cases for content property operations."""

    def test_get_property_value(self):
        client, transport = _client(_response({"key": "content-hash", "value": "abc"}))

        assert client.get_property_by_key("7", "content-hash") == "abc"
        assert transport.send.call_args.args == ("GET", "rest/api/content/7/property/content-hash")

    def test_missing_property_is_none(self):
        client, _ = _client(_response(status_code=404))

        assert client.get_property_by_key("7", "content-hash") is None

    def test_set_property(self):
        client, transport = _client(_response({}))

        client.set_property_by_key("7", "content-hash", "abc")

        assert transport.send.call_args.args == ("POST", "rest/api/content/7/property")
        assert transport.send.call_args.kwargs["json"] == {"key": "content-hash", "value": "abc"}

    def test_delete_property_ignores_403(self):
        client, transport = _client(_response(status_code=403))

        client.delete_property_by_key("7", "content-hash")

        assert transport.send.call_args.args == ("DELETE", "rest/api/content/7/property/content-hash")
        assert transport.send.call_args.kwargs["ignore_status"] == (403,)

    def test_delete_property_propagates_other_failures(self):
        client, transport = _client()
        transport.send.side_effect = RequestFailedError("DELETE", "u", status_code=404, reason="Not Found")

        with pytest.raises(RequestFailedError):
            client.delete_property_by_key("7", "content-hash")


class TestLabels:
    """Test cases for label operations."""

    def test_get_labels(self):
        client, _ = _client(_response({
            "results": [{"prefix": "global", "name": "docs"}, {"prefix": "global", "name": "api"}],
            "size": 2,
        }))

        assert client.get_labels("7") == ["docs", "api"]

    def test_add_labels(self):
        client, transport = _client(_response([]))

        client.add_labels("7", ["docs", "api"])

        assert transport.send.call_args.args == ("POST", "rest/api/content/7/label")
        assert transport.send.call_args.kwargs["json"] == [
            {"prefix": "global", "name": "docs"},
            {"prefix": "global", "name": "api"},
        ]

    def test_add_no_labels_sends_nothing(self):
        client, transport = _client()

        client.add_labels("7", [])

        transport.send.assert_not_called()

    def test_delete_label(self):
        client, transport = _client(_response(status_code=204))

        client.delete_label("7", "docs")

        assert transport.send.call_args.args == ("DELETE", "rest/api/content/7/label")
        assert transport.send.call_args.kwargs["params"] == {"name": "docs"}
