"""Loading of the content model written by the rendering stage.

The content model is a YAML (or JSON) document describing the page tree to
publish. Page bodies are either inline or stored in files next to the model;
attachment and content file paths are resolved relative to the model file.

Example model:
    pages:
      - title: "Getting Started"
        content_file_path: "getting-started.xhtml"
        type: storage
        attachments:
          diagram.png: "assets/diagram.png"
        labels: ["docs"]
        children:
          - title: "Install"
            body: "<p>Run the installer.</p>"
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from src.models.content_model import ContentType, LocalPageNode

from .errors import ContentModelError, FilesystemError

logger = logging.getLogger(__name__)


class ContentModelLoader:
    """Builds the LocalPageNode tree from a content model file."""

    @classmethod
    def load(cls, model_path: str) -> Tuple[LocalPageNode, ...]:
        """Load the top-level pages of a content model file.

        Args:
            model_path: Path to the YAML or JSON model file

        Returns:
            Top-level pages in publishing order

        Raises:
            FilesystemError: If the model or a referenced file cannot be read
            ContentModelError: If the model is malformed
        """
        path = Path(model_path)
        content = _read_text(path)

        try:
            model = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ContentModelError(model_path, f"invalid YAML/JSON syntax: {e}")

        if not isinstance(model, dict) or not isinstance(model.get('pages'), list):
            raise ContentModelError(model_path, "expected a mapping with a 'pages' list")

        loader = cls(path)
        pages = tuple(
            loader._parse_page(page, f"pages[{i}]")
            for i, page in enumerate(model['pages'])
        )
        logger.info(f"Loaded {loader.page_count} page(s) from {model_path}")
        return pages

    def __init__(self, model_path: Path):
        self._model_path = model_path
        self._base_dir = model_path.parent
        self.page_count = 0

    def _parse_page(self, raw: Any, location: str) -> LocalPageNode:
        if not isinstance(raw, dict):
            self._fail("page must be a mapping", location)

        title = raw.get('title')
        if not isinstance(title, str) or not title.strip():
            self._fail("page title is required", location)

        body, source_path = self._body(raw, location)

        try:
            content_type = ContentType.parse(raw.get('type', ContentType.STORAGE.value))
        except ValueError as e:
            self._fail(str(e), f"{location}.type")

        children_raw = raw.get('children') or []
        if not isinstance(children_raw, list):
            self._fail("'children' must be a list", f"{location}.children")
        children = [
            self._parse_page(child, f"{location}.children[{i}]")
            for i, child in enumerate(children_raw)
        ]

        titles = [child.title for child in children]
        duplicates = sorted({t for t in titles if titles.count(t) > 1})
        if duplicates:
            self._fail(f"duplicate child titles: {', '.join(duplicates)}", f"{location}.children")

        self.page_count += 1
        return LocalPageNode(
            title=title.strip(),
            body=body,
            content_type=content_type,
            attachments=self._attachments(raw.get('attachments'), f"{location}.attachments"),
            labels=self._labels(raw.get('labels'), f"{location}.labels"),
            children=tuple(children),
            source_path=source_path,
        )

    def _body(self, raw: Dict[str, Any], location: str) -> Tuple[str, str]:
        if 'body' in raw:
            body = raw['body']
            if not isinstance(body, str):
                self._fail("'body' must be a string", f"{location}.body")
            return body, str(self._model_path)

        file_path = raw.get('content_file_path')
        if not file_path:
            self._fail("either 'body' or 'content_file_path' is required", location)
        resolved = self._resolve(file_path)
        return _read_text(resolved), str(resolved)

    def _attachments(self, raw: Any, location: str) -> Dict[str, Path]:
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            self._fail("'attachments' must map file names to paths", location)

        attachments = {}
        for name, file_path in raw.items():
            resolved = self._resolve(str(file_path))
            if not resolved.is_file():
                raise FilesystemError(str(resolved), 'read', f"Attachment '{name}' not found")
            attachments[str(name)] = resolved
        return attachments

    def _labels(self, raw: Any, location: str) -> Tuple[str, ...]:
        if raw is None:
            return ()
        if not isinstance(raw, list):
            self._fail("'labels' must be a list", location)
        labels: List[str] = []
        for label in raw:
            label = str(label).strip().lower()
            if label and label not in labels:
                labels.append(label)
        return tuple(labels)

    def _resolve(self, file_path: str) -> Path:
        path = Path(file_path)
        if not path.is_absolute():
            path = self._base_dir / path
        return path

    def _fail(self, message: str, location: str) -> None:
        raise ContentModelError(str(self._model_path), message, location)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding='utf-8')
    except FileNotFoundError:
        raise FilesystemError(str(path), 'read', 'File not found')
    except PermissionError:
        raise FilesystemError(str(path), 'read', 'Permission denied')
    except OSError as e:
        raise FilesystemError(str(path), 'read', str(e))
