"""
XML Reader using xml.etree.ElementTree.

Turns a document source (file path, inline XML text, bytes, or an already
parsed tree) into a Document. Section extraction is handled by the
extractors module (SectionExtractor).
"""

from __future__ import annotations

import hashlib
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from pubchunks.exceptions import DocumentParseError, DocumentSourceError

logger = logging.getLogger(__name__)

DocumentSource = Union[str, Path, bytes, ET.Element, ET.ElementTree]


@dataclass(frozen=True)
class Document:
    """A parsed XML article.

    The root element is shared with the caller when an already parsed tree
    is passed in; extraction only reads from it.
    """

    root: ET.Element
    document_id: str
    source_kind: str  # "file", "text", "tree"
    source_path: Path | None = None

    @property
    def root_tag(self) -> str:
        """Root tag without its namespace."""
        return local_name(self.root.tag)

    @property
    def root_namespace(self) -> str | None:
        """Namespace URI of the root element, if any."""
        return namespace_of(self.root.tag)


def local_name(tag: str) -> str:
    """Strip a "{namespace}" prefix from an element tag."""
    if isinstance(tag, str) and tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def namespace_of(tag: str) -> str | None:
    if isinstance(tag, str) and tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return None


def _content_id(data: bytes) -> str:
    return "inline:" + hashlib.md5(data).hexdigest()[:12]


class XMLReader:
    """Read article XML from any supported source.

    Usage:
        reader = XMLReader()
        doc = reader.read("article.xml")
        doc = reader.read("<article>...</article>")
    """

    def read(self, source: DocumentSource) -> Document:
        """
        Read and parse a document source.

        A str that starts with "<" (after leading whitespace) is treated as
        inline XML, any other str as a file path.

        Args:
            source: Path, inline XML text, bytes, Element or ElementTree

        Returns:
            Parsed Document

        Raises:
            DocumentSourceError: If the file is missing or the source type unsupported
            DocumentParseError: If the XML is malformed
        """
        if isinstance(source, ET.ElementTree):
            root = source.getroot()
            if root is None:
                raise DocumentSourceError("ElementTree has no root element")
            return Document(root=root, document_id=f"tree:{id(root):x}", source_kind="tree")

        if isinstance(source, ET.Element):
            return Document(root=source, document_id=f"tree:{id(source):x}", source_kind="tree")

        if isinstance(source, bytes):
            return self._parse_bytes(source, _content_id(source), "text")

        if isinstance(source, str) and source.lstrip().startswith("<"):
            data = source.encode("utf-8")
            return self._parse_text(source, _content_id(data))

        if isinstance(source, (str, Path)):
            return self._read_file(Path(source))

        raise DocumentSourceError(f"Unsupported document source type: {type(source).__name__}")

    def _read_file(self, path: Path) -> Document:
        if not path.exists():
            raise DocumentSourceError(f"Source file not found: {path}")
        if not path.is_file():
            raise DocumentSourceError(f"Source is not a file: {path}")

        try:
            data = path.read_bytes()
        except OSError as e:
            raise DocumentSourceError(f"Cannot read {path}: {e}") from e

        logger.debug("Read %d bytes from %s", len(data), path)
        doc = self._parse_bytes(data, str(path), "file")
        return Document(
            root=doc.root,
            document_id=doc.document_id,
            source_kind="file",
            source_path=path,
        )

    def _parse_bytes(self, data: bytes, document_id: str, kind: str) -> Document:
        # Bytes keep the XML declaration's encoding in charge
        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            raise DocumentParseError(f"Malformed XML in {document_id}: {e}") from e
        return Document(root=root, document_id=document_id, source_kind=kind)

    def _parse_text(self, text: str, document_id: str) -> Document:
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            raise DocumentParseError(f"Malformed XML in {document_id}: {e}") from e
        return Document(root=root, document_id=document_id, source_kind="text")


def source_id(source: DocumentSource | Document) -> str:
    """Identifier for a source without parsing it.

    Matches the document_id that XMLReader.read() assigns, so failed and
    successful results are keyed the same way.
    """
    if isinstance(source, Document):
        return source.document_id
    if isinstance(source, ET.ElementTree):
        return f"tree:{id(source.getroot()):x}"
    if isinstance(source, ET.Element):
        return f"tree:{id(source):x}"
    if isinstance(source, bytes):
        return _content_id(source)
    if isinstance(source, str) and source.lstrip().startswith("<"):
        return _content_id(source.encode("utf-8"))
    if isinstance(source, (str, Path)):
        return str(Path(source))
    return f"<{type(source).__name__}>"


def read_document(source: DocumentSource | Document) -> Document:
    """Return `source` as a Document, parsing it if needed."""
    if isinstance(source, Document):
        return source
    return XMLReader().read(source)
