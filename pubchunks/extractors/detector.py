"""Publisher detection.

Classifies a parsed article into exactly one Publisher by inspecting a few
diagnostic locations. Diagnostics run in a fixed priority order and the
first hit wins, so a document carrying conflicting hints (for example a
PubMed Central article set wrapping a PLOS article) always resolves the
same way:

1. Elsevier article API namespace on the root element
2. PubMed Central article set root (<pmc-articleset>) -> entrez
3. <publisher-name> text under <journal-meta>
4. <journal-id journal-id-type="publisher-id"> under <journal-meta>
5. DOI prefix of the <article-meta> article DOI
6. Publisher.UNKNOWN

Inside steps 3-5 the order of the pattern tables breaks ties.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from collections.abc import Callable, Iterator, Sequence

from pubchunks.extractors.profiles import ELSEVIER_NAMESPACES
from pubchunks.models import Publisher
from pubchunks.readers.xml_reader import Document, local_name

logger = logging.getLogger(__name__)

ELSEVIER_NAMESPACE = ELSEVIER_NAMESPACES["svapi"]

NamePatterns = Sequence[tuple[str, Publisher]]

PUBLISHER_NAME_PATTERNS: NamePatterns = (
    (r"\belife\b", Publisher.ELIFE),
    (r"public library of science|\bplos\b", Publisher.PLOS),
    (r"pensoft", Publisher.PENSOFT),
    (r"peerj", Publisher.PEERJ),
    (r"hindawi", Publisher.HINDAWI),
    (r"copernicus", Publisher.COPERNICUS),
    (r"frontiers", Publisher.FRONTIERS),
    (r"f1000", Publisher.F1000RESEARCH),
    (r"cogent", Publisher.COGENT),
)

JOURNAL_ID_PATTERNS: NamePatterns = (
    *PUBLISHER_NAME_PATTERNS,
    (r"^(zookeys|phytokeys|mycokeys|neobiota|bdj|natureconservation|compcytogen)$", Publisher.PENSOFT),
    (r"^plos", Publisher.PLOS),
)

DOI_PREFIXES: Sequence[tuple[str, Publisher]] = (
    ("10.7554/", Publisher.ELIFE),
    ("10.1371/", Publisher.PLOS),
    ("10.3897/", Publisher.PENSOFT),
    ("10.7717/", Publisher.PEERJ),
    ("10.1155/", Publisher.HINDAWI),
    ("10.5194/", Publisher.COPERNICUS),
    ("10.3389/", Publisher.FRONTIERS),
    ("10.12688/", Publisher.F1000RESEARCH),
    ("10.1080/2331", Publisher.COGENT),  # Cogent journals, ISSN 2331-xxxx
)


def _iter_local(root: ET.Element, name: str) -> Iterator[ET.Element]:
    for element in root.iter():
        if local_name(element.tag) == name:
            yield element


def _within(
    root: ET.Element, container: str, name: str, *, direct: bool = False
) -> Iterator[ET.Element]:
    """`name` elements inside `container` elements, children only when `direct`."""
    for parent in _iter_local(root, container):
        candidates = iter(parent) if direct else parent.iter()
        for element in candidates:
            if element is not parent and local_name(element.tag) == name:
                yield element


def _text(element: ET.Element) -> str:
    return " ".join("".join(element.itertext()).split())


def _match(text: str, patterns: NamePatterns) -> Publisher | None:
    for pattern, publisher in patterns:
        if re.search(pattern, text, flags=re.IGNORECASE):
            return publisher
    return None


class PublisherDetector:
    """Decide which publisher profile applies to a document.

    Usage:
        detector = PublisherDetector()
        publisher = detector.detect(document)
        publisher, reason = detector.detect_with_reason(document)
    """

    def __init__(
        self,
        name_patterns: NamePatterns = PUBLISHER_NAME_PATTERNS,
        journal_id_patterns: NamePatterns = JOURNAL_ID_PATTERNS,
        doi_prefixes: Sequence[tuple[str, Publisher]] = DOI_PREFIXES,
    ):
        self.name_patterns = tuple(name_patterns)
        self.journal_id_patterns = tuple(journal_id_patterns)
        self.doi_prefixes = tuple(doi_prefixes)

    @property
    def diagnostics(self) -> tuple[tuple[str, Callable[[Document], Publisher | None]], ...]:
        """Diagnostics in priority order."""
        return (
            ("namespace", self._check_namespace),
            ("articleset", self._check_articleset),
            ("publisher_name", self._check_publisher_name),
            ("journal_id", self._check_journal_id),
            ("doi_prefix", self._check_doi),
        )

    def detect(self, document: Document) -> Publisher:
        """Return exactly one Publisher, UNKNOWN when nothing matches."""
        return self.detect_with_reason(document)[0]

    def detect_with_reason(self, document: Document) -> tuple[Publisher, str]:
        """Return (publisher, name of the diagnostic that decided it)."""
        for name, check in self.diagnostics:
            try:
                publisher = check(document)
            except Exception as e:
                # A diagnostic that cannot run counts as no match
                logger.warning("Diagnostic %s failed on %s: %s", name, document.document_id, e)
                continue
            if publisher is not None:
                logger.debug("%s detected as %s via %s", document.document_id, publisher.value, name)
                return publisher, name

        logger.debug("%s: no publisher diagnostics matched", document.document_id)
        return Publisher.UNKNOWN, "none"

    def _check_namespace(self, document: Document) -> Publisher | None:
        if document.root_namespace == ELSEVIER_NAMESPACE:
            return Publisher.ELSEVIER
        return None

    def _check_articleset(self, document: Document) -> Publisher | None:
        if document.root_tag == "pmc-articleset":
            return Publisher.ENTREZ
        return None

    def _check_publisher_name(self, document: Document) -> Publisher | None:
        for element in _within(document.root, "journal-meta", "publisher-name"):
            publisher = _match(_text(element), self.name_patterns)
            if publisher is not None:
                return publisher
        return None

    def _check_journal_id(self, document: Document) -> Publisher | None:
        for element in _within(document.root, "journal-meta", "journal-id", direct=True):
            if element.get("journal-id-type") != "publisher-id":
                continue
            publisher = _match(_text(element), self.journal_id_patterns)
            if publisher is not None:
                return publisher
        return None

    def _check_doi(self, document: Document) -> Publisher | None:
        for element in _within(document.root, "article-meta", "article-id", direct=True):
            if element.get("pub-id-type") != "doi":
                continue
            doi = _text(element).lower()
            for prefix, publisher in self.doi_prefixes:
                if doi.startswith(prefix):
                    return publisher
        return None


def detect_publisher(document: Document) -> Publisher:
    """Convenience function for publisher detection."""
    return PublisherDetector().detect(document)
