"""Document reading module.

Parses article XML with the standard library's ElementTree.
"""

from pubchunks.readers.xml_reader import (
    Document,
    DocumentSource,
    XMLReader,
    local_name,
    namespace_of,
    read_document,
    source_id,
)

__all__ = [
    # Classes
    "XMLReader",
    "Document",
    "DocumentSource",
    # Utility functions
    "read_document",
    "source_id",
    "local_name",
    "namespace_of",
]
