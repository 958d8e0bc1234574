"""
Exception classes for pubchunks.

All pubchunks exceptions inherit from PubChunksError,
making it easy to catch all library errors.

Most per-document problems (unknown publisher, unsupported or missing
sections, malformed XML inside a batch) are recorded in the result
structures instead of being raised. These exceptions surface only for
caller errors or when ExtractionConfig.on_error == "raise".

Example:
    >>> try:
    ...     result = pubchunks.chunks("article.xml", config=ExtractionConfig(on_error="raise"))
    ... except pubchunks.DocumentParseError as e:
    ...     print(f"Malformed XML: {e}")
    ... except pubchunks.PubChunksError as e:
    ...     print(f"pubchunks error: {e}")
"""


class PubChunksError(Exception):
    """
    Base exception for all pubchunks errors.

    Catch this to handle any pubchunks-specific error.
    """

    pass


class DocumentSourceError(PubChunksError):
    """
    Raised when a document source cannot be read.

    Example:
        >>> XMLReader().read("missing.xml")
        DocumentSourceError: Source file not found: missing.xml
    """

    pass


class DocumentParseError(PubChunksError):
    """Raised when a document source is not well-formed XML."""

    pass


class ExtractionError(PubChunksError):
    """
    Raised when extraction fails.

    This is only raised when config.on_error == "raise".
    Otherwise, failures are recorded on the DocumentResult.
    """

    pass


class ConfigurationError(PubChunksError, ValueError):
    """
    Raised for invalid configuration, section names or rule files.

    Example:
        >>> ExtractionConfig(output="html")
        ConfigurationError: output must be one of ('text', 'xml'), got 'html'
    """

    pass
