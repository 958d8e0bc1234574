"""
Configuration for pubchunks section extraction.

All options have defaults; build a config only to customise behaviour.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from pubchunks.exceptions import ConfigurationError
from pubchunks.models import Publisher, Section, parse_publisher, parse_sections


@dataclass
class ExtractionConfig:
    """
    Configuration for section extraction.

    Example:
        >>> config = ExtractionConfig(
        ...     sections=("title", "abstract"),
        ...     publisher="pensoft",
        ... )
        >>> result = pubchunks.chunks("article.xml", config=config)
    """

    # Sections to extract, None means every known section
    sections: tuple[str, ...] | None = None

    # "auto" runs publisher detection, anything else forces a profile
    publisher: str = "auto"

    # Output options
    output: Literal["text", "xml"] = "text"
    normalize_whitespace: bool = True

    # Error handling
    on_error: Literal["warn", "record", "raise"] = "warn"

    # Batch options
    parallel: bool = False
    max_workers: int = 4

    # Extra rules merged over the built-in registry
    rules_path: Path | None = None

    def __post_init__(self):
        """Validate configuration."""
        valid_outputs = ("text", "xml")
        if self.output not in valid_outputs:
            raise ConfigurationError(
                f"output must be one of {valid_outputs}, got {self.output!r}"
            )

        valid_on_error = ("warn", "record", "raise")
        if self.on_error not in valid_on_error:
            raise ConfigurationError(
                f"on_error must be one of {valid_on_error}, got {self.on_error!r}"
            )

        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be >= 1, got {self.max_workers}")

        if self.publisher != "auto":
            self.publisher = parse_publisher(self.publisher).value

        if self.sections is not None:
            # Normalise to a tuple and fail early on unknown names
            self.sections = tuple(s.value for s in parse_sections(self.sections))

        if self.rules_path is not None:
            self.rules_path = Path(self.rules_path)

    @property
    def forced_publisher(self) -> Publisher | None:
        """The publisher to force, or None when detection should run."""
        if self.publisher == "auto":
            return None
        return Publisher(self.publisher)

    @property
    def requested_sections(self) -> tuple[Section, ...]:
        """Requested sections as enum members (all sections when unset)."""
        return parse_sections(self.sections)
