"""
Pytest configuration and fixtures for pubchunks tests.
"""

from pathlib import Path

import pytest


@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    """Return path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def sample_config():
    """Return a sample ExtractionConfig for testing."""
    from pubchunks import ExtractionConfig

    return ExtractionConfig()


@pytest.fixture
def pensoft_xml(fixtures_dir) -> Path:
    """ZooKeys article: Pensoft JATS with three references."""
    return fixtures_dir / "pensoft.xml"


@pytest.fixture
def plos_xml(fixtures_dir) -> Path:
    return fixtures_dir / "plos.xml"


@pytest.fixture
def elife_xml(fixtures_dir) -> Path:
    return fixtures_dir / "elife.xml"


@pytest.fixture
def hindawi_xml(fixtures_dir) -> Path:
    """Hindawi article; the Hindawi profile has no refs_dois rule."""
    return fixtures_dir / "hindawi.xml"


@pytest.fixture
def elsevier_xml(fixtures_dir) -> Path:
    """Elsevier article retrieval API response."""
    return fixtures_dir / "elsevier.xml"


@pytest.fixture
def pmc_xml(fixtures_dir) -> Path:
    """PubMed Central article set wrapping a PLOS article."""
    return fixtures_dir / "pmc_articleset.xml"


@pytest.fixture
def unknown_xml(fixtures_dir) -> Path:
    return fixtures_dir / "unknown.xml"


@pytest.fixture
def malformed_xml(fixtures_dir) -> Path:
    return fixtures_dir / "malformed.xml"
