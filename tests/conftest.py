"""Shared test fixtures and configuration."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

import pytest

from truthrank.config.settings import Settings
from truthrank.core.classifier import ContentClassifier
from truthrank.core.engine import TruthRankEngine
from truthrank.core.keywords import KeywordDictionary
from truthrank.core.scorer import TruthScorer
from truthrank.models.record import ArchiveRecord
from truthrank.observability.logging import TruthRankLogHandler

REFERENCE_YEAR = 2026


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    """Drop the stderr handler and level set by setup_logging in a test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in [h for h in root.handlers if isinstance(h, TruthRankLogHandler)]:
        root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with a fixed reference year."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        ranking={"reference_year": REFERENCE_YEAR},
    )


@pytest.fixture
def keywords() -> KeywordDictionary:
    """A small, stable dictionary independent of the bundled one."""
    return KeywordDictionary.from_payload(
        {
            "categories": {
                "explicit": ["porn", "xxx", "sex tape", "anal", "cum"],
                "mild": ["nsfw", "nude", "erotic", "lingerie"],
            }
        }
    )


@pytest.fixture
def classifier(keywords: KeywordDictionary) -> ContentClassifier:
    return ContentClassifier(keywords)


@pytest.fixture
def scorer(settings: Settings) -> TruthScorer:
    return TruthScorer(settings.ranking)


@pytest.fixture
def engine(settings: Settings, keywords: KeywordDictionary) -> TruthRankEngine:
    return TruthRankEngine(settings, keywords=keywords)


# ── Raw record fixtures ──


@pytest.fixture
def apollo_doc() -> dict[str, Any]:
    """NASA mission report from a curated collection."""
    return {
        "identifier": "apollo11-report",
        "title": "Apollo 11 Mission Report",
        "collection": ["nasa"],
        "year": "1969",
    }


@pytest.fixture
def apollo_record(apollo_doc: dict[str, Any]) -> ArchiveRecord:
    return ArchiveRecord.model_validate(apollo_doc)


@pytest.fixture
def explicit_doc() -> dict[str, Any]:
    """A record whose description names explicit material."""
    return {
        "identifier": "film-reel-77",
        "title": "Film reel 77",
        "description": "A pornographic short from a private collection.",
        "mediatype": "movies",
    }


@pytest.fixture
def mild_doc() -> dict[str, Any]:
    """A record flagged only by a mild-tier keyword."""
    return {
        "identifier": "calendar-1955",
        "title": "Lingerie catalogue 1955",
        "mediatype": "texts",
    }


@pytest.fixture
def clean_doc() -> dict[str, Any]:
    """A richly described record with no sensitive content."""
    return {
        "identifier": "lincoln-letters",
        "title": "Letters of Abraham Lincoln",
        "description": "Manuscript letters digitised by the Library of Congress. See https://loc.gov/item/1",
        "creator": "Library of Congress",
        "publisher": "Government Printing Office",
        "collection": ["library_of_congress", "americana"],
        "subject": ["Lincoln, Abraham", "Civil War"],
        "language": "eng",
        "date": "1862-04-01",
        "mediatype": "texts",
        "originalurl": "https://www.loc.gov/item/mal0001",
    }
