"""
Fixtures compartidos.
"""

import pytest

from estatematch.config import Settings
from estatematch.matching import MatchScorer, PreferenceExtractor, RankingAssembler
from estatematch.models import (
    CandidateListing,
    ExtractedPreference,
    Importance,
    PreferenceType,
    RequirementProfile,
)


@pytest.fixture
def extractor():
    return PreferenceExtractor()


@pytest.fixture
def scorer():
    return MatchScorer()


@pytest.fixture
def assembler():
    return RankingAssembler()


@pytest.fixture
def test_settings():
    return Settings(_env_file=None)


@pytest.fixture
def make_profile():
    def _make(**kwargs):
        return RequirementProfile(**kwargs)

    return _make


@pytest.fixture
def make_listing():
    def _make(**kwargs):
        return CandidateListing(**kwargs)

    return _make


def pref(pref_type: PreferenceType, importance=Importance.NICE_TO_HAVE, value=True):
    return ExtractedPreference(type=pref_type, importance=importance, value=value)
