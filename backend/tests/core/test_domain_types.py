"""Domain Types — verifies enum values shared by schemas and storage."""

from fedlink.core.domain_types import (
    FederationStatus, ReactionType, Section, TimeRange,
)


def test_federation_status_values():
    assert {s.value for s in FederationStatus} == {"pending", "approved", "rejected"}


def test_time_range_days():
    assert TimeRange.WEEK.days_in_range == 7
    assert TimeRange.MONTH.days_in_range == 30
    assert TimeRange.YEAR.days_in_range == 365


def test_reaction_types_include_like():
    assert ReactionType("like") == ReactionType.LIKE


def test_sections():
    assert [s.value for s in Section] == ["home", "profile", "services", "admin"]
