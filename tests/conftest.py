"""Pytest configuration and shared fixtures."""

import pytest

from rcmonitor.models import ChangeKind, ChangeRecord


def change(**overrides) -> ChangeRecord:
    """Build a ChangeRecord for a plain edit by a registered user, with overrides."""
    fields = dict(
        rcid=1,
        kind=ChangeKind.EDIT,
        namespace=0,
        title="Sandbox",
        page_id=100,
        revid=0,
        old_revid=0,
        user="Someone",
        user_id=42,
        old_len=0,
        new_len=0,
        timestamp="2024-05-01T12:00:00Z",
        comment="",
    )
    fields.update(overrides)
    return ChangeRecord(**fields)


@pytest.fixture
def make_change():
    """Factory fixture for ChangeRecord instances."""
    return change
