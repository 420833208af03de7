from __future__ import annotations

from quick_roster.cli.__main__ import EXIT_FATAL, EXIT_PARTIAL_FAILURE, EXIT_SUCCESS_ALL

"""CLI exit code contract (scripts depend on these values)."""


def test_exit_code_values():
    assert EXIT_SUCCESS_ALL == 0
    assert EXIT_FATAL == 1
    assert EXIT_PARTIAL_FAILURE == 2


def test_exit_codes_distinct():
    assert len({EXIT_SUCCESS_ALL, EXIT_FATAL, EXIT_PARTIAL_FAILURE}) == 3
