"""Pytest configuration for test isolation.

The package reads a few ``CHEQUE_RAS_*`` variables (log level, OCR model) and
the CLI loads a ``.env`` from the working directory. Tests must not pick up a
developer's local settings, so every test runs with those variables cleared
and from its own temporary working directory.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from cheque_ras.models import ChequeRecord

_ENV_VARS = ("CHEQUE_RAS_LOG_LEVEL", "CHEQUE_RAS_OCR_MODEL", "OPENAI_API_KEY")


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def two_cheques() -> list[ChequeRecord]:
    """Ten days and 31 days after 1403/01/01, weighted 1:3 (average 25.75 days)."""

    return [
        ChequeRecord(amount="1000", date="1403/01/11"),
        ChequeRecord(amount="3000", date="1403/02/01"),
    ]
