"""Shared pytest fixtures for reflectkit tests."""

from __future__ import annotations

import os

import pytest


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop ``REFLECTKIT_*`` variables so the host environment can't leak in."""
    for key in list(os.environ):
        if key.startswith("REFLECTKIT_"):
            monkeypatch.delenv(key)
