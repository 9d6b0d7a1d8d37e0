"""Shared pytest fixtures and configuration for the intra42 test suite.

Guidelines
----------
* No internet access in any test.
* httpx is mocked at the transport (``httpx.MockTransport``).
* Core tests must be pure — no side effects.
* Tests must not touch the real user config directory.
"""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolated_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ``INTRA42_CONFIG_DIR`` at a per-test temporary directory."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("INTRA42_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("INTRA42_API_URL", raising=False)
    return config_dir
