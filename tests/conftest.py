"""Shared test fixtures and marker registration."""

from __future__ import annotations

import pytest

from tests.fake_smb import FakeServer


def pytest_configure(config: object) -> None:
    """Register custom markers."""
    if isinstance(config, pytest.Config):
        config.addinivalue_line("markers", "integration: requires a reachable SMB server")


@pytest.fixture
def server() -> FakeServer:
    return FakeServer(host="fileserver", shares=("data", "public"))
