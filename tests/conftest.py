"""Pytest fixtures for gofilepy tests."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

import httpx
import pytest
from helpers import MockGofile

from gofilepy import ClientConfig, GofileClient


@pytest.fixture
def gofile() -> MockGofile:
    """Create an empty fake Gofile API."""
    return MockGofile()


@pytest.fixture
def config() -> ClientConfig:
    """Create a config with a token and no retries."""
    return ClientConfig(token="test-token", retry_count=0, retry_backoff=0)


@pytest.fixture
def client(gofile: MockGofile, config: ClientConfig) -> Iterator[GofileClient]:
    """Create a GofileClient wired to the fake API."""
    http_client = httpx.Client(transport=httpx.MockTransport(gofile))
    with GofileClient(config=config, http_client=http_client) as gofile_client:
        yield gofile_client
    http_client.close()


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """Create a file large enough to span several upload chunks."""
    path = tmp_path / "sample.bin"
    path.write_bytes(os.urandom(300 * 1024 + 17))
    return path


@pytest.fixture
def empty_file(tmp_path: Path) -> Path:
    """Create a zero-length file."""
    path = tmp_path / "empty.txt"
    path.write_bytes(b"")
    return path
