"""Shared fixtures: temporary sites and a wired aggregation session."""

from __future__ import annotations

from pathlib import Path

import pytest

from sitepager.aggregate import Aggregator
from sitepager.collector import DocumentCollector
from sitepager.config import PathsSettings, SitepagerConfig
from sitepager.planner import PaginationPlanner
from sitepager.repository import InMemoryContentRepository
from sitepager.scanner import FileSystemScanner
from sitepager.store import ContextStore, InMemoryRenderQueue
from tests.helpers import RecordingBridge, Session, write_posts


@pytest.fixture
def pages_dir(tmp_path: Path) -> Path:
    pages = tmp_path / "pages"
    write_posts(pages)
    return pages


@pytest.fixture
def session(pages_dir: Path) -> Session:
    repository = InMemoryContentRepository()
    store = ContextStore()
    queue = InMemoryRenderQueue()
    bridge = RecordingBridge()
    collector = DocumentCollector(pages_dir, repository, FileSystemScanner(pages_dir))
    planner = PaginationPlanner(store, queue)
    aggregator = Aggregator(collector, bridge, planner)
    return Session(repository, store, queue, bridge, collector, planner, aggregator)


@pytest.fixture
def site_config(tmp_path: Path) -> SitepagerConfig:
    return SitepagerConfig(paths=PathsSettings(site_root=tmp_path))
