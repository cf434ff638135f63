"""Pytest configuration and fixtures."""

from typing import AsyncGenerator, Iterable

import pytest

from shortlinks.common.logging_config import setup_logging
from shortlinks.database.sqlite import SQLiteLinkStore
from shortlinks.resolver import RedirectResolver
from shortlinks.service import LinkService
from shortlinks.shortcode import ShortCodeGenerator


class ScriptedGenerator(ShortCodeGenerator):
    """Generator that hands out a fixed sequence of codes, then random ones."""

    def __init__(self, codes: Iterable[str]):
        super().__init__(length=6)
        self.codes = list(codes)
        self.calls = 0

    def generate(self) -> str:
        self.calls += 1
        if self.codes:
            return self.codes.pop(0)
        return super().generate()


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
async def store(tmp_path, logger) -> AsyncGenerator[SQLiteLinkStore, None]:
    """Create a connected SQLite store in a temporary directory."""
    db = SQLiteLinkStore(
        db_config=f"sqlite:///{tmp_path / 'links.db'}",
        logger=logger,
    )
    await db.connect()

    yield db

    await db.close()


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(length=6)


@pytest.fixture
def scripted_generator():
    """Factory for generators returning predetermined codes."""
    return ScriptedGenerator


@pytest.fixture
def service(store, short_code_generator, logger) -> LinkService:
    """Create service instance."""
    return LinkService(
        store=store,
        generator=short_code_generator,
        cache=None,
        logger=logger,
    )


@pytest.fixture
def resolver(store, logger) -> RedirectResolver:
    """Create resolver instance."""
    return RedirectResolver(store=store, cache=None, logger=logger)


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
