"""Shared fixtures for aiblock tests."""

import pytest

from aiblock.loaders.config_loader import clear_config_cache
from aiblock.markdown import create_markdown
from aiblock.primitives.locator import SourceDocument, locate_block
from aiblock.settings import get_settings


@pytest.fixture(autouse=True)
def _clean_caches(monkeypatch, tmp_path):
    """Isolate config and settings caches and AIBLOCK_* env vars per test."""
    for name in ("AIBLOCK_LOG_LEVEL", "AIBLOCK_CONFIG_FILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_config_cache()
    get_settings.cache_clear()
    yield
    clear_config_cache()
    get_settings.cache_clear()


@pytest.fixture
def md():
    """Renderer with ai containers and line annotations."""
    return create_markdown()


@pytest.fixture
def block_at():
    """Locate the block opened at a line of a text document."""

    def _block_at(text: str, start_line: int):
        block = locate_block(SourceDocument.from_text(text), start_line)
        assert block is not None
        return block

    return _block_at
