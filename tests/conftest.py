"""Shared fixtures: emoji asset library and renderer."""

import pytest

from create_emoji_assets import create_all_assets
from faceswap.emoji_renderer import EmojiAssetRenderer


@pytest.fixture
def emoji_dir(tmp_path):
    """A complete asset library with small masters."""
    out = tmp_path / "emoji"
    create_all_assets(str(out), size=64)
    return out


@pytest.fixture
def render_dir(tmp_path):
    out = tmp_path / "render"
    out.mkdir()
    return out


@pytest.fixture
def renderer(emoji_dir, render_dir):
    return EmojiAssetRenderer(emoji_dir=str(emoji_dir), tmp_dir=str(render_dir))
