"""Shared fixtures for the bundler tests."""

from __future__ import annotations

import io

import pytest
from PIL import Image

from app_bundler.core.session import BuildSession
from app_bundler.core.settings import SettingsManager


def png_bytes(width: int, height: int, mode: str = "RGBA", color=None) -> bytes:
    """Encode a solid image of the given size and mode as PNG."""
    if color is None:
        color = {"RGBA": (10, 20, 30, 255), "RGB": (10, 20, 30), "L": 128, "LA": (128, 255)}[mode]
    buf = io.BytesIO()
    Image.new(mode, (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def make_png():
    """Factory for in-memory PNG payloads."""
    return png_bytes


@pytest.fixture
def settings(tmp_path) -> SettingsManager:
    """Settings stored under a temporary directory."""
    return SettingsManager(config_dir=tmp_path / "config")


@pytest.fixture
def linux_session(settings) -> BuildSession:
    """A session that believes it runs on x86_64 Linux."""
    return BuildSession(settings=settings, system_info={"os": "linux", "arch": "x86_64"})
