"""Test configuration and fixtures.

Provides reusable fixtures for:
- An isolated user profile directory
- Sample WebVTT documents
- A pass context with default settings
"""

import pytest

from caption_fixer.diagnostics import Diagnostics
from caption_fixer.passes import PassContext
from caption_fixer.profiles import FixSettings


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user profiles out of the real config directory."""
    config_home = tmp_path / "config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setenv("APPDATA", str(config_home))
    return config_home


@pytest.fixture
def ctx():
    return PassContext(settings=FixSettings(), diagnostics=Diagnostics())


@pytest.fixture
def sample_vtt():
    return (
        "WEBVTT\n"
        "\n"
        "00:00:01.000 --> 00:00:04.000\n"
        "Hello  world\n"
        "\n"
        "00:00:05.000 --> 00:00:08.000\n"
        "&gt;&gt; Next speaker\n"
    )
