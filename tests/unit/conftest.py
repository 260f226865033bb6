"""
Pytest configuration for unit tests.

Unit tests should be isolated, fast, and mock all external dependencies.
"""

from pathlib import Path
from unittest.mock import Mock

import pytest

SAMPLE_TOML = """
[[provider]]
name = "alpha"
api_key = "key-alpha"
base_url = "https://alpha.example.com/v1"
model = ["a1", "a2", "a3"]

[[provider]]
name = "beta"
api_key = "key-beta"
base_url = "https://beta.example.com/v1"
model = ["b1"]
"""


@pytest.fixture(autouse=True)
def clean_api_key_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove provider API key variables that would leak into configs."""
    for name in ("ALPHA_API_KEY", "BETA_API_KEY", "GAMMA_API_KEY", "LM_STUDIO_API_KEY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_config():
    """
    Create a mock ConfigManager for unit tests.

    Returns:
        Mock ConfigManager instance with no provider entries.

    Example:
        def test_something(mock_config):
            mock_config.get.return_value = [{"name": "alpha", "model": ["a1"]}]
            # use mock_config...
    """
    config = Mock()
    config.get.return_value = None
    config.config_path = "conf.yaml"
    return config


@pytest.fixture
def toml_config_file(tmp_path: Path) -> Path:
    """Write the TOML rendition of the sample configuration."""
    path = tmp_path / "conf.toml"
    path.write_text(SAMPLE_TOML, encoding="utf-8")
    return path
