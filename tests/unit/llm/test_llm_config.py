"""Tests for provider configuration models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from agent_engine.core.utils.config import ConfigManager
from agent_engine.llm.config import (
    LLMConfig,
    ProviderConfig,
    api_key_env_var,
    load_llm_config,
)
from agent_engine.llm.exceptions import (
    ConfigLoadError,
    NoModelError,
    NoProviderError,
    ProviderNotFoundError,
)


class TestProviderConfig:
    """Tests for ProviderConfig model."""

    def test_provider_config_creation(self) -> None:
        config = ProviderConfig(
            name="alpha",
            api_key="secret",
            base_url="https://alpha.example.com/v1",
            model=["a1", "a2"],
            timeout=20,
        )

        assert config.models == ["a1", "a2"]
        assert config.get_default_model() == "a1"
        assert config.has_model("a2")
        assert not config.has_model("a9")
        assert config.timeout == 20

    def test_populate_by_field_name(self) -> None:
        config = ProviderConfig(name="alpha", models=["a1"])

        assert config.models == ["a1"]

    def test_name_required(self) -> None:
        with pytest.raises(ValidationError):
            ProviderConfig(model=["a1"])

    def test_defaults(self) -> None:
        config = ProviderConfig(name="alpha")

        assert config.base_url == ""
        assert config.models == []
        assert config.timeout is None
        assert config.api_key is None

    def test_no_models(self) -> None:
        with pytest.raises(NoModelError):
            ProviderConfig(name="alpha").get_default_model()

    def test_api_key_env_var_loading(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Missing api_key falls back to <NAME>_API_KEY."""
        monkeypatch.setenv("LM_STUDIO_API_KEY", "from-env")

        config = ProviderConfig(name="lm-studio", model=["m"])

        assert config.api_key == "from-env"

    def test_explicit_api_key_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ALPHA_API_KEY", "from-env")

        assert ProviderConfig(name="alpha", api_key="explicit").api_key == "explicit"

    def test_api_key_hidden(self) -> None:
        config = ProviderConfig(name="alpha", api_key="secret", model=["a1"])

        assert "api_key" not in config.model_dump()
        assert "secret" not in repr(config)

    def test_api_key_env_var_name(self) -> None:
        assert api_key_env_var("deepseek") == "DEEPSEEK_API_KEY"
        assert api_key_env_var("lm-studio") == "LM_STUDIO_API_KEY"


class TestLLMConfig:
    """Tests for LLMConfig model."""

    def test_default_provider(self, sample_config: LLMConfig) -> None:
        assert sample_config.get_default_provider().name == "alpha"

    def test_no_providers(self) -> None:
        with pytest.raises(NoProviderError):
            LLMConfig().get_default_provider()

    def test_get_provider(self, sample_config: LLMConfig) -> None:
        assert sample_config.get_provider("beta").models == ["b1"]

    def test_get_provider_not_found(self, sample_config: LLMConfig) -> None:
        with pytest.raises(ProviderNotFoundError) as exc_info:
            sample_config.get_provider("gamma")

        assert exc_info.value.available == ["alpha", "beta"]

    def test_duplicate_names_first_wins(self) -> None:
        config = LLMConfig(providers=[
            ProviderConfig(name="dup", model=["x"]),
            ProviderConfig(name="dup", model=["y"]),
        ])

        assert config.get_provider("dup").models == ["x"]
        assert config.provider_names() == ["dup", "dup"]

    def test_from_config_manager(self, mock_config) -> None:
        mock_config.get.side_effect = lambda key, default=None: (
            [{"name": "alpha", "model": ["a1"]}] if key == "provider" else default
        )

        config = LLMConfig.from_config_manager(mock_config)

        assert config.provider_names() == ["alpha"]

    def test_from_config_manager_llm_section(self, mock_config) -> None:
        mock_config.get.side_effect = lambda key, default=None: (
            [{"name": "nested", "model": ["n1"]}] if key == "llm.provider" else default
        )

        config = LLMConfig.from_config_manager(mock_config)

        assert config.provider_names() == ["nested"]

    def test_from_config_manager_missing_section(self, mock_config) -> None:
        mock_config.get.side_effect = lambda key, default=None: default

        assert LLMConfig.from_config_manager(mock_config).providers == []

    def test_from_config_manager_invalid(self, mock_config) -> None:
        mock_config.get.side_effect = lambda key, default=None: (
            [{"model": ["a1"]}] if key == "provider" else default
        )

        with pytest.raises(ConfigLoadError, match="Invalid provider configuration") as exc_info:
            LLMConfig.from_config_manager(mock_config)

        assert exc_info.value.config_path == "conf.yaml"
        assert isinstance(exc_info.value.__cause__, ValidationError)


class TestLoadLLMConfig:
    """Tests for load_llm_config."""

    def test_from_path(self, config_file: Path) -> None:
        config = load_llm_config(config_file)

        assert config.provider_names() == ["alpha", "beta"]
        assert config.get_provider("alpha").api_key == "key-alpha"

    def test_from_manager(self, config_file: Path) -> None:
        config = load_llm_config(ConfigManager(config_file))

        assert config.get_provider("beta").base_url == "https://beta.example.com/v1"

    def test_yaml_and_toml_equivalent(self, config_file: Path, toml_config_file: Path) -> None:
        yaml_config = load_llm_config(config_file)
        toml_config = load_llm_config(toml_config_file)

        assert yaml_config.model_dump() == toml_config.model_dump()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError):
            load_llm_config(tmp_path / "missing.yaml")
