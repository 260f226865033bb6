"""Configuration models for LLM providers using Pydantic."""

import os
import re
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from agent_engine.core.utils.config import ConfigManager
from agent_engine.llm.exceptions import (
    ConfigLoadError,
    NoModelError,
    NoProviderError,
    ProviderNotFoundError,
)


def api_key_env_var(provider_name: str) -> str:
    """Return the environment variable consulted for a provider's API key.

    Examples:
        >>> api_key_env_var("deepseek")
        'DEEPSEEK_API_KEY'
        >>> api_key_env_var("lm-studio")
        'LM_STUDIO_API_KEY'
    """
    return re.sub(r"[^A-Za-z0-9]", "_", provider_name).upper() + "_API_KEY"


class ProviderConfig(BaseModel):
    """Configuration for a single LLM provider.

    Attributes:
        name: Provider identifier (e.g., 'deepseek', 'openrouter').
        api_key: API key for authentication (loaded from env var if not provided).
            Excluded from serialization and repr.
        base_url: OpenAI-compatible endpoint URL.
        models: Supported model identifiers; the first one is the default.
        timeout: Optional request timeout in seconds.

    Examples:
        ```python
        config = ProviderConfig(
            name="deepseek",
            api_key="sk-...",
            base_url="https://api.deepseek.com/v1",
            model=["deepseek-chat", "deepseek-reasoner"],
        )
        config.get_default_model()  # "deepseek-chat"
        ```
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Provider identifier")
    api_key: Optional[str] = Field(
        default=None, exclude=True, repr=False, description="API key for authentication"
    )
    base_url: str = Field(default="", description="OpenAI-compatible endpoint")
    models: List[str] = Field(default_factory=list, alias="model", description="Model identifiers")
    timeout: Optional[int] = Field(default=None, description="Request timeout in seconds")

    @model_validator(mode="after")
    def load_api_key_from_env(self) -> "ProviderConfig":
        """Load API key from ``<NAME>_API_KEY`` if the document leaves it empty."""
        if not self.api_key:
            self.api_key = os.getenv(api_key_env_var(self.name))
        return self

    def get_default_model(self) -> str:
        """Get the provider's default model (the first one).

        Raises:
            NoModelError: If the provider has no models configured.
        """
        if not self.models:
            raise NoModelError(self.name)
        return self.models[0]

    def has_model(self, model_id: str) -> bool:
        """Check whether the provider supports ``model_id``."""
        return model_id in self.models


class LLMConfig(BaseModel):
    """Configuration for all LLM providers.

    Attributes:
        providers: Provider configurations in document order (the first one is
            the default provider).

    Examples:
        ```python
        config = LLMConfig(providers=[
            ProviderConfig(name="deepseek", model=["deepseek-chat"]),
            ProviderConfig(name="moonshot", model=["kimi-k2"]),
        ])

        config.get_provider("moonshot").models  # ["kimi-k2"]
        ```
    """

    model_config = ConfigDict(populate_by_name=True)

    providers: List[ProviderConfig] = Field(
        default_factory=list, alias="provider", description="List of provider configurations"
    )

    def get_default_provider(self) -> ProviderConfig:
        """Get the default provider (the first one).

        Raises:
            NoProviderError: If no provider is configured.
        """
        if not self.providers:
            raise NoProviderError()
        return self.providers[0]

    def get_provider(self, name: str) -> ProviderConfig:
        """Get provider configuration by name.

        Names are not required to be unique; the first match wins.

        Args:
            name: Provider name to look up.

        Returns:
            Provider configuration.

        Raises:
            ProviderNotFoundError: If no provider has this name.
        """
        for provider in self.providers:
            if provider.name == name:
                return provider
        raise ProviderNotFoundError(name, self.provider_names())

    def provider_names(self) -> List[str]:
        """Get all provider names in document order."""
        return [p.name for p in self.providers]

    @classmethod
    def from_config_manager(cls, config_manager: ConfigManager) -> "LLMConfig":
        """Load LLM configuration from ConfigManager.

        The provider list is read from the top-level ``provider`` key, or from
        ``llm.provider`` when the document groups it under an ``[llm]`` section.

        Args:
            config_manager: Configured ConfigManager instance.

        Returns:
            Validated LLMConfig instance.

        Raises:
            ConfigLoadError: If the provider list does not validate.
        """
        providers_data = config_manager.get("provider")
        if providers_data is None:
            providers_data = config_manager.get("llm.provider", default=[])

        try:
            return cls.model_validate({"provider": providers_data})
        except ValidationError as e:
            raise ConfigLoadError(
                f"Invalid provider configuration: {e}",
                config_path=config_manager.config_path,
                original_error=e,
            )


def load_llm_config(source: Union[str, Path, ConfigManager, None] = None) -> LLMConfig:
    """Load and validate LLM configuration.

    Args:
        source: Path to the configuration document, an already loaded
            ConfigManager, or None to search the default locations.

    Returns:
        Validated LLMConfig instance.

    Raises:
        ConfigLoadError: If the document is missing, unreadable or malformed.

    Examples:
        ```python
        llm_config = load_llm_config("conf.yaml")
        provider = llm_config.get_default_provider()
        ```
    """
    config_manager = source if isinstance(source, ConfigManager) else ConfigManager(source)
    return LLMConfig.from_config_manager(config_manager)
