"""Provider and model selection state.

The Engine owns the current provider/model selection derived from an
LLMConfig. All mutations verify before they assign, so a failed switch
leaves the selection untouched.
"""

import logging
import random
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from agent_engine.llm.config import LLMConfig, ProviderConfig, load_llm_config
from agent_engine.llm.exceptions import ConfigNotLoadedError, UnsupportedModelError
from agent_engine.llm.provider import LiteLLMProvider, LLMProvider

logger = logging.getLogger(__name__)


class Engine:
    """Holds the selected provider and model.

    The API key of the selected provider is kept private and is only
    reachable through ``get_api_key()``; ``model_id`` and ``base_url`` are
    public.

    Attributes:
        gateway: Completion gateway used by the failover dispatcher.
        rng: Random source used to pick failover models.

    Examples:
        ```python
        engine = Engine.from_config("conf.yaml")
        engine.switch_provider("moonshot")
        engine.switch_model("kimi-k2")
        ```
    """

    def __init__(
        self,
        config: Optional[LLMConfig] = None,
        provider_name: str = "",
        model_id: str = "",
        *,
        config_path: Optional[str] = None,
        gateway: Optional[LLMProvider] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Initialize the engine and resolve the starting selection.

        Args:
            config: Loaded configuration. None leaves the engine uninitialized.
            provider_name: Provider to select; empty selects the first provider.
            model_id: Model to select; empty selects the provider's first model.
            config_path: Path the configuration was loaded from.
            gateway: Completion gateway; defaults to LiteLLMProvider.
            rng: Random source for failover; defaults to an unseeded Random.

        Raises:
            NoProviderError: If no provider is configured.
            ProviderNotFoundError: If ``provider_name`` is unknown.
            NoModelError: If the provider has no models.
            UnsupportedModelError: If ``model_id`` is not offered by the provider.
        """
        self._config = config
        self._config_path = config_path or ""
        self.gateway = gateway if gateway is not None else LiteLLMProvider()
        self.rng = rng if rng is not None else random.Random()

        self._provider_name = ""
        self._api_key = ""
        self._timeout: Optional[int] = None
        self.base_url = ""
        self.model_id = ""

        if config is not None:
            if provider_name:
                provider = config.get_provider(provider_name)
            else:
                provider = config.get_default_provider()
            self._select(provider, self._resolve_model(provider, model_id))

    @classmethod
    def from_config(
        cls,
        config_path: Union[str, Path],
        provider_name: str = "",
        model_id: str = "",
        **kwargs: Any,
    ) -> "Engine":
        """Load a configuration file and build an engine from it.

        Args:
            config_path: Path to the configuration document (relative or absolute).
            provider_name: Provider to select; empty selects the first provider.
            model_id: Model to select; empty selects the provider's first model.
            **kwargs: Forwarded to the constructor (``gateway``, ``rng``).

        Raises:
            ConfigLoadError: If the document cannot be loaded.
        """
        config = load_llm_config(config_path)
        return cls(
            config,
            provider_name,
            model_id,
            config_path=str(Path(config_path).resolve()),
            **kwargs,
        )

    def __repr__(self) -> str:
        return (
            f"Engine(provider={self._provider_name!r}, model_id={self.model_id!r}, "
            f"base_url={self.base_url!r})"
        )

    @property
    def timeout(self) -> Optional[int]:
        """Request timeout of the selected provider, if configured."""
        return self._timeout

    def _require_config(self) -> LLMConfig:
        if self._config is None:
            raise ConfigNotLoadedError()
        return self._config

    @staticmethod
    def _resolve_model(provider: ProviderConfig, model_id: str) -> str:
        if not model_id:
            return provider.get_default_model()
        if not provider.has_model(model_id):
            raise UnsupportedModelError(provider.name, model_id)
        return model_id

    def _select(self, provider: ProviderConfig, model_id: str) -> None:
        self._provider_name = provider.name
        self._api_key = provider.api_key or ""
        self._timeout = provider.timeout
        self.base_url = provider.base_url
        self.model_id = model_id

    def get_api_key(self) -> str:
        """Get the API key of the selected provider.

        Raises:
            ConfigNotLoadedError: If the engine is uninitialized.
        """
        self._require_config()
        return self._api_key

    def get_config_path(self) -> str:
        """Get the absolute path the configuration was loaded from.

        Raises:
            ConfigNotLoadedError: If the engine is uninitialized.
        """
        self._require_config()
        return self._config_path

    def get_current_provider_name(self) -> str:
        self._require_config()
        return self._provider_name

    def get_available_providers(self) -> List[str]:
        """Get all provider names in configuration order.

        Raises:
            ConfigNotLoadedError: If the engine is uninitialized.
        """
        return self._require_config().provider_names()

    def get_available_models(self) -> List[str]:
        """Get the models of the current provider.

        Raises:
            ConfigNotLoadedError: If the engine is uninitialized.
        """
        config = self._require_config()
        return list(config.get_provider(self._provider_name).models)

    def get_all_models(self) -> Dict[str, List[str]]:
        """Get a mapping of provider name to its model list.

        Raises:
            ConfigNotLoadedError: If the engine is uninitialized.
        """
        config = self._require_config()
        all_models: Dict[str, List[str]] = {}
        for provider in config.providers:
            all_models.setdefault(provider.name, list(provider.models))
        return all_models

    def get_all_providers_info(self) -> Dict[str, Dict[str, Any]]:
        """Get every provider's record without credentials, keyed by name.

        When two providers share a name, the first one is reported, matching
        name lookup.

        Raises:
            ConfigNotLoadedError: If the engine is uninitialized.
        """
        config = self._require_config()
        providers_info: Dict[str, Dict[str, Any]] = {}
        for provider in config.providers:
            providers_info.setdefault(provider.name, provider.model_dump())
        return providers_info

    def switch_provider(self, provider_name: str, model_id: str = "") -> None:
        """Switch to another provider.

        Args:
            provider_name: Provider to select.
            model_id: Model to select; empty selects the provider's first model.

        Raises:
            ConfigNotLoadedError: If the engine is uninitialized.
            ProviderNotFoundError: If the provider is unknown.
            NoModelError: If the provider has no models.
            UnsupportedModelError: If ``model_id`` is not offered by the provider.
        """
        config = self._require_config()
        provider = config.get_provider(provider_name)
        resolved = self._resolve_model(provider, model_id)
        self._select(provider, resolved)
        logger.info(f"Switched to provider={provider.name}, model={resolved}")

    def switch_model(self, model_id: str) -> None:
        """Switch model within the current provider.

        Raises:
            ConfigNotLoadedError: If the engine is uninitialized.
            UnsupportedModelError: If the current provider does not offer ``model_id``.
        """
        config = self._require_config()
        provider = config.get_provider(self._provider_name)
        if not provider.has_model(model_id):
            raise UnsupportedModelError(self._provider_name, model_id)
        self.model_id = model_id

    @contextmanager
    def preserve_model(self) -> Iterator[str]:
        """Restore the current model when the block exits, however it exits.

        Yields:
            The model id that will be restored.
        """
        original_model_id = self.model_id
        try:
            yield original_model_id
        finally:
            self.model_id = original_model_id

    def selection(self) -> Tuple[str, str, str]:
        """Get ``(provider_name, model_id, base_url)`` of the current selection.

        Raises:
            ConfigNotLoadedError: If the engine is uninitialized.
        """
        self._require_config()
        return self._provider_name, self.model_id, self.base_url
