"""LLM configuration, completion gateway and error taxonomy.

Basic Usage:
    ```python
    from agent_engine.llm import LiteLLMProvider, load_llm_config

    config = load_llm_config("conf.yaml")
    provider = config.get_default_provider()

    completion = LiteLLMProvider().complete(
        provider.api_key,
        provider.base_url,
        provider.get_default_model(),
        "What is the capital of France?",
    )
    ```
"""

from agent_engine.llm.config import LLMConfig, ProviderConfig, load_llm_config
from agent_engine.llm.exceptions import (
    AgentEngineError,
    AllAttemptsFailedError,
    ConfigLoadError,
    ConfigNotLoadedError,
    ConfigurationError,
    EmptyQueryError,
    GatewayCallError,
    LLMAuthenticationError,
    LLMConnectionError,
    LLMInvalidRequestError,
    LLMModelNotFoundError,
    LLMRateLimitError,
    LLMResponseError,
    NoModelError,
    NoProviderError,
    ProviderNotFoundError,
    UnsupportedModelError,
)
from agent_engine.llm.provider import Completion, LiteLLMProvider, LLMProvider

__all__ = [
    # Gateway
    "LLMProvider",
    "LiteLLMProvider",
    "Completion",
    # Configuration
    "LLMConfig",
    "ProviderConfig",
    "load_llm_config",
    # Exceptions
    "AgentEngineError",
    "ConfigurationError",
    "ConfigLoadError",
    "ConfigNotLoadedError",
    "NoProviderError",
    "ProviderNotFoundError",
    "NoModelError",
    "UnsupportedModelError",
    "EmptyQueryError",
    "GatewayCallError",
    "LLMConnectionError",
    "LLMAuthenticationError",
    "LLMRateLimitError",
    "LLMModelNotFoundError",
    "LLMInvalidRequestError",
    "LLMResponseError",
    "AllAttemptsFailedError",
]
