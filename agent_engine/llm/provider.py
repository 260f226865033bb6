"""Completion gateway abstraction with a LiteLLM implementation."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import litellm
from litellm import (
    APIConnectionError,
    AuthenticationError,
    BadRequestError,
    NotFoundError,
    RateLimitError,
)
from pydantic import BaseModel

from agent_engine.llm.exceptions import (
    GatewayCallError,
    LLMAuthenticationError,
    LLMConnectionError,
    LLMInvalidRequestError,
    LLMModelNotFoundError,
    LLMRateLimitError,
    LLMResponseError,
)

logger = logging.getLogger(__name__)


class Completion(BaseModel):
    """Reply returned by a completion gateway.

    Attributes:
        reply: The assistant message text.
        reasoning: Optional reasoning ("thinking") text, when the model exposes it.
    """

    reply: str
    reasoning: Optional[str] = None


class LLMProvider(ABC):
    """Abstract completion gateway.

    Implementations send one user prompt to one model of an OpenAI-compatible
    endpoint and either return a Completion or raise GatewayCallError.
    """

    @abstractmethod
    def complete(
        self,
        api_key: str,
        base_url: str,
        model: str,
        prompt: str,
        *,
        provider_name: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> Completion:
        """Run a single chat completion.

        Args:
            api_key: Credential of the selected provider.
            base_url: Endpoint of the selected provider.
            model: Model identifier to call.
            prompt: User message text.
            provider_name: Provider name, used for error context only.
            timeout: Optional request timeout in seconds.

        Returns:
            The reply and optional reasoning text.

        Raises:
            GatewayCallError: If the call fails for any reason.
        """
        pass


class LiteLLMProvider(LLMProvider):
    """Completion gateway backed by the LiteLLM SDK.

    Every provider is treated as OpenAI-compatible: the request goes to
    ``base_url`` with the model identifier passed through unchanged.

    Examples:
        ```python
        gateway = LiteLLMProvider()
        completion = gateway.complete(
            api_key="sk-...",
            base_url="https://api.deepseek.com/v1",
            model="deepseek-reasoner",
            prompt="What is 2+2?",
        )
        print(completion.reply, completion.reasoning)
        ```
    """

    def __init__(self) -> None:
        litellm.suppress_debug_info = True

    def _build_litellm_kwargs(
        self,
        api_key: str,
        base_url: str,
        model: str,
        timeout: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Build kwargs dictionary for LiteLLM calls."""
        kwargs: Dict[str, Any] = {
            "model": model,
            "custom_llm_provider": "openai",
        }

        if api_key:
            kwargs["api_key"] = api_key

        if base_url:
            kwargs["api_base"] = base_url

        if timeout:
            kwargs["timeout"] = timeout

        return kwargs

    def _map_litellm_error(
        self,
        error: Exception,
        provider_name: Optional[str],
        model_name: str,
    ) -> GatewayCallError:
        """Map LiteLLM exceptions to gateway exceptions without raising.

        Args:
            error: Original LiteLLM exception.
            provider_name: Provider the call was made for.
            model_name: Model the call was made with.

        Returns:
            Mapped exception instance.
        """
        if isinstance(error, GatewayCallError):
            return error

        if isinstance(error, AuthenticationError):
            return LLMAuthenticationError(
                message=f"Authentication failed: {str(error)}",
                provider_name=provider_name,
                model_name=model_name,
                original_error=error,
            )

        if isinstance(error, RateLimitError):
            retry_after = getattr(error, "retry_after", None)
            return LLMRateLimitError(
                message=f"Rate limit exceeded: {str(error)}",
                provider_name=provider_name,
                model_name=model_name,
                original_error=error,
                retry_after=retry_after,
            )

        if isinstance(error, NotFoundError):
            return LLMModelNotFoundError(
                message=f"Model not found: {str(error)}",
                provider_name=provider_name,
                model_name=model_name,
                original_error=error,
            )

        if isinstance(error, APIConnectionError):
            return LLMConnectionError(
                message=f"Connection failed: {str(error)}",
                provider_name=provider_name,
                model_name=model_name,
                original_error=error,
            )

        if isinstance(error, BadRequestError):
            return LLMInvalidRequestError(
                message=f"Invalid request: {str(error)}",
                provider_name=provider_name,
                model_name=model_name,
                original_error=error,
            )

        return GatewayCallError(
            message=f"LLM request failed: {str(error)}",
            provider_name=provider_name,
            model_name=model_name,
            original_error=error,
        )

    def complete(
        self,
        api_key: str,
        base_url: str,
        model: str,
        prompt: str,
        *,
        provider_name: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> Completion:
        """Run a single chat completion through LiteLLM.

        Raises:
            GatewayCallError: If LiteLLM raises or the reply is empty.
        """
        litellm_kwargs = self._build_litellm_kwargs(api_key, base_url, model, timeout)
        messages = [{"role": "user", "content": prompt}]

        logger.debug(f"Calling {provider_name}/{model} at {base_url}")

        try:
            response = litellm.completion(messages=messages, **litellm_kwargs)
            message = response.choices[0].message
        except Exception as e:
            raise self._map_litellm_error(e, provider_name, model) from e

        content = message.content
        if not content:
            raise LLMResponseError(
                message="LLM returned empty response",
                provider_name=provider_name,
                model_name=model,
            )

        reasoning = getattr(message, "reasoning_content", None)
        if not isinstance(reasoning, str) or not reasoning:
            reasoning = None

        logger.debug(f"Received response of length {len(content)}")
        return Completion(reply=content, reasoning=reasoning)
