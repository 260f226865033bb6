"""Exception hierarchy for configuration, provider selection and completion calls."""

from typing import List, Optional


class AgentEngineError(Exception):
    """Base exception for everything raised by agent-engine."""


class ConfigurationError(AgentEngineError):
    """Base exception for configuration and selection mismatches.

    These indicate a static misconfiguration rather than a transient
    condition, so they are never retried.
    """


class ConfigLoadError(ConfigurationError):
    """Raised when the configuration document is unreadable or malformed.

    Attributes:
        config_path: Path of the document that failed to load, if known.
        original_error: The underlying parse or I/O error.
    """

    def __init__(
        self,
        message: str,
        config_path: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        self.config_path = config_path
        self.original_error = original_error
        super().__init__(message)

        if original_error is not None:
            self.__cause__ = original_error


class ConfigNotLoadedError(ConfigurationError):
    """Raised when an Engine operation runs before configuration was loaded."""

    def __init__(self, message: str = "Configuration not loaded") -> None:
        super().__init__(message)


class NoProviderError(ConfigurationError):
    """Raised when the configuration contains no providers."""

    def __init__(self, message: str = "No provider configured") -> None:
        super().__init__(message)


class ProviderNotFoundError(ConfigurationError):
    """Raised when no provider matches the requested name.

    Attributes:
        provider_name: The name that was looked up.
        available: Provider names present in the configuration.
    """

    def __init__(self, provider_name: str, available: Optional[List[str]] = None) -> None:
        self.provider_name = provider_name
        self.available = list(available or [])
        message = f"Provider '{provider_name}' not found in configuration"
        if self.available:
            message += f". Available providers: {', '.join(self.available)}"
        super().__init__(message)


class NoModelError(ConfigurationError):
    """Raised when a provider has an empty model list."""

    def __init__(self, provider_name: str) -> None:
        self.provider_name = provider_name
        super().__init__(f"Provider '{provider_name}' has no models configured")


class UnsupportedModelError(ConfigurationError):
    """Raised when a model is not in the provider's model list."""

    def __init__(self, provider_name: str, model_name: str) -> None:
        self.provider_name = provider_name
        self.model_name = model_name
        super().__init__(f"Provider '{provider_name}' does not support model '{model_name}'")


class EmptyQueryError(AgentEngineError):
    """Raised when a query command carries no prompt text."""

    def __init__(self, message: str = "query command requires prompt text") -> None:
        super().__init__(message)


class GatewayCallError(AgentEngineError):
    """Base exception for failed completion calls.

    This is the base class for all exceptions raised by the completion
    gateway. It provides context about which provider and model
    encountered the error. The failover dispatcher treats every
    instance as recoverable by switching to another model.

    Attributes:
        provider_name: Name of the LLM provider that raised the error.
        model_name: Name of the model that was being used.
        original_error: The original exception that caused this error.
    """

    def __init__(
        self,
        message: str,
        provider_name: Optional[str] = None,
        model_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
            provider_name: Name of the provider that raised the error.
            model_name: Name of the model being used.
            original_error: Original exception that caused this error.
        """
        self.provider_name = provider_name
        self.model_name = model_name
        self.original_error = original_error
        super().__init__(message)

        if original_error is not None:
            self.__cause__ = original_error

    def __str__(self) -> str:
        """Return detailed error message with context."""
        parts = [super().__str__()]

        if self.provider_name:
            parts.append(f"Provider: {self.provider_name}")

        if self.model_name:
            parts.append(f"Model: {self.model_name}")

        if self.original_error:
            parts.append(f"Original error: {type(self.original_error).__name__}")

        return " | ".join(parts)


class LLMConnectionError(GatewayCallError):
    """Raised when connection to the LLM service fails.

    Examples:
        - Network timeout
        - Service unavailable (500, 503 errors)
        - Connection refused
    """

    def __init__(
        self,
        message: str = "Failed to connect to LLM service",
        provider_name: Optional[str] = None,
        model_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, provider_name, model_name, original_error)


class LLMAuthenticationError(GatewayCallError):
    """Raised when the API key is invalid, missing or expired."""

    def __init__(
        self,
        message: str = "Authentication failed - check your API key",
        provider_name: Optional[str] = None,
        model_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, provider_name, model_name, original_error)


class LLMRateLimitError(GatewayCallError):
    """Raised when rate limits are exceeded.

    Attributes:
        retry_after: Optional number of seconds to wait before retrying.
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        provider_name: Optional[str] = None,
        model_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
        retry_after: Optional[int] = None,
    ) -> None:
        self.retry_after = retry_after
        super().__init__(message, provider_name, model_name, original_error)

    def __str__(self) -> str:
        """Return detailed error message with retry information."""
        base_msg = super().__str__()
        if self.retry_after:
            return f"{base_msg} | Retry after: {self.retry_after}s"
        return base_msg


class LLMModelNotFoundError(GatewayCallError):
    """Raised when the endpoint does not know the requested model."""

    def __init__(
        self,
        message: str = "Model not found or not available",
        provider_name: Optional[str] = None,
        model_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, provider_name, model_name, original_error)


class LLMInvalidRequestError(GatewayCallError):
    """Raised for invalid parameters or malformed requests."""

    def __init__(
        self,
        message: str = "Invalid request parameters",
        provider_name: Optional[str] = None,
        model_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, provider_name, model_name, original_error)


class LLMResponseError(GatewayCallError):
    """Raised when the response is empty or cannot be parsed."""

    def __init__(
        self,
        message: str = "Failed to parse LLM response",
        provider_name: Optional[str] = None,
        model_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, provider_name, model_name, original_error)


class AllAttemptsFailedError(AgentEngineError):
    """Raised when every failover attempt of a query failed.

    Attributes:
        last_error: The error of the final attempt, also chained as ``__cause__``.
        tried_models: Models a completion call was made with, in order.
        attempts: Number of completion calls made.
    """

    def __init__(
        self,
        last_error: Optional[Exception] = None,
        tried_models: Optional[List[str]] = None,
        attempts: int = 0,
    ) -> None:
        self.last_error = last_error
        self.tried_models = list(tried_models or [])
        self.attempts = attempts

        message = "All model calls failed"
        if last_error is not None:
            message += f", last error: {last_error}"
        super().__init__(message)

        if last_error is not None:
            self.__cause__ = last_error
