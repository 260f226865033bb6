"""Command handlers and the registry that dispatches to them."""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from agent_engine.agent.engine import Engine
from agent_engine.agent.failover import dispatch_query
from agent_engine.llm.exceptions import EmptyQueryError

logger = logging.getLogger(__name__)


class EventHandler(ABC):
    """Base interface for command handlers."""

    @abstractmethod
    def handle(self, engine: Engine, params: str, event: str) -> Any:
        """Handle one command.

        Args:
            engine: Engine holding the current selection.
            params: Raw parameter text of the command.
            event: Name the handler was dispatched under.

        Returns:
            JSON-serializable result data.
        """
        pass


def parse_query_params(params: str) -> str:
    """Extract the prompt from query parameters.

    Text that parses as a JSON object yields its ``query`` field; any other
    text is the prompt itself.

    Examples:
        >>> parse_query_params('{"query": "hello"}')
        'hello'
        >>> parse_query_params("hello")
        'hello'
    """
    try:
        payload = json.loads(params)
    except (TypeError, ValueError):
        return params

    if not isinstance(payload, dict):
        return params

    query = payload.get("query")
    return query if isinstance(query, str) else ""


class QueryHandler(EventHandler):
    """Sends a prompt to the current provider with model failover."""

    def handle(self, engine: Engine, params: str, event: str) -> Dict[str, Any]:
        query = parse_query_params(params)
        if not query.strip():
            raise EmptyQueryError()
        return dispatch_query(engine, query).model_dump()


class ListHandler(EventHandler):
    """Lists the configured providers and the current selection."""

    def handle(self, engine: Engine, params: str, event: str) -> Dict[str, Any]:
        providers = engine.get_available_providers()
        providers_info = engine.get_all_providers_info()
        current_provider = engine.get_current_provider_name()

        provider_infos: List[Dict[str, Any]] = []
        for name in providers:
            info = providers_info[name]
            provider_infos.append({
                "name": name,
                "base_url": info["base_url"],
                "models": info["models"],
                "is_current": name == current_provider,
            })

        return {
            "config_path": engine.get_config_path(),
            "current_provider": current_provider,
            "current_model": engine.model_id,
            "current_base_url": engine.base_url,
            "providers": provider_infos,
            "total_providers": len(providers),
        }


class HandlerRegistry:
    """Registry mapping command names to handlers."""

    def __init__(self, handlers: Optional[Dict[str, EventHandler]] = None):
        self._handlers: Dict[str, EventHandler] = dict(handlers or {})

    def register(self, name: str, handler: EventHandler) -> None:
        """Register ``handler`` under ``name``, replacing any previous one."""
        self._handlers[name] = handler
        logger.debug(f"Registered handler: {name}")

    def get(self, name: str) -> Optional[EventHandler]:
        return self._handlers.get(name)

    def list_commands(self) -> List[str]:
        return list(self._handlers.keys())

    def dispatch(self, engine: Engine, command: str, params: str) -> Tuple[Any, bool]:
        """Run the handler registered for ``command``.

        Returns:
            ``(result, matched)``. ``matched`` is False, with a None result,
            when no handler is registered for ``command``.

        Raises:
            Exception: Whatever the handler raises.
        """
        handler = self._handlers.get(command)
        if handler is None:
            logger.warning(f"No handler registered for command: {command}")
            return None, False
        return handler.handle(engine, params, command), True


def default_registry() -> HandlerRegistry:
    """Build the registry of built-in commands."""
    return HandlerRegistry({
        "query": QueryHandler(),
        "list": ListHandler(),
    })


_registry: Optional[HandlerRegistry] = None


def get_registry() -> HandlerRegistry:
    """Get the process-wide registry, building it on first use."""
    global _registry
    if _registry is None:
        _registry = default_registry()
    return _registry


def dispatch(
    engine: Engine,
    command: str,
    params: str,
    registry: Optional[HandlerRegistry] = None,
) -> Tuple[Any, bool]:
    """Dispatch ``command`` with ``params`` to its handler.

    Args:
        engine: Engine holding the current selection.
        command: Command name, e.g. ``query`` or ``list``.
        params: Raw parameter text.
        registry: Registry to use; defaults to the built-in commands.

    Returns:
        ``(result, matched)``; see ``HandlerRegistry.dispatch``.
    """
    return (registry or get_registry()).dispatch(engine, command, params)
