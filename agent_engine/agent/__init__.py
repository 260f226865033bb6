"""Selection engine, failover dispatcher and command handlers."""

from agent_engine.agent.engine import Engine
from agent_engine.agent.failover import MAX_ATTEMPTS, QueryResult, dispatch_query
from agent_engine.agent.handlers import (
    EventHandler,
    HandlerRegistry,
    ListHandler,
    QueryHandler,
    dispatch,
)

__all__ = [
    "Engine",
    "QueryResult",
    "dispatch_query",
    "MAX_ATTEMPTS",
    "EventHandler",
    "HandlerRegistry",
    "QueryHandler",
    "ListHandler",
    "dispatch",
]
