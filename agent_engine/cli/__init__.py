"""
agent-engine CLI Module.

Example:
    >>> from agent_engine.cli import cli
    >>> cli()
"""

from agent_engine.cli.main import cli

__all__ = ['cli']
