"""agent-engine: command-line LLM client with provider selection and model failover."""

__version__ = "0.1.0"
