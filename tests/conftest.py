"""
Root-level pytest configuration for agent-engine tests.

Provides configuration documents, a scripted completion gateway, and engine
factories shared by the unit tests.
"""

import random
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

import pytest

from agent_engine.agent.engine import Engine
from agent_engine.llm.config import LLMConfig, ProviderConfig
from agent_engine.llm.exceptions import LLMConnectionError
from agent_engine.llm.provider import Completion, LLMProvider


SAMPLE_YAML = """
provider:
  - name: alpha
    api_key: key-alpha
    base_url: https://alpha.example.com/v1
    model:
      - a1
      - a2
      - a3
  - name: beta
    api_key: key-beta
    base_url: https://beta.example.com/v1
    model:
      - b1
"""


class ScriptedGateway(LLMProvider):
    """
    Completion gateway whose outcome is decided per model.

    Models listed in ``failing`` raise LLMConnectionError; every other model
    replies with ``"reply from <model>"``. Each call is recorded in ``calls``.
    """

    def __init__(self, failing: Iterable[str] = (), reasoning: Optional[str] = None):
        self.failing = set(failing)
        self.reasoning = reasoning
        self.calls: List[Dict[str, object]] = []

    def complete(self, api_key, base_url, model, prompt, *, provider_name=None, timeout=None):
        self.calls.append({
            "api_key": api_key,
            "base_url": base_url,
            "model": model,
            "prompt": prompt,
            "provider_name": provider_name,
            "timeout": timeout,
        })
        if model in self.failing:
            raise LLMConnectionError(provider_name=provider_name, model_name=model)
        return Completion(reply=f"reply from {model}", reasoning=self.reasoning)

    @property
    def called_models(self) -> List[str]:
        return [str(c["model"]) for c in self.calls]


@pytest.fixture
def scripted_gateway():
    """Return the ScriptedGateway class for tests that build their own engine."""
    return ScriptedGateway


@pytest.fixture
def sample_config() -> LLMConfig:
    """
    Configuration with provider ``alpha`` (a1, a2, a3) and ``beta`` (b1).
    """
    return LLMConfig(providers=[
        ProviderConfig(name="alpha", api_key="key-alpha",
                       base_url="https://alpha.example.com/v1", model=["a1", "a2", "a3"]),
        ProviderConfig(name="beta", api_key="key-beta",
                       base_url="https://beta.example.com/v1", model=["b1"]),
    ])


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write SAMPLE_YAML to a temporary conf.yaml and return its path."""
    path = tmp_path / "conf.yaml"
    path.write_text(SAMPLE_YAML, encoding="utf-8")
    return path


@pytest.fixture
def make_engine(sample_config: LLMConfig) -> Callable[..., Engine]:
    """
    Factory building an Engine over ``sample_config``.

    Example:
        def test_something(make_engine):
            engine = make_engine(failing={"a1"})
            ...
    """
    def _make(
        provider_name: str = "",
        model_id: str = "",
        failing: Iterable[str] = (),
        seed: int = 0,
        config: Optional[LLMConfig] = None,
    ) -> Engine:
        return Engine(
            config or sample_config,
            provider_name,
            model_id,
            config_path="/tmp/conf.yaml",
            gateway=ScriptedGateway(failing),
            rng=random.Random(seed),
        )

    return _make
