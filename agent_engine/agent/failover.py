"""Query dispatch with model failover.

A query starts on the engine's current model. When a completion call fails,
the next attempt switches to a model of the same provider that has not been
tried yet, picked at random. At most ``MAX_ATTEMPTS`` calls are made, and
the engine's model is restored afterwards whatever the outcome.
"""

import logging
import time
from typing import List, Optional

from pydantic import BaseModel

from agent_engine.agent.engine import Engine
from agent_engine.llm.exceptions import (
    AllAttemptsFailedError,
    GatewayCallError,
    UnsupportedModelError,
)

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3


class QueryResult(BaseModel):
    """Outcome of a successful query dispatch."""

    query: str
    reply: str
    think: Optional[str] = None
    model_used: str
    provider_used: str
    attempts: int


def dispatch_query(engine: Engine, prompt: str) -> QueryResult:
    """Send ``prompt`` to the current provider, rotating models on failure.

    Args:
        engine: Engine holding the selection, gateway and random source.
        prompt: User prompt text.

    Returns:
        The reply together with the model and provider that produced it.

    Raises:
        ConfigNotLoadedError: If the engine is uninitialized.
        AllAttemptsFailedError: If every attempt failed; wraps the last error.
    """
    with engine.preserve_model() as original_model_id:
        available_models = engine.get_available_models()
        provider_name = engine.get_current_provider_name()

        tried_models = {original_model_id}
        attempted: List[str] = []
        max_attempts = min(MAX_ATTEMPTS, len(available_models))
        last_error: Optional[Exception] = None

        for attempt in range(1, max_attempts + 1):
            if attempt > 1:
                untried = [m for m in available_models if m not in tried_models]
                if not untried:
                    logger.info("All available models tried, nothing left to rotate to")
                    break

                candidate = engine.rng.choice(untried)
                logger.info(
                    f"Attempt {attempt}/{max_attempts}: switching to model {candidate} "
                    f"(provider: {provider_name})"
                )
                try:
                    engine.switch_model(candidate)
                except UnsupportedModelError as e:
                    logger.warning(f"Failed to switch model: {e}")
                    last_error = e
                    continue
                tried_models.add(candidate)
            else:
                logger.info(
                    f"Attempt {attempt}/{max_attempts}: using current model {engine.model_id} "
                    f"(provider: {provider_name})"
                )

            attempted.append(engine.model_id)
            t0 = time.perf_counter()
            try:
                completion = engine.gateway.complete(
                    engine.get_api_key(),
                    engine.base_url,
                    engine.model_id,
                    prompt,
                    provider_name=provider_name,
                    timeout=engine.timeout,
                )
            except GatewayCallError as e:
                last_error = e
                logger.error(
                    f"Model {engine.model_id} failed after {time.perf_counter() - t0:.3f}s: {e}"
                )
                continue
            except Exception as e:
                last_error = e
                logger.error(
                    f"Model {engine.model_id} crashed after {time.perf_counter() - t0:.3f}s: "
                    f"{type(e).__name__}: {e}"
                )
                continue

            logger.info(
                f"Model {engine.model_id} succeeded on attempt {attempt} "
                f"in {time.perf_counter() - t0:.3f}s"
            )
            return QueryResult(
                query=prompt,
                reply=completion.reply,
                think=completion.reasoning,
                model_used=engine.model_id,
                provider_used=engine.get_current_provider_name(),
                attempts=attempt,
            )

        raise AllAttemptsFailedError(
            last_error=last_error,
            tried_models=attempted,
            attempts=len(attempted),
        )
