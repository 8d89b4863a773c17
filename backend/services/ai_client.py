"""Async Anthropic client for single-shot workout generation, with optional Helicone proxy."""

import logging
import time
from typing import Any, Dict, Optional

import anthropic

from backend.observability import GenerationMetrics, traced
from backend.services.errors import ProviderError

logger = logging.getLogger(__name__)

HELICONE_BASE_URL = "https://anthropic.helicone.ai"
DEFAULT_TIMEOUT = 60.0


class AIClient:
    """Wraps the Anthropic async SDK. One outbound call per generate(); no retries."""

    def __init__(
        self,
        api_key: str,
        helicone_api_key: Optional[str] = None,
        helicone_enabled: bool = False,
        default_model: str = "claude-sonnet-4-5-20250929",
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._default_model = default_model

        kwargs: Dict[str, Any] = {"api_key": api_key, "timeout": timeout}
        extra_headers: Dict[str, str] = {}

        if helicone_enabled and helicone_api_key:
            kwargs["base_url"] = HELICONE_BASE_URL
            extra_headers["Helicone-Auth"] = f"Bearer {helicone_api_key}"
            logger.info("AI client configured with Helicone proxy")
        elif helicone_enabled:
            logger.warning("HELICONE_ENABLED=true but HELICONE_API_KEY not set. Using direct API.")

        if extra_headers:
            kwargs["default_headers"] = extra_headers

        self._client = anthropic.AsyncAnthropic(**kwargs)

    @property
    def default_model(self) -> str:
        return self._default_model

    @traced(name="ai_client.generate")
    async def generate(
        self,
        prompt: str,
        max_tokens: int,
        temperature: float,
        model: Optional[str] = None,
    ) -> str:
        """Send one user prompt and return the concatenated text of the reply.

        Raises:
            ProviderError: the call failed or the reply carried no text.
        """
        model = model or self._default_model
        start_time = time.time()

        try:
            message = await self._client.messages.create(
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.RateLimitError as e:
            logger.warning("Anthropic rate limit: %s", e)
            raise ProviderError("AI service is busy. Please try again shortly.", status_code=429) from e
        except anthropic.AuthenticationError as e:
            logger.error("Anthropic authentication failed: %s", e)
            raise ProviderError("AI service rejected the configured API key.", status_code=401) from e
        except anthropic.APIStatusError as e:
            logger.error("Anthropic API error (%s): %s", e.status_code, e)
            raise ProviderError(f"AI service error ({e.status_code}).", status_code=e.status_code) from e
        except anthropic.APIConnectionError as e:
            logger.error("Anthropic connection error: %s", e)
            raise ProviderError("Could not reach the AI service.") from e
        except anthropic.APIError as e:
            logger.error("Anthropic API error: %s", e)
            raise ProviderError(f"AI service error: {e}") from e
        finally:
            GenerationMetrics.model_call_seconds().record(
                time.time() - start_time, {"model": model}
            )

        text = "".join(
            block.text for block in (message.content or []) if getattr(block, "type", None) == "text"
        )
        if not text:
            raise ProviderError("AI service returned no text content.")

        usage = getattr(message, "usage", None)
        input_tokens = getattr(usage, "input_tokens", 0) or 0
        output_tokens = getattr(usage, "output_tokens", 0) or 0
        GenerationMetrics.tokens_used_total().add(input_tokens, {"type": "input", "model": model})
        GenerationMetrics.tokens_used_total().add(output_tokens, {"type": "output", "model": model})

        stop_reason = getattr(message, "stop_reason", None)
        if stop_reason == "max_tokens":
            logger.warning(
                "Model output hit max_tokens=%d (%d output tokens); response is likely truncated",
                max_tokens,
                output_tokens,
            )

        logger.info(
            "Model call complete: model=%s input_tokens=%d output_tokens=%d latency_ms=%d stop_reason=%s",
            model,
            input_tokens,
            output_tokens,
            round((time.time() - start_time) * 1000),
            stop_reason,
        )
        return text
