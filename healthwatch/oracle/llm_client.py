"""
Thin async client over LiteLLM for JSON-mode completions.

Every call is bounded by the configured timeout. Transport failures, timeouts
and empty responses raise OracleUnavailable; a response that is not a JSON
object raises OracleError. Callers wrap both into their operation's error.
"""

import asyncio
import json
import logging
import re
import time
from typing import Any, Dict, Optional

import litellm

from healthwatch.config import OracleConfig, settings
from healthwatch.exceptions import OracleError, OracleUnavailable
from healthwatch.logging_config import get_logger
from healthwatch.metrics import ORACLE_DURATION

litellm.suppress_debug_info = True
logging.getLogger("LiteLLM").setLevel(logging.WARNING)

logger = get_logger(__name__)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def parse_json_payload(text: str) -> Dict[str, Any]:
    """
    Parse a model response into a JSON object.

    Markdown code fences around the object are tolerated.

    Raises:
        OracleError: If the text is empty, not JSON, or not an object
    """
    cleaned = (text or "").strip()
    match = _CODE_FENCE.match(cleaned)
    if match:
        cleaned = match.group(1)

    if not cleaned:
        raise OracleError("Oracle returned an empty payload")

    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise OracleError(
            "Oracle returned malformed JSON",
            details={"error": str(e), "excerpt": cleaned[:200]}
        ) from e

    if not isinstance(payload, dict):
        raise OracleError(
            "Oracle payload is not a JSON object",
            details={"type": type(payload).__name__}
        )
    return payload


class LLMClient:
    """Issues JSON-mode completions against the configured model."""

    def __init__(self, config: Optional[OracleConfig] = None):
        self.config = config or settings.oracle
        litellm.drop_params = True

    def _build_kwargs(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.config.temperature,
            "response_format": {"type": "json_object"},
            "num_retries": self.config.max_retries,
            "timeout": self.config.timeout_seconds,
        }
        if self.config.api_key:
            kwargs["api_key"] = self.config.api_key
        return kwargs

    async def generate_json(
        self,
        system_prompt: str,
        user_prompt: str,
        operation: str = "completion"
    ) -> Dict[str, Any]:
        """
        Run one completion and return its JSON object.

        Args:
            system_prompt: System message
            user_prompt: User message
            operation: Label used in logs and metrics

        Returns:
            Parsed JSON object

        Raises:
            OracleUnavailable: If the call fails, times out or returns nothing
            OracleError: If the response is not a JSON object
        """
        kwargs = self._build_kwargs(system_prompt, user_prompt)
        start_time = time.time()

        try:
            response = await asyncio.wait_for(
                litellm.acompletion(**kwargs),
                timeout=self.config.timeout_seconds
            )
        except asyncio.TimeoutError as e:
            raise OracleUnavailable(
                f"Oracle call timed out after {self.config.timeout_seconds}s",
                details={"operation": operation, "model": self.config.model}
            ) from e
        except Exception as e:
            raise OracleUnavailable(
                f"Oracle call failed: {str(e)}",
                details={
                    "operation": operation,
                    "model": self.config.model,
                    "error_type": type(e).__name__
                }
            ) from e
        finally:
            ORACLE_DURATION.labels(operation=operation).observe(time.time() - start_time)

        if not getattr(response, "choices", None):
            raise OracleUnavailable(
                "Oracle returned no choices",
                details={"operation": operation, "model": self.config.model}
            )

        text = response.choices[0].message.content or ""
        logger.debug(
            "Oracle response received",
            operation=operation,
            model=self.config.model,
            response_chars=len(text),
            duration_seconds=round(time.time() - start_time, 3)
        )
        return parse_json_payload(text)
