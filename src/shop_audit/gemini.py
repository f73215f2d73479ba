"""Gemini generative text client with structured output and retry/backoff."""

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

import httpx

from .config import GeminiSettings
from .schema import placeholder


LOGGER = logging.getLogger(__name__)

MISSING_KEY_TEXT = "Error: AI generation failed due to missing API key."


@dataclass
class GenerationResult:
    """Text returned by the model.

    ``degraded`` is True when no API key was configured and ``text`` is a
    locally built placeholder rather than model output.
    """
    text: str
    attempts: int
    degraded: bool = False


class GenerationError(Exception):
    """Terminal failure of a generate call."""

    def __init__(self, message: str, status_code: int | None = None, attempts: int = 0):
        super().__init__(message)
        self.status_code = status_code
        self.attempts = attempts


class _RetryableError(Exception):
    def __init__(self, error: GenerationError):
        super().__init__(str(error))
        self.error = error


def exponential_backoff(attempt: int) -> float:
    """Seconds to wait after the zero-based ``attempt`` failed: 1, 2, 4, ..."""
    return float(2 ** attempt)


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to call, how long to wait, and which statuses to retry."""
    max_attempts: int = 3
    backoff: Callable[[int], float] = exponential_backoff
    retryable_statuses: frozenset[int] = field(default_factory=lambda: frozenset({429}))
    sleep: Callable[[float], None] = time.sleep

    def is_retryable(self, status_code: int) -> bool:
        return status_code in self.retryable_statuses


class GeminiClient:
    """Client for the ``generateContent`` endpoint."""

    def __init__(
        self,
        settings: GeminiSettings | None = None,
        retry: RetryPolicy | None = None,
        http_client: httpx.Client | None = None,
    ):
        self.settings = settings or GeminiSettings()
        self.retry = retry or RetryPolicy()
        self._http_client = http_client
        self._warned_degraded = False

    def is_configured(self) -> bool:
        return bool(self.settings.api_key)

    def build_payload(
        self, system_prompt: str, user_query: str, schema: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "contents": [{"parts": [{"text": user_query}]}],
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "generationConfig": {},
        }
        if schema:
            payload["generationConfig"]["responseMimeType"] = "application/json"
            payload["generationConfig"]["responseSchema"] = schema
        return payload

    def generate(
        self, system_prompt: str, user_query: str, schema: dict[str, Any] | None = None
    ) -> GenerationResult:
        """Generate text, optionally constrained to a JSON ``schema``.

        Args:
            system_prompt: Persona and rules for the model
            user_query: The task itself
            schema: Optional responseSchema; the reply is then JSON text

        Returns:
            GenerationResult with the text and the number of attempts made

        Raises:
            GenerationError: on a non-retryable status, a safety block, an
                empty reply, or once the retry budget is spent. The cause of
                the last attempt is chained.
        """
        if not self.is_configured():
            return self._degraded(schema)

        payload = self.build_payload(system_prompt, user_query, schema)

        if self._http_client is not None:
            text, attempts = self._run(self._http_client, payload)
        else:
            with httpx.Client(timeout=self.settings.timeout) as client:
                text, attempts = self._run(client, payload)

        return GenerationResult(text=text, attempts=attempts)

    def _degraded(self, schema: dict[str, Any] | None) -> GenerationResult:
        if not self._warned_degraded:
            LOGGER.warning("GEMINI_API_KEY is not set; returning placeholder content")
            self._warned_degraded = True
        text = json.dumps(placeholder(schema)) if schema else MISSING_KEY_TEXT
        return GenerationResult(text=text, attempts=0, degraded=True)

    def _run(self, client: httpx.Client, payload: dict[str, Any]) -> tuple[str, int]:
        max_attempts = max(1, self.retry.max_attempts)

        for attempt in range(max_attempts):
            try:
                return self._attempt(client, payload, attempt + 1), attempt + 1
            except _RetryableError as e:
                LOGGER.warning("Attempt %d failed: %s", attempt + 1, e.error)
                if attempt == max_attempts - 1:
                    raise e.error from e.error.__cause__
                delay = self.retry.backoff(attempt)
                LOGGER.warning("Retrying in %ss...", delay)
                self.retry.sleep(delay)

        raise GenerationError("Retry budget exhausted", attempts=max_attempts)

    def _attempt(self, client: httpx.Client, payload: dict[str, Any], attempt: int) -> str:
        try:
            response = client.post(
                self.settings.endpoint,
                headers={
                    "Content-Type": "application/json",
                    "x-goog-api-key": self.settings.api_key or "",
                },
                json=payload,
            )
        except httpx.TransportError as e:
            error = GenerationError(f"Gemini request failed: {e}", attempts=attempt)
            error.__cause__ = e
            raise _RetryableError(error) from e

        if response.status_code != 200:
            error = GenerationError(
                f"API call failed with status: {response.status_code} - "
                f"{response.reason_phrase}. Details: {response.text[:500]}",
                status_code=response.status_code,
                attempts=attempt,
            )
            if self.retry.is_retryable(response.status_code):
                if response.status_code == 429:
                    LOGGER.warning("Rate limit hit on attempt %d", attempt)
                raise _RetryableError(error)
            raise error

        try:
            data = response.json()
        except ValueError as e:
            raise GenerationError(
                "Gemini API returned a non-JSON body.", status_code=200, attempts=attempt
            ) from e

        if not isinstance(data, dict):
            raise GenerationError(
                "Gemini API returned an unexpected response body.", status_code=200, attempts=attempt
            )
        return self._extract_text(data, attempt)

    @staticmethod
    def _extract_text(data: dict[str, Any], attempt: int) -> str:
        block_reason = (data.get("promptFeedback") or {}).get("blockReason")
        candidates = data.get("candidates") or []
        first = candidates[0] if candidates else {}

        if block_reason or first.get("finishReason") == "SAFETY":
            raise GenerationError(
                "Content generation failed due to safety settings.", attempts=attempt
            )

        parts = (first.get("content") or {}).get("parts") or []
        text = parts[0].get("text") if parts else None
        if not text:
            raise GenerationError("Gemini API returned no usable content.", attempts=attempt)
        return text
