"""Adapter around the hosted summarization model (Anthropic Messages API)."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Callable, Optional, Protocol
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

ANTHROPIC_VERSION = "2023-06-01"


class ServiceError(RuntimeError):
    """Raised when the summarization service cannot produce a response."""


@dataclass(frozen=True)
class Summary:
    """Text returned by the service together with its token accounting."""

    text: str
    input_tokens: int = 0
    output_tokens: int = 0


class SummarizationService(Protocol):
    """Anything that turns a prompt into a :class:`Summary`."""

    def summarize(self, prompt: str) -> Summary:  # pragma: no cover - protocol
        ...


@dataclass
class LLMRequest:
    """Represents a single summarization request."""

    prompt: str
    model: str
    max_tokens: int
    base_url: str
    api_key: str
    request_timeout: Optional[float]


class AnthropicRunner:
    """Sends prompts to the Messages API and returns text plus usage."""

    DEFAULT_MODEL = "claude-opus-4-5-20251101"
    DEFAULT_BASE_URL = "https://api.anthropic.com"

    def __init__(
        self,
        api_key: str,
        *,
        model: str | None = None,
        max_tokens: int = 4096,
        base_url: str | None = None,
        request_timeout: Optional[float] = 120.0,
        transport: Callable[[LLMRequest], Summary] | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("An API key is required for the summarization service.")
        self.api_key = api_key
        self.model = model or self.DEFAULT_MODEL
        self.max_tokens = max_tokens
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self.request_timeout = request_timeout
        self._transport = transport or self._http_transport

    def summarize(self, prompt: str) -> Summary:
        """Send ``prompt`` to the configured model."""
        request = LLMRequest(
            prompt=prompt,
            model=self.model,
            max_tokens=self.max_tokens,
            base_url=self.base_url,
            api_key=self.api_key,
            request_timeout=self.request_timeout,
        )
        return self._transport(request)

    @staticmethod
    def _http_transport(request: LLMRequest) -> Summary:
        endpoint = f"{request.base_url}/v1/messages"
        payload = {
            "model": request.model,
            "max_tokens": request.max_tokens,
            "messages": [{"role": "user", "content": request.prompt}],
        }
        headers = {
            "Content-Type": "application/json",
            "x-api-key": request.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }
        http_request = Request(
            endpoint,
            data=json.dumps(payload).encode("utf-8"),
            headers=headers,
            method="POST",
        )
        timeout = request.request_timeout or 120.0

        try:
            with urlopen(http_request, timeout=timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = detail.strip() or exc.reason
            raise ServiceError(
                f"Summarization request failed with status {exc.code}: {message}"
            ) from exc
        except URLError as exc:
            raise ServiceError(f"Summarization request failed: {exc.reason}") from exc
        except TimeoutError as exc:
            raise ServiceError("Summarization request timed out") from exc

        try:
            response_payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ServiceError("Summarization service returned invalid JSON") from exc
        if not isinstance(response_payload, dict):
            raise ServiceError("Summarization service returned an unexpected payload")

        text = AnthropicRunner._extract_text(response_payload)
        if not text:
            raise ServiceError("Summarization service returned an empty response")
        input_tokens, output_tokens = AnthropicRunner._extract_usage(response_payload)
        return Summary(text=text.strip(), input_tokens=input_tokens, output_tokens=output_tokens)

    @staticmethod
    def _extract_text(payload: dict[str, object]) -> str:
        blocks = payload.get("content")
        if not isinstance(blocks, list):
            return ""
        parts = [
            block["text"]
            for block in blocks
            if isinstance(block, dict) and block.get("type") == "text" and isinstance(block.get("text"), str)
        ]
        return "".join(parts)

    @staticmethod
    def _extract_usage(payload: dict[str, object]) -> tuple[int, int]:
        usage = payload.get("usage")
        if not isinstance(usage, dict):
            return 0, 0
        input_tokens = usage.get("input_tokens")
        output_tokens = usage.get("output_tokens")
        return (
            input_tokens if isinstance(input_tokens, int) else 0,
            output_tokens if isinstance(output_tokens, int) else 0,
        )
