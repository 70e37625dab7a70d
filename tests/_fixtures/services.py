"""Summarization service doubles shared across tests."""

from __future__ import annotations

import asyncio
import threading
from typing import Dict, List, Optional

from cliffnotes.llm import ServiceError, Summary


def _path_from_prompt(prompt: str) -> str:
    for line in prompt.splitlines():
        if line.startswith("FILE: "):
            return line.split("FILE: ", 1)[1]
    return ""


class RecordingService:
    """Synchronous service that captures prompts and echoes the file path."""

    def __init__(self, *, fail_on: Optional[str] = None) -> None:
        self.prompts: List[str] = []
        self.fail_on = fail_on
        self._lock = threading.Lock()

    @property
    def paths(self) -> List[str]:
        return [_path_from_prompt(prompt) for prompt in self.prompts]

    def summarize(self, prompt: str) -> Summary:
        with self._lock:
            self.prompts.append(prompt)
        path = _path_from_prompt(prompt)
        if self.fail_on is not None and path == self.fail_on:
            raise ServiceError(f"service unavailable for {path}")
        return Summary(
            text=f"## {path}\n**Purpose:** summary of {path}",
            input_tokens=100,
            output_tokens=20,
        )


class GatedAsyncService:
    """Coroutine service that records how many calls overlap."""

    def __init__(self, *, delay: float = 0.01, delays: Optional[Dict[str, float]] = None) -> None:
        self.delay = delay
        self.delays = delays or {}
        self.active = 0
        self.max_active = 0
        self.started: List[str] = []

    async def summarize(self, prompt: str) -> Summary:
        path = _path_from_prompt(prompt)
        self.started.append(path)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delays.get(path, self.delay))
        finally:
            self.active -= 1
        return Summary(text=f"## {path}", input_tokens=10, output_tokens=5)


__all__ = ["GatedAsyncService", "RecordingService"]
