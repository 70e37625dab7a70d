"""Pipeline orchestration: discover, analyze with the cache, aggregate, render."""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from .classifier import classify
from .config import CliffnotesConfig
from .limiter import SlotLimiter
from .llm.runner import ServiceError, SummarizationService, Summary
from .logging import get_logger
from .models import (
    AnalysisResult,
    CacheEntry,
    FileAnalysis,
    FileRef,
    Outcome,
    RunReport,
    TokenUsage,
)
from .pricing import calculate_cost
from .prompting.builder import build_analysis_prompt, build_skipped_summary
from .rendering import DocumentFormatter
from .repo_scanner import RepoScanner
from .stores import CacheStore, compute_hash, is_cache_valid
from .tree import build_folder_tree, folders_with_content

ProgressCallback = Callable[[FileAnalysis, int, int], None]

_MINIFIED_MIN_LINES = 5


class FileAnalysisError(RuntimeError):
    """A single file could not be analyzed; the whole batch is aborted."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


@dataclass
class _Completion:
    """Event published by a per-file task when it finishes, successfully or not."""

    index: int
    result: Union[FileAnalysis, Exception]


def _utc_now() -> datetime:
    return datetime.now(UTC)


class Orchestrator:
    """Coordinates a cliffnotes run for one repository."""

    def __init__(
        self,
        config: CliffnotesConfig,
        service: SummarizationService | None = None,
        *,
        scanner: RepoScanner | None = None,
        formatter: DocumentFormatter | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self.service = service
        self.scanner = scanner or RepoScanner()
        self.formatter = formatter or DocumentFormatter(
            output_file=config.output_file, agent_file=config.agent_file
        )
        self._clock = clock or _utc_now
        self.logger = get_logger("orchestrator")

    # ------------------------------------------------------------------
    # Full pipeline

    def run(self, *, on_progress: ProgressCallback | None = None) -> RunReport:
        """Analyze the configured repository and write its documents.

        The cache is persisted only when every file succeeds; a failed batch
        leaves the previous cache file untouched.
        """
        root = self.config.root
        self.logger.info("Starting cliffnotes run for %s", root)
        files = self.scanner.discover(root, self.config)
        self.logger.info("Discovered %d files", len(files))

        cache = CacheStore.load(self.config.cache_path)
        self.logger.debug("Loaded %d cache entries from %s", len(cache), self.config.cache_path)
        pruned = cache.prune(ref.relative_path for ref in files)
        if pruned:
            self.logger.info("Pruned %d stale cache entries", len(pruned))
            for path in pruned:
                self.logger.debug("Pruned %s", path)

        analysis = asyncio.run(self.analyze_all(files, cache, on_progress=on_progress))
        tree = build_folder_tree(analysis.results)
        cost = calculate_cost(analysis.results, self.config.pricing)

        written: List[Path] = []
        if analysis.results:
            documents = self.formatter.render(
                root.name or "Repository",
                folders_with_content(tree),
                analysis,
                cost,
                generated_at=self._timestamp(),
            )
            written = self.formatter.write(root, documents)
        else:
            self.logger.warning("No source files found; check include/exclude patterns")

        cache.save(self.config.cache_path)
        self.logger.info(
            "Finished: %d analyzed, %d cached, estimated cost $%.4f",
            analysis.analyzed_count,
            analysis.cached_count,
            cost.estimated_cost,
        )
        return RunReport(
            root=root,
            analysis=analysis,
            tree=tree,
            cost=cost,
            pruned=pruned,
            written=tuple(written),
        )

    def prune_cache(self) -> List[str]:
        """Drop cache entries for files that are no longer discovered."""
        files = self.scanner.discover(self.config.root, self.config)
        cache = CacheStore.load(self.config.cache_path)
        removed = cache.prune(ref.relative_path for ref in files)
        if removed:
            cache.save(self.config.cache_path)
        return removed

    # ------------------------------------------------------------------
    # Batch analysis

    async def analyze_all(
        self,
        files: Iterable[FileRef],
        cache: CacheStore,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> AnalysisResult:
        """Analyze every file concurrently; results keep the input order.

        ``on_progress`` fires once per finished file, in completion order. The
        first failure cancels all outstanding work and is re-raised.
        """
        refs = list(files)
        total = len(refs)
        limiter = SlotLimiter(self.config.concurrency)
        events: asyncio.Queue[_Completion] = asyncio.Queue()

        async def analyze_and_report(index: int, ref: FileRef) -> None:
            try:
                analysis = await self.analyze_file(ref, cache, limiter)
            except Exception as exc:
                events.put_nowait(_Completion(index=index, result=exc))
            except BaseException as exc:
                # The driver waits for one event per task, so publish before re-raising.
                error = FileAnalysisError(ref.relative_path, f"analysis interrupted: {exc!r}")
                error.__cause__ = exc
                events.put_nowait(_Completion(index=index, result=error))
                raise
            else:
                events.put_nowait(_Completion(index=index, result=analysis))

        tasks = [
            asyncio.create_task(analyze_and_report(index, ref))
            for index, ref in enumerate(refs)
        ]
        results: List[Optional[FileAnalysis]] = [None] * total
        cached_count = analyzed_count = skipped_count = 0

        try:
            for completed in range(1, total + 1):
                event = await events.get()
                if isinstance(event.result, Exception):
                    self.logger.error(
                        "Aborting batch: %s failed (%s)", refs[event.index].relative_path, event.result
                    )
                    raise event.result
                analysis = event.result
                results[event.index] = analysis
                if analysis.from_cache:
                    cached_count += 1
                else:
                    analyzed_count += 1
                    if analysis.outcome is Outcome.SKIPPED:
                        skipped_count += 1
                self.logger.debug(
                    "[%d/%d] %s %s", completed, total, analysis.outcome.value, analysis.relative_path
                )
                if on_progress is not None:
                    on_progress(analysis, completed, total)
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        return AnalysisResult(
            results=[analysis for analysis in results if analysis is not None],
            cached_count=cached_count,
            analyzed_count=analyzed_count,
            skipped_count=skipped_count,
        )

    async def analyze_file(
        self, ref: FileRef, cache: CacheStore, limiter: SlotLimiter
    ) -> FileAnalysis:
        """Resolve one file from the cache, or summarize it under a limiter slot."""
        try:
            raw = ref.absolute_path.read_bytes()
        except OSError as exc:
            raise FileAnalysisError(ref.relative_path, f"unable to read file: {exc}") from exc
        content_hash = compute_hash(raw)

        entry = cache.get(ref.relative_path)
        if entry is not None and is_cache_valid(entry, content_hash):
            return FileAnalysis(
                file=ref,
                category=entry.category,
                summary=entry.summary,
                content_hash=content_hash,
                tokens=entry.tokens,
                outcome=Outcome.CACHED,
            )

        async with limiter.slot():
            content = raw.decode("utf-8", errors="replace")
            category = classify(ref.relative_path, content)

            if self._should_skip(content):
                self.logger.info("Skipping %s: too large or minified", ref.relative_path)
                summary_text = build_skipped_summary(ref.relative_path, category)
                tokens = TokenUsage()
                outcome = Outcome.SKIPPED
            else:
                prompt = build_analysis_prompt(ref.relative_path, content, category)
                try:
                    summary = await self._summarize(prompt)
                except Exception as exc:
                    raise FileAnalysisError(
                        ref.relative_path, f"summarization failed: {exc}"
                    ) from exc
                summary_text = summary.text
                tokens = TokenUsage(input=summary.input_tokens, output=summary.output_tokens)
                outcome = Outcome.ANALYZED

            cache.put(
                ref.relative_path,
                CacheEntry(
                    content_hash=content_hash,
                    category=category,
                    summary=summary_text,
                    analyzed_at=self._timestamp(),
                    tokens=tokens,
                ),
            )

        return FileAnalysis(
            file=ref,
            category=category,
            summary=summary_text,
            content_hash=content_hash,
            tokens=tokens,
            outcome=outcome,
        )

    # ------------------------------------------------------------------
    # Helpers

    async def _summarize(self, prompt: str) -> Summary:
        if self.service is None:
            raise ServiceError("No summarization service configured")
        summarize = self.service.summarize
        if inspect.iscoroutinefunction(summarize):
            return await summarize(prompt)
        return await asyncio.to_thread(summarize, prompt)

    def _should_skip(self, content: str) -> bool:
        if len(content) > self.config.max_file_chars:
            return True
        lines = content.split("\n")
        if len(lines) < _MINIFIED_MIN_LINES:
            return False
        return len(content) / len(lines) > self.config.max_avg_line_length

    def _timestamp(self) -> str:
        return self._clock().isoformat().replace("+00:00", "Z")


__all__ = ["FileAnalysisError", "Orchestrator", "ProgressCallback"]
