from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from .config import ensure_source_dir
from .config_schema import PublisherConfig
from .errors import FileProcessingError
from .payload import RequestPlan
from .processor import FileResult, PostSender, plan_markdown_file, process_markdown_file
from .run_log import RunLogger

MARKDOWN_EXTENSIONS = (".md", ".markdown")


@dataclass(frozen=True)
class FileOutcome:
    """Tagged per-file result: either `result` (or `plan` in check mode) or `error`."""

    filename: str
    result: FileResult | None = None
    plan: RequestPlan | None = None
    error: FileProcessingError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchResult:
    succeeded: int = 0
    failed: int = 0
    outcomes: list[FileOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.succeeded + self.failed

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def record(self, outcome: FileOutcome) -> None:
        self.outcomes.append(outcome)
        if outcome.ok:
            self.succeeded += 1
        else:
            self.failed += 1


def is_markdown_file(path: Path) -> bool:
    return path.suffix.lower() in MARKDOWN_EXTENSIONS and path.is_file()


def list_markdown_files(src: Path) -> list[Path]:
    """
    Markdown files directly inside src, in directory listing order.

    The order is whatever the filesystem returns; it is not sorted and may differ
    between platforms.
    """
    return [p for p in src.iterdir() if is_markdown_file(p)]


def _run_files(
    config: PublisherConfig,
    *,
    log: RunLogger,
    handle: Callable[[Path], FileOutcome],
) -> BatchResult:
    src = ensure_source_dir(config)
    files = list_markdown_files(src)
    result = BatchResult()

    if not files:
        log.warning(
            "no_markdown_files",
            message=f'No markdown files found in "{src}"',
            src=str(src),
        )
        return result

    log.info(
        "markdown_files_found",
        message=f"Found {len(files)} markdown file(s) to process",
        src=str(src),
        count=len(files),
    )

    # One file at a time keeps the run under Hashnode's rate limits.
    for path in files:
        outcome = handle(path)
        result.record(outcome)
        if outcome.error is not None:
            log.error(
                "file_failed",
                message=f'Failed to process "{outcome.filename}": {outcome.error.message}',
                file=outcome.filename,
                error_type=type(outcome.error).__name__,
            )

    log.info(
        "batch_summary",
        message=f"Summary: {result.succeeded} successful, {result.failed} failed",
        succeeded=result.succeeded,
        failed=result.failed,
    )

    if result.failed:
        log.error(
            "batch_failed",
            message=(
                f"{result.failed} file(s) failed to process. "
                "Check the logs above for details."
            ),
            failed=result.failed,
        )

    return result


def run_batch(config: PublisherConfig, *, client: PostSender, log: RunLogger) -> BatchResult:
    """
    Create or update one Hashnode post per Markdown file in config.src.

    A failing file is counted and logged; the remaining files are still processed.
    Raises ConfigError only for run-level problems (missing source directory).
    """

    def _handle(path: Path) -> FileOutcome:
        try:
            res = process_markdown_file(path, client=client, config=config, log=log)
        except FileProcessingError as e:
            return FileOutcome(filename=path.name, error=e)
        return FileOutcome(filename=path.name, result=res)

    return _run_files(config, log=log, handle=_handle)


def check_batch(config: PublisherConfig, *, log: RunLogger) -> BatchResult:
    """Validate every file and plan its mutation without calling the API."""

    def _handle(path: Path) -> FileOutcome:
        try:
            plan = plan_markdown_file(path, config=config, log=log)
        except FileProcessingError as e:
            return FileOutcome(filename=path.name, error=e)

        log.info(
            "file_checked",
            message=f'"{path.name}": would {plan.request.operation} "{plan.request.input["title"]}"',
            file=path.name,
            operation=plan.request.operation,
            post_id=plan.post_id,
        )
        return FileOutcome(filename=path.name, plan=plan)

    return _run_files(config, log=log, handle=_handle)
