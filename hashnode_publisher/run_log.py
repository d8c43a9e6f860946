from __future__ import annotations

import json
import os
import traceback
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, TextIO


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _truncate(text: str, *, limit: int) -> str:
    s = str(text or "")
    if limit <= 0:
        return ""
    if len(s) <= limit:
        return s
    return s[: max(0, limit - 1)] + "…"


def _escape_annotation(message: str) -> str:
    # Workflow command data must not contain raw newlines or percent signs.
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def running_in_github_actions(environ: Mapping[str, str] | None = None) -> bool:
    env = os.environ if environ is None else environ
    return (env.get("GITHUB_ACTIONS") or "").strip().lower() == "true"


class RunLogger:
    """
    Structured event log for a publish run.

    Every event becomes a JSON object (one per line in the optional JSONL file) and is
    kept in `records`. Events that carry a human-readable `message` are also echoed to
    the console stream; with github_annotations enabled, warnings and errors are printed
    as GitHub Actions workflow commands so they show up as annotations.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        *,
        console: TextIO | None = None,
        github_annotations: bool = False,
        overwrite: bool = True,
        session_id: str | None = None,
    ) -> None:
        self._path = Path(path) if path is not None else None
        self._console = console
        self._annotations = bool(github_annotations)
        self._overwrite = bool(overwrite)
        self._session_id = (session_id or "").strip() or uuid.uuid4().hex
        self._fp: TextIO | None = None
        self._opened = False
        self.records: list[dict[str, Any]] = []

    @classmethod
    def open(
        cls,
        path: str | Path | None = None,
        *,
        console: TextIO | None = None,
        github_annotations: bool = False,
        overwrite: bool = True,
    ) -> "RunLogger":
        logger = cls(
            path,
            console=console,
            github_annotations=github_annotations,
            overwrite=overwrite,
        )
        logger._ensure_open()
        return logger

    def close(self) -> None:
        if self._fp is not None:
            try:
                self._fp.flush()
            finally:
                self._fp.close()
            self._fp = None

    def __enter__(self) -> "RunLogger":
        self._ensure_open()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    def info(
        self, event: str, *, message: str | None = None, file: str | None = None, **data: Any
    ) -> None:
        self.log("INFO", event, message=message, file=file, **data)

    def warning(
        self, event: str, *, message: str | None = None, file: str | None = None, **data: Any
    ) -> None:
        self.log("WARN", event, message=message, file=file, **data)

    def error(
        self, event: str, *, message: str | None = None, file: str | None = None, **data: Any
    ) -> None:
        self.log("ERROR", event, message=message, file=file, **data)

    def exception(
        self,
        event: str,
        *,
        exc: BaseException,
        message: str | None = None,
        file: str | None = None,
        **data: Any,
    ) -> None:
        err = {
            "type": type(exc).__name__,
            "message": _truncate(str(exc), limit=2000),
            "traceback": _truncate(
                "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
                limit=12000,
            ),
        }
        self.log("ERROR", event, message=message, file=file, error=err, **data)

    def events(self, level: str | None = None) -> list[str]:
        lvl = (level or "").strip().upper()
        return [r["event"] for r in self.records if not lvl or r["level"] == lvl]

    def log(
        self,
        level: str,
        event: str,
        *,
        message: str | None = None,
        file: str | None = None,
        **data: Any,
    ) -> None:
        lvl = (level or "").strip().upper() or "INFO"
        ev = (event or "").strip() or "event"

        record: dict[str, Any] = {
            "ts": _utc_now_iso(),
            "level": lvl,
            "event": ev,
            "session_id": self._session_id,
        }

        f = (file or "").strip()
        if f:
            record["file"] = f

        msg = (message or "").strip()
        if msg:
            record["message"] = msg

        if data:
            record["data"] = data

        self.records.append(record)
        self._write(record)
        if msg:
            self._echo(lvl, msg)

    def _echo(self, level: str, message: str) -> None:
        if self._console is None:
            return

        if self._annotations and level == "WARN":
            line = f"::warning::{_escape_annotation(message)}"
        elif self._annotations and level == "ERROR":
            line = f"::error::{_escape_annotation(message)}"
        elif level == "WARN":
            line = f"Warning: {message}"
        elif level == "ERROR":
            line = f"Error: {message}"
        else:
            line = message

        self._console.write(line + "\n")
        self._console.flush()

    def _ensure_open(self) -> None:
        if self._fp is not None or self._path is None:
            return

        self._path.parent.mkdir(parents=True, exist_ok=True)
        mode = "w" if self._overwrite and not self._opened else "a"
        self._fp = self._path.open(mode, encoding="utf-8", newline="\n")
        self._opened = True

    def _write(self, record: dict[str, Any]) -> None:
        if self._path is None:
            return
        self._ensure_open()

        payload = json.dumps(
            record,
            ensure_ascii=False,
            sort_keys=True,
            separators=(",", ":"),
            default=str,
        )

        if self._fp is None:
            return
        self._fp.write(payload + "\n")
        self._fp.flush()
