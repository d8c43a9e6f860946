from __future__ import annotations


class ConfigError(RuntimeError):
    """Raised when run-level configuration is missing or invalid."""


class FileProcessingError(RuntimeError):
    """Base class for failures scoped to a single Markdown file."""

    def __init__(self, message: str, *, filename: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.filename = filename

    def __str__(self) -> str:
        if self.filename:
            return f'"{self.filename}": {self.message}'
        return self.message

    def for_file(self, filename: str) -> "FileProcessingError":
        if not self.filename:
            self.filename = filename
        return self


class ReadError(FileProcessingError):
    """Raised when a Markdown file cannot be read."""


class ParseError(FileProcessingError):
    """Raised when the front matter block is malformed."""


class ValidationError(FileProcessingError):
    """Raised when required front matter fields are missing or invalid."""

    def __init__(self, problems: list[str], *, filename: str | None = None) -> None:
        self.problems = list(problems)
        super().__init__(
            "Validation failed: " + ", ".join(self.problems),
            filename=filename,
        )


class NoTagsError(FileProcessingError):
    """Raised when every tag normalizes to an empty slug."""


class UpstreamError(FileProcessingError):
    """Raised when the Hashnode API call fails or returns no post."""


class WriteBackError(FileProcessingError):
    """Raised when the published URL cannot be written back to the file."""
