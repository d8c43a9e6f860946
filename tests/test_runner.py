from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from typing import Any
from unittest import mock

from hashnode_publisher.client import RemotePost
from hashnode_publisher.config_schema import PublisherConfig
from hashnode_publisher.errors import ConfigError, ValidationError, WriteBackError
from hashnode_publisher.payload import PostRequest
from hashnode_publisher.run_log import RunLogger
from hashnode_publisher.runner import check_batch, list_markdown_files, run_batch

_real_open = Path.open


def _locked_open(self: Path, mode: str = "r", *args: Any, **kwargs: Any) -> Any:
    if "w" in mode and self.name == "locked.md":
        raise PermissionError(f"Permission denied: '{self}'")
    return _real_open(self, mode, *args, **kwargs)


class _CountingHashnode:
    def __init__(self) -> None:
        self.requests: list[PostRequest] = []

    def send(self, request: PostRequest) -> RemotePost | None:
        self.requests.append(request)
        n = len(self.requests)
        return RemotePost(id=f"p{n}", title=request.input["title"], url=f"https://x/post-{n}")


def _valid(title: str) -> str:
    return f"---\ntitle: {title}\ntags: [python]\n---\n\nBody of {title}.\n"


class TestListMarkdownFiles(unittest.TestCase):
    def test_filters_by_extension_case_insensitively(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            for name in ["a.md", "b.MARKDOWN", "c.Md", "notes.txt", "image.png"]:
                (root / name).write_text("x", encoding="utf-8")
            (root / "nested.md").mkdir()

            names = sorted(p.name for p in list_markdown_files(root))
            self.assertEqual(names, ["a.md", "b.MARKDOWN", "c.Md"])


class TestRunBatch(unittest.TestCase):
    def test_one_invalid_file_fails_the_run_but_not_the_others(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            (root / "one.md").write_text(_valid("One"), encoding="utf-8")
            (root / "two.markdown").write_text(_valid("Two"), encoding="utf-8")
            (root / "bad.md").write_text("---\ntags: [python]\n---\nbody\n", encoding="utf-8")

            fake = _CountingHashnode()
            log = RunLogger()
            result = run_batch(
                PublisherConfig(src=td, publication_id="pub_1"), client=fake, log=log
            )

            self.assertEqual(result.succeeded, 2)
            self.assertEqual(result.failed, 1)
            self.assertFalse(result.ok)
            self.assertEqual(len(fake.requests), 2)

            failed = [o for o in result.outcomes if not o.ok]
            self.assertEqual(failed[0].filename, "bad.md")
            self.assertIsInstance(failed[0].error, ValidationError)

            self.assertIn("file_failed", log.events("ERROR"))
            self.assertIn("batch_failed", log.events("ERROR"))
            self.assertIn("batch_summary", log.events("INFO"))

    def test_all_files_succeed(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            (Path(td) / "one.md").write_text(_valid("One"), encoding="utf-8")

            result = run_batch(
                PublisherConfig(src=td, publication_id="pub_1"),
                client=_CountingHashnode(),
                log=RunLogger(),
            )

            self.assertTrue(result.ok)
            self.assertEqual(result.total, 1)
            self.assertIsNotNone(result.outcomes[0].result)

    def test_empty_directory_warns_and_succeeds(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            (Path(td) / "readme.txt").write_text("x", encoding="utf-8")
            fake = _CountingHashnode()
            log = RunLogger()

            result = run_batch(
                PublisherConfig(src=td, publication_id="pub_1"), client=fake, log=log
            )

            self.assertTrue(result.ok)
            self.assertEqual(result.total, 0)
            self.assertEqual(fake.requests, [])
            self.assertIn("no_markdown_files", log.events("WARN"))

    def test_missing_source_directory_is_a_config_error(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            missing = str(Path(td) / "nope")
            fake = _CountingHashnode()

            with self.assertRaises(ConfigError):
                run_batch(
                    PublisherConfig(src=missing, publication_id="pub_1"),
                    client=fake,
                    log=RunLogger(),
                )
            self.assertEqual(fake.requests, [])

    def test_write_back_failure_counts_as_failed_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            (root / "one.md").write_text(_valid("One"), encoding="utf-8")
            (root / "locked.md").write_text(_valid("Locked"), encoding="utf-8")

            fake = _CountingHashnode()
            with mock.patch.object(Path, "open", _locked_open):
                result = run_batch(
                    PublisherConfig(src=td, publication_id="pub_1"),
                    client=fake,
                    log=RunLogger(),
                )

            self.assertEqual(result.succeeded, 1)
            self.assertEqual(result.failed, 1)
            self.assertFalse(result.ok)
            self.assertEqual(len(fake.requests), 2)

            failed = [o for o in result.outcomes if not o.ok][0]
            self.assertEqual(failed.filename, "locked.md")
            self.assertIsInstance(failed.error, WriteBackError)

    def test_source_path_that_is_a_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "post.md"
            path.write_text(_valid("One"), encoding="utf-8")

            with self.assertRaises(ConfigError):
                run_batch(
                    PublisherConfig(src=str(path), publication_id="pub_1"),
                    client=_CountingHashnode(),
                    log=RunLogger(),
                )


class TestCheckBatch(unittest.TestCase):
    def test_check_plans_without_calling_api(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            (root / "one.md").write_text(_valid("One"), encoding="utf-8")
            (root / "bad.md").write_text("no front matter\n", encoding="utf-8")

            log = RunLogger()
            result = check_batch(PublisherConfig(src=td, publication_id="pub_1"), log=log)

            self.assertEqual(result.succeeded, 1)
            self.assertEqual(result.failed, 1)
            ok = [o for o in result.outcomes if o.ok][0]
            self.assertIsNotNone(ok.plan)
            self.assertEqual(ok.plan.request.operation, "publish")
            self.assertIn("file_checked", log.events())


if __name__ == "__main__":
    unittest.main()
