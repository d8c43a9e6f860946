from __future__ import annotations

import argparse
import sys
from typing import Any, Sequence

from .client import HashnodeClient
from .config import resolve_config, resolve_runtime_secrets
from .errors import ConfigError
from .run_log import RunLogger, running_in_github_actions
from .runner import BatchResult, check_batch, run_batch

EXIT_FILES_FAILED = 3


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--src",
        help="Directory containing the Markdown files (falls back to INPUT_SRC).",
    )
    parser.add_argument(
        "--publication-id",
        dest="publication_id",
        help="Hashnode publication id (falls back to INPUT_PUBLICATION_ID).",
    )
    parser.add_argument(
        "--post-status",
        dest="post_status",
        help="Either 'public' (default) or 'draft'.",
    )
    parser.add_argument(
        "--update-existing-posts",
        dest="update_existing_posts",
        action="store_true",
        default=None,
        help="Update posts whose front matter already has a publishedUrl.",
    )
    parser.add_argument(
        "--config",
        help="Optional YAML config file with the same keys.",
    )
    parser.add_argument(
        "--token-env",
        dest="token_env",
        help="Environment variable holding the Hashnode access token (default HASHNODE_PAT).",
    )
    parser.add_argument(
        "--api-url",
        dest="api_url",
        help="Hashnode GraphQL endpoint.",
    )
    parser.add_argument(
        "--log-file",
        dest="log_file",
        help="Write a JSONL event log to this path.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hashnode_publisher")

    subparsers = parser.add_subparsers(dest="command", required=True)

    publish = subparsers.add_parser(
        "publish",
        help="Create or update one Hashnode post per Markdown file.",
    )
    _add_common_arguments(publish)
    publish.set_defaults(_handler=_cmd_publish)

    check = subparsers.add_parser(
        "check",
        help="Validate front matter and show planned operations without calling the API.",
    )
    _add_common_arguments(check)
    check.set_defaults(_handler=_cmd_check)

    return parser


def _eprint(message: str) -> None:
    print(message, file=sys.stderr)


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    keys = (
        "src",
        "publication_id",
        "post_status",
        "update_existing_posts",
        "token_env",
        "api_url",
    )
    return {k: getattr(args, k, None) for k in keys}


def _open_log(args: argparse.Namespace) -> RunLogger:
    return RunLogger.open(
        getattr(args, "log_file", None),
        console=sys.stdout,
        github_annotations=running_in_github_actions(),
    )


def _print_counts(result: BatchResult) -> None:
    print(f"files={result.total}")
    print(f"succeeded={result.succeeded}")
    print(f"failed={result.failed}")


def _cmd_publish(args: argparse.Namespace) -> int:
    with _open_log(args) as log:
        cfg = resolve_config(_overrides(args), config_path=args.config)
        secrets = resolve_runtime_secrets(cfg)

        log.info(
            "config_loaded",
            src=cfg.src,
            post_status=cfg.post_status,
            update_existing_posts=cfg.update_existing_posts,
            token_env=cfg.token_env,
        )

        client = HashnodeClient(secrets.access_token, api_url=cfg.api_url)
        result = run_batch(cfg, client=client, log=log)

    _print_counts(result)
    return 0 if result.ok else EXIT_FILES_FAILED


def _cmd_check(args: argparse.Namespace) -> int:
    with _open_log(args) as log:
        cfg = resolve_config(_overrides(args), config_path=args.config)
        result = check_batch(cfg, log=log)

    _print_counts(result)
    return 0 if result.ok else EXIT_FILES_FAILED


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        handler = getattr(args, "_handler")
        return int(handler(args))
    except ConfigError as e:
        _eprint(f"Action failed: {e}")
        return 2
    except KeyboardInterrupt:
        _eprint("Interrupted")
        return 130
    except Exception as e:
        _eprint(f"Unexpected error: {e}")
        return 1
