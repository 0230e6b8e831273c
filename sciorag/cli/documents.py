"""Standalone CLI for the document operations.

Usage::

    python -m sciorag.cli import --topic "designer genes"
    python -m sciorag.cli preprocess
    python -m sciorag.cli topics
    python -m sciorag.cli provider --set google
    python -m sciorag.cli retrieve --query "fiber burn test" --topic forensics -k 5

Every command prints one JSON object.  The exit code is ``0`` when the
operation reports ``ok`` and ``1`` otherwise.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from sciorag.config.loader import load_settings
from sciorag.config.settings import Settings
from sciorag.main import Services, build_services
from sciorag.utils.errors import ConfigurationError
from sciorag.utils.logging import configure_logging

# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


async def _handle_import(args: argparse.Namespace, services: Services) -> tuple[dict[str, Any], bool]:
    status = await services.documents.import_topic(args.topic)
    return status.model_dump(), status.ok


async def _handle_preprocess(args: argparse.Namespace, services: Services) -> tuple[dict[str, Any], bool]:
    status = await services.documents.preprocess()
    return status.model_dump(), status.ok


async def _handle_topics(args: argparse.Namespace, services: Services) -> tuple[dict[str, Any], bool]:
    return (await services.documents.list_topics()).model_dump(), True


async def _handle_provider(args: argparse.Namespace, services: Services) -> tuple[dict[str, Any], bool]:
    if args.set:
        status = await services.documents.set_llm_provider(args.set)
        return status.model_dump(), status.ok
    return (await services.documents.get_llm_provider()).model_dump(), True


async def _handle_retrieve(args: argparse.Namespace, services: Services) -> tuple[dict[str, Any], bool]:
    snippets = await services.documents.retrieve(
        topic=args.topic,
        query=args.query,
        k=args.k,
        provider=args.provider,
    )
    return {"topic": args.topic, "query": args.query, "snippets": snippets}, True


_HANDLERS = {
    "import": _handle_import,
    "preprocess": _handle_preprocess,
    "topics": _handle_topics,
    "provider": _handle_provider,
    "retrieve": _handle_retrieve,
}


async def _run(args: argparse.Namespace, app_settings: Settings) -> int:
    services = build_services(app_settings)
    try:
        await services.initialize()
        payload, ok = await _HANDLERS[args.command](args, services)
    finally:
        await services.aclose()

    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0 if ok else 1


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m sciorag.cli",
        description="Import, inspect and query the sciorag document corpus.",
    )
    parser.add_argument(
        "--config",
        default="config/config.yaml",
        help="YAML config file (default: config/config.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Document commands")

    # -- import --
    import_parser = subparsers.add_parser("import", help="Import all files for one topic")
    import_parser.add_argument("--topic", required=True, help='Topic label, e.g. "forensics"')

    # -- preprocess --
    subparsers.add_parser("preprocess", help="Import every file under every source root")

    # -- topics --
    subparsers.add_parser("topics", help="List predefined and discovered topics")

    # -- provider --
    provider_parser = subparsers.add_parser("provider", help="Show or set the configured provider")
    provider_parser.add_argument("--set", default=None, metavar="NAME", help="openai, google or bedrock")

    # -- retrieve --
    retrieve_parser = subparsers.add_parser("retrieve", help="Print best-matching snippets")
    retrieve_parser.add_argument("--query", required=True, help="Free-text query")
    retrieve_parser.add_argument("--topic", default=None, help="Restrict to one topic")
    retrieve_parser.add_argument("-k", type=int, default=None, help="Number of snippets")
    retrieve_parser.add_argument(
        "--provider",
        default=None,
        help="Provider to rank with (default: the configured one)",
    )

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """Parse *argv*, run the command and exit with its status."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        app_settings = load_settings(args.config)
    except ConfigurationError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        sys.exit(1)
    configure_logging(log_level=app_settings.log_level, app_env=app_settings.app_env)

    sys.exit(asyncio.run(_run(args, app_settings)))


if __name__ == "__main__":
    main()
