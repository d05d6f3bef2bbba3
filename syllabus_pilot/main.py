"""Command-line entry point for the syllabus pilot."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List

from .config import PilotConfig
from .errors import SyllabusPilotError
from .extractor import load_document
from .pipeline import Submission, SyllabusPipeline
from .render import render_markdown, views_to_dict
from .session import SyllabusSession
from .store import JsonProgressStore


def parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Syllabus parser and progress tracker")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level.")
    parser.add_argument("--store-dir", type=Path, default=None, help="Directory that stores saved progress.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse = subparsers.add_parser("parse", help="Parse and summarize a syllabus.")
    source = parse.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", type=Path, help="PDF, Markdown, or TXT syllabus file.")
    source.add_argument("--text", type=str, help="Syllabus text; use '-' to read from stdin.")
    parse.add_argument("--user", type=str, default=None, help="Save the result for this user.")
    parse.add_argument("--format", choices=["markdown", "json"], default="markdown", help="Output format.")
    parse.add_argument("--model", type=str, default=None, help="OpenAI-compatible chat model identifier.")
    parse.add_argument("--base-url", type=str, default=None, help="API base URL (defaults to DeepSeek).")
    parse.add_argument("--api-key", type=str, default=None, help="API key for the chat model (defaults to DEEPSEEK_API_KEY).")
    parse.add_argument("--temperature", type=float, default=None, help="Generation temperature.")
    parse.add_argument("--password", type=str, default=None, help="Password for an encrypted PDF.")

    toggle = subparsers.add_parser("toggle", help="Mark a topic done or not done.")
    toggle.add_argument("--user", type=str, required=True, help="User whose saved syllabus to update.")
    toggle.add_argument("subject", type=str)
    toggle.add_argument("unit", type=str)
    toggle.add_argument("topic", type=str)

    show = subparsers.add_parser("show", help="Show the saved syllabus and progress.")
    show.add_argument("--user", type=str, required=True, help="User whose saved syllabus to show.")
    show.add_argument("--format", choices=["markdown", "json"], default="markdown", help="Output format.")

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> PilotConfig:
    config = PilotConfig.from_env()
    if args.store_dir is not None:
        config.store_dir = args.store_dir
    for name in ("model", "base_url", "api_key", "temperature"):
        value = getattr(args, name, None)
        if value is not None:
            setattr(config, name, value)
    password = getattr(args, "password", None)
    if password is not None:
        config.pdf_password = password
    return config


def run_parse(args: argparse.Namespace, config: PilotConfig) -> int:
    if args.file is not None:
        submission = Submission(document=load_document(args.file))
    elif args.text == "-":
        submission = Submission(text=sys.stdin.read())
    else:
        submission = Submission(text=args.text)

    store = JsonProgressStore(config.store_dir) if args.user else None
    pipeline = SyllabusPipeline.from_config(config, store=store)
    session = SyllabusSession()
    asyncio.run(pipeline.run(session, submission, user_id=args.user))
    _print_session(session, args.format)
    return 0


def run_toggle(args: argparse.Namespace, config: PilotConfig) -> int:
    store = JsonProgressStore(config.store_dir)
    session = _restore_session(store, args.user)
    if session is None:
        return 1
    done = session.toggle_topic(args.subject, args.unit, args.topic)
    store.save(args.user, session.snapshot())

    state = "done" if done else "not done"
    print(f"Marked '{args.topic}' as {state}.")
    for subject in session.subjects:
        if subject.name != args.subject:
            continue
        for unit in subject.units:
            if unit.name == args.unit:
                print(f"Unit progress: {session.unit_progress(unit, subject.name)}%")
        print(f"Subject progress: {session.subject_progress(subject)}%")
        break
    else:
        print(f"Note: '{args.subject}' is not a subject of the saved syllabus.", file=sys.stderr)
    print(f"Overall progress: {session.overall_progress()}%")
    return 0


def run_show(args: argparse.Namespace, config: PilotConfig) -> int:
    session = _restore_session(JsonProgressStore(config.store_dir), args.user)
    if session is None:
        return 1
    _print_session(session, args.format)
    return 0


def _restore_session(store: JsonProgressStore, user_id: str) -> SyllabusSession | None:
    snapshot = store.load(user_id)
    if snapshot is None:
        print(f"No saved syllabus for user {user_id!r}. Run 'parse --user {user_id}' first.", file=sys.stderr)
        return None
    session = SyllabusSession()
    session.restore(snapshot)
    return session


def _print_session(session: SyllabusSession, output_format: str) -> None:
    overall_summary = session.summary.overall_summary if session.summary else ""
    views = session.merged_view()
    progress = session.overall_progress()
    if output_format == "json":
        print(json.dumps(views_to_dict(overall_summary, views, progress), indent=2, ensure_ascii=False))
    else:
        print(render_markdown(overall_summary, views, progress))


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    config = build_config(args)
    try:
        if args.command == "parse":
            return run_parse(args, config)
        if args.command == "toggle":
            return run_toggle(args, config)
        if args.command == "show":
            return run_show(args, config)
        raise ValueError(f"Unknown command: {args.command}")
    except SyllabusPilotError as exc:
        print(f"Error: {exc.user_message()}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
