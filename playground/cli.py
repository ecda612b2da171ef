#!/usr/bin/env python3
"""
Run and format programs on a playground server from the terminal.

Usage:
    playground run <file> | --snippet <name>
    playground format <file> [--row R --column C] [--write]
    playground examples
    playground health

Example:
    playground run --snippet greeting
    PLAYGROUND_SERVER_URL=http://box:8088 playground run main.go
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from prompt_toolkit import PromptSession  # type: ignore
from prompt_toolkit.patch_stdout import patch_stdout  # type: ignore

from playground.lifecycle.sessions import SessionManager
from playground.reformat import ReformatCoordinator
from playground.sinks import TerminalSink
from playground.snippets import SNIPPETS, get_snippet
from playground.transport.client import PlaygroundClient
from playground.transport.config import ClientConfig
from playground.transport.models import CursorPosition, EntryKind, Session, SessionStatus, TransportError

log = logging.getLogger("playground")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="playground", description="Playground server client")
    parser.add_argument("--server", default=None, help="server URL (default: PLAYGROUND_SERVER_URL)")
    parser.add_argument("--timeout", type=float, default=None, help="request timeout in seconds")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="run a program and stream its output")
    run.add_argument("file", nargs="?", help="source file to run")
    run.add_argument("--snippet", "-s", default=None, help="run a built-in sample instead")

    fmt = sub.add_parser("format", help="reformat a source file")
    fmt.add_argument("file", help="source file to format")
    fmt.add_argument("--row", type=int, default=0, help="caret row to remap")
    fmt.add_argument("--column", type=int, default=0, help="caret column to remap")
    fmt.add_argument("--write", "-w", action="store_true", help="rewrite the file in place")

    sub.add_parser("examples", help="list built-in sample programs")
    sub.add_parser("health", help="check the server is up")
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else os.getenv("PLAYGROUND_LOG_LEVEL", "WARNING")
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )


def _read_source(args: argparse.Namespace) -> str | None:
    if args.snippet:
        return get_snippet(args.snippet).source
    if args.file:
        return Path(args.file).read_text()
    return None


async def _read_line(prompt: PromptSession) -> str | None:
    """One prompt; None when the user gave up (Ctrl-D / Ctrl-C)."""
    try:
        return await prompt.prompt_async("> ")
    except (EOFError, KeyboardInterrupt):
        return None


async def _drive_input(manager: SessionManager, session: Session, prompt: PromptSession) -> None:
    """Prompt for a line only while the program waits for one, until the run ends.

    A pending prompt is withdrawn as soon as the program moves on; a line
    that still arrives after that is reported rather than dropped.
    """
    while await manager.wait_for_input(session):
        prompt_task = asyncio.create_task(_read_line(prompt))
        withdrawn = asyncio.create_task(manager.wait_input_withdrawn(session))
        await asyncio.wait({prompt_task, withdrawn}, return_when=asyncio.FIRST_COMPLETED)
        for task in (prompt_task, withdrawn):
            task.cancel()
        await asyncio.wait({prompt_task, withdrawn})
        if prompt_task.cancelled():
            continue

        line = prompt_task.result()
        if line is None:
            await manager.cancel()
            return
        if not line:
            continue
        if not manager.wants_input(session):
            manager.sink.append(f"Input not sent, the program is no longer waiting: {line}", EntryKind.ERROR)
            continue
        await manager.input_bridge.submit(line)


async def _run(client: PlaygroundClient, source: str, prompt: PromptSession | None = None) -> int:
    with patch_stdout():
        sink = TerminalSink()
        manager = SessionManager(client, sink)
        try:
            await manager.start_run(source)
        except TransportError:
            return 1

        session = manager.current
        if session is None:
            return 1
        try:
            await _drive_input(manager, session, prompt or PromptSession())
            await manager.wait()
        finally:
            await manager.cancel()
    return 0 if session.status is SessionStatus.COMPLETED else 1


async def _format(client: PlaygroundClient, args: argparse.Namespace) -> int:
    path = Path(args.file)
    text = path.read_text()
    coordinator = ReformatCoordinator(client)
    try:
        result = await coordinator.reformat(text, CursorPosition(args.row, args.column))
    except TransportError as e:
        print(f"Error: {e.detail}", file=sys.stderr)
        return 1

    if args.write:
        path.write_text(result.text)
    else:
        sys.stdout.write(result.text)
    print(f"cursor {result.cursor.row}:{result.cursor.column}", file=sys.stderr)
    return 0


async def main(argv: list[str]) -> int:
    load_dotenv()
    args = _parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "examples":
        for snippet in SNIPPETS.values():
            print(f"{snippet.name:<12} {snippet.title}")
        return 0

    config = ClientConfig(server_url=args.server, http_timeout_s=args.timeout)
    async with PlaygroundClient(config) as client:
        if args.command == "health":
            try:
                await client.check_health()
            except TransportError as e:
                print(f"Unhealthy: {e.detail}", file=sys.stderr)
                return 1
            print(f"{client.server_url} OK")
            return 0

        if args.command == "format":
            return await _format(client, args)

        try:
            source = _read_source(args)
        except KeyError as e:
            print(f"Error: {e.args[0]}", file=sys.stderr)
            return 2
        if source is None:
            print("Error: pass a file or --snippet", file=sys.stderr)
            return 2
        log.info(f"Running {len(source)} bytes on {client.server_url}")
        return await _run(client, source)


def run() -> None:
    raise SystemExit(asyncio.run(main(sys.argv[1:])))


if __name__ == "__main__":
    run()
