# src/taskboard/connectors/console_connector.py

from __future__ import annotations

import logging
import shlex
import sys
from datetime import datetime

from ..cli import render
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


class ConsoleNotifier:
    """Transient notifications printed to the terminal (success / info / error)."""

    def __init__(self, stream=None) -> None:
        self._stream = stream

    def _write(self, tag: str, text: str) -> None:
        stream = self._stream or sys.stdout
        try:
            print(f"[{_ts_local()}] [{tag}] {text}", file=stream, flush=True)
        except (OSError, ValueError):
            logger.debug("Notification dropped: %s", text, exc_info=True)

    def success(self, text: str) -> None:
        self._write("OK", text)

    def info(self, text: str) -> None:
        self._write("INFO", text)

    def error(self, text: str) -> None:
        self._write("ERROR", text)


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (offline=%s).", state.offline)
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "taskboard"))
    _print_ts(f"[{app_name}] Use /help for commands, /list to see tasks, /exit to quit.\n")

    def emit(text: str) -> None:
        # Immediate user-visible feedback for long operations.
        print(f"[{_ts_local()}] {text}", flush=True)

    # Initial page: overview + task list, like opening the dashboard.
    snapshot = state.dashboard.load_stats()
    if snapshot is not None:
        print(render.render_stats(snapshot))
    print(command_registry.handle(state, "/list", emit=emit))

    while True:
        try:
            user_input = input(f"{app_name}> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            # Plain text is a quick search, like typing into the header search bar.
            user_input = "/search " + shlex.quote(user_input)

        try:
            cmd_response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is not None:
            print(cmd_response)

    logger.info("Console connector finished.")
