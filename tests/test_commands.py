# tests/test_commands.py

from __future__ import annotations

import io
from types import SimpleNamespace

import pytest

from taskboard.cli.commands import CommandRegistry, registry
from taskboard.connectors.console_connector import ConsoleNotifier, run_console_loop
from taskboard.core.state import AppState

from .fakes import FailingRecordClient, RecordingNotifier


def run(state: AppState, line: str) -> str:
    reply = registry.handle(state, line)
    assert reply is not None
    return reply


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    def h2(state, args):
        called["h2"] += 1
        return "h2:" + ",".join(args)

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a", aliases=["aa"])
    reg.register("b", h3, "b")

    assert reg.handle(state, '/a x "y z"') == "h2:x,y z"
    assert reg.handle(state, "/AA") == "h2:"
    assert reg.handle(state, "/b", emit=notes.append) == "h3"
    assert called == {"h2": 2, "h3": 1}
    assert notes == ["note"]
    assert reg.build_help().splitlines() == ["Available commands:", "  /a - a", "  /b - b"]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert reg.handle(state, "/").startswith("Empty command")
    assert reg.handle(state, '/add "unterminated').startswith("Could not parse command")


def test_help_lists_commands(state) -> None:
    reply = run(state, "/help")
    for name in ("/list", "/add", "/filter", "/search", "/stats", "/cat"):
        assert name in reply


def test_status(state) -> None:
    reply = run(state, "/status")
    assert "local store (offline)" in reply
    assert "Category: all" in reply


def test_list_all_and_by_category(state) -> None:
    reply = run(state, "/list")
    assert "Plan the week" in reply
    assert "Book dentist appointment" in reply

    reply = run(state, "/ls work")
    assert "Send project update" in reply
    assert "#work" in reply
    assert "Buy groceries" not in reply
    assert state.dashboard.category_id == 2

    assert run(state, "/list nope").startswith("Unknown category: nope")

    run(state, "/list all")
    assert state.dashboard.category_id is None


def test_list_with_no_tasks(settings, empty_records, notifier) -> None:
    st = AppState.build(settings=settings, records=empty_records, notifier=notifier, offline=True)
    assert run(st, "/list").startswith("No tasks yet")


def test_add_with_options(state) -> None:
    reply = run(state, '/add "Call the bank" priority=high due=2030-05-01 category=work desc="about the card"')
    assert reply == "Added task #8: Call the bank"

    task = state.tasks.get_by_id(8)
    assert task.priority == "high"
    assert task.category_id == 2
    assert task.description == "about the card"
    assert task.due_date.isoformat() == "2030-05-01"


def test_add_rejects_bad_input(state) -> None:
    assert run(state, "/add").startswith("Usage: /add")
    assert run(state, "/add x priority=urgent").startswith("Unknown priority: urgent")
    assert run(state, "/add x due=someday").startswith("Invalid due date: someday")
    assert run(state, "/add x category=nope").startswith("Unknown category: nope")
    assert len(state.tasks.get_all()) == 7


def test_edit(state) -> None:
    reply = run(state, "/edit 5 priority=high due=none")
    assert "Buy groceries" in reply
    assert "(high)" in reply
    assert state.tasks.get_by_id(5).due_date is None

    assert run(state, "/edit 5") == "Nothing to change."
    assert run(state, "/edit 5 oops").startswith("Unexpected arguments")
    assert run(state, "/edit abc title=x") == "Invalid task id: abc"
    assert run(state, "/edit 999 title=x") == "Task #999 was not updated."


def test_done_and_rm(state, notifier: RecordingNotifier) -> None:
    assert run(state, "/done #2") == "Task #2 is now completed."
    assert run(state, "/toggle 2") == "Task #2 is now pending."
    assert run(state, "/done") == "Usage: /done <id>"

    assert run(state, "/rm 2") == "Deleted task #2."
    assert run(state, "/rm 2") == "Task #2 was not deleted."
    assert run(state, "/rm x") == "Invalid task id: x"
    assert notifier.texts("error") == ["Failed to delete task"]


def test_selection_and_bulk_delete(state) -> None:
    run(state, "/list")
    assert run(state, "/sel 2 3") == "2 task(s) selected."
    assert run(state, "/sel") == "Selected: #2, #3"
    assert "2 tasks selected" in run(state, "/list")

    assert run(state, "/rmsel") == "Deleted 2 task(s)."
    assert run(state, "/rmsel").startswith("Nothing selected")

    assert run(state, "/sel all") == "5 task(s) selected."
    assert run(state, "/sel none") == "0 task(s) selected."


def test_filter_and_clear(state) -> None:
    run(state, "/list")
    reply = run(state, "/filter status=pending priority=low")
    assert "Buy groceries" in reply
    assert "Book dentist appointment" in reply
    assert "Plan the week" not in reply
    assert "Filters: priority=low due=all status=pending" in reply

    assert run(state, "/filter") == "Filters: priority=low due=all status=pending"
    assert run(state, "/filter priority=urgent").startswith("unknown priority: urgent")

    run(state, "/filter status=completed")
    assert run(state, "/filter priority=all status=all due=all").count("\n") >= 6

    run(state, "/filter priority=high status=pending due=upcoming")
    assert run(state, "/list").startswith("No tasks match your filters")

    assert "Plan the week" in run(state, "/clear")


def test_search(state) -> None:
    run(state, "/list")
    reply = run(state, "/search groceries")
    assert reply.startswith('Showing results for "groceries"')
    assert "Buy groceries" in reply
    assert "Plan the week" not in reply

    reply = run(state, "/search")
    assert reply.startswith("Search cleared.")
    assert "Plan the week" in reply


def test_stats_sidebar_and_categories(state) -> None:
    assert "3 out of 7 tasks completed" in run(state, "/stats")
    assert "work [0] (1/3 done)" in run(state, "/cats")

    reply = run(state, "/side")
    assert "work [3]" in reply
    assert "Completion rate: 43%" in reply


def test_category_commands(state) -> None:
    assert run(state, "/cat add Garden color=#00ff00 icon=Flower") == "Added category #5: Garden"
    assert run(state, "/cat edit 5 name=Yard") == "Category #5: Yard"
    assert run(state, "/cat edit 5").startswith("Usage:")
    assert run(state, "/cat edit 5 name=") == "Category #5 was not updated."
    assert state.categories.get_by_id(5).name == "Yard"
    assert run(state, "/cat rm 5") == "Deleted category #5."
    assert run(state, "/cat rm 5") == "Category #5 was not deleted."
    assert run(state, "/cat rm x") == "Invalid category id: x"
    assert run(state, "/cat").startswith("Usage:")


def test_commands_report_backend_failures(settings, notifier) -> None:
    st = AppState.build(settings=settings, records=FailingRecordClient(), notifier=notifier)
    assert run(st, "/list").startswith("Could not load tasks: Record API network/timeout error")
    assert run(st, "/stats").startswith("Could not load statistics")
    assert run(st, "/side").startswith("Could not load sidebar")
    assert run(st, "/cats").startswith("No categories")

    notifier.sent.clear()
    assert run(st, "/list work").startswith("Could not load categories: Record API network/timeout error")
    assert run(st, "/add milk category=shopping").startswith("Could not load categories")
    assert run(st, "/edit 1 category=work").startswith("Could not load categories")
    assert notifier.texts("error") == ["Failed to load categories"] * 3
    assert st.dashboard.category_id is None


# ---- console ----


def test_console_notifier_tags() -> None:
    out = io.StringIO()
    n = ConsoleNotifier(out)
    n.success("saved")
    n.info("fyi")
    n.error("nope")

    lines = out.getvalue().splitlines()
    assert lines[0].endswith("[OK] saved")
    assert lines[1].endswith("[INFO] fyi")
    assert lines[2].endswith("[ERROR] nope")


def test_console_loop_plain_text_searches(state, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    lines = iter(["", "groceries", "/explode", "/quit", "/never"])

    def fake_input(prompt: str = "") -> str:
        return next(lines)

    def explode(state, args):
        raise RuntimeError("boom")

    registry.register("explode", explode, help_text="test only")
    monkeypatch.setattr("builtins.input", fake_input)
    try:
        run_console_loop(state)
    finally:
        registry._handlers.pop("explode", None)
        registry._help.pop("explode", None)

    out = capsys.readouterr().out
    assert "Progress:" in out
    assert 'Showing results for "groceries"' in out
    assert "Internal error while handling a command." in out
    assert next(lines) == "/never"


def test_console_loop_stops_on_eof(settings, monkeypatch: pytest.MonkeyPatch) -> None:
    st = AppState.build(
        settings=SimpleNamespace(**{**vars(settings), "app_name": "tb"}),
        records=FailingRecordClient(),
        notifier=RecordingNotifier(),
    )

    def eof(prompt: str = "") -> str:
        raise EOFError

    monkeypatch.setattr("builtins.input", eof)
    run_console_loop(st)
    assert st.notifier.texts("error")[0] == "Failed to load progress data"
