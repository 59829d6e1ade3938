# src/taskboard/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..records.errors import RecordApiError
from ..tasks.task_filters import parse_filter_args
from ..tasks.task_models import Priority, parse_date
from . import render

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Arguments are shell-split, so quoted values may contain spaces.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Could not parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument helpers ----


def _split_options(args: list[str], allowed: set[str]) -> tuple[list[str], dict[str, str]]:
    """Split "key=value" options (known keys only) from positional words."""
    words: list[str] = []
    options: dict[str, str] = {}
    for a in args:
        key, sep, value = a.partition("=")
        if sep and key.lower() in allowed:
            options[key.lower()] = value
        else:
            words.append(a)
    return words, options


def _parse_task_id(raw: str) -> int | None:
    try:
        return int(raw.lstrip("#"))
    except ValueError:
        return None


def _category_names(state: AppState) -> dict[int, str]:
    return {c.id: c.name for c in state.dashboard.list_categories()}


def _resolve_category(state: AppState, ref: str) -> tuple[int | None, str | None]:
    """Return (category_id, error)."""
    if ref.lower() in ("", "none", "all"):
        return None, None
    d = state.dashboard
    category = d.find_category(ref)
    if category is None and d.last_error:
        return None, f"Could not load categories: {d.last_error}"
    if category is None:
        return None, f"Unknown category: {ref}. Use /cats to list categories."
    return category.id, None


def _task_changes(state: AppState, options: dict[str, str]) -> tuple[dict, str | None]:
    changes: dict = {}
    if "title" in options:
        changes["title"] = options["title"]
    if "desc" in options:
        changes["description"] = options["desc"]
    if "priority" in options:
        value = options["priority"].lower()
        if value not in {p.value for p in Priority}:
            return {}, f"Unknown priority: {value}. Use low, medium or high."
        changes["priority"] = Priority(value)
    if "due" in options:
        raw = options["due"].strip()
        if raw.lower() in ("", "none"):
            changes["due_date"] = None
        else:
            due = parse_date(raw)
            if due is None:
                return {}, f"Invalid due date: {raw}. Use YYYY-MM-DD."
            changes["due_date"] = due
    if "category" in options:
        cid, err = _resolve_category(state, options["category"])
        if err:
            return {}, err
        changes["category_id"] = cid
    return changes, None


def _show_tasks(state: AppState) -> str:
    d = state.dashboard
    return render.render_task_list(
        d.visible_tasks(),
        total_loaded=len(d.display_tasks()),
        selected=d.selected,
        filters=d.filters,
        category_names=_category_names(state),
    )


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    d = state.dashboard
    backend = "local store (offline)" if state.offline else str(getattr(state.settings, "api_base_url", "remote"))
    category = "all" if d.category_id is None else str(d.category_id)
    return (
        "Status:\n"
        f"  Backend: {backend}\n"
        f"  Category: {category}\n"
        f"  Search: {d.search_query or '-'}\n"
        f"  Filters: {render.render_filters(d.filters)}\n"
        f"  Selected: {len(d.selected)}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list           -> tasks of the current category
    /list all       -> all tasks
    /list <name|id> -> tasks of one category
    """
    d = state.dashboard
    if args:
        cid, err = _resolve_category(state, " ".join(args))
        if err:
            return err
        d.open_category(cid)
    else:
        d.load_tasks()
    if d.last_error:
        return f"Could not load tasks: {d.last_error}"
    return _show_tasks(state)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title> [desc=...] [priority=low|medium|high] [due=YYYY-MM-DD] [category=<name|id>]
    """
    words, options = _split_options(args, {"desc", "priority", "due", "category"})
    title = " ".join(words).strip()
    if not title:
        return "Usage: /add <title> [desc=...] [priority=...] [due=YYYY-MM-DD] [category=...]"

    changes, err = _task_changes(state, options)
    if err:
        return err

    task = state.dashboard.add_task(
        title,
        description=changes.get("description", ""),
        category_id=changes.get("category_id"),
        priority=changes.get("priority"),
        due_date=changes.get("due_date"),
    )
    if task is None:
        return "Task was not created."
    return f"Added task #{task.id}: {task.title}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit <id> [title=...] [desc=...] [priority=...] [due=YYYY-MM-DD|none] [category=...]"""
    if not args:
        return "Usage: /edit <id> [title=...] [desc=...] [priority=...] [due=...] [category=...]"
    task_id = _parse_task_id(args[0])
    if task_id is None:
        return f"Invalid task id: {args[0]}"

    words, options = _split_options(args[1:], {"title", "desc", "priority", "due", "category"})
    if words:
        return f"Unexpected arguments: {' '.join(words)}"
    changes, err = _task_changes(state, options)
    if err:
        return err
    if not changes:
        return "Nothing to change."

    task = state.dashboard.edit_task(task_id, **changes)
    if task is None:
        return f"Task #{task_id} was not updated."
    return render.render_task(task, category_names=_category_names(state))


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    task_id = _parse_task_id(args[0])
    if task_id is None:
        return f"Invalid task id: {args[0]}"
    task = state.dashboard.toggle_task(task_id)
    if task is None:
        return f"Task #{task_id} was not updated."
    return f"Task #{task.id} is now {'completed' if task.completed else 'pending'}."


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <id>"
    task_id = _parse_task_id(args[0])
    if task_id is None:
        return f"Invalid task id: {args[0]}"
    if not state.dashboard.delete_task(task_id):
        return f"Task #{task_id} was not deleted."
    return f"Deleted task #{task_id}."


def cmd_select(state: AppState, args: list[str]) -> str:
    """
    /sel <id> [<id> ...] -> toggle selection
    /sel all             -> select all visible (or deselect all)
    /sel none            -> clear selection
    """
    d = state.dashboard
    if not args:
        return f"Selected: {', '.join(f'#{i}' for i in sorted(d.selected)) or '-'}"

    sub = args[0].lower()
    if sub == "all":
        d.select_all()
    elif sub == "none":
        d.selected.clear()
    else:
        for raw in args:
            task_id = _parse_task_id(raw)
            if task_id is None:
                return f"Invalid task id: {raw}"
            d.toggle_select(task_id)
    return f"{len(d.selected)} task(s) selected."


def cmd_rmsel(state: AppState, args: list[str]) -> str:
    if not state.dashboard.selected:
        return "Nothing selected. Use /sel <id> or /sel all."
    deleted = state.dashboard.delete_selected()
    return f"Deleted {len(deleted)} task(s)."


def cmd_filter(state: AppState, args: list[str]) -> str:
    """/filter [priority=all|low|medium|high] [due=all|today|overdue|upcoming] [status=all|pending|completed]"""
    d = state.dashboard
    if not args:
        return f"Filters: {render.render_filters(d.filters)}"
    try:
        d.set_filters(parse_filter_args(args, d.filters))
    except ValueError as e:
        return f"{e}. Usage: /filter priority=high due=today status=pending"
    return _show_tasks(state)


def cmd_clear(state: AppState, args: list[str]) -> str:
    state.dashboard.clear_filters()
    return _show_tasks(state)


def cmd_search(state: AppState, args: list[str]) -> str:
    """/search <query> -> search title/description; /search with no query clears it."""
    query = " ".join(args)
    state.dashboard.search(query)
    if not query.strip():
        return "Search cleared.\n" + _show_tasks(state)
    return f'Showing results for "{query.strip()}"\n' + _show_tasks(state)


def cmd_stats(state: AppState, args: list[str]) -> str:
    snapshot = state.dashboard.load_stats()
    if snapshot is None:
        return f"Could not load statistics: {state.dashboard.last_error}"
    return render.render_stats(snapshot)


def cmd_sidebar(state: AppState, args: list[str]) -> str:
    snapshot = state.dashboard.load_sidebar()
    if snapshot is None:
        return f"Could not load sidebar: {state.dashboard.last_error}"
    return render.render_sidebar(snapshot, active_id=state.dashboard.category_id)


def cmd_cats(state: AppState, args: list[str]) -> str:
    categories = state.dashboard.list_categories()
    try:
        progress = state.stats.get_category_stats()
    except RecordApiError:
        logger.debug("Category stats unavailable", exc_info=True)
        progress = None
    return render.render_categories(categories, active_id=state.dashboard.category_id, progress=progress)


def cmd_cat(state: AppState, args: list[str]) -> str:
    """
    /cat add <name> [color=#hex] [icon=Name]
    /cat edit <id> [name=...] [color=...] [icon=...]
    /cat rm <id>
    """
    usage = (
        "Usage:\n"
        "  /cat add <name> [color=#hex] [icon=Name]\n"
        "  /cat edit <id> [name=...] [color=...] [icon=...]\n"
        "  /cat rm <id>"
    )
    if not args:
        return usage

    sub = args[0].lower()
    d = state.dashboard

    if sub == "add":
        words, options = _split_options(args[1:], {"color", "icon"})
        name = " ".join(words).strip()
        if not name:
            return usage
        category = d.add_category(name, color=options.get("color"), icon=options.get("icon"))
        return f"Added category #{category.id}: {category.name}" if category else "Category was not created."

    if sub in ("edit", "rm") and len(args) >= 2:
        cid = _parse_task_id(args[1])
        if cid is None:
            return f"Invalid category id: {args[1]}"
        if sub == "rm":
            return f"Deleted category #{cid}." if d.delete_category(cid) else f"Category #{cid} was not deleted."
        words, options = _split_options(args[2:], {"name", "color", "icon"})
        if words or not options:
            return usage
        category = d.edit_category(cid, **options)
        return f"Category #{cid}: {category.name}" if category else f"Category #{cid} was not updated."

    return usage


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show backend, category, search and filters.")
registry.register("list", cmd_list, help_text="List tasks: /list [all|<category>].", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <title> [priority=..] [due=..] [category=..].")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> title=.. priority=.. due=..")
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.")
registry.register("sel", cmd_select, help_text="Select tasks: /sel <id..> | /sel all | /sel none.")
registry.register("rmsel", cmd_rmsel, help_text="Delete the selected tasks.")
registry.register("filter", cmd_filter, help_text="Filter: /filter priority=.. due=.. status=..")
registry.register("clear", cmd_clear, help_text="Clear all filters.")
registry.register("search", cmd_search, help_text="Search tasks: /search <text> (empty clears).")
registry.register("stats", cmd_stats, help_text="Show progress and weekly activity.")
registry.register("side", cmd_sidebar, help_text="Show categories with counts and quick stats.")
registry.register("cats", cmd_cats, help_text="List categories.")
registry.register("cat", cmd_cat, help_text="Manage categories: /cat add | edit | rm.")
