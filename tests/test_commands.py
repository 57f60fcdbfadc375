# tests/test_commands.py

from __future__ import annotations

from pocket_todo.cli.commands import CommandRegistry, format_task_list, registry, resolve_task_ref


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bee"])

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/BEE y", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_add_done_rm_flow(state) -> None:
    assert registry.handle(state, "/add Buy milk") == "Added: Buy milk"
    assert registry.handle(state, "/add    ") == "Title required."

    assert registry.handle(state, "/done 1") == "Completed: Buy milk"
    assert state.store.tasks[0].completed is True
    assert registry.handle(state, "/toggle 1") == "Reopened: Buy milk"

    assert registry.handle(state, "/rm 1") == "Removed: Buy milk"
    assert state.store.tasks == ()
    assert registry.handle(state, "/rm 1") == "No task 1."


def test_edit_save_and_cancel(state) -> None:
    registry.handle(state, "/add first")

    assert registry.handle(state, "/save") == "Not editing."
    assert registry.handle(state, "/edit 1") == "Editing: first"
    assert registry.handle(state, "/draft second title") == "Draft: 'second title'"
    assert registry.handle(state, "/save") == "Saved: second title"
    assert state.store.tasks[0].title == "second title"

    registry.handle(state, "/edit 1")
    registry.handle(state, "/draft ignored")
    assert registry.handle(state, "/cancel") == "Edit cancelled."
    assert state.store.tasks[0].title == "second title"


def test_task_refs_accept_position_or_id(state) -> None:
    a = state.store.add("a")
    b = state.store.add("b")
    assert a is not None and b is not None

    assert resolve_task_ref(state.store, "2") == b.id
    assert resolve_task_ref(state.store, "1.") == a.id
    assert resolve_task_ref(state.store, str(a.id)) == a.id
    assert resolve_task_ref(state.store, "abc") is None
    assert resolve_task_ref(state.store, "3") is None


def test_format_task_list_marks_completed_and_editing(state) -> None:
    assert "(empty)" in format_task_list(state.store)

    a = state.store.add("a")
    state.store.add("b")
    assert a is not None
    state.store.toggle_completion(a.id)
    state.store.start_edit(a.id)

    out = format_task_list(state.store)
    assert "1. [x] a" in out
    assert "2. [ ] b" in out
    assert "editing -> 'a'" in out


def test_status_reports_counts(state) -> None:
    state.store.add("a")
    out = registry.handle(state, "/status") or ""
    assert "Tasks: 1 (0 done)" in out
    assert "key=@tasks" in out


def test_raw_args_keep_text_after_command_name(state) -> None:
    reg = CommandRegistry()
    seen: list[list[str]] = []

    def grab(state, args):
        seen.append(args)
        return "ok"

    reg.register("raw", grab, "raw", aliases=["r"], raw_args=True)
    reg.register("split", grab, "split")

    reg.handle(state, "/raw  two  spaces ")
    reg.handle(state, "/r")
    reg.handle(state, "/split  two  spaces ")

    assert seen == [[" two  spaces "], [], ["two", "spaces"]]


def test_draft_and_add_keep_spacing(state) -> None:
    assert registry.handle(state, "/add /etc   cleanup") == "Added: /etc   cleanup"

    registry.handle(state, "/edit 1")
    assert registry.handle(state, "/draft   padded  ") == "Draft: '  padded  '"
    registry.handle(state, "/save")

    assert state.store.tasks[0].title == "  padded  "


def test_help_explains_slash_titles(state) -> None:
    assert "/add /title" in (registry.handle(state, "/help") or "")
