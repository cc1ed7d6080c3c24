"""
Tests for the console front-end, driven by a scripted input queue.
"""
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from tasktrack.client import ScreenMode, TodoScreen, TodoServiceClient
from tasktrack.client import cli
from tasktrack.client.cli import ConsoleApp, main, parse_command
from tasktrack.models import TodoRead

TODAY = date(2024, 5, 20)


def _todo(**overrides):
    data = {
        "id": 3, "title": "Buy milk", "description": "", "priority": "Low",
        "project": "Errands", "due_date": "2024-06-01", "is_completed": False,
    }
    data.update(overrides)
    return TodoRead.model_validate(data)


def _scripted(*lines):
    queue = list(lines)

    async def read_line(prompt):
        if not queue:
            raise EOFError
        return queue.pop(0)

    return read_line


@pytest.fixture
def fake_client():
    client = MagicMock(spec=TodoServiceClient)
    client.list_todos = AsyncMock(return_value=[_todo()])
    client.create_todo = AsyncMock(return_value=_todo(id=4))
    client.replace_todo = AsyncMock(return_value="Todo was updated!")
    client.set_completion = AsyncMock(return_value="Todo was updated!")
    client.delete_todo = AsyncMock(return_value="Todo was deleted!")
    return client


def _app(fake_client, *lines):
    output = []
    screen = TodoScreen(fake_client, alert=lambda t, m: output.append(f"{t}: {m}"), today=lambda: TODAY)
    return ConsoleApp(screen, read_line=_scripted(*lines), write=output.append), output


def test_parse_command():
    assert parse_command("  Title   Buy  milk ") == ("title", "Buy  milk")
    assert parse_command("q") == ("q", "")
    assert parse_command("   ") == ("", "")


@pytest.mark.asyncio
async def test_add_flow(fake_client):
    app, output = _app(fake_client, "a", "title Walk dog", "priority high", "due 2024-06-09", "save", "q")
    await app.run()

    draft = fake_client.create_todo.await_args.args[0]
    assert draft.title == "Walk dog"
    assert draft.priority.value == "High"
    assert draft.due_date == "2024-06-09"
    assert app.screen.mode is ScreenMode.LIST
    assert any("New Task" in chunk for chunk in output)


@pytest.mark.asyncio
async def test_toggle_by_id(fake_client):
    app, _ = _app(fake_client, "t 3")
    await app.run()
    fake_client.set_completion.assert_awaited_once_with(3, True)


@pytest.mark.asyncio
async def test_edit_then_delete(fake_client):
    app, output = _app(fake_client, "e #3", "delete")
    await app.run()
    fake_client.delete_todo.assert_awaited_once_with(3)
    assert any("Edit Task" in chunk for chunk in output)


@pytest.mark.asyncio
async def test_close_discards(fake_client):
    app, _ = _app(fake_client, "e 3", "title Something else", "x")
    await app.run()
    fake_client.replace_todo.assert_not_called()
    assert app.screen.mode is ScreenMode.LIST


@pytest.mark.asyncio
async def test_unknown_id_and_bad_values_are_reported(fake_client):
    app, output = _app(fake_client, "e 99", "a", "due tomorrow", "priority urgent")
    await app.run()
    assert "No task with id '99'" in output
    assert sum(1 for chunk in output if chunk.startswith("Invalid")) == 2
    assert app.screen.form.draft.priority.value == "Medium"


@pytest.mark.asyncio
async def test_delete_not_offered_when_creating(fake_client):
    app, output = _app(fake_client, "a", "delete")
    await app.run()
    fake_client.delete_todo.assert_not_called()
    assert "Only existing tasks can be deleted" in output


@pytest.mark.asyncio
async def test_health_command(fake_client):
    fake_client.health_check = AsyncMock(side_effect=[
        {"status": "healthy", "service": "tasktrack-api"},
        {"status": "unhealthy", "error": "connection refused"},
    ])
    app, output = _app(fake_client, "health", "health")
    await app.run()
    assert "Service healthy" in output
    assert "Service unhealthy: connection refused" in output


def test_main_rejects_device_without_lan_host(monkeypatch):
    monkeypatch.delenv("TASKTRACK_API_URL", raising=False)
    monkeypatch.delenv("TASKTRACK_LAN_HOST", raising=False)
    with pytest.raises(SystemExit):
        main(["--target", "device"])


def test_main_api_url_wins_over_incomplete_env(monkeypatch):
    monkeypatch.setenv("TASKTRACK_TARGET", "device")
    monkeypatch.delenv("TASKTRACK_LAN_HOST", raising=False)
    seen = []

    async def fake_amain(config):
        seen.append(config)

    monkeypatch.setattr(cli, "_amain", fake_amain)
    assert main(["--api-url", "http://10.1.1.1:5000/"]) == 0
    assert seen[0].api_url == "http://10.1.1.1:5000"
