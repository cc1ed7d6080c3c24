#!/usr/bin/env python3
"""
Console front-end for the task client.

Drives a TodoScreen from typed commands and redraws after every action:

    list view:  add | edit <id> | toggle <id> | refresh | health | help | quit
    form view:  title <text> | desc <text> | priority <High|Medium|Low>
                project <text> | due <YYYY-MM-DD> | save | delete | close
"""

import argparse
import asyncio
import logging
from datetime import date
from typing import Awaitable, Callable, Optional, Tuple

from .api_client import TodoServiceClient
from .config import ClientConfig
from .draft import FormMode
from .render import render_form, render_list
from .screen import ScreenMode, TodoScreen

logger = logging.getLogger(__name__)

ReadLine = Callable[[str], Awaitable[str]]
Write = Callable[[str], None]

LIST_ALIASES = {
    'a': 'add', 'add': 'add',
    'e': 'edit', 'edit': 'edit',
    't': 'toggle', 'toggle': 'toggle',
    'r': 'refresh', 'refresh': 'refresh',
    'health': 'health',
    'h': 'help', 'help': 'help', '?': 'help',
    'q': 'quit', 'quit': 'quit', 'exit': 'quit',
}

FORM_FIELDS = {
    'title': 'title',
    'desc': 'description',
    'description': 'description',
    'priority': 'priority',
    'project': 'project',
    'due': 'due_date',
}

FORM_ALIASES = {
    's': 'save', 'save': 'save',
    'd': 'delete', 'delete': 'delete',
    'x': 'close', 'close': 'close',
    'h': 'help', 'help': 'help', '?': 'help',
    'q': 'quit', 'quit': 'quit',
}

HELP_LIST = "Commands: add | edit <id> | toggle <id> | refresh | health | quit"
HELP_FORM = ("Commands: title <text> | desc <text> | priority <High|Medium|Low> | "
             "project <text> | due <YYYY-MM-DD> | save | delete | close")


def parse_command(line: str) -> Tuple[str, str]:
    """Split a command line into (lower-cased verb, raw argument)."""
    parts = line.strip().split(None, 1)
    if not parts:
        return "", ""
    return parts[0].lower(), (parts[1].strip() if len(parts) > 1 else "")


def _parse_id(arg: str) -> Optional[int]:
    try:
        return int(arg.lstrip('#'))
    except ValueError:
        return None


def _normalize_field(field: str, value: str) -> str:
    if field == 'priority':
        return value.capitalize()
    if field == 'due_date':
        # validate only; the draft keeps the ISO string
        date.fromisoformat(value)
    return value


class ConsoleApp:
    def __init__(self, screen: TodoScreen, read_line: ReadLine, write: Write = print):
        self.screen = screen
        self.read_line = read_line
        self.write = write

    def redraw(self) -> None:
        if self.screen.mode is ScreenMode.FORM:
            self.write(render_form(self.screen.form))
        else:
            self.write(render_list(self.screen.todos, self.screen.today()))

    async def run(self) -> None:
        await self.screen.start()
        self.redraw()
        while True:
            try:
                line = await self.read_line("> ")
            except EOFError:
                break
            if not await self.handle(line):
                break
            self.redraw()

    async def handle(self, line: str) -> bool:
        """Apply one command. Returns False when the user quits."""
        verb, arg = parse_command(line)
        if not verb:
            return True
        if self.screen.mode is ScreenMode.LIST:
            return await self._handle_list(LIST_ALIASES.get(verb, verb), arg)
        return await self._handle_form(verb, arg)

    async def _handle_list(self, verb: str, arg: str) -> bool:
        if verb == 'quit':
            return False
        if verb == 'add':
            self.screen.open_create()
        elif verb == 'refresh':
            await self.screen.refresh()
        elif verb == 'health':
            health = await self.screen.client.health_check()
            line = f"Service {health.get('status', 'unknown')}"
            if 'error' in health:
                line += f": {health['error']}"
            self.write(line)
        elif verb in ('edit', 'toggle'):
            todo_id = _parse_id(arg)
            todo = self.screen.find(todo_id) if todo_id is not None else None
            if todo is None:
                self.write(f"No task with id {arg!r}")
            elif verb == 'edit':
                self.screen.open_edit(todo)
            else:
                await self.screen.toggle(todo)
        else:
            self.write(HELP_LIST)
        return True

    async def _handle_form(self, verb: str, arg: str) -> bool:
        if verb in FORM_FIELDS:
            field = FORM_FIELDS[verb]
            try:
                self.screen.edit_draft(**{field: _normalize_field(field, arg)})
            except ValueError as e:
                self.write(f"Invalid {verb}: {e}")
            return True
        verb = FORM_ALIASES.get(verb, verb)
        if verb == 'quit':
            return False
        if verb == 'save':
            await self.screen.submit()
        elif verb == 'delete':
            if self.screen.form.mode is FormMode.EDIT:
                await self.screen.delete()
            else:
                self.write("Only existing tasks can be deleted")
        elif verb == 'close':
            self.screen.close()
        else:
            self.write(HELP_FORM)
        return True


def _print_alert(title: str, message: str) -> None:
    print(f"\n!! {title}: {message}\n")


async def _read_stdin(prompt: str) -> str:
    return await asyncio.to_thread(input, prompt)


async def _amain(config: ClientConfig) -> None:
    async with TodoServiceClient(config.api_url) as client:
        screen = TodoScreen(client, alert=_print_alert)
        await ConsoleApp(screen, read_line=_read_stdin).run()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="tasktrack console client")
    parser.add_argument("--api-url", help="Service base URL (overrides TASKTRACK_API_URL)")
    parser.add_argument(
        "--target",
        choices=["android-emulator", "device", "simulator", "local"],
        help="Deployment target used to derive the base URL",
    )
    parser.add_argument("--lan-host", help="Host LAN address when --target=device")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING),
                        format="%(asctime)s %(levelname)s %(name)s %(message)s")

    try:
        config = ClientConfig.from_env(
            api_url=args.api_url,
            target=args.target,
            lan_host=args.lan_host,
        )
    except ValueError as e:
        parser.error(str(e))

    try:
        asyncio.run(_amain(config))
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
