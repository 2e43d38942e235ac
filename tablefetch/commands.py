"""One "Fetch {name}" command per fetch source.

The registry is a plain ``{source id: Command}`` map. Any settings change
rebuilds it from scratch; there is no incremental diffing.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from .models import FetchSource

log = logging.getLogger(__name__)

# runs one source with the chosen recency filter
FetchCallback = Callable[[FetchSource, Optional[int]], object]
UnregisterHook = Callable[["Command"], None]


@dataclass(slots=True, frozen=True)
class Command:
    command_id: str
    name: str
    source: FetchSource
    callback: FetchCallback

    def __call__(self, filter_value: Optional[int] = None) -> object:
        return self.callback(self.source, filter_value)


class CommandRegistry:
    """Map from fetch-source id to its registered command."""

    def __init__(self, callback: FetchCallback, on_unregister: Optional[UnregisterHook] = None):
        self.callback = callback
        self.on_unregister = on_unregister
        self._commands: Dict[str, Command] = {}

    def rebuild(self, sources: Iterable[FetchSource]) -> Dict[str, Command]:
        """Drop every registered command and register one per source."""
        self.clear()

        commands: Dict[str, Command] = {}
        for source in sources:
            source_id = source.ensure_id()
            commands[source_id] = Command(
                command_id=f"open-{source_id}",
                name=f"Fetch {source.name}",
                source=source,
                callback=self.callback,
            )

        self._commands = commands
        log.debug("🔁 Registered %d fetch commands", len(commands))
        return dict(commands)

    def clear(self) -> None:
        if self.on_unregister:
            for command in self._commands.values():
                self.on_unregister(command)
        self._commands = {}

    @property
    def commands(self) -> List[Command]:
        return list(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, source_id: object) -> bool:
        return source_id in self._commands

    def find(self, key: str) -> Optional[Command]:
        """Resolve a command by source id, command id or source name."""
        if key in self._commands:
            return self._commands[key]
        for command in self._commands.values():
            if key in (command.command_id, command.source.name):
                return command
        return None

    def run(self, key: str, filter_value: Optional[int] = None) -> object:
        command = self.find(key)
        if command is None:
            raise KeyError(f"No fetch command for '{key}'")
        log.info("▶️ %s", command.name)
        return command(filter_value)
