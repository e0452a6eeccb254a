"""Undoable edits to RenderConfig / StyleConfig fields."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Callable


@dataclass
class Command:
    """Set one field of a config dataclass; undo restores the old value."""

    target: Any
    property_name: str
    old_value: Any
    new_value: Any
    description: str = ""

    def execute(self) -> None:
        setattr(self.target, self.property_name, self.new_value)

    def undo(self) -> None:
        setattr(self.target, self.property_name, self.old_value)

    def same_field(self, other: Any) -> bool:
        return (isinstance(other, Command) and other.target is self.target
                and other.property_name == self.property_name)


@dataclass
class BatchCommand:
    """A group of field changes applied/reverted together as one undo step."""

    commands: list[Command] = field(default_factory=list)
    description: str = ""

    @classmethod
    def from_diff(cls, target: Any, source: Any,
                  description: str = "") -> "BatchCommand":
        """Commands turning every field of ``target`` that differs from
        ``source`` into the ``source`` value."""
        cmds = []
        for f in fields(target):
            old, new = getattr(target, f.name), getattr(source, f.name)
            if old != new:
                cmds.append(Command(target, f.name, old, new, description))
        return cls(cmds, description)

    def __bool__(self) -> bool:
        return bool(self.commands)

    def extend(self, other: "BatchCommand") -> "BatchCommand":
        self.commands.extend(other.commands)
        return self

    def execute(self) -> None:
        for cmd in self.commands:
            cmd.execute()

    def undo(self) -> None:
        for cmd in reversed(self.commands):
            cmd.undo()


class CommandStack:
    """Undo/redo history with a maximum depth.

    ``execute(cmd, merge=True)`` folds a change into the previous step when
    both touch the same field, so one slider drag is one undo step.
    """

    def __init__(self, max_depth: int = 100,
                 on_change: Callable[[], None] | None = None):
        self._undo_stack: list[Command | BatchCommand] = []
        self._redo_stack: list[Command | BatchCommand] = []
        self._max_depth = max_depth
        self._on_change = on_change

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    @property
    def history(self) -> list[Command | BatchCommand]:
        return list(self._undo_stack)

    def _notify(self) -> None:
        if self._on_change:
            self._on_change()

    def execute(self, cmd: Command | BatchCommand, merge: bool = False) -> None:
        cmd.execute()
        top = self._undo_stack[-1] if self._undo_stack else None
        if merge and isinstance(cmd, Command) and cmd.same_field(top):
            top.new_value = cmd.new_value
        else:
            self._undo_stack.append(cmd)
            del self._undo_stack[:-self._max_depth]
        self._redo_stack.clear()
        self._notify()

    def undo(self) -> None:
        if self._undo_stack:
            cmd = self._undo_stack.pop()
            cmd.undo()
            self._redo_stack.append(cmd)
            self._notify()

    def redo(self) -> None:
        if self._redo_stack:
            cmd = self._redo_stack.pop()
            cmd.execute()
            self._undo_stack.append(cmd)
            self._notify()
