"""Range tracking for nested highlight, link, and fold scopes.

:class:`ScopeStack` turns nested push/pop calls into flat, non-overlapping
ranges. Whenever a scope is pushed on top of another, the outer scope's range
is closed at the current address and resumed when the inner scope pops, so
the emitted ranges tile the text with the innermost value on top.

Example:
    >>> stack = ScopeStack()
    >>> stack, _ = stack.push(10, "outer")
    >>> stack, emitted = stack.push(15, "inner")
    >>> emitted
    (ScopeRange(start=10, end=15, value='outer'),)
    >>> stack, emitted = stack.pop(20)
    >>> emitted
    (ScopeRange(start=15, end=20, value='inner'),)
    >>> stack, emitted = stack.pop(25)
    >>> emitted
    (ScopeRange(start=20, end=25, value='outer'),)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .errors import ScopeError
from .position import decode

__all__ = [
    "Fold",
    "FoldTracker",
    "ScopeFrame",
    "ScopeRange",
    "ScopeStack",
]

V = TypeVar("V")


@dataclass(frozen=True)
class ScopeFrame(Generic[V]):
    """An open scope: where its current range starts and what it carries."""

    start: int
    value: V


@dataclass(frozen=True)
class ScopeRange(Generic[V]):
    """A closed range emitted by :class:`ScopeStack`."""

    start: int
    end: int
    value: V


@dataclass(frozen=True)
class ScopeStack(Generic[V]):
    """Immutable stack of open scopes.

    ``push`` and ``pop`` never mutate the receiver; each returns the new stack
    together with any ranges closed by the operation. Zero-length ranges are
    never emitted.
    """

    frames: tuple[ScopeFrame[V], ...] = ()

    def push(
        self, address: int, value: V
    ) -> tuple["ScopeStack[V]", tuple[ScopeRange[V], ...]]:
        """Open ``value`` at ``address``, suspending the current top scope."""

        frames = self.frames
        emitted: tuple[ScopeRange[V], ...] = ()
        if frames:
            top = frames[-1]
            if top.start != address:
                emitted = (ScopeRange(top.start, address, top.value),)
                frames = frames[:-1] + (ScopeFrame(address, top.value),)
        return ScopeStack(frames + (ScopeFrame(address, value),)), emitted

    def pop(
        self, address: int
    ) -> tuple["ScopeStack[V]", tuple[ScopeRange[V], ...]]:
        """Close the top scope at ``address`` and resume the one beneath it.

        Raises:
            ScopeError: If no scope is open.
        """

        if not self.frames:
            raise ScopeError("pop from an empty scope stack")
        frame = self.frames[-1]
        frames = self.frames[:-1]
        emitted: tuple[ScopeRange[V], ...] = ()
        if frame.start != address:
            emitted = (ScopeRange(frame.start, address, frame.value),)
        if frames:
            frames = frames[:-1] + (ScopeFrame(address, frames[-1].value),)
        return ScopeStack(frames), emitted

    @property
    def top(self) -> ScopeFrame[V] | None:
        return self.frames[-1] if self.frames else None

    def __len__(self) -> int:
        return len(self.frames)

    def __bool__(self) -> bool:
        return bool(self.frames)


@dataclass(frozen=True, slots=True)
class Fold:
    """A collapsible range of whole lines, both ends inclusive."""

    start_line: int
    end_line: int


@dataclass(slots=True)
class FoldTracker:
    """Collects fold ranges from balanced push/pop calls."""

    _open: list[int] = field(default_factory=list)
    _folds: list[Fold] = field(default_factory=list)

    def push(self, line: int) -> None:
        self._open.append(line)

    def pop(self, address: int) -> Fold | None:
        """Close the innermost fold at ``address``.

        An end address at column 1 means the fold's last line is the previous
        one. Folds spanning a single line are discarded and ``None`` is
        returned.

        Raises:
            ScopeError: If no fold is open.
        """

        if not self._open:
            raise ScopeError("pop from an empty fold stack")
        start_line = self._open.pop()
        end_line, column = decode(address)
        if column == 1:
            end_line -= 1
        if end_line <= start_line:
            return None
        fold = Fold(start_line, end_line)
        self._folds.append(fold)
        return fold

    @property
    def depth(self) -> int:
        return len(self._open)

    @property
    def folds(self) -> tuple[Fold, ...]:
        return tuple(self._folds)
