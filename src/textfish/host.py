# host.py
"""Host interface the engine draws through, plus an in-memory text buffer."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from .clipping import expand_tabs


class HostError(Exception):
    """The host surface rejected a call (e.g. it has been closed)."""


@dataclass
class Viewport:
    top: int     # first visible line, 1-indexed
    bottom: int  # last visible line, 1-indexed, inclusive
    width: int

    @property
    def height(self) -> int:
        return self.bottom - self.top + 1


@dataclass
class Overlay:
    row: int
    col: int
    chunks: list


class Host(ABC):
    """What the engine needs from the application embedding it."""

    tabstop = 8

    @abstractmethod
    def viewport(self) -> Viewport:
        ...

    @abstractmethod
    def line_text(self, lnum: int) -> str:
        """Text of 0-indexed line ``lnum``, or "" if it does not exist."""

    @abstractmethod
    def line_count(self) -> int:
        ...

    @abstractmethod
    def draw_overlay(self, row: int, col: int, chunks: list) -> None:
        ...

    @abstractmethod
    def clear_overlays(self) -> None:
        ...


class BufferHost(Host):
    """A list of lines shown through a scrollable window."""

    def __init__(self, lines=None, width: int = 80, height: int = 24, tabstop: int = 8):
        self.lines: list[str] = list(lines or [])
        self.width = width
        self.height = height
        self.tabstop = tabstop
        self.top = 0  # 0-indexed first visible line
        self.overlays: list[Overlay] = []
        self.closed = False
        self.path = None

    @classmethod
    def load(cls, path, **kwargs) -> "BufferHost":
        with open(path, encoding="utf-8", errors="replace") as f:
            host = cls(f.read().splitlines(), **kwargs)
        host.path = path
        return host

    def _check(self):
        if self.closed:
            raise HostError("buffer is closed")

    def close(self):
        self.closed = True

    def set_lines(self, lines):
        self._check()
        self.lines = list(lines)
        self.scroll(0)

    def resize(self, width: int, height: int):
        self.width = max(1, width)
        self.height = max(1, height)
        self.scroll(0)

    def scroll(self, delta: int):
        max_top = max(0, len(self.lines) - self.height)
        self.top = min(max(0, self.top + delta), max_top)

    # ---- Host interface ----

    def viewport(self) -> Viewport:
        self._check()
        last = min(len(self.lines), self.top + self.height)
        # An empty buffer still shows one (empty) line.
        bottom = max(last, self.top + 1)
        return Viewport(top=self.top + 1, bottom=bottom, width=self.width)

    def line_text(self, lnum: int) -> str:
        self._check()
        if 0 <= lnum < len(self.lines):
            return self.lines[lnum]
        return ""

    def line_count(self) -> int:
        self._check()
        return len(self.lines)

    def draw_overlay(self, row: int, col: int, chunks: list) -> None:
        self._check()
        self.overlays.append(Overlay(row, col, list(chunks)))

    def clear_overlays(self) -> None:
        self._check()
        self.overlays = []

    # ---- Display ----

    def overlays_on(self, row: int) -> list[Overlay]:
        return [o for o in self.overlays if o.row == row]

    def compose(self, row: int) -> str:
        """Line ``row`` as displayed: expanded text with overlays painted on top."""
        text = expand_tabs(self.line_text(row), self.tabstop)
        cells = list(text[:self.width].ljust(self.width))
        for ov in self.overlays_on(row):
            col = ov.col
            for chunk_text, _ in ov.chunks:
                for ch in chunk_text:
                    if 0 <= col < self.width:
                        cells[col] = ch
                    col += 1
        return "".join(cells).rstrip()
