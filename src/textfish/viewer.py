# viewer.py
"""Curses pager that shows a text file with fish swimming behind the text."""

import curses
import logging
import os
import threading
import time
from collections import deque

from .clipping import expand_tabs
from .engine import Engine
from .host import BufferHost

log = logging.getLogger(__name__)

STATUS_HEIGHT = 1
FRAME_DELAY = 0.05  # ~20fps redraw; ticks arrive at the engine's own rate

# style tag -> (curses colour, bold)
STYLE_COLORS = {
    "fish": (curses.COLOR_CYAN, True),
    "red": (curses.COLOR_RED, False),
    "green": (curses.COLOR_GREEN, False),
    "yellow": (curses.COLOR_YELLOW, False),
    "blue": (curses.COLOR_BLUE, False),
    "magenta": (curses.COLOR_MAGENTA, False),
    "cyan": (curses.COLOR_CYAN, False),
    "white": (curses.COLOR_WHITE, False),
}


class Viewer:
    def __init__(self, stdscr, host: BufferHost, engine: Engine):
        self.stdscr = stdscr
        self.host = host
        self.engine = engine
        self.lock = threading.Lock()
        self._pending: deque = deque()
        self.styles: dict[str, int] = {}
        self.message = ""
        self.status_attr = curses.A_REVERSE
        engine.schedule = self.schedule
        self._setup_curses()
        self._fit_host()

    def _setup_curses(self):
        curses.curs_set(0)
        self.stdscr.nodelay(True)
        self.stdscr.keypad(True)
        try:
            curses.start_color()
            curses.use_default_colors()
        except curses.error:
            log.debug("terminal has no colour support")
            return
        for pair, (name, (color, bold)) in enumerate(STYLE_COLORS.items(), start=1):
            try:
                curses.init_pair(pair, color, -1)
            except curses.error:
                continue
            attr = curses.color_pair(pair)
            if bold:
                attr |= curses.A_BOLD
            self.styles[name] = attr

    def _fit_host(self):
        h, w = self.stdscr.getmaxyx()
        self.host.resize(w, h - STATUS_HEIGHT)

    # ──────────────────────────────────────────
    #  Tick queue
    # ──────────────────────────────────────────

    def schedule(self, fn):
        """Called from the engine's timer thread: queue ``fn`` for the UI thread."""
        with self.lock:
            self._pending.append(fn)

    def _drain_ticks(self):
        with self.lock:
            pending = list(self._pending)
            self._pending.clear()
        for fn in pending:
            fn()

    # ──────────────────────────────────────────
    #  Drawing
    # ──────────────────────────────────────────

    def _safe_addstr(self, y, x, text, attr=0):
        h, w = self.stdscr.getmaxyx()
        if y < 0 or y >= h or x >= w:
            return
        if x < 0:
            text = text[-x:]
            x = 0
        if x + len(text) >= w:
            text = text[:w - x - 1]
        if not text:
            return
        try:
            self.stdscr.addstr(y, x, text, attr)
        except curses.error:
            pass

    def _style_attr(self, style):
        return self.styles.get(style, self.styles.get("fish", curses.A_BOLD))

    def _draw_text(self):
        host = self.host
        for i in range(host.height):
            lnum = host.top + i
            if lnum >= len(host.lines):
                self._safe_addstr(i, 0, "~", curses.A_DIM)
                continue
            text = expand_tabs(host.lines[lnum], host.tabstop)
            self._safe_addstr(i, 0, text[:host.width])

    def _draw_overlays(self):
        host = self.host
        for ov in host.overlays:
            y = ov.row - host.top
            if y < 0 or y >= host.height:
                continue
            x = ov.col
            for text, style in ov.chunks:
                self._safe_addstr(y, x, text, self._style_attr(style))
                x += len(text)

    def _draw_status(self, h, w):
        host = self.host
        name = os.path.basename(host.path) if host.path else "[buffer]"
        state = "swimming" if self.engine.is_running() else "stopped"
        pos = f"{host.top + 1}/{max(1, len(host.lines))}"
        status = (f" {name}  {pos}  fish: {self.engine.entity_count()}  [{state}]"
                  f"  q:quit  space:toggle  j/k:scroll ")
        if self.message:
            status += f" {self.message}"
        self._safe_addstr(h - STATUS_HEIGHT, 0, status.ljust(w)[:w - 1], self.status_attr)

    # ──────────────────────────────────────────
    #  Input
    # ──────────────────────────────────────────

    def _reload(self):
        if not self.host.path:
            return
        try:
            with open(self.host.path, encoding="utf-8", errors="replace") as f:
                self.host.set_lines(f.read().splitlines())
            self.message = "reloaded"
        except OSError as e:
            log.warning("reload of %s failed: %s", self.host.path, e)
            self.message = f"reload failed: {e.strerror}"

    def handle_key(self, key) -> bool:
        """Apply one key press. Returns False when the viewer should exit."""
        host = self.host
        if key in (ord('q'), ord('Q')):
            return False
        if key == ord(' '):
            self.engine.toggle()
        elif key in (ord('j'), curses.KEY_DOWN):
            host.scroll(1)
        elif key in (ord('k'), curses.KEY_UP):
            host.scroll(-1)
        elif key == curses.KEY_NPAGE:
            host.scroll(host.height)
        elif key == curses.KEY_PPAGE:
            host.scroll(-host.height)
        elif key in (ord('r'), ord('R')):
            self._reload()
        elif key == curses.KEY_RESIZE:
            self._fit_host()
        return True

    def run(self):
        while True:
            h, w = self.stdscr.getmaxyx()

            key = self.stdscr.getch()
            if key != -1 and not self.handle_key(key):
                break

            self._drain_ticks()

            self.stdscr.erase()
            with self.engine.lock:
                self._draw_text()
                self._draw_overlays()
            self._draw_status(h, w)

            self.stdscr.noutrefresh()
            curses.doupdate()
            time.sleep(FRAME_DELAY)
