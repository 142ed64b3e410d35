# engine.py
"""Fixed-interval animation engine: spawn, update and render swimmers."""

import logging
import threading

from .clipping import expand_tabs, place_clipped
from .entities import TickContext
from .host import Host, HostError

log = logging.getLogger(__name__)

DEFAULT_TICK_MS = 150


class Engine:
    """Drives every registered spawner and swimmer against one host.

    ``schedule`` receives the tick callable each time the timer fires. The
    default runs it right away on the timer thread; hosts that must draw on
    their own thread pass a function that queues it instead.
    """

    def __init__(self, host: Host, tick_ms: int = DEFAULT_TICK_MS, schedule=None):
        self.host = host
        self.tick_ms = tick_ms
        self.schedule = schedule or (lambda fn: fn())
        self.spawners = []
        self.entities = []
        self.tick_count = 0
        self.lock = threading.Lock()
        self._running = False
        self._stop_event: threading.Event | None = None
        self._thread: threading.Thread | None = None

    def register_spawner(self, fn):
        self.spawners.append(fn)

    def is_running(self) -> bool:
        return self._running

    def entity_count(self) -> int:
        return len(self.entities)

    # ──────────────────────────────────────────
    #  Lifecycle
    # ──────────────────────────────────────────

    def start(self, tick_ms: int | None = None):
        if self._running:
            return
        if tick_ms is not None:
            self.tick_ms = tick_ms
        if self.tick_ms <= 0:
            raise ValueError(f"tick_ms must be positive, got {self.tick_ms}")
        self._running = True
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._timer_loop,
            args=(self._stop_event,),
            daemon=True,
        )
        self._thread.start()
        log.info("engine started (%d ms per tick)", self.tick_ms)

    def stop(self):
        if not self._running:
            return
        self._running = False
        self._stop_event.set()
        if self._thread is not threading.current_thread():
            self._thread.join(timeout=2)
        self._thread = None
        self._stop_event = None

        with self.lock:
            self.entities = []
            self.tick_count = 0
            try:
                self.host.clear_overlays()
            except HostError:
                log.debug("could not clear overlays on stop", exc_info=True)
        log.info("engine stopped")

    def toggle(self, tick_ms: int | None = None):
        if self._running:
            self.stop()
        else:
            self.start(tick_ms)

    def _timer_loop(self, stop_event: threading.Event):
        interval = self.tick_ms / 1000
        while not stop_event.is_set():
            self.schedule(self.tick)
            stop_event.wait(interval)

    # ──────────────────────────────────────────
    #  Tick
    # ──────────────────────────────────────────

    def tick(self, force: bool = False) -> bool:
        """Run one spawn -> update -> render cycle.

        Returns True if the tick completed. A failed tick leaves the pool as
        it was after the last phase that finished.
        """
        if not (self._running or force):
            return False
        with self.lock:
            try:
                self._run_tick()
            except Exception:
                log.debug("tick %d abandoned", self.tick_count, exc_info=True)
                return False
        return True

    def _run_tick(self):
        host = self.host
        view = host.viewport()
        top = view.top

        self.tick_count += 1

        def get_visible_text(row):
            return expand_tabs(host.line_text(row + top - 1), host.tabstop)

        pool = list(self.entities)
        ctx = TickContext(
            win_width=view.width,
            win_height=view.height,
            entities=pool,
            tick=self.tick_count,
            get_visible_text=get_visible_text,
        )

        host.clear_overlays()

        for spawner in self.spawners:
            swimmer = spawner(ctx)
            if swimmer is not None:
                pool.append(swimmer)
        self.entities = pool

        alive = [ent for ent in pool if self._update_entity(ent, ctx)]
        self.entities = alive
        ctx.entities = alive

        self._render(view)

    def _update_entity(self, ent, ctx) -> bool:
        """Advance one swimmer; a swimmer whose update raises is dropped."""
        try:
            return ent.update(ctx)
        except Exception:
            log.debug("dropping swimmer at (%s, %s) after failed update",
                      ent.row, ent.col, exc_info=True)
            return False

    def _render(self, view):
        host = self.host
        tabstop = host.tabstop
        line_count = host.line_count()
        for ent in self.entities:
            r = ent.render()
            if r is None:
                continue
            for li, sprite_line in enumerate(r.lines):
                buf_row = r.row + li + view.top - 1
                if not sprite_line or not 0 <= buf_row < line_count:
                    continue
                line_text = expand_tabs(host.line_text(buf_row), tabstop)
                for seg in place_clipped(r.col, sprite_line, r.hl, line_text):
                    try:
                        host.draw_overlay(buf_row, seg.col, seg.chunks)
                    except HostError:
                        log.debug("overlay rejected at row %d col %d",
                                  buf_row, seg.col, exc_info=True)
