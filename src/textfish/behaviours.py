# behaviours.py
"""Movement behaviours for swimmers, and the resolver that builds them.

A behaviour instance may be shared by many swimmers, so it only holds its
configuration. Anything a behaviour needs to remember about one swimmer is
kept in that swimmer's ``_data`` dict.
"""

import logging
import math
import random
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import Enum

log = logging.getLogger(__name__)

DEFAULT_PRESET = "wander"


class BehaviourError(ValueError):
    """Raised for unknown presets and malformed behaviour specs."""


class Behaviour(ABC):
    """Base class for behaviours.

    Subclasses must implement ``advance``. They may also define
    ``is_done(swimmer, ctx)``; when present it replaces the default
    off-screen removal check.
    """

    @abstractmethod
    def advance(self, swimmer, ctx):
        ...

    def __repr__(self):
        return f"{type(self).__name__}()"


def _swim_forward(swimmer):
    swimmer.col += swimmer.speed * swimmer.dir


# ──────────────────────────────────────────────
#  Presets
# ──────────────────────────────────────────────

class Horizontal(Behaviour):
    """Straight line at the swimmer's own speed."""

    def advance(self, swimmer, ctx):
        _swim_forward(swimmer)


class Wander(Behaviour):
    """Horizontal movement with an occasional one-row nudge."""

    def __init__(self, jitter_chance: float = 0.08, rng=None):
        if not 0 <= jitter_chance <= 1:
            raise BehaviourError(f"jitter_chance must be in [0, 1], got {jitter_chance}")
        self.jitter_chance = jitter_chance
        self.rng = rng or random

    def advance(self, swimmer, ctx):
        _swim_forward(swimmer)
        if self.rng.random() < self.jitter_chance:
            dy = -1 if self.rng.random() < 0.5 else 1
            new_row = swimmer.row + dy
            if 0 <= new_row < ctx.win_height:
                swimmer.row = new_row

    def __repr__(self):
        return f"Wander(jitter_chance={self.jitter_chance})"


class _Oscillator(Behaviour):
    def __init__(self, amplitude: float = 2, period: float = 20):
        if period <= 0:
            raise BehaviourError(f"period must be positive, got {period}")
        self.amplitude = amplitude
        self.period = period

    def _base_row(self, swimmer):
        base_row = swimmer._data.get("base_row")
        if base_row is None:
            base_row = swimmer.row
            swimmer._data["base_row"] = base_row
        return base_row

    def __repr__(self):
        return f"{type(self).__name__}(amplitude={self.amplitude}, period={self.period})"


class Sine(_Oscillator):
    """Smooth vertical wave around the row the swimmer started on."""

    def advance(self, swimmer, ctx):
        _swim_forward(swimmer)
        base_row = self._base_row(swimmer)
        swimmer.row = base_row + self.amplitude * math.sin(
            2 * math.pi * swimmer.age / self.period)


def triangle_wave(phase: float) -> float:
    """0 -> 1 -> 0 ramp over ``phase`` in [0, 1)."""
    if phase < 0.5:
        return 2 * phase
    return 2 * (1 - phase)


class Zigzag(_Oscillator):
    """Piecewise-linear vertical oscillation."""

    def advance(self, swimmer, ctx):
        _swim_forward(swimmer)
        base_row = self._base_row(swimmer)
        phase = (swimmer.age % self.period) / self.period
        swimmer.row = base_row + self.amplitude * (2 * triangle_wave(phase) - 1)


class SeekState(Enum):
    SEEKING = "seeking"
    RELEASED = "released"


class TargetSeek(Behaviour):
    """Swim to the first on-screen match of a pattern, then hand off.

    State per swimmer lives in ``_data["seek"]`` (a ``SeekState``) with the
    target in ``_data["target_row"]`` / ``_data["target_col"]``. Once a
    swimmer is released it never seeks again.
    """

    ROW_STEP = 0.5

    def __init__(self, pattern: str | None = None, words=None,
                 then_behaviour="horizontal"):
        patterns = []
        if pattern:
            try:
                patterns.append(re.compile(pattern))
            except re.error as e:
                raise BehaviourError(f"invalid target pattern {pattern!r}: {e}") from e
        if isinstance(words, str):
            words = [words]
        for word in words or ():
            patterns.append(re.compile(re.escape(word)))
        if not patterns:
            patterns = [re.compile("TODO")]
        validate(then_behaviour)
        self.patterns = patterns
        self.then_behaviour = then_behaviour

    def advance(self, swimmer, ctx):
        data = swimmer._data
        state = data.get("seek")

        if state is None:
            target = self.find_target(ctx)
            if target is None:
                log.debug("no target on screen, releasing swimmer")
                self._hand_off(swimmer)
                _swim_forward(swimmer)
                return
            data["seek"] = SeekState.SEEKING
            data["target_row"], data["target_col"] = target
        elif state is SeekState.RELEASED:
            _swim_forward(swimmer)
            return

        dx = data["target_col"] - swimmer.col
        dy = data["target_row"] - swimmer.row

        if abs(dx) > swimmer.speed:
            swimmer.col += swimmer.speed * (1 if dx > 0 else -1)
        else:
            swimmer.col = data["target_col"]

        if abs(dy) > self.ROW_STEP:
            swimmer.row += self.ROW_STEP if dy > 0 else -self.ROW_STEP

        if abs(dx) <= swimmer.speed and abs(dy) <= self.ROW_STEP:
            log.debug("swimmer reached target (%s, %s)", data["target_row"], data["target_col"])
            self._hand_off(swimmer)

    def find_target(self, ctx):
        """Return ``(row, col)`` of the first match on screen, or None."""
        for row in range(ctx.win_height):
            text = ctx.get_visible_text(row)
            for pat in self.patterns:
                m = pat.search(text)
                if m:
                    return row, m.start()
        return None

    def _hand_off(self, swimmer):
        swimmer._data["seek"] = SeekState.RELEASED
        swimmer.behaviour = resolve(self.then_behaviour)

    def __repr__(self):
        pats = [p.pattern for p in self.patterns]
        return f"TargetSeek(patterns={pats!r}, then_behaviour={self.then_behaviour!r})"


class CustomFunction(Behaviour):
    """Adapter for a plain ``fn(tick, swimmer, ctx) -> (dx, dy)``."""

    def __init__(self, fn):
        if not callable(fn):
            raise BehaviourError(f"custom behaviour must be callable, got {type(fn).__name__}")
        self.fn = fn

    def advance(self, swimmer, ctx):
        dx, dy = self.fn(ctx.tick, swimmer, ctx)
        swimmer.col += dx or 0
        swimmer.row += dy or 0

    def __repr__(self):
        return f"CustomFunction({getattr(self.fn, '__name__', self.fn)!r})"


# ──────────────────────────────────────────────
#  Registry / resolver
# ──────────────────────────────────────────────

PRESETS = {
    "horizontal": Horizontal,
    "wander": Wander,
    "sine": Sine,
    "zigzag": Zigzag,
    "target": TargetSeek,
}


def register_preset(name: str, cls) -> None:
    if not (isinstance(cls, type) and issubclass(cls, Behaviour)):
        raise BehaviourError(f"preset {name!r} must be a Behaviour subclass")
    PRESETS[str(name)] = cls


def available_presets() -> list[str]:
    return sorted(PRESETS)


def _build_preset(name, options: Mapping):
    cls = PRESETS.get(name)
    if cls is None:
        available = ", ".join(available_presets())
        raise BehaviourError(f"unknown behaviour preset: {name!r} (available: {available})")
    try:
        return cls(**options)
    except TypeError as e:
        raise BehaviourError(f"bad options for behaviour {name!r}: {e}") from e


def resolve(spec=None) -> Behaviour:
    """Turn a behaviour spec into a behaviour object.

    Accepted specs:
      - None: the default preset ("wander")
      - "sine": a preset name
      - ("sine", {"amplitude": 3}): a preset with options
      - {"name": "sine", "amplitude": 3}: the same, as read from JSON
      - a Behaviour subclass: instantiated with no arguments
      - an object with an ``advance`` method: returned as-is (shared)
      - a plain function: wrapped in CustomFunction

    Everything except a ready-made object yields a fresh instance.
    """
    if spec is None:
        spec = DEFAULT_PRESET

    if isinstance(spec, str):
        return _build_preset(spec, {})

    if isinstance(spec, type):
        if issubclass(spec, Behaviour):
            return spec()
        raise BehaviourError(f"invalid behaviour class: {spec.__name__}")

    if callable(getattr(spec, "advance", None)):
        return spec

    if isinstance(spec, Mapping):
        name = spec.get("name")
        if not isinstance(name, str):
            raise BehaviourError("behaviour mapping needs a string 'name' key")
        options = {k: v for k, v in spec.items() if k != "name"}
        return _build_preset(name, options)

    if isinstance(spec, (tuple, list)):
        if not spec or not isinstance(spec[0], str):
            raise BehaviourError("behaviour sequence must start with a preset name")
        if len(spec) == 1:
            return _build_preset(spec[0], {})
        if len(spec) == 2 and isinstance(spec[1], Mapping):
            return _build_preset(spec[0], spec[1])
        raise BehaviourError("behaviour sequence must be (name,) or (name, options)")

    if callable(spec):
        return CustomFunction(spec)

    raise BehaviourError(f"invalid behaviour spec type: {type(spec).__name__}")


def validate(spec) -> None:
    """Raise BehaviourError now if ``spec`` cannot be resolved."""
    resolve(spec)
