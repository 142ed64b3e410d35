# tests/conftest.py
import pytest

from textfish.behaviours import Horizontal
from textfish.entities import Swimmer, TickContext


class ScriptedRng:
    """Stand-in for the random module that replays fixed values."""

    def __init__(self, floats=(), ints=()):
        self.floats = list(floats)
        self.ints = list(ints)
        self.randint_calls = []

    def random(self):
        return self.floats.pop(0)

    def randint(self, a, b):
        self.randint_calls.append((a, b))
        return self.ints.pop(0) if self.ints else a


def make_ctx(lines=(), width=40, height=None, entities=None, tick=1):
    lines = list(lines)
    if height is None:
        height = max(1, len(lines))

    def get_visible_text(row):
        return lines[row] if 0 <= row < len(lines) else ""

    return TickContext(
        win_width=width,
        win_height=height,
        entities=entities if entities is not None else [],
        tick=tick,
        get_visible_text=get_visible_text,
    )


def make_swimmer(behaviour=None, **kwargs):
    opts = dict(row=0.0, col=0.0, dir=1, speed=1.0, sprite="><>", hl_group="fish")
    opts.update(kwargs)
    return Swimmer(behaviour=behaviour or Horizontal(), **opts)


@pytest.fixture
def ctx():
    return make_ctx(width=40, height=10)
