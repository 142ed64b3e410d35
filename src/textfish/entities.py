# entities.py
"""Data models for textfish swimmers."""

import math
from dataclasses import dataclass, field
from typing import Any, Callable, NamedTuple


# ──────────────────────────────────────────────
#  ASCII Art Constants
# ──────────────────────────────────────────────

class SpritePair(NamedTuple):
    right: str  # used when swimming left-to-right
    left: str   # used when swimming right-to-left


DEFAULT_SPRITES = SpritePair("><>", "<><")

SPRITE_SETS = {
    "small": DEFAULT_SPRITES,
    "classic": SpritePair("><(((o>", "<o)))><"),
    "medium": SpritePair("><((o>", "<o))><"),
    "large": SpritePair(
        "  .  . \n"
        "><(o)> \n"
        "  `  ' ",
        " .  .  \n"
        " <(o)><\n"
        " '  `  ",
    ),
    "puffer": SpritePair(
        "   __  \n"
        "><(oo)>\n"
        "  (__) ",
        "  __   \n"
        "<(oo)><\n"
        " (__)  ",
    ),
    # sea turtle, adapted from jgs
    "turtle": SpritePair(
        "  .----.  _    \n"
        ",_/      \\/(_) \n"
        "'~uu----uu'    ",
        "   _  .----.   \n"
        "  (_\\/      \\_,\n"
        "    'uu----uu~'",
    ),
}


def sprite_dimensions(sprite: str) -> tuple[int, int]:
    """Width of the widest line and number of lines in a sprite."""
    lines = sprite.split("\n")
    return max(len(line) for line in lines), len(lines)


# ──────────────────────────────────────────────
#  Tick data
# ──────────────────────────────────────────────

@dataclass
class TickContext:
    """Read-only view of the world handed to behaviours and spawners."""
    win_width: int
    win_height: int
    entities: list
    tick: int
    get_visible_text: Callable[[int], str]


@dataclass
class RenderInfo:
    row: int
    col: int
    sprite: str
    hl: str

    @property
    def lines(self) -> list[str]:
        return self.sprite.split("\n")


# ──────────────────────────────────────────────
#  Swimmer
# ──────────────────────────────────────────────

@dataclass
class Swimmer:
    row: float
    col: float
    dir: int  # 1 = swimming rightward, -1 = leftward
    speed: float  # columns per tick
    sprite: str
    hl_group: str
    behaviour: Any
    age: int = 0
    _data: dict = field(default_factory=dict)
    sprite_width: int = field(init=False)
    sprite_height: int = field(init=False)

    def __post_init__(self):
        if self.dir not in (1, -1):
            raise ValueError(f"dir must be 1 or -1, got {self.dir}")
        self.sprite_width, self.sprite_height = sprite_dimensions(self.sprite)

    def update(self, ctx: TickContext) -> bool:
        """Advance one tick. Returns False when the swimmer should be removed."""
        self.age += 1
        self.behaviour.advance(self, ctx)

        is_done = getattr(self.behaviour, "is_done", None)
        if is_done is not None:
            return not is_done(self, ctx)

        if self.dir == 1 and self.col > ctx.win_width + 1:
            return False
        if self.dir == -1 and self.col < -(self.sprite_width + 1):
            return False
        return True

    def render(self) -> RenderInfo:
        return RenderInfo(
            row=math.floor(self.row),
            col=math.floor(self.col),
            sprite=self.sprite,
            hl=self.hl_group,
        )
