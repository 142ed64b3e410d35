# spawner.py
"""Spawners: per-tick factories that add swimmers to the pool."""

import logging
import random

from . import behaviours
from .entities import DEFAULT_SPRITES, SpritePair, Swimmer, TickContext, sprite_dimensions

log = logging.getLogger(__name__)

MIN_SPEED = 0.5
MAX_SPEED = 2.0


class Spawner:
    """Creates swimmers at random screen edges, up to a population cap.

    The cap counts every live entity in the pool, so several spawners
    registered on one engine share it.
    """

    def __init__(self, max_fish: int = 5, spawn_chance: float = 0.1,
                 hl_group: str = "fish", sprites: SpritePair = DEFAULT_SPRITES,
                 behaviour=None, rng=None):
        behaviours.validate(behaviour)
        self.max_fish = max_fish
        self.spawn_chance = spawn_chance
        self.hl_group = hl_group
        self.sprites = SpritePair(*sprites)
        self.behaviour = behaviour
        self.rng = rng or random

    def __call__(self, ctx: TickContext) -> Swimmer | None:
        if len(ctx.entities) >= self.max_fish:
            return None
        if self.rng.random() >= self.spawn_chance:
            return None

        if self.rng.random() < 0.5:
            # enter from the left, swim right
            direction = 1
            sprite = self.sprites.right
            start_col = -sprite_dimensions(sprite)[0]
        else:
            direction = -1
            sprite = self.sprites.left
            start_col = ctx.win_width

        _, sh = sprite_dimensions(sprite)
        max_row = max(0, ctx.win_height - sh)
        row = self.rng.randint(0, max_row)
        speed = MIN_SPEED + self.rng.random() * (MAX_SPEED - MIN_SPEED)

        swimmer = Swimmer(
            row=row,
            col=start_col,
            dir=direction,
            speed=speed,
            sprite=sprite,
            hl_group=self.hl_group,
            behaviour=behaviours.resolve(self.behaviour),
        )
        log.debug("spawned %r at row %d dir %d speed %.2f",
                  swimmer.behaviour, row, direction, speed)
        return swimmer


def create_spawner(max_fish: int = 5, spawn_chance: float = 0.1,
                   hl_group: str = "fish", sprites: SpritePair = DEFAULT_SPRITES,
                   behaviour=None, rng=None) -> Spawner:
    return Spawner(max_fish=max_fish, spawn_chance=spawn_chance,
                   hl_group=hl_group, sprites=sprites,
                   behaviour=behaviour, rng=rng)
