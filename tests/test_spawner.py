# tests/test_spawner.py
import pytest

from textfish.behaviours import BehaviourError, Sine, Wander
from textfish.entities import SPRITE_SETS, SpritePair
from textfish.spawner import Spawner, create_spawner
from conftest import ScriptedRng, make_ctx, make_swimmer


class TestSpawner:
    def test_left_entry(self):
        rng = ScriptedRng(floats=[0.05, 0.2, 0.5], ints=[3])
        spawner = Spawner(max_fish=5, spawn_chance=0.1, hl_group="red",
                          behaviour="horizontal", rng=rng)
        sw = spawner(make_ctx(width=40, height=10))
        assert sw.dir == 1
        assert sw.sprite == "><>"
        assert sw.col == -3
        assert sw.row == 3
        assert sw.speed == pytest.approx(1.25)
        assert sw.hl_group == "red"
        assert rng.randint_calls == [(0, 9)]

    def test_right_entry(self):
        rng = ScriptedRng(floats=[0.0, 0.9, 0.0])
        spawner = Spawner(spawn_chance=1.0, behaviour="horizontal", rng=rng)
        sw = spawner(make_ctx(width=40, height=10))
        assert sw.dir == -1
        assert sw.sprite == "<><"
        assert sw.col == 40
        assert sw.speed == pytest.approx(0.5)

    def test_speed_range(self):
        rng = ScriptedRng(floats=[0.0, 0.9, 0.999999])
        sw = Spawner(spawn_chance=1.0, rng=rng)(make_ctx(width=40, height=10))
        assert 0.5 <= sw.speed < 2.0

    def test_cap_declines_without_rolling(self):
        rng = ScriptedRng()
        spawner = Spawner(max_fish=2, spawn_chance=1.0, rng=rng)
        ctx = make_ctx(entities=[make_swimmer(), make_swimmer()])
        assert spawner(ctx) is None

    def test_chance_declines(self):
        spawner = Spawner(spawn_chance=0.1, rng=ScriptedRng(floats=[0.1]))
        assert spawner(make_ctx()) is None

    def test_zero_chance_never_spawns(self):
        spawner = Spawner(spawn_chance=0.0, rng=ScriptedRng(floats=[0.0]))
        assert spawner(make_ctx()) is None

    def test_multi_line_sprite_fits_viewport(self):
        rng = ScriptedRng(floats=[0.0, 0.9, 0.0])
        spawner = Spawner(spawn_chance=1.0, sprites=SPRITE_SETS["large"], rng=rng)
        sw = spawner(make_ctx(width=40, height=10))
        assert rng.randint_calls == [(0, 7)]
        assert sw.sprite_height == 3

    def test_short_viewport_row_zero(self):
        rng = ScriptedRng(floats=[0.0, 0.9, 0.0])
        spawner = Spawner(spawn_chance=1.0, sprites=SPRITE_SETS["large"], rng=rng)
        spawner(make_ctx(width=40, height=2))
        assert rng.randint_calls == [(0, 0)]

    def test_fresh_behaviour_per_spawn(self):
        rng = ScriptedRng(floats=[0.0, 0.1, 0.0, 0.0, 0.1, 0.0])
        spawner = Spawner(spawn_chance=1.0, behaviour=("sine", {"amplitude": 1}), rng=rng)
        a = spawner(make_ctx())
        b = spawner(make_ctx())
        assert isinstance(a.behaviour, Sine)
        assert a.behaviour is not b.behaviour

    def test_default_behaviour_is_wander(self):
        rng = ScriptedRng(floats=[0.0, 0.1, 0.0])
        sw = Spawner(spawn_chance=1.0, rng=rng)(make_ctx())
        assert isinstance(sw.behaviour, Wander)

    def test_custom_sprites(self):
        rng = ScriptedRng(floats=[0.0, 0.1, 0.0])
        spawner = Spawner(spawn_chance=1.0, sprites=("}>", "<{"), rng=rng)
        assert spawner.sprites == SpritePair("}>", "<{")
        assert spawner(make_ctx()).sprite == "}>"

    def test_bad_behaviour_fails_at_creation(self):
        with pytest.raises(BehaviourError):
            Spawner(behaviour="nope")

    def test_create_spawner(self):
        spawner = create_spawner(max_fish=3, spawn_chance=0.5, behaviour="zigzag")
        assert isinstance(spawner, Spawner)
        assert spawner.max_fish == 3
        assert spawner.behaviour == "zigzag"
