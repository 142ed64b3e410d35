# tests/test_entities.py
import pytest

from textfish.behaviours import Horizontal
from textfish.entities import (
    DEFAULT_SPRITES, SPRITE_SETS, RenderInfo, SpritePair, Swimmer,
    sprite_dimensions,
)
from conftest import make_ctx, make_swimmer


class TestSpriteDimensions:
    def test_single_line(self):
        assert sprite_dimensions("><>") == (3, 1)

    def test_multi_line_uses_widest(self):
        assert sprite_dimensions("ab\ncdef\nx") == (4, 3)

    def test_sprite_sets_are_consistent(self):
        for name, pair in SPRITE_SETS.items():
            assert isinstance(pair, SpritePair)
            assert sprite_dimensions(pair.right)[1] == sprite_dimensions(pair.left)[1], name
            assert pair.right.isascii() and pair.left.isascii(), name

    def test_default_sprites(self):
        assert DEFAULT_SPRITES == ("><>", "<><")
        assert SPRITE_SETS["small"] is DEFAULT_SPRITES


class TestSwimmer:
    def test_defaults(self):
        sw = make_swimmer(sprite="  .  . \n><(o)> \n  `  ' ")
        assert sw.age == 0
        assert sw._data == {}
        assert sw.sprite_width == 7
        assert sw.sprite_height == 3

    def test_data_independence(self):
        a = make_swimmer()
        b = make_swimmer()
        a._data["base_row"] = 4
        assert b._data == {}

    def test_invalid_dir(self):
        with pytest.raises(ValueError):
            make_swimmer(dir=0)

    def test_age_increments_before_behaviour(self, ctx):
        seen = []

        class Probe:
            def advance(self, swimmer, ctx):
                seen.append(swimmer.age)

        sw = make_swimmer(Probe())
        sw.update(ctx)
        sw.update(ctx)
        assert seen == [1, 2]

    def test_behaviour_slot_is_reassignable(self, ctx):
        class Swap:
            def advance(self, swimmer, ctx):
                swimmer.behaviour = Horizontal()

        sw = make_swimmer(Swap(), col=0.0)
        sw.update(ctx)
        sw.update(ctx)
        assert isinstance(sw.behaviour, Horizontal)
        assert sw.col == 1.0


class TestSwimmerRemoval:
    def test_rightward_removed_past_right_edge(self):
        ctx = make_ctx(width=10)
        sw = make_swimmer(col=11.0, speed=0.5, dir=1)
        assert sw.update(ctx) is False

    def test_rightward_kept_at_edge(self):
        ctx = make_ctx(width=10)
        sw = make_swimmer(col=10.0, speed=0.5, dir=1)
        assert sw.update(ctx) is True

    def test_leftward_removed_past_left_edge(self):
        ctx = make_ctx(width=10)
        sw = make_swimmer(col=-4.0, speed=0.5, dir=-1, sprite="<><")
        assert sw.update(ctx) is False

    def test_leftward_kept_while_partly_visible(self):
        ctx = make_ctx(width=10)
        sw = make_swimmer(col=-3.0, speed=0.5, dir=-1, sprite="<><")
        assert sw.update(ctx) is True

    def test_rightward_not_removed_on_left_side(self):
        ctx = make_ctx(width=10)
        sw = make_swimmer(col=-50.0, speed=1.0, dir=1)
        assert sw.update(ctx) is True

    def test_custom_is_done_removes_anywhere(self, ctx):
        class Done:
            def advance(self, swimmer, ctx):
                pass

            def is_done(self, swimmer, ctx):
                return True

        sw = make_swimmer(Done(), col=5.0)
        assert sw.update(ctx) is False

    def test_custom_is_done_overrides_offscreen_check(self):
        ctx = make_ctx(width=10)

        class NeverDone:
            def advance(self, swimmer, ctx):
                swimmer.col += 100

            def is_done(self, swimmer, ctx):
                return False

        sw = make_swimmer(NeverDone(), col=0.0)
        assert sw.update(ctx) is True
        assert sw.col == 100.0


class TestRender:
    def test_floors_position(self):
        sw = make_swimmer(row=2.7, col=-0.5, hl_group="red")
        r = sw.render()
        assert r == RenderInfo(row=2, col=-1, sprite="><>", hl="red")

    def test_keeps_float_position(self):
        sw = make_swimmer(row=2.7, col=3.25)
        sw.render()
        assert (sw.row, sw.col) == (2.7, 3.25)

    def test_lines(self):
        r = RenderInfo(row=0, col=0, sprite="ab\ncd", hl="fish")
        assert r.lines == ["ab", "cd"]

    def test_swimmer_is_dataclass_with_behaviour(self):
        sw = Swimmer(row=1, col=2, dir=-1, speed=0.5, sprite="<><",
                     hl_group="fish", behaviour=Horizontal())
        assert sw.dir == -1
        assert sw.sprite_width == 3
