# config.py
"""Configuration: defaults, JSON loading, validation and population setup."""

import json
import logging
import random
from collections.abc import Mapping

from . import behaviours
from .entities import DEFAULT_SPRITES, SPRITE_SETS, SpritePair
from .spawner import Spawner

log = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Invalid configuration value."""


DEFAULTS = {
    "auto_start": True,
    "tick_ms": 150,
    "max_fish": 5,
    "spawn_chance": 0.1,
    "hl_group": "fish",
    "behaviour": "wander",
    "sprites": None,
    "tabstop": 8,
    "species": None,
}


# ──────────────────────────────────────────────
#  Loading / merging
# ──────────────────────────────────────────────

def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge ``override`` over ``base``; neither is modified."""
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(result.get(key), Mapping):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(path: str) -> dict:
    try:
        with open(path) as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"config file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"{path} contains invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a JSON object")
    return data


# ──────────────────────────────────────────────
#  Sprites
# ──────────────────────────────────────────────

def _join_sprite(value) -> str:
    if isinstance(value, str):
        sprite = value
    elif isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        sprite = "\n".join(value)
    else:
        raise ConfigError(f"sprite must be a string or list of lines, got {value!r}")
    if not sprite:
        raise ConfigError("sprite must not be empty")
    return sprite


def sprites_for(value) -> SpritePair:
    """Resolve a sprite setting into a SpritePair.

    Accepts None, a name from SPRITE_SETS, a [right, left] pair or a
    {"right": ..., "left": ...} mapping.
    """
    if value is None:
        return DEFAULT_SPRITES
    if isinstance(value, SpritePair):
        return value
    if isinstance(value, str):
        if value not in SPRITE_SETS:
            available = ", ".join(sorted(SPRITE_SETS))
            raise ConfigError(f"unknown sprite set: {value!r} (available: {available})")
        return SPRITE_SETS[value]
    if isinstance(value, Mapping):
        try:
            return SpritePair(_join_sprite(value["right"]), _join_sprite(value["left"]))
        except KeyError as e:
            raise ConfigError(f"sprites mapping is missing {e.args[0]!r}") from e
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return SpritePair(_join_sprite(value[0]), _join_sprite(value[1]))
    raise ConfigError(f"invalid sprites setting: {value!r}")


# ──────────────────────────────────────────────
#  Validation
# ──────────────────────────────────────────────

def _check_number(opts, key, low=None, high=None, integer=False):
    value = opts.get(key)
    kinds = (int,) if integer else (int, float)
    if isinstance(value, bool) or not isinstance(value, kinds):
        raise ConfigError(f"{key} must be a {'whole ' if integer else ''}number, got {value!r}")
    if low is not None and value < low:
        raise ConfigError(f"{key} must be >= {low}, got {value}")
    if high is not None and value > high:
        raise ConfigError(f"{key} must be <= {high}, got {value}")


def _validate_population(opts: Mapping, where: str):
    try:
        if "max_fish" in opts:
            _check_number(opts, "max_fish", low=0, integer=True)
        if "max" in opts:
            _check_number(opts, "max", low=0, integer=True)
        if "spawn_chance" in opts:
            _check_number(opts, "spawn_chance", low=0, high=1)
        if "hl_group" in opts and not isinstance(opts["hl_group"], str):
            raise ConfigError(f"hl_group must be a string, got {opts['hl_group']!r}")
        if "sprites" in opts:
            sprites_for(opts["sprites"])
        if "behaviour" in opts:
            behaviours.validate(opts["behaviour"])
    except ValueError as e:
        raise ConfigError(f"{where}: {e}") from e


def validate_config(opts: Mapping) -> None:
    _check_number(opts, "tick_ms", low=1)
    _check_number(opts, "tabstop", low=1, integer=True)
    _validate_population(opts, "config")
    species = opts.get("species")
    if species is None:
        return
    if not isinstance(species, Mapping):
        raise ConfigError("species must be a mapping of name -> options")
    for name, species_opts in species.items():
        if not isinstance(species_opts, Mapping):
            raise ConfigError(f"species {name!r}: options must be a mapping")
        _validate_population(species_opts, f"species {name!r}")


# ──────────────────────────────────────────────
#  Setup
# ──────────────────────────────────────────────

def register_species(engine, opts: Mapping, rng=None) -> Spawner:
    """Create a spawner for one population and register it on ``engine``."""
    spawner = Spawner(
        max_fish=opts["max_fish"],
        spawn_chance=opts["spawn_chance"],
        hl_group=opts["hl_group"],
        sprites=sprites_for(opts.get("sprites")),
        behaviour=opts.get("behaviour"),
        rng=rng,
    )
    engine.register_spawner(spawner)
    return spawner


def setup(engine, opts: Mapping | None = None, rng=None) -> dict:
    """Merge ``opts`` over DEFAULTS, register populations, maybe start."""
    config = deep_merge(DEFAULTS, dict(opts or {}))
    validate_config(config)
    rng = rng or random

    engine.tick_ms = config["tick_ms"]
    engine.host.tabstop = config["tabstop"]

    species = config.get("species")
    if species is not None:
        for name, species_opts in species.items():
            register_species(engine, {
                "max_fish": species_opts.get("max", config["max_fish"]),
                "spawn_chance": species_opts.get("spawn_chance", config["spawn_chance"]),
                "hl_group": species_opts.get("hl_group", config["hl_group"]),
                "sprites": species_opts.get("sprites", config["sprites"]),
                "behaviour": species_opts.get("behaviour", config["behaviour"]),
            }, rng=rng)
            log.debug("registered species %r", name)
    else:
        register_species(engine, config, rng=rng)

    if config["auto_start"]:
        engine.start(config["tick_ms"])
    return config
