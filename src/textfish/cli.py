"""textfish CLI -- run the pager, list presets, or diagnose clipping."""

import argparse
import curses
import json
import logging
import sys

from . import __version__
from .behaviours import BehaviourError, available_presets
from .clipping import expand_tabs, place_clipped
from .config import DEFAULTS, ConfigError, deep_merge, load_config, setup, validate_config
from .engine import Engine
from .entities import DEFAULT_SPRITES, SPRITE_SETS
from .host import BufferHost
from .viewer import Viewer

log = logging.getLogger(__name__)

COMMANDS = ("run", "presets", "diag")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


# ──────────────────────────────────────────────
#  Helpers
# ──────────────────────────────────────────────

def _configure_logging(log_file: str | None, verbose: int, quiet_stderr: bool = False):
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG

    if log_file:
        logging.basicConfig(filename=log_file, level=level, format=LOG_FORMAT)
    elif quiet_stderr:
        # curses owns the terminal; drop records rather than scribble on it
        logging.getLogger().addHandler(logging.NullHandler())
        logging.getLogger().setLevel(level)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT)


def _parse_behaviour(value: str):
    """A preset name, or JSON for a preset with options."""
    value = value.strip()
    if value[:1] in ("{", "["):
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise ConfigError(f"--behaviour is not valid JSON: {e}") from e
    return value


def build_options(args) -> dict:
    """Config from --config, overridden by explicit command line flags."""
    opts = load_config(args.config) if args.config else {}
    overrides = {
        "tick_ms": args.tick_ms,
        "max_fish": args.max_fish,
        "spawn_chance": args.spawn_chance,
        "sprites": args.sprites,
        "tabstop": args.tabstop,
    }
    for key, value in overrides.items():
        if value is not None:
            opts[key] = value
    if args.behaviour is not None:
        opts["behaviour"] = _parse_behaviour(args.behaviour)
    if args.no_start:
        opts["auto_start"] = False
    return opts


def diagnose(host: BufferHost, col: int, sprite: str, style: str = "fish",
             rows: range | None = None) -> list[str]:
    """Report how ``sprite`` at ``col`` is clipped on each row of ``host``."""
    out = [
        f"sprite {sprite!r} at col {col}, tabstop {host.tabstop}",
        "",
    ]
    host.clear_overlays()
    for row in rows if rows is not None else range(host.line_count()):
        text = expand_tabs(host.line_text(row), host.tabstop)
        segments = place_clipped(col, sprite, style, text)
        for seg in segments:
            host.draw_overlay(row, seg.col, seg.chunks)
        shown = ", ".join(f"{seg.col}:{seg.text!r}" for seg in segments) or "(hidden)"
        out.append(f"row {row:3d} | text:     {text!r}")
        out.append(f"        | segments: {shown}")
        out.append(f"        | composed: {host.compose(row)!r}")
    return out


def _parse_rows(value: str) -> range:
    start, sep, stop = value.partition(":")
    try:
        if not sep:
            return range(int(start), int(start) + 1)
        return range(int(start or 0), int(stop))
    except ValueError:
        raise argparse.ArgumentTypeError(f"rows must look like A:B, got {value!r}") from None


# ──────────────────────────────────────────────
#  TUI runner
# ──────────────────────────────────────────────

def _run_tui(stdscr, host: BufferHost, opts: dict):
    engine = Engine(host)
    viewer = Viewer(stdscr, host, engine)
    try:
        setup(engine, opts)
        viewer.run()
    finally:
        engine.stop()


def _cmd_run(args):
    """Handler for the 'run' subcommand (also the default)."""
    _configure_logging(args.log_file, args.verbose, quiet_stderr=True)
    opts = build_options(args)
    validate_config(deep_merge(DEFAULTS, opts))
    host = BufferHost.load(args.file, tabstop=opts.get("tabstop", DEFAULTS["tabstop"]))
    log.info("opening %s (%d lines)", args.file, host.line_count())
    curses.wrapper(lambda stdscr: _run_tui(stdscr, host, opts))


def _cmd_presets(args):
    """Handler for the 'presets' subcommand."""
    print("Behaviours:")
    for name in available_presets():
        marker = " (default)" if name == DEFAULTS["behaviour"] else ""
        print(f"  {name}{marker}")
    print("\nSprite sets:")
    for name, pair in SPRITE_SETS.items():
        lines = pair.right.split("\n")
        widest = max(lines, key=lambda line: len(line.strip()))
        print(f"  {name:<8} {widest.strip()}  ({len(lines)} line{'s' if len(lines) > 1 else ''})")


def _cmd_diag(args):
    """Handler for the 'diag' subcommand."""
    _configure_logging(None, args.verbose)
    if args.tabstop < 1:
        raise ConfigError(f"tabstop must be >= 1, got {args.tabstop}")
    host = BufferHost.load(args.file, width=args.width, tabstop=args.tabstop)
    for line in diagnose(host, args.col, args.sprite, rows=args.rows):
        print(line)


# ──────────────────────────────────────────────
#  Argument parser
# ──────────────────────────────────────────────

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="textfish",
        description="textfish - fish that swim behind your text",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    # ---- run (default) ----
    p_run = subparsers.add_parser("run", help="Open a file with fish swimming behind it")
    p_run.add_argument("file", help="Text file to display")
    p_run.add_argument("--config", help="JSON config file")
    p_run.add_argument("--tick-ms", type=int, help=f"Milliseconds per tick (default: {DEFAULTS['tick_ms']})")
    p_run.add_argument("--max-fish", type=int, help=f"Maximum fish on screen (default: {DEFAULTS['max_fish']})")
    p_run.add_argument("--spawn-chance", type=float,
                       help=f"Per-tick spawn probability (default: {DEFAULTS['spawn_chance']})")
    p_run.add_argument("--behaviour", help="Behaviour preset name, or JSON like "
                                           "'{\"name\": \"sine\", \"amplitude\": 3}'")
    p_run.add_argument("--sprites", choices=sorted(SPRITE_SETS), help="Sprite set")
    p_run.add_argument("--tabstop", type=int, help=f"Tab width (default: {DEFAULTS['tabstop']})")
    p_run.add_argument("--no-start", action="store_true", help="Start paused (space toggles)")
    p_run.add_argument("--log-file", help="Write logs to this file")
    p_run.add_argument("-v", "--verbose", action="count", default=0)
    p_run.set_defaults(func=_cmd_run)

    # ---- presets ----
    p_presets = subparsers.add_parser("presets", help="List behaviour presets and sprite sets")
    p_presets.set_defaults(func=_cmd_presets)

    # ---- diag ----
    p_diag = subparsers.add_parser("diag", help="Show how a sprite is clipped against a file")
    p_diag.add_argument("file", help="Text file to check")
    p_diag.add_argument("--col", type=int, default=0, help="Sprite column (default: 0)")
    p_diag.add_argument("--sprite", default=DEFAULT_SPRITES.right,
                        help=f"Sprite line (default: {DEFAULT_SPRITES.right})")
    p_diag.add_argument("--rows", type=_parse_rows, help="Row range A:B (0-indexed, end exclusive)")
    p_diag.add_argument("--tabstop", type=int, default=DEFAULTS["tabstop"])
    p_diag.add_argument("--width", type=int, default=80)
    p_diag.add_argument("-v", "--verbose", action="count", default=0)
    p_diag.set_defaults(func=_cmd_diag)

    return parser


# ──────────────────────────────────────────────
#  Entry point
# ──────────────────────────────────────────────

def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)
    # `textfish FILE` is short for `textfish run FILE`
    if argv and argv[0] not in COMMANDS and argv[0] not in ("-h", "--help", "--version"):
        argv.insert(0, "run")

    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        args.func(args)
    except (ConfigError, BehaviourError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0
