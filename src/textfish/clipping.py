# clipping.py
"""Split sprite lines into the runs that are visible through real text."""

from dataclasses import dataclass, field


@dataclass
class Segment:
    """One contiguous visible run of a sprite line."""
    col: int
    chunks: list = field(default_factory=list)  # [(text, style), ...]

    @property
    def text(self) -> str:
        return "".join(text for text, _ in self.chunks)


def expand_tabs(text: str, tabstop: int) -> str:
    """Expand tabs so that string index equals display column."""
    if tabstop < 1:
        raise ValueError(f"tabstop must be >= 1, got {tabstop}")
    if "\t" not in text:
        return text
    out = []
    col = 0
    for ch in text:
        if ch == "\t":
            spaces = tabstop - (col % tabstop)
            out.append(" " * spaces)
            col += spaces
        else:
            out.append(ch)
            col += 1
    return "".join(out)


def place_clipped(col: int, sprite: str, style: str, line_text: str) -> list[Segment]:
    """Return the visible segments of ``sprite`` drawn at ``col`` over ``line_text``.

    ``line_text`` must already be tab-expanded. A sprite cell shows through
    when its column is past either end of the line or lands on a space;
    any other character hides it.
    """
    segments: list[Segment] = []
    cur_col = None
    cur_text = []
    line_len = len(line_text)

    for i, ch in enumerate(sprite):
        c = col + i
        hidden = 0 <= c < line_len and line_text[c] != " "
        if not hidden:
            if cur_col is None:
                cur_col = c
            cur_text.append(ch)
        elif cur_col is not None:
            segments.append(Segment(cur_col, [("".join(cur_text), style)]))
            cur_col = None
            cur_text = []

    if cur_col is not None:
        segments.append(Segment(cur_col, [("".join(cur_text), style)]))

    return segments


clip = place_clipped
