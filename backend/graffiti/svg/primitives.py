"""Bounding boxes of outline primitives, in the glyph's logical coordinates."""

from __future__ import annotations

import logging
import re

from svgpathtools import Path, parse_path

from graffiti.svg.parser import MarkupElement

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_ARG_RE = re.compile(r"[\s,]*(" + _NUMBER_RE.pattern + ")")
_FLAG_RE = re.compile(r"[\s,]*([01])")
_COMMAND_RE = re.compile(r"[MmZzLlHhVvCcSsQqTtAa]")
_SEPARATOR_RE = re.compile(r"[\s,]*")
_ARG_COUNTS = {"m": 2, "l": 2, "h": 1, "v": 1, "c": 6, "s": 4, "q": 4, "t": 2, "a": 7}

# (xmin, ymin, xmax, ymax)
BBox = tuple[float, float, float, float]


def primitive_bbox(element: MarkupElement) -> BBox | None:
    """Bounding box of one primitive, or None when its geometry is unusable."""
    try:
        if element.tag == "path":
            return _path_bbox(element)
        if element.tag == "rect":
            x, y = _num(element, "x", 0.0), _num(element, "y", 0.0)
            return (x, y, x + _num(element, "width"), y + _num(element, "height"))
        if element.tag == "circle":
            cx, cy, r = _num(element, "cx", 0.0), _num(element, "cy", 0.0), _num(element, "r")
            return (cx - r, cy - r, cx + r, cy + r)
        if element.tag == "ellipse":
            cx, cy = _num(element, "cx", 0.0), _num(element, "cy", 0.0)
            rx, ry = _num(element, "rx"), _num(element, "ry")
            return (cx - rx, cy - ry, cx + rx, cy + ry)
        if element.tag == "line":
            x1, y1 = _num(element, "x1", 0.0), _num(element, "y1", 0.0)
            x2, y2 = _num(element, "x2", 0.0), _num(element, "y2", 0.0)
            return (min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2))
        if element.tag in ("polyline", "polygon"):
            return _points_bbox(element.get("points", "") or "")
    except (KeyError, ValueError) as e:
        logger.warning("Skipping <%s>: %s", element.tag, e)
        return None

    logger.debug("Unsupported primitive <%s>", element.tag)
    return None


def _path_bbox(element: MarkupElement) -> BBox | None:
    d = element.get("d")
    if not d:
        return None
    path = _parse_path(d)
    if path is None or len(path) == 0:
        return None
    xmin, xmax, ymin, ymax = path.bbox()
    return (float(xmin), float(ymin), float(xmax), float(ymax))


def _parse_path(d: str) -> Path | None:
    try:
        return parse_path(d)
    except Exception as e:
        error = e
    # A zero-length arc fails the whole path in svgpathtools; renderers skip it
    try:
        path = parse_path(drop_degenerate_arcs(d))
    except Exception:
        logger.warning("Failed to parse path: %s", error)
        return None
    logger.debug("Parsed path after dropping zero-length arcs")
    return path


def drop_degenerate_arcs(d: str) -> str:
    """Path data with every arc that ends at its own start point removed.

    Each remaining segment is written with an explicit command letter, so
    implicit repeats survive and relative segments keep their origin.
    Raises ValueError on path data that cannot be tokenized.
    """
    out: list[str] = []
    pos = 0
    x = y = 0.0
    start_x = start_y = 0.0
    command: str | None = None
    while True:
        pos = _SEPARATOR_RE.match(d, pos).end()
        if pos >= len(d):
            break
        m = _COMMAND_RE.match(d, pos)
        if m is not None:
            command = m.group(0)
            pos = m.end()
        elif command is None or command in "Zz":
            raise ValueError(f"Unexpected path data at {pos}: {d[pos:pos + 12]!r}")
        if command in "Zz":
            out.append(command)
            x, y = start_x, start_y
            continue

        kind = command.lower()
        args, pos = _read_args(d, pos, kind)
        values = [float(a) for a in args]
        dx, dy = (x, y) if command.islower() else (0.0, 0.0)
        if kind == "h":
            end_x, end_y = values[0] + dx, y
        elif kind == "v":
            end_x, end_y = x, values[0] + dy
        else:
            end_x, end_y = values[-2] + dx, values[-1] + dy

        if kind == "a" and (end_x, end_y) == (x, y):
            continue
        out.append(f"{command} {' '.join(args)}")
        x, y = end_x, end_y
        if kind == "m":
            start_x, start_y = x, y
            # Extra coordinate pairs after a moveto are linetos
            command = "l" if command == "m" else "L"
    return " ".join(out)


def _read_args(d: str, pos: int, kind: str) -> tuple[list[str], int]:
    args: list[str] = []
    for i in range(_ARG_COUNTS[kind]):
        # Arc flags are single digits and may be written without separators
        regex = _FLAG_RE if kind == "a" and i in (3, 4) else _ARG_RE
        m = regex.match(d, pos)
        if m is None:
            raise ValueError(f"Bad {kind.upper()} arguments at {pos}: {d[pos:pos + 12]!r}")
        args.append(m.group(1))
        pos = m.end()
    return args, pos


def _points_bbox(points: str) -> BBox | None:
    values = [float(v) for v in _NUMBER_RE.findall(points)]
    if len(values) < 2:
        return None
    xs, ys = values[0::2], values[1::2]
    n = min(len(xs), len(ys))
    return (min(xs[:n]), min(ys[:n]), max(xs[:n]), max(ys[:n]))


def _num(element: MarkupElement, name: str, default: float | None = None) -> float:
    raw = element.get(name)
    if raw is None:
        if default is None:
            raise KeyError(f"missing {name!r}")
        return default
    return float(raw.replace("px", "").strip())
