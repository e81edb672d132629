"""JSON pointer (RFC 6901) construction and resolution.

A path is a sequence of segments, each an object key or an array index. Segments
are escaped (`~` as `~0`, `/` as `~1`) and joined with `/` into a pointer; the
empty path is the empty pointer, which addresses the whole document.
"""

from __future__ import annotations

import re
from typing import Any, List, Union

PathSegment = Union[str, int]

_ARRAY_INDEX_RE = re.compile(r"0|[1-9][0-9]*")


class _Missing:
    """Marker for a location that does not exist in a document."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def escape_segment(segment: PathSegment) -> str:
    """Escape a single path segment for use in a pointer."""
    return str(segment).replace("~", "~0").replace("/", "~1")


def unescape_segment(segment: str) -> str:
    """Reverse `escape_segment`.

    Raises:
        ValueError: If the segment contains `~` not followed by `0` or `1`.
    """
    if re.search(r"~(?![01])", segment):
        raise ValueError(f"Invalid escape sequence in JSON pointer segment '{segment}'")
    # ~1 first, so that "~01" becomes "~1" rather than "/"
    return segment.replace("~1", "/").replace("~0", "~")


def path_to_pointer(*path: PathSegment) -> str:
    """Join path segments into a single JSON pointer."""
    return "".join(f"/{escape_segment(segment)}" for segment in path)


def pointer_to_path(pointer: str) -> List[str]:
    """Split a JSON pointer into its unescaped segments.

    Raises:
        ValueError: If a non-empty pointer does not start with `/`.
    """
    if pointer == "":
        return []
    if not pointer.startswith("/"):
        raise ValueError(f"JSON pointer '{pointer}' must be empty or start with '/'")
    return [unescape_segment(segment) for segment in pointer[1:].split("/")]


def resolve_pointer(document: Any, pointer: str) -> Any:
    """Return the value at `pointer` in `document`, or MISSING if there is none.

    Array elements are addressed by decimal indices without leading zeros;
    the `-` index never resolves.
    """
    node = document
    for segment in pointer_to_path(pointer):
        if isinstance(node, dict):
            if segment not in node:
                return MISSING
            node = node[segment]
        elif isinstance(node, list):
            if not _ARRAY_INDEX_RE.fullmatch(segment) or int(segment) >= len(node):
                return MISSING
            node = node[int(segment)]
        else:
            return MISSING
    return node
