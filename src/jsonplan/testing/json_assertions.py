"""Structural assertions on serialized JSON documents.

These check the shape of a document rather than the value it decodes to, which is
what omission policies need: once deserialized, a field left out of the document
cannot be told apart from a field written with its default value.
"""

from __future__ import annotations

import json
from typing import Any

from jsonplan.testing.pointer import MISSING, PathSegment, path_to_pointer, resolve_pointer


def assert_json_contains(document: Any, *path: PathSegment) -> None:
    """Assert that a non-null value exists at `path`.

    With no path the whole document is addressed, so this passes for any non-null
    document.
    """
    pointer = path_to_pointer(*path)
    node = resolve_pointer(document, pointer)
    if node is MISSING or node is None:
        raise AssertionError(
            f"Serialized json '{_render(document)}' contains at pointer '{pointer}' "
            f"a missing or null value"
        )


def assert_json_does_not_contain(document: Any, *path: PathSegment) -> None:
    """Assert that `path` is missing from the document or holds null.

    With no path the whole document is addressed, so this fails for any non-null
    document.
    """
    pointer = path_to_pointer(*path)
    node = resolve_pointer(document, pointer)
    if node is not MISSING and node is not None:
        raise AssertionError(
            f"Serialized json '{_render(document)}' contains at pointer '{pointer}' "
            f"the value {_render(node)}"
        )


def _render(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=repr)
