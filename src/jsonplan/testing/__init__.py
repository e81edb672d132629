"""Harness for testing JSON plan serde round trips.

Typical use:

```python
context = default_serde_context()
restored = assert_json_round_trip(context, spec)
document = to_json_document(context, spec)
assert_json_does_not_contain(document, "timeout")
```
"""

from jsonplan.testing.context import (
    catalog_serde_context,
    configured_serde_context,
    default_serde_context,
)
from jsonplan.testing.json_assertions import (
    assert_json_contains,
    assert_json_does_not_contain,
)
from jsonplan.testing.pointer import (
    MISSING,
    escape_segment,
    path_to_pointer,
    pointer_to_path,
    resolve_pointer,
    unescape_segment,
)
from jsonplan.testing.round_trip import (
    assert_json_round_trip,
    to_json,
    to_json_document,
    to_object,
)

__all__ = [
    "MISSING",
    "assert_json_contains",
    "assert_json_does_not_contain",
    "assert_json_round_trip",
    "catalog_serde_context",
    "configured_serde_context",
    "default_serde_context",
    "escape_segment",
    "path_to_pointer",
    "pointer_to_path",
    "resolve_pointer",
    "to_json",
    "to_json_document",
    "to_object",
    "unescape_segment",
]
