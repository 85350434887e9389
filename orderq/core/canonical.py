"""
Stable JSON encoding shared by the file log and view comparisons.

A submission line on disk and a payload pushed to a client encode the same
way whatever order their dicts were built in, so a restored bundle can be
checked byte for byte against the progress events it replaces.
"""

import json
from typing import Any


def canonicalize(obj: Any) -> Any:
    """
    Rebuild obj with dict keys in sorted order and tuples turned into lists.

    Submission orders are tuples in memory but lists on the wire; after this
    both compare equal.
    """
    if isinstance(obj, dict):
        return {k: canonicalize(obj[k]) for k in sorted(obj.keys())}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    return obj


def canonical_json_bytes(obj: Any) -> bytes:
    """UTF-8 encoding of canonical_json_str, as written to the submission log."""
    return canonical_json_str(obj).encode("utf-8")


def canonical_json_str(obj: Any) -> str:
    """
    Compact JSON text of obj with sorted keys.

    Non-ASCII item labels are kept as-is rather than escaped.
    """
    return json.dumps(canonicalize(obj), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
