"""Recursive structural diff of two document trees.

Only mappings are descended into. Lists and scalars are compared as whole
values, so a reordered list shows up as one MODIFIED record at the list's
path rather than per-element changes.
"""

from __future__ import annotations

from typing import Any

from confimpact.diff.models import ChangeKind, ChangeRecord


def diff(a: dict[str, Any], b: dict[str, Any], path: str = "") -> list[ChangeRecord]:
    """Compare two mappings and return the changes turning `a` into `b`.

    Sibling order follows the keys of `a`, then keys that only exist in `b`.
    Callers should not rely on it.
    """
    changes: list[ChangeRecord] = []
    a = a or {}
    b = b or {}

    for key in list(a) + [k for k in b if k not in a]:
        current_path = f"{path}.{key}" if path else str(key)

        if key not in a:
            changes.append(
                ChangeRecord(kind=ChangeKind.ADDED, path=current_path, new_value=b[key])
            )
        elif key not in b:
            changes.append(
                ChangeRecord(kind=ChangeKind.REMOVED, path=current_path, old_value=a[key])
            )
        elif isinstance(a[key], dict) and isinstance(b[key], dict):
            changes.extend(diff(a[key], b[key], current_path))
        elif not deep_equal(a[key], b[key]):
            changes.append(
                ChangeRecord(
                    kind=ChangeKind.MODIFIED,
                    path=current_path,
                    old_value=a[key],
                    new_value=b[key],
                )
            )

    return changes


def deep_equal(x: Any, y: Any) -> bool:
    """Value equality with JSON typing.

    Unlike ``==``, booleans never equal numbers (``True`` vs ``1``).
    Integers and floats of the same value are equal, mappings ignore key
    order, lists compare element-wise.
    """
    if isinstance(x, bool) or isinstance(y, bool):
        return isinstance(x, bool) and isinstance(y, bool) and x == y
    if isinstance(x, (int, float)) and isinstance(y, (int, float)):
        return x == y
    if isinstance(x, dict) and isinstance(y, dict):
        if x.keys() != y.keys():
            return False
        return all(deep_equal(x[k], y[k]) for k in x)
    if isinstance(x, list) and isinstance(y, list):
        if len(x) != len(y):
            return False
        return all(deep_equal(i, j) for i, j in zip(x, y))
    if type(x) is not type(y):
        return False
    return x == y
