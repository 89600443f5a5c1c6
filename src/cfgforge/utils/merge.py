"""Configuration tree merging.

"""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
from typing import Any, Dict

def merge_pair(base: Any, override: Any) -> Any:
    """Merge ``override`` on top of ``base`` and return a new tree.

    Args:
        base (Any): Lower-precedence configuration tree.
        override (Any): Higher-precedence configuration tree.

    Returns:
        Any: Merged tree. Neither input is modified.

    Side Effects / I/O:
        - Primarily performs in-memory transformations.

    Preconditions / Invariants:
        - Two mappings merge key by key; keys keep their first-appearance order.
        - Two lists concatenate, ``base`` elements first.
        - Any other pairing is a full replace by ``override``.

    Examples:
        >>> from cfgforge.utils.merge import merge_pair
        >>> merge_pair({"a": [1], "b": 1}, {"a": [2], "b": 2})
        {'a': [1, 2], 'b': 2}

    """
    if isinstance(base, Mapping) and isinstance(override, Mapping):
        merged: Dict[Any, Any] = {key: deepcopy(value) for key, value in base.items()}
        for key, value in override.items():
            if key in merged:
                merged[key] = merge_pair(merged[key], value)
            else:
                merged[key] = deepcopy(value)
        return merged
    if _is_sequence(base) and _is_sequence(override):
        return [deepcopy(item) for item in base] + [deepcopy(item) for item in override]
    return deepcopy(override)

def merge_trees(*trees: Any) -> Any:
    """Merge configuration trees left to right, later trees taking precedence.

    Args:
        *trees (Any): Trees ordered from lowest to highest precedence.

    Returns:
        Any: Merged tree; ``{}`` when no trees are given.

    Examples:
        >>> from cfgforge.utils.merge import merge_trees
        >>> merge_trees({"a": 1}, {"b": [1]}, {"a": 2, "b": [2]})
        {'a': 2, 'b': [1, 2]}

    """
    if not trees:
        return {}
    result = deepcopy(trees[0])
    for tree in trees[1:]:
        result = merge_pair(result, tree)
    return result


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))
