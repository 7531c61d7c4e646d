"""Partition a numeric column by the labels of a categorical column."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

logger = logging.getLogger(__name__)


class InputMismatchError(ValueError):
    """Raised when values and labels are not aligned one to one."""


def group_values(
    values: Sequence[float],
    labels: Sequence[Any],
    groups: Sequence[str] | None = None,
) -> dict[str, list[float]]:
    """Split values into groups by their positional label.

    Args:
        values: Numeric values
        labels: Group label for each value (same length as values)
        groups: Labels to keep, in this order (None = every label, first-seen
            order). A requested label with no rows maps to an empty list.
            A label requested more than once is kept once, at its first
            position.

    Returns:
        Mapping label -> list of values in row order

    Raises:
        InputMismatchError: If values and labels differ in length
    """
    if len(values) != len(labels):
        raise InputMismatchError(
            f"Got {len(values)} values but {len(labels)} group labels"
        )

    grouped: dict[str, list[float]] = {}
    for value, label in zip(values, labels):
        grouped.setdefault(str(label), []).append(float(value))

    if groups is None:
        return grouped

    requested = list(dict.fromkeys(str(label) for label in groups))
    if len(requested) < len(groups):
        logger.debug(
            f"Dropped {len(groups) - len(requested)} repeated group labels; "
            f"comparing {requested}"
        )

    return {label: grouped.get(label, []) for label in requested}
