"""Serving size parsing for free-text upstream descriptions."""

import math
import re

DEFAULT_SERVING: tuple[float, str] = (100.0, "g")

_SERVING_PATTERN = re.compile(
    r"(\d+(?:\.\d+)?)\s*(g|ml|oz|cup|piece|slice|serving)?", re.IGNORECASE
)


def parse_serving_size(text: str | None) -> tuple[float, str]:
    """Extract a (size, unit) pair from a serving description.

    Only the first quantity in the text is used, so "1 cup (240ml)" yields
    (1.0, "cup"). A number without a recognized unit is taken as grams.
    Missing, unparseable, non-finite or non-positive input returns
    (100.0, "g").
    """
    if text is None:
        return DEFAULT_SERVING
    match = _SERVING_PATTERN.search(text)
    if match is None:
        return DEFAULT_SERVING
    size = float(match.group(1))
    if not math.isfinite(size) or size <= 0:
        return DEFAULT_SERVING
    unit = (match.group(2) or "g").lower()
    return size, unit
