"""
Integer column width distribution.

Decision boxes are drawn as a row of columns whose widths must add up to
the width of the enclosing box exactly, with no pixel lost to rounding.
"""

import math
from typing import List, Sequence


def fit_column_widths(base_widths: Sequence[float], target_width: int) -> List[int]:
    """
    Scale column widths proportionally so they sum to target_width.

    Each column gets floor(width / total * target); the pixels lost to
    flooring are handed out one at a time from the first column on. Any
    residual error lands in the last column.

    Args:
        base_widths: Preferred column widths.
        target_width: Total width the columns must fill.

    Returns:
        The fitted widths. The input is returned unchanged when it already
        sums to within half a pixel of the target, or when the total or the
        target is not positive.

    Example:
        >>> fit_column_widths([100, 100, 100], 250)
        [84, 83, 83]
    """
    widths = list(base_widths)
    if not widths:
        return []

    base_total = sum(widths)
    if base_total <= 0 or target_width <= 0:
        return widths
    if abs(base_total - target_width) < 0.5:
        return widths

    scaled = [math.floor(width / base_total * target_width) for width in widths]
    remainder = target_width - sum(scaled)
    index = 0
    while remainder > 0:
        scaled[index % len(scaled)] += 1
        remainder -= 1
        index += 1

    used = sum(scaled)
    if used != target_width:
        scaled[-1] += target_width - used
    return scaled


def distribute_extra_width(
    widths: Sequence[float], indices: Sequence[int], extra: int
) -> List[float]:
    """
    Add extra pixels to the given columns as evenly as possible.

    Every selected column gets extra // len(indices); the remainder goes one
    pixel at a time to the selected columns in order.
    """
    result = list(widths)
    if extra <= 0 or not indices:
        return result

    base_increment, remainder = divmod(extra, len(indices))
    for index in indices:
        bonus = 1 if remainder > 0 else 0
        result[index] += base_increment + bonus
        remainder -= bonus
    return result


def spread_to_minimum(widths: Sequence[float], minimum_total: int) -> List[float]:
    """Widen all columns evenly until they sum to at least minimum_total."""
    result = list(widths)
    current = sum(result)
    if current >= minimum_total or not result:
        return result
    return distribute_extra_width(
        result, range(len(result)), math.ceil(minimum_total - current)
    )
