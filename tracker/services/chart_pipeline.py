"""Turn fetched entry rows into chart series and a robust value axis.

Upstream rows may be incomplete: a row whose date or value cannot be parsed
is dropped from every series and from the statistics. Nothing here raises on
bad data and nothing mutates its input.
"""
from datetime import datetime
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Tuple
import logging
import math
import sys

import pandas as pd
from pydantic import BaseModel

from tracker.domain.entities import ChartPoint, ChartSeries, RobustRange
from tracker.services.date_normalizer import parse_instant
from tracker.services.messages import MESSAGES

logger = logging.getLogger(__name__)

FENCE_FACTOR = 1.5
PADDING_RATIO = 0.1
PRECISION = 1000


class ChartData(NamedTuple):
    actual: ChartSeries
    projected: ChartSeries
    value_range: Optional[RobustRange]


def _as_mapping(row: Any) -> Mapping[str, Any]:
    if isinstance(row, BaseModel):
        return row.model_dump()
    if isinstance(row, Mapping):
        return row
    return {}


def to_finite(value: Any) -> Optional[float]:
    """Coerce a number-like value to a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(pd.to_numeric(value, errors="coerce"))
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _normalize(row: Any) -> Optional[Tuple[datetime, float, bool]]:
    data = _as_mapping(row)
    instant = parse_instant(data.get("date"))
    value = to_finite(data.get("value"))
    if instant is None or value is None:
        return None
    return instant, value, data.get("projected") is True


def build_series(
    rows: Iterable[Any],
    actual_name: str = MESSAGES["actual"],
    projected_name: str = MESSAGES["projected"],
) -> Tuple[ChartSeries, ChartSeries]:
    """Split rows into (actual, projected) point series, dropping bad rows."""
    actual: List[ChartPoint] = []
    projected: List[ChartPoint] = []
    dropped = 0

    for row in rows or []:
        normalized = _normalize(row)
        if normalized is None:
            dropped += 1
            continue
        instant, value, is_projected = normalized
        target = projected if is_projected else actual
        target.append(ChartPoint(x=instant, y=value))

    if dropped:
        logger.debug(f"Dropped {dropped} unparsable rows from chart series")

    return (
        ChartSeries(name=actual_name, points=actual),
        ChartSeries(name=projected_name, points=projected),
    )


def quartiles(sorted_values: Sequence[float]) -> Tuple[float, float]:
    """Q1 and Q3 by linear interpolation at rank (n-1)*q."""
    series = pd.Series(sorted_values, dtype="float64")
    return float(series.quantile(0.25)), float(series.quantile(0.75))


def _floor(value: float) -> float:
    scaled = value * PRECISION
    if not math.isfinite(scaled):
        return value
    return math.floor(round(scaled, 6)) / PRECISION


def _ceil(value: float) -> float:
    scaled = value * PRECISION
    if not math.isfinite(scaled):
        return value
    return math.ceil(round(scaled, 6)) / PRECISION


def _clamp(value: float) -> float:
    """Keep a padded bound inside the representable float range."""
    return max(-sys.float_info.max, min(sys.float_info.max, value))


def compute_robust_range(values: Iterable[Any]) -> Optional[RobustRange]:
    """Padded min/max of the values that fall inside the IQR fences.

    Returns None when no finite value is present; callers should then fall
    back to auto-scaling. Outliers beyond the fences may end up outside the
    returned range.
    """
    numbers = sorted(n for n in (to_finite(v) for v in values or []) if n is not None)
    if not numbers:
        return None

    q1, q3 = quartiles(numbers)
    iqr = q3 - q1
    low_fence = q1 - FENCE_FACTOR * iqr
    high_fence = q3 + FENCE_FACTOR * iqr

    inside = [n for n in numbers if low_fence <= n <= high_fence]
    if inside:
        low, high = inside[0], inside[-1]
    else:
        low, high = numbers[0], numbers[-1]

    span = high - low
    if span:
        padding = span * PADDING_RATIO
    else:
        # Constant series: pad by the value itself, so [5, 5] spans [0, 10]
        padding = abs(low) or 1.0

    return RobustRange(
        min=_floor(_clamp(low - padding)),
        max=_ceil(_clamp(high + padding)),
    )


def sort_rows_by_date(rows: Iterable[Any], descending: bool = False) -> List[Any]:
    """Stable sort by parsed date; rows without a valid date go last."""
    dated = []
    undated = []
    for row in rows or []:
        instant = parse_instant(_as_mapping(row).get("date"))
        if instant is None:
            undated.append(row)
        else:
            dated.append((instant, row))
    dated.sort(key=lambda pair: pair[0], reverse=descending)
    return [row for _, row in dated] + undated


def prepare_chart_data(rows: Iterable[Any]) -> ChartData:
    """Series for both partitions plus the robust range of every plotted value."""
    actual, projected = build_series(rows)
    values = [p.y for p in actual.points] + [p.y for p in projected.points]
    return ChartData(actual, projected, compute_robust_range(values))
