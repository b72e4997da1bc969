"""Altair rendering of prepared chart data."""
from typing import Optional

import altair as alt
import pandas as pd

from tracker.services.chart_pipeline import ChartData
from tracker.services.date_normalizer import format_date_label
from tracker.services.messages import UI_TEXT

SERIES_COLORS = ["#1976d2", "#9c27b0"]


def chart_frame(data: ChartData) -> pd.DataFrame:
    """Long-form frame with one row per point: date, value, label, series."""
    records = [
        {
            "date": point.x,
            "value": point.y,
            "label": format_date_label(point.x),
            "series": series.name,
        }
        for series in (data.actual, data.projected)
        for point in series.points
    ]
    return pd.DataFrame.from_records(records, columns=["date", "value", "label", "series"])


def build_chart(data: ChartData, symbol: str = "", title: str = "") -> Optional[alt.LayerChart]:
    """Line chart of actual vs projected values, or None when nothing is plottable."""
    df = chart_frame(data)
    if df.empty:
        return None

    y_title = UI_TEXT["graph"]["y_axis"]
    if symbol:
        y_title = f"{y_title} ({symbol})"

    if data.value_range is not None:
        y_scale = alt.Scale(domain=[data.value_range.min, data.value_range.max])
    else:
        y_scale = alt.Scale(zero=False)

    color = alt.Color(
        "series:N",
        title=None,
        scale=alt.Scale(
            domain=[data.actual.name, data.projected.name],
            range=SERIES_COLORS,
        ),
        legend=alt.Legend(orient="bottom"),
    )

    base = alt.Chart(df).encode(
        x=alt.X("date:T", title=UI_TEXT["graph"]["x_axis"]),
        y=alt.Y("value:Q", title=y_title, scale=y_scale),
        color=color,
        tooltip=[
            alt.Tooltip("label:N", title=UI_TEXT["graph"]["x_axis"]),
            alt.Tooltip("value:Q", title=y_title),
            alt.Tooltip("series:N", title=""),
        ],
    )
    chart = (base.mark_line(clip=True) + base.mark_point(filled=True, clip=True)).properties(
        height=400,
        title=title,
    )
    return chart.interactive()
