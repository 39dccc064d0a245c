"""
Standard chart wrappers using Plotly.
"""
import plotly.graph_objects as go
import pandas as pd
from typing import Optional

from skillgap.config import SCORE_AXIS_MAX


# =============================================================================
# CHART THEME
# =============================================================================

CHART_COLORS = {
    "actual": "#8884d8",
    "expected": "#82ca9d",
    "shortfall": "#ff9800",
    "success": "#28a745",
    "danger": "#dc3545",
    "neutral": "#6c757d",
}

CHART_TEMPLATE = "plotly_white"

DEFAULT_LAYOUT = {
    "template": CHART_TEMPLATE,
    "font": {"family": "Arial, sans-serif", "size": 12},
    "margin": {"l": 50, "r": 50, "t": 40, "b": 40},
    "hoverlabel": {"bgcolor": "white"},
}


def apply_layout(fig: go.Figure, **kwargs) -> go.Figure:
    """Apply standard layout to figure."""
    layout = {**DEFAULT_LAYOUT, **kwargs}
    fig.update_layout(**layout)
    return fig


# =============================================================================
# RADAR CHARTS
# =============================================================================

def _closed(values: pd.Series) -> list:
    values = list(values)
    return values + values[:1] if values else values


def gap_radar(df: pd.DataFrame,
              title: str = "",
              actual_label: str = "Actual",
              expected_label: str = "Expected",
              axis_max: Optional[float] = None) -> go.Figure:
    """
    Actual vs expected radar over categories.

    df must have category, actual_average, expected_average and may have
    is_shortfall; shortfall categories are highlighted on the angular axis.
    """
    fig = go.Figure()
    if df.empty:
        return apply_layout(fig, title=title, height=400)

    categories = _closed(df["category"])
    hover = (
        "<b>%{theta}</b><br>"
        f"{actual_label}: " + "%{customdata[0]:.2f}<br>"
        f"{expected_label}: " + "%{customdata[1]:.2f}<extra></extra>"
    )
    customdata = list(zip(_closed(df["actual_average"]), _closed(df["expected_average"])))

    fig.add_trace(go.Scatterpolar(
        r=_closed(df["actual_average"]),
        theta=categories,
        customdata=customdata,
        hovertemplate=hover,
        fill="toself",
        name=actual_label,
        line={"color": CHART_COLORS["actual"]},
        opacity=0.6,
    ))
    fig.add_trace(go.Scatterpolar(
        r=_closed(df["expected_average"]),
        theta=categories,
        customdata=customdata,
        hovertemplate=hover,
        fill="toself",
        name=expected_label,
        line={"color": CHART_COLORS["expected"]},
        opacity=0.6,
    ))

    ticktext = list(df["category"])
    if "is_shortfall" in df.columns:
        ticktext = [
            f'<span style="color:{CHART_COLORS["shortfall"]}">{cat}</span>' if short else cat
            for cat, short in zip(df["category"], df["is_shortfall"])
        ]

    upper = axis_max if axis_max is not None else max(
        SCORE_AXIS_MAX,
        float(df[["actual_average", "expected_average"]].max().max()),
    )

    fig.update_layout(
        polar={
            "radialaxis": {"visible": True, "range": [0, upper], "angle": 30},
            "angularaxis": {
                "tickmode": "array",
                "tickvals": list(df["category"]),
                "ticktext": ticktext,
            },
        },
        showlegend=True,
    )
    return apply_layout(fig, title=title, height=400)


# =============================================================================
# BAR CHARTS
# =============================================================================

def gap_bar(df: pd.DataFrame, label_col: str = "category", title: str = "") -> go.Figure:
    """
    Horizontal diverging bar of gaps, surplus green and shortfall red.
    """
    fig = go.Figure(go.Bar(
        x=df["gap"],
        y=df[label_col],
        orientation="h",
        marker_color=[
            CHART_COLORS["success"] if gap >= 0 else CHART_COLORS["danger"]
            for gap in df["gap"]
        ],
        text=[f"{gap:+.2f}" for gap in df["gap"]],
        textposition="outside",
    ))
    fig.update_layout(yaxis={"autorange": "reversed"})
    return apply_layout(fig, title=title, height=max(250, 30 * len(df) + 80))
