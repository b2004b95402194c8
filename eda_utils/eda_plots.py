"""
EDA Plots Module
================

Summary report and outlier figures for one numeric column.

Main functions
--------------
plot_summary_report(values, column_name, summary=None) -> go.Figure
plot_outliers(values, result, column_name) -> go.Figure

Summary report layout
---------------------
  ┌──────────────────┬────────────────────┐
  │  Histogram +     │  Statistics panel  │
  │  Normal curve    │  (moments, 5-num   │
  ├──────────────────┤   summary)         │
  │  Boxplot         │                    │
  └──────────────────┴────────────────────┘
"""

import math
from typing import Dict, List, Optional, Sequence

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots
from scipy import stats as sp_stats

from .eda_calculations import DatasetSummary, summarize_values
from .outliers import OutlierResult


# ──────────────────────────────────────────────
#  COLOUR PALETTE
# ──────────────────────────────────────────────
_HIST_BAR   = 'rgba(67, 97, 238, 0.70)'
_HIST_LINE  = 'rgba(67, 97, 238, 1.00)'
_NORM_CURVE = 'rgba(200, 50, 50, 0.90)'
_BOX_COLOR  = 'rgba(67, 97, 238, 0.60)'
_INLIER     = 'rgba(67, 97, 238, 0.55)'
_OUTLIER    = '#E63946'
_BOUND_LINE = '#6C757D'


# ──────────────────────────────────────────────
#  PUBLIC API
# ──────────────────────────────────────────────

def plot_summary_report(
    values: Sequence[float],
    column_name: str = "Variable",
    summary: Optional[DatasetSummary] = None,
    n_bins: int = 10,
    height: int = 560,
    width: Optional[int] = None,
) -> go.Figure:
    """
    Summary Report for a single column.

    Panels (left column, top → bottom):
        1. Histogram with fitted normal curve (skipped when StDev is 0)
        2. Boxplot

    Right column:
        Statistics table

    Parameters
    ----------
    values : sequence of float
        Numeric values of the column
    column_name : str
        Variable name shown in titles and axis labels
    summary : DatasetSummary, optional
        Pre-computed statistics; computed here when None
    n_bins : int, default 10
    height : int, default 560
    width : int, optional

    Returns
    -------
    go.Figure
    """
    data_clean = np.asarray([v for v in values if math.isfinite(v)], dtype=float)

    if summary is None:
        summary = summarize_values(list(data_clean), column_name)

    fig = make_subplots(
        rows=2, cols=2,
        column_widths=[0.60, 0.40],
        row_heights=[0.70, 0.30],
        specs=[
            [{"type": "xy"}, {"type": "xy", "rowspan": 2}],
            [{"type": "xy"}, None],
        ],
        vertical_spacing=0.10,
        horizontal_spacing=0.06,
    )

    if data_clean.size:
        _add_histogram(fig, data_clean, column_name, n_bins, summary, row=1, col=1)
        _add_boxplot(fig, data_clean, column_name, row=2, col=1)
    _add_stats_panel(fig, summary, row=1, col=2)

    fig.update_layout(
        title=dict(
            text=f"<b>Summary Report for {column_name}</b>",
            x=0.5,
            xanchor='center',
            font=dict(size=16)
        ),
        height=height,
        width=width,
        template='plotly_white',
        showlegend=False,
        margin=dict(l=50, r=30, t=55, b=40),
        paper_bgcolor='white',
        plot_bgcolor='white',
    )

    return fig


def plot_outliers(
    values: Sequence[float],
    result: OutlierResult,
    column_name: str = "Value",
    height: int = 420,
) -> go.Figure:
    """
    Values by position with outliers highlighted and the bounds drawn.

    Parameters
    ----------
    values : sequence of float
        The values the detector analysed
    result : OutlierResult
        Detection result for ``values``
    column_name : str
    height : int

    Returns
    -------
    go.Figure
    """
    flagged = set(result.outlier_indices)
    inlier_x = [i + 1 for i in range(len(values)) if i not in flagged]
    inlier_y = [values[i] for i in range(len(values)) if i not in flagged]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=inlier_x,
        y=inlier_y,
        mode='markers',
        marker=dict(size=7, color=_INLIER),
        name='Values',
        hovertemplate='#%{x}: %{y}<extra></extra>',
    ))
    fig.add_trace(go.Scatter(
        x=[i + 1 for i in result.outlier_indices],
        y=list(result.outliers),
        mode='markers',
        marker=dict(size=10, color=_OUTLIER, symbol='x'),
        name='Outliers',
        hovertemplate='#%{x}: %{y}<extra>Outlier</extra>',
    ))

    for bound, label in ((result.lower_bound, 'Lower bound'), (result.upper_bound, 'Upper bound')):
        if bound is not None and math.isfinite(bound):
            fig.add_hline(
                y=bound,
                line=dict(color=_BOUND_LINE, dash='dash', width=1.5),
                annotation_text=f"{label}: {bound:.2f}",
                annotation_position='top left',
            )

    method_label = 'IQR' if result.method == 'iqr' else f"Z-score (threshold {result.threshold})"
    fig.update_layout(
        title=dict(
            text=f"<b>Outliers in {column_name}</b> ({method_label})",
            x=0.5,
            xanchor='center',
            font=dict(size=15)
        ),
        height=height,
        template='plotly_white',
        xaxis_title='Position',
        yaxis_title=column_name,
        margin=dict(l=50, r=30, t=55, b=40),
    )
    return fig


# ──────────────────────────────────────────────
#  PRIVATE HELPERS
# ──────────────────────────────────────────────

def _add_histogram(fig, data_clean, col_name, n_bins, summary, row, col):
    """Histogram bars + fitted normal density curve overlay."""
    fig.add_trace(go.Histogram(
        x=data_clean,
        nbinsx=n_bins,
        marker_color=_HIST_BAR,
        marker_line=dict(color=_HIST_LINE, width=0.5),
        name='Data',
        histnorm='probability density',
        hovertemplate='Density: %{y:.4f}<extra></extra>',
    ), row=row, col=col)

    if summary.std_dev:
        x_fit = np.linspace(data_clean.min(), data_clean.max(), 300)
        y_fit = sp_stats.norm.pdf(x_fit, summary.mean, summary.std_dev)
        fig.add_trace(go.Scatter(
            x=x_fit,
            y=y_fit,
            mode='lines',
            line=dict(color=_NORM_CURVE, width=2.5),
            name='Normal fit',
        ), row=row, col=col)

    fig.update_xaxes(title_text=col_name, row=row, col=col, tickfont=dict(size=10))
    fig.update_yaxes(title_text='Density', row=row, col=col, tickfont=dict(size=10))


def _add_boxplot(fig, data_clean, col_name, row, col):
    """Horizontal boxplot with mean marker."""
    fig.add_trace(go.Box(
        x=data_clean,
        orientation='h',
        marker_color=_BOX_COLOR,
        line_color='#3A0CA3',
        boxmean=True,
        name=col_name,
    ), row=row, col=col)

    fig.update_xaxes(title_text=col_name, row=row, col=col, tickfont=dict(size=10))
    fig.update_yaxes(showticklabels=False, row=row, col=col)


def _fmt(value, digits=4):
    if value is None or (isinstance(value, float) and not math.isfinite(value)):
        return 'N/A'
    return f"{value:.{digits}f}"


def _add_stats_panel(fig, s, row, col):
    """
    Invisible scatter trace + annotations rendering the statistics table
    in the right column.
    """
    lines: List[Dict] = [
        {'text': "<b>Descriptive Statistics</b>"},
        {'text': f"    Mean            {_fmt(s.mean)}"},
        {'text': f"    StDev           {_fmt(s.std_dev)}"},
        {'text': f"    Variance        {_fmt(s.variance)}"},
        {'text': f"    Skewness        {_fmt(s.skewness, 6)}"},
        {'text': f"    Kurtosis        {_fmt(s.kurtosis, 6)}"},
        {'text': f"    N               {s.count}"},
        {'text': ''},
        {'text': "<b>5-Number Summary</b>"},
        {'text': f"    Minimum         {_fmt(s.min)}"},
        {'text': f"    1st Quartile    {_fmt(s.q1)}"},
        {'text': f"    Median          {_fmt(s.median)}"},
        {'text': f"    3rd Quartile    {_fmt(s.q3)}"},
        {'text': f"    Maximum         {_fmt(s.max)}"},
    ]

    # Dummy invisible trace to anchor the annotation area
    fig.add_trace(go.Scatter(
        x=[0], y=[0],
        mode='markers',
        marker=dict(opacity=0),
        showlegend=False,
        hoverinfo='skip',
    ), row=row, col=col)

    fig.update_xaxes(visible=False, row=row, col=col)
    fig.update_yaxes(visible=False, row=row, col=col)

    x_anchor = 0.64
    y_start = 0.97
    line_height = 0.055

    annotations = []
    for i, line in enumerate(lines):
        if not line['text']:
            continue
        annotations.append(dict(
            text=f"<span style='font-family:Courier New,monospace; font-size:11px; color:#222222'>{line['text']}</span>",
            x=x_anchor,
            y=y_start - i * line_height,
            xref='paper',
            yref='paper',
            showarrow=False,
            xanchor='left',
            yanchor='top',
            align='left',
        ))

    fig.update_layout(annotations=annotations)
