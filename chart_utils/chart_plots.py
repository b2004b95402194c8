"""
Chart Plotting Utilities
Interactive Plotly figures built from prepared chart data
"""

from typing import List, Optional, Sequence

import plotly.graph_objects as go

from color_utils import OTHERS_COLOR, get_correlation_color, get_unified_color_schemes

from .chart_data import OTHERS_LABEL, ChartData, ScatterData, TreeMapNode


def _apply_layout(fig: go.Figure, title: str, height: int, x_title: str = None, y_title: str = None) -> go.Figure:
    scheme = get_unified_color_schemes()
    fig.update_layout(
        title=dict(text=f"<b>{title}</b>", x=0.5, xanchor='center', font=dict(size=16)),
        height=height,
        template='plotly_white',
        paper_bgcolor=scheme['paper'],
        plot_bgcolor=scheme['background'],
        margin=dict(l=50, r=30, t=55, b=40),
    )
    if x_title is not None:
        fig.update_xaxes(title_text=x_title, gridcolor=scheme['grid'])
    if y_title is not None:
        fig.update_yaxes(title_text=y_title, gridcolor=scheme['grid'])
    return fig


def create_bar_chart(
    chart_data: ChartData,
    title: str = "Top Values",
    x_label: str = "Category",
    y_label: str = "Value",
    height: int = 450
) -> go.Figure:
    """
    Vertical bar chart, one bar per label

    Parameters
    ----------
    chart_data : ChartData
        Output of prepare_bar_chart_data
    title, x_label, y_label : str
    height : int

    Returns
    -------
    go.Figure
    """
    fig = go.Figure()
    for dataset in chart_data.datasets:
        fig.add_trace(go.Bar(
            x=chart_data.labels,
            y=dataset.data,
            name=dataset.label,
            marker=dict(
                color=dataset.background_color,
                line=dict(color=dataset.border_color, width=dataset.border_width or 0),
            ),
            hovertemplate='%{x}: %{y}<extra></extra>',
        ))

    fig.update_layout(showlegend=len(chart_data.datasets) > 1)
    return _apply_layout(fig, title, height, x_label, y_label)


def create_pie_chart(
    chart_data: ChartData,
    title: str = "Distribution",
    height: int = 450,
    hole: float = 0.0
) -> go.Figure:
    """Pie chart; the 'Others' slice is drawn in neutral gray"""
    values = chart_data.values
    colors = list(chart_data.datasets[0].background_color or []) if chart_data.datasets else []
    if OTHERS_LABEL in chart_data.labels and len(colors) == len(values):
        colors[chart_data.labels.index(OTHERS_LABEL)] = OTHERS_COLOR

    fig = go.Figure(go.Pie(
        labels=chart_data.labels,
        values=values,
        hole=hole,
        marker=dict(colors=colors or None),
        sort=False,
        textinfo='percent+label',
        hovertemplate='%{label}: %{value} (%{percent})<extra></extra>',
    ))
    return _apply_layout(fig, title, height)


def create_histogram(
    chart_data: ChartData,
    column_name: str = "Value",
    title: Optional[str] = None,
    height: int = 450
) -> go.Figure:
    """
    Histogram drawn from pre-binned counts (bars with no gaps)

    Parameters
    ----------
    chart_data : ChartData
        Output of prepare_histogram_data
    column_name : str
        Variable name for the x-axis title
    """
    dataset = chart_data.datasets[0] if chart_data.datasets else None
    fig = go.Figure(go.Bar(
        x=chart_data.labels,
        y=dataset.data if dataset else [],
        marker=dict(
            color=dataset.background_color if dataset else None,
            line=dict(color=dataset.border_color if dataset else None, width=1),
        ),
        name='Frequency',
        hovertemplate='%{x}<br>Count: %{y}<extra></extra>',
    ))
    fig.update_layout(bargap=0, showlegend=False)
    return _apply_layout(fig, title or f"Distribution of {column_name}", height, column_name, 'Frequency')


def create_scatter_plot(
    scatter_data: ScatterData,
    x_label: str = "X",
    y_label: str = "Y",
    title: Optional[str] = None,
    marker_size: int = 8,
    height: int = 500
) -> go.Figure:
    """Scatter plot of the prepared {x, y} points"""
    scheme = get_unified_color_schemes()
    fig = go.Figure()
    for dataset in scatter_data.datasets:
        fig.add_trace(go.Scatter(
            x=[point['x'] for point in dataset.data],
            y=[point['y'] for point in dataset.data],
            mode='markers',
            name=dataset.label,
            marker=dict(
                size=marker_size,
                color=scheme['point_color'],
                line=dict(color=scheme['point_border'], width=1),
            ),
            hovertemplate=f'{x_label}: %{{x}}<br>{y_label}: %{{y}}<extra></extra>',
        ))

    fig.update_layout(showlegend=False)
    return _apply_layout(fig, title or f"{y_label} vs {x_label}", height, x_label, y_label)


def create_tree_map(
    nodes: Sequence[TreeMapNode],
    title: str = "Tree Map",
    height: int = 450
) -> go.Figure:
    """Flat treemap, one tile per node"""
    fig = go.Figure(go.Treemap(
        labels=[node.name for node in nodes],
        parents=[''] * len(nodes),
        values=[node.value for node in nodes],
        marker=dict(colorscale='Blues'),
        hovertemplate='%{label}<br>Value: %{value}<extra></extra>',
    ))
    return _apply_layout(fig, title, height)


def create_correlation_heatmap(
    correlation_matrix: List[List[float]],
    column_names: Sequence[str],
    method: str = 'pearson',
    highlight_threshold: float = 0.7,
    height: int = 500
) -> go.Figure:
    """
    Annotated correlation heatmap

    Cells whose |r| exceeds the highlight threshold are outlined in the
    strong-correlation colors.
    """
    text = [[f"{value:.2f}" if value == value else 'N/A' for value in row] for row in correlation_matrix]

    fig = go.Figure(go.Heatmap(
        z=correlation_matrix,
        x=list(column_names),
        y=list(column_names),
        text=text,
        texttemplate='%{text}',
        zmin=-1,
        zmax=1,
        colorscale='RdBu',
        reversescale=True,
        hovertemplate='%{y} / %{x}: %{z:.3f}<extra></extra>',
    ))

    for i, row in enumerate(correlation_matrix):
        for j, value in enumerate(row):
            if i != j and abs(value) > highlight_threshold:
                fig.add_shape(
                    type='rect',
                    x0=j - 0.5, x1=j + 0.5, y0=i - 0.5, y1=i + 0.5,
                    line=dict(color=get_correlation_color(value, highlight_threshold), width=3),
                )

    fig.update_yaxes(autorange='reversed')
    return _apply_layout(fig, f"{method.capitalize()} Correlation Matrix", height)
