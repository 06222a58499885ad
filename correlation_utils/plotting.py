"""
Correlation Plotting
Scatter plots of a variable pair on the raw scale and on the rank scale
"""

from typing import Optional

import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from .ranking import rank_values
from .reporting import round_coefficient
from .statistics import CorrelationResult, as_decimal_sample


def create_correlation_scatter(
    data: pd.DataFrame,
    x_var: str,
    y_var: str,
    result: Optional[CorrelationResult] = None,
    point_size: int = 10,
    opacity: float = 0.7,
    places: int = 4
) -> go.Figure:
    """
    Side-by-side scatter plots of two columns: raw values and tie-corrected ranks.

    Parameters
    ----------
    data : pd.DataFrame
        Dataset holding both columns (Decimal, int or float values)
    x_var : str
        Column for the x-axis
    y_var : str
        Column for the y-axis
    result : CorrelationResult, optional
        When given, the coefficients are shown in the title
    point_size : int
        Marker size (default 10)
    opacity : float
        Marker opacity (0-1, default 0.7)
    places : int
        Decimal places for coefficients in the title

    Returns
    -------
    go.Figure
        Plotly figure object
    """
    x_values = as_decimal_sample(data[x_var], x_var)
    y_values = as_decimal_sample(data[y_var], y_var)

    if len(x_values) == 0:
        fig = go.Figure()
        fig.add_annotation(
            text="No data available",
            xref="paper", yref="paper",
            x=0.5, y=0.5, showarrow=False
        )
        return fig

    x_raw = [float(v) for v in x_values]
    y_raw = [float(v) for v in y_values]
    x_rank = [float(r) for r in rank_values(x_values)]
    y_rank = [float(r) for r in rank_values(y_values)]

    hover_labels = [str(idx) for idx in data.index]

    fig = make_subplots(
        rows=1, cols=2,
        subplot_titles=("Values", "Ranks"),
        horizontal_spacing=0.12
    )

    fig.add_trace(go.Scatter(
        x=x_raw,
        y=y_raw,
        mode='markers',
        name='Values',
        marker=dict(size=point_size, color='blue', opacity=opacity),
        text=hover_labels,
        hovertemplate=f"%{{text}}<br><b>{x_var}</b>: %{{x:.3f}}<br><b>{y_var}</b>: %{{y:.3f}}<extra></extra>"
    ), row=1, col=1)

    fig.add_trace(go.Scatter(
        x=x_rank,
        y=y_rank,
        mode='markers',
        name='Ranks',
        marker=dict(size=point_size, color='red', opacity=opacity),
        text=hover_labels,
        hovertemplate=f"%{{text}}<br><b>rank {x_var}</b>: %{{x}}<br><b>rank {y_var}</b>: %{{y}}<extra></extra>"
    ), row=1, col=2)

    fig.update_xaxes(title_text=x_var, row=1, col=1)
    fig.update_yaxes(title_text=y_var, row=1, col=1)
    fig.update_xaxes(title_text=f"Rank of {x_var}", row=1, col=2)
    fig.update_yaxes(title_text=f"Rank of {y_var}", row=1, col=2)

    if result is not None:
        title = (
            f"{x_var} vs {y_var}: "
            f"Pearson r = {round_coefficient(result.pearson, places):f}, "
            f"Spearman ρ = {round_coefficient(result.spearman, places):f}, "
            f"Kendall τ-{result.kendall_variant} = {round_coefficient(result.kendall, places):f}"
        )
    else:
        title = f"{x_var} vs {y_var}"

    fig.update_layout(
        title=title,
        template="plotly_white",
        height=520,
        showlegend=False
    )

    return fig
