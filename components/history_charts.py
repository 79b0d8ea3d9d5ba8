"""
components/history_charts.py
────────────────────────────
Plotly chart builders for the running history page.

Standalone functions that return Plotly Figure objects.
No app state, no NiceGUI context assumptions.
"""
import pandas as pd
import plotly.graph_objects as go

from metric_types import METRIC_ORDER


def _apply_dark_layout(fig, height):
    fig.update_layout(
        template='plotly_dark',
        paper_bgcolor='rgba(0,0,0,0)',
        plot_bgcolor='rgba(0,0,0,0)',
        height=height,
        margin=dict(l=20, r=20, t=20, b=20),
        font=dict(color='#a1a1aa'),  # Zinc-400
    )
    fig.update_layout(modebar={'remove': ['zoom', 'pan', 'select', 'lasso2d', 'zoomIn', 'zoomOut', 'autoScale', 'resetScale', 'toImage']})
    return fig


def _empty_figure(message, height):
    fig = go.Figure()
    fig.add_annotation(
        text=message,
        xref='paper', yref='paper',
        x=0.5, y=0.5,
        showarrow=False,
        font=dict(size=14, color='#71717a'),
    )
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False)
    return _apply_dark_layout(fig, height)


def build_metric_history_chart(df, enabled_metrics, height=320):
    """
    Line chart of each enabled metric over time.

    Args:
        df: Chronological frame with a 'date' column and one column per metric key
        enabled_metrics: Iterable of MetricType to draw (drawn in declaration order)

    Returns:
        Plotly Figure object
    """
    enabled = [m for m in METRIC_ORDER if m in set(enabled_metrics or [])]
    if df is None or df.empty:
        return _empty_figure('No runs in this period', height)
    if not enabled:
        return _empty_figure('Select a metric to plot', height)

    df = df.copy()
    df['date'] = pd.to_datetime(df['date'])

    fig = go.Figure()
    for metric in enabled:
        info = metric.info
        fig.add_trace(go.Scatter(
            x=df['date'],
            y=df[metric.key],
            mode='lines+markers',
            name=info.name,
            line=dict(color=info.color, width=2),
            marker=dict(size=5),
            hovertemplate=f"{info.name}: %{{y}}<br>%{{x|%b %d}}<extra></extra>",
        ))

    fig.update_yaxes(title_text='Score', range=[0, 105], gridcolor='#27272a')
    fig.update_xaxes(gridcolor='#27272a')
    fig.update_layout(
        showlegend=True,
        legend=dict(orientation='h', yanchor='bottom', y=1.02, xanchor='left', x=0),
        hovermode='x unified',
    )
    return _apply_dark_layout(fig, height)


def build_consistency_chart(stats_by_metric, height=300):
    """
    Horizontal bar chart of consistency per metric.

    Args:
        stats_by_metric: Dict of MetricType -> MetricStats

    Returns:
        Plotly Figure object
    """
    metrics = [m for m in METRIC_ORDER if m in (stats_by_metric or {})]
    if not metrics:
        return _empty_figure('No consistency data', height)

    y_labels = [m.info.name for m in metrics]
    x_values = [stats_by_metric[m].consistency for m in metrics]
    colors = [stats_by_metric[m].consistency_color for m in metrics]
    labels = [stats_by_metric[m].consistency_label for m in metrics]

    fig = go.Figure(data=[
        go.Bar(
            y=y_labels,
            x=x_values,
            orientation='h',
            marker=dict(color=colors),
            text=[f"{v} · {label}" for v, label in zip(x_values, labels)],
            textposition='auto',
            hoverinfo='none',
        )
    ])
    fig.update_xaxes(title_text='Consistency', range=[0, 100])
    fig.update_yaxes(autorange='reversed')
    fig.update_layout(showlegend=False)
    return _apply_dark_layout(fig, height)
