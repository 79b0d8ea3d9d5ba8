"""
components/history_view.py
──────────────────────────
NiceGUI renderer for the running history page.

Owns:
  • Period selector and metric toggle chips
  • Summary cards, trend chart, per-metric stat rows, insight cards

Does not own:
  • Data loading or trend math (delegated to RunningHistoryManager)
"""
from __future__ import annotations

from nicegui import ui

from components.history_charts import build_consistency_chart, build_metric_history_chart
from metric_types import METRIC_ORDER, TimePeriod


def create_summary_card(label, value):
    with ui.card().classes('bg-zinc-900 p-4 border border-zinc-800 flex-1') as card:
        card.style('border-radius: 8px; box-shadow: 0px 4px 12px rgba(0, 0, 0, 0.4);')
        ui.label(label).classes('text-xs text-zinc-500 uppercase tracking-wider font-semibold')
        ui.label(value).classes('text-xl text-white font-mono font-bold')
    return card


def create_insight_card(insight):
    color = insight.severity.color
    with ui.card().classes('bg-zinc-900 p-4 w-full') as card:
        card.style(f'border-radius: 8px; border: 1px solid {color}4d;')
        with ui.row().classes('items-start gap-3 no-wrap'):
            ui.icon(insight.icon).classes('text-2xl').style(f'color: {color};')
            with ui.column().classes('gap-1'):
                ui.label(insight.title).classes('text-sm font-bold text-white')
                ui.label(insight.message).classes('text-sm text-zinc-400')
    return card


def create_metric_stats_row(metric, stats):
    info = metric.info
    trend = stats.trend
    with ui.row().classes('w-full items-center justify-between py-2 border-b border-zinc-800'):
        with ui.row().classes('items-center gap-2'):
            ui.icon(info.icon).style(f'color: {info.color};')
            ui.label(info.name).classes('text-sm text-white font-semibold')
        with ui.row().classes('items-center gap-4 font-mono text-sm'):
            ui.label(f"Avg {stats.average}").classes('text-white')
            ui.label(f"Best {stats.best}").classes('text-zinc-400')
            ui.label(f"Low {stats.worst}").classes('text-zinc-400')
            ui.label(info.status_for_value(stats.average)).style(
                f'color: {info.color_for_value(stats.average)};'
            )
            with ui.row().classes('items-center gap-1'):
                ui.icon(trend.icon).style(f'color: {trend.color};')
                ui.label(trend.label).style(f'color: {trend.color};')


class HistoryView:
    """Renders RunningHistoryManager state and routes user actions back to it."""

    def __init__(self, manager):
        self.manager = manager
        self.period_row = None
        self.toggle_row = None
        self.content = None

    def build(self):
        with ui.column().classes('w-full max-w-5xl mx-auto p-6 gap-4'):
            ui.label('RUNNING HISTORY').classes('text-2xl font-bold text-white')
            self.period_row = ui.row().classes('gap-2')
            self.toggle_row = ui.row().classes('gap-2 flex-wrap')
            self.content = ui.column().classes('w-full gap-4')
        self.manager.load_data()
        self.refresh()
        return self

    def select_period(self, period):
        self.manager.load_data(period)
        self.refresh()

    def toggle_metric(self, metric):
        self.manager.toggle_metric(metric)
        self.refresh()

    def refresh(self):
        self._render_period_row()
        self._render_toggle_row()
        self._render_content()

    def _render_period_row(self):
        self.period_row.clear()
        with self.period_row:
            for period in TimePeriod:
                selected = period is self.manager.selected_period
                ui.button(
                    period.value,
                    on_click=lambda p=period: self.select_period(p),
                ).props('unelevated dense no-caps' if selected else 'flat dense no-caps').classes(
                    'bg-white text-black font-semibold' if selected else 'text-zinc-300'
                )

    def _render_toggle_row(self):
        self.toggle_row.clear()
        with self.toggle_row:
            for metric in METRIC_ORDER:
                info = metric.info
                enabled = self.manager.state.is_enabled(metric)
                chip = ui.button(
                    info.name,
                    icon=info.icon,
                    on_click=lambda m=metric: self.toggle_metric(m),
                ).props('dense no-caps rounded' + ('' if enabled else ' outline'))
                if enabled:
                    chip.style(f'background-color: {info.color} !important; color: black;')
                else:
                    chip.style(f'color: {info.color};')

    def _render_content(self):
        manager = self.manager
        self.content.clear()
        with self.content:
            with ui.row().classes('w-full gap-4 no-wrap'):
                create_summary_card('Runs', str(manager.total_runs))
                create_summary_card('Distance', f"{manager.total_distance:.1f} mi")
                create_summary_card('Time', manager.total_time_formatted)
                create_summary_card('Avg Pace', f"{manager.average_pace_formatted} /mi")
                create_summary_card('Form Score', str(manager.latest_overall_score))

            ui.plotly(build_metric_history_chart(
                manager.to_dataframe(),
                manager.state.ordered_enabled_metrics(),
            )).classes('w-full')

            stats_by_metric = manager.all_stats()
            with ui.card().classes('bg-zinc-900 p-4 border border-zinc-800 w-full'):
                ui.label('METRIC BREAKDOWN').classes('text-lg font-bold text-white mb-2')
                for metric in METRIC_ORDER:
                    create_metric_stats_row(metric, stats_by_metric[metric])

            ui.plotly(build_consistency_chart(stats_by_metric)).classes('w-full')

            ui.label('INSIGHTS').classes('text-lg font-bold text-white')
            for insight in manager.insights:
                create_insight_card(insight)
