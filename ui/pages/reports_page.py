import datetime
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from PySide6 import QtWidgets, QtCore, QtGui
from PySide6.QtCharts import (
    QBarCategoryAxis, QBarSeries, QBarSet, QChart, QChartView, QLineSeries, QPieSeries, QValueAxis,
)

import config
from core.utils import format_currency
from models.report import PERIODS, Series
from services import pdf_service, report_service
from ui.context import AppContext


# --- CHART HELPERS ---

def _chart(title: str) -> QChart:
    chart = QChart()
    chart.setTitle(title)
    chart.setAnimationOptions(QChart.SeriesAnimations)
    chart.setBackgroundVisible(False)
    chart.legend().setVisible(False)
    return chart


def _axes(chart: QChart, series, labels: List[str], values: List[float]) -> None:
    x = QBarCategoryAxis()
    x.append(labels)
    chart.addAxis(x, QtCore.Qt.AlignBottom)
    series.attachAxis(x)
    y = QValueAxis()
    y.setRange(0, max(values + [1]) * 1.1)
    y.setLabelFormat("%d")
    chart.addAxis(y, QtCore.Qt.AlignLeft)
    series.attachAxis(y)


def line_chart(title: str, data: Series, color: str) -> QChartView:
    chart = _chart(title)
    series = QLineSeries()
    series.setColor(QtGui.QColor(color))
    for i, (_, value) in enumerate(data):
        series.append(i, value)
    chart.addSeries(series)
    _axes(chart, series, [label for label, _ in data], [v for _, v in data])
    return _view(chart)


def bar_chart(title: str, data: Series, color: str) -> QChartView:
    chart = _chart(title)
    bar_set = QBarSet(title)
    bar_set.setColor(QtGui.QColor(color))
    for _, value in data:
        bar_set.append(value)
    series = QBarSeries()
    series.append(bar_set)
    chart.addSeries(series)
    _axes(chart, series, [label for label, _ in data], [v for _, v in data])
    return _view(chart)


def pie_chart(title: str, data: Series) -> QChartView:
    chart = _chart(title)
    chart.legend().setVisible(True)
    chart.legend().setAlignment(QtCore.Qt.AlignRight)
    series = QPieSeries()
    for label, value in data:
        series.append(label, value)
    chart.addSeries(series)
    return _view(chart)


def _view(chart: QChart) -> QChartView:
    view = QChartView(chart)
    view.setRenderHint(QtGui.QPainter.Antialiasing)
    view.setMinimumHeight(280)
    return view


class ReportTab(QtWidgets.QWidget):
    """
    One report: filter row, summary cards, charts, PDF export.
    'fetch' receives (period, start, end) and returns a report object.
    """
    def __init__(self, ctx: AppContext, fetch: Callable[..., Any], render: Callable[[Any], List[QtWidgets.QWidget]],
                 summary: Callable[[Any], Dict[str, str]], has_period: bool = True, has_dates: bool = True,
                 default_period: str = "monthly", parent=None):
        super().__init__(parent)
        self.ctx = ctx
        self.fetch = fetch
        self.render_charts = render
        self.summary = summary
        self.report: Optional[Any] = None

        layout = QtWidgets.QVBoxLayout(self)

        # --- FILTERS ---
        bar = QtWidgets.QHBoxLayout()
        self.period = QtWidgets.QComboBox()
        for p in PERIODS:
            self.period.addItem(p.title(), p)
        self.period.setCurrentIndex(max(self.period.findData(default_period), 0))
        self.period.setVisible(has_period)
        bar.addWidget(self.period)

        today = QtCore.QDate.currentDate()
        self.start = QtWidgets.QDateEdit(today.addMonths(-1))
        self.start.setCalendarPopup(True)
        self.end = QtWidgets.QDateEdit(today)
        self.end.setCalendarPopup(True)
        for w in (self.start, self.end):
            w.setVisible(has_dates)
            bar.addWidget(w)
        bar.addStretch()

        b_generate = QtWidgets.QPushButton("📊 Generate")
        b_generate.clicked.connect(self.load)
        self.b_export = QtWidgets.QPushButton("📄 Export PDF")
        self.b_export.clicked.connect(self.export)
        self.b_export.setEnabled(False)
        bar.addWidget(b_generate)
        bar.addWidget(self.b_export)
        layout.addLayout(bar)

        self.cards = QtWidgets.QHBoxLayout()
        layout.addLayout(self.cards)

        scroll = QtWidgets.QScrollArea()
        scroll.setWidgetResizable(True)
        body = QtWidgets.QWidget()
        self.charts = QtWidgets.QVBoxLayout(body)
        scroll.setWidget(body)
        layout.addWidget(scroll, 1)

    def load(self) -> None:
        period = self.period.currentData()
        start: datetime.date = self.start.date().toPython()
        end: datetime.date = self.end.date().toPython()
        if start > end:
            self.ctx.alerts.set_alert("Start date must be before end date", "warning")
            return
        self.ctx.run(lambda: self.fetch(period, start, end), self.show_report)

    def show_report(self, report: Any) -> None:
        self.report = report
        self.b_export.setEnabled(True)
        _clear(self.cards)
        _clear(self.charts)

        for title, value in self.summary(report).items():
            card = QtWidgets.QGroupBox(title)
            v = QtWidgets.QVBoxLayout(card)
            lbl = QtWidgets.QLabel(value)
            lbl.setStyleSheet("font-size: 20px; font-weight: bold;")
            v.addWidget(lbl)
            self.cards.addWidget(card)

        for w in self.render_charts(report):
            self.charts.addWidget(w)

    def export(self) -> None:
        if self.report is None:
            return
        title, _, _ = pdf_service.report_layout(self.report)
        default = f"{title.replace(' ', '_')}_{datetime.date.today().isoformat()}.pdf"
        path, _ = QtWidgets.QFileDialog.getSaveFileName(self, "Export PDF", default, "PDF Files (*.pdf)")
        if not path:
            return
        try:
            pdf_service.export_report(path, self.report)
        except OSError as e:
            self.ctx.alerts.set_alert(f"Export failed: {e}", "error")
            return
        self.ctx.alerts.set_alert(f"Report exported to {path}", "success")

    def showEvent(self, event) -> None:
        super().showEvent(event)
        if self.report is None:
            self.load()


def _clear(layout: QtWidgets.QLayout) -> None:
    while layout.count():
        item = layout.takeAt(0)
        if item.widget():
            item.widget().deleteLater()


class ReportsPage(QtWidgets.QWidget):
    def __init__(self, ctx: AppContext, parent=None):
        super().__init__(parent)
        self.ctx = ctx
        client = ctx.client

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(20, 15, 20, 15)
        lbl = QtWidgets.QLabel("Reports")
        lbl.setStyleSheet("font-size: 22px; font-weight: bold;")
        layout.addWidget(lbl)

        self.tabs = QtWidgets.QTabWidget()
        self.tabs.addTab(ReportTab(
            ctx, partial(report_service.revenue_report, client), self.revenue_charts,
            lambda r: {"Total Revenue": format_currency(r.total_revenue, config.CURRENCY),
                       "Total Payments": str(r.total_payments)},
        ), "Revenue")
        self.tabs.addTab(ReportTab(
            ctx, lambda period, start, end: report_service.membership_report(client), self.membership_charts,
            lambda r: {"Active Members": str(r.total_active), "Inactive Members": str(r.total_inactive)},
            has_period=False, has_dates=False,
        ), "Membership")
        self.tabs.addTab(ReportTab(
            ctx, partial(report_service.attendance_report, client), self.attendance_charts,
            lambda r: {"Total Check-ins": str(r.total_checkins)},
            default_period="daily",
        ), "Attendance")
        self.tabs.addTab(ReportTab(
            ctx, lambda period, start, end: report_service.classes_report(client, start, end), self.classes_charts,
            lambda r: {"Total Sessions": str(r.total_sessions), "Total Attendance": str(r.total_attendance)},
            has_period=False,
        ), "Classes")
        layout.addWidget(self.tabs, 1)

    @property
    def colors(self):
        state = self.ctx.theme.state
        return state.primary_color, state.secondary_color

    def revenue_charts(self, r) -> List[QtWidgets.QWidget]:
        primary, _ = self.colors
        return [line_chart("Revenue", r.series, primary)]

    def membership_charts(self, r) -> List[QtWidgets.QWidget]:
        primary, secondary = self.colors
        return [
            pie_chart("Members per Plan", r.distribution_series),
            bar_chart("Revenue per Plan", r.revenue_series, secondary),
            line_chart("New Members", r.growth_series, primary),
        ]

    def attendance_charts(self, r) -> List[QtWidgets.QWidget]:
        primary, secondary = self.colors
        return [
            line_chart("Check-ins", r.series, primary),
            bar_chart("Busiest Hours", r.hours_series, secondary),
            bar_chart("Busiest Days", r.days_series, primary),
        ]

    def classes_charts(self, r) -> List[QtWidgets.QWidget]:
        primary, secondary = self.colors
        return [
            bar_chart("Attendance per Class", r.class_series, primary),
            bar_chart("Attendance per Instructor", r.instructor_series, secondary),
        ]
