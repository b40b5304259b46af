import sys
import datetime
import os
import logging
import tempfile

from PySide6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QTabWidget, QCalendarWidget, QCheckBox, QPushButton, QLabel,
    QMessageBox, QDateEdit, QGroupBox, QRadioButton, QTextEdit, QFileDialog
)
from PySide6.QtGui import QTextCharFormat, QBrush, QColor, QPixmap
from PySide6.QtCore import QDate, QThread, Signal, QObject

from custodycal.calendar_logic import generate_schedule, month_range
from custodycal.charts import create_share_chart, COLOR_MOTHER, COLOR_FATHER
from custodycal.config import load_config
from custodycal.engine import ROFR_OPTION, evaluate_custody
from custodycal.export_utils import (
    export_csv, export_pdf, format_day, format_level_counts, format_weekday_counts,
)
from custodycal.ical import generate_feed
from custodycal.models import MOTHER, FATHER
from custodycal.statistics import summarize_custody, count_by_weekday, count_by_level


# === UI Text Constants ===
WINDOW_TITLE = "CustodyCal"
TAB_CALENDAR = "Calendar"
TAB_STATISTICS = "Statistics"
TAB_EXPORT = "Export"
DEBUG_LABEL = "Debug mode (show level/rule)"
ROFR_LABEL = "Right of first refusal reminder"
STATISTICS_BTN_TEXT = "Calculate statistics"
EXPORT_BTN_TEXT = "Start export"
FROM_LABEL = "From:"
TO_LABEL = "To:"

EXPORT_FILTERS = {
    'pdf': "PDF (*.pdf)",
    'csv': "CSV (*.csv)",
    'ics': "iCalendar (*.ics)",
}


def qdate_to_date(qdate):
    """QDate -> datetime.date"""
    return qdate.toPython() if hasattr(qdate, 'toPython') else datetime.date(qdate.year(), qdate.month(), qdate.day())


def set_date_format(calendar, date_obj, color_hex):
    qdate = QDate(date_obj.year, date_obj.month, date_obj.day)
    fmt = QTextCharFormat()
    fmt.setBackground(QBrush(QColor(color_hex)))
    calendar.setDateTextFormat(qdate, fmt)


def _date_range_row(layout):
    row = QHBoxLayout()
    today = datetime.date.today()
    row.addWidget(QLabel(FROM_LABEL))
    date_from = QDateEdit(QDate(today.year, today.month, 1)); date_from.setCalendarPopup(True)
    row.addWidget(date_from)
    row.addWidget(QLabel(TO_LABEL))
    date_to = QDateEdit(QDate(today.year, 12, 31)); date_to.setCalendarPopup(True)
    row.addWidget(date_to)
    layout.addLayout(row)
    return date_from, date_to


class CalendarTab(QWidget):
    def __init__(self, parent):
        super().__init__()
        self.parent = parent
        layout = QVBoxLayout(self)

        self.calendar = QCalendarWidget()
        self.calendar.setGridVisible(True)
        layout.addWidget(self.calendar)

        legend = QHBoxLayout()
        for text, color in (("Mother", COLOR_MOTHER), ("Father", COLOR_FATHER)):
            lbl = QLabel(text)
            lbl.setStyleSheet(f"background-color: {color}; padding: 2px 8px;")
            legend.addWidget(lbl)
        legend.addStretch()
        self.chk_debug = QCheckBox(DEBUG_LABEL)
        self.chk_rofr = QCheckBox(ROFR_LABEL)
        legend.addWidget(self.chk_debug)
        legend.addWidget(self.chk_rofr)
        layout.addLayout(legend)

        self.details = QTextEdit(); self.details.setReadOnly(True)
        layout.addWidget(self.details)


class StatisticsTab(QWidget):
    def __init__(self, parent):
        super().__init__()
        self.parent = parent
        layout = QVBoxLayout(self)
        self.date_from, self.date_to = _date_range_row(layout)
        self.btn_stats = QPushButton(STATISTICS_BTN_TEXT)
        layout.addWidget(self.btn_stats)
        self.lbl_summary = QLabel("")
        layout.addWidget(self.lbl_summary)
        self.lbl_weekdays = QLabel("")
        layout.addWidget(self.lbl_weekdays)
        self.lbl_levels = QLabel("")
        layout.addWidget(self.lbl_levels)
        self.lbl_chart = QLabel()
        layout.addWidget(self.lbl_chart)
        layout.addStretch()


class ExportTab(QWidget):
    def __init__(self, parent):
        super().__init__()
        self.parent = parent
        layout = QVBoxLayout(self)
        self.date_from, self.date_to = _date_range_row(layout)

        fmt_group = QGroupBox("Format")
        fmt_layout = QHBoxLayout(fmt_group)
        self.rb_pdf = QRadioButton("PDF report"); self.rb_pdf.setChecked(True)
        self.rb_csv = QRadioButton("CSV")
        self.rb_ics = QRadioButton("iCal")
        for rb in (self.rb_pdf, self.rb_csv, self.rb_ics):
            fmt_layout.addWidget(rb)
        layout.addWidget(fmt_group)

        self.btn_export = QPushButton(EXPORT_BTN_TEXT)
        layout.addWidget(self.btn_export)
        layout.addStretch()

    def selected_format(self):
        if self.rb_csv.isChecked():
            return 'csv'
        if self.rb_ics.isChecked():
            return 'ics'
        return 'pdf'


class ExportWorker(QObject):
    finished = Signal(str)
    error = Signal(str)

    def __init__(self, fmt, df, dt, out_fn, options=None, debug=False, config=None):
        super().__init__()
        self.fmt = fmt
        self.df = df
        self.dt = dt
        self.out_fn = out_fn
        self.options = options
        self.debug = debug
        self.config = config

    def run(self):
        logging.info(f"[CustodyCal] ExportWorker.run started ({self.fmt}).")
        try:
            if self.df is None or self.dt is None:
                self.error.emit("Start and end date must be set.")
                logging.error("[CustodyCal] ExportWorker: start or end date missing.")
                return
            if self.df > self.dt:
                self.error.emit("Start date is after end date.")
                return
            if self.fmt == 'ics':
                content = generate_feed(config=self.config, window=(self.df, self.dt),
                                       options=self.options)
                with open(self.out_fn, 'wb') as f:
                    f.write(content)
            else:
                schedule = generate_schedule(self.df, self.dt, self.options)
                if self.fmt == 'csv':
                    export_csv(schedule, self.out_fn)
                else:
                    export_pdf(schedule, self.out_fn, debug=self.debug)
            self.finished.emit(self.out_fn)
        except Exception as e:
            logging.error(f"ExportWorker error: {e}")
            self.error.emit(str(e))


class MainWindow(QMainWindow):
    def __init__(self, config=None):
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(900, 650)
        self.config = config if config is not None else load_config()

        tabs = QTabWidget(); self.setCentralWidget(tabs)
        self.tab1 = CalendarTab(self); self.tab2 = StatisticsTab(self); self.tab3 = ExportTab(self)
        tabs.addTab(self.tab1, TAB_CALENDAR)
        tabs.addTab(self.tab2, TAB_STATISTICS)
        tabs.addTab(self.tab3, TAB_EXPORT)

        self.export_thread = None
        self._chart_file = None

        self.tab1.chk_debug.setChecked(bool(self.config.get('debug')))
        self.tab1.calendar.selectionChanged.connect(self.on_date_selected)
        self.tab1.calendar.currentPageChanged.connect(lambda y, m: self.refresh_calendar())
        self.tab1.chk_debug.toggled.connect(self.on_date_selected)
        self.tab1.chk_rofr.toggled.connect(self.on_date_selected)
        self.tab2.btn_stats.clicked.connect(self.on_statistics)
        self.tab3.btn_export.clicked.connect(self.on_export)

        app = QApplication.instance()
        if app is not None:
            app.aboutToQuit.connect(self.cleanup)

        self.refresh_calendar()
        self.on_date_selected()

    def options(self):
        return {ROFR_OPTION: self.tab1.chk_rofr.isChecked()}

    def refresh_calendar(self):
        cal = self.tab1.calendar
        cal.setDateTextFormat(QDate(), QTextCharFormat())
        start, end = month_range(cal.yearShown(), cal.monthShown())
        for d, result in generate_schedule(start, end):
            if result.parent == MOTHER:
                set_date_format(cal, d, COLOR_MOTHER)
            elif result.parent == FATHER:
                set_date_format(cal, d, COLOR_FATHER)

    def on_date_selected(self, *args):
        d = qdate_to_date(self.tab1.calendar.selectedDate())
        result = evaluate_custody(d, self.options())
        self.tab1.details.setPlainText(format_day(d, result, debug=self.tab1.chk_debug.isChecked()))

    def on_statistics(self):
        df = qdate_to_date(self.tab2.date_from.date())
        dt = qdate_to_date(self.tab2.date_to.date())
        if df > dt:
            QMessageBox.warning(self, TAB_STATISTICS, "Start date is after end date.")
            return
        schedule = generate_schedule(df, dt)
        stats = summarize_custody(schedule)
        self.tab2.lbl_summary.setText(
            f"{stats['total']} days: Mother {stats['mother']} ({stats['mother_pct']}%), "
            f"Father {stats['father']} ({stats['father_pct']}%), {stats['exchanges']} exchanges"
        )
        self.tab2.lbl_weekdays.setText(format_weekday_counts(count_by_weekday(schedule)))
        # which precedence level decided the days, only in debug mode
        if self.tab1.chk_debug.isChecked():
            self.tab2.lbl_levels.setText(format_level_counts(count_by_level(schedule)))
        else:
            self.tab2.lbl_levels.setText("")
        if self._chart_file is None:
            fd, self._chart_file = tempfile.mkstemp(suffix='.png')
            os.close(fd)
        try:
            create_share_chart(stats, self._chart_file)
            self.tab2.lbl_chart.setPixmap(QPixmap(self._chart_file))
        except Exception as e:
            logging.error(f"Error in create_share_chart: {e}")

    def on_export(self):
        logging.info("[CustodyCal] Export button clicked.")
        if self.export_thread and self.export_thread.isRunning():
            logging.info("[CustodyCal] Export thread already running.")
            return

        fmt = self.tab3.selected_format()
        fn, _ = QFileDialog.getSaveFileName(self, "Export", f"custody-schedule.{fmt}", EXPORT_FILTERS[fmt])
        if not fn:
            return
        df = qdate_to_date(self.tab3.date_from.date())
        dt = qdate_to_date(self.tab3.date_to.date())
        self.export_thread = QThread()
        self.export_worker = ExportWorker(fmt, df, dt, fn, self.options(),
                                          debug=self.tab1.chk_debug.isChecked(), config=self.config)
        self.export_worker.moveToThread(self.export_thread)
        self.export_thread.started.connect(self.export_worker.run)
        self.export_worker.finished.connect(self.on_export_finished)
        self.export_worker.error.connect(self.on_export_error)
        self.export_worker.finished.connect(self.export_thread.quit)
        self.export_worker.error.connect(self.export_thread.quit)
        self.export_worker.finished.connect(self.export_worker.deleteLater)
        self.export_thread.finished.connect(self.export_thread.deleteLater)
        self.export_thread.start()

    def on_export_finished(self, fn):
        QMessageBox.information(self, TAB_EXPORT, f"Export saved: {fn}")

    def on_export_error(self, msg):
        logging.error(f"Export error: {msg}")
        QMessageBox.critical(self, "Export error", msg)

    def cleanup(self):
        thread = self.export_thread
        if thread is not None:
            try:
                if thread.isRunning():
                    thread.quit()
                    thread.wait()
            except RuntimeError:
                pass  # already deleted on the Qt side
            self.export_thread = None
        if self._chart_file and os.path.exists(self._chart_file):
            os.remove(self._chart_file)
            self._chart_file = None


def main():
    cfg = load_config()
    logging.basicConfig(level=cfg.get('log_level', 'INFO'))
    app = QApplication(sys.argv)
    win = MainWindow(cfg)
    win.show()
    sys.exit(app.exec())


if __name__ == '__main__':
    main()
