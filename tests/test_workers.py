import pytest
from datetime import date, datetime
from icalendar import Calendar
from PySide6.QtCore import QCoreApplication

from custodycal.config import DEFAULTS
from custodycal.engine import ROFR_OPTION
from custodycal.ui import ExportWorker


@pytest.fixture(scope="module")
def qapp():
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


def run_worker(worker):
    done, errors = [], []
    worker.finished.connect(done.append)
    worker.error.connect(errors.append)
    worker.run()
    return done, errors


def test_export_worker_csv(qapp, tmp_path):
    fn = str(tmp_path / 'out.csv')
    done, errors = run_worker(ExportWorker('csv', date(2026, 1, 1), date(2026, 1, 31), fn))
    assert done == [fn]
    assert errors == []
    with open(fn, encoding='utf-8') as f:
        assert len(f.read().splitlines()) == 32


def test_export_worker_pdf(qapp, tmp_path):
    fn = str(tmp_path / 'out.pdf')
    done, errors = run_worker(ExportWorker('pdf', date(2026, 1, 1), date(2026, 1, 31), fn, debug=True))
    assert done == [fn]
    assert (tmp_path / 'out.pdf').read_bytes().startswith(b'%PDF')


def test_export_worker_ics_uses_range_and_options(qapp, tmp_path):
    fn = str(tmp_path / 'out.ics')
    worker = ExportWorker('ics', date(2026, 1, 10), date(2026, 1, 31), fn,
                          options={ROFR_OPTION: True}, config=dict(DEFAULTS))
    done, errors = run_worker(worker)
    assert done == [fn]
    cal = Calendar.from_ical((tmp_path / 'out.ics').read_bytes())
    vevents = list(cal.walk('VEVENT'))
    assert len(vevents) > 0
    for ev in vevents:
        start = ev.decoded('dtstart')
        start = start.date() if isinstance(start, datetime) else start
        assert date(2026, 1, 10) <= start <= date(2026, 1, 31)
        assert 'notify other parent' in str(ev['DESCRIPTION'])


def test_export_worker_missing_dates(qapp, tmp_path):
    done, errors = run_worker(ExportWorker('csv', None, date(2026, 1, 31), str(tmp_path / 'x.csv')))
    assert done == []
    assert errors == ["Start and end date must be set."]


def test_export_worker_reversed_dates(qapp, tmp_path):
    done, errors = run_worker(ExportWorker('csv', date(2026, 2, 1), date(2026, 1, 1), str(tmp_path / 'x.csv')))
    assert done == []
    assert errors == ["Start date is after end date."]


def test_export_worker_invalid_path(qapp, tmp_path):
    fn = str(tmp_path / 'missing' / 'out.csv')
    done, errors = run_worker(ExportWorker('csv', date(2026, 1, 1), date(2026, 1, 2), fn))
    assert done == []
    assert len(errors) == 1
