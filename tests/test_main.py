import builtins

from custodycal.main import run_wizard


def feed_input(monkeypatch, answers):
    it = iter(answers)
    monkeypatch.setattr(builtins, 'input', lambda prompt='': next(it))


def test_wizard_single_day(monkeypatch, capsys, tmp_path):
    monkeypatch.setenv('HOME', str(tmp_path))
    feed_input(monkeypatch, ['y', 'n', '1', '2026-01-06', 'q'])
    run_wizard()
    out = capsys.readouterr().out
    assert "2026-01-06 (Tue): Mother - Return from Winter Break" in out
    assert "[Level 1: winter_break_2026_return]" in out


def test_wizard_month(monkeypatch, capsys, tmp_path):
    monkeypatch.setenv('HOME', str(tmp_path))
    feed_input(monkeypatch, ['n', 'n', '2', '2026', '2', 'q'])
    run_wizard()
    out = capsys.readouterr().out
    assert "2026-02-28" in out
    assert "exchanges" in out
    assert "By weekday: Mon " in out
    assert "Decided by" not in out


def test_wizard_month_debug_shows_levels(monkeypatch, capsys, tmp_path):
    monkeypatch.setenv('HOME', str(tmp_path))
    feed_input(monkeypatch, ['y', 'n', '2', '2025', '12', 'q'])
    run_wizard()
    out = capsys.readouterr().out
    assert "Decided by: " in out
    assert "Level 1: 14" in out


def test_wizard_invalid_date(monkeypatch, capsys, tmp_path):
    monkeypatch.setenv('HOME', str(tmp_path))
    feed_input(monkeypatch, ['n', 'n', '1', '06.01.2026', 'q'])
    run_wizard()
    assert "Invalid input" in capsys.readouterr().out
