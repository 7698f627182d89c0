import sqlite3
from unittest.mock import patch

import pytest

from core.errors import SourceError
from core.tables import TABLES
from tools import league_archiver
from conftest import FakeSource
from extensions.plugins.sqlite_adapter import SQLiteSink


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ("MYSQL_URL", "SQLITE_DB", "LEAGUE_ARCHIVE_LOG_LEVEL", "LEAGUE_ARCHIVE_PROGRESS_INTERVAL"):
        # setenv first so values loaded from .env files are undone too
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    # Keep a developer's ./.env out of the tests
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def fake_source():
    source = FakeSource({})
    with patch("extensions.plugins.mysql_adapter.MySQLSource.from_url", return_value=source) as from_url:
        yield source, from_url


def test_missing_settings_exit_1(capsys):
    with pytest.raises(SystemExit) as excinfo:
        league_archiver.main([])
    assert excinfo.value.code == 1
    out = capsys.readouterr().out
    assert "MYSQL_URL not set" in out
    assert "SQLITE_DB not set" in out


def test_successful_run(fake_source, tmp_path, capsys):
    source, from_url = fake_source
    db_path = tmp_path / "league.sqlite"

    code = league_archiver.main(["--mysql-url", "mysql://u:p@localhost/league",
                                 "--sqlite-db", str(db_path)])

    assert code == 0
    assert "Done, copied 0 rows." in capsys.readouterr().out
    from_url.assert_called_once_with("mysql://u:p@localhost/league")
    assert source.queries == [t.select_sql for t in TABLES]
    assert source.closed
    with sqlite3.connect(db_path) as conn:
        names = {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
    assert names == {t.name for t in TABLES}


def test_table_selection_keeps_registry_order(fake_source, tmp_path, monkeypatch):
    source, _ = fake_source
    monkeypatch.setenv("MYSQL_URL", "mysql://u:p@localhost/league")
    monkeypatch.setenv("SQLITE_DB", str(tmp_path / "league.sqlite"))

    assert league_archiver.main(["--table", "scores", "--table", "users"]) == 0
    assert source.queries == [TABLES[0].select_sql, TABLES[-1].select_sql]


def test_unknown_table_is_rejected(capsys):
    with pytest.raises(SystemExit) as excinfo:
        league_archiver.main(["--table", "lg_users"])
    assert excinfo.value.code == 2


def test_existing_table_exits_1(fake_source, tmp_path, caplog):
    db_path = tmp_path / "league.sqlite"
    with SQLiteSink(str(db_path)) as sink:
        sink.execute("CREATE TABLE users (id INTEGER)")

    with pytest.raises(SystemExit) as excinfo:
        league_archiver.main(["--mysql-url", "mysql://u:p@localhost/league",
                              "--sqlite-db", str(db_path)])
    assert excinfo.value.code == 1
    assert "Fatal error" in caplog.text


def test_source_connection_failure_exits_1(tmp_path, caplog):
    with patch("extensions.plugins.mysql_adapter.MySQLSource.from_url",
               side_effect=SourceError("Failed to connect to MySQL: mysql://u:***@db/league")):
        with pytest.raises(SystemExit) as excinfo:
            league_archiver.main(["--mysql-url", "mysql://u:hunter2@db/league",
                                  "--sqlite-db", str(tmp_path / "league.sqlite")])
    assert excinfo.value.code == 1
    assert "hunter2" not in caplog.text
