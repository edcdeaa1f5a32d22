import pytest

from directory_sync import main as cli
from directory_sync.core.config import get_sync_settings
from directory_sync.core.errors import RemoteFetchError
from directory_sync.refresh.cooldown import CooldownTracker

from conftest import FakeSource, make_school


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    monkeypatch.delenv("SYNC_RECORD_FAILED_ATTEMPTS", raising=False)
    get_sync_settings.cache_clear()
    yield
    get_sync_settings.cache_clear()


def run(tmp_path, *args):
    return cli.main(["--data-dir", str(tmp_path), *args])


def test_status_on_empty_data_dir(tmp_path, capsys):
    assert run(tmp_path, "status") == 0

    out = capsys.readouterr().out
    assert "Dataset: schools" in out
    assert "Cached data: no" in out
    assert "Last synced: never" in out
    assert "schools: allowed" in out
    assert "emergency: allowed" in out


def test_refresh_then_cache_then_cooldown(tmp_path, capsys, monkeypatch):
    source = FakeSource([make_school(i) for i in range(3)])
    monkeypatch.setattr(cli, "build_source", lambda settings, sync_class: source)

    assert run(tmp_path, "refresh") == 0
    assert "OK: 3 records from remote" in capsys.readouterr().out

    assert run(tmp_path, "refresh") == 0
    assert "OK: 3 records from cache" in capsys.readouterr().out

    assert run(tmp_path, "refresh", "--force") == 0
    assert "COOLDOWN: 30 min remaining" in capsys.readouterr().out
    assert source.calls == 1

    assert run(tmp_path, "status") == 0
    out = capsys.readouterr().out
    assert "Cached data: yes" in out
    assert "schools: cooldown (30 min remaining)" in out


def test_refresh_error_exit_code(tmp_path, capsys, monkeypatch):
    source = FakeSource(error=RemoteFetchError("offline"))
    monkeypatch.setattr(cli, "build_source", lambda settings, sync_class: source)

    assert run(tmp_path, "--dataset", "emergency", "refresh") == 1
    assert "ERROR: Failed to load data: offline" in capsys.readouterr().out


def test_reset_cooldown_and_cache_commands(tmp_path, capsys, monkeypatch):
    source = FakeSource([make_school(1)])
    monkeypatch.setattr(cli, "build_source", lambda settings, sync_class: source)
    run(tmp_path, "refresh")

    assert run(tmp_path, "expire-cache") == 0
    assert run(tmp_path, "reset-cooldown", "--class", "schools") == 0
    capsys.readouterr()

    run(tmp_path, "status")
    out = capsys.readouterr().out
    assert "Expired: yes" in out
    assert "schools: allowed" in out

    assert run(tmp_path, "clear-cache") == 0
    run(tmp_path, "status")
    assert "Cached data: no" in capsys.readouterr().out
    assert (tmp_path / "sync_cooldown.json").exists()


def test_failed_cooldown_reset_exit_code(tmp_path, capsys, monkeypatch):
    monkeypatch.setattr(CooldownTracker, "reset", lambda self, sync_classes=None: False)

    assert run(tmp_path, "reset-cooldown", "--class", "schools") == 1
    out = capsys.readouterr().out
    assert "ERROR: cooldown state could not be reset" in out
    assert "Cooldown reset" not in out


def test_data_dir_override_does_not_leak_into_cached_settings(tmp_path, monkeypatch):
    monkeypatch.delenv("SYNC_DATA_DIR", raising=False)
    assert run(tmp_path, "status") == 0

    assert get_sync_settings().data_dir != tmp_path

def test_missing_command_exits():
    with pytest.raises(SystemExit):
        cli.main([])
