from __future__ import annotations

from outage_watch.__main__ import main
from outage_watch.config import load_settings


def test_load_settings_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("OUTAGE_STREET", "вул. Хрещатик")
    monkeypatch.setenv("OUTAGE_HOUSE", "22")
    monkeypatch.setenv("POLL_INTERVAL_MINUTES", "5")
    monkeypatch.setenv("BROWSER_HEADLESS", "off")

    settings = load_settings()

    assert settings.street == "вул. Хрещатик"
    assert settings.house == "22"
    assert settings.poll_interval_minutes == 5
    assert settings.browser_headless is False
    assert settings.provider_kind == "portal_browser"


def test_cli_run_exits_non_zero_without_credentials(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "cli.db"))
    monkeypatch.setenv("OUTAGE_STREET", "вул. Хрещатик")
    monkeypatch.setenv("OUTAGE_HOUSE", "22")
    monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
    monkeypatch.delenv("TELEGRAM_CHAT_ID", raising=False)

    assert main(["run"]) == 1


def test_cli_run_exits_non_zero_for_unknown_provider(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "cli.db"))
    monkeypatch.setenv("PROVIDER_KIND", "carrier_pigeon")

    assert main(["run"]) == 1
