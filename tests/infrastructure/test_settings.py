"""Tests for settings loading."""

from pathlib import Path

import pytest

from backoffice.infrastructure.bootstrap import load_settings
from backoffice.infrastructure.settings import Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for name in ("BACKOFFICE_DATA_DIR", "BACKOFFICE_CURRENCY",
                 "BACKOFFICE_FREEZE_PARTS_PRICE_AT_APPROVAL"):
        monkeypatch.delenv(name, raising=False)
    # keep a developer's .env out of the way
    monkeypatch.chdir(tmp_path)


class TestSettings:

    def test_data_dir_defaults_to_working_directory(self, tmp_path):
        assert Settings().data_dir == tmp_path / "data"

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BACKOFFICE_DATA_DIR", str(tmp_path / "store"))
        monkeypatch.setenv("BACKOFFICE_FREEZE_PARTS_PRICE_AT_APPROVAL", "true")
        settings = Settings()
        assert settings.data_dir == tmp_path / "store"
        assert settings.freeze_parts_price_at_approval is True
        assert settings.currency == "MYR"

    def test_cli_data_dir_wins(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BACKOFFICE_DATA_DIR", str(tmp_path / "store"))
        assert load_settings(Path("/srv/backoffice")).data_dir == Path("/srv/backoffice")
