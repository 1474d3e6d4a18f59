import pytest

from budget_pulse.config import load_app_config


def test_explicit_config_file(tmp_path):
    cfg_path = tmp_path / "budget_pulse_config.toml"
    cfg_path.write_text(
        """
[database]
engine = "sqlite"
path = "state/app.sqlite"

[storage]
slot = "household"

[display]
mode = "both"
decimals = 1
currency = "CAD"
""",
        encoding="utf-8",
    )

    config = load_app_config(str(cfg_path))

    assert config.database.engine == "sqlite"
    assert config.database.path == (tmp_path / "state" / "app.sqlite").resolve()
    assert config.slot == "household"
    assert config.display.mode == "both"
    assert config.display.decimals == 1
    assert config.display.currency == "CAD"


def test_defaults_when_no_config_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = load_app_config()

    assert config.slot == "budget_pulse_state"
    assert config.display.mode == "table"
    assert config.display.decimals == 2
    assert config.database.path == (
        tmp_path / "data" / "db" / "budget_pulse.sqlite"
    ).resolve()


def test_missing_explicit_config_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_app_config(str(tmp_path / "missing.toml"))


def test_invalid_toml_raises(tmp_path):
    cfg_path = tmp_path / "bad.toml"
    cfg_path.write_text("[database\npath = ", encoding="utf-8")
    with pytest.raises(ValueError):
        load_app_config(str(cfg_path))


def test_invalid_display_mode_raises(tmp_path):
    cfg_path = tmp_path / "cfg.toml"
    cfg_path.write_text('[display]\nmode = "html"\n', encoding="utf-8")
    with pytest.raises(ValueError):
        load_app_config(str(cfg_path))
