from pathlib import Path

from bookbundle import config as cfg


def test_write_default_config_creates_file(tmp_path: Path):
    target = tmp_path / "config.toml"

    written = cfg.write_default_config(path=target)

    assert written == target
    assert target.exists()
    assert target.read_text(encoding="utf-8").strip()


def test_write_default_config_respects_force(tmp_path: Path):
    target = tmp_path / "config.toml"
    target.write_text("app_url = 'http://custom'\n", encoding="utf-8")

    cfg.write_default_config(path=target, force=False)
    assert "custom" in target.read_text(encoding="utf-8")

    cfg.write_default_config(path=target, force=True)
    assert "custom" not in target.read_text(encoding="utf-8")


def test_load_config_defaults_when_missing(tmp_path: Path):
    loaded = cfg.load_config(tmp_path / "missing.toml")

    assert loaded == cfg.Config()
    assert loaded.api_base_url == "http://localhost:8080/api"


def test_load_config_reads_values(tmp_path: Path):
    target = tmp_path / "config.toml"
    target.write_text(
        'api_base_url = "https://bundle.example/api"\ntimeout = 3\ncover_size = "500"\n',
        encoding="utf-8",
    )

    loaded = cfg.load_config(target)

    assert loaded.api_base_url == "https://bundle.example/api"
    assert loaded.app_url == "http://localhost:5173"
    assert loaded.timeout == 3.0
    assert loaded.cover_size == "500"
