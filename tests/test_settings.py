import json
from pathlib import Path

from etiquetas.settings import ROOT_DIR, AppPaths, LabelAssets, seed_config


def test_from_env_uses_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("ETIQUETAS_HOME", str(tmp_path / "casa"))
    monkeypatch.setenv("ETIQUETAS_ASSETS", str(tmp_path / "midia"))
    p = AppPaths.from_env()
    assert p.data_dir == tmp_path / "casa" / "data"
    assert p.backups_dir == tmp_path / "casa" / "backups"
    assert p.config_path == tmp_path / "casa" / "config.json"
    assert p.output_dir == tmp_path / "casa" / "etiquetas"
    assert p.assets_dir == tmp_path / "midia"


def test_from_env_defaults(monkeypatch):
    monkeypatch.delenv("ETIQUETAS_HOME", raising=False)
    monkeypatch.delenv("ETIQUETAS_ASSETS", raising=False)
    p = AppPaths.from_env()
    assert p.home == Path.home() / "Documents" / "Gerador de Etiquetas"
    assert p.assets_dir == ROOT_DIR / "assets"


def test_ensure_dirs_is_idempotent(tmp_path):
    p = AppPaths.under(tmp_path / "h")
    p.ensure_dirs()
    (p.data_dir / "matriz.json").write_text("[]", encoding="utf-8")
    p.ensure_dirs()
    assert (p.data_dir / "matriz.json").read_text(encoding="utf-8") == "[]"


def test_seed_config_only_once(paths):
    assert seed_config(paths) is True
    paths.config_path.write_text(json.dumps({"stores": []}), encoding="utf-8")
    assert seed_config(paths) is False
    assert json.loads(paths.config_path.read_text(encoding="utf-8")) == {"stores": []}


def test_label_assets_missing(tmp_path):
    assets = LabelAssets.from_dir(tmp_path)
    assert len(assets.missing()) == 5
    (tmp_path / "media").mkdir()
    (tmp_path / "media" / "etiqueta.png").write_bytes(b"x")
    assert tmp_path / "media" / "etiqueta.png" not in assets.missing()
