# etiquetas/settings.py
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

# --- Caminhos base ---
ROOT_DIR = Path(__file__).resolve().parents[1]
APP_DIR_NAME = "Gerador de Etiquetas"

# Loja criada na primeira execução
DEFAULT_STORES: List[Dict[str, str]] = [{"id": "matriz", "name": "Cotia"}]


class AppPaths(BaseModel):
    home: Path
    data_dir: Path
    backups_dir: Path
    config_path: Path
    output_dir: Path
    assets_dir: Path

    @classmethod
    def under(cls, home: os.PathLike | str, assets_dir: Optional[os.PathLike | str] = None) -> "AppPaths":
        base = Path(home)
        return cls(
            home=base,
            data_dir=base / "data",
            backups_dir=base / "backups",
            config_path=base / "config.json",
            output_dir=base / "etiquetas",
            assets_dir=Path(assets_dir) if assets_dir else ROOT_DIR / "assets",
        )

    @classmethod
    def from_env(cls) -> "AppPaths":
        """
        Resolve os diretórios da instalação:
        - ETIQUETAS_HOME, senão ~/Documents/Gerador de Etiquetas
        - ETIQUETAS_ASSETS, senão <projeto>/assets
        """
        home = os.environ.get("ETIQUETAS_HOME")
        assets = os.environ.get("ETIQUETAS_ASSETS")
        base = Path(home).expanduser() if home else Path.home() / "Documents" / APP_DIR_NAME
        return cls.under(base, Path(assets).expanduser() if assets else None)

    def ensure_dirs(self) -> None:
        for d in (self.home, self.data_dir, self.backups_dir, self.output_dir):
            d.mkdir(parents=True, exist_ok=True)


def seed_config(paths: AppPaths) -> bool:
    """Escreve a configuração inicial se ainda não existir. Retorna True se criou."""
    if paths.config_path.exists():
        return False
    paths.config_path.parent.mkdir(parents=True, exist_ok=True)
    doc: Dict[str, Any] = {"stores": [dict(s) for s in DEFAULT_STORES]}
    paths.config_path.write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")
    return True


class LabelAssets(BaseModel):
    background: Path
    new_banner: Path
    font_product_name: Path
    font_price: Path
    font_measure: Path

    @classmethod
    def from_dir(cls, assets_dir: os.PathLike | str) -> "LabelAssets":
        base = Path(assets_dir)
        return cls(
            background=base / "media" / "etiqueta.png",
            new_banner=base / "media" / "faixa.png",
            font_product_name=base / "fonts" / "Lato-Black.ttf",
            # reportlab só lê TrueType: a Gotham precisa estar em .ttf
            font_price=base / "fonts" / "Gotham-Black.ttf",
            font_measure=base / "fonts" / "DancingScript-Bold.ttf",
        )

    def missing(self) -> List[Path]:
        return [p for p in self.model_dump().values() if not Path(p).is_file()]
