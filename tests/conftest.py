import shutil
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from etiquetas.settings import AppPaths
from etiquetas.storage.json_repo import StoreCatalogRepository


class FakeClock:
    """Relógio controlado: cada chamada avança 1 segundo."""

    def __init__(self, start=datetime(2024, 3, 1, 9, 0, 0)):
        self.now = start

    def __call__(self):
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def paths(tmp_path):
    p = AppPaths.under(tmp_path / "home", tmp_path / "assets")
    p.ensure_dirs()
    return p


@pytest.fixture
def repo(paths, clock):
    return StoreCatalogRepository(paths, clock=clock)


@pytest.fixture
def sample_products():
    return [
        {"codigo": "P1", "nome": "Leite Integral", "medida": "1L", "preco": 10.0,
         "isNew": False, "isInactive": False, "isDeleted": False, "historicoPrecos": []},
        {"codigo": "P2", "nome": "Pão de Forma", "medida": "500g", "preco": 7.5,
         "isNew": True, "isInactive": False, "isDeleted": False, "historicoPrecos": []},
    ]


@pytest.fixture
def label_assets(paths):
    """Imagens PNG geradas na hora e fontes Vera que acompanham o reportlab."""
    from PIL import Image
    import reportlab

    media = paths.assets_dir / "media"
    fonts = paths.assets_dir / "fonts"
    media.mkdir(parents=True, exist_ok=True)
    fonts.mkdir(parents=True, exist_ok=True)

    Image.new("RGB", (260, 140), (200, 30, 30)).save(media / "etiqueta.png")
    Image.new("RGBA", (260, 40), (0, 120, 0, 255)).save(media / "faixa.png")

    vera_dir = Path(reportlab.__file__).parent / "fonts"
    shutil.copy(vera_dir / "VeraBd.ttf", fonts / "Lato-Black.ttf")
    shutil.copy(vera_dir / "VeraBd.ttf", fonts / "Gotham-Black.ttf")
    shutil.copy(vera_dir / "Vera.ttf", fonts / "DancingScript-Bold.ttf")

    from etiquetas.settings import LabelAssets
    return LabelAssets.from_dir(paths.assets_dir)
