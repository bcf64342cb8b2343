from __future__ import annotations

import logging
import os
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional, Sequence

from reportlab.lib.colors import HexColor
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas as pdfcanvas

from etiquetas.errors import AssetMissingError, EmptyPrintListError
from etiquetas.layout.constants import DEFAULT_FIELDS, DEFAULT_GEOMETRY, FieldLayout, FieldStyle, LabelGeometry
from etiquetas.layout.engine import Page, Placement, expand_selections, layout_labels
from etiquetas.models.label import PrintItem, PrintSelection
from etiquetas.settings import AppPaths, LabelAssets

log = logging.getLogger(__name__)


class LabelService:
    """
    Gera o PDF de etiquetas (um arquivo por chamada, nome com a data do dia).
    - Verifica fontes e imagens antes de criar qualquer arquivo
    - Grava em <nome>.pdf.part e só renomeia ao final
    - `reveal(path)` opcional: pedir ao ambiente para mostrar o arquivo
    """

    def __init__(
        self,
        paths: AppPaths,
        assets: Optional[LabelAssets] = None,
        *,
        geometry: LabelGeometry = DEFAULT_GEOMETRY,
        fields: FieldLayout = DEFAULT_FIELDS,
        clock: Callable[[], datetime] = datetime.now,
        reveal: Optional[Callable[[Path], None]] = None,
    ) -> None:
        self.paths = paths
        self.assets = assets or LabelAssets.from_dir(paths.assets_dir)
        self.geometry = geometry
        self.fields = fields
        self.clock = clock
        self.reveal = reveal

    def output_path_for(self, day: date) -> Path:
        return self.paths.output_dir / f"etiquetas_{day.isoformat()}.pdf"

    # ---------- Assets ---------- #

    def _register_fonts(self) -> None:
        fonts = {
            self.fields.name.font: self.assets.font_product_name,
            self.fields.price.font: self.assets.font_price,
            self.fields.measure.font: self.assets.font_measure,
        }
        for name, path in fonts.items():
            try:
                pdfmetrics.registerFont(TTFont(name, str(path)))
            except (TTFError, OSError) as e:
                raise AssetMissingError(f"Fonte inválida: {Path(path).name} ({e})", [path]) from e

    def _load_images(self) -> Dict[str, ImageReader]:
        images: Dict[str, ImageReader] = {}
        for key, path in (("background", self.assets.background), ("banner", self.assets.new_banner)):
            try:
                reader = ImageReader(str(path))
                reader.getSize()
            except Exception as e:
                raise AssetMissingError(f"Imagem inválida: {Path(path).name} ({e})", [path]) from e
            images[key] = reader
        return images

    def _check_assets(self) -> Dict[str, ImageReader]:
        missing = self.assets.missing()
        if missing:
            names = ", ".join(p.name for p in missing)
            raise AssetMissingError(f"Arquivos de etiqueta ausentes: {names}", missing)
        self._register_fonts()
        return self._load_images()

    # ---------- Desenho ---------- #

    def _draw_text(self, c: pdfcanvas.Canvas, style: FieldStyle, text: str, pl: Placement, top: float) -> None:
        """Texto centrado na largura da etiqueta; `top` é o topo da linha (origem no alto)."""
        if not text:
            return
        page_h = self.geometry.page_height
        baseline = page_h - (pl.y + top + pdfmetrics.getAscent(style.font, style.size))
        c.setFont(style.font, style.size)
        c.setFillColor(HexColor(style.color))
        c.drawCentredString(pl.x + pl.width / 2, baseline, text)

    def _draw_label(self, c: pdfcanvas.Canvas, pl: Placement, images: Dict[str, ImageReader]) -> None:
        f = self.fields
        page_h = self.geometry.page_height

        c.drawImage(images["background"], pl.x, page_h - pl.y - pl.height,
                    width=pl.width, height=pl.height, mask="auto")

        if pl.show_banner:
            iw, ih = images["banner"].getSize()
            bh = pl.width * ih / iw if iw else 0
            c.drawImage(images["banner"], pl.x, page_h - pl.y - bh, width=pl.width, height=bh, mask="auto")

        for i, line in enumerate(pl.name_lines):
            self._draw_text(c, f.name, line, pl, f.name_offset_y + i * f.name_line_height)
        self._draw_text(c, f.price, pl.price_text, pl, f.price_offset_y)
        self._draw_text(c, f.measure, pl.measure_text, pl, f.measure_offset_y)

    def render(self, pages: Sequence[Page], out_path: Path, images: Dict[str, ImageReader]) -> None:
        g = self.geometry
        c = pdfcanvas.Canvas(str(out_path), pagesize=(g.page_width, g.page_height))
        c.setTitle("Etiquetas")
        for i, page in enumerate(pages):
            if i:
                c.showPage()
            for pl in page.placements:
                self._draw_label(c, pl, images)
        c.save()

    # ---------- API ---------- #

    def generate(self, items: Sequence[PrintItem]) -> Path:
        if not items:
            raise EmptyPrintListError()

        images = self._check_assets()
        pages = layout_labels(items, self.geometry, self.fields)

        self.paths.output_dir.mkdir(parents=True, exist_ok=True)
        final_path = self.output_path_for(self.clock().date())
        tmp_path = final_path.with_name(final_path.name + ".part")
        try:
            self.render(pages, tmp_path, images)
            os.replace(tmp_path, final_path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

        log.info("PDF gerado: %s (%d etiquetas, %d páginas)", final_path.name, len(items), len(pages))
        if self.reveal is not None:
            self.reveal(final_path)
        return final_path

    def generate_from_selections(self, selections: Iterable[PrintSelection]) -> Path:
        return self.generate(expand_selections(selections))
