from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Sequence

from etiquetas.layout.constants import DEFAULT_FIELDS, DEFAULT_GEOMETRY, FieldLayout, LabelGeometry
from etiquetas.layout.text_wrap import wrap
from etiquetas.models.label import PrintItem, PrintSelection

log = logging.getLogger(__name__)


def format_price(preco: float) -> str:
    """12.5 -> 'R$ 12,50'"""
    cents = Decimal(str(preco)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"R$ {cents:.2f}".replace(".", ",")


def expand_selections(selections: Iterable[PrintSelection]) -> List[PrintItem]:
    """Repete cada item `quantity` vezes, em sequência, mantendo a ordem pedida."""
    items: List[PrintItem] = []
    for sel in selections:
        qty = 1 if sel.quantity is None else int(sel.quantity)
        if qty < 1:
            raise ValueError(f"Quantidade inválida para {sel.item.codigo!r}: {qty}")
        items.extend([sel.item] * qty)
    return items


@dataclass(frozen=True)
class Placement:
    index: int
    item: PrintItem
    x: float
    y: float
    width: float
    height: float
    name_lines: List[str]
    price_text: str
    measure_text: str
    show_banner: bool


@dataclass
class Page:
    number: int
    placements: List[Placement] = field(default_factory=list)


def layout_labels(
    items: Sequence[PrintItem],
    geometry: LabelGeometry = DEFAULT_GEOMETRY,
    fields: FieldLayout = DEFAULT_FIELDS,
) -> List[Page]:
    """
    Empacota as etiquetas em linhas de `labels_per_row`, da esquerda para a direita
    e de cima para baixo, abrindo nova página quando a próxima linha não cabe.
    A ordem de saída é exatamente a ordem de entrada.
    """
    if not items:
        return []

    g = geometry
    pages: List[Page] = [Page(number=1)]
    x, y = g.margin, g.margin
    on_row = 0

    for idx, item in enumerate(items):
        if on_row >= g.labels_per_row:
            x = g.margin
            y += g.label_height + g.gap_y
            on_row = 0

        if y + g.label_height > g.printable_bottom:
            log.debug("Página %d cheia com %d etiquetas", pages[-1].number, len(pages[-1].placements))
            pages.append(Page(number=len(pages) + 1))
            x, y = g.margin, g.margin
            on_row = 0

        pages[-1].placements.append(Placement(
            index=idx,
            item=item,
            x=x,
            y=y,
            width=g.label_width,
            height=g.label_height,
            name_lines=wrap(item.nome, fields.name_max_chars),
            price_text=format_price(item.preco),
            measure_text=item.medida,
            show_banner=item.is_new,
        ))

        x += g.label_width + g.gap_x
        on_row += 1

    return pages
