from __future__ import annotations
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .product import Product


class PrintItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    codigo: str = ""
    nome: str = ""
    medida: str = ""
    preco: float = 0.0
    is_new: bool = Field(False, alias="isNew")

    @classmethod
    def from_product(cls, p: Product) -> "PrintItem":
        return cls(codigo=p.codigo, nome=p.nome, medida=p.medida, preco=p.preco, is_new=p.is_new)


class PrintSelection(BaseModel):
    item: PrintItem
    # None = quantidade não informada (vale 1)
    quantity: Optional[int] = None
