from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import parse_price

DEFAULT_CODIGO = "0000"


class ProductStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DELETED = "deleted"


class PriceChange(BaseModel):
    preco: float
    data: datetime


class Product(BaseModel):
    """
    Registro de produto tal como gravado no catálogo da loja.
    Chaves em disco: codigo, nome, medida, preco, isNew, isInactive, isDeleted, historicoPrecos.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    codigo: str = DEFAULT_CODIGO
    nome: str = ""
    medida: str = ""
    preco: float = Field(0.0, ge=0, allow_inf_nan=False)
    is_new: bool = Field(True, alias="isNew")
    is_inactive: bool = Field(False, alias="isInactive")
    is_deleted: bool = Field(False, alias="isDeleted")
    historico_precos: List[PriceChange] = Field(default_factory=list, alias="historicoPrecos")

    @property
    def status(self) -> ProductStatus:
        # excluído prevalece sobre inativo
        if self.is_deleted:
            return ProductStatus.DELETED
        if self.is_inactive:
            return ProductStatus.INACTIVE
        return ProductStatus.ACTIVE

    @property
    def is_printable(self) -> bool:
        return self.status is ProductStatus.ACTIVE

    def record_price_change(self, new_price: float, at: datetime) -> bool:
        """Anexa o preço ANTIGO ao histórico quando o preço muda. Não altera `preco`."""
        if self.preco == new_price:
            return False
        self.historico_precos.append(PriceChange(preco=self.preco, data=at))
        return True

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ProductEdit(BaseModel):
    """Um conjunto de campos enviados pelo formulário, ligado ao código ORIGINAL."""
    model_config = ConfigDict(populate_by_name=True)

    original_codigo: str
    codigo: str
    nome: str = ""
    medida: str = ""
    preco: float = 0.0
    is_new: bool = Field(False, alias="isNew")

    @field_validator("codigo", mode="before")
    @classmethod
    def _strip_codigo(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("preco", mode="before")
    @classmethod
    def _parse_preco(cls, v: Any) -> float:
        return parse_price(v)

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"original_codigo"})
