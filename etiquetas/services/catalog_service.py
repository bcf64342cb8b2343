from __future__ import annotations

import logging
from collections import Counter, deque
from datetime import datetime
from typing import Callable, Deque, Dict, List, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from etiquetas.errors import CorruptDataError, DuplicateIdentifierError
from etiquetas.models.label import PrintItem
from etiquetas.models.product import Product, ProductEdit, ProductStatus
from etiquetas.storage.json_repo import StoreCatalogRepository

log = logging.getLogger(__name__)


def _matches(p: Product, term: str) -> bool:
    t = term.lower()
    return t in (p.nome or "").lower() or t in (p.codigo or "").lower()


class CatalogSession:
    """
    Cópia de trabalho do catálogo de UMA loja.
    - Carrega do disco na criação (reload/discard voltam ao estado gravado)
    - save_all: reconcilia as edições do formulário (por código ORIGINAL) e grava
    - toggle_active / soft_delete / restore gravam imediatamente
    """

    def __init__(
        self,
        repo: StoreCatalogRepository,
        store_id: str,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.repo = repo
        self.store_id = store_id
        self.clock = clock
        self.products: List[Product] = []
        self.reload()

    # ---------- Carregamento ---------- #

    def _hydrate(self, rows: List[Dict]) -> List[Product]:
        out: List[Product] = []
        for idx, d in enumerate(rows):
            try:
                out.append(Product.model_validate(d))
            except PydanticValidationError as e:
                path = self.repo.store_path(self.store_id)
                raise CorruptDataError(f"Produto {idx} inválido em {path.name}: {e}", path) from e
        return out

    def reload(self) -> None:
        self.products = self._hydrate(self.repo.load_products(self.store_id))

    discard = reload

    def commit(self) -> None:
        self.repo.save_products(self.store_id, self.products)

    def _snapshot(self) -> List[Product]:
        return [p.model_copy(deep=True) for p in self.products]

    def _commit_or_rollback(self, before: List[Product]) -> None:
        try:
            self.commit()
        except Exception:
            self.products = before
            raise

    # ---------- Listas ---------- #

    def active_products(self, term: str = "") -> List[Product]:
        rows = [p for p in self.products if not p.is_deleted]
        if term:
            rows = [p for p in rows if _matches(p, term)]
        # inativos por último, ordem estável
        return sorted(rows, key=lambda p: p.status is ProductStatus.INACTIVE)

    def trash_products(self, term: str = "") -> List[Product]:
        rows = [p for p in self.products if p.is_deleted]
        if term:
            rows = [p for p in rows if _matches(p, term)]
        return rows

    def printable_products(self) -> List[Product]:
        return [p for p in self.products if p.is_printable]

    def print_items(self, codigos: Sequence[str]) -> List[PrintItem]:
        wanted = set(codigos)
        return [PrintItem.from_product(p) for p in self.printable_products() if p.codigo in wanted]

    def find(self, codigo: str, *, deleted: Optional[bool] = False) -> Optional[Product]:
        for p in self.products:
            if p.codigo == codigo and (deleted is None or p.is_deleted == deleted):
                return p
        return None

    # ---------- Mutações ---------- #

    def add_product(self) -> Product:
        before = self._snapshot()
        p = Product()
        self.products.insert(0, p)
        self._commit_or_rollback(before)
        return p

    @staticmethod
    def _check_duplicates(edits: Sequence[ProductEdit]) -> None:
        new_codes = Counter(e.codigo for e in edits if e.codigo != "")
        dup = [c for c, n in new_codes.items() if n > 1]
        if dup:
            raise DuplicateIdentifierError(
                "Existem códigos duplicados na lista. Corrija antes de salvar.", dup
            )

    def _pair_edits(self, edits: Sequence[ProductEdit]) -> List[Optional[ProductEdit]]:
        """
        Liga cada registro ativo à próxima edição com o mesmo código original.
        Cada edição vale para um único registro, na ordem do catálogo.
        """
        pending: Dict[str, Deque[ProductEdit]] = {}
        for e in edits:
            pending.setdefault(e.original_codigo, deque()).append(e)
        paired: List[Optional[ProductEdit]] = []
        for p in self.products:
            queue = None if p.is_deleted else pending.get(p.codigo)
            paired.append(queue.popleft() if queue else None)
        return paired

    def _check_active_codes(self, paired: Sequence[Optional[ProductEdit]]) -> None:
        codes = Counter(
            (edit.codigo if edit is not None else p.codigo)
            for p, edit in zip(self.products, paired)
            if not p.is_deleted
        )
        dup = [c for c, n in codes.items() if c != "" and n > 1]
        if dup:
            raise DuplicateIdentifierError(
                "O código já pertence a outro produto ativo. Corrija antes de salvar.", dup
            )

    def save_all(self, edits: Sequence[ProductEdit]) -> List[Product]:
        """
        Aplica as edições e grava o catálogo.
        O histórico recebe o preço ANTIGO quando o preço muda.
        Registros excluídos ou sem edição correspondente ficam como estão.
        """
        self._check_duplicates(edits)
        paired = self._pair_edits(edits)
        self._check_active_codes(paired)

        before = self._snapshot()
        now = self.clock()
        updated: List[Product] = []
        changed = 0
        for p, edit in zip(self.products, paired):
            if edit is None:
                updated.append(p)
                continue
            cur = p.model_copy(deep=True)
            if cur.record_price_change(edit.preco, now):
                changed += 1
            updated.append(cur.model_copy(update=edit.changes()))
        self.products = updated
        self._commit_or_rollback(before)
        log.info("Loja '%s': %d edições aplicadas, %d mudanças de preço", self.store_id, len(edits), changed)
        return self.products

    def toggle_active(self, codigo: str) -> Product:
        p = self._require(codigo, deleted=False)
        before = self._snapshot()
        p.is_inactive = not p.is_inactive
        self._commit_or_rollback(before)
        return p

    def soft_delete(self, codigo: str) -> Product:
        p = self._require(codigo, deleted=False)
        before = self._snapshot()
        p.is_deleted = True
        self._commit_or_rollback(before)
        return p

    def restore(self, codigo: str) -> Product:
        p = self._require(codigo, deleted=True)
        before = self._snapshot()
        p.is_deleted = False
        self._commit_or_rollback(before)
        return p

    def _require(self, codigo: str, *, deleted: bool) -> Product:
        p = self.find(codigo, deleted=deleted)
        if p is None:
            where = "lixeira" if deleted else "lista ativa"
            raise KeyError(f"Produto {codigo!r} não encontrado na {where}")
        return p
