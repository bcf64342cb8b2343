from __future__ import annotations
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from etiquetas.errors import CorruptDataError, DuplicateIdentifierError, StoreError
from etiquetas.models.store import Store
from etiquetas.storage.json_repo import StoreCatalogRepository, sanitize_store_id


class StoreService:
    def __init__(self, repo: StoreCatalogRepository):
        self.repo = repo

    def list_stores(self) -> List[Store]:
        out: List[Store] = []
        for d in self.repo.load_config():
            try:
                out.append(Store.model_validate(d))
            except PydanticValidationError as e:
                raise CorruptDataError(f"Loja inválida em config.json: {e}", self.repo.paths.config_path) from e
        return out

    def get(self, store_id: str) -> Optional[Store]:
        for s in self.list_stores():
            if s.id == store_id:
                return s
        return None

    @staticmethod
    def _file_key(store_id: str) -> Optional[str]:
        try:
            return sanitize_store_id(store_id)
        except StoreError:
            return None

    def add_store(self, store_id: str, name: str) -> Store:
        store_id = (store_id or "").strip()
        name = (name or "").strip()
        if not store_id or not name:
            raise StoreError("Preencha ID e Nome")
        # o id vira nome de arquivo: só letras, números, - e _
        if self._file_key(store_id) != store_id:
            raise StoreError("ID da loja deve conter apenas letras, números, '-' e '_'")
        stores = self.list_stores()
        if any(self._file_key(s.id) == store_id for s in stores):
            raise DuplicateIdentifierError("ID já existe", [store_id])
        store = Store(id=store_id, name=name)
        stores.append(store)
        self.repo.save_config(stores)
        return store

    def remove_store(self, store_id: str, active_store_id: str) -> List[Store]:
        """Remove da lista; o arquivo de dados da loja é mantido."""
        if store_id == active_store_id:
            raise StoreError("Não é possível remover a loja ativa")
        stores = self.list_stores()
        idx = next((i for i, s in enumerate(stores) if s.id == store_id), None)
        if idx is None:
            raise StoreError(f"Loja {store_id!r} não encontrada")
        if idx == 0:
            raise StoreError("A primeira loja não pode ser removida")
        del stores[idx]
        self.repo.save_config(stores)
        return stores
