from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional

from etiquetas.models.label import PrintSelection
from etiquetas.services.catalog_service import CatalogSession
from etiquetas.services.label_service import LabelService
from etiquetas.services.store_service import StoreService
from etiquetas.settings import AppPaths, seed_config
from etiquetas.storage.json_repo import StoreCatalogRepository

log = logging.getLogger(__name__)


class WorkflowService:
    """Ponto de entrada da interface: lojas, sessão do catálogo e geração do PDF."""

    def __init__(
        self,
        paths: Optional[AppPaths] = None,
        *,
        reveal: Optional[Callable[[Path], None]] = None,
    ) -> None:
        self.paths = paths or AppPaths.from_env()
        self.paths.ensure_dirs()
        if seed_config(self.paths):
            log.info("Configuração inicial criada em %s", self.paths.config_path)
        self.repo = StoreCatalogRepository(self.paths)
        self.stores = StoreService(self.repo)
        self.labels = LabelService(self.paths, reveal=reveal)

    def open_store(self, store_id: Optional[str] = None) -> CatalogSession:
        """Abre a loja pedida; se não existir na configuração, usa a primeira."""
        stores = self.stores.list_stores()
        known = {s.id for s in stores}
        if store_id not in known:
            if stores:
                store_id = stores[0].id
            elif not store_id:
                raise ValueError("Nenhuma loja configurada")
        return CatalogSession(self.repo, store_id)

    def generate_labels(self, selections: Iterable[PrintSelection]) -> Path:
        return self.labels.generate_from_selections(selections)
