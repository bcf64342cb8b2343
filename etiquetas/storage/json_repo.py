from __future__ import annotations

import json
import logging
import math
import os
import re
import shutil
import tempfile
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, StrictStr
from pydantic import ValidationError as PydanticValidationError

from etiquetas.errors import CorruptDataError, StorageIOError, StoreError, ValidationError
from etiquetas.settings import AppPaths

log = logging.getLogger(__name__)

Record = Union[BaseModel, Mapping[str, Any]]

_UNSAFE_ID_CHARS = re.compile(r"[^A-Za-z0-9_-]")
_BACKUP_TS_FORMAT = "%Y%m%dT%H%M%S%f"


def _json_default(o: Any) -> Any:
    if isinstance(o, (date, datetime)):
        return o.isoformat()
    raise TypeError(f"Object of type {o.__class__.__name__} is not JSON serializable")


def sanitize_store_id(store_id: str) -> str:
    safe = _UNSAFE_ID_CHARS.sub("", str(store_id or ""))
    if not safe:
        raise StoreError(f"Identificador de loja inválido: {store_id!r}")
    return safe


class _SaveContract(BaseModel):
    """Campos mínimos exigidos de cada produto para gravar o catálogo."""
    model_config = ConfigDict(extra="allow")

    codigo: StrictStr
    nome: StrictStr
    preco: Union[StrictInt, StrictFloat]


def validate_products(products: Any) -> List[Dict[str, Any]]:
    """
    Valida a lista inteira antes de qualquer I/O.
    Retorna a lista normalizada em dicts; levanta ValidationError caso contrário.
    """
    if not isinstance(products, (list, tuple)):
        raise ValidationError(
            "Dados inválidos: o catálogo deve ser uma lista de produtos.",
            [f"tipo recebido: {type(products).__name__}"],
        )
    rows = [StoreCatalogRepository._to_dict(p) for p in products]
    problems: List[str] = []
    for idx, row in enumerate(rows):
        if row is None:
            problems.append(f"item {idx}: não é um objeto")
            continue
        # bool é subclasse de int: preco=True não é um número válido
        if isinstance(row.get("preco"), bool):
            problems.append(f"item {idx}: preco deve ser numérico")
            continue
        if isinstance(row.get("preco"), float) and not math.isfinite(row["preco"]):
            problems.append(f"item {idx}: preco deve ser finito")
            continue
        try:
            _SaveContract.model_validate(row)
        except PydanticValidationError as e:
            for err in e.errors():
                field = ".".join(str(x) for x in err.get("loc", ()))
                problems.append(f"item {idx}: {field} {err.get('msg', '')}".strip())
    if problems:
        raise ValidationError("Dados inválidos. Verifique a integridade dos produtos.", problems)
    return rows


class StoreCatalogRepository:
    """
    Persistência JSON das lojas.
    - config.json: {"stores": [{id, name}, ...]}
    - data/<loja>.json: lista de produtos da loja
    - backups/<loja>_<timestamp>.json antes de cada sobrescrita (mantém os `backup_keep` mais recentes)
    """

    def __init__(
        self,
        paths: AppPaths,
        *,
        backup_keep: int = 5,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.paths = paths
        self.backup_keep = max(0, int(backup_keep))
        self.clock = clock
        paths.ensure_dirs()

    # ---------------- I/O baixo nível ---------------- #

    @staticmethod
    def _read_json(path: Path) -> Optional[Any]:
        """None se o arquivo não existe; CorruptDataError se existe mas não é JSON."""
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageIOError(f"Falha ao ler {path.name}: {e}", path) from e
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"Arquivo corrompido: {path.name} ({e})", path) from e

    @staticmethod
    def _write_json(path: Path, data: Any) -> None:
        dump = json.dumps(data, ensure_ascii=False, indent=2, default=_json_default)
        tmp_name = None
        try:
            # grava num temporário do mesmo diretório e troca de uma vez
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp", delete=False
            ) as f:
                tmp_name = f.name
                f.write(dump)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name:
                Path(tmp_name).unlink(missing_ok=True)
            raise StorageIOError(f"Falha ao gravar {path.name}: {e}", path) from e

    # ---------------- Helpers ---------------- #

    @staticmethod
    def _to_dict(item: Any) -> Optional[Dict[str, Any]]:
        if isinstance(item, BaseModel):
            if hasattr(item, "to_record"):
                return item.to_record()
            return item.model_dump(mode="json", by_alias=True)
        if isinstance(item, Mapping):
            return dict(item)
        return None

    def store_path(self, store_id: str) -> Path:
        return self.paths.data_dir / f"{sanitize_store_id(store_id)}.json"

    # ---------------- Config ---------------- #

    def load_config(self) -> List[Dict[str, Any]]:
        doc = self._read_json(self.paths.config_path)
        if doc is None:
            return []
        stores = doc.get("stores") if isinstance(doc, dict) else None
        if not isinstance(stores, list):
            raise CorruptDataError("config.json sem a lista 'stores'.", self.paths.config_path)
        return stores

    def save_config(self, stores: Sequence[Record]) -> None:
        rows = [self._to_dict(s) for s in stores]
        self._write_json(self.paths.config_path, {"stores": rows})
        log.info("Configuração salva (%d lojas)", len(rows))

    # ---------------- Catálogo ---------------- #

    def load_products(self, store_id: str) -> List[Dict[str, Any]]:
        path = self.store_path(store_id)
        data = self._read_json(path)
        if data is None:
            return []
        if not isinstance(data, list):
            raise CorruptDataError(f"Catálogo {path.name} não é uma lista.", path)
        return data

    def save_products(self, store_id: str, products: Sequence[Record]) -> None:
        rows = validate_products(products)
        path = self.store_path(store_id)
        safe_id = path.stem
        if path.exists():
            self._backup(safe_id, path)
            self._prune_backups(safe_id)
        self._write_json(path, rows)
        log.info("Catálogo '%s' salvo (%d produtos)", safe_id, len(rows))

    # ---------------- Backups ---------------- #

    def _backup_pattern(self, safe_id: str) -> "re.Pattern[str]":
        return re.compile(rf"^{re.escape(safe_id)}_(\d{{8}}T\d{{12}})(?:-(\d+))?\.json$")

    def _backup_key(self, pattern: "re.Pattern[str]", name: str) -> Optional[Tuple[str, int]]:
        m = pattern.match(name)
        if not m:
            return None
        return m.group(1), int(m.group(2) or 0)

    def _backup(self, safe_id: str, src: Path) -> Path:
        ts = self.clock().strftime(_BACKUP_TS_FORMAT)
        dest = self.paths.backups_dir / f"{safe_id}_{ts}.json"
        n = 0
        while dest.exists():
            n += 1
            dest = self.paths.backups_dir / f"{safe_id}_{ts}-{n}.json"
        try:
            shutil.copy2(src, dest)
        except OSError as e:
            raise StorageIOError(f"Falha ao criar backup de {src.name}: {e}", dest) from e
        log.info("Backup criado: %s", dest.name)
        return dest

    def list_backups(self, store_id: str) -> List[Path]:
        """Backups da loja, do mais antigo ao mais recente (ordem pelo timestamp do nome)."""
        safe_id = sanitize_store_id(store_id)
        pattern = self._backup_pattern(safe_id)
        keyed = []
        if not self.paths.backups_dir.is_dir():
            return []
        for p in self.paths.backups_dir.iterdir():
            key = self._backup_key(pattern, p.name)
            if key is not None:
                keyed.append((key, p))
        keyed.sort(key=lambda kv: kv[0])
        return [p for _, p in keyed]

    def _prune_backups(self, safe_id: str) -> None:
        # falhas aqui não bloqueiam a gravação principal
        if self.backup_keep <= 0:
            return
        try:
            files = self.list_backups(safe_id)
        except OSError as e:
            log.warning("Não foi possível listar backups de '%s': %s", safe_id, e)
            return
        for old in files[: max(0, len(files) - self.backup_keep)]:
            try:
                old.unlink(missing_ok=True)
            except OSError as e:
                log.warning("Não foi possível remover backup antigo %s: %s", old.name, e)

    def restore_backup(self, store_id: str, backup_path: Union[str, Path]) -> List[Dict[str, Any]]:
        """Volta o catálogo da loja para o conteúdo de um backup (passa pelo fluxo normal de gravação)."""
        bp = Path(backup_path)
        if bp not in self.list_backups(store_id):
            raise StorageIOError(f"Backup não pertence à loja {store_id!r}: {bp.name}", bp)
        rows = self._read_json(bp)
        if not isinstance(rows, list):
            raise CorruptDataError(f"Backup {bp.name} não é uma lista.", bp)
        self.save_products(store_id, rows)
        return rows
