# etiquetas/errors.py
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional


class EtiquetasError(Exception):
    """
    Erro base do núcleo.
    A camada de interface mostra `kind` + `mensagem` ao operador.
    """

    def __init__(self, mensagem: str):
        self.mensagem = mensagem
        super().__init__(mensagem)

    @property
    def kind(self) -> str:
        return type(self).__name__


class ValidationError(EtiquetasError):
    """
    Lista de produtos malformada no momento de salvar.
    Nada é gravado em disco.
    """

    def __init__(self, mensagem: str, errors: Optional[List[str]] = None):
        self.errors = list(errors or [])
        super().__init__(mensagem)


class DuplicateIdentifierError(EtiquetasError):
    """Dois ou mais registros enviados com o mesmo identificador."""

    def __init__(self, mensagem: str, codigos: Iterable[str] = ()):
        self.codigos = sorted(set(codigos))
        super().__init__(mensagem)


class StorageIOError(EtiquetasError):
    """Falha de leitura/escrita/cópia/remoção no disco."""

    def __init__(self, mensagem: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(mensagem)


class CorruptDataError(StorageIOError):
    """Arquivo presente mas ilegível (JSON inválido ou formato inesperado)."""


class AssetMissingError(EtiquetasError):
    """Fonte ou imagem necessária para a etiqueta não pôde ser carregada."""

    def __init__(self, mensagem: str, paths: Iterable[Path] = ()):
        self.paths = [Path(p) for p in paths]
        super().__init__(mensagem)


class EmptyPrintListError(EtiquetasError):
    def __init__(self, mensagem: str = "Selecione produtos para imprimir."):
        super().__init__(mensagem)


class StoreError(EtiquetasError):
    """Regra da lista de lojas violada (id vazio, remoção da loja ativa...)."""
