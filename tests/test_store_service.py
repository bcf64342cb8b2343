import pytest

from etiquetas.errors import DuplicateIdentifierError, StoreError
from etiquetas.services.store_service import StoreService
from etiquetas.settings import seed_config


@pytest.fixture
def stores(repo, paths):
    seed_config(paths)
    return StoreService(repo)


def test_seeded_store(stores):
    assert [(s.id, s.name) for s in stores.list_stores()] == [("matriz", "Cotia")]


def test_add_store_trims_and_persists(stores, repo):
    stores.add_store("  filial ", " Osasco ")
    assert repo.load_config()[-1] == {"id": "filial", "name": "Osasco"}
    assert stores.get("filial").name == "Osasco"


def test_add_store_rejects_duplicate_id(stores):
    with pytest.raises(DuplicateIdentifierError):
        stores.add_store("matriz", "Outra")


@pytest.mark.parametrize("sid,name", [("", "Nome"), ("id", "   ")])
def test_add_store_requires_id_and_name(stores, sid, name):
    with pytest.raises(StoreError):
        stores.add_store(sid, name)


def test_remove_store_rules(stores, repo):
    stores.add_store("filial", "Osasco")
    stores.add_store("centro", "Centro")

    with pytest.raises(StoreError):
        stores.remove_store("matriz", active_store_id="filial")
    with pytest.raises(StoreError):
        stores.remove_store("filial", active_store_id="filial")

    remaining = stores.remove_store("filial", active_store_id="matriz")
    assert [s.id for s in remaining] == ["matriz", "centro"]
    assert [s["id"] for s in repo.load_config()] == ["matriz", "centro"]


def test_remove_store_keeps_catalog_file(stores, repo, sample_products):
    stores.add_store("filial", "Osasco")
    repo.save_products("filial", sample_products)
    stores.remove_store("filial", active_store_id="matriz")
    assert repo.load_products("filial") == sample_products


@pytest.mark.parametrize("sid", ["loja.1", "loja 1", "../loja1", "loja/1"])
def test_add_store_rejects_ids_that_are_not_file_safe(stores, repo, sid):
    with pytest.raises(StoreError):
        stores.add_store(sid, "B")
    assert [s["id"] for s in repo.load_config()] == ["matriz"]


def test_add_store_compares_file_keys_of_existing_ids(stores, repo):
    repo.save_config([{"id": "matriz", "name": "Cotia"}, {"id": "loja.1", "name": "Antiga"}])
    with pytest.raises(DuplicateIdentifierError):
        stores.add_store("loja1", "Nova")
