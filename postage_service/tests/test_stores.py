"""
Store Tests

File-backed item, packaging and settings repositories, each rooted in the
test's tmp_path via POSTAGE_DATA_DIR.

Run: pytest postage_service/tests/test_stores.py -v
"""

import json

import pytest


# ==================== Item Store Tests ====================

def test_item_create_and_find(isolated_env):
    from postage_service.schemas.catalog import ItemCreate
    from postage_service.stores.items import ItemStore

    store = ItemStore()
    created = store.create(ItemCreate(name="Widget", description="Blue", unit_weight_grams=120))

    assert created.id
    assert store.find_by_id(created.id) == created
    assert store.find_all() == [created]

    on_disk = json.loads((isolated_env / "items.json").read_text())
    assert on_disk[0]["unitWeightGrams"] == 120
    assert on_disk[0]["name"] == "Widget"


@pytest.mark.parametrize("payload,message", [
    ({"name": "", "unit_weight_grams": 10}, "Item name is required"),
    ({"name": "   ", "unit_weight_grams": 10}, "Item name is required"),
    ({"name": "Widget", "unit_weight_grams": 0}, "Item unit weight must be greater than 0"),
])
def test_item_create_validation(payload, message):
    from postage_service.core.errors import ValidationError
    from postage_service.schemas.catalog import ItemCreate
    from postage_service.stores.items import ItemStore

    with pytest.raises(ValidationError) as exc_info:
        ItemStore().create(ItemCreate(**payload))

    assert exc_info.value.message == message


def test_item_duplicate_name_rejected():
    from postage_service.core.errors import ValidationError
    from postage_service.schemas.catalog import ItemCreate
    from postage_service.stores.items import ItemStore

    store = ItemStore()
    store.create(ItemCreate(name="Widget", unit_weight_grams=10))

    with pytest.raises(ValidationError) as exc_info:
        store.create(ItemCreate(name="Widget", unit_weight_grams=20))

    assert exc_info.value.message == "Item with name Widget already exists"


def test_item_partial_update():
    """Blank name and zero weight keep the stored values."""
    from postage_service.schemas.catalog import ItemCreate, ItemUpdate
    from postage_service.stores.items import ItemStore

    store = ItemStore()
    created = store.create(ItemCreate(name="Widget", description="Blue", unit_weight_grams=10))

    updated = store.update(created.id, ItemUpdate(name="", unit_weight_grams=0, description="Red"))

    assert updated.name == "Widget"
    assert updated.unit_weight_grams == 10
    assert updated.description == "Red"

    renamed = store.update(created.id, ItemUpdate(name="Gadget", unit_weight_grams=15))
    assert renamed.name == "Gadget"
    assert renamed.unit_weight_grams == 15
    assert renamed.description == "Red"
    assert store.find_by_id(created.id) == renamed


def test_item_update_rejects_other_items_name():
    from postage_service.core.errors import ValidationError
    from postage_service.schemas.catalog import ItemCreate, ItemUpdate
    from postage_service.stores.items import ItemStore

    store = ItemStore()
    first = store.create(ItemCreate(name="Widget", unit_weight_grams=10))
    store.create(ItemCreate(name="Gadget", unit_weight_grams=10))

    with pytest.raises(ValidationError):
        store.update(first.id, ItemUpdate(name="Gadget"))

    # Renaming to its own name is fine
    assert store.update(first.id, ItemUpdate(name="Widget")).name == "Widget"


def test_item_update_unknown_id():
    from postage_service.core.errors import NotFoundError
    from postage_service.schemas.catalog import ItemUpdate
    from postage_service.stores.items import ItemStore

    with pytest.raises(NotFoundError) as exc_info:
        ItemStore().update("missing", ItemUpdate(name="x"))

    assert exc_info.value.message == "Item with id missing not found"


def test_item_delete_is_idempotent(isolated_env):
    from postage_service.schemas.catalog import ItemCreate
    from postage_service.stores.items import ItemStore

    store = ItemStore()
    created = store.create(ItemCreate(name="Widget", unit_weight_grams=10))

    store.delete(created.id)
    store.delete(created.id)

    assert store.find_all() == []
    assert store.find_by_id(created.id) is None
    assert not (isolated_env / "items.json.tmp").exists()


def test_item_find_by_blank_id():
    from postage_service.core.errors import ValidationError
    from postage_service.stores.items import ItemStore

    with pytest.raises(ValidationError):
        ItemStore().find_by_id(" ")


def test_item_store_missing_file_is_empty():
    from postage_service.stores.items import ItemStore

    assert ItemStore().find_all() == []


def test_item_store_corrupt_file(isolated_env):
    from postage_service.core.errors import StoreError
    from postage_service.stores.items import ItemStore

    (isolated_env / "items.json").write_text("{not json")

    with pytest.raises(StoreError) as exc_info:
        ItemStore().find_all()

    assert exc_info.value.status_code == 500


def test_item_store_explicit_data_dir(tmp_path):
    from postage_service.schemas.catalog import ItemCreate
    from postage_service.stores.items import ItemStore

    other_dir = tmp_path / "nested" / "data"
    ItemStore(data_dir=other_dir).create(ItemCreate(name="Widget", unit_weight_grams=10))

    assert (other_dir / "items.json").exists()


# ==================== Packaging Store Tests ====================

def test_packaging_create_derives_volume():
    from postage_service.schemas.catalog import PackagingCreate
    from postage_service.stores.packaging import PackagingStore

    store = PackagingStore()
    created = store.create(PackagingCreate(name="Box", length_cm=10, height_cm=20, width_cm=30, packaging_cost_aud=2.0))

    assert created.internal_volume_cubic_cm == 6000
    assert store.find_by_id(created.id).internal_volume_cubic_cm == 6000


def test_packaging_explicit_volume_kept():
    from postage_service.schemas.catalog import PackagingCreate
    from postage_service.stores.packaging import PackagingStore

    created = PackagingStore().create(PackagingCreate(
        name="Padded", length_cm=10, height_cm=10, width_cm=10, internal_volume_cubic_cm=800
    ))

    assert created.internal_volume_cubic_cm == 800
    assert created.packaging_cost_aud == 0.0


@pytest.mark.parametrize("payload,message", [
    ({"name": "", "length_cm": 1, "height_cm": 1, "width_cm": 1}, "Packaging name is required"),
    ({"name": "Box", "length_cm": 0, "height_cm": 1, "width_cm": 1},
     "Packaging dimensions (length, height, width) must be greater than 0"),
    ({"name": "Box", "length_cm": 1, "height_cm": 1, "width_cm": 1, "packaging_cost_aud": -1},
     "Packaging cost must not be negative"),
])
def test_packaging_create_validation(payload, message):
    from postage_service.core.errors import ValidationError
    from postage_service.schemas.catalog import PackagingCreate
    from postage_service.stores.packaging import PackagingStore

    with pytest.raises(ValidationError) as exc_info:
        PackagingStore().create(PackagingCreate(**payload))

    assert exc_info.value.message == message


def test_packaging_duplicate_and_update():
    from postage_service.core.errors import NotFoundError, ValidationError
    from postage_service.schemas.catalog import PackagingCreate, PackagingUpdate
    from postage_service.stores.packaging import PackagingStore

    store = PackagingStore()
    box = store.create(PackagingCreate(name="Box", length_cm=10, height_cm=10, width_cm=10, packaging_cost_aud=2.0))
    store.create(PackagingCreate(name="Satchel", length_cm=5, height_cm=5, width_cm=5))

    with pytest.raises(ValidationError):
        store.create(PackagingCreate(name="Box", length_cm=1, height_cm=1, width_cm=1))
    with pytest.raises(ValidationError):
        store.update(box.id, PackagingUpdate(name="Satchel"))
    with pytest.raises(NotFoundError):
        store.update("missing", PackagingUpdate(length_cm=3))

    updated = store.update(box.id, PackagingUpdate(length_cm=20, width_cm=0, packaging_cost_aud=0.0))

    assert updated.length_cm == 20
    assert updated.width_cm == 10
    assert updated.packaging_cost_aud == 0.0
    assert updated.name == "Box"


def test_packaging_delete_is_idempotent():
    from postage_service.schemas.catalog import PackagingCreate
    from postage_service.stores.packaging import PackagingStore

    store = PackagingStore()
    box = store.create(PackagingCreate(name="Box", length_cm=1, height_cm=1, width_cm=1))

    store.delete(box.id)
    store.delete("never-existed")

    assert store.find_all() == []


# ==================== Settings Store Tests ====================

def test_origin_absent_until_saved():
    from postage_service.stores.settings import SettingsStore

    assert SettingsStore().get_origin_settings() is None


def test_origin_save_stamps_updated_at(origin):
    from postage_service.stores.settings import SettingsStore

    store = SettingsStore()
    saved = store.save_origin_settings(origin)

    assert saved.updated_at is not None
    loaded = store.get_origin_settings()
    assert loaded.postcode == "3000"
    assert loaded.updated_at == saved.updated_at


def test_theme_preserved_across_origin_updates(origin):
    from postage_service.stores.settings import SettingsStore

    store = SettingsStore()
    store.save_origin_settings(origin)
    theme = store.update_theme("  Dark ")

    assert theme.theme_preference == "dark"

    moved = store.save_origin_settings(origin.model_copy(update={"postcode": "2000", "state": "NSW"}))

    assert moved.theme_preference == "dark"
    assert store.get_origin_settings().theme_preference == "dark"
    assert store.get_origin_settings().postcode == "2000"


def test_theme_without_origin(isolated_env):
    from postage_service.stores.settings import SettingsStore

    store = SettingsStore()
    store.update_theme("sepia")

    assert store.get_origin_settings() is None
    assert json.loads((isolated_env / "settings.json").read_text())["themePreference"] == "sepia"


def test_theme_rejects_unknown_value():
    from postage_service.stores.settings import SettingsStore

    with pytest.raises(ValueError):
        SettingsStore().update_theme("neon")
