import pytest

from medstore import config
from medstore.errors import NotFoundError, ValidationError
from medstore.models.medicine import Medicine


class TestCatalogRepository:

    def test_create_then_list_has_one_new_entry(self, catalog):
        created = catalog.create(name="Ibuprofen 400mg", price=12.5, stock=40)
        medicines = catalog.list()

        assert len(medicines) == 1
        listed = medicines[0]
        assert listed.id == created.id
        assert listed.name == "Ibuprofen 400mg"
        assert listed.price == 12.5
        assert listed.stock == 40
        assert len(listed.id) == 8

    def test_created_ids_are_unique(self, catalog):
        ids = {catalog.create(name=f"Med {i}", price=1, stock=1).id for i in range(30)}
        assert len(ids) == 30

    def test_names_may_duplicate(self, catalog):
        catalog.create(name="Same", price=1, stock=1)
        catalog.create(name="Same", price=2, stock=2)
        assert [m.name for m in catalog.list()] == ["Same", "Same"]

    @pytest.mark.parametrize(
        "fields",
        [
            {"name": "", "price": 1, "stock": 1},
            {"name": "   ", "price": 1, "stock": 1},
            {"name": "X", "price": -1, "stock": 1},
            {"name": "X", "price": 1, "stock": -2},
            {"name": "X", "price": 1, "stock": 1, "mrp": -5},
            {"name": "X", "price": "abc", "stock": 1},
            {"name": "X", "price": 1, "stock": 1, "expiry": "31/12/2026"},
        ],
    )
    def test_create_rejects_invalid_input(self, catalog, fields):
        with pytest.raises(ValidationError):
            catalog.create(**fields)
        assert catalog.list() == []

    def test_edit_preserves_id_and_created_at(self, catalog, med_a):
        edited = catalog.edit(med_a.id, price=11.0, stock=9, supplier="New Supplier")

        stored = catalog.get(med_a.id)
        assert edited.id == med_a.id
        assert stored.created_at == med_a.created_at
        assert stored.price == 11.0
        assert stored.stock == 9
        assert stored.supplier == "New Supplier"
        assert stored.name == med_a.name

    def test_update_keeps_stored_created_at(self, catalog, med_a):
        replacement = Medicine(id=med_a.id, name="Renamed", price=1, stock=1, created_at=1)
        catalog.update(replacement)
        stored = catalog.get(med_a.id)
        assert stored.name == "Renamed"
        assert stored.created_at == med_a.created_at

    def test_update_unknown_id_is_noop(self, catalog, med_a):
        catalog.update(Medicine(id="missing0", name="Ghost"))
        assert [m.id for m in catalog.list()] == [med_a.id]

    def test_edit_unknown_id_raises(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.edit("missing0", price=1)

    def test_delete(self, catalog, med_a, med_b):
        catalog.delete(med_a.id)
        assert [m.id for m in catalog.list()] == [med_b.id]
        catalog.delete("missing0")
        assert [m.id for m in catalog.list()] == [med_b.id]

    def test_skips_malformed_entries(self, store, catalog):
        store.set(config.MEDICINES_KEY, ["junk", {"id": "abc12345", "name": "Kept", "stock": "7"}])
        medicines = catalog.list()
        assert [m.name for m in medicines] == ["Kept"]
        assert medicines[0].stock == 7

    def test_skips_entries_without_id(self, store, catalog):
        store.set(config.MEDICINES_KEY, [{"name": "No Id", "stock": 3}, {"id": "abc12345", "name": "Kept"}])
        assert [m.id for m in catalog.list()] == ["abc12345"]
        assert [m.id for m in catalog.list()] == ["abc12345"]

    def test_create_many_is_all_or_nothing(self, catalog, med_a):
        with pytest.raises(ValidationError):
            catalog.create_many([{"name": "Good", "price": 1, "stock": 1}, {"name": "", "price": 1}])
        assert [m.id for m in catalog.list()] == [med_a.id]

        created = catalog.create_many([{"name": "One"}, {"name": "Two", "stock": 2}])
        assert [m.name for m in catalog.list()] == [med_a.name, "One", "Two"]
        assert len({m.id for m in catalog.list()}) == 3
        assert created[1].stock == 2

    def test_non_list_value_reads_as_empty(self, store, catalog):
        store.set(config.MEDICINES_KEY, {"not": "a list"})
        assert catalog.list() == []

    def test_stored_shape_uses_created_at_camel_case(self, store, med_a):
        raw = store.get(config.MEDICINES_KEY)
        assert set(raw[0]) == {
            "id", "name", "category", "batch", "expiry",
            "supplier", "price", "mrp", "stock", "createdAt",
        }
