from medstore import config
from medstore.seed import ensure_seed


class TestEnsureSeed:

    def test_seeds_empty_store(self, store, catalog, ledger):
        assert ensure_seed(store) is True
        assert [m.name for m in catalog.list()] == [
            "Paracetamol 500mg",
            "Cough Syrup 100ml",
            "Vitamin C 1000mg",
        ]
        assert store.get(config.SALES_KEY) == []
        assert ledger.list() == []

    def test_keeps_existing_catalog_and_sales(self, store, catalog, med_a):
        store.set(config.SALES_KEY, [{"id": "s1", "timestamp": 1, "items": [], "total": 0}])
        assert ensure_seed(store) is False
        assert [m.id for m in catalog.list()] == [med_a.id]
        assert len(store.get(config.SALES_KEY)) == 1

    def test_reseeds_empty_list(self, store, catalog):
        store.set(config.MEDICINES_KEY, [])
        assert ensure_seed(store) is True
        assert len(catalog.list()) == 3
