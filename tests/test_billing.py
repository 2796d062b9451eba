import pytest

from medstore import config
from medstore.errors import (
    EmptyCartError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)


class TestAddLine:

    def test_snapshots_name_and_price(self, session, catalog, med_a):
        session.add_line(med_a.id, 2)
        catalog.edit(med_a.id, name="Renamed", price=99.0)

        line = session.lines[0]
        assert line.name == "Amoxicillin 250mg"
        assert line.unit_price == 10.0
        assert session.total() == 20.0

    def test_same_medicine_merges_quantities(self, session, med_a):
        session.add_line(med_a.id, 2)
        session.add_line(med_a.id, 3)

        assert len(session.lines) == 1
        assert session.lines[0].quantity == 5
        assert session.total_quantity() == 5

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_rejects_quantity_below_one(self, session, med_a, quantity):
        with pytest.raises(ValidationError):
            session.add_line(med_a.id, quantity)
        assert session.is_empty

    def test_unknown_medicine(self, session):
        with pytest.raises(NotFoundError):
            session.add_line("missing0", 1)

    def test_quantity_over_stock_leaves_cart_unchanged(self, session, med_a):
        session.add_line(med_a.id, 1)
        with pytest.raises(InsufficientStockError) as exc_info:
            session.add_line(med_a.id, 6)

        assert exc_info.value.available == 5
        assert exc_info.value.requested == 6
        assert session.lines[0].quantity == 1

    def test_check_ignores_quantity_already_in_cart(self, session, med_a):
        session.add_line(med_a.id, 5)
        session.add_line(med_a.id, 5)
        assert session.lines[0].quantity == 10


class TestCartEditing:

    def test_remove_line(self, session, med_a, med_b):
        session.add_line(med_a.id, 1)
        session.add_line(med_b.id, 1)
        session.remove_line(med_a.id)
        assert [line.medicine_id for line in session.lines] == [med_b.id]
        session.remove_line("missing0")
        assert len(session.lines) == 1

    def test_clear_has_no_persistence_effect(self, session, catalog, ledger, med_a):
        session.add_line(med_a.id, 2)
        session.clear()

        assert session.is_empty
        assert session.total() == 0
        assert catalog.get(med_a.id).stock == 5
        assert ledger.list() == []


class TestCommit:

    def test_commit_deducts_stock_and_records_sale(self, session, catalog, ledger, med_a, med_b):
        session.add_line(med_a.id, 2)
        session.add_line(med_b.id, 1)

        sale = session.commit()

        assert sale.total == 25.0
        assert [(i.name, i.quantity, i.line_total) for i in sale.items] == [
            ("Amoxicillin 250mg", 2, 20.0),
            ("Bandage Roll", 1, 5.0),
        ]
        assert catalog.get(med_a.id).stock == 3
        assert catalog.get(med_b.id).stock == 2
        assert ledger.list() == [sale]
        assert session.is_empty

    def test_empty_cart(self, session, ledger):
        with pytest.raises(EmptyCartError):
            session.commit()
        assert ledger.list() == []

    def test_recheck_blocks_when_stock_dropped(self, session, catalog, ledger, med_a, med_b):
        session.add_line(med_b.id, 1)
        session.add_line(med_a.id, 4)
        catalog.edit(med_a.id, stock=3)

        with pytest.raises(InsufficientStockError) as exc_info:
            session.commit()

        assert exc_info.value.name == "Amoxicillin 250mg"
        assert catalog.get(med_a.id).stock == 3
        assert catalog.get(med_b.id).stock == 3
        assert ledger.list() == []
        assert len(session.lines) == 2

    def test_recheck_blocks_merged_quantity_over_stock(self, session, ledger, med_a):
        session.add_line(med_a.id, 3)
        session.add_line(med_a.id, 3)
        with pytest.raises(InsufficientStockError):
            session.commit()
        assert ledger.list() == []

    def test_recheck_blocks_deleted_medicine(self, session, catalog, med_a):
        session.add_line(med_a.id, 1)
        catalog.delete(med_a.id)
        with pytest.raises(InsufficientStockError) as exc_info:
            session.commit()
        assert exc_info.value.available == 0

    def test_sale_total_not_recomputed_after_price_change(self, session, catalog, ledger, med_a):
        session.add_line(med_a.id, 1)
        sale = session.commit()
        catalog.edit(med_a.id, price=500.0)
        assert ledger.list()[0].total == sale.total == 10.0

    def test_commit_can_sell_entire_stock(self, session, catalog, store, med_b):
        session.add_line(med_b.id, 3)
        session.commit()
        assert catalog.get(med_b.id).stock == 0
        assert len(store.get(config.SALES_KEY)) == 1
