import json

from medstore import export
from medstore.models.medicine import Medicine
from medstore.models.sale import CartLine, Sale


class TestDelimitedText:

    def test_empty_input(self):
        assert export.to_delimited_text([]) == ""

    def test_header_from_first_row_and_quoting(self):
        rows = [
            {"name": 'Syrup "Extra"', "note": "line one\nline two", "stock": 3},
            {"name": "Plain", "note": None, "stock": 0},
            {"name": "Old\rMac", "note": "a\r\nb", "stock": 1},
        ]
        text = export.to_delimited_text(rows)
        assert text.split("\n") == [
            "name,note,stock",
            '"Syrup ""Extra""","line one line two","3"',
            '"Plain","","0"',
            '"Old Mac","a b","1"',
        ]


class TestStructuredText:

    def test_catalog_round_trip_preserves_order(self):
        medicines = [
            Medicine(name="Zinc", price=2.0, stock=4, expiry="2027-01-01"),
            Medicine(name="Aspirin", price=1.5, stock=0, supplier="Acme"),
        ]
        filename, text = export.export_medicines_json(medicines)
        assert filename == "medicines.json"
        assert json.loads(text) == [m.to_dict() for m in medicines]
        assert text.startswith("[\n  {")


class TestDatasetExports:

    def test_medicines_csv(self):
        medicine = Medicine(name="Zinc", price=2.0, stock=4, id="abc12345", created_at=0)
        filename, text = export.export_medicines_csv([medicine])
        header, row = text.split("\n")
        assert filename == "medicines.csv"
        assert header == "id,name,category,batch,expiry,supplier,price,mrp,stock,createdAt"
        assert row.endswith('"4","1970-01-01T00:00:00.000Z"')

    def test_sales_csv_has_one_row_per_item(self):
        sale = Sale.from_lines(
            [CartLine("a", "Zinc", 2.0, 3), CartLine("b", "Aspirin", 1.5, 2)], timestamp=0
        )
        filename, text = export.export_sales_csv([sale])
        lines = text.split("\n")
        assert filename == "sales.csv"
        assert lines[0] == "saleId,ts,item,qty,price,total,billTotal"
        assert len(lines) == 3
        assert lines[1] == f'"{sale.id}","1970-01-01T00:00:00.000Z","Zinc","3","2.0","6.0","9.0"'

    def test_sales_json(self):
        sale = Sale.from_lines([CartLine("a", "Zinc", 2.0, 3)], timestamp=5)
        filename, text = export.export_sales_json([sale])
        assert filename == "sales.json"
        assert json.loads(text) == [sale.to_dict()]
        assert Sale.from_dict(json.loads(text)[0]) == sale

    def test_write_export(self, tmp_path):
        target = export.write_export(tmp_path / "out", "sales.csv", "a,b")
        assert target.read_text(encoding="utf-8") == "a,b"
