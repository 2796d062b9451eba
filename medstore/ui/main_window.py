"""PyQt5 UI for the Medical Store Manager."""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

from PyQt5.QtCore import QDate
from PyQt5.QtGui import QFont
from PyQt5.QtWidgets import (
    QAbstractItemView,
    QCheckBox,
    QComboBox,
    QDateEdit,
    QDoubleSpinBox,
    QFileDialog,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSpinBox,
    QTableWidget,
    QTableWidgetItem,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from medstore import config, export
from medstore.billing import SaleSession
from medstore.data.catalog_repo import CatalogRepository
from medstore.data.excel_repo import ExcelCatalogImporter
from medstore.data.ledger_repo import LedgerRepository
from medstore.errors import MedStoreError
from medstore.models.medicine import Medicine
from medstore.models.sale import format_currency
from medstore.queries import (
    StockState,
    dashboard_counts,
    filter_medicines,
    filter_sales,
    sort_by_name,
    summarize_sales,
)
from medstore.storage import KeyValueStore

logger = logging.getLogger(__name__)

STOCK_FILTER_CHOICES = [
    ("All stock", StockState.ANY),
    ("In stock", StockState.IN_STOCK),
    ("Low (≤5)", StockState.LOW),
    ("Out of stock", StockState.OUT),
    ("Expired", StockState.EXPIRED),
]


def _read_only_table(headers: List[str]) -> QTableWidget:
    table = QTableWidget(0, len(headers))
    table.setHorizontalHeaderLabels(headers)
    table.horizontalHeader().setStretchLastSection(True)
    table.setEditTriggers(QAbstractItemView.NoEditTriggers)
    table.setSelectionBehavior(QAbstractItemView.SelectRows)
    table.setSelectionMode(QAbstractItemView.SingleSelection)
    return table


def _fill_row(table: QTableWidget, row: int, values: List[str]) -> None:
    for col, val in enumerate(values):
        table.setItem(row, col, QTableWidgetItem(val))


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, store: Optional[KeyValueStore] = None) -> None:
        super().__init__()
        self.setWindowTitle(config.STORE_HEADER)
        self.resize(1100, 650)

        self.store = store or KeyValueStore()
        self.catalog = CatalogRepository(self.store)
        self.ledger = LedgerRepository(self.store)
        self.session = SaleSession(self.catalog, self.ledger)
        self.editing_id: Optional[str] = None
        self._visible_medicines: List[Medicine] = []

        self._build_ui()
        self._refresh_all()

    def _build_ui(self) -> None:
        self.tabs = QTabWidget()
        self.tabs.addTab(self._build_inventory_tab(), "Inventory")
        self.tabs.addTab(self._build_billing_tab(), "Billing")
        self.tabs.addTab(self._build_history_tab(), "Sales History")
        self.tabs.addTab(self._build_export_tab(), "Export")
        self.tabs.currentChanged.connect(lambda _: self._refresh_all())
        self.setCentralWidget(self.tabs)

    def _build_inventory_tab(self) -> QWidget:
        page = QWidget()
        layout = QHBoxLayout()

        self.form_group = QGroupBox("Add Medicine")
        form = QFormLayout()
        self.name_input = QLineEdit()
        self.category_input = QLineEdit()
        self.batch_input = QLineEdit()
        self.expiry_input = QLineEdit()
        self.expiry_input.setPlaceholderText("YYYY-MM-DD")
        self.supplier_input = QLineEdit()
        self.price_input = QDoubleSpinBox()
        self.price_input.setRange(0, 1_000_000)
        self.price_input.setDecimals(2)
        self.mrp_input = QDoubleSpinBox()
        self.mrp_input.setRange(0, 1_000_000)
        self.mrp_input.setDecimals(2)
        self.stock_input = QSpinBox()
        self.stock_input.setRange(0, 1_000_000)
        form.addRow("Name", self.name_input)
        form.addRow("Category", self.category_input)
        form.addRow("Batch", self.batch_input)
        form.addRow("Expiry", self.expiry_input)
        form.addRow("Supplier", self.supplier_input)
        form.addRow("Price", self.price_input)
        form.addRow("MRP", self.mrp_input)
        form.addRow("Stock", self.stock_input)

        buttons = QHBoxLayout()
        save_button = QPushButton("Save")
        save_button.clicked.connect(self._on_save_medicine)
        reset_button = QPushButton("Reset")
        reset_button.clicked.connect(self._reset_form)
        buttons.addWidget(save_button)
        buttons.addWidget(reset_button)
        form.addRow(buttons)
        self.form_group.setLayout(form)

        right = QVBoxLayout()
        filters = QHBoxLayout()
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search name, batch, supplier...")
        self.category_filter = QLineEdit()
        self.category_filter.setPlaceholderText("Category")
        self.stock_filter = QComboBox()
        for label, state in STOCK_FILTER_CHOICES:
            self.stock_filter.addItem(label, state)
        self.search_input.textChanged.connect(self._render_medicines)
        self.category_filter.textChanged.connect(self._render_medicines)
        self.stock_filter.currentIndexChanged.connect(self._render_medicines)
        filters.addWidget(self.search_input, 2)
        filters.addWidget(self.category_filter, 1)
        filters.addWidget(self.stock_filter, 1)
        right.addLayout(filters)

        self.med_table = _read_only_table(
            ["Name", "Category", "Batch", "Expiry", "Price", "Stock", "Supplier"]
        )
        right.addWidget(self.med_table, 1)

        actions = QHBoxLayout()
        self.med_count_label = QLabel("0 medicine(s)")
        edit_button = QPushButton("Edit")
        edit_button.clicked.connect(self._on_edit_medicine)
        delete_button = QPushButton("Delete")
        delete_button.clicked.connect(self._on_delete_medicine)
        import_button = QPushButton("Import Excel...")
        import_button.clicked.connect(self._on_import_excel)
        actions.addWidget(self.med_count_label)
        actions.addStretch()
        actions.addWidget(import_button)
        actions.addWidget(edit_button)
        actions.addWidget(delete_button)
        right.addLayout(actions)

        layout.addWidget(self.form_group, 1)
        layout.addLayout(right, 3)
        page.setLayout(layout)
        return page

    def _build_billing_tab(self) -> QWidget:
        page = QWidget()
        layout = QHBoxLayout()

        left = QVBoxLayout()
        self.sale_select = QComboBox()
        self.sale_select.currentIndexChanged.connect(self._update_sale_info)
        self.sale_info = QLabel()
        qty_layout = QHBoxLayout()
        qty_layout.addWidget(QLabel("Qty:"))
        self.qty_spin = QSpinBox()
        self.qty_spin.setMinimum(1)
        self.qty_spin.setMaximum(1_000_000)
        qty_layout.addWidget(self.qty_spin)
        add_button = QPushButton("Add to Bill")
        add_button.clicked.connect(self._on_add_to_bill)
        left.addWidget(QLabel("Medicine"))
        left.addWidget(self.sale_select)
        left.addWidget(self.sale_info)
        left.addLayout(qty_layout)
        left.addWidget(add_button)

        info_group = QGroupBox("Quick Info")
        info_layout = QFormLayout()
        self.info_total = QLabel("0")
        self.info_low = QLabel("0")
        self.info_out = QLabel("0")
        self.info_expired = QLabel("0")
        info_layout.addRow("Total items:", self.info_total)
        info_layout.addRow(f"Low stock (≤{config.LOW_STOCK_THRESHOLD}):", self.info_low)
        info_layout.addRow("Out of stock:", self.info_out)
        info_layout.addRow("Expired:", self.info_expired)
        info_group.setLayout(info_layout)
        left.addWidget(info_group)
        left.addStretch()

        right = QVBoxLayout()
        self.bill_table = _read_only_table(["Medicine", "Price", "Qty", "Total"])
        right.addWidget(self.bill_table, 1)

        self.bill_total_label = QLabel(format_currency(0))
        total_font = QFont()
        total_font.setPointSize(16)
        total_font.setBold(True)
        self.bill_total_label.setFont(total_font)
        self.bill_qty_label = QLabel("Items: 0")

        buttons = QHBoxLayout()
        remove_button = QPushButton("Remove")
        remove_button.clicked.connect(self._on_remove_bill_line)
        process_button = QPushButton("Process Sale")
        process_button.clicked.connect(self._on_process_sale)
        clear_button = QPushButton("Clear")
        clear_button.clicked.connect(self._on_clear_bill)
        buttons.addWidget(QLabel("Total:"))
        buttons.addWidget(self.bill_total_label)
        buttons.addWidget(self.bill_qty_label)
        buttons.addStretch()
        buttons.addWidget(remove_button)
        buttons.addWidget(clear_button)
        buttons.addWidget(process_button)
        right.addLayout(buttons)

        layout.addLayout(left, 1)
        layout.addLayout(right, 2)
        page.setLayout(layout)
        return page

    def _build_history_tab(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout()

        filters = QHBoxLayout()
        self.from_enabled = QCheckBox("From")
        self.from_date = QDateEdit(QDate.currentDate())
        self.from_date.setCalendarPopup(True)
        self.to_enabled = QCheckBox("To")
        self.to_date = QDateEdit(QDate.currentDate())
        self.to_date.setCalendarPopup(True)
        self.history_search = QLineEdit()
        self.history_search.setPlaceholderText("Search item name...")
        for checkbox in (self.from_enabled, self.to_enabled):
            checkbox.toggled.connect(self._render_history)
        for date_edit in (self.from_date, self.to_date):
            date_edit.dateChanged.connect(self._render_history)
        self.history_search.textChanged.connect(self._render_history)
        filters.addWidget(self.from_enabled)
        filters.addWidget(self.from_date)
        filters.addWidget(self.to_enabled)
        filters.addWidget(self.to_date)
        filters.addWidget(self.history_search, 1)
        layout.addLayout(filters)

        self.sales_table = _read_only_table(["Date", "Items", "Qty", "Total"])
        layout.addWidget(self.sales_table, 1)

        totals = QHBoxLayout()
        self.history_qty_label = QLabel("Items sold: 0")
        self.revenue_label = QLabel(f"Revenue: {format_currency(0)}")
        totals.addStretch()
        totals.addWidget(self.history_qty_label)
        totals.addWidget(self.revenue_label)
        layout.addLayout(totals)

        page.setLayout(layout)
        return page

    def _build_export_tab(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout()
        exports = [
            ("Export Medicines CSV", lambda: self._on_export(export.export_medicines_csv(self.catalog.list()))),
            ("Export Medicines JSON", lambda: self._on_export(export.export_medicines_json(self.catalog.list()))),
            ("Export Sales CSV", lambda: self._on_export(export.export_sales_csv(self.ledger.list()))),
            ("Export Sales JSON", lambda: self._on_export(export.export_sales_json(self.ledger.list()))),
        ]
        for label, handler in exports:
            button = QPushButton(label)
            button.clicked.connect(handler)
            layout.addWidget(button)
        layout.addStretch()
        page.setLayout(layout)
        return page

    def _refresh_all(self) -> None:
        self._render_medicines()
        self._populate_sale_select()
        self._render_bill()
        self._render_quick_info()
        self._render_history()

    def _render_medicines(self) -> None:
        today = date.today()
        medicines = filter_medicines(
            self.catalog.list(),
            search=self.search_input.text(),
            category=self.category_filter.text(),
            stock_state=self.stock_filter.currentData() or StockState.ANY,
            today=today,
        )
        self._visible_medicines = medicines
        self.med_table.setRowCount(len(medicines))
        for row, m in enumerate(medicines):
            expiry = m.expiry or "-"
            if m.is_expired(today):
                expiry += " (expired)"
            _fill_row(
                self.med_table,
                row,
                [
                    m.name,
                    m.category or "-",
                    m.batch or "-",
                    expiry,
                    format_currency(m.price),
                    str(m.stock),
                    m.supplier or "-",
                ],
            )
        self.med_table.resizeColumnsToContents()
        self.med_count_label.setText(f"{len(medicines)} medicine(s)")

    def _populate_sale_select(self) -> None:
        current = self.sale_select.currentData()
        self.sale_select.blockSignals(True)
        self.sale_select.clear()
        self.sale_select.addItem("Select medicine...", None)
        for m in sort_by_name(self.catalog.list()):
            self.sale_select.addItem(
                f"{m.name} ({format_currency(m.price)} | stock {m.stock})", m.id
            )
        index = self.sale_select.findData(current) if current else 0
        self.sale_select.setCurrentIndex(max(index, 0))
        self.sale_select.blockSignals(False)
        self._update_sale_info()

    def _update_sale_info(self) -> None:
        medicine_id = self.sale_select.currentData()
        if not medicine_id:
            self.sale_info.setText("Select a medicine to view price and stock.")
            return
        m = self.catalog.get(medicine_id)
        if m is None:
            self.sale_info.setText("Medicine not found.")
            return
        self.sale_info.setText(
            f"Price: {format_currency(m.price)} · Stock: {m.stock} · Exp: {m.expiry or '-'}"
        )

    def _render_bill(self) -> None:
        lines = self.session.lines
        self.bill_table.setRowCount(len(lines))
        for row, line in enumerate(lines):
            _fill_row(
                self.bill_table,
                row,
                [
                    line.name,
                    format_currency(line.unit_price),
                    str(line.quantity),
                    format_currency(line.line_total),
                ],
            )
        self.bill_table.resizeColumnsToContents()
        self.bill_total_label.setText(format_currency(self.session.total()))
        self.bill_qty_label.setText(f"Items: {self.session.total_quantity()}")

    def _render_quick_info(self) -> None:
        counts = dashboard_counts(self.catalog.list())
        self.info_total.setText(str(counts.total))
        self.info_low.setText(str(counts.low))
        self.info_out.setText(str(counts.out))
        self.info_expired.setText(str(counts.expired))

    def _render_history(self) -> None:
        date_from = self.from_date.date().toPyDate() if self.from_enabled.isChecked() else None
        date_to = self.to_date.date().toPyDate() if self.to_enabled.isChecked() else None
        sales = filter_sales(
            self.ledger.list(),
            date_from=date_from,
            date_to=date_to,
            search=self.history_search.text(),
        )
        self.sales_table.setRowCount(len(sales))
        for row, sale in enumerate(sales):
            when = datetime.fromtimestamp(sale.timestamp / 1000).strftime("%Y-%m-%d %H:%M")
            items = ", ".join(f"{item.name} × {item.quantity}" for item in sale.items)
            _fill_row(
                self.sales_table,
                row,
                [when, items, str(sale.total_quantity), format_currency(sale.total)],
            )
        self.sales_table.resizeColumnsToContents()
        summary = summarize_sales(sales)
        self.history_qty_label.setText(f"Items sold: {summary.quantity}")
        self.revenue_label.setText(f"Revenue: {format_currency(summary.revenue)}")

    def _form_fields(self) -> dict:
        return {
            "name": self.name_input.text(),
            "category": self.category_input.text(),
            "batch": self.batch_input.text(),
            "expiry": self.expiry_input.text(),
            "supplier": self.supplier_input.text(),
            "price": float(self.price_input.value()),
            "mrp": float(self.mrp_input.value()),
            "stock": int(self.stock_input.value()),
        }

    def _on_save_medicine(self) -> None:
        try:
            if self.editing_id:
                self.catalog.edit(self.editing_id, **self._form_fields())
            else:
                self.catalog.create(**self._form_fields())
        except MedStoreError as exc:
            QMessageBox.warning(self, "Invalid medicine", str(exc))
            return
        self._reset_form()
        self._refresh_all()

    def _reset_form(self) -> None:
        self.editing_id = None
        for field_input in (
            self.name_input,
            self.category_input,
            self.batch_input,
            self.expiry_input,
            self.supplier_input,
        ):
            field_input.clear()
        self.price_input.setValue(0)
        self.mrp_input.setValue(0)
        self.stock_input.setValue(0)
        self.form_group.setTitle("Add Medicine")

    def _selected_medicine(self) -> Optional[Medicine]:
        row = self.med_table.currentRow()
        if row < 0 or row >= len(self._visible_medicines):
            QMessageBox.information(self, "Select medicine", "Please select a medicine first.")
            return None
        return self._visible_medicines[row]

    def _on_edit_medicine(self) -> None:
        m = self._selected_medicine()
        if m is None:
            return
        self.editing_id = m.id
        self.name_input.setText(m.name)
        self.category_input.setText(m.category)
        self.batch_input.setText(m.batch)
        self.expiry_input.setText(m.expiry)
        self.supplier_input.setText(m.supplier)
        self.price_input.setValue(m.price)
        self.mrp_input.setValue(m.mrp)
        self.stock_input.setValue(m.stock)
        self.form_group.setTitle("Edit Medicine")

    def _on_delete_medicine(self) -> None:
        m = self._selected_medicine()
        if m is None:
            return
        answer = QMessageBox.question(self, "Delete", f"Delete {m.name}?")
        if answer != QMessageBox.Yes:
            return
        self.catalog.delete(m.id)
        if self.editing_id == m.id:
            self._reset_form()
        self._refresh_all()

    def _on_import_excel(self) -> None:
        path, _ = QFileDialog.getOpenFileName(
            self, "Import medicines", "", "Excel workbooks (*.xlsx)"
        )
        if not path:
            return
        try:
            count = ExcelCatalogImporter(path).import_into(self.catalog)
        except MedStoreError as exc:
            QMessageBox.warning(self, "Import stopped", str(exc))
            self._refresh_all()
            return
        except Exception as exc:  # noqa: BLE001
            QMessageBox.critical(self, "Excel Error", f"Failed to load Excel: {exc}")
            return
        QMessageBox.information(self, "Imported", f"Imported {count} medicine(s).")
        self._refresh_all()

    def _on_add_to_bill(self) -> None:
        medicine_id = self.sale_select.currentData()
        if not medicine_id:
            QMessageBox.warning(self, "Select medicine", "Please select a medicine first.")
            return
        try:
            self.session.add_line(medicine_id, int(self.qty_spin.value()))
        except MedStoreError as exc:
            QMessageBox.warning(self, "Cannot add", str(exc))
            return
        self._render_bill()

    def _on_remove_bill_line(self) -> None:
        row = self.bill_table.currentRow()
        lines = self.session.lines
        if 0 <= row < len(lines):
            self.session.remove_line(lines[row].medicine_id)
            self._render_bill()

    def _on_clear_bill(self) -> None:
        self.session.clear()
        self._render_bill()

    def _on_process_sale(self) -> None:
        try:
            sale = self.session.commit()
        except MedStoreError as exc:
            QMessageBox.warning(self, "Sale not processed", str(exc))
            return
        self._refresh_all()
        QMessageBox.information(
            self, "Sale processed", f"Sale recorded. Total {format_currency(sale.total)}."
        )

    def _on_export(self, payload) -> None:
        filename, text = payload
        target, _ = QFileDialog.getSaveFileName(self, "Save export", filename)
        if not target:
            return
        target_path = Path(target)
        try:
            written = export.write_export(target_path.parent, target_path.name, text)
        except OSError as exc:
            QMessageBox.critical(self, "Export Error", f"Failed to write file: {exc}")
            return
        logger.info("Exported %s", written)
        QMessageBox.information(self, "Exported", f"Saved {written}.")
