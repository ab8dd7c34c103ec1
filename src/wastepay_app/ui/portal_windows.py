"""Driver route view and household self-service view."""

from __future__ import annotations

from PySide6.QtCore import QThreadPool
from PySide6.QtWidgets import (
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from wastepay_app.core.config import BillingConfig
from wastepay_app.models.household import Household, PaymentStatus
from wastepay_app.models.staff import Driver
from wastepay_app.services.household_service import HouseholdService
from wastepay_app.services.table_query import households_on_route, query_households
from wastepay_app.ui.main_window import format_rupees, new_payment_history_table, render_payment_history
from wastepay_app.ui.tasks import LoadHouseholdsTask, LoadHouseholdTask, UpdatePaymentStatusTask


class DriverWindow(QMainWindow):
    """Lists the households on the driver's route and records collections."""

    def __init__(self, driver: Driver, household_service: HouseholdService):
        super().__init__()
        self.driver = driver
        self.household_service = household_service
        self.thread_pool = QThreadPool.globalInstance()
        self.route_households: list[Household] = []
        self.visible_households: list[Household] = []

        self.setWindowTitle(f"WastePay - Driver Dashboard ({driver.name})")
        self.resize(900, 640)

        central = QWidget()
        layout = QVBoxLayout(central)

        form = QFormLayout()
        form.addRow("Driver", QLabel(driver.name))
        form.addRow("Vehicle", QLabel(driver.vehicle_details))
        form.addRow("Route", QLabel(driver.assigned_route))
        self.summary_label = QLabel()
        form.addRow("Collected", self.summary_label)

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search households on this route...")
        self.search_input.textChanged.connect(self._render_table)

        self.table = QTableWidget(0, 5)
        self.table.setHorizontalHeaderLabels(["ID", "Name", "Address", "Phone", "Status"])

        buttons = QHBoxLayout()
        paid_button = QPushButton("Mark Paid")
        paid_button.clicked.connect(lambda: self.set_status(PaymentStatus.PAID))
        due_button = QPushButton("Mark Due")
        due_button.clicked.connect(lambda: self.set_status(PaymentStatus.DUE))
        refresh_button = QPushButton("Refresh")
        refresh_button.clicked.connect(self.refresh)
        buttons.addWidget(paid_button)
        buttons.addWidget(due_button)
        buttons.addWidget(refresh_button)

        layout.addLayout(form)
        layout.addWidget(self.search_input)
        layout.addWidget(self.table)
        layout.addLayout(buttons)
        self.setCentralWidget(central)

        self.refresh()

    def refresh(self) -> None:
        task = LoadHouseholdsTask(self.household_service)
        task.signals.done.connect(self._on_loaded)
        task.signals.error.connect(lambda message: QMessageBox.critical(self, "Error", message))
        self.thread_pool.start(task)

    def _on_loaded(self, households: list[Household]) -> None:
        self.route_households = households_on_route(households, self.driver.assigned_route)
        self._render_table()

    def _render_table(self, *_args) -> None:
        self.visible_households = query_households(self.route_households, query=self.search_input.text())
        paid = sum(1 for household in self.route_households if household.status is PaymentStatus.PAID)
        self.summary_label.setText(f"{paid} of {len(self.route_households)} households")

        self.table.setRowCount(len(self.visible_households))
        for row_index, household in enumerate(self.visible_households):
            self.table.setItem(row_index, 0, QTableWidgetItem(str(household.id)))
            self.table.setItem(row_index, 1, QTableWidgetItem(household.name))
            self.table.setItem(row_index, 2, QTableWidgetItem(household.address))
            self.table.setItem(row_index, 3, QTableWidgetItem(household.phone))
            self.table.setItem(row_index, 4, QTableWidgetItem(household.status.value))

    def set_status(self, status: PaymentStatus) -> None:
        row = self.table.currentRow()
        if not 0 <= row < len(self.visible_households):
            QMessageBox.critical(self, "Error", "Select a household first.")
            return
        task = UpdatePaymentStatusTask(self.household_service, self.visible_households[row].id, status)
        task.signals.done.connect(lambda _household: self.refresh())
        task.signals.error.connect(lambda message: QMessageBox.critical(self, "Error", message))
        self.thread_pool.start(task)


class HouseholdWindow(QMainWindow):
    """Shows a household its current bill and payment history."""

    def __init__(self, household: Household, household_service: HouseholdService, billing: BillingConfig):
        super().__init__()
        self.household = household
        self.household_service = household_service
        self.billing = billing
        self.thread_pool = QThreadPool.globalInstance()

        self.setWindowTitle(f"WastePay - Household Dashboard ({household.name})")
        self.resize(720, 560)

        central = QWidget()
        layout = QVBoxLayout(central)

        form = QFormLayout()
        self.name_label = QLabel()
        self.address_label = QLabel()
        self.route_label = QLabel()
        self.status_label = QLabel()
        self.bill_label = QLabel()
        self.last_collection_label = QLabel()
        form.addRow("Name", self.name_label)
        form.addRow("Address", self.address_label)
        form.addRow("Route", self.route_label)
        form.addRow("Status", self.status_label)
        form.addRow("Monthly Bill", self.bill_label)
        form.addRow("Last Collection", self.last_collection_label)

        self.history_table = new_payment_history_table()

        refresh_button = QPushButton("Refresh")
        refresh_button.clicked.connect(self.refresh)

        layout.addLayout(form)
        layout.addWidget(QLabel("Payment History"))
        layout.addWidget(self.history_table)
        layout.addWidget(refresh_button)
        self.setCentralWidget(central)

        self._render(household)

    def refresh(self) -> None:
        task = LoadHouseholdTask(self.household_service, self.household.id)
        task.signals.done.connect(self._render)
        task.signals.error.connect(lambda message: QMessageBox.critical(self, "Error", message))
        self.thread_pool.start(task)

    def _render(self, household: Household) -> None:
        self.household = household
        self.name_label.setText(household.name)
        self.address_label.setText(household.address)
        self.route_label.setText(household.assigned_route)
        self.status_label.setText(household.status.value)
        amount = format_rupees(self.billing.household_fee)
        if household.status is PaymentStatus.DUE:
            self.bill_label.setText(f"{amount} due for {self.household_service.current_period()}")
        else:
            self.bill_label.setText(f"{amount} paid for {self.household_service.current_period()}")
        self.last_collection_label.setText(household.last_collection_date.strftime("%Y-%m-%d"))
        render_payment_history(self.history_table, household)
