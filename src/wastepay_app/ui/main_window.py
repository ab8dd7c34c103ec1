"""Administrator window: metrics, household records, staff and history."""

from __future__ import annotations

from PySide6.QtCore import QThreadPool
from PySide6.QtWidgets import (
    QComboBox,
    QFormLayout,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from wastepay_app.core.config import BillingConfig
from wastepay_app.models.household import Household, HouseholdCreate, PaymentStatus
from wastepay_app.models.staff import Admin, StaffCreate, StaffRole
from wastepay_app.repositories.audit_repository import AuditRepository
from wastepay_app.services.household_service import HouseholdService
from wastepay_app.services.metrics_service import compute_metrics
from wastepay_app.services.reminder_service import ReminderService
from wastepay_app.services.staff_service import StaffService
from wastepay_app.services.table_query import ALL_STATUSES, SortState, query_households
from wastepay_app.ui.tasks import (
    LoadDashboardTask,
    SaveHouseholdTask,
    SaveStaffTask,
    SendRemindersTask,
    UpdatePaymentStatusTask,
)

HOUSEHOLD_COLUMNS = [
    ("id", "ID"),
    ("name", "Name"),
    ("address", "Address"),
    ("phone", "Phone"),
    ("assigned_route", "Assigned Route"),
    ("status", "Status"),
]


def format_rupees(amount: int) -> str:
    return f"Rs. {amount:,}"


def render_payment_history(table: QTableWidget, household: Household | None) -> None:
    payments = household.payment_history if household else []
    table.setRowCount(len(payments))
    for row_index, payment in enumerate(payments):
        table.setItem(row_index, 0, QTableWidgetItem(payment.month))
        table.setItem(row_index, 1, QTableWidgetItem(payment.date.strftime("%Y-%m-%d")))
        table.setItem(row_index, 2, QTableWidgetItem(format_rupees(payment.amount)))
        table.setItem(row_index, 3, QTableWidgetItem(payment.id))


def new_payment_history_table() -> QTableWidget:
    table = QTableWidget(0, 4)
    table.setHorizontalHeaderLabels(["Month", "Date", "Amount", "Receipt"])
    return table


class MainWindow(QMainWindow):
    """GUI for the administrator."""

    def __init__(
        self,
        admin: Admin,
        household_service: HouseholdService,
        staff_service: StaffService,
        reminder_service: ReminderService,
        audit_repo: AuditRepository,
        billing: BillingConfig,
    ):
        super().__init__()
        self.admin = admin
        self.household_service = household_service
        self.staff_service = staff_service
        self.reminder_service = reminder_service
        self.audit_repo = audit_repo
        self.billing = billing
        self.thread_pool = QThreadPool.globalInstance()

        self.households: list[Household] = []
        self.drivers: list = []
        self.helpers: list = []
        self.visible_households: list[Household] = []
        self.sort_state = SortState()
        self.audit_limit = 300
        self._audit_details: list[str] = []

        self.setWindowTitle(f"WastePay - Administrator Dashboard ({admin.username})")
        self.resize(1300, 860)

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.addLayout(self._build_metric_cards())

        self.tabs = QTabWidget()
        self._build_household_tab()
        self._build_staff_tab()
        self._build_history_tab()
        layout.addWidget(self.tabs)
        self.setCentralWidget(central)

        self.refresh_data()

    def _build_metric_cards(self) -> QGridLayout:
        grid = QGridLayout()
        self.total_collection_label = QLabel()
        self.pending_label = QLabel()
        self.expenses_label = QLabel()
        self.net_profit_label = QLabel()
        cards = [
            ("Total Collection", self.total_collection_label),
            ("Pending Payments", self.pending_label),
            ("Total Expenses", self.expenses_label),
            ("Net Profit", self.net_profit_label),
        ]
        for column, (title, value_label) in enumerate(cards):
            grid.addWidget(QLabel(f"<b>{title}</b>"), 0, column)
            grid.addWidget(value_label, 1, column)
        return grid

    def _build_household_tab(self) -> None:
        tab = QWidget()
        layout = QVBoxLayout(tab)

        filter_row = QHBoxLayout()
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search by name, phone, address...")
        self.search_input.textChanged.connect(self._render_households)
        self.status_filter = QComboBox()
        self.status_filter.addItem("All Statuses", ALL_STATUSES)
        self.status_filter.addItem("Paid", PaymentStatus.PAID.value)
        self.status_filter.addItem("Due", PaymentStatus.DUE.value)
        self.status_filter.currentIndexChanged.connect(self._render_households)
        filter_row.addWidget(self.search_input)
        filter_row.addWidget(self.status_filter)

        self.households_table = QTableWidget(0, len(HOUSEHOLD_COLUMNS))
        self.households_table.setHorizontalHeaderLabels([label for _, label in HOUSEHOLD_COLUMNS])
        self.households_table.horizontalHeader().sectionClicked.connect(self._on_household_header_clicked)
        self.households_table.cellClicked.connect(self._on_household_row_selected)

        form = QFormLayout()
        self.household_id_input = QLineEdit()
        self.household_id_input.setReadOnly(True)
        self.household_name_input = QLineEdit()
        self.household_address_input = QLineEdit()
        self.household_phone_input = QLineEdit()
        self.household_route_input = QLineEdit()
        self.household_route_input.setPlaceholderText("Route A")
        form.addRow("Household ID", self.household_id_input)
        form.addRow("Name", self.household_name_input)
        form.addRow("Address", self.household_address_input)
        form.addRow("Phone", self.household_phone_input)
        form.addRow("Assigned Route", self.household_route_input)

        buttons = QHBoxLayout()
        for label, handler in [
            ("Add Household", self.add_household),
            ("Update Household", self.update_household),
            ("Mark Paid", lambda: self.set_payment_status(PaymentStatus.PAID)),
            ("Mark Due", lambda: self.set_payment_status(PaymentStatus.DUE)),
            ("Send Reminders", self.send_reminders),
            ("Clear", self.clear_household_form),
            ("Refresh", self.refresh_data),
        ]:
            button = QPushButton(label)
            button.clicked.connect(handler)
            buttons.addWidget(button)

        self.household_history_table = new_payment_history_table()

        layout.addLayout(filter_row)
        layout.addWidget(self.households_table, 3)
        layout.addLayout(form)
        layout.addLayout(buttons)
        layout.addWidget(QLabel("Payment History"))
        layout.addWidget(self.household_history_table, 1)
        self.tabs.addTab(tab, "Households")

    def _build_staff_tab(self) -> None:
        tab = QWidget()
        layout = QVBoxLayout(tab)

        self.drivers_table = QTableWidget(0, 6)
        self.drivers_table.setHorizontalHeaderLabels(
            ["ID", "Name", "Phone", "Route", "Salary", "Vehicle"]
        )
        self.drivers_table.cellClicked.connect(
            lambda row, _column: self._on_staff_row_selected(StaffRole.DRIVER, row)
        )
        self.helpers_table = QTableWidget(0, 5)
        self.helpers_table.setHorizontalHeaderLabels(["ID", "Name", "Phone", "Route", "Salary"])
        self.helpers_table.cellClicked.connect(
            lambda row, _column: self._on_staff_row_selected(StaffRole.HELPER, row)
        )

        form = QFormLayout()
        self.staff_role_selector = QComboBox()
        self.staff_role_selector.addItem("Driver", StaffRole.DRIVER)
        self.staff_role_selector.addItem("Helper", StaffRole.HELPER)
        self.staff_role_selector.currentIndexChanged.connect(self._on_staff_role_changed)
        self.staff_id_input = QLineEdit()
        self.staff_id_input.setReadOnly(True)
        self.staff_name_input = QLineEdit()
        self.staff_phone_input = QLineEdit()
        self.staff_salary_input = QLineEdit()
        self.staff_route_input = QLineEdit()
        self.staff_vehicle_input = QLineEdit()
        self.staff_vehicle_input.setPlaceholderText("MH-12 AB-1234")
        form.addRow("Role", self.staff_role_selector)
        form.addRow("Staff ID", self.staff_id_input)
        form.addRow("Name", self.staff_name_input)
        form.addRow("Phone", self.staff_phone_input)
        form.addRow("Salary", self.staff_salary_input)
        form.addRow("Assigned Route", self.staff_route_input)
        form.addRow("Vehicle Details", self.staff_vehicle_input)

        buttons = QHBoxLayout()
        add_button = QPushButton("Add Staff")
        add_button.clicked.connect(self.add_staff)
        update_button = QPushButton("Update Staff")
        update_button.clicked.connect(self.update_staff)
        clear_button = QPushButton("Clear")
        clear_button.clicked.connect(self.clear_staff_form)
        buttons.addWidget(add_button)
        buttons.addWidget(update_button)
        buttons.addWidget(clear_button)

        layout.addWidget(QLabel("Drivers"))
        layout.addWidget(self.drivers_table)
        layout.addWidget(QLabel("Helpers"))
        layout.addWidget(self.helpers_table)
        layout.addLayout(form)
        layout.addLayout(buttons)
        self.tabs.addTab(tab, "Staff")

    def _build_history_tab(self) -> None:
        tab = QWidget()
        layout = QVBoxLayout(tab)

        filter_row = QHBoxLayout()
        self.log_action_filter = QComboBox()
        for label, value in [
            ("All", ""),
            ("Create", "CREATE"),
            ("Update", "UPDATE"),
            ("Notify", "NOTIFY"),
        ]:
            self.log_action_filter.addItem(label, value)
        self.log_keyword_input = QLineEdit()
        self.log_keyword_input.setPlaceholderText("Keyword")
        self.log_keyword_input.returnPressed.connect(self.refresh_audit_logs)
        refresh_button = QPushButton("Refresh History")
        refresh_button.clicked.connect(self.refresh_audit_logs)
        filter_row.addWidget(self.log_action_filter)
        filter_row.addWidget(self.log_keyword_input)
        filter_row.addWidget(refresh_button)

        self.audit_table = QTableWidget(0, 6)
        self.audit_table.setHorizontalHeaderLabels(
            ["ID", "Time", "Action", "Entity", "Entity ID", "Detail"]
        )
        self.audit_table.cellClicked.connect(self._on_audit_row_selected)
        self.audit_detail_view = QPlainTextEdit()
        self.audit_detail_view.setReadOnly(True)

        layout.addLayout(filter_row)
        layout.addWidget(self.audit_table, 3)
        layout.addWidget(self.audit_detail_view, 1)
        self.tabs.addTab(tab, "History")

    def refresh_data(self) -> None:
        task = LoadDashboardTask(self.household_service, self.staff_service)
        task.signals.done.connect(self._on_data_loaded)
        task.signals.error.connect(lambda message: QMessageBox.critical(self, "Error", message))
        self.thread_pool.start(task)

    def _on_data_loaded(self, data: dict) -> None:
        self.households = data["households"]
        self.drivers = data["drivers"]
        self.helpers = data["helpers"]
        self._render_metrics()
        self._render_households()
        self._render_staff()
        self.refresh_audit_logs()

    def _render_metrics(self) -> None:
        metrics = compute_metrics(self.households, self.billing, [*self.drivers, *self.helpers])
        self.total_collection_label.setText(
            f"{format_rupees(metrics.total_collections)} ({metrics.paid_percentage}% paid)"
        )
        self.pending_label.setText(
            f"{format_rupees(metrics.pending_amount)} ({metrics.due_count} households)"
        )
        self.expenses_label.setText(f"{format_rupees(metrics.total_expenses)} (Driver & Helper Salary)")
        self.net_profit_label.setText(f"{format_rupees(metrics.net_profit)} (This month)")

    def _render_households(self, *_args) -> None:
        self.visible_households = query_households(
            self.households,
            query=self.search_input.text(),
            status_filter=self.status_filter.currentData(),
            sort=self.sort_state,
        )
        table = self.households_table
        table.setRowCount(len(self.visible_households))
        for row_index, household in enumerate(self.visible_households):
            table.setItem(row_index, 0, QTableWidgetItem(str(household.id)))
            table.setItem(row_index, 1, QTableWidgetItem(household.name))
            table.setItem(row_index, 2, QTableWidgetItem(household.address))
            table.setItem(row_index, 3, QTableWidgetItem(household.phone))
            table.setItem(row_index, 4, QTableWidgetItem(household.assigned_route))
            table.setItem(row_index, 5, QTableWidgetItem(household.status.value))

    def _render_staff(self) -> None:
        self.drivers_table.setRowCount(len(self.drivers))
        for row_index, driver in enumerate(self.drivers):
            for column, value in enumerate(
                [driver.id, driver.name, driver.phone, driver.assigned_route,
                 format_rupees(driver.salary), driver.vehicle_details]
            ):
                self.drivers_table.setItem(row_index, column, QTableWidgetItem(str(value)))

        self.helpers_table.setRowCount(len(self.helpers))
        for row_index, helper in enumerate(self.helpers):
            for column, value in enumerate(
                [helper.id, helper.name, helper.phone, helper.assigned_route, format_rupees(helper.salary)]
            ):
                self.helpers_table.setItem(row_index, column, QTableWidgetItem(str(value)))

    def _on_household_header_clicked(self, column: int) -> None:
        self.sort_state = self.sort_state.toggle(HOUSEHOLD_COLUMNS[column][0])
        self._render_households()

    def _on_household_row_selected(self, row: int, _column: int) -> None:
        if not 0 <= row < len(self.visible_households):
            return
        household = self.visible_households[row]
        self.household_id_input.setText(str(household.id))
        self.household_name_input.setText(household.name)
        self.household_address_input.setText(household.address)
        self.household_phone_input.setText(household.phone)
        self.household_route_input.setText(household.assigned_route)
        render_payment_history(self.household_history_table, household)

    def _household_payload_from_form(self) -> HouseholdCreate:
        return HouseholdCreate(
            name=self.household_name_input.text(),
            address=self.household_address_input.text(),
            phone=self.household_phone_input.text(),
            assigned_route=self.household_route_input.text(),
        )

    def _selected_household_id(self) -> int:
        raw = self.household_id_input.text().strip()
        if not raw:
            raise ValueError("Select a household first.")
        return int(raw)

    def add_household(self) -> None:
        task = SaveHouseholdTask(self.household_service, self._household_payload_from_form())
        task.signals.done.connect(
            lambda household: self._after_save(f"Household added. ID={household.id}")
        )
        task.signals.error.connect(lambda message: QMessageBox.critical(self, "Error", message))
        self.thread_pool.start(task)

    def update_household(self) -> None:
        try:
            household_id = self._selected_household_id()
        except ValueError as error:
            QMessageBox.critical(self, "Error", str(error))
            return
        task = SaveHouseholdTask(
            self.household_service,
            self._household_payload_from_form(),
            household_id=household_id,
        )
        task.signals.done.connect(
            lambda household: self._after_save(f"Household {household.id} updated.")
        )
        task.signals.error.connect(lambda message: QMessageBox.critical(self, "Error", message))
        self.thread_pool.start(task)

    def set_payment_status(self, status: PaymentStatus) -> None:
        try:
            household_id = self._selected_household_id()
        except ValueError as error:
            QMessageBox.critical(self, "Error", str(error))
            return
        task = UpdatePaymentStatusTask(self.household_service, household_id, status)
        task.signals.done.connect(self._on_status_saved)
        task.signals.error.connect(lambda message: QMessageBox.critical(self, "Error", message))
        self.thread_pool.start(task)

    def _on_status_saved(self, household: Household) -> None:
        render_payment_history(self.household_history_table, household)
        self.refresh_data()

    def send_reminders(self) -> None:
        due = [household for household in self.households if household.status is PaymentStatus.DUE]
        if not due:
            QMessageBox.information(
                self, "Reminders", "All household payments are up to date. No reminders sent."
            )
            return
        task = SendRemindersTask(self.reminder_service, due)
        task.signals.done.connect(
            lambda count: QMessageBox.information(
                self,
                "Reminders",
                f"Sent payment reminders to {count} of {len(due)} households.",
            )
        )
        task.signals.done.connect(lambda _count: self.refresh_audit_logs())
        task.signals.error.connect(lambda message: QMessageBox.critical(self, "Error", message))
        self.thread_pool.start(task)

    def clear_household_form(self) -> None:
        self.household_id_input.clear()
        self.household_name_input.clear()
        self.household_address_input.clear()
        self.household_phone_input.clear()
        self.household_route_input.clear()
        self.household_history_table.setRowCount(0)

    def _on_staff_role_changed(self, _index: int) -> None:
        self.staff_vehicle_input.setEnabled(self.staff_role_selector.currentData() is StaffRole.DRIVER)
        self.staff_id_input.clear()

    def _on_staff_row_selected(self, role: StaffRole, row: int) -> None:
        members = self.drivers if role is StaffRole.DRIVER else self.helpers
        if not 0 <= row < len(members):
            return
        member = members[row]
        self.staff_role_selector.setCurrentIndex(self.staff_role_selector.findData(role))
        self.staff_id_input.setText(str(member.id))
        self.staff_name_input.setText(member.name)
        self.staff_phone_input.setText(member.phone)
        self.staff_salary_input.setText(str(member.salary))
        self.staff_route_input.setText(member.assigned_route)
        self.staff_vehicle_input.setText(member.vehicle_details if role is StaffRole.DRIVER else "")

    def _staff_payload_from_form(self) -> StaffCreate:
        salary_raw = self.staff_salary_input.text().strip()
        try:
            salary = int(salary_raw)
        except ValueError as error:
            raise ValueError("Salary must be a whole number, e.g. 10000.") from error
        return StaffCreate(
            name=self.staff_name_input.text(),
            phone=self.staff_phone_input.text(),
            salary=salary,
            assigned_route=self.staff_route_input.text(),
            vehicle_details=self.staff_vehicle_input.text(),
        )

    def add_staff(self) -> None:
        self._save_staff(staff_id=None)

    def update_staff(self) -> None:
        raw = self.staff_id_input.text().strip()
        if not raw:
            QMessageBox.critical(self, "Error", "Select a staff member first.")
            return
        self._save_staff(staff_id=int(raw))

    def _save_staff(self, staff_id: int | None) -> None:
        role = self.staff_role_selector.currentData()
        try:
            payload = self._staff_payload_from_form()
        except ValueError as error:
            QMessageBox.critical(self, "Error", str(error))
            return
        task = SaveStaffTask(self.staff_service, payload, role, staff_id=staff_id)
        task.signals.done.connect(
            lambda member: self._after_save(f"{role.value.title()} {member.id} saved.")
        )
        task.signals.error.connect(lambda message: QMessageBox.critical(self, "Error", message))
        self.thread_pool.start(task)

    def clear_staff_form(self) -> None:
        self.staff_id_input.clear()
        self.staff_name_input.clear()
        self.staff_phone_input.clear()
        self.staff_salary_input.clear()
        self.staff_route_input.clear()
        self.staff_vehicle_input.clear()

    def _after_save(self, message: str) -> None:
        QMessageBox.information(self, "Done", message)
        self.refresh_data()

    def refresh_audit_logs(self) -> None:
        logs = self.audit_repo.list_logs(
            limit=self.audit_limit,
            action=self.log_action_filter.currentData() or None,
            keyword=self.log_keyword_input.text().strip() or None,
        )
        self._audit_details = []
        self.audit_table.setRowCount(len(logs))
        for row_index, log in enumerate(logs):
            detail = log.get("detail") or ""
            summary = detail.replace("\n", " ")
            if len(summary) > 120:
                summary = summary[:117] + "..."
            self._audit_details.append(detail)
            self.audit_table.setItem(row_index, 0, QTableWidgetItem(str(log.get("id", ""))))
            self.audit_table.setItem(row_index, 1, QTableWidgetItem(str(log.get("created_at", ""))))
            self.audit_table.setItem(row_index, 2, QTableWidgetItem(str(log.get("action", ""))))
            self.audit_table.setItem(row_index, 3, QTableWidgetItem(str(log.get("entity", ""))))
            self.audit_table.setItem(row_index, 4, QTableWidgetItem(str(log.get("entity_id") or "")))
            self.audit_table.setItem(row_index, 5, QTableWidgetItem(summary))
        if not logs:
            self.audit_detail_view.setPlainText("")

    def _on_audit_row_selected(self, row: int, _column: int) -> None:
        if 0 <= row < len(self._audit_details):
            self.audit_detail_view.setPlainText(self._audit_details[row])
