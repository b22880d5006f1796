"""
Main Orchestrator for Finance Tracker

This module ties the stores and services together and defines the
app-level flows:
1. Launch (first-launch defaults → restore session → month check)
2. Foreground (month check)
3. Home screen (period → filter → totals → budget status)
4. Backup (export snapshot / restore snapshot)

DESIGN DECISION: The logged-in user is an explicit Session object
held here, restored from storage on launch. Nothing else reads
"who is logged in" from a global.
"""

from datetime import datetime, tzinfo
from typing import Callable, Optional

import structlog

from finance_tracker.analysis import (
    budget_status,
    build_budget_alert,
    calculate_totals,
    filter_by_month,
    select_period,
    sort_by_date,
)
from finance_tracker.audit import AuditLogger, configure_logging
from finance_tracker.config import BudgetSettings, Settings, get_settings
from finance_tracker.models.audit import AuditEventBuilder
from finance_tracker.models.backup import BackupResult
from finance_tracker.models.budget import BudgetAlert, PeriodSelection, PeriodSummary
from finance_tracker.models.user import RegistrationResult, Session, User
from finance_tracker.services import BackupManager, MonthTracker
from finance_tracker.services import month_tracker as month_tracker_module
from finance_tracker.storage import (
    KeyValueAuditStorage,
    StorageFactory,
    json_file_storage_factory,
)
from finance_tracker.stores import PreferenceStore, TransactionStore, UserStore
from finance_tracker.stores import preferences as preferences_module
from finance_tracker.stores import transactions as transactions_module
from finance_tracker.stores import users as users_module


AUDIT_NAMESPACE = "audit_log"


class FinanceTracker:
    """
    Application facade over the stores and services.

    Screens talk to this object; it owns the session and decides when
    the month rollover and budget alerts happen.
    """

    def __init__(
        self,
        transactions: TransactionStore,
        users: UserStore,
        preferences: PreferenceStore,
        month_tracker: MonthTracker,
        backups: BackupManager,
        budget_settings: Optional[BudgetSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
        tz: Optional[tzinfo] = None,
    ):
        self.transactions = transactions
        self.users = users
        self.preferences = preferences
        self.month_tracker = month_tracker
        self.backups = backups
        self._budget = budget_settings or BudgetSettings()
        self.audit_logger = audit_logger or AuditLogger()
        self._clock = clock or datetime.now
        self._tz = tz
        self._logger = structlog.get_logger(__name__)
        self.session: Optional[Session] = None

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        storage_factory: Optional[StorageFactory] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> "FinanceTracker":
        """
        Wire every component from configuration.

        Without a storage_factory, namespaces are JSON files under the
        configured data directory.
        """
        settings = settings or get_settings()
        storage_settings = settings.storage
        app_settings = settings.app
        configure_logging(app_settings.log_level)
        factory = storage_factory or json_file_storage_factory(storage_settings.data_dir)

        audit_storage = None
        if app_settings.persist_audit_events:
            audit_storage = KeyValueAuditStorage(
                factory(AUDIT_NAMESPACE),
                max_events=app_settings.audit_max_events,
            )
        audit_logger = AuditLogger(audit_storage)

        transactions = TransactionStore(
            factory(transactions_module.NAMESPACE), audit_logger, clock=clock
        )
        preferences = PreferenceStore(
            factory(preferences_module.NAMESPACE),
            defaults=settings.preferences,
            audit_logger=audit_logger,
        )
        users = UserStore(factory(users_module.NAMESPACE), audit_logger)
        month_tracker = MonthTracker(
            factory(month_tracker_module.NAMESPACE),
            transactions,
            preferences,
            audit_logger=audit_logger,
            clock=clock,
        )
        backups = BackupManager(
            storage_settings.resolved_backup_dir,
            settings=settings.backup,
            audit_logger=audit_logger,
            clock=clock,
        )

        return cls(
            transactions=transactions,
            users=users,
            preferences=preferences,
            month_tracker=month_tracker,
            backups=backups,
            budget_settings=settings.budget,
            audit_logger=audit_logger,
            clock=clock,
        )

    # Lifecycle

    def on_launch(self) -> bool:
        """
        App start: seed defaults once, restore the session, check the month.

        Returns whether a month rollover was handled.
        """
        if self.preferences.initialize_defaults():
            self._logger.info("first_launch_initialized")

        self.session = self.users.current_session()
        self._logger.info("app_launched", logged_in=self.session is not None)
        return self.month_tracker.check_for_month_change()

    def on_foreground(self) -> bool:
        """App returns to the foreground. Returns whether a rollover was handled."""
        return self.month_tracker.check_for_month_change()

    # Accounts

    def register(self, name: str, email: str, password: str) -> RegistrationResult:
        return self.users.register(name, email, password)

    def login(self, email: str, password: str) -> Optional[User]:
        """Authenticate; on success the session is available as self.session."""
        user = self.users.login(email, password)
        self.session = self.users.current_session() if user else None
        return user

    def logout(self) -> None:
        self.users.logout()
        self.session = None

    @property
    def current_user(self) -> Optional[User]:
        return self.session.user if self.session else None

    # Home screen

    def summarize(
        self,
        period: PeriodSelection = PeriodSelection.CURRENT_MONTH,
        month: Optional[int] = None,
    ) -> PeriodSummary:
        """
        Transactions, totals and budget status for a period.

        Raises:
            ValueError: If SPECIFIC_MONTH is chosen without a valid month
        """
        now = self._clock()
        selected = select_period(
            self.transactions.list_transactions(), period, month, now=now, tz=self._tz
        )
        totals = calculate_totals(selected)
        prefs = self.preferences.get_preferences()

        return PeriodSummary(
            period=period,
            month=month if period == PeriodSelection.SPECIFIC_MONTH else None,
            transactions=sort_by_date(selected),
            totals=totals,
            budget=budget_status(
                totals.expenses,
                prefs.monthly_budget,
                self._budget.approaching_threshold,
                self._budget.exceeded_threshold,
            ),
            currency_symbol=prefs.currency_symbol,
        )

    def check_budget_alert(self, force: bool = False) -> Optional[BudgetAlert]:
        """
        Budget notification for this month's expenses, or None.

        A tier is alerted at most once per calendar month; moving up
        from approaching to exceeded alerts again. `force` bypasses
        both the notification switch and the once-per-month rule.
        """
        now = self._clock()
        this_month = filter_by_month(
            self.transactions.list_transactions(), now.month, now.year, self._tz
        )
        expenses = calculate_totals(this_month).expenses
        prefs = self.preferences.get_preferences()

        alert = build_budget_alert(
            expenses,
            prefs.monthly_budget,
            prefs.currency_symbol,
            prefs.notifications_enabled,
            force=force,
            approaching_threshold=self._budget.approaching_threshold,
            exceeded_threshold=self._budget.exceeded_threshold,
        )
        if alert is None or force:
            return alert

        already_raised = prefs.budget_alert_tier
        if already_raised is not None and already_raised.rank >= alert.tier.rank:
            self._logger.debug("budget_alert_already_raised", tier=already_raised.value)
            return None

        self.preferences.record_budget_alert(alert.tier)
        self._logger.info("budget_alert_raised", tier=alert.tier.value)
        return alert

    # Backup

    def create_backup(self) -> BackupResult:
        return self.backups.export_data(self.transactions.list_transactions())

    def restore_backup(self, filename: str) -> BackupResult:
        """
        Replace all transactions with the snapshot's contents.

        A snapshot that cannot be read leaves the current data untouched.
        """
        result = self.backups.import_data(filename)
        if not result.success:
            return result

        if not self.transactions.save_all(result.transactions):
            message = "Could not save restored transactions"
            self.audit_logger.log(AuditEventBuilder.backup_failed("restore", filename, message))
            return BackupResult.failed(message, filename=filename)

        self.audit_logger.log(AuditEventBuilder.backup_restored(filename, len(result.transactions)))
        return result
