"""
Main Orchestrator for Foco Finance

Ties the components together and defines the flows the presentation
layer calls:

1. Dashboard (load -> filter/aggregate -> add/edit/delete transactions)
2. Ledgers (create -> add/edit/toggle/settle/delete entries -> share)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Input is validated before the gateway is ever called
- Aggregates are re-derived from the full entry list after every change
- Storage write errors propagate to the caller exactly once
"""

from decimal import Decimal
from typing import Optional

from pydantic import ValidationError

from foco_finance.accounting import ledger_engine
from foco_finance.accounting.dashboard import build_dashboard
from foco_finance.accounting.net_pay import prefill_contractor_transaction
from foco_finance.config import get_settings
from foco_finance.formatting import current_month, parse_amount
from foco_finance.log import get_logger
from foco_finance.models.dashboard import DashboardFilter, DashboardView
from foco_finance.models.ledger import Ledger, LedgerEntry, LedgerView
from foco_finance.models.transaction import Transaction, TransactionType
from foco_finance.services.auth import AuthService, IdentityProvider, LocalIdentityProvider
from foco_finance.services.repository import PersistenceGateway
from foco_finance.services.session import SessionStore
from foco_finance.services.storage import (
    GoogleSheetsRemoteStore,
    InMemoryRemoteStore,
    JsonFileLocalStore,
    LocalStoreInterface,
    RemoteStoreInterface,
)
from foco_finance.validation import (
    LedgerEntryValidator,
    LedgerValidator,
    MonthValidator,
    TransactionValidator,
)


logger = get_logger(__name__)


class DashboardFlow:
    """
    Monthly cash-flow screen.

    Real transactions are loaded from the gateway; ledger settlement rows
    are recomputed from the ledgers on every call to `view`.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        validator: Optional[TransactionValidator] = None,
    ):
        self._gateway = gateway
        self._validator = validator or TransactionValidator()

    async def load(self) -> tuple[list[Transaction], list[Ledger]]:
        transactions = await self._gateway.list_transactions()
        ledgers = await self._gateway.list_ledgers()
        return transactions, ledgers

    def view(
        self,
        transactions: list[Transaction],
        ledgers: list[Ledger],
        month: Optional[str] = None,
        search: str = "",
        type: Optional[TransactionType] = None,
        category: Optional[str] = None,
    ) -> DashboardView:
        filters = DashboardFilter(
            month=month or current_month(),
            search=search,
            type=type,
            category=category,
        )
        return build_dashboard(transactions, ledgers, filters)

    async def save_transaction(
        self,
        date: str,
        type: str,
        value: str,
        category: str,
        note: Optional[str] = None,
        is_pj_salary: bool = False,
        transaction_id: Optional[str] = None,
    ) -> Transaction:
        """
        Validate, build and persist (insert or edit).

        Raises:
            ValidationFailedError: Input rejected; nothing was stored
            StorageError: Remote write failed; the local cache has the change
        """
        transaction = self._validator.build(
            date=date,
            type=type,
            value=value,
            category=category,
            note=note,
            is_pj_salary=is_pj_salary,
            transaction_id=transaction_id,
        )
        await self._gateway.save_transaction(transaction)
        return transaction

    async def delete_transaction(self, transaction_id: str) -> None:
        await self._gateway.delete_transaction(transaction_id)

    def contractor_prefill(
        self,
        gross: str,
        base: Optional[Transaction] = None,
        date: Optional[str] = None,
    ) -> Transaction:
        """Net-pay transaction for the form to show; not saved."""
        try:
            amount = parse_amount(gross)
        except ValueError:
            amount = Decimal("0")
        return prefill_contractor_transaction(amount, base=base, date=date)


class LedgerFlow:
    """
    Shared-expense ledgers: list, detail, entry changes and public link.

    Every mutation builds a new entry list with the accounting engine and
    saves the whole ledger; callers re-render from the returned Ledger.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        entry_validator: Optional[LedgerEntryValidator] = None,
        ledger_validator: Optional[LedgerValidator] = None,
        public_base_url: Optional[str] = None,
        month_validator: Optional[MonthValidator] = None,
    ):
        self._gateway = gateway
        self._entry_validator = entry_validator or LedgerEntryValidator()
        self._ledger_validator = ledger_validator or LedgerValidator()
        self._month_validator = month_validator or MonthValidator()
        self._public_base_url = public_base_url

    # -- reading ----------------------------------------------------------------------

    async def list_ledgers(self) -> list[Ledger]:
        return await self._gateway.list_ledgers()

    async def get_ledger(self, ledger_id: str) -> Optional[Ledger]:
        return await self._gateway.get_ledger(ledger_id)

    async def get_public_ledger(self, slug: str) -> Optional[Ledger]:
        return await self._gateway.get_ledger_by_slug(slug)

    def view(self, ledger: Ledger, month: Optional[str] = None, read_only: bool = False) -> LedgerView:
        """Month-scoped entries and stats plus the all-time balance."""
        month = self._month_validator.check(month or current_month())
        monthly = ledger_engine.entries_for_month(ledger.entries, month)
        balance = ledger_engine.compute_balance(ledger.entries)
        return LedgerView(
            ledger=ledger,
            month=month,
            monthly_entries=monthly,
            stats=ledger_engine.monthly_stats(monthly),
            balance=balance,
            balance_label=ledger_engine.balance_label(balance),
            read_only=read_only,
        )

    def share_url(self, ledger: Ledger) -> str:
        base = self._public_base_url or get_settings().app.public_base_url
        return f"{base}?slug={ledger.public_slug}"

    # -- ledger lifecycle ---------------------------------------------------------------

    async def create_ledger(self, title: str, friend_name: str) -> Ledger:
        self._ledger_validator.check(title, friend_name)
        ledger = ledger_engine.new_ledger(title.strip(), friend_name.strip())
        await self._gateway.save_ledger(ledger)
        logger.info("ledger_created", ledger_id=ledger.id)
        return ledger

    async def delete_ledger(self, ledger: Ledger) -> None:
        await self._gateway.delete_ledger(ledger)

    async def set_public_read(self, ledger: Ledger, enabled: bool) -> Ledger:
        updated = ledger.model_copy(update={"public_read_enabled": enabled})
        await self._gateway.save_ledger(updated)
        return updated

    # -- entries ------------------------------------------------------------------------

    async def _save_entries(self, ledger: Ledger, entries: list[LedgerEntry]) -> Ledger:
        updated = ledger_engine.with_entries(ledger, entries)
        await self._gateway.save_ledger(updated)
        return updated

    async def add_entry(
        self,
        ledger: Ledger,
        amount: str,
        paid_by: str,
        description: str,
        date: str,
    ) -> Ledger:
        """
        Raises:
            ValidationFailedError: Input rejected; nothing was stored
        """
        entry = self._entry_validator.build(amount, paid_by, description, date)
        return await self._save_entries(ledger, ledger_engine.add_entry(ledger.entries, entry))

    async def edit_entry(
        self,
        ledger: Ledger,
        entry_id: str,
        amount: str,
        paid_by: str,
        description: str,
        date: str,
    ) -> Ledger:
        """Replace an entry's fields; its paid/open status is kept."""
        existing = next((e for e in ledger.entries if e.id == entry_id), None)
        if existing is None:
            return ledger
        entry = self._entry_validator.build(amount, paid_by, description, date, entry_id=entry_id)
        entry = entry.model_copy(update={"status": existing.status})
        return await self._save_entries(ledger, ledger_engine.replace_entry(ledger.entries, entry))

    async def toggle_entry_paid(self, ledger: Ledger, entry_id: str) -> Ledger:
        return await self._save_entries(ledger, ledger_engine.toggle_entry(ledger.entries, entry_id))

    async def delete_entry(self, ledger: Ledger, entry_id: str) -> Ledger:
        return await self._save_entries(ledger, ledger_engine.remove_entry(ledger.entries, entry_id))

    async def settle_month(self, ledger: Ledger, month: str) -> Ledger:
        """
        Pay-all for the month. The caller must have asked the user first;
        there is no single-step undo.

        Raises:
            ValidationFailedError: month is not YYYY-MM; nothing was stored
        """
        self._month_validator.check(month)
        updated = await self._save_entries(
            ledger, ledger_engine.settle_month(ledger.entries, month)
        )
        logger.info("ledger_settled", ledger_id=ledger.id, month=month)
        return updated


def create_shared_resources(
    use_remote: bool = True,
    accounts: Optional[LocalStoreInterface] = None,
    remote: Optional[RemoteStoreInterface] = None,
    identity_provider: Optional[IdentityProvider] = None,
) -> tuple[Optional[RemoteStoreInterface], IdentityProvider]:
    """
    Process-wide pieces every session may share: the remote store and the
    identity provider. Neither holds a signed-in user.

    Falls back to the in-memory remote store when the spreadsheet is not
    configured, so the app stays usable in development.

    Returns:
        (remote_store, identity_provider)
    """
    settings = get_settings()

    if identity_provider is None:
        if accounts is None:
            accounts = JsonFileLocalStore(settings.local_store.path)
        identity_provider = LocalIdentityProvider(accounts)

    if remote is None and use_remote:
        try:
            remote = GoogleSheetsRemoteStore()
        except ValidationError as e:
            logger.warning("google_sheets_unavailable", error=str(e))
            remote = InMemoryRemoteStore()

    return remote, identity_provider


def create_session_components(
    remote: Optional[RemoteStoreInterface],
    identity_provider: IdentityProvider,
    device: LocalStoreInterface,
) -> tuple[DashboardFlow, LedgerFlow, AuthService, SessionStore]:
    """
    Components for one browser session.

    The AuthService owns the signed-in identity and the gateway reads the
    user id from it, so two sessions never see each other's documents.
    `device` holds this session's auth marker, theme and document cache.

    Returns:
        (dashboard_flow, ledger_flow, auth_service, session_store)
    """
    session = SessionStore(device)
    auth = AuthService(identity_provider, session)
    gateway = PersistenceGateway(remote, device, auth.current_user_id)
    auth.attach_gateway(gateway)

    dashboard_flow = DashboardFlow(gateway)
    ledger_flow = LedgerFlow(gateway)
    return dashboard_flow, ledger_flow, auth, session


def create_app_components(
    use_remote: bool = True,
    local: Optional[LocalStoreInterface] = None,
    remote: Optional[RemoteStoreInterface] = None,
    identity_provider: Optional[IdentityProvider] = None,
) -> tuple[DashboardFlow, LedgerFlow, AuthService, SessionStore]:
    """
    Factory function to create all application components for a single
    device, where one local store holds both the accounts and the
    session state.

    Returns:
        (dashboard_flow, ledger_flow, auth_service, session_store)
    """
    if local is None:
        local = JsonFileLocalStore(get_settings().local_store.path)
    remote, identity_provider = create_shared_resources(
        use_remote,
        accounts=local,
        remote=remote,
        identity_provider=identity_provider,
    )
    return create_session_components(remote, identity_provider, local)
