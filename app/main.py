"""
Streamlit Frontend for Foco Finance

Pages:
- Login / sign-up
- Dashboard: monthly cash flow, filters, contractor (PJ) calculator
- Ledgers: list with balances, detail with monthly view and sharing
- Public ledger: read-only, opened with ?slug=<publicSlug>, no sign-in

All money logic lives in foco_finance; this module only collects input,
calls the flows and renders what they return.
"""

import asyncio
from datetime import date

import streamlit as st

from foco_finance.config import validate_all_settings
from foco_finance.formatting import current_month, format_brl, month_label, today_iso
from foco_finance.models import (
    DEFAULT_CATEGORY,
    TRANSACTION_CATEGORIES,
    Ledger,
    LedgerView,
    Party,
    RealTransaction,
    SettlementSummary,
    Transaction,
    TransactionType,
)
from foco_finance.orchestrator import (
    DashboardFlow,
    LedgerFlow,
    create_session_components,
    create_shared_resources,
)
from foco_finance.services import AuthError, InMemoryLocalStore, PublicSyncError, StorageError
from foco_finance.validation import ValidationFailedError


st.set_page_config(
    page_title="Foco Finance",
    page_icon="💸",
    layout="wide",
    initial_sidebar_state="expanded",
)

DARK_CSS = """
<style>
    .stApp { background-color: #0f172a; color: #e2e8f0; }
</style>
"""


PAGES = ["📊 Fluxo", "🤝 Dívidas", "⚙️ Configurações"]


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_shared_resources():
    """Remote store and identity provider, shared by every session (cached)."""
    return create_shared_resources(use_remote=True)


def get_components():
    """
    Flows, auth and device state of this browser session.

    Built once per session so the signed-in user, the theme and the
    document cache are never visible to another visitor.
    """
    if "components" not in st.session_state:
        remote, identity_provider = get_shared_resources()
        st.session_state.components = create_session_components(
            remote, identity_provider, InMemoryLocalStore()
        )
    return st.session_state.components


def main():
    """Main application entry point."""
    dashboard_flow, ledger_flow, auth, session = get_components()

    if session.get_theme() == "dark":
        st.markdown(DARK_CSS, unsafe_allow_html=True)

    slug = st.query_params.get("slug")
    if slug:
        render_public_ledger_page(ledger_flow, slug)
        return

    if auth.current_user_id() is None:
        render_login_page(auth)
        return

    state = session.get_auth()
    st.sidebar.title("💸 Foco Finance")
    st.sidebar.caption(state.user_name or state.user_email or "")
    st.sidebar.markdown("---")

    page = st.sidebar.radio("Navegar:", PAGES, key="page")

    st.sidebar.markdown("---")
    theme = session.get_theme()
    if st.sidebar.button("🌙 Tema escuro" if theme == "light" else "☀️ Tema claro"):
        session.toggle_theme()
        st.rerun()
    if st.sidebar.button("🚪 Sair"):
        run_async(auth.sign_out())
        for key in list(st.session_state.keys()):
            if key != "components":
                del st.session_state[key]
        st.rerun()

    if page == "📊 Fluxo":
        render_dashboard_page(dashboard_flow)
    elif page == "⚙️ Configurações":
        render_settings_page()
    else:
        if st.session_state.get("open_ledger_id"):
            render_ledger_detail_page(ledger_flow, st.session_state.open_ledger_id)
        else:
            render_ledger_list_page(ledger_flow)


# =============================================================================
# LOGIN
# =============================================================================

def render_login_page(auth):
    """Email/password sign-in and sign-up, plus federated sign-in."""
    st.title("💸 Foco Finance")

    mode = st.radio("Modo", ["Entrar", "Criar conta"], horizontal=True, key="auth_mode")

    with st.form("auth_form"):
        name = st.text_input("Nome") if mode == "Criar conta" else ""
        email = st.text_input("E-mail")
        password = st.text_input("Senha", type="password")
        submitted = st.form_submit_button("Continuar", type="primary")

    if submitted:
        try:
            if mode == "Criar conta":
                run_async(auth.sign_up(email, password, name))
            else:
                run_async(auth.sign_in(email, password))
            st.rerun()
        except AuthError as e:
            st.error(e.user_message)

    if st.button("Entrar com Google"):
        try:
            run_async(auth.sign_in_federated())
            st.rerun()
        except AuthError as e:
            st.error(e.user_message)


# =============================================================================
# DASHBOARD
# =============================================================================

def render_dashboard_page(flow: DashboardFlow):
    """Monthly cash-flow view."""
    st.title("📊 Fluxo")

    transactions, ledgers = run_async(flow.load())

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        picked = st.date_input("Mês", value=date.today())
        month = picked.isoformat()[:7] if picked else current_month()
    with col2:
        search = st.text_input("Buscar", placeholder="nota ou categoria")
    with col3:
        type_filter = st.selectbox(
            "Tipo",
            options=[None, TransactionType.INCOME, TransactionType.EXPENSE],
            format_func=lambda x: "Todos" if x is None else ("Entradas" if x == TransactionType.INCOME else "Saídas"),
        )
    with col4:
        category_filter = st.selectbox(
            "Categoria",
            options=[None] + TRANSACTION_CATEGORIES,
            format_func=lambda x: "Todas" if x is None else x,
        )

    view = flow.view(transactions, ledgers, month, search, type_filter, category_filter)

    s1, s2, s3 = st.columns(3)
    s1.metric("Entradas", format_brl(view.stats.income))
    s2.metric("Saídas", format_brl(view.stats.expense))
    s3.metric("Saldo", format_brl(view.stats.balance))

    st.subheader(month_label(month))

    if not view.rows:
        st.info("Nenhum lançamento encontrado.")

    for row in view.rows:
        if isinstance(row, SettlementSummary):
            render_settlement_row(row)
        elif isinstance(row, RealTransaction):
            render_transaction_row(flow, row.transaction)

    st.markdown("---")
    render_transaction_form(flow, st.session_state.get("editing_transaction"))


def open_ledger(ledger_id: str):
    """Button callback: jump from a settlement row to its ledger."""
    st.session_state.open_ledger_id = ledger_id
    st.session_state.page = PAGES[1]


def render_settlement_row(row: SettlementSummary):
    sign = "+" if row.type == TransactionType.INCOME else "-"
    cols = st.columns([4, 2, 1])
    cols[0].markdown(f"**{row.note}** · _{row.category}_ · Pendente")
    cols[1].markdown(f"**{sign} {format_brl(row.value)}**")
    cols[2].button("Abrir", key=f"open-{row.ledger_id}", on_click=open_ledger, args=(row.ledger_id,))


def render_transaction_row(flow: DashboardFlow, tx: Transaction):
    sign = "+" if tx.type == TransactionType.INCOME else "-"
    cols = st.columns([4, 2, 1, 1])
    cols[0].markdown(f"**{tx.note or tx.category}** · _{tx.category}_ · {tx.date}")
    cols[1].markdown(f"**{sign} {format_brl(tx.value)}**")
    if cols[2].button("✏️", key=f"edit-{tx.id}"):
        st.session_state.editing_transaction = tx
        st.rerun()
    if cols[3].button("🗑️", key=f"del-{tx.id}"):
        st.session_state.pending_delete = tx.id
        st.rerun()
    if st.session_state.get("pending_delete") == tx.id:
        if confirm_delete("Deseja excluir este lançamento?", f"del-{tx.id}"):
            try:
                run_async(flow.delete_transaction(tx.id))
            except StorageError:
                st.error("Erro ao excluir transação no servidor.")
                return
            st.session_state.pop("pending_delete", None)
            st.rerun()


def confirm_delete(prompt: str, key: str) -> bool:
    """
    Second step of a row delete armed by its 🗑️ button. Returns True
    once the user ticked the checkbox and pressed the confirm button.
    """
    st.warning(prompt)
    cols = st.columns([3, 2, 1])
    confirmed = cols[0].checkbox("Sim, excluir", key=f"{key}-confirm")
    if cols[2].button("Cancelar", key=f"{key}-cancel"):
        st.session_state.pop("pending_delete", None)
        st.rerun()
    return cols[1].button("Confirmar exclusão", key=f"{key}-go", type="primary", disabled=not confirmed)


def render_transaction_form(flow: DashboardFlow, editing: Transaction = None):
    """Add or edit a transaction; the PJ calculator prefills the fields."""
    st.subheader("Editar lançamento" if editing else "Novo lançamento")

    prefill = st.session_state.get("pj_prefill") or editing

    with st.expander("🧮 Calculadora PJ"):
        gross = st.text_input("Faturamento bruto do mês", key="pj_gross")
        if st.button("Calcular líquido"):
            st.session_state.pj_prefill = flow.contractor_prefill(gross, base=editing)
            st.rerun()

    categories = TRANSACTION_CATEGORIES
    default_category = prefill.category if prefill else DEFAULT_CATEGORY

    with st.form("transaction_form", clear_on_submit=True):
        tx_date = st.text_input("Data", value=prefill.date if prefill else today_iso())
        tx_type = st.selectbox(
            "Tipo",
            options=[TransactionType.EXPENSE.value, TransactionType.INCOME.value],
            index=1 if prefill and prefill.type == TransactionType.INCOME else 0,
        )
        value = st.text_input("Valor", value=str(prefill.value) if prefill else "")
        category = st.selectbox(
            "Categoria",
            options=categories,
            index=categories.index(default_category) if default_category in categories else 0,
        )
        note = st.text_area("Nota", value=(prefill.note or "") if prefill else "")
        submitted = st.form_submit_button("Salvar", type="primary")

    if submitted:
        try:
            run_async(flow.save_transaction(
                date=tx_date,
                type=tx_type,
                value=value,
                category=category,
                note=note,
                is_pj_salary=bool(prefill and prefill.is_pj_salary),
                transaction_id=editing.id if editing else None,
            ))
            st.session_state.pop("editing_transaction", None)
            st.session_state.pop("pj_prefill", None)
            st.rerun()
        except ValidationFailedError as e:
            for issue in e.result.issues:
                st.error(issue.message)
        except StorageError:
            st.error("Erro ao salvar transação no servidor.")


# =============================================================================
# LEDGERS
# =============================================================================

def render_ledger_list_page(flow: LedgerFlow):
    """All ledgers with their outstanding balance."""
    st.title("🤝 Dívidas")

    ledgers = run_async(flow.list_ledgers())
    if not ledgers:
        st.info("Nenhum registro ainda. Crie o primeiro abaixo.")

    for ledger in ledgers:
        view = flow.view(ledger)
        cols = st.columns([4, 2, 1])
        cols[0].markdown(f"**{ledger.friend_name}** · {ledger.title}")
        cols[1].markdown(
            "Liquidado" if view.balance == 0
            else f"{format_brl(abs(view.balance))} · {view.balance_label}"
        )
        if cols[2].button("Abrir", key=f"open-{ledger.id}"):
            st.session_state.open_ledger_id = ledger.id
            st.rerun()

    st.markdown("---")
    with st.form("new_ledger", clear_on_submit=True):
        st.subheader("Novo registro")
        title = st.text_input("Nome do registro")
        friend = st.text_input("Nome do amigo")
        submitted = st.form_submit_button("Criar", type="primary")

    if submitted:
        try:
            ledger = run_async(flow.create_ledger(title, friend))
            st.session_state.open_ledger_id = ledger.id
            st.rerun()
        except ValidationFailedError as e:
            for issue in e.result.issues:
                st.error(issue.message)
        except StorageError:
            st.error("Erro ao criar ledger.")


def render_ledger_summary(view: LedgerView):
    ledger = view.ledger
    c1, c2, c3 = st.columns(3)
    c1.metric("Eu paguei este mês", format_brl(view.stats.me_paid))
    c2.metric(f"{ledger.friend_name} pagou este mês", format_brl(view.stats.friend_paid))
    c3.metric("Acerto final geral", format_brl(abs(view.balance)), view.balance_label, delta_color="off")


def render_entries(view: LedgerView, flow: LedgerFlow = None):
    """Entries of the month; mutating buttons only when not read-only."""
    st.subheader(f"{month_label(view.month)} · {len(view.monthly_entries)} lançamentos")
    if not view.monthly_entries:
        st.info("Nenhum registro para este mês.")
        return

    ledger = view.ledger
    for entry in view.monthly_entries:
        payer = "Eu" if entry.paid_by is Party.ME else ledger.friend_name
        text = f"{entry.description} · {entry.date} · pago por {payer}"
        if entry.is_paid:
            text = f"~~{text}~~"
        if view.read_only:
            cols = st.columns([5, 2])
        else:
            cols = st.columns([5, 2, 1, 1, 1])
        cols[0].markdown(text)
        cols[1].markdown(f"**{format_brl(entry.amount)}**")
        if view.read_only:
            continue
        if cols[2].button("✅" if entry.is_paid else "⬜", key=f"paid-{entry.id}"):
            save_ledger_change(flow.toggle_entry_paid(ledger, entry.id))
        if cols[3].button("✏️", key=f"edit-entry-{entry.id}"):
            st.session_state.editing_entry = entry
            st.rerun()
        if cols[4].button("🗑️", key=f"del-entry-{entry.id}"):
            st.session_state.pending_delete = entry.id
            st.rerun()
        if st.session_state.get("pending_delete") == entry.id:
            if confirm_delete("Excluir este item da dívida?", f"del-entry-{entry.id}"):
                save_ledger_change(flow.delete_entry(ledger, entry.id), done_keys=("pending_delete",))


def save_ledger_change(coro, done_keys=()):
    """
    Run a ledger mutation and report write failures to the user.

    The session keys in `done_keys` are dropped only after the change was
    saved; ValidationFailedError propagates with them untouched.
    """
    try:
        run_async(coro)
    except PublicSyncError:
        st.error("Registro salvo, mas o link público não foi atualizado. Tente novamente.")
        return
    except StorageError:
        st.error("Erro ao sincronizar. Tente novamente.")
        return
    for key in done_keys:
        st.session_state.pop(key, None)
    st.rerun()


def render_ledger_detail_page(flow: LedgerFlow, ledger_id: str):
    """Owner view of one ledger."""
    ledger = run_async(flow.get_ledger(ledger_id))

    if st.button("← Voltar para lista"):
        st.session_state.pop("open_ledger_id", None)
        st.rerun()

    if ledger is None:
        st.warning("Registro não encontrado.")
        return

    st.title(ledger.friend_name)
    st.caption(f"Relatório: {ledger.title}")

    picked = st.date_input("Mês", value=date.today(), key="ledger_month")
    month = picked.isoformat()[:7] if picked else current_month()
    view = flow.view(ledger, month)

    render_ledger_summary(view)
    render_sharing(flow, ledger)
    render_entries(view, flow)

    st.markdown("---")
    render_entry_form(flow, ledger)
    render_settle_month(flow, ledger, month)

    with st.expander("Excluir registro"):
        if st.checkbox("Confirmo que quero excluir este registro", key="confirm_delete_ledger"):
            if st.button("Excluir", type="primary"):
                try:
                    run_async(flow.delete_ledger(ledger))
                except StorageError:
                    st.error("Erro ao excluir registro.")
                    return
                st.session_state.pop("open_ledger_id", None)
                st.rerun()


def render_sharing(flow: LedgerFlow, ledger: Ledger):
    enabled = st.toggle("Link público", value=ledger.public_read_enabled)
    if enabled != ledger.public_read_enabled:
        save_ledger_change(flow.set_public_read(ledger, enabled))
    if ledger.public_read_enabled:
        st.code(flow.share_url(ledger), language=None)


def render_entry_form(flow: LedgerFlow, ledger: Ledger):
    """Add a new entry, or edit the one picked with ✏️ (status is kept)."""
    editing = st.session_state.get("editing_entry")
    if editing is not None and all(e.id != editing.id for e in ledger.entries):
        editing = None

    parties = [Party.ME.value, Party.FRIEND.value]
    with st.form("entry_form", clear_on_submit=True):
        st.subheader("Editar item" if editing else "Novo item")
        amount = st.text_input("Valor", value=str(editing.amount) if editing else "")
        paid_by = st.radio(
            "Quem pagou?",
            options=parties,
            index=parties.index(editing.paid_by.value) if editing else 0,
            format_func=lambda x: "Eu" if x == Party.ME.value else ledger.friend_name,
            horizontal=True,
        )
        description = st.text_input("Descrição", value=editing.description if editing else "")
        entry_date = st.text_input("Data", value=editing.date if editing else today_iso())
        submitted = st.form_submit_button("Salvar" if editing else "Adicionar", type="primary")

    if editing and st.button("Cancelar edição"):
        st.session_state.pop("editing_entry", None)
        st.rerun()

    if submitted:
        if editing:
            change = flow.edit_entry(ledger, editing.id, amount, paid_by, description, entry_date)
            done_keys = ("editing_entry",)
        else:
            change = flow.add_entry(ledger, amount, paid_by, description, entry_date)
            done_keys = ()
        try:
            save_ledger_change(change, done_keys=done_keys)
        except ValidationFailedError as e:
            for issue in e.result.issues:
                st.error(issue.message)


def render_settle_month(flow: LedgerFlow, ledger: Ledger, month: str):
    """Pay-all needs an explicit confirmation; it cannot be undone in one step."""
    with st.expander(f"Pagar tudo de {month_label(month)}"):
        confirmed = st.checkbox(
            "Marcar todos os itens deste mês como pagos",
            key=f"confirm_settle_{month}",
        )
        if st.button("Pagar tudo", disabled=not confirmed):
            save_ledger_change(flow.settle_month(ledger, month))


def render_public_ledger_page(flow: LedgerFlow, slug: str):
    """Read-only view for anyone holding the link."""
    ledger = run_async(flow.get_public_ledger(slug))
    if ledger is None:
        st.warning("Registro não encontrado.")
        return

    st.title(ledger.friend_name)
    st.caption(f"🔒 Somente leitura · Relatório: {ledger.title}")

    picked = st.date_input("Mês", value=date.today(), key="public_month")
    month = picked.isoformat()[:7] if picked else current_month()
    view = flow.view(ledger, month, read_only=True)

    render_ledger_summary(view)
    render_entries(view)


# =============================================================================
# SETTINGS
# =============================================================================

def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Configurações")

    st.markdown("### Status da conexão")

    status = validate_all_settings()

    services = [
        ("Google Sheets (armazenamento remoto)", "google_sheets"),
        ("Armazenamento local", "local_store"),
        ("Aplicação", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Não configurado")
            st.error(f"❌ {name} - {error}")

    if not status.get("google_sheets", False):
        st.info("Sem planilha configurada: os dados ficam apenas neste dispositivo.")

    st.markdown("---")
    st.markdown("### Configuração")
    st.markdown(
        "Crie um arquivo `.env` com `GOOGLE_SHEETS_CREDENTIALS_PATH` e "
        "`GOOGLE_SHEETS_SPREADSHEET_ID` para sincronizar com a planilha."
    )


if __name__ == "__main__":
    main()
