"""
End-to-end tests for the Streamlit pages, driven through
streamlit.testing.v1.AppTest.

Every AppTest instance is a separate browser session running against
the same process-wide cached resources.
"""

from pathlib import Path

import pytest
import streamlit as st
from streamlit.testing.v1 import AppTest

from foco_finance.validation import NEGATIVE_AMOUNT_MESSAGE


APP_PATH = str(Path(__file__).resolve().parent.parent / "app" / "main.py")


@pytest.fixture(autouse=True)
def isolated_app(tmp_path, monkeypatch):
    monkeypatch.setenv("FOCO_LOCAL_PATH", str(tmp_path / "storage.json"))
    monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
    monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)
    st.cache_resource.clear()
    yield
    st.cache_resource.clear()


def new_session() -> AppTest:
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()
    assert not at.exception
    return at


def labeled(elements, label):
    return next(e for e in elements if e.label == label)


def sign_up(at: AppTest, name: str, email: str) -> None:
    at.radio(key="auth_mode").set_value("Criar conta").run()
    labeled(at.text_input, "Nome").input(name)
    labeled(at.text_input, "E-mail").input(email)
    labeled(at.text_input, "Senha").input("s3cret")
    labeled(at.button, "Continuar").click().run()
    assert not at.exception


def titles(at: AppTest) -> list[str]:
    return [t.value for t in at.title]


def open_new_ledger(at: AppTest) -> None:
    at.radio(key="page").set_value("🤝 Dívidas").run()
    labeled(at.text_input, "Nome do registro").input("Casa")
    labeled(at.text_input, "Nome do amigo").input("Bia")
    labeled(at.button, "Criar").click().run()
    assert "Bia" in titles(at)


def add_entry(at: AppTest, amount: str) -> None:
    labeled(at.text_input, "Valor").input(amount)
    labeled(at.text_input, "Descrição").input("Mercado")
    labeled(at.button, "Adicionar").click().run()
    assert not at.exception


def markdown_values(at: AppTest) -> list[str]:
    return [m.value for m in at.markdown]


class TestSessions:
    """Tests for sign-in isolation between browser sessions."""

    def test_second_session_gets_the_login_page(self):
        """Test that one visitor signing in does not sign in the next one."""
        first = new_session()
        sign_up(first, "Alice", "alice@example.com")
        assert "📊 Fluxo" in titles(first)
        assert [c.value for c in first.sidebar.caption] == ["Alice"]

        second = new_session()
        assert titles(second) == ["💸 Foco Finance"]
        assert len(second.sidebar.caption) == 0

    def test_account_works_from_another_session(self):
        """Test that an account created in one session signs in from another."""
        first = new_session()
        sign_up(first, "Alice", "alice@example.com")

        second = new_session()
        labeled(second.text_input, "E-mail").input("alice@example.com")
        labeled(second.text_input, "Senha").input("s3cret")
        labeled(second.button, "Continuar").click().run()

        assert "📊 Fluxo" in titles(second)
        assert [c.value for c in second.sidebar.caption] == ["Alice"]


class TestDeleteConfirmation:
    """Tests for the two-step delete of rows."""

    def test_transaction_delete_asks_first(self):
        """Test that the first 🗑️ click only asks; confirming deletes."""
        at = new_session()
        sign_up(at, "Alice", "alice@example.com")
        labeled(at.text_input, "Valor").input("10")
        labeled(at.button, "Salvar").click().run()
        assert "**- R$ 10,00**" in markdown_values(at)

        labeled(at.button, "🗑️").click().run()
        assert [w.value for w in at.warning] == ["Deseja excluir este lançamento?"]
        assert "**- R$ 10,00**" in markdown_values(at)

        labeled(at.checkbox, "Sim, excluir").check().run()
        labeled(at.button, "Confirmar exclusão").click().run()
        assert "**- R$ 10,00**" not in markdown_values(at)
        assert "Nenhum lançamento encontrado." in [i.value for i in at.info]

    def test_ledger_entry_delete_asks_first(self):
        """Test the ledger item prompt before removal."""
        at = new_session()
        sign_up(at, "Alice", "alice@example.com")
        open_new_ledger(at)
        add_entry(at, "10")

        labeled(at.button, "🗑️").click().run()
        assert "Excluir este item da dívida?" in [w.value for w in at.warning]
        assert "**R$ 10,00**" in markdown_values(at)

        labeled(at.checkbox, "Sim, excluir").check().run()
        labeled(at.button, "Confirmar exclusão").click().run()
        assert "**R$ 10,00**" not in markdown_values(at)
        assert "Nenhum registro para este mês." in [i.value for i in at.info]


class TestEntryEditing:
    """Tests for the ledger item edit form."""

    def test_rejected_edit_stays_in_edit_mode(self):
        """Test that a failed edit keeps editing the same item instead of adding one."""
        at = new_session()
        sign_up(at, "Alice", "alice@example.com")
        open_new_ledger(at)
        add_entry(at, "10")

        labeled(at.button, "✏️").click().run()
        labeled(at.text_input, "Valor").input("-5")
        labeled(at.button, "Salvar").click().run()
        assert NEGATIVE_AMOUNT_MESSAGE in [e.value for e in at.error]

        at.run()
        assert "Editar item" in [s.value for s in at.subheader]
        labeled(at.text_input, "Valor").input("12")
        labeled(at.button, "Salvar").click().run()

        assert "**R$ 12,00**" in markdown_values(at)
        assert "**R$ 10,00**" not in markdown_values(at)
        assert any(s.value.endswith("· 1 lançamentos") for s in at.subheader)
