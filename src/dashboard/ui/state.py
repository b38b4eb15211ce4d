"""Ініціалізація стану сесії."""

from __future__ import annotations

import streamlit as st

from src.dashboard.data_access import get_directory, get_repository
from src.selection.session import SessionController
from src.selection.submission import LoggingSubmitter

_DEFAULTS: dict[str, object] = {
    "picked_location": None,
    "table_version": 0,
}


def init_state() -> SessionController:
    """Заповнює st.session_state значеннями за замовчуванням.

    Кожна вкладка браузера отримує власний ``SessionController``; спільний
    між ними лише репозиторій каталогів.
    """
    for key, value in _DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = value
    if "session" not in st.session_state:
        st.session_state["session"] = SessionController(
            get_repository(),
            directory=get_directory(),
            submitter=LoggingSubmitter(),
        )
    if "locations" not in st.session_state:
        st.session_state["locations"] = st.session_state["session"].list_locations()
    return st.session_state["session"]


def bump_table_version() -> None:
    """Скидає внутрішній стан редактора таблиці після масових змін."""
    st.session_state["table_version"] = st.session_state.get("table_version", 0) + 1
