"""
Streamlit Frontend for Expense Tracker

A single screen:
1. New expense - amount, date, tags
2. Recorded expenses - newest first, each with a delete button

The screen only keeps widget state. Every action goes through the
ExpenseTracker, which validates, updates the list and saves it.
"""

import html
from datetime import datetime, time

import streamlit as st

from expense_tracker.config import get_settings
from expense_tracker.orchestrator import ExpenseTracker, create_app_components
from expense_tracker.services.storage import StorageLocationError
from expense_tracker.validation import InputValidationError


st.set_page_config(
    page_title="My Spending Tracker",
    page_icon="💸",
    layout="centered",
)

st.markdown("""
<style>
    .tag-chip {
        display: inline-block;
        padding: 2px 10px;
        margin: 2px 4px 2px 0;
        border-radius: 12px;
        background-color: rgba(128, 128, 128, 0.2);
        font-size: 0.8em;
    }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_tracker() -> ExpenseTracker:
    """Create the tracker and load saved expenses (once per server)."""
    return create_app_components(use_local_file=True)


def init_form_state() -> None:
    defaults = {
        "amount_input": "",
        "tag_input": "",
        "current_tags": [],
        "date_input": datetime.now().date(),
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def reset_form() -> None:
    st.session_state.amount_input = ""
    st.session_state.tag_input = ""
    st.session_state.current_tags = []
    st.session_state.date_input = datetime.now().date()


def on_add_tag(tracker: ExpenseTracker) -> None:
    # Typing a tag and clicking Add fires both the field's on_change and the
    # button; whichever runs second finds the field already cleared.
    if not st.session_state.tag_input.strip():
        return
    try:
        st.session_state.current_tags = tracker.add_tag(
            st.session_state.current_tags,
            st.session_state.tag_input,
        )
        st.session_state.tag_input = ""
    except InputValidationError as e:
        st.session_state.alert = e.message


def on_remove_tag(tracker: ExpenseTracker, tag: str) -> None:
    st.session_state.current_tags = tracker.remove_tag(
        st.session_state.current_tags, tag
    )


def on_add_expense(tracker: ExpenseTracker) -> None:
    picked = st.session_state.date_input
    # Keep the time of entry; the picker only chooses the day
    when = datetime.combine(picked, datetime.now().time()) if picked else None
    try:
        tracker.add_expense(
            amount=st.session_state.amount_input,
            tags=st.session_state.current_tags,
            date=when,
        )
    except InputValidationError as e:
        st.session_state.alert = e.message
        return
    reset_form()


def render_form(tracker: ExpenseTracker) -> None:
    """New expense section."""
    st.subheader("New Expense Details")

    col1, col2 = st.columns([2, 1])
    with col1:
        st.text_input("Amount", key="amount_input", placeholder="0.00")
    with col2:
        st.date_input("Date", key="date_input", label_visibility="hidden")

    col1, col2 = st.columns([4, 1])
    with col1:
        st.text_input(
            "Add a tag (e.g., Groceries, Dinner)",
            key="tag_input",
            on_change=on_add_tag,
            args=(tracker,),
        )
    with col2:
        st.write("")
        st.button("Add", on_click=on_add_tag, args=(tracker,))

    tags = st.session_state.current_tags
    if tags:
        cols = st.columns(min(len(tags), 6))
        for i, tag in enumerate(tags):
            cols[i % len(cols)].button(
                f"{tag} ✕",
                key=f"remove_tag_{i}",
                on_click=on_remove_tag,
                args=(tracker, tag),
            )
    else:
        st.caption("No tags added yet.")

    st.button(
        "Add Expense",
        type="primary",
        use_container_width=True,
        on_click=on_add_expense,
        args=(tracker,),
        disabled=not st.session_state.amount_input,
    )


def render_expenses(tracker: ExpenseTracker) -> None:
    """Recorded expenses section."""
    st.subheader("Recorded Expenses")
    symbol = get_settings().app.currency_symbol

    expenses = tracker.sorted_by_date()
    if not expenses:
        st.info("No expenses recorded yet.")
        return

    st.caption(f"{len(expenses)} expenses, total {symbol}{tracker.total_amount():,.2f}")

    for expense in expenses:
        local_date = expense.date.astimezone()
        col1, col2 = st.columns([5, 1])
        with col1:
            when = local_date.strftime("%d %b %Y")
            if local_date.time() != time(0, 0):
                when += local_date.strftime(" %H:%M")
            st.markdown(f"**{symbol}{expense.amount:,.2f}** &nbsp; {when}")
            if expense.tags:
                chips = "".join(
                    f'<span class="tag-chip">{html.escape(tag)}</span>'
                    for tag in expense.tags
                )
                st.markdown(chips, unsafe_allow_html=True)
            else:
                st.caption("No tags")
        with col2:
            st.button(
                "Delete",
                key=f"delete_{expense.id}",
                on_click=tracker.delete_expense,
                args=(expense.id,),
            )


def main():
    """Main application entry point."""
    try:
        tracker = get_tracker()
    except StorageLocationError as e:
        st.error(f"Cannot start: {e}")
        st.stop()

    init_form_state()

    st.title("My Spending Tracker")

    if st.button("Save Data"):
        tracker.save()

    alert = st.session_state.pop("alert", None)
    if alert:
        st.error(alert)

    render_form(tracker)
    st.markdown("---")
    render_expenses(tracker)


if __name__ == "__main__":
    main()
