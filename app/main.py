"""
Streamlit Frontend for Smart Budget

This is the screen the user works with every day: the current balance,
what they spent, what others owe them and what they owe.

DESIGN PRINCIPLES:
1. The balance is always visible (unless the user hides it)
2. Every action gives immediate feedback
3. Clear error messages in simple language
4. Nothing changes the balance behind the user's back

The UI never touches the ledger directly. Every action goes through
the LedgerController, which validates, applies, saves and audits.
"""

import asyncio
from datetime import date, datetime
from decimal import Decimal

import streamlit as st

from smart_budget.audit import create_correlation_id
from smart_budget.config import validate_all_settings
from smart_budget.controller import LedgerController, create_controller
from smart_budget.formatting import format_currency, format_timestamp, mask_amount
from smart_budget.ledger import MutationOutcome, MutationResult
from smart_budget.models.preferences import SUPPORTED_CURRENCIES
from smart_budget.models.record import (
    BalanceEventKind,
    CashFlow,
    ExpenseRecord,
    PayableRecord,
    ReceivableRecord,
    RecordKind,
    is_settled,
)
from smart_budget.models.validation import ValidationResult
from smart_budget.queries import section_total
from smart_budget.services.storage import (
    AttachmentError,
    LocalAttachmentStore,
    create_attachment_store,
)
from smart_budget.validation import categories_for


# Page configuration
st.set_page_config(
    page_title="Smart Budget",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
    .warning-box {
        padding: 20px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)

DARK_MODE_CSS = """
<style>
    .stApp { background-color: #0f172a; color: #e2e8f0; }
    .big-number { color: #e2e8f0; }
</style>
"""

EVENT_LABELS = {
    BalanceEventKind.MANUAL_DEPOSIT: "Deposit",
    BalanceEventKind.MANUAL_WITHDRAW: "Withdrawal",
    BalanceEventKind.EXPENSE_BOOKED: "Expense",
    BalanceEventKind.RECEIVABLE_COLLECTED: "Collected",
    BalanceEventKind.PAYABLE_SETTLED: "Paid",
    BalanceEventKind.REVERSAL: "Reversal",
}

SECTIONS = {
    RecordKind.EXPENSE: ("🧾 Expenses", ExpenseRecord),
    RecordKind.RECEIVABLE: ("📥 Receivables", ReceivableRecord),
    RecordKind.PAYABLE: ("📤 Payables", PayableRecord),
}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_controller() -> LedgerController:
    """Get or create the application controller (cached)."""
    try:
        controller = create_controller(use_storage=True)
    except Exception as e:
        st.error(f"Failed to initialize storage: {e}")
        controller = create_controller(use_storage=False)
    run_async(controller.start())
    return controller


@st.cache_resource
def get_attachment_store() -> LocalAttachmentStore:
    """Get the receipt image store (cached)."""
    return create_attachment_store()


def store_receipt(upload):
    """Save an uploaded receipt and return its reference, or None on failure."""
    try:
        return get_attachment_store().save(upload.getvalue(), upload.name)
    except AttachmentError as e:
        st.error(f"Receipt not saved: {e}")
        return None


def show_result(result: MutationResult, controller: LedgerController, success: str):
    """
    Queue feedback for a ledger action and redraw the page.

    Messages survive the rerun so the page always shows the new balance.
    """
    messages = []
    if result.outcome == MutationOutcome.REJECTED:
        summary = controller.validator.get_user_friendly_summary(
            ValidationResult(
                record_id="form",
                is_valid=False,
                issues=result.issues,
            )
        )
        messages.append(("error", summary))
    elif result.outcome == MutationOutcome.NOT_FOUND:
        messages.append(("info", "That entry no longer exists."))
    else:
        messages.append(("success", success))

    if controller.last_persistence_error:
        messages.append((
            "warning",
            "Your change is applied but could not be saved: "
            f"{controller.last_persistence_error}",
        ))

    st.session_state.flash = messages
    st.rerun()


def render_flash():
    """Show messages queued by the previous action."""
    for level, message in st.session_state.pop("flash", []):
        getattr(st, level)(message)


def main():
    """Main application entry point."""
    controller = get_controller()

    if controller.preferences.dark_mode:
        st.markdown(DARK_MODE_CSS, unsafe_allow_html=True)

    render_flash()

    # Sidebar navigation
    st.sidebar.title("💰 Smart Budget")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["🏠 Overview"] + [label for label, _ in SECTIONS.values()] + ["⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How it works:**
        - Expenses reduce your balance right away
        - Receivables add to it once collected
        - Payables reduce it once paid
        """
    )

    if page == "🏠 Overview":
        render_overview_page(controller)
    elif page == "⚙️ Settings":
        render_settings_page(controller)
    else:
        for kind, (label, _) in SECTIONS.items():
            if page == label:
                render_section_page(controller, kind)


def render_overview_page(controller: LedgerController):
    """Render the balance, the dashboard sums and the history."""
    st.title("🏠 Overview")

    preferences = controller.preferences
    symbol = preferences.currency.symbol
    hidden = preferences.balance_hidden
    summary = controller.summary()

    col1, col2 = st.columns([4, 1])
    with col1:
        st.markdown("Current balance")
        st.markdown(
            f'<div class="big-number">{mask_amount(summary.balance, symbol, hidden)}</div>',
            unsafe_allow_html=True,
        )
    with col2:
        if st.button("🙈 Show" if hidden else "👁 Hide"):
            run_async(controller.toggle_balance_visibility())
            st.rerun()

    col1, col2, col3 = st.columns(3)
    col1.metric("Total spent", mask_amount(summary.total_spent, symbol, hidden))
    col2.metric(
        "Owed to you", mask_amount(summary.outstanding_receivables, symbol, hidden)
    )
    col3.metric("You owe", mask_amount(summary.outstanding_payables, symbol, hidden))

    st.markdown("---")
    st.subheader("Adjust balance")

    with st.form("adjust_balance", clear_on_submit=True):
        amount = st.number_input(
            f"Amount ({symbol})",
            min_value=0.0,
            step=1.0,
            format="%.2f",
        )
        description = st.text_input("Note (optional)")
        col1, col2 = st.columns(2)
        deposit = col1.form_submit_button("➕ Deposit", type="primary")
        withdraw = col2.form_submit_button("➖ Withdraw")

    if deposit or withdraw:
        correlation_id = create_correlation_id()
        value = Decimal(str(amount))
        if deposit:
            result = run_async(controller.deposit(value, description, correlation_id))
        else:
            result = run_async(controller.withdraw(value, description, correlation_id))
        show_result(result, controller, "Balance updated.")

    st.markdown("---")
    st.subheader("Balance history")

    events = list(controller.history())
    if not events:
        st.info("No balance changes yet.")
        return

    for event in events:
        sign = "+" if event.flow == CashFlow.INFLOW else "−"
        label = EVENT_LABELS[event.kind]
        amount_text = mask_amount(event.amount, symbol, hidden)
        after_text = mask_amount(event.balance_after, symbol, hidden)
        st.markdown(
            f"**{label}** {sign}{amount_text}  ·  {event.description or '—'}  \n"
            f"<small>{format_timestamp(event.occurred_at)} · balance {after_text}</small>",
            unsafe_allow_html=True,
        )


def render_section_page(controller: LedgerController, kind: RecordKind):
    """Render the add form and list for one kind of record."""
    label, record_class = SECTIONS[kind]
    symbol = controller.preferences.currency.symbol
    hidden = controller.preferences.balance_hidden

    st.title(label)
    st.markdown(
        f"Total: **{mask_amount(section_total(controller.ledger, kind), symbol, hidden)}**"
    )

    with st.expander("➕ Add new", expanded=True):
        with st.form(f"add_{kind.value}", clear_on_submit=True):
            col1, col2 = st.columns(2)
            with col1:
                amount = st.number_input(
                    f"Amount ({symbol}) *",
                    min_value=0.0,
                    step=1.0,
                    format="%.2f",
                )
                category = st.selectbox(
                    "Category *",
                    options=list(categories_for(kind)),
                    format_func=lambda c: c.title(),
                )
            with col2:
                occurred_on = st.date_input("Date *", value=date.today())
                expected_date = None
                settled = False
                if kind != RecordKind.EXPENSE:
                    expected_date = st.date_input("Expected date (optional)", value=None)
                    settled = st.checkbox(
                        "Already collected" if kind == RecordKind.RECEIVABLE
                        else "Already paid"
                    )
            description = st.text_area(
                "Description (optional)",
                placeholder="Add a note...",
            )
            receipt = None
            if kind == RecordKind.EXPENSE:
                receipt = st.file_uploader(
                    "Receipt image (optional)",
                    type=["png", "jpg", "jpeg", "webp"],
                )
            submitted = st.form_submit_button("✅ Save", type="primary")

    if submitted:
        if amount <= 0:
            st.error("Please enter an amount greater than zero")
        else:
            fields = {
                "amount": Decimal(str(amount)),
                "category": category,
                "description": description,
                "occurred_at": datetime.combine(occurred_on, datetime.now().time()),
            }
            if kind != RecordKind.EXPENSE:
                fields["expected_date"] = expected_date
                fields["status"] = "settled" if settled else "unsettled"
            elif receipt is not None:
                fields["attachment_ref"] = store_receipt(receipt)
            result = run_async(controller.submit_record(record_class(**fields)))
            show_result(result, controller, "Saved.")

    st.markdown("---")

    records = controller.records(kind)
    if not records:
        st.info("Nothing here yet. Use the form above to add your first entry.")
        return

    for record in records:
        render_record_row(controller, record, symbol, hidden)


def render_record_row(controller: LedgerController, record, symbol: str, hidden: bool):
    """One record with its actions."""
    col1, col2, col3 = st.columns([5, 1, 1])

    with col1:
        status = ""
        if record.kind != RecordKind.EXPENSE:
            status = " ✅" if is_settled(record) else " ⏳"
        expected = ""
        if getattr(record, "expected_date", None):
            expected = f" · expected {record.expected_date.strftime('%d %b %Y')}"
        st.markdown(
            f"**{record.category.title()}** {mask_amount(record.amount, symbol, hidden)}"
            f"{status}  \n"
            f"<small>{record.description or '—'} · "
            f"{format_timestamp(record.occurred_at)}{expected}</small>",
            unsafe_allow_html=True,
        )
        if getattr(record, "attachment_ref", None):
            receipt_path = get_attachment_store().path_for(record.attachment_ref)
            if receipt_path is not None:
                with st.popover("🧾 Receipt"):
                    st.image(str(receipt_path))
            else:
                st.caption("🧾 Receipt file missing")

    with col2:
        if record.kind != RecordKind.EXPENSE and not is_settled(record):
            action = "Collect" if record.kind == RecordKind.RECEIVABLE else "Pay"
            if st.button(action, key=f"settle_{record.id}"):
                result = run_async(controller.settle_record(record.id))
                show_result(result, controller, "Settled.")

    with col3:
        if st.button("🗑", key=f"delete_{record.id}"):
            result = run_async(controller.delete_record(record.id))
            show_result(result, controller, "Deleted.")

    with st.expander("✏️ Edit"):
        render_edit_form(controller, record, symbol)


def render_edit_form(controller: LedgerController, record, symbol: str):
    """
    Edit an existing record in place.

    The record keeps its id, so the controller treats the save as an
    edit: the old impact is reverted and the new one applied.
    """
    kind = RecordKind(record.kind)
    options = list(categories_for(kind))
    if record.category not in options:
        options.append(record.category)

    with st.form(f"edit_{record.id}"):
        col1, col2 = st.columns(2)
        with col1:
            amount = st.number_input(
                f"Amount ({symbol}) *",
                min_value=0.0,
                step=1.0,
                format="%.2f",
                value=float(record.amount),
            )
            category = st.selectbox(
                "Category *",
                options=options,
                index=options.index(record.category),
                format_func=lambda c: c.title(),
            )
        with col2:
            occurred_on = st.date_input("Date *", value=record.occurred_at.date())
            updates = {}
            if kind != RecordKind.EXPENSE:
                updates["expected_date"] = st.date_input(
                    "Expected date (optional)", value=record.expected_date,
                )
                status_options = ["unsettled", "settled"]
                updates["status"] = st.selectbox(
                    "Status",
                    options=status_options,
                    index=status_options.index(record.status.value),
                    format_func=lambda s: s.title(),
                )
        description = st.text_area("Description (optional)", value=record.description)
        receipt = None
        remove_receipt = False
        if kind == RecordKind.EXPENSE:
            receipt = st.file_uploader(
                "Replace receipt image (optional)",
                type=["png", "jpg", "jpeg", "webp"],
            )
            if record.attachment_ref:
                remove_receipt = st.checkbox("Remove receipt")
        submitted = st.form_submit_button("💾 Save changes", type="primary")

    if not submitted:
        return
    if amount <= 0:
        st.error("Please enter an amount greater than zero")
        return

    updates.update(
        amount=Decimal(str(amount)),
        category=category,
        description=description,
        occurred_at=datetime.combine(occurred_on, record.occurred_at.time()),
    )
    if kind == RecordKind.EXPENSE:
        if receipt is not None:
            updates["attachment_ref"] = store_receipt(receipt) or record.attachment_ref
        elif remove_receipt:
            updates["attachment_ref"] = None

    # Rebuild through the model so the edited values are validated
    edited = type(record).model_validate({**record.model_dump(), **updates})
    result = run_async(controller.submit_record(edited))
    show_result(result, controller, "Updated.")


def render_settings_page(controller: LedgerController):
    """Render the settings page."""
    st.title("⚙️ Settings")

    preferences = controller.preferences

    st.markdown("### Display")

    codes = [currency.code for currency in SUPPORTED_CURRENCIES]
    names = {currency.code: f"{currency.name} ({currency.symbol})" for currency in SUPPORTED_CURRENCIES}
    code = st.selectbox(
        "Currency",
        options=codes,
        index=codes.index(preferences.currency.code),
        format_func=lambda c: names[c],
        help="Amounts are shown in this currency. They are not converted.",
    )
    if code != preferences.currency.code:
        run_async(controller.set_currency(code))
        st.rerun()

    dark_mode = st.toggle("Dark mode", value=preferences.dark_mode)
    if dark_mode != preferences.dark_mode:
        run_async(controller.toggle_dark_mode())
        st.rerun()

    st.caption(f"Example: {format_currency(Decimal('1234.5'), preferences.currency.symbol)}")

    st.markdown("---")
    st.markdown("### Configuration Status")

    status = validate_all_settings()
    for name, key in [("Storage", "storage"), ("Application", "app")]:
        if status.get(key, False):
            st.success(f"✅ {name} settings - OK")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} settings - {error}")

    if controller.last_persistence_error:
        st.markdown(f"""
        <div class="warning-box">
            <h4>⚠️ Saving is not working</h4>
            <p>{controller.last_persistence_error}</p>
        </div>
        """, unsafe_allow_html=True)

    st.markdown("---")
    st.markdown("### Danger zone")

    confirm = st.checkbox("I understand this deletes all my data")
    if st.button("🗑 Clear all data", disabled=not confirm):
        run_async(controller.clear_all())
        st.session_state.flash = [("success", "All data cleared.")]
        st.rerun()


if __name__ == "__main__":
    main()
