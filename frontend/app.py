"""
Screenshot Statement Extractor - Streamlit Frontend
Upload statement screenshots, review the extracted transactions and import them
"""

import streamlit as st
import pandas as pd
import sys
import logging
from pathlib import Path
from datetime import datetime

# Add backend to path
backend_path = Path(__file__).parent.parent / 'backend'
sys.path.insert(0, str(backend_path))

# Import backend modules
from config import config
from logging_config import setup_logging
from batch_processor import BatchOrchestrator, BatchProcessingError, UploadedImage
from extractors.models import ParsedTransaction, PeriodSpec
from ocr.ocr_engine import TesseractOCREngine
from output.import_writer import TransactionImportClient, ImportSubmissionError
from validators.transaction_validator import TransactionValidator

# Setup logging with DEBUG level to see extraction details
setup_logging(log_level="DEBUG")
logger = logging.getLogger(__name__)

MONTH_LABELS = [datetime(2000, month, 1).strftime("%B") for month in range(1, 13)]

EDITOR_COLUMNS = [
    "id", "date", "amount", "description", "category", "payment_method",
    "paid_by", "source_file", "error",
]

# Page configuration
st.set_page_config(
    page_title="Screenshot Statement Extractor",
    page_icon="📸",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS
st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        color: #ef8145;
        margin-bottom: 0.5rem;
    }
    .sub-header {
        font-size: 1.2rem;
        color: #808183;
        margin-bottom: 2rem;
    }
    .success-box {
        background-color: #e8e0dc;
        border: 1px solid #ef8145;
        color: #ef8145;
        padding: 1rem;
        border-radius: 0.5rem;
        margin: 1rem 0;
    }
</style>
""", unsafe_allow_html=True)

# Initialize session state
if 'processed' not in st.session_state:
    st.session_state.processed = False
if 'results' not in st.session_state:
    st.session_state.results = None


def main():
    """Main application function."""

    # Header
    st.markdown('<div class="main-header">📸 Screenshot Statement Extractor</div>', unsafe_allow_html=True)
    st.markdown('<div class="sub-header">Turn bank and credit-card statement screenshots into reviewable transactions</div>', unsafe_allow_html=True)

    # Sidebar - Input Configuration
    with st.sidebar:
        st.header("📋 Configuration")

        # File upload
        st.subheader("1. Upload Screenshots")
        uploaded_files = st.file_uploader(
            "Choose statement screenshot(s)",
            type=[ext.lstrip('.') for ext in config.ALLOWED_FILE_TYPES],
            accept_multiple_files=True,
            help="Screenshots are processed one at a time, in upload order"
        )

        st.divider()

        # Period
        st.subheader("2. Period")
        year = st.number_input("Year", min_value=1900, max_value=2100, value=datetime.now().year, step=1)
        period_type = st.radio("Period type", ["month", "quarter", "year"], horizontal=True)

        period_value = None
        if period_type == "month":
            month_label = st.selectbox("Month", MONTH_LABELS, index=datetime.now().month - 1)
            period_value = MONTH_LABELS.index(month_label) + 1
        elif period_type == "quarter":
            period_value = st.selectbox("Quarter", [1, 2, 3, 4], format_func=lambda q: f"Q{q}")

        st.divider()

        # Payment method
        st.subheader("3. Payment Method")
        payment_method = st.selectbox(
            "Applied to every transaction",
            config.PAYMENT_METHODS,
            index=config.PAYMENT_METHODS.index(config.DEFAULT_PAYMENT_METHOD)
            if config.DEFAULT_PAYMENT_METHOD in config.PAYMENT_METHODS else 0
        )

        st.divider()

        # Process button
        process_btn = st.button(
            "🚀 Process Screenshots",
            type="primary",
            use_container_width=True,
            disabled=not uploaded_files
        )

    # Main content area
    if not uploaded_files and not st.session_state.processed:
        # Welcome screen
        st.info("👈 Upload one or more screenshots from the sidebar to get started")

        st.subheader("How it works:")
        col1, col2, col3 = st.columns(3)

        with col1:
            st.markdown("### 📤 Step 1")
            st.write("Upload screenshots of your bank or credit-card activity")

        with col2:
            st.markdown("### 🔍 Step 2")
            st.write("Review and correct the transactions read from each screenshot")

        with col3:
            st.markdown("### 📥 Step 3")
            st.write("Import the reviewed transactions into your finance app")

    # Process the screenshots
    if process_btn and uploaded_files:
        process_screenshots(uploaded_files, int(year), PeriodSpec(period_type, period_value), payment_method)

    # Display results if available
    if st.session_state.processed and st.session_state.results:
        display_review()


def process_screenshots(uploaded_files, year: int, period: PeriodSpec, payment_method: str):
    """Run the batch pipeline over the uploaded screenshots."""

    uploads = [UploadedImage(filename=f.name, data=f.getvalue()) for f in uploaded_files]
    progress_bar = st.progress(0, text="Starting...")

    def on_progress(current: int, total: int, filename: str):
        progress_bar.progress(int(100 * (current - 1) / total), text=f"Reading {filename} ({current}/{total})...")

    orchestrator = BatchOrchestrator(ocr_engine=TesseractOCREngine())

    try:
        with st.spinner(f"Processing {len(uploads)} screenshot(s)..."):
            result = orchestrator.process(
                uploads, year, period,
                payment_method=payment_method,
                progress_callback=on_progress
            )
    except BatchProcessingError as e:
        progress_bar.empty()
        st.error("❌ No transactions could be extracted")
        for warning in e.warnings:
            st.warning(f"⚠️ {warning}")
        return
    except Exception as e:
        progress_bar.empty()
        st.error(f"❌ Error processing screenshots: {str(e)}")
        st.exception(e)
        return

    progress_bar.progress(100, text="Complete!")

    # Store results
    st.session_state.processed = True
    st.session_state.results = {
        'year': year,
        'period': period,
        'transactions': [txn.to_dict() for txn in result.transactions],
        'warnings': result.warnings,
        'raw_texts': result.raw_texts,
        'files_processed': result.files_processed,
        'files_failed': result.files_failed,
    }

    st.success("✅ Processing complete!")
    st.rerun()


def transactions_to_frame(records: list[dict]) -> pd.DataFrame:
    """Transaction dicts to the editor's table."""
    return pd.DataFrame(records, columns=EDITOR_COLUMNS)


def frame_to_transactions(frame: pd.DataFrame, year: int, period: PeriodSpec) -> list[ParsedTransaction]:
    """Edited table rows back to transactions, re-stamped with the batch period."""
    cleaned = frame.astype(object).where(frame.notna(), None)
    transactions = []
    for record in cleaned.to_dict(orient="records"):
        txn = ParsedTransaction.from_dict(record)
        txn.year = year
        txn.month = period.month
        txn.quarter = period.quarter
        transactions.append(txn)
    return transactions


def display_review():
    """Display extracted transactions for review, validation and import."""

    results = st.session_state.results

    st.markdown(
        f'<div class="success-box">✅ Found {len(results["transactions"])} transactions '
        f'in {results["files_processed"]} screenshot(s)</div>',
        unsafe_allow_html=True
    )

    # Metrics
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Transactions", len(results['transactions']))
    with col2:
        st.metric("Screenshots Read", results['files_processed'])
    with col3:
        st.metric("Screenshots Failed", results['files_failed'])

    for warning in results['warnings']:
        st.warning(f"⚠️ {warning}")

    st.divider()

    # Review table
    st.subheader("📝 Review Transactions")
    st.caption("Edit any cell, delete rows you do not want to import, then validate and import.")

    edited = st.data_editor(
        transactions_to_frame(results['transactions']),
        num_rows="dynamic",
        use_container_width=True,
        hide_index=True,
        column_config={
            "id": None,
            "date": st.column_config.TextColumn("Date", help="YYYY-MM-DD"),
            "amount": st.column_config.TextColumn("Amount"),
            "description": st.column_config.TextColumn("Description", width="large"),
            "category": st.column_config.TextColumn("Category"),
            "payment_method": st.column_config.SelectboxColumn("Payment Method", options=config.PAYMENT_METHODS),
            "paid_by": st.column_config.TextColumn("Paid By"),
            "source_file": st.column_config.TextColumn("Screenshot", disabled=True),
            "error": st.column_config.TextColumn("Error", disabled=True),
        },
        key="review_editor"
    )

    transactions = frame_to_transactions(edited, results['year'], results['period'])

    col1, col2, col3 = st.columns(3)
    with col1:
        validate_btn = st.button("✔️ Validate", use_container_width=True)
    with col2:
        import_btn = st.button("📥 Import Transactions", type="primary", use_container_width=True,
                               disabled=not transactions)
    with col3:
        reset_btn = st.button("🔄 Process More Screenshots", use_container_width=True)

    if validate_btn:
        validate_review(transactions)

    if import_btn:
        submit_import(transactions)

    if reset_btn:
        st.session_state.processed = False
        st.session_state.results = None
        st.rerun()

    # Raw OCR text for debugging
    with st.expander("🔎 Raw OCR text", expanded=False):
        for filename, text in results['raw_texts'].items():
            st.markdown(f"**{filename}**")
            st.code(text or "(no text recognized)")


def _validator() -> TransactionValidator:
    return TransactionValidator(
        allow_zero_amounts=config.ALLOW_ZERO_AMOUNTS,
        min_description_length=config.MIN_DESCRIPTION_LENGTH
    )


def validate_review(transactions: list[ParsedTransaction]) -> bool:
    """Validate edited rows and write the errors back into the table."""
    valid = _validator().validate_transactions(transactions)
    st.session_state.results['transactions'] = [txn.to_dict() for txn in transactions]

    if len(valid) == len(transactions):
        st.success(f"✅ All {len(transactions)} transactions are valid")
        return True

    st.error(f"❌ {len(transactions) - len(valid)} transaction(s) need attention")
    st.session_state.pop("review_editor", None)
    st.rerun()
    return False


def submit_import(transactions: list[ParsedTransaction]):
    """Validate, then send the reviewed transactions to the import API."""
    if not validate_review(transactions):
        return

    try:
        with st.spinner(f"Importing {len(transactions)} transactions..."):
            count = TransactionImportClient().submit(transactions)
    except ImportSubmissionError as e:
        st.error(f"❌ Import failed: {str(e)}")
        return

    st.success(f"✅ Successfully imported {count} transactions!")
    st.session_state.processed = False
    st.session_state.results = None


if __name__ == "__main__":
    main()
