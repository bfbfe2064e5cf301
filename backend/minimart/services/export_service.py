"""
Export Service - transaction sheets for the back-office

Builds one flat table of transactions (with buyer and product names) and
writes it as CSV or as a styled Excel workbook.
"""
import csv
import io
import logging
from datetime import date
from typing import List, Optional

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from minimart.core.config import settings
from minimart.domain.transaction import Transaction

logger = logging.getLogger(__name__)


EXPORT_COLUMNS = [
    "Transaction ID",
    "Date",
    "Buyer Name",
    "Buyer Email",
    "Product Name",
    "Category",
    "Quantity",
    "Unit Price",
    "Total Amount",
    "Status",
    "Payment Method",
]

MONEY_COLUMNS = ("Unit Price", "Total Amount")


def build_transactions_frame(transactions: List[Transaction]) -> pd.DataFrame:
    """One row per transaction; missing joins are shown as N/A"""
    records = []
    for transaction in transactions:
        buyer = transaction.buyer
        product = transaction.product
        when = transaction.created_at or transaction.transaction_date
        records.append({
            "Transaction ID": transaction.id,
            "Date": when.date().isoformat() if when else "N/A",
            "Buyer Name": (buyer.full_name if buyer else None) or "N/A",
            "Buyer Email": (buyer.email if buyer else None) or "N/A",
            "Product Name": (product.name if product else None) or "N/A",
            "Category": (product.category if product else None) or "N/A",
            "Quantity": transaction.quantity,
            "Unit Price": float(transaction.unit_price),
            "Total Amount": float(transaction.total_amount),
            "Status": transaction.status,
            "Payment Method": transaction.payment_method or "N/A",
        })
    return pd.DataFrame(records, columns=EXPORT_COLUMNS)


def export_filename(extension: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"transactions_{today.isoformat()}.{extension}"


def export_transactions_csv(transactions: List[Transaction]) -> str:
    """CSV text with every cell quoted and money formatted with the currency symbol"""
    df = build_transactions_frame(transactions)
    for column in MONEY_COLUMNS:
        df[column] = df[column].map(lambda amount: f"{settings.CURRENCY_SYMBOL}{amount:.2f}")
    logger.info(f"Exporting {len(df)} transactions to CSV")
    return df.to_csv(index=False, quoting=csv.QUOTE_ALL)


def export_transactions_xlsx(transactions: List[Transaction]) -> io.BytesIO:
    """Excel workbook with a styled, frozen header row"""
    df = build_transactions_frame(transactions)

    wb = Workbook()
    ws = wb.active
    ws.title = "Transactions"

    # Define styles
    header_fill = PatternFill(start_color="2563EB", end_color="2563EB", fill_type="solid")
    header_font = Font(color="FFFFFF", bold=True, size=12)
    border = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    for col_num, header in enumerate(EXPORT_COLUMNS, 1):
        cell = ws.cell(row=1, column=col_num, value=header)
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal='center', vertical='center')
        cell.border = border

    money_indexes = {EXPORT_COLUMNS.index(column) + 1 for column in MONEY_COLUMNS}
    for row_num, values in enumerate(df.itertuples(index=False), 2):
        for col_num, value in enumerate(values, 1):
            cell = ws.cell(row=row_num, column=col_num, value=value)
            cell.border = border
            if col_num in money_indexes:
                cell.alignment = Alignment(horizontal='right', vertical='center')
                cell.number_format = '#,##0.00'

    for col_num, header in enumerate(EXPORT_COLUMNS, 1):
        ws.column_dimensions[ws.cell(row=1, column=col_num).column_letter].width = max(14, len(header) + 4)

    ws.freeze_panes = 'A2'

    excel_file = io.BytesIO()
    wb.save(excel_file)
    excel_file.seek(0)

    logger.info(f"Exporting {len(df)} transactions to Excel")
    return excel_file
