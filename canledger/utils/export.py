"""
Export utilities for generating Excel and CSV bill summaries
"""

import csv
import io
from io import BytesIO
from datetime import datetime

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter


BILL_COLUMNS = {
    'customer_id': 'Customer ID',
    'name': 'Customer',
    'phone_number': 'Phone',
    'customer_type': 'Type',
    'total_cans_delivered': 'Cans Delivered',
    'total_delivery_days': 'Delivery Days',
    'price_per_can': 'Price / Can',
    'bill_amount': 'Bill Amount',
    'paid_status': 'Paid',
    'sent_status': 'Sent',
}


def export_to_excel(rows, columns, title="Report", sheet_name="Data"):
    """
    Export rows to an Excel workbook

    Args:
        rows: List of dictionaries
        columns: Dict mapping row keys to header labels
        title: Title written above the table
        sheet_name: Name of the worksheet

    Returns:
        BytesIO object containing the .xlsx file
    """
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name

    header_font = Font(bold=True, color="FFFFFF", size=11)
    header_fill = PatternFill(start_color="1E3A8A", end_color="1E3A8A", fill_type="solid")
    thin = Side(style='thin')
    border = Border(left=thin, right=thin, top=thin, bottom=thin)

    keys = list(columns.keys())

    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(keys))
    title_cell = ws.cell(row=1, column=1, value=title)
    title_cell.font = Font(bold=True, size=14)
    title_cell.alignment = Alignment(horizontal='center')

    ws.merge_cells(start_row=2, start_column=1, end_row=2, end_column=len(keys))
    stamp = ws.cell(row=2, column=1, value=f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    stamp.font = Font(italic=True, size=10, color="666666")
    stamp.alignment = Alignment(horizontal='center')

    header_row = 4
    for col_idx, key in enumerate(keys, 1):
        cell = ws.cell(row=header_row, column=col_idx, value=columns[key])
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal='center')
        cell.border = border

    for row_idx, row in enumerate(rows, header_row + 1):
        for col_idx, key in enumerate(keys, 1):
            value = row.get(key, '')
            if isinstance(value, bool):
                value = 'Yes' if value else 'No'
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            cell.border = border
            if isinstance(value, (int, float)):
                cell.alignment = Alignment(horizontal='right')

    for col_idx, key in enumerate(keys, 1):
        width = max([len(str(columns[key]))] + [len(str(row.get(key, ''))) for row in rows])
        ws.column_dimensions[get_column_letter(col_idx)].width = min(width + 2, 50)

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output


def export_to_csv(rows, columns):
    """
    Export rows to CSV

    Returns:
        BytesIO object containing UTF-8 (with BOM) CSV
    """
    text_output = io.StringIO()
    writer = csv.writer(text_output)
    writer.writerow(list(columns.values()))
    for row in rows:
        writer.writerow([row.get(key, '') for key in columns])

    output = BytesIO()
    output.write(text_output.getvalue().encode('utf-8-sig'))  # BOM for Excel compatibility
    output.seek(0)
    return output


def export_monthly_bills(bills, month, format_type='excel'):
    """
    Export the monthly bill summary

    Args:
        bills: Rows from billing_service.monthly_bills
        month: YYYY-MM
        format_type: 'excel' or 'csv'

    Returns:
        tuple: (BytesIO, filename, mimetype)
    """
    if format_type == 'csv':
        return (
            export_to_csv(bills, BILL_COLUMNS),
            f'monthly_bills_{month}.csv',
            'text/csv',
        )
    return (
        export_to_excel(bills, BILL_COLUMNS, title=f'Monthly Bills {month}', sheet_name=month),
        f'monthly_bills_{month}.xlsx',
        'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    )
