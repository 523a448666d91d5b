"""
PDF Generation Utilities
Functions for generating order receipts and monthly ledger cards
"""

from datetime import datetime
from io import BytesIO
from flask import current_app
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, A5
from reportlab.lib.units import mm
from reportlab.platypus import Table, TableStyle
from reportlab.pdfgen import canvas

LEDGER_ROWS = 16


def _business_header(pdf, width, y):
    """Draw the business name/address/phone block, return the next y"""
    pdf.setFont("Helvetica-Bold", 16)
    pdf.setFillColor(colors.HexColor('#1E3A8A'))
    pdf.drawCentredString(width / 2, y, current_app.config.get('BUSINESS_NAME', ''))
    pdf.setFillColor(colors.black)

    y -= 16
    pdf.setFont("Helvetica", 9)
    pdf.drawCentredString(width / 2, y, current_app.config.get('BUSINESS_ADDRESS', ''))

    phone = current_app.config.get('BUSINESS_PHONE', '')
    if phone:
        y -= 12
        pdf.drawCentredString(width / 2, y, f"Phone: {phone}")

    y -= 12
    pdf.line(30, y, width - 30, y)
    return y


def generate_order_receipt_pdf(order, price_per_can):
    """
    Generate a PDF receipt for a one-off order

    Args:
        order: Order object
        price_per_can: Decimal unit price for orders

    Returns:
        BytesIO: PDF document
    """
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A5)
    width, height = A5
    symbol = current_app.config.get('CURRENCY_SYMBOL', 'Rs.')

    y = _business_header(pdf, width, height - 40)

    y -= 24
    pdf.setFont("Helvetica-Bold", 13)
    pdf.drawString(30, y, "ORDER RECEIPT")

    y -= 20
    pdf.setFont("Helvetica", 9)
    pdf.drawString(30, y, f"Order #: {order.id}")
    pdf.drawRightString(width - 30, y, f"Order Date: {order.order_date.isoformat()}")

    y -= 14
    pdf.drawString(30, y, f"Customer: {order.customer_name}")
    pdf.drawRightString(width - 30, y, f"Phone: {order.customer_phone}")

    y -= 14
    address = order.customer_address or ''
    if len(address) > 70:
        address = address[:67] + "..."
    pdf.drawString(30, y, f"Address: {address}")

    y -= 14
    pdf.drawString(30, y, f"Delivery: {order.delivery_date.isoformat()} {order.delivery_time}")
    pdf.drawRightString(width - 30, y, f"Status: {order.order_status.title()}")

    cans_amount = price_per_can * order.can_qty
    delivery_amount = order.delivery_amount or 0
    total = cans_amount + delivery_amount

    table = Table([
        ['Description', 'Qty', 'Rate', 'Amount'],
        ['Water cans', str(order.can_qty), f"{symbol} {float(price_per_can):,.2f}",
         f"{symbol} {float(cans_amount):,.2f}"],
        ['Delivery charge', '', '', f"{symbol} {float(delivery_amount):,.2f}"],
        ['TOTAL', '', '', f"{symbol} {float(total):,.2f}"],
    ], colWidths=[(width - 60) * r for r in (0.4, 0.15, 0.2, 0.25)])
    table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.black),
        ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#E5E7EB')),
    ]))
    _, table_height = table.wrapOn(pdf, width - 60, y)
    y -= 20 + table_height
    table.drawOn(pdf, 30, y)

    if order.collected_qty:
        y -= 18
        pdf.setFont("Helvetica", 9)
        collected_on = order.collection_date.isoformat() if order.collection_date else '-'
        pdf.drawString(30, y, f"Cans collected: {order.collected_qty} on {collected_on}")

    if order.notes:
        y -= 14
        pdf.drawString(30, y, f"Notes: {order.notes[:80]}")

    pdf.setFont("Helvetica-Oblique", 8)
    pdf.drawCentredString(width / 2, 30, "Thank you for your business!")

    pdf.save()
    buffer.seek(0)
    return buffer


def generate_ledger_pdf(customer, month_label, entries, price_per_can, paid_status=False):
    """
    Generate the monthly ledger card for a customer

    The card shows delivered quantities in a 2 x 16 grid (days 1-16 on the
    left, 17-32 on the right), the month's total cans and amount, and the
    payment status.

    Args:
        customer: Customer object
        month_label: Display label such as 'May 2024'
        entries: DailyUpdate rows of the month, ascending by date
        price_per_can: Decimal unit price for the customer's type
        paid_status: Whether the bill for the month is paid

    Returns:
        BytesIO: PDF document
    """
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4
    symbol = current_app.config.get('CURRENCY_SYMBOL', 'Rs.')

    y = _business_header(pdf, width, height - 50)

    y -= 18
    pdf.setFont("Helvetica", 10)
    pdf.drawString(30, y, f"Mobile: {customer.phone_number}")
    pdf.drawRightString(width - 30, y, f"Month: {month_label}")
    y -= 14
    pdf.drawString(30, y, f"Customer: {customer.name}")

    data = [['No.', 'Cans', 'Returned', 'No.', 'Cans', 'Returned']]
    for i in range(LEDGER_ROWS):
        left = entries[i] if i < len(entries) else None
        right = entries[i + LEDGER_ROWS] if i + LEDGER_ROWS < len(entries) else None
        data.append([
            str(i + 1), str(left.delivered_qty) if left else '', str(left.collected_qty) if left else '',
            str(i + LEDGER_ROWS + 1), str(right.delivered_qty) if right else '',
            str(right.collected_qty) if right else '',
        ])

    col = (width - 60) / 6
    table = Table(data, colWidths=[col] * 6, rowHeights=[7 * mm] * len(data))
    table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.black),
        ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
    ]))
    _, table_height = table.wrapOn(pdf, width - 60, y)
    y -= 20 + table_height
    table.drawOn(pdf, 30, y)

    total_cans = sum(entry.delivered_qty for entry in entries)
    total_amount = price_per_can * total_cans

    y -= 24
    pdf.setFont("Helvetica-Bold", 11)
    pdf.drawRightString(width - 30, y, f"Total cans: {total_cans}")
    y -= 15
    pdf.drawRightString(width - 30, y, f"Total amount: {symbol} {float(total_amount):,.2f}")
    y -= 15
    pdf.setFillColor(colors.green if paid_status else colors.red)
    pdf.drawRightString(width - 30, y, f"Status: {'Paid' if paid_status else 'Unpaid'}")
    pdf.setFillColor(colors.black)

    pdf.setFont("Helvetica-Oblique", 8)
    pdf.drawString(30, 50, f"Generated {datetime.now().strftime('%Y-%m-%d %H:%M')}")

    pdf.save()
    buffer.seek(0)
    return buffer
