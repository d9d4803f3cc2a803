"""PDF rendering for monthly reports and member invoices (reportlab)."""
import io
from collections import Counter
from typing import List, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from app.schemas.summary import InvoiceResponse
from app.services.billing import MonthlyReconciliation

_STYLES = getSampleStyleSheet()

_TABLE_STYLE = TableStyle([
    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2f4858")),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("FONTSIZE", (0, 0), (-1, -1), 8),
    ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f2f2f2")]),
    ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
])


def _money(value: float) -> str:
    return f"{value:,.2f}"


def _table(rows: List[list]) -> Table:
    table = Table(rows, repeatRows=1)
    table.setStyle(_TABLE_STYLE)
    return table


def _heading(text: str) -> Paragraph:
    return Paragraph(text, _STYLES["Heading2"])


def _build(story: list, pagesize=A4) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=pagesize,
        leftMargin=12 * mm,
        rightMargin=12 * mm,
        topMargin=12 * mm,
        bottomMargin=12 * mm,
    )
    doc.build(story)
    return buffer.getvalue()


def render_monthly_report(reconciliation: MonthlyReconciliation, managers: Sequence[str] = ()) -> bytes:
    """Full month report: per-head bills, meal charge and the member ledger."""
    per_head = reconciliation.per_head
    charge = reconciliation.meal_charge

    story = [
        Paragraph(f"Mess Report - {reconciliation.month}", _STYLES["Title"]),
        Paragraph(f"Managers: {escape(', '.join(managers)) if managers else '-'}", _STYLES["Normal"]),
        Paragraph(f"Minimum billed meals per member: {reconciliation.min_meals}", _STYLES["Normal"]),
        Spacer(1, 6 * mm),
        _heading("Per-head bills"),
    ]

    bill_rows = [["Bill", "Amount"]]
    bill_rows += [[name, _money(amount)] for name, amount in per_head.bills.items()]
    bill_rows.append(["Total", _money(per_head.total_amount)])
    bill_rows.append([f"Per head ({per_head.member_count} members)", _money(per_head.per_head_amount)])
    story += [_table(bill_rows), Spacer(1, 6 * mm), _heading("Meal charge")]

    story.append(_table([
        ["Market", "Rice", "Guest adjustment", "Total meals", "Meal charge"],
        [
            _money(charge.total_market),
            _money(charge.rice),
            _money(charge.guest_adjustment),
            str(charge.total_meals),
            _money(charge.meal_charge),
        ],
    ]))
    story += [Spacer(1, 6 * mm), _heading("Members")]

    member_rows = [[
        "Name", "Meals", "Charge", "Meal cost", "Fixed", "Guest",
        "Market", "Deposit", "Total", "Balance",
    ]]
    for row in reconciliation.members:
        meals = f"{row.meals}*" if row.is_below_minimum else str(row.meals)
        member_rows.append([
            row.name,
            meals,
            _money(row.meal_charge),
            _money(row.meal_cost),
            _money(row.fixed_cost),
            _money(row.guest_cost),
            _money(row.market_contribution),
            _money(row.deposit),
            _money(row.total),
            _money(row.balance),
        ])
    totals = reconciliation.totals
    member_rows.append([
        "Total", "", "", _money(totals.total_meal_cost), "", "", "",
        _money(totals.total_deposit), "", _money(totals.total_balance),
    ])
    story.append(_table(member_rows))
    story.append(Paragraph(
        f"* below the monthly minimum, billed as {reconciliation.min_meals} meals. "
        "Positive balance is owed to the mess, negative is owed to the member.",
        _STYLES["Italic"],
    ))

    return _build(story, pagesize=landscape(A4))


def render_member_invoice(invoice: InvoiceResponse) -> bytes:
    member = invoice.member
    story = [
        Paragraph(f"Invoice - {invoice.month}", _STYLES["Title"]),
        Paragraph(f"Member: {escape(member.name)} ({escape(member.user_id)})", _STYLES["Normal"]),
        Paragraph(f"Members in mess: {invoice.total_members}", _STYLES["Normal"]),
        Paragraph(f"Managers: {escape(', '.join(invoice.managers)) if invoice.managers else '-'}", _STYLES["Normal"]),
        Spacer(1, 6 * mm),
        _heading("Expenses"),
    ]

    expense_rows = [["Date", "Description", "Category", "Status", "Amount"]]
    expense_rows += [
        [e.date, e.description, e.category, e.status, _money(e.amount)]
        for e in invoice.member_expenses
    ]
    expense_rows.append(["", "Total", "", "", _money(sum(e.amount for e in invoice.member_expenses))])
    story += [_table(expense_rows), Spacer(1, 6 * mm), _heading("Meals")]

    meal_types = Counter(m.meal_type for m in invoice.regular_meals)
    meal_rows = [["Meal", "Count"]]
    meal_rows += [[meal_type, str(count)] for meal_type, count in sorted(meal_types.items())]
    meal_rows.append(["Total", str(len(invoice.regular_meals))])
    story += [_table(meal_rows), Spacer(1, 6 * mm), _heading("Guest meals")]

    guest_rows = [["Date", "Type", "Time"]]
    guest_rows += [[g.date, g.guest_meal_type, g.meal_time] for g in invoice.guest_meals]
    story += [_table(guest_rows), Spacer(1, 6 * mm), _heading("Payment")]

    payment = invoice.payment
    if payment is None:
        story.append(Paragraph("No payment recorded. Status: pending", _STYLES["Normal"]))
    else:
        story.append(_table([
            ["Balance", "Submitted", "Received", "Deposit date", "Status"],
            [
                _money(payment.deposit_balance),
                _money(payment.submitted_amount),
                _money(payment.received_amount),
                payment.deposit_date or "-",
                payment.payment_status,
            ],
        ]))
        if payment.note:
            story.append(Paragraph(f"Note: {escape(payment.note)}", _STYLES["Normal"]))

    return _build(story)
