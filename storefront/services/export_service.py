"""
storefront/services/export_service.py

Purpose: Users spreadsheet export

- One row per user: id, phone, balance, invitation code, product names
- Passwords are never exported
- Read-only projection of the store
"""

from io import BytesIO
from typing import Iterable

from openpyxl import Workbook
from openpyxl.styles import Font

from storefront.models.user import UserRecord

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
NO_PURCHASES = "None"
BALANCE_FORMAT = '"₹"#,##0.00'

# (header, column width)
COLUMNS = [
    ("ID", 10),
    ("Phone Number", 20),
    ("Balance", 15),
    ("Invitation Code", 20),
    ("Purchased Products", 50),
]


def user_row(user: UserRecord) -> list:
    names = user.product_names()
    return [
        user.id,
        user.phone_number,
        float(user.balance),
        user.invitation_code,
        ", ".join(names) if names else NO_PURCHASES,
    ]


def build_users_workbook(users: Iterable[UserRecord]) -> Workbook:
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = "Users"

    worksheet.append([header for header, _ in COLUMNS])
    for index, (_, width) in enumerate(COLUMNS, start=1):
        worksheet.column_dimensions[worksheet.cell(row=1, column=index).column_letter].width = width

    for user in users:
        worksheet.append(user_row(user))

    for cell in worksheet[1]:
        cell.font = Font(bold=True)
    for (cell,) in worksheet.iter_rows(min_row=2, min_col=3, max_col=3):
        cell.number_format = BALANCE_FORMAT

    return workbook


def export_users_xlsx(users: Iterable[UserRecord]) -> bytes:
    """
    Renders the users spreadsheet to .xlsx bytes.
    """
    buffer = BytesIO()
    build_users_workbook(users).save(buffer)
    return buffer.getvalue()
