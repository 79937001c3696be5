from io import BytesIO
from typing import Iterable

from openpyxl import Workbook

from .schemas import AdmissionView


XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

EXPORT_COLUMNS = [
    ("Term", "term"),
    ("Academic Year", "academic_year"),
    ("Department", "department"),
    ("Program", "program"),
    ("Plan Code", "academic_plan_code"),
    ("Plan Description", "academic_plan_description"),
    ("Academic Career", "academic_career_description"),
    ("Admit Type", "admit_type_description"),
    ("Applied", "total_applied"),
    ("Admitted", "total_admitted"),
    ("Denied", "total_denied"),
    ("Gross Deposited", "total_gross_deposited"),
    ("Net Deposited", "total_net_deposited"),
]


def export_admissions_excel(views: Iterable[AdmissionView]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Admissions"
    ws.append([header for header, _ in EXPORT_COLUMNS])
    for view in views:
        ws.append([getattr(view, field) for _, field in EXPORT_COLUMNS])
    ws.freeze_panes = "A2"
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
