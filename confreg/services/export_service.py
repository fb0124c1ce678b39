from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font

from confreg.models.registration import Registration
from confreg.utils.datetime_utils import format_local_datetime

HEADERS = [
    'Invoice', 'Status', 'Total', 'Registrants', 'Primary', 'Full name',
    'Saint name', 'Gender', 'Age group', 'Province', 'Diocese', 'Shirt size',
    'Second day only', 'Team', 'Checked in', 'Checked in at', 'Owner email',
    'Created at',
]

COLUMN_WIDTHS = {
    'A': 22, 'B': 16, 'C': 10, 'D': 12, 'E': 9, 'F': 30, 'G': 18, 'H': 9,
    'I': 11, 'J': 16, 'K': 18, 'L': 10, 'M': 15, 'N': 18, 'O': 11, 'P': 20,
    'Q': 30, 'R': 20,
}


def export_registrations(status=None):
    """Workbook bytes with one row per registrant of each matching registration."""
    query = Registration.query
    if status:
        query = query.filter(Registration.status == status)
    registrations = query.order_by(Registration.created_at).all()

    wb = Workbook()
    ws = wb.active
    ws.title = "Registrations"
    ws.append(HEADERS)
    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal='center')

    for registration in registrations:
        owner_email = registration.user.email if registration.user else ''
        for registrant in registration.registrants:
            ws.append([
                registration.invoice_code,
                registration.status,
                registration.total_amount,
                registration.participant_count,
                'Yes' if registrant.is_primary else 'No',
                registrant.full_name,
                registrant.saint_name or '',
                registrant.gender,
                registrant.age_group,
                registrant.province or '',
                registrant.diocese or '',
                registrant.shirt_size,
                'Yes' if registrant.second_day_only else 'No',
                registrant.event_team.name if registrant.event_team else '',
                'Yes' if registrant.is_checked_in else 'No',
                format_local_datetime(registrant.checked_in_at),
                owner_email,
                format_local_datetime(registration.created_at),
            ])

    for column, width in COLUMN_WIDTHS.items():
        ws.column_dimensions[column].width = width

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output.getvalue()
