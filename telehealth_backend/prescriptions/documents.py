"""Plain-text prescription document sent by fax."""

from django.utils import timezone


def _fmt_date(value) -> str:
    if value is None:
        return '-'
    return timezone.localtime(value).strftime('%Y-%m-%d')


def render_prescription(rx) -> str:
    patient = rx.patient
    provider = rx.provider
    pharmacy = rx.pharmacy

    lines = [
        'PRESCRIPTION',
        '=' * 60,
        f'Rx #: {rx.pk}',
        f'Date written: {_fmt_date(rx.created_at)}',
        f'Expires: {_fmt_date(rx.expires_at)}',
        '',
        'PRESCRIBER',
        f'  {provider.display_name}',
        f'  NPI: {provider.npi_number}',
    ]
    if provider.dea_number:
        lines.append(f'  DEA: {provider.dea_number}')

    lines += [
        '',
        'PATIENT',
        f'  {patient.display_name or patient.email}',
        f'  DOB: {patient.date_of_birth.isoformat() if patient.date_of_birth else "-"}',
    ]
    address = ', '.join(p for p in (patient.street, patient.city, patient.state, patient.zip_code) if p)
    if address:
        lines.append(f'  {address}')

    lines += [
        '',
        'MEDICATION',
        f'  {rx.medication_name} {rx.dosage} {rx.form}',
    ]
    if rx.generic_name:
        lines.append(f'  Generic: {rx.generic_name}')
    if rx.ndc:
        lines.append(f'  NDC: {rx.ndc}')
    lines += [
        f'  Quantity: {rx.quantity}  Days supply: {rx.days_supply}',
        f'  Refills authorized: {rx.refills_authorized}',
        f'  Sig: {rx.directions}',
    ]
    if rx.dea_schedule:
        lines.append(f'  DEA schedule: {rx.dea_schedule}')

    if pharmacy is not None:
        lines += [
            '',
            'PHARMACY',
            f'  {pharmacy.name}',
            f'  Fax: {pharmacy.fax or "-"}  Phone: {pharmacy.phone or "-"}',
        ]

    lines += ['', '=' * 60, f'Electronically signed by {provider.display_name}']
    return '\n'.join(lines) + '\n'
