"""
NPPES NPI Registry lookups.

The registry is public and needs no key. Used for provider credential checks
and for finding pharmacies by name or location.
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass, field

from django.conf import settings

from telehealth_backend.core.exceptions import IntegrationError
from telehealth_backend.integrations.client import send_json

logger = logging.getLogger(__name__)

SERVICE = 'npi_registry'

PRESCRIBING_TAXONOMY_PREFIXES = ('207', '208', '363L', '363A', '364S', '367A', '174400000X')
PRESCRIBING_CREDENTIALS = ('MD', 'DO', 'NP', 'PA', 'PA-C', 'APRN', 'DNP', 'CNP', 'CNS', 'CNM')


@dataclass
class NpiResult:
    verified: bool
    npi_number: str
    first_name: str | None = None
    last_name: str | None = None
    credential: str | None = None
    taxonomy: str | None = None
    taxonomy_description: str | None = None
    state: str | None = None
    status: str | None = None
    organization_name: str | None = None
    address: str | None = None
    phone: str | None = None
    issues: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def _registry_url() -> str:
    return getattr(settings, 'NPI_REGISTRY_URL', 'https://npiregistry.cms.hhs.gov/api/')


def normalize_npi(value: str) -> str:
    return re.sub(r'\D', '', value or '')


def _names_match_first(expected: str, actual: str) -> bool:
    expected = expected.lower().strip()
    actual = actual.lower().strip()
    return actual == expected or actual.startswith(expected) or expected.startswith(actual)


def verify_npi(npi_number: str, *, expected_first_name: str | None = None, expected_last_name: str | None = None) -> NpiResult:
    npi = normalize_npi(npi_number)
    if len(npi) != 10:
        return NpiResult(verified=False, npi_number=npi_number, issues=['NPI numbers must be exactly 10 digits'])

    try:
        data = send_json(
            SERVICE,
            'GET',
            _registry_url(),
            params={'number': npi, 'version': '2.1'},
            headers={'Accept': 'application/json'},
        )
    except IntegrationError as e:
        return NpiResult(verified=False, npi_number=npi, issues=[e.message])

    results = data.get('results') or []
    if not results:
        return NpiResult(verified=False, npi_number=npi, issues=['NPI number not found in the national registry'])

    record = results[0]
    basic = record.get('basic') or {}
    taxonomies = record.get('taxonomies') or []
    addresses = record.get('addresses') or []
    issues: list[str] = []

    first_name = basic.get('first_name') or basic.get('authorized_official_first_name') or None
    last_name = basic.get('last_name') or basic.get('authorized_official_last_name') or None
    status = basic.get('status') or None

    primary = next((t for t in taxonomies if t.get('primary')), taxonomies[0] if taxonomies else {})
    practice = next(
        (a for a in addresses if a.get('address_purpose') == 'LOCATION'),
        addresses[0] if addresses else None,
    )

    address = None
    if practice:
        street = practice.get('address_1', '')
        if practice.get('address_2'):
            street = f"{street}, {practice['address_2']}"
        address = f"{street}, {practice.get('city', '')}, {practice.get('state', '')} {practice.get('postal_code', '')}"

    if status and status != 'A':
        issues.append(f'NPI status is "{status}", may not be active')

    deactivated = basic.get('deactivation_date')
    if deactivated:
        issues.append(f'NPI was deactivated on {deactivated}')

    if expected_first_name and first_name and not _names_match_first(expected_first_name, first_name):
        issues.append(f'First name mismatch: expected "{expected_first_name}", found "{first_name}"')

    if expected_last_name and last_name:
        if expected_last_name.lower().strip() != last_name.lower().strip():
            issues.append(f'Last name mismatch: expected "{expected_last_name}", found "{last_name}"')

    return NpiResult(
        verified=not issues,
        npi_number=npi,
        first_name=first_name,
        last_name=last_name,
        credential=basic.get('credential') or None,
        taxonomy=primary.get('code') or None,
        taxonomy_description=primary.get('desc') or None,
        state=primary.get('state') or (practice or {}).get('state') or None,
        status=status,
        organization_name=basic.get('organization_name') or None,
        address=address,
        phone=(practice or {}).get('telephone_number') or None,
        issues=issues,
    )


def check_prescribing_authority(npi_number: str) -> dict:
    """Verify the NPI and decide prescribing authority from taxonomy or credential."""
    result = verify_npi(npi_number)
    if not result.verified:
        return {
            'can_prescribe': False,
            'npi_result': result.to_dict(),
            'reason': f"NPI verification failed: {', '.join(result.issues)}",
        }

    by_taxonomy = bool(result.taxonomy) and any(
        result.taxonomy.startswith(prefix) for prefix in PRESCRIBING_TAXONOMY_PREFIXES
    )
    credential = (result.credential or '').upper()
    by_credential = bool(credential) and any(c in credential for c in PRESCRIBING_CREDENTIALS)
    can_prescribe = by_taxonomy or by_credential

    if can_prescribe:
        reason = f'{result.first_name} {result.last_name}, {result.credential}: prescribing authority confirmed'
    else:
        reason = f'Taxonomy "{result.taxonomy_description}" may not have independent prescribing authority'

    return {'can_prescribe': can_prescribe, 'npi_result': result.to_dict(), 'reason': reason}


def search_pharmacies(*, name=None, city=None, state=None, zip_code=None) -> list[dict]:
    params = {
        'version': '2.1',
        'enumeration_type': 'NPI-2',
        'taxonomy_description': 'Pharmacy',
        'limit': '20',
    }
    if name:
        params['organization_name'] = name
    if city:
        params['city'] = city
    if state:
        params['state'] = state
    if zip_code:
        params['postal_code'] = zip_code

    data = send_json(SERVICE, 'GET', _registry_url(), params=params)
    results = data.get('results') or []

    found = []
    for r in results:
        basic = r.get('basic') or {}
        addresses = r.get('addresses') or []
        primary = addresses[0] if addresses else {}
        practice = next((a for a in addresses if a.get('address_purpose') == 'LOCATION'), primary)
        found.append({
            'npi': str(r.get('number') or ''),
            'name': basic.get('organization_name') or basic.get('name') or 'Unknown',
            'address': {
                'street': primary.get('address_1', ''),
                'city': primary.get('city', ''),
                'state': primary.get('state', ''),
                'zip': (primary.get('postal_code') or '')[:5],
            },
            'phone': practice.get('telephone_number', ''),
            'fax': practice.get('fax_number', ''),
        })
    return found
