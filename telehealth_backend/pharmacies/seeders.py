from django.db import transaction

from .models import Pharmacy

SEED_PHARMACIES = [
    {
        "name": "Main Street Pharmacy",
        "npi_number": "1003000126",
        "street": "100 Main St",
        "city": "Orlando",
        "state": "FL",
        "zip_code": "32801",
        "phone": "4075550100",
        "fax": "4075550101",
        "email": "pharmacy.main@seed.local",
        "type": Pharmacy.TYPE_RETAIL,
        "accepts_e_prescribe": True,
        "tier": 1,
    },
    {
        "name": "Lone Star Compounding",
        "npi_number": "1003000134",
        "street": "22 Congress Ave",
        "city": "Austin",
        "state": "TX",
        "zip_code": "78701",
        "phone": "5125550100",
        "fax": "5125550101",
        "type": Pharmacy.TYPE_COMPOUNDING,
        "accepts_e_prescribe": False,
        "tier": 2,
    },
]


def seed_pharmacies(flush: bool = False) -> dict:
    with transaction.atomic():
        if flush:
            Pharmacy.objects.filter(npi_number__in=[p["npi_number"] for p in SEED_PHARMACIES]).delete()

        pharmacies = []
        for data in SEED_PHARMACIES:
            fields = dict(data)
            npi = fields.pop("npi_number")
            pharmacy, _created = Pharmacy.objects.update_or_create(npi_number=npi, defaults=fields)
            pharmacies.append(pharmacy)

    return {"pharmacies": len(pharmacies)}
