"""Starter catalog used by the demo service"""

from datetime import date
from typing import List

from ..models.document import Document


def sample_documents() -> List[Document]:
    return [
        Document(
            id=1,
            name="Lease Agreement - Sarah Johnson",
            doc_type="lease",
            category="Legal",
            size="2.4 MB",
            upload_date=date(2024, 1, 15),
            property="Sunnydale Apartments",
            tenant="Sarah Johnson",
            status="signed",
            file_type="pdf",
            tags=("lease", "signed", "residential"),
            expiry_date=date(2025, 1, 14),
        ),
        Document(
            id=2,
            name="NMM Electricity Bill - March 2024",
            doc_type="utility",
            category="Utilities",
            size="1.2 MB",
            upload_date=date(2024, 3, 5),
            property="All Properties",
            tenant="N/A",
            status="processed",
            file_type="pdf",
            tags=("utility", "electricity", "monthly"),
            amount="$245.80",
        ),
        Document(
            id=3,
            name="Property Insurance Policy",
            doc_type="insurance",
            category="Legal",
            size="3.1 MB",
            upload_date=date(2024, 2, 20),
            property="Garden View Flats",
            tenant="N/A",
            status="active",
            file_type="pdf",
            tags=("insurance", "policy"),
            expiry_date=date(2025, 2, 19),
        ),
        Document(
            id=4,
            name="Maintenance Receipt - Plumbing",
            doc_type="expense",
            category="Maintenance",
            size="456 KB",
            upload_date=date(2024, 3, 10),
            property="City Center Studios",
            tenant="N/A",
            status="approved",
            file_type="image",
            tags=("maintenance", "plumbing", "receipt"),
            amount="$180.00",
        ),
        Document(
            id=5,
            name="Tenant Application - Michael Chen",
            doc_type="application",
            category="Legal",
            size="1.8 MB",
            upload_date=date(2023, 6, 10),
            property="Garden View Flats",
            tenant="Michael Chen",
            status="approved",
            file_type="pdf",
            tags=("application", "screening", "signed"),
            score="742",
        ),
        Document(
            id=6,
            name="Property Photos - Beachfront",
            doc_type="photos",
            category="Marketing",
            size="8.2 MB",
            upload_date=date(2024, 1, 5),
            property="Beachfront Residence",
            tenant="N/A",
            status="current",
            file_type="images",
            tags=("photos", "marketing", "listing"),
            photo_count=24,
        ),
    ]
