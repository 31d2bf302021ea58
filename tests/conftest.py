# tests/conftest.py
import pytest

from infrastructure.logging_service import disable_all_logging

disable_all_logging()

from domain.business_profile import BusinessProfile  # noqa: E402
from domain.client import Client, ClientCategory  # noqa: E402
from domain.document import Document, DocumentType  # noqa: E402
from domain.line_item import LineItem  # noqa: E402
from domain.calculator import DiscountSpec, DiscountType  # noqa: E402


@pytest.fixture
def business_profile():
    return BusinessProfile(
        company_name="Acme Digital",
        email="hello@acme.test",
        phone="021 555 0100",
        address="1 Long Street, Cape Town",
        bank_name="First Bank",
        account_number="123456789",
        account_type="Cheque",
        vat_number="4001234567",
        company_registration="2020/123456/07",
        sales_rep="Sam",
        invoice_prefix="INV",
        invoice_number_start=1000,
    )


@pytest.fixture
def client():
    return Client(name="Jo Dlamini", email="jo@example.test", company="Widgets (Pty) Ltd",
                  category=ClientCategory.SMALL_BUSINESS, address="7 Main Road, Durban")


@pytest.fixture
def sample_document(business_profile, client):
    return Document(
        type=DocumentType.QUOTATION,
        document_number="QUO261019_001",
        client=client,
        business_profile=business_profile,
        line_items=[
            LineItem(description="Website build", quantity=2, unit_price=100),
            LineItem(description="Hosting setup", quantity=1, unit_price=50),
        ],
        discount=DiscountSpec(amount=10, type=DiscountType.PERCENTAGE),
        tax_rate=15,
        reference="Company website refresh",
        notes="Valid for 30 days",
    )
