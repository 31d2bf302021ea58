#!/usr/bin/env python3
# main.py
import asyncio
import sys

from core.app_initializer import initialize_app
from core.document_editor import DocumentEditor
from domain.business_profile import BusinessProfile
from domain.client import Client, ClientCategory
from domain.currency import format_money
from domain.document import DocumentType
from domain.errors import SmartQuoteError
from domain.pricing import Complexity, ProjectInput, ProjectSize, RoleType


def create_sample_project() -> ProjectInput:
    """Sample project used for the demo quotation"""
    return ProjectInput(
        client_category=ClientCategory.SMALL_BUSINESS,
        project_size=ProjectSize.MEDIUM,
        complexity=Complexity.MEDIUM,
        estimated_duration=6,
        team_size=3,
        roles=[RoleType.DEVELOPER, RoleType.DESIGNER, RoleType.QA],
        description="Booking site with online payments, customer accounts and an admin dashboard.",
    )


def ensure_sample_data(store):
    if store.business_profile is None:
        store.set_business_profile(BusinessProfile(company_name="Sample Studio", email="hello@sample.test"))
    if not store.clients:
        store.add_client(Client(name="Sample Client", company="Sample Client (Pty) Ltd"))


def main():
    """Price the sample project and export it as a quotation PDF"""
    ctx = initialize_app()
    store = ctx.store
    ensure_sample_data(store)

    recommendation = asyncio.run(ctx.pricing.recommend(create_sample_project()))
    store.apply_recommendation(recommendation)
    print(f"Recommended price: {format_money(recommendation.total_price, ctx.pricing.currency)} "
          f"({recommendation.source.value}, confidence {recommendation.confidence:g}%)")

    editor = DocumentEditor(store, DocumentType.QUOTATION, default_tax_rate=ctx.config.get_default_tax_rate())
    editor.client_id = store.clients[0].id
    editor.apply_recommendation(recommendation)
    try:
        document = editor.save()
        path = editor.export(ctx.exporter)
    except SmartQuoteError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"{document.title} {document.document_number}: {format_money(document.totals().total, document.currency)}")
    print(f"Exported to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
