# tests/test_persistence.py
"""
Whole-state snapshot: save, reload, corrupt payloads and file backups.
"""

import os
import shutil
import tempfile
import unittest

from domain.business_profile import BusinessProfile
from domain.calculator import DiscountSpec, DiscountType
from domain.client import Client, ClientCategory
from domain.document import Document, DocumentStatus, DocumentType
from domain.line_item import LineItem
from domain.pricing import Complexity, ProjectInput, ProjectSize, RecommendationSource, RoleType
from domain.pricing_engine import FallbackPricingEngine
from domain.state import AppState
from infrastructure.database import Database
from infrastructure.persistence import PersistenceService


class TestPersistence(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.db = Database(os.path.join(self.temp_dir, "state.db"))
        self.persistence = PersistenceService(self.db, "smartquote-storage")

        profile = BusinessProfile(company_name="Acme Digital", vat_number="4001234567")
        client = Client(name="Jo", category=ClientCategory.NON_PROFIT)
        recommendation = FallbackPricingEngine().recommend(ProjectInput(
            client_category=ClientCategory.NON_PROFIT, project_size=ProjectSize.LARGE,
            complexity=Complexity.HIGH, estimated_duration=6, team_size=2,
            roles=[RoleType.DEVELOPER, RoleType.QA],
        ))
        document = Document(
            type=DocumentType.INVOICE,
            document_number="INV-1000",
            client=client,
            business_profile=profile,
            line_items=[LineItem(description="Build", quantity=3, unit_price=99.5)],
            discount=DiscountSpec(50, DiscountType.FIXED),
            status=DocumentStatus.SENT,
            ai_recommendation=recommendation,
            team_members=list(recommendation.team_suggestions),
        )
        self.state = AppState(business_profile=profile, clients=[client], documents=[document])

    def tearDown(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_empty_database_gives_fresh_state(self):
        state = self.persistence.load_state()
        self.assertIsNone(state.business_profile)
        self.assertEqual(len(state.rate_presets), 5)

    def test_round_trip(self):
        self.persistence.save_state(self.state)
        loaded = self.persistence.load_state()

        self.assertEqual(loaded.business_profile, self.state.business_profile)
        self.assertEqual(loaded.clients, self.state.clients)
        doc = loaded.documents[0]
        original = self.state.documents[0]
        self.assertEqual(doc.type, DocumentType.INVOICE)
        self.assertEqual(doc.status, DocumentStatus.SENT)
        self.assertEqual(doc.discount, DiscountSpec(50, DiscountType.FIXED))
        self.assertEqual(doc.line_items, original.line_items)
        self.assertEqual(doc.totals(), original.totals())
        self.assertEqual(doc.ai_recommendation.source, RecommendationSource.FALLBACK)
        self.assertEqual(doc.ai_recommendation.breakdown, original.ai_recommendation.breakdown)
        self.assertEqual(doc.team_members, original.team_members)

    def test_namespaces_are_isolated(self):
        self.persistence.save_state(self.state)
        other = PersistenceService(self.db, "other-namespace").load_state()
        self.assertEqual(other.clients, [])

    def test_corrupt_snapshot_starts_fresh(self):
        self.db.write_state("smartquote-storage", "{not json")
        state = self.persistence.load_state()
        self.assertEqual(state.documents, [])

    def test_file_backup(self):
        path = os.path.join(self.temp_dir, "backup.json")
        PersistenceService.export_state_file(self.state, path)
        restored = PersistenceService.import_state_file(path)
        self.assertEqual(restored.clients[0].category, ClientCategory.NON_PROFIT)
        self.assertEqual(restored.documents[0].document_number, "INV-1000")

    def test_unknown_fields_are_ignored(self):
        data = {"clients": [{"name": "Legacy", "category": "individual", "favourite_colour": "blue"}]}
        state = PersistenceService.state_from_dict(data)
        self.assertEqual(state.clients[0].name, "Legacy")
        self.assertEqual(state.clients[0].category, ClientCategory.INDIVIDUAL)


if __name__ == '__main__':
    unittest.main()
