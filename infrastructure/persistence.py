# infrastructure/persistence.py
import dataclasses
import json
from enum import Enum
from typing import Any, Dict, Optional

from domain.business_profile import BusinessProfile
from domain.calculator import DiscountSpec, DiscountType
from domain.client import Client, ClientCategory
from domain.document import Document, DocumentStatus, DocumentType
from domain.line_item import LineItem
from domain.pricing import AIRecommendation, Level, RecommendationSource, RoleType, TeamMember
from domain.rate_preset import RatePreset
from domain.state import AppState
from infrastructure.database import Database
from infrastructure.logging_service import get_module_logger

logger = get_module_logger("Persistence", "persistence.log")


class EnhancedJSONEncoder(json.JSONEncoder):
    def default(self, o):
        if dataclasses.is_dataclass(o):
            return dataclasses.asdict(o)
        if isinstance(o, Enum):
            return o.value
        return super().default(o)


def _fields_of(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only keys the dataclass knows, so older/newer snapshots still load."""
    names = {f.name for f in dataclasses.fields(cls)}
    return {k: v for k, v in data.items() if k in names}


class PersistenceService:
    """Whole-state snapshot: one JSON blob per storage namespace."""

    def __init__(self, db: Database, namespace: str):
        self.db = db
        self.namespace = namespace

    def load_state(self) -> AppState:
        """Load the snapshot; a missing or unreadable snapshot yields a fresh state."""
        payload = self.db.read_state(self.namespace)
        if payload is None:
            return AppState()
        try:
            return PersistenceService.state_from_dict(json.loads(payload))
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Snapshot '{self.namespace}' could not be read, starting fresh: {e}", exc_info=True)
            return AppState()

    def save_state(self, state: AppState):
        self.db.write_state(self.namespace, PersistenceService.state_to_json(state))
        logger.detail(f"Snapshot saved: {len(state.clients)} clients, {len(state.documents)} documents")

    # Serialization ----------------------------------------------------------

    @staticmethod
    def state_to_json(state: AppState) -> str:
        return json.dumps(state, cls=EnhancedJSONEncoder, ensure_ascii=False)

    @staticmethod
    def state_from_dict(data: Dict[str, Any]) -> AppState:
        profile_data = data.get('business_profile')
        state = AppState(
            business_profile=BusinessProfile(**_fields_of(BusinessProfile, profile_data)) if profile_data else None,
            clients=[PersistenceService.client_from_dict(c) for c in data.get('clients', [])],
            documents=[PersistenceService.document_from_dict(d) for d in data.get('documents', [])],
        )
        if 'rate_presets' in data:
            state.rate_presets = [PersistenceService.rate_preset_from_dict(p) for p in data['rate_presets']]
        return state

    @staticmethod
    def client_from_dict(data: Dict[str, Any]) -> Client:
        fields = _fields_of(Client, data)
        fields['category'] = ClientCategory(data.get('category', ClientCategory.SMALL_BUSINESS.value))
        return Client(**fields)

    @staticmethod
    def rate_preset_from_dict(data: Dict[str, Any]) -> RatePreset:
        fields = _fields_of(RatePreset, data)
        fields['role'] = RoleType(data['role'])
        return RatePreset(**fields)

    @staticmethod
    def line_item_from_dict(data: Dict[str, Any]) -> LineItem:
        return LineItem(**_fields_of(LineItem, data))

    @staticmethod
    def team_member_from_dict(data: Dict[str, Any]) -> TeamMember:
        fields = _fields_of(TeamMember, data)
        fields['role'] = RoleType(data['role'])
        fields['level'] = Level(data['level'])
        return TeamMember(**fields)

    @staticmethod
    def recommendation_from_dict(data: Optional[Dict[str, Any]]) -> Optional[AIRecommendation]:
        if not data:
            return None
        fields = _fields_of(AIRecommendation, data)
        fields['breakdown'] = tuple(PersistenceService.line_item_from_dict(i) for i in data.get('breakdown', []))
        fields['team_suggestions'] = tuple(
            PersistenceService.team_member_from_dict(m) for m in data.get('team_suggestions', [])
        )
        fields['source'] = RecommendationSource(data.get('source', RecommendationSource.FALLBACK.value))
        return AIRecommendation(**fields)

    @staticmethod
    def document_from_dict(data: Dict[str, Any]) -> Document:
        fields = _fields_of(Document, data)
        discount = data.get('discount') or {}
        fields.update(
            type=DocumentType(data['type']),
            status=DocumentStatus(data.get('status', DocumentStatus.DRAFT.value)),
            client=PersistenceService.client_from_dict(data['client']),
            business_profile=BusinessProfile(**_fields_of(BusinessProfile, data['business_profile'])),
            line_items=[PersistenceService.line_item_from_dict(i) for i in data.get('line_items', [])],
            discount=DiscountSpec(
                amount=discount.get('amount', 0.0),
                type=DiscountType(discount.get('type', DiscountType.PERCENTAGE.value)),
            ),
            ai_recommendation=PersistenceService.recommendation_from_dict(data.get('ai_recommendation')),
            team_members=[PersistenceService.team_member_from_dict(m) for m in data.get('team_members', [])],
        )
        return Document(**fields)

    # File based backup ------------------------------------------------------

    @staticmethod
    def export_state_file(state: AppState, filepath: str):
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(state, f, cls=EnhancedJSONEncoder, indent=4, ensure_ascii=False)

    @staticmethod
    def import_state_file(filepath: str) -> AppState:
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return PersistenceService.state_from_dict(data)
