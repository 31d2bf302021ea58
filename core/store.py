# core/store.py
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional

from domain.business_profile import BusinessProfile
from domain.client import Client
from domain.document import Document, DocumentStatus, DocumentType
from domain.pricing import AIRecommendation
from domain.rate_preset import RatePreset
from domain.state import AppState
from domain.timestamps import now_iso
from infrastructure.logging_service import get_module_logger

logger = get_module_logger("AppStore", "store.log")

RECENT_DOCUMENTS = 5


@dataclass(frozen=True)
class DashboardStats:
    total_revenue: float = 0.0
    pending_amount: float = 0.0
    client_count: int = 0
    document_count: int = 0
    recent_documents: tuple = field(default_factory=tuple)


class AppStore:
    """
    Single owner of the application state.

    Every mutation goes through a named method, replaces the affected record,
    saves a snapshot (when a persistence service is attached) and notifies
    subscribers. Reads return the live objects; treat them as read-only.
    """

    def __init__(self, state: AppState = None, persistence=None, numbering=None):
        self.state = state if state is not None else AppState()
        self.persistence = persistence
        self.numbering = numbering
        self.recommendation: Optional[AIRecommendation] = None
        self._listeners: List[Callable[["AppStore"], None]] = []

    @classmethod
    def load(cls, persistence, numbering=None) -> "AppStore":
        return cls(persistence.load_state(), persistence=persistence, numbering=numbering)

    def subscribe(self, listener: Callable[["AppStore"], None]) -> Callable[[], None]:
        """Register a change listener; returns the matching unsubscribe call."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener) if listener in self._listeners else None

    def _commit(self, action: str):
        logger.detail(action)
        if self.persistence is not None:
            self.persistence.save_state(self.state)
        for listener in list(self._listeners):
            listener(self)

    # Business profile ---------------------------------------------------------

    @property
    def business_profile(self) -> Optional[BusinessProfile]:
        return self.state.business_profile

    def set_business_profile(self, profile: BusinessProfile):
        profile.updated_at = now_iso()
        self.state.business_profile = profile
        self._commit(f"Business profile set: {profile.company_name}")

    # Clients ------------------------------------------------------------------

    @property
    def clients(self) -> List[Client]:
        return self.state.clients

    def add_client(self, client: Client) -> Client:
        self.state.clients.append(client)
        self._commit(f"Client added: {client.id}")
        return client

    def update_client(self, client_id: str, **changes) -> Client:
        index = self._index_of(self.state.clients, client_id, "Client")
        updated = replace(self.state.clients[index], **dict(changes, updated_at=now_iso()))
        self.state.clients[index] = updated
        self._commit(f"Client updated: {client_id}")
        return updated

    def delete_client(self, client_id: str):
        self.state.clients = [c for c in self.state.clients if c.id != client_id]
        self._commit(f"Client deleted: {client_id}")

    def get_client(self, client_id: str) -> Optional[Client]:
        return next((c for c in self.state.clients if c.id == client_id), None)

    # Rate presets -------------------------------------------------------------

    @property
    def rate_presets(self) -> List[RatePreset]:
        return self.state.rate_presets

    def add_rate_preset(self, preset: RatePreset) -> RatePreset:
        self.state.rate_presets.append(preset)
        self._commit(f"Rate preset added: {preset.name}")
        return preset

    def update_rate_preset(self, preset_id: str, **changes) -> RatePreset:
        index = self._index_of(self.state.rate_presets, preset_id, "Rate preset")
        updated = replace(self.state.rate_presets[index], **dict(changes, updated_at=now_iso()))
        self.state.rate_presets[index] = updated
        self._commit(f"Rate preset updated: {preset_id}")
        return updated

    def delete_rate_preset(self, preset_id: str):
        self.state.rate_presets = [p for p in self.state.rate_presets if p.id != preset_id]
        self._commit(f"Rate preset deleted: {preset_id}")

    # Documents ----------------------------------------------------------------

    @property
    def documents(self) -> List[Document]:
        return self.state.documents

    def add_document(self, document: Document) -> Document:
        self.state.documents.append(document)
        self._commit(f"Document added: {document.document_number}")
        return document

    def update_document(self, document_id: str, **changes) -> Document:
        index = self._index_of(self.state.documents, document_id, "Document")
        changes.pop("id", None)
        changes.pop("created_at", None)
        updated = replace(self.state.documents[index], **dict(changes, updated_at=now_iso()))
        self.state.documents[index] = updated
        self._commit(f"Document updated: {updated.document_number}")
        return updated

    def save_document(self, document: Document) -> Document:
        """Insert or replace by id, keeping the original creation time."""
        existing = self.get_document(document.id)
        if existing is None:
            return self.add_document(document)
        index = self.state.documents.index(existing)
        document.created_at = existing.created_at
        document.updated_at = now_iso()
        self.state.documents[index] = document
        self._commit(f"Document saved: {document.document_number}")
        return document

    def delete_document(self, document_id: str):
        self.state.documents = [d for d in self.state.documents if d.id != document_id]
        self._commit(f"Document deleted: {document_id}")

    def get_document(self, document_id: str) -> Optional[Document]:
        return next((d for d in self.state.documents if d.id == document_id), None)

    # Numbering ----------------------------------------------------------------

    def next_invoice_number(self) -> str:
        profile = self.state.business_profile
        prefix = (profile.invoice_prefix if profile else None) or "INV"
        start = (profile.invoice_number_start if profile else None) or 1000
        invoices = [d for d in self.state.documents if d.type == DocumentType.INVOICE]
        return f"{prefix}-{start + len(invoices)}"

    def next_quotation_number(self) -> str:
        if self.numbering is None:
            raise RuntimeError("No quotation numbering service attached")
        number, _ = self.numbering.get_next_quote_number()
        return number

    def next_document_number(self, doc_type: DocumentType) -> str:
        if doc_type == DocumentType.INVOICE:
            return self.next_invoice_number()
        return self.next_quotation_number()

    # Pricing ------------------------------------------------------------------

    def apply_recommendation(self, recommendation: Optional[AIRecommendation]):
        """Last writer wins: a later result simply replaces the visible one."""
        self.recommendation = recommendation
        logger.detail("Recommendation cleared" if recommendation is None
                      else f"Recommendation applied: {recommendation.total_price} ({recommendation.source.value})")
        for listener in list(self._listeners):
            listener(self)

    # Dashboard ----------------------------------------------------------------

    def dashboard_stats(self) -> DashboardStats:
        invoices = [d for d in self.state.documents if d.type == DocumentType.INVOICE]
        revenue = sum(d.totals().total for d in invoices if d.status == DocumentStatus.PAID)
        pending = sum(d.totals().total for d in invoices if d.status == DocumentStatus.SENT)
        recent = sorted(self.state.documents, key=lambda d: d.created_at, reverse=True)[:RECENT_DOCUMENTS]
        return DashboardStats(
            total_revenue=revenue,
            pending_amount=pending,
            client_count=len(self.state.clients),
            document_count=len(self.state.documents),
            recent_documents=tuple(recent),
        )

    @staticmethod
    def _index_of(records: list, record_id: str, kind: str) -> int:
        for i, record in enumerate(records):
            if record.id == record_id:
                return i
        raise KeyError(f"{kind} not found: {record_id}")
