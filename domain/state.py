# domain/state.py
from dataclasses import dataclass, field
from typing import List, Optional

from .business_profile import BusinessProfile
from .client import Client
from .document import Document
from .rate_preset import RatePreset, default_rate_presets


@dataclass
class AppState:
    """Whole-application snapshot, persisted as one blob."""
    business_profile: Optional[BusinessProfile] = None
    clients: List[Client] = field(default_factory=list)
    rate_presets: List[RatePreset] = field(default_factory=default_rate_presets)
    documents: List[Document] = field(default_factory=list)
