# domain/rate_preset.py
from dataclasses import dataclass, field
from typing import List, Optional

from .line_item import generate_id
from .pricing import RoleType
from .timestamps import now_iso


@dataclass
class RatePreset:
    name: str
    role: RoleType
    hourly_rate: float
    currency: str = "USD"
    description: Optional[str] = None
    id: str = field(default_factory=generate_id)
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)


def default_rate_presets() -> List[RatePreset]:
    """Presets available on a fresh install."""
    return [
        RatePreset("Junior Developer", RoleType.DEVELOPER, 50, description="Entry-level development work"),
        RatePreset("Senior Developer", RoleType.DEVELOPER, 100, description="Senior-level development work"),
        RatePreset("UI/UX Designer", RoleType.DESIGNER, 75, description="Design and user experience work"),
        RatePreset("Project Manager", RoleType.MANAGER, 85, description="Project management and coordination"),
        RatePreset("Consultant", RoleType.CONSULTANT, 120, description="Strategic consulting services"),
    ]
