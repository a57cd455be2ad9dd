import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./frontdesk.db")

# Slot grid - the step stays at 30 minutes no matter how long the requested
# appointment is (pending product clarification, see DESIGN.md)
SLOT_STEP_MINUTES = int(os.getenv("SLOT_STEP_MINUTES", "30"))
# Occupancy bucket size used by the booked-time index
BUCKET_MINUTES = int(os.getenv("BUCKET_MINUTES", "5"))
# Duration used when an appointment arrives without a Pattern
DEFAULT_APPOINTMENT_MINUTES = int(os.getenv("DEFAULT_APPOINTMENT_MINUTES", "30"))

# Orchestrator defaults - only applied by the request adapter, never by the engine
DEFAULT_PROVIDER_ID = os.getenv("DEFAULT_PROVIDER_ID")
DEFAULT_OPERATORY_ID = os.getenv("DEFAULT_OPERATORY_ID")
# Clinic ids are stripped from incoming calls unless explicitly enabled
SEND_CLINIC_ID = os.getenv("SEND_CLINIC_ID", "false").lower() == "true"

# "resource": provider OR operatory collisions block a booking
# "pair": only the same provider AND operatory combination blocks
CONFLICT_SCOPE = os.getenv("CONFLICT_SCOPE", "resource")

# Bulk schedule creation limit
MAX_DEFAULT_SCHEDULE_DAYS = int(os.getenv("MAX_DEFAULT_SCHEDULE_DAYS", "31"))


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


@dataclass(frozen=True)
class SchedulingConfig:
    """Settings handed to the scheduling engine and the request adapter"""

    slot_step_minutes: int = 30
    bucket_minutes: int = 5
    default_appointment_minutes: int = 30
    default_provider_id: Optional[int] = None
    default_operatory_id: Optional[int] = None
    send_clinic_id: bool = False
    conflict_scope: str = "resource"
    max_default_schedule_days: int = 31

    def __post_init__(self):
        if self.conflict_scope not in ("resource", "pair"):
            raise ValueError(f"Unknown conflict scope: {self.conflict_scope}")
        if self.bucket_minutes <= 0 or self.slot_step_minutes <= 0:
            raise ValueError("Slot step and bucket size must be positive")

    @classmethod
    def from_env(cls) -> "SchedulingConfig":
        return cls(
            slot_step_minutes=SLOT_STEP_MINUTES,
            bucket_minutes=BUCKET_MINUTES,
            default_appointment_minutes=DEFAULT_APPOINTMENT_MINUTES,
            default_provider_id=_optional_int(DEFAULT_PROVIDER_ID),
            default_operatory_id=_optional_int(DEFAULT_OPERATORY_ID),
            send_clinic_id=SEND_CLINIC_ID,
            conflict_scope=CONFLICT_SCOPE,
            max_default_schedule_days=MAX_DEFAULT_SCHEDULE_DAYS,
        )
