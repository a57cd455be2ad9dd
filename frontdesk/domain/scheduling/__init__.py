"""
Scheduling Domain

Availability and conflict engine:
- Schedule catalog with search-all fallback (catalog.py)
- Booked-time index (booked_index.py)
- Slot generation (slots.py)
- Overlap detection (conflicts.py)
- Office-hours administration (service.py)
"""

from .booked_index import BookedIndex
from .catalog import ScheduleCatalog
from .conflicts import ConflictDetector, ConflictResult, find_conflict
from .pattern import decode_pattern, encode_pattern
from .slots import SlotGenerator, generate_slots
from .types import Booking, ScheduleEntry, Slot

__all__ = [
    "BookedIndex",
    "Booking",
    "ConflictDetector",
    "ConflictResult",
    "ScheduleCatalog",
    "ScheduleEntry",
    "Slot",
    "SlotGenerator",
    "decode_pattern",
    "encode_pattern",
    "find_conflict",
    "generate_slots",
]
