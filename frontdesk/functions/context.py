from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.orm import Session

from ..config import SchedulingConfig


@dataclass
class FunctionContext:
    """Per-call state handed to every booking function"""

    db: Session
    config: SchedulingConfig = field(default_factory=SchedulingConfig)
    organization_id: Optional[int] = None
