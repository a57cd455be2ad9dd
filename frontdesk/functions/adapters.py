"""
Request adapter for the booking function surface

Callers (voice agents, the front-desk UI) send loose parameter bags with
inconsistent field names. Everything here runs before a typed request is
built; the services never see an alias.
"""

import logging
from typing import Iterable, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..config import SchedulingConfig
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

# alias -> canonical, for functions that call the operatory "Op"
APPOINTMENT_ALIASES = {
    "OpNum": "Op",
    "operatory_id": "Op",
    "AppointmentId": "AptNum",
    "appointment_id": "AptNum",
    "provider_id": "ProvNum",
    "patient_id": "PatNum",
}

# alias -> canonical, for functions that call the operatory "OpNum"
SCHEDULE_ALIASES = {
    "Op": "OpNum",
    "operatory_id": "OpNum",
    "id": "ScheduleNum",
    "schedule_id": "ScheduleNum",
    "provider_id": "ProvNum",
    "patient_id": "PatNum",
}

CLINIC_FIELDS = ("ClinicNum", "clinic_id")


def normalize_aliases(params: Optional[dict], aliases: dict) -> dict:
    """Rename alias keys; an explicit canonical key wins over its alias"""
    normalized = dict(params or {})
    for alias, canonical in aliases.items():
        if alias not in normalized:
            continue
        value = normalized.pop(alias)
        if normalized.get(canonical) is None:
            normalized[canonical] = value
    return normalized


def strip_clinic(params: dict, config: SchedulingConfig) -> dict:
    if config.send_clinic_id:
        return params
    for key in CLINIC_FIELDS:
        if params.pop(key, None) is not None:
            logger.debug(f"Dropped {key} from request parameters")
    return params


def apply_default_resources(
    params: dict, config: SchedulingConfig, provider_key: str = "ProvNum", operatory_key: str = "Op"
) -> dict:
    """Fill provider/operatory from configured defaults when the caller left them out"""
    if params.get(provider_key) in (None, "") and config.default_provider_id is not None:
        params[provider_key] = config.default_provider_id
    if params.get(operatory_key) in (None, "") and config.default_operatory_id is not None:
        params[operatory_key] = config.default_operatory_id
    return params


def require_fields(params: dict, fields: Iterable[str]) -> None:
    """Fail on the first missing field, in the order given"""
    for field in fields:
        if params.get(field) in (None, ""):
            raise ValidationError(f"{field} is required", field=field)


def build_request(model: Type[T], params: dict) -> T:
    """Construct a typed request, re-raising pydantic failures as our ValidationError"""
    known = {key: value for key, value in params.items() if key in model.model_fields}
    try:
        return model(**known)
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error.get("loc", ())) or None
        message = error.get("msg", "Invalid request")
        # pydantic prefixes errors raised from validators
        message = message.removeprefix("Value error, ")
        raise ValidationError(f"{field}: {message}" if field else message, field=field) from e


def prepare(
    params: Optional[dict],
    config: SchedulingConfig,
    aliases: dict,
) -> dict:
    """Alias normalization plus clinic stripping, shared by every function"""
    return strip_clinic(normalize_aliases(params, aliases), config)
