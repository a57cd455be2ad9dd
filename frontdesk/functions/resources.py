"""Provider and operatory listings"""

from pydantic import BaseModel

from ..domain.resources.service import ResourceService
from ..models import Operatory, Provider
from .adapters import build_request
from .context import FunctionContext


class ResourceListRequest(BaseModel):
    activeOnly: bool = False


def provider_to_dict(provider: Provider) -> dict:
    return {
        "ProvNum": provider.id,
        "FName": provider.first_name,
        "LName": provider.last_name,
        "ProviderName": provider.display_name,
        "Specialty": provider.specialty,
        "IsActive": bool(provider.is_active),
    }


def operatory_to_dict(operatory: Operatory) -> dict:
    return {
        "OperatoryNum": operatory.id,
        "OpName": operatory.name,
        "IsHygiene": bool(operatory.is_hygiene),
        "IsActive": bool(operatory.is_active),
    }


def get_providers(ctx: FunctionContext, params: dict) -> list[dict]:
    request = build_request(ResourceListRequest, params)
    providers = ResourceService(ctx.db, ctx.organization_id).list_providers(request.activeOnly)
    return [provider_to_dict(p) for p in providers]


def get_operatories(ctx: FunctionContext, params: dict) -> list[dict]:
    request = build_request(ResourceListRequest, params)
    operatories = ResourceService(ctx.db, ctx.organization_id).list_operatories(request.activeOnly)
    return [operatory_to_dict(o) for o in operatories]
