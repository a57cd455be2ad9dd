"""Resource service - existence and active-flag checks used before any booking write"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...exceptions import InactiveResourceError, NotFoundError
from ...models import Operatory, Patient, Provider
from .repository import OperatoryRepository, PatientRepository, ProviderRepository

logger = logging.getLogger(__name__)


class ResourceService:
    """Looks up the people and rooms an appointment refers to"""

    def __init__(self, db: Session, organization_id: Optional[int] = None):
        self.db = db
        self.organization_id = organization_id

    def require_patient(self, patient_id: int) -> Patient:
        patient = PatientRepository.get_patient(self.db, patient_id, self.organization_id)
        if not patient:
            raise NotFoundError(f"Patient with ID {patient_id} not found")
        return patient

    def require_provider(self, provider_id: int, must_be_active: bool = True) -> Provider:
        provider = ProviderRepository.get_provider(self.db, provider_id, self.organization_id)
        if not provider:
            raise NotFoundError(f"Provider with ID {provider_id} not found")
        if must_be_active and not provider.is_active:
            logger.warning(f"Rejected request for inactive provider {provider_id}")
            raise InactiveResourceError(f"Provider with ID {provider_id} is not active")
        return provider

    def require_operatory(self, operatory_id: int, must_be_active: bool = True) -> Operatory:
        operatory = OperatoryRepository.get_operatory(self.db, operatory_id, self.organization_id)
        if not operatory:
            raise NotFoundError(f"Operatory with ID {operatory_id} not found")
        if must_be_active and not operatory.is_active:
            logger.warning(f"Rejected request for inactive operatory {operatory_id}")
            raise InactiveResourceError(f"Operatory with ID {operatory_id} is not active")
        return operatory

    def list_providers(self, active_only: bool = False) -> list[Provider]:
        return ProviderRepository.get_providers(self.db, self.organization_id, active_only)

    def list_operatories(self, active_only: bool = False) -> list[Operatory]:
        return OperatoryRepository.get_operatories(self.db, self.organization_id, active_only)
