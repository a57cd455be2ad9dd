"""Patients, providers and operatories"""

from .repository import OperatoryRepository, PatientRepository, ProviderRepository
from .service import ResourceService

__all__ = ["OperatoryRepository", "PatientRepository", "ProviderRepository", "ResourceService"]
