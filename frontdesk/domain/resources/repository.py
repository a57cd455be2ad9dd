"""Resource repository - Database operations for patients, providers and operatories"""

from typing import Optional

from sqlalchemy.orm import Query, Session

from ...models import Operatory, Patient, Provider


def scoped(query: Query, model, organization_id: Optional[int]) -> Query:
    """Restrict a query to one organization when a scope is given"""
    if organization_id is not None:
        query = query.filter(model.organization_id == organization_id)
    return query


class PatientRepository:
    """Repository for patient database operations"""

    @staticmethod
    def get_patient(db: Session, patient_id: int, organization_id: Optional[int] = None) -> Optional[Patient]:
        return scoped(db.query(Patient), Patient, organization_id).filter(Patient.id == patient_id).first()


class ProviderRepository:
    """Repository for provider database operations"""

    @staticmethod
    def get_provider(db: Session, provider_id: int, organization_id: Optional[int] = None) -> Optional[Provider]:
        return scoped(db.query(Provider), Provider, organization_id).filter(Provider.id == provider_id).first()

    @staticmethod
    def get_providers(
        db: Session, organization_id: Optional[int] = None, active_only: bool = False
    ) -> list[Provider]:
        query = scoped(db.query(Provider), Provider, organization_id)
        if active_only:
            query = query.filter(Provider.is_active.is_(True))
        return query.order_by(Provider.last_name, Provider.first_name).all()


class OperatoryRepository:
    """Repository for operatory database operations"""

    @staticmethod
    def get_operatory(
        db: Session, operatory_id: int, organization_id: Optional[int] = None
    ) -> Optional[Operatory]:
        return (
            scoped(db.query(Operatory), Operatory, organization_id)
            .filter(Operatory.id == operatory_id)
            .first()
        )

    @staticmethod
    def get_operatories(
        db: Session, organization_id: Optional[int] = None, active_only: bool = False
    ) -> list[Operatory]:
        query = scoped(db.query(Operatory), Operatory, organization_id)
        if active_only:
            query = query.filter(Operatory.is_active.is_(True))
        return query.order_by(Operatory.name).all()
