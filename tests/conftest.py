"""Shared test fixtures: in-memory database, seeded resources, API client."""

from datetime import date, datetime, time
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from frontdesk.config import SchedulingConfig
from frontdesk.database import Base, get_db
from frontdesk.dependencies import get_scheduling_config
from frontdesk.models import (
    STATUS_SCHEDULED,
    Appointment,
    Operatory,
    Patient,
    Provider,
    ProviderSchedule,
)

# Tuesday
SCENARIO_DATE = date(2025, 12, 16)


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db(engine) -> Generator[Session, None, None]:
    """Session seeded with two patients, three providers and three operatories.

    Provider 3 and operatory 3 are inactive.
    """
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    session.add_all(
        [
            Patient(id=1, first_name="Jane", last_name="Doe", birthdate=date(1990, 4, 2), phone="+15550100"),
            Patient(id=2, first_name="John", last_name="Roe"),
            Provider(id=1, first_name="Ada", last_name="Smith", specialty="General"),
            Provider(id=2, first_name="Ben", last_name="Jones", specialty="Hygiene"),
            Provider(id=3, first_name="Cy", last_name="Gone", is_active=False),
            Operatory(id=1, name="Room 1"),
            Operatory(id=2, name="Room 2", is_hygiene=True),
            Operatory(id=3, name="Storage", is_active=False),
        ]
    )
    session.commit()
    yield session
    session.close()


@pytest.fixture
def config() -> SchedulingConfig:
    return SchedulingConfig()


@pytest.fixture
def add_schedule(db):
    """Factory inserting a schedule row."""

    def _add(
        provider_id: int = 1,
        operatory_id: int = 1,
        schedule_date: date = SCENARIO_DATE,
        start: time = time(9, 0),
        end: time = time(12, 0),
        is_active: bool = True,
    ) -> ProviderSchedule:
        schedule = ProviderSchedule(
            provider_id=provider_id,
            operatory_id=operatory_id,
            schedule_date=schedule_date,
            start_time=start,
            end_time=end,
            is_active=is_active,
        )
        db.add(schedule)
        db.commit()
        db.refresh(schedule)
        return schedule

    return _add


@pytest.fixture
def add_appointment(db):
    """Factory inserting an appointment row directly, bypassing the lifecycle checks."""

    def _add(
        start: datetime,
        duration: int = 30,
        provider_id: int = 1,
        operatory_id: int = 1,
        patient_id: int = 1,
        status: str = STATUS_SCHEDULED,
    ) -> Appointment:
        appointment = Appointment(
            patient_id=patient_id,
            provider_id=provider_id,
            operatory_id=operatory_id,
            appointment_datetime=start,
            duration_minutes=duration,
            status=status,
        )
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    return _add


@pytest.fixture
def client(db, config) -> Generator[TestClient, None, None]:
    """API client sharing the test session."""
    from frontdesk.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_scheduling_config] = lambda: config
    yield TestClient(app)
    app.dependency_overrides.clear()
