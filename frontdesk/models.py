from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Time,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

# Appointment status values (AptStatus on the function surface)
STATUS_SCHEDULED = "Scheduled"
STATUS_COMPLETED = "Completed"
STATUS_BROKEN = "Broken"
STATUS_CANCELLED = "Cancelled"
APPOINTMENT_STATUSES = (STATUS_SCHEDULED, STATUS_COMPLETED, STATUS_BROKEN, STATUS_CANCELLED)


class Patient(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(Integer, nullable=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    birthdate = Column(Date, nullable=True)
    phone = Column(String(20), nullable=True)  # E.164
    email = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    appointments = relationship("Appointment", back_populates="patient")

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Provider(Base):
    __tablename__ = "providers"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(Integer, nullable=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    specialty = Column(String(100), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    schedules = relationship("ProviderSchedule", back_populates="provider")

    @property
    def display_name(self) -> str:
        return f"Dr. {self.first_name} {self.last_name}"


class Operatory(Base):
    __tablename__ = "operatories"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(Integer, nullable=True, index=True)
    name = Column(String(100), nullable=False)
    is_hygiene = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    schedules = relationship("ProviderSchedule", back_populates="operatory")


class ProviderSchedule(Base):
    """A provider's working window in one operatory on one calendar date"""

    __tablename__ = "provider_schedules"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(Integer, nullable=True, index=True)
    provider_id = Column(Integer, ForeignKey("providers.id"), nullable=False, index=True)
    operatory_id = Column(Integer, ForeignKey("operatories.id"), nullable=False, index=True)
    schedule_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)  # local wall-clock
    end_time = Column(Time, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    provider = relationship("Provider", back_populates="schedules")
    operatory = relationship("Operatory", back_populates="schedules")


class Appointment(Base):
    __tablename__ = "appointments"
    # Storage-level guard against two concurrent bookings passing the pre-check.
    # Partial so that Broken/Cancelled rows free their start time.
    __table_args__ = (
        Index(
            "uq_appointments_scheduled_slot",
            "provider_id",
            "operatory_id",
            "appointment_datetime",
            unique=True,
            sqlite_where=text("status = 'Scheduled'"),
            postgresql_where=text("status = 'Scheduled'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(Integer, nullable=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    provider_id = Column(Integer, ForeignKey("providers.id"), nullable=False, index=True)
    operatory_id = Column(Integer, ForeignKey("operatories.id"), nullable=False, index=True)
    appointment_datetime = Column(DateTime, nullable=False, index=True)  # naive, local wall-clock
    duration_minutes = Column(Integer, default=30, nullable=False)
    appointment_type = Column(String(100), nullable=True)
    status = Column(String(20), default=STATUS_SCHEDULED, nullable=False, index=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    patient = relationship("Patient", back_populates="appointments")
    provider = relationship("Provider")
    operatory = relationship("Operatory")
