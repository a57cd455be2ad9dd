"""Tests for the named booking functions and their request adapter."""

from datetime import datetime

import pytest

from frontdesk.config import SchedulingConfig
from frontdesk.exceptions import ConflictError, NotFoundError, ValidationError
from frontdesk.functions import FUNCTION_REGISTRY, call_function
from frontdesk.functions.adapters import (
    APPOINTMENT_ALIASES,
    SCHEDULE_ALIASES,
    normalize_aliases,
    require_fields,
    strip_clinic,
)
from frontdesk.models import STATUS_BROKEN, STATUS_CANCELLED


class TestAdapter:
    def test_appointment_aliases(self):
        params = normalize_aliases({"OpNum": 2, "AppointmentId": 9, "provider_id": 1}, APPOINTMENT_ALIASES)
        assert params == {"Op": 2, "AptNum": 9, "ProvNum": 1}

    def test_schedule_aliases(self):
        params = normalize_aliases({"Op": 2, "id": 4, "operatory_id": 3}, SCHEDULE_ALIASES)
        assert params["ScheduleNum"] == 4
        # first alias to fill the canonical key wins
        assert params["OpNum"] == 2

    def test_canonical_key_wins(self):
        assert normalize_aliases({"Op": 1, "OpNum": 2}, APPOINTMENT_ALIASES) == {"Op": 1}

    def test_clinic_stripped_by_default(self):
        assert strip_clinic({"ClinicNum": 3, "PatNum": 1}, SchedulingConfig()) == {"PatNum": 1}

    def test_clinic_kept_when_enabled(self):
        params = strip_clinic({"ClinicNum": 3}, SchedulingConfig(send_clinic_id=True))
        assert params == {"ClinicNum": 3}

    def test_first_missing_field_reported(self):
        with pytest.raises(ValidationError) as exc_info:
            require_fields({"AptDateTime": "2025-12-16 09:00:00"}, ("PatNum", "AptDateTime", "ProvNum", "Op"))
        assert exc_info.value.field == "PatNum"


class TestAppointmentFunctions:
    def test_registry_names(self):
        for name in (
            "GetAvailableSlots",
            "CreateAppointment",
            "UpdateAppointment",
            "BreakAppointment",
            "DeleteAppointment",
        ):
            assert name in FUNCTION_REGISTRY

    def test_unknown_function(self, db):
        with pytest.raises(ValidationError, match="Unknown function"):
            call_function("BookEverything", {}, db)

    def test_available_slots(self, db, add_schedule, add_appointment):
        add_schedule()
        add_appointment(datetime(2025, 12, 16, 9, 30))

        slots = call_function(
            "GetAvailableSlots",
            {"dateStart": "2025-12-16", "dateEnd": "2025-12-16", "ProvNum": "1", "OpNum": 1, "lengthMinutes": 30},
            db,
        )

        assert [s["DateTimeStart"] for s in slots] == [
            "2025-12-16 09:00:00",
            "2025-12-16 10:00:00",
            "2025-12-16 10:30:00",
            "2025-12-16 11:00:00",
            "2025-12-16 11:30:00",
        ]
        assert slots[0]["ProviderName"] == "Dr. Ada Smith"

    def test_available_slots_blank_ids_search_everything(self, db, add_schedule):
        add_schedule(provider_id=2, operatory_id=2)

        slots = call_function(
            "GetAvailableSlots",
            {"dateStart": "2025-12-16", "dateEnd": "2025-12-16", "ProvNum": "", "OpNum": " "},
            db,
        )

        assert slots
        assert {(s["ProvNum"], s["OpNum"]) for s in slots} == {(2, 2)}

    def test_available_slots_requires_dates(self, db):
        with pytest.raises(ValidationError) as exc_info:
            call_function("GetAvailableSlots", {"dateEnd": "2025-12-16"}, db)
        assert exc_info.value.field == "dateStart"

    def test_available_slots_rejects_zero_length(self, db):
        with pytest.raises(ValidationError) as exc_info:
            call_function(
                "GetAvailableSlots", {"dateStart": "2025-12-16", "dateEnd": "2025-12-16", "lengthMinutes": 0}, db
            )
        assert exc_info.value.field == "lengthMinutes"

    def test_create_with_aliases_and_iso_datetime(self, db):
        data = call_function(
            "CreateAppointment",
            {
                "PatNum": 1,
                "AptDateTime": "2025-12-16T10:00:00.000Z",
                "OpNum": 1,
                "ProvNum": 1,
                "ClinicNum": 4,
                "Pattern": "/XXXXXX/",
            },
            db,
        )

        assert data["AptDateTime"] == "2025-12-16 10:00:00"
        assert data["Op"] == 1
        assert data["Pattern"] == "/XXXXXX/"
        assert data["AptStatus"] == "Scheduled"

    def test_create_missing_field_named(self, db):
        with pytest.raises(ValidationError) as exc_info:
            call_function("CreateAppointment", {"PatNum": 1, "AptDateTime": "2025-12-16 10:00:00", "Op": 1}, db)
        assert exc_info.value.field == "ProvNum"
        assert "ProvNum" in exc_info.value.message

    def test_create_uses_configured_defaults(self, db):
        config = SchedulingConfig(default_provider_id=2, default_operatory_id=2)
        data = call_function("CreateAppointment", {"PatNum": 1, "AptDateTime": "2025-12-16 10:00:00"}, db, config)
        assert (data["ProvNum"], data["Op"]) == (2, 2)

    def test_create_bad_datetime(self, db):
        with pytest.raises(ValidationError) as exc_info:
            call_function(
                "CreateAppointment", {"PatNum": 1, "AptDateTime": "next tuesday", "ProvNum": 1, "Op": 1}, db
            )
        assert exc_info.value.field == "AptDateTime"

    def test_create_conflict(self, db):
        params = {"PatNum": 1, "AptDateTime": "2025-12-16 10:00:00", "ProvNum": 1, "Op": 1}
        call_function("CreateAppointment", params, db)
        with pytest.raises(ConflictError):
            call_function("CreateAppointment", {**params, "PatNum": 2}, db)

    def test_update_break_delete_with_alias(self, db):
        created = call_function(
            "CreateAppointment", {"PatNum": 1, "AptDateTime": "2025-12-16 10:00:00", "ProvNum": 1, "Op": 1}, db
        )

        moved = call_function(
            "UpdateAppointment", {"AppointmentId": created["AptNum"], "AptDateTime": "2025-12-16 11:00:00"}, db
        )
        assert moved["AptDateTime"] == "2025-12-16 11:00:00"

        broken = call_function("BreakAppointment", {"AptNum": created["AptNum"]}, db)
        assert broken == {"AptNum": created["AptNum"], "AptStatus": STATUS_BROKEN}

        deleted = call_function("DeleteAppointment", {"AppointmentId": created["AptNum"]}, db)
        assert deleted == {"success": True, "AptNum": created["AptNum"]}

        with pytest.raises(NotFoundError):
            call_function("DeleteAppointment", {"AptNum": created["AptNum"]}, db)

    def test_break_to_cancelled(self, db):
        created = call_function(
            "CreateAppointment", {"PatNum": 1, "AptDateTime": "2025-12-16 10:00:00", "ProvNum": 1, "Op": 1}, db
        )
        result = call_function(
            "BreakAppointment", {"AptNum": created["AptNum"], "sendToUnscheduledList": "false"}, db
        )
        assert result["AptStatus"] == STATUS_CANCELLED

    def test_get_appointments_with_names(self, db):
        call_function(
            "CreateAppointment", {"PatNum": 2, "AptDateTime": "2025-12-16 10:00:00", "ProvNum": 2, "Op": 2}, db
        )

        appointments = call_function("GetAppointments", {"DateStart": "2025-12-16", "Op": 2}, db)

        assert len(appointments) == 1
        assert appointments[0]["PatientName"] == "John Roe"
        assert appointments[0]["OperatoryName"] == "Room 2"


class TestScheduleFunctions:
    def test_create_and_fetch_by_alias(self, db):
        created = call_function(
            "CreateSchedule",
            {"provider_id": 1, "Op": 1, "ScheduleDate": "2025-12-16", "StartTime": "09:00", "EndTime": "17:00"},
            db,
        )
        fetched = call_function("GetSchedule", {"id": created["ScheduleNum"]}, db)
        assert fetched == created

    def test_create_requires_window(self, db):
        with pytest.raises(ValidationError) as exc_info:
            call_function("CreateSchedule", {"ProvNum": 1, "OpNum": 1, "ScheduleDate": "2025-12-16"}, db)
        assert exc_info.value.field == "StartTime"

    def test_default_schedules(self, db):
        result = call_function(
            "CreateDefaultSchedules",
            {"ProvNum": 1, "OpNum": 1, "DateStart": "2025-12-15", "DateEnd": "2025-12-21"},
            db,
        )
        assert result["count"] == 5
        assert result["skipped"] == []

        provider_schedules = call_function("GetProviderSchedules", {"ProvNum": 1}, db)
        assert len(provider_schedules) == 5

    def test_check_update_delete(self, db):
        created = call_function(
            "CreateSchedule",
            {"ProvNum": 1, "OpNum": 1, "ScheduleDate": "2025-12-16", "StartTime": "09:00", "EndTime": "12:00"},
            db,
        )

        check = call_function(
            "CheckScheduleConflicts",
            {"ProvNum": 2, "OpNum": 1, "ScheduleDate": "2025-12-16", "StartTime": "11:00", "EndTime": "13:00"},
            db,
        )
        assert check["hasConflict"] is True
        assert check["conflict"]["type"] == "operatory_conflict"

        updated = call_function("UpdateSchedule", {"ScheduleNum": created["ScheduleNum"], "EndTime": "10:30"}, db)
        assert updated["EndTime"] == "10:30:00"

        assert call_function("DeleteSchedule", {"ScheduleNum": created["ScheduleNum"]}, db)["success"] is True
        assert call_function("GetSchedules", {}, db) == []

    def test_schedule_id_must_be_numeric(self, db):
        with pytest.raises(ValidationError):
            call_function("GetSchedule", {"ScheduleNum": "abc"}, db)


class TestResourceFunctions:
    def test_providers(self, db):
        providers = call_function("GetProviders", {}, db)
        assert {p["ProvNum"] for p in providers} == {1, 2, 3}
        inactive = next(p for p in providers if p["ProvNum"] == 3)
        assert inactive["IsActive"] is False

    def test_operatories(self, db):
        operatories = call_function("GetOperatories", None, db)
        assert [o["OpName"] for o in operatories] == ["Room 1", "Room 2", "Storage"]

    def test_active_only(self, db):
        providers = call_function("GetProviders", {"activeOnly": "true"}, db)
        assert {p["ProvNum"] for p in providers} == {1, 2}
        operatories = call_function("GetOperatories", {"activeOnly": True}, db)
        assert [o["OpName"] for o in operatories] == ["Room 1", "Room 2"]
