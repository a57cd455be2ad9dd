"""Tests for office-hours administration."""

from datetime import date, time

import pytest

from frontdesk.config import SchedulingConfig
from frontdesk.domain.scheduling.schemas import (
    DefaultSchedulesRequest,
    ScheduleConflictCheck,
    ScheduleCreate,
    ScheduleFilter,
    ScheduleUpdate,
)
from frontdesk.domain.scheduling.service import (
    ScheduleService,
    classify_schedule_conflict,
    schedule_to_dict,
)
from frontdesk.exceptions import ConflictError, NotFoundError, ValidationError
from frontdesk.models import ProviderSchedule

from .conftest import SCENARIO_DATE


@pytest.fixture
def service(db):
    return ScheduleService(db)


def existing(provider_id: int, operatory_id: int, start: time = time(9), end: time = time(12)) -> ProviderSchedule:
    return ProviderSchedule(
        id=5,
        provider_id=provider_id,
        operatory_id=operatory_id,
        schedule_date=SCENARIO_DATE,
        start_time=start,
        end_time=end,
    )


class TestClassifyScheduleConflict:
    def test_room_taken_by_other_provider(self):
        conflict = classify_schedule_conflict(existing(2, 1), 1, 1, time(10), time(11))
        assert conflict.type == "operatory_conflict"
        assert conflict.to_dict()["conflictWith"] == 5

    def test_provider_already_in_other_room(self):
        conflict = classify_schedule_conflict(existing(1, 2), 1, 1, time(10), time(11))
        assert conflict.type == "provider_conflict"

    def test_duplicate_pair(self):
        conflict = classify_schedule_conflict(existing(1, 1), 1, 1, time(8), time(9, 30))
        assert conflict.type == "duplicate"
        assert "from 09:00:00 to 12:00:00" in conflict.message

    def test_adjacent_windows_do_not_conflict(self):
        assert classify_schedule_conflict(existing(1, 1), 1, 1, time(12), time(17)) is None

    def test_unrelated_resources(self):
        assert classify_schedule_conflict(existing(2, 2), 1, 1, time(9), time(12)) is None


class TestScheduleService:
    def test_create_and_read(self, service):
        schedule = service.create_schedule(
            ScheduleCreate(ProvNum=1, OpNum=1, ScheduleDate="2025-12-16", StartTime="09:00", EndTime="12:00:00")
        )

        assert schedule_to_dict(service.get_schedule(schedule.id)) == {
            "ScheduleNum": schedule.id,
            "ProvNum": 1,
            "ProviderName": "Dr. Ada Smith",
            "OpNum": 1,
            "OperatoryName": "Room 1",
            "ScheduleDate": "2025-12-16",
            "StartTime": "09:00:00",
            "EndTime": "12:00:00",
            "IsActive": True,
        }

    def test_create_conflict(self, service, add_schedule):
        add_schedule(provider_id=2, operatory_id=1)

        with pytest.raises(ConflictError, match="^Schedule conflict: Operatory is already booked by Dr. Ben Jones"):
            service.create_schedule(
                ScheduleCreate(ProvNum=1, OpNum=1, ScheduleDate=SCENARIO_DATE, StartTime="10:00", EndTime="11:00")
            )

    def test_create_for_unknown_provider(self, service):
        with pytest.raises(NotFoundError):
            service.create_schedule(
                ScheduleCreate(ProvNum=77, OpNum=1, ScheduleDate=SCENARIO_DATE, StartTime="10:00", EndTime="11:00")
            )

    def test_window_must_be_ordered(self):
        with pytest.raises(ValueError):
            ScheduleCreate(ProvNum=1, OpNum=1, ScheduleDate=SCENARIO_DATE, StartTime="12:00", EndTime="09:00")

    def test_update_requires_a_field(self, service, add_schedule):
        schedule = add_schedule()
        with pytest.raises(ValidationError, match="No update fields provided"):
            service.update_schedule(ScheduleUpdate(ScheduleNum=schedule.id))

    def test_update_excludes_itself(self, service, add_schedule):
        schedule = add_schedule()
        updated = service.update_schedule(ScheduleUpdate(ScheduleNum=schedule.id, EndTime="13:00"))
        assert updated.end_time == time(13)

    def test_update_into_conflict(self, service, add_schedule):
        add_schedule(provider_id=2, operatory_id=2)
        schedule = add_schedule(provider_id=1, operatory_id=1)
        with pytest.raises(ConflictError):
            service.update_schedule(ScheduleUpdate(ScheduleNum=schedule.id, ProvNum=2))

    def test_update_inverted_window(self, service, add_schedule):
        schedule = add_schedule()
        with pytest.raises(ValidationError):
            service.update_schedule(ScheduleUpdate(ScheduleNum=schedule.id, StartTime="12:30"))

    def test_delete(self, service, add_schedule):
        schedule = add_schedule()
        assert service.delete_schedule(schedule.id)["success"] is True
        with pytest.raises(NotFoundError):
            service.get_schedule(schedule.id)

    def test_filters(self, service, add_schedule):
        add_schedule(provider_id=1, operatory_id=1)
        add_schedule(provider_id=2, operatory_id=2)
        add_schedule(provider_id=1, operatory_id=1, schedule_date=date(2025, 12, 17), is_active=False)

        assert len(service.get_schedules(ScheduleFilter())) == 3
        assert len(service.get_schedules(ScheduleFilter(ProvNum=1))) == 2
        assert len(service.get_schedules(ScheduleFilter(ScheduleDate="2025-12-17"))) == 1
        assert len(service.get_provider_schedules(1)) == 1

    def test_check_conflicts(self, service, add_schedule):
        add_schedule(provider_id=1, operatory_id=2)
        result = service.check_conflicts(
            ScheduleConflictCheck(ProvNum=1, OpNum=1, ScheduleDate=SCENARIO_DATE, StartTime="09:00", EndTime="10:00")
        )
        assert result["hasConflict"] is True
        assert result["conflict"]["type"] == "provider_conflict"


class TestDefaultSchedules:
    def test_weekdays_only(self, service):
        # Mon 2025-12-15 .. Sun 2025-12-21
        result = service.create_default_schedules(
            DefaultSchedulesRequest(ProvNum=1, OpNum=1, DateStart="2025-12-15", DateEnd="2025-12-21")
        )

        dates = [s.schedule_date for s in result["created"]]
        assert dates == [date(2025, 12, d) for d in range(15, 20)]
        assert all(s.start_time == time(9) and s.end_time == time(17) for s in result["created"])

    def test_include_weekends(self, service):
        result = service.create_default_schedules(
            DefaultSchedulesRequest(
                ProvNum=1, OpNum=1, DateStart="2025-12-15", DateEnd="2025-12-21", IncludeWeekends=True
            )
        )
        assert len(result["created"]) == 7

    def test_range_limit(self, service):
        with pytest.raises(ValidationError, match="31 days"):
            service.create_default_schedules(
                DefaultSchedulesRequest(ProvNum=1, OpNum=1, DateStart="2025-12-01", DateEnd="2026-01-05")
            )

    def test_range_limit_is_configurable(self, db):
        service = ScheduleService(db, SchedulingConfig(max_default_schedule_days=3))
        with pytest.raises(ValidationError):
            service.create_default_schedules(
                DefaultSchedulesRequest(ProvNum=1, OpNum=1, DateStart="2025-12-15", DateEnd="2025-12-19")
            )

    def test_conflicting_days_skipped(self, service, add_schedule):
        add_schedule(provider_id=2, operatory_id=1, schedule_date=SCENARIO_DATE)

        result = service.create_default_schedules(
            DefaultSchedulesRequest(ProvNum=1, OpNum=1, DateStart="2025-12-15", DateEnd="2025-12-17")
        )

        assert [s.schedule_date for s in result["created"]] == [date(2025, 12, 15), date(2025, 12, 17)]
        assert len(result["skipped"]) == 1
        assert result["skipped"][0].startswith("2025-12-16:")

    def test_all_days_conflicting(self, service, add_schedule):
        add_schedule(provider_id=2, operatory_id=1, schedule_date=SCENARIO_DATE)

        with pytest.raises(ConflictError, match="All schedules had conflicts"):
            service.create_default_schedules(
                DefaultSchedulesRequest(ProvNum=1, OpNum=1, DateStart=SCENARIO_DATE, DateEnd=SCENARIO_DATE)
            )
