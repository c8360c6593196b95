"""Tests for the outage-request service."""
from __future__ import annotations

from datetime import date, datetime, timedelta
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from outage_admin.models.outage import OMSStatus, PowerOutageRequest, RequestStatus
from outage_admin.schemas.outage import PowerOutageRequestIn, PowerOutageRequestUpdateIn
from outage_admin.services import outage_requests as service
from outage_admin.services.outage_requests import RequestFilters, Urgency

TODAY = date(2030, 3, 1)


def _payload(seed, days_ahead=12, **overrides) -> PowerOutageRequestIn:
    values = dict(
        outage_date=TODAY + timedelta(days=days_ahead),
        start_time="09:00",
        end_time="12:00",
        work_center_id=seed.center_a.id,
        branch_id=seed.branch_x.id,
        transformer_number="TR-0001",
        gis_details="Pole 1",
        area="Village 2",
    )
    values.update(overrides)
    return PowerOutageRequestIn(**values)


# ---- validation -----------------------------------------------------------------------


def _raw(**overrides):
    values = dict(
        outage_date="2030-03-20",
        start_time="09:00",
        end_time="12:00",
        work_center_id=1,
        branch_id=1,
        transformer_number="TR-1",
    )
    values.update(overrides)
    return values


def test_input_accepts_single_digit_hour():
    assert PowerOutageRequestIn(**_raw(start_time="9:00")).start_time == "9:00"


@pytest.mark.parametrize(
    "overrides",
    [
        {"start_time": "05:30"},
        {"end_time": "20:30"},
        {"start_time": "10:00", "end_time": "10:29"},
        {"start_time": "25:00"},
        {"end_time": "12:60"},
        {"transformer_number": ""},
        {"work_center_id": 0},
    ],
)
def test_input_rejects(overrides):
    with pytest.raises(ValidationError):
        PowerOutageRequestIn(**_raw(**overrides))


def test_exactly_thirty_minutes_is_enough():
    PowerOutageRequestIn(**_raw(start_time="10:00", end_time="10:30"))


def test_validate_outage_date_lead_time():
    assert service.validate_outage_date(TODAY + timedelta(days=10), TODAY) is None
    assert service.validate_outage_date(TODAY + timedelta(days=9), TODAY) is not None
    assert service.validate_outage_date(TODAY + timedelta(days=2), TODAY, min_lead_days=2) is None


# ---- urgency / sorting ----------------------------------------------------------------


@pytest.mark.parametrize(
    "days,expected",
    [(-1, Urgency.NONE), (0, Urgency.CRITICAL), (5, Urgency.CRITICAL), (6, Urgency.WARNING), (7, Urgency.WARNING),
     (8, Urgency.NORMAL), (15, Urgency.NORMAL), (16, Urgency.NONE)],
)
def test_urgency_by_days(days, expected):
    assert service.urgency(OMSStatus.NOT_ADDED, RequestStatus.NOT, TODAY + timedelta(days=days), TODAY) is expected


def test_urgency_completed_and_cancelled():
    soon = TODAY + timedelta(days=2)
    assert service.urgency(OMSStatus.PROCESSED, RequestStatus.CONFIRM, soon, TODAY) is Urgency.COMPLETED
    assert service.urgency(OMSStatus.NOT_ADDED, RequestStatus.CANCELLED, soon, TODAY) is Urgency.NONE


def _row(name, status, oms=OMSStatus.NOT_ADDED, days=0, start_hour=9, created_minute=0):
    outage = TODAY + timedelta(days=days)
    return SimpleNamespace(
        name=name,
        status_request=status,
        oms_status=oms,
        outage_date=outage,
        start_time=datetime.combine(outage, datetime.min.time()).replace(hour=start_hour),
        created_at=datetime(2030, 1, 1, 8, created_minute),
    )


def test_sort_requests_display_order():
    rows = [
        _row("done-old", RequestStatus.CONFIRM, OMSStatus.PROCESSED, days=-10, created_minute=1),
        _row("pending-old", RequestStatus.NOT, created_minute=2),
        _row("confirm-past-far", RequestStatus.CONFIRM, days=-5),
        _row("confirm-future-late", RequestStatus.CONFIRM, days=3, start_hour=14),
        _row("done-new", RequestStatus.CONFIRM, OMSStatus.PROCESSED, days=-2, created_minute=9),
        _row("confirm-future-early", RequestStatus.CONFIRM, days=3, start_hour=8),
        _row("confirm-today", RequestStatus.CONFIRM, days=0),
        _row("confirm-past-near", RequestStatus.CONFIRM, days=-1),
        _row("cancelled-new", RequestStatus.CANCELLED, created_minute=5),
    ]

    ordered = [r.name for r in service.sort_requests(rows, TODAY)]

    assert ordered == [
        "confirm-today",
        "confirm-future-early",
        "confirm-future-late",
        "confirm-past-near",
        "confirm-past-far",
        "cancelled-new",
        "pending-old",
        "done-new",
        "done-old",
    ]


# ---- persistence ----------------------------------------------------------------------


def test_create_request_stores_local_times_and_defaults(db_session, seed):
    result = service.create_request(db_session, _payload(seed), seed.users["USER"].id, today=TODAY)

    assert result.success is True
    row = db_session.get(PowerOutageRequest, result.data["id"])
    assert row.start_time == datetime(2030, 3, 13, 9, 0)
    assert row.end_time == datetime(2030, 3, 13, 12, 0)
    assert row.oms_status is OMSStatus.NOT_ADDED
    assert row.status_request is RequestStatus.NOT
    assert row.created_by_id == seed.users["USER"].id


def test_create_request_too_soon(db_session, seed):
    result = service.create_request(db_session, _payload(seed, days_ahead=3), seed.users["USER"].id, today=TODAY)
    assert result.success is False
    assert "10 days" in result.message


def test_create_many_all_or_nothing(db_session, seed):
    good = _payload(seed).model_dump(mode="json")
    too_soon = _payload(seed, days_ahead=1).model_dump(mode="json")
    bad_time = dict(good, end_time="09:10")

    result = service.create_many(db_session, [good, too_soon, bad_time], seed.users["USER"].id, today=TODAY)

    assert result.success is False
    assert [e.index for e in result.validation_errors] == [2, 3]
    assert result.total_count == 3
    assert result.success_count == 0
    assert db_session.query(PowerOutageRequest).count() == 0


def test_create_many_saves_everything(db_session, seed):
    items = [_payload(seed, days_ahead=d).model_dump(mode="json") for d in (10, 11, 12)]

    result = service.create_many(db_session, items, seed.users["USER"].id, today=TODAY)

    assert result.success is True
    assert result.success_count == 3
    assert len(result.data) == 3


def test_update_request_changes_times_and_area(db_session, seed):
    created = service.create_request(db_session, _payload(seed), seed.users["USER"].id, today=TODAY)
    update = PowerOutageRequestUpdateIn(outage_date=date(2030, 3, 13), start_time="13:00", end_time="15:30", area=None)

    result = service.update_request(db_session, created.data["id"], update)

    assert result.success is True
    assert result.data["start_time"].startswith("2030-03-13T13:00")
    assert result.data["area"] is None


def test_status_updates_are_stamped(db_session, seed):
    created = service.create_request(db_session, _payload(seed), seed.users["USER"].id, today=TODAY)
    now = datetime(2030, 3, 2, 10, 0)
    supervisor = seed.users["SUPERVISOR"]

    service.update_request_status(db_session, created.data["id"], RequestStatus.CONFIRM, supervisor.id, now)
    service.update_oms_status(db_session, created.data["id"], OMSStatus.PROCESSED, supervisor.id, now)

    row = db_session.get(PowerOutageRequest, created.data["id"])
    assert row.status_request is RequestStatus.CONFIRM
    assert row.status_updated_by_id == supervisor.id
    assert row.oms_status is OMSStatus.PROCESSED
    assert row.oms_updated_at == now


def test_update_missing_request(db_session, seed):
    result = service.update_oms_status(db_session, 9999, OMSStatus.PROCESSED, 1, datetime(2030, 1, 1))
    assert result.success is False


def test_delete_request(db_session, seed):
    created = service.create_request(db_session, _payload(seed), seed.users["USER"].id, today=TODAY)
    assert service.delete_request(db_session, created.data["id"]).success is True
    assert service.get_request(db_session, created.data["id"]) is None


def test_paginated_requests_with_filters(db_session, seed):
    for d in (10, 11, 12, 13, 14):
        service.create_request(db_session, _payload(seed, days_ahead=d), seed.users["USER"].id, today=TODAY)
    other = _payload(seed, work_center_id=seed.center_b.id, branch_id=seed.branch_z.id)
    service.create_request(db_session, other, seed.users["USER_B"].id, today=TODAY)

    page = service.paginated_requests(
        db_session, page=2, limit=2, today=TODAY, filters=RequestFilters(work_center_id=seed.center_a.id)
    )

    assert page.pagination.total == 5
    assert page.pagination.total_pages == 3
    assert page.pagination.has_next is True
    assert page.pagination.has_prev is True
    assert len(page.data) == 2
    assert page.data[0].work_center.name == "Center A"
    assert page.data[0].created_by.full_name == "User Person"


def test_paginated_requests_date_range(db_session, seed):
    for d in (10, 20, 30):
        service.create_request(db_session, _payload(seed, days_ahead=d), seed.users["USER"].id, today=TODAY)

    page = service.paginated_requests(
        db_session,
        page=1,
        limit=10,
        today=TODAY,
        filters=RequestFilters(start_date=TODAY + timedelta(days=15), end_date=TODAY + timedelta(days=25)),
    )

    assert page.pagination.total == 1
    assert page.data[0].outage_date == TODAY + timedelta(days=20)
