from datetime import datetime

import pytest

from src.attendance_engine.attendance_engine.core.enums import CorrectionType, PunchType, RequestStatus
from src.attendance_engine.attendance_engine.core.exceptions import (
    InvalidRequestType,
    MissingField,
    NotOwnedByUser,
    NotPending,
    RecordNotFound,
    UserNotFound,
)

from tests.support import OFFICE, TOKYO, at, north_of


@pytest.fixture
def punch(world):
    return world.attendance.clock_in(1, *north_of(OFFICE, 0))


def test_time_correction_copies_the_punch(world, punch):
    world.clock.set(at(2025, 1, 15, 12, 0))

    correction = world.corrections.create(1, punch.record_id, "time", "Forgot to tap in", requested_time=at(2025, 1, 15, 8, 30))

    assert correction.status == RequestStatus.PENDING
    assert correction.request_type == CorrectionType.TIME
    assert correction.before_time == punch.timestamp
    assert correction.current_type == PunchType.IN
    assert correction.requested_time == at(2025, 1, 15, 8, 30)
    assert correction.created_at == at(2025, 1, 15, 12, 0)


def test_naive_requested_time_is_read_in_business_timezone(world, punch):
    correction = world.corrections.create(1, punch.record_id, "time", "late tap", requested_time=datetime(2025, 1, 15, 8, 45))

    assert correction.requested_time.tzinfo == TOKYO


@pytest.mark.parametrize(
    "request_type, requested_time, requested_type, missing",
    [
        ("time", None, None, "requested_time"),
        ("type", None, None, "requested_type"),
        ("type", at(2025, 1, 15, 8, 0), "  ", "requested_type"),
        ("both", None, "out", "requested_time"),
        ("both", at(2025, 1, 15, 8, 0), None, "requested_type"),
    ],
)
def test_required_fields_per_request_type(world, punch, request_type, requested_time, requested_type, missing):
    with pytest.raises(MissingField) as exc:
        world.corrections.create(
            1,
            punch.record_id,
            request_type,
            "reason",
            requested_time=requested_time,
            requested_type=requested_type,
        )
    assert exc.value.field_name == missing


def test_both_correction(world, punch):
    correction = world.corrections.create(
        1, punch.record_id, "BOTH", "wrong button", requested_time=at(2025, 1, 15, 8, 0), requested_type="out"
    )

    assert correction.request_type == CorrectionType.BOTH
    assert correction.requested_type == PunchType.OUT


def test_reason_is_required(world, punch):
    with pytest.raises(MissingField):
        world.corrections.create(1, punch.record_id, "type", "   ", requested_type="out")


def test_unknown_request_type(world, punch):
    with pytest.raises(InvalidRequestType):
        world.corrections.create(1, punch.record_id, "location", "reason")


def test_lookups_fail_before_validation(world, punch):
    with pytest.raises(UserNotFound):
        world.corrections.create(404, punch.record_id, "time", "reason")
    with pytest.raises(RecordNotFound):
        world.corrections.create(1, 999, "time", "reason")
    with pytest.raises(NotOwnedByUser):
        world.corrections.create(2, punch.record_id, "time", "reason", requested_time=at(2025, 1, 15, 8, 0))


def test_approve_records_decision_and_leaves_punch_alone(world, punch):
    correction = world.corrections.create(1, punch.record_id, "time", "reason", requested_time=at(2025, 1, 15, 8, 0))
    world.clock.set(at(2025, 1, 16, 10, 0))

    approved = world.corrections.approve(correction.correction_id, 9)

    assert approved.status == RequestStatus.APPROVED
    assert approved.approver_id == 9
    assert approved.approved_at == at(2025, 1, 16, 10, 0)
    assert world.attendance_repo.get_by_id(punch.record_id) == punch


def test_decisions_are_final(world, punch):
    correction = world.corrections.create(1, punch.record_id, "time", "reason", requested_time=at(2025, 1, 15, 8, 0))
    world.corrections.reject(correction.correction_id, 9)

    with pytest.raises(NotPending):
        world.corrections.approve(correction.correction_id, 9)
    with pytest.raises(NotPending):
        world.corrections.reject(correction.correction_id, 9)


def test_decide_requires_known_correction_and_approver(world, punch):
    correction = world.corrections.create(1, punch.record_id, "time", "reason", requested_time=at(2025, 1, 15, 8, 0))

    with pytest.raises(RecordNotFound):
        world.corrections.approve(12345, 9)
    with pytest.raises(UserNotFound):
        world.corrections.approve(correction.correction_id, 404)


def test_pending_listing_and_counts(world, punch):
    first = world.corrections.create(1, punch.record_id, "time", "a", requested_time=at(2025, 1, 15, 8, 0))
    world.corrections.create(1, punch.record_id, "type", "b", requested_type="out")
    world.corrections.approve(first.correction_id, 9)

    assert world.corrections.pending_count() == 1
    assert world.corrections.pending_count(1) == 1
    assert world.corrections.pending_count(2) == 0
    assert [c.reason for c in world.corrections.list_pending()] == ["b"]
    assert len(world.corrections.list_for_user(1)) == 2
    assert world.corrections.get(first.correction_id).status == RequestStatus.APPROVED
