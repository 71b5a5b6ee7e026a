"""Booking service: lockstep availability, ownership and the feedback state machine."""

import threading
from datetime import date, timedelta

import pytest

from mockprep.core.errors import (
    AccessDenied,
    FeedbackNotAvailable,
    InterviewStateError,
    NotFoundError,
    SlotUnavailable,
    ValidationFailed,
)
from mockprep.domain.models import Caller, Interviewer, InterviewStatus, PaymentStatus, Role
from mockprep.services import BookingContext, SlotFilters


@pytest.fixture
def bookings(services):
    return services.bookings


@pytest.fixture
def student(caller_factory):
    return caller_factory()


@pytest.fixture
def admin(caller_factory):
    return caller_factory(role=Role.admin)


def _slot_available(services, slot_id):
    return services.stores.slots.get(slot_id).available


def test_booking_flips_slot_and_copies_slot_details(services, bookings, service_slot_factory, student):
    slot = service_slot_factory(price=72.5, time="2:00 PM")

    interview = bookings.book_interview(student, slot.id, "Placement")

    assert interview.status is InterviewStatus.upcoming
    assert interview.payment_status is PaymentStatus.paid
    assert interview.user_id == student.user_id
    assert interview.slot_id == slot.id
    assert interview.price == 72.5
    assert interview.time == "2:00 PM"
    assert interview.interviewer_name == "Jane Smith"
    assert interview.meeting_link.startswith(services.settings.MEETING_BASE_URL)
    assert _slot_available(services, slot.id) is False


def test_cancel_restores_slot(services, bookings, service_slot_factory, student):
    slot = service_slot_factory()
    interview = bookings.book_interview(student, slot.id, "Internship")

    assert bookings.cancel_interview(interview.id, student) is True

    assert bookings.get_interview(interview.id).status is InterviewStatus.cancelled
    assert _slot_available(services, slot.id) is True


def test_booking_unavailable_slot_is_refused(bookings, service_slot_factory, caller_factory):
    slot = service_slot_factory()
    bookings.book_interview(caller_factory(), slot.id, "Placement")

    with pytest.raises(SlotUnavailable):
        bookings.book_interview(caller_factory(), slot.id, "Placement")


def test_booking_unknown_slot_is_not_found(bookings, student):
    with pytest.raises(NotFoundError):
        bookings.book_interview(student, "no-such-slot", "Placement")


def test_booking_context_must_match_slot(services, bookings, service_slot_factory, student):
    slot = service_slot_factory(time="11:00 AM")
    context = BookingContext(interviewer_id=slot.interviewer_id, time="3:00 PM")

    with pytest.raises(ValidationFailed) as excinfo:
        bookings.book_interview(student, slot.id, "Placement", context)

    assert [d["field"] for d in excinfo.value.details] == ["time"]
    assert _slot_available(services, slot.id) is True


def test_matching_context_is_accepted(bookings, service_slot_factory, student):
    slot = service_slot_factory()
    context = BookingContext(
        interviewer_id=slot.interviewer_id,
        date=slot.date.isoformat() + "T00:00:00",
        time=slot.time,
        domain=slot.domain,
        profile=slot.profile,
    )
    assert bookings.book_interview(student, slot.id, "Placement", context).slot_id == slot.id


def test_double_cancel_returns_true(services, bookings, service_slot_factory, student):
    slot = service_slot_factory()
    interview = bookings.book_interview(student, slot.id, "Placement")

    assert bookings.cancel_interview(interview.id, student) is True
    assert bookings.cancel_interview(interview.id, student) is True
    assert _slot_available(services, slot.id) is True


def test_late_second_cancel_does_not_free_a_rebooked_slot(
    services, bookings, service_slot_factory, caller_factory
):
    slot = service_slot_factory()
    first, second = caller_factory(), caller_factory()
    old = bookings.book_interview(first, slot.id, "Placement")
    bookings.cancel_interview(old.id, first)
    bookings.book_interview(second, slot.id, "Placement")

    assert bookings.cancel_interview(old.id, first) is True
    assert _slot_available(services, slot.id) is False


def test_cancel_missing_interview_returns_false(bookings, student):
    assert bookings.cancel_interview("missing", student) is False


def test_cancel_by_non_owner_is_denied(services, bookings, service_slot_factory, caller_factory):
    slot = service_slot_factory()
    owner, intruder = caller_factory(), caller_factory()
    interview = bookings.book_interview(owner, slot.id, "Placement")

    with pytest.raises(AccessDenied):
        bookings.cancel_interview(interview.id, intruder)
    assert _slot_available(services, slot.id) is False


def test_list_user_interviews_requires_ownership(bookings, service_slot_factory, caller_factory):
    owner, other = caller_factory(), caller_factory()
    bookings.book_interview(owner, service_slot_factory().id, "Placement")

    assert len(bookings.list_user_interviews(owner.user_id, owner)) == 1
    with pytest.raises(AccessDenied):
        bookings.list_user_interviews(owner.user_id, other)


def test_filter_conjunction(bookings, service_slot_factory):
    service_slot_factory(domain="Technical", profile="AI")
    wanted = service_slot_factory(domain="Technical", profile="Software")
    service_slot_factory(domain="Behavioral", profile="Software")

    found = bookings.get_available_slots(SlotFilters(domain="Technical", profile="Software"))

    assert [s.id for s in found] == [wanted.id]


def test_date_filter_compares_calendar_day(bookings, service_slot_factory):
    day = date.today() + timedelta(days=3)
    match = service_slot_factory(date=day)
    service_slot_factory(date=day + timedelta(days=1))

    found = bookings.get_available_slots(SlotFilters(date=f"{day.isoformat()}T18:30:00"))

    assert [s.id for s in found] == [match.id]


def test_invalid_date_filter_is_a_validation_error(bookings):
    with pytest.raises(ValidationFailed):
        bookings.get_available_slots(SlotFilters(date="next tuesday"))


def test_booked_slots_are_not_listed(bookings, service_slot_factory, student):
    slot = service_slot_factory()
    other = service_slot_factory()
    bookings.book_interview(student, slot.id, "Placement")

    assert [s.id for s in bookings.get_available_slots()] == [other.id]


def test_feedback_gate(bookings, service_slot_factory, student):
    interview = bookings.book_interview(student, service_slot_factory().id, "Placement")

    with pytest.raises(FeedbackNotAvailable):
        bookings.get_feedback(interview.id, student)


def test_feedback_completes_interview(bookings, service_slot_factory, student, admin):
    interview = bookings.book_interview(student, service_slot_factory().id, "Placement")

    assert bookings.add_feedback(interview.id, "Strong fundamentals.", 4, admin) is True

    view = bookings.get_feedback(interview.id, student)
    assert view.feedback == "Strong fundamentals."
    assert view.rating == 4
    assert view.interviewer == "Jane Smith"
    assert bookings.get_interview(interview.id).status is InterviewStatus.completed


def test_feedback_on_missing_interview_returns_false(bookings, admin):
    assert bookings.add_feedback("missing", "text", 3, admin) is False


def test_feedback_on_cancelled_interview_is_refused(bookings, service_slot_factory, student, admin):
    interview = bookings.book_interview(student, service_slot_factory().id, "Placement")
    bookings.cancel_interview(interview.id, student)

    with pytest.raises(InterviewStateError) as excinfo:
        bookings.add_feedback(interview.id, "text", 3, admin)
    assert excinfo.value.reason == "interview_cancelled"


def test_feedback_twice_is_refused(bookings, service_slot_factory, student, admin):
    interview = bookings.book_interview(student, service_slot_factory().id, "Placement")
    bookings.add_feedback(interview.id, "first", 3, admin)

    with pytest.raises(InterviewStateError) as excinfo:
        bookings.add_feedback(interview.id, "second", 5, admin)
    assert excinfo.value.reason == "feedback_already_submitted"


def test_completed_interview_cannot_be_cancelled(
    services, bookings, service_slot_factory, student, admin
):
    slot = service_slot_factory()
    interview = bookings.book_interview(student, slot.id, "Placement")
    bookings.add_feedback(interview.id, "done", 5, admin)

    with pytest.raises(InterviewStateError):
        bookings.cancel_interview(interview.id, student)
    assert _slot_available(services, slot.id) is False


def test_students_cannot_submit_feedback(bookings, service_slot_factory, student):
    interview = bookings.book_interview(student, service_slot_factory().id, "Placement")

    with pytest.raises(AccessDenied):
        bookings.add_feedback(interview.id, "self review", 5, student)


def test_only_assigned_interviewer_submits_feedback(
    services, bookings, service_slot_factory, student, caller_factory
):
    assigned = caller_factory(role=Role.interviewer)
    stranger = caller_factory(role=Role.interviewer)
    services.stores.interviewers.add(
        Interviewer(id="iv-assigned", name="Jane Smith", company="Google", user_id=assigned.user_id)
    )
    slot = service_slot_factory(interviewer_id="iv-assigned")
    interview = bookings.book_interview(student, slot.id, "Placement")

    with pytest.raises(AccessDenied):
        bookings.add_feedback(interview.id, "text", 4, stranger)
    assert bookings.add_feedback(interview.id, "text", 4, assigned) is True


def test_legacy_switch_allows_feedback_on_cancelled(settings, service_slot_factory):
    from mockprep.container import build_container

    legacy = build_container(settings.model_copy(update={"ALLOW_FEEDBACK_ON_CANCELLED": True}))
    slot = service_slot_factory()
    legacy.stores.slots.add(slot)
    user = legacy.users.create("Someone", "someone@example.com", "x")
    student = Caller.for_user(user)
    admin = Caller(user_id="admin", role=Role.admin)
    interview = legacy.bookings.book_interview(student, slot.id, "Placement")
    legacy.bookings.cancel_interview(interview.id, student)

    assert legacy.bookings.add_feedback(interview.id, "late", 2, admin) is True
    assert legacy.bookings.get_interview(interview.id).status is InterviewStatus.completed


def test_concurrent_bookings_of_one_slot_yield_one_interview(
    services, bookings, service_slot_factory, caller_factory
):
    slot = service_slot_factory()
    callers = [caller_factory() for _ in range(16)]
    barrier = threading.Barrier(len(callers))
    booked, refused = [], []

    def attempt(caller):
        barrier.wait()
        try:
            booked.append(bookings.book_interview(caller, slot.id, "Placement"))
        except SlotUnavailable:
            refused.append(caller)

    threads = [threading.Thread(target=attempt, args=(c,)) for c in callers]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(booked) == 1
    assert len(refused) == len(callers) - 1
    assert _slot_available(services, slot.id) is False


def test_lockstep_invariant_after_mixed_operations(
    services, bookings, service_slot_factory, caller_factory
):
    slots = [service_slot_factory() for _ in range(4)]
    owners = [caller_factory() for _ in range(4)]
    interviews = [bookings.book_interview(o, s.id, "Placement") for o, s in zip(owners, slots)]
    bookings.cancel_interview(interviews[0].id, owners[0])
    bookings.cancel_interview(interviews[2].id, owners[2])
    bookings.book_interview(owners[1], slots[0].id, "Internship")

    for slot in services.stores.slots.all():
        active = services.stores.interviews.find(
            lambda i, sid=slot.id: i.slot_id == sid and i.is_active
        )
        assert slot.available is (not active)


def test_cancel_all_for_user(services, bookings, service_slot_factory, student):
    first = bookings.book_interview(student, service_slot_factory().id, "Placement")
    bookings.book_interview(student, service_slot_factory().id, "Placement")
    bookings.cancel_interview(first.id, student)

    assert bookings.cancel_all_for_user(student.user_id) == 1
    assert all(s.available for s in services.stores.slots.all())


def test_stats(bookings, service_slot_factory, student):
    a = bookings.book_interview(student, service_slot_factory(price=50.0).id, "Placement")
    bookings.book_interview(student, service_slot_factory(price=25.0).id, "Placement")
    bookings.cancel_interview(a.id, student)

    stats = bookings.get_stats()

    assert stats["total"] == 2
    assert stats["upcoming"] == 1
    assert stats["cancelled"] == 1
    assert stats["completed"] == 0
    assert stats["total_revenue"] == 75.0


def test_booking_a_past_slot_is_refused(services, bookings, service_slot_factory, student):
    slot = service_slot_factory(date=date.today() - timedelta(days=2))

    with pytest.raises(ValidationFailed) as excinfo:
        bookings.book_interview(student, slot.id, "Placement")

    assert excinfo.value.reason == "slot_in_past"
    assert _slot_available(services, slot.id) is True
