# tests/test_task_service.py

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from app.models.task import TaskPriority, TaskStatus
from app.services.errors import InvalidOwnerError, TaskValidationError
from app.services.task_service import TaskService

from .conftest import ALICE, BOB
from .fakes import FakeClock


def test_create_applies_defaults_and_fetch_round_trips(service: TaskService, clock: FakeClock) -> None:
    created = service.create(ALICE, title="Write report")

    assert created.id > 0
    assert created.status == TaskStatus.PENDING
    assert created.priority == TaskPriority.MEDIUM
    assert created.created_at == clock.now
    assert created.updated_at is None
    assert created.tags == []

    fetched = service.get_by_id(created.id, ALICE)
    assert fetched == created


@pytest.mark.parametrize(
    "status,priority",
    [
        (TaskStatus.IN_PROGRESS, TaskPriority.LOW),
        (TaskStatus.CANCELLED, TaskPriority.CRITICAL),
        ("completed", "high"),
    ],
)
def test_create_keeps_supplied_status_and_priority(service: TaskService, status, priority) -> None:
    created = service.create(ALICE, title="T", status=status, priority=priority)
    fetched = service.get_by_id(created.id, ALICE)

    assert fetched.status == TaskStatus(status)
    assert fetched.priority == TaskPriority(priority)


def test_create_normalizes_tags_and_stores_owner_from_caller(service: TaskService) -> None:
    created = service.create(ALICE, title="Tags", tags=" a, b ,,c ", category="Work")

    assert created.tags == ["a", "b", "c"]
    assert created.user_id == ALICE
    assert created.category == "Work"

    assert service.tasks.get_by_id(created.id).tags == "a,b,c"


@pytest.mark.parametrize("title", ["", "   ", None, "x" * 201])
def test_create_rejects_invalid_title(service: TaskService, title) -> None:
    with pytest.raises(TaskValidationError):
        service.create(ALICE, title=title)
    assert service.list_all(ALICE) == []


def test_create_rejects_overlong_optional_fields(service: TaskService) -> None:
    with pytest.raises(TaskValidationError):
        service.create(ALICE, title="T", description="d" * 1001)
    with pytest.raises(TaskValidationError):
        service.create(ALICE, title="T", category="c" * 101)
    with pytest.raises(TaskValidationError):
        service.create(ALICE, title="T", tags=["t" * 300, "u" * 300])


def test_create_rejects_unknown_owner(service: TaskService) -> None:
    with pytest.raises(InvalidOwnerError):
        service.create("ghost", title="Orphan")


def test_create_converts_aware_due_date_to_utc(service: TaskService) -> None:
    from datetime import timezone

    due = datetime(2026, 3, 12, 9, 0, tzinfo=timezone(timedelta(hours=2)))
    created = service.create(ALICE, title="T", due_date=due)

    assert created.due_date == datetime(2026, 3, 12, 7, 0)


def test_other_users_cannot_see_task(service: TaskService) -> None:
    task = service.create(ALICE, title="Private")

    assert service.get_by_id(task.id, BOB) is None
    assert service.get_by_id(9999, BOB) is None
    assert service.list_all(BOB) == []


def test_list_all_is_newest_first(service: TaskService, clock: FakeClock) -> None:
    first = service.create(ALICE, title="first")
    clock.advance(minutes=1)
    second = service.create(ALICE, title="second")
    clock.advance(minutes=1)
    third = service.create(ALICE, title="third")
    service.create(BOB, title="bob's")

    assert [t.id for t in service.list_all(ALICE)] == [third.id, second.id, first.id]


def test_filter_by_status_is_ordered_subset_of_list_all(service: TaskService, clock: FakeClock) -> None:
    ids = []
    for i, status in enumerate([TaskStatus.COMPLETED, TaskStatus.PENDING, TaskStatus.COMPLETED, TaskStatus.IN_PROGRESS]):
        ids.append(service.create(ALICE, title=f"t{i}", status=status).id)
        clock.advance(seconds=30)

    everything = service.list_all(ALICE)
    completed = service.filter(ALICE, status=TaskStatus.COMPLETED)

    assert completed == [t for t in everything if t.status == TaskStatus.COMPLETED]
    assert [t.id for t in completed] == [ids[2], ids[0]]


def test_filter_is_conjunctive_and_owner_scoped(service: TaskService) -> None:
    match = service.create(ALICE, title="match", priority=TaskPriority.HIGH, category="Work")
    service.create(ALICE, title="wrong category", priority=TaskPriority.HIGH, category="Home")
    service.create(ALICE, title="wrong priority", priority=TaskPriority.LOW, category="Work")
    service.create(BOB, title="bob", priority=TaskPriority.HIGH, category="Work")

    result = service.filter(ALICE, priority=TaskPriority.HIGH, category="Work")

    assert [t.id for t in result] == [match.id]


def test_filter_category_is_exact_match(service: TaskService) -> None:
    service.create(ALICE, title="a", category="Workshop")
    exact = service.create(ALICE, title="b", category="Work")

    assert [t.id for t in service.filter(ALICE, category="Work")] == [exact.id]
    assert service.filter(ALICE, category="work") == []


def test_filter_without_criteria_returns_everything(service: TaskService) -> None:
    service.create(ALICE, title="a")
    service.create(ALICE, title="b")

    assert len(service.filter(ALICE)) == 2
    assert len(service.filter(ALICE, category="")) == 2


def test_filter_due_range_is_inclusive_and_skips_undated(service: TaskService) -> None:
    lower = datetime(2026, 3, 15)
    upper = datetime(2026, 3, 20)
    on_lower = service.create(ALICE, title="lower", due_date=lower)
    on_upper = service.create(ALICE, title="upper", due_date=upper)
    service.create(ALICE, title="before", due_date=lower - timedelta(seconds=1))
    service.create(ALICE, title="after", due_date=upper + timedelta(seconds=1))
    service.create(ALICE, title="undated")

    result = service.filter(ALICE, due_from=lower, due_to=upper)
    assert {t.id for t in result} == {on_lower.id, on_upper.id}

    only_from = service.filter(ALICE, due_from=upper)
    assert {t.title for t in only_from} == {"upper", "after"}


def test_update_status_only_leaves_other_fields(service: TaskService, clock: FakeClock) -> None:
    task = service.create(
        ALICE,
        title="Report",
        description="quarterly",
        priority=TaskPriority.HIGH,
        category="Work",
        tags="finance,q1",
    )
    clock.advance(minutes=5)

    updated = service.update(task.id, ALICE, {"status": TaskStatus.COMPLETED})

    assert updated.status == TaskStatus.COMPLETED
    assert updated.title == "Report"
    assert updated.description == "quarterly"
    assert updated.priority == TaskPriority.HIGH
    assert updated.category == "Work"
    assert updated.tags == ["finance", "q1"]
    assert updated.created_at == task.created_at
    assert updated.updated_at > updated.created_at


def test_update_empty_string_clears_but_absent_keeps(service: TaskService) -> None:
    task = service.create(ALICE, title="T", description="desc", category="Work")

    updated = service.update(task.id, ALICE, {"description": ""})

    assert updated.description is None
    assert updated.category == "Work"


def test_update_null_due_date_clears_it(service: TaskService) -> None:
    task = service.create(ALICE, title="T", due_date=datetime(2026, 3, 11))

    assert service.update(task.id, ALICE, {"title": "Renamed"}).due_date == datetime(2026, 3, 11)
    assert service.update(task.id, ALICE, {"due_date": None}).due_date is None


def test_update_ignores_null_status_and_priority(service: TaskService) -> None:
    task = service.create(ALICE, title="T", status=TaskStatus.IN_PROGRESS, priority=TaskPriority.LOW)

    updated = service.update(task.id, ALICE, {"status": None, "priority": None})

    assert updated.status == TaskStatus.IN_PROGRESS
    assert updated.priority == TaskPriority.LOW


def test_update_without_changes_still_refreshes_updated_at(service: TaskService, clock: FakeClock) -> None:
    task = service.create(ALICE, title="T")
    clock.advance(hours=1)

    first = service.update(task.id, ALICE, {})
    assert first.updated_at == clock.now

    clock.advance(hours=1)
    second = service.update(task.id, ALICE, {"title": "T"})
    assert second.updated_at == clock.now
    assert second.updated_at > first.updated_at


def test_update_validates_title_and_enums(service: TaskService) -> None:
    task = service.create(ALICE, title="T")

    with pytest.raises(TaskValidationError):
        service.update(task.id, ALICE, {"title": "   "})
    with pytest.raises(TaskValidationError):
        service.update(task.id, ALICE, {"status": "bogus"})

    assert service.get_by_id(task.id, ALICE).title == "T"


def test_update_by_non_owner_is_not_found_and_changes_nothing(service: TaskService) -> None:
    task = service.create(ALICE, title="Mine")

    assert service.update(task.id, BOB, {"title": "Stolen"}) is None
    assert service.update(12345, ALICE, {"title": "Missing"}) is None

    unchanged = service.get_by_id(task.id, ALICE)
    assert unchanged.title == "Mine"
    assert unchanged.updated_at is None


def test_delete_semantics(service: TaskService) -> None:
    task = service.create(ALICE, title="Doomed")

    assert service.delete(9999, ALICE) is False
    assert service.delete(task.id, BOB) is False
    assert service.get_by_id(task.id, ALICE) is not None

    assert service.delete(task.id, ALICE) is True
    assert service.get_by_id(task.id, ALICE) is None
    assert service.delete(task.id, ALICE) is False


def test_mark_completed_and_in_progress(service: TaskService, clock: FakeClock) -> None:
    task = service.create(ALICE, title="T", due_date=clock.now + timedelta(days=3))
    clock.advance(minutes=1)

    assert service.mark_in_progress(task.id, ALICE) is True
    assert service.get_by_id(task.id, ALICE).status == TaskStatus.IN_PROGRESS

    assert service.mark_completed(task.id, BOB) is False
    assert service.mark_completed(task.id, ALICE) is True

    done = service.get_by_id(task.id, ALICE)
    assert done.status == TaskStatus.COMPLETED
    assert done.days_until_due is None
    assert done.updated_at == clock.now


def test_statistics_for_empty_user(service: TaskService) -> None:
    stats = service.statistics(ALICE)

    assert stats.total == 0
    assert stats.completion_rate == 0


def test_statistics_counts(service: TaskService, clock: FakeClock) -> None:
    now = clock.now
    service.create(ALICE, title="done", status=TaskStatus.COMPLETED, due_date=now - timedelta(days=3))
    service.create(ALICE, title="done too", status=TaskStatus.COMPLETED)
    service.create(ALICE, title="late", due_date=now - timedelta(hours=1))
    service.create(ALICE, title="soon", status=TaskStatus.IN_PROGRESS, due_date=now + timedelta(days=2))
    service.create(ALICE, title="edge", due_date=now + timedelta(days=7))
    service.create(ALICE, title="later", status=TaskStatus.CANCELLED, due_date=now + timedelta(days=8))
    service.create(BOB, title="not counted", status=TaskStatus.COMPLETED)

    stats = service.statistics(ALICE)

    assert stats.total == 6
    assert stats.completed == 2
    assert stats.pending == 2
    assert stats.in_progress == 1
    assert stats.overdue == 1
    assert stats.due_soon == 2
    assert stats.completion_rate == round(2 / 6 * 100, 2) == 33.33


def test_overdue_display_is_date_only_but_statistics_use_timestamps(service: TaskService, clock: FakeClock) -> None:
    earlier_today = clock.now - timedelta(hours=3)
    task = service.create(ALICE, title="This morning", due_date=earlier_today)

    assert task.is_overdue is False
    assert task.days_until_due == 0
    assert service.statistics(ALICE).overdue == 1
    assert [t.id for t in service.overdue(ALICE)] == [task.id]


def test_report_due_tomorrow_becomes_overdue(service: TaskService, clock: FakeClock) -> None:
    task = service.create(ALICE, title="Report", priority=TaskPriority.HIGH, due_date=clock.now + timedelta(days=1))

    assert task.is_overdue is False
    assert task.days_until_due == 1

    clock.advance(days=2)
    later = service.get_by_id(task.id, ALICE)

    assert later.is_overdue is True
    assert later.days_until_due == -1


def test_due_soon_window(service: TaskService, clock: FakeClock) -> None:
    now = clock.now
    in_two = service.create(ALICE, title="two", due_date=now + timedelta(days=2))
    in_one = service.create(ALICE, title="one", due_date=now + timedelta(days=1))
    service.create(ALICE, title="ten", due_date=now + timedelta(days=10))
    service.create(ALICE, title="past", due_date=now - timedelta(days=1))
    service.create(ALICE, title="done", status=TaskStatus.COMPLETED, due_date=now + timedelta(days=1))

    assert [t.id for t in service.due_soon(ALICE)] == [in_one.id, in_two.id]
    assert len(service.due_soon(ALICE, days=30)) == 3

    with pytest.raises(TaskValidationError):
        service.due_soon(ALICE, days=0)


def test_convenience_reads_delegate_to_filter(service: TaskService) -> None:
    work = service.create(ALICE, title="w", category="Work", priority=TaskPriority.CRITICAL)
    service.create(ALICE, title="h", category="Home", status=TaskStatus.CANCELLED)

    assert [t.id for t in service.by_category(ALICE, "Work")] == [work.id]
    assert [t.id for t in service.by_priority(ALICE, TaskPriority.CRITICAL)] == [work.id]
    assert [t.title for t in service.by_status(ALICE, TaskStatus.CANCELLED)] == ["h"]
