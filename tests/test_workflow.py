import pytest
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from shopfloor import crud, schemas
from shopfloor.core import SYSTEM_ACTOR, Actor, AuditRecorder, WorkflowOrchestrator
from shopfloor.core.errors import (
    AuditWriteFailed,
    DuplicateOrderNumber,
    InvalidQuantity,
    InvalidTransition,
    NotFound,
    PermissionDenied,
    QuantityExceedsTotal,
)
from shopfloor.database import SessionLocal
from shopfloor.models import AuditEntry, Location
from shopfloor.models.enums import AuditAction, OrderLocationStatus as Status, Readiness, UserRole


@pytest.fixture
def line(make_location):
    cut = make_location("Cut", 1, is_primary=True)
    sew = make_location("Sew", 2)
    return cut, sew


def audit_actions(db, order_id):
    return [e.action for e in reversed(crud.list_audit_for_order(db, order_id))]


def test_create_order_writes_one_audit_entry(db, line, make_order, operator):
    order = make_order(actor=operator)
    entries = crud.list_audit_for_order(db, order.id)
    assert len(entries) == 1
    assert entries[0].action == AuditAction.created
    assert entries[0].user_id == operator.user_id
    assert order.created_by == operator.user_id


def test_duplicate_order_number(line, make_order):
    make_order(order_number="SO-100")
    with pytest.raises(DuplicateOrderNumber):
        make_order(order_number="SO-100")


def test_create_order_requires_positive_total(db, line, make_order):
    with pytest.raises(InvalidQuantity):
        make_order(total_quantity=0, order_number="SO-ZERO")
    assert crud.get_order_by_number(db, "SO-ZERO") is None


def test_start_twice_is_rejected_and_audited_once(db, line, make_order, workflow):
    cut, _ = line
    order = make_order()
    command = schemas.StartCommand(order_id=order.id, location_id=cut.id)
    workflow.start_at_location(command)

    # 第二个操作员看到的是已提交的 in_progress 状态
    other = WorkflowOrchestrator(SessionLocal())
    try:
        with pytest.raises(InvalidTransition):
            other.start_at_location(command)
    finally:
        other.db.close()

    assert audit_actions(db, order.id) == [AuditAction.created, AuditAction.started]


def test_full_location_lifecycle(db, line, make_order, workflow, operator):
    cut, _ = line
    order = make_order(total_quantity=10)
    key = dict(order_id=order.id, location_id=cut.id)

    workflow.start_at_location(schemas.StartCommand(**key), operator)
    workflow.update_quantity_at_location(schemas.UpdateQuantityCommand(completed_quantity=6, **key), operator)
    workflow.pause_at_location(schemas.PauseCommand(**key), operator)
    ol = workflow.start_at_location(schemas.StartCommand(**key), operator)
    assert ol.status == Status.in_progress
    ol = workflow.finish_at_location(schemas.FinishCommand(completed_quantity=10, **key), operator)

    assert ol.status == Status.done
    assert ol.completed_quantity == 10
    assert ol.completed_at is not None
    assert audit_actions(db, order.id) == [
        AuditAction.created,
        AuditAction.started,
        AuditAction.updated_quantity,
        AuditAction.paused,
        AuditAction.started,
        AuditAction.finished,
    ]
    assert all(e.user_id == operator.user_id for e in crud.list_audit_for_order(db, order.id)[:-1])


def test_finish_quantity_over_total_rolls_back(db, line, make_order, workflow):
    cut, _ = line
    order = make_order(total_quantity=10)
    workflow.start_at_location(schemas.StartCommand(order_id=order.id, location_id=cut.id))
    with pytest.raises(InvalidQuantity):
        workflow.finish_at_location(schemas.FinishCommand(order_id=order.id, location_id=cut.id, completed_quantity=11))
    assert crud.get_order_location(db, order.id, cut.id).status == Status.in_progress
    assert audit_actions(db, order.id)[-1] == AuditAction.started


def test_count_multiplier_raises_limit(db, make_location, make_order, workflow):
    fold = make_location("Fold", 1, count_multiplier=1.5)
    order = make_order(total_quantity=5)
    workflow.start_at_location(schemas.StartCommand(order_id=order.id, location_id=fold.id))
    # ceil(5 * 1.5) = 8
    ol = workflow.finish_at_location(schemas.FinishCommand(order_id=order.id, location_id=fold.id, completed_quantity=8))
    assert ol.completed_quantity == 8


def test_no_count_location_records_total(db, make_location, make_order, workflow):
    inspect = make_location("Inspect", 1, no_count=True)
    order = make_order(total_quantity=12)
    key = dict(order_id=order.id, location_id=inspect.id)
    workflow.start_at_location(schemas.StartCommand(**key))
    with pytest.raises(InvalidQuantity):
        workflow.update_quantity_at_location(schemas.UpdateQuantityCommand(completed_quantity=3, **key))
    ol = workflow.finish_at_location(schemas.FinishCommand(completed_quantity=0, **key))
    assert ol.completed_quantity == 12


def test_finish_advances_to_next_location(db, make_location, make_order, workflow):
    cut = make_location("Cut", 1)
    sew = make_location("Sew", 2, skip_auto_queue=True)
    order = make_order(location_ids=[cut.id, sew.id])
    other = make_order(location_ids=[cut.id, sew.id])
    assert crud.get_order_location(db, order.id, sew.id).status == Status.not_started

    workflow.start_at_location(schemas.StartCommand(order_id=order.id, location_id=cut.id))
    workflow.finish_at_location(schemas.FinishCommand(order_id=order.id, location_id=cut.id, completed_quantity=10))
    # skip_auto_queue 的下一道工位不会自动排队
    assert crud.get_order_location(db, order.id, sew.id).status == Status.not_started

    crud.update_location(db, sew.id, schemas.LocationUpdate(skip_auto_queue=False))
    workflow.start_at_location(schemas.StartCommand(order_id=other.id, location_id=cut.id))
    workflow.finish_at_location(schemas.FinishCommand(order_id=other.id, location_id=cut.id, completed_quantity=10))
    nxt = crud.get_order_location(db, other.id, sew.id)
    assert nxt.status == Status.in_queue
    assert nxt.queue_position == 1


def test_order_finished_when_all_locations_done(db, line, make_order, workflow, sink):
    cut, sew = line
    order = make_order(total_quantity=4)
    for location in (cut, sew):
        workflow.start_at_location(schemas.StartCommand(order_id=order.id, location_id=location.id))
        workflow.finish_at_location(schemas.FinishCommand(order_id=order.id, location_id=location.id, completed_quantity=4))

    detail = workflow.describe_order(order.id)
    assert detail["is_finished"] is True
    assert detail["completion_percentage"] == 100
    assert detail["readiness"] == Readiness.fully_ready
    assert sink.kinds().count("order_completed") == 1


def test_describe_order_part_ready(line, make_order, workflow):
    cut, sew = line
    order = make_order(total_quantity=100)
    workflow.start_at_location(schemas.StartCommand(order_id=order.id, location_id=cut.id))
    workflow.finish_at_location(schemas.FinishCommand(order_id=order.id, location_id=cut.id, completed_quantity=100))
    workflow.start_at_location(schemas.StartCommand(order_id=order.id, location_id=sew.id))
    workflow.update_quantity_at_location(schemas.UpdateQuantityCommand(order_id=order.id, location_id=sew.id, completed_quantity=50))

    detail = workflow.describe_order(order.id)
    assert detail["completion_percentage"] == 75
    assert detail["readiness"] == Readiness.part_ready
    assert [loc.location_id for loc in detail["locations"]] == [cut.id, sew.id]


def test_ship_cannot_exceed_total(db, line, make_order, workflow):
    order = make_order(total_quantity=10)
    shipped = workflow.ship_order(schemas.ShipCommand(order_id=order.id, quantity=5))
    assert shipped.partially_shipped is True
    assert shipped.is_shipped is False

    with pytest.raises(QuantityExceedsTotal):
        workflow.ship_order(schemas.ShipCommand(order_id=order.id, quantity=6))
    assert crud.get_order(db, order.id).shipped_quantity == 5

    with pytest.raises(InvalidQuantity):
        workflow.ship_order(schemas.ShipCommand(order_id=order.id, quantity=0))


def test_full_shipment_leaves_all_queues(db, line, make_order, workflow, manager):
    cut, sew = line
    order = make_order(total_quantity=10)
    workflow.set_global_queue_position(schemas.GlobalQueuePositionCommand(order_id=order.id, position=1), manager)

    shipped = workflow.ship_order(schemas.ShipCommand(order_id=order.id, quantity=10))

    assert shipped.is_shipped is True
    assert shipped.partially_shipped is False
    assert shipped.global_queue_position is None
    assert crud.list_location_queue(db, cut.id) == []
    assert crud.list_location_queue(db, sew.id) == []
    assert crud.list_orders(db) == []
    assert [o.id for o in crud.list_orders(db, include_shipped=True)] == [order.id]


def test_audit_failure_rolls_back_command(db, line, make_order, workflow, monkeypatch):
    cut, _ = line
    order = make_order()

    def broken(*args, **kwargs):
        raise SQLAlchemyError("audit table unavailable")

    monkeypatch.setattr(crud, "create_audit_entry", broken)
    with pytest.raises(AuditWriteFailed):
        workflow.start_at_location(schemas.StartCommand(order_id=order.id, location_id=cut.id))
    monkeypatch.undo()

    check = SessionLocal()
    try:
        ol = crud.get_order_location(check, order.id, cut.id)
        assert ol.status == Status.in_queue
        assert ol.queue_position == 1
        assert check.query(AuditEntry).filter(AuditEntry.order_id == order.id).count() == 1
    finally:
        check.close()


def test_help_request_notifies_without_state_change(db, line, make_order, workflow, sink, operator):
    cut, _ = line
    order = make_order()
    help_request = workflow.request_help(
        schemas.HelpRequestCommand(order_id=order.id, location_id=cut.id, notes="needle broke"),
        operator,
    )

    assert help_request.is_resolved is False
    assert crud.get_order_location(db, order.id, cut.id).status == Status.in_queue
    event = sink.events[-1]
    assert event.kind == "help_requested"
    assert event.location_id == cut.id
    assert "needle broke" in event.message
    assert audit_actions(db, order.id)[-1] == AuditAction.help_requested

    workflow.resolve_help_request(help_request.id, operator)
    assert crud.list_active_help_requests(db) == []
    with pytest.raises(InvalidTransition):
        workflow.resolve_help_request(help_request.id, operator)


def test_notifications_only_after_commit(line, make_order, workflow, sink):
    cut, _ = line
    order = make_order()
    with pytest.raises(NotFound):
        workflow.request_help(schemas.HelpRequestCommand(order_id=order.id, location_id=999))
    assert "help_requested" not in sink.kinds()


def test_edit_order_checks_completed_quantities(db, line, make_order, workflow):
    cut, _ = line
    order = make_order(total_quantity=10)
    workflow.start_at_location(schemas.StartCommand(order_id=order.id, location_id=cut.id))
    workflow.finish_at_location(schemas.FinishCommand(order_id=order.id, location_id=cut.id, completed_quantity=8))

    with pytest.raises(InvalidQuantity):
        workflow.edit_order(order.id, schemas.OrderUpdate(total_quantity=7))

    edited = workflow.edit_order(order.id, schemas.OrderUpdate(total_quantity=12, client="Globex"))
    assert edited.total_quantity == 12
    assert edited.client == "Globex"
    assert audit_actions(db, order.id)[-1] == AuditAction.updated


def test_rush_requires_manager(line, make_order, workflow, operator, manager):
    order = make_order()
    with pytest.raises(PermissionDenied):
        workflow.set_rush(order.id, operator)

    rushed = workflow.set_rush(order.id, manager)
    assert rushed.rush is True
    assert rushed.rush_set_at is not None

    cleared = workflow.clear_rush(order.id, manager)
    assert cleared.rush is False
    assert cleared.rush_set_at is None


def test_queue_changes_require_manager(line, make_order, workflow, operator):
    cut, _ = line
    order = make_order()
    with pytest.raises(PermissionDenied):
        workflow.set_global_queue_position(schemas.GlobalQueuePositionCommand(order_id=order.id, position=1), operator)
    with pytest.raises(PermissionDenied):
        workflow.reorder_location_queue(
            schemas.ReorderLocationQueueCommand(order_id=order.id, location_id=cut.id, position=1), operator
        )
    with pytest.raises(PermissionDenied):
        workflow.remove_from_all_queues(order.id, operator)


def test_delete_order_admin_only_and_keeps_audit(db, line, make_order, workflow, manager):
    order = make_order()
    order_id = order.id
    with pytest.raises(PermissionDenied):
        workflow.delete_order(order_id, manager)

    workflow.delete_order(order_id, SYSTEM_ACTOR)
    assert crud.get_order(db, order_id) is None
    assert crud.list_order_locations(db, order_id) == []
    assert audit_actions(db, order_id) == [AuditAction.created, AuditAction.deleted]


def test_enqueue_and_reorder_location_queue(db, make_location, make_order, workflow, manager):
    pack = make_location("Pack", 1, skip_auto_queue=True)
    a, b = make_order(), make_order()
    admin = Actor(user_id=None, role=UserRole.admin)
    workflow.enqueue_at_location(schemas.EnqueueCommand(order_id=a.id, location_id=pack.id), admin)
    workflow.enqueue_at_location(schemas.EnqueueCommand(order_id=b.id, location_id=pack.id), admin)

    queue = workflow.reorder_location_queue(
        schemas.ReorderLocationQueueCommand(order_id=b.id, location_id=pack.id, position=1), manager
    )
    assert [(ol.order_id, ol.queue_position) for ol in queue] == [(b.id, 1), (a.id, 2)]
    assert audit_actions(db, b.id) == [AuditAction.created, AuditAction.queued, AuditAction.queue_reordered]


def test_missing_pairing_is_not_found(line, make_order, workflow):
    order = make_order()
    with pytest.raises(NotFound):
        workflow.start_at_location(schemas.StartCommand(order_id=order.id + 100, location_id=line[0].id))
    with pytest.raises(NotFound):
        workflow.pause_at_location(schemas.PauseCommand(order_id=order.id, location_id=999))


def assert_single_new_entry(db, order_id, before, action, location_id=None):
    entries = crud.list_audit_for_order(db, order_id)
    assert len(entries) == before + 1
    latest = entries[0]
    assert latest.action == action
    assert latest.order_id == order_id
    assert latest.location_id == location_id
    return latest


def test_edit_to_shipped_total_leaves_all_queues(db, line, make_order, workflow, manager):
    cut, sew = line
    a, b = make_order(total_quantity=10), make_order(total_quantity=10)
    for order in (a, b):
        workflow.set_global_queue_position(schemas.GlobalQueuePositionCommand(order_id=order.id, position=99), manager)
    workflow.ship_order(schemas.ShipCommand(order_id=a.id, quantity=5))

    edited = workflow.edit_order(a.id, schemas.OrderUpdate(total_quantity=5))

    assert edited.is_shipped is True
    assert edited.global_queue_position is None
    assert [(o.id, o.global_queue_position) for o in workflow.queue.global_queue()] == [(b.id, 1)]
    for location in (cut, sew):
        assert [(ol.order_id, ol.queue_position) for ol in crud.list_location_queue(db, location.id)] == [(b.id, 1)]
    assert crud.get_order_location(db, a.id, cut.id).status == Status.not_started

    c = make_order()
    assert crud.get_order_location(db, c.id, cut.id).queue_position == 2


def test_ship_writes_one_audit_entry(db, line, make_order, workflow, operator):
    order = make_order(total_quantity=10)
    before = len(crud.list_audit_for_order(db, order.id))
    workflow.ship_order(schemas.ShipCommand(order_id=order.id, quantity=4), operator)
    entry = assert_single_new_entry(db, order.id, before, AuditAction.shipped)
    assert entry.user_id == operator.user_id


def test_edit_writes_one_audit_entry(db, line, make_order, workflow, operator):
    order = make_order()
    before = len(crud.list_audit_for_order(db, order.id))
    workflow.edit_order(order.id, schemas.OrderUpdate(notes="customer called"), operator)
    assert_single_new_entry(db, order.id, before, AuditAction.updated)


def test_global_queue_commands_write_one_audit_entry(db, line, make_order, workflow, manager):
    order = make_order()
    before = len(crud.list_audit_for_order(db, order.id))
    workflow.set_global_queue_position(schemas.GlobalQueuePositionCommand(order_id=order.id, position=1), manager)
    entry = assert_single_new_entry(db, order.id, before, AuditAction.global_queue_set)
    assert entry.user_id == manager.user_id

    removed = workflow.remove_from_all_queues(order.id, manager)
    assert removed == 3
    assert_single_new_entry(db, order.id, before + 1, AuditAction.queue_removed)


def test_location_commands_audit_location_id(db, line, make_order, workflow):
    cut, _ = line
    order = make_order()
    before = len(crud.list_audit_for_order(db, order.id))
    workflow.start_at_location(schemas.StartCommand(order_id=order.id, location_id=cut.id))
    assert_single_new_entry(db, order.id, before, AuditAction.started, location_id=cut.id)


def test_state_change_failure_is_not_reported_as_audit_failure(db, line, make_order):
    order = make_order()
    recorder = AuditRecorder(db)
    # name 为必填字段，刷新时违反非空约束
    db.add(Location(name=None, used_order=9))

    with pytest.raises(IntegrityError) as exc:
        recorder.record(AuditAction.updated, order.id)
    assert not isinstance(exc.value, AuditWriteFailed)
    db.rollback()
    assert audit_actions(db, order.id) == [AuditAction.created]
