"""工作流编排器

对外命令的唯一入口。每个命令是一个完整的工作单元：

1. 读取并锁定涉及的订单 / 订单工位记录
2. 通过状态机与队列管理器修改状态
3. 写入一条审计记录
4. 提交事务；任何异常（包括审计写入失败）都会整体回滚
5. 提交成功后把事件交给通知出口

编排器本身不保存跨调用的状态，所有状态都在数据库中。
"""

import logging
from contextlib import contextmanager
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from .. import crud, models, schemas
from ..models.enums import AuditAction, OrderLocationStatus as Status, UserRole
from ..utils.helpers import effective_quantity, utcnow
from . import readiness, state_machine
from .audit import AuditRecorder
from .errors import (
    DuplicateOrderNumber,
    InvalidQuantity,
    InvalidTransition,
    NotFound,
    QuantityExceedsTotal,
    WorkflowError,
)
from .identity import SYSTEM_ACTOR, Actor, require_role
from .notifications import (
    HELP_REQUESTED,
    LOCATION_FINISHED,
    ORDER_COMPLETED,
    ORDER_STARTED,
    LoggingNotificationSink,
    NotificationEvent,
    NotificationSink,
    deliver,
)
from .queue_manager import QueueManager

logger = logging.getLogger(__name__)


class WorkflowOrchestrator:

    def __init__(self, db: Session, notifier: Optional[NotificationSink] = None):
        self.db = db
        self.queue = QueueManager(db)
        self.audit = AuditRecorder(db)
        self.notifier = notifier or LoggingNotificationSink()

    @contextmanager
    def _unit_of_work(self, command: str):
        events: List[NotificationEvent] = []
        try:
            yield events
            self.db.commit()
        except WorkflowError as exc:
            self.db.rollback()
            logger.info("%s rejected (%s): %s", command, exc.error_type, exc.message)
            raise
        except Exception:
            self.db.rollback()
            logger.exception("%s failed, transaction rolled back", command)
            raise
        logger.debug("%s committed", command)
        deliver(self.notifier, events)

    # ---- 查找 ----

    def _order(self, order_id: int, for_update: bool = True) -> models.Order:
        order = crud.get_order(self.db, order_id, for_update=for_update)
        if order is None:
            raise NotFound("Order", order_id)
        return order

    def _location(self, location_id: int) -> models.Location:
        location = crud.get_location(self.db, location_id)
        if location is None:
            raise NotFound("Location", location_id)
        return location

    def _order_location(self, order_id: int, location_id: int) -> models.OrderLocation:
        ol = crud.get_order_location(self.db, order_id, location_id, for_update=True)
        if ol is None:
            raise NotFound("OrderLocation", f"order {order_id} at location {location_id}")
        return ol

    def _pairing(self, order_id: int, location_id: int):
        order = self._order(order_id)
        location = self._location(location_id)
        ol = self._order_location(order_id, location_id)
        return order, location, ol

    # ---- 订单 ----

    def create_order(self, data: schemas.OrderCreate, actor: Optional[Actor] = None) -> models.Order:
        """创建订单并按自动排队规则加入各工位队列"""
        actor = actor or SYSTEM_ACTOR
        with self._unit_of_work("create_order"):
            if data.total_quantity is None or data.total_quantity < 1:
                raise InvalidQuantity("Total quantity must be at least 1", field="total_quantity")
            if crud.get_order_by_number(self.db, data.order_number):
                raise DuplicateOrderNumber(f"Order number {data.order_number} already exists", field="order_number")
            order = crud.create_order(self.db, data, created_by=actor.user_id)
            queued = self.queue.auto_enqueue_new_order(order, data.location_ids)
            self.audit.record(
                AuditAction.created,
                order.id,
                user_id=actor.user_id,
                details=f"Order {order.order_number} created at {len(queued)} location(s)",
            )
        return order

    def edit_order(self, order_id: int, data: schemas.OrderUpdate, actor: Optional[Actor] = None) -> models.Order:
        actor = actor or SYSTEM_ACTOR
        with self._unit_of_work("edit_order"):
            order = self._order(order_id)
            update_data = data.model_dump(exclude_unset=True)
            for field in ("order_number", "reference_number", "client", "due_date", "total_quantity"):
                if field in update_data and update_data[field] is None:
                    raise InvalidQuantity(f"{field} cannot be empty", field=field)

            new_number = update_data.get("order_number")
            if new_number and new_number != order.order_number:
                if crud.get_order_by_number(self.db, new_number):
                    raise DuplicateOrderNumber(f"Order number {new_number} already exists", field="order_number")

            if "total_quantity" in update_data:
                self._check_new_total(order, update_data["total_quantity"])

            was_shipped = order.is_shipped
            crud.update_order(self.db, order, update_data)
            if "total_quantity" in update_data:
                order.is_shipped = order.shipped_quantity >= order.total_quantity
                order.partially_shipped = 0 < order.shipped_quantity < order.total_quantity
                # 全部出货的订单不留在任何队列中
                if order.is_shipped and not was_shipped:
                    self.queue.remove_from_all_queues(order.id)

            changed = ", ".join(sorted(update_data)) or "no fields"
            self.audit.record(
                AuditAction.updated,
                order.id,
                user_id=actor.user_id,
                details=f"Order {order.order_number} updated ({changed})",
            )
        return order

    def _check_new_total(self, order: models.Order, total: int) -> None:
        if total < 1:
            raise InvalidQuantity("Total quantity must be at least 1", field="total_quantity")
        if total < order.shipped_quantity:
            raise InvalidQuantity(
                f"Total quantity {total} is below shipped quantity {order.shipped_quantity}",
                field="total_quantity",
            )
        for ol in crud.list_order_locations(self.db, order.id):
            limit = effective_quantity(total, ol.location.count_multiplier)
            if ol.completed_quantity > limit:
                raise InvalidQuantity(
                    f"Total quantity {total} is below completed quantity {ol.completed_quantity} "
                    f"at {ol.location.name}",
                    field="total_quantity",
                )

    def delete_order(self, order_id: int, actor: Optional[Actor] = None) -> None:
        """删除订单（仅管理员），订单工位与求助记录级联删除，审计记录保留"""
        actor = actor or SYSTEM_ACTOR
        with self._unit_of_work("delete_order"):
            require_role(actor, UserRole.admin, "delete orders")
            order = self._order(order_id)
            number = order.order_number
            self.queue.remove_from_all_queues(order.id)
            crud.delete_order(self.db, order)
            self.audit.record(AuditAction.deleted, order_id, user_id=actor.user_id, details=f"Order {number} deleted")

    def ship_order(self, command: schemas.ShipCommand, actor: Optional[Actor] = None) -> models.Order:
        """出货：累计出货数量不能超过订单总数，全部出货后移出所有队列"""
        actor = actor or SYSTEM_ACTOR
        with self._unit_of_work("ship_order"):
            order = self._order(command.order_id)
            quantity = command.quantity
            if quantity < 1:
                raise InvalidQuantity("Ship quantity must be at least 1", field="quantity")
            if order.shipped_quantity + quantity > order.total_quantity:
                raise QuantityExceedsTotal(
                    f"Shipping {quantity} would exceed total {order.total_quantity} "
                    f"({order.shipped_quantity} already shipped)",
                    field="quantity",
                )
            order.shipped_quantity += quantity
            if order.shipped_quantity == order.total_quantity:
                order.is_shipped = True
                order.partially_shipped = False
                self.queue.remove_from_all_queues(order.id)
            else:
                order.partially_shipped = True
            self.audit.record(
                AuditAction.shipped,
                order.id,
                user_id=actor.user_id,
                details=(
                    f"Shipped {quantity} units of order {order.order_number} "
                    f"({order.shipped_quantity}/{order.total_quantity})"
                ),
            )
        return order

    def set_rush(self, order_id: int, actor: Optional[Actor] = None) -> models.Order:
        actor = actor or SYSTEM_ACTOR
        with self._unit_of_work("set_rush"):
            require_role(actor, UserRole.manager, "flag rush orders")
            order = self._order(order_id)
            if not order.rush:
                order.rush = True
                order.rush_set_at = utcnow()
            self.audit.record(
                AuditAction.rush_set,
                order.id,
                user_id=actor.user_id,
                details=f"Order {order.order_number} marked RUSH at {order.rush_set_at.isoformat()}",
            )
        return order

    def clear_rush(self, order_id: int, actor: Optional[Actor] = None) -> models.Order:
        actor = actor or SYSTEM_ACTOR
        with self._unit_of_work("clear_rush"):
            require_role(actor, UserRole.manager, "clear rush orders")
            order = self._order(order_id)
            order.rush = False
            order.rush_set_at = None
            self.audit.record(
                AuditAction.rush_cleared,
                order.id,
                user_id=actor.user_id,
                details=f"Order {order.order_number} rush cleared",
            )
        return order

    # ---- 工位流转 ----

    def start_at_location(self, command: schemas.StartCommand, actor: Optional[Actor] = None) -> models.OrderLocation:
        actor = actor or SYSTEM_ACTOR
        with self._unit_of_work("start_at_location") as events:
            order, location, ol = self._pairing(command.order_id, command.location_id)
            previous = state_machine.start(ol, utcnow())
            if previous == Status.in_queue:
                self.queue.repack_location(location.id)
            verb = "Resumed" if previous == Status.paused else "Started"
            self.audit.record(
                AuditAction.started,
                order.id,
                user_id=actor.user_id,
                location_id=location.id,
                details=f"{verb} processing at {location.name}",
            )
            events.append(NotificationEvent(
                ORDER_STARTED, order.id, location.id, actor.user_id,
                f"Order {order.order_number} {verb.lower()} at {location.name}",
            ))
        return ol

    def pause_at_location(self, command: schemas.PauseCommand, actor: Optional[Actor] = None) -> models.OrderLocation:
        actor = actor or SYSTEM_ACTOR
        with self._unit_of_work("pause_at_location"):
            order, location, ol = self._pairing(command.order_id, command.location_id)
            state_machine.pause(ol)
            self.audit.record(
                AuditAction.paused,
                order.id,
                user_id=actor.user_id,
                location_id=location.id,
                details=f"Paused processing at {location.name}",
            )
        return ol

    def finish_at_location(self, command: schemas.FinishCommand, actor: Optional[Actor] = None) -> models.OrderLocation:
        """完成工位加工；下一道工位自动排队，全部工位完成后订单标记完工"""
        actor = actor or SYSTEM_ACTOR
        with self._unit_of_work("finish_at_location") as events:
            order, location, ol = self._pairing(command.order_id, command.location_id)
            limit = effective_quantity(order.total_quantity, location.count_multiplier)
            recorded = state_machine.finish(ol, command.completed_quantity, limit, utcnow(), no_count=location.no_count)
            self.queue.advance_to_next_location(order.id, location)
            self.audit.record(
                AuditAction.finished,
                order.id,
                user_id=actor.user_id,
                location_id=location.id,
                details=f"Completed processing {recorded} units at {location.name}",
            )
            events.append(NotificationEvent(
                LOCATION_FINISHED, order.id, location.id, actor.user_id,
                f"Order {order.order_number} finished at {location.name}",
            ))
            self.db.flush()
            if not order.is_finished and readiness.all_locations_done(crud.list_order_locations(self.db, order.id)):
                order.is_finished = True
                events.append(NotificationEvent(
                    ORDER_COMPLETED, order.id, None, actor.user_id,
                    f"Order {order.order_number} completed at all locations",
                ))
        return ol

    def update_quantity_at_location(self, command: schemas.UpdateQuantityCommand, actor: Optional[Actor] = None) -> models.OrderLocation:
        actor = actor or SYSTEM_ACTOR
        with self._unit_of_work("update_quantity_at_location"):
            order, location, ol = self._pairing(command.order_id, command.location_id)
            limit = effective_quantity(order.total_quantity, location.count_multiplier)
            previous = state_machine.update_quantity(ol, command.completed_quantity, limit, no_count=location.no_count)
            self.audit.record(
                AuditAction.updated_quantity,
                order.id,
                user_id=actor.user_id,
                location_id=location.id,
                details=f"Updated completed quantity from {previous} to {command.completed_quantity} at {location.name}",
            )
        return ol

    def request_help(self, command: schemas.HelpRequestCommand, actor: Optional[Actor] = None) -> models.HelpRequest:
        """求助只记录并通知，不改变工位状态"""
        actor = actor or SYSTEM_ACTOR
        with self._unit_of_work("request_help") as events:
            order = self._order(command.order_id, for_update=False)
            location = self._location(command.location_id)
            help_request = crud.create_help_request(self.db, order.id, location.id, actor.user_id, command.notes)
            self.audit.record(
                AuditAction.help_requested,
                order.id,
                user_id=actor.user_id,
                location_id=location.id,
                details=command.notes or "Help requested",
            )
            message = f"Help requested for order {order.order_number} at {location.name}"
            if command.notes:
                message = f"{message}: {command.notes}"
            events.append(NotificationEvent(HELP_REQUESTED, order.id, location.id, actor.user_id, message))
        return help_request

    def resolve_help_request(self, help_request_id: int, actor: Optional[Actor] = None) -> models.HelpRequest:
        actor = actor or SYSTEM_ACTOR
        with self._unit_of_work("resolve_help_request"):
            help_request = crud.get_help_request(self.db, help_request_id, for_update=True)
            if help_request is None:
                raise NotFound("Help request", help_request_id)
            if help_request.is_resolved:
                raise InvalidTransition("resolved", "resolve")
            crud.resolve_help_request(self.db, help_request)
            self.audit.record(
                AuditAction.help_resolved,
                help_request.order_id,
                user_id=actor.user_id,
                location_id=help_request.location_id,
                details=f"Help request {help_request.id} resolved",
            )
        return help_request

    # ---- 队列 ----

    def enqueue_at_location(self, command: schemas.EnqueueCommand, actor: Optional[Actor] = None) -> models.OrderLocation:
        """手动加入工位队列（skip_auto_queue 的工位只能这样加入）"""
        actor = actor or SYSTEM_ACTOR
        with self._unit_of_work("enqueue_at_location"):
            order = self._order(command.order_id)
            location = self._location(command.location_id)
            if order.is_shipped:
                raise InvalidTransition("shipped", "enqueue")
            ol = self.queue.enqueue_at_location(order.id, location.id)
            self.audit.record(
                AuditAction.queued,
                order.id,
                user_id=actor.user_id,
                location_id=location.id,
                details=f"Queued at {location.name} position {ol.queue_position}",
            )
        return ol

    def reorder_location_queue(self, command: schemas.ReorderLocationQueueCommand, actor: Optional[Actor] = None) -> List[models.OrderLocation]:
        actor = actor or SYSTEM_ACTOR
        with self._unit_of_work("reorder_location_queue"):
            require_role(actor, UserRole.manager, "reorder location queues")
            order = self._order(command.order_id)
            location = self._location(command.location_id)
            queue = self.queue.reorder_location_queue(order.id, location.id, command.position)
            new_position = next(ol.queue_position for ol in queue if ol.order_id == order.id)
            self.audit.record(
                AuditAction.queue_reordered,
                order.id,
                user_id=actor.user_id,
                location_id=location.id,
                details=f"Moved to position {new_position} at {location.name}",
            )
        return queue

    def set_global_queue_position(self, command: schemas.GlobalQueuePositionCommand, actor: Optional[Actor] = None) -> models.Order:
        actor = actor or SYSTEM_ACTOR
        with self._unit_of_work("set_global_queue_position"):
            require_role(actor, UserRole.manager, "reassign queue positions")
            order = self.queue.set_global_queue_position(command.order_id, command.position)
            self.audit.record(
                AuditAction.global_queue_set,
                order.id,
                user_id=actor.user_id,
                details=f"Set global queue position to {order.global_queue_position} (requested {command.position})",
            )
        return order

    def remove_from_all_queues(self, order_id: int, actor: Optional[Actor] = None) -> int:
        actor = actor or SYSTEM_ACTOR
        with self._unit_of_work("remove_from_all_queues"):
            require_role(actor, UserRole.manager, "remove orders from queues")
            removed = self.queue.remove_from_all_queues(order_id)
            self.audit.record(
                AuditAction.queue_removed,
                order_id,
                user_id=actor.user_id,
                details=f"Order removed from global and all location queues ({removed} queue(s))",
            )
        return removed

    # ---- 只读视图 ----

    def describe_order(self, order_id: int) -> Dict:
        """订单详情及派生的完成度与就绪度"""
        order = self._order(order_id, for_update=False)
        rows = crud.list_order_locations(self.db, order.id)
        detail = schemas.OrderRead.model_validate(order).model_dump()
        detail.update(
            locations=[schemas.OrderLocationRead.model_validate(ol) for ol in rows],
            completion_percentage=readiness.completion_percentage(order, rows),
            readiness=readiness.ship_readiness(order, rows),
        )
        return detail
