"""工作流错误类型

所有错误都以类型化异常返回给调用方，API 层统一映射为 HTTP 状态码。
"""

from typing import Optional


class WorkflowError(Exception):
    """工作流错误基类"""
    error_type = "workflow_error"
    status_code = 400

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        data = {"detail": self.message, "error_type": self.error_type}
        if self.field:
            data["field"] = self.field
        return data


class InvalidTransition(WorkflowError):
    """状态机规则不允许的状态变更"""
    error_type = "invalid_transition"
    status_code = 409

    def __init__(self, current, action: str):
        current_value = getattr(current, "value", current)
        super().__init__(f"Cannot {action} from status '{current_value}'")
        self.current = current
        self.action = action


class InvalidQuantity(WorkflowError):
    """数量超出允许范围"""
    error_type = "invalid_quantity"
    status_code = 422


class QuantityExceedsTotal(WorkflowError):
    """出货数量超过订单总数"""
    error_type = "quantity_exceeds_total"
    status_code = 422


class NotFound(WorkflowError):
    """订单、工位或订单工位不存在"""
    error_type = "not_found"
    status_code = 404

    def __init__(self, entity: str, key):
        super().__init__(f"{entity} {key} not found")
        self.entity = entity
        self.key = key


class DuplicateOrderNumber(WorkflowError):
    error_type = "duplicate_order_number"
    status_code = 409


class QueuePositionOutOfRange(WorkflowError):
    error_type = "queue_position_out_of_range"
    status_code = 422


class AuditWriteFailed(WorkflowError):
    """审计记录写入失败，整个命令回滚"""
    error_type = "audit_write_failed"
    status_code = 500


class PermissionDenied(WorkflowError):
    error_type = "permission_denied"
    status_code = 403
