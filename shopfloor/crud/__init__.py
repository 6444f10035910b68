from .user import (
    get_user,
    get_user_by_username,
    create_user,
    set_password,
    authenticate_user,
)

from .location import (
    create_location,
    get_location,
    list_locations,
    list_auto_queue_locations,
    update_location,
)

from .order import (
    create_order,
    get_order,
    get_order_by_number,
    list_orders,
    list_active_orders,
    list_global_queue,
    update_order,
    delete_order,
)

from .order_location import (
    get_order_location,
    list_for_order as list_order_locations,
    list_for_location as list_location_order_locations,
    list_queue as list_location_queue,
    max_queue_position,
    create_order_location,
)

from .audit import (
    create_audit_entry,
    list_for_order as list_audit_for_order,
    list_recent as list_recent_audit,
)

from .help_request import (
    create_help_request,
    get_help_request,
    list_active as list_active_help_requests,
    mark_resolved as resolve_help_request,
)

__all__ = [
    # User functions
    "get_user",
    "get_user_by_username",
    "create_user",
    "set_password",
    "authenticate_user",

    # Location functions
    "create_location",
    "get_location",
    "list_locations",
    "list_auto_queue_locations",
    "update_location",

    # Order functions
    "create_order",
    "get_order",
    "get_order_by_number",
    "list_orders",
    "list_active_orders",
    "list_global_queue",
    "update_order",
    "delete_order",

    # OrderLocation functions
    "get_order_location",
    "list_order_locations",
    "list_location_order_locations",
    "list_location_queue",
    "max_queue_position",
    "create_order_location",

    # Audit functions
    "create_audit_entry",
    "list_audit_for_order",
    "list_recent_audit",

    # Help request functions
    "create_help_request",
    "get_help_request",
    "list_active_help_requests",
    "resolve_help_request",
]
