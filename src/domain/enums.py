"""Realtime collection names and status labels."""

import enum

class Collection(str, enum.Enum):
    USERS = "users"
    DRIVERS = "drivers"
    DELIVERY_BOYS = "delivery_boys"
    ACTIVE_ORDERS = "active_orders"
    ROUTE_CACHE = "route_cache"

# Bootstrapped on every start.
MANDATORY_COLLECTIONS: tuple[Collection, ...] = tuple(Collection)

# Flagged ``mandatory: true`` in their ``_meta`` stub.
CORE_COLLECTIONS: frozenset[Collection] = frozenset(
    {Collection.USERS, Collection.DRIVERS}
)

class DeliveryBoyStatus(str, enum.Enum):
    ONLINE = "online"
    OFFLINE = "offline"


DEFAULT_ORDER_STATUS = "assigned"
DEFAULT_VEHICLE_ICON = "motor_bike"
DEFAULT_DRIVER_NAME = "Delivery Partner"
DEFAULT_TRANSPORT_TYPE = "both"
