"""
Realtime tracking endpoints
===========================

PUT    /api/v1/tracking/delivery-boys/{boy_id}      -- presence ping
GET    /api/v1/tracking/delivery-boys/nearest       -- dispatch lookup
GET    /api/v1/tracking/delivery-boys/{boy_id}      -- last known presence
PUT    /api/v1/tracking/drivers/{driver_id}         -- driver presence ping
PUT    /api/v1/tracking/users/{user_id}             -- customer location
PUT    /api/v1/tracking/orders/{order_id}           -- assign / refresh order
GET    /api/v1/tracking/orders/{order_id}           -- live order tracking
PATCH  /api/v1/tracking/orders/{order_id}/location  -- courier moved
PATCH  /api/v1/tracking/orders/{order_id}/status    -- status change
DELETE /api/v1/tracking/orders/{order_id}           -- completed / cancelled
PUT    /api/v1/tracking/routes                      -- cache a computed route
GET    /api/v1/tracking/routes                      -- cached route lookup

Writes answer ``{"ok": true}``; when the tracking layer degrades (store
missing or failing) they answer **503** so callers can retry.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from src.api.dependencies import get_store
from src.api.middleware import limiter
from src.api.schemas import (
    AckResponse,
    ActiveOrderRequest,
    DeliveryBoyPresenceRequest,
    DriverPresenceRequest,
    ErrorResponse,
    NearestDeliveryBoyResponse,
    OrderLocationRequest,
    OrderStatusRequest,
    RouteCacheRequest,
    RouteCacheResponse,
    TrackingRecordResponse,
    UserLocationRequest,
)
from src.config import settings
from src.domain.cache_key import make_route_cache_key
from src.infrastructure.repositories import (
    ActiveOrderRepository,
    DeliveryBoyPresenceRepository,
    DriverPresenceRepository,
    RouteCacheRepository,
    UserLocationRepository,
)
from src.infrastructure.store import RealtimeStore

router = APIRouter(prefix="/tracking", tags=["tracking"])

_UNAVAILABLE = {503: {"model": ErrorResponse}}


def _ack(ok: bool) -> AckResponse:
    if not ok:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Realtime store unavailable",
        )
    return AckResponse()


# ── Delivery boys ─────────────────────────────────────────────────────


@router.put(
    "/delivery-boys/{boy_id}",
    response_model=AckResponse,
    responses=_UNAVAILABLE,
    summary="Record a delivery partner's presence ping",
)
@limiter.limit("100/minute")
async def upsert_delivery_boy(
    request: Request,
    boy_id: str,
    body: DeliveryBoyPresenceRequest,
    store: Optional[RealtimeStore] = Depends(get_store),
):
    repo = DeliveryBoyPresenceRepository(store)
    return _ack(await repo.upsert(boy_id, body.model_dump(exclude_none=True)))


@router.get(
    "/delivery-boys/nearest",
    response_model=NearestDeliveryBoyResponse,
    summary="Nearest online delivery partner to a pickup point",
)
@limiter.limit("60/minute")
async def nearest_delivery_boy(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    max_distance_km: float = Query(settings.nearest_max_distance_km, gt=0),
    store: Optional[RealtimeStore] = Depends(get_store),
):
    repo = DeliveryBoyPresenceRepository(store)
    nearest = await repo.find_nearest_online(lat, lng, max_distance_km)
    if nearest is None:
        raise HTTPException(
            status_code=404, detail="No online delivery partner in range"
        )
    nearest["boy_id"] = str(nearest["boy_id"])
    return NearestDeliveryBoyResponse(**nearest)


@router.get(
    "/delivery-boys/{boy_id}",
    response_model=TrackingRecordResponse,
    summary="Last known presence of a delivery partner",
)
@limiter.limit("100/minute")
async def get_delivery_boy(
    request: Request,
    boy_id: str,
    store: Optional[RealtimeStore] = Depends(get_store),
):
    record = await DeliveryBoyPresenceRepository(store).get(boy_id)
    if not record:
        raise HTTPException(status_code=404, detail="Delivery partner not tracked")
    return TrackingRecordResponse(id=boy_id, data=record)


# ── Drivers / users ───────────────────────────────────────────────────


@router.put(
    "/drivers/{driver_id}",
    response_model=AckResponse,
    responses=_UNAVAILABLE,
    summary="Record a driver's presence ping",
)
@limiter.limit("100/minute")
async def upsert_driver(
    request: Request,
    driver_id: str,
    body: DriverPresenceRequest,
    store: Optional[RealtimeStore] = Depends(get_store),
):
    repo = DriverPresenceRepository(store)
    return _ack(await repo.upsert(driver_id, body.model_dump(exclude_none=True)))


@router.put(
    "/users/{user_id}",
    response_model=AckResponse,
    responses=_UNAVAILABLE,
    summary="Record a customer's location",
)
@limiter.limit("100/minute")
async def upsert_user(
    request: Request,
    user_id: str,
    body: UserLocationRequest,
    store: Optional[RealtimeStore] = Depends(get_store),
):
    repo = UserLocationRepository(store)
    return _ack(await repo.upsert(user_id, body.model_dump(exclude_none=True)))


# ── Active orders ─────────────────────────────────────────────────────


@router.put(
    "/orders/{order_id}",
    response_model=AckResponse,
    responses=_UNAVAILABLE,
    summary="Create or refresh live tracking for an order",
)
@limiter.limit("100/minute")
async def upsert_order(
    request: Request,
    order_id: str,
    body: ActiveOrderRequest,
    store: Optional[RealtimeStore] = Depends(get_store),
):
    repo = ActiveOrderRepository(store)
    return _ack(await repo.upsert(order_id, body.model_dump(exclude_none=True)))


@router.get(
    "/orders/{order_id}",
    response_model=TrackingRecordResponse,
    summary="Live tracking record for an order",
)
@limiter.limit("100/minute")
async def get_order(
    request: Request,
    order_id: str,
    store: Optional[RealtimeStore] = Depends(get_store),
):
    record = await ActiveOrderRepository(store).get(order_id)
    if not record:
        raise HTTPException(status_code=404, detail="Order not tracked")
    return TrackingRecordResponse(id=order_id, data=record)


@router.patch(
    "/orders/{order_id}/location",
    response_model=AckResponse,
    responses=_UNAVAILABLE,
    summary="Move the courier on an active order",
)
@limiter.limit("100/minute")
async def update_order_location(
    request: Request,
    order_id: str,
    body: OrderLocationRequest,
    store: Optional[RealtimeStore] = Depends(get_store),
):
    repo = ActiveOrderRepository(store)
    return _ack(await repo.update_location(order_id, body.lat, body.lng))


@router.patch(
    "/orders/{order_id}/status",
    response_model=AckResponse,
    responses=_UNAVAILABLE,
    summary="Change the status label of an active order",
)
@limiter.limit("100/minute")
async def update_order_status(
    request: Request,
    order_id: str,
    body: OrderStatusRequest,
    store: Optional[RealtimeStore] = Depends(get_store),
):
    repo = ActiveOrderRepository(store)
    return _ack(await repo.set_status(order_id, body.status))


@router.delete(
    "/orders/{order_id}",
    response_model=AckResponse,
    responses=_UNAVAILABLE,
    summary="Stop tracking a completed or cancelled order",
)
@limiter.limit("100/minute")
async def remove_order(
    request: Request,
    order_id: str,
    store: Optional[RealtimeStore] = Depends(get_store),
):
    return _ack(await ActiveOrderRepository(store).remove(order_id))


# ── Route cache ───────────────────────────────────────────────────────


@router.put(
    "/routes",
    response_model=RouteCacheResponse,
    responses=_UNAVAILABLE,
    summary="Cache a computed route between two points",
)
@limiter.limit("100/minute")
async def cache_route(
    request: Request,
    body: RouteCacheRequest,
    store: Optional[RealtimeStore] = Depends(get_store),
):
    key = make_route_cache_key(
        body.start_lat, body.start_lng, body.end_lat, body.end_lng
    )
    repo = RouteCacheRepository(store)
    payload = body.model_dump(
        exclude_none=True,
        include={"distance", "duration", "polyline", "route_coordinates"},
    )
    _ack(await repo.upsert(key, payload))

    entry = await repo.get(key)
    if entry is None:
        _ack(False)
    return RouteCacheResponse(key=key, **entry.to_record())


@router.get(
    "/routes",
    response_model=RouteCacheResponse,
    summary="Look up a cached route (404 when missing or expired)",
)
@limiter.limit("100/minute")
async def get_cached_route(
    request: Request,
    start_lat: float = Query(..., ge=-90, le=90),
    start_lng: float = Query(..., ge=-180, le=180),
    end_lat: float = Query(..., ge=-90, le=90),
    end_lng: float = Query(..., ge=-180, le=180),
    store: Optional[RealtimeStore] = Depends(get_store),
):
    key = make_route_cache_key(start_lat, start_lng, end_lat, end_lng)
    repo = RouteCacheRepository(store)
    entry = await repo.get(key)
    if entry is None or entry.is_expired(repo.clock()):
        raise HTTPException(status_code=404, detail="Route not cached")
    return RouteCacheResponse(key=key, **entry.to_record())
