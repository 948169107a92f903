"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from typing import Annotated, Any, Optional

from pydantic import BaseModel, Field

Latitude = Annotated[float, Field(ge=-90, le=90)]
Longitude = Annotated[float, Field(ge=-180, le=180)]


# ── Requests ──────────────────────────────────────────────────────────


class DeliveryBoyPresenceRequest(BaseModel):
    status: Optional[str] = Field(None, max_length=32)
    lat: Optional[Latitude] = None
    lng: Optional[Longitude] = None
    last_updated: Optional[int] = None


class DriverPresenceRequest(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    mobile: Optional[str] = None
    is_active: Optional[int] = None
    is_available: Optional[bool] = None
    lat: Optional[Latitude] = None
    lng: Optional[Longitude] = None
    bearing: Optional[float] = Field(None, ge=0, lt=360)
    transport_type: Optional[str] = None
    vehicle_number: Optional[str] = None
    vehicle_type_name: Optional[str] = None
    vehicle_type_icon: Optional[str] = None


class UserLocationRequest(BaseModel):
    lat: Optional[Latitude] = None
    lng: Optional[Longitude] = None
    address: Optional[str] = None
    area: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    formatted_address: Optional[str] = None
    accuracy: Optional[float] = Field(None, ge=0)


class ActiveOrderRequest(BaseModel):
    boy_id: Optional[str] = None
    boy_lat: Optional[Latitude] = None
    boy_lng: Optional[Longitude] = None
    customer_lat: Optional[Latitude] = None
    customer_lng: Optional[Longitude] = None
    restaurant_lat: Optional[Latitude] = None
    restaurant_lng: Optional[Longitude] = None
    distance: Optional[float] = Field(None, ge=0)
    duration: Optional[float] = Field(None, ge=0)
    polyline: Optional[str] = None
    route_coordinates: Optional[list[tuple[float, float]]] = None
    status: Optional[str] = Field(None, max_length=32)


class OrderLocationRequest(BaseModel):
    lat: Latitude
    lng: Longitude


class OrderStatusRequest(BaseModel):
    status: str = Field(..., min_length=1, max_length=32)


class RouteCacheRequest(BaseModel):
    start_lat: Latitude
    start_lng: Longitude
    end_lat: Latitude
    end_lng: Longitude
    distance: Optional[float] = Field(None, ge=0)
    duration: Optional[float] = Field(None, ge=0)
    polyline: Optional[str] = None
    route_coordinates: Optional[list[tuple[float, float]]] = Field(
        None,
        description="Ordered [lat, lng] pairs; encoded when no polyline is given.",
    )


# ── Responses ─────────────────────────────────────────────────────────


class AckResponse(BaseModel):
    ok: bool = True


class RouteCacheResponse(BaseModel):
    key: str
    distance: float
    duration: float
    polyline: str
    cached_at: int
    expires_at: int


class NearestDeliveryBoyResponse(BaseModel):
    boy_id: str
    distance_km: float
    status: Optional[str] = None
    lat: float
    lng: float
    last_updated: Optional[int] = None


class TrackingRecordResponse(BaseModel):
    id: str
    data: dict[str, Any]


class HealthResponse(BaseModel):
    status: str = "ok"
    realtime: bool = False


class ErrorResponse(BaseModel):
    detail: str
