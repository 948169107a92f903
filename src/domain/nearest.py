"""
Nearest-online-worker selection
===============================

Linear scan over one snapshot of candidates ``{id: record}``.  The scan
keeps the candidate with the strictly smallest haversine distance that is
still within ``max_distance_km``; on ties the first one enumerated wins.
No sorting is applied, so tie-breaks follow the snapshot's own order.

Complexity: O(n) in the number of candidates.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional

from .coercion import is_real_number
from .distance import haversine_km


def pick_nearest(
    candidates: Mapping[str, Any],
    ref_lat: float,
    ref_lng: float,
    max_distance_km: float = 20.0,
    id_field: str = "boy_id",
) -> Optional[dict[str, Any]]:
    """Return the closest candidate augmented with its id and ``distance_km``."""
    nearest: Optional[dict[str, Any]] = None
    min_distance = math.inf

    for candidate_id, record in candidates.items():
        if not isinstance(record, Mapping):
            continue
        lat, lng = record.get("lat"), record.get("lng")
        if not (is_real_number(lat) and is_real_number(lng)):
            continue

        distance = haversine_km(ref_lat, ref_lng, lat, lng)
        if distance <= max_distance_km and distance < min_distance:
            min_distance = distance
            nearest = {
                **record,
                id_field: candidate_id,
                "distance_km": round(distance, 3),
            }

    return nearest
