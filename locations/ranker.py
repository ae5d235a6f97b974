"""Ranking of CMS locations by distance from a user."""
import logging
import math
from functools import cmp_to_key
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from processor.models import Coordinates, DistanceResult, Location, RankedLocation

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371
KM_TO_MILES = 0.621371
PRESELECT = 25  # shortlist size sent to the distance matrix
DEFAULT_LIMIT = 3
MAX_LIMIT = 10

LAT_KEYS = ('latitude', 'lat', 'Latitude', 'Lat')
LNG_KEYS = ('longitude', 'lng', 'Longitude', 'Lng')


def haversine_km(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance between two points in kilometres."""
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    h = (math.sin(d_lat / 2) ** 2
         + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2)
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


def _first_present(fields: Dict[str, Any], keys) -> Any:
    for key in keys:
        if fields.get(key) is not None:
            return fields[key]
    return None


def _to_finite(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _extract_image(fields: Dict[str, Any]) -> Optional[str]:
    featured = fields.get('main-featured-image')
    if isinstance(featured, str):
        return featured
    for key in ('main-featured-image', 'mainFeaturedImage', 'location-map-image'):
        image = fields.get(key)
        if isinstance(image, dict) and image.get('url'):
            return image['url']
    return None


def normalize_location(item: Dict[str, Any], site_base: str) -> Optional[Location]:
    """
    Convert a Webflow collection item into a Location.

    Args:
        item: Raw CMS item with a ``fieldData`` mapping
        site_base: Public site root used to build page links

    Returns:
        Location, or None if the item has no usable coordinates
    """
    fields = item.get('fieldData') or {}
    lat = _to_finite(_first_present(fields, LAT_KEYS))
    lng = _to_finite(_first_present(fields, LNG_KEYS))
    if lat is None or lng is None:
        logger.debug(f"Skipping location {item.get('id')} without coordinates")
        return None

    base = site_base.rstrip('/')
    slug = item.get('slug') or ''
    return Location(
        id=item.get('id'),
        name=fields.get('name') or item.get('name') or 'Location',
        lat=lat,
        lng=lng,
        image=_extract_image(fields),
        address=fields.get('address') or fields.get('Address') or item.get('name') or 'Location',
        details_url=f"{base}/locations/{slug}",
        book_url=f"{base}/book?location={quote(slug, safe='')}"
    )


def normalize_locations(items: List[Dict[str, Any]], site_base: str) -> List[Location]:
    locations = []
    for item in items:
        location = normalize_location(item, site_base)
        if location:
            locations.append(location)
    return locations


def preselect(user: Coordinates, locations: List[Location],
              size: int = PRESELECT) -> List[RankedLocation]:
    """Shortlist the locations closest to the user as the crow flies."""
    candidates = [
        RankedLocation(
            location=location,
            air_km=haversine_km(user, Coordinates(location.lat, location.lng))
        )
        for location in locations
    ]
    candidates.sort(key=lambda candidate: candidate.air_km)
    return candidates[:size]


def merge_distances(candidates: List[RankedLocation],
                    distances: List[DistanceResult]) -> List[RankedLocation]:
    """
    Attach driving distance/duration to each candidate.

    Candidates without an OK matrix element fall back to the air distance.
    """
    by_index = {
        result.index: result for result in distances if result.status == 'OK'
    }
    for index, candidate in enumerate(candidates):
        result = by_index.get(index)
        distance = (result.distance if result else None) or {}
        duration = (result.duration if result else None) or {}

        candidate.distance_text = (
            distance.get('text') or f"{candidate.air_km * KM_TO_MILES:.1f} mi"
        )
        candidate.distance_meters = distance.get('value')
        if candidate.distance_meters is None:
            candidate.distance_meters = round(candidate.air_km * 1000)
        candidate.duration_text = duration.get('text')
        candidate.duration_seconds = duration.get('value')
    return candidates


def _compare(a: RankedLocation, b: RankedLocation) -> int:
    if a.duration_seconds is not None and b.duration_seconds is not None:
        return a.duration_seconds - b.duration_seconds
    return a.distance_meters - b.distance_meters


def rank(candidates: List[RankedLocation]) -> List[RankedLocation]:
    """Order by driving time when both sides have one, else by distance."""
    return sorted(candidates, key=cmp_to_key(_compare))


def resolve_limit(limit: Any) -> int:
    """
    Clamp a caller-supplied result limit to 1..MAX_LIMIT.

    Numeric strings and fractions are accepted and truncated after clamping;
    missing, zero or non-numeric values use DEFAULT_LIMIT.
    """
    try:
        value = float(limit)
    except (TypeError, ValueError):
        value = 0.0
    if value == 0 or math.isnan(value):
        value = DEFAULT_LIMIT
    return int(max(1, min(value, MAX_LIMIT)))
