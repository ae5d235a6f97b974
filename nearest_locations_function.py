"""AWS Lambda handler returning the locations nearest to a user."""
import json
import logging
import os
import time
from typing import Dict, Any

from clients.exceptions import GeocodingError
from clients.google_maps_client import GoogleMapsClient
from clients.webflow_client import WebflowClient
from http_utils import json_response
from logging_utils import setup_logging
from locations.ranker import (
    merge_distances,
    normalize_locations,
    preselect,
    rank,
    resolve_limit,
)
from processor.models import Coordinates

DEFAULT_SITE_BASE = "https://ets-134dad-1ac025a23cf65f18e644fe3dc093.webflow.io"

RESPONSE_HEADERS = {
    'Access-Control-Allow-Headers': 'Content-Type, Authorization',
    'Access-Control-Allow-Methods': 'POST, OPTIONS',
    'Cache-Control': 's-maxage=300, stale-while-revalidate=120'
}


def cors(body: Any, status_code: int = 200) -> Dict[str, Any]:
    return json_response(body, status_code, RESPONSE_HEADERS)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Rank CMS locations by driving time from the caller's position.

    The POST body carries either ``q`` (address) or ``lat``/``lng``, plus an
    optional ``limit``.

    Args:
        event: API Gateway / Netlify event
        context: Lambda context object

    Returns:
        Response dict with statusCode, CORS headers and a JSON body
    """
    log_level = os.environ.get('LOG_LEVEL', 'INFO')
    timeout_seconds = int(os.environ.get('TIMEOUT_SECONDS', '30'))
    webflow_token = os.environ.get('WEBFLOW_TOKEN')
    collection_id = os.environ.get('WEBFLOW_COLLECTION_ID')
    site_base = os.environ.get('WEBFLOW_SITE_BASE', DEFAULT_SITE_BASE)
    maps_api_key = os.environ.get('GOOGLE_MAPS_API_KEY')

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    method = (event or {}).get('httpMethod')
    if method == 'OPTIONS':
        return cors({'ok': True})
    if method != 'POST':
        return cors({'error': 'Use POST'}, 405)

    try:
        payload = json.loads(event.get('body') or '{}')
    except ValueError:
        logger.warning("Nearest locations request with invalid JSON body")
        return cors({'error': 'Invalid JSON body'}, 400)
    if not isinstance(payload, dict):
        return cors({'error': 'Invalid JSON body'}, 400)

    if not webflow_token or not collection_id or not maps_api_key:
        logger.error("Nearest locations environment is incomplete")
        return cors({'error': 'Missing env vars'}, 500)

    start_time = time.time()
    limit = resolve_limit(payload.get('limit'))
    logger.info("Nearest locations request started", extra={'limit': limit})

    maps = GoogleMapsClient(api_key=maps_api_key, timeout=timeout_seconds)
    webflow = WebflowClient(token=webflow_token, timeout=timeout_seconds)

    try:
        user = maps.geocode(
            q=payload.get('q'), lat=payload.get('lat'), lng=payload.get('lng')
        )
    except (ValueError, GeocodingError) as e:
        logger.warning(f"Could not resolve user position: {e}")
        return cors({'error': str(e)}, 400)
    except Exception as e:
        logger.error(f"Geocoding failed: {e}", exc_info=True)
        return cors({'error': str(e)}, 500)

    try:
        items = webflow.fetch_all_items(collection_id)
        locations = normalize_locations(items, site_base)
        if not locations:
            logger.warning(f"None of {len(items)} CMS items have coordinates")
            return cors({'error': 'No locations with lat/lng.'}, 404)

        candidates = preselect(user, locations)
        distances = maps.distance_matrix(
            user,
            [Coordinates(c.location.lat, c.location.lng) for c in candidates]
        )
        ranked = rank(merge_distances(candidates, distances))
    except Exception as e:
        logger.error(
            f"Nearest locations lookup failed: {str(e)}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        return cors({'error': str(e)}, 500)

    top = ranked[:limit]
    duration = time.time() - start_time
    logger.info(
        "Nearest locations request completed",
        extra={
            'locations': len(locations),
            'returned': len(top),
            'duration_seconds': round(duration, 2)
        }
    )
    return cors({
        'user': user.to_dict(),
        'items': [candidate.to_dict() for candidate in top]
    })
