"""Client for the Google Maps geocoding and distance matrix APIs."""
import logging
from typing import Any, Dict, List, Optional

import requests

from clients.exceptions import DistanceMatrixError, GeocodingError, UpstreamError
from processor.models import Coordinates, DistanceResult

logger = logging.getLogger(__name__)


class GoogleMapsClient:
    """Geocodes addresses and measures driving distances."""

    GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
    DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"
    DESTINATION_CHUNK = 25  # destinations per distance matrix request

    def __init__(self, api_key: str, timeout: int = 30):
        self.api_key = api_key
        self.timeout = timeout

    def geocode(self, q: Optional[str] = None, lat=None, lng=None) -> Coordinates:
        """
        Resolve the user's position.

        Explicit coordinates are returned as-is; otherwise ``q`` is geocoded,
        restricted to the United States.

        Args:
            q: Free-form address or place query
            lat: Latitude, used together with lng
            lng: Longitude, used together with lat

        Returns:
            Coordinates of the user

        Raises:
            ValueError: If neither coordinates nor a query are given
            GeocodingError: If the query cannot be resolved to a US location
            UpstreamError: If the geocoding API fails or answers without JSON
        """
        if lat is not None and lng is not None:
            return Coordinates(lat=float(lat), lng=float(lng))
        if not q:
            raise ValueError("Provide either lat/lng or q")

        response = requests.get(
            self.GEOCODE_URL,
            params={
                'address': q,
                'components': 'country:US',
                'region': 'us',
                'key': self.api_key
            },
            timeout=self.timeout
        )
        payload = self._decode(response, "Geocoding")
        status = payload.get('status')
        results = payload.get('results') or []
        if status != 'OK' or not results:
            raise GeocodingError(f"Geocode failed: {status}")

        top = results[0]
        is_us = any(
            'country' in component.get('types', [])
            and component.get('short_name') == 'US'
            for component in top.get('address_components', [])
        )
        if not is_us:
            raise GeocodingError("Please enter a location in the United States.")

        location = top['geometry']['location']
        logger.info(f"Geocoded query to {location['lat']},{location['lng']}")
        return Coordinates(lat=location['lat'], lng=location['lng'])

    def distance_matrix(self, origin: Coordinates,
                        destinations: List[Coordinates]) -> List[DistanceResult]:
        """
        Measure driving distance from origin to each destination.

        Destinations are sent in chunks; result indexes refer to positions in
        the full destinations list.

        Raises:
            DistanceMatrixError: If a request is rejected
            UpstreamError: If the API fails or answers without JSON
        """
        results = []

        for start in range(0, len(destinations), self.DESTINATION_CHUNK):
            batch = destinations[start:start + self.DESTINATION_CHUNK]
            response = requests.get(
                self.DISTANCE_MATRIX_URL,
                params={
                    'origins': f"{origin.lat},{origin.lng}",
                    'destinations': '|'.join(f"{d.lat},{d.lng}" for d in batch),
                    'units': 'imperial',
                    'key': self.api_key
                },
                timeout=self.timeout
            )
            payload = self._decode(response, "Distance Matrix")
            status = payload.get('status')
            if status != 'OK':
                raise DistanceMatrixError(f"Distance Matrix: {status}")

            rows = payload.get('rows') or []
            elements = rows[0].get('elements', []) if rows else []
            for offset, element in enumerate(elements):
                results.append(DistanceResult(
                    index=start + offset,
                    status=element.get('status'),
                    distance=element.get('distance'),
                    duration=element.get('duration')
                ))

        return results

    def _decode(self, response: requests.Response, api_name: str) -> Dict[str, Any]:
        """
        Return the JSON body of a Maps API response.

        Raises:
            UpstreamError: If the API answers with a non-2xx status or a body
                that is not JSON
        """
        if not response.ok:
            logger.error(
                f"{api_name} API returned {response.status_code} {response.reason}"
            )
            raise UpstreamError(response.status_code, response.reason)

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{api_name} API returned a non-JSON body: {e}")
            raise UpstreamError(502, f"Invalid JSON from {api_name} API")
