"""Unit tests for GoogleMapsClient."""
import pytest
import responses

from clients.exceptions import DistanceMatrixError, GeocodingError, UpstreamError
from clients.google_maps_client import GoogleMapsClient
from processor.models import Coordinates

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"


def geocode_body(country='US', status='OK'):
    return {
        'status': status,
        'results': [{
            'address_components': [
                {'short_name': 'Austin', 'types': ['locality', 'political']},
                {'short_name': country, 'types': ['country', 'political']}
            ],
            'geometry': {'location': {'lat': 30.2672, 'lng': -97.7431}}
        }]
    }


def matrix_body(count, start_seconds=600):
    return {
        'status': 'OK',
        'rows': [{
            'elements': [
                {
                    'status': 'OK',
                    'distance': {'text': f"{i + 1} mi", 'value': (i + 1) * 1609},
                    'duration': {'text': f"{i + 10} mins", 'value': start_seconds + i}
                }
                for i in range(count)
            ]
        }]
    }


class TestGeocode:
    """Test cases for GoogleMapsClient.geocode."""

    @responses.activate
    def test_explicit_coordinates_skip_the_api(self):
        client = GoogleMapsClient(api_key='maps-key')

        result = client.geocode(lat='30.5', lng=-97.1)

        assert result == Coordinates(lat=30.5, lng=-97.1)
        assert len(responses.calls) == 0

    def test_requires_query_or_coordinates(self):
        client = GoogleMapsClient(api_key='maps-key')

        with pytest.raises(ValueError, match='Provide either lat/lng or q'):
            client.geocode(lat=30.5)

    @responses.activate
    def test_geocode_query(self):
        responses.add(responses.GET, GEOCODE_URL, json=geocode_body(), status=200)

        client = GoogleMapsClient(api_key='maps-key')
        result = client.geocode(q='Austin, TX')

        assert result == Coordinates(lat=30.2672, lng=-97.7431)
        request_url = responses.calls[0].request.url
        assert 'components=country%3AUS' in request_url
        assert 'region=us' in request_url
        assert 'key=maps-key' in request_url

    @responses.activate
    def test_geocode_failure_status(self):
        responses.add(
            responses.GET, GEOCODE_URL,
            json={'status': 'ZERO_RESULTS', 'results': []}, status=200
        )

        client = GoogleMapsClient(api_key='maps-key')

        with pytest.raises(GeocodingError, match='Geocode failed: ZERO_RESULTS'):
            client.geocode(q='nowhere')

    @responses.activate
    def test_non_us_result_rejected(self):
        responses.add(responses.GET, GEOCODE_URL, json=geocode_body(country='CA'), status=200)

        client = GoogleMapsClient(api_key='maps-key')

        with pytest.raises(GeocodingError, match='United States'):
            client.geocode(q='Toronto')

    @responses.activate
    def test_server_error_is_upstream_error(self):
        """Test an outage page is not mistaken for bad caller input."""
        responses.add(responses.GET, GEOCODE_URL, body='<html>err</html>', status=503)

        client = GoogleMapsClient(api_key='maps-key')

        with pytest.raises(UpstreamError) as exc_info:
            client.geocode(q='Austin, TX')

        assert exc_info.value.status_code == 503
        assert not isinstance(exc_info.value, ValueError)

    @responses.activate
    def test_non_json_body_is_upstream_error(self):
        responses.add(responses.GET, GEOCODE_URL, body='<html>oops</html>', status=200)

        client = GoogleMapsClient(api_key='maps-key')

        with pytest.raises(UpstreamError) as exc_info:
            client.geocode(q='Austin, TX')

        assert exc_info.value.status_code == 502


class TestDistanceMatrix:
    """Test cases for GoogleMapsClient.distance_matrix."""

    @responses.activate
    def test_single_batch(self):
        responses.add(responses.GET, DISTANCE_MATRIX_URL, json=matrix_body(2), status=200)

        client = GoogleMapsClient(api_key='maps-key')
        results = client.distance_matrix(
            Coordinates(30.0, -97.0),
            [Coordinates(30.1, -97.1), Coordinates(30.2, -97.2)]
        )

        assert [r.index for r in results] == [0, 1]
        assert results[1].status == 'OK'
        assert results[1].duration == {'text': '11 mins', 'value': 601}
        request_url = responses.calls[0].request.url
        assert 'units=imperial' in request_url
        assert 'origins=30.0%2C-97.0' in request_url

    @responses.activate
    def test_destinations_are_chunked(self):
        """Test more than 25 destinations are split across requests."""
        responses.add(responses.GET, DISTANCE_MATRIX_URL, json=matrix_body(25), status=200)
        responses.add(responses.GET, DISTANCE_MATRIX_URL, json=matrix_body(5), status=200)

        destinations = [Coordinates(30.0 + i / 100, -97.0) for i in range(30)]
        client = GoogleMapsClient(api_key='maps-key')
        results = client.distance_matrix(Coordinates(30.0, -97.0), destinations)

        assert len(responses.calls) == 2
        assert len(results) == 30
        assert [r.index for r in results[25:]] == [25, 26, 27, 28, 29]

    @responses.activate
    def test_rejected_request_raises(self):
        responses.add(
            responses.GET, DISTANCE_MATRIX_URL,
            json={'status': 'REQUEST_DENIED'}, status=200
        )

        client = GoogleMapsClient(api_key='bad')

        with pytest.raises(DistanceMatrixError, match='REQUEST_DENIED'):
            client.distance_matrix(Coordinates(30.0, -97.0), [Coordinates(30.1, -97.1)])

    @responses.activate
    def test_server_error_is_upstream_error(self):
        responses.add(responses.GET, DISTANCE_MATRIX_URL, body='<html>err</html>', status=500)

        client = GoogleMapsClient(api_key='maps-key')

        with pytest.raises(UpstreamError) as exc_info:
            client.distance_matrix(Coordinates(30.0, -97.0), [Coordinates(30.1, -97.1)])

        assert exc_info.value.status_code == 500
