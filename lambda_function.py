"""AWS Lambda handler for the gym class schedule endpoint."""
import logging
import os
import time
from typing import Dict, Any

from clients.exceptions import UpstreamError
from clients.gymmaster_client import GymMasterClient
from http_utils import json_response
from logging_utils import setup_logging
from processor.schedule_normalizer import ScheduleNormalizer


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Return the day-grouped class schedule for a GymMaster company.

    Args:
        event: API Gateway / Netlify event with a ``company_id`` query parameter
        context: Lambda context object

    Returns:
        Response dict with statusCode, CORS headers and a JSON body
    """
    log_level = os.environ.get('LOG_LEVEL', 'INFO')
    timeout_seconds = int(os.environ.get('TIMEOUT_SECONDS', '30'))
    base_url = os.environ.get('GYMMASTER_BASE_URL', GymMasterClient.DEFAULT_BASE_URL)
    api_key = os.environ.get('GYMMASTER_API_KEY')

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    if (event or {}).get('httpMethod') == 'OPTIONS':
        return json_response({'ok': True})

    params = (event or {}).get('queryStringParameters') or {}
    company_id = params.get('company_id')
    if not company_id:
        logger.warning("Schedule request without company_id")
        return json_response({'error': 'Missing company_id parameter'}, 400)

    if not api_key:
        logger.error("GYMMASTER_API_KEY is not configured")
        return json_response(
            {'error': 'Server configuration error: API Key missing'}, 500
        )

    start_time = time.time()
    logger.info(
        "Schedule request started",
        extra={'company_id': company_id, 'timeout_seconds': timeout_seconds}
    )

    try:
        client = GymMasterClient(
            api_key=api_key, base_url=base_url, timeout=timeout_seconds
        )
        raw_schedule = client.fetch_schedule(company_id)
    except UpstreamError as e:
        logger.error(
            f"Schedule API error: {e}",
            extra={'status_code': e.status_code}
        )
        return json_response(
            {'error': f"External API error: {e.reason}"}, e.status_code
        )
    except Exception as e:
        logger.error(
            f"Failed to fetch schedule after retries: {str(e)}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        return json_response(
            {'error': 'Failed to fetch schedule', 'details': str(e)}, 500
        )

    days = ScheduleNormalizer().transform_to_dicts(raw_schedule)

    duration = time.time() - start_time
    logger.info(
        "Schedule request completed",
        extra={
            'days': len(days),
            'classes': sum(len(day['classes']) for day in days),
            'duration_seconds': round(duration, 2)
        }
    )
    return json_response(days)
