"""Helpers for building Lambda HTTP responses."""
import json
from typing import Any, Dict, Optional


def json_response(body: Any, status_code: int = 200,
                  extra_headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """
    Build a JSON response open to any origin.

    Args:
        body: JSON-serializable response payload
        status_code: HTTP status code (default: 200)
        extra_headers: Headers merged over the defaults

    Returns:
        Lambda proxy response dict
    """
    headers = {
        'Content-Type': 'application/json',
        'Access-Control-Allow-Origin': '*'
    }
    if extra_headers:
        headers.update(extra_headers)
    return {
        'statusCode': status_code,
        'headers': headers,
        'body': json.dumps(body)
    }
