"""Client for the GymMaster class booking API."""
import logging
import time
from typing import Any, Dict

import requests

from clients.exceptions import UpstreamError

logger = logging.getLogger(__name__)


class GymMasterClient:
    """Fetches class schedules from a GymMaster portal."""

    DEFAULT_BASE_URL = "https://etsperformance.gymmasteronline.com"
    SCHEDULE_PATH = "/portal/api/v1/booking/classes/schedule"
    MAX_RETRIES = 3
    BASE_DELAY = 1  # seconds

    def __init__(self, api_key: str, base_url: str = DEFAULT_BASE_URL,
                 timeout: int = 30):
        """
        Initialize the GymMaster client.

        Args:
            api_key: GymMaster API key
            base_url: Portal base URL
            timeout: HTTP request timeout in seconds (default: 30)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def fetch_schedule(self, company_id: str) -> Dict[str, Any]:
        """
        Fetch the class schedule for a company, retrying transient failures.

        Args:
            company_id: GymMaster company identifier

        Returns:
            Decoded JSON body; its ``result`` key holds the class list

        Raises:
            UpstreamError: If the API answers with a non-2xx status or a
                body that is not JSON
            requests.RequestException: If the API cannot be reached after
                all retries
        """
        url = f"{self.base_url}{self.SCHEDULE_PATH}"
        params = {'companyid': company_id, 'api_key': self.api_key}

        for attempt in range(self.MAX_RETRIES):
            is_last_attempt = attempt == self.MAX_RETRIES - 1
            try:
                logger.info(
                    f"Fetching schedule for company {company_id} "
                    f"(attempt {attempt + 1}/{self.MAX_RETRIES})"
                )
                response = requests.get(url, params=params, timeout=self.timeout)
            except requests.RequestException as e:
                if is_last_attempt:
                    logger.error(
                        f"All {self.MAX_RETRIES} retry attempts failed. Last error: {e}"
                    )
                    raise
                self._backoff(attempt, e)
                continue

            if response.status_code >= 500 and not is_last_attempt:
                self._backoff(attempt, f"HTTP {response.status_code}")
                continue

            if not response.ok:
                logger.error(
                    f"Schedule API returned {response.status_code} {response.reason}"
                )
                raise UpstreamError(response.status_code, response.reason)

            try:
                return response.json()
            except ValueError as e:
                logger.error(f"Schedule API returned a non-JSON body: {e}")
                raise UpstreamError(502, 'Invalid JSON from schedule API')

    def _backoff(self, attempt: int, error: Any) -> None:
        delay = self.BASE_DELAY * (2 ** attempt)
        logger.warning(
            f"Request failed (attempt {attempt + 1}/{self.MAX_RETRIES}): {error}. "
            f"Retrying in {delay} seconds..."
        )
        time.sleep(delay)
