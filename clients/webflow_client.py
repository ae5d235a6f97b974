"""Client for the Webflow CMS collections API."""
import logging
from typing import Any, Dict, List

import requests

from clients.exceptions import UpstreamError

logger = logging.getLogger(__name__)


class WebflowClient:
    """Reads collection items from Webflow."""

    BASE_URL = "https://api.webflow.com/v2"
    PAGE_SIZE = 100

    def __init__(self, token: str, timeout: int = 30):
        self.token = token
        self.timeout = timeout

    def fetch_all_items(self, collection_id: str) -> List[Dict[str, Any]]:
        """
        Fetch every item of a collection, following offset pagination.

        Args:
            collection_id: Webflow collection identifier

        Returns:
            List of raw item dicts

        Raises:
            UpstreamError: If any page request fails
        """
        headers = {
            'Authorization': f"Bearer {self.token}",
            'Accept': 'application/json',
            'Content-Type': 'application/json'
        }
        url = f"{self.BASE_URL}/collections/{collection_id}/items"
        items = []
        offset = 0

        while True:
            response = requests.get(
                url,
                params={'limit': self.PAGE_SIZE, 'offset': offset},
                headers=headers,
                timeout=self.timeout
            )
            if not response.ok:
                logger.error(
                    f"Webflow returned {response.status_code}: {response.text}"
                )
                raise UpstreamError(
                    response.status_code, f"Webflow {response.status_code}: {response.text}"
                )

            page = response.json().get('items') or []
            items.extend(page)
            if len(page) < self.PAGE_SIZE:
                break
            offset += len(page)

        logger.info(f"Fetched {len(items)} items from collection {collection_id}")
        return items
