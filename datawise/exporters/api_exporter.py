"""
API exporter

Submits transformed records to an entity endpoint:

    POST {baseUrl}{entity.url}
    Authorization: Bearer <token>     (when a token is configured)
    body: JSON array of records

No retries. A dry run logs what would be sent instead of calling out.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import requests

from core.models import TargetEntity

logger = logging.getLogger(__name__)


class ExportSubmissionError(RuntimeError):
    """Raised when the API export request fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def build_url(base_url: str, entity_url: str) -> str:
    """
    Join base URL and entity path with exactly one slash.

    Examples:
        >>> build_url("https://api.example.com/", "/customers")
        "https://api.example.com/customers"
    """
    base = (base_url or '').rstrip('/')
    path = entity_url or ''
    if path and not path.startswith('/'):
        path = '/' + path
    return base + path


def build_json_payload(records: List[Dict[str, Any]]) -> str:
    return json.dumps(records, indent=2, ensure_ascii=False)


def mask_token(token: str) -> str:
    if len(token) <= 8:
        return '***'
    return f"{token[:4]}...{token[-4:]}"


class APIExporter:
    """
    Send records to the configured entity endpoint.

    Example:
        exporter = APIExporter(config.base_url, token=auth_token)
        result = exporter.submit(entity, records)
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30,
        dry_run: bool = False,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url
        self.token = token
        self.timeout = timeout
        self.dry_run = dry_run
        self.session = session or requests.Session()

    def build_headers(self) -> Dict[str, str]:
        headers = {
            'Content-Type': 'application/json',
            'Accept': 'application/json, text/plain, */*',
        }
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    def submit(self, entity: TargetEntity, records: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        POST records to the entity endpoint.

        Returns:
            Dict with url, record count, status code and decoded response body

        Raises:
            ExportSubmissionError: On transport errors or non-2xx responses
        """
        url = build_url(self.base_url, entity.url)
        headers = self.build_headers()

        if not self.token:
            logger.warning("Exporting to %s without an auth token", url)

        if self.dry_run:
            shown = dict(headers)
            if 'Authorization' in shown:
                shown['Authorization'] = f"Bearer {mask_token(self.token)}"
            logger.info("Dry run: POST %s headers=%s records=%d", url, shown, len(records))
            logger.debug("Dry run payload:\n%s", build_json_payload(records))
            return {'url': url, 'records': len(records), 'status_code': None, 'response': None, 'dry_run': True}

        try:
            response = self.session.post(url, json=records, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise ExportSubmissionError(f"Request to {url} failed: {e}") from e

        if not response.ok:
            body = (response.text or '')[:200]
            raise ExportSubmissionError(
                f"{url} returned HTTP {response.status_code}: {body}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError:
            payload = response.text

        logger.info("Exported %d record(s) to %s (HTTP %s)", len(records), url, response.status_code)
        return {
            'url': url,
            'records': len(records),
            'status_code': response.status_code,
            'response': payload,
            'dry_run': False,
        }
