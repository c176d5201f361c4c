# client.py

import threading
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import requests

from .errors import JenkinsAuthenticationError, JenkinsClientError, JenkinsConnectionError
from .log import logger

XML_HEADERS = {"Content-Type": "application/xml; charset=utf-8"}


class JenkinsClient:
    """
    Authenticated HTTP transport for a single Jenkins server.

    Every POST carries a CSRF crumb when the server issues one. Crumbs are
    cached per client for ``crumb_cache_minutes`` and dropped when a POST
    carrying one is answered with 401 or 403.
    """

    def __init__(self, url: str, username: Optional[str] = None, password: Optional[str] = None,
                 timeout: float = 10, verify: bool = True, crumb_cache_minutes: int = 30,
                 crumb_path: str = "crumbIssuer/api/json"):
        self.url = url.rstrip("/")
        self.timeout = timeout
        self.crumb_cache_minutes = crumb_cache_minutes
        self.crumb_path = crumb_path
        self.session = requests.Session()
        self.session.verify = verify
        if username is not None:
            self.session.auth = (username, password or "")

        self._crumb_cache = {
            "header": None,
            "expires": None,
            "lock": threading.Lock()
        }

    def build_url(self, path: str) -> str:
        return f"{self.url}/{path.lstrip('/')}"

    def get_crumb(self, context: Dict[str, Any]) -> Optional[Dict[str, str]]:
        """
        Get the CSRF crumb header for POST operations, or None when CSRF protection is off.

        A crumb issuer answering 404 is remembered for ``crumb_cache_minutes`` so
        POSTs do not keep asking for a crumb that does not exist.
        """
        request_id = context.get('request_id', 'N/A')

        with self._crumb_cache["lock"]:
            if self._crumb_cache["expires"] and datetime.now() < self._crumb_cache["expires"]:
                logger.debug(f"[{request_id}] Using cached crumb state")
                return self._crumb_cache["header"]

            try:
                response = self.session.get(self.build_url(self.crumb_path), timeout=self.timeout)
                response.raise_for_status()
                crumb_data = response.json()
            except requests.exceptions.HTTPError as e:
                if e.response is not None and e.response.status_code == 404:
                    logger.info(f"[{request_id}] No crumb issuer on the server, sending POSTs without a crumb")
                    self._store_crumb(None)
                else:
                    logger.warning(f"[{request_id}] Failed to fetch crumb token: {e}")
                return None
            except (requests.exceptions.RequestException, ValueError) as e:
                logger.warning(f"[{request_id}] Failed to fetch crumb token: {e}")
                return None

            crumb_token = crumb_data.get("crumb")
            if not crumb_token:
                logger.warning(f"[{request_id}] No crumb token in response")
                return None

            header = {crumb_data.get("crumbRequestField", "Jenkins-Crumb"): crumb_token}
            self._store_crumb(header)
            logger.info(f"[{request_id}] Fetched and cached new crumb token")
            return header

    def _store_crumb(self, header: Optional[Dict[str, str]]) -> None:
        self._crumb_cache["header"] = header
        self._crumb_cache["expires"] = datetime.now() + timedelta(minutes=self.crumb_cache_minutes)

    def invalidate_crumb(self) -> None:
        """Forget the cached crumb state; the next POST fetches a fresh one."""
        with self._crumb_cache["lock"]:
            self._crumb_cache["header"] = None
            self._crumb_cache["expires"] = None

    def request(self, method: str, path: str, context: Dict[str, Any], **kwargs) -> requests.Response:
        request_id = context.get('request_id', 'N/A')
        url = self.build_url(path)

        headers = dict(kwargs.pop('headers', None) or {})
        crumb = None
        if method.upper() in ['POST', 'PUT', 'DELETE']:
            crumb = self.get_crumb(context)
            if crumb:
                headers.update(crumb)
                logger.debug(f"[{request_id}] Added CSRF crumb to {method} request")

        logger.info(f"[{request_id}] Making Jenkins API request: {method} {url}")
        try:
            response = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            logger.error(f"[{request_id}] Jenkins API request failed: {e}")
            if status_code in (401, 403):
                suggestion = "Check Jenkins credentials (JENKINS_USER and JENKINS_API_TOKEN)"
                if crumb:
                    # Crumbs die with the server session; drop it so the next call refetches.
                    self.invalidate_crumb()
                    suggestion += ". The CSRF crumb was rejected and will be refetched on the next request"
                raise JenkinsAuthenticationError(
                    f"Authentication failed for {method} {url} (HTTP {status_code})",
                    status_code=status_code,
                    suggestion=suggestion
                ) from e
            raise JenkinsClientError(
                f"HTTP error for {method} {url} (HTTP {status_code})",
                status_code=status_code,
                details=e.response.text if e.response is not None else None
            ) from e
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            logger.error(f"[{request_id}] Jenkins API request failed: {e}")
            raise JenkinsConnectionError(
                f"Connection failed for {method} {url}",
                suggestion=f"Check Jenkins server URL ({self.url}) and network connectivity"
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"[{request_id}] Jenkins API request failed: {e}")
            raise JenkinsClientError(f"Request failed for {method} {url}: {e}") from e

        logger.info(f"[{request_id}] Jenkins API request successful (Status: {response.status_code})")
        return response

    def post_urlencoded(self, path: str, data: Dict[str, str], context: Dict[str, Any]) -> requests.Response:
        return self.request("POST", path, context, data=data)

    def post_xml(self, path: str, params: Dict[str, str], xml: str, context: Dict[str, Any]) -> requests.Response:
        return self.request("POST", path, context, params=params,
                            data=xml.encode("utf-8"), headers=XML_HEADERS)
