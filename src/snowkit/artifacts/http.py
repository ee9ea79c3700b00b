"""
HTTP artifact source.

HttpFetcher is the default fetch callable of ArtifactSyncPipeline.run: a
bounded GET returning the response body, with requests exceptions mapped
onto the snowkit error taxonomy.
"""

import logging
from typing import Optional

import requests

from snowkit.errors import ArtifactFetchError, FetchTimeoutError

logger = logging.getLogger(__name__)

USER_AGENT = "snowkit"


class HttpFetcher:
    """
    Fetch artifact bytes over HTTP(S).

    Usage:
        fetch = HttpFetcher()
        data = fetch("https://raw.githubusercontent.com/.../01_ingest_data.ipynb", timeout=60)
    """

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = USER_AGENT

    def __call__(self, url: str, timeout: float) -> bytes:
        """
        GET a URL and return its body.

        Raises:
            FetchTimeoutError: If connecting or reading exceeds timeout
            ArtifactFetchError: On an error status or any other request failure
        """
        logger.debug(f"Fetching {url} (timeout {timeout:g}s)")
        try:
            response = self.session.get(url, timeout=timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            raise FetchTimeoutError(url, timeout) from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise ArtifactFetchError(url, status, f"HTTP {status} fetching {url}") from e
        except requests.exceptions.RequestException as e:
            raise ArtifactFetchError(url, None, f"Request for {url} failed: {e}") from e
        return response.content

    def close(self) -> None:
        self.session.close()
