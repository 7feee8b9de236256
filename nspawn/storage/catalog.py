"""Client for the remote image catalog."""

import logging
import requests
from typing import Optional

from ..errors import CatalogError
from ..utils.progress import DownloadProgress


logger = logging.getLogger(__name__)

CHUNK_SIZE = 131072


class CatalogClient:
    """HTTP access to the image catalog."""

    def __init__(self, session: Optional[requests.Session] = None,
                 timeout: Optional[float] = None):
        self._session = session
        self.timeout = timeout

    @property
    def session(self) -> requests.Session:
        """Lazy initialization of the HTTP session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def check_exists(self, url: str) -> int:
        """Return the HTTP status code of a HEAD request on ``url``."""
        logger.debug(f"Checking {url}")
        try:
            response = self.session.head(url, allow_redirects=False, timeout=self.timeout)
        except requests.RequestException as e:
            raise CatalogError(f"Could not reach {url}: {e}")
        logger.debug(f"{url} answered {response.status_code}")
        return response.status_code

    def fetch_listing(self, list_url: str) -> str:
        """Return the catalog listing as text."""
        try:
            response = self.session.get(list_url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise CatalogError(f"Could not fetch listing {list_url}: {e}")
        return response.text

    def fetch_key(self, key_url: str, dest: str):
        """Write the catalog master key to ``dest``."""
        self._stream_to_file(key_url, dest, show_progress=False)

    def download(self, url: str, dest: str):
        """Write the body of ``url`` to ``dest``, showing progress."""
        self._stream_to_file(url, dest, show_progress=True)

    def _stream_to_file(self, url: str, dest: str, show_progress: bool):
        logger.info(f"Downloading {url} to {dest}")
        try:
            with self.session.get(url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                total = response.headers.get('Content-Length')
                total = int(total) if total and total.isdigit() else None

                with open(dest, 'wb') as f:
                    if show_progress:
                        with DownloadProgress(total, description=url.rsplit('/', 1)[-1]) as progress:
                            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                                f.write(chunk)
                                progress.update(len(chunk))
                    else:
                        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                            f.write(chunk)
        except requests.RequestException as e:
            raise CatalogError(f"Could not download {url}: {e}")
