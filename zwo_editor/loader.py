"""Reading workouts from files, URLs, presets and the library."""

import logging
from pathlib import Path
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from . import config
from .codec import decode
from .library import WorkoutLibrary
from .models import Workout
from .presets import get_preset

logger = logging.getLogger(__name__)

PRESET_PREFIX = 'preset:'
LIBRARY_PREFIX = 'library:'


class LoaderError(Exception):
    """Base exception for loading errors."""
    pass


class FetchError(LoaderError):
    """Network-related error."""
    pass


class WorkoutFetcher:
    """Downloads .zwo documents over HTTP."""

    def __init__(self, timeout: Optional[int] = None):
        """Initialize the fetcher.

        Args:
            timeout: Request timeout in seconds (default from config)
        """
        self.timeout = timeout if timeout is not None else config.DEFAULT_TIMEOUT
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create a requests session with retry logic."""
        session = requests.Session()

        retry_strategy = Retry(
            total=config.MAX_RETRIES,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"]
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({
            'User-Agent': config.USER_AGENT,
            'Accept': 'application/xml,text/xml;q=0.9,*/*;q=0.8',
        })

        return session

    def fetch(self, url: str) -> str:
        """Fetch a document.

        Args:
            url: URL to fetch

        Returns:
            Response body as text

        Raises:
            FetchError: If the request fails
        """
        logger.debug(f"Fetching: {url}")

        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.text

        except requests.exceptions.Timeout as e:
            logger.error(f"Timeout fetching {url}: {e}")
            raise FetchError(f"Timeout fetching {url}") from e

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else 'unknown'
            logger.error(f"HTTP error {status_code} fetching {url}: {e}")
            if status_code == 404:
                raise FetchError(f"Workout not found (404): {url}") from e
            raise FetchError(f"HTTP error {status_code} for {url}") from e

        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed for {url}: {e}")
            raise FetchError(f"Failed to fetch {url}") from e


def is_url(source: str) -> bool:
    return source.startswith(('http://', 'https://'))


def load_source(
    source: str,
    fetcher: Optional[WorkoutFetcher] = None,
    library: Optional[WorkoutLibrary] = None
) -> Workout:
    """Resolve a source string to a Workout.

    Args:
        source: An http(s) URL, 'preset:<key>', 'library:<key>' or a file path
        fetcher: Fetcher to use for URLs (created on demand)
        library: Library to use for 'library:' sources

    Returns:
        The decoded Workout

    Raises:
        LoaderError: If the source cannot be read
    """
    if is_url(source):
        text = (fetcher or WorkoutFetcher()).fetch(source)
        return decode(text)

    if source.startswith(PRESET_PREFIX):
        key = source[len(PRESET_PREFIX):]
        try:
            return get_preset(key)
        except KeyError as e:
            raise LoaderError(f"Unknown preset: {key}") from e

    if source.startswith(LIBRARY_PREFIX):
        key = source[len(LIBRARY_PREFIX):]
        # LibraryError propagates to the caller as-is
        return (library or WorkoutLibrary()).load(key)

    path = Path(source)
    try:
        text = path.read_text(encoding='utf-8')
    except OSError as e:
        logger.error(f"Error reading {path}: {e}")
        raise LoaderError(f"Cannot read {path}") from e

    return decode(text)
