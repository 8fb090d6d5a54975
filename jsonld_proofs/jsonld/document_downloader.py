"""Alternative to the pyld downloader.

Keeps preloaded contexts in memory and caches the ones downloaded on the way.
Downloads go through the pyld requests loader.
"""

import logging
from typing import Callable, Dict, Mapping, Optional

from pyld import jsonld

from ..version import USER_AGENT

LOGGER = logging.getLogger(__name__)

DOWNLOAD_TIMEOUT = 10
ACCEPT_HEADER = "application/ld+json, application/json"


def _remote_document(url: str, document) -> dict:
    """Wrap a JSON-LD document in the format used by pyld document loaders."""
    return {
        "contentType": "application/ld+json",
        "contextUrl": None,
        "documentUrl": url,
        "document": document,
    }


class StaticCacheJsonLdDownloader:
    """Context downloader with in-memory static cache for known contexts."""

    def __init__(
        self,
        documents: Optional[Mapping[str, dict]] = None,
        document_downloader: Optional[Callable[[str, dict], dict]] = None,
    ):
        """Load static documents on initialization.

        Args:
            documents: Preloaded JSON-LD documents (usually contexts) by URL
            document_downloader: pyld style loader used on cache miss

        """
        self.document_downloader = (
            document_downloader
            or jsonld.requests_document_loader(timeout=DOWNLOAD_TIMEOUT)
        )
        self.cache: Dict[str, dict] = {
            url: _remote_document(url, document)
            for url, document in (documents or {}).items()
        }

    def load(self, url: str, options: Optional[Dict] = None):
        """Load a jsonld document from URL.

        Prioritize local static cache before attempting to download from the URL.
        """
        cached = self.cache.get(url)

        if cached is not None:
            LOGGER.debug("Local cache hit for context: %s", url)
            return cached

        LOGGER.debug("Context %s not in static cache, resolving from URL.", url)
        options = {
            **(options or {}),
            "headers": {"Accept": ACCEPT_HEADER, "User-Agent": USER_AGENT},
        }
        document = self.document_downloader(url, options)
        self.cache[url] = document
        return document
