"""JSON-LD document loader methods."""

from typing import Callable, Mapping, Optional

from .document_downloader import StaticCacheJsonLdDownloader
from .error import DocumentLoaderError

DocumentLoader = Callable[[str, dict], dict]


def get_default_document_loader(
    documents: Optional[Mapping[str, dict]] = None,
    downloader: Optional[StaticCacheJsonLdDownloader] = None,
) -> DocumentLoader:
    """Return the default document loader.

    Args:
        documents: Preloaded JSON-LD documents by URL, served without network access
        downloader: Downloader to use instead of a new static cache downloader

    """
    downloader = downloader or StaticCacheJsonLdDownloader(documents=documents)

    def loader(url: str, options: Optional[dict] = None):
        """Retrieve a cached or http(s) document."""
        if url in downloader.cache:
            return downloader.cache[url]

        if not (url.startswith("http://") or url.startswith("https://")):
            raise DocumentLoaderError(
                f"Unrecognized url format: {url}. Must start with "
                "'http://' or 'https://' or be preloaded"
            )

        return downloader.load(url, options)

    return loader


__all__ = ["DocumentLoader", "get_default_document_loader"]
