from __future__ import annotations

import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

Document = dict[str, Any]


class DocumentCache:
    """Holds the most recently loaded document, keyed by locale."""

    def __init__(self) -> None:
        self._document: Optional[Document] = None
        self._key: Optional[str] = None

    def get(self, key: Optional[str] = None) -> Optional[Document]:
        # a None key accepts whatever is cached
        if self._document is None:
            return None
        if key is not None and key != self._key:
            return None
        return self._document

    def put(self, key: Optional[str], document: Document) -> None:
        self._document = document
        self._key = key

    def clear(self) -> None:
        self._document = None
        self._key = None

    def load(
        self,
        key: Optional[str],
        loader: Callable[[], Document],
        force_refresh: bool = False,
    ) -> Document:
        if not force_refresh:
            cached = self.get(key)
            if cached is not None:
                logger.debug("Document cache hit (locale=%s)", key)
                return cached

        logger.debug("Document cache miss (locale=%s, force_refresh=%s)", key, force_refresh)
        document = loader()
        self.put(key, document)
        return document
