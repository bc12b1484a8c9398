"""Remote loader: the currently persisted SubscriptionSet."""

from __future__ import annotations

import structlog

from feedsync.models import SubscriptionSet
from feedsync.storage import BlobStore


def load_remote(store: BlobStore, log: structlog.stdlib.BoundLogger | None = None) -> SubscriptionSet:
    """Fetch and decode the stored set. Nothing stored yet means an empty set."""
    log = log or structlog.get_logger("feedsync")
    blob = store.load_blob()
    if blob is None:
        log.info("remote.empty")
        return SubscriptionSet()
    remote = SubscriptionSet.from_json(blob)
    log.debug("remote.loaded", subscriptions=len(remote), size=len(blob))
    return remote
