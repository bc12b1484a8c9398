"""Local loader: parse the declarative feed list into a SubscriptionSet."""

from __future__ import annotations

from pathlib import Path

import structlog

from feedsync.errors import FileReadError
from feedsync.models import Subscription, SubscriptionSet

COMMENT_PREFIX = "# "


def parse_feed_list(text: str, destination: str) -> list[Subscription]:
    """One subscription per line; empty lines and ``# `` comments are skipped.

    Lines are used verbatim as URLs, with no trimming or validation.
    """
    subs = []
    for line in text.split("\n"):
        if not line or line.startswith(COMMENT_PREFIX):
            continue
        subs.append(Subscription(channel_id=destination, url=line))
    return subs


def load_feed_list(
    path: str | Path,
    destination: str,
    log: structlog.stdlib.BoundLogger | None = None,
) -> SubscriptionSet:
    """Read *path* as UTF-8 and build the candidate SubscriptionSet for *destination*."""
    log = log or structlog.get_logger("feedsync")
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileReadError(f"cannot read feed list {path}: {exc}") from exc

    subs = parse_feed_list(text, destination)
    local = SubscriptionSet.from_subscriptions(subs)
    log.debug("feedlist.loaded", path=str(path), feeds=len(local), duplicates=len(subs) - len(local))
    return local
