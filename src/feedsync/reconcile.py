"""Compute the new remote SubscriptionSet from the local declaration and the stored set."""

from __future__ import annotations

from enum import StrEnum

import structlog
from pydantic import BaseModel

from feedsync.models import Subscription, SubscriptionSet


class Policy(StrEnum):
    """How local removals are treated."""
    PRUNE = "prune"  # add new feeds, drop feeds no longer declared
    ADDITIVE = "additive"  # legacy: stored set only grows


class ReconcileResult(BaseModel):
    subscriptions: SubscriptionSet
    added: list[Subscription] = []
    removed: list[Subscription] = []
    changed: bool = False


def reconcile(
    local: SubscriptionSet,
    remote: SubscriptionSet,
    policy: Policy = Policy.PRUNE,
    log: structlog.stdlib.BoundLogger | None = None,
) -> ReconcileResult:
    """Merge *local* into a copy of *remote* under *policy*. Neither input is mutated.

    Keys embed the URL, so a key present on both sides always refers to the
    same feed and is kept as stored (including any feed metadata).

    ``changed`` compares the resulting set with *remote* by content, so an
    add and a removal in the same run still count as a change.
    """
    log = log or structlog.get_logger("feedsync")
    policy = Policy(policy)
    updated = remote.copy_set()
    removed: list[Subscription] = []
    added: list[Subscription] = []

    if policy is Policy.PRUNE:
        for key in sorted(remote.subscriptions):
            if key not in local:
                removed.append(updated.subscriptions.pop(key))
                log.info("reconcile.removed", key=key, url=remote.subscriptions[key].url)

    for key in sorted(local.subscriptions):
        if key not in updated:
            sub = local.subscriptions[key]
            updated.subscriptions[key] = sub
            added.append(sub)
            log.info("reconcile.added", key=key, url=sub.url)

    changed = updated.subscriptions != remote.subscriptions
    log.debug(
        "reconcile.done",
        policy=str(policy),
        added=len(added),
        removed=len(removed),
        total=len(updated),
        changed=changed,
    )
    return ReconcileResult(subscriptions=updated, added=added, removed=removed, changed=changed)
