"""Sync runner: load both sides, reconcile, persist if anything changed."""

from __future__ import annotations

from pathlib import Path

import structlog
from pydantic import BaseModel

from feedsync.feedlist import load_feed_list
from feedsync.reconcile import Policy, ReconcileResult, reconcile
from feedsync.remote import load_remote
from feedsync.storage import BlobStore


class SyncResult(BaseModel):
    reconciled: ReconcileResult
    written: bool = False
    rows_affected: int = 0

    @property
    def changed(self) -> bool:
        return self.reconciled.changed


def run_sync(
    store: BlobStore,
    feed_file: str | Path,
    channel_id: str,
    log: structlog.stdlib.BoundLogger,
    *,
    policy: Policy = Policy.PRUNE,
    dry_run: bool = False,
) -> SyncResult:
    """Run one reconciliation of *feed_file* against *store*.

    The stored blob is replaced as a whole, and only when the reconciled set
    differs from what was read. Concurrent runs against the same store are not
    coordinated; the scheduler must guarantee a single instance.
    """
    log = log.bind(channel_id=channel_id, policy=str(policy))

    remote = load_remote(store, log)
    local = load_feed_list(feed_file, channel_id, log)
    log.info("sync.loaded", remote=len(remote), local=len(local))

    result = reconcile(local, remote, policy, log)
    if not result.changed:
        log.info("sync.in_sync")
        return SyncResult(reconciled=result)

    if dry_run:
        log.info("sync.dry_run", added=len(result.added), removed=len(result.removed))
        return SyncResult(reconciled=result)

    blob = result.subscriptions.to_json()
    rows = store.upsert_blob(blob)
    log.info("sync.written", rows_affected=rows, size=len(blob), subscriptions=len(result.subscriptions))
    return SyncResult(reconciled=result, written=True, rows_affected=rows)
