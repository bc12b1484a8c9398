"""Tests for reconciliation policies."""

from __future__ import annotations

from feedsync.models import Subscription, SubscriptionSet, XmlFeedMeta
from feedsync.reconcile import Policy, reconcile


def _set(*urls: str, channel: str = "chan1") -> SubscriptionSet:
    return SubscriptionSet.from_subscriptions([Subscription(channel_id=channel, url=u) for u in urls])


A = "http://a.example/feed"
B = "http://b.example/feed"
C = "http://c.example/feed"


class TestPrunePolicy:
    def test_empty_remote_adds_everything(self):
        result = reconcile(_set(A, B), SubscriptionSet())

        assert result.changed is True
        assert result.subscriptions.keys() == {f"chan1/{A}", f"chan1/{B}"}
        assert [s.url for s in result.added] == [A, B]
        assert result.removed == []

    def test_in_sync(self):
        result = reconcile(_set(A, B), _set(A, B))

        assert result.changed is False
        assert result.added == []
        assert result.removed == []
        assert result.subscriptions == _set(A, B)

    def test_removes_undeclared(self):
        result = reconcile(_set(A), _set(A, B))

        assert result.changed is True
        assert result.subscriptions.keys() == {f"chan1/{A}"}
        assert [s.url for s in result.removed] == [B]
        assert result.added == []

    def test_swap_is_a_change(self):
        result = reconcile(_set(A, C), _set(A, B))

        assert result.changed is True
        assert len(result.subscriptions) == 2
        assert result.subscriptions.keys() == {f"chan1/{A}", f"chan1/{C}"}
        assert [s.url for s in result.added] == [C]
        assert [s.url for s in result.removed] == [B]

    def test_idempotent(self):
        local = _set(A, B)
        first = reconcile(local, _set(B, C))
        second = reconcile(local, first.subscriptions)

        assert second.changed is False
        assert second.subscriptions == first.subscriptions

    def test_removing_a_line_removes_exactly_that_key(self):
        remote = _set(A, B, C)
        result = reconcile(_set(A, C), remote)
        assert result.subscriptions.keys() == remote.keys() - {f"chan1/{B}"}

    def test_adding_a_line_adds_exactly_that_key(self):
        remote = _set(A, B)
        result = reconcile(_set(A, B, C), remote)
        assert result.subscriptions.keys() == remote.keys() | {f"chan1/{C}"}

    def test_other_channels_are_pruned(self):
        remote = _set(A)
        remote.subscriptions.update(_set(A, channel="chan2").subscriptions)

        result = reconcile(_set(A), remote)

        assert result.subscriptions.keys() == {f"chan1/{A}"}

    def test_keeps_stored_metadata(self):
        meta = XmlFeedMeta(title="A feed", guid="g-1")
        remote = SubscriptionSet.from_subscriptions([Subscription(channel_id="chan1", url=A, xml_info=meta)])

        result = reconcile(_set(A), remote)

        assert result.changed is False
        assert result.subscriptions.subscriptions[f"chan1/{A}"].xml_info == meta

    def test_inputs_not_mutated(self):
        local = _set(A, C)
        remote = _set(A, B)

        reconcile(local, remote)

        assert local == _set(A, C)
        assert remote == _set(A, B)

    def test_policy_accepts_plain_string(self):
        result = reconcile(_set(A), _set(A, B), "prune")
        assert result.subscriptions.keys() == {f"chan1/{A}"}


class TestAdditivePolicy:
    def test_never_removes(self):
        result = reconcile(_set(A), _set(A, B), Policy.ADDITIVE)

        assert result.changed is False
        assert result.removed == []
        assert result.subscriptions.keys() == {f"chan1/{A}", f"chan1/{B}"}

    def test_adds_new(self):
        result = reconcile(_set(A, C), _set(A, B), Policy.ADDITIVE)

        assert result.changed is True
        assert [s.url for s in result.added] == [C]
        assert result.subscriptions.keys() == {f"chan1/{A}", f"chan1/{B}", f"chan1/{C}"}
