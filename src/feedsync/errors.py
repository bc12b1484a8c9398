"""Error hierarchy. Every failure in a sync run is fatal and surfaces as a FeedSyncError."""

from __future__ import annotations


class FeedSyncError(Exception):
    """Base class for all feedsync failures."""


class ConfigError(FeedSyncError):
    """Missing credential or invalid configuration."""


class StorageError(FeedSyncError):
    """Connection, query or statement failure against the key-value table."""


class DataIntegrityError(StorageError):
    """The stored state violates an invariant, e.g. more than one row for the fixed key."""


class FileReadError(FeedSyncError):
    """The feed list could not be opened, read or decoded."""


class DecodeError(FeedSyncError):
    """The stored blob is not a valid subscriptions document."""


class EncodeError(FeedSyncError):
    """The subscription set could not be serialized."""
