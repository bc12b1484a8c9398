"""Pydantic models for the subscription blob stored by the Mattermost RSS feed plugin.

The plugin is written in Go and marshals its structs with the default field names,
so the wire format uses aliases (``ChannelID``, ``URL``, ``XMLInfo``...).
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_serializer
from pydantic_core import PydanticSerializationError

from feedsync.errors import DecodeError, EncodeError


def subscription_key(channel_id: str, url: str) -> str:
    """Synthetic key of a subscription: ``<channel_id>/<url>``."""
    return f"{channel_id}/{url}"


class XmlFeedMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str | None = Field(default=None, alias="ID")
    title: str | None = Field(default=None, alias="Title")
    guid: str | None = Field(default=None, alias="GUID")
    pub_date: str | None = Field(default=None, alias="PubDate")

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler: Any) -> dict[str, Any]:
        # Go side tags every field omitempty
        return {k: v for k, v in handler(self).items() if v}


class Subscription(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    channel_id: str = Field(alias="ChannelID")
    url: str = Field(alias="URL")
    xml_info: XmlFeedMeta | None = Field(default=None, alias="XMLInfo")

    @property
    def key(self) -> str:
        return subscription_key(self.channel_id, self.url)


class SubscriptionSet(BaseModel):
    """All subscriptions of one deployment, keyed by ``subscription_key``."""

    model_config = ConfigDict(populate_by_name=True)

    subscriptions: dict[str, Subscription] = Field(default_factory=dict, alias="Subscriptions")

    @field_validator("subscriptions", mode="before")
    @classmethod
    def _null_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @classmethod
    def from_subscriptions(cls, subs: list[Subscription]) -> SubscriptionSet:
        return cls(subscriptions={sub.key: sub for sub in subs})

    @classmethod
    def from_json(cls, data: bytes | str | None) -> SubscriptionSet:
        """Decode a stored blob. An absent or empty blob, or a JSON ``null``, is an empty set."""
        if not data:
            return cls()
        try:
            doc = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DecodeError(f"stored subscriptions are not valid JSON: {exc}") from exc
        if doc is None:
            return cls()
        try:
            return cls.model_validate(doc)
        except ValidationError as exc:
            raise DecodeError(f"stored subscriptions do not match the expected shape: {exc}") from exc

    def to_json(self) -> bytes:
        try:
            return self.model_dump_json(by_alias=True).encode("utf-8")
        except PydanticSerializationError as exc:
            raise EncodeError(f"cannot serialize subscriptions: {exc}") from exc

    def copy_set(self) -> SubscriptionSet:
        # Subscriptions are frozen, so copying the mapping is a full copy
        return SubscriptionSet(subscriptions=dict(self.subscriptions))

    def keys(self) -> set[str]:
        return set(self.subscriptions)

    def __len__(self) -> int:
        return len(self.subscriptions)

    def __contains__(self, key: object) -> bool:
        return key in self.subscriptions
