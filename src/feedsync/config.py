"""YAML config loading with env var overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from feedsync.errors import ConfigError
from feedsync.reconcile import Policy
from feedsync.settings import Settings

DEFAULT_CONFIG_PATH = "feedsync.yaml"


class SyncConfig(BaseModel):
    # Mattermost channel that receives the feed items
    channel_id: str = "cwt9qwjzb7gjzca5d8u5s49ewo"
    feed_file: str = "feeds.txt"
    # Fixed address of the plugin's subscriptions row
    plugin_id: str = "rssfeed"
    key: str = "subscriptions"
    policy: Policy = Policy.PRUNE


class AppConfig(BaseModel):
    sync: SyncConfig = SyncConfig()
    settings: Settings = Field(default_factory=Settings)


_SYNC_ENV_MAP = {
    "FEEDSYNC_CHANNEL_ID": "channel_id",
    "FEEDSYNC_FEED_FILE": "feed_file",
    "FEEDSYNC_POLICY": "policy",
}


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> AppConfig:
    """Load config from YAML file, then apply env var overrides.

    A missing file means defaults everywhere. Settings (connection, logging)
    come from the environment and may be overridden by a ``settings`` section.
    """
    load_dotenv()

    data: dict = {}
    path = Path(config_path)
    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"cannot load config {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"config {config_path} must be a mapping")

    sync_data = dict(data.get("sync") or {})
    for env_var, field_name in _SYNC_ENV_MAP.items():
        val = os.environ.get(env_var)
        if val is not None:
            sync_data[field_name] = val

    try:
        settings = Settings(**(data.get("settings") or {}))
        return AppConfig(sync=SyncConfig(**sync_data), settings=settings)
    except ValidationError as exc:
        raise ConfigError(f"invalid config {config_path}: {exc}") from exc
