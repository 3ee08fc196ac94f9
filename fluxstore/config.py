# Copyright (c) 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from typing import Any, ClassVar, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ("StoreSettings", "settings")


class StoreSettings(BaseSettings, frozen=True):
    """Store settings with environment variable support.

    Every field can be overridden with a ``FLUXSTORE_``-prefixed variable,
    e.g. ``FLUXSTORE_LISTENER_ERRORS=log``.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLUXSTORE_",
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    PROXY_EVENT_PREFIX: str = Field(
        default="stores:",
        description="Prefix prepended to child event names re-emitted by a collection",
    )
    WILDCARD_EVENT: str = Field(
        default="*",
        description="Event name that subscribes a listener to every event",
    )
    LISTENER_ERRORS: Literal["raise", "log"] = Field(
        default="raise",
        description="Whether listener exceptions propagate or are logged and dropped",
    )
    LOG_LEVEL: str = "WARNING"

    # Class variable to store the singleton instance
    _instance: ClassVar[Any] = None


settings = StoreSettings()
StoreSettings._instance = settings
