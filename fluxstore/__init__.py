# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

import logging

from . import ln as ln
from ._errors import (
    ItemNotFoundError,
    StoreError,
    SubscriptionLeakError,
    ValidationError,
)
from .config import StoreSettings, settings
from .generic import Canceler, EventEmitter, Observable
from .store import CollectionStore, Record
from .version import __version__

logger = logging.getLogger(__name__)
logger.setLevel(settings.LOG_LEVEL.upper())

__all__ = (
    "Canceler",
    "CollectionStore",
    "EventEmitter",
    "ItemNotFoundError",
    "Observable",
    "Record",
    "StoreError",
    "StoreSettings",
    "SubscriptionLeakError",
    "ValidationError",
    "__version__",
    "ln",
    "settings",
)
