# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

from typing import Any, ClassVar

__all__ = (
    "StoreError",
    "ValidationError",
    "ItemNotFoundError",
    "SubscriptionLeakError",
)


class StoreError(Exception):
    default_message: ClassVar[str] = "fluxstore error"
    status_code: ClassVar[int] = 500

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message or self.default_message)
        if cause:
            self.__cause__ = cause  # preserves traceback
        self.message = message or self.default_message
        self.details = details or {}
        self.status_code = status_code or self.status_code

    def to_dict(self, *, include_cause: bool = False) -> dict[str, Any]:
        data = {
            "error": self.__class__.__name__,
            "message": self.message,
            "status_code": self.status_code,
            **({"details": self.details} if self.details else {}),
        }
        if include_cause and (cause := self.__cause__):
            data["cause"] = repr(cause)
        return data


class ValidationError(StoreError):
    """Raised when an input cannot be turned into a record or event."""

    default_message = "Validation failed"
    status_code = 422

    @classmethod
    def from_value(
        cls,
        value: Any,
        *,
        expected: str | None = None,
        message: str | None = None,
        cause: Exception | None = None,
        **extra: Any,
    ):
        """Create a ValidationError from a value with optional expected type and message."""
        details = {
            "value": value,
            "type": type(value).__name__,
            **({"expected": expected} if expected else {}),
            **extra,
        }
        return cls(message=message, details=details, cause=cause)


class ItemNotFoundError(StoreError):
    """Raised when a positional lookup falls outside the collection."""

    default_message = "Item not found"
    status_code = 404


class SubscriptionLeakError(StoreError):
    """The subscription table no longer mirrors the collection's items.

    A record is (or was) a member without a live cancellation handle, so a
    listener may still be attached to a record that left the collection.
    """

    default_message = "Subscription table out of sync with items"
    status_code = 500
