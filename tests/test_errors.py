# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Tests for fluxstore error classes."""

import pytest

from fluxstore._errors import (
    ItemNotFoundError,
    StoreError,
    SubscriptionLeakError,
    ValidationError,
)


class TestStoreError:
    """Tests for base StoreError class."""

    def test_default_initialization(self):
        error = StoreError()
        assert str(error) == "fluxstore error"
        assert error.message == "fluxstore error"
        assert error.details == {}
        assert error.status_code == 500

    def test_custom_message(self):
        error = StoreError("Custom error message")
        assert str(error) == "Custom error message"

    def test_with_status_code(self):
        error = StoreError("Error", status_code=404)
        assert error.status_code == 404

    def test_with_cause(self):
        cause = ValueError("Original error")
        error = StoreError("Wrapped error", cause=cause)
        assert error.__cause__ is cause

    def test_to_dict(self):
        error = StoreError("Error", details={"key": "value"})
        assert error.to_dict() == {
            "error": "StoreError",
            "message": "Error",
            "status_code": 500,
            "details": {"key": "value"},
        }

    def test_to_dict_with_cause(self):
        error = StoreError("Error", cause=KeyError("k"))
        assert error.to_dict(include_cause=True)["cause"] == "KeyError('k')"
        assert "cause" not in error.to_dict()


class TestSubclasses:
    @pytest.mark.parametrize(
        "cls, status",
        [
            (ValidationError, 422),
            (ItemNotFoundError, 404),
            (SubscriptionLeakError, 500),
        ],
    )
    def test_hierarchy(self, cls, status):
        error = cls()
        assert isinstance(error, StoreError)
        assert error.status_code == status
        assert error.message == cls.default_message

    def test_validation_error_from_value(self):
        error = ValidationError.from_value(42, expected="mapping")
        assert error.details == {"value": 42, "type": "int", "expected": "mapping"}
        assert error.message == "Validation failed"
