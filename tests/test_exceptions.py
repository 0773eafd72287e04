# -*- coding: utf-8 -*-
# ------------------------------------------------------------------------------
#
#   Copyright 2025 Valory AG
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#       http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.
#
# ------------------------------------------------------------------------------

"""Tests for funder exceptions."""

import pytest

from funder.exceptions import (
    AssetNotConfiguredError,
    ChainMismatchError,
    ConfigurationError,
    FunderException,
    FundingError,
    NonceRetryExhaustedError,
    TransferFailedError,
)


class TestFundingError:
    """Tests for FundingError."""

    def test_merge_nothing_failed(self) -> None:
        """Test that no failures merge to None."""
        assert FundingError.merge([("native", None), ("swarm", None)]) is None

    def test_merge(self) -> None:
        """Test that failed causes are kept in order with their names."""
        native_error = ValueError("boom")
        error = FundingError.merge([("native", native_error), ("swarm", None)])

        assert error is not None
        assert error.causes == [("native", native_error)]
        assert str(error) == "failed funding, reason: native: boom"

    def test_custom_message(self) -> None:
        """Test an aggregate with a custom message."""
        error = FundingError(
            causes=[("a", ValueError("e1")), ("b", ValueError("e2"))],
            message="failed funding wallets",
        )
        assert str(error) == "failed funding wallets, reason: a: e1, b: e2"


class TestHierarchy:
    """Tests for the exception hierarchy."""

    @pytest.mark.parametrize(
        "exc_type, base",
        [
            (ChainMismatchError, ValueError),
            (AssetNotConfiguredError, KeyError),
            (ConfigurationError, ValueError),
            (TransferFailedError, RuntimeError),
            (NonceRetryExhaustedError, TransferFailedError),
            (FundingError, RuntimeError),
        ],
    )
    def test_bases(self, exc_type: type, base: type) -> None:
        """Test that every exception keeps its builtin base."""
        assert issubclass(exc_type, FunderException)
        assert issubclass(exc_type, base)

    def test_chain_mismatch_fields(self) -> None:
        """Test ChainMismatchError fields."""
        error = ChainMismatchError(wallet_chain_id=1, funding_chain_id=100)
        assert (error.wallet_chain_id, error.funding_chain_id) == (1, 100)
