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

"""Exceptions."""

import typing as t


class FunderException(Exception):
    """Base funder exception."""


class ConfigurationError(FunderException, ValueError):
    """Invalid run configuration."""


class ChainMismatchError(FunderException, ValueError):
    """Wallet chain does not match the funding wallet chain."""

    def __init__(self, wallet_chain_id: int, funding_chain_id: int) -> None:
        """Initialize object."""
        super().__init__(
            f"wallet info chain ID ({wallet_chain_id}) does not match "
            f"funding wallet chain ID ({funding_chain_id})"
        )
        self.wallet_chain_id = wallet_chain_id
        self.funding_chain_id = funding_chain_id


class AssetNotConfiguredError(FunderException, KeyError):
    """Asset is not configured for a chain."""

    def __init__(self, asset: str, chain_id: int) -> None:
        """Initialize object."""
        super().__init__(f"{asset} not specified for chain (id {chain_id})")
        self.asset = asset
        self.chain_id = chain_id

    def __str__(self) -> str:
        """String representation."""
        return str(self.args[0])


class InvalidAddressError(FunderException, ValueError):
    """Malformed wallet address."""


class BalanceQueryError(FunderException, RuntimeError):
    """Balance could not be read."""


class TransferFailedError(FunderException, RuntimeError):
    """Transaction could not be sent."""


class NonceRetryExhaustedError(TransferFailedError):
    """Nonce kept colliding after all retries."""


class CollaboratorError(FunderException, RuntimeError):
    """Failure of an external collaborator, a swarm node or the chain node."""


class FundingCancelledError(FunderException, RuntimeError):
    """Funding was cancelled by the caller."""


class FundingError(FunderException, RuntimeError):
    """Failed funding, with one cause per failed component."""

    def __init__(
        self,
        causes: t.Sequence[t.Tuple[str, BaseException]],
        message: str = "failed funding",
    ) -> None:
        """Initialize object."""
        self.causes: t.List[t.Tuple[str, BaseException]] = list(causes)
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        """String representation."""
        if not self.causes:
            return self.message
        reason = ", ".join(f"{name}: {cause}" for name, cause in self.causes)
        return f"{self.message}, reason: {reason}"

    @classmethod
    def merge(
        cls, causes: t.Iterable[t.Tuple[str, t.Optional[BaseException]]]
    ) -> t.Optional["FundingError"]:
        """Build an aggregate from the failed causes, None if nothing failed."""
        failed = [(name, cause) for name, cause in causes if cause is not None]
        if not failed:
            return None
        return cls(causes=failed)
