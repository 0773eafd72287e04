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

"""Types module."""

import typing as t
from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class Token:
    """Asset metadata, contract is None for the native coin."""

    symbol: str
    decimals: int
    contract: t.Optional[str] = None

    @property
    def is_native(self) -> bool:
        """Whether the token is the chain native coin."""
        return self.contract is None


@dataclass(frozen=True)
class MinAmounts:
    """Minimum amounts, in human readable units."""

    native_coin: Decimal = Decimal(0)
    swarm_token: Decimal = Decimal(0)


@dataclass(frozen=True)
class WalletInfo:
    """Funding target."""

    name: str
    address: str
    chain_id: int

    @classmethod
    def for_node(cls, node_name: str, address: str, chain_id: int) -> "WalletInfo":
        """Wallet info of a discovered node."""
        return cls(
            name=f"node ({node_name}) (address={address})",
            address=address,
            chain_id=chain_id,
        )

    @classmethod
    def for_address(cls, address: str, chain_id: int) -> "WalletInfo":
        """Wallet info of an explicitly listed address."""
        return cls(
            name=f"wallet (address={address})",
            address=address,
            chain_id=chain_id,
        )


@dataclass(frozen=True)
class NodeInfo:
    """Discovered node, address is its HTTP API endpoint."""

    name: str
    address: str


@dataclass(frozen=True)
class SignedTx:
    """Signed EIP-1559 transaction, ready to be submitted."""

    raw_transaction: bytes
    tx_hash: str
    nonce: int
    chain_id: int
    to: str
    value: int
    data: bytes
    gas: int
    max_fee_per_gas: int
    max_priority_fee_per_gas: int


@dataclass
class TransferResult:
    """Outcome of a single asset top up."""

    error: t.Optional[BaseException] = None
    transferred_amount: t.Optional[int] = None


@dataclass
class FundWalletResult:
    """Outcome of funding a single wallet."""

    wallet: WalletInfo
    error: t.Optional[BaseException] = None
    transferred_native_amount: t.Optional[int] = None
    transferred_swarm_amount: t.Optional[int] = None

    @property
    def already_funded(self) -> bool:
        """No transfer was needed."""
        return (
            self.error is None
            and self.transferred_native_amount is None
            and self.transferred_swarm_amount is None
        )


@dataclass
class FundingReport:
    """Outcome of a funding run."""

    results: t.List[FundWalletResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """All wallets were funded."""
        return all(result.error is None for result in self.results)

    @property
    def failed(self) -> t.List[FundWalletResult]:
        """Results of the wallets that failed."""
        return [result for result in self.results if result.error is not None]


@dataclass
class StakeSummary:
    """Outcome of a staking run."""

    staked: int = 0
    already_staked: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        """Number of processed nodes."""
        return self.staked + self.already_staked + self.failed
