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

"""
Fixtures for pytest

The conftest.py file serves as a means of providing fixtures for an entire
directory. Fixtures defined in a conftest.py can be used by any test in that
package without needing to import them (pytest will automatically discover them).

See https://docs.pytest.org/en/stable/reference/fixtures.html
"""

import threading
import typing as t
from unittest.mock import MagicMock

import pytest
from eth_abi import decode, encode
from web3 import Web3

from funder.constants import GNOSIS_CHAIN_ID
from funder.funder_types import NodeInfo, SignedTx
from funder.wallet.key import WalletKey
from funder.wallet.master import FundingWallet


FUNDING_KEY = "0x" + "11" * 32
GAS_ESTIMATE = 21000
GAS_PRICE = 20000
GAS_TIP = 10
# selector, address and uint256
ERC20_CALL_LENGTH = 4 + 32 + 32


class FakeBackend:  # pylint: disable=too-many-instance-attributes
    """
    Deterministic in-memory chain.

    Submitted transactions are recorded and applied: native transfers credit
    `native_balances`, contract calls credit `token_balances` of the encoded
    recipient. Errors queued in `send_errors` are raised by the next
    submissions, one per call.
    """

    def __init__(self, chain_id: int = GNOSIS_CHAIN_ID, nonce: int = 0) -> None:
        """Initialize object."""
        self._lock = threading.Lock()
        self.chain = chain_id
        self.nonce = nonce
        self.native_balances: t.Dict[str, int] = {}
        self.token_balances: t.Dict[str, int] = {}
        self.sent: t.List[SignedTx] = []
        self.send_errors: t.List[Exception] = []
        self.call_response: t.Optional[bytes] = None
        self.pending_nonce_calls = 0
        self.estimate_gas_calls: t.List[t.Dict[str, t.Any]] = []

    def chain_id(self) -> int:
        """Chain ID."""
        return self.chain

    def call(self, tx: t.Dict[str, t.Any]) -> bytes:
        """Answer `balanceOf` calls from `token_balances`."""
        if self.call_response is not None:
            return self.call_response
        (address,) = decode(["address"], bytes(tx["data"])[4:])
        with self._lock:
            balance = self.token_balances.get(Web3.to_checksum_address(address), 0)
        return encode(["uint256"], [balance])

    def pending_nonce(self, address: str) -> int:
        """Pending nonce."""
        with self._lock:
            self.pending_nonce_calls += 1
            return self.nonce

    def gas_price(self) -> int:
        """Gas price."""
        return GAS_PRICE

    def max_priority_fee(self) -> int:
        """Tip."""
        return GAS_TIP

    def estimate_gas(self, tx: t.Dict[str, t.Any]) -> int:
        """Gas estimate."""
        with self._lock:
            self.estimate_gas_calls.append(tx)
        return GAS_ESTIMATE

    def send_raw_transaction(self, signed: SignedTx) -> str:
        """Record and apply a transaction."""
        with self._lock:
            if self.send_errors:
                raise self.send_errors.pop(0)
            self.sent.append(signed)
            self.nonce = max(self.nonce, signed.nonce + 1)
            if len(signed.data) >= ERC20_CALL_LENGTH:
                recipient, amount = decode(["address", "uint256"], signed.data[4:])
                recipient = Web3.to_checksum_address(recipient)
                self.token_balances[recipient] = (
                    self.token_balances.get(recipient, 0) + amount
                )
            else:
                self.native_balances[signed.to] = (
                    self.native_balances.get(signed.to, 0) + signed.value
                )
        return signed.tx_hash

    def get_balance(self, address: str) -> int:
        """Native balance."""
        with self._lock:
            return self.native_balances.get(Web3.to_checksum_address(address), 0)

    def sent_to(self, address: str) -> t.List[SignedTx]:
        """Transactions whose recipient, direct or encoded, is `address`."""
        address = Web3.to_checksum_address(address)
        result = []
        for tx in self.sent:
            if len(tx.data) >= ERC20_CALL_LENGTH:
                (recipient, _) = decode(["address", "uint256"], tx.data[4:])
                if Web3.to_checksum_address(recipient) == address:
                    result.append(tx)
            elif tx.to == address:
                result.append(tx)
        return result


class StaticNodeLister:
    """Node lister returning a fixed list."""

    def __init__(self, nodes: t.Optional[t.List[NodeInfo]] = None) -> None:
        """Initialize object."""
        self.nodes = nodes or []
        self.namespaces: t.List[str] = []

    def list(self, namespace: str) -> t.List[NodeInfo]:
        """List nodes."""
        self.namespaces.append(namespace)
        return list(self.nodes)


@pytest.fixture
def fake_backend() -> FakeBackend:
    """Fake backend on Gnosis"""
    return FakeBackend()


@pytest.fixture
def backend_factory() -> t.Type[FakeBackend]:
    """Fake backend class, for tests that need a custom chain or nonce"""
    return FakeBackend


@pytest.fixture
def node_lister_factory() -> t.Type[StaticNodeLister]:
    """Static node lister class"""
    return StaticNodeLister


@pytest.fixture
def wallet_key() -> WalletKey:
    """Funding wallet key"""
    return WalletKey(FUNDING_KEY)


@pytest.fixture
def funding_wallet(fake_backend: FakeBackend, wallet_key: WalletKey) -> FundingWallet:
    """Funding wallet bound to the fake backend"""
    return FundingWallet(backend=fake_backend, key=wallet_key)


@pytest.fixture
def logger() -> MagicMock:
    """Mock logger"""
    return MagicMock()
