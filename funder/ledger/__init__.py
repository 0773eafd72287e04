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

"""Ledger helpers."""

import os
import typing as t

from aea.crypto.base import LedgerApi
from aea.crypto.registries import make_ledger_api
from typing_extensions import Protocol
from web3 import Web3

from funder.funder_types import SignedTx


CHAIN_NODE_ENDPOINT = os.environ.get("FUNDER_CHAIN_NODE_ENDPOINT", "")

TxParams = t.Dict[str, t.Any]


class LedgerBackend(Protocol):
    """Chain node capability used by the funding wallet."""

    def chain_id(self) -> int:
        """Chain ID of the connected network."""

    def call(self, tx: TxParams) -> bytes:
        """Execute a read only contract call."""

    def pending_nonce(self, address: str) -> int:
        """Next nonce of an account, pending transactions included."""

    def gas_price(self) -> int:
        """Suggested base gas price."""

    def max_priority_fee(self) -> int:
        """Suggested priority fee (tip)."""

    def estimate_gas(self, tx: TxParams) -> int:
        """Estimate gas units by simulating a transaction."""

    def send_raw_transaction(self, signed: SignedTx) -> str:
        """Submit a signed transaction and return its hash."""

    def get_balance(self, address: str) -> int:
        """Native balance of an account."""


class Web3Backend:
    """Ledger backend bound to an EVM JSON-RPC endpoint."""

    def __init__(self, ledger_api: LedgerApi) -> None:
        """Initialize object."""
        self.ledger_api = ledger_api

    @property
    def web3(self) -> Web3:
        """Web3 instance."""
        return self.ledger_api.api

    def chain_id(self) -> int:
        """Chain ID of the connected network."""
        return int(self.web3.eth.chain_id)

    def call(self, tx: TxParams) -> bytes:
        """Execute a read only contract call."""
        return bytes(self.web3.eth.call(_to_rpc_params(tx)))

    def pending_nonce(self, address: str) -> int:
        """Next nonce of an account, pending transactions included."""
        return int(
            self.web3.eth.get_transaction_count(
                Web3.to_checksum_address(address), "pending"
            )
        )

    def gas_price(self) -> int:
        """Suggested base gas price."""
        return int(self.web3.eth.gas_price)

    def max_priority_fee(self) -> int:
        """Suggested priority fee (tip)."""
        return int(self.web3.eth.max_priority_fee)

    def estimate_gas(self, tx: TxParams) -> int:
        """Estimate gas units by simulating a transaction."""
        return int(self.web3.eth.estimate_gas(_to_rpc_params(tx)))

    def send_raw_transaction(self, signed: SignedTx) -> str:
        """Submit a signed transaction and return its hash."""
        tx_hash = self.web3.eth.send_raw_transaction(signed.raw_transaction)
        return Web3.to_hex(tx_hash)

    def get_balance(self, address: str) -> int:
        """Native balance of an account."""
        return int(self.web3.eth.get_balance(Web3.to_checksum_address(address)))


def _to_rpc_params(tx: TxParams) -> TxParams:
    """Normalize call parameters for the JSON-RPC client."""
    params = dict(tx)
    for key in ("from", "to"):
        if params.get(key):
            params[key] = Web3.to_checksum_address(params[key])
    if isinstance(params.get("data"), (bytes, bytearray)):
        params["data"] = Web3.to_hex(params["data"])
    return params


def make_backend(rpc: t.Optional[str] = None) -> Web3Backend:
    """Make a ledger backend for the given RPC endpoint."""
    address = rpc or CHAIN_NODE_ENDPOINT
    if not address:
        raise ValueError("Chain node endpoint not set.")

    ledger_api = make_ledger_api("ethereum", address=address)
    return Web3Backend(ledger_api=ledger_api)
