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

"""Token wallets."""

import threading
import typing as t
from abc import ABC, abstractmethod

from eth_abi import decode, encode
from eth_utils import is_address, to_checksum_address as checksum_address
from web3 import Web3

from funder.constants import (
    ERC20_BALANCE_OF_SELECTOR,
    ERC20_MINT_SELECTOR,
    ERC20_TRANSFER_SELECTOR,
    LOCALNET_CHAIN_ID,
)
from funder.exceptions import BalanceQueryError, InvalidAddressError
from funder.funder_types import Token
from funder.ledger import LedgerBackend
from funder.wallet.transaction_sender import TransactionSender


def to_checksum_address(address: str) -> str:
    """Validate and checksum an address."""
    if not isinstance(address, str) or not is_address(address):
        raise InvalidAddressError(f"unexpected wallet address: {address!r}")
    return checksum_address(address)


def encode_call(selector: str, types: t.List[str], args: t.List[t.Any]) -> bytes:
    """Encode contract call data."""
    return bytes.fromhex(selector[2:]) + encode(types, args)


class TokenWallet(ABC):
    """Balance and transfer operations for one asset kind."""

    def __init__(self, backend: LedgerBackend, sender: TransactionSender) -> None:
        """Initialize object."""
        self.backend = backend
        self.sender = sender

    @abstractmethod
    def balance(self, address: str, token: Token) -> int:
        """Balance of `address`, in the token's smallest unit."""

    @abstractmethod
    def transfer(
        self,
        to_address: str,
        amount: int,
        token: Token,
        cancel: t.Optional[threading.Event] = None,
    ) -> str:
        """Transfer `amount` of the token to `to_address`."""


class NativeTokenWallet(TokenWallet):
    """Chain native coin wallet."""

    def balance(self, address: str, token: Token) -> int:
        """Native balance of `address`."""
        address = to_checksum_address(address)
        try:
            return self.backend.get_balance(address)
        except Exception as e:  # pylint: disable=broad-except
            raise BalanceQueryError(
                f"failed to get {token.symbol} balance of {address}, {e}"
            ) from e

    def transfer(
        self,
        to_address: str,
        amount: int,
        token: Token,
        cancel: t.Optional[threading.Event] = None,
    ) -> str:
        """Transfer native coins."""
        if amount <= 0:
            raise ValueError(f"Invalid transfer amount: {amount}")
        return self.sender.send(
            to_address=to_checksum_address(to_address),
            amount=amount,
            call_data=b"",
            cancel=cancel,
        )


class ERC20TokenWallet(TokenWallet):
    """ERC20 token wallet."""

    def balance(self, address: str, token: Token) -> int:
        """Token balance of `address`, read through `balanceOf`."""
        address = to_checksum_address(address)
        contract = self._contract(token)
        call_data = encode_call(ERC20_BALANCE_OF_SELECTOR, ["address"], [address])
        try:
            response = self.backend.call({"to": contract, "data": call_data})
        except Exception as e:  # pylint: disable=broad-except
            raise BalanceQueryError(
                f"failed to get {token.symbol} balance of {address}, {e}"
            ) from e

        if not response:
            raise BalanceQueryError(
                f"empty {token.symbol} balance response for {address}, "
                f"contract {contract} may not be deployed on this chain"
            )

        if len(response) < 32:
            raise BalanceQueryError(
                f"short {token.symbol} balance response for {address}, "
                f"got {len(response)} bytes"
            )

        (balance,) = decode(["uint256"], bytes(response[:32]))
        return int(balance)

    def transfer(
        self,
        to_address: str,
        amount: int,
        token: Token,
        cancel: t.Optional[threading.Event] = None,
    ) -> str:
        """Transfer tokens, minting them instead on the local test network."""
        if amount <= 0:
            raise ValueError(f"Invalid transfer amount: {amount}")

        to_address = to_checksum_address(to_address)
        contract = self._contract(token)
        selector = self._transfer_selector(self.backend.chain_id())
        call_data = encode_call(
            selector, ["address", "uint256"], [to_address, amount]
        )
        return self.sender.send(
            to_address=contract,
            amount=0,
            call_data=call_data,
            cancel=cancel,
        )

    @staticmethod
    def _transfer_selector(chain_id: int) -> str:
        """Function selector of the transfer call on a chain."""
        if chain_id == LOCALNET_CHAIN_ID:
            return ERC20_MINT_SELECTOR
        return ERC20_TRANSFER_SELECTOR

    @staticmethod
    def _contract(token: Token) -> str:
        """Checksummed token contract address."""
        if token.contract is None:
            raise ValueError(f"{token.symbol} is not an ERC20 token")
        return Web3.to_checksum_address(token.contract)
