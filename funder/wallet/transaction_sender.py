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

"""Transaction sender."""

import logging
import threading
import typing as t

from web3 import Web3

from funder.constants import (
    DEFAULT_BOOST_PERCENT,
    STALE_NONCE_ERRORS,
    TX_SEND_MAX_RETRIES,
)
from funder.exceptions import (
    FundingCancelledError,
    NonceRetryExhaustedError,
    TransferFailedError,
)
from funder.funder_types import SignedTx
from funder.ledger import LedgerBackend
from funder.wallet.key import WalletKey


EIP1559_TX_TYPE = 2


class _StaleNonceError(TransferFailedError):
    """Submission rejected because the nonce is out of sync."""


def boost(value: int, boost_percent: int) -> int:
    """Increase `value` by `boost_percent` percent, rounding down."""
    return value * (100 + boost_percent) // 100


def is_stale_nonce_error(error: BaseException) -> bool:
    """Whether the backend rejected a transaction because its nonce is out of sync."""
    message = str(error).lower()
    return any(pattern in message for pattern in STALE_NONCE_ERRORS)


class TransactionSender:
    """
    Signs and submits transactions for a single key.

    Nonces are cached in memory: the first send seeds the cache from the
    backend's pending nonce, every following send takes the next value. Many
    threads may send concurrently; only nonce acquisition is serialized.
    When the backend reports a stale nonce, the cache is dropped and the
    send is retried with a freshly fetched nonce.
    """

    def __init__(
        self,
        backend: LedgerBackend,
        key: WalletKey,
        boost_percent: int = DEFAULT_BOOST_PERCENT,
        max_retries: int = TX_SEND_MAX_RETRIES,
        logger: t.Optional[logging.Logger] = None,
    ) -> None:
        """Initialize object."""
        if boost_percent < 0:
            raise ValueError(f"Invalid boost percent: {boost_percent}")
        if max_retries < 1:
            raise ValueError(f"Invalid max retries: {max_retries}")

        self.backend = backend
        self.key = key
        self.boost_percent = boost_percent
        self.max_retries = max_retries
        self.logger = logger or logging.getLogger(__name__)
        self._nonce_lock = threading.Lock()
        self._nonce: t.Optional[int] = None

    @property
    def address(self) -> str:
        """Sender address."""
        return self.key.address

    @property
    def nonce_seeded(self) -> bool:
        """Whether a nonce is cached."""
        with self._nonce_lock:
            return self._nonce is not None

    def reset_nonce(self) -> None:
        """Drop the cached nonce, the next send fetches it from the backend."""
        with self._nonce_lock:
            self._nonce = None

    def _next_nonce(self) -> int:
        """Seed the nonce from the backend or take the next cached value."""
        with self._nonce_lock:
            if self._nonce is None:
                self._nonce = self.backend.pending_nonce(self.address)
            else:
                self._nonce += 1
            return self._nonce

    def send(
        self,
        to_address: str,
        amount: int = 0,
        call_data: bytes = b"",
        cancel: t.Optional[threading.Event] = None,
    ) -> str:
        """
        Send a transaction and return its hash.

        :param to_address: destination address.
        :param amount: value in the native smallest unit.
        :param call_data: contract call data, empty for plain transfers.
        :param cancel: event that aborts the send when set.
        :return: transaction hash.
        """
        try:
            chain_id = self.backend.chain_id()
        except Exception as e:  # pylint: disable=broad-except
            raise TransferFailedError(f"failed to get chain id, {e}") from e

        to_address = Web3.to_checksum_address(to_address)
        last_error: t.Optional[Exception] = None
        for attempt in range(1, self.max_retries + 1):
            if cancel is not None and cancel.is_set():
                raise FundingCancelledError("transaction send cancelled")

            try:
                return self._send(
                    chain_id=chain_id,
                    to_address=to_address,
                    amount=amount,
                    call_data=call_data,
                )
            except _StaleNonceError as e:
                last_error = e
                self.logger.warning(
                    f"[TX SENDER] Stale nonce on attempt {attempt}/{self.max_retries}, "
                    f"refetching nonce for {self.address}: {e.__cause__}"
                )
                self.reset_nonce()

        raise NonceRetryExhaustedError(
            f"failed to send transaction after {self.max_retries} attempts, {last_error}"
        ) from last_error

    def _send(
        self,
        chain_id: int,
        to_address: str,
        amount: int,
        call_data: bytes,
    ) -> str:
        """Acquire a nonce, build, sign and submit a transaction."""
        try:
            nonce = self._next_nonce()
        except Exception as e:  # pylint: disable=broad-except
            raise TransferFailedError(f"failed to make nonce, {e}") from e

        try:
            gas, max_fee_per_gas, max_priority_fee_per_gas = self._calculate_gas(
                {
                    "from": self.address,
                    "to": to_address,
                    "value": amount,
                    "data": call_data,
                }
            )
        except Exception as e:  # pylint: disable=broad-except
            raise TransferFailedError(f"failed to estimate gas, {e}") from e

        tx = {
            "type": EIP1559_TX_TYPE,
            "nonce": nonce,
            "chainId": chain_id,
            "to": to_address,
            "value": amount,
            "data": call_data,
            "gas": gas,
            "maxFeePerGas": max_fee_per_gas,
            "maxPriorityFeePerGas": max_priority_fee_per_gas,
        }
        try:
            raw_transaction, tx_hash = self.key.sign_transaction(tx)
        except Exception as e:  # pylint: disable=broad-except
            raise TransferFailedError(f"failed to sign transaction, {e}") from e

        signed = SignedTx(
            raw_transaction=raw_transaction,
            tx_hash=tx_hash,
            nonce=nonce,
            chain_id=chain_id,
            to=to_address,
            value=amount,
            data=call_data,
            gas=gas,
            max_fee_per_gas=max_fee_per_gas,
            max_priority_fee_per_gas=max_priority_fee_per_gas,
        )
        try:
            submitted_hash = self.backend.send_raw_transaction(signed)
        except Exception as e:  # pylint: disable=broad-except
            if is_stale_nonce_error(e):
                raise _StaleNonceError(f"failed to send transaction, {e}") from e
            raise TransferFailedError(f"failed to send transaction, {e}") from e

        self.logger.debug(
            f"[TX SENDER] Sent transaction {submitted_hash} ({nonce=}) to {to_address}"
        )
        return submitted_hash

    def _calculate_gas(self, call: t.Dict[str, t.Any]) -> t.Tuple[int, int, int]:
        """Boosted gas limit, fee cap and tip cap."""
        gas = boost(self.backend.estimate_gas(call), self.boost_percent)
        gas_price = boost(self.backend.gas_price(), self.boost_percent)
        gas_tip_cap = boost(self.backend.max_priority_fee(), self.boost_percent)
        return gas, gas_price + gas_tip_cap, gas_tip_cap
