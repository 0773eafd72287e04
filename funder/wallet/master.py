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

"""Funding wallet."""

import logging
import typing as t

from funder.constants import DEFAULT_BOOST_PERCENT, TX_SEND_MAX_RETRIES
from funder.funder_types import Token
from funder.ledger import LedgerBackend
from funder.wallet.key import WalletKey
from funder.wallet.token_wallet import (
    ERC20TokenWallet,
    NativeTokenWallet,
    TokenWallet,
)
from funder.wallet.transaction_sender import TransactionSender


class FundingWallet:
    """Signing key and chain backend that funds other wallets."""

    def __init__(
        self,
        backend: LedgerBackend,
        key: WalletKey,
        boost_percent: int = DEFAULT_BOOST_PERCENT,
        max_retries: int = TX_SEND_MAX_RETRIES,
        logger: t.Optional[logging.Logger] = None,
    ) -> None:
        """Initialize object."""
        self.backend = backend
        self.key = key
        self.sender = TransactionSender(
            backend=backend,
            key=key,
            boost_percent=boost_percent,
            max_retries=max_retries,
            logger=logger,
        )
        self._native = NativeTokenWallet(backend=backend, sender=self.sender)
        self._erc20 = ERC20TokenWallet(backend=backend, sender=self.sender)

    @property
    def address(self) -> str:
        """Funding wallet address."""
        return self.key.address

    def chain_id(self) -> int:
        """Chain ID of the connected network."""
        return self.backend.chain_id()

    def native(self) -> NativeTokenWallet:
        """Native coin wallet."""
        return self._native

    def erc20(self) -> ERC20TokenWallet:
        """ERC20 token wallet."""
        return self._erc20

    def wallet_for(self, token: Token) -> TokenWallet:
        """Token wallet that handles `token`."""
        if token.is_native:
            return self._native
        return self._erc20
