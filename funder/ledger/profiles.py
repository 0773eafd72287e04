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

"""Chain profiles."""

import typing as t
from types import MappingProxyType

from funder.constants import (
    GNOSIS_CHAIN_ID,
    LOCALNET_CHAIN_ID,
    NATIVE_COIN_DECIMALS,
    SEPOLIA_CHAIN_ID,
    SWARM_TOKEN_DECIMALS,
)
from funder.exceptions import AssetNotConfiguredError
from funder.funder_types import Token


# ERC20 swarm token per chain
SWARM_TOKENS: t.Dict[int, Token] = {
    SEPOLIA_CHAIN_ID: Token(
        symbol="sBZZ",
        decimals=SWARM_TOKEN_DECIMALS,
        contract="0x543dDb01Ba47acB11de34891cD86B675F04840db",
    ),
    GNOSIS_CHAIN_ID: Token(
        symbol="xBZZ",
        decimals=SWARM_TOKEN_DECIMALS,
        contract="0xdBF3Ea6F5beE45c02255B2c26a16F300502F68da",
    ),
    LOCALNET_CHAIN_ID: Token(
        symbol="tBZZ",
        decimals=SWARM_TOKEN_DECIMALS,
        contract="0x6aab14fe9cccd64a502d23842d916eb5321c26e7",
    ),
}

# Base currency per chain
NATIVE_COINS: t.Dict[int, Token] = {
    SEPOLIA_CHAIN_ID: Token(symbol="sETH", decimals=NATIVE_COIN_DECIMALS),
    GNOSIS_CHAIN_ID: Token(symbol="xDAI", decimals=NATIVE_COIN_DECIMALS),
    LOCALNET_CHAIN_ID: Token(symbol="tETH", decimals=NATIVE_COIN_DECIMALS),
}


class TokenRegistry:
    """Read-only lookup of the assets funded on each chain."""

    def __init__(
        self,
        native_coins: t.Mapping[int, Token],
        swarm_tokens: t.Mapping[int, Token],
    ) -> None:
        """Initialize object."""
        self._native_coins = MappingProxyType(dict(native_coins))
        self._swarm_tokens = MappingProxyType(dict(swarm_tokens))

    def native_coin(self, chain_id: int) -> Token:
        """Native coin of a chain."""
        try:
            return self._native_coins[chain_id]
        except KeyError:
            raise AssetNotConfiguredError("native coin", chain_id) from None

    def swarm_token(self, chain_id: int) -> Token:
        """Swarm token of a chain."""
        try:
            return self._swarm_tokens[chain_id]
        except KeyError:
            raise AssetNotConfiguredError("swarm token", chain_id) from None

    def chain_ids(self) -> t.FrozenSet[int]:
        """Chains with at least one configured asset."""
        return frozenset(self._native_coins) | frozenset(self._swarm_tokens)


DEFAULT_TOKEN_REGISTRY = TokenRegistry(
    native_coins=NATIVE_COINS,
    swarm_tokens=SWARM_TOKENS,
)
