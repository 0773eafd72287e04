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

"""Run configuration."""

import os
import typing as t
from dataclasses import dataclass, field

from funder.constants import DEFAULT_BOOST_PERCENT
from funder.exceptions import ConfigurationError
from funder.funder_types import MinAmounts
from funder.utils import HumanAmount, parse_amount


WALLET_KEY_ENV = "FUNDER_WALLET_KEY"
CHAIN_NODE_ENDPOINT_ENV = "FUNDER_CHAIN_NODE_ENDPOINT"


def parse_addresses(value: t.Optional[str]) -> t.List[str]:
    """Split a comma separated address list."""
    if not value:
        return []
    return [address.strip() for address in value.split(",") if address.strip()]


@dataclass
class FunderConfig:  # pylint: disable=too-many-instance-attributes
    """Funder run configuration."""

    namespace: str = ""
    addresses: t.List[str] = field(default_factory=list)
    chain_node_endpoint: str = ""
    wallet_key: str = ""
    min_amounts: MinAmounts = field(default_factory=MinAmounts)
    boost_percent: int = DEFAULT_BOOST_PERCENT
    chain_id: t.Optional[int] = None

    @classmethod
    def from_options(  # pylint: disable=too-many-arguments
        cls,
        namespace: str = "",
        addresses: str = "",
        chain_node_endpoint: str = "",
        wallet_key: str = "",
        min_native: HumanAmount = "0",
        min_swarm: HumanAmount = "0",
        boost_percent: int = DEFAULT_BOOST_PERCENT,
        chain_id: t.Optional[int] = None,
    ) -> "FunderConfig":
        """Build a config from command line options, falling back to the environment."""
        try:
            min_amounts = MinAmounts(
                native_coin=parse_amount(min_native),
                swarm_token=parse_amount(min_swarm),
            )
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        return cls(
            namespace=namespace.strip(),
            addresses=parse_addresses(addresses),
            chain_node_endpoint=chain_node_endpoint
            or os.environ.get(CHAIN_NODE_ENDPOINT_ENV, ""),
            wallet_key=wallet_key or os.environ.get(WALLET_KEY_ENV, ""),
            min_amounts=min_amounts,
            boost_percent=boost_percent,
            chain_id=chain_id or None,
        )

    def validate_for_fund(self) -> None:
        """Check the options needed to fund wallets."""
        if not self.namespace and not self.addresses:
            raise ConfigurationError("--namespace or --addresses must be set")
        if not self.chain_node_endpoint:
            raise ConfigurationError("--chain-node-endpoint must be set")
        if self.boost_percent < 0:
            raise ConfigurationError("--boost-percent must not be negative")
        self._validate_min_amounts()

    def validate_for_stake(self) -> None:
        """Check the options needed to stake nodes."""
        if not self.namespace:
            raise ConfigurationError("--namespace must be set")
        self._validate_min_amounts()

    def _validate_min_amounts(self) -> None:
        if self.min_amounts.native_coin < 0 or self.min_amounts.swarm_token < 0:
            raise ConfigurationError("minimum amounts must not be negative")
