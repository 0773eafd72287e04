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

"""Node funder CLI module."""

import logging
import typing as t

from aea.helpers.logging import setup_logger
from clea import group, params, run
from typing_extensions import Annotated

from funder import __version__
from funder.constants import DEFAULT_BOOST_PERCENT
from funder.exceptions import ConfigurationError, FunderException
from funder.funder_types import StakeSummary
from funder.services.funding_manager import FundingManager, make_funding_wallet
from funder.services.nodes import NodeLister
from funder.services.staking_manager import StakingManager
from funder.settings import FunderConfig


LOG_LEVELS = {
    "silent": logging.CRITICAL + 10,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}
LOG_LEVEL_NAMES = ("silent", "error", "warn", "info", "debug", "trace")

logger = setup_logger(name="funder")


def parse_log_level(value: str) -> int:
    """Map a level name or its 0-5 verbosity number to a logging level."""
    value = value.strip().lower()
    if value.isdigit() and int(value) < len(LOG_LEVEL_NAMES):
        value = LOG_LEVEL_NAMES[int(value)]
    try:
        return LOG_LEVELS[value]
    except KeyError:
        raise ConfigurationError(
            f"Invalid log level: {value}, expected one of {', '.join(LOG_LEVEL_NAMES)} or 0-5"
        ) from None


def run_fund(
    config: FunderConfig,
    node_lister: t.Optional[NodeLister] = None,
) -> None:
    """Validate the config and fund the configured wallets."""
    config.validate_for_fund()
    funding_manager = FundingManager(
        funding_wallet=make_funding_wallet(config=config, logger=logger),
        logger=logger,
    )
    funding_manager.fund(config=config, node_lister=node_lister)


def run_stake(
    config: FunderConfig,
    node_lister: t.Optional[NodeLister] = None,
) -> StakeSummary:
    """Validate the config and stake the namespace nodes."""
    config.validate_for_stake()
    return StakingManager(logger=logger, node_lister=node_lister).stake(config=config)


@group(name="funder")
def _funder() -> None:
    """Node funder - fund and stake swarm nodes."""
    logger.debug(f"Node funder version: {__version__}")


@_funder.command(name="fund")
def _fund(  # pylint: disable=too-many-arguments
    namespace: Annotated[
        str, params.String(help="Kubernetes namespace of the nodes to fund")
    ] = "",
    addresses: Annotated[
        str, params.String(help="Comma separated wallet addresses to fund")
    ] = "",
    chain_node_endpoint: Annotated[
        str, params.String(help="Endpoint of the chain node")
    ] = "",
    wallet_key: Annotated[
        str, params.String(help="Hex encoded key of the funding wallet")
    ] = "",
    min_native: Annotated[
        str, params.String(help="Minimum amount of native coins (ETH) wallets should have")
    ] = "0",
    min_swarm: Annotated[
        str, params.String(help="Minimum amount of swarm tokens (BZZ) wallets should have")
    ] = "0",
    chain_id: Annotated[
        int,
        params.Integer(help="Chain ID of the nodes, fetched from each node when 0"),
    ] = 0,
    boost_percent: Annotated[
        int, params.Integer(help="Gas and fee boost, in percent")
    ] = DEFAULT_BOOST_PERCENT,
    log_level: Annotated[
        str, params.String(help="Logging level (silent, error, warn, info, debug, trace)")
    ] = "info",
) -> None:
    """Fund wallets up to the minimum amounts."""
    try:
        logger.setLevel(parse_log_level(log_level))
        run_fund(
            config=FunderConfig.from_options(
                namespace=namespace,
                addresses=addresses,
                chain_node_endpoint=chain_node_endpoint,
                wallet_key=wallet_key,
                min_native=min_native,
                min_swarm=min_swarm,
                boost_percent=boost_percent,
                chain_id=chain_id,
            )
        )
    except FunderException as e:
        logger.error(f"[FUNDER] {e}")
        raise SystemExit(1) from e


@_funder.command(name="stake")
def _stake(
    namespace: Annotated[
        str, params.String(help="Kubernetes namespace of the nodes to stake")
    ] = "",
    min_swarm: Annotated[
        str, params.String(help="Minimum amount of staked swarm tokens (BZZ)")
    ] = "0",
    log_level: Annotated[
        str, params.String(help="Logging level (silent, error, warn, info, debug, trace)")
    ] = "info",
) -> None:
    """Stake nodes up to the minimum amount."""
    try:
        logger.setLevel(parse_log_level(log_level))
        run_stake(
            config=FunderConfig.from_options(namespace=namespace, min_swarm=min_swarm)
        )
    except FunderException as e:
        logger.error(f"[STAKER] {e}")
        raise SystemExit(1) from e


def main() -> None:
    """CLI entry point."""
    run(cli=_funder)


if __name__ == "__main__":
    main()
