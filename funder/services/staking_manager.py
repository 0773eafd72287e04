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

"""Staking manager."""

import typing as t
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from logging import Logger

from funder.constants import SWARM_TOKEN_DECIMALS
from funder.funder_types import NodeInfo, StakeSummary
from funder.services.nodes import (
    KubectlNodeLister,
    NodeLister,
    fetch_stake_info,
    filter_bee_nodes,
    stake_node,
)
from funder.settings import FunderConfig
from funder.utils import HumanAmount, calc_top_up_amount


class StakeOutcome(str, Enum):
    """Outcome of staking a node."""

    STAKED = "staked"
    ALREADY_STAKED = "already_staked"
    FAILED = "failed"


class StakingManager:
    """Tops up the stake of bee nodes through their HTTP API."""

    def __init__(
        self, logger: Logger, node_lister: t.Optional[NodeLister] = None
    ) -> None:
        """Initialize staking manager."""
        self.logger = logger
        self.node_lister = node_lister

    def stake(self, config: FunderConfig) -> StakeSummary:
        """Stake every bee node of the configured namespace."""
        self.logger.info("node staking started...")
        try:
            node_lister = self.node_lister or KubectlNodeLister()
            nodes, omitted = filter_bee_nodes(node_lister.list(config.namespace))
            if omitted:
                self.logger.info(
                    f"[STAKER] Ignoring pods {[node.name for node in omitted]}"
                )
            return self.stake_all_nodes(
                nodes=nodes, min_amount=config.min_amounts.swarm_token
            )
        finally:
            self.logger.info("node staking finished")

    def stake_all_nodes(
        self, nodes: t.Sequence[NodeInfo], min_amount: HumanAmount
    ) -> StakeSummary:
        """Stake nodes concurrently, one worker per node."""
        summary = StakeSummary()
        if not nodes:
            return summary

        with ThreadPoolExecutor(max_workers=len(nodes)) as executor:
            outcomes = list(
                executor.map(lambda node: self._stake_node(node, min_amount), nodes)
            )

        for outcome in outcomes:
            if outcome == StakeOutcome.STAKED:
                summary.staked += 1
            elif outcome == StakeOutcome.ALREADY_STAKED:
                summary.already_staked += 1
            else:
                summary.failed += 1

        self.logger.info(
            f"[STAKER] Staking done: staked={summary.staked}, "
            f"already_staked={summary.already_staked}, failed={summary.failed}"
        )
        return summary

    def _stake_node(self, node: NodeInfo, min_amount: HumanAmount) -> StakeOutcome:
        try:
            staked_amount = fetch_stake_info(node.address)
        except Exception as e:  # pylint: disable=broad-except
            self.logger.error(
                f"get stake info for node[{node.name}] failed; reason: {e}"
            )
            return StakeOutcome.FAILED

        amount = calc_top_up_amount(
            min_amount=min_amount,
            current_amount=staked_amount,
            decimals=SWARM_TOKEN_DECIMALS,
        )
        if amount <= 0:
            self.logger.info(f"node[{node.name}] - already staked")
            return StakeOutcome.ALREADY_STAKED

        try:
            stake_node(node.address, amount)
        except Exception as e:  # pylint: disable=broad-except
            self.logger.error(f"node[{node.name}] - staking failed; reason: {e}")
            return StakeOutcome.FAILED

        self.logger.info(f"node[{node.name}] - staked")
        return StakeOutcome.STAKED
