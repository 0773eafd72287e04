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

"""Funding manager."""

import threading
import typing as t
from concurrent.futures import ThreadPoolExecutor
from logging import Logger

from funder.constants import NATIVE_LEG, SWARM_LEG
from funder.exceptions import (
    ChainMismatchError,
    CollaboratorError,
    FundingCancelledError,
    FundingError,
)
from funder.funder_types import (
    FundWalletResult,
    FundingReport,
    MinAmounts,
    Token,
    TransferResult,
    WalletInfo,
)
from funder.ledger import make_backend
from funder.ledger.profiles import DEFAULT_TOKEN_REGISTRY, TokenRegistry
from funder.services.nodes import (
    KubectlNodeLister,
    NodeLister,
    fetch_namespace_wallets,
)
from funder.settings import FunderConfig
from funder.utils import HumanAmount, calc_top_up_amount, format_amount
from funder.wallet.key import WalletKey
from funder.wallet.master import FundingWallet
from funder.wallet.token_wallet import TokenWallet, to_checksum_address


def make_funding_wallet(
    config: FunderConfig, logger: Logger
) -> FundingWallet:
    """Build the funding wallet of a run, generating a key if none is set."""
    if config.wallet_key:
        key = WalletKey(config.wallet_key)
    else:
        key = WalletKey.generate()
        logger.warning("[FUNDER] No wallet key set, generated a new one for this run")

    logger.info(f"[FUNDER] Using wallet address (public key address): {key.address}")
    return FundingWallet(
        backend=make_backend(config.chain_node_endpoint),
        key=key,
        boost_percent=config.boost_percent,
        logger=logger,
    )


class FundingManager:
    """Tops up wallets to the configured minimum amounts."""

    def __init__(
        self,
        funding_wallet: FundingWallet,
        logger: Logger,
        token_registry: TokenRegistry = DEFAULT_TOKEN_REGISTRY,
    ) -> None:
        """Initialize funding manager."""
        self.funding_wallet = funding_wallet
        self.logger = logger
        self.token_registry = token_registry

    def fund(
        self, config: FunderConfig, node_lister: t.Optional[NodeLister] = None
    ) -> None:
        """Fund the namespace nodes, or the explicit addresses if no namespace is set."""
        if config.namespace:
            self.fund_namespace(config=config, node_lister=node_lister)
            return
        self.fund_addresses(config=config)

    def fund_addresses(self, config: FunderConfig) -> None:
        """Fund the explicitly listed addresses."""
        self.logger.info("node funder started...")
        try:
            try:
                chain_id = self.funding_wallet.chain_id()
            except Exception as e:  # pylint: disable=broad-except
                raise CollaboratorError(
                    f"failed getting chain ID from the chain node, {e}"
                ) from e
            wallets = [
                WalletInfo.for_address(address=address, chain_id=chain_id)
                for address in config.addresses
            ]
            self.logger.info(
                f"[FUNDER] Funding wallets (count={len(wallets)}) up to amounts={config.min_amounts}"
            )
            self._raise_for_report(
                self.fund_all_wallets_report(
                    min_amounts=config.min_amounts, wallets=wallets
                )
            )
        finally:
            self.logger.info("node funder finished")

    def fund_namespace(
        self, config: FunderConfig, node_lister: t.Optional[NodeLister] = None
    ) -> None:
        """Fund every node of a namespace that reports its wallet."""
        self.logger.info("node funder started...")
        try:
            node_lister = node_lister or KubectlNodeLister()
            self.logger.info(f"[FUNDER] Fetching nodes for namespace={config.namespace}")
            nodes = node_lister.list(config.namespace)

            wallets = fetch_namespace_wallets(
                nodes=nodes, logger=self.logger, chain_id=config.chain_id
            )
            self.logger.info(
                f"[FUNDER] Funding nodes (count={len(wallets)}) up to amounts={config.min_amounts}"
            )
            self._raise_for_report(
                self.fund_all_wallets_report(
                    min_amounts=config.min_amounts, wallets=wallets
                )
            )
        finally:
            self.logger.info("node funder finished")

    @staticmethod
    def _raise_for_report(report: FundingReport) -> None:
        if not report.success:
            raise FundingError(
                causes=[(result.wallet.name, result.error) for result in report.failed],
                message="failed funding wallets",
            )

    def fund_all_wallets(
        self,
        min_amounts: MinAmounts,
        wallets: t.Sequence[WalletInfo],
        cancel: t.Optional[threading.Event] = None,
    ) -> bool:
        """Fund all wallets, return whether every wallet was funded."""
        return self.fund_all_wallets_report(
            min_amounts=min_amounts, wallets=wallets, cancel=cancel
        ).success

    def fund_all_wallets_report(
        self,
        min_amounts: MinAmounts,
        wallets: t.Sequence[WalletInfo],
        cancel: t.Optional[threading.Event] = None,
    ) -> FundingReport:
        """
        Fund all wallets concurrently and report the outcome of each one.

        Every wallet runs in its own worker. A failing wallet never affects
        the others, its error is carried in its result.
        """
        report = FundingReport()
        if not wallets:
            return report

        with ThreadPoolExecutor(max_workers=len(wallets)) as executor:
            futures = [
                executor.submit(self._fund_wallet, min_amounts, wallet, cancel)
                for wallet in wallets
            ]
            for future in futures:
                result = future.result()
                self._log_result(result)
                report.results.append(result)

        return report

    def _log_result(self, result: FundWalletResult) -> None:
        name = result.wallet.name
        if result.error is not None:
            self.logger.error(f"{name} funding failed - error: {result.error}")
            return

        if result.already_funded:
            self.logger.info(f"{name} funded - already funded")
            return

        native_amount = self._format_transferred(
            result.transferred_native_amount,
            self.token_registry.native_coin,
            result.wallet.chain_id,
        )
        swarm_amount = self._format_transferred(
            result.transferred_swarm_amount,
            self.token_registry.swarm_token,
            result.wallet.chain_id,
        )
        self.logger.info(
            f"{name} funded - transferred {{ native: {native_amount}, swarm: {swarm_amount} }}"
        )

    @staticmethod
    def _format_transferred(
        amount: t.Optional[int],
        token_getter: t.Callable[[int], Token],
        chain_id: int,
    ) -> str:
        if amount is None:
            return format_amount(None, 0)
        return format_amount(amount, token_getter(chain_id).decimals)

    def _fund_wallet(
        self,
        min_amounts: MinAmounts,
        wallet: WalletInfo,
        cancel: t.Optional[threading.Event] = None,
    ) -> FundWalletResult:
        """Fund a single wallet with both assets."""
        try:
            self._validate_chain_id(wallet)
        except Exception as e:  # pylint: disable=broad-except
            return FundWalletResult(wallet=wallet, error=e)

        legs = (
            (
                NATIVE_LEG,
                self.token_registry.native_coin,
                min_amounts.native_coin,
            ),
            (
                SWARM_LEG,
                self.token_registry.swarm_token,
                min_amounts.swarm_token,
            ),
        )
        with ThreadPoolExecutor(max_workers=len(legs)) as executor:
            futures = [
                (
                    leg,
                    executor.submit(
                        self._top_up_wallet, token_getter, min_amount, wallet, cancel
                    ),
                )
                for leg, token_getter, min_amount in legs
            ]
            results = {leg: future.result() for leg, future in futures}

        return FundWalletResult(
            wallet=wallet,
            error=FundingError.merge(
                (leg, result.error) for leg, result in results.items()
            ),
            transferred_native_amount=results[NATIVE_LEG].transferred_amount,
            transferred_swarm_amount=results[SWARM_LEG].transferred_amount,
        )

    def _validate_chain_id(self, wallet: WalletInfo) -> None:
        try:
            chain_id = self.funding_wallet.chain_id()
        except Exception as e:  # pylint: disable=broad-except
            raise RuntimeError(
                f"failed getting funding wallet's chain ID: {e}"
            ) from e

        if chain_id != wallet.chain_id:
            raise ChainMismatchError(
                wallet_chain_id=wallet.chain_id, funding_chain_id=chain_id
            )

    def _top_up_wallet(
        self,
        token_getter: t.Callable[[int], Token],
        min_amount: HumanAmount,
        wallet: WalletInfo,
        cancel: t.Optional[threading.Event] = None,
    ) -> TransferResult:
        """Top up a single asset of a wallet, never raising."""
        try:
            return TransferResult(
                transferred_amount=self._top_up(
                    token_getter, min_amount, wallet, cancel
                )
            )
        except Exception as e:  # pylint: disable=broad-except
            return TransferResult(error=e)

    def _top_up(
        self,
        token_getter: t.Callable[[int], Token],
        min_amount: HumanAmount,
        wallet: WalletInfo,
        cancel: t.Optional[threading.Event] = None,
    ) -> t.Optional[int]:
        if cancel is not None and cancel.is_set():
            raise FundingCancelledError("funding cancelled")

        token = token_getter(wallet.chain_id)
        address = to_checksum_address(wallet.address)
        token_wallet: TokenWallet = self.funding_wallet.wallet_for(token)

        current_balance = token_wallet.balance(address, token)
        top_up_amount = calc_top_up_amount(
            min_amount=min_amount,
            current_amount=current_balance,
            decimals=token.decimals,
        )
        if top_up_amount <= 0:
            self.logger.debug(
                f"[FUNDER] {wallet.name} has enough {token.symbol}: {format_amount(current_balance, token.decimals)}"
            )
            return None

        token_wallet.transfer(
            to_address=address, amount=top_up_amount, token=token, cancel=cancel
        )
        return top_up_amount
