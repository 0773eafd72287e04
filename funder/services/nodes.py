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

"""Node discovery and node HTTP API."""

import json
import logging
import subprocess  # nosec
import typing as t
from concurrent.futures import ThreadPoolExecutor

from typing_extensions import Protocol

from funder.constants import (
    BEE_ADDRESSES_ENDPOINT,
    BEE_API_PORT,
    BEE_NODE_NAME_PART,
    BEE_STAKE_ENDPOINT,
    BEE_WALLET_ENDPOINT,
    KUBECTL_TIMEOUT,
)
from funder.exceptions import CollaboratorError
from funder.funder_types import NodeInfo, WalletInfo
from funder.utils.http import send_http_request


class NodeLister(Protocol):
    """Lists the nodes of a namespace."""

    def list(self, namespace: str) -> t.List[NodeInfo]:
        """List nodes."""


class KubectlNodeLister:
    """Lists the pods of a kubernetes namespace through `kubectl`."""

    def __init__(self, kubectl: str = "kubectl", timeout: float = KUBECTL_TIMEOUT) -> None:
        """Initialize object."""
        self.kubectl = kubectl
        self.timeout = timeout

    def list(self, namespace: str) -> t.List[NodeInfo]:
        """List the pods of `namespace`, addressed by their bee API endpoint."""
        args = [self.kubectl, "get", "pods", "-n", namespace, "-o", "json"]
        try:
            result = subprocess.run(  # pylint: disable=subprocess-run-check # nosec
                args=args,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise CollaboratorError(f"failed listing pods: {e}") from e

        if result.returncode != 0:
            raise CollaboratorError(
                f"failed listing pods: {result.stderr.decode().strip()}"
            )

        try:
            pods = json.loads(result.stdout)
        except ValueError as e:
            raise CollaboratorError("failed listing pods: invalid kubectl output") from e

        return [
            NodeInfo(
                name=pod["metadata"]["name"],
                address=f"http://{pod.get('status', {}).get('podIP', '')}:{BEE_API_PORT}",
            )
            for pod in pods.get("items", [])
        ]


def is_bee_node(node: NodeInfo) -> bool:
    """Whether a pod runs a bee node, judging by its name."""
    return BEE_NODE_NAME_PART in node.name.split("-")


def filter_bee_nodes(
    nodes: t.Iterable[NodeInfo],
) -> t.Tuple[t.List[NodeInfo], t.List[NodeInfo]]:
    """Split nodes into bee nodes and ignored ones."""
    bee_nodes: t.List[NodeInfo] = []
    omitted: t.List[NodeInfo] = []
    for node in nodes:
        (bee_nodes if is_bee_node(node) else omitted).append(node)
    return bee_nodes, omitted


def _get_field(response: t.Any, key: str, endpoint: str) -> t.Any:
    if not isinstance(response, dict):
        raise CollaboratorError(f"unexpected response from {endpoint}: {response!r}")
    return response.get(key)


def fetch_wallet_info(node_address: str) -> t.Tuple[str, int]:
    """Wallet address and chain ID reported by a node."""
    endpoint = node_address + BEE_WALLET_ENDPOINT
    response = send_http_request(method="GET", endpoint=endpoint)
    address = _get_field(response, "walletAddress", endpoint)
    if not address:
        raise CollaboratorError("failed getting bee node wallet address")

    try:
        chain_id = int(_get_field(response, "chainID", endpoint))
    except (TypeError, ValueError) as e:
        raise CollaboratorError(f"unexpected chain ID from {endpoint}") from e
    return address, chain_id


def fetch_address(node_address: str) -> str:
    """Ethereum address reported by a node."""
    endpoint = node_address + BEE_ADDRESSES_ENDPOINT
    response = send_http_request(method="GET", endpoint=endpoint)
    address = _get_field(response, "ethereum", endpoint)
    if not address:
        raise CollaboratorError("failed getting bee node wallet address")
    return address


def fetch_stake_info(node_address: str) -> int:
    """Staked amount of a node, in PLUR."""
    endpoint = node_address + BEE_STAKE_ENDPOINT
    response = send_http_request(method="GET", endpoint=endpoint)
    staked_amount = _get_field(response, "stakedAmount", endpoint)
    try:
        return int(str(staked_amount))
    except ValueError as e:
        raise CollaboratorError(
            f"unexpected staked amount from {endpoint}: {staked_amount!r}"
        ) from e


def stake_node(node_address: str, amount: int) -> None:
    """Deposit `amount` PLUR of stake on a node."""
    send_http_request(
        method="POST",
        endpoint=f"{node_address}{BEE_STAKE_ENDPOINT}/{amount}",
    )


def fetch_node_wallet(node: NodeInfo, chain_id: t.Optional[int] = None) -> WalletInfo:
    """
    Resolve the wallet of a node.

    Without a known chain ID both the address and the chain come from the
    node's wallet endpoint, otherwise only the address is fetched.
    """
    if chain_id is None:
        address, node_chain_id = fetch_wallet_info(node.address)
    else:
        address, node_chain_id = fetch_address(node.address), chain_id
    return WalletInfo.for_node(
        node_name=node.name, address=address, chain_id=node_chain_id
    )


def fetch_namespace_wallets(
    nodes: t.Sequence[NodeInfo],
    logger: logging.Logger,
    chain_id: t.Optional[int] = None,
) -> t.List[WalletInfo]:
    """Resolve node wallets concurrently, dropping the nodes that fail."""
    if not nodes:
        return []

    wallets: t.List[WalletInfo] = []
    with ThreadPoolExecutor(max_workers=len(nodes)) as executor:
        futures = [
            (node, executor.submit(fetch_node_wallet, node, chain_id))
            for node in nodes
        ]
        for node, future in futures:
            try:
                wallets.append(future.result())
            except CollaboratorError as e:
                logger.warning(f"[NODES] Ignoring node {node.name}: {e}")
    return wallets
