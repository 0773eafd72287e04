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

"""Tests for node discovery and the node HTTP API."""

import json
import subprocess  # nosec
from unittest.mock import MagicMock, patch

import pytest

from funder.exceptions import CollaboratorError
from funder.funder_types import NodeInfo
from funder.services.nodes import (
    KubectlNodeLister,
    fetch_address,
    fetch_namespace_wallets,
    fetch_stake_info,
    fetch_wallet_info,
    filter_bee_nodes,
    stake_node,
)


NODE = "http://10.0.0.1:1635"
ADDRESS = "0x" + "a" * 40


class TestKubectlNodeLister:
    """Tests for KubectlNodeLister."""

    def test_list(self) -> None:
        """Test that pods are mapped to their bee API endpoint."""
        pods = {
            "items": [
                {"metadata": {"name": "bee-0"}, "status": {"podIP": "10.0.0.1"}},
                {"metadata": {"name": "bee-1"}, "status": {"podIP": "10.0.0.2"}},
            ]
        }
        result = MagicMock(returncode=0, stdout=json.dumps(pods).encode())
        with patch(
            "funder.services.nodes.subprocess.run", return_value=result
        ) as mock_run:
            nodes = KubectlNodeLister().list("swarm")

        assert nodes == [
            NodeInfo(name="bee-0", address="http://10.0.0.1:1635"),
            NodeInfo(name="bee-1", address="http://10.0.0.2:1635"),
        ]
        assert mock_run.call_args.kwargs["args"] == [
            "kubectl",
            "get",
            "pods",
            "-n",
            "swarm",
            "-o",
            "json",
        ]

    def test_list_failure(self) -> None:
        """Test that a failing kubectl raises CollaboratorError."""
        result = MagicMock(returncode=1, stderr=b"namespace not found\n")
        with patch("funder.services.nodes.subprocess.run", return_value=result):
            with pytest.raises(CollaboratorError, match="namespace not found"):
                KubectlNodeLister().list("swarm")

    def test_kubectl_missing(self) -> None:
        """Test that a missing kubectl binary raises CollaboratorError."""
        with patch(
            "funder.services.nodes.subprocess.run",
            side_effect=FileNotFoundError("kubectl"),
        ):
            with pytest.raises(CollaboratorError, match="failed listing pods"):
                KubectlNodeLister().list("swarm")

    def test_kubectl_timeout(self) -> None:
        """Test that a hanging kubectl raises CollaboratorError."""
        with patch(
            "funder.services.nodes.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="kubectl", timeout=1),
        ):
            with pytest.raises(CollaboratorError):
                KubectlNodeLister(timeout=1).list("swarm")


class TestFilterBeeNodes:
    """Tests for filter_bee_nodes."""

    def test_filter(self) -> None:
        """Test that only pods with a `bee` name part are kept."""
        nodes = [
            NodeInfo(name="bee-0", address=""),
            NodeInfo(name="swarm-bee-1", address=""),
            NodeInfo(name="not-a-valid-beenode", address=""),
            NodeInfo(name="geth-0", address=""),
        ]

        bee_nodes, omitted = filter_bee_nodes(nodes)

        assert [node.name for node in bee_nodes] == ["bee-0", "swarm-bee-1"]
        assert [node.name for node in omitted] == ["not-a-valid-beenode", "geth-0"]


class TestNodeHttpApi:
    """Tests for the node HTTP API helpers."""

    def test_fetch_wallet_info(self) -> None:
        """Test the wallet endpoint."""
        with patch(
            "funder.services.nodes.send_http_request",
            return_value={"walletAddress": ADDRESS, "chainID": 100},
        ) as mock_request:
            assert fetch_wallet_info(NODE) == (ADDRESS, 100)

        mock_request.assert_called_once_with(method="GET", endpoint=f"{NODE}/wallet")

    def test_fetch_wallet_info_empty_address(self) -> None:
        """Test that an empty wallet address is an error."""
        with patch(
            "funder.services.nodes.send_http_request",
            return_value={"walletAddress": "", "chainID": 100},
        ):
            with pytest.raises(CollaboratorError, match="wallet address"):
                fetch_wallet_info(NODE)

    def test_fetch_address(self) -> None:
        """Test the addresses endpoint."""
        with patch(
            "funder.services.nodes.send_http_request",
            return_value={"ethereum": ADDRESS},
        ) as mock_request:
            assert fetch_address(NODE) == ADDRESS

        mock_request.assert_called_once_with(method="GET", endpoint=f"{NODE}/addresses")

    def test_fetch_address_unexpected_body(self) -> None:
        """Test that a non object body is an error."""
        with patch("funder.services.nodes.send_http_request", return_value=None):
            with pytest.raises(CollaboratorError, match="unexpected response"):
                fetch_address(NODE)

    def test_fetch_stake_info(self) -> None:
        """Test that the staked amount is parsed as an integer."""
        with patch(
            "funder.services.nodes.send_http_request",
            return_value={"stakedAmount": "100000000000000000"},
        ):
            assert fetch_stake_info(NODE) == 10**17

    def test_fetch_stake_info_invalid(self) -> None:
        """Test that a malformed staked amount is an error."""
        with patch(
            "funder.services.nodes.send_http_request",
            return_value={"stakedAmount": "1.5"},
        ):
            with pytest.raises(CollaboratorError, match="staked amount"):
                fetch_stake_info(NODE)

    def test_stake_node(self) -> None:
        """Test that the amount is posted in PLUR."""
        with patch("funder.services.nodes.send_http_request") as mock_request:
            stake_node(NODE, 10**17)

        mock_request.assert_called_once_with(
            method="POST", endpoint=f"{NODE}/stake/100000000000000000"
        )


class TestFetchNamespaceWallets:
    """Tests for fetch_namespace_wallets."""

    def test_resolves_and_drops_failures(self) -> None:
        """Test that failing nodes are logged and dropped."""
        nodes = [
            NodeInfo(name="bee-0", address="http://10.0.0.1:1635"),
            NodeInfo(name="bee-1", address="http://10.0.0.2:1635"),
        ]

        def _wallet_info(node_address: str) -> tuple:
            if node_address == "http://10.0.0.2:1635":
                raise CollaboratorError("status code 404")
            return ADDRESS, 100

        logger = MagicMock()
        with patch(
            "funder.services.nodes.fetch_wallet_info", side_effect=_wallet_info
        ):
            wallets = fetch_namespace_wallets(nodes=nodes, logger=logger)

        (wallet,) = wallets
        assert wallet.name == f"node (bee-0) (address={ADDRESS})"
        assert wallet.chain_id == 100
        logger.warning.assert_called_once()
        assert "bee-1" in logger.warning.call_args.args[0]

    def test_known_chain_id(self) -> None:
        """Test that only the address is fetched when the chain is known."""
        nodes = [NodeInfo(name="bee-0", address=NODE)]
        with patch(
            "funder.services.nodes.fetch_address", return_value=ADDRESS
        ), patch("funder.services.nodes.fetch_wallet_info") as mock_wallet_info:
            (wallet,) = fetch_namespace_wallets(
                nodes=nodes, logger=MagicMock(), chain_id=12345
            )

        mock_wallet_info.assert_not_called()
        assert wallet.chain_id == 12345

    def test_no_nodes(self) -> None:
        """Test that no nodes resolve to no wallets."""
        assert fetch_namespace_wallets(nodes=[], logger=MagicMock()) == []
