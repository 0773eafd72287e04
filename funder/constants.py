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

"""Constants."""

SEPOLIA_CHAIN_ID = 11155111
GNOSIS_CHAIN_ID = 100
LOCALNET_CHAIN_ID = 12345

NATIVE_COIN_DECIMALS = 18
SWARM_TOKEN_DECIMALS = 16

DEFAULT_BOOST_PERCENT = 30
TX_SEND_MAX_RETRIES = 3
STALE_NONCE_ERRORS = ("replacement transaction underpriced",)

ERC20_BALANCE_OF_SELECTOR = "0x70a08231"  # First 4 bytes of Web3.keccak(text='balanceOf(address)')
ERC20_TRANSFER_SELECTOR = "0xa9059cbb"  # First 4 bytes of Web3.keccak(text='transfer(address,uint256)')
ERC20_MINT_SELECTOR = "0x40c10f19"  # First 4 bytes of Web3.keccak(text='mint(address,uint256)')

NATIVE_LEG = "native"
SWARM_LEG = "swarm"

BEE_NODE_NAME_PART = "bee"
BEE_API_PORT = 1635
BEE_WALLET_ENDPOINT = "/wallet"
BEE_ADDRESSES_ENDPOINT = "/addresses"
BEE_STAKE_ENDPOINT = "/stake"

HTTP_REQUEST_TIMEOUT = 30
KUBECTL_TIMEOUT = 60
