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

"""Signing key."""

import typing as t

from eth_account.signers.local import LocalAccount
from web3 import Account, Web3

from funder.exceptions import ConfigurationError


class WalletKey:
    """Hex encoded secp256k1 private key."""

    def __init__(self, private_key: str) -> None:
        """Initialize object."""
        try:
            self._account: LocalAccount = Account.from_key(private_key.strip())
        except Exception as e:  # pylint: disable=broad-except
            raise ConfigurationError("Invalid wallet key.") from e

    @classmethod
    def generate(cls) -> "WalletKey":
        """Generate a new random key."""
        account = Account.create()
        return cls(account.key.hex())

    @property
    def address(self) -> str:
        """Checksummed public address."""
        return self._account.address

    def sign_transaction(self, tx: t.Dict[str, t.Any]) -> t.Tuple[bytes, str]:
        """
        Sign a transaction dict.

        The signature is a recoverable secp256k1 signature over the typed
        transaction hash, encoded as (r, s, v) with the chain id bound in.

        :param tx: transaction fields, including `type`, `chainId` and `nonce`.
        :return: raw signed transaction and its hash.
        """
        signed = self._account.sign_transaction(tx)
        return bytes(signed.rawTransaction), Web3.to_hex(signed.hash)

    def __repr__(self) -> str:
        """Never leak the private key."""
        return f"WalletKey(address={self.address})"
