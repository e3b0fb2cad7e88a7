# Copyright © Endless
# Parts of the project are originally copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import json
from typing import Protocol

from endless_sdk import asymmetric_crypto, asymmetric_crypto_wrapper, ed25519, secp256k1_ecdsa
from endless_sdk.account_address import AccountAddress, AuthenticationKey
from endless_sdk.authenticator import (
    AccountAuthenticator,
    MultiKeyAuthenticator,
    SingleKeyAuthenticator,
)
from endless_sdk.errors import CryptoError
from endless_sdk.transactions import RawTransactionInternal


class Signer(Protocol):
    """Anything that can authorize a transaction on behalf of an on-chain account."""

    def address(self) -> AccountAddress: ...

    def auth_key(self) -> AuthenticationKey: ...

    def public_key(self) -> asymmetric_crypto.PublicKey: ...

    def sign(self, data: bytes) -> asymmetric_crypto.Signature: ...

    def sign_transaction(
        self, transaction: RawTransactionInternal
    ) -> AccountAuthenticator: ...

    def sign_simulated_transaction(
        self, transaction: RawTransactionInternal
    ) -> AccountAuthenticator: ...


class Account:
    """Represents an account as well as the private, public key-pair for the Endless blockchain.

    Ed25519 keys sign with the legacy Ed25519 authenticator unless `single_key` is set, Secp256k1 keys always use the
    single key authenticator.
    """

    account_address: AccountAddress
    private_key: asymmetric_crypto.PrivateKey
    single_key: bool

    def __init__(
        self,
        account_address: AccountAddress,
        private_key: asymmetric_crypto.PrivateKey,
        single_key: bool = False,
    ):
        self.account_address = account_address
        self.private_key = private_key
        self.single_key = single_key or not isinstance(private_key, ed25519.PrivateKey)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return (
            self.account_address == other.account_address
            and self.private_key == other.private_key
            and self.single_key == other.single_key
        )

    def __str__(self) -> str:
        return f"Account {self.account_address}"

    @staticmethod
    def from_private_key(
        private_key: asymmetric_crypto.PrivateKey,
        single_key: bool = False,
        account_address: AccountAddress | None = None,
    ) -> Account:
        """
        Builds the account for a key. `account_address` is only needed once the account's key was rotated and the
        address no longer derives from it.
        """
        if account_address is None:
            public_key = private_key.public_key()
            if single_key or not isinstance(private_key, ed25519.PrivateKey):
                public_key = asymmetric_crypto_wrapper.PublicKey(public_key)
            account_address = AccountAddress.from_key(public_key)
        return Account(account_address, private_key, single_key)

    @staticmethod
    def generate(single_key: bool = False) -> Account:
        return Account.from_private_key(ed25519.PrivateKey.random(), single_key)

    @staticmethod
    def generate_secp256k1_ecdsa() -> Account:
        return Account.from_private_key(secp256k1_ecdsa.PrivateKey.random())

    @staticmethod
    def load_key(key: str, single_key: bool = False) -> Account:
        return Account.from_private_key(ed25519.PrivateKey.from_str(key), single_key)

    @staticmethod
    def load(path: str) -> Account:
        with open(path) as file:
            data = json.load(file)
        if data.get("scheme") == "secp256k1_ecdsa":
            private_key: asymmetric_crypto.PrivateKey = (
                secp256k1_ecdsa.PrivateKey.from_str(data["private_key"])
            )
        else:
            private_key = ed25519.PrivateKey.from_str(data["private_key"])
        return Account(
            AccountAddress.from_str_relaxed(data["account_address"]),
            private_key,
            data.get("single_key", False),
        )

    def store(self, path: str):
        scheme = (
            "ed25519"
            if isinstance(self.private_key, ed25519.PrivateKey)
            else "secp256k1_ecdsa"
        )
        data = {
            "account_address": str(self.account_address),
            "private_key": self.private_key.hex(),
            "scheme": scheme,
            "single_key": self.single_key,
        }
        with open(path, "w") as file:
            json.dump(data, file)

    def address(self) -> AccountAddress:
        """Returns the address associated with the given account"""
        return self.account_address

    def auth_key(self) -> AuthenticationKey:
        """Returns the auth_key for the associated account"""
        return AuthenticationKey.from_public_key(self._authenticating_key())

    def sign(self, data: bytes) -> asymmetric_crypto.Signature:
        return self.private_key.sign(data)

    def sign_simulated_transaction(
        self, transaction: RawTransactionInternal
    ) -> AccountAuthenticator:
        return transaction.sign_simulated(self._authenticating_key())

    def sign_transaction(
        self, transaction: RawTransactionInternal
    ) -> AccountAuthenticator:
        if not self.single_key:
            return transaction.sign_with_key(self.private_key)
        signature = self.private_key.sign(transaction.keyed())
        return AccountAuthenticator(
            SingleKeyAuthenticator(self.private_key.public_key(), signature)
        )

    def public_key(self) -> asymmetric_crypto.PublicKey:
        """Returns the public key for the associated account"""
        return self.private_key.public_key()

    def _authenticating_key(self) -> asymmetric_crypto.PublicKey:
        if self.single_key:
            return asymmetric_crypto_wrapper.PublicKey(self.private_key.public_key())
        return self.private_key.public_key()


class MultiKeyAccount:
    """A k-of-n account whose transactions are signed by at least `threshold` of the local signers.

    Each signer is placed at the index its public key has in the MultiPublicKey, which is where the resulting
    signature's bit lands in the bitmap.
    """

    multi_public_key: asymmetric_crypto_wrapper.MultiPublicKey
    signers: list[tuple[int, Account]]
    account_address: AccountAddress

    def __init__(
        self,
        multi_public_key: asymmetric_crypto_wrapper.MultiPublicKey,
        signers: list[Account],
        account_address: AccountAddress | None = None,
    ):
        self.multi_public_key = multi_public_key
        self.signers = sorted(
            ((multi_public_key.index_of(signer.public_key()), signer) for signer in signers),
            key=lambda entry: entry[0],
        )
        indexes = [idx for idx, _ in self.signers]
        if len(set(indexes)) != len(indexes):
            raise CryptoError(f"Duplicate signer for key indexes {indexes}")
        if len(indexes) < multi_public_key.threshold:
            raise CryptoError(
                f"{multi_public_key} needs {multi_public_key.threshold} signers, got {len(indexes)}"
            )
        self.account_address = (
            self.auth_key().account_address()
            if account_address is None
            else account_address
        )

    def address(self) -> AccountAddress:
        return self.account_address

    def auth_key(self) -> AuthenticationKey:
        return AuthenticationKey.from_public_key(self.multi_public_key)

    def public_key(self) -> asymmetric_crypto_wrapper.MultiPublicKey:
        return self.multi_public_key

    def sign(self, data: bytes) -> asymmetric_crypto_wrapper.MultiSignature:
        return asymmetric_crypto_wrapper.MultiSignature(
            [(idx, signer.sign(data)) for idx, signer in self.signers]
        )

    def sign_transaction(
        self, transaction: RawTransactionInternal
    ) -> AccountAuthenticator:
        return AccountAuthenticator(
            MultiKeyAuthenticator(self.multi_public_key, self.sign(transaction.keyed()))
        )

    def sign_simulated_transaction(
        self, transaction: RawTransactionInternal
    ) -> AccountAuthenticator:
        return transaction.sign_simulated(self.multi_public_key)
