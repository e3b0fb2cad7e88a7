# Copyright © Endless
# Parts of the project are originally copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Any

from endless_sdk import asymmetric_crypto, asymmetric_crypto_wrapper, ed25519
from endless_sdk.account_address import AccountAddress, AuthenticationKey
from endless_sdk.bcs import Deserializer, Serializer
from endless_sdk.errors import CryptoError, EncodingError


class Authenticator:
    """
    Each transaction submitted to the Endless blockchain contains a `TransactionAuthenticator`.
    During transaction execution, the executor will check if every `AccountAuthenticator`'s
    signature on the transaction hash is well-formed and whether `AccountAuthenticator`'s matches
    the `AuthenticationKey` stored under the participating signer's account address.
    """

    ED25519: int = 0
    MULTI_ED25519: int = 1
    MULTI_AGENT: int = 2
    FEE_PAYER: int = 3
    SINGLE_SENDER: int = 4

    variant: int
    authenticator: Any

    def __init__(self, authenticator: Any):
        if isinstance(authenticator, Ed25519Authenticator):
            self.variant = Authenticator.ED25519
        elif isinstance(authenticator, MultiAgentAuthenticator):
            self.variant = Authenticator.MULTI_AGENT
        elif isinstance(authenticator, FeePayerAuthenticator):
            self.variant = Authenticator.FEE_PAYER
        elif isinstance(authenticator, SingleSenderAuthenticator):
            self.variant = Authenticator.SINGLE_SENDER
        else:
            raise CryptoError(f"Invalid transaction authenticator type: {type(authenticator)}")
        self.authenticator = authenticator

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Authenticator):
            return NotImplemented
        return (
            self.variant == other.variant and self.authenticator == other.authenticator
        )

    def __str__(self) -> str:
        return self.authenticator.__str__()

    def verify(self, data: bytes) -> bool:
        return self.authenticator.verify(data)

    def unset_signature(self):
        self.authenticator.unset_signature()

    @staticmethod
    def deserialize(deserializer: Deserializer) -> Authenticator:
        variant = deserializer.variant_index(Authenticator.SINGLE_SENDER + 1)

        if variant == Authenticator.ED25519:
            authenticator: Any = Ed25519Authenticator.deserialize(deserializer)
        elif variant == Authenticator.MULTI_AGENT:
            authenticator = MultiAgentAuthenticator.deserialize(deserializer)
        elif variant == Authenticator.FEE_PAYER:
            authenticator = FeePayerAuthenticator.deserialize(deserializer)
        elif variant == Authenticator.SINGLE_SENDER:
            authenticator = SingleSenderAuthenticator.deserialize(deserializer)
        else:
            raise EncodingError(f"Unsupported transaction authenticator: {variant}")

        return Authenticator(authenticator)

    def serialize(self, serializer: Serializer):
        serializer.uleb128(self.variant)
        serializer.struct(self.authenticator)


class AccountAuthenticator:
    ED25519: int = 0
    MULTI_ED25519: int = 1
    SINGLE_KEY: int = 2
    MULTI_KEY: int = 3
    MULTI_AUTH_KEY: int = 4

    variant: int
    authenticator: Any

    def __init__(self, authenticator: Any):
        if isinstance(authenticator, Ed25519Authenticator):
            self.variant = AccountAuthenticator.ED25519
        elif isinstance(authenticator, SingleKeyAuthenticator):
            self.variant = AccountAuthenticator.SINGLE_KEY
        elif isinstance(authenticator, MultiKeyAuthenticator):
            self.variant = AccountAuthenticator.MULTI_KEY
        elif isinstance(authenticator, MultiAuthKeyAuthenticator):
            self.variant = AccountAuthenticator.MULTI_AUTH_KEY
        else:
            raise CryptoError(f"Invalid account authenticator type: {type(authenticator)}")
        self.authenticator = authenticator

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AccountAuthenticator):
            return NotImplemented
        return (
            self.variant == other.variant and self.authenticator == other.authenticator
        )

    def __repr__(self) -> str:
        return self.__str__()

    def __str__(self) -> str:
        return self.authenticator.__str__()

    def verify(self, data: bytes) -> bool:
        return self.authenticator.verify(data)

    def authentication_key(self) -> AuthenticationKey | None:
        """The authentication key the signing key(s) derive, None when it can not be derived locally."""
        return self.authenticator.authentication_key()

    def unset_signature(self):
        self.authenticator.unset_signature()

    @staticmethod
    def deserialize(deserializer: Deserializer) -> AccountAuthenticator:
        variant = deserializer.variant_index(AccountAuthenticator.MULTI_AUTH_KEY + 1)

        if variant == AccountAuthenticator.ED25519:
            authenticator: Any = Ed25519Authenticator.deserialize(deserializer)
        elif variant == AccountAuthenticator.SINGLE_KEY:
            authenticator = SingleKeyAuthenticator.deserialize(deserializer)
        elif variant == AccountAuthenticator.MULTI_KEY:
            authenticator = MultiKeyAuthenticator.deserialize(deserializer)
        elif variant == AccountAuthenticator.MULTI_AUTH_KEY:
            authenticator = MultiAuthKeyAuthenticator.deserialize(deserializer)
        else:
            raise EncodingError(f"Unsupported account authenticator: {variant}")

        return AccountAuthenticator(authenticator)

    def serialize(self, serializer: Serializer):
        serializer.uleb128(self.variant)
        serializer.struct(self.authenticator)


class Ed25519Authenticator:
    public_key: ed25519.PublicKey
    signature: ed25519.Signature

    def __init__(self, public_key: ed25519.PublicKey, signature: ed25519.Signature):
        self.public_key = public_key
        self.signature = signature

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ed25519Authenticator):
            return NotImplemented

        return self.public_key == other.public_key and self.signature == other.signature

    def __str__(self) -> str:
        return f"PublicKey: {self.public_key}, Signature: {self.signature}"

    def verify(self, data: bytes) -> bool:
        return self.public_key.verify(data, self.signature)

    def authentication_key(self) -> AuthenticationKey:
        return AuthenticationKey.from_public_key(self.public_key)

    def unset_signature(self):
        self.signature = ed25519.Signature.get_null_signature()

    @staticmethod
    def deserialize(deserializer: Deserializer) -> Ed25519Authenticator:
        key = deserializer.struct(ed25519.PublicKey)
        signature = deserializer.struct(ed25519.Signature)
        return Ed25519Authenticator(key, signature)

    def serialize(self, serializer: Serializer):
        serializer.struct(self.public_key)
        serializer.struct(self.signature)


class SingleKeyAuthenticator:
    public_key: asymmetric_crypto_wrapper.PublicKey
    signature: asymmetric_crypto_wrapper.Signature

    def __init__(
        self,
        public_key: asymmetric_crypto.PublicKey,
        signature: asymmetric_crypto.Signature,
    ):
        if isinstance(public_key, asymmetric_crypto_wrapper.PublicKey):
            self.public_key = public_key
        else:
            self.public_key = asymmetric_crypto_wrapper.PublicKey(public_key)

        if isinstance(signature, asymmetric_crypto_wrapper.Signature):
            self.signature = signature
        else:
            self.signature = asymmetric_crypto_wrapper.Signature(signature)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SingleKeyAuthenticator):
            return NotImplemented
        return self.public_key == other.public_key and self.signature == other.signature

    def __str__(self) -> str:
        return f"PublicKey: {self.public_key}, Signature: {self.signature}"

    def verify(self, data: bytes) -> bool:
        return self.public_key.verify(data, self.signature)

    def authentication_key(self) -> AuthenticationKey:
        return AuthenticationKey.from_public_key(self.public_key)

    def unset_signature(self):
        self.signature = self.signature.unset()

    @staticmethod
    def deserialize(deserializer: Deserializer) -> SingleKeyAuthenticator:
        public_key = deserializer.struct(asymmetric_crypto_wrapper.PublicKey)
        signature = deserializer.struct(asymmetric_crypto_wrapper.Signature)
        return SingleKeyAuthenticator(public_key, signature)

    def serialize(self, serializer: Serializer):
        serializer.struct(self.public_key)
        serializer.struct(self.signature)


class MultiKeyAuthenticator:
    public_key: asymmetric_crypto_wrapper.MultiPublicKey
    signature: asymmetric_crypto_wrapper.MultiSignature

    def __init__(
        self,
        public_key: asymmetric_crypto_wrapper.MultiPublicKey,
        signature: asymmetric_crypto_wrapper.MultiSignature,
    ):
        self.public_key = public_key
        self.signature = signature

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MultiKeyAuthenticator):
            return NotImplemented
        return self.public_key == other.public_key and self.signature == other.signature

    def __str__(self) -> str:
        return f"PublicKey: {self.public_key}, Signature: {self.signature}"

    def verify(self, data: bytes) -> bool:
        return self.public_key.verify(data, self.signature)

    def authentication_key(self) -> AuthenticationKey:
        return AuthenticationKey.from_public_key(self.public_key)

    def unset_signature(self):
        self.signature.unset_signatures()

    @staticmethod
    def deserialize(deserializer: Deserializer) -> MultiKeyAuthenticator:
        public_key = deserializer.struct(asymmetric_crypto_wrapper.MultiPublicKey)
        signature = deserializer.struct(asymmetric_crypto_wrapper.MultiSignature)
        return MultiKeyAuthenticator(public_key, signature)

    def serialize(self, serializer: Serializer):
        serializer.struct(self.public_key)
        serializer.struct(self.signature)


class MultiAuthKeyAuthenticator:
    """Authenticates an account whose on-chain record lists several authentication keys.

    Unlike `MultiKeyAuthenticator` there is no shared key set or bitmap: each owner signs on its own with whatever
    scheme its key uses, and the collected authenticators are bundled afterwards. Every one of them must verify.
    """

    authenticators: list[AccountAuthenticator]

    def __init__(self, authenticators: list[AccountAuthenticator]):
        self.authenticators = authenticators

    @staticmethod
    def from_authenticators(
        authenticators: list[AccountAuthenticator],
    ) -> MultiAuthKeyAuthenticator:
        if not authenticators:
            raise CryptoError("At least one authenticator is required")
        for authenticator in authenticators:
            if authenticator.variant == AccountAuthenticator.MULTI_AUTH_KEY:
                raise CryptoError("MultiAuthKey authenticators can not be nested")
        return MultiAuthKeyAuthenticator(list(authenticators))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MultiAuthKeyAuthenticator):
            return NotImplemented
        return self.authenticators == other.authenticators

    def __str__(self) -> str:
        return f"MultiAuthKey: {self.authenticators}"

    def verify(self, data: bytes) -> bool:
        if not self.authenticators:
            return False
        return all(authenticator.verify(data) for authenticator in self.authenticators)

    def authentication_key(self) -> None:
        # The owners' keys are registered on chain, the account address does not derive from them
        return None

    def unset_signature(self):
        for authenticator in self.authenticators:
            authenticator.unset_signature()

    @staticmethod
    def deserialize(deserializer: Deserializer) -> MultiAuthKeyAuthenticator:
        return MultiAuthKeyAuthenticator(
            deserializer.sequence(AccountAuthenticator.deserialize)
        )

    def serialize(self, serializer: Serializer):
        serializer.sequence(self.authenticators, Serializer.struct)


class FeePayerAuthenticator:
    sender: AccountAuthenticator
    secondary_signers: list[tuple[AccountAddress, AccountAuthenticator]]
    fee_payer: tuple[AccountAddress, AccountAuthenticator]

    def __init__(
        self,
        sender: AccountAuthenticator,
        secondary_signers: list[tuple[AccountAddress, AccountAuthenticator]],
        fee_payer: tuple[AccountAddress, AccountAuthenticator],
    ):
        self.sender = sender
        self.secondary_signers = secondary_signers
        self.fee_payer = fee_payer

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FeePayerAuthenticator):
            return NotImplemented
        return (
            self.sender == other.sender
            and self.secondary_signers == other.secondary_signers
            and self.fee_payer == other.fee_payer
        )

    def __str__(self) -> str:
        return f"FeePayer: \n\tSender: {self.sender}\n\tSecondary Signers: {self.secondary_signers}\n\t{self.fee_payer}"

    def fee_payer_address(self) -> AccountAddress:
        return self.fee_payer[0]

    def secondary_addresses(self) -> list[AccountAddress]:
        return [x[0] for x in self.secondary_signers]

    def verify(self, data: bytes) -> bool:
        if not self.sender.verify(data):
            return False
        if not self.fee_payer[1].verify(data):
            return False
        return all(x[1].verify(data) for x in self.secondary_signers)

    def unset_signature(self):
        self.sender.unset_signature()
        for _, authenticator in self.secondary_signers:
            authenticator.unset_signature()
        self.fee_payer[1].unset_signature()

    @staticmethod
    def deserialize(deserializer: Deserializer) -> FeePayerAuthenticator:
        sender = deserializer.struct(AccountAuthenticator)
        secondary_addresses = deserializer.sequence(AccountAddress.deserialize)
        secondary_authenticators = deserializer.sequence(
            AccountAuthenticator.deserialize
        )
        if len(secondary_addresses) != len(secondary_authenticators):
            raise EncodingError("Secondary signer addresses and authenticators differ in length")
        fee_payer_address = deserializer.struct(AccountAddress)
        fee_payer_authenticator = deserializer.struct(AccountAuthenticator)
        return FeePayerAuthenticator(
            sender,
            list(zip(secondary_addresses, secondary_authenticators)),
            (fee_payer_address, fee_payer_authenticator),
        )

    def serialize(self, serializer: Serializer):
        serializer.struct(self.sender)
        serializer.sequence([x[0] for x in self.secondary_signers], Serializer.struct)
        serializer.sequence([x[1] for x in self.secondary_signers], Serializer.struct)
        serializer.struct(self.fee_payer[0])
        serializer.struct(self.fee_payer[1])


class MultiAgentAuthenticator:
    sender: AccountAuthenticator
    secondary_signers: list[tuple[AccountAddress, AccountAuthenticator]]

    def __init__(
        self,
        sender: AccountAuthenticator,
        secondary_signers: list[tuple[AccountAddress, AccountAuthenticator]],
    ):
        self.sender = sender
        self.secondary_signers = secondary_signers

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MultiAgentAuthenticator):
            return NotImplemented
        return (
            self.sender == other.sender
            and self.secondary_signers == other.secondary_signers
        )

    def __str__(self) -> str:
        return f"MultiAgent: \n\tSender: {self.sender}\n\tSecondary Signers: {self.secondary_signers}"

    def secondary_addresses(self) -> list[AccountAddress]:
        return [x[0] for x in self.secondary_signers]

    def verify(self, data: bytes) -> bool:
        if not self.sender.verify(data):
            return False
        return all(x[1].verify(data) for x in self.secondary_signers)

    def unset_signature(self):
        self.sender.unset_signature()
        for _, authenticator in self.secondary_signers:
            authenticator.unset_signature()

    @staticmethod
    def deserialize(deserializer: Deserializer) -> MultiAgentAuthenticator:
        sender = deserializer.struct(AccountAuthenticator)
        secondary_addresses = deserializer.sequence(AccountAddress.deserialize)
        secondary_authenticators = deserializer.sequence(
            AccountAuthenticator.deserialize
        )
        if len(secondary_addresses) != len(secondary_authenticators):
            raise EncodingError("Secondary signer addresses and authenticators differ in length")
        return MultiAgentAuthenticator(
            sender, list(zip(secondary_addresses, secondary_authenticators))
        )

    def serialize(self, serializer: Serializer):
        serializer.struct(self.sender)
        serializer.sequence([x[0] for x in self.secondary_signers], Serializer.struct)
        serializer.sequence([x[1] for x in self.secondary_signers], Serializer.struct)


class SingleSenderAuthenticator:
    sender: AccountAuthenticator

    def __init__(self, sender: AccountAuthenticator):
        self.sender = sender

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SingleSenderAuthenticator):
            return NotImplemented
        return self.sender == other.sender

    def __str__(self) -> str:
        return self.sender.__str__()

    def verify(self, data: bytes) -> bool:
        return self.sender.verify(data)

    def unset_signature(self):
        self.sender.unset_signature()

    @staticmethod
    def deserialize(deserializer: Deserializer) -> SingleSenderAuthenticator:
        sender = deserializer.struct(AccountAuthenticator)
        return SingleSenderAuthenticator(sender)

    def serialize(self, serializer: Serializer):
        serializer.struct(self.sender)
