# Copyright © Endless
# Parts of the project are originally copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""This translates Endless transactions to and from BCS for signing and submitting to the REST API."""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, cast

from endless_sdk import asymmetric_crypto, asymmetric_crypto_wrapper, ed25519
from endless_sdk.account_address import ACCOUNT_ZERO, AccountAddress
from endless_sdk.authenticator import (
    AccountAuthenticator,
    Authenticator,
    Ed25519Authenticator,
    FeePayerAuthenticator,
    MultiAgentAuthenticator,
    MultiKeyAuthenticator,
    SingleKeyAuthenticator,
    SingleSenderAuthenticator,
)
from endless_sdk.bcs import Deserializable, Deserializer, Serializable, Serializer
from endless_sdk.errors import CryptoError, EncodingError
from endless_sdk.type_tag import TypeTag

if TYPE_CHECKING:
    from endless_sdk.account import Signer


def _prehash(domain: bytes) -> bytes:
    hasher = hashlib.sha3_256()
    hasher.update(domain)
    return hasher.digest()


RAW_TRANSACTION_SALT = b"ENDLESS::RawTransaction"
RAW_TRANSACTION_WITH_DATA_SALT = b"ENDLESS::RawTransactionWithData"
TRANSACTION_SALT = b"ENDLESS::Transaction"


class RawTransactionInternal(Protocol):
    def keyed(self) -> bytes:
        serializer = Serializer()
        self.serialize(serializer)
        prehash = bytearray(self.prehash())
        prehash.extend(serializer.output())
        return bytes(prehash)

    def signing_message(self) -> bytes:
        return self.keyed()

    def prehash(self) -> bytes: ...

    def serialize(self, serializer: Serializer) -> None: ...

    def sign(self, signer: Signer) -> AccountAuthenticator:
        return signer.sign_transaction(self)

    def sign_with_key(self, key: asymmetric_crypto.PrivateKey) -> AccountAuthenticator:
        signature = key.sign(self.keyed())
        if isinstance(signature, ed25519.Signature):
            return AccountAuthenticator(
                Ed25519Authenticator(
                    cast(ed25519.PublicKey, key.public_key()), signature
                )
            )
        return AccountAuthenticator(SingleKeyAuthenticator(key.public_key(), signature))

    def sign_simulated(self, key: asymmetric_crypto.PublicKey) -> AccountAuthenticator:
        if isinstance(key, ed25519.PublicKey):
            return AccountAuthenticator(
                Ed25519Authenticator(key, ed25519.Signature.get_null_signature())
            )
        if isinstance(key, asymmetric_crypto_wrapper.MultiPublicKey):
            signatures = [
                (idx, key.keys[idx].null_signature())
                for idx in range(key.threshold)
            ]
            return AccountAuthenticator(
                MultiKeyAuthenticator(
                    key, asymmetric_crypto_wrapper.MultiSignature(signatures)
                )
            )
        wrapped = (
            key
            if isinstance(key, asymmetric_crypto_wrapper.PublicKey)
            else asymmetric_crypto_wrapper.PublicKey(key)
        )
        return AccountAuthenticator(
            SingleKeyAuthenticator(wrapped, wrapped.null_signature())
        )

    def verify(
        self, key: asymmetric_crypto.PublicKey, signature: asymmetric_crypto.Signature
    ) -> bool:
        return key.verify(self.keyed(), signature)


class RawTransactionWithData(RawTransactionInternal, Protocol):
    raw_transaction: RawTransaction
    secondary_signers: list[AccountAddress]

    def inner(self) -> RawTransaction:
        return self.raw_transaction

    def prehash(self) -> bytes:
        return _prehash(RAW_TRANSACTION_WITH_DATA_SALT)


class RawTransaction(Deserializable, RawTransactionInternal, Serializable):
    # Sender's address
    sender: AccountAddress
    # Sequence number of this transaction. This must match the sequence number in the sender's
    # account at the time of execution.
    sequence_number: int
    # The transaction payload, e.g., a script to execute.
    payload: TransactionPayload
    # Maximum total gas to spend for this transaction
    max_gas_amount: int
    # Price to be paid per gas unit.
    gas_unit_price: int
    # Expiration timestamp for this transaction, represented as seconds from the Unix epoch.
    expiration_timestamps_secs: int
    # Chain ID of the Endless network this transaction is intended for.
    chain_id: int

    def __init__(
        self,
        sender: AccountAddress,
        sequence_number: int,
        payload: TransactionPayload,
        max_gas_amount: int,
        gas_unit_price: int,
        expiration_timestamps_secs: int,
        chain_id: int,
    ):
        self.sender = sender
        self.sequence_number = sequence_number
        self.payload = payload
        self.max_gas_amount = max_gas_amount
        self.gas_unit_price = gas_unit_price
        self.expiration_timestamps_secs = expiration_timestamps_secs
        self.chain_id = chain_id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RawTransaction):
            return NotImplemented
        return (
            self.sender == other.sender
            and self.sequence_number == other.sequence_number
            and self.payload == other.payload
            and self.max_gas_amount == other.max_gas_amount
            and self.gas_unit_price == other.gas_unit_price
            and self.expiration_timestamps_secs == other.expiration_timestamps_secs
            and self.chain_id == other.chain_id
        )

    def __str__(self):
        return f"""RawTransaction:
    sender: {self.sender}
    sequence_number: {self.sequence_number}
    payload: {self.payload}
    max_gas_amount: {self.max_gas_amount}
    gas_unit_price: {self.gas_unit_price}
    expiration_timestamps_secs: {self.expiration_timestamps_secs}
    chain_id: {self.chain_id}
"""

    def prehash(self) -> bytes:
        return _prehash(RAW_TRANSACTION_SALT)

    def to_signed_transaction(
        self, authenticator: AccountAuthenticator
    ) -> SignedTransaction:
        return SignedTransaction(self, authenticator)

    @staticmethod
    def deserialize(deserializer: Deserializer) -> RawTransaction:
        return RawTransaction(
            AccountAddress.deserialize(deserializer),
            deserializer.u64(),
            TransactionPayload.deserialize(deserializer),
            deserializer.u64(),
            deserializer.u64(),
            deserializer.u64(),
            deserializer.u8(),
        )

    def serialize(self, serializer: Serializer) -> None:
        self.sender.serialize(serializer)
        serializer.u64(self.sequence_number)
        self.payload.serialize(serializer)
        serializer.u64(self.max_gas_amount)
        serializer.u64(self.gas_unit_price)
        serializer.u64(self.expiration_timestamps_secs)
        serializer.u8(self.chain_id)


def _check_secondary_count(
    expected: list[AccountAddress], authenticators: list[AccountAuthenticator]
):
    if len(expected) != len(authenticators):
        raise CryptoError(
            f"Expected {len(expected)} secondary signer authenticators, got {len(authenticators)}"
        )


class MultiAgentRawTransaction(RawTransactionWithData):
    def __init__(
        self, raw_transaction: RawTransaction, secondary_signers: list[AccountAddress]
    ):
        self.raw_transaction = raw_transaction
        self.secondary_signers = secondary_signers

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MultiAgentRawTransaction):
            return NotImplemented
        return (
            self.raw_transaction == other.raw_transaction
            and self.secondary_signers == other.secondary_signers
        )

    def to_multi_agent_signed_transaction(
        self,
        sender_authenticator: AccountAuthenticator,
        secondary_authenticators: list[AccountAuthenticator],
    ) -> SignedTransaction:
        _check_secondary_count(self.secondary_signers, secondary_authenticators)
        authenticator = MultiAgentAuthenticator(
            sender_authenticator,
            list(zip(self.secondary_signers, secondary_authenticators)),
        )
        return SignedTransaction(self.raw_transaction, Authenticator(authenticator))

    def serialize(self, serializer: Serializer) -> None:
        # This is a type indicator for an enum
        serializer.u8(0)
        serializer.struct(self.raw_transaction)
        serializer.sequence(self.secondary_signers, Serializer.struct)


class FeePayerRawTransaction(RawTransactionWithData):
    """A transaction whose gas is paid by an account other than the sender.

    The fee payer may be unknown while the sender and secondary signers sign, in which case the signing message
    carries `0x0` in its place and the payer is filled in later through `set_fee_payer`.
    """

    fee_payer: AccountAddress | None

    def __init__(
        self,
        raw_transaction: RawTransaction,
        secondary_signers: list[AccountAddress],
        fee_payer: AccountAddress | None,
    ):
        self.raw_transaction = raw_transaction
        self.secondary_signers = secondary_signers
        self.fee_payer = fee_payer

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FeePayerRawTransaction):
            return NotImplemented
        return (
            self.raw_transaction == other.raw_transaction
            and self.secondary_signers == other.secondary_signers
            and self.fee_payer == other.fee_payer
        )

    def set_fee_payer(self, fee_payer: AccountAddress):
        self.fee_payer = fee_payer

    def to_fee_payer_signed_transaction(
        self,
        sender_authenticator: AccountAuthenticator,
        fee_payer_authenticator: AccountAuthenticator,
        secondary_authenticators: list[AccountAuthenticator],
    ) -> SignedTransaction:
        if self.fee_payer is None:
            raise CryptoError("Fee payer address is not set")
        _check_secondary_count(self.secondary_signers, secondary_authenticators)
        authenticator = FeePayerAuthenticator(
            sender_authenticator,
            list(zip(self.secondary_signers, secondary_authenticators)),
            (self.fee_payer, fee_payer_authenticator),
        )
        return SignedTransaction(self.raw_transaction, Authenticator(authenticator))

    def serialize(self, serializer: Serializer) -> None:
        serializer.u8(1)
        serializer.struct(self.raw_transaction)
        serializer.sequence(self.secondary_signers, Serializer.struct)
        fee_payer = ACCOUNT_ZERO if self.fee_payer is None else self.fee_payer
        serializer.struct(fee_payer)


class TransactionPayload:
    SCRIPT: int = 0
    MODULE_BUNDLE: int = 1
    ENTRY_FUNCTION: int = 2
    MULTISIG: int = 3
    SAFE_ENTRY_FUNCTION: int = 4

    variant: int
    value: Any

    def __init__(self, payload: Any):
        if isinstance(payload, Script):
            self.variant = TransactionPayload.SCRIPT
        elif isinstance(payload, SafeEntryFunction):
            self.variant = TransactionPayload.SAFE_ENTRY_FUNCTION
        elif isinstance(payload, EntryFunction):
            self.variant = TransactionPayload.ENTRY_FUNCTION
        elif isinstance(payload, Multisig):
            self.variant = TransactionPayload.MULTISIG
        else:
            raise EncodingError(f"Invalid transaction payload type: {type(payload)}")
        self.value = payload

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TransactionPayload):
            return NotImplemented
        return self.variant == other.variant and self.value == other.value

    def __str__(self) -> str:
        return self.value.__str__()

    @staticmethod
    def deserialize(deserializer: Deserializer) -> TransactionPayload:
        variant = deserializer.variant_index(TransactionPayload.SAFE_ENTRY_FUNCTION + 1)

        if variant == TransactionPayload.SCRIPT:
            payload: Any = Script.deserialize(deserializer)
        elif variant == TransactionPayload.MODULE_BUNDLE:
            raise EncodingError("Module bundle payloads are deprecated")
        elif variant == TransactionPayload.ENTRY_FUNCTION:
            payload = EntryFunction.deserialize(deserializer)
        elif variant == TransactionPayload.MULTISIG:
            payload = Multisig.deserialize(deserializer)
        else:
            payload = SafeEntryFunction.deserialize(deserializer)

        return TransactionPayload(payload)

    def serialize(self, serializer: Serializer) -> None:
        serializer.uleb128(self.variant)
        self.value.serialize(serializer)


class Script:
    code: bytes
    ty_args: list[TypeTag]
    args: list[ScriptArgument]

    def __init__(self, code: bytes, ty_args: list[TypeTag], args: list[ScriptArgument]):
        self.code = code
        self.ty_args = ty_args
        self.args = args

    @staticmethod
    def deserialize(deserializer: Deserializer) -> Script:
        code = deserializer.to_bytes()
        ty_args = deserializer.sequence(TypeTag.deserialize)
        args = deserializer.sequence(ScriptArgument.deserialize)
        return Script(code, ty_args, args)

    def serialize(self, serializer: Serializer) -> None:
        serializer.to_bytes(self.code)
        serializer.sequence(self.ty_args, Serializer.struct)
        serializer.sequence(self.args, Serializer.struct)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Script):
            return NotImplemented
        return (
            self.code == other.code
            and self.ty_args == other.ty_args
            and self.args == other.args
        )

    def __str__(self):
        return f"<{self.ty_args}>({self.args})"


class ScriptArgument:
    U8: int = 0
    U64: int = 1
    U128: int = 2
    ADDRESS: int = 3
    U8_VECTOR: int = 4
    BOOL: int = 5
    U16: int = 6
    U32: int = 7
    U256: int = 8

    variant: int
    value: Any

    def __init__(self, variant: int, value: Any):
        if variant < ScriptArgument.U8 or variant > ScriptArgument.U256:
            raise EncodingError(f"Invalid ScriptArgument variant {variant}")

        self.variant = variant
        self.value = value

    @staticmethod
    def deserialize(deserializer: Deserializer) -> ScriptArgument:
        variant = deserializer.u8()
        if variant == ScriptArgument.U8:
            value: Any = deserializer.u8()
        elif variant == ScriptArgument.U16:
            value = deserializer.u16()
        elif variant == ScriptArgument.U32:
            value = deserializer.u32()
        elif variant == ScriptArgument.U64:
            value = deserializer.u64()
        elif variant == ScriptArgument.U128:
            value = deserializer.u128()
        elif variant == ScriptArgument.U256:
            value = deserializer.u256()
        elif variant == ScriptArgument.ADDRESS:
            value = AccountAddress.deserialize(deserializer)
        elif variant == ScriptArgument.U8_VECTOR:
            value = deserializer.to_bytes()
        elif variant == ScriptArgument.BOOL:
            value = deserializer.bool()
        else:
            raise EncodingError(f"Invalid ScriptArgument variant {variant}")
        return ScriptArgument(variant, value)

    def serialize(self, serializer: Serializer) -> None:
        serializer.u8(self.variant)
        if self.variant == ScriptArgument.U8:
            serializer.u8(self.value)
        elif self.variant == ScriptArgument.U16:
            serializer.u16(self.value)
        elif self.variant == ScriptArgument.U32:
            serializer.u32(self.value)
        elif self.variant == ScriptArgument.U64:
            serializer.u64(self.value)
        elif self.variant == ScriptArgument.U128:
            serializer.u128(self.value)
        elif self.variant == ScriptArgument.U256:
            serializer.u256(self.value)
        elif self.variant == ScriptArgument.ADDRESS:
            serializer.struct(self.value)
        elif self.variant == ScriptArgument.U8_VECTOR:
            serializer.to_bytes(self.value)
        else:
            serializer.bool(self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScriptArgument):
            return NotImplemented
        return self.variant == other.variant and self.value == other.value

    def __str__(self):
        return f"[{self.variant}] {self.value}"


class EntryFunction:
    module: ModuleId
    function: str
    ty_args: list[TypeTag]
    args: list[bytes]

    def __init__(
        self, module: ModuleId, function: str, ty_args: list[TypeTag], args: list[bytes]
    ):
        self.module = module
        self.function = function
        self.ty_args = ty_args
        self.args = args

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntryFunction):
            return NotImplemented

        return (
            self.module == other.module
            and self.function == other.function
            and self.ty_args == other.ty_args
            and self.args == other.args
        )

    def __str__(self):
        return f"{self.module}::{self.function}::<{self.ty_args}>({self.args})"

    @staticmethod
    def natural(
        module: str,
        function: str,
        ty_args: list[TypeTag],
        args: list[TransactionArgument],
    ) -> EntryFunction:
        module_id = ModuleId.from_str(module)

        byte_args = []
        for arg in args:
            byte_args.append(arg.encode())
        return EntryFunction(module_id, function, ty_args, byte_args)

    @staticmethod
    def from_abi(
        function_abi: dict[str, Any],
        module: str,
        function: str,
        ty_args: list[TypeTag | str],
        args: list[Any],
    ) -> EntryFunction:
        """Encodes plain Python values against the function's ABI, see `endless_sdk.abi`."""
        from endless_sdk.abi import entry_function_from_abi

        module_id = ModuleId.from_str(module)
        return entry_function_from_abi(
            function_abi, module_id.address, module_id.name, function, ty_args, args
        )

    @staticmethod
    def deserialize(deserializer: Deserializer) -> EntryFunction:
        module = ModuleId.deserialize(deserializer)
        function = deserializer.str()
        ty_args = deserializer.sequence(TypeTag.deserialize)
        args = deserializer.sequence(Deserializer.to_bytes)
        return EntryFunction(module, function, ty_args, args)

    def serialize(self, serializer: Serializer) -> None:
        self.module.serialize(serializer)
        serializer.str(self.function)
        serializer.sequence(self.ty_args, Serializer.struct)
        serializer.sequence(self.args, Serializer.to_bytes)


class SafeEntryFunction:
    """An entry function call pinned to the digest of the withdrawals it is expected to make."""

    DIGEST_LENGTH: int = 32

    entry_function: EntryFunction
    digest: bytes

    def __init__(self, entry_function: EntryFunction, digest: bytes):
        if len(digest) != SafeEntryFunction.DIGEST_LENGTH:
            raise EncodingError(
                f"Safe entry function digest must be {SafeEntryFunction.DIGEST_LENGTH} bytes"
            )
        self.entry_function = entry_function
        self.digest = digest

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SafeEntryFunction):
            return NotImplemented
        return (
            self.entry_function == other.entry_function and self.digest == other.digest
        )

    def __str__(self):
        return f"{self.entry_function} digest: 0x{self.digest.hex()}"

    @staticmethod
    def deserialize(deserializer: Deserializer) -> SafeEntryFunction:
        entry_function = EntryFunction.deserialize(deserializer)
        digest = deserializer.fixed_bytes(SafeEntryFunction.DIGEST_LENGTH)
        return SafeEntryFunction(entry_function, digest)

    def serialize(self, serializer: Serializer) -> None:
        self.entry_function.serialize(serializer)
        serializer.fixed_bytes(self.digest)


class Multisig:
    multisig_address: AccountAddress
    transaction_payload: MultisigTransactionPayload | None

    def __init__(
        self,
        multisig_address: AccountAddress,
        transaction_payload: MultisigTransactionPayload | None = None,
    ):
        self.multisig_address = multisig_address
        self.transaction_payload = transaction_payload

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Multisig):
            return NotImplemented
        return (
            self.multisig_address == other.multisig_address
            and self.transaction_payload == other.transaction_payload
        )

    def __str__(self):
        return f"Multisig {self.multisig_address}: {self.transaction_payload}"

    @staticmethod
    def deserialize(deserializer: Deserializer) -> Multisig:
        multisig_address = AccountAddress.deserialize(deserializer)
        payload_present = deserializer.bool()
        transaction_payload = None
        if payload_present:
            transaction_payload = MultisigTransactionPayload.deserialize(deserializer)
        return Multisig(multisig_address, transaction_payload)

    def serialize(self, serializer: Serializer) -> None:
        self.multisig_address.serialize(serializer)
        if self.transaction_payload:
            serializer.bool(True)
            self.transaction_payload.serialize(serializer)
        else:
            serializer.bool(False)


class MultisigTransactionPayload:
    """Currently `MultisigTransactionPayload` only supports `EntryFunction` type payload"""

    ENTRY_FUNCTION: int = 0
    payload_variant: int
    transaction_payload: EntryFunction

    def __init__(self, transaction_payload: Any):
        if isinstance(transaction_payload, EntryFunction):
            self.payload_variant = self.ENTRY_FUNCTION
        else:
            raise EncodingError("Invalid multisig payload type")
        self.transaction_payload = transaction_payload

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MultisigTransactionPayload):
            return NotImplemented
        return self.transaction_payload == other.transaction_payload

    def __str__(self):
        return self.transaction_payload.__str__()

    @staticmethod
    def deserialize(deserializer: Deserializer) -> MultisigTransactionPayload:
        payload_variant = deserializer.variant_index(1)
        if payload_variant != MultisigTransactionPayload.ENTRY_FUNCTION:
            raise EncodingError("Invalid multisig payload type")
        return MultisigTransactionPayload(EntryFunction.deserialize(deserializer))

    def serialize(self, serializer: Serializer) -> None:
        serializer.uleb128(self.payload_variant)
        self.transaction_payload.serialize(serializer)


class ModuleId:
    address: AccountAddress
    name: str

    def __init__(self, address: AccountAddress, name: str):
        self.address = address
        self.name = name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ModuleId):
            return NotImplemented
        return self.address == other.address and self.name == other.name

    def __str__(self) -> str:
        return f"{self.address}::{self.name}"

    @staticmethod
    def from_str(module_id: str) -> ModuleId:
        split = module_id.split("::")
        if len(split) != 2 or not split[1]:
            raise EncodingError(f"Invalid module id: {module_id}")
        return ModuleId(AccountAddress.from_str_relaxed(split[0]), split[1])

    @staticmethod
    def deserialize(deserializer: Deserializer) -> ModuleId:
        addr = AccountAddress.deserialize(deserializer)
        name = deserializer.str()
        return ModuleId(addr, name)

    def serialize(self, serializer: Serializer) -> None:
        self.address.serialize(serializer)
        serializer.str(self.name)


class TransactionArgument:
    value: Any
    encoder: Callable[[Serializer, Any], None]

    def __init__(
        self,
        value: Any,
        encoder: Callable[[Serializer, Any], None],
    ):
        self.value = value
        self.encoder = encoder

    def encode(self) -> bytes:
        ser = Serializer()
        self.encoder(ser, self.value)
        return ser.output()


class SignedTransaction:
    transaction: RawTransaction
    authenticator: Authenticator

    def __init__(
        self,
        transaction: RawTransaction,
        authenticator: AccountAuthenticator | Authenticator,
    ):
        self.transaction = transaction
        if isinstance(authenticator, AccountAuthenticator):
            if authenticator.variant == AccountAuthenticator.ED25519:
                authenticator = Authenticator(authenticator.authenticator)
            else:
                authenticator = Authenticator(SingleSenderAuthenticator(authenticator))

        self.authenticator = authenticator

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SignedTransaction):
            return NotImplemented
        return (
            self.transaction == other.transaction
            and self.authenticator == other.authenticator
        )

    def __str__(self) -> str:
        return f"Transaction: {self.transaction}Authenticator: {self.authenticator}"

    def bytes(self) -> bytes:
        ser = Serializer()
        ser.struct(self)
        return ser.output()

    def hash(self) -> str:
        """The transaction hash the node reports for this transaction once submitted."""
        hasher = hashlib.sha3_256()
        hasher.update(_prehash(TRANSACTION_SALT))
        # User transaction variant
        hasher.update(b"\x00")
        hasher.update(self.bytes())
        return f"0x{hasher.hexdigest()}"

    def signing_message(self) -> bytes:
        auth = self.authenticator.authenticator
        if isinstance(auth, MultiAgentAuthenticator):
            transaction: RawTransactionInternal = MultiAgentRawTransaction(
                self.transaction, auth.secondary_addresses()
            )
        elif isinstance(auth, FeePayerAuthenticator):
            transaction = FeePayerRawTransaction(
                self.transaction,
                auth.secondary_addresses(),
                auth.fee_payer_address(),
            )
        else:
            transaction = self.transaction
        return transaction.keyed()

    def signers(self) -> list[tuple[AccountAddress, AccountAuthenticator]]:
        """Every participating address paired with the authenticator that signs for it, sender first."""
        auth = self.authenticator.authenticator
        if isinstance(auth, Ed25519Authenticator):
            return [(self.transaction.sender, AccountAuthenticator(auth))]
        if isinstance(auth, SingleSenderAuthenticator):
            return [(self.transaction.sender, auth.sender)]

        signers = [(self.transaction.sender, auth.sender)]
        signers.extend(auth.secondary_signers)
        if isinstance(auth, FeePayerAuthenticator):
            signers.append(auth.fee_payer)
        return signers

    def verify(self, check_addresses: bool = True) -> bool:
        """
        Checks every signature against the signing message and, unless `check_addresses` is False, that each signer's
        key derives the address it signs for.

        Accounts whose key was rotated, or that authenticate with MultiAuthKey, hold keys that no longer derive their
        address. Those only verify with `check_addresses=False`; the node checks them against the on-chain record.
        """
        if not self.authenticator.verify(self.signing_message()):
            return False
        if not check_addresses:
            return True
        for address, authenticator in self.signers():
            authentication_key = authenticator.authentication_key()
            if authentication_key is None or authentication_key.account_address() != address:
                return False
        return True

    def verify_or_raise(self, check_addresses: bool = True):
        if not self.verify(check_addresses):
            raise CryptoError(f"Signature verification failed for {self.hash()}")

    @staticmethod
    def deserialize(deserializer: Deserializer) -> SignedTransaction:
        transaction = RawTransaction.deserialize(deserializer)
        authenticator = Authenticator.deserialize(deserializer)
        return SignedTransaction(transaction, authenticator)

    def serialize(self, serializer: Serializer) -> None:
        self.transaction.serialize(serializer)
        self.authenticator.serialize(serializer)
