# Copyright © Endless
# Parts of the project are originally copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import hashlib

import base58

from endless_sdk import asymmetric_crypto, asymmetric_crypto_wrapper, ed25519
from endless_sdk.bcs import Deserializer, Serializer
from endless_sdk.errors import EncodingError


class AuthKeyScheme:
    Ed25519: bytes = b"\x00"
    MultiEd25519: bytes = b"\x01"
    SingleKey: bytes = b"\x02"
    MultiKey: bytes = b"\x03"
    DeriveObjectAddressFromGuid: bytes = b"\xfd"
    DeriveObjectAddressFromSeed: bytes = b"\xfe"
    DeriveResourceAccountAddress: bytes = b"\xff"


class ParseAddressError(EncodingError):
    """There was an error parsing an address."""


class AuthenticationKey:
    """The hash of a public key and its scheme, stored on-chain to authorize an account's signers.

    A freshly created account has the address equal to its authentication key. After a key rotation the two diverge,
    which is why the key is a type of its own rather than an alias of `AccountAddress`.
    """

    key: bytes
    LENGTH: int = 32

    def __init__(self, key: bytes):
        if len(key) != AuthenticationKey.LENGTH:
            raise EncodingError(
                f"Expected authentication key of length {AuthenticationKey.LENGTH}, found {len(key)}"
            )
        self.key = key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AuthenticationKey):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        return f"AuthenticationKey({self.hex()})"

    def hex(self) -> str:
        return f"0x{self.key.hex()}"

    @staticmethod
    def from_hex(value: str) -> AuthenticationKey:
        if value[0:2] == "0x":
            value = value[2:]
        try:
            key = bytes.fromhex(value)
        except ValueError as e:
            raise EncodingError(f"Invalid authentication key hex: {value}") from e
        return AuthenticationKey(key)

    @staticmethod
    def from_public_key(key: asymmetric_crypto.PublicKey) -> AuthenticationKey:
        hasher = hashlib.sha3_256()
        hasher.update(key.to_crypto_bytes())

        if isinstance(key, ed25519.PublicKey):
            hasher.update(AuthKeyScheme.Ed25519)
        elif isinstance(key, asymmetric_crypto_wrapper.PublicKey):
            hasher.update(AuthKeyScheme.SingleKey)
        elif isinstance(key, asymmetric_crypto_wrapper.MultiPublicKey):
            hasher.update(AuthKeyScheme.MultiKey)
        else:
            raise EncodingError("Unsupported asymmetric_crypto.PublicKey key type.")

        return AuthenticationKey(hasher.digest())

    def account_address(self) -> AccountAddress:
        return AccountAddress(self.key)

    @staticmethod
    def deserialize(deserializer: Deserializer) -> AuthenticationKey:
        return AuthenticationKey(deserializer.fixed_bytes(AuthenticationKey.LENGTH))

    def serialize(self, serializer: Serializer):
        serializer.fixed_bytes(self.key)


class AccountAddress:
    address: bytes
    LENGTH: int = 32

    def __init__(self, address: bytes):
        self.address = address

        if len(address) != AccountAddress.LENGTH:
            raise ParseAddressError("Expected address of length 32")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AccountAddress):
            return NotImplemented
        return self.address == other.address

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, AccountAddress):
            return NotImplemented
        return self.address < other.address

    def __hash__(self) -> int:
        return hash(self.address)

    def __str__(self):
        """Represent an account address in a way that is compliant with the v1 address
        standard. The standard is defined as part of AIP-40, read more here:
        https://github.com/aptos-foundation/AIPs/blob/main/aips/aip-40.md

        In short, all special addresses SHOULD be represented in SHORT form, e.g.

        0x1

        All other addresses MUST be represented in LONG form, e.g.

        0x002098630cfad4734812fa37dc18d9b8d59242feabe49259e26318d468a99584

        For an explanation of what defines a "special" address, see `is_special`.

        All string representations of addresses MUST be prefixed with 0x.
        """
        suffix = self.address.hex()
        if self.is_special():
            suffix = suffix.lstrip("0") or "0"
        return f"0x{suffix}"

    def __repr__(self):
        return self.__str__()

    def is_special(self):
        """Returns whether the address is a "special" address. Addresses are considered
        special if the first 63 characters of the hex string are zero. In other words,
        an address is special if the first 31 bytes are zero and the last byte is
        smaller than `0b10000` (16). In short form this means the addresses in the range
        from `0x0` to `0xf` (inclusive) are special.
        """
        return all(b == 0 for b in self.address[:-1]) and self.address[-1] < 0b10000

    def to_base58(self) -> str:
        """Encodes the address with the bitcoin base58 alphabet, the form wallets and explorers display."""
        return base58.b58encode(self.address).decode()

    @staticmethod
    def from_base58(address: str) -> AccountAddress:
        try:
            decoded = base58.b58decode(address)
        except ValueError as e:
            raise ParseAddressError(f"Invalid base58 address: {address}") from e
        if len(decoded) != AccountAddress.LENGTH:
            raise ParseAddressError(
                f"Base58 address must decode to {AccountAddress.LENGTH} bytes, found {len(decoded)}"
            )
        return AccountAddress(decoded)

    @staticmethod
    def from_str(address: str) -> AccountAddress:
        """NOTE: This function has strict parsing behavior. For relaxed behavior, please use
        `from_str_relaxed` function.

        Creates an instance of AccountAddress from a hex string.

        Only the following formats are accepted:
        - LONG, 0x + 64 hex characters.
        - SHORT for special addresses, 0x0 to 0xf inclusive without padding zeroes.

        Parameters
        ----------
        - address (str): A hex string representing an account address.

        Returns
        -------
        - AccountAddress: An instance of AccountAddress.

        """
        # Assert the string starts with 0x.
        if not address.startswith("0x"):
            raise ParseAddressError("Hex string must start with a leading 0x.")

        out = AccountAddress.from_str_relaxed(address)

        # Check if the address is in LONG form. If it is not, this is only allowed for
        # special addresses, in which case we check it is in proper SHORT form.
        if len(address) != AccountAddress.LENGTH * 2 + 2:
            if not out.is_special():
                raise ParseAddressError(
                    "The given hex string is not a special address, it must be represented "
                    "as 0x + 64 chars."
                )
            elif len(address) != 3:
                # 0x + one hex char is the only valid SHORT form for special addresses.
                raise ParseAddressError(
                    "The given hex string is a special address not in LONG form, "
                    "it must be 0x0 to 0xf without padding zeroes."
                )

        return out

    @staticmethod
    def from_str_relaxed(address: str) -> AccountAddress:
        """NOTE: This function has relaxed parsing behavior. For strict behavior, please use
        the `from_str` function.

        Creates an instance of AccountAddress from a hex string. LONG and SHORT forms are
        accepted, with or without the leading 0x, and padding zeroes are allowed.

        Parameters
        ----------
        - address (str): A hex string representing an account address.

        Returns
        -------
        - AccountAddress: An instance of AccountAddress.

        """
        addr = address

        # Strip 0x prefix if present.
        if address[0:2] == "0x":
            addr = address[2:]

        if len(addr) < 1:
            raise ParseAddressError(
                "Hex string is too short, must be 1 to 64 chars long, excluding the "
                "leading 0x."
            )

        if len(addr) > 64:
            raise ParseAddressError(
                "Hex string is too long, must be 1 to 64 chars long, excluding the "
                "leading 0x."
            )

        if len(addr) < AccountAddress.LENGTH * 2:
            pad = "0" * (AccountAddress.LENGTH * 2 - len(addr))
            addr = pad + addr

        try:
            return AccountAddress(bytes.fromhex(addr))
        except ValueError as e:
            raise ParseAddressError(f"Invalid hex address: {address}") from e

    @staticmethod
    def from_str_any(address: str) -> AccountAddress:
        """Parses an address given either as hex or in base58.

        Hex is assumed when the value starts with 0x or is exactly 64 hex characters; anything else is decoded as
        base58. The base58 alphabet has no `0`, so a 0x-prefixed value is never ambiguous.
        """
        if address.startswith("0x"):
            return AccountAddress.from_str_relaxed(address)
        if len(address) == AccountAddress.LENGTH * 2 and all(
            c in "0123456789abcdefABCDEF" for c in address
        ):
            return AccountAddress.from_str_relaxed(address)
        return AccountAddress.from_base58(address)

    @staticmethod
    def from_key(key: asymmetric_crypto.PublicKey) -> AccountAddress:
        return AuthenticationKey.from_public_key(key).account_address()

    @staticmethod
    def for_resource_account(creator: AccountAddress, seed: bytes) -> AccountAddress:
        hasher = hashlib.sha3_256()
        hasher.update(creator.address)
        hasher.update(seed)
        hasher.update(AuthKeyScheme.DeriveResourceAccountAddress)
        return AccountAddress(hasher.digest())

    @staticmethod
    def for_guid_object(creator: AccountAddress, creation_num: int) -> AccountAddress:
        hasher = hashlib.sha3_256()
        serializer = Serializer()
        serializer.u64(creation_num)
        hasher.update(serializer.output())
        hasher.update(creator.address)
        hasher.update(AuthKeyScheme.DeriveObjectAddressFromGuid)
        return AccountAddress(hasher.digest())

    @staticmethod
    def for_named_object(creator: AccountAddress, seed: bytes) -> AccountAddress:
        hasher = hashlib.sha3_256()
        hasher.update(creator.address)
        hasher.update(seed)
        hasher.update(AuthKeyScheme.DeriveObjectAddressFromSeed)
        return AccountAddress(hasher.digest())

    @staticmethod
    def deserialize(deserializer: Deserializer) -> AccountAddress:
        return AccountAddress(deserializer.fixed_bytes(AccountAddress.LENGTH))

    def serialize(self, serializer: Serializer):
        serializer.fixed_bytes(self.address)


ACCOUNT_ZERO = AccountAddress(bytes(AccountAddress.LENGTH))
ACCOUNT_ONE = AccountAddress(bytes(AccountAddress.LENGTH - 1) + b"\x01")
