# Copyright © Endless
# Parts of the project are originally copyright © Aptos Foundation
# SPDX-License-Identifier: Apache-2.0

"""
This is a simple BCS serializer and deserializer. Learn more at https://github.com/diem/bcs
"""

from __future__ import annotations

import io
from collections.abc import Callable
from typing import Any, Protocol

from endless_sdk.errors import EncodingError

MAX_U8 = 2**8 - 1
MAX_U16 = 2**16 - 1
MAX_U32 = 2**32 - 1
MAX_U64 = 2**64 - 1
MAX_U128 = 2**128 - 1
MAX_U256 = 2**256 - 1


class Deserializable(Protocol):
    """Types that can be read back from BCS bytes."""

    @classmethod
    def from_bytes(cls, indata: bytes) -> Deserializable:
        der = Deserializer(indata)
        value = der.struct(cls)
        der.assert_finished()
        return value

    @staticmethod
    def deserialize(deserializer: Deserializer) -> Deserializable: ...


class Serializable(Protocol):
    """Types that know how to write themselves as BCS bytes."""

    def to_bytes(self) -> bytes:
        ser = Serializer()
        ser.struct(self)
        return ser.output()

    def serialize(self, serializer: Serializer) -> None: ...


class Deserializer:
    _input: io.BytesIO
    _length: int

    def __init__(self, data: bytes):
        self._length = len(data)
        self._input = io.BytesIO(data)

    def remaining(self) -> int:
        return self._length - self._input.tell()

    def assert_finished(self):
        if self.remaining() != 0:
            raise EncodingError(f"Unexpected trailing bytes: {self.remaining()}")

    def bool(self) -> bool:
        value = int.from_bytes(self._read(1), byteorder="little", signed=False)
        if value == 0:
            return False
        elif value == 1:
            return True
        else:
            raise EncodingError(f"Unexpected boolean value: {value}")

    def to_bytes(self) -> bytes:
        return self._read(self.uleb128())

    def fixed_bytes(self, length: int) -> bytes:
        return self._read(length)

    def map(
        self,
        key_decoder: Callable[[Deserializer], Any],
        value_decoder: Callable[[Deserializer], Any],
    ) -> dict[Any, Any]:
        length = self.uleb128()
        values: dict = {}
        while len(values) < length:
            key = key_decoder(self)
            value = value_decoder(self)
            values[key] = value
        return values

    def sequence(
        self,
        value_decoder: Callable[[Deserializer], Any],
    ) -> list[Any]:
        length = self.uleb128()
        values: list = []
        while len(values) < length:
            values.append(value_decoder(self))
        return values

    def str(self) -> str:
        try:
            return self.to_bytes().decode()
        except UnicodeDecodeError as e:
            raise EncodingError(f"Invalid utf-8 string: {e}") from e

    def struct(self, struct: Any) -> Any:
        return struct.deserialize(self)

    def u8(self) -> int:
        return self._read_int(1)

    def u16(self) -> int:
        return self._read_int(2)

    def u32(self) -> int:
        return self._read_int(4)

    def u64(self) -> int:
        return self._read_int(8)

    def u128(self) -> int:
        return self._read_int(16)

    def u256(self) -> int:
        return self._read_int(32)

    def uleb128(self) -> int:
        value = 0
        shift = 0

        while True:
            byte = self._read_int(1)
            # A zero continuation byte would give the same value a second encoding.
            if shift > 0 and byte == 0:
                raise EncodingError("Non-canonical uleb128 value")
            value |= (byte & 0x7F) << shift
            if value > MAX_U32:
                raise EncodingError("Unexpectedly large uleb128 value")
            if byte & 0x80 == 0:
                break
            shift += 7

        return value

    def variant_index(self, upper_bound: int) -> int:
        """Reads an enum discriminant and checks it against the number of known variants."""
        variant = self.uleb128()
        if variant >= upper_bound:
            raise EncodingError(f"Invalid variant index: {variant}")
        return variant

    def _read(self, length: int) -> bytes:
        value = self._input.read(length)
        if value is None or len(value) < length:
            actual_length = 0 if value is None else len(value)
            error = (
                f"Unexpected end of input. Requested: {length}, found: {actual_length}"
            )
            raise EncodingError(error)
        return value

    def _read_int(self, length: int) -> int:
        return int.from_bytes(self._read(length), byteorder="little", signed=False)


class Serializer:
    _output: io.BytesIO

    def __init__(self):
        self._output = io.BytesIO()

    def output(self) -> bytes:
        return self._output.getvalue()

    def bool(self, value: bool):
        if not isinstance(value, bool):
            raise EncodingError(f"Cannot encode {value!r} into bool")
        self._write_int(int(value), 1)

    def to_bytes(self, value: bytes):
        self.uleb128(len(value))
        self._output.write(value)

    def fixed_bytes(self, value: bytes):
        self._output.write(value)

    def map(
        self,
        values: dict[Any, Any],
        key_encoder: Callable[[Serializer, Any], None],
        value_encoder: Callable[[Serializer, Any], None],
    ):
        encoded_values = []
        for key, value in values.items():
            encoded_values.append(
                (encoder(key, key_encoder), encoder(value, value_encoder))
            )
        encoded_values.sort(key=lambda item: item[0])

        self.uleb128(len(encoded_values))
        for key, value in encoded_values:
            self.fixed_bytes(key)
            self.fixed_bytes(value)

    @staticmethod
    def sequence_serializer(
        value_encoder: Callable[[Serializer, Any], None],
    ) -> Callable[[Serializer, list[Any]], None]:
        return lambda self, values: self.sequence(values, value_encoder)

    def sequence(
        self,
        values: list[Any],
        value_encoder: Callable[[Serializer, Any], None],
    ):
        self.uleb128(len(values))
        for value in values:
            self.fixed_bytes(encoder(value, value_encoder))

    def str(self, value: str):
        self.to_bytes(value.encode())

    def struct(self, value: Any):
        value.serialize(self)

    def u8(self, value: int):
        self._write_checked(value, MAX_U8, 1, "u8")

    def u16(self, value: int):
        self._write_checked(value, MAX_U16, 2, "u16")

    def u32(self, value: int):
        self._write_checked(value, MAX_U32, 4, "u32")

    def u64(self, value: int):
        self._write_checked(value, MAX_U64, 8, "u64")

    def u128(self, value: int):
        self._write_checked(value, MAX_U128, 16, "u128")

    def u256(self, value: int):
        self._write_checked(value, MAX_U256, 32, "u256")

    def uleb128(self, value: int):
        if value < 0 or value > MAX_U32:
            raise EncodingError(f"Cannot encode {value} into uleb128")

        while value >= 0x80:
            # Write 7 (lowest) bits of data and set the 8th bit to 1.
            byte = value & 0x7F
            self.u8(byte | 0x80)
            value >>= 7

        # Write the remaining bits of data and set the highest bit to 0.
        self.u8(value & 0x7F)

    def _write_checked(self, value: int, max_value: int, length: int, name: str):
        if isinstance(value, bool) or not isinstance(value, int):
            raise EncodingError(f"Cannot encode {value!r} into {name}")
        if value < 0 or value > max_value:
            raise EncodingError(f"Cannot encode {value} into {name}")
        self._write_int(value, length)

    def _write_int(self, value: int, length: int):
        self._output.write(value.to_bytes(length, "little", signed=False))


def encoder(value: Any, encoder: Callable[[Serializer, Any], None]) -> bytes:
    ser = Serializer()
    encoder(ser, value)
    return ser.output()


def decode(
    data: bytes, decoder: Callable[[Deserializer], Any], strict: bool = True
) -> Any:
    """Decodes one value from `data`.

    With `strict` set, bytes left over after the value was read are an error instead of being ignored.
    """
    der = Deserializer(data)
    value = decoder(der)
    if strict:
        der.assert_finished()
    return value
