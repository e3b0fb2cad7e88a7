# Copyright © Endless
# SPDX-License-Identifier: Apache-2.0

"""
Encodes plain Python values as entry function arguments, guided by the function's ABI as reported by the node
(`GET accounts/{address}/module/{name}`, the `abi.exposed_functions` entries).
"""

from __future__ import annotations

import re
from typing import Any

from endless_sdk.account_address import ACCOUNT_ONE, AccountAddress
from endless_sdk.bcs import Serializer
from endless_sdk.errors import EncodingError
from endless_sdk.transactions import EntryFunction, ModuleId
from endless_sdk.type_tag import TypeTag, split_type_args

SIGNER_PARAMS = ("signer", "&signer")
GENERIC_PLACEHOLDER = re.compile(r"\bT(\d+)\b")

_INTEGER_WRITERS = {
    "u8": Serializer.u8,
    "u16": Serializer.u16,
    "u32": Serializer.u32,
    "u64": Serializer.u64,
    "u128": Serializer.u128,
    "u256": Serializer.u256,
}


def entry_function_from_abi(
    function_abi: dict[str, Any],
    module_address: AccountAddress,
    module_name: str,
    function_name: str,
    type_args: list[TypeTag | str],
    args: list[Any],
) -> EntryFunction:
    params = [
        param for param in function_abi["params"] if param not in SIGNER_PARAMS
    ]
    if len(params) != len(args):
        raise EncodingError(
            f"{function_name} expects {len(params)} arguments, got {len(args)}"
        )

    generic_params = function_abi.get("generic_type_params", [])
    if len(generic_params) != len(type_args):
        raise EncodingError(
            f"{function_name} expects {len(generic_params)} type arguments, got {len(type_args)}"
        )
    tags = [TypeTag.from_str(tag) if isinstance(tag, str) else tag for tag in type_args]

    encoded = []
    for param, value in zip(params, args):
        ser = Serializer()
        encode_argument(ser, substitute_type_params(param, tags), value)
        encoded.append(ser.output())

    return EntryFunction(ModuleId(module_address, module_name), function_name, tags, encoded)


def substitute_type_params(param: str, type_args: list[TypeTag]) -> str:
    """Replaces `T0`, `T1`, ... in a parameter type with the concrete type arguments."""

    def replace(match: re.Match) -> str:
        idx = int(match.group(1))
        if idx >= len(type_args):
            raise EncodingError(f"Type parameter T{idx} has no type argument")
        return str(type_args[idx])

    return GENERIC_PLACEHOLDER.sub(replace, param)


def encode_argument(serializer: Serializer, param: str, value: Any):
    param = param.strip()

    if param == "bool":
        if not isinstance(value, bool):
            raise EncodingError(f"Expected bool, got {value!r}")
        serializer.bool(value)
    elif param in _INTEGER_WRITERS:
        _INTEGER_WRITERS[param](serializer, _to_int(param, value))
    elif param == "address":
        serializer.struct(_to_address(value))
    elif param == "vector<u8>":
        serializer.to_bytes(_to_bytes(value))
    elif param.startswith("vector<") and param.endswith(">"):
        if not isinstance(value, (list, tuple)):
            raise EncodingError(f"Expected a list for {param}, got {value!r}")
        inner = param[len("vector<") : -1]
        serializer.uleb128(len(value))
        for item in value:
            encode_argument(serializer, inner, item)
    elif "::" in param:
        _encode_struct(serializer, param, value)
    else:
        raise EncodingError(f"Unsupported argument type: {param}")


def _encode_struct(serializer: Serializer, param: str, value: Any):
    address, module, name, inner = _struct_parts(param)
    if address != ACCOUNT_ONE:
        raise EncodingError(f"Unsupported argument type: {param}")

    if (module, name) == ("string", "String"):
        if not isinstance(value, str):
            raise EncodingError(f"Expected str for {param}, got {value!r}")
        serializer.str(value)
    elif (module, name) == ("object", "Object"):
        serializer.struct(_to_address(value))
    elif (module, name) == ("option", "Option") and len(inner) == 1:
        # Options are vectors of zero or one element
        if value is None:
            serializer.uleb128(0)
        else:
            serializer.uleb128(1)
            encode_argument(serializer, inner[0], value)
    else:
        raise EncodingError(f"Unsupported argument type: {param}")


def _struct_parts(param: str) -> tuple[AccountAddress, str, str, list[str]]:
    head = param
    inner: list[str] = []
    if "<" in param:
        if not param.endswith(">"):
            raise EncodingError(f"Unbalanced type arguments in {param}")
        start = param.index("<")
        head = param[:start]
        inner = split_type_args(param[start + 1 : -1])
    split = head.split("::")
    if len(split) != 3:
        raise EncodingError(f"Unsupported argument type: {param}")
    return AccountAddress.from_str_relaxed(split[0]), split[1], split[2], inner


def _to_int(param: str, value: Any) -> int:
    if isinstance(value, bool):
        raise EncodingError(f"Expected {param}, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise EncodingError(f"Expected {param}, got {value!r}")


def _to_address(value: Any) -> AccountAddress:
    if isinstance(value, AccountAddress):
        return value
    if isinstance(value, str):
        return AccountAddress.from_str_any(value)
    raise EncodingError(f"Expected an address, got {value!r}")


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str) and value.startswith("0x"):
        try:
            return bytes.fromhex(value[2:])
        except ValueError as e:
            raise EncodingError(f"Invalid hex for vector<u8>: {value}") from e
    raise EncodingError(f"Expected bytes or 0x hex for vector<u8>, got {value!r}")
