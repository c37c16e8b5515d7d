"""Wire format of remoting commands: frames, JSON headers and binary headers."""

from __future__ import annotations

import enum
import itertools
import json
import struct
from dataclasses import dataclass, field
from typing import BinaryIO, Mapping, Optional, Protocol

RPC_TYPE = 0
RPC_ONE_WAY = 1
RESPONSE_TYPE = 1
VERSION = 317
HEADER_FIXED_LENGTH = 21

_FIXED_HEADER = struct.Struct(">hBhii")
_INT32 = struct.Struct(">i")
_INT16 = struct.Struct(">h")


class LanguageCode(enum.IntEnum):
    """Language of the peer that built a command."""

    JAVA = 0
    GO = 9
    UNKNOWN = 127

    @classmethod
    def _missing_(cls, value: object) -> "LanguageCode":
        return cls.UNKNOWN

    def __str__(self) -> str:
        if self is LanguageCode.JAVA:
            return "JAVA"
        if self is LanguageCode.GO:
            return "GO"
        return "unknown"


class CodecType(enum.IntEnum):
    """How a command header is serialized."""

    JSON = 0
    ROCKETMQ = 1


class _Header(Protocol):
    def encode(self) -> Mapping[str, str]: ...


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value >= (1 << 31) else value


_opaque_counter = itertools.count(1)


def _next_opaque() -> int:
    return _to_int32(next(_opaque_counter))


@dataclass
class RemotingCommand:
    """A request or response exchanged with a broker or name server."""

    code: int = 0
    language: LanguageCode = LanguageCode.GO
    version: int = VERSION
    opaque: int = 0
    flag: int = 0
    remark: str = ""
    ext_fields: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def __str__(self) -> str:
        return (
            f"Code: {self.code}, opaque: {self.opaque}, "
            f"Remark: {self.remark}, ExtFields: {self.ext_fields}"
        )

    def is_response_type(self) -> bool:
        return self.flag & RESPONSE_TYPE == RESPONSE_TYPE

    def mark_response_type(self) -> None:
        self.flag |= RESPONSE_TYPE

    def write_to(self, stream: BinaryIO, codec: CodecType = CodecType.JSON) -> None:
        """Write this command as one frame to ``stream``."""
        stream.write(encode(self, codec))


def new_command(
    code: int, header: Optional[_Header] = None, body: Optional[bytes] = None
) -> RemotingCommand:
    """Build a command with a fresh opaque and the header's encoded fields."""
    ext_fields = dict(header.encode()) if header is not None else {}
    return RemotingCommand(
        code=code,
        language=LanguageCode.GO,
        version=VERSION,
        opaque=_next_opaque(),
        ext_fields=ext_fields,
        body=bytes(body) if body is not None else b"",
    )


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def take(self, size: int) -> bytes:
        if size < 0 or size > self.remaining:
            raise ValueError("unexpected end of data")
        chunk = self._data[self._pos:self._pos + size]
        self._pos += size
        return chunk

    def unpack(self, layout: struct.Struct) -> tuple:
        return layout.unpack(self.take(layout.size))


def _text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def encode_json_header(command: RemotingCommand) -> bytes:
    """Serialize the header fields of ``command`` as JSON."""
    document = {
        "code": command.code,
        "language": "GO",
        "version": command.version,
        "opaque": command.opaque,
        "flag": command.flag,
        "remark": command.remark,
        "extFields": dict(command.ext_fields),
    }
    return json.dumps(document, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def _language_from_json(value: object) -> LanguageCode:
    if value is None:
        return LanguageCode.JAVA
    if value == "GO":
        return LanguageCode.GO
    if value == "JAVA":
        return LanguageCode.JAVA
    return LanguageCode.UNKNOWN


def decode_json_header(data: bytes) -> RemotingCommand:
    """Parse a JSON header into a command without a body."""
    try:
        document = json.loads(bytes(data).decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValueError(f"invalid JSON header: {exc}") from exc
    if not isinstance(document, dict):
        raise ValueError("JSON header is not an object")
    ext_fields = document.get("extFields") or {}
    if not isinstance(ext_fields, dict):
        raise ValueError("extFields is not an object")
    return RemotingCommand(
        code=int(document.get("code", 0)),
        language=_language_from_json(document.get("language")),
        version=int(document.get("version", 0)),
        opaque=int(document.get("opaque", 0)),
        flag=int(document.get("flag", 0)),
        remark=str(document.get("remark") or ""),
        ext_fields={str(k): str(v) for k, v in ext_fields.items()},
    )


def _encode_maps(maps: Mapping[str, str]) -> bytes:
    parts = []
    for key, value in maps.items():
        key_bytes = key.encode("utf-8")
        value_bytes = value.encode("utf-8")
        parts.append(_INT16.pack(len(key_bytes)))
        parts.append(key_bytes)
        parts.append(_INT32.pack(len(value_bytes)))
        parts.append(value_bytes)
    return b"".join(parts)


def encode_rocketmq_header(command: RemotingCommand) -> bytes:
    """Serialize the header fields of ``command`` in the compact binary form."""
    remark = command.remark.encode("utf-8")
    try:
        ext = _encode_maps(command.ext_fields)
        fixed = _FIXED_HEADER.pack(
            command.code, LanguageCode.GO, command.version, command.opaque, command.flag
        )
    except struct.error as exc:
        raise ValueError(f"header field out of range: {exc}") from exc
    return b"".join(
        (fixed, _INT32.pack(len(remark)), remark, _INT32.pack(len(ext)), ext)
    )


def decode_rocketmq_header(data: bytes) -> RemotingCommand:
    """Parse a binary header into a command without a body."""
    reader = _Reader(data)
    code, language, version, opaque, flag = reader.unpack(_FIXED_HEADER)
    command = RemotingCommand(
        code=code,
        language=LanguageCode(language),
        version=version,
        opaque=opaque,
        flag=flag,
    )
    (remark_length,) = reader.unpack(_INT32)
    if remark_length > 0:
        command.remark = _text(reader.take(remark_length))

    (ext_length,) = reader.unpack(_INT32)
    if ext_length > 0:
        ext_reader = _Reader(reader.take(ext_length))
        while ext_reader.remaining > 0:
            (key_length,) = ext_reader.unpack(_INT16)
            key = _text(ext_reader.take(key_length))
            (value_length,) = ext_reader.unpack(_INT32)
            command.ext_fields[key] = _text(ext_reader.take(value_length))
    return command


def mark_protocol_type(source: int, codec: CodecType = CodecType.JSON) -> bytes:
    """Pack a header length into three bytes behind the codec type byte."""
    return bytes(
        (
            int(codec) & 0xFF,
            (source >> 16) & 0xFF,
            (source >> 8) & 0xFF,
            source & 0xFF,
        )
    )


def _encode_header(command: RemotingCommand, codec: CodecType) -> bytes:
    if codec == CodecType.JSON:
        return encode_json_header(command)
    if codec == CodecType.ROCKETMQ:
        return encode_rocketmq_header(command)
    raise ValueError(f"unknown codec type: {int(codec)}")


def encode(command: RemotingCommand, codec: CodecType = CodecType.JSON) -> bytes:
    """Return a whole frame: size, marked header length, header and body."""
    header = _encode_header(command, codec)
    body = command.body or b""
    frame_size = 4 + len(header) + len(body)
    return b"".join(
        (_INT32.pack(frame_size), mark_protocol_type(len(header), codec), header, body)
    )


def decode(data: bytes) -> RemotingCommand:
    """Parse a frame whose leading size field has already been removed."""
    data = bytes(data)
    reader = _Reader(data)
    (original_length,) = reader.unpack(_INT32)
    header_length = original_length & 0xFFFFFF
    header = reader.take(header_length)

    codec_byte = (original_length >> 24) & 0xFF
    if codec_byte == CodecType.JSON:
        command = decode_json_header(header)
    elif codec_byte == CodecType.ROCKETMQ:
        command = decode_rocketmq_header(header)
    else:
        raise ValueError(f"unknown codec type: {codec_byte}")

    body_length = len(data) - 4 - header_length
    command.body = reader.take(body_length) if body_length > 0 else b""
    return command