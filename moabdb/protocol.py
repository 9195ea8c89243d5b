"""
Сообщения протокола MoabDB и их текстовая обёртка.

Запрос и ответ — protobuf (proto3). Запрос кодируется в base64 и передаётся
в заголовке, ответ приходит телом в виде base64‑текста. Дескрипторы
собираются в рантайме из `REQUEST_FIELDS` и `RESPONSE_FIELDS`.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Union

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError

from .exceptions import DataError

logger = logging.getLogger(__name__)

_FIELD = descriptor_pb2.FieldDescriptorProto

# Порядок полей задаёт их номера на проводе (с 1).
REQUEST_FIELDS = (
    ("symbol", _FIELD.TYPE_STRING),
    ("start", _FIELD.TYPE_UINT32),
    ("end", _FIELD.TYPE_UINT32),
    ("datatype", _FIELD.TYPE_STRING),
    ("username", _FIELD.TYPE_STRING),
    ("token", _FIELD.TYPE_STRING),
)
RESPONSE_FIELDS = (
    ("code", _FIELD.TYPE_INT32),
    ("data", _FIELD.TYPE_BYTES),
)


def _build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="moabdb/protocol.proto",
        package="moabdb",
        syntax="proto3",
    )
    for message_name, fields in (("Request", REQUEST_FIELDS), ("Response", RESPONSE_FIELDS)):
        message = file_proto.message_type.add(name=message_name)
        for number, (field_name, field_type) in enumerate(fields, start=1):
            message.field.add(
                name=field_name,
                number=number,
                type=field_type,
                label=_FIELD.LABEL_OPTIONAL,
            )
    return file_proto


_POOL = descriptor_pool.DescriptorPool()
_POOL.AddSerializedFile(_build_file_descriptor().SerializeToString())

Request = message_factory.GetMessageClass(_POOL.FindMessageTypeByName("moabdb.Request"))
Response = message_factory.GetMessageClass(_POOL.FindMessageTypeByName("moabdb.Response"))


def build_request(
    *,
    symbol: str,
    start: int,
    end: int,
    datatype: str,
    username: str = "",
    token: str = "",
) -> Any:
    """Собрать сообщение `Request`; пустые username/token означают анонимный запрос."""
    return Request(
        symbol=symbol,
        start=start,
        end=end,
        datatype=datatype,
        username=username,
        token=token,
    )


def encode_request(request: Any) -> str:
    """Сериализовать `Request` и упаковать в стандартный base64."""
    return base64.b64encode(request.SerializeToString()).decode("ascii")


def encode_response(code: int, data: bytes = b"") -> str:
    """Упаковать `Response` в base64‑текст (так отвечает сервер)."""
    return base64.b64encode(Response(code=code, data=data).SerializeToString()).decode("ascii")


def decode_response(body: Union[str, bytes]) -> Any:
    """
    Разобрать тело ответа: base64‑текст сообщения `Response`.

    Raises:
        DataError: тело пустое, не является base64 или protobuf не разбирается.
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DataError("MoabDB response is not valid UTF-8 text") from exc
    text = body.strip()
    if not text:
        raise DataError("MoabDB returned an empty response body")
    try:
        raw = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DataError("MoabDB response is not valid base64", details={"length": len(text)}) from exc
    response = Response()
    try:
        response.ParseFromString(raw)
    except DecodeError as exc:
        raise DataError("Failed to decode MoabDB response message", details={"length": len(raw)}) from exc
    logger.debug("Decoded MoabDB response: code=%s, %s data bytes", response.code, len(response.data))
    return response
