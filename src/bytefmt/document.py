"""JSON document codec aware of byte containers.

The codec carries its strategy explicitly (``DocumentCodec(encoder=...)``);
when none is given it takes the active one *once*, at construction, so a
codec instance never observes later changes of the process-wide slot.

Mapping (dumps):
  Bytes / bytes / bytearray / memoryview -> JSON string (strategy text)
  dataclass instance                     -> JSON object (field order kept)
  dict / list / tuple / scalars          -> as in ``json``

Mapping (loads with ``cls``): the dataclass type hints drive decoding, so a
field annotated ``Bytes`` (or a ``fixed_bytes`` subclass, possibly inside
``Optional``/``list``/``dict``/nested dataclasses) goes through
``Bytes.from_document``. One bad field fails the whole document.
"""

from __future__ import annotations

import dataclasses
import json
import types
import typing
from dataclasses import dataclass
from typing import Any, TypeVar

from bytefmt.core.encoder_base import ByteEncoder
from bytefmt.data import Bytes
from bytefmt.errors import DecodeError, DocumentSyntaxError, MalformedDocumentError
from bytefmt.settings import resolve_encoder

T = TypeVar("T")

STAGE_PARSE_DOCUMENT = "parse document"


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def _at(path: str, e: DecodeError | MalformedDocumentError) -> Exception:
    # str(e) already carries the stage prefix: copy the attribute, not the kwarg
    if isinstance(e, MalformedDocumentError):
        err = MalformedDocumentError(f"field {path!r}: {e}")
        err.stage = e.stage
        return err
    return DecodeError(f"field {path!r}: {e}", value=e.value, encoder_id=e.encoder_id)


def _malformed(path: str, msg: str) -> MalformedDocumentError:
    if path:
        return MalformedDocumentError(f"field {path!r}: {msg}")
    return MalformedDocumentError(msg)


def _kind(value: Any) -> str:
    return "null" if value is None else type(value).__name__


@dataclass(frozen=True)
class DocumentCodec:
    encoder: ByteEncoder | str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "encoder", resolve_encoder(self.encoder))

    # -------------------
    # Encode
    # -------------------

    def to_jsonable(self, obj: Any) -> Any:
        if isinstance(obj, Bytes):
            return obj.to_document(self.encoder)
        if isinstance(obj, (bytes, bytearray, memoryview)):
            return self.encoder.encode(bytes(obj))
        if isinstance(obj, (str, int, float, bool)) or obj is None:
            return obj
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return {f.name: self.to_jsonable(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
        if isinstance(obj, dict):
            return {str(k): self.to_jsonable(v) for k, v in obj.items()}
        if isinstance(obj, (list, tuple)):
            return [self.to_jsonable(x) for x in obj]
        raise TypeError(f"not serializable as a document value: {type(obj).__name__}")

    def dumps(self, obj: Any, **json_kwargs: Any) -> str:
        return json.dumps(self.to_jsonable(obj), **json_kwargs)

    # -------------------
    # Decode
    # -------------------

    def loads(self, text: str | bytes, cls: type[T] | None = None) -> Any:
        try:
            obj = json.loads(text)
        except ValueError as e:
            raise DocumentSyntaxError(
                f"invalid JSON: {e}",
                stage=STAGE_PARSE_DOCUMENT,
                value=text,
                encoder_id=self.encoder.encoder_id,
            ) from e
        if cls is None:
            return obj
        return self.from_jsonable(obj, cls)

    def from_jsonable(self, value: Any, tp: Any, path: str = "") -> Any:
        if tp is Any or tp is object:
            return value

        origin = typing.get_origin(tp)
        args = typing.get_args(tp)
        # origin first: on 3.10 isinstance(list[X], type) is True
        is_class = origin is None and isinstance(tp, type)

        if is_class and issubclass(tp, (bytes, bytearray)):
            target = tp if issubclass(tp, Bytes) else Bytes
            try:
                return target.from_document(value, self.encoder)
            except (DecodeError, MalformedDocumentError) as e:
                if not path:
                    raise
                raise _at(path, e) from e

        if is_class and dataclasses.is_dataclass(tp):
            return self._load_dataclass(value, tp, path)

        if origin is typing.Union or origin is types.UnionType:
            return self._load_union(value, args, path)

        if origin is list:
            if not isinstance(value, list):
                raise _malformed(path, f"expected a JSON array, got {_kind(value)}")
            item_tp = args[0] if args else Any
            return [self.from_jsonable(x, item_tp, f"{path}[{i}]") for i, x in enumerate(value)]

        if origin is tuple:
            if not isinstance(value, list):
                raise _malformed(path, f"expected a JSON array, got {_kind(value)}")
            if len(args) == 2 and args[1] is Ellipsis:
                return tuple(self.from_jsonable(x, args[0], f"{path}[{i}]") for i, x in enumerate(value))
            if args and len(args) != len(value):
                raise _malformed(path, f"expected {len(args)} items, got {len(value)}")
            item_tps = args or (Any,) * len(value)
            return tuple(
                self.from_jsonable(x, t, f"{path}[{i}]") for i, (t, x) in enumerate(zip(item_tps, value))
            )

        if origin is dict:
            if not isinstance(value, dict):
                raise _malformed(path, f"expected a JSON object, got {_kind(value)}")
            val_tp = args[1] if len(args) == 2 else Any
            return {k: self.from_jsonable(v, val_tp, _join(path, str(k))) for k, v in value.items()}

        if tp is str and not isinstance(value, str):
            raise _malformed(path, f"expected a JSON string, got {_kind(value)}")
        if tp is bool and not isinstance(value, bool):
            raise _malformed(path, f"expected a JSON boolean, got {_kind(value)}")
        if tp is int and (isinstance(value, bool) or not isinstance(value, int)):
            raise _malformed(path, f"expected a JSON integer, got {_kind(value)}")
        if tp is float:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise _malformed(path, f"expected a JSON number, got {_kind(value)}")
            return float(value)
        return value

    def _load_union(self, value: Any, args: tuple[Any, ...], path: str) -> Any:
        if value is None and type(None) in args:
            return None
        options = [a for a in args if a is not type(None)]
        if len(options) == 1:
            return self.from_jsonable(value, options[0], path)
        last: Exception | None = None
        for opt in options:
            try:
                return self.from_jsonable(value, opt, path)
            except (DecodeError, MalformedDocumentError) as e:
                last = e
        assert last is not None
        raise last

    def _load_dataclass(self, value: Any, tp: type, path: str) -> Any:
        if not isinstance(value, dict):
            raise _malformed(path, f"expected a JSON object for {tp.__name__}, got {_kind(value)}")
        hints = typing.get_type_hints(tp)
        init_fields = [f for f in dataclasses.fields(tp) if f.init]
        known = {f.name for f in init_fields}
        extra = sorted(set(value) - known)
        if extra:
            raise _malformed(path, f"unknown keys for {tp.__name__}: {', '.join(extra)}")

        kwargs: dict[str, Any] = {}
        for f in init_fields:
            fpath = _join(path, f.name)
            if f.name not in value:
                if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
                    raise _malformed(fpath, "missing")
                continue
            kwargs[f.name] = self.from_jsonable(value[f.name], hints.get(f.name, Any), fpath)
        return tp(**kwargs)


def dumps(obj: Any, encoder: ByteEncoder | str | None = None, **json_kwargs: Any) -> str:
    return DocumentCodec(encoder).dumps(obj, **json_kwargs)


def loads(text: str | bytes, cls: type[T] | None = None, encoder: ByteEncoder | str | None = None) -> Any:
    return DocumentCodec(encoder).loads(text, cls)
