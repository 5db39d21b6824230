# ==============================================
# CodecRegistry
# ==============================================
#
# PURPOSE:
#   Supplies the codec for a field's type. FieldModel asks for it
#   lazily, so a registry can be filled after models are discovered.
#
# HOW LOOKUP WORKS (first match wins):
# ------------------------------------
#   1. Annotated[X, ...]   → look up X
#   2. Optional[X]         → look up X (None is never handed to a codec)
#   3. exact registration  → str, Decimal, Person, ...
#   4. generic origin      → list[int] → list
#   5. base classes        → walk the MRO (object excluded), only codecs
#                            with applies_to_subclasses (ModelCodec opts out)
#   6. providers           → callables tp -> Codec | None, in order
#   Unbound TypeVars and unknown types raise CodecNotFoundError.
#
# CLASSES:
# --------
# - Codec (ABC)            encode(value) / decode(value)
# - PassthroughCodec       BSON-native types, value unchanged
# - TypeCodecAdapter       wraps a bson TypeCodec (Decimal ↔ Decimal128)
# - DecimalCodec           bson TypeCodec for decimal.Decimal
# - CodecRegistry          registration + lookup + bson CodecOptions
#
# ==============================================

import datetime
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, get_args, get_origin

from bson import Decimal128, ObjectId
from bson.binary import UuidRepresentation
from bson.codec_options import CodecOptions, TypeCodec, TypeRegistry

from docmap.errors import CodecNotFoundError
from docmap.introspection.generics import is_type_var, is_union, strip_annotated, type_name

logger = logging.getLogger(__name__)

CodecProvider = Callable[[Any], Optional["Codec"]]

# Types bson encodes and decodes without help
BSON_NATIVE_TYPES = (
    str, int, float, bool, bytes, dict, list, tuple,
    datetime.datetime, uuid.UUID, ObjectId, Decimal128, type(None),
)


class Codec(ABC):
    """Converts between a Python value and its document representation."""

    python_type: Any = None
    # Whether lookups for a subclass of python_type may reuse this codec
    applies_to_subclasses: bool = True

    @abstractmethod
    def encode(self, value: Any) -> Any:
        ...

    @abstractmethod
    def decode(self, value: Any) -> Any:
        ...


class PassthroughCodec(Codec):
    def __init__(self, python_type: Any):
        self.python_type = python_type

    def encode(self, value: Any) -> Any:
        return value

    def decode(self, value: Any) -> Any:
        return value

    def __repr__(self) -> str:
        return f"PassthroughCodec({type_name(self.python_type)})"


class DecimalCodec(TypeCodec):
    python_type = Decimal
    bson_type = Decimal128

    def transform_python(self, value):
        return Decimal128(value)

    def transform_bson(self, value):
        return value.to_decimal()


class TypeCodecAdapter(Codec):
    """Exposes a bson TypeCodec through the Codec interface."""

    def __init__(self, type_codec: TypeCodec):
        self.type_codec = type_codec
        self.python_type = type_codec.python_type

    def encode(self, value: Any) -> Any:
        if isinstance(value, self.type_codec.bson_type):
            return value
        return self.type_codec.transform_python(value)

    def decode(self, value: Any) -> Any:
        # Documents read through codec_options() arrive already converted
        if isinstance(value, self.python_type):
            return value
        return self.type_codec.transform_bson(value)

    def __repr__(self) -> str:
        return f"TypeCodecAdapter({type(self.type_codec).__name__})"


class CodecRegistry:
    """
    Per-type codec lookup backed by bson.

    The bson TypeCodecs registered here are also exposed as a bson
    TypeRegistry, so the same conversions apply when pymongo encodes
    nested values.
    """

    def __init__(self, include_defaults: bool = True):
        self._codecs: Dict[Any, Codec] = {}
        self._type_codecs: List[TypeCodec] = []
        self._providers: List[CodecProvider] = []
        self._lock = threading.RLock()

        if include_defaults:
            for python_type in BSON_NATIVE_TYPES:
                self.register(PassthroughCodec(python_type))
            self.register_type_codec(DecimalCodec())

    def register(self, codec: Codec) -> None:
        """Register (or replace) the codec for ``codec.python_type``."""
        with self._lock:
            self._codecs[codec.python_type] = codec

    def register_type_codec(self, type_codec: TypeCodec) -> None:
        """Register a bson TypeCodec for lookups and for the bson TypeRegistry."""
        with self._lock:
            self._type_codecs.append(type_codec)
            self.register(TypeCodecAdapter(type_codec))

    def add_provider(self, provider: CodecProvider) -> None:
        """Add a fallback that may build codecs for otherwise unknown types."""
        with self._lock:
            self._providers.append(provider)

    def lookup(self, tp: Any) -> Codec:
        """
        Find the codec for a type.

        Args:
            tp: A class or annotation (Annotated / Optional / generic alias)

        Returns:
            The matching Codec

        Raises:
            CodecNotFoundError: If no codec matches, or tp is an unbound TypeVar
        """
        tp, _ = strip_annotated(tp)
        if is_type_var(tp):
            raise CodecNotFoundError(tp)

        if is_union(tp):
            members = [arg for arg in get_args(tp) if arg is not type(None)]
            if len(members) != 1:
                raise CodecNotFoundError(tp)
            return self.lookup(members[0])

        with self._lock:
            codec = self._registered_codec(tp)
            providers = list(self._providers)
        if codec is not None:
            return codec

        # Providers may call back into the mapper, so they run unlocked
        for provider in providers:
            codec = provider(tp)
            if codec is not None:
                logger.debug("Provider built %r for %s", codec, type_name(tp))
                self.register(codec)
                return codec

        raise CodecNotFoundError(tp)

    def _registered_codec(self, tp: Any) -> Optional[Codec]:
        codec = self._codecs.get(tp)
        if codec is not None:
            return codec
        origin = get_origin(tp)
        if origin is not None and origin in self._codecs:
            return self._codecs[origin]

        if isinstance(tp, type):
            for base in tp.__mro__[1:]:
                codec = self._codecs.get(base)
                if base is not object and codec is not None and codec.applies_to_subclasses:
                    return codec
        return None

    def __contains__(self, tp: Any) -> bool:
        with self._lock:
            return tp in self._codecs

    def type_registry(self) -> TypeRegistry:
        with self._lock:
            return TypeRegistry(list(self._type_codecs))

    def codec_options(self) -> CodecOptions:
        """CodecOptions for bson.encode/decode and pymongo collections."""
        return CodecOptions(
            type_registry=self.type_registry(),
            uuid_representation=UuidRepresentation.STANDARD,
        )
