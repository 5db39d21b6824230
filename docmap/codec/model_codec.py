# ==============================================
# ModelCodec
# ==============================================
#
# PURPOSE:
#   Turn an object into a document (dict) and back, driven entirely by
#   a discovered TypeModel: which fields are included, the key each one
#   uses in the document, and the codec for each field's type.
#
# CLASS: ModelCodec(Codec)
# ------------------------
#   - encode(obj) -> dict
#   - decode(document) -> obj        (built with no arguments, then filled)
#   - to_bson(obj) -> bytes
#   - from_bson(data) -> obj
#
#   Registered in the CodecRegistry (see TypeMapper), it also serves as
#   the codec of nested model fields. It is never reused for subclasses
#   of its type: a field typed with a subclass gets that subclass' model.
#
# ==============================================

from typing import Any, Dict

import bson

from docmap.codec.registry import Codec


class ModelCodec(Codec):
    """Document codec for one mapped type."""

    applies_to_subclasses = False

    def __init__(self, model):
        model.discover()
        self.model = model
        self.python_type = model.type

    def encode(self, value: Any) -> Dict[str, Any]:
        document: Dict[str, Any] = {}
        for field in self.model.get_fields():
            if not field.included:
                continue
            raw = field.get_value(value)
            document[field.document_name] = None if raw is None else field.codec.encode(raw)
        return document

    def decode(self, document: Dict[str, Any]) -> Any:
        instance = self.model.origin()
        for field in self.model.get_fields():
            if not field.included or field.document_name not in document:
                continue
            raw = document[field.document_name]
            field.set_value(instance, None if raw is None else field.codec.decode(raw))
        return instance

    def to_bson(self, value: Any) -> bytes:
        return bson.encode(self.encode(value), codec_options=self.model.registry.codec_options())

    def from_bson(self, data: bytes) -> Any:
        return self.decode(bson.decode(data, codec_options=self.model.registry.codec_options()))

    def __repr__(self) -> str:
        return f"ModelCodec({self.model.name})"
