# ==============================================
# CODEC
# ==============================================
#
# This package converts field values and whole objects to their
# document form. bson (shipped with pymongo) does the wire encoding.
#
# Modules:
# --------
# - registry.py    → Codec, CodecRegistry and the built-in codecs
# - model_codec.py → ModelCodec: object <-> document via a TypeModel
#
# ==============================================

from .registry import Codec, CodecRegistry, DecimalCodec, PassthroughCodec, TypeCodecAdapter
from .model_codec import ModelCodec

__all__ = [
    "Codec",
    "CodecRegistry",
    "DecimalCodec",
    "PassthroughCodec",
    "TypeCodecAdapter",
    "ModelCodec",
]
