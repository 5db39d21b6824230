# ==============================================
# docmap - Document Mapping Metadata
# ==============================================
#
# Package Structure:
#
# docmap/
# ├── introspection/   # Read fields, methods and generics out of classes
# ├── model/           # TypeModel, member descriptors, PriorityValue
# ├── conventions/     # Policies applied to discovered models
# ├── codec/           # Codec registry (bson) and object <-> document codec
# ├── storage/         # MongoDB persistence of mapped objects
# ├── mapper.py        # TypeMapper: cached, convention-applied models
# ├── config.py        # Configuration management
# ├── errors.py        # TypeMappingError and subclasses
# └── cli.py           # Command line entry point
#
# ==============================================

from docmap.errors import CodecNotFoundError, TypeMappingError, TypeParameterMismatchError
from docmap.model import FieldModel, MethodModel, PriorityValue, TypeModel
from docmap.introspection import AnnotationInclusion, TypeIntrospector
from docmap.codec import CodecRegistry, ModelCodec
from docmap.mapper import TypeMapper

__version__ = "0.1.0"

__all__ = [
    "TypeMappingError",
    "TypeParameterMismatchError",
    "CodecNotFoundError",
    "PriorityValue",
    "FieldModel",
    "MethodModel",
    "TypeModel",
    "AnnotationInclusion",
    "TypeIntrospector",
    "CodecRegistry",
    "ModelCodec",
    "TypeMapper",
]
