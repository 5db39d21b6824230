# ==============================================
# INTROSPECTION
# ==============================================
#
# This package reads raw member information out of Python classes.
#
# Modules:
# --------
# - generics.py     → TypeVar substitution, bindings, erasure, names
# - introspector.py → TypeIntrospector: fields, methods, generic bindings
#
# ==============================================

from .introspector import AnnotationInclusion, RawField, RawMethod, ResolvedType, TypeIntrospector

__all__ = ["AnnotationInclusion", "RawField", "RawMethod", "ResolvedType", "TypeIntrospector"]
