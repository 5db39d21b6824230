# ==============================================
# Errors
# ==============================================
#
# PURPOSE:
#   The error types surfaced by the mapping layer. Every failure that
#   crosses the TypeModel boundary is a TypeMappingError, so callers only
#   need a single except clause.
#
# CLASSES:
# --------
# - TypeMappingError(message, cause=None)
#     Missing default constructor, failed method discovery, ...
#
# - TypeParameterMismatchError(TypeMappingError)
#     Specialization received the wrong number of type arguments.
#
# - CodecNotFoundError(TypeMappingError)
#     CodecRegistry has no codec for the requested type.
#
# ==============================================

from typing import Optional


class TypeMappingError(Exception):
    """
    Raised when a type cannot be modeled for mapping.

    The original failure (if any) is kept on ``cause`` and chained as
    ``__cause__`` so tracebacks show both.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class TypeParameterMismatchError(TypeMappingError):
    """Raised when specialization arguments do not pair 1:1 with type parameters."""

    def __init__(self, type_name: str, expected: int, actual: int):
        super().__init__(
            f"{type_name} declares {expected} type parameter(s) "
            f"but {actual} argument(s) were supplied"
        )
        self.type_name = type_name
        self.expected = expected
        self.actual = actual


class CodecNotFoundError(TypeMappingError):
    """Raised when no codec is registered for a type."""

    def __init__(self, python_type):
        super().__init__(f"No codec registered for {python_type!r}")
        self.python_type = python_type
