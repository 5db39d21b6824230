# ==============================================
# TypeIntrospector
# ==============================================
#
# PURPOSE:
#   Enumerate the raw members of a Python class so a TypeModel can be
#   built from them. This is the only place that touches the typing /
#   inspect machinery directly.
#
# WHY THIS CLASS EXISTS:
#   A TypeModel needs fields with their declared AND resolved types,
#   the methods (with overloads), and the generic parameter bindings of
#   the type. Python spreads that over __annotations__, __mro__,
#   __orig_bases__, typing.get_type_hints and typing.get_overloads.
#   This class gathers it once per type and caches the result.
#
# CLASSES:
# --------
# - AnnotationInclusion (Enum)
#     How Annotated[...] metadata declared on base classes is treated
#     when a subclass re-declares the same field.
#
#       INCLUDE_AND_INHERIT_IF_INHERITED
#           base metadata stays visible unless the subclass declares
#           metadata of the same type (override)
#       INCLUDE_BUT_DONT_INHERIT
#           only the declaring class' own metadata
#       DONT_INCLUDE
#           no metadata at all
#
# - RawField / RawMethod (frozen dataclasses)
#     One discovered member.
#
# - ResolvedType (dataclass)
#     Everything resolve_members() found for one type.
#
# - TypeIntrospector
#     - resolve_members(tp, inclusion) -> ResolvedType
#     - type_parameters(tp) -> tuple[TypeVar, ...]
#     - bound_arguments(tp) -> dict[str, type]
#
# RULES:
# ------
#   1. Fields are class annotations across the MRO, base first;
#      a subclass re-declaration replaces the base entry.
#   2. ClassVar, InitVar and names starting with "_" are skipped.
#   3. Methods are public plain functions on the class and its bases
#      (not object), most-derived first. Each typing.overload variant is
#      its own entry; otherwise the implementation is the single entry.
#
# ==============================================

import dataclasses
import inspect
import logging
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, List, Tuple, TypeVar, get_origin

from docmap.errors import TypeMappingError
from docmap.introspection.generics import (
    generic_bindings,
    is_type_var,
    is_union,
    strip_annotated,
    substitute,
    type_name,
    type_parameters_of,
)

logger = logging.getLogger(__name__)


class AnnotationInclusion(Enum):
    """Policy for Annotated metadata declared on base classes."""
    INCLUDE_AND_INHERIT_IF_INHERITED = "include_and_inherit"
    INCLUDE_BUT_DONT_INHERIT = "include"
    DONT_INCLUDE = "none"


@dataclass(frozen=True)
class RawField:
    """A field as declared on a class."""

    name: str
    declared_type: Any  # As written, TypeVars included (e.g. A, list[A])
    resolved_type: Any  # After binding the declaring class' parameters
    declaring_class: type
    metadata: Tuple[Any, ...] = ()
    # MISSING as a plain default would make this a required field
    default: Any = field(default_factory=lambda: dataclasses.MISSING)


@dataclass(frozen=True)
class RawMethod:
    """A method (or one overload of it) as declared on a class."""

    name: str
    function: Callable[..., Any]
    declaring_class: type
    is_overload: bool = False


@dataclass
class ResolvedType:
    """Result of TypeIntrospector.resolve_members()."""

    type: Any
    origin: type
    fields: List[RawField] = field(default_factory=list)
    methods: List[RawMethod] = field(default_factory=list)


class TypeIntrospector:
    """
    Discovers the fields, methods and generic bindings of a type.

    Results are cached per (type, inclusion) for the lifetime of the
    introspector, so share one instance across TypeModels.
    """

    def __init__(self):
        self._cache: Dict[Tuple[Any, AnnotationInclusion], ResolvedType] = {}

    def resolve_members(
        self,
        tp: Any,
        inclusion: AnnotationInclusion = AnnotationInclusion.INCLUDE_AND_INHERIT_IF_INHERITED
    ) -> ResolvedType:
        """
        Resolve the members of a class or parameterized alias.

        Args:
            tp: The class (``Pair``) or alias (``Pair[str, int]``) to resolve
            inclusion: How inherited Annotated metadata is treated

        Returns:
            The resolved type with its fields, methods and bindings

        Raises:
            TypeMappingError: If the class' annotations cannot be evaluated
        """
        key = (tp, inclusion)
        if key in self._cache:
            return self._cache[key]

        origin = get_origin(tp) or tp
        if is_union(tp) or not isinstance(origin, type):
            raise TypeMappingError(f"{type_name(tp)} is not a class")

        bindings = generic_bindings(tp)
        resolved = ResolvedType(
            type=tp,
            origin=origin,
            fields=self._resolve_fields(origin, bindings, inclusion),
            methods=self._resolve_methods(origin),
        )
        logger.debug(
            "Resolved %s: %d field(s), %d method(s)",
            type_name(tp), len(resolved.fields), len(resolved.methods)
        )
        self._cache[key] = resolved
        return resolved

    def type_parameters(self, tp: Any) -> Tuple[TypeVar, ...]:
        """The type's own, unbound, generic parameters."""
        return type_parameters_of(tp)

    def bound_arguments(self, tp: Any) -> Dict[str, Any]:
        """
        Concrete arguments bound on this type, by parameter name.

        ``Pair[str, int]`` -> ``{"A": str, "B": int}``. A plain class also
        reports what it binds on its generic bases
        (``class StrPair(Pair[str, int])`` -> same result). Parameters still
        bound to a TypeVar are left out.
        """
        result: Dict[str, Any] = {}
        # Deepest base first so nearer bindings win on name clashes
        for mapping in reversed(list(generic_bindings(tp).values())):
            for name, arg in mapping.items():
                if not is_type_var(arg):
                    result[name] = arg
        return result

    # ======================================
    # Fields
    # ======================================
    def _resolve_fields(
        self,
        origin: type,
        bindings: Dict[type, Dict[str, Any]],
        inclusion: AnnotationInclusion
    ) -> List[RawField]:
        fields: Dict[str, RawField] = {}

        for klass in reversed(origin.__mro__):
            if klass is object:
                continue
            own_names = inspect.get_annotations(klass)
            if not own_names:
                continue
            try:
                hints = typing.get_type_hints(klass, include_extras=True)
            except Exception as e:
                raise TypeMappingError(
                    f"Cannot evaluate annotations of {klass.__name__}: {e}", e
                ) from e

            defaults = self._defaults_of(klass)
            for name in own_names:
                if name.startswith("_") or name not in hints:
                    continue
                hint = hints[name]
                if self._is_excluded_hint(hint):
                    continue

                declared, own_metadata = strip_annotated(hint)
                metadata = self._merge_metadata(fields.get(name), own_metadata, inclusion)
                fields[name] = RawField(
                    name=name,
                    declared_type=declared,
                    resolved_type=substitute(declared, bindings.get(klass, {})),
                    declaring_class=klass,
                    metadata=metadata,
                    default=defaults.get(name, dataclasses.MISSING),
                )

        return list(fields.values())

    @staticmethod
    def _is_excluded_hint(hint: Any) -> bool:
        bare, _ = strip_annotated(hint)
        if bare is ClassVar or get_origin(bare) is ClassVar:
            return True
        return isinstance(bare, dataclasses.InitVar)

    @staticmethod
    def _merge_metadata(
        previous: "RawField | None",
        own: Tuple[Any, ...],
        inclusion: AnnotationInclusion
    ) -> Tuple[Any, ...]:
        if inclusion is AnnotationInclusion.DONT_INCLUDE:
            return ()
        if inclusion is AnnotationInclusion.INCLUDE_BUT_DONT_INHERIT or previous is None:
            return own
        # Inherited entries survive unless overridden by an entry of the same type
        overridden = {type(item) for item in own}
        inherited = tuple(item for item in previous.metadata if type(item) not in overridden)
        return inherited + own

    @staticmethod
    def _defaults_of(klass: type) -> Dict[str, Any]:
        defaults: Dict[str, Any] = {}
        if dataclasses.is_dataclass(klass):
            for f in dataclasses.fields(klass):
                if f.default is not dataclasses.MISSING:
                    defaults[f.name] = f.default
            return defaults
        for name, value in vars(klass).items():
            if not callable(value):
                defaults[name] = value
        return defaults

    # ======================================
    # Methods
    # ======================================
    def _resolve_methods(self, origin: type) -> List[RawMethod]:
        methods: List[RawMethod] = []
        seen = set()

        for klass in origin.__mro__:
            if klass is object:
                continue
            for name, member in vars(klass).items():
                if name.startswith("_") or name in seen:
                    continue
                if not inspect.isfunction(member):
                    continue
                seen.add(name)

                overloads = typing.get_overloads(member)
                if overloads:
                    methods.extend(
                        RawMethod(name=name, function=variant, declaring_class=klass, is_overload=True)
                        for variant in overloads
                    )
                else:
                    methods.append(RawMethod(name=name, function=member, declaring_class=klass))

        return methods
