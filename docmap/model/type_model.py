# ==============================================
# TypeModel
# ==============================================
#
# PURPOSE:
#   Structural metadata for one Python class (or one parameterized
#   instantiation such as Pair[str, int]) used to map objects to and
#   from documents: its fields, its methods, its generic parameters and
#   the collection its documents live in.
#
# LIFECYCLE:
#
#   TypeModel(registry, introspector, tp)      state = UNINITIALIZED
#       │   verifies tp can be built with no arguments
#       ▼
#   discover()                                 state = DISCOVERING
#       │   introspector → FieldModel / MethodModel
#       ▼
#   (success)                                  state = READY (final)
#   (failure)                                  state = UNINITIALIZED, maps empty
#
#   Conventions then inspect the model, may add_field() overrides and
#   propose collection names through set_collection_name().
#
# CLASS: TypeModel
# ----------------
#   Public Methods:
#   ---------------
#   - discover() -> None                        idempotent
#   - TypeModel.specialize(template, args)      bind a generic template
#   - get_field(name) -> FieldModel | None
#   - get_fields() -> list[FieldModel]          name order
#   - get_methods(name) -> list[MethodModel]    [] for unknown names
#   - add_field(field) -> None                  last write wins
#   - set_collection_name(priority, name) -> None
#   - get_collection_name() -> str | None
#   - resolve_generic_type(name) -> type | None
#
# THREADING:
#   The UNINITIALIZED -> DISCOVERING transition is taken under an RLock,
#   so concurrent first discover() calls serialize. add_field() and
#   set_collection_name() are not synchronized; finish them before
#   sharing the model.
#
# ==============================================

import inspect
import logging
import threading
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, TypeVar, get_origin

from docmap.errors import TypeMappingError, TypeParameterMismatchError
from docmap.introspection.generics import is_parameterized, is_union, type_name
from docmap.introspection.introspector import AnnotationInclusion
from docmap.model.members import FieldModel, MethodModel
from docmap.model.priority_value import PriorityValue

logger = logging.getLogger(__name__)


class DiscoveryState(Enum):
    UNINITIALIZED = "uninitialized"
    DISCOVERING = "discovering"
    READY = "ready"


class TypeModel:
    """
    Fields, methods and generic bindings of one type, discovered lazily.

    Create one per type (or per type + arguments) and cache it; see
    TypeMapper for the cache.
    """

    def __init__(
        self,
        registry,
        introspector,
        tp: Any,
        collection_name: Optional[PriorityValue] = None,
        inclusion: AnnotationInclusion = AnnotationInclusion.INCLUDE_AND_INHERIT_IF_INHERITED
    ):
        """
        Args:
            registry: CodecRegistry used by the fields for deferred codec lookups
            introspector: TypeIntrospector used for discovery
            tp: The class or parameterized alias to model
            collection_name: Shared PriorityValue (specializations pass the template's)
            inclusion: Annotated metadata policy used at discovery

        Raises:
            TypeMappingError: If tp cannot be constructed without arguments
        """
        self.type = tp
        self.registry = registry
        self.introspector = introspector
        self.inclusion = inclusion
        self.collection_name: PriorityValue = collection_name if collection_name is not None else PriorityValue()

        self.type_parameters: Tuple[TypeVar, ...] = ()
        self.bound_type_arguments: Dict[str, Any] = {}

        self._fields: Dict[str, FieldModel] = {}
        self._methods: Dict[str, List[MethodModel]] = {}
        self._state = DiscoveryState.UNINITIALIZED
        self._lock = threading.RLock()

        _check_default_constructor(tp)

    # ======================================
    # Identity
    # ======================================
    @property
    def origin(self) -> type:
        return get_origin(self.type) or self.type

    @property
    def name(self) -> str:
        return self.origin.__name__

    @property
    def state(self) -> DiscoveryState:
        return self._state

    @property
    def discovered(self) -> bool:
        return self._state is DiscoveryState.READY

    # ======================================
    # Discovery
    # ======================================
    def discover(self) -> None:
        """
        Populate fields and methods from the introspector, once.

        Raises:
            TypeMappingError: If a member cannot be modeled. Nothing is
                published in that case and discover() may be retried.
        """
        if self._state is DiscoveryState.READY:
            return

        with self._lock:
            # READY: another thread won. DISCOVERING: re-entrant call from a descriptor.
            if self._state is not DiscoveryState.UNINITIALIZED:
                return
            self._state = DiscoveryState.DISCOVERING
            try:
                self._populate()
            except Exception:
                self._state = DiscoveryState.UNINITIALIZED
                raise
            self._state = DiscoveryState.READY

        logger.debug(
            "Discovered %s: %d field(s), %d method name(s)",
            self.name, len(self._fields), len(self._methods)
        )

    def _populate(self) -> None:
        resolved = self.introspector.resolve_members(self.type, self.inclusion)
        type_parameters = tuple(self.introspector.type_parameters(self.type))
        bound_arguments = dict(self.introspector.bound_arguments(self.type))

        fields: Dict[str, FieldModel] = {}
        for raw_field in resolved.fields:
            field = FieldModel.from_raw(self, self.registry, raw_field)
            fields[field.name] = field

        methods: Dict[str, List[MethodModel]] = {}
        for raw_method in resolved.methods:
            try:
                method = MethodModel(self, self.registry, raw_method)
            except Exception as e:
                raise TypeMappingError(str(e), e) from e
            methods.setdefault(method.name, []).append(method)

        # Publish only once everything was built
        self.type_parameters = type_parameters
        self.bound_type_arguments.update(bound_arguments)
        self._fields.update(fields)
        self._methods.update(methods)

    @classmethod
    def specialize(cls, template: "TypeModel", concrete_arguments: Iterable[Any]) -> "TypeModel":
        """
        Derive the model of ``template`` bound to ``concrete_arguments``.

        ``specialize(model_of(Pair), [str, int])`` gives a model whose
        ``first`` field is ``str`` and ``second`` field is ``int``. The new
        model shares the template's registry, introspector and collection
        name.

        Args:
            template: Model of a generic class (discovered if needed)
            concrete_arguments: One type per template type parameter, in order

        Returns:
            A discovered TypeModel

        Raises:
            TypeMappingError: If the template is itself a parameterized
                alias (``Pair[str, int]``); specialize the model of ``Pair``
            TypeParameterMismatchError: If the argument count differs from
                the template's type parameter count
        """
        if is_parameterized(template.type):
            raise TypeMappingError(
                f"{type_name(template.type)} is already bound; specialize the model of {template.name} instead"
            )
        template.discover()
        arguments = list(concrete_arguments)
        parameters = template.type_parameters
        if len(parameters) != len(arguments):
            raise TypeParameterMismatchError(template.name, len(parameters), len(arguments))

        type_map = {param.__name__: arg for param, arg in zip(parameters, arguments)}

        model = cls(
            template.registry,
            template.introspector,
            _parameterize(template.origin, arguments),
            collection_name=template.collection_name,
            inclusion=template.inclusion,
        )
        model.type_parameters = parameters
        model.bound_type_arguments = dict(type_map)
        for field in template._fields.values():
            model.add_field(FieldModel.specialized(field, type_map, owner=model))
        model._methods = {
            name: [MethodModel.rebound(method, model) for method in methods]
            for name, methods in template._methods.items()
        }
        model._state = DiscoveryState.READY

        logger.debug(
            "Specialized %s with %s",
            template.name, ", ".join(type_name(arg) for arg in arguments)
        )
        return model

    # ======================================
    # Fields & methods
    # ======================================
    @property
    def fields(self) -> Dict[str, FieldModel]:
        """Snapshot of the fields keyed by name, in name order."""
        return {name: self._fields[name] for name in sorted(self._fields)}

    @property
    def methods(self) -> Dict[str, List[MethodModel]]:
        """Snapshot of the methods keyed by name."""
        return {name: list(methods) for name, methods in self._methods.items()}

    def get_field(self, name: str) -> Optional[FieldModel]:
        return self._fields.get(name)

    def get_fields(self) -> List[FieldModel]:
        return [self._fields[name] for name in sorted(self._fields)]

    def get_methods(self, name: str) -> List[MethodModel]:
        """All overloads of ``name`` in discovery order; empty if unknown."""
        return list(self._methods.get(name, ()))

    def add_field(self, field: FieldModel) -> None:
        """
        Add or replace a field by its own name.

        Used by conventions that wrap or inject fields after discovery
        (e.g. an encrypting convention replacing a field's descriptor).
        """
        self._fields[field.name] = field

    # ======================================
    # Derived attributes
    # ======================================
    def set_collection_name(self, priority: int, name: str) -> None:
        """
        Propose a collection name.

        Args:
            priority: Weight relative to other proposals (ties: latest wins)
            name: The proposed collection name
        """
        self.collection_name.set(priority, name)

    def get_collection_name(self) -> Optional[str]:
        return self.collection_name.get()

    def resolve_generic_type(self, name: str) -> Optional[Any]:
        """The type bound to parameter ``name``, if any."""
        return self.bound_type_arguments.get(name)

    def __repr__(self) -> str:
        return f"TypeModel({type_name(self.type)}, state={self._state.value})"


def _check_default_constructor(tp: Any) -> None:
    origin = get_origin(tp) or tp
    if is_union(tp) or not isinstance(origin, type):
        raise TypeMappingError(f"{type_name(tp)} is not a class")

    name = origin.__name__
    if getattr(origin, "_is_protocol", False):
        raise TypeMappingError(f"{name} is a Protocol and cannot be constructed")
    if inspect.isabstract(origin):
        raise TypeMappingError(f"{name} is abstract and cannot be constructed")

    try:
        signature = inspect.signature(origin)
    except (TypeError, ValueError) as e:
        raise TypeMappingError(f"{name} has no inspectable constructor: {e}", e) from e

    required = [
        param.name
        for param in signature.parameters.values()
        if param.default is param.empty
        and param.kind not in (param.VAR_POSITIONAL, param.VAR_KEYWORD)
    ]
    if required:
        raise TypeMappingError(
            f"{name} has no default constructor (requires: {', '.join(required)})"
        )


def _parameterize(origin: type, arguments: List[Any]) -> Any:
    if not arguments:
        return origin
    try:
        return origin[tuple(arguments)] if len(arguments) > 1 else origin[arguments[0]]
    except TypeError:
        return origin
