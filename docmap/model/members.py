# ==============================================
# Member Descriptors (FieldModel, MethodModel)
# ==============================================
#
# PURPOSE:
#   Per-member metadata consumed by the mapping layer. A TypeModel holds
#   one FieldModel per field and a list of MethodModel per method name.
#
# CLASS: FieldModel
# -----------------
#   Constructors:
#   -------------
#   - FieldModel.from_raw(owner, registry, raw_field)
#       Built during discovery from a RawField.
#   - FieldModel.specialized(existing, type_map, owner=None)
#       Copy of an existing field with its TypeVars substituted
#       (type_map: parameter name -> concrete type).
#
#   Attributes:
#   -----------
#   - name: str                 → Attribute name on the Python object
#   - declared_type             → Annotation as written (may hold TypeVars)
#   - type                      → Annotation after generic binding
#   - metadata: tuple           → Annotated[...] extras
#   - document_name: str        → Key in the document (conventions may rename)
#   - included: bool            → False to leave the field out of documents
#   - codec                     → Looked up lazily from the CodecRegistry
#
# CLASS: MethodModel
# ------------------
#   - MethodModel(owner, registry, raw_method)
#       Resolves the method's annotations eagerly; unresolvable
#       annotations raise (discovery wraps that in TypeMappingError).
#   - MethodModel.rebound(existing, owner)
#       Same method, owned by a specialized model.
#
# ==============================================

import dataclasses
import inspect
import typing
from typing import Any, List, Mapping, Optional, Tuple

from docmap.introspection.generics import substitute, type_name
from docmap.introspection.introspector import RawField, RawMethod


class FieldModel:
    """Mapping metadata for one field of a type."""

    def __init__(
        self,
        owner,
        registry,
        name: str,
        declared_type: Any,
        resolved_type: Any,
        metadata: Tuple[Any, ...] = (),
        declaring_class: Optional[type] = None,
        default: Any = dataclasses.MISSING
    ):
        self.owner = owner
        self.registry = registry
        self.name = name
        self.declared_type = declared_type
        self.type = resolved_type
        self.metadata = tuple(metadata)
        self.declaring_class = declaring_class
        self.default = default

        # --- Convention-controlled ---
        self.document_name = name
        self.included = True

        self._codec = None

    @classmethod
    def from_raw(cls, owner, registry, raw: RawField) -> "FieldModel":
        return cls(
            owner,
            registry,
            name=raw.name,
            declared_type=raw.declared_type,
            resolved_type=raw.resolved_type,
            metadata=raw.metadata,
            declaring_class=raw.declaring_class,
            default=raw.default,
        )

    @classmethod
    def specialized(cls, existing: "FieldModel", type_map: Mapping[str, Any], owner=None) -> "FieldModel":
        """
        Copy ``existing`` with its type bound through ``type_map``.

        Convention-controlled attributes (document name, inclusion) carry
        over; the codec is looked up again for the new type.

        Args:
            existing: The template's field
            type_map: Parameter name -> concrete type
            owner: The specialized TypeModel (defaults to the template's)

        Returns:
            A new FieldModel
        """
        field = cls(
            owner if owner is not None else existing.owner,
            existing.registry,
            name=existing.name,
            declared_type=existing.declared_type,
            resolved_type=substitute(existing.type, type_map),
            metadata=existing.metadata,
            declaring_class=existing.declaring_class,
            default=existing.default,
        )
        field.document_name = existing.document_name
        field.included = existing.included
        return field

    @property
    def codec(self):
        """The codec for this field's type, looked up on first access."""
        if self._codec is None:
            self._codec = self.registry.lookup(self.type)
        return self._codec

    def get_metadata(self, kind: type) -> Optional[Any]:
        """First Annotated metadata item that is an instance of ``kind``."""
        for item in self.metadata:
            if isinstance(item, kind):
                return item
        return None

    def get_value(self, instance: Any) -> Any:
        return getattr(instance, self.name)

    def set_value(self, instance: Any, value: Any) -> None:
        setattr(instance, self.name, value)

    def __repr__(self) -> str:
        return f"FieldModel({self.name}: {type_name(self.type)})"


class MethodModel:
    """Mapping metadata for one method, or one overload of it."""

    def __init__(self, owner, registry, raw: RawMethod):
        self.owner = owner
        self.registry = registry
        self.name = raw.name
        self.function = raw.function
        self.declaring_class = raw.declaring_class
        self.is_overload = raw.is_overload

        # Raises NameError & co. for annotations that cannot be resolved
        hints = typing.get_type_hints(raw.function, include_extras=True)
        self.return_type = hints.pop("return", Any)
        self.parameters: List[Tuple[str, Any]] = [
            (name, hints.get(name, Any))
            for name in list(inspect.signature(raw.function).parameters)[1:]
        ]

    @classmethod
    def rebound(cls, existing: "MethodModel", owner) -> "MethodModel":
        """Copy of ``existing`` owned by another model (a specialization)."""
        raw = RawMethod(
            name=existing.name,
            function=existing.function,
            declaring_class=existing.declaring_class,
            is_overload=existing.is_overload,
        )
        return cls(owner, existing.registry, raw)

    @property
    def parameter_types(self) -> List[Any]:
        return [tp for _, tp in self.parameters]

    def __repr__(self) -> str:
        params = ", ".join(f"{name}: {type_name(tp)}" for name, tp in self.parameters)
        return f"MethodModel({self.name}({params}) -> {type_name(self.return_type)})"
