# ==============================================
# Conventions
# ==============================================
#
# PURPOSE:
#   Policy objects applied to a TypeModel right after discovery. Each one
#   looks at the model and adjusts it: proposes a collection name, renames
#   document keys, leaves fields out.
#
# WHY PRIORITIES:
#   Conventions are independent and their order is not guaranteed to
#   match their importance. Collection names therefore go through the
#   model's PriorityValue: an explicit __collection__ attribute (priority
#   10) beats the class-name default (priority 0) whichever runs first.
#
# FIELD METADATA MARKERS (used with typing.Annotated):
# ----------------------------------------------------
#   - DocumentName("key")   → store the field under "key"
#   - Transient()           → never store the field
#
#     class Person:
#         full_name: Annotated[str, DocumentName("name")] = ""
#         cache: Annotated[dict, Transient()] = None
#
# CLASSES:
# --------
# - Convention (ABC)                  apply(model) -> None
# - ConventionPack                    applies conventions in order
# - ClassNameCollectionConvention     "UserAccount" -> "user_account"
# - CollectionAttributeConvention     __collection__ = "accounts"
# - SnakeCaseFieldNamingConvention    "lastLogin" -> "last_login"
# - DocumentNameConvention            honors DocumentName(...)
# - IdFieldConvention                 "id" -> "_id"
# - TransientFieldConvention          honors Transient()
#
# ==============================================

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional

from docmap.conventions.naming import NameNormalizer

logger = logging.getLogger(__name__)

CLASS_NAME_PRIORITY = 0
ATTRIBUTE_PRIORITY = 10


@dataclass(frozen=True)
class DocumentName:
    """Annotated marker: the key a field is stored under."""
    name: str


@dataclass(frozen=True)
class Transient:
    """Annotated marker: the field is never stored."""


class Convention(ABC):
    """A policy applied to a discovered TypeModel."""

    @abstractmethod
    def apply(self, model) -> None:
        ...


class ConventionPack(Convention):
    """Applies a sequence of conventions in order."""

    def __init__(self, conventions: Iterable[Convention] = ()):
        self.conventions: List[Convention] = list(conventions)

    def add(self, convention: Convention) -> None:
        self.conventions.append(convention)

    def apply(self, model) -> None:
        for convention in self.conventions:
            convention.apply(model)
        logger.debug(
            "Applied %d convention(s) to %s (collection=%r)",
            len(self.conventions), model.name, model.get_collection_name()
        )

    def __len__(self) -> int:
        return len(self.conventions)


class ClassNameCollectionConvention(Convention):
    """Proposes the snake_case class name as the collection name."""

    def __init__(self, priority: int = CLASS_NAME_PRIORITY, normalizer: Optional[NameNormalizer] = None):
        self.priority = priority
        self.normalizer = normalizer or NameNormalizer()

    def apply(self, model) -> None:
        model.set_collection_name(self.priority, self.normalizer.normalize(model.name))


class CollectionAttributeConvention(Convention):
    """Proposes the value of a class attribute (``__collection__``) when set."""

    def __init__(self, priority: int = ATTRIBUTE_PRIORITY, attribute: str = "__collection__"):
        self.priority = priority
        self.attribute = attribute

    def apply(self, model) -> None:
        name = getattr(model.origin, self.attribute, None)
        if isinstance(name, str) and name:
            model.set_collection_name(self.priority, name)


class SnakeCaseFieldNamingConvention(Convention):
    def __init__(self, normalizer: Optional[NameNormalizer] = None):
        self.normalizer = normalizer or NameNormalizer()

    def apply(self, model) -> None:
        for field in model.get_fields():
            field.document_name = self.normalizer.normalize(field.name)


class DocumentNameConvention(Convention):
    def apply(self, model) -> None:
        for field in model.get_fields():
            marker = field.get_metadata(DocumentName)
            if marker is not None:
                field.document_name = marker.name


class IdFieldConvention(Convention):
    """Stores the identifier field under MongoDB's ``_id`` key."""

    def __init__(self, field_name: str = "id"):
        self.field_name = field_name

    def apply(self, model) -> None:
        field = model.get_field(self.field_name)
        if field is not None:
            field.document_name = "_id"


class TransientFieldConvention(Convention):
    def apply(self, model) -> None:
        for field in model.get_fields():
            if field.get_metadata(Transient) is not None:
                field.included = False


def default_conventions(mapping_config=None) -> ConventionPack:
    """
    The conventions a TypeMapper applies unless told otherwise.

    Args:
        mapping_config: Optional MappingConfig (priorities, snake_case switch)

    Returns:
        A ConventionPack; the ordering only matters for field renames
    """
    class_name_priority = CLASS_NAME_PRIORITY
    attribute_priority = ATTRIBUTE_PRIORITY
    snake_case_fields = True
    if mapping_config is not None:
        class_name_priority = mapping_config.class_name_priority
        attribute_priority = mapping_config.attribute_priority
        snake_case_fields = mapping_config.snake_case_fields

    normalizer = NameNormalizer()
    conventions: List[Convention] = [
        CollectionAttributeConvention(priority=attribute_priority),
        ClassNameCollectionConvention(priority=class_name_priority, normalizer=normalizer),
    ]
    if snake_case_fields:
        conventions.append(SnakeCaseFieldNamingConvention(normalizer=normalizer))
    conventions.extend([
        DocumentNameConvention(),
        IdFieldConvention(),
        TransientFieldConvention(),
    ])
    return ConventionPack(conventions)
