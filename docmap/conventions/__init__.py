# ==============================================
# CONVENTIONS
# ==============================================
#
# This package holds the policies applied to a TypeModel after
# discovery (collection naming, document keys, excluded fields).
#
# Modules:
# --------
# - naming.py      → NameNormalizer: snake_case names
# - conventions.py → Convention, ConventionPack and the defaults
#
# ==============================================

from .naming import NameNormalizer
from .conventions import (
    ClassNameCollectionConvention,
    CollectionAttributeConvention,
    Convention,
    ConventionPack,
    DocumentName,
    DocumentNameConvention,
    IdFieldConvention,
    SnakeCaseFieldNamingConvention,
    Transient,
    TransientFieldConvention,
    default_conventions,
)

__all__ = [
    "NameNormalizer",
    "Convention",
    "ConventionPack",
    "ClassNameCollectionConvention",
    "CollectionAttributeConvention",
    "SnakeCaseFieldNamingConvention",
    "DocumentNameConvention",
    "IdFieldConvention",
    "TransientFieldConvention",
    "DocumentName",
    "Transient",
    "default_conventions",
]
