# ==============================================
# TYPE MODEL
# ==============================================
#
# This package holds the structural metadata of mapped types.
#
# Modules:
# --------
# - priority_value.py → PriorityValue: highest-priority proposal wins
# - members.py        → FieldModel / MethodModel member descriptors
# - type_model.py     → TypeModel: discovery, specialization, lookups
#
# ==============================================

from .priority_value import PriorityValue
from .members import FieldModel, MethodModel
from .type_model import DiscoveryState, TypeModel

__all__ = ["PriorityValue", "FieldModel", "MethodModel", "DiscoveryState", "TypeModel"]
