# ==============================================
# Generic Type Helpers
# ==============================================
#
# PURPOSE:
#   Small, stateless helpers over the typing machinery that the
#   introspector and the member descriptors share:
#
#     - substitute()        A -> str, list[A] -> list[str], Optional[B] -> Optional[int]
#     - generic_bindings()  which TypeVars each class in a hierarchy binds
#     - type_name()         readable names for logs and the CLI
#
# NAMING:
#   Substitution maps are keyed by parameter NAME ("A"), not by the
#   TypeVar object. Names are unique within one class, and the same
#   TypeVar object is often reused by unrelated classes, so a name map
#   per declaring class is the unambiguous key.
#
# ==============================================

import types
import typing
from typing import Annotated, Any, Dict, Mapping, Tuple, TypeVar, get_args, get_origin


def is_type_var(tp: Any) -> bool:
    return isinstance(tp, TypeVar)


def is_parameterized(tp: Any) -> bool:
    """True for subscripted aliases such as ``Pair[str, int]`` or ``list[int]``."""
    return get_origin(tp) is not None


def is_union(tp: Any) -> bool:
    """True for ``Union[...]``, ``Optional[...]`` and ``X | Y``."""
    origin = get_origin(tp)
    return origin is typing.Union or origin is types.UnionType


def type_parameters_of(tp: Any) -> Tuple[TypeVar, ...]:
    """
    Return the TypeVars declared by a generic class (or an alias' origin).

    Args:
        tp: A class or a parameterized alias

    Returns:
        The declared parameters, in declaration order (empty if not generic)
    """
    origin = get_origin(tp) or tp
    params = getattr(origin, "__parameters__", ())
    return tuple(p for p in params if isinstance(p, TypeVar))


def strip_annotated(tp: Any) -> Tuple[Any, Tuple[Any, ...]]:
    """Split ``Annotated[X, m1, m2]`` into ``(X, (m1, m2))``."""
    if get_origin(tp) is Annotated:
        inner, *metadata = get_args(tp)
        return inner, tuple(metadata)
    return tp, ()


def substitute(tp: Any, type_map: Mapping[str, Any]) -> Any:
    """
    Replace free TypeVars in ``tp`` using a name -> type map.

    Unknown TypeVars are left in place, so partial maps are fine.

    Args:
        tp: Any annotation (class, TypeVar, alias, Annotated, Union, ...)
        type_map: Parameter name -> replacement type

    Returns:
        The substituted annotation
    """
    if isinstance(tp, TypeVar):
        return type_map.get(tp.__name__, tp)

    if not is_parameterized(tp):
        return tp

    params = getattr(tp, "__parameters__", ())
    if not params:
        return tp

    replacements = tuple(
        type_map.get(p.__name__, p) if isinstance(p, TypeVar) else p
        for p in params
    )
    # Subscripting an alias with free variables substitutes them in order
    if len(replacements) == 1:
        return tp[replacements[0]]
    return tp[replacements]


def generic_bindings(tp: Any) -> Dict[type, Dict[str, Any]]:
    """
    Collect the TypeVar bindings of every generic class in a hierarchy.

    For ``class StrPair(Pair[str, int])`` this returns
    ``{StrPair: {}, Pair: {"A": str, "B": int}}``. For the alias
    ``Pair[str, int]`` it returns ``{Pair: {"A": str, "B": int}}``.
    Bindings flow down the hierarchy, so ``class Leaf(Middle[int])`` with
    ``class Middle(Pair[str, B])`` binds Pair's ``B`` to ``int``.

    Args:
        tp: A class or a parameterized alias

    Returns:
        Mapping of class -> {parameter name: bound type}
    """
    origin = get_origin(tp) or tp
    own: Dict[str, Any] = {}
    if is_parameterized(tp):
        own = {
            param.__name__: arg
            for param, arg in zip(type_parameters_of(origin), get_args(tp))
        }

    result: Dict[type, Dict[str, Any]] = {origin: own}
    _collect_base_bindings(origin, own, result)
    return result


def _collect_base_bindings(cls: Any, env: Dict[str, Any], result: Dict[type, Dict[str, Any]]) -> None:
    # Only the bases this class declares itself; __orig_bases__ is inherited otherwise
    for base in cls.__dict__.get("__orig_bases__", cls.__bases__):
        base_origin = get_origin(base) or base
        if not isinstance(base_origin, type) or base_origin in (object, typing.Generic, typing.Protocol):
            continue
        if base_origin in result:
            continue

        mapping: Dict[str, Any] = {}
        if is_parameterized(base):
            args = [substitute(arg, env) for arg in get_args(base)]
            mapping = {
                param.__name__: arg
                for param, arg in zip(type_parameters_of(base_origin), args)
            }
        result[base_origin] = mapping
        _collect_base_bindings(base_origin, mapping, result)


def type_name(tp: Any) -> str:
    """Readable name for an annotation (``str``, ``list[int]``, ``A``)."""
    if isinstance(tp, TypeVar):
        return tp.__name__
    if tp is type(None):
        return "None"
    if isinstance(tp, type) and not is_parameterized(tp):
        return tp.__name__
    return repr(tp).replace("typing.", "")
