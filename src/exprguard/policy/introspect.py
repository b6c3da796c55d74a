"""
Runtime type introspection for the policy engine.

The decision engine only ever asks a handful of questions about a runtime
type. This module answers them with Python's own introspection and nothing
else:

    - What is its fully-qualified name?
    - Is it an enumeration?
    - Is it an annotation form (``int | str``)?
    - Is it a dynamic proxy class?
    - Which members does a given supertype declare directly?

Parameterized aliases (``list[int]``, ``typing.List[int]``) are not
annotation forms here: they forward attribute reads and calls to the class
they parameterize, so the engine treats them as that class.

Everything here is read-only: classes are inspected, never modified.
"""

import enum
import inspect
import pkgutil
import types
import typing
from enum import Enum
from typing import Any

from exprguard.errors import TypeResolutionError
from exprguard.proxy import is_proxy_class

_ANNOTATION_TYPES: tuple[type, ...] = (types.UnionType,)

_FORWARDING_ALIAS_TYPES: tuple[type, ...] = (
    types.GenericAlias,
    type(typing.List),
    type(typing.List[int]),
)

# Constructors are not members a supertype can vouch for.
_CONSTRUCTORS = frozenset({"__init__", "__new__"})


class TypeShape(str, Enum):
    """
    The runtime type shapes the instance rules distinguish.

    Every shape except OTHER is allowed unconditionally once the namespace
    check has failed; OTHER falls through to the supertype member check.
    """

    ENUM = "enum"
    ANNOTATION = "annotation"
    PROXY = "proxy"
    ALLOWED_CONCRETE = "allowed_concrete"
    OTHER = "other"


def qualified_name(cls: type) -> str:
    """Return ``module.qualname`` for a class (``builtins.str``)."""
    module = getattr(cls, "__module__", None) or "builtins"
    return f"{module}.{cls.__qualname__}"


def load_type(name: str) -> type:
    """
    Resolve a fully-qualified type name to a class.

    Raises:
        TypeResolutionError: If the module cannot be imported, the attribute
            does not exist, or the object found is not a class
    """
    try:
        obj = pkgutil.resolve_name(name)
    except (ImportError, AttributeError, ValueError) as e:
        raise TypeResolutionError(type_name=name, underlying_error=str(e)) from e
    if not isinstance(obj, type):
        raise TypeResolutionError(
            type_name=name,
            underlying_error=f"{name} is a {type(obj).__name__}, not a class",
        )
    return obj


def resolve_type(name: str) -> type | None:
    """Like load_type(), but return None when the name names no class."""
    try:
        return load_type(name)
    except TypeResolutionError:
        return None


def is_enum_type(cls: type) -> bool:
    return isinstance(cls, enum.EnumMeta)


def is_annotation_type(cls: type) -> bool:
    return issubclass(cls, _ANNOTATION_TYPES)


def is_proxy_type(cls: type) -> bool:
    return is_proxy_class(cls)


def alias_origin(value: Any) -> Any | None:
    """
    Return the origin of a parameterized alias, or None for anything else.

    The origin is usually a class (``list`` for ``list[int]``) but may be a
    special form such as ``typing.Union``.
    """
    if isinstance(value, _FORWARDING_ALIAS_TYPES):
        return value.__origin__
    return None


def declared_member_names(cls: type) -> frozenset[str]:
    """
    Return the names of the instance methods and properties a class declares.

    Inherited members are not included, and neither are plain data
    attributes such as ``__doc__`` or ``__abstractmethods__``. Class and
    static methods are left out: they act on whatever class they are
    reached through (``__class_getitem__``, ``_from_iterable``), not on the
    instance. Constructors are left out too.
    """
    return frozenset(
        name
        for name, value in vars(cls).items()
        if (inspect.isfunction(value) or isinstance(value, property))
        and name not in _CONSTRUCTORS
    )
