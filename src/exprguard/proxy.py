"""
Dynamic proxy classes for exprguard.

A proxy class is synthesized at runtime for a set of interfaces. It subclasses
the interfaces and forwards every function they declare to an invocation
handler, so a single handler can stand in for any implementation.

The policy engine recognises proxies by capability, not by name: a class is a
proxy if and only if it was produced here or explicitly registered with
register_proxy_class(). Generated classes are created with types.new_class()
and report the ``types`` module, a namespace the default policy blocks; the
capability check is what keeps proxied values usable inside templates.

Usage:
    def handler(proxy, name, args, kwargs):
        return backend.call(name, *args, **kwargs)

    repo = new_proxy_instance([UserRepository], handler)
    repo.find("alice")  # -> handler(repo, "find", ("alice",), {})
"""

import inspect
import threading
import types
import weakref
from collections.abc import Callable, Iterable
from typing import Any

from exprguard.errors import InvalidArgumentError

InvocationHandler = Callable[[Any, str, tuple[Any, ...], dict[str, Any]], Any]

# Class construction and attribute plumbing stay with the proxy itself.
_NOT_FORWARDED = frozenset({
    "__init__", "__new__", "__init_subclass__", "__subclasshook__",
    "__class_getitem__", "__getattribute__", "__getattr__", "__setattr__",
    "__delattr__", "__del__", "__dir__", "__sizeof__",
    "__reduce__", "__reduce_ex__", "__getstate__", "__setstate__",
})

_HANDLER_ATTR = "_proxy_handler"

# Module reported by every generated class, whatever the metaclass.
PROXY_MODULE = "types"

_proxy_classes: "weakref.WeakSet[type]" = weakref.WeakSet()
# Classes live as long as something else references them; the cache and the
# registry never keep a proxy class alive on their own.
_proxy_cache: "weakref.WeakValueDictionary[tuple[type, ...], type]" = weakref.WeakValueDictionary()
_registry_lock = threading.RLock()


def get_proxy_class(*interfaces: type) -> type:
    """
    Return the proxy class implementing the given interfaces.

    The same tuple of interfaces yields the same class for as long as that
    class is in use.

    Raises:
        InvalidArgumentError: If no interfaces are given, one of them is not
            a class, or an interface is repeated
    """
    if not interfaces:
        raise InvalidArgumentError(argument="interfaces", value="()")
    for interface in interfaces:
        if not isinstance(interface, type):
            raise InvalidArgumentError(argument="interfaces", value=repr(interface))
    if len(set(interfaces)) != len(interfaces):
        raise InvalidArgumentError(
            argument="interfaces",
            value=repr(interfaces),
            message="Duplicate interface in proxy definition",
        )
    return _build_proxy_class(interfaces)


def new_proxy_instance(
    interfaces: Iterable[type],
    handler: InvocationHandler,
) -> Any:
    """
    Create a proxy object that dispatches interface calls to ``handler``.

    Args:
        interfaces: Interfaces the proxy implements
        handler: Called as handler(proxy, name, args, kwargs)

    Returns:
        A new instance of get_proxy_class(*interfaces)
    """
    if not callable(handler):
        raise InvalidArgumentError(argument="handler", value=repr(handler))
    cls = get_proxy_class(*tuple(interfaces))
    return cls(handler)


def register_proxy_class(cls: type) -> type:
    """
    Mark a class generated by another proxy facility as a proxy class.

    Returns the class so this can be used as a decorator.
    """
    if not isinstance(cls, type):
        raise InvalidArgumentError(argument="cls", value=repr(cls))
    with _registry_lock:
        _proxy_classes.add(cls)
    return cls


def is_proxy_class(cls: type) -> bool:
    """Check whether a class is a registered proxy class."""
    return cls in _proxy_classes


def _forwarded_names(interfaces: tuple[type, ...]) -> list[str]:
    names = set()
    for interface in interfaces:
        for klass in interface.__mro__:
            if klass is object:
                continue
            for name, value in vars(klass).items():
                if inspect.isfunction(value) and name not in _NOT_FORWARDED:
                    names.add(name)
    return sorted(names)


def _forwarder(name: str) -> Callable[..., Any]:
    def method(self: Any, *args: Any, **kwargs: Any) -> Any:
        return getattr(self, _HANDLER_ATTR)(self, name, args, kwargs)

    method.__name__ = name
    return method


def _proxy_init(self: Any, handler: InvocationHandler) -> None:
    object.__setattr__(self, _HANDLER_ATTR, handler)


def _build_proxy_class(interfaces: tuple[type, ...]) -> type:
    with _registry_lock:
        cls = _proxy_cache.get(interfaces)
        if cls is not None:
            return cls

        names = _forwarded_names(interfaces)

        def exec_body(ns: dict[str, Any]) -> None:
            ns["__module__"] = PROXY_MODULE
            ns["__init__"] = _proxy_init
            for name in names:
                ns[name] = _forwarder(name)

        class_name = "".join(interface.__name__ for interface in interfaces) + "Proxy"
        cls = types.new_class(class_name, interfaces, exec_body=exec_body)
        _proxy_cache[interfaces] = cls
        return register_proxy_class(cls)
