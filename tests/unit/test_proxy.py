"""
Unit tests for the dynamic proxy facility.

Tests cover:
- Proxy class generation, caching and release
- Call forwarding to the invocation handler
- Registration of foreign proxy classes
- Argument validation
"""

import gc
import weakref
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

import pytest

from exprguard.errors import InvalidArgumentError
from exprguard.proxy import (
    PROXY_MODULE,
    get_proxy_class,
    is_proxy_class,
    new_proxy_instance,
    register_proxy_class,
)


class Greeter(ABC):
    """Test interface."""

    @abstractmethod
    def greet(self, name: str) -> str: ...


class Counter(ABC):
    """Second test interface."""

    @abstractmethod
    def count(self) -> int: ...


class RecordingHandler:
    """Invocation handler that records calls and echoes them back."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...], dict[str, Any]]] = []

    def __call__(self, proxy: Any, name: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        self.calls.append((name, args, kwargs))
        return f"{name}:{args}:{kwargs}"


class TestProxyClass:
    """Tests for proxy class generation."""

    def test_implements_interfaces(self) -> None:
        """Proxy classes subclass their interfaces."""
        cls = get_proxy_class(Greeter, Counter)
        assert issubclass(cls, Greeter)
        assert issubclass(cls, Counter)

    def test_cached(self) -> None:
        """The same interfaces give the same class."""
        assert get_proxy_class(Greeter) is get_proxy_class(Greeter)
        assert get_proxy_class(Greeter) is not get_proxy_class(Greeter, Counter)

    def test_released_when_unused(self) -> None:
        """The cache does not keep an unused proxy class alive."""

        class Temporary(ABC):
            @abstractmethod
            def ping(self) -> str: ...

        proxy = new_proxy_instance([Temporary], lambda proxy, name, args, kwargs: "pong")
        assert proxy.ping() == "pong"
        cls_ref = weakref.ref(type(proxy))
        del proxy
        gc.collect()
        assert cls_ref() is None

    def test_module_and_name(self) -> None:
        """Generated classes report the proxy module."""
        cls = get_proxy_class(Greeter, Counter)
        assert cls.__module__ == PROXY_MODULE
        assert cls.__name__ == "GreeterCounterProxy"

    def test_registered(self) -> None:
        """Generated classes are recognised as proxies."""
        assert is_proxy_class(get_proxy_class(Greeter))

    def test_abstract_methods_implemented(self) -> None:
        """Proxies of abstract interfaces can be instantiated."""
        assert not getattr(get_proxy_class(Greeter), "__abstractmethods__", frozenset())


class TestForwarding:
    """Tests for handler dispatch."""

    def test_method_forwarded(self) -> None:
        """Interface methods reach the handler with their arguments."""
        handler = RecordingHandler()
        proxy = new_proxy_instance([Greeter], handler)

        result = proxy.greet("alice", punctuation="!")

        assert handler.calls == [("greet", ("alice",), {"punctuation": "!"})]
        assert result == "greet:('alice',):{'punctuation': '!'}"

    def test_handler_receives_proxy(self) -> None:
        """The handler is given the proxy object itself."""
        seen = []
        proxy = new_proxy_instance([Counter], lambda p, name, args, kwargs: seen.append(p) or 3)
        assert proxy.count() == 3
        assert seen == [proxy]

    def test_mixin_methods_forwarded(self) -> None:
        """Concrete interface methods are forwarded too."""
        handler = RecordingHandler()
        proxy = new_proxy_instance([Mapping], handler)
        proxy.get("key")
        assert handler.calls[0][0] == "get"

    def test_isinstance(self) -> None:
        """Proxy instances are instances of their interfaces."""
        proxy = new_proxy_instance([Greeter], RecordingHandler())
        assert isinstance(proxy, Greeter)


class TestRegistration:
    """Tests for register_proxy_class()."""

    def test_register_foreign_class(self) -> None:
        """Classes from other proxy facilities can opt in."""

        @register_proxy_class
        class ForeignProxy:
            pass

        assert is_proxy_class(ForeignProxy)

    def test_unregistered_class(self) -> None:
        """Ordinary classes are not proxies."""

        class Plain:
            pass

        assert not is_proxy_class(Plain)

    def test_register_non_class(self) -> None:
        """Only classes can be registered."""
        with pytest.raises(InvalidArgumentError):
            register_proxy_class("not a class")


class TestValidation:
    """Tests for argument validation."""

    def test_no_interfaces(self) -> None:
        """At least one interface is required."""
        with pytest.raises(InvalidArgumentError):
            get_proxy_class()

    def test_non_class_interface(self) -> None:
        """Interfaces must be classes."""
        with pytest.raises(InvalidArgumentError):
            get_proxy_class(Greeter, "Counter")

    def test_duplicate_interface(self) -> None:
        """Interfaces may not repeat."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            get_proxy_class(Greeter, Greeter)
        assert "Duplicate" in exc_info.value.message

    def test_non_callable_handler(self) -> None:
        """The handler must be callable."""
        with pytest.raises(InvalidArgumentError):
            new_proxy_instance([Greeter], None)
