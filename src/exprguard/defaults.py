"""
Built-in policy tables.

These are the tables used when no policy file is supplied. Namespaces are
module prefixes and always end with a dot. Type names are
``module.qualname`` as reported by the class itself.

Blocked for all purposes:
    The whole standard library, as listed by ``sys.stdlib_module_names``,
    except a handful of modules that only hold value types. Interpreter
    internals, processes, files, sockets, imports, serialization, debuggers
    and profilers all live there. The ``builtins`` namespace is blocked as a
    whole (functions, frames, code objects, modules, ``type`` and
    ``object`` all live there); the safe scalar and container builtins are
    re-admitted one by one below. Third-party deserializers that rebuild
    arbitrary objects are blocked as well.

Allowed override:
    ``urllib.parse`` only parses strings into immutable values, while the
    rest of ``urllib`` opens network connections.

Blocked for type reference only:
    Third-party code generation, bytecode and mocking libraries. Naming them
    in an expression is refused even though a stray instance of, say, a
    compiled template has nothing dangerous to call.
"""

import sys

# Standard library modules whose classes are plain values.
SAFE_STDLIB_MODULES: frozenset[str] = frozenset({
    "collections",
    "datetime",
    "decimal",
    "fractions",
    "ipaddress",
    "numbers",
    "re",
    "uuid",
})

_THIRD_PARTY_BLOCKED: tuple[str, ...] = (
    "_yaml.", "cloudpickle.", "dill.", "yaml.",
)

BLOCKED_NAMESPACES: tuple[str, ...] = tuple(sorted(
    {f"{name}." for name in sys.stdlib_module_names if name not in SAFE_STDLIB_MODULES}
    # frozen import machinery is not in stdlib_module_names on every build
    | {"_frozen_importlib.", "_frozen_importlib_external."}
    | set(_THIRD_PARTY_BLOCKED)
))

ALLOWED_NAMESPACES: tuple[str, ...] = (
    "urllib.parse.",
)

BLOCKED_TYPE_REFERENCE_NAMESPACES: tuple[str, ...] = (
    "Cython.", "astor.", "bytecode.", "jinja2.", "libcst.", "llvmlite.",
    "mako.", "mock.", "numba.",
)

ALLOWED_TYPES: tuple[str, ...] = (
    # numbers
    "builtins.bool", "builtins.complex", "builtins.float", "builtins.int",
    # text
    "builtins.bytes", "builtins.str",
    # containers
    "builtins.dict", "builtins.frozenset", "builtins.list", "builtins.range",
    "builtins.set", "builtins.tuple",
    # attribute bags
    "types.SimpleNamespace",
)

ALLOWED_SUPERTYPES: tuple[str, ...] = (
    "collections.abc.Collection",
    "collections.abc.Container",
    "collections.abc.ItemsView",
    "collections.abc.Iterable",
    "collections.abc.Iterator",
    "collections.abc.KeysView",
    "collections.abc.Mapping",
    "collections.abc.MappingView",
    "collections.abc.MutableMapping",
    "collections.abc.MutableSequence",
    "collections.abc.MutableSet",
    "collections.abc.Reversible",
    "collections.abc.Sequence",
    "collections.abc.Set",
    "collections.abc.Sized",
    "collections.abc.ValuesView",
)
