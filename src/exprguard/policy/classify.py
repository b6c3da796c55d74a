"""
Namespace classification of fully-qualified type names.

Classification runs on every member access of every expression, so it avoids
scanning the whole prefix table where it can. Each PrefixIndex buckets its
prefixes by their first character; a name whose first character starts no
prefix is rejected with a single dict lookup, which covers the vast majority
of application types.

The buckets are derived from the prefixes themselves when the index is built.
Adding or removing a prefix can therefore never leave the fast path out of
sync with the table, and the answers are always identical to checking every
prefix in turn.

Override semantics:
    A name is blocked for all purposes when its longest matching blocked
    prefix is more specific than its longest matching allowed prefix. For the
    default tables this is simply "blocked unless inside an override"; a
    blocked prefix nested inside an override (``a.b.`` allowed, ``a.b.c.``
    blocked) blocks again.
"""

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from exprguard.policy.store import PolicyStore


class PrefixIndex:
    """
    Immutable set of namespace prefixes with a first-character fast path.

    Usage:
        index = PrefixIndex(["os.", "sys."])
        index.matches("os.DirEntry")        # True
        index.longest_match("sys.flags")    # "sys."
        index.matches("myapp.User")         # False, one dict lookup
    """

    __slots__ = ("_prefixes", "_by_initial")

    def __init__(self, prefixes: Iterable[str]) -> None:
        unique = frozenset(prefixes)
        if "" in unique:
            raise ValueError("Empty prefix would match every name")
        buckets: dict[str, list[str]] = {}
        for prefix in unique:
            buckets.setdefault(prefix[0], []).append(prefix)
        self._prefixes = unique
        # Longest first, so the first hit in a bucket is the longest match.
        self._by_initial: dict[str, tuple[str, ...]] = {
            initial: tuple(sorted(group, key=len, reverse=True))
            for initial, group in buckets.items()
        }

    @property
    def initials(self) -> frozenset[str]:
        """First characters that can start a match."""
        return frozenset(self._by_initial)

    def matches(self, name: str) -> bool:
        return self.longest_match(name) is not None

    def longest_match(self, name: str) -> str | None:
        """Return the longest prefix of ``name`` in the index, or None."""
        bucket = self._by_initial.get(name[:1])
        if bucket is None:
            return None
        for prefix in bucket:
            if name.startswith(prefix):
                return prefix
        return None

    def __contains__(self, prefix: object) -> bool:
        return prefix in self._prefixes

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._prefixes))

    def __len__(self) -> int:
        return len(self._prefixes)

    def __repr__(self) -> str:
        return f"PrefixIndex({sorted(self._prefixes)!r})"


def is_namespace_blocked_for_all_purposes(store: "PolicyStore", type_name: str) -> bool:
    """
    Check whether a type's namespace is blocked for every kind of access.

    Args:
        store: The compiled policy tables
        type_name: Fully-qualified, non-empty type name

    Returns:
        True if the name falls under a blocked namespace that no allowed
        namespace carves out
    """
    blocked = store.blocked_namespaces.longest_match(type_name)
    if blocked is None:
        return False
    override = store.allowed_namespaces.longest_match(type_name)
    return override is None or len(blocked) > len(override)


def is_namespace_blocked_for_type_reference(store: "PolicyStore", type_name: str) -> bool:
    """
    Check whether a type may not be referenced by name.

    Anything blocked for all purposes is blocked for type reference too; the
    stricter type-reference namespaces are consulted only afterwards.
    """
    if is_namespace_blocked_for_all_purposes(store, type_name):
        return True
    return store.blocked_type_reference_namespaces.matches(type_name)
