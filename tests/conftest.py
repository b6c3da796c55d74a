"""
Pytest configuration and fixtures for exprguard tests.

This module provides shared fixtures used across unit, integration,
and security tests.
"""

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from exprguard.policy import PolicyEngine, PolicyStore
from exprguard.schema import load_policy_from_string


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def engine() -> PolicyEngine:
    """Engine over the built-in policy tables."""
    return PolicyEngine()


@pytest.fixture
def jvm_policy_yaml() -> str:
    """Return a policy YAML with the tables of the JVM template engine."""
    return """
version: "1.0"
blocked_namespaces:
  - "java."
  - "javax."
  - "jakarta."
  - "jdk."
  - "org.ietf.jgss."
  - "org.omg."
  - "org.w3c.dom."
  - "org.xml.sax."
  - "com.sun."
  - "sun."
allowed_namespaces:
  - "java.time."
blocked_type_reference_namespaces:
  - "com.squareup.javapoet."
  - "net.bytebuddy."
  - "net.sf.cglib."
  - "javassist."
  - "javax0.geci."
  - "org.apache.bcel."
  - "org.aspectj."
  - "org.javassist."
  - "org.mockito."
  - "org.objectweb.asm."
  - "org.objenesis."
  - "org.springframework.aot."
  - "org.springframework.asm."
  - "org.springframework.cglib."
  - "org.springframework.javapoet."
  - "org.springframework.objenesis."
allowed_types:
  - "java.lang.Boolean"
  - "java.lang.Byte"
  - "java.lang.Character"
  - "java.lang.Double"
  - "java.lang.Enum"
  - "java.lang.Float"
  - "java.lang.Integer"
  - "java.lang.Long"
  - "java.lang.Math"
  - "java.lang.Number"
  - "java.lang.Short"
  - "java.lang.String"
  - "java.math.BigDecimal"
  - "java.math.BigInteger"
  - "java.math.RoundingMode"
  - "java.util.ArrayList"
  - "java.util.LinkedList"
  - "java.util.HashMap"
  - "java.util.LinkedHashMap"
  - "java.util.HashSet"
  - "java.util.LinkedHashSet"
  - "java.util.Iterator"
  - "java.util.Enumeration"
  - "java.util.Locale"
  - "java.util.Properties"
  - "java.util.Date"
  - "java.util.Calendar"
  - "java.util.Optional"
allowed_supertypes:
  - "java.util.Collection"
  - "java.lang.Iterable"
  - "java.util.List"
  - "java.util.Map"
  - "java.util.Map$Entry"
  - "java.util.Set"
  - "java.util.Calendar"
  - "java.util.stream.Stream"
"""


@pytest.fixture
def jvm_engine(jvm_policy_yaml: str) -> PolicyEngine:
    """Engine over the JVM tables (type names only, nothing resolves)."""
    return PolicyEngine(PolicyStore.from_config(load_policy_from_string(jvm_policy_yaml)))


@pytest.fixture
def sample_policy_yaml() -> str:
    """Return a small custom policy YAML for testing."""
    return """
version: "1.0"
blocked_namespaces:
  - "myapp.internal"
  - "os"
allowed_namespaces:
  - "myapp.internal.views"
blocked_type_reference_namespaces:
  - "ast"
allowed_types:
  - "os.DirEntry"
allowed_supertypes:
  - "collections.abc.Mapping"
"""
