"""
Alias scope classes for HTML DSL path resolution.

Iteration elements bind an alias for their subtree only. The schema compiler
binds each alias to a static path prefix ("contracts[]"), the renderer binds
it to the live item value. Both resolve a dot-path with the same rule: when
the first segment is a bound alias it is replaced wholesale by the binding,
otherwise it is a key of the root data.

Scopes are immutable. `extend()` returns a new scope and never touches the
parent, so sibling subtrees cannot observe each other's bindings.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from htmldsl.core.path_utils import (
    ARRAY_MARKER,
    PathComponents,
    is_implicit_path,
    split_path_components,
)


class AliasScope(ABC):
    """Abstract base class for alias scopes."""

    def __init__(self, bindings: Mapping[str, Any] | None = None):
        self._bindings = MappingProxyType(dict(bindings or {}))

    @property
    def bindings(self) -> Mapping[str, Any]:
        return self._bindings

    def __contains__(self, name: object) -> bool:
        return name in self._bindings

    def extend(self, **bindings: Any) -> "AliasScope":
        """Return a child scope with `bindings` layered over this scope's."""
        return type(self)({**self._bindings, **bindings})

    @abstractmethod
    def resolve(self, path: str) -> Any:
        """Resolve a dot-path against this scope."""
        pass


class StaticAliasScope(AliasScope):
    """Scope binding aliases to schema path prefixes."""

    def resolve(self, path: str) -> str:
        """
        Resolve a template path to its fully-resolved schema path.

        Params:
            path: Dot-path as written in the template

        Returns:
            Path with a bound first segment replaced by its prefix

        Examples:
            "item.name" with item -> "contracts[].items[]" gives
            "contracts[].items[].name"
        """
        components = PathComponents.split_path(path)
        prefix = self._bindings.get(components.first_part)
        if prefix is None:
            return path
        if not components.has_remainder:
            return prefix
        return f"{prefix}.{components.remainder}"

    def bind_iteration(self, alias: str, array_path: str) -> "StaticAliasScope":
        """Bind `alias` to the item position of the array at `array_path`."""
        return self.extend(**{alias: f"{array_path}{ARRAY_MARKER}"})

    def is_implicit(self, path: str) -> bool:
        """Check whether a path is rooted at a render-only implicit name."""
        if not is_implicit_path(path):
            return False
        return PathComponents.split_path(path).first_part not in self


class DynamicAliasScope(AliasScope):
    """Scope binding aliases to live data values."""

    def __init__(self, data: Mapping[str, Any], bindings: Mapping[str, Any] | None = None):
        super().__init__(bindings)
        self.data = data

    def extend(self, **bindings: Any) -> "DynamicAliasScope":
        return DynamicAliasScope(self.data, {**self._bindings, **bindings})

    def resolve(self, path: str) -> Any:
        """
        Resolve a dot-path to a data value.

        Lookups step only through mappings; a missing key or a non-mapping
        intermediate value resolves to None.
        """
        parts = split_path_components(path)
        if not parts:
            return None

        if parts[0] in self._bindings:
            cursor = self._bindings[parts[0]]
            parts = parts[1:]
        else:
            cursor = self.data

        for key in parts:
            if not isinstance(cursor, Mapping):
                return None
            cursor = cursor.get(key)
        return cursor

    def bind_iteration(
        self, alias: str, item: Any, index: int, count: int, page: bool = False
    ) -> "DynamicAliasScope":
        """
        Bind one iteration instance.

        Params:
            alias: Alias name for the current item
            item: Current item value (an empty mapping for padding rows)
            index: 0-based instance index
            count: Total number of rendered instances
            page: Whether this is a page-level iteration (binds `$page`)
        """
        bindings: dict[str, Any] = {alias: item, "$index": index}
        if page:
            bindings["$page"] = {"index": index, "number": index + 1, "count": count}
        return self.extend(**bindings)
