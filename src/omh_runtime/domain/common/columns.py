from __future__ import annotations

from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

LIST_ITEM_SEPARATOR = ","
PATH_SEPARATOR = ":"


class ColumnListError(ValueError):
    pass


class ColumnNode:
    """A read-only node in a column filter tree. The root carries no value."""

    __slots__ = ("_value", "_children")

    def __init__(self, value: Optional[str] = None, children: Optional[Mapping[str, "ColumnNode"]] = None) -> None:
        self._value = value
        self._children = MappingProxyType(dict(children or {}))

    @property
    def value(self) -> Optional[str]:
        return self._value

    @property
    def children(self) -> Mapping[str, "ColumnNode"]:
        return self._children

    @property
    def is_leaf(self) -> bool:
        return not self._children

    def has_child(self, name: str) -> bool:
        return name in self._children

    def child(self, name: str) -> "ColumnNode":
        return self._children[name]

    def to_list(self) -> List[str]:
        """Flatten the tree back into colon-joined column paths."""
        paths: List[str] = []
        for name, node in self._children.items():
            if node.is_leaf:
                paths.append(name)
            else:
                paths.extend(f"{name}{PATH_SEPARATOR}{rest}" for rest in node.to_list())
        return paths

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ColumnNode):
            return NotImplemented
        return self._value == other._value and dict(self._children) == dict(other._children)

    def __hash__(self) -> int:
        return hash((self._value, tuple(sorted(self._children.items(), key=lambda item: item[0]))))

    def __repr__(self) -> str:
        return f"ColumnNode({self.to_list()!r})"

    @classmethod
    def parse(cls, column_list: Optional[str]) -> "ColumnNode":
        """
        Parse a column list such as ``"data:sleep,metadata"`` into a tree.

        Blank input yields an empty tree. Blank items between commas are
        skipped; a blank segment between colons is an error.
        """
        tree: Dict[str, dict] = {}
        if column_list is None or not column_list.strip():
            return cls()

        for column in column_list.split(LIST_ITEM_SEPARATOR):
            trimmed = column.strip()
            if not trimmed:
                continue
            current = tree
            for part in trimmed.split(PATH_SEPARATOR):
                name = part.strip()
                if not name:
                    raise ColumnListError(f"Two ':'s were given in sequence: {trimmed}")
                current = current.setdefault(name, {})

        return cls._freeze(None, tree)

    @classmethod
    def _freeze(cls, value: Optional[str], tree: Dict[str, dict]) -> "ColumnNode":
        return cls(value, {name: cls._freeze(name, sub) for name, sub in tree.items()})
