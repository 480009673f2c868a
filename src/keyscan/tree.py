"""
The schema tree: one node per key path, accumulated across documents.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Tuple

from .errors import KeyNotFoundError
from .stats import DocumentId, TypeStats


@dataclass
class SchemaTree:
    """
    A node of the schema tree.

    ``count`` is the number of times the key was seen at this position,
    ``types`` the value kinds seen there and ``keys`` the child nodes for
    the fields of object values. The root node has no key of its own; its
    count and types stay empty.
    """
    count: int = 0
    types: TypeStats = field(default_factory=TypeStats)
    keys: Dict[str, "SchemaTree"] = field(default_factory=dict)

    def add(self, doc: DocumentId, name: str, value: Any):
        """Record one ``name: value`` pair found below this node."""
        sub_tree = self.keys.get(name)
        if sub_tree is None:
            sub_tree = self.keys[name] = SchemaTree()
        sub_tree.count += 1
        if isinstance(value, dict):
            for k, v in value.items():
                sub_tree.add(doc, k, v)
        sub_tree.types.add(doc, value)

    def add_document(self, doc: DocumentId, document: Any):
        """
        Walk a parsed document into this tree.

        Only objects have keys, any other top level value is ignored.
        """
        if not isinstance(document, dict):
            return
        for name, value in document.items():
            self.add(doc, name, value)

    def merge(self, other: "SchemaTree"):
        """
        Merge ``other`` into this tree.

        ``other`` is consumed: its subtrees are adopted, not copied, so it
        must not be used afterwards.
        """
        self.count += other.count
        self.types.merge(other.types)
        for name, sub_tree in other.keys.items():
            mine = self.keys.get(name)
            if mine is None:
                self.keys[name] = sub_tree
            else:
                mine.merge(sub_tree)

    def resolve(self, keys: Iterable[str]) -> "SchemaTree":
        """Follow ``keys`` down the tree, raising KeyNotFoundError if one is missing."""
        tree = self
        seen: List[str] = []
        for key in keys:
            seen.append(key)
            try:
                tree = tree.keys[key]
            except KeyError:
                raise KeyNotFoundError(key, seen) from None
        return tree

    def walk(self, prefix: Tuple[str, ...] = ()) -> Iterator[Tuple[Tuple[str, ...], "SchemaTree"]]:
        """Yield ``(path, node)`` for this node and every descendant, pre-order."""
        yield prefix, self
        for name, sub_tree in self.keys.items():
            yield from sub_tree.walk(prefix + (name,))

    def documents(self) -> set:
        """All documents that contributed an observation at this path."""
        return set(self.types.documents())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "types": self.types.to_dict(),
            "keys": {name: sub_tree.to_dict() for name, sub_tree in self.keys.items()},
        }


def merge_trees(trees: Iterable[SchemaTree]) -> SchemaTree:
    """Fold any number of trees into a fresh one."""
    result = SchemaTree()
    for tree in trees:
        result.merge(tree)
    return result
