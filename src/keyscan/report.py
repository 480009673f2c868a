"""
Read-only views over a merged schema tree.
"""

import json
from pathlib import Path
from typing import Iterator, List, Optional

from .query import format_path, parse_query
from .tree import SchemaTree


def iter_keys(tree: SchemaTree, type_count: int = 1) -> Iterator[str]:
    """
    Yields one line per key path whose types pass the filter.

    A path is listed if anything other than objects was seen there and at
    least ``type_count`` distinct non-object kinds occurred. Children are
    visited whether or not their parent was listed. Sibling order follows
    the tree and carries no meaning.
    """
    if type_count < 0:
        raise ValueError(f"type_count must not be negative, got {type_count}")

    for path, node in tree.walk():
        types = node.types
        if not types.is_object() and types.type_count() >= type_count:
            yield f"{node.count} '{format_path(path)}' {types.summary()}"


def query_node(tree: SchemaTree, query: str) -> SchemaTree:
    """Parse ``query`` and resolve it against the tree."""
    return tree.resolve(parse_query(query))


def query_json(tree: SchemaTree, query: str) -> str:
    """
    Returns the node selected by ``query`` as a single line of JSON,
    including all of its children.
    """
    return json.dumps(query_node(tree, query).to_dict(), separators=(",", ":"))


def query_files(tree: SchemaTree, query: str, root: Optional[Path] = None) -> List[str]:
    """
    Returns the documents that contributed to the node selected by
    ``query``, relative to ``root`` when given.
    """
    files = set()
    for doc in query_node(tree, query).documents():
        if root is not None:
            try:
                doc = doc.relative_to(root)
            except ValueError:
                pass
        files.add(str(doc))
    return sorted(files)
