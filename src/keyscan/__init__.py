"""
Keyscan - Infer the key structure of a corpus of JSON documents.

Every document below a directory is walked into a schema tree recording,
for each key path, how often it occurs and which JSON value kinds were
found there. The per-document trees are merged into one tree that can be
listed or queried.
"""

from .errors import DocumentLoadError, KeyNotFoundError, KeyscanError, ParseError
from .query import parse_query
from .reader import KeyScanner, find_documents, load_document, scan_document
from .report import iter_keys, query_files, query_json, query_node
from .stats import TypeStats
from .tree import SchemaTree, merge_trees

__version__ = "0.1.0"

__all__ = [
    "KeyScanner",
    "SchemaTree",
    "TypeStats",
    "merge_trees",
    "parse_query",
    "find_documents",
    "load_document",
    "scan_document",
    "iter_keys",
    "query_node",
    "query_json",
    "query_files",
    "KeyscanError",
    "ParseError",
    "KeyNotFoundError",
    "DocumentLoadError",
    "__version__",
]
