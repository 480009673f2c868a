import logging
import os
import sys
from concurrent.futures import ProcessPoolExecutor
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Tuple

import ijson
from rich.console import Console
from rich.markup import escape
from tqdm import tqdm

from .errors import DocumentLoadError
from .tree import SchemaTree

logger = logging.getLogger(__name__)

console = Console(stderr=True)

DEFAULT_EXTENSIONS = (".json",)

# Same nesting limit as serde_json, deeper documents are rejected
MAX_DEPTH = 128


def normalize_extensions(extensions: Iterable[str]) -> tuple:
    """Make sure every extension carries its leading dot."""
    return tuple(ext if ext.startswith(".") else f".{ext}" for ext in extensions)


def find_documents(root: str | Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> List[Path]:
    """
    Returns every regular file below ``root`` whose suffix is one of
    ``extensions``.
    """
    root = Path(root)
    if not root.exists():
        raise FileNotFoundError(f"Directory not found: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    extensions = normalize_extensions(extensions)
    return sorted(p for p in root.rglob("*") if p.suffix in extensions and p.is_file())


def nesting_depth(value: Any) -> int:
    """Number of nested arrays and objects, 0 for a scalar."""
    depth = 0
    stack = [(value, 1)]
    while stack:
        value, level = stack.pop()
        if isinstance(value, dict):
            children = value.values()
        elif isinstance(value, list):
            children = value
        else:
            continue
        depth = max(depth, level)
        stack.extend((child, level + 1) for child in children)
    return depth

def load_document(path: Path) -> Any:
    """
    Parses a single JSON document.

    The whole file must hold exactly one JSON value. Integral numbers come
    back as int, all others as float.
    Documents nested deeper than MAX_DEPTH are rejected.
    """
    try:
        with open(path, "rb") as f:
            # Consume the full stream so trailing data is reported
            values = list(ijson.items(f, "", use_float=True))
    except (OSError, UnicodeDecodeError, RecursionError, ijson.JSONError) as e:
        raise DocumentLoadError(f"Could not load {path}: {e}") from e

    if len(values) != 1:
        raise DocumentLoadError(f"Could not load {path}: expected one JSON value, found {len(values)}")
    if nesting_depth(values[0]) > MAX_DEPTH:
        raise DocumentLoadError(f"Could not load {path}: nested deeper than {MAX_DEPTH} levels")
    return values[0]


def _scan(path: Path) -> Tuple[Optional[SchemaTree], Optional[str]]:
    """Returns the tree of a document, or None and the reason it was skipped."""
    try:
        document = load_document(path)
    except DocumentLoadError as e:
        return None, str(e)

    tree = SchemaTree()
    tree.add_document(path, document)
    return tree, None


def scan_document(path: Path) -> Optional[SchemaTree]:
    """
    Builds the schema tree of a single document.

    Returns None if the document can't be loaded; it is then left out of
    the aggregate.
    """
    return _scan(path)[0]


class KeyScanner:
    """
    Scans every JSON document below a directory into one merged schema tree.

    Documents are parsed in parallel by a process pool, each into its own
    tree; the trees are then folded into one.
    """

    def __init__(
        self,
        root: str | Path,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        workers: Optional[int] = None,
        progress: bool = True,
    ):
        self.root = Path(root)
        self.extensions = normalize_extensions(extensions)
        self.workers = workers if workers is not None else (os.cpu_count() or 1)
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        self.progress = progress

        self.file_paths = find_documents(self.root, self.extensions)
        self._tree: Optional[SchemaTree] = None

    def _get_tree_generator(self) -> Iterator[Tuple[Optional[SchemaTree], Optional[str]]]:
        """
        Yields one (tree, skip reason) pair per document, in file order.
        """
        if self.workers == 1 or len(self.file_paths) < 2:
            yield from map(_scan, self.file_paths)
            return

        chunksize = max(1, len(self.file_paths) // (self.workers * 4))
        with ProcessPoolExecutor(max_workers=self.workers) as executor:
            yield from executor.map(_scan, self.file_paths, chunksize=chunksize)

    def scan(self) -> SchemaTree:
        """
        Scans all documents and returns the merged tree.
        """
        logger.debug("Scanning %d files below %s with %d workers",
                     len(self.file_paths), self.root, self.workers)

        # tqdm only draws on a terminal, the status line follows it
        show_progress = self.progress and sys.stderr.isatty()
        if show_progress:
            console.print(f"[bold blue]Scanning {len(self.file_paths)} files below {escape(str(self.root))}...[/bold blue]")

        tree = SchemaTree()
        skipped = 0
        results = tqdm(
            self._get_tree_generator(),
            total=len(self.file_paths),
            desc="Scanning documents",
            unit=" files",
            disable=not show_progress,
        )
        for sub_tree, reason in results:
            if sub_tree is None:
                logger.debug("Skipping document: %s", reason)
                skipped += 1
                continue
            tree.merge(sub_tree)

        logger.debug("Merged %d documents, skipped %d",
                     len(self.file_paths) - skipped, skipped)
        self._tree = tree
        return tree

    @property
    def tree(self) -> SchemaTree:
        """The merged tree, scanning on first access."""
        if self._tree is None:
            self.scan()
        return self._tree
