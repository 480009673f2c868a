"""
Per-path type statistics.

Every key path in a schema tree carries one TypeStats. It records, for each
JSON value kind, the set of documents in which that kind was observed at
the path, plus a few kind specific extras (distinct numbers, array length
bounds and the element types of arrays).
"""

import struct
from dataclasses import dataclass, field
from itertools import chain
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Set

# Documents are identified by their path. The scanner creates one Path per
# file and every accumulator references that same object.
DocumentId = Path
DocumentSet = Set[DocumentId]


def float_bits(value: float) -> int:
    """Return the IEEE-754 bit pattern of a float as an unsigned integer."""
    return struct.unpack("<Q", struct.pack("<d", value))[0]


def bits_to_float(bits: int) -> float:
    return struct.unpack("<d", struct.pack("<Q", bits))[0]


def _sorted_files(files) -> List[str]:
    return sorted(str(f) for f in files)


@dataclass
class NullStats:
    files: DocumentSet = field(default_factory=set)

    def merge(self, other: "NullStats"):
        self.files |= other.files

    def is_empty(self) -> bool:
        return not self.files

    def count(self) -> int:
        return len(self.files)

    def documents(self) -> Iterator[DocumentId]:
        return iter(self.files)

    def to_dict(self) -> Dict[str, Any]:
        return {"files": _sorted_files(self.files)}


@dataclass
class BoolStats:
    true: DocumentSet = field(default_factory=set)
    false: DocumentSet = field(default_factory=set)

    def add(self, doc: DocumentId, value: bool):
        if value:
            self.true.add(doc)
        else:
            self.false.add(doc)

    def merge(self, other: "BoolStats"):
        self.true |= other.true
        self.false |= other.false

    def is_empty(self) -> bool:
        return not self.true and not self.false

    def count(self) -> int:
        """Number of documents holding a boolean here, either value."""
        return len(self.true | self.false)

    def documents(self) -> Iterator[DocumentId]:
        return chain(self.true, self.false)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "true": _sorted_files(self.true),
            "false": _sorted_files(self.false),
        }


@dataclass
class NumberStats:
    files: DocumentSet = field(default_factory=set)
    ints: Set[int] = field(default_factory=set)
    # Floats are kept as bit patterns, ints and floats are never normalized
    float_bits: Set[int] = field(default_factory=set)

    def add(self, doc: DocumentId, value):
        self.files.add(doc)
        if isinstance(value, int):
            self.ints.add(value)
        else:
            self.float_bits.add(float_bits(float(value)))

    def merge(self, other: "NumberStats"):
        self.files |= other.files
        self.ints |= other.ints
        self.float_bits |= other.float_bits

    def floats(self) -> Set[float]:
        return {bits_to_float(b) for b in self.float_bits}

    def is_empty(self) -> bool:
        return not self.files

    def count(self) -> int:
        return len(self.files)

    def documents(self) -> Iterator[DocumentId]:
        return iter(self.files)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files": _sorted_files(self.files),
            "int": sorted(self.ints),
            "float": sorted(self.float_bits),
        }


@dataclass
class StringStats:
    files: DocumentSet = field(default_factory=set)

    def merge(self, other: "StringStats"):
        self.files |= other.files

    def is_empty(self) -> bool:
        return not self.files

    def count(self) -> int:
        return len(self.files)

    def documents(self) -> Iterator[DocumentId]:
        return iter(self.files)

    def to_dict(self) -> Dict[str, Any]:
        return {"files": _sorted_files(self.files)}


@dataclass
class ArrayStats:
    """
    Arrays observed at a path.

    Elements are flattened: every element of every array at this path is
    folded into a single nested TypeStats, regardless of its index.
    min_len/max_len stay None until the first array is seen.
    """
    files: DocumentSet = field(default_factory=set)
    min_len: Optional[int] = None
    max_len: Optional[int] = None
    items: Optional["TypeStats"] = None

    def _get_items(self) -> "TypeStats":
        if self.items is None:
            self.items = TypeStats()
        return self.items

    def add(self, doc: DocumentId, values: list):
        self.files.add(doc)
        length = len(values)
        if self.min_len is None or length < self.min_len:
            self.min_len = length
        if self.max_len is None or length > self.max_len:
            self.max_len = length
        for value in values:
            self._get_items().add(doc, value)

    def merge(self, other: "ArrayStats"):
        self.files |= other.files
        if other.min_len is not None:
            self.min_len = other.min_len if self.min_len is None else min(self.min_len, other.min_len)
        if other.max_len is not None:
            self.max_len = other.max_len if self.max_len is None else max(self.max_len, other.max_len)
        if other.items is not None:
            self._get_items().merge(other.items)

    def is_empty(self) -> bool:
        return not self.files

    def count(self) -> int:
        return len(self.files)

    def documents(self) -> Iterator[DocumentId]:
        if self.items is None:
            return iter(self.files)
        return chain(self.files, self.items.documents())

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "files": _sorted_files(self.files),
            "min_len": self.min_len,
            "max_len": self.max_len,
        }
        if self.items is not None:
            result["items"] = self.items.to_dict()
        return result

    def summary(self) -> str:
        inner = self.items.summary() if self.items is not None else ""
        if inner:
            return f"[ {inner} ]={self.count()}"
        return f"[ ]={self.count()}"


@dataclass
class ObjectStats:
    """Objects observed at a path. Their fields live in the tree, not here."""
    files: DocumentSet = field(default_factory=set)

    def merge(self, other: "ObjectStats"):
        self.files |= other.files

    def is_empty(self) -> bool:
        return not self.files

    def count(self) -> int:
        return len(self.files)

    def documents(self) -> Iterator[DocumentId]:
        return iter(self.files)

    def to_dict(self) -> Dict[str, Any]:
        return {"files": _sorted_files(self.files)}


@dataclass
class TypeStats:
    """Union of the value kinds seen at one key path."""
    null: NullStats = field(default_factory=NullStats)
    bool: BoolStats = field(default_factory=BoolStats)
    number: NumberStats = field(default_factory=NumberStats)
    string: StringStats = field(default_factory=StringStats)
    array: ArrayStats = field(default_factory=ArrayStats)
    object: ObjectStats = field(default_factory=ObjectStats)

    def add(self, doc: DocumentId, value: Any):
        """Record one observed JSON value."""
        # bool must be checked before int, it is a subclass
        if value is None:
            self.null.files.add(doc)
        elif isinstance(value, bool):
            self.bool.add(doc, value)
        elif isinstance(value, (int, float)):
            self.number.add(doc, value)
        elif isinstance(value, str):
            self.string.files.add(doc)
        elif isinstance(value, list):
            self.array.add(doc, value)
        elif isinstance(value, dict):
            self.object.files.add(doc)
        else:
            raise TypeError(f"Not a JSON value: {type(value).__name__}")

    def merge(self, other: "TypeStats"):
        self.null.merge(other.null)
        self.bool.merge(other.bool)
        self.number.merge(other.number)
        self.string.merge(other.string)
        self.array.merge(other.array)
        self.object.merge(other.object)

    def _scalar_kinds(self):
        return (self.null, self.bool, self.number, self.string, self.array)

    def is_empty(self) -> bool:
        return self.is_object() and self.object.is_empty()

    def is_object(self) -> bool:
        """True if nothing but objects (or nothing at all) was seen here."""
        return all(kind.is_empty() for kind in self._scalar_kinds())

    def type_count(self) -> int:
        """Number of distinct non-object kinds seen here."""
        return sum(not kind.is_empty() for kind in self._scalar_kinds())

    def count(self) -> int:
        return sum(kind.count() for kind in (*self._scalar_kinds(), self.object))

    def documents(self) -> Iterator[DocumentId]:
        return chain.from_iterable(
            kind.documents() for kind in (*self._scalar_kinds(), self.object)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the non-empty kinds."""
        names = ("null", "bool", "number", "string", "array", "object")
        return {
            name: getattr(self, name).to_dict()
            for name in names
            if not getattr(self, name).is_empty()
        }

    def summary(self) -> str:
        """Compact one-line summary, e.g. ``N=1 Num=3 [ Str=2 ]=2``."""
        parts = []
        if not self.null.is_empty():
            parts.append(f"N={self.null.count()}")
        if not self.bool.is_empty():
            parts.append(f"B={self.bool.count()}")
        if not self.number.is_empty():
            parts.append(f"Num={self.number.count()}")
        if not self.string.is_empty():
            parts.append(f"Str={self.string.count()}")
        if not self.array.is_empty():
            parts.append(self.array.summary())
        if not self.object.is_empty():
            parts.append(f"{{}}={self.object.count()}")
        return " ".join(parts)
