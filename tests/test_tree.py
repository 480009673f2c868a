import copy
from itertools import permutations
from pathlib import Path

import pytest

from keyscan import KeyNotFoundError, SchemaTree, merge_trees

DOCUMENTS = [
    {"a": {"b": 5, "c": [1, 2]}, "x": None},
    {"a": {"b": "five", "d": {"e": True}}, "y": []},
    {"a": 3, "x": 1.5, "z": [{"k": 1}, "v"]},
]


def single_trees():
    trees = []
    for i, document in enumerate(DOCUMENTS):
        tree = SchemaTree()
        tree.add_document(Path(f"doc{i}.json"), document)
        trees.append(tree)
    return trees


def observe(tree: SchemaTree) -> dict:
    """Reduce a tree to comparable counts."""
    result = {}
    for path, node in tree.walk():
        types = node.types
        result[path] = (
            node.count,
            types.null.count(),
            types.bool.count(),
            types.number.count(),
            types.string.count(),
            types.array.count(),
            types.object.count(),
            types.array.min_len,
            types.array.max_len,
        )
    return result


def test_add_document_counts(build_tree):
    tree = build_tree({"a": {"b": 5}})
    a = tree.keys["a"]
    assert a.count == 1
    assert a.types.object.count() == 1
    assert a.types.is_object()
    b = a.keys["b"]
    assert b.count == 1
    assert b.types.number.count() == 1
    assert b.types.summary() == "Num=1"


def test_root_stays_empty(build_tree):
    tree = build_tree({"a": 1}, {"b": 2})
    assert tree.count == 0
    assert tree.types.is_empty()


def test_non_object_documents_are_ignored(build_tree):
    tree = build_tree([1, 2], "text", 3, None)
    assert tree.keys == {}


def test_array_elements_do_not_create_keys(build_tree):
    tree = build_tree({"a": [{"b": 1}]})
    assert tree.keys["a"].keys == {}
    assert tree.keys["a"].types.array.items.object.count() == 1


def test_count_conservation(build_tree):
    tree = build_tree(*DOCUMENTS)
    assert tree.keys["a"].count == 3
    assert tree.keys["a"].keys["b"].count == 2
    assert tree.keys["a"].keys["d"].keys["e"].count == 1
    assert tree.keys["x"].count == 2
    assert tree.keys["y"].count == 1


def test_mixed_kinds_at_one_path(build_tree):
    tree = build_tree(*DOCUMENTS)
    a = tree.keys["a"].types
    assert a.object.count() == 2
    assert a.number.count() == 1
    assert a.type_count() == 1
    b = tree.keys["a"].keys["b"].types
    assert b.type_count() == 2


def test_merge_matches_single_walk(build_tree):
    expected = observe(build_tree(*DOCUMENTS))
    assert observe(merge_trees(single_trees())) == expected


def test_merge_identity():
    tree = merge_trees(single_trees())
    before = observe(tree)
    tree.merge(SchemaTree())
    assert observe(tree) == before

    empty = SchemaTree()
    empty.merge(merge_trees(single_trees()))
    assert observe(empty) == before


def test_merge_associative():
    a, b, c = single_trees()
    left = copy.deepcopy(a)
    ab = copy.deepcopy(a)
    ab.merge(copy.deepcopy(b))
    ab.merge(copy.deepcopy(c))

    bc = copy.deepcopy(b)
    bc.merge(copy.deepcopy(c))
    left.merge(bc)

    assert observe(ab) == observe(left)


def test_merge_order_independent():
    results = []
    for order in permutations(range(len(DOCUMENTS))):
        trees = single_trees()
        results.append(observe(merge_trees(trees[i] for i in order)))
    assert all(r == results[0] for r in results)


def test_merge_unions_document_sets():
    left = SchemaTree()
    left.add_document(Path("one.json"), {"k": 1})
    right = SchemaTree()
    right.add_document(Path("one.json"), {"k": 2})
    left.merge(right)
    assert left.keys["k"].count == 2
    assert left.keys["k"].types.number.count() == 1
    assert left.keys["k"].types.number.ints == {1, 2}


def test_resolve(build_tree):
    tree = build_tree({"a": {"b.b": {"c": 1}}})
    node = tree.resolve(["a", "b.b", "c"])
    assert node.types.number.count() == 1
    assert tree.resolve([]) is tree


def test_resolve_missing_first_key(build_tree):
    tree = build_tree({"a": 1})
    with pytest.raises(KeyNotFoundError) as excinfo:
        tree.resolve(["x", "y"])
    assert excinfo.value.segment == "x"


def test_resolve_missing_nested_key(build_tree):
    tree = build_tree({"x": {"z": 1}})
    with pytest.raises(KeyNotFoundError) as excinfo:
        tree.resolve(["x", "y"])
    assert excinfo.value.segment == "y"
    assert excinfo.value.path == ("x", "y")
    assert str(excinfo.value) == "Could not resolve key y"


def test_documents(build_tree):
    tree = build_tree({"a": [1]}, {"a": None}, {"b": 1})
    assert tree.keys["a"].documents() == {Path("doc0.json"), Path("doc1.json")}


def test_to_dict(build_tree):
    tree = build_tree({"a": {"b": True}})
    assert tree.keys["a"].to_dict() == {
        "count": 1,
        "types": {"object": {"files": ["doc0.json"]}},
        "keys": {
            "b": {
                "count": 1,
                "types": {"bool": {"true": ["doc0.json"], "false": []}},
                "keys": {},
            }
        },
    }
