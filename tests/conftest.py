import json
from pathlib import Path

import pytest

from keyscan import SchemaTree


@pytest.fixture
def write_corpus(tmp_path):
    """Write documents below tmp_path. str values are written as raw text."""
    def _write(documents: dict):
        for name, document in documents.items():
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(document, str):
                path.write_text(document)
            else:
                path.write_text(json.dumps(document))
        return tmp_path
    return _write


def walk_documents(*documents) -> SchemaTree:
    tree = SchemaTree()
    for i, document in enumerate(documents):
        tree.add_document(Path(f"doc{i}.json"), document)
    return tree


@pytest.fixture
def build_tree():
    """Walk documents into one tree, naming them doc0.json, doc1.json, ..."""
    return walk_documents
