#!/usr/bin/env python3
"""
Example script demonstrating basic usage of the keyscan library.

Run from the project root after installing the package:
    python examples/main.py data/
"""

from keyscan import KeyScanner, iter_keys, query_json
import sys

def main():
    root = "data"
    if len(sys.argv) > 1:
        root = sys.argv[1]

    print(f"Scanning {root}...")
    scanner = KeyScanner(root)
    print(f"Found {len(scanner.file_paths)} documents.")

    # Keys holding more than one kind of value
    print("Keys with mixed types:")
    for line in iter_keys(scanner.tree, type_count=2):
        print(line)

    # Drill into a single key
    # print(query_json(scanner.tree, '.metadata."content.type"'))
    # Keys containing a double quote can't be written as a query
    top_level = sorted(k for k in scanner.tree.keys if '"' not in k)
    if top_level:
        print(query_json(scanner.tree, f'."{top_level[0]}"'))


if __name__ == '__main__':
    main()
