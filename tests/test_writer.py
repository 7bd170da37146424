#!/usr/bin/env python3
"""
Tests de la sérialisation textuelle et des fichiers de vecteurs.
"""

import math
import os
import re
import sys
import tempfile

import numpy as np
import pytest

from metricvp.builder.builder import build_tree
from metricvp.core.tree import InnerNode, LeafNode
from metricvp.io.reader import read_vectors
from metricvp.io.writer import stringify, write_tree, write_vectors

NODE_RE = re.compile(r"i:(\d+)")
BUCKET_RE = re.compile(r"\[([\d,]+)\]")

def test_stringify_handmade_tree():
    tree = InnerNode(0, 1, 3, 2, left=LeafNode([1]), right=InnerNode(2))
    assert stringify(tree) == "{i:0,m:1,M:3,mu:2,L:[1],R:{i:2}}"

def test_stringify_omits_empty_children_and_formats_numbers():
    tree = InnerNode(4, 0.5, 2.25, 1.0, left=None, right=InnerNode(1, 0.1, 0.1, 0.1, right=LeafNode([3, 0])))
    assert stringify(tree) == "{i:4,m:0.5,M:2.25,mu:1,R:{i:1,m:0.1,M:0.1,mu:0.1,R:[3,0]}}"
    assert stringify(InnerNode(0, 0, math.inf, 1)) == "{i:0,m:0,M:Infinity,mu:1}"

def test_stringify_roots():
    assert stringify(None) == "null"
    assert stringify(LeafNode([0, 1, 2])) == "[0,1,2]"
    # Bucket plus grand que le jeu de données: la racine est une feuille
    tree = build_tree(3, lambda a, b: abs(a - b), bucket_size=10)
    assert tree.stringify() == "[0,1,2]"

def test_stringify_built_tree_lists_every_index():
    for bucket_size in [0, 3]:
        tree = build_tree(40, lambda a, b: abs(a - b), bucket_size, seed=bucket_size)
        text = tree.stringify()
        assert text == stringify(tree.tree)
        indices = [int(i) for i in NODE_RE.findall(text)]
        for bucket in BUCKET_RE.findall(text):
            indices.extend(int(i) for i in bucket.split(","))
        assert sorted(indices) == list(range(40))
        assert "None" not in text and '"' not in text

def test_stringify_sub_node():
    tree = build_tree(20, lambda a, b: abs(a - b), 0, seed=1)
    assert tree.stringify(tree.tree.left) == stringify(tree.tree.left)

def test_write_tree():
    tree = build_tree(25, lambda a, b: abs(a - b), 4, seed=2)
    with tempfile.TemporaryDirectory() as tmp_dir:
        path = write_tree(tree, os.path.join(tmp_dir, "trees", "tree.vpt"))
        with open(path, encoding="utf-8") as f:
            assert f.read() == tree.stringify() + "\n"

def test_vector_io():
    vectors = np.random.default_rng(0).standard_normal((50, 8)).astype(np.float32)
    with tempfile.TemporaryDirectory() as tmp_dir:
        path = os.path.join(tmp_dir, "vectors.bin")
        write_vectors(vectors, path)
        loaded = read_vectors(path)
        np.testing.assert_array_equal(loaded, vectors)
        assert read_vectors(path, limit=10, verbose=False).shape == (10, 8)

        with open(path, "r+b") as f:
            f.truncate(100)
        with pytest.raises(ValueError):
            read_vectors(path)
    print("✓ Lecture/écriture de vecteurs OK")

def main():
    print("=== Tests de sérialisation ===")
    for name, func in sorted(globals().items()):
        if name.startswith("test_") and callable(func):
            func()
    print("\n✅ TOUS LES TESTS ONT RÉUSSI")
    return 0

if __name__ == "__main__":
    sys.exit(main())
