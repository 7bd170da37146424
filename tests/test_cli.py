#!/usr/bin/env python3
"""
Tests de bout en bout de l'interface en ligne de commande.
"""

import os
import sys
import tempfile

import numpy as np
import pytest

from metricvp.builder.builder import build_tree
from metricvp.cli import main as cli_main
from metricvp.utils import cli_test
from metricvp.utils.distances import euclidean

CONFIG = """\
build_tree:
  bucket_size: 4
  metric: euclidean
  seed: 7
search:
  limit: 5
  queries: 10
  n_jobs: 1
  use_faiss: false
"""

def _run_workflow(tmp_dir):
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        f.write(CONFIG)
    vectors_path = os.path.join(tmp_dir, "vectors.bin")
    tree_path = os.path.join(tmp_dir, "tree.vpt")

    assert cli_main(["--config", config_path, "generate", vectors_path, "--n", "300", "--dims", "4", "--seed", "1"]) == 0
    assert os.path.exists(vectors_path)

    assert cli_main(["--config", config_path, "build", vectors_path, tree_path]) == 0
    with open(tree_path, encoding="utf-8") as f:
        assert f.read().startswith("{i:")
    assert os.path.exists(os.path.join(tmp_dir, "tree.stats.txt"))

    assert cli_main(["--config", config_path, "test", vectors_path, "--queries", "8", "--k", "3"]) == 0
    assert cli_main(["--config", config_path, "test", vectors_path, "--queries", "8", "--metric", "manhattan",
                     "--n_jobs", "2"]) == 0
    assert cli_main(["--config", config_path, "test", vectors_path, "--queries", "5", "--no-faiss"]) == 0

    assert cli_main(["--config", config_path, "search", vectors_path, "--index", "3", "--k", "3"]) == 0
    assert cli_main(["--config", config_path, "search", vectors_path, "--vector", "0,0,0,0", "--max_distance", "1.5"]) == 0

    # Erreurs signalées par le code de retour
    assert cli_main(["--config", config_path, "search", vectors_path, "--index", "5000"]) == 1
    assert cli_main(["--config", config_path, "search", vectors_path, "--vector", "0,0"]) == 1
    assert cli_main(["--config", config_path, "build", vectors_path, tree_path, "--metric", "inconnue"]) == 1
    assert cli_main(["--config", config_path, "build", os.path.join(tmp_dir, "absent.bin"), tree_path]) == 1

def test_cli_workflow():
    with tempfile.TemporaryDirectory() as tmp_dir:
        _run_workflow(tmp_dir)
    print("✓ Commandes generate, build, test et search OK")

def _faiss_choices(monkeypatch, tmp_dir, use_faiss_config, extra_args):
    """Valeurs de use_faiss reçues par le Searcher de la commande test."""
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        f.write(CONFIG.replace("use_faiss: false", f"use_faiss: {use_faiss_config}"))
    vectors_path = os.path.join(tmp_dir, "vectors.bin")
    assert cli_main(["--config", config_path, "generate", vectors_path, "--n", "100", "--dims", "3"]) == 0

    choices = []
    searcher_class = cli_test.Searcher

    def recording_searcher(tree, use_faiss=True, metric=None):
        choices.append(use_faiss)
        return searcher_class(tree, use_faiss=use_faiss, metric=metric)

    monkeypatch.setattr(cli_test, "Searcher", recording_searcher)
    assert cli_main(["--config", config_path, "test", vectors_path, "--queries", "3"] + extra_args) == 0
    return choices

def test_faiss_follows_config_unless_disabled(monkeypatch, tmp_path):
    assert _faiss_choices(monkeypatch, str(tmp_path), "true", []) == [True]
    assert _faiss_choices(monkeypatch, str(tmp_path), "true", ["--no-faiss"]) == [False]
    assert _faiss_choices(monkeypatch, str(tmp_path), "false", []) == [False]

def test_use_faiss_flag_is_rejected(tmp_path):
    with pytest.raises(SystemExit):
        cli_main(["test", str(tmp_path / "vectors.bin"), "--use_faiss"])

def test_compare_batch_search_reports_timings():
    points = np.random.default_rng(3).random((200, 3))
    tree = build_tree(points, euclidean, bucket_size=4, seed=5)
    timings = cli_test.compare_batch_search(tree, points[:10], 4, None, 2)
    assert set(timings) == {"sequential_time", "batch_time", "speedup"}
    assert timings["sequential_time"] >= 0 and timings["batch_time"] >= 0

def test_compare_batch_search_detects_mismatch(monkeypatch):
    points = np.random.default_rng(4).random((50, 2))
    tree = build_tree(points, euclidean, seed=1)
    monkeypatch.setattr(cli_test, "search_batch", lambda *args, **kwargs: [[] for _ in range(5)])
    with pytest.raises(RuntimeError):
        cli_test.compare_batch_search(tree, points[:5], 3, None, 2)

def test_cli_without_command_prints_help(capsys):
    assert cli_main([]) == 0
    assert "usage" in capsys.readouterr().out

def main():
    print("=== Tests de la CLI ===")
    test_cli_workflow()
    assert cli_main([]) == 0
    print("\n✅ TOUS LES TESTS ONT RÉUSSI")
    return 0

if __name__ == "__main__":
    sys.exit(main())
