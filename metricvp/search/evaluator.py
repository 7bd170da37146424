"""
Module d'évaluation pour metricvp.
Compare la recherche dans le VP-tree à une recherche exhaustive (FAISS,
scikit-learn ou Python) et mesure recall, élagage et accélération.
"""

import math
import time
from typing import Any, Dict, List, Optional, Sequence

import faiss
import numpy as np
from tqdm.auto import tqdm

from metricvp.core.tree import VPTree
from metricvp.search.searcher import brute_force_search
from metricvp.utils.distances import SKLEARN_METRICS, get_metric_name

class Searcher:
    """
    Outil d'évaluation: compare la recherche dans le VP-tree à une recherche exhaustive.
    """

    def __init__(self, tree: VPTree, use_faiss: bool = True, metric: Optional[str] = None):
        """
        Args:
            tree: VP-tree à évaluer
            use_faiss: Utiliser FAISS pour la recherche exhaustive euclidienne
            metric: Nom de la métrique de l'arbre (déduit de tree.distance si None)
        """
        self.tree = tree
        self.metric = metric or get_metric_name(tree.distance)
        self.use_faiss = use_faiss
        self._data = None
        self._faiss_index = None

        # Même précision que les fonctions de distance (float64)
        if isinstance(tree.S, np.ndarray) and tree.S.ndim == 2:
            self._data = np.asarray(tree.S, dtype=np.float64)

    def _faiss(self):
        if self._faiss_index is None:
            self._faiss_index = faiss.IndexFlatL2(self._data.shape[1])
            self._faiss_index.add(np.ascontiguousarray(self._data, dtype=np.float32))
        return self._faiss_index

    def brute_force_batch(self, queries: Sequence, k: int, max_distance: Optional[float] = None) -> List[List[int]]:
        """
        Indices des k plus proches voisins exacts de chaque requête.

        FAISS (distance L2 en float32, approchée près du rayon) pour les données
        vectorielles euclidiennes, scikit-learn pour les autres métriques
        vectorielles connues, recherche exhaustive Python sinon. Les candidats
        retenus par scikit-learn sont revérifiés avec la distance de l'arbre: le
        résultat est identique à brute_force_search().
        """
        limit = k or len(self.tree.S)
        tau = math.inf if max_distance is None else max_distance

        if self._data is not None and self.metric == "euclidean" and self.use_faiss:
            queries_f32 = np.ascontiguousarray(np.atleast_2d(queries), dtype=np.float32)
            sq_dists, labels = self._faiss().search(queries_f32, min(limit, len(self._data)))
            dists = np.sqrt(np.maximum(sq_dists, 0))
            return [[int(i) for i, d in zip(row_labels, row_dists) if i >= 0 and d < tau]
                    for row_labels, row_dists in zip(labels, dists)]

        if self._data is not None and self.metric in SKLEARN_METRICS:
            from sklearn.metrics import pairwise_distances

            queries_f64 = np.atleast_2d(np.asarray(queries, dtype=np.float64))
            dists = pairwise_distances(queries_f64, self._data, metric=SKLEARN_METRICS[self.metric])
            results = []
            for q, row in zip(queries, dists):
                if limit < len(row):
                    cutoff = min(np.partition(row, limit - 1)[limit - 1], tau)
                else:
                    cutoff = min(row.max(), tau)
                # Marge pour les écarts d'arrondi entre scikit-learn et la distance de l'arbre
                candidates = np.nonzero(row <= cutoff + 1e-9 * max(1.0, abs(cutoff)))[0]
                exact = sorted((self.tree.distance(q, self.tree.S[i]), int(i)) for i in candidates)
                results.append([i for d, i in exact[:limit] if d < tau])
            return results

        return [[r.index for r in brute_force_search(self.tree.S, q, self.tree.distance, limit, max_distance)]
                for q in queries]

    def evaluate_search(self, queries: Sequence, k: int = 10, max_distance: Optional[float] = None) -> Dict[str, Any]:
        """
        Évalue la recherche dans l'arbre face à la recherche exhaustive.

        Args:
            queries: Requêtes
            k: Nombre de voisins à retourner
            max_distance: Distance maximale acceptée

        Returns:
            Dict[str, Any]: Dictionnaire de métriques de performance
        """
        n_queries = len(queries)
        size = len(self.tree.S)
        print(f"\n⏳ Évaluation avec {n_queries} requêtes, k={k}, max_distance={max_distance}...")

        tree_search_time = 0.0
        recall_sum = 0.0
        comparisons = []
        tree_results = []

        for query in tqdm(queries, desc="Recherche VP-tree"):
            start_time = time.time()
            results = self.tree.search(query, k, max_distance)
            tree_search_time += time.time() - start_time
            comparisons.append(self.tree.comparisons)
            tree_results.append([r.index for r in results])

        start_time = time.time()
        naive_results = self.brute_force_batch(queries, k, max_distance)
        naive_search_time = time.time() - start_time

        for found, expected in zip(tree_results, naive_results):
            if expected:
                recall_sum += len(set(found).intersection(expected)) / len(expected)
            else:
                recall_sum += 1.0

        avg_tree_time = tree_search_time / n_queries if n_queries else 0
        avg_naive_time = naive_search_time / n_queries if n_queries else 0
        avg_recall = recall_sum / n_queries if n_queries else 0
        avg_comparisons = sum(comparisons) / n_queries if n_queries else 0
        pruning = 1 - avg_comparisons / size if size else 0
        speedup = avg_naive_time / avg_tree_time if avg_tree_time > 0 else 0

        print("\n✓ Résultats de l'évaluation:")
        print(f"  - Nombre de requêtes       : {n_queries}")
        print(f"  - k (voisins demandés)     : {k}")
        print(f"  - Distances calculées (moy): {avg_comparisons:.1f} / {size}")
        print(f"  - Élagage                  : {pruning*100:.2f}%")
        print(f"  - Temps moyen (arbre)      : {avg_tree_time*1000:.2f} ms")
        print(f"  - Temps moyen (naïf)       : {avg_naive_time*1000:.2f} ms")
        print(f"  - Accélération             : {speedup:.2f}x")
        print(f"  - Recall moyen             : {avg_recall:.4f} ({avg_recall*100:.2f}%)")

        return {
            "avg_tree_time": avg_tree_time,
            "avg_naive_time": avg_naive_time,
            "speedup": speedup,
            "avg_recall": avg_recall,
            "avg_comparisons": avg_comparisons,
            "min_comparisons": min(comparisons) if comparisons else 0,
            "max_comparisons": max(comparisons) if comparisons else 0,
            "pruning": pruning,
        }
