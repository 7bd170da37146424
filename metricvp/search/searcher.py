"""
Module de recherche pour metricvp.
Parcours en profondeur avec élagage par bornes de distance (branch-and-bound),
recherche par lots et recherche exhaustive de référence.
"""

import math
from typing import Any, Callable, List, Optional, Sequence, Tuple

from joblib import Parallel, delayed

from metricvp.core.queue import PriorityQueue, SearchResult
from metricvp.core.tree import Distance, LeafNode, Node, VPTree

Filter = Callable[[Any], bool]

def search(tree: VPTree, q: Any, limit: Optional[int] = None, max_distance: Optional[float] = None,
           distance: Optional[Distance] = None, filter_fn: Optional[Filter] = None) -> Tuple[List[SearchResult], int]:
    """
    Recherche les plus proches voisins de q dans l'arbre.

    Args:
        tree: VP-tree construit
        q: Requête, tout objet compatible avec la fonction de distance
        limit: Nombre maximal de résultats (None ou 0 = pas de limite)
        max_distance: Distance maximale acceptée (None = infinie)
        distance: Fonction de distance remplaçant celle de l'arbre pour cette requête
        filter_fn: Prédicat sur les éléments; les éléments refusés sont exclus des
                   résultats sans modifier l'élagage

    Returns:
        Tuple[List[SearchResult], int]: Résultats triés par distance croissante et
        nombre de distances calculées
    """
    tau = math.inf if max_distance is None else max_distance
    W = PriorityQueue(limit)
    S = tree.S
    distance = distance or tree.distance
    comparisons = 0

    def offer(index: int, element: Any, dist: float) -> None:
        nonlocal tau
        if filter_fn is None or filter_fn(element):
            worst = W.insert(index, dist)
            if worst is not None:
                tau = worst

    def do_search(node: Node) -> None:
        nonlocal comparisons
        if node is None:
            return

        # Feuille: tester chaque élément du bucket
        if isinstance(node, LeafNode):
            for index in node.indices:
                comparisons += 1
                element = S[index]
                dist = distance(q, element)
                if dist < tau:
                    offer(index, element, dist)
            return

        element = S[node.index]
        dist = distance(q, element)
        comparisons += 1
        if dist < tau:
            offer(node.index, element, dist)

        if node.mu is None:
            return

        # Explorer d'abord le côté où tombe la requête: tau diminue plus vite.
        # L si dist est dans (m - tau, mu + tau), R si dist est dans (mu - tau, M + tau)
        mu = node.mu
        if dist < mu:
            if node.left is not None and node.m - tau < dist:
                do_search(node.left)
            if node.right is not None and mu - tau < dist:
                do_search(node.right)
        else:
            if node.right is not None and dist < node.M + tau:
                do_search(node.right)
            if node.left is not None and dist < mu + tau:
                do_search(node.left)

    do_search(tree.tree)
    return W.list(), comparisons

def search_batch(tree: VPTree, queries: Sequence, limit: Optional[int] = None, max_distance: Optional[float] = None,
                 distance: Optional[Distance] = None, filter_fn: Optional[Filter] = None,
                 n_jobs: int = 1) -> List[List[SearchResult]]:
    """
    Recherche indépendante pour chaque requête, éventuellement en parallèle.

    L'arbre n'est jamais modifié par une recherche: les requêtes sont réparties
    sur des threads sans verrou.

    Returns:
        List[List[SearchResult]]: Résultats dans l'ordre des requêtes
    """
    outputs = Parallel(n_jobs=n_jobs, prefer="threads")(
        delayed(search)(tree, q, limit, max_distance, distance, filter_fn) for q in queries
    )
    return [results for results, _ in outputs]

def brute_force_search(S: Sequence, q: Any, distance: Distance, limit: Optional[int] = None,
                       max_distance: Optional[float] = None) -> List[SearchResult]:
    """Recherche exhaustive de référence, mêmes conventions que search()."""
    tau = math.inf if max_distance is None else max_distance
    W = PriorityQueue(limit)
    for index in range(len(S)):
        dist = distance(q, S[index])
        if dist < tau:
            W.insert(index, dist)
    return W.list()
