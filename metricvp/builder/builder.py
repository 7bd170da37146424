"""
Constructeur de VP-trees.
Partitionne récursivement le jeu de données autour de points de vue tirés au
hasard et de la distance médiane à ces points.
"""

import math
import time
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np

from metricvp.core.select import select
from metricvp.core.tree import Distance, InnerNode, LeafNode, Node, VPTree
from metricvp.utils.config import ConfigManager
from metricvp.utils.distances import get_distance, get_metric_name

class _WorkItem:
    """Élément de travail transitoire: indice source et distance au point de vue courant."""

    __slots__ = ("index", "dist")

    def __init__(self, index: int):
        self.index = index
        self.dist = None

def _by_distance(a: _WorkItem, b: _WorkItem) -> bool:
    return a.dist < b.dist

def _recurse(S: Sequence, items: List[_WorkItem], distance: Distance, bucket_size: int,
             rng: np.random.Generator) -> Node:
    n = len(items)
    if n == 0:
        return None

    if bucket_size > 0 and n <= bucket_size:
        return LeafNode([item.index for item in items])

    vp = items.pop(int(rng.integers(n)))
    n -= 1
    node = InnerNode(vp.index)
    if n == 0:
        return node

    # Chaque distance au point de vue n'est calculée qu'une fois
    vp_element = S[vp.index]
    dmin, dmax = math.inf, -math.inf
    for item in items:
        dist = distance(vp_element, S[item.index])
        item.dist = dist
        if dist < dmin:
            dmin = dist
        if dist > dmax:
            dmax = dist

    median_index = n >> 1
    median = select(items, median_index, _by_distance)

    node.m = dmin
    node.M = dmax
    node.mu = median.dist
    node.left = _recurse(S, items[:median_index], distance, bucket_size, rng)
    node.right = _recurse(S, items[median_index:], distance, bucket_size, rng)
    return node

def build_tree(S: Union[int, Sequence], distance: Distance, bucket_size: Optional[int] = 0,
               rng: Optional[np.random.Generator] = None, seed: Optional[int] = None) -> VPTree:
    """
    Construit un VP-tree sur le jeu de données S.

    Args:
        S: Jeu de données indexable par position, ou un entier N (les éléments
           sont alors les indices 0..N-1)
        distance: Fonction de distance entre deux éléments de S
        bucket_size: Taille maximale des feuilles. 0 ou None = pas de feuilles
        rng: Générateur aléatoire utilisé pour tirer les points de vue
        seed: Graine d'un nouveau générateur si rng n'est pas fourni

    Returns:
        VPTree: Arbre construit (S est référencé, jamais modifié)
    """
    if isinstance(S, (int, np.integer)):
        if S < 0:
            raise ValueError(f"La taille du jeu de données doit être positive (S={S})")
        S = range(int(S))

    bucket_size = bucket_size or 0
    if bucket_size < 0:
        raise ValueError(f"bucket_size doit être positif ou nul (bucket_size={bucket_size})")

    if rng is None:
        rng = np.random.default_rng(seed)

    items = [_WorkItem(i) for i in range(len(S))]
    root = _recurse(S, items, distance, bucket_size, rng)
    return VPTree(S, distance, root)

def load_tree(S: Sequence, distance: Distance, tree: Node) -> VPTree:
    """
    Reconstruit un VPTree à partir d'une structure de nœuds déjà construite, sans la recalculer.

    Args:
        S: Jeu de données sur lequel l'arbre a été construit
        distance: Fonction de distance utilisée pour la construction
        tree: Nœud racine
    """
    return VPTree(S, distance, tree)

def build_from_config(
    S: Union[int, Sequence],
    config: Optional[Dict[str, Any]] = None,
    distance: Optional[Distance] = None,
    bucket_size: Optional[int] = None,
    seed: Optional[int] = None,
    verbose: bool = True
) -> VPTree:
    """
    Construit un VP-tree en complétant les paramètres manquants par la configuration.

    Args:
        S: Jeu de données ou taille
        config: Configuration personnalisée (facultatif, sinon utilise config.yaml)
        distance: Fonction de distance (facultatif, sinon la métrique nommée dans la configuration)
        bucket_size: Taille maximale des feuilles (facultatif)
        seed: Graine du tirage des points de vue (facultatif)
        verbose: Afficher les messages de progression

    Returns:
        VPTree: Arbre construit
    """
    if config is None:
        build_config = ConfigManager().get_section("build_tree")
    else:
        build_config = config.get("build_tree", {})

    metric = build_config.get("metric", "euclidean")
    distance = distance if distance is not None else get_distance(metric)
    bucket_size = bucket_size if bucket_size is not None else build_config.get("bucket_size", 0)
    seed = seed if seed is not None else build_config.get("seed")

    size = S if isinstance(S, (int, np.integer)) else len(S)
    if verbose:
        metric_desc = get_metric_name(distance) or getattr(distance, "__name__", "personnalisée")
        print(f"⏳ Construction du VP-tree sur {size:,} éléments "
              f"(bucket_size={bucket_size}, distance={metric_desc}, seed={seed})...")

    start_time = time.time()
    tree = build_tree(S, distance, bucket_size=bucket_size, seed=seed)
    elapsed = time.time() - start_time

    if verbose:
        print(f"✓ {tree} construit en {elapsed:.2f}s")

    return tree
