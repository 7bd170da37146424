"""
Fonctions de distance nommées, utilisables depuis la configuration et la CLI.
"""

import math
from typing import Callable, Dict, Optional

import numpy as np

def euclidean(a, b) -> float:
    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    return float(np.sqrt(np.dot(diff, diff)))

def manhattan(a, b) -> float:
    return float(np.abs(np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)).sum())

def chebyshev(a, b) -> float:
    return float(np.abs(np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)).max())

def angular(a, b) -> float:
    """
    Angle entre deux vecteurs, en radians (distance métrique contrairement au cosinus).

    Deux vecteurs nuls sont à distance 0; un vecteur nul face à un vecteur non nul
    n'a pas d'angle défini.

    Raises:
        ValueError: Si un seul des deux vecteurs est nul
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        if norm_a == norm_b:
            return 0.0
        raise ValueError("angular: angle indéfini avec un vecteur nul")
    cos = np.dot(a, b) / (norm_a * norm_b)
    return float(math.acos(min(1.0, max(-1.0, cos))))

def absolute(a, b) -> float:
    """Distance entre deux scalaires."""
    return abs(a - b)

def hamming(a, b) -> int:
    """Nombre de positions différentes entre deux séquences de même longueur."""
    if len(a) != len(b):
        raise ValueError(f"hamming: longueurs différentes ({len(a)} != {len(b)})")
    return sum(x != y for x, y in zip(a, b))

DISTANCES: Dict[str, Callable] = {
    "euclidean": euclidean,
    "manhattan": manhattan,
    "chebyshev": chebyshev,
    "angular": angular,
    "absolute": absolute,
    "hamming": hamming,
}

# Équivalents scikit-learn pour le calcul exhaustif vectorisé
SKLEARN_METRICS: Dict[str, str] = {
    "euclidean": "euclidean",
    "manhattan": "manhattan",
    "chebyshev": "chebyshev",
}

def get_distance(name: str) -> Callable:
    """
    Retourne la fonction de distance associée à un nom.

    Raises:
        ValueError: Si le nom est inconnu
    """
    try:
        return DISTANCES[name]
    except KeyError:
        raise ValueError(f"Distance inconnue: '{name}' (disponibles: {', '.join(sorted(DISTANCES))})") from None

def get_metric_name(distance: Callable) -> Optional[str]:
    """Nom d'une fonction de distance enregistrée, None si elle n'est pas connue."""
    for name, func in DISTANCES.items():
        if func is distance:
            return name
    return None
