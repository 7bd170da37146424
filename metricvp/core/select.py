"""
Module de sélection pour metricvp.
Implémente l'algorithme quickselect (nth_element) utilisé pour trouver la
distance médiane lors de la construction de l'arbre.
"""

import operator
from typing import Any, Callable, MutableSequence

Comparator = Callable[[Any, Any], bool]

class OutOfRangeError(ValueError):
    """Rang demandé hors de l'intervalle valide."""

def partition(items: MutableSequence, left: int, right: int, pivot_index: int, comp: Comparator) -> int:
    """
    Partitionne items[left:right+1] autour de l'élément d'indice pivot_index.

    Returns:
        int: Position finale du pivot
    """
    pivot_value = items[pivot_index]
    # Pivot en fin de plage
    items[pivot_index], items[right] = items[right], items[pivot_index]
    store_index = left
    for i in range(left, right):
        if comp(items[i], pivot_value):
            items[store_index], items[i] = items[i], items[store_index]
            store_index += 1
    items[right], items[store_index] = items[store_index], items[right]
    return store_index

def median_of_3(items: MutableSequence, a: int, b: int, c: int, comp: Comparator) -> int:
    """Indice de la médiane des éléments a, b et c selon comp."""
    A, B, C = items[a], items[b], items[c]
    if comp(A, B):
        if comp(B, C):
            return b
        return c if comp(A, C) else a
    if comp(A, C):
        return a
    return c if comp(B, C) else b

def nth_element(items: MutableSequence, left: int, nth: int, right: int, comp: Comparator = operator.lt) -> Any:
    """
    Trouve le nth plus petit élément de la plage [left, right] (bornes incluses).

    Tous les éléments plus petits sont déplacés à sa gauche (sans ordre
    particulier), tous les plus grands à sa droite.

    Args:
        items: Séquence modifiable à partitionner sur place
        left: Indice du premier élément de la plage
        nth: Rang recherché, dans [1, right-left+1]
        right: Indice du dernier élément de la plage (inclus)
        comp: Comparateur strict, comp(a, b) est vrai si a < b

    Returns:
        L'élément de rang nth

    Raises:
        OutOfRangeError: Si nth est hors de [1, right-left+1]
    """
    if nth <= 0 or nth > right - left + 1:
        raise OutOfRangeError(f"nth doit être dans [1, right-left+1] (nth={nth})")

    while True:
        pivot_index = median_of_3(items, left, right, (left + right) >> 1, comp)
        pivot_new_index = partition(items, left, right, pivot_index, comp)
        pivot_dist = pivot_new_index - left + 1
        if pivot_dist == nth:
            return items[pivot_new_index]
        elif nth < pivot_dist:
            right = pivot_new_index - 1
        else:
            nth -= pivot_dist
            left = pivot_new_index + 1

def select(items: MutableSequence, k: int, comp: Comparator = operator.lt) -> Any:
    """
    Variante de nth_element avec un rang k en base 0 sur toute la séquence.

    Raises:
        OutOfRangeError: Si k est hors de [0, len(items)-1]
    """
    if k < 0 or k >= len(items):
        raise OutOfRangeError(f"k doit être dans [0, len(items)-1] (k={k})")
    return nth_element(items, 0, k + 1, len(items) - 1, comp)
