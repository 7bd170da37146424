"""
File de priorité bornée utilisée pour accumuler les résultats de recherche.
"""

from typing import Any, List, NamedTuple, Optional

class SearchResult(NamedTuple):
    """Résultat de recherche: indice dans le jeu de données et distance à la requête."""
    index: int
    distance: float

class PriorityQueue:
    """
    File triée par priorité croissante, limitée aux `size` meilleures entrées.

    Le contenu reste trié en permanence: la dernière entrée est toujours la pire,
    c'est donc elle qui est évincée quand la capacité est dépassée.
    """

    def __init__(self, size: Optional[int] = None):
        """
        Args:
            size: Taille maximale de la file. 0 ou None = non bornée
        """
        self.size = size or 0
        self._contents = []  # liste de (priority, data)

    def __len__(self) -> int:
        return len(self._contents)

    def _insertion_index(self, priority: float) -> int:
        # Après les priorités égales: l'ordre de découverte est conservé
        lo, hi = 0, len(self._contents)
        while lo < hi:
            mid = (lo + hi) >> 1
            if priority < self._contents[mid][0]:
                hi = mid
            else:
                lo = mid + 1
        return lo

    def insert(self, data: Any, priority: float) -> Optional[float]:
        """
        Insère un élément à sa place selon sa priorité.

        Args:
            data: Donnée associée (indice de l'élément)
            priority: Priorité (distance à la requête)

        Returns:
            La pire priorité retenue si la file est pleine, None sinon
        """
        index = self._insertion_index(priority)
        if not self.size or index < self.size:
            self._contents.insert(index, (priority, data))
            if self.size and len(self._contents) > self.size:
                self._contents.pop()
        if self.size and len(self._contents) == self.size:
            return self._contents[-1][0]
        return None

    def list(self) -> List[SearchResult]:
        """Contenu trié par distance croissante."""
        return [SearchResult(data, priority) for priority, data in self._contents]
