"""
Module de structures d'arbre pour metricvp.
Définit les nœuds du VP-tree et la classe VPTree qui les regroupe avec le jeu
de données et la fonction de distance.
"""

from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Union

Distance = Callable[[Any, Any], float]

class InnerNode:
    """
    Nœud interne: un point de vue (vantage point) et les bornes de distance de ses descendants.

    Un nœud sans médiane (mu is None) est le cas dégénéré où le point de vue était
    le seul élément restant: il n'a ni bornes ni enfants.
    """

    __slots__ = ("index", "m", "M", "mu", "left", "right")

    def __init__(self, index: int, m: Optional[float] = None, M: Optional[float] = None,
                 mu: Optional[float] = None, left: "Node" = None, right: "Node" = None):
        """
        Args:
            index: Indice du point de vue dans le jeu de données
            m: Distance minimale entre le point de vue et ses descendants
            M: Distance maximale entre le point de vue et ses descendants
            mu: Distance médiane séparant les sous-arbres gauche (<= mu) et droit (>= mu)
            left: Sous-arbre gauche (None si vide)
            right: Sous-arbre droit (None si vide)
        """
        self.index = index
        self.m = m
        self.M = M
        self.mu = mu
        self.left = left
        self.right = right

    def has_bounds(self) -> bool:
        return self.mu is not None

    def __eq__(self, other) -> bool:
        if not isinstance(other, InnerNode):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__slots__)

    def __repr__(self) -> str:
        if not self.has_bounds():
            return f"InnerNode(i={self.index})"
        return f"InnerNode(i={self.index}, m={self.m}, M={self.M}, mu={self.mu})"

class LeafNode:
    """Feuille (bucket): liste d'indices stockés sans partitionnement supplémentaire."""

    __slots__ = ("indices",)

    def __init__(self, indices: Sequence[int]):
        self.indices = list(indices)

    def __len__(self) -> int:
        return len(self.indices)

    def __eq__(self, other) -> bool:
        if not isinstance(other, LeafNode):
            return NotImplemented
        return self.indices == other.indices

    def __repr__(self) -> str:
        return f"LeafNode({self.indices})"

# None représente l'arbre (ou le sous-arbre) vide
Node = Optional[Union[InnerNode, LeafNode]]

class VPTree:
    """
    Classe principale pour le VP-tree.
    Associe la structure de nœuds au jeu de données (référencé, jamais copié) et à
    la fonction de distance utilisée pour la construction. Immuable une fois construit.
    """

    def __init__(self, S: Sequence, distance: Distance, tree: Node):
        """
        Args:
            S: Jeu de données indexable par position
            distance: Fonction de distance utilisée pour construire l'arbre
            tree: Nœud racine (None pour un arbre vide)
        """
        self.S = S
        self.distance = distance
        self.tree = tree
        self.comparisons = 0  # Nombre de distances calculées lors de la dernière recherche
        self.stats = {}

    def __len__(self) -> int:
        return len(self.S)

    def search(self, q: Any, limit: Optional[int] = None, max_distance: Optional[float] = None,
               distance: Optional[Distance] = None, filter_fn: Optional[Callable[[Any], bool]] = None) -> List:
        """
        Recherche les plus proches voisins de q.

        Args:
            q: Requête, tout objet compatible avec la fonction de distance
            limit: Nombre maximal de résultats (None ou 0 = pas de limite)
            max_distance: Distance maximale acceptée (None = infinie)
            distance: Fonction de distance à utiliser à la place de celle de l'arbre
            filter_fn: Prédicat appliqué aux éléments candidats

        Returns:
            List[SearchResult]: Résultats triés par distance croissante
        """
        # Importation locale pour éviter les dépendances circulaires
        from metricvp.search.searcher import search

        results, self.comparisons = search(self, q, limit, max_distance, distance, filter_fn)
        return results

    def stringify(self, node: Node = None) -> str:
        """Forme textuelle compacte d'un nœud (la racine par défaut)."""
        from metricvp.io.writer import stringify

        return stringify(node if node is not None else self.tree)

    def iter_indices(self) -> Iterator[int]:
        """Parcourt tous les indices stockés dans l'arbre (points de vue et feuilles)."""
        stack = [self.tree]
        while stack:
            node = stack.pop()
            if node is None:
                continue
            if isinstance(node, LeafNode):
                yield from node.indices
            else:
                yield node.index
                stack.append(node.right)
                stack.append(node.left)

    def get_height(self) -> int:
        """
        Calcule la hauteur de l'arbre (nombre de nœuds sur le plus long chemin).

        Returns:
            int: Hauteur de l'arbre (0 pour un arbre vide)
        """
        def get_node_height(node: Node) -> int:
            if node is None:
                return 0
            if isinstance(node, LeafNode):
                return 1
            return 1 + max(get_node_height(node.left), get_node_height(node.right))

        return get_node_height(self.tree)

    def get_leaf_count(self) -> int:
        """Nombre de feuilles (buckets) dans l'arbre."""
        def count_leaves(node: Node) -> int:
            if node is None:
                return 0
            if isinstance(node, LeafNode):
                return 1
            return count_leaves(node.left) + count_leaves(node.right)

        return count_leaves(self.tree)

    def get_node_count(self) -> int:
        """Nombre total de nœuds (internes et feuilles)."""
        def count_nodes(node: Node) -> int:
            if node is None:
                return 0
            if isinstance(node, LeafNode):
                return 1
            return 1 + count_nodes(node.left) + count_nodes(node.right)

        return count_nodes(self.tree)

    def get_statistics(self) -> Dict[str, Any]:
        """
        Calcule diverses statistiques sur l'arbre.

        Returns:
            Dict: Dictionnaire de statistiques
        """
        stats = {
            "size": len(self.S),
            "node_count": 0,
            "inner_count": 0,
            "degenerate_count": 0,
            "leaf_count": 0,
            "max_depth": 0,
            "avg_leaf_depth": 0,
            "leaf_depths": [],
            "leaf_sizes": [],
            "avg_leaf_size": 0,
            "min_leaf_size": 0,
            "max_leaf_size": 0,
            "total_indices": 0,
        }

        def traverse(node: Node, depth: int) -> None:
            if node is None:
                return
            stats["node_count"] += 1
            stats["max_depth"] = max(stats["max_depth"], depth)

            if isinstance(node, LeafNode):
                stats["leaf_count"] += 1
                stats["leaf_depths"].append(depth)
                stats["leaf_sizes"].append(len(node))
                stats["total_indices"] += len(node)
                return

            stats["inner_count"] += 1
            stats["total_indices"] += 1
            if not node.has_bounds():
                stats["degenerate_count"] += 1
            traverse(node.left, depth + 1)
            traverse(node.right, depth + 1)

        traverse(self.tree, 1)

        if stats["leaf_count"] > 0:
            stats["avg_leaf_depth"] = sum(stats["leaf_depths"]) / stats["leaf_count"]
            stats["avg_leaf_size"] = sum(stats["leaf_sizes"]) / stats["leaf_count"]
            stats["min_leaf_size"] = min(stats["leaf_sizes"])
            stats["max_leaf_size"] = max(stats["leaf_sizes"])

        self.stats = stats
        return stats

    def save_statistics(self, file_path: str) -> None:
        """
        Sauvegarde les statistiques de l'arbre dans un fichier texte.

        Args:
            file_path: Chemin du fichier de sortie
        """
        stats = self.get_statistics()

        with open(file_path, "w") as f:
            f.write("STATISTIQUES DU VP-TREE\n")
            f.write("=======================\n\n")

            f.write("Structure générale\n")
            f.write("-----------------\n")
            f.write(f"Éléments indexés      : {stats['size']}\n")
            f.write(f"Nombre total de nœuds : {stats['node_count']}\n")
            f.write(f"Nœuds internes        : {stats['inner_count']}\n")
            f.write(f"Nœuds dégénérés       : {stats['degenerate_count']}\n")
            f.write(f"Nombre de feuilles    : {stats['leaf_count']}\n")
            f.write(f"Profondeur maximale   : {stats['max_depth']}\n\n")

            f.write("Statistiques des feuilles\n")
            f.write("------------------------\n")
            f.write(f"Profondeur moyenne: {stats['avg_leaf_depth']:.2f}\n")
            f.write(f"Taille moyenne    : {stats['avg_leaf_size']:.2f} indices\n")
            f.write(f"Taille min        : {stats['min_leaf_size']} indices\n")
            f.write(f"Taille max        : {stats['max_leaf_size']} indices\n")
            f.write(f"Total indices     : {stats['total_indices']} indices\n")

    def __str__(self) -> str:
        if self.tree is None:
            return "Empty VPTree"

        stats = self.get_statistics()
        return (f"VPTree(size={stats['size']}, "
                f"nodes={stats['node_count']}, "
                f"leaves={stats['leaf_count']}, "
                f"height={stats['max_depth']})")
