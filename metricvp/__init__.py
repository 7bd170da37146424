# metricvp - Recherche des plus proches voisins dans un espace métrique par VP-tree

__version__ = "1.0.0"

# Import main components for direct API access
from metricvp.core.select import select, nth_element, OutOfRangeError
from metricvp.core.queue import PriorityQueue, SearchResult
from metricvp.core.tree import VPTree, InnerNode, LeafNode
from metricvp.builder.builder import build_tree, load_tree, build_from_config
from metricvp.search.searcher import search, search_batch, brute_force_search
from metricvp.io.writer import stringify
