#!/usr/bin/env python3
"""
Tests de la file de priorité bornée.
"""

import random
import sys

from metricvp.core.queue import PriorityQueue, SearchResult

def test_bounded_queue_keeps_k_smallest():
    """Après chaque insertion, la file contient les k plus petites priorités vues."""
    rnd = random.Random(7)
    for k in [1, 2, 5, 10]:
        queue = PriorityQueue(k)
        seen = []
        for i in range(200):
            priority = rnd.random()
            queue.insert(i, priority)
            seen.append(priority)
            contents = queue.list()
            assert len(contents) == min(k, len(seen))
            assert [r.distance for r in contents] == sorted(seen)[:k]
    print("✓ La file bornée garde les k meilleures priorités")

def test_insert_returns_worst_when_full():
    queue = PriorityQueue(3)
    assert queue.insert("a", 5.0) is None
    assert queue.insert("b", 1.0) is None
    assert queue.insert("c", 3.0) == 5.0
    assert queue.insert("d", 2.0) == 3.0
    # Trop loin: ignoré, la pire priorité reste la même
    assert queue.insert("e", 10.0) == 3.0
    assert queue.list() == [SearchResult("b", 1.0), SearchResult("d", 2.0), SearchResult("c", 3.0)]
    assert len(queue) == 3

def test_unbounded_queue():
    for size in (None, 0):
        queue = PriorityQueue(size)
        for i, priority in enumerate([4, 2, 8, 1]):
            assert queue.insert(i, priority) is None
        assert [r.index for r in queue.list()] == [3, 1, 0, 2]

def test_ties_keep_discovery_order():
    queue = PriorityQueue(2)
    queue.insert("first", 1.0)
    queue.insert("second", 1.0)
    assert [r.index for r in queue.list()] == ["first", "second"]
    # Égal à la pire priorité d'une file pleine: pas de remplacement
    assert queue.insert("third", 1.0) == 1.0
    assert [r.index for r in queue.list()] == ["first", "second"]

def test_list_does_not_mutate():
    queue = PriorityQueue()
    queue.insert(0, 0.5)
    first = queue.list()
    first.append(SearchResult(9, 9.0))
    assert queue.list() == [SearchResult(0, 0.5)]
    assert queue.list()[0].index == 0 and queue.list()[0].distance == 0.5

def main():
    print("=== Tests de la file de priorité ===")
    test_bounded_queue_keeps_k_smallest()
    test_insert_returns_worst_when_full()
    test_unbounded_queue()
    test_ties_keep_discovery_order()
    test_list_does_not_mutate()
    print("\n✅ TOUS LES TESTS ONT RÉUSSI")
    return 0

if __name__ == "__main__":
    sys.exit(main())
