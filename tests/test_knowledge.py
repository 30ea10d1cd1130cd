"""
Tests for knowledge.py.
"""
import pytest

from fangsearch.knowledge import (Knowledge, knowledge_orients,
                                  knowledge_requires_adjacency,
                                  knowledge_forbids_adjacency,
                                  get_knowledge_orientation)

def test_empty_knowledge():
    knowledge = Knowledge()
    assert knowledge.is_empty()
    assert not knowledge.is_forbidden('A', 'B')
    assert not knowledge.is_required('A', 'B')
    assert get_knowledge_orientation(knowledge, 'A', 'B') is None

def test_forbidden_and_required():
    knowledge = Knowledge(forbidden=[('A', 'B')], required=[('C', 'D')])
    assert knowledge.is_forbidden('A', 'B')
    assert not knowledge.is_forbidden('B', 'A')
    assert knowledge.is_required('C', 'D')
    assert not knowledge.is_required('D', 'C')
    assert knowledge_orients(knowledge, 'B', 'A')
    assert knowledge_orients(knowledge, 'C', 'D')
    assert not knowledge_orients(knowledge, 'A', 'B')
    assert knowledge_requires_adjacency(knowledge, 'D', 'C')

    knowledge.remove_forbidden('A', 'B')
    knowledge.remove_required('C', 'D')
    assert knowledge.is_empty()

def test_tiers():
    knowledge = Knowledge(tiers={0: ['A'], 1: ['B', 'C']})
    assert knowledge.get_tier('B') == 1
    assert knowledge.get_tier('D') is None
    assert knowledge.is_forbidden('B', 'A')
    assert not knowledge.is_forbidden('A', 'B')
    assert not knowledge.is_forbidden('B', 'C')
    knowledge.set_tier_forbidden_within(1)
    assert knowledge.is_forbidden('B', 'C')
    assert knowledge.is_forbidden('C', 'B')
    assert knowledge_forbids_adjacency(knowledge, 'B', 'C')
    assert get_knowledge_orientation(knowledge, 'B', 'C') == '-->'
    assert get_knowledge_orientation(knowledge, 'C', 'B') == '-->'
    knowledge.set_tier_forbidden_within(1, forbidden=False)
    assert not knowledge_forbids_adjacency(knowledge, 'B', 'C')
    assert get_knowledge_orientation(knowledge, 'B', 'C') is None

def test_move_between_tiers():
    knowledge = Knowledge()
    knowledge.add_to_tier(0, 'A')
    knowledge.add_to_tier(2, 'A')
    assert knowledge.get_tier('A') == 2
    with pytest.raises(ValueError):
        knowledge.add_to_tier(-1, 'B')

@pytest.mark.parametrize("forbidden, required, expected", [
    ([('B', 'A')], [], '-->'),
    ([('A', 'B')], [], '<--'),
    ([], [('A', 'B')], '-->'),
    ([], [('B', 'A')], '<--'),
    ([], [('A', 'B'), ('B', 'A')], '<=>'),
    # Both directions forbidden orients the first argument first
    ([('A', 'B'), ('B', 'A')], [], '-->'),
    # Required takes precedence over forbidden
    ([('A', 'B'), ('B', 'A')], [('B', 'A')], '<--'),
    ([('A', 'B')], [('A', 'B')], '-->'),
])
def test_get_knowledge_orientation(forbidden, required, expected):
    knowledge = Knowledge(forbidden=forbidden, required=required)
    assert get_knowledge_orientation(knowledge, 'A', 'B') == expected

def test_forbids_adjacency():
    knowledge = Knowledge(forbidden=[('A', 'B'), ('B', 'A'), ('A', 'C')])
    assert knowledge_forbids_adjacency(knowledge, 'A', 'B')
    assert knowledge_forbids_adjacency(knowledge, 'B', 'A')
    assert not knowledge_forbids_adjacency(knowledge, 'A', 'C')
    knowledge.set_required('B', 'A')
    assert not knowledge_forbids_adjacency(knowledge, 'A', 'B')
