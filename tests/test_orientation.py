"""
Tests for orientation.py, the pairwise orientation rules.
"""
import pytest
import numpy as np

from fangsearch.graphs import Graph
from fangsearch.knowledge import Knowledge, get_knowledge_orientation
from fangsearch.orientation import (PairStatistics, EdgeDecision,
                                    orient_by_knowledge, get_pair_statistics,
                                    passes_candidacy_gate, decide_edge,
                                    evaluate_pair, apply_edge_decision)
from fangsearch.statistics import asymmetry_statistic, asymmetry_pvalue

# Pylint settings
# pylint: disable=redefined-outer-name

def make_stats(c, c1, c2, c3, c4, T=5000):
    """Returns PairStatistics of X and Y for given correlations."""
    t1 = asymmetry_statistic(c, c1, T)
    t2 = asymmetry_statistic(c, c2, T)
    return PairStatistics(x='X', y='Y', T=T, c=c, c1=c1, c2=c2, c3=c3,
                          c4=c4, R=abs(c - c2) - abs(c - c1), t1=t1, t2=t2,
                          p1=asymmetry_pvalue(t1, T),
                          p2=asymmetry_pvalue(t2, T))

# DECISION RULES ###############################################################
def test_robust_skew_direction():
    pair_stats = make_stats(c=0.7, c1=0.69, c2=0.55, c3=0.6, c4=0.65)
    assert pair_stats.R > 0.
    assert decide_edge(pair_stats) == EdgeDecision('directed', 'X', 'Y',
                                                   None)

    pair_stats = make_stats(c=0.7, c1=0.55, c2=0.69, c3=0.6, c4=0.65)
    assert decide_edge(pair_stats) == EdgeDecision('directed', 'Y', 'X',
                                                   None)

def test_zero_skew_undirected():
    pair_stats = make_stats(c=0.5, c1=0.45, c2=0.45, c3=0.4, c4=0.4)
    assert pair_stats.R == 0.
    assert decide_edge(pair_stats).kind == 'undirected'

def test_tail_asymmetry_two_cycle():
    pair_stats = make_stats(c=0.1, c1=0.8, c2=0.75, c3=0.2, c4=0.3)
    assert pair_stats.p1 < 1e-6 and pair_stats.p2 < 1e-6
    decision = decide_edge(pair_stats, alpha=1e-6)
    assert decision == EdgeDecision('two_cycle', 'X', 'Y', 'tail_asymmetry')

    # Only one significant difference orients by R
    pair_stats = make_stats(c=0.1, c1=0.8, c2=0.11, c3=0.2, c4=0.3)
    assert decide_edge(pair_stats, alpha=1e-6).kind == 'directed'

def test_sign_instability_two_cycle():
    pair_stats = make_stats(c=0.3, c1=-0.05, c2=0.32, c3=0.31, c4=-0.02)
    decision = decide_edge(pair_stats)
    assert decision == EdgeDecision('two_cycle', 'X', 'Y',
                                    'sign_instability')

    # Consistent signs for one variable are enough
    pair_stats = make_stats(c=0.3, c1=-0.05, c2=0.32, c3=0.31, c4=0.25)
    assert decide_edge(pair_stats).kind == 'directed'

@pytest.mark.parametrize("knowledge_link, expected", [
    ('-->', EdgeDecision('directed', 'X', 'Y', 'knowledge')),
    ('<--', EdgeDecision('directed', 'Y', 'X', 'knowledge')),
    ('<=>', EdgeDecision('two_cycle', 'X', 'Y', 'knowledge')),
])
def test_knowledge_first(knowledge_link, expected):
    # Statistics that would otherwise give a tail asymmetry two-cycle
    pair_stats = make_stats(c=0.1, c1=0.8, c2=0.75, c3=0.2, c4=0.3)
    assert decide_edge(pair_stats, knowledge_link=knowledge_link) == expected

def test_forbidden_both_directions():
    # Forbidding Y --> X forces X --> Y, which is checked first
    knowledge = Knowledge(forbidden=[('X', 'Y'), ('Y', 'X')])
    random_state = np.random.RandomState(3)
    x = random_state.exponential(size=500) - 1.
    y = x + random_state.exponential(size=500) - 1.
    _, decision, _ = evaluate_pair(
        'X', 'Y', x, y, adjacent=True,
        knowledge_link=get_knowledge_orientation(knowledge, 'X', 'Y'))
    assert decision == EdgeDecision('directed', 'X', 'Y', 'knowledge')
    _, decision, _ = evaluate_pair(
        'Y', 'X', y, x, adjacent=True,
        knowledge_link=get_knowledge_orientation(knowledge, 'Y', 'X'))
    assert decision == EdgeDecision('directed', 'Y', 'X', 'knowledge')

def test_undefined_pvalue_skips_rule():
    pair_stats = make_stats(c=0.1, c1=np.nan, c2=0.75, c3=0.2, c4=0.3)
    assert np.isnan(pair_stats.p1)
    assert pair_stats.p2 < 1e-6
    # R is undefined as well
    assert decide_edge(pair_stats).kind == 'undirected'

def test_candidacy_gate():
    pair_stats = make_stats(c=0.1, c1=0.6, c2=0.2, c3=0.1, c4=0.1)
    assert passes_candidacy_gate(pair_stats, adjacent=False)
    assert not passes_candidacy_gate(pair_stats, adjacent=False,
                                     skew_threshold=0.5)
    pair_stats = make_stats(c=0.1, c1=0.15, c2=0.1, c3=0.1, c4=0.1)
    assert not passes_candidacy_gate(pair_stats, adjacent=False)
    assert passes_candidacy_gate(pair_stats, adjacent=True)

# PAIR EVALUATION ##############################################################
def test_get_pair_statistics():
    random_state = np.random.RandomState(4)
    x = random_state.exponential(size=2000) - 1.
    y = x + random_state.exponential(size=2000) - 1.
    pair_stats = get_pair_statistics('X', 'Y', x, y)
    assert pair_stats.T == 2000
    np.testing.assert_allclose(pair_stats.c, np.corrcoef(x, y)[0, 1])
    np.testing.assert_allclose(pair_stats.R, abs(pair_stats.c - pair_stats.c2)
                               - abs(pair_stats.c - pair_stats.c1))
    assert pair_stats.R > 0.

def test_degenerate_tail():
    # All samples with x < 0 are equal and only one has x > 0
    x = np.array([-1.] * 99 + [2.])
    y = np.random.RandomState(8).standard_normal(size=100)
    pair_stats, decision, diagnostics = evaluate_pair(
        'X', 'Y', x, y, adjacent=True, knowledge_link=None)
    assert np.isnan(pair_stats.c1) and np.isnan(pair_stats.c3)
    assert decision.kind == 'undirected'
    assert len(diagnostics) == 1
    assert 'c1' in diagnostics[0]

    _, decision, diagnostics = evaluate_pair(
        'X', 'Y', x, y, adjacent=False, knowledge_link=None)
    assert decision.kind == 'none'
    assert diagnostics == []

def test_undefined_correlation():
    x = np.ones(50)
    y = np.random.RandomState(9).standard_normal(size=50)
    _, decision, diagnostics = evaluate_pair(
        'X', 'Y', x, y, adjacent=True, knowledge_link='-->')
    assert decision.kind == 'none'
    assert 'skipped' in diagnostics[0]

# GRAPH UPDATES ################################################################
def test_orient_by_knowledge():
    graph = Graph(['A', 'B', 'C', 'D', 'E'])
    for (a, b) in [('A', 'B'), ('B', 'C'), ('C', 'D'), ('D', 'E')]:
        graph.add_undirected_edge(a, b)
    knowledge = Knowledge(forbidden=[('B', 'A'), ('C', 'D'), ('D', 'C')],
                          required=[('C', 'B'), ('D', 'E'), ('E', 'D')])
    orient_by_knowledge(knowledge, graph)
    assert graph.get_link('A', 'B') == '-->'
    assert graph.get_link('B', 'C') == '<--'
    assert graph.get_link('C', 'D') == '-->'
    assert graph.get_link('D', 'E') == 'o-o'

def test_apply_edge_decision():
    graph = Graph(['X', 'Y', 'Z'])
    apply_edge_decision(graph, EdgeDecision('two_cycle', 'X', 'Y',
                                            'tail_asymmetry'))
    apply_edge_decision(graph, EdgeDecision('two_cycle', 'Y', 'Z',
                                            'sign_instability'))
    apply_edge_decision(graph, EdgeDecision('none', None, None, None))
    assert graph.get_link('X', 'Y') == '<=>'
    assert graph.get_edges('X', 'Y')[0].line_color == 'green'
    assert graph.get_edges('Z', 'Y')[0].line_color == 'red'
    assert graph.get_num_edges() == 2
