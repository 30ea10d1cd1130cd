"""Fangsearch causal discovery for i.i.d. data."""

# License: GNU General Public License v3.0

from collections import namedtuple
import numpy as np

from .knowledge import get_knowledge_orientation
from .statistics import (TAILS, tail_correlation, asymmetry_statistic,
                         asymmetry_pvalue)

PairStatistics = namedtuple('PairStatistics',
                            ['x', 'y', 'T', 'c', 'c1', 'c2', 'c3', 'c4',
                             'R', 't1', 't2', 'p1', 'p2'])
PairStatistics.__doc__ = """Tail statistics of a variable pair (x, y).

c is the correlation over all samples, c1 over x > 0, c2 over y > 0, c3 over
x < 0 and c4 over y < 0. R = |c - c2| - |c - c1| is the robust skew
asymmetry, t1 and t2 the Fisher-z differences of c to c1 and c2, and p1, p2
their p-values. Undefined values are numpy.nan.
"""

EdgeDecision = namedtuple('EdgeDecision', ['kind', 'source', 'target',
                                           'reason'])
EdgeDecision.__doc__ = """Orientation decision for a variable pair.

kind is one of 'none', 'undirected', 'directed' and 'two_cycle'. For
'directed' the edge is source --> target. reason is a tag without algorithmic
meaning: 'knowledge', 'tail_asymmetry' or 'sign_instability'.
"""

# Display colors of two-cycles by reason
TWO_CYCLE_COLORS = {'tail_asymmetry': 'green',
                    'sign_instability': 'red'}


def orient_by_knowledge(knowledge, graph):
    """Applies background knowledge to the skeleton in place.

    Every undirected edge X o-o Y is oriented X --> Y if Y --> X is forbidden
    or X --> Y is required, and vice versa, see get_knowledge_orientation.
    Edges required in both directions stay as they are.

    Parameters
    ----------
    knowledge : Knowledge
        Background knowledge.
    graph : Graph
        Skeleton, modified in place.

    Returns
    -------
    graph : Graph
        The same graph object.
    """
    for edge in list(graph.edges):
        if edge.is_directed():
            continue
        link = get_knowledge_orientation(knowledge, edge.node1, edge.node2)
        if link == '-->':
            graph.remove_edge(edge)
            graph.add_directed_edge(edge.node1, edge.node2)
        elif link == '<--':
            graph.remove_edge(edge)
            graph.add_directed_edge(edge.node2, edge.node1)
    return graph


def get_pair_statistics(x_name, y_name, x, y):
    """Returns the tail statistics of the standardized samples x and y.

    Parameters
    ----------
    x_name, y_name : str
        Variable names.
    x, y : array-like
        Standardized samples of shape (T,).

    Returns
    -------
    pair_stats : PairStatistics
    """
    T = len(x)
    c = tail_correlation(x, y, *TAILS['all'])
    c1 = tail_correlation(x, y, *TAILS['x_upper'])
    c2 = tail_correlation(x, y, *TAILS['y_upper'])
    c3 = tail_correlation(x, y, *TAILS['x_lower'])
    c4 = tail_correlation(x, y, *TAILS['y_lower'])

    R = abs(c - c2) - abs(c - c1)

    t1 = asymmetry_statistic(c, c1, T)
    t2 = asymmetry_statistic(c, c2, T)
    p1 = asymmetry_pvalue(t1, T)
    p2 = asymmetry_pvalue(t2, T)

    return PairStatistics(x=x_name, y=y_name, T=T, c=c, c1=c1, c2=c2, c3=c3,
                          c4=c4, R=R, t1=t1, t2=t2, p1=p1, p2=p2)


def get_undefined_statistics(pair_stats):
    """Returns the names of the statistics of pair_stats that are NaN."""
    return [name for name in ['c', 'c1', 'c2', 'c3', 'c4', 'R', 'p1', 'p2']
            if np.isnan(getattr(pair_stats, name))]


def passes_candidacy_gate(pair_stats, adjacent, skew_threshold=0.3):
    """Returns whether a pair is considered for orientation.

    This is the case if the pair is adjacent in the skeleton or the upper
    tail correlations differ by more than skew_threshold.
    """
    if adjacent:
        return True
    # A NaN difference compares False
    return abs(pair_stats.c1 - pair_stats.c2) > skew_threshold


def _sign_consistent(c, c_upper, c_lower):
    return np.sign(c) == np.sign(c_upper) and np.sign(c) == np.sign(c_lower)


def decide_edge(pair_stats, knowledge_link=None, alpha=1e-6):
    """Decides the edge type of a candidate pair.

    Rules in order of priority:

    1. Knowledge forcing a direction (see get_knowledge_orientation).
    2. Both asymmetry p-values below alpha gives a two-cycle.
    3. Tail correlations that agree in sign with c neither for the tails of
       x nor for the tails of y give a two-cycle.
    4. The sign of R orients the edge, x --> y for R > 0, y --> x for R < 0
       and undirected for R = 0.

    A rule that needs an undefined (NaN) statistic is skipped. An undefined
    R gives an undirected edge.

    Parameters
    ----------
    pair_stats : PairStatistics
        Statistics of the pair (x, y).
    knowledge_link : {None, '-->', '<--', '<=>'}
        Output of get_knowledge_orientation for (x, y).
    alpha : float, optional (default: 1e-6)
        Significance level for the two-cycle test.

    Returns
    -------
    decision : EdgeDecision
    """
    x = pair_stats.x
    y = pair_stats.y

    if knowledge_link == '-->':
        return EdgeDecision('directed', x, y, 'knowledge')
    elif knowledge_link == '<--':
        return EdgeDecision('directed', y, x, 'knowledge')
    elif knowledge_link == '<=>':
        return EdgeDecision('two_cycle', x, y, 'knowledge')

    p1, p2 = pair_stats.p1, pair_stats.p2
    if not (np.isnan(p1) or np.isnan(p2)) and p1 < alpha and p2 < alpha:
        return EdgeDecision('two_cycle', x, y, 'tail_asymmetry')

    correlations = [pair_stats.c, pair_stats.c1, pair_stats.c2,
                    pair_stats.c3, pair_stats.c4]
    if not np.any(np.isnan(correlations)):
        if not (_sign_consistent(pair_stats.c, pair_stats.c1, pair_stats.c3)
                or _sign_consistent(pair_stats.c, pair_stats.c2,
                                    pair_stats.c4)):
            return EdgeDecision('two_cycle', x, y, 'sign_instability')

    R = pair_stats.R
    if R > 0:
        return EdgeDecision('directed', x, y, None)
    elif R < 0:
        return EdgeDecision('directed', y, x, None)
    return EdgeDecision('undirected', x, y, None)


def evaluate_pair(x_name, y_name, x, y, adjacent, knowledge_link,
                  alpha=1e-6, skew_threshold=0.3):
    """Computes statistics and the edge decision for one pair.

    Parameters
    ----------
    x_name, y_name : str
        Variable names.
    x, y : array-like
        Standardized samples of shape (T,).
    adjacent : bool
        Whether the pair is adjacent in the knowledge-adjusted skeleton.
    knowledge_link : {None, '-->', '<--', '<=>'}
        Output of get_knowledge_orientation for (x_name, y_name).
    alpha : float
        Significance level for the two-cycle test.
    skew_threshold : float
        Threshold of the candidacy gate.

    Returns
    -------
    pair_stats, decision, diagnostics : tuple
        Statistics, EdgeDecision and a list of diagnostic messages.
    """
    diagnostics = []
    pair_stats = get_pair_statistics(x_name, y_name, x, y)

    if np.isnan(pair_stats.c):
        diagnostics.append("Pair (%s, %s) skipped: correlation undefined."
                           % (x_name, y_name))
        return pair_stats, EdgeDecision('none', None, None, None), diagnostics

    if not passes_candidacy_gate(pair_stats, adjacent,
                                 skew_threshold=skew_threshold):
        return pair_stats, EdgeDecision('none', None, None, None), diagnostics

    undefined = get_undefined_statistics(pair_stats)
    if len(undefined) > 0:
        diagnostics.append("Pair (%s, %s): undefined %s, insufficient "
                           "evidence for the rules using them."
                           % (x_name, y_name, ", ".join(undefined)))

    decision = decide_edge(pair_stats, knowledge_link=knowledge_link,
                           alpha=alpha)
    return pair_stats, decision, diagnostics


def apply_edge_decision(graph, decision):
    """Adds the edge(s) of decision to graph."""
    if decision.kind == 'directed':
        graph.add_directed_edge(decision.source, decision.target)
    elif decision.kind == 'undirected':
        graph.add_undirected_edge(decision.source, decision.target)
    elif decision.kind == 'two_cycle':
        graph.add_two_cycle(decision.source, decision.target,
                            line_color=TWO_CYCLE_COLORS.get(decision.reason))
    return graph
