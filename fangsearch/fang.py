"""Fangsearch causal discovery for i.i.d. data."""

# License: GNU General Public License v3.0

import time
import warnings
import itertools
from copy import deepcopy
import numpy as np
from joblib import Parallel, delayed

from .graphs import Graph
from .knowledge import Knowledge, get_knowledge_orientation
from .fas import FAS
from .orientation import orient_by_knowledge, evaluate_pair, apply_edge_decision
from .independence_tests.sem_bic_score import SemBicScore
from .independence_tests.score_test import ScoreIndTest


class Fang():
    r"""Fast adjacency search followed by non-Gaussian pairwise orientation.

    Fang estimates a possibly cyclic graph over i.i.d. continuous variables.
    The adjacencies are found with the fast adjacency search (FAS, Spirtes
    et al., 2000) using a score-based independence test. Edges are then
    oriented pairwise with a modification of the robust skew rule of [1],
    which requires non-Gaussian data, together with two heuristics for
    detecting two-cycles (feedback), which do not.

    Notes
    -----
    For each pair :math:`(X, Y)` of standardized variables the correlations
    :math:`c` over all samples, :math:`c_1` over :math:`X > 0`, :math:`c_2`
    over :math:`Y > 0`, :math:`c_3` over :math:`X < 0` and :math:`c_4` over
    :math:`Y < 0` are computed. A pair is considered if it is adjacent in the
    skeleton or :math:`|c_1 - c_2|` exceeds ``skew_threshold``. The edge is

    * as forced by background knowledge, if any,
    * a two-cycle if both Fisher-z differences of :math:`c` to :math:`c_1`
      and :math:`c_2` are significant at ``alpha``,
    * a two-cycle if the tail correlations of neither variable agree in sign
      with :math:`c`,
    * otherwise :math:`X \rightarrow Y` if
      :math:`R = |c - c_2| - |c - c_1| > 0`, :math:`Y \rightarrow X` if
      :math:`R < 0` and undirected if :math:`R = 0`.

    References
    ----------

    [1] A. Hyvarinen, S. M. Smith,
           Pairwise likelihood ratios for estimation of non-Gaussian
           structural equation models. JMLR 14, 111-152 (2013)

    Parameters
    ----------
    dataframe : data object
        Fangsearch dataframe object with the i.i.d. samples.
    depth : int, optional (default: -1)
        Maximum size of the conditioning sets in FAS. -1 means unrestricted.
        Making this too high may result in statistical errors.
    penalty_discount : float, optional (default: 1.)
        Penalty discount of the BIC score used by FAS. Higher values, say
        2, 3 or 4, give sparser graphs.
    alpha : float, optional (default: 1e-6)
        Significance level for two-cycle detection. Usually needs to be low.
    knowledge : Knowledge, optional (default: None)
        Forbidden and required edges the search will obey. None means empty
        knowledge.
    skew_threshold : float, optional (default: 0.3)
        Non-adjacent pairs whose upper tail correlations differ by more than
        this value are considered for orientation as well.
    cond_ind_test : conditional independence test object, optional
        Test for FAS. If None (default), ScoreIndTest on a SemBicScore of the
        standardized data with penalty_discount is used. A given test is
        set to the standardized data.
    n_jobs : int, optional (default: 1)
        Number of jobs for the pairwise orientation step, passed to
        joblib.Parallel. 1 runs serially.
    verbosity : int, optional (default: 0)
        Verbose levels 0, 1, ...

    Attributes
    ----------
    elapsed_time : float
        Wall-clock time of the last run_fang call in seconds.
    diagnostics : list of str
        Messages about pairs with undefined statistics in the last run.
    """

    def __init__(self, dataframe,
                 depth=-1,
                 penalty_discount=1.,
                 alpha=1e-6,
                 knowledge=None,
                 skew_threshold=0.3,
                 cond_ind_test=None,
                 n_jobs=1,
                 verbosity=0):

        if not isinstance(depth, (int, np.integer)) or depth < -1:
            raise ValueError("depth must be an int >= -1 (-1 meaning "
                             "unrestricted), got %s" % depth)
        if not penalty_discount >= 0.:
            raise ValueError("penalty_discount must be >= 0, got %s"
                             % penalty_discount)
        if not 0. <= alpha <= 1.:
            raise ValueError("alpha must be in [0, 1], got %s" % alpha)
        if not skew_threshold >= 0.:
            raise ValueError("skew_threshold must be >= 0, got %s"
                             % skew_threshold)
        if isinstance(cond_ind_test, type):
            raise ValueError("Fang requires that cond_ind_test "
                             "is instantiated, e.g. cond_ind_test = "
                             "ScoreIndTest(score).")
        if not isinstance(n_jobs, (int, np.integer)) or n_jobs == 0:
            raise ValueError("n_jobs must be a non-zero int, got %s" % n_jobs)

        self.dataframe = dataframe
        self.depth = depth
        self.penalty_discount = penalty_discount
        self.alpha = alpha
        if knowledge is None:
            knowledge = Knowledge()
        self.knowledge = knowledge
        self.skew_threshold = skew_threshold
        self.cond_ind_test = deepcopy(cond_ind_test)
        self.n_jobs = n_jobs
        self.verbosity = verbosity
        self.var_names = self.dataframe.var_names
        self.N = self.dataframe.N
        self.T = self.dataframe.T

        self.elapsed_time = 0.
        self.diagnostics = []

    def _print_fang_params(self):
        print("\n##\n## Step 1: FAS algorithm with depth = %s\n##"
              "\n\nParameters:" % self.depth)
        print("penalty_discount = %s" % self.penalty_discount
              + "\nalpha = %s" % self.alpha
              + "\nskew_threshold = %s" % self.skew_threshold
              + "\nn_jobs = %s" % self.n_jobs)
        if not self.knowledge.is_empty():
            print("knowledge = %s" % self.knowledge)

    def _get_cond_ind_test(self, dataframe):
        """Returns the independence test on the standardized data."""
        if self.cond_ind_test is None:
            score = SemBicScore(dataframe,
                                penalty_discount=self.penalty_discount)
            return ScoreIndTest(score, verbosity=self.verbosity)
        self.cond_ind_test.set_dataframe(dataframe)
        return self.cond_ind_test

    def _get_pair_jobs(self, dataframe, skeleton):
        """Yields the arguments of evaluate_pair for all pairs i < j."""
        for i, j in itertools.combinations(range(self.N), 2):
            x_name = self.var_names[i]
            y_name = self.var_names[j]
            yield dict(x_name=x_name,
                       y_name=y_name,
                       x=dataframe.values[:, i],
                       y=dataframe.values[:, j],
                       adjacent=skeleton.is_adjacent_to(x_name, y_name),
                       knowledge_link=get_knowledge_orientation(
                           self.knowledge, x_name, y_name),
                       alpha=self.alpha,
                       skew_threshold=self.skew_threshold)

    def _print_pair_decision(self, pair_stats, decision):
        print("\n    Pair (%s, %s): c = % .3f | c1 = % .3f | c2 = % .3f"
              " | R = % .4f | p1 = %.2e | p2 = %.2e"
              % (pair_stats.x, pair_stats.y, pair_stats.c, pair_stats.c1,
                 pair_stats.c2, pair_stats.R, pair_stats.p1, pair_stats.p2))
        if decision.kind == 'directed':
            string = "%s --> %s" % (decision.source, decision.target)
        elif decision.kind == 'two_cycle':
            string = "%s <=> %s" % (decision.source, decision.target)
        elif decision.kind == 'undirected':
            string = "%s o-o %s" % (decision.source, decision.target)
        else:
            string = "no edge"
        if decision.reason is not None:
            string += " (%s)" % decision.reason
        print("        %s" % string)

    def run_fang(self):
        """Runs the Fang search.

        Standardizes the data, runs FAS with the score-based test, applies
        the background knowledge to the skeleton and orients every pair.

        Returns
        -------
        results : dictionary of the following entries
            'graph' : Graph
                Resulting graph, possibly with two-cycles and some
                undirected edges. Two-cycles found by the statistical rules
                carry line_color 'green' (tail asymmetry) or 'red' (sign
                instability).
            'skeleton' : Graph
                Skeleton after the knowledge pass.
            'sepsets' : dictionary
                Separating sets found by FAS.
            'pair_statistics' : dictionary
                PairStatistics of all pairs, keyed by (name_i, name_j), i < j.
            'diagnostics' : list of str
                Messages about pairs with undefined statistics.
        """
        start = time.time()

        if self.verbosity > 0:
            self._print_fang_params()

        dataframe = self.dataframe.standardize()
        cond_ind_test = self._get_cond_ind_test(dataframe)

        fas = FAS(cond_ind_test, depth=self.depth, knowledge=self.knowledge,
                  verbosity=self.verbosity)
        skeleton = fas.search()
        orient_by_knowledge(self.knowledge, skeleton)

        if self.verbosity > 0:
            print("\n##\n## Step 2: Orientation of %d pair(s)\n##"
                  % (self.N * (self.N - 1) // 2))

        jobs = list(self._get_pair_jobs(dataframe, skeleton))
        if self.n_jobs == 1:
            pair_results = [evaluate_pair(**job) for job in jobs]
        else:
            pair_results = Parallel(n_jobs=self.n_jobs)(
                delayed(evaluate_pair)(**job) for job in jobs)

        # Merge in pair order
        graph = Graph(self.var_names)
        pair_statistics = {}
        self.diagnostics = []
        for pair_stats, decision, diagnostics in pair_results:
            pair_statistics[(pair_stats.x, pair_stats.y)] = pair_stats
            for message in diagnostics:
                warnings.warn(message)
            self.diagnostics.extend(diagnostics)
            if self.verbosity > 1 and decision.kind != 'none':
                self._print_pair_decision(pair_stats, decision)
            apply_edge_decision(graph, decision)

        self.elapsed_time = time.time() - start

        results = {'graph': graph,
                   'skeleton': skeleton,
                   'sepsets': fas.sepsets,
                   'pair_statistics': pair_statistics,
                   'diagnostics': list(self.diagnostics),
                   }
        self.results = results

        if self.verbosity > 0:
            self.print_results(results)

        return results

    def print_results(self, results):
        """Prints the edges of the resulting graph.

        Parameters
        ----------
        results : dict
            Output of run_fang.
        """
        graph = results['graph']
        print("\n## Resulting graph with %d adjacencies:" %
              graph.get_num_edges())
        for i, j in itertools.combinations(range(self.N), 2):
            x_name = self.var_names[i]
            y_name = self.var_names[j]
            link = graph.get_link(x_name, y_name)
            if link == '':
                continue
            string = "\n    %s %s %s" % (x_name, link, y_name)
            if link == '<=>':
                color = graph.get_edges(x_name, y_name)[0].line_color
                if color is not None:
                    string += " | two-cycle [%s]" % color
            elif link == 'o-o':
                string += " | unoriented link"
            print(string)
        print("\nElapsed time: %.3f s" % self.elapsed_time)
