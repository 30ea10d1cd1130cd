"""Fangsearch causal discovery for i.i.d. data."""

# License: GNU General Public License v3.0

import itertools
import numpy as np

from .graphs import Graph
from .knowledge import (Knowledge, knowledge_forbids_adjacency,
                        knowledge_requires_adjacency)


class FAS():
    r"""Fast adjacency search.

    Skeleton discovery step of the PC algorithm in its order-independent
    (stable) variant. Starting from the complete graph, the link between
    :math:`X` and :math:`Y` is removed as soon as a subset :math:`S` of the
    adjacencies of :math:`X` or :math:`Y` with :math:`|S| = p` renders them
    independent. The cardinality :math:`p` is increased from zero until no
    pair has enough adjacencies left or the depth is reached. Adjacencies are
    frozen at the start of every level, so the result does not depend on the
    order in which pairs are tested.

    Knowledge is used as a search hint: pairs forbidden in both directions
    are never adjacent and pairs with a required edge are never removed.

    Parameters
    ----------
    cond_ind_test : conditional independence test object
        Instantiated test from ``fangsearch.independence_tests`` with the
        dataframe already set.
    depth : int, optional (default: -1)
        Maximum size of the conditioning sets. -1 means unrestricted.
    knowledge : Knowledge, optional (default: None)
        Background knowledge. None means empty knowledge.
    verbosity : int, optional (default: 0)
        Verbose levels 0, 1, ...

    Attributes
    ----------
    sepsets : dictionary
        Dictionary of form {('X', 'Y'): ['Z', ...], ...} containing for every
        removed pair (in both orders) the separating set.
    p_matrix : array of shape [N, N]
        Maximum p-value found over all tests of each pair.
    val_matrix : array of shape [N, N]
        Test statistic value belonging to the maximum p-value.
    num_tests : int
        Number of independence tests performed.
    """

    def __init__(self, cond_ind_test, depth=-1, knowledge=None, verbosity=0):
        if isinstance(cond_ind_test, type):
            raise ValueError("FAS requires that cond_ind_test "
                             "is instantiated, e.g. cond_ind_test = "
                             "ScoreIndTest(score).")
        if cond_ind_test.dataframe is None:
            raise ValueError("Call cond_ind_test.set_dataframe first.")
        if not isinstance(depth, (int, np.integer)) or depth < -1:
            raise ValueError("depth must be an int >= -1, got %s" % depth)

        self.cond_ind_test = cond_ind_test
        self.depth = depth
        if knowledge is None:
            knowledge = Knowledge()
        self.knowledge = knowledge
        self.verbosity = verbosity
        self.var_names = cond_ind_test.dataframe.var_names
        self.N = len(self.var_names)

    def _get_max_depth(self):
        if self.depth == -1:
            return max(self.N - 2, 0)
        return self.depth

    def _get_initial_adjacency(self):
        """Returns the complete graph minus pairs forbidden by knowledge."""
        adj = np.ones((self.N, self.N), dtype='bool')
        adj[range(self.N), range(self.N)] = False
        for i, j in itertools.combinations(range(self.N), 2):
            if knowledge_forbids_adjacency(self.knowledge, self.var_names[i],
                                           self.var_names[j]):
                adj[i, j] = adj[j, i] = False
        return adj

    def _any_tests_remaining(self, adj, adjt, p):
        for i, j in zip(*np.where(np.triu(adj))):
            if len(adjt[i]) - 1 >= p or len(adjt[j]) - 1 >= p:
                return True
        return False

    def _get_conditions(self, adjt, i, j, p):
        """Returns subsets of cardinality p of the adjacencies of i and j."""
        conditions = []
        for (a, b) in [(i, j), (j, i)]:
            candidates = [k for k in adjt[a] if k != b]
            for S in itertools.combinations(candidates, p):
                if S not in conditions:
                    conditions.append(S)
        return conditions

    def _print_link_info(self, i, j, n_conditions):
        print("\n    Link (%s, %s): iterate through %d subset(s) of "
              "conditions" % (self.var_names[i], self.var_names[j],
                              n_conditions))

    def _print_cond_info(self, Z, comb_index, pval, val):
        var_name_z = ""
        for k in Z:
            var_name_z += "%s " % self.var_names[k]
        if len(Z) == 0:
            var_name_z = "()"
        print("    Subset %d: %s gives pval = %.5f / val = % .3f" %
              (comb_index, var_name_z, pval, val))

    def search(self):
        """Runs the fast adjacency search.

        Returns
        -------
        graph : Graph
            Skeleton with undirected edges only.
        """
        N = self.N
        adj = self._get_initial_adjacency()
        self.sepsets = {}
        self.p_matrix = np.zeros((N, N))
        self.p_matrix[~adj] = 1.
        self.p_matrix[range(N), range(N)] = 1.
        self.val_matrix = np.zeros((N, N))
        self.num_tests = 0
        max_depth = self._get_max_depth()

        if self.verbosity > 1:
            print("\n--------------------------")
            print("Skeleton discovery phase")
            print("--------------------------")

        p = 0
        while p <= max_depth:
            # Adjacencies are frozen for the whole level
            adjt = {j: list(np.where(adj[j])[0]) for j in range(N)}
            if not self._any_tests_remaining(adj, adjt, p):
                break

            if self.verbosity > 1:
                print("\nTesting condition sets of dimension %d:" % p)

            for i, j in itertools.combinations(range(N), 2):
                if not adj[i, j]:
                    continue
                if knowledge_requires_adjacency(self.knowledge,
                                                self.var_names[i],
                                                self.var_names[j]):
                    continue

                conditions = self._get_conditions(adjt, i, j, p)
                if self.verbosity > 1:
                    self._print_link_info(i, j, len(conditions))

                for q, S in enumerate(conditions):
                    val, pval, dependent = self.cond_ind_test.run_test(
                        X=[i], Y=[j], Z=list(S))
                    self.num_tests += 1

                    if self.verbosity > 1:
                        self._print_cond_info(Z=S, comb_index=q, pval=pval,
                                              val=val)

                    if pval >= self.p_matrix[i, j]:
                        self.p_matrix[i, j] = self.p_matrix[j, i] = pval
                        self.val_matrix[i, j] = self.val_matrix[j, i] = val

                    # If conditional independence is found, remove link
                    # from graph and store sepsets
                    if not dependent:
                        adj[i, j] = adj[j, i] = False
                        sepset = [self.var_names[k] for k in S]
                        self.sepsets[(self.var_names[i],
                                      self.var_names[j])] = sepset
                        self.sepsets[(self.var_names[j],
                                      self.var_names[i])] = sepset
                        break

            p += 1

        if self.verbosity > 0:
            print("\nFAS finished at depth %d after %d test(s)."
                  % (p - 1, self.num_tests))

        graph = Graph(self.var_names)
        for i, j in itertools.combinations(range(N), 2):
            if adj[i, j]:
                graph.add_undirected_edge(self.var_names[i],
                                          self.var_names[j])
        return graph
