"""Fangsearch causal discovery for i.i.d. data."""

# License: GNU General Public License v3.0

import numpy as np
from scipy import stats

from .independence_tests_base import CondIndTest
from .sem_bic_score import SemBicScore

class ScoreIndTest(CondIndTest):
    r"""Conditional independence test derived from a score.

    Declares :math:`X \perp Y | Z` if adding :math:`X` to the parents
    :math:`Z` of :math:`Y` does not increase the score, that is, the test
    statistic is the score difference and the decision does not depend on
    alpha. The penalty discount of the score takes the role of the
    significance level.

    As p-value the likelihood ratio statistic, recovered from the score
    difference, is referred to a chi-square distribution with one degree of
    freedom.

    The score works on its cached covariance matrix, so queries pass
    variable indices instead of a data array to get_dependence_measure.

    Parameters
    ----------
    score : SemBicScore
        Score object, which also provides the data.
    **kwargs :
        Arguments passed on to Parent class CondIndTest.
    """
    @property
    def measure(self):
        """
        Concrete property to return the measure of the independence test
        """
        return self._measure

    def __init__(self, score, **kwargs):
        self._measure = 'score'
        self.score = score
        CondIndTest.__init__(self, **kwargs)
        CondIndTest.set_dataframe(self, score.dataframe)

    def print_info(self):
        """
        Print information about the test, alpha does not enter the decision
        """
        info_str = "\n# Initialize conditional independence test\n\nParameters:"
        info_str += "\nindependence test = %s" % self.measure
        info_str += "\npenalty_discount = %s" % self.score.penalty_discount
        print(info_str)

    def set_dataframe(self, dataframe):
        """Rebuilds the score on a new dataframe."""
        self.score = SemBicScore(dataframe,
                                 penalty_discount=self.score.penalty_discount)
        CondIndTest.set_dataframe(self, dataframe)

    def get_dependence_measure(self, array, xyz):
        """Returns score gain of adding X to the parents Z of Y.

        Parameters
        ----------
        array : array of ints
            Variable indices of X, Y and Z.

        xyz : array of ints
            XYZ identifier array of shape (dim,).

        Returns
        -------
        val : float
            Score gain, positive values favor dependence.
        """
        x = int(array[xyz == 0][0])
        y = int(array[xyz == 1][0])
        z = [int(k) for k in array[xyz == 2]]
        return self.score.local_score_diff(x, y, z)

    def get_analytic_significance(self, value, T, dim):
        """Returns p-value of the likelihood ratio statistic.

        Parameters
        ----------
        value : float
            Score difference.

        T : int
            Sample length

        dim : int
            Dimensionality, ie, number of features.

        Returns
        -------
        pval : float
            P-value.
        """
        lr_stat = value + self.score.penalty_discount * np.log(T)
        return stats.chi2.sf(max(lr_stat, 0.), 1)

    def _get_val_pval(self, X, Y, Z):
        self._check_xyz(X, Y, Z)
        indices = np.array(list(X) + list(Y) + list(Z))
        xyz = np.array([0 for i in X] + [1 for i in Y] + [2 for i in Z])
        val = self.get_dependence_measure(indices, xyz)
        pval = self.get_analytic_significance(value=val, T=self.score.T,
                                              dim=len(indices))
        return val, pval

    def _get_dependent(self, val, pval, alpha_or_thres):
        return val > 0.
