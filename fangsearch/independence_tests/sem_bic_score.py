"""Fangsearch causal discovery for i.i.d. data."""

# License: GNU General Public License v3.0

import numpy as np


class SemBicScore():
    r"""BIC score of linear structural equation models.

    The score of variable :math:`i` given a parent set :math:`P` is

    .. math:: S(i | P) = -T \ln \sigma^2_{i|P} - c (|P| + 1) \ln T

    where :math:`\sigma^2_{i|P}` is the residual variance of the linear
    regression of :math:`i` on :math:`P` and :math:`c` the penalty discount.
    Residual variances are computed from the sample covariance matrix, which
    is calculated once on construction.

    Parameters
    ----------
    dataframe : data object
        Fangsearch dataframe object, usually standardized.
    penalty_discount : float, optional (default: 1.)
        Multiplier of the complexity penalty. Larger values give sparser
        graphs.

    Attributes
    ----------
    covariance : array-like
        Sample covariance matrix of shape (N, N) with n-1 divisor.
    T : int
        Sample length.
    """

    def __init__(self, dataframe, penalty_discount=1.):
        if penalty_discount < 0.:
            raise ValueError("penalty_discount must be >= 0, got %s"
                             % penalty_discount)
        self.dataframe = dataframe
        self.penalty_discount = penalty_discount
        self.T = dataframe.T
        self.N = dataframe.N
        self.covariance = np.atleast_2d(np.cov(dataframe.values, rowvar=False,
                                               ddof=1))
        self._cached_scores = {}

    def get_variable_names(self):
        return list(self.dataframe.var_names)

    def _get_residual_variance(self, covariance, i, parents):
        """Returns residual variance of i regressed on parents."""
        var = covariance[i, i]
        if len(parents) > 0:
            parents = list(parents)
            cov_pp = covariance[np.ix_(parents, parents)]
            cov_pi = covariance[parents, i]
            beta = np.dot(np.linalg.pinv(cov_pp), cov_pi)
            var = var - np.dot(cov_pi, beta)
        # Guard against round-off for (near) deterministic relations
        return max(var, np.finfo(float).tiny)

    def _get_score(self, var, num_parents, T):
        return (-T * np.log(var)
                - self.penalty_discount * (num_parents + 1) * np.log(T))

    def local_score(self, i, parents=None):
        """Returns the score of variable i given parents.

        Parameters
        ----------
        i : int
            Index of the target variable.
        parents : list of ints, optional (default: None)
            Indices of the parents.

        Returns
        -------
        score : float
            Local BIC score. Higher is better.
        """
        if parents is None:
            parents = []
        parents = tuple(sorted(parents))
        if i in parents:
            raise ValueError("Variable %d cannot be its own parent." % i)
        key = (i, parents)
        if key not in self._cached_scores:
            var = self._get_residual_variance(self.covariance, i, parents)
            self._cached_scores[key] = self._get_score(var, len(parents),
                                                       self.T)
        return self._cached_scores[key]

    def local_score_diff(self, x, y, z=None):
        """Returns the score gain of adding x to the parents z of y.

        A positive value means the data favor a dependence of y on x given z.
        """
        if z is None:
            z = []
        return self.local_score(y, list(z) + [x]) - self.local_score(y, z)
