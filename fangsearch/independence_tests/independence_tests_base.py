"""Fangsearch causal discovery for i.i.d. data."""

# License: GNU General Public License v3.0

import abc
import numpy as np


class CondIndTest(metaclass=abc.ABCMeta):
    """Base class of conditional independence tests.

    Handles access to the data, caching of test results and the test
    decision. Concrete tests implement get_dependence_measure and
    get_analytic_significance, or override _get_val_pval altogether.

    The test is stateless across queries apart from the cache: it can be
    queried repeatedly and in any order.

    Parameters
    ----------
    alpha : float, optional (default: 0.01)
        Default significance level used by is_independent and by run_test if
        no alpha_or_thres is given.
    verbosity : int, optional (default: 0)
        Level of verbosity.
    """
    @abc.abstractmethod
    def get_dependence_measure(self, array, xyz):
        """
        Abstract function that all concrete classes must instantiate.
        """
        pass

    @property
    @abc.abstractmethod
    def measure(self):
        """
        Abstract property to store the type of independence test.
        """
        pass

    def __init__(self,
                 alpha=0.01,
                 verbosity=0):
        # Set the dataframe to None for now, will be reset during the search
        self.dataframe = None
        if not 0. <= alpha <= 1.:
            raise ValueError("alpha must be in [0, 1], got %s" % alpha)
        self.alpha = alpha
        self.verbosity = verbosity
        self.cached_ci_results = {}
        self.ci_results = {}

        if self.verbosity > 0:
            self.print_info()

    def print_info(self):
        """
        Print information about the conditional independence test parameters
        """
        info_str = "\n# Initialize conditional independence test\n\nParameters:"
        info_str += "\nindependence test = %s" % self.measure
        info_str += "\nalpha = %s" % self.alpha
        print(info_str)

    def get_analytic_significance(self, value, T, dim):
        """
        Base class assumption that this is not implemented.  Concrete classes
        should override when possible.
        """
        raise NotImplementedError("Analytic significance not"+\
                                  " implemented for %s" % self.measure)

    def set_dataframe(self, dataframe):
        """Initialize the dataframe and reset the cache.

        Parameters
        ----------
        dataframe : data object
            Fangsearch dataframe object. It must have the attribute
            dataframe.values yielding a numpy array of shape (observations T,
            variables N).
        """
        self.dataframe = dataframe
        self.cached_ci_results = {}
        self.ci_results = {}

    def _keyfy(self, X, Y, Z):
        """Helper function to key results independent of the order of X and Y
        and within Z."""
        return (tuple(sorted(set(X) | set(Y))), tuple(sorted(set(Z))))

    def _check_xyz(self, X, Y, Z):
        """Checks that X, Y are univariate and X, Y, Z disjoint."""
        if self.dataframe is None:
            raise ValueError("Call set_dataframe first when using CI test "
                             "outside the search classes.")
        if len(X) != 1 or len(Y) != 1:
            raise ValueError("X and Y for %s must be univariate." %
                             self.measure)
        if len(set(X) & set(Y)) > 0 or len((set(X) | set(Y)) & set(Z)) > 0:
            raise ValueError("X, Y, Z must be disjoint, got X = %s, Y = %s, "
                             "Z = %s" % (X, Y, Z))

    def _get_array(self, X, Y, Z):
        """Returns data array with X, Y, Z in rows and the identifier xyz."""
        self._check_xyz(X, Y, Z)
        indices = list(X) + list(Y) + list(Z)
        array = self.dataframe.values[:, indices].T.copy()
        xyz = np.array([0 for i in X] + [1 for i in Y] + [2 for i in Z])
        return array, xyz

    def _get_val_pval(self, X, Y, Z):
        """Returns test statistic value and p-value for X _|_ Y | Z."""
        array, xyz = self._get_array(X, Y, Z)
        dim, T = array.shape
        val = self.get_dependence_measure(array, xyz)
        pval = self.get_analytic_significance(value=val, T=T, dim=dim)
        return val, pval

    def _get_dependent(self, val, pval, alpha_or_thres):
        """Returns the test decision from value and p-value."""
        return pval <= alpha_or_thres

    def run_test(self, X, Y, Z=None, alpha_or_thres=None):
        """Perform conditional independence test.

        Parameters
        ----------
        X, Y, Z : list of ints
            Variable indices. X and Y must contain a single index each, Z may
            be empty or None.
        alpha_or_thres : float, optional (default: None)
            Significance level. If None, self.alpha is used.

        Returns
        -------
        val, pval, dependent : Tuple of floats and bool
            The test statistic value, the p-value and the test decision.
        """
        if Z is None:
            Z = []
        X = list(X)
        Y = list(Y)
        Z = list(Z)
        if alpha_or_thres is None:
            alpha_or_thres = self.alpha

        key = self._keyfy(X, Y, Z)
        if key in self.cached_ci_results:
            cached = True
            val, pval = self.cached_ci_results[key]
        else:
            cached = False
            val, pval = self._get_val_pval(X, Y, Z)
            self.cached_ci_results[key] = (val, pval)

        dependent = bool(self._get_dependent(val, pval, alpha_or_thres))
        self.ci_results[(tuple(X), tuple(Y), tuple(Z))] = (val, pval,
                                                           dependent)

        if self.verbosity > 1:
            self._print_cond_ind_results(val=val, pval=pval, cached=cached,
                                         dependent=dependent)
        return val, pval, dependent

    def is_independent(self, x, y, z=None):
        """Returns whether x and y are independent given z at self.alpha.

        Parameters
        ----------
        x, y : int
            Variable indices.
        z : list of ints, optional (default: None)
            Conditioning set.
        """
        _, _, dependent = self.run_test(X=[x], Y=[y], Z=z)
        return not dependent

    def _print_cond_ind_results(self, val, pval=None, cached=None, dependent=None):
        """Print results from conditional independence test.

        Parameters
        ----------
        val : float
            Test stastistic value.

        pval : float, optional (default: None)
            p-value

        dependent : bool
            Test decision.
        """
        printstr = "        val = % .3f" % (val)
        if pval is not None:
            printstr += " | pval = %.5f" % (pval)
        if dependent is not None:
            printstr += " | dependent = %s" % (dependent)
        if cached is not None:
            printstr += " %s" % ({0:"", 1:"[cached]"}[cached])

        print(printstr)
