"""Fangsearch causal discovery for i.i.d. data."""

# License: GNU General Public License v3.0

import warnings
import numpy as np


class DataFrame():
    """Data object containing an i.i.d. sample of continuous variables and
    the variable definitions.

    Parameters
    ----------
    data : array-like
        Numpy array of shape (observations T, variables N). Must only contain
        finite values.
    var_names : list of strings, optional (default: ['X1', ..., 'XN'])
        Names of variables, must match the number of variables and be unique.
        Names identify the nodes of all graphs returned by the search.

    Attributes
    ----------
    values : array-like
        Copy of data of shape (T, N).
    var_names : list of strings
        Variable names in column order.
    T : int
        Number of samples.
    N : int
        Number of variables.
    """

    def __init__(self, data, var_names=None):

        if not isinstance(data, np.ndarray):
            raise TypeError("'data' is of type {}, must be "
                            "np.ndarray.".format(type(data)))

        if data.ndim != 2:
            raise ValueError("'data' is of shape {}, must be of shape "
                             "(T, N).".format(data.shape))

        self.values = np.array(data, dtype='float64')
        self.T, self.N = self.values.shape

        if self.N == 0:
            raise ValueError("'data' contains no variables.")

        if self.T < 3:
            raise ValueError("'data' has {} samples, at least 3 are "
                             "required.".format(self.T))

        if np.isnan(self.values).sum() != 0:
            raise ValueError("NaNs in the data.")

        if not np.all(np.isfinite(self.values)):
            raise ValueError("Infinite values in the data.")

        if self.N > self.T:
            warnings.warn("'data'.shape = ({}, {}); is it of shape "
                          "(observations, variables)?".format(self.T, self.N))

        # Save the variable names. If unspecified, use the default
        if var_names is None:
            self.var_names = ['X%d' % (i + 1) for i in range(self.N)]
        else:
            self.var_names = [str(name) for name in var_names]
            if len(self.var_names) != self.N:
                raise ValueError("Got {} var_names for {} "
                                 "variables.".format(len(self.var_names),
                                                     self.N))
            if len(set(self.var_names)) != self.N:
                raise ValueError("var_names must be unique.")

    def get_index(self, name):
        """Returns the column index of the variable called name."""
        return self.var_names.index(name)

    def get_column(self, name):
        """Returns a copy of the samples of the variable called name."""
        return self.values[:, self.get_index(name)].copy()

    def get_constant_variables(self):
        """Returns the names of variables with zero sample variance."""
        # The std of a constant float column need not be exactly zero
        value_range = np.ptp(self.values, axis=0)
        return [self.var_names[i] for i in np.where(value_range == 0.)[0]]

    def standardize(self):
        """Returns a new DataFrame with standardized columns.

        Every column is centered to mean zero and scaled to unit sample
        variance (n-1 divisor). Variable order and names are kept.

        Raises ValueError if any column is constant, since the result would
        not be finite.

        Returns
        -------
        dataframe : DataFrame
            Standardized copy.
        """
        constant = self.get_constant_variables()
        if len(constant) > 0:
            raise ValueError("Zero variance in variable(s) %s, cannot "
                             "standardize." % ", ".join(constant))

        data = self.values - self.values.mean(axis=0)
        data /= data.std(axis=0, ddof=1)

        if not np.all(np.isfinite(data)):
            raise ValueError("Non-finite values after standardizing.")

        return DataFrame(data, var_names=list(self.var_names))

    def print_info(self):
        """Prints the shape and variable names of the data."""
        print("\n# DataFrame with T = %d samples of N = %d variables:"
              % (self.T, self.N))
        print("    %s" % ", ".join(self.var_names))


def standardize_data(data):
    """Returns standardized copy of a one-dimensional array.

    Centers to mean zero and scales to unit sample variance (n-1 divisor).

    Parameters
    ----------
    data : array-like
        Array of shape (T,).

    Returns
    -------
    data : array-like
        Standardized array. Non-finite if data is constant.
    """
    data = np.array(data, dtype='float64')
    data -= data.mean()
    norm = np.sqrt((data**2).sum() / (len(data) - 1))
    return data / norm
