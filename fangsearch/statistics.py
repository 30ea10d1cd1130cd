"""Fangsearch causal discovery for i.i.d. data."""

# License: GNU General Public License v3.0

import numpy as np
from scipy import stats

# Tail selectors for tail_correlation: which variable is restricted and in
# which direction relative to the cutoff
TAILS = {
    'all': (0, 0),
    'x_upper': (1, 0),
    'y_upper': (0, 1),
    'x_lower': (-1, 0),
    'y_lower': (0, -1),
}


def _tail_mask(x, y, x_inc, y_inc, cutoff):
    """Returns boolean mask of the samples in the requested tail."""
    if x_inc == 0 and y_inc == 0:
        return np.ones(len(x), dtype='bool')
    elif x_inc == 1 and y_inc == 0:
        return x > cutoff
    elif x_inc == 0 and y_inc == 1:
        return y > cutoff
    elif x_inc == -1 and y_inc == 0:
        return x < cutoff
    elif x_inc == 0 and y_inc == -1:
        return y < cutoff
    raise ValueError("Invalid tail (x_inc, y_inc) = (%s, %s)." % (x_inc, y_inc))


def tail_covariance(x, y, x_inc=0, y_inc=0, cutoff=0.):
    """Returns covariance of x and y over the samples in one tail.

    Moments are normalized by the number of selected samples.

    Parameters
    ----------
    x, y : array-like
        Arrays of shape (T,).
    x_inc, y_inc : {-1, 0, 1}
        Restriction: x_inc=1 keeps samples with x > cutoff, x_inc=-1 those
        with x < cutoff, and likewise for y_inc. At most one of them may be
        non-zero; (0, 0) uses all samples.
    cutoff : float, optional (default: 0.)
        Threshold of the restriction.

    Returns
    -------
    cov, var_x, var_y, n : tuple
        Covariance, variances and the number of selected samples. The moments
        are numpy.nan if fewer than two samples are selected.
    """
    x = np.asarray(x, dtype='float64')
    y = np.asarray(y, dtype='float64')
    mask = _tail_mask(x, y, x_inc, y_inc, cutoff)
    n = int(mask.sum())
    if n < 2:
        return np.nan, np.nan, np.nan, n

    xs = x[mask]
    ys = y[mask]
    ex = xs.sum() / n
    ey = ys.sum() / n
    exy = (xs * ys).sum() / n
    exx = (xs * xs).sum() / n
    eyy = (ys * ys).sum() / n
    return exy - ex * ey, exx - ex * ex, eyy - ey * ey, n


def tail_correlation(x, y, x_inc=0, y_inc=0, cutoff=0.):
    """Returns Pearson correlation of x and y over the samples in one tail.

    See tail_covariance for the parameters. The product of the two variances
    is formed symmetrically so that swapping x and y (together with x_inc and
    y_inc) gives a bit-identical result.

    Returns
    -------
    val : float
        Correlation coefficient, or numpy.nan if fewer than two samples are
        selected or one of the variables is constant within the tail.
    """
    cov, var_x, var_y, n = tail_covariance(x, y, x_inc=x_inc, y_inc=y_inc,
                                           cutoff=cutoff)
    if n < 2:
        return np.nan
    denom = var_x * var_y
    if not denom > 0.:
        return np.nan
    return cov / np.sqrt(denom)


def fisher_z(r):
    """Fisher z-transform 0.5 * (ln(1 + r) - ln(1 - r)).

    Returns +-inf for r = +-1 and numpy.nan for undefined r.
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        return 0.5 * (np.log(1. + r) - np.log(1. - r))


def asymmetry_statistic(r, r_tail, T):
    """Returns the t-statistic of the difference of two Fisher z-values.

    Parameters
    ----------
    r : float
        Unrestricted correlation.
    r_tail : float
        Tail-restricted correlation.
    T : int
        Sample length of the unrestricted data.

    Returns
    -------
    t : float
        (z(r) - z(r_tail)) / sqrt(2 / T).
    """
    with np.errstate(invalid='ignore'):
        diff = fisher_z(r) - fisher_z(r_tail)
    return diff / np.sqrt(2. / T)


def asymmetry_pvalue(t, T):
    """Returns p-value of an asymmetry statistic.

    Evaluates 1 - F(|t / 2|) with F the cumulative Student-t distribution
    with 2T - 2 degrees of freedom. The halving of the statistic is part of
    the calibration of the orientation rule.

    Parameters
    ----------
    t : float
        Statistic from asymmetry_statistic.
    T : int
        Sample length.

    Returns
    -------
    pval : float
        p-value, numpy.nan if t is undefined.
    """
    if np.isnan(t):
        return np.nan
    return 1. - stats.t.cdf(np.abs(t / 2.), 2 * T - 2)
