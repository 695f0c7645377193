
import numpy as np
from scipy.special import logsumexp

LOG_HALF = np.log(0.5)


def log_normalize_pair(log_a, log_b):
    r"""
    Normalise two unnormalised log probabilities into a two-way probability
    distribution, working in log space so that very small densities do not
    underflow:

    .. math::

        \log{p_a} = \log{a} - \log{\left(a + b\right)}

    If the pair cannot be normalised (both terms are :math:`-\infty`, or
    either is NaN or :math:`+\infty`) then the uniform distribution is
    returned instead.

    :param log_a:
        The unnormalised log probability of the first outcome.

    :param log_b:
        The unnormalised log probability of the second outcome.

    :returns:
        A three-length tuple containing the normalised log probability of
        the first outcome, that of the second outcome, and a boolean flag
        indicating whether the uniform fallback was used.
    """

    log_a, log_b = (float(log_a), float(log_b))

    if np.isnan(log_a) or np.isnan(log_b) \
    or np.isposinf(log_a) or np.isposinf(log_b) \
    or (np.isneginf(log_a) and np.isneginf(log_b)):
        return (LOG_HALF, LOG_HALF, True)

    log_total = logsumexp([log_a, log_b])
    return (log_a - log_total, log_b - log_total, False)



def mixing_weights_agree(a, b, rtol=1e-5, atol=1e-8):
    r"""
    Return whether two mixing weight vectors have the same length and the
    same total mass.

    :param a:
        The first vector of mixing weights.

    :param b:
        The second vector of mixing weights.
    """

    a, b = (np.atleast_1d(a), np.atleast_1d(b))
    if a.size != b.size:
        return False
    return bool(np.isclose(np.sum(a), np.sum(b), rtol=rtol, atol=atol))
