"""
Mixture components of a Dirichlet Process mixture model.
"""

__all__ = ["MixtureComponent", "GaussianComponent",
           "MultivariateGaussianComponent"]

import abc
import copy
import numpy as np
from scipy import stats


class MixtureComponent(object, metaclass=abc.ABCMeta):

    r"""
    A single component of a Dirichlet Process mixture model.

    A component owns a set of data indices (positions in the model's data
    array), a parameter vector, and its position in the model's ordered
    list of components.

    :param data: [optional]
        An iterable of data indices that belong to this component.

    :param mixture_component_index: [optional]
        The position of this component in the model.
    """

    def __init__(self, data=None, mixture_component_index=None):
        self._data = set() if data is None else set(map(int, data))
        self.mixture_component_index = mixture_component_index
        return None


    def __repr__(self):
        return f"<{self.__class__.__name__} "\
               f"index={self.mixture_component_index} "\
               f"N={self.number_of_observations}>"


    @property
    def data(self):
        r""" Return the set of data indices owned by this component. """
        return self._data


    @property
    def number_of_observations(self):
        return len(self._data)


    def add_data(self, data_index):
        self._data.add(int(data_index))


    def remove_data(self, data_index):
        self._data.remove(int(data_index))


    def clear_data(self):
        self._data.clear()


    def copy(self):
        r""" Return an independent copy of this component. """
        return copy.deepcopy(self)


    def log_likelihood(self, y):
        r"""
        Return the log-likelihood of the data owned by this component.

        :param y:
            The data array of the model.
        """
        return float(np.sum([self.log_density(y[i]) for i in self._data]))


    @property
    @abc.abstractmethod
    def parameters(self):
        r""" Return the parameters of this component as a flat vector. """
        raise NotImplementedError("should be implemented by sub-classes")


    @abc.abstractmethod
    def log_density(self, y_i):
        r"""
        Return the log density of a single observation under this component.
        """
        raise NotImplementedError("should be implemented by sub-classes")


    @abc.abstractmethod
    def sample_posterior(self, y, random_state):
        r"""
        Update the parameters with one sweep of a posterior sampler,
        conditioned on the data owned by this component.

        :param y:
            The data array of the model.

        :param random_state:
            A `numpy.random.RandomState` instance.
        """
        raise NotImplementedError("should be implemented by sub-classes")



class GaussianComponent(MixtureComponent):

    r"""
    A univariate normal component with a semi-conjugate prior,

    .. math::

        \mu \sim \mathcal{N}\left(\mu_0, v_0\right) \qquad
        \sigma^2 \sim \textrm{Inv-Gamma}\left(a_0, b_0\right)

    :param mean:
        The mean of the component.

    :param variance:
        The variance of the component.

    :param prior_mean: [optional]
        The prior mean of :math:`\mu` (default: `0`).

    :param prior_variance: [optional]
        The prior variance of :math:`\mu` (default: `100`).

    :param prior_shape: [optional]
        The shape :math:`a_0` of the prior on the variance (default: `1`).

    :param prior_scale: [optional]
        The scale :math:`b_0` of the prior on the variance (default: `1`).
    """

    def __init__(self, mean, variance, prior_mean=0.0, prior_variance=100.0,
                 prior_shape=1.0, prior_scale=1.0, **kwargs):
        super(GaussianComponent, self).__init__(**kwargs)

        variance = float(variance)
        if 0 >= variance:
            raise ValueError("variance must be positive")

        prior_variance, prior_shape, prior_scale = \
            (float(prior_variance), float(prior_shape), float(prior_scale))
        if 0 >= min(prior_variance, prior_shape, prior_scale):
            raise ValueError("prior variance, shape and scale must be positive")

        self.mean = float(mean)
        self.variance = variance
        self.prior_mean = float(prior_mean)
        self.prior_variance = prior_variance
        self.prior_shape = prior_shape
        self.prior_scale = prior_scale
        return None


    @property
    def parameters(self):
        return np.array([self.mean, self.variance])


    def log_density(self, y_i):
        return float(stats.norm.logpdf(y_i, self.mean, self.variance**0.5))


    def sample_posterior(self, y, random_state):

        x = np.array([y[i] for i in sorted(self._data)], dtype=float)
        N = x.size

        # Mean, given the variance.
        var_n = 1.0/(1.0/self.prior_variance + N/self.variance)
        mu_n = var_n * (self.prior_mean/self.prior_variance \
                        + np.sum(x)/self.variance)
        self.mean = random_state.normal(mu_n, var_n**0.5)

        # Variance, given the mean.
        shape = self.prior_shape + 0.5 * N
        rate = self.prior_scale + 0.5 * np.sum((x - self.mean)**2)
        self.variance = 1.0/random_state.gamma(shape, 1.0/rate)
        return None



class MultivariateGaussianComponent(MixtureComponent):

    r"""
    A multivariate normal component with a semi-conjugate prior,

    .. math::

        \mu \sim \mathcal{N}\left(\mu_0, \Sigma_0\right) \qquad
        \Sigma \sim \mathcal{W}^{-1}\left(\Psi_0, \nu_0\right)

    :param mean:
        The mean of the component, a vector of length :math:`D`.

    :param cov:
        The :math:`D\times{}D` covariance matrix of the component.

    :param prior_mean: [optional]
        The prior mean of :math:`\mu` (default: zeros).

    :param prior_cov: [optional]
        The prior covariance of :math:`\mu` (default: `100` times identity).

    :param prior_dof: [optional]
        The degrees of freedom :math:`\nu_0` of the inverse-Wishart prior
        (default: :math:`D + 2`).

    :param prior_scale: [optional]
        The scale matrix :math:`\Psi_0` of the inverse-Wishart prior
        (default: identity).

    :param covariance_regularization: [optional]
        Regularization strength to add to the diagonal of sampled covariance
        matrices (default: `0`).
    """

    def __init__(self, mean, cov, prior_mean=None, prior_cov=None,
                 prior_dof=None, prior_scale=None, covariance_regularization=0,
                 **kwargs):
        super(MultivariateGaussianComponent, self).__init__(**kwargs)

        mean = np.atleast_1d(np.array(mean, dtype=float))
        D = mean.size
        cov = np.array(cov, dtype=float)
        if cov.shape != (D, D):
            raise ValueError(f"covariance matrix must have shape ({D}, {D})")

        covariance_regularization = float(covariance_regularization)
        if 0 > covariance_regularization:
            raise ValueError("covariance_regularization must be non-negative")

        self.mean = mean
        self.cov = cov
        self.prior_mean = np.zeros(D) if prior_mean is None \
                                      else np.array(prior_mean, dtype=float)
        self.prior_cov = 100 * np.eye(D) if prior_cov is None \
                                         else np.array(prior_cov, dtype=float)
        self.prior_dof = D + 2 if prior_dof is None else float(prior_dof)
        self.prior_scale = np.eye(D) if prior_scale is None \
                                     else np.array(prior_scale, dtype=float)
        self.covariance_regularization = covariance_regularization

        if self.prior_dof <= D - 1:
            raise ValueError(f"prior_dof must be greater than {D - 1}")
        return None


    @property
    def dimension(self):
        return self.mean.size


    @property
    def parameters(self):
        return np.hstack([self.mean, self.cov.flatten()])


    def log_density(self, y_i):
        return float(stats.multivariate_normal.logpdf(y_i, self.mean, self.cov))


    def sample_posterior(self, y, random_state):

        D = self.dimension
        x = np.array([y[i] for i in sorted(self._data)], dtype=float)
        x = x.reshape((-1, D))
        N = x.shape[0]

        # Mean, given the covariance.
        prior_precision = np.linalg.inv(self.prior_cov)
        precision = np.linalg.inv(self.cov)
        cov_n = np.linalg.inv(prior_precision + N * precision)
        cov_n = 0.5 * (cov_n + cov_n.T)
        mu_n = cov_n @ (prior_precision @ self.prior_mean \
                        + precision @ np.sum(x, axis=0))
        self.mean = random_state.multivariate_normal(mu_n, cov_n)

        # Covariance, given the mean.
        residual = x - self.mean
        scale = self.prior_scale + residual.T @ residual
        cov = stats.invwishart.rvs(df=self.prior_dof + N, scale=scale,
                                   random_state=random_state)
        self.cov = np.atleast_2d(cov) \
                 + self.covariance_regularization * np.eye(D)
        return None
