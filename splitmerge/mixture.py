"""
A Dirichlet Process mixture model whose partition can be changed by
split-merge proposals.
"""

__all__ = ["DirichletProcessMixtureModel"]

import logging
import numpy as np

from .exceptions import PreconditionViolation

logger = logging.getLogger(__name__)


class DirichletProcessMixtureModel(object):

    r"""
    Model data as a Dirichlet Process mixture with a finite list of populated
    components, one designated empty component, and the remaining
    stick-breaking mass.

    :param y:
        The data values, :math:`y`, which are expected to have :math:`N`
        samples, either as a vector or as an :math:`N\times{}D` array.

    :param components:
        A list of :class:`splitmerge._components.MixtureComponent` objects
        whose data sets partition the :math:`N` observations.

    :param mixing_weights: [optional]
        The mixing weights of the populated components. There is no terminal
        element for the unpopulated components, so the sum must not exceed
        one. By default the weights are proportional to the number of
        observations in each component, scaled by
        :math:`N/(N + \alpha)`.

    :param concentration: [optional]
        The concentration parameter :math:`\alpha` of the Dirichlet Process
        (default: `1`).

    :param empty_component: [optional]
        The first unpopulated component. By default this is a copy of the
        last populated component with its data removed.

    :param empty_mixing_weight: [optional]
        The mixing weight held by the empty component (default: `0`).
    """

    def __init__(self, y, components, mixing_weights=None, concentration=1.0,
                 empty_component=None, empty_mixing_weight=0.0):

        y = np.asarray(y, dtype=float)
        if y.ndim not in (1, 2):
            raise ValueError("y must be a vector or a two-dimensional array")

        concentration = float(concentration)
        if 0 >= concentration:
            raise ValueError("concentration must be positive")

        components = list(components)
        if not components:
            raise ValueError("at least one populated component is required")

        N = y.shape[0]
        seen = set()
        for component in components:
            if component.number_of_observations == 0:
                raise ValueError("populated components must hold data")

            if seen & component.data:
                raise ValueError("components must not share observations")
            seen |= component.data

        if seen != set(range(N)):
            raise ValueError(
                f"components must partition all {N} observations")

        K = len(components)
        if mixing_weights is None:
            sizes = np.array([c.number_of_observations for c in components])
            mixing_weights = sizes/(N + concentration)

        mixing_weights = np.array(mixing_weights, dtype=float)
        if mixing_weights.shape != (K, ):
            raise ValueError(f"expected {K} mixing weights")

        empty_mixing_weight = float(empty_mixing_weight)
        if np.any(mixing_weights < 0) or 0 > empty_mixing_weight:
            raise ValueError("mixing weights must be non-negative")

        if np.sum(mixing_weights) + empty_mixing_weight > 1 + 1e-8:
            raise ValueError("mixing weights must not sum to more than one")

        if empty_component is None:
            empty_component = components[-1].copy()
            empty_component.clear_data()

        elif empty_component.number_of_observations > 0:
            raise ValueError("the empty component must not hold data")

        self._y = y
        self._concentration = concentration
        self._components = components
        self._mixing_weights = mixing_weights
        self._empty_component = empty_component
        self._empty_mixing_weight = empty_mixing_weight
        self._revision = 0

        self._reindex()
        return None


    def __repr__(self):
        return f"<{self.__class__.__name__} N={self.number_of_observations} "\
               f"K={self.component_count()}>"


    @property
    def y(self):
        r""" Return the data array. """
        return self._y


    @property
    def concentration(self):
        r""" Return the concentration parameter of the Dirichlet Process. """
        return self._concentration


    @property
    def number_of_observations(self):
        return self._y.shape[0]


    @property
    def revision(self):
        r"""
        Return the number of proposals committed to the model. Proposals
        record this value when they are built.
        """
        return self._revision


    @property
    def components(self):
        r""" Return a copy of the ordered list of populated components. """
        return list(self._components)


    def component_count(self):
        return len(self._components)


    def component_at(self, index):
        return self._components[index]


    def component_containing(self, data_index):
        r"""
        Return the populated component that owns an observation.

        :param data_index:
            The index of the observation in `y`.
        """
        try:
            return self._membership[int(data_index)]

        except KeyError:
            raise IndexError(f"no observation with index {data_index}")


    def mixing_weights(self):
        r"""
        Return the mixing weights of the populated components, without a
        terminal element for the unpopulated mass.
        """
        return self._mixing_weights.copy()


    def empty_component(self):
        return self._empty_component


    def empty_mixing_weight(self):
        return self._empty_mixing_weight


    def remaining_mass(self):
        r"""
        Return the mixing weight held by unpopulated components other than
        the designated empty component.
        """
        return 1.0 - np.sum(self._mixing_weights) - self._empty_mixing_weight


    def cluster_indicators(self):
        r"""
        Return an array giving the component index of every observation.
        """
        labels = np.empty(self.number_of_observations, dtype=int)
        for k, component in enumerate(self._components):
            labels[sorted(component.data)] = k
        return labels


    def log_likelihood(self):
        r""" Return the log-likelihood of the data, given the partition. """
        return float(np.sum([c.log_likelihood(self._y) \
                             for c in self._components]))


    def commit(self, proposal):
        r"""
        Apply an accepted split or merge proposal to the model.

        The components named by the proposal replace those in the model, the
        components are re-indexed, and the mixing weights are replaced by
        those on the far side of the move.

        :param proposal:
            A :class:`splitmerge.proposal.Proposal` built against the current
            state of this model.

        :raises PreconditionViolation:
            If the proposal was built from an earlier state of the model, or
            from another model.
        """

        proposal.check()

        if proposal.model_revision != self._revision:
            raise PreconditionViolation(
                f"the proposal was built from revision "\
                f"{proposal.model_revision} of the model, which is now at "\
                f"revision {self._revision}")

        if proposal.is_split():
            self._commit_split(proposal)
        else:
            self._commit_merge(proposal)

        self._reindex()
        self._revision += 1
        return None


    def _commit_split(self, proposal):

        index = proposal.merged.mixture_component_index
        K = self.component_count()

        if self._components[index] is not proposal.merged:
            raise PreconditionViolation(
                "the proposal was not built from the current model state")

        logger.info(f"Splitting component {index} of {K} into components "\
                    f"{index} and {K}")

        self._components[index] = proposal.split1
        self._components.append(proposal.split2)
        self._mixing_weights = np.array(proposal.split_mixing_weights)

        # The old empty component now holds data.
        empty_component = proposal.split2.copy()
        empty_component.clear_data()
        self._empty_component = empty_component
        self._empty_mixing_weight = 0.0
        return None


    def _commit_merge(self, proposal):

        a_index = proposal.split1.mixture_component_index
        b_index = proposal.split2.mixture_component_index
        K = self.component_count()

        if self._components[a_index] is not proposal.split1 \
        or self._components[b_index] is not proposal.split2:
            raise PreconditionViolation(
                "the proposal was not built from the current model state")

        logger.info(f"Merging component {b_index} (of {K}) into {a_index}")

        del self._components[b_index]
        self._components[proposal.merged.mixture_component_index] \
            = proposal.merged

        weights = np.array(proposal.merged_mixing_weights)
        self._mixing_weights = weights[:-1]
        self._empty_component = proposal.empty
        self._empty_mixing_weight = float(weights[-1])
        return None


    def _reindex(self):
        self._membership = {}
        for k, component in enumerate(self._components):
            component.mixture_component_index = k
            for data_index in component.data:
                self._membership[data_index] = component

        self._empty_component.mixture_component_index = len(self._components)
        return None
