"""
Strategies for proposing split and merge moves.
"""

__all__ = ["SingleObservationSplitStrategy"]

import logging
import numpy as np
from sklearn.utils import check_random_state
from tqdm import tqdm

from .exceptions import PreconditionViolation
from .proposal import Proposal
from .strategy import ProposalStrategy
from .utils import log_normalize_pair

logger = logging.getLogger(__name__)


class SingleObservationSplitStrategy(ProposalStrategy):

    r"""
    Propose splits by seeding a new component with a single observation.

    The component being split keeps its parameters. The parameters of the
    new component are drawn from their posterior given the single seed
    observation, using a fixed-length MCMC run that starts from the
    parameters of the original component. The remaining observations are
    allocated between the two components with probability proportional to
    :math:`f(y)^\alpha`, where :math:`f` is the density of each component
    and :math:`\alpha` is the annealing factor, and the mixing weight of the
    original component is divided in proportion to the number of
    observations on each side.

    Merges move all the data from the component holding the second seed
    into the component holding the first seed, which keeps its parameters.

    :param model:
        The :class:`splitmerge.mixture.DirichletProcessMixtureModel` to be
        posterior sampled.

    :param annealing_factor: [optional]
        The exponent :math:`\alpha` in :math:`(0, 1]` applied to component
        densities when allocating observations (default: `1`). Values close
        to one tend to yield more splits; values close to zero tend to yield
        more merges.

    :param burn_in: [optional]
        The number of posterior sampling sweeps used to draw the parameters
        of a new split component (default: `100`).

    :param quiet: [optional]
        Turn off the progress bar for parameter sampling (default: `True`).
    """

    def __init__(self, model, annealing_factor=1.0, burn_in=100, quiet=True):
        super(SingleObservationSplitStrategy, self).__init__(model)

        annealing_factor = float(annealing_factor)
        if not (0 < annealing_factor <= 1):
            raise ValueError("annealing_factor must be in the interval (0, 1]")

        if int(burn_in) != burn_in or 1 > burn_in:
            raise ValueError("burn_in must be a positive integer")
        burn_in = int(burn_in)

        self._kwds = dict(annealing_factor=annealing_factor,
                          burn_in=burn_in,
                          quiet=bool(quiet))
        return None


    @property
    def annealing_factor(self):
        r""" Return the exponent applied to densities during allocation. """
        return self._kwds["annealing_factor"]


    @property
    def burn_in(self):
        r""" Return the number of sweeps used to sample split parameters. """
        return self._kwds["burn_in"]


    @property
    def quiet(self):
        return self._kwds["quiet"]


    def propose_split(self, data_index_1, data_index_2, random_state=None):

        random_state = check_random_state(random_state)

        if data_index_1 == data_index_2:
            raise PreconditionViolation(
                "seed observations must be distinct data points")

        original_component = self.model.component_containing(data_index_1)
        if original_component \
        is not self.model.component_containing(data_index_2):
            raise PreconditionViolation(
                f"observations {data_index_1} and {data_index_2} must belong "\
                f"to the same component to propose a split")

        index = original_component.mixture_component_index
        K = self.model.component_count()

        logger.debug(f"Proposing split of component {index} of {K} seeded by "\
                     f"observations {data_index_1} and {data_index_2}")

        # A copy; the original component's data are not modified.
        data_set = set(original_component.data)

        split1 = self.initialize_split_proposal(
            original_component, data_set, data_index_1, False, random_state)
        split2 = self.initialize_split_proposal(
            original_component, data_set, data_index_2, True, random_state)

        # The new component takes the place of the first empty component.
        split2.mixture_component_index = K

        log_allocation_probability = self.allocate_data_between_split_components(
            split1, split2, data_set, random_state)

        empty_component = self.model.empty_component()
        merged_mixing_weights = np.hstack([self.model.mixing_weights(),
                                           [self.model.empty_mixing_weight()]])

        N1, N2 = (split1.number_of_observations, split2.number_of_observations)
        total_weight = merged_mixing_weights[index] + merged_mixing_weights[K]

        split_mixing_weights = merged_mixing_weights.copy()
        split_mixing_weights[index] = total_weight * N1/(N1 + N2)
        split_mixing_weights[K] = total_weight * N2/(N1 + N2)

        proposal = Proposal(Proposal.Split, data_index_1, data_index_2)
        proposal.set_model_revision(self.model.revision)
        proposal.set_components(original_component, empty_component,
                                split1, split2)
        proposal.set_mixing_weights(merged_mixing_weights,
                                    split_mixing_weights)
        proposal.set_log_proposal_density_ratio(
            self.split_log_proposal_density_ratio(
                proposal, log_allocation_probability))
        proposal.check()
        return proposal


    def propose_merge(self, data_index_1, data_index_2, random_state=None):

        # The merge is deterministic given the seeds, so random_state is unused.
        split1 = self.model.component_containing(data_index_1)
        split2 = self.model.component_containing(data_index_2)
        if split1 is split2:
            raise PreconditionViolation(
                f"observations {data_index_1} and {data_index_2} must belong "\
                f"to different components to propose a merge")

        a_index = split1.mixture_component_index
        b_index = split2.mixture_component_index
        K = self.model.component_count()

        logger.debug(f"Proposing merge of component {b_index} (of {K}) into "\
                     f"{a_index}")

        # Parameters are kept from the component holding the first seed.
        merged = split1.copy()
        for data_index in split2.data:
            merged.add_data(data_index)

        # Removing split2 shifts every later component down by one place.
        merged.mixture_component_index \
            = a_index if a_index < b_index else a_index - 1

        empty = split2.copy()
        empty.clear_data()
        empty.mixture_component_index = K - 1

        split_mixing_weights = self.model.mixing_weights()
        merged_mixing_weights = np.delete(split_mixing_weights, b_index)
        merged_mixing_weights[merged.mixture_component_index] \
            = split_mixing_weights[a_index] + split_mixing_weights[b_index]
        merged_mixing_weights = np.hstack([merged_mixing_weights, [0.0]])

        log_partition_probability = self.compute_log_partition_probability(
            split1, split2, data_index_1, data_index_2)

        proposal = Proposal(Proposal.Merge, data_index_1, data_index_2)
        proposal.set_model_revision(self.model.revision)
        proposal.set_components(merged, empty, split1, split2)
        proposal.set_mixing_weights(merged_mixing_weights,
                                    split_mixing_weights)
        proposal.set_log_proposal_density_ratio(
            self.split_log_proposal_density_ratio(
                proposal, log_partition_probability))
        proposal.check()
        return proposal


    def split_log_proposal_density_ratio(self, proposal,
                                         log_allocation_probability):
        r"""
        Return the log of the proposal density ratio for the split move,

        .. math::

            \log{\frac{q(\textrm{split}\rightarrow\textrm{merged})}
                      {q(\textrm{merged}\rightarrow\textrm{split})}}
            = -\log{p_\textrm{alloc}} + \log{\left(1 - \rho\right)}

        The merge is deterministic given the seed observations, so the
        numerator is one. :math:`p_\textrm{alloc}` is the probability that
        the non-seed observations are allocated as observed between `split1`
        and `split2`, and :math:`\rho` is the proportion of the total split
        mass held by the empty component before the split. The split maps
        the merged weight :math:`(1 - \rho)T` onto the total :math:`T`, so
        the second term is the Jacobian of that change of scale. It vanishes
        when the empty component holds no mass.

        The :math:`\log{(1 - \rho)}` term is derived from that change of
        scale alone; it has not been checked against an independent
        reference value. The density of the parameters drawn for `split2`
        given the second seed observation is not included, because the
        fixed-length posterior run that draws them has no closed-form
        density. This is why the second seed index is not an argument.

        :param proposal:
            A proposal whose components and mixing weights are set.

        :param log_allocation_probability:
            The log of the probability that the data are allocated between
            `split1` and `split2` as observed. The seed observations do not
            contribute.
        """

        total_weight = proposal.split1_mixing_weight() \
                     + proposal.split2_mixing_weight()
        empty_weight = proposal.empty_mixing_weight()

        log_ratio = -log_allocation_probability
        if empty_weight > 0:
            log_ratio += np.log1p(-min(empty_weight/total_weight, 1.0))

        return log_ratio


    def initialize_split_proposal(self, original_component, data_set,
                                  data_index, initialize_parameters,
                                  random_state):
        r"""
        Return one side of a split proposal, seeded with a single
        observation.

        :param original_component:
            The component to be split.

        :param data_set:
            A copy of the data set of `original_component`. The seed
            observation is removed from it.

        :param data_index:
            The index of the seed observation.

        :param initialize_parameters:
            Set this to `False` for the first component, whose parameters
            must match the original. Set it to `True` for the second, whose
            parameters are drawn from the posterior given the seed.

        :param random_state:
            A `numpy.random.RandomState` instance.
        """

        component = original_component.copy()
        component.clear_data()
        component.add_data(data_index)
        data_set.discard(data_index)

        if initialize_parameters:
            self.sample_parameters(component, random_state)

        return component


    def sample_parameters(self, component, random_state):
        r"""
        Simulate the parameters of a component from their posterior
        distribution, with a fixed number of posterior sampling sweeps that
        start from the current parameter values.
        """

        y = self.model.y
        for _ in tqdm(range(self.burn_in), desc="Sampling split parameters",
                      disable=self.quiet):
            component.sample_posterior(y, random_state)

        return None


    def allocate_data_between_split_components(self, split1, split2, data_set,
                                               random_state):
        r"""
        Randomly assign observations to one of two components according to
        their posterior probability in an equally weighted two-component
        mixture.

        :param split1:
            The first component. Observations are added to its data set.

        :param split2:
            The second component. Observations are added to its data set.

        :param data_set:
            The indices of the observations to allocate.

        :param random_state:
            A `numpy.random.RandomState` instance.

        :returns:
            The log probability of the realised allocation.
        """

        y = self.model.y
        log_probability = 0.0
        for data_index in sorted(data_set):
            log_p1, log_p2 = self._log_allocation_probabilities(
                split1, split2, y[data_index])

            if random_state.uniform() < np.exp(log_p1):
                split1.add_data(data_index)
                log_probability += log_p1

            else:
                split2.add_data(data_index)
                log_probability += log_p2

        return log_probability


    def compute_log_partition_probability(self, split1, split2, data_index_1,
                                          data_index_2):
        r"""
        Return the log probability that the data in two components would be
        allocated as observed, leaving out the seed observations.

        :param split1:
            The component holding the first seed observation.

        :param split2:
            The component holding the second seed observation.

        :param data_index_1:
            The index of the observation used to seed `split1`.

        :param data_index_2:
            The index of the observation used to seed `split2`.
        """
        return self.log_allocation_probability(split1, split2, data_index_1) \
             + self.log_allocation_probability(split2, split1, data_index_2)


    def log_allocation_probability(self, component, other_component,
                                   data_index):
        r"""
        Return the log probability that the data in `component` would be
        allocated to it in an equally weighted mixture with
        `other_component`.

        :param component:
            The component whose observations are scored.

        :param other_component:
            The component competing for those observations.

        :param data_index:
            The index of the seed observation of `component`, which is left
            out of the calculation.
        """

        y = self.model.y
        log_probability = 0.0
        for index in sorted(component.data):
            if index == data_index:
                continue

            log_p, _ = self._log_allocation_probabilities(
                component, other_component, y[index])
            log_probability += log_p

        return log_probability


    def _log_allocation_probabilities(self, component, other_component, y_i):

        alpha = self.annealing_factor
        log_p1, log_p2, degenerate = log_normalize_pair(
            alpha * component.log_density(y_i),
            alpha * other_component.log_density(y_i))

        if degenerate:
            logger.debug("Allocation densities are degenerate; using a "\
                         "uniform allocation")

        return (log_p1, log_p2)
