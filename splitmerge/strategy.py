
import abc
from sklearn.utils import check_random_state

from .exceptions import PreconditionViolation


class ProposalStrategy(object, metaclass=abc.ABCMeta):

    r"""
    Base class for ways of proposing split and merge moves.

    Implementations must be deterministic given the state of the random
    number generator, so that a fixed seed replays the same proposal.

    :param model:
        The :class:`splitmerge.mixture.DirichletProcessMixtureModel` whose
        partition is being sampled.
    """

    def __init__(self, model):
        self.model = model
        return None


    @abc.abstractmethod
    def propose_split(self, data_index_1, data_index_2, random_state=None):
        r"""
        Propose to split the component holding both seed observations into
        two components: the first containing `data_index_1` and the second
        containing `data_index_2`.

        :param data_index_1:
            The index of the first seed observation.

        :param data_index_2:
            The index of the second seed observation. It must currently
            belong to the same component as `data_index_1`.

        :param random_state: [optional]
            The state to provide to the random number generator.

        :returns:
            A checked :class:`splitmerge.proposal.Proposal`.
        """
        raise NotImplementedError("should be implemented by sub-classes")


    @abc.abstractmethod
    def propose_merge(self, data_index_1, data_index_2, random_state=None):
        r"""
        Propose to merge the components containing `data_index_1` and
        `data_index_2`, which must belong to different components.

        :returns:
            A checked :class:`splitmerge.proposal.Proposal`.
        """
        raise NotImplementedError("should be implemented by sub-classes")


    def propose(self, data_index_1, data_index_2, random_state=None):
        r"""
        Propose a split if both seed observations share a component, and a
        merge otherwise.
        """

        if data_index_1 == data_index_2:
            raise PreconditionViolation(
                "seed observations must be distinct data points")

        same = self.model.component_containing(data_index_1) \
            is self.model.component_containing(data_index_2)

        func = self.propose_split if same else self.propose_merge
        return func(data_index_1, data_index_2, random_state)



def choose_seeds(number_of_observations, random_state=None):
    r"""
    Choose two distinct observations, uniformly at random, to seed a
    split-merge move.

    :param number_of_observations:
        The number of data points in the model.

    :param random_state: [optional]
        The state to provide to the random number generator.

    :returns:
        A two-length tuple of distinct data indices.
    """

    if number_of_observations < 2:
        raise ValueError("at least two observations are needed to seed a move")

    random_state = check_random_state(random_state)
    a, b = random_state.choice(number_of_observations, size=2, replace=False)
    return (int(a), int(b))
