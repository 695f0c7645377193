"""
A candidate split or merge of mixture components.
"""

__all__ = ["Proposal", "ProposalType"]

import enum
import numpy as np

from .exceptions import (IncompleteProposal, MixingWeightMismatch)
from .utils import mixing_weights_agree


class ProposalType(enum.Enum):
    Split = "split"
    Merge = "merge"


class Proposal(object):

    r"""
    A proposal to split one mixture component into two, or to merge two
    components into one.

    A proposal describes a transformation between two pairs of components,
    :math:`(\textrm{split1}, \textrm{split2}) \leftrightarrow
    (\textrm{merged}, \textrm{empty})`. In a split move `merged` and `empty`
    describe the model before the move and `split1` and `split2` describe it
    afterwards; in a merge move the roles are reversed. In either case
    `merged` and `split1` are the same component (before and after), as are
    `split2` and `empty`.

    The constructor is deliberately small. Callers must use
    :func:`set_components`, :func:`set_mixing_weights` and
    :func:`set_log_proposal_density_ratio` before the proposal is used, and
    should call :func:`check` to make sure none of them was forgotten.

    :param proposal_type:
        The kind of proposal, either `Proposal.Split` or `Proposal.Merge`.

    :param data_index_1:
        The index (in the model's data) of the first seed observation.

    :param data_index_2:
        The index (in the model's data) of the second seed observation.
    """

    Split = ProposalType.Split
    Merge = ProposalType.Merge

    def __init__(self, proposal_type, data_index_1, data_index_2):

        if not isinstance(proposal_type, ProposalType):
            raise ValueError(f"proposal type '{proposal_type}' is invalid. "\
                             f"Must be one of: {tuple(ProposalType)}")

        self._proposal_type = proposal_type
        self._data_index_1 = int(data_index_1)
        self._data_index_2 = int(data_index_2)

        self._merged = None
        self._empty = None
        self._split1 = None
        self._split2 = None

        self._merged_mixing_weights = None
        self._split_mixing_weights = None

        self._log_split_to_merge_probability_ratio = None
        self._model_revision = None

        return None


    def __repr__(self):
        return f"<{self.__class__.__name__} {self._proposal_type.value} "\
               f"seeds=({self._data_index_1}, {self._data_index_2})>"


    @property
    def proposal_type(self):
        r""" Return the kind of proposal (split or merge). """
        return self._proposal_type


    @property
    def data_index_1(self):
        return self._data_index_1


    @property
    def data_index_2(self):
        return self._data_index_2


    def is_merge(self):
        return self._proposal_type is ProposalType.Merge


    def is_split(self):
        return self._proposal_type is ProposalType.Split


    def set_components(self, merged, empty, split1, split2):
        r"""
        Set the mixture components taking part in the move.

        The `mixture_component_index` of each component should give its
        position in the model either before or after the move, as
        appropriate for its role. This means the indices of `merged` and
        `split1` can differ by one, if `split2` precedes `split1` in the
        model so that vacating it shifts `split1` down one place.

        :param merged:
            In a split move, the component to be split. In a merge move, the
            proposed component holding the data from both `split1` and
            `split2`.

        :param empty:
            The partner of `merged`. In a split move, the unpopulated
            component that will receive data. In a merge move, the component
            left empty once its data has moved into `merged`.

        :param split1:
            The component containing the first seed observation after a
            split, or before a merge.

        :param split2:
            The component containing the second seed observation after a
            split, or before a merge.
        """

        self._merged = merged
        self._empty = empty
        self._split1 = split1
        self._split2 = split2
        return None


    @property
    def merged(self):
        return self._merged


    @property
    def empty(self):
        return self._empty


    @property
    def split1(self):
        return self._split1


    @property
    def split2(self):
        return self._split2


    def set_mixing_weights(self, merged_mixing_weights, split_mixing_weights):
        r"""
        Set the mixing weights of the whole model on both sides of the move.

        :param merged_mixing_weights:
            The mixing weights of the model after a merge, or before a split.
            There is no terminal element for the mass of all remaining
            unpopulated components, but there is a terminal element for the
            single `empty` component.

        :param split_mixing_weights:
            The mixing weights of the model before a merge, or after a split.
            There is no terminal element for unpopulated components. The size
            and the sum must match `merged_mixing_weights`.

        :raises MixingWeightMismatch:
            If the two vectors differ in length or in total mass.
        """

        merged_mixing_weights = np.array(merged_mixing_weights, dtype=float)
        split_mixing_weights = np.array(split_mixing_weights, dtype=float)
        _check_mixing_weights(merged_mixing_weights, split_mixing_weights)

        self._merged_mixing_weights = merged_mixing_weights
        self._split_mixing_weights = split_mixing_weights
        return None


    @property
    def merged_mixing_weights(self):
        r""" Return a copy of the mixing weights on the merged side. """
        return _copy_or_none(self._merged_mixing_weights)


    @property
    def split_mixing_weights(self):
        r""" Return a copy of the mixing weights on the split side. """
        return _copy_or_none(self._split_mixing_weights)


    def merged_mixing_weight(self):
        return self._weight_of(self._merged, self._merged_mixing_weights)


    def empty_mixing_weight(self):
        return self._weight_of(self._empty, self._merged_mixing_weights)


    def split1_mixing_weight(self):
        return self._weight_of(self._split1, self._split_mixing_weights)


    def split2_mixing_weight(self):
        return self._weight_of(self._split2, self._split_mixing_weights)


    def _weight_of(self, component, weights):
        if component is None or weights is None:
            raise IncompleteProposal(
                "components and mixing weights must be set before weights "\
                "can be looked up")
        return float(weights[component.mixture_component_index])


    def set_log_proposal_density_ratio(self, log_ratio):
        r"""
        Set the log of the proposal density ratio,

        .. math::

            \log{\frac{q(\textrm{split}\rightarrow\textrm{merged})}
                      {q(\textrm{merged}\rightarrow\textrm{split})}}

        which is always expressed in the split orientation, whether the
        proposal is a split or a merge.
        """

        log_ratio = float(log_ratio)
        if np.isnan(log_ratio):
            raise ValueError("log proposal density ratio cannot be NaN")

        self._log_split_to_merge_probability_ratio = log_ratio
        return None


    @property
    def log_split_to_merge_probability_ratio(self):
        return self._log_split_to_merge_probability_ratio


    def set_model_revision(self, revision):
        r"""
        Record the revision of the model that the proposal was built from.

        :param revision:
            The value of `revision` on the model when the proposal was built.
            A model refuses to commit a proposal built from another revision.
        """
        self._model_revision = int(revision)
        return None


    @property
    def model_revision(self):
        return self._model_revision


    def check(self):
        r"""
        Check that the components, mixing weights and proposal density ratio
        have all been set, and that the mixing weights still agree.

        :raises IncompleteProposal:
            If any of them is missing.

        :raises MixingWeightMismatch:
            If the two mixing weight vectors differ in length or total mass.
        """

        missing = []
        if any(c is None for c in (self._merged, self._empty, self._split1,
                                   self._split2)):
            missing.append("components")

        if self._merged_mixing_weights is None \
        or self._split_mixing_weights is None:
            missing.append("mixing weights")

        if self._log_split_to_merge_probability_ratio is None:
            missing.append("log proposal density ratio")

        if missing:
            raise IncompleteProposal(
                f"{self!r} is missing: {', '.join(missing)}")

        _check_mixing_weights(self._merged_mixing_weights,
                              self._split_mixing_weights)
        return None



def _copy_or_none(weights):
    return None if weights is None else weights.copy()


def _check_mixing_weights(merged_mixing_weights, split_mixing_weights):

    if merged_mixing_weights.ndim != 1 or split_mixing_weights.ndim != 1:
        raise MixingWeightMismatch("mixing weights must be vectors")

    if merged_mixing_weights.size != split_mixing_weights.size:
        raise MixingWeightMismatch(
            f"merged mixing weights have {merged_mixing_weights.size} "\
            f"elements but split mixing weights have "\
            f"{split_mixing_weights.size}")

    if not mixing_weights_agree(merged_mixing_weights, split_mixing_weights):
        raise MixingWeightMismatch(
            f"merged mixing weights sum to "\
            f"{np.sum(merged_mixing_weights)} but split mixing weights "\
            f"sum to {np.sum(split_mixing_weights)}")

    return None
