"""
Errors raised while building split-merge proposals.
"""

__all__ = ["SplitMergeError", "PreconditionViolation", "IncompleteProposal",
           "MixingWeightMismatch"]


class SplitMergeError(ValueError):
    r""" Base class for errors raised by split-merge proposals. """
    pass


class PreconditionViolation(SplitMergeError):
    r"""
    The seed observations do not satisfy the requirement of the move: both
    seeds must share a component for a split, and live in different
    components for a merge.
    """
    pass


class IncompleteProposal(SplitMergeError):
    r""" A proposal was used before all of its pieces were set. """
    pass


class MixingWeightMismatch(SplitMergeError):
    r"""
    The merged and split mixing weight vectors differ in length or in their
    total mass.
    """
    pass
