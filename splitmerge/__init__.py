import logging

__version__ = "0.1.0"

logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG)

handler = logging.StreamHandler()
handler.setFormatter(logging.Formatter(
    "%(asctime)s [%(levelname)s] %(message)s"))
logger.addHandler(handler)

del handler, logger, logging

from .exceptions import (SplitMergeError, PreconditionViolation,
                         IncompleteProposal, MixingWeightMismatch)
from .proposal import (Proposal, ProposalType)
from .strategy import (ProposalStrategy, choose_seeds)
from .strategies import SingleObservationSplitStrategy
from ._components import (MixtureComponent, GaussianComponent,
                          MultivariateGaussianComponent)
from .mixture import DirichletProcessMixtureModel
