"""
passevo - evolutionary search for compiler optimisation pass sequences

Encodes candidate pass pipelines as chromosomes over a step catalog and
evolves them with a genetic algorithm toward lower cost under an external
fitness metric.
"""

__version__ = "0.1.0"

# Expose common submodules for convenience
from .core import *  # noqa: F401,F403
from .evolution import *  # noqa: F401,F403
from .fitness import *  # noqa: F401,F403
from .search import *  # noqa: F401,F403
from .utils import *  # noqa: F401,F403

from .config import (  # noqa: F401
    DEFAULT_CONFIG,
    PRESET_MINIMAL,
    PRESET_RESEARCH,
    PRESET_STANDARD,
    resolve_config,
    validate_config,
)
