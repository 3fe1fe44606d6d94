"""nrunits: constants and unit conversions for numerical relativity codes."""

import sys

from loguru import logger

from nrunits import units
from nrunits.core.constants import VALUES
from nrunits.core.version import __version__
from nrunits.units import *  # noqa: F401,F403
from nrunits.units import ReadOnlyModule

logger.disable("nrunits")

__all__ = ["VALUES", "__version__"] + units.__all__

sys.modules[__name__].__class__ = ReadOnlyModule
