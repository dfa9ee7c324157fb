__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'progargs'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .definitions import *
from .faults import *
from .helper import *
from .parser import *
from .results import *
from .values import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the definitions
__all__ += definitions.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the helper
__all__ += helper.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parser
__all__ += parser.__all__  # type: ignore[attr-defined]
# Load the exposed API of the results
__all__ += results.__all__  # type: ignore[attr-defined]
# Load the exposed API of the values
__all__ += values.__all__  # type: ignore[attr-defined]
