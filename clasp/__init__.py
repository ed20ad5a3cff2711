__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'clasp'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .arguments import *
from .bindings import *
from .composites import *
from .faults import *
from .parsers import *
from .results import *
from .tokens import *

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

# Load the exposed API of the tokens
__all__ += tokens.__all__  # type: ignore[attr-defined]
# Load the exposed API of the results
__all__ += results.__all__  # type: ignore[attr-defined]
# Load the exposed API of the bindings
__all__ += bindings.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parsers
__all__ += parsers.__all__  # type: ignore[attr-defined]
# Load the exposed API of the arguments
__all__ += arguments.__all__  # type: ignore[attr-defined]
# Load the exposed API of the composites
__all__ += composites.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
