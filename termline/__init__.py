__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'termline'
__author__ = 'Termline Developers'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .faults import *
from .terms import *
from .arguments import *
from .trie import *
from .cmdline import *
from .standard import *
from .engine import *
from .probe import *
from .manpage import *
from .report import *
from .commands import *

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

# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the terms
__all__ += terms.__all__  # type: ignore[attr-defined]
# Load the exposed API of the arguments
__all__ += arguments.__all__  # type: ignore[attr-defined]
# Load the exposed API of the prefix dictionary
__all__ += trie.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parser
__all__ += cmdline.__all__  # type: ignore[attr-defined]
# Load the exposed API of the standard options
__all__ += standard.__all__  # type: ignore[attr-defined]
# Load the exposed API of the engine
__all__ += engine.__all__  # type: ignore[attr-defined]
# Load the exposed API of the environment probe
__all__ += probe.__all__  # type: ignore[attr-defined]
# Load the exposed API of the man pages
__all__ += manpage.__all__  # type: ignore[attr-defined]
# Load the exposed API of the presentation
__all__ += report.__all__  # type: ignore[attr-defined]
# Load the exposed API of the commands
__all__ += commands.__all__  # type: ignore[attr-defined]
