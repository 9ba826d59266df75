"""Package manager handlers, keyed by manager id.

Modules:
    brew: Homebrew formulae and casks
    conda: Conda packages in the active environment
    pipx: pipx-installed applications
    poetry: Poetry virtualenvs
    pyenv: pyenv Python versions
    legacy: npm, pip, composer, cargo and gem global packages
"""

from pkgscout.handlers.base import ManagerHandler
from pkgscout.handlers.brew import BrewHandler
from pkgscout.handlers.conda import CondaHandler
from pkgscout.handlers.legacy import CargoHandler, ComposerHandler, GemHandler, NpmHandler, PipHandler
from pkgscout.handlers.pipx import PipxHandler
from pkgscout.handlers.poetry import PoetryHandler
from pkgscout.handlers.pyenv import PyenvHandler
from pkgscout.models import ManagerId

# Registry order is the order results are reported in
HANDLER_TYPES: dict[ManagerId, type[ManagerHandler]] = {
    handler.id: handler
    for handler in (
        BrewHandler,
        CondaHandler,
        PipxHandler,
        PoetryHandler,
        PyenvHandler,
        NpmHandler,
        PipHandler,
        ComposerHandler,
        CargoHandler,
        GemHandler,
    )
}

__all__ = [
    "HANDLER_TYPES",
    "ManagerHandler",
    "BrewHandler",
    "CondaHandler",
    "PipxHandler",
    "PoetryHandler",
    "PyenvHandler",
    "NpmHandler",
    "PipHandler",
    "ComposerHandler",
    "CargoHandler",
    "GemHandler",
]
