"""Data models for pkgscout."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ManagerId(str, Enum):
    """Identifiers of every package manager pkgscout knows about."""

    BREW = "brew"
    CONDA = "conda"
    PIPX = "pipx"
    POETRY = "poetry"
    PYENV = "pyenv"
    # Legacy ecosystem tools
    NPM = "npm"
    PIP = "pip"
    COMPOSER = "composer"
    CARGO = "cargo"
    GEM = "gem"


class PackageLocation(str, Enum):
    """Where inside a manager a package lives."""

    FORMULA = "formula"
    CASK = "cask"
    CONDA_ENV = "conda-env"
    PIPX_VENV = "pipx-venv"
    PYENV_VERSION = "pyenv-version"
    GLOBAL = "global"  # Generic kind for everything else


class DiscoveryMethod(str, Enum):
    """Which search tier resolved a manager's executable."""

    DIRECT_COMMAND = "direct_command"
    PATH_SCAN = "path_scan"
    COMMON_PATH = "common_path"
    CUSTOM_PATH = "custom_path"

    @property
    def in_path(self) -> bool:
        """Whether this method implies the executable is reachable via PATH."""
        return self in (DiscoveryMethod.DIRECT_COMMAND, DiscoveryMethod.PATH_SCAN)


class ManagerAvailability(str, Enum):
    """Classification of a manager after discovery."""

    AVAILABLE = "available"  # Found on PATH
    PATH_MISSING = "path_missing"  # Installed, but not on PATH
    NOT_INSTALLED = "not_installed"


class ManagerState(str, Enum):
    """Per-manager discovery state within a session."""

    UNKNOWN = "unknown"
    PROBING = "probing"
    AVAILABLE = "available"
    PATH_MISSING = "path_missing"
    NOT_INSTALLED = "not_installed"


class ProgressStage(str, Enum):
    """Stages reported while listing packages across managers."""

    STARTING = "starting"
    DONE = "done"
    FAILED = "failed"


class PackageRecord(BaseModel):
    """A single installed package as reported by a manager."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Package name")
    version: str = Field(..., min_length=1, description="Installed version (manager-defined format)")
    manager: ManagerId = Field(..., description="Manager that owns the package")
    location: PackageLocation = Field(PackageLocation.GLOBAL, description="Sub-kind within the manager")
    channel: Optional[str] = Field(None, description="Conda channel")
    environment: Optional[str] = Field(None, description="Conda or Poetry environment")
    description: Optional[str] = Field(None, description="Short package description")
    homepage: Optional[str] = Field(None, description="Project homepage")

    @field_validator("name", "version", mode="before")
    @classmethod
    def _strip(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value


class SearchResult(BaseModel):
    """Resolved location of a manager executable."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Resolved location of the executable")
    method: DiscoveryMethod = Field(..., description="Tier that found it")

    @property
    def in_path(self) -> bool:
        """True only when found through the direct command or PATH scan tiers."""
        return self.method.in_path


class PackageManagerStatus(BaseModel):
    """Availability of one manager, derived from its search result."""

    manager: ManagerId = Field(..., description="Manager identifier")
    status: ManagerAvailability = Field(..., description="Classification")
    discovery_method: Optional[DiscoveryMethod] = Field(None, description="Tier that resolved it")
    found_path: Optional[str] = Field(None, description="Resolved executable path")
    in_path: bool = Field(False, description="Whether the executable is reachable via PATH")
    message: Optional[str] = Field(None, description="Remediation hint or failure reason")

    @property
    def is_installed(self) -> bool:
        """Whether the binary exists at all."""
        return self.status != ManagerAvailability.NOT_INSTALLED


class CommandResult(BaseModel):
    """Outcome of running an external command."""

    command: list[str] = Field(default_factory=list, description="Argv that was run")
    exit_code: int = Field(..., description="Process exit status")
    stdout: str = Field("", description="Captured standard output")
    stderr: str = Field("", description="Captured standard error")
    timed_out: bool = Field(False, description="Whether the command hit its timeout")
    permission_denied: bool = Field(False, description="Whether the OS refused to execute it")

    @property
    def succeeded(self) -> bool:
        """Exit status zero and no timeout."""
        return self.exit_code == 0 and not self.timed_out


class UninstallResult(BaseModel):
    """Result of an uninstall request."""

    manager: ManagerId = Field(..., description="Manager that handled the request")
    name: str = Field(..., description="Package that was removed")
    success: bool = Field(True, description="Whether the uninstall succeeded")
    error: Optional[str] = Field(None, description="Error message if failed")
    command: list[str] = Field(default_factory=list, description="Argv that was run")


class ListingProgress(BaseModel):
    """Progress notification emitted while listing all packages."""

    manager: ManagerId
    stage: ProgressStage
    completed: int = Field(0, description="Managers finished so far")
    total: int = Field(0, description="Managers being listed")
    package_count: int = Field(0, description="Packages found (done stage only)")
    error: Optional[str] = Field(None, description="Failure reason (failed stage only)")
