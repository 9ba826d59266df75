"""Homebrew formulae and casks."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from pkgscout.errors import CommandFailedError
from pkgscout.handlers.base import ManagerHandler, platform_paths
from pkgscout.handlers.parsing import is_package_name, iter_lines, make_record
from pkgscout.models import ManagerId, PackageLocation, PackageRecord

logger = logging.getLogger(__name__)

FORMULA_ARGS = ("list", "--versions")
CASK_ARGS = ("list", "--cask", "--versions")


class BrewHandler(ManagerHandler):
    id = ManagerId.BREW
    display_name = "Homebrew"
    executable = "brew"
    common_paths = platform_paths(
        darwin=(
            "/opt/homebrew/bin/brew",  # Apple Silicon
            "/usr/local/bin/brew",  # Intel
            "~/homebrew/bin/brew",
        ),
        linux=(
            "/home/linuxbrew/.linuxbrew/bin/brew",
            "~/.linuxbrew/bin/brew",
        ),
    )

    def list_packages(self) -> list[PackageRecord]:
        """List formulae and casks; both commands run at the same time."""
        with ThreadPoolExecutor(max_workers=2) as executor:
            formula_future = executor.submit(self.run_checked, FORMULA_ARGS)
            cask_future = executor.submit(self.run, CASK_ARGS)
            formulae = formula_future.result()
            casks = cask_future.result()

        records = self.parse_output(formulae.stdout, PackageLocation.FORMULA)
        if casks.succeeded:
            records += self.parse_output(casks.stdout, PackageLocation.CASK)
        else:
            # Linuxbrew has no casks and reports an error for the cask list
            logger.debug("brew cask list failed: %s", CommandFailedError(self.id.value, casks))
        return records

    def parse_output(
        self,
        raw: str,
        location: PackageLocation = PackageLocation.FORMULA,
    ) -> list[PackageRecord]:
        """
        Parse ``brew list --versions`` output.

        Each line is ``name version [version...]``; every version after the
        name is kept, space separated.
        """
        records = []
        for line in iter_lines(raw):
            parts = line.split()
            if len(parts) < 2 or not is_package_name(parts[0]):
                continue
            record = make_record(
                name=parts[0],
                version=" ".join(parts[1:]),
                manager=self.id,
                location=location,
            )
            if record:
                records.append(record)
        return records

    def installed_casks(self) -> set[str]:
        """Names of installed casks; empty when the cask list is unavailable."""
        result = self.run(CASK_ARGS)
        if not result.succeeded:
            return set()
        return {r.name for r in self.parse_output(result.stdout, PackageLocation.CASK)}

    def uninstall_args(self, name: str, location: Optional[PackageLocation] = None) -> list[str]:
        if location is None:
            location = PackageLocation.CASK if name in self.installed_casks() else PackageLocation.FORMULA
        if location == PackageLocation.CASK:
            return ["uninstall", "--cask", name]
        return ["uninstall", name]
