"""The package discovery facade.

PackageDiscovery owns the handler registry, the tiered search and the path
cache. Aggregate operations (discovery, listing everything) contain
per-manager failures; single-manager operations raise them.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Mapping, Optional, Union

from pkgscout.cache import PathCache
from pkgscout.config import UserConfig, load_user_config
from pkgscout.errors import (
    ManagerDisabledError,
    ManagerNotInstalledError,
    PkgScoutError,
    UnknownManagerError,
)
from pkgscout.executor import CommandRunner, run_command
from pkgscout.handlers import HANDLER_TYPES, ManagerHandler
from pkgscout.models import (
    ListingProgress,
    ManagerId,
    ManagerState,
    PackageLocation,
    PackageManagerStatus,
    PackageRecord,
    ProgressStage,
    UninstallResult,
)
from pkgscout.search import DEFAULT_PROBE_TIMEOUT_MS, PathSearch
from pkgscout.status import classify, failed_probe

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ListingProgress], None]


def _notify(on_progress: Optional[ProgressCallback], event: ListingProgress) -> None:
    """Deliver a progress event; a failing callback never stops the listing."""
    if on_progress is None:
        return
    try:
        on_progress(event)
    except Exception as e:
        logger.warning("Progress callback failed for %s: %s", event.manager.value, e)


class PackageDiscovery:
    """
    Finds package managers and lists or removes what they installed.

    One instance is one session: the path cache, the loaded configuration and
    every manager's discovery state live as long as the instance does.
    """

    def __init__(
        self,
        config: Optional[UserConfig] = None,
        runner: Optional[CommandRunner] = None,
        cache: Optional[PathCache] = None,
        handler_types: Optional[Mapping[ManagerId, type[ManagerHandler]]] = None,
    ):
        self.config = config if config is not None else load_user_config()
        self.runner = runner if runner is not None else run_command
        self.cache = cache if cache is not None else PathCache()
        self.search = PathSearch(
            runner=self.runner,
            cache=self.cache,
            timeout_ms=self.config.timeout or DEFAULT_PROBE_TIMEOUT_MS,
        )

        handler_types = handler_types if handler_types is not None else HANDLER_TYPES
        self._known = {ManagerId(m) for m in handler_types}
        self.handlers: dict[ManagerId, ManagerHandler] = {}
        for manager, handler_type in handler_types.items():
            manager = ManagerId(manager)
            if self.config.is_disabled(manager):
                logger.debug("Skipping disabled manager %s", manager.value)
                continue
            self.handlers[manager] = handler_type(
                self.search,
                runner=self.runner,
                custom_paths=self.config.paths_for(manager),
                timeout_ms=self.config.timeout,
            )

        self._lock = threading.Lock()
        self._states: dict[ManagerId, ManagerState] = {}
        self._statuses: dict[ManagerId, PackageManagerStatus] = {}
        self._errors: dict[ManagerId, PkgScoutError] = {}

    @property
    def registered_managers(self) -> list[ManagerId]:
        """Enabled managers in registry order."""
        return list(self.handlers)

    # =========================================================================
    # Discovery
    # =========================================================================

    def discover_available_managers(self) -> list[PackageManagerStatus]:
        """
        Probe every enabled manager in parallel.

        A probe that crashes or times out marks only its own manager as
        not installed.

        Returns:
            One status per enabled manager, in registry order
        """
        pending = [m for m in self.handlers if self._cached_status(m) is None]

        if pending:
            with ThreadPoolExecutor(max_workers=len(pending)) as executor:
                futures = {executor.submit(self._probe, m): m for m in pending}
                for future in as_completed(futures):
                    future.result()

        return [self._cached_status(m) for m in self.handlers]

    def get_manager_status(self, manager: Union[ManagerId, str]) -> PackageManagerStatus:
        """Status for one manager, probing it first if needed this session."""
        handler = self._handler_for(manager)
        status = self._cached_status(handler.id)
        if status is None:
            status = self._probe(handler.id)
        return status

    def get_manager_state(self, manager: Union[ManagerId, str]) -> ManagerState:
        handler = self._handler_for(manager)
        with self._lock:
            return self._states.get(handler.id, ManagerState.UNKNOWN)

    def clear_cache(self) -> None:
        """Forget resolved paths and statuses so the next query searches again."""
        self.cache.clear()
        with self._lock:
            self._states.clear()
            self._statuses.clear()
            self._errors.clear()

    def _cached_status(self, manager: ManagerId) -> Optional[PackageManagerStatus]:
        with self._lock:
            return self._statuses.get(manager)

    def _probe(self, manager: ManagerId) -> PackageManagerStatus:
        """Locate one manager; any failure becomes a not-installed status."""
        handler = self.handlers[manager]
        with self._lock:
            self._states[manager] = ManagerState.PROBING

        error: Optional[PkgScoutError] = None
        try:
            status = classify(manager, handler.locate())
        except PkgScoutError as e:
            logger.warning("Probing %s failed: %s", manager.value, e)
            status = failed_probe(manager, str(e))
            error = e
        except Exception as e:
            logger.warning("Probing %s crashed: %s", manager.value, e, exc_info=True)
            status = failed_probe(manager, f"{type(e).__name__}: {e}")

        with self._lock:
            self._statuses[manager] = status
            self._states[manager] = ManagerState(status.status.value)
            if error is not None:
                self._errors[manager] = error
        return status

    # =========================================================================
    # Listing
    # =========================================================================

    def list_all_packages(self, on_progress: Optional[ProgressCallback] = None) -> list[PackageRecord]:
        """
        List packages from every installed manager in parallel.

        A manager whose listing fails contributes nothing; the failure is
        logged and reported through on_progress.

        Args:
            on_progress: Optional callback receiving a ListingProgress for each
                manager as it starts and as it finishes or fails

        Returns:
            All records, grouped by manager in registry order
        """
        targets = [s.manager for s in self.discover_available_managers() if s.is_installed]
        if not targets:
            return []

        total = len(targets)
        for manager in targets:
            _notify(on_progress, ListingProgress(manager=manager, stage=ProgressStage.STARTING, total=total))

        results: dict[ManagerId, list[PackageRecord]] = {}
        with ThreadPoolExecutor(max_workers=total) as executor:
            futures = {executor.submit(self.handlers[m].list_packages): m for m in targets}

            for completed, future in enumerate(as_completed(futures), start=1):
                manager = futures[future]
                try:
                    records = future.result()
                except Exception as e:
                    logger.warning("Listing %s failed: %s", manager.value, e)
                    results[manager] = []
                    _notify(
                        on_progress,
                        ListingProgress(
                            manager=manager,
                            stage=ProgressStage.FAILED,
                            completed=completed,
                            total=total,
                            error=str(e),
                        ),
                    )
                    continue

                results[manager] = records
                _notify(
                    on_progress,
                    ListingProgress(
                        manager=manager,
                        stage=ProgressStage.DONE,
                        completed=completed,
                        total=total,
                        package_count=len(records),
                    ),
                )

        return [record for manager in targets for record in results.get(manager, [])]

    def list_packages(self, manager: Union[ManagerId, str]) -> list[PackageRecord]:
        """
        List one manager's packages.

        Raises:
            UnknownManagerError, ManagerDisabledError, ManagerNotInstalledError,
            ManagerPermissionError, CommandFailedError
        """
        handler = self._installed_handler(manager)
        return handler.list_packages()

    def uninstall_package(
        self,
        name: str,
        manager: Union[ManagerId, str],
        location: Optional[PackageLocation] = None,
    ) -> UninstallResult:
        """
        Remove a package through its manager.

        Args:
            name: Package to remove (a Python version for pyenv)
            manager: Manager that owns it
            location: Optional sub-kind, e.g. PackageLocation.CASK for brew

        Returns:
            UninstallResult; a command that ran but failed gives success=False

        Raises:
            UnknownManagerError, ManagerDisabledError, ManagerNotInstalledError,
            ManagerPermissionError, UnsupportedOperationError, ValueError
        """
        handler = self._installed_handler(manager)
        return handler.uninstall_package(name, location)

    # =========================================================================
    # Lookup
    # =========================================================================

    def _handler_for(self, manager: Union[ManagerId, str]) -> ManagerHandler:
        try:
            manager_id = ManagerId(manager)
        except ValueError:
            raise UnknownManagerError(str(manager))

        if self.config.is_disabled(manager_id) and manager_id in self._known:
            raise ManagerDisabledError(manager_id.value)
        handler = self.handlers.get(manager_id)
        if handler is None:
            raise UnknownManagerError(manager_id.value)
        return handler

    def _installed_handler(self, manager: Union[ManagerId, str]) -> ManagerHandler:
        handler = self._handler_for(manager)
        status = self.get_manager_status(handler.id)
        if not status.is_installed:
            with self._lock:
                error = self._errors.get(handler.id)
            if error is not None:
                raise error
            raise ManagerNotInstalledError(handler.id.value)
        return handler
