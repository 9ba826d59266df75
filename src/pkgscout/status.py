"""Classification of search results into manager statuses."""

from typing import Optional

from pkgscout.models import ManagerAvailability, ManagerId, PackageManagerStatus, SearchResult


def path_missing_message(found_path: str) -> str:
    return f"{found_path} found but not on PATH; add it to your shell PATH"


def classify(manager: ManagerId, result: Optional[SearchResult]) -> PackageManagerStatus:
    """
    Derive a manager's status from how (or whether) its executable was found.

    Tier 1/2 hits are available, tier 3/4 hits are installed but missing from
    PATH, and no hit means not installed. Nothing else is consulted.
    """
    if result is None:
        return PackageManagerStatus(
            manager=manager,
            status=ManagerAvailability.NOT_INSTALLED,
            in_path=False,
        )

    if result.in_path:
        return PackageManagerStatus(
            manager=manager,
            status=ManagerAvailability.AVAILABLE,
            discovery_method=result.method,
            found_path=result.path,
            in_path=True,
        )

    return PackageManagerStatus(
        manager=manager,
        status=ManagerAvailability.PATH_MISSING,
        discovery_method=result.method,
        found_path=result.path,
        in_path=False,
        message=path_missing_message(result.path),
    )


def failed_probe(manager: ManagerId, reason: str) -> PackageManagerStatus:
    """Status for a manager whose probe crashed, timed out, or was refused."""
    return PackageManagerStatus(
        manager=manager,
        status=ManagerAvailability.NOT_INSTALLED,
        in_path=False,
        message=f"Discovery failed: {reason}",
    )
