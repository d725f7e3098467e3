from __future__ import annotations

from src.domain.models import TrackedAsset, VaultSnapshot


def same_address(a: str | None, b: str | None) -> bool:
    return bool(a) and bool(b) and str(a).lower() == str(b).lower()


def resolve_asset(snapshot: VaultSnapshot, asset_id: str) -> TrackedAsset | None:
    """
    Find a tracked asset by id.

    When the vault does not track `asset_id`, the FIRST tracked asset is returned
    instead of signalling absence. Callers that need the exact asset must compare
    ids themselves (see `same_address`). Returns None only for an empty vault.
    """
    holdings = snapshot.tracked_assets
    if not holdings:
        return None
    for asset in holdings:
        if same_address(asset.id, asset_id):
            return asset
    return holdings[0]
