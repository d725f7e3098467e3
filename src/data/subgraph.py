from __future__ import annotations

import logging

import requests

from src.domain.models import TrackedAsset, VaultSnapshot

logger = logging.getLogger(__name__)

VAULT_DETAILS_QUERY = """
query VaultDetails($id: ID!) {
  vault(id: $id) {
    id
    name
    comptroller {
      id
    }
    trackedAssets {
      id
      name
      symbol
      decimals
    }
  }
}
"""


class SubgraphError(RuntimeError):
    """Raised when the subgraph cannot return the vault."""


def parse_vault(vault_address: str, vault: dict) -> VaultSnapshot:
    comptroller = vault.get("comptroller") or {}
    assets = []
    for a in vault.get("trackedAssets") or []:
        asset_id = str(a.get("id") or "").strip().lower()
        if not asset_id:
            continue
        decimals = a.get("decimals")
        assets.append(
            TrackedAsset(
                id=asset_id,
                symbol=a.get("symbol"),
                name=a.get("name"),
                decimals=int(decimals) if decimals is not None else None,
            )
        )
    return VaultSnapshot(
        vault_address=vault_address.lower(),
        comptroller_id=(comptroller.get("id") or None),
        tracked_assets=tuple(assets),
        name=vault.get("name"),
    )


class EnzymeSubgraphClient:
    """
    Minimal GraphQL reader for the Enzyme subgraph.
    Only the vault details query is needed: tracked assets and the comptroller.
    """

    def __init__(self, endpoint: str, timeout: float = 20):
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def query(self, query: str, variables: dict) -> dict:
        resp = self.session.post(
            self.endpoint,
            json={"query": query, "variables": variables},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        body = resp.json()
        errors = body.get("errors")
        if errors:
            messages = "; ".join(str(e.get("message", e)) for e in errors)
            raise SubgraphError(f"Subgraph query failed: {messages}")
        return body.get("data") or {}

    def get_vault(self, vault_address: str) -> VaultSnapshot:
        data = self.query(VAULT_DETAILS_QUERY, {"id": vault_address.lower()})
        vault = data.get("vault")
        if not vault:
            raise SubgraphError(f"Vault {vault_address} not found in subgraph")

        snapshot = parse_vault(vault_address, vault)
        logger.info(
            "Loaded vault %s (%s): comptroller %s, %d tracked assets",
            snapshot.name or "?",
            snapshot.vault_address,
            snapshot.comptroller_id,
            len(snapshot.tracked_assets),
        )
        return snapshot
