from __future__ import annotations

from typing import Any

from backend.integrations.base import UpstreamIntegration


class ProxmoxIntegration(UpstreamIntegration):
    label = "Proxmox"

    @property
    def base_url(self) -> str:
        return self.settings.proxmox_host

    def is_configured(self) -> bool:
        return bool(self.settings.proxmox_host and self.settings.proxmox_token_id and self.settings.proxmox_token_secret)

    def auth_headers(self) -> dict[str, str]:
        # Format: PVEAPIToken=user@realm!tokenid=secret
        return {"Authorization": f"PVEAPIToken={self.settings.proxmox_token_id}={self.settings.proxmox_token_secret}"}

    def _verify_for(self, url: str) -> bool:
        # Proxmox ships a self-signed certificate by default, whatever the scheme config says.
        return self.settings.upstream_verify_tls

    def cluster_status(self) -> dict[str, Any]:
        self.ensure_configured()
        nodes_payload = self.get_json("/api2/json/cluster/resources", params={"type": "node"}) or {}
        vms_payload = self.get_json("/api2/json/cluster/resources", params={"type": "vm"}) or {}
        return {"nodes": enrich_nodes(nodes_payload.get("data") or [], vms_payload.get("data") or [])}


def running_vm_counts(vms: list[dict[str, Any]]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for vm in vms:
        if vm.get("status") != "running":
            continue
        node = str(vm.get("node"))
        counts[node] = counts.get(node, 0) + 1
    return counts


def enrich_nodes(nodes: list[dict[str, Any]], vms: list[dict[str, Any]]) -> list[dict[str, Any]]:
    counts = running_vm_counts(vms)
    return [{**node, "vmCount": counts.get(str(node.get("node")), 0)} for node in nodes]
