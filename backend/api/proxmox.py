from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from backend.api.deps import get_proxmox
from backend.integrations.proxmox import ProxmoxIntegration

router = APIRouter(prefix="/api/proxmox", tags=["proxmox"])


@router.get("/status")
def cluster_status(proxmox: ProxmoxIntegration = Depends(get_proxmox)) -> dict[str, Any]:
    return proxmox.cluster_status()
