from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from backend.api.deps import get_portainer, get_pyrodactyl
from backend.integrations.portainer import PortainerIntegration
from backend.integrations.pyrodactyl import PyrodactylIntegration

router = APIRouter(prefix="/api", tags=["servers"])


@router.get("/pyrodactyl/servers")
def game_servers(pyrodactyl: PyrodactylIntegration = Depends(get_pyrodactyl)) -> dict[str, Any]:
    return pyrodactyl.servers()


@router.get("/portainer/containers")
def containers(portainer: PortainerIntegration = Depends(get_portainer)) -> dict[str, Any]:
    return portainer.containers()
