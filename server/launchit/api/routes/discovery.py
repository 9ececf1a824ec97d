# launchit/api/routes/discovery.py
from typing import List, Literal, Optional, Union

from fastapi import APIRouter
from pydantic import Field

from launchit.helper.response_helper import send_response
from launchit.models import CamelModel
from launchit.services.discovery import discovery_service

router = APIRouter(prefix="/discovery", tags=["Discovery"])


class ScanRequest(CamelModel):
    duration_ms: Optional[int] = Field(default=None, ge=500, le=60000)


class PortScanRequest(CamelModel):
    host: str = Field(..., min_length=1)
    ports: Union[Literal["basic", "deep"], List[int]] = "basic"


@router.post("/scan")
async def scan_endpoint(payload: ScanRequest):
    """Scan the local network for shares (blocks for the scan window)."""
    shares = await discovery_service.scan_for_shares(payload.duration_ms)
    return send_response(shares, message=f"Found {len(shares)} share(s)")


@router.post("/ports")
async def ports_endpoint(payload: PortScanRequest):
    open_ports = await discovery_service.scan_ports(payload.host, payload.ports)
    return send_response({"host": payload.host, "openPorts": open_ports})


@router.post("/stop")
async def stop_endpoint():
    discovery_service.stop_scanning()
    return send_response(message="Scanning stopped")
