# launchit/api/routes/routing.py
from fastapi import APIRouter

from launchit.helper.response_helper import send_response
from launchit.models import BookmarkItem, CamelModel, NetworkProfile
from launchit.services.health import routing_selector

router = APIRouter(prefix="/routing", tags=["Routing"])


class RouteRequest(CamelModel):
    item: BookmarkItem


class LaunchProfileRequest(CamelModel):
    item: BookmarkItem
    profile: NetworkProfile = "local"
    auto_route: bool = False


@router.post("/first-reachable")
async def first_reachable_endpoint(payload: RouteRequest):
    routed = await routing_selector.find_first_reachable_address(payload.item)
    if routed is None:
        return send_response(None, message="No reachable address")
    return send_response(routed)


@router.post("/launch-profile")
async def launch_profile_endpoint(payload: LaunchProfileRequest):
    route = await routing_selector.resolve_launch_profile(
        payload.item, payload.profile, payload.auto_route
    )
    return send_response(route)
