# launchit/api/routes/health.py
from typing import List

from fastapi import APIRouter

from launchit.helper.response_helper import send_error, send_response
from launchit.models import BookmarkItem, CamelModel, NetworkProfile
from launchit.services.health import health_service

router = APIRouter(prefix="/health", tags=["Health"])


class CheckRequest(CamelModel):
    item: BookmarkItem
    profile: NetworkProfile = "local"


class CheckAllRequest(CamelModel):
    items: List[BookmarkItem]
    profile: NetworkProfile = "local"


class DashboardRequest(CamelModel):
    items: List[BookmarkItem]


@router.post("/check")
async def check_endpoint(payload: CheckRequest):
    result = await health_service.check_bookmark(payload.item, payload.profile)
    return send_response(result)


@router.post("/check-all")
async def check_all_endpoint(payload: CheckAllRequest):
    results = await health_service.check_multiple_bookmarks(payload.items, payload.profile)
    return send_response(results)


@router.get("/results")
async def results_endpoint():
    return send_response(health_service.get_all_results())


@router.delete("/results")
async def clear_results_endpoint():
    health_service.clear_results()
    return send_response(message="Results cleared")


@router.get("/results/{item_id}")
async def result_endpoint(item_id: str):
    result = health_service.get_result(item_id)
    if result is None:
        return send_error(f"No health check result for {item_id}", status_code=404)
    return send_response(result)


@router.get("/metrics/{item_id}")
async def metrics_endpoint(item_id: str):
    return send_response({
        "itemId": item_id,
        "uptime": health_service.calculate_uptime(item_id),
        "history": health_service.get_metrics_history(item_id),
    })


@router.post("/dashboard")
async def dashboard_endpoint(payload: DashboardRequest):
    return send_response(health_service.get_service_metrics(payload.items))
