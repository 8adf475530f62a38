from fastapi import APIRouter

from weather_edge.common.response import ResponseUtil

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """
    Health check endpoint for monitoring and load balancers
    """
    return ResponseUtil.success_response(data={"status": "ok"})
