# bookinfo/api/v1/routers/health.py
import time
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(tags=["health"])
START_TIME = time.time()


@router.get("/health")
async def health(request: Request):
    """
    Liveness of the current service:
    - 200 {"status": "<Service> is healthy"} normally
    - 500 {"status": "<Service> is not healthy"} while the ratings health simulator says so
    """
    label = request.app.state.service_label
    state = getattr(request.app.state, "health_state", None)
    uptime = int(time.time() - START_TIME)

    if state is not None and not state.healthy:
        return JSONResponse(
            status_code=500,
            content={"status": f"{label} is not healthy", "uptime_seconds": uptime},
        )
    return {"status": f"{label} is healthy", "uptime_seconds": uptime}
