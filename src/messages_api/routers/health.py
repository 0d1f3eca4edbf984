from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """
    Health check endpoint for monitoring API status and component readiness.

    Returns status of API, queue, and storage components along with deployment and relay mode.
    """
    settings = request.app.state.settings

    health_status = {
        "status": "ok",
        "deployment_mode": settings.deployment_mode,
        "relay_mode": settings.relay_mode,
        "components": {
            "api": "ready",
            "queue": "initializing",
            "storage": "initializing",
        },
        "ready": False
    }

    try:
        request.app.state.queue.resolve_queue_url()
        health_status["components"]["queue"] = "ready"
    except Exception as e:
        health_status["components"]["queue"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    try:
        request.app.state.store.s3_client.head_bucket(Bucket=settings.s3_bucket_name)
        health_status["components"]["storage"] = "ready"
    except Exception as e:
        health_status["components"]["storage"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    health_status["ready"] = all(
        state == "ready" for state in health_status["components"].values()
    )

    return health_status
