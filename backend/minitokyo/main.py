import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from minitokyo.api.v1.routes.health import router as health_router
from minitokyo.api.v1.routes.transit import router as transit_router
from minitokyo.loaders.http import UpstreamFetchError, configure_logging_if_needed

configure_logging_if_needed()
logger = logging.getLogger(__name__)

app = FastAPI(title="Mini Tokyo data API")

# The visualization client runs on another origin and only reads.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.exception_handler(UpstreamFetchError)
async def upstream_fetch_failed(request: Request, exc: UpstreamFetchError) -> JSONResponse:
    # one failed locator rejects the whole load; the client keeps its previous snapshot
    logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=502,
        content={"detail": str(exc), "upstream_status": exc.status},
    )


app.include_router(health_router, prefix="/v1")
app.include_router(transit_router)
