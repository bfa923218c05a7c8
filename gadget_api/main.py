from prometheus_fastapi_instrumentator import Instrumentator

from gadget_api.core.config import settings
from gadget_api.core.logging import configure_logging
from . import app as base_app

configure_logging()
app = base_app
instrumentator = Instrumentator()


@app.get("/health", tags=["ops"])
async def health() -> dict[str, bool]:
    return {"ok": True}


if settings.METRICS_ENABLED:
    instrumentator.instrument(app).expose(app, include_in_schema=False)


def run() -> None:
    import uvicorn

    uvicorn.run("gadget_api.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
