from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from orderbot.config import Settings
from orderbot.logging_config import get_logger, setup_logging
from orderbot.routers import webhook
from orderbot.services.invoice_service import INVOICE_URL_PREFIX
from orderbot.services.order_service import OrderService

logger = get_logger("main")


def create_app(settings: Optional[Settings] = None, order_service: Optional[OrderService] = None) -> FastAPI:
    """Build the application. Missing required settings fail here, at startup."""
    settings = settings or Settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Order Bot",
        description="WhatsApp order-to-invoice webhook service",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.order_service = order_service or OrderService.from_settings(settings)

    invoice_dir = Path(settings.invoice_dir)
    invoice_dir.mkdir(parents=True, exist_ok=True)
    app.mount(INVOICE_URL_PREFIX, StaticFiles(directory=str(invoice_dir)), name="invoices")

    app.include_router(webhook.router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    logger.info(
        "Order bot configured",
        extra={
            "context": {
                "llm_provider": settings.llm_provider,
                "catalog_size": len(app.state.order_service.catalog),
                "invoice_dir": str(invoice_dir),
            }
        },
    )
    return app


def run() -> None:
    """Serve the app; equivalent to `uvicorn --factory orderbot.main:create_app`."""
    import uvicorn

    settings = Settings()
    uvicorn.run("orderbot.main:create_app", factory=True, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
