import logging
import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path

import click
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from catalog.core.config import Settings, settings
from catalog.core.decorator import CatalogException
from catalog.core.init import initialize_application, shutdown_application
from catalog.routers import routes


# ============================================================================
# Logging Configuration
# ============================================================================
def setup_logging(app_settings: Settings = settings):
    """Configure logging for the application."""
    log_level = logging.DEBUG if app_settings.debug else getattr(
        logging, app_settings.log_level.upper(), logging.INFO
    )
    log_format = "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] %(message)s"

    log_file = Path(app_settings.log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    handlers = [
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(
            log_file,
            mode="a",
            encoding="utf-8",
        ),
    ]

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=handlers,
        force=True,  # Override any existing configuration
    )

    # Suppress verbose third-party logs
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    return logging.getLogger(__name__)


logger = logging.getLogger(__name__)


# ============================================================================
# Application Factory
# ============================================================================
def create_app(app_settings: Settings = settings) -> FastAPI:
    setup_logging(app_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application startup and shutdown."""
        logger.info("=" * 80)
        logger.info("Starting application...")
        logger.info("=" * 80)

        try:
            initialize_application(app, app_settings)
            logger.info("✓ Application startup completed successfully")
        except Exception as e:
            logger.error(f"✗ Failed during startup: {e}", exc_info=True)
            raise

        yield  # Application is running

        logger.info("=" * 80)
        logger.info("Shutting down application...")
        logger.info("=" * 80)
        shutdown_application(app)
        logger.info("✓ Application shutdown completed")

    app = FastAPI(
        title=app_settings.app_name,
        description=app_settings.app_description,
        version=app_settings.app_version,
        debug=app_settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    # ========================================================================
    # Middleware Configuration
    # ========================================================================
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[app_settings.front_url],
        allow_methods=["GET", "PUT", "POST", "DELETE"],
        allow_headers=["*"],
    )

    # Request timing middleware
    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response

    # Request ID middleware for tracing
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(time.time()))
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    # ========================================================================
    # Exception Handlers
    # ========================================================================
    @app.exception_handler(CatalogException)
    async def catalog_exception_handler(request: Request, exc: CatalogException):
        if exc.status_code >= 500:
            logger.error(f"Catalog exception: {exc.message}")
        else:
            logger.warning(f"Rejected request to {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message, "type": exc.error_type},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        logger.warning(f"Validation error: {exc.errors()}")
        # Serialize errors to make them JSON serializable
        details = []
        for error in exc.errors():
            if isinstance(error, dict):
                details.append(
                    {
                        "loc": list(error.get("loc", [])),
                        "msg": str(error.get("msg", "")),
                        "type": str(error.get("type", "")),
                    }
                )
            else:
                details.append({"error": str(error)})
        return JSONResponse(
            status_code=400,
            content={"message": "Validation error", "details": details},
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"SQLAlchemy error: {type(exc).__name__}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "message": "Database error occurred",
                "type": str(type(exc).__name__),
            },
        )

    # ========================================================================
    # Health Check Endpoints
    # ========================================================================
    @app.get("/")
    async def root():
        return {"message": "Hello, world!"}

    @app.get("/health")
    async def health_check(request: Request):
        """Report the configured backend and image storage."""
        image_store = getattr(request.app.state, "image_store", None)
        image_dir = image_store.image_dir if image_store else None
        return {
            "status": "healthy",
            "version": app_settings.app_version,
            "backend": app_settings.catalog_backend,
            "image_dir": str(image_dir.absolute()) if image_dir else None,
            "storage": "healthy" if image_dir and image_dir.exists() else "unhealthy",
        }

    # ========================================================================
    # Routes
    # ========================================================================
    for router in routes:
        app.include_router(router)

    logger.info(f"✓ Registered {len(routes)} routers")
    return app


app = create_app()


# ============================================================================
# CLI Commands
# ============================================================================
@click.group()
def cli():
    """Item catalog management CLI."""
    pass


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind the server to")
@click.option("--port", default=9000, help="Port to run the server on")
@click.option("--reload", is_flag=True, help="Enable auto-reload (development only)")
def dev(host: str, port: int, reload: bool):
    """Run development server with Uvicorn."""
    logger.info("Starting development server...")
    logger.info(f"  - Host: {host}")
    logger.info(f"  - Port: {port}")
    logger.info(f"  - Reload: {reload}")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=reload,
        log_level="debug",
        access_log=True,
    )


@cli.command()
@click.option("--host", default="0.0.0.0", help="Host to bind the server to")
@click.option("--port", default=9000, help="Port to run the server on")
@click.option("--workers", default=1, help="Number of worker processes")
def prod(host: str, port: int, workers: int):
    """Run production server with Gunicorn."""
    if workers > 1 and settings.catalog_backend == "json":
        logger.warning(
            "⚠️  The json backend rewrites one file per write; "
            "concurrent workers may overwrite each other's items"
        )

    logger.info("Starting production server with Gunicorn...")
    logger.info(f"  - Host: {host}")
    logger.info(f"  - Port: {port}")
    logger.info(f"  - Workers: {workers}")

    import subprocess

    cmd = [
        "gunicorn",
        "main:app",
        "--worker-class",
        "uvicorn.workers.UvicornWorker",
        "--workers",
        str(workers),
        "--bind",
        f"{host}:{port}",
        "--access-logfile",
        "-",
        "--error-logfile",
        "-",
        "--log-level",
        "info",
    ]

    try:
        subprocess.run(cmd, check=True)
    except subprocess.CalledProcessError as e:
        logger.error(f"Gunicorn failed to start: {e}")
        raise click.ClickException(str(e))
    except FileNotFoundError:
        logger.error("Gunicorn not found. Install it with: pip install gunicorn")
        raise click.ClickException("Gunicorn not installed")


@cli.command()
def info():
    """Display application information."""
    click.echo(f"Application: {settings.app_name}")
    click.echo(f"Version: {settings.app_version}")
    click.echo(f"Debug Mode: {settings.debug}")
    click.echo(f"Catalog Backend: {settings.catalog_backend}")
    if settings.catalog_backend == "sqlite":
        click.echo(f"Database: {Path(settings.database_path).absolute()}")
    else:
        click.echo(f"Items File: {Path(settings.items_file).absolute()}")
    click.echo(f"Image Directory: {Path(settings.image_dir).absolute()}")
    click.echo(f"Image Persistence: {settings.image_persistence}")
    click.echo(f"Log File: {Path(settings.log_file).absolute()}")


if __name__ == "__main__":
    cli()
