# backend/main.py
import logging
from datetime import datetime, timezone

from dotenv import load_dotenv
from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

load_dotenv()

from config import settings
from database import get_db, init_db
from errors import PosError, StorageError

# Router imports
from routes.categories import router as categories_router
from routes.suppliers import router as suppliers_router
from routes.products import router as products_router
from routes.purchases import router as purchases_router
from routes.sales import router as sales_router
from routes.expenses import router as expenses_router
from routes.reports import router as reports_router
from routes.logs import router as logs_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Initialisation
init_db()

app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION)

# CORS Configuration
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# === Error translation ===

@app.exception_handler(PosError)
async def pos_error_handler(request: Request, exc: PosError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Malformed input is a client error like any other: 400, not FastAPI's 422
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    error = StorageError()
    return JSONResponse(status_code=error.status_code, content={"detail": error.message})


# Router registration
app.include_router(categories_router)
app.include_router(suppliers_router)
app.include_router(products_router)
app.include_router(purchases_router)
app.include_router(sales_router)
app.include_router(expenses_router)
app.include_router(reports_router)
app.include_router(logs_router)


@app.get("/", tags=["System"])
def read_root():
    return {"message": f"{settings.PROJECT_NAME} is running", "version": settings.VERSION}


@app.get("/health", tags=["System"])
def health_status(db: Session = Depends(get_db)):
    health_report = {
        "app_name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "server_time": datetime.now(timezone.utc).isoformat(),
        "services": {"api": "online", "database": "unknown"},
    }
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check could not reach the database")
        health_report["services"]["database"] = "offline"
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=health_report)
    health_report["services"]["database"] = "online"
    return health_report
