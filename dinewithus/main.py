from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from dinewithus.core.config import settings
from dinewithus.api import access, bookings, dinners
from dinewithus.core.exceptions import (
    BackendError,
    BookingActionError,
    BookingNotFoundError,
    InvalidAmountError,
    InvalidDateError,
)
from dinewithus.core.logger import setup_logging, logger
from contextlib import asynccontextmanager
from datetime import datetime

setup_logging()

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"🚀 Starting booking companion (backend: {settings.BASE_URL})")
    yield
    # Shutdown
    logger.info("🛑 Shutting down booking companion")

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan
)

# Refund previews must never fall back to a guessed amount
@app.exception_handler(InvalidDateError)
@app.exception_handler(InvalidAmountError)
async def invalid_booking_data_handler(request: Request, exc):
    logger.error(f"❌ Cannot preview cancellation ({request.url.path}): {exc.message}")
    return JSONResponse(
        status_code=422,
        content={"message": "This booking cannot be cancelled right now. Please reload your bookings and try again.", "code": exc.code}
    )

@app.exception_handler(BackendError)
async def backend_error_handler(request: Request, exc: BackendError):
    # Pass client errors through (401, 403, 404, 409...), anything else is a bad gateway
    status_code = exc.status_code if exc.status_code and 400 <= exc.status_code < 500 else 502
    return JSONResponse(
        status_code=status_code,
        content={"message": "Something went wrong. Please try again.", "detail": exc.message, "code": exc.code}
    )

@app.exception_handler(BookingNotFoundError)
async def booking_not_found_handler(request: Request, exc: BookingNotFoundError):
    return JSONResponse(status_code=404, content={"message": "Booking not found", "code": exc.code})

# The booking moved on (cancelled, completed...) since the UI last loaded it
@app.exception_handler(BookingActionError)
async def booking_action_handler(request: Request, exc: BookingActionError):
    return JSONResponse(
        status_code=409,
        content={"message": "This booking has changed. Please reload your bookings.", "detail": exc.message, "code": exc.code}
    )

# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"🔥 UNHANDLED ERROR: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"message": "Internal Server Error", "detail": "An unexpected error occurred. Please contact support."}
    )

# Include routers
app.include_router(bookings.router, prefix=settings.API_V1_STR, tags=["Bookings"])
app.include_router(dinners.router, prefix=settings.API_V1_STR, tags=["Dinners"])
app.include_router(access.router, prefix=settings.API_V1_STR, tags=["Access"])

@app.get("/health")
async def health_check():
    return {"status": "ok", "environment": settings.ENVIRONMENT, "timestamp": datetime.now().isoformat()}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("dinewithus.main:app", host="0.0.0.0", port=settings.PORT, reload=True)
