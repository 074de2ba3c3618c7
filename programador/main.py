from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from programador.core.config import settings
from programador.core.errors import (
    SchedulingError,
    ValidationError,
    ConflictError,
    CapacityError,
    CancelledByCaller,
    NotFoundError,
    ExternalIOError,
)
from programador.core.logging import setup_logging
from programador.api.endpoints import schedules, hours_bank, observations, holidays, public

setup_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="Programador de Horarios",
    description="API for weekly work schedules, blocking novedades and the compensation hours bank",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


ERROR_STATUS = {
    ValidationError: 422,
    ConflictError: 409,
    CapacityError: 422,
    CancelledByCaller: 400,
    NotFoundError: 404,
    ExternalIOError: 503,
}


@app.exception_handler(SchedulingError)
async def scheduling_error_handler(request: Request, exc: SchedulingError):
    status_code = next((code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)), 400)
    return JSONResponse(status_code=status_code, content={"detail": exc.to_dict()})


# Include routers
app.include_router(schedules.router)
app.include_router(hours_bank.router)
app.include_router(observations.router)
app.include_router(holidays.router)
app.include_router(holidays.admin_router)  # Holiday maintenance
app.include_router(public.router)


@app.get("/")
def root():
    return {
        "message": "Programador de Horarios API",
        "docs": "/docs",
        "version": "1.0.0"
    }


@app.get("/health")
def health_check():
    return {"status": "healthy"}
