# claim_validator/main.py

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .config import settings
from .endpoints.claims import claims_router
from .exceptions import PolicyNotFoundError
from .limiter import limiter
from .logger import get_logger

logger = get_logger(__name__)

logger.info("Starting Claim Validation API...")

app = FastAPI(
    title="Claim Validation API",
    description=(
        "API for scoring insurance claims against policy coverage, exclusions, pricing and hospital network. "
        "Hospital network scores add the weighted fuzzy, vector and chain signals by default "
        "(CLAIM_VALIDATOR_SCORING__HOSPITAL_BLEND=sum); set it to 'max' to keep only the strongest signal."
    ),
    version="1.0.0",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(PolicyNotFoundError)
async def policy_not_found_handler(request: Request, exc: PolicyNotFoundError):
    logger.warning(str(exc))
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup event triggered.")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown event triggered.")


# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
logger.info("CORS middleware initialized.")

app.include_router(claims_router, prefix="/api/v1/claims", tags=["Claims"])
logger.info("Routers initialized.")


@app.get("/", tags=["Health Check"])
@limiter.limit("5/minute")  # Protect the health check endpoint as well
def read_root(request: Request):
    return {"status": "ok"}
