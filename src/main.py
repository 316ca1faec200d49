from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from src.domain.errors import DomainError, domain_error_detail, domain_error_http_status
from src.observability import log_event
from src.routers import (
    auth_routes,
    companies,
    entitlements,
    support_levels,
)

app = FastAPI(title="Support Desk", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def attach_request_id(request: Request, call_next):
    request_id = (
        request.headers.get("X-Request-ID")
        or request.headers.get("X-Correlation-ID")
        or str(uuid4())
    )
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(DomainError)
async def handle_domain_error(request: Request, exc: DomainError):
    log_event(
        "request_rejected",
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
        category=exc.category,
        message=exc.message,
    )
    return JSONResponse(status_code=domain_error_http_status(exc), content=domain_error_detail(exc))


app.include_router(auth_routes.router)
app.include_router(companies.router)
app.include_router(support_levels.router)
app.include_router(entitlements.router)


@app.get("/")
async def root():
    return {"status": "ok", "service": "support-desk"}


@app.get("/health")
async def health():
    return {"status": "healthy"}
