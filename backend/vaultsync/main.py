from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from vaultsync.api.routes.attachments import router as attachments_router
from vaultsync.api.routes.auth import router as auth_router
from vaultsync.api.routes.ciphers import router as ciphers_router
from vaultsync.api.routes.folders import router as folders_router
from vaultsync.api.routes.sync import router as sync_router
from vaultsync.core.config import settings
from vaultsync.core.errors import VaultError, error_body
from vaultsync.core.log import configure_logging
from vaultsync.db.init_db import init_db


configure_logging(settings.log_level)

app = FastAPI(title="Vault Sync", version="0.1.0")

app.include_router(auth_router)
app.include_router(sync_router)
app.include_router(ciphers_router)
app.include_router(folders_router)
app.include_router(attachments_router)


@app.exception_handler(VaultError)
async def _vault_error(request: Request, exc: VaultError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        location = ".".join(str(part) for part in err["loc"] if part != "body")
        errors.setdefault(location, []).append(err["msg"])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("The model state is invalid.", errors),
    )


@app.on_event("startup")
def _startup() -> None:
    init_db()


@app.get("/health")
def health():
    return {"status": "ok"}
