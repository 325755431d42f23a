"""对外 HTTP 接口。

POST /api/chat 接收 {messages: [{role, content}, ...]}，
成功返回 {message, status: "success"}，任何失败都返回 {statusCode, message}。
"""

from typing import List

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from chat_core.config.settings import settings
from chat_core.domain.exceptions import BusinessError, ValidationError
from chat_core.infrastructure.logging.logger import logger
from chat_core.relay.service import RelayService


GENERIC_ERROR_MESSAGE = "Error processing your request"


class RelayMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: str
    content: str = ""


class RelayBody(BaseModel):
    messages: List[RelayMessage]


router = APIRouter(prefix="/api", tags=["Chat"])


def get_relay_service() -> RelayService:
    return RelayService(settings)


@router.post("/chat")
def chat_endpoint(body: RelayBody, service: RelayService = Depends(get_relay_service)):
    try:
        result = service.relay([m.model_dump() for m in body.messages])
    except BusinessError:
        raise
    except Exception as e:
        # 未预期的异常统一包装成 500，响应体仍保持 {statusCode, message}
        logger.exception("Unexpected relay failure", extra={"extra": {"error": str(e)}})
        raise BusinessError(code="INTERNAL_ERROR", message=GENERIC_ERROR_MESSAGE, http_status=500) from e
    return result.to_dict()


@router.get("/health")
def health():
    return {"status": "ok"}


def _error_response(exc: BusinessError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content={"statusCode": exc.http_status, "message": exc.message or GENERIC_ERROR_MESSAGE},
    )


async def business_error_handler(request: Request, exc: BusinessError) -> JSONResponse:
    logger.error(
        f"Error processing relay request: {exc.message}",
        extra={"extra": {"code": exc.code, "http_status": exc.http_status, "path": request.url.path}},
    )
    return _error_response(exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        problems.append(f"{loc or 'body'}: {err.get('msg', 'invalid')}")
    return await business_error_handler(
        request,
        ValidationError(code="INVALID_REQUEST", message="Invalid request body: " + "; ".join(problems)),
    )


def create_app() -> FastAPI:
    application = FastAPI(title="Chat Relay API")
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_exception_handler(BusinessError, business_error_handler)
    application.add_exception_handler(RequestValidationError, validation_error_handler)
    application.include_router(router)
    return application


app = create_app()
