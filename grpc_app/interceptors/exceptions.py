from __future__ import annotations

from typing import Callable, Awaitable
import contextvars

import grpc

from core.logging_config import get_logger
from domain.common.exceptions import BusinessException
from grpc_app.interceptors.request_id import get_request_id
from shared.codes import BusinessCode


logger = get_logger(__name__)

# Mark that the current request has been mapped to a gRPC status
_mapped_error: contextvars.ContextVar[bool] = contextvars.ContextVar("grpc_mapped_error", default=False)


def set_mapped_error() -> None:
    _mapped_error.set(True)


def is_mapped_error() -> bool:
    return bool(_mapped_error.get())


_STATUS_BY_CODE = {
    BusinessCode.PARAM_ERROR: grpc.StatusCode.INVALID_ARGUMENT,
    BusinessCode.PARAM_MISSING: grpc.StatusCode.INVALID_ARGUMENT,
    BusinessCode.PARAM_TYPE_ERROR: grpc.StatusCode.INVALID_ARGUMENT,
    BusinessCode.PARAM_VALIDATION_ERROR: grpc.StatusCode.INVALID_ARGUMENT,

    BusinessCode.NOT_FOUND: grpc.StatusCode.NOT_FOUND,
    BusinessCode.EMAIL_ALREADY_EXISTS: grpc.StatusCode.ALREADY_EXISTS,

    BusinessCode.SERVICE_UNAVAILABLE: grpc.StatusCode.UNAVAILABLE,
    BusinessCode.SYSTEM_ERROR: grpc.StatusCode.INTERNAL,
    BusinessCode.DATABASE_ERROR: grpc.StatusCode.INTERNAL,
}


def business_code_to_grpc_status(code: int) -> grpc.StatusCode:
    try:
        bc = BusinessCode(code)
    except ValueError:
        return grpc.StatusCode.FAILED_PRECONDITION
    return _STATUS_BY_CODE.get(bc, grpc.StatusCode.FAILED_PRECONDITION)


class ExceptionMappingInterceptor(grpc.aio.ServerInterceptor):
    """Translate exceptions raised by handlers into gRPC statuses.

    Store failures are not classified here beyond their business code; any
    other exception becomes INTERNAL with the original message as details.
    """

    async def intercept_service(
        self,
        continuation: Callable[[grpc.HandlerCallDetails], Awaitable[grpc.RpcMethodHandler]],
        handler_call_details: grpc.HandlerCallDetails,
    ) -> grpc.RpcMethodHandler:
        handler = await continuation(handler_call_details)
        if handler is None or not handler.unary_unary:
            return handler

        method = handler_call_details.method

        async def _abort(context: grpc.aio.ServicerContext, code: int, error_type: str,
                         status: grpc.StatusCode, message: str):
            trailing = [("x-biz-code", str(int(code))), ("x-error-type", error_type)]
            request_id = get_request_id()
            if request_id:
                # set_trailing_metadata replaces what RequestIdInterceptor attached
                trailing.append(("x-request-id", request_id))
            try:
                context.set_trailing_metadata(tuple(trailing))
            except Exception:
                pass
            set_mapped_error()
            logger.error(
                "grpc_mapped_error",
                method=method,
                code=str(int(code)),
                status=str(status),
                message=message,
                request_id=get_request_id(),
            )
            await context.abort(status, message)

        async def _unary_unary(request, context: grpc.aio.ServicerContext):
            try:
                return await handler.unary_unary(request, context)
            except grpc.aio.AbortError:
                raise
            except BusinessException as exc:
                await _abort(context, exc.code, exc.error_type or "BusinessError",
                             business_code_to_grpc_status(exc.code), exc.message)
            except Exception as exc:
                await _abort(context, BusinessCode.SYSTEM_ERROR, type(exc).__name__,
                             grpc.StatusCode.INTERNAL, str(exc) or type(exc).__name__)

        return grpc.unary_unary_rpc_method_handler(
            _unary_unary,
            request_deserializer=handler.request_deserializer,
            response_serializer=handler.response_serializer,
        )
