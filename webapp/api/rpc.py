"""
JSON-RPC 2.0 dispatcher.
Разбор запросов, маршрутизация по имени метода и единый конверт ответа.

Методы группируются в RpcRouter (как APIRouter в FastAPI) и подключаются
к диспетчеру через include_router().
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type, Union

from loguru import logger
from pydantic import BaseModel, ValidationError

from services.exceptions import WorkflowError
from services.registry import ServiceRegistry


JSONRPC_VERSION = "2.0"

# Коды ошибок JSON-RPC
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602

ERROR_MESSAGES = {
    PARSE_ERROR: "Parse error",
    INVALID_REQUEST: "Invalid Request",
    METHOD_NOT_FOUND: "Method not found",
    INVALID_PARAMS: "Invalid params",
}


@dataclass
class RpcContext:
    """Зависимости и метаданные запроса, доступные методу."""

    services: ServiceRegistry
    client_ip: Optional[str] = None
    user_agent: Optional[str] = None


RpcHandler = Callable[[RpcContext, Any], Awaitable[Any]]


@dataclass
class RpcMethod:
    name: str
    handler: RpcHandler
    params_model: Optional[Type[BaseModel]] = None


# =====================================
# КОНВЕРТ ОТВЕТА
# =====================================

def success(data: Any = None, status: int = 200) -> Dict[str, Any]:
    return {"success": True, "status": status, "data": data}


def failure(status: int, error: str) -> Dict[str, Any]:
    return {"success": False, "status": status, "error": error}


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg')}" if location else first.get("msg", "Invalid params")


def rpc_error(request_id: Any, code: int, message: Optional[str] = None) -> Dict[str, Any]:
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "error": {"code": code, "message": message or ERROR_MESSAGES[code]},
    }


def rpc_result(request_id: Any, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


# =====================================
# РОУТЕР И ДИСПЕТЧЕР
# =====================================

class RpcRouter:
    """Группа методов с общим префиксом (user, report, question, payment)."""

    def __init__(self, prefix: str = ""):
        self.prefix = prefix
        self.methods: List[RpcMethod] = []

    def method(self, name: str, params_model: Optional[Type[BaseModel]] = None):
        """
        Декоратор регистрации метода.

        Использование:
            @router.method("create", ReportCreateParams)
            async def create(ctx: RpcContext, params: ReportCreateParams): ...
        """
        full_name = f"{self.prefix}.{name}" if self.prefix else name

        def decorator(func: RpcHandler) -> RpcHandler:
            self.methods.append(RpcMethod(full_name, func, params_model))
            return func

        return decorator


class JsonRpcDispatcher:
    """Диспетчер JSON-RPC 2.0: одиночные запросы и пакеты, уведомления без ответа."""

    def __init__(self):
        self._methods: Dict[str, RpcMethod] = {}

    def include_router(self, router: RpcRouter) -> None:
        for method in router.methods:
            if method.name in self._methods:
                raise ValueError(f"RPC method {method.name} is already registered")
            self._methods[method.name] = method

    @property
    def method_names(self) -> List[str]:
        return sorted(self._methods)

    async def handle(self, payload: Any, ctx: RpcContext) -> Optional[Union[Dict[str, Any], List[Dict[str, Any]]]]:
        """
        Обрабатывает разобранное тело запроса.

        Returns:
            Ответ, список ответов или None, если отвечать нечего
            (запрос состоял только из уведомлений).
        """
        if isinstance(payload, list):
            if not payload:
                return rpc_error(None, INVALID_REQUEST)

            responses = []
            for request in payload:
                response = await self._handle_request(request, ctx)
                if response is not None:
                    responses.append(response)
            return responses or None

        return await self._handle_request(payload, ctx)

    async def _handle_request(self, request: Any, ctx: RpcContext) -> Optional[Dict[str, Any]]:
        if (
            not isinstance(request, dict)
            or request.get("jsonrpc") != JSONRPC_VERSION
            or not isinstance(request.get("method"), str)
        ):
            request_id = request.get("id") if isinstance(request, dict) else None
            return rpc_error(request_id, INVALID_REQUEST)

        is_notification = "id" not in request
        request_id = request.get("id")
        name = request["method"]

        method = self._methods.get(name)
        if method is None:
            logger.warning(f"Unknown RPC method: {name}")
            return None if is_notification else rpc_error(request_id, METHOD_NOT_FOUND)

        params = request.get("params")
        if params is None:
            params = {}
        if not isinstance(params, dict):
            return None if is_notification else rpc_error(request_id, INVALID_PARAMS)

        result = await self._call(method, params, ctx)
        if is_notification:
            return None
        return rpc_result(request_id, result)

    async def _call(self, method: RpcMethod, params: Dict[str, Any], ctx: RpcContext) -> Any:
        """
        Вызывает метод. Ошибки сервисного слоя превращаются в конверт,
        исключения не выходят за пределы диспетчера.
        """
        try:
            args = method.params_model.model_validate(params) if method.params_model else params
        except ValidationError as e:
            logger.info(f"Invalid params for {method.name}: {e.error_count()} error(s)")
            return failure(400, _validation_message(e))

        try:
            return await method.handler(ctx, args)
        except WorkflowError as e:
            logger.warning(f"RPC {method.name} failed: {e.message}")
            return failure(e.status, e.message)
        except Exception as e:
            logger.exception(f"RPC {method.name} crashed: {e}")
            return failure(500, "Internal server error")
