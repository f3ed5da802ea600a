"""
JSON-RPC client.
Асинхронный клиент API Mini App (POST /api).
"""

import itertools
from typing import Any, Dict, Optional

import httpx
from loguru import logger


class RpcError(Exception):
    """Ответ JSON-RPC с полем error."""

    def __init__(self, code: int, message: str):
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message


class RpcClient:
    """
    Клиент JSON-RPC 2.0 поверх httpx.

    Args:
        base_url: Адрес API сервера
        timeout: Таймаут запроса (секунды)
        http_client: Готовый httpx.AsyncClient (например, с MockTransport)
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 20.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._client = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._ids = itertools.count(1)

    async def request(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Вызов метода с ожиданием результата.

        Raises:
            RpcError: ошибка протокола JSON-RPC
            httpx.HTTPError: ошибка транспорта
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or {},
        }
        logger.debug(f"RPC request {method}")

        resp = await self._client.post("/api", json=payload)
        resp.raise_for_status()
        body = resp.json()

        if "error" in body:
            error = body["error"]
            raise RpcError(error.get("code", 0), error.get("message", ""))
        return body.get("result")

    async def aclose(self) -> None:
        await self._client.aclose()
