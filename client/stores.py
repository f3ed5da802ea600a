"""
Client stores.
Состояние пользователя, вопросов и жалоб на стороне клиента.

Чтение сначала идёт в кэш снимков; при промахе или refresh=True
данные запрашиваются по RPC и снимок перезаписывается.
Ошибки API пробрасываются как StoreError.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from loguru import logger

from client.cache import CacheStorage, MemoryStorage, RedisStorage, SnapshotCache
from client.rpc import RpcClient
from config.constants import (
    QUESTIONS_CACHE_KEY,
    REPORTS_CACHE_KEY,
    USER_CACHE_KEY,
    DEFAULT_PAGE_SIZE,
)
from config.settings import settings
from services.redis_client import RedisClient


class StoreError(Exception):
    """Неуспешный ответ API."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


def _unwrap(response: Dict[str, Any], default_error: str) -> Any:
    """Достаёт data из конверта {success, status, data|error}."""
    if not response or not response.get("success"):
        response = response or {}
        raise StoreError(response.get("error") or default_error, response.get("status"))
    return response.get("data")


class UserStore:
    """Текущий пользователь, его сессия и анкета."""

    def __init__(self, rpc: RpcClient, cache: SnapshotCache):
        self.rpc = rpc
        self.cache = cache
        self.user: Optional[Dict[str, Any]] = None
        self.session: Optional[Dict[str, Any]] = None
        self.profile: Optional[Dict[str, Any]] = None

    @property
    def user_id(self) -> Optional[int]:
        return self.user["id"] if self.user else None

    async def restore(self) -> bool:
        """Восстанавливает состояние из кэша. False при промахе."""
        data = await self.cache.get(USER_CACHE_KEY)
        if data is None:
            return False
        self.user = data.get("user")
        self.session = data.get("session")
        self.profile = data.get("profile")
        return True

    async def save(self) -> None:
        await self.cache.set(
            USER_CACHE_KEY,
            {"user": self.user, "session": self.session, "profile": self.profile},
        )

    async def register(self, telegram_id: int, **fields) -> Dict[str, Any]:
        """user.add: регистрация и новая сессия."""
        response = await self.rpc.request("user.add", {"telegramId": telegram_id, **fields})
        if response.get("status") != 200:
            raise StoreError(
                response.get("result") or response.get("message") or "Error registering user",
                response.get("status"),
            )

        self.user = response["user"]
        self.session = response["session"]
        await self.save()
        return self.user

    async def fetch_profile(self, refresh: bool = False) -> Optional[Dict[str, Any]]:
        if not refresh and await self.restore() and self.profile is not None:
            return self.profile

        self.profile = await self.rpc.request("user.getUserProfile", {"userId": self.user_id})
        await self.save()
        return self.profile

    async def update_profile(self, nickname: str, age: int, telegram: str, skills: str) -> Dict[str, Any]:
        """Сохраняет анкету; она снова уходит на модерацию."""
        result = await self.rpc.request("user.upsertUserProfile", {
            "userId": self.user_id,
            "nickname": nickname,
            "age": age,
            "telegram": telegram,
            "skills": skills,
        })
        if isinstance(result, dict) and result.get("success") is False:
            raise StoreError(result.get("error") or "Error updating profile", result.get("status"))

        self.profile = result["profile"]
        await self.save()
        return self.profile

    async def close_session(self) -> None:
        """Закрывает сессию и очищает кэш."""
        if self.session:
            response = await self.rpc.request(
                "user.closeWebAppSession",
                {"sessionId": self.session.get("sessionId")},
            )
            if response.get("status") != 200:
                logger.warning(f"Failed to close session: {response}")

        self.user = self.session = self.profile = None
        await self.cache.invalidate(USER_CACHE_KEY)


class _PagedStore:
    """
    Общая часть сторов со списком и пагинацией.

    Снимок хранится отдельно для каждого набора фильтров (status, userId),
    load_more продолжает текущую выборку с теми же фильтрами.
    """

    cache_key: str = ""
    items_field: str = ""
    list_method: str = ""
    get_method: str = ""

    def __init__(self, rpc: RpcClient, cache: SnapshotCache, limit: int = DEFAULT_PAGE_SIZE):
        self.rpc = rpc
        self.cache = cache
        self.items: List[Dict[str, Any]] = []
        self.filters: Dict[str, Any] = {}
        self.pagination = {"page": 1, "limit": limit, "total": 0}
        self.last_updated: Optional[int] = None

    @property
    def has_more(self) -> bool:
        return len(self.items) < self.pagination["total"]

    @property
    def snapshot_key(self) -> str:
        if not self.filters:
            return self.cache_key
        suffix = "&".join(f"{key}={self.filters[key]}" for key in sorted(self.filters))
        return f"{self.cache_key}?{suffix}"

    async def restore(self) -> bool:
        data = await self.cache.get(self.snapshot_key)
        if data is None:
            return False
        self.items = data[self.items_field]
        self.pagination = data["pagination"]
        return True

    async def save(self) -> None:
        self.last_updated = await self.cache.set(
            self.snapshot_key,
            {self.items_field: self.items, "pagination": self.pagination},
        )

    async def fetch(self, refresh: bool = False, page: Optional[int] = None, **filters) -> List[Dict[str, Any]]:
        """Список: из кэша, если снимок для этих фильтров свежий, иначе с сервера."""
        filters = {key: value for key, value in filters.items() if value is not None}
        if filters != self.filters:
            self.filters = filters
            self.pagination["page"] = 1

        if not refresh and await self.restore():
            return self.items

        page = page or self.pagination["page"]
        limit = self.pagination["limit"]
        response = await self.rpc.request(self.list_method, {**self.filters, "page": page, "limit": limit})
        data = _unwrap(response, f"Error loading {self.items_field}")

        self.items = data[self.items_field]
        self.pagination = {"page": page, "limit": limit, "total": data["pagination"]["total"]}
        await self.save()
        return self.items

    async def load_more(self) -> List[Dict[str, Any]]:
        if not self.has_more:
            return self.items

        next_page = self.pagination["page"] + 1
        response = await self.rpc.request(
            self.list_method,
            {**self.filters, "page": next_page, "limit": self.pagination["limit"]},
        )
        data = _unwrap(response, f"Error loading more {self.items_field}")

        self.items.extend(data[self.items_field])
        self.pagination["page"] = next_page
        await self.save()
        return self.items

    async def get_by_id(self, item_id: int, **params) -> Dict[str, Any]:
        for item in self.items:
            if item.get("id") == item_id:
                return item

        params = {key: value for key, value in params.items() if value is not None}
        response = await self.rpc.request(self.get_method, {"id": item_id, **params})
        return _unwrap(response, "Not found")

    async def _created(self, item: Dict[str, Any]) -> None:
        self.items.insert(0, item)
        self.pagination["total"] += 1
        await self.save()


class QuestionStore(_PagedStore):
    cache_key = QUESTIONS_CACHE_KEY
    items_field = "questions"
    list_method = "question.getQuestions"
    get_method = "question.getQuestionById"

    async def get_by_id(self, item_id: int, user_id: Optional[int] = None) -> Dict[str, Any]:
        """Приватный вопрос сервер отдаёт только автору."""
        return await super().get_by_id(item_id, userId=user_id)

    async def create_question(self, question: str, user_id: int, is_private: bool = False) -> Dict[str, Any]:
        response = await self.rpc.request("question.create", {
            "question": question,
            "userId": user_id,
            "isPrivate": is_private,
        })
        data = _unwrap(response, "Error creating question")

        await self._created({
            "id": data["questionId"],
            "question": question,
            "userId": user_id,
            "isPrivate": is_private,
            "status": "PENDING",
            "createdAt": data["createdAt"],
        })
        return data


class ReportStore(_PagedStore):
    cache_key = REPORTS_CACHE_KEY
    items_field = "reports"
    list_method = "report.getAll"
    get_method = "report.getById"

    async def create_report(self, message: str, user_id: Optional[int] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = {"message": message}
        if user_id is not None:
            params["userId"] = user_id
        response = await self.rpc.request("report.create", params)
        data = _unwrap(response, "Error creating report")

        await self._created({
            "id": data["reportId"],
            "message": message,
            "userId": user_id,
            "status": "PENDING",
            "createdAt": data["createdAt"],
        })
        return data


@dataclass
class Stores:
    rpc: RpcClient
    storage: CacheStorage
    users: UserStore
    questions: QuestionStore
    reports: ReportStore

    async def close(self) -> None:
        """Закрывает HTTP клиент и хранилище снимков."""
        await self.rpc.aclose()
        await self.storage.close()


async def open_storage(redis_url: Optional[str] = None) -> CacheStorage:
    """Redis, если доступен, иначе память процесса."""
    if redis_url:
        redis_client = RedisClient(redis_url)
        await redis_client.connect()
        if redis_client.is_connected:
            return RedisStorage(redis_client)
        logger.warning("Redis unavailable, snapshots are kept in memory")
    return MemoryStorage()


def build_stores(rpc: RpcClient, storage: CacheStorage, namespace: str = "") -> Stores:
    """Сторы с TTL из настроек: пользователь 5 минут, списки 10 минут."""
    return Stores(
        rpc=rpc,
        storage=storage,
        users=UserStore(rpc, SnapshotCache(storage, settings.USER_CACHE_TTL, namespace=namespace)),
        questions=QuestionStore(rpc, SnapshotCache(storage, settings.QUESTION_CACHE_TTL, namespace=namespace)),
        reports=ReportStore(rpc, SnapshotCache(storage, settings.REPORT_CACHE_TTL, namespace=namespace)),
    )
