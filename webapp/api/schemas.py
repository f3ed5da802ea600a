"""
Pydantic schemas.
Параметры RPC-методов и формы ответов. Поля на проводе в camelCase.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from config.constants import (
    QuestionStatus,
    ReportStatus,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
)


class CamelModel(BaseModel):
    """База: camelCase алиасы, чтение из ORM-объектов."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

    def dump(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# === Параметры ===

class UserAddParams(CamelModel):
    telegram_id: int
    username: Optional[str] = None
    avatar: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    language_code: Optional[str] = None
    is_premium: bool = False


class UserIdParams(CamelModel):
    user_id: int


class UpsertProfileParams(CamelModel):
    user_id: int
    nickname: str
    age: int
    telegram: str
    skills: str


class CloseSessionParams(CamelModel):
    session_id: Optional[int] = None


class ReportCreateParams(CamelModel):
    message: str
    user_id: Optional[int] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class QuestionCreateParams(CamelModel):
    question: str
    user_id: int
    is_private: bool = False
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class PaymentCreateParams(CamelModel):
    user_id: int
    id: str = Field(min_length=1, max_length=100)
    title: str
    price: Decimal = Field(gt=0)
    currency: str = Field(min_length=1, max_length=10)


class PageParams(CamelModel):
    user_id: Optional[int] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)


class ListQuestionsParams(PageParams):
    status: Optional[QuestionStatus] = None


class ListReportsParams(PageParams):
    status: Optional[ReportStatus] = None


class EntityIdParams(CamelModel):
    id: int


class QuestionIdParams(EntityIdParams):
    user_id: Optional[int] = None


# === Ответы ===

class UserOut(CamelModel):
    id: int
    telegram_id: int
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_premium: bool = False
    avatar: Optional[str] = None


class ProfileOwnerOut(CamelModel):
    telegram_id: int
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class ProfileOut(CamelModel):
    id: int
    user_id: int
    nickname: str
    age: int
    telegram: str
    skills: str
    is_approved: bool
    last_edited: Optional[datetime] = None


class ProfileWithOwnerOut(ProfileOut):
    user: Optional[ProfileOwnerOut] = None


class SessionOut(CamelModel):
    session_id: int
    expires_at: datetime


class WebAppSessionOut(CamelModel):
    id: int
    user_id: int
    created_at: Optional[datetime] = None
    expires_at: datetime


class LogOut(CamelModel):
    id: int
    action: str
    admin_id: Optional[int] = None
    admin_telegram_id: int
    previous_status: str
    new_status: str
    comment: Optional[str] = None
    created_at: Optional[datetime] = None


class QuestionOut(CamelModel):
    id: int
    user_id: Optional[int] = None
    question: str
    is_private: bool
    status: QuestionStatus
    answer: Optional[str] = None
    answered_by_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class QuestionDetailOut(QuestionOut):
    logs: List[LogOut] = []


class ReportOut(CamelModel):
    id: int
    user_id: Optional[int] = None
    message: str
    status: ReportStatus
    processed_at: Optional[datetime] = None
    admin_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReportDetailOut(ReportOut):
    logs: List[LogOut] = []
