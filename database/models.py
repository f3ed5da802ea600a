"""
SQLAlchemy Models.
Определение всех таблиц базы данных.
Поддерживает PostgreSQL и SQLite.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from sqlalchemy import (
    BigInteger,
    Integer,
    String,
    Text,
    Boolean,
    DateTime,
    ForeignKey,
    Numeric,
    Enum as SQLEnum,
    Index,
    func,
)
from sqlalchemy.orm import DeclarativeBase, relationship, Mapped, mapped_column

from config.constants import (
    UserRole,
    ReportStatus,
    QuestionStatus,
    PaymentStatus,
)


class Base(DeclarativeBase):
    """Базовый класс для всех моделей."""
    pass


class User(Base):
    """Модель пользователя."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    telegram_id: Mapped[int] = mapped_column(BigInteger, unique=True, nullable=False, index=True)
    username: Mapped[Optional[str]] = mapped_column(String(255))
    first_name: Mapped[Optional[str]] = mapped_column(String(255))
    last_name: Mapped[Optional[str]] = mapped_column(String(255))
    avatar: Mapped[Optional[str]] = mapped_column(Text)  # data:image/jpeg;base64,...
    language_code: Mapped[Optional[str]] = mapped_column(String(10))
    is_premium: Mapped[bool] = mapped_column(Boolean, default=False)

    # Статус
    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, name="user_role"), default=UserRole.NORMAL, nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Метаданные
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    # Связи
    profile: Mapped[Optional["UserProfile"]] = relationship(
        "UserProfile",
        back_populates="user",
        uselist=False,
        lazy="selectin"
    )
    sessions: Mapped[List["WebAppSession"]] = relationship(
        "WebAppSession",
        back_populates="user",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, telegram_id={self.telegram_id}, role={self.role})>"


class UserProfile(Base):
    """Анкета пользователя, проходит модерацию."""

    __tablename__ = "user_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    nickname: Mapped[str] = mapped_column(String(100), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    telegram: Mapped[str] = mapped_column(String(100), nullable=False)  # контактный handle
    skills: Mapped[str] = mapped_column(Text, nullable=False)

    # Модерация: любое изменение сбрасывает одобрение
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    last_edited: Mapped[datetime] = mapped_column(DateTime, default=func.now())

    user: Mapped["User"] = relationship("User", back_populates="profile")

    def __repr__(self) -> str:
        return f"<UserProfile(user_id={self.user_id}, approved={self.is_approved})>"


class Report(Base):
    """Жалоба пользователя."""

    __tablename__ = "reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("users.id"))
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[ReportStatus] = mapped_column(
        SQLEnum(ReportStatus, name="report_status"),
        default=ReportStatus.PENDING,
        nullable=False,
        index=True,
    )

    # Откуда пришло
    ip_address: Mapped[Optional[str]] = mapped_column(String(45))  # IPv4/IPv6
    user_agent: Mapped[Optional[str]] = mapped_column(String(500))

    # Обработка
    processed_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    processed_by: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("users.id"))
    admin_notes: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    user: Mapped[Optional["User"]] = relationship("User", foreign_keys=[user_id], lazy="selectin")
    logs: Mapped[List["ReportLog"]] = relationship(
        "ReportLog",
        back_populates="report",
        order_by="ReportLog.created_at.desc()",
    )

    __table_args__ = (
        Index("idx_report_user", "user_id"),
        Index("idx_report_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Report(id={self.id}, status={self.status})>"


class PersonalQuestion(Base):
    """Вопрос пользователя модераторам."""

    __tablename__ = "personal_questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("users.id"))
    question: Mapped[str] = mapped_column(Text, nullable=False)
    is_private: Mapped[bool] = mapped_column(Boolean, default=False)
    status: Mapped[QuestionStatus] = mapped_column(
        SQLEnum(QuestionStatus, name="question_status"),
        default=QuestionStatus.PENDING,
        nullable=False,
        index=True,
    )

    answer: Mapped[Optional[str]] = mapped_column(Text)
    answered_by_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("users.id"))

    ip_address: Mapped[Optional[str]] = mapped_column(String(45))
    user_agent: Mapped[Optional[str]] = mapped_column(String(500))

    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    user: Mapped[Optional["User"]] = relationship("User", foreign_keys=[user_id], lazy="selectin")
    answered_by: Mapped[Optional["User"]] = relationship("User", foreign_keys=[answered_by_id])
    logs: Mapped[List["QuestionLog"]] = relationship(
        "QuestionLog",
        back_populates="question",
        order_by="QuestionLog.created_at.desc()",
    )

    __table_args__ = (
        Index("idx_question_user", "user_id"),
        Index("idx_question_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<PersonalQuestion(id={self.id}, status={self.status})>"


class QuestionLog(Base):
    """Журнал смены статусов вопроса. Только добавление."""

    __tablename__ = "question_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question_id: Mapped[int] = mapped_column(Integer, ForeignKey("personal_questions.id"), nullable=False)

    action: Mapped[str] = mapped_column(String(50), nullable=False)
    admin_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("users.id"))
    admin_telegram_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    previous_status: Mapped[str] = mapped_column(String(20), nullable=False)
    new_status: Mapped[str] = mapped_column(String(20), nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), index=True)

    question: Mapped["PersonalQuestion"] = relationship("PersonalQuestion", back_populates="logs")

    __table_args__ = (
        Index("idx_question_log_question", "question_id"),
    )


class ReportLog(Base):
    """Журнал смены статусов репорта. Только добавление."""

    __tablename__ = "report_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    report_id: Mapped[int] = mapped_column(Integer, ForeignKey("reports.id"), nullable=False)

    action: Mapped[str] = mapped_column(String(50), nullable=False)
    admin_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("users.id"))
    admin_telegram_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    previous_status: Mapped[str] = mapped_column(String(20), nullable=False)
    new_status: Mapped[str] = mapped_column(String(20), nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), index=True)

    report: Mapped["Report"] = relationship("Report", back_populates="logs")

    __table_args__ = (
        Index("idx_report_log_report", "report_id"),
    )


class Payment(Base):
    """
    Намерение оплаты.
    Не является учётной записью платёжного провайдера.
    """

    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)  # внешний id
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(10), nullable=False)
    status: Mapped[PaymentStatus] = mapped_column(
        SQLEnum(PaymentStatus, name="payment_status"),
        default=PaymentStatus.PENDING,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, user_id={self.user_id}, amount={self.amount})>"


class WebAppSession(Base):
    """Сессия Mini App. У пользователя не больше одной действующей сессии."""

    __tablename__ = "webapp_sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    init_data: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="sessions")

    __table_args__ = (
        Index("idx_webapp_session_user_expires", "user_id", "expires_at"),
    )

    def __repr__(self) -> str:
        return f"<WebAppSession(id={self.id}, user_id={self.user_id}, expires_at={self.expires_at})>"
