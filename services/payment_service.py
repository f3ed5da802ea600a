"""
Payment service.
Фиксация намерений оплаты из Mini App и алерт администратору.
Провайдер оплаты не вызывается.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from database.models import Payment
from database.repositories.payment import PaymentRepository
from database.repositories.user import UserRepository
from database.session import get_session_context
from services import messages
from services.exceptions import NotFoundError, ValidationFailureError, WorkflowError
from services.notifier import Notifier


def _same_terms(payment: Payment, user_id: int, title: str, price: Decimal, currency: str) -> bool:
    return (
        payment.user_id == user_id
        and payment.title == title
        and Decimal(str(payment.amount)) == Decimal(str(price))
        and payment.currency == currency
    )


class PaymentService:
    """Сервис платежей."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], notifier: Notifier):
        self._session_factory = session_factory
        self.notifier = notifier

    async def create(
        self,
        user_id: int,
        payment_id: str,
        title: str,
        price: Decimal,
        currency: str,
    ) -> Payment:
        """
        Записывает намерение оплаты в статусе PENDING и уведомляет
        администратора. Повторный вызов с тем же payment_id возвращает
        существующую запись без повторного алерта.
        Тот же payment_id с другим владельцем или условиями отклоняется.

        При любой ошибке администратор получает алерт с её текстом.

        Raises:
            NotFoundError: пользователь не найден
            ValidationFailureError: payment_id занят другим платежом
            WorkflowError: прочие ошибки (status 500)
        """
        try:
            async with get_session_context(self._session_factory) as session:
                user = await UserRepository(session).get(user_id)
                if user is None:
                    raise NotFoundError("User not found")

                payment, created = await PaymentRepository(session).get_or_create(
                    payment_id=payment_id,
                    user_id=user.id,
                    title=title,
                    amount=price,
                    currency=currency,
                )
                if not created and not _same_terms(payment, user.id, title, price, currency):
                    raise ValidationFailureError(f"Payment #{payment_id} already exists with different terms")
        except WorkflowError as e:
            logger.error(f"Payment #{payment_id} failed: {e.message}")
            await self.notifier.send_admin_alert(messages.payment_error_alert(payment_id, e.message))
            raise
        except Exception as e:
            logger.exception(f"Payment #{payment_id} failed: {e}")
            await self.notifier.send_admin_alert(messages.payment_error_alert(payment_id, str(e)))
            raise WorkflowError("Internal server error") from e

        if not created:
            logger.info(f"Payment #{payment_id} already recorded")
            return payment

        logger.info(f"Payment #{payment_id} recorded for user {user_id}: {price} {currency}")

        await self.notifier.send_admin_alert(
            messages.payment_alert(payment_id, title, price, currency, user)
        )
        return payment
