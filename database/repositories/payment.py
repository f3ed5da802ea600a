"""
Payment repository.
Намерения оплаты, зафиксированные из Mini App.
"""

from decimal import Decimal
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config.constants import PaymentStatus
from database.models import Payment


class PaymentRepository:
    """Репозиторий для работы с платежами."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, payment_id: str) -> Optional[Payment]:
        """Получить платёж по внешнему ID."""
        result = await self.session.execute(
            select(Payment).where(Payment.id == payment_id)
        )
        return result.scalar_one_or_none()

    async def get_or_create(
        self,
        payment_id: str,
        user_id: int,
        title: str,
        amount: Decimal,
        currency: str,
    ) -> tuple[Payment, bool]:
        """
        Зафиксировать намерение оплаты.
        Повторный вызов с тем же ID не создаёт дубликат.

        Returns:
            (payment, created)
        """
        payment = await self.get(payment_id)
        if payment:
            return payment, False

        payment = Payment(
            id=payment_id,
            user_id=user_id,
            title=title,
            amount=amount,
            currency=currency,
            status=PaymentStatus.PENDING,
        )
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment, True

