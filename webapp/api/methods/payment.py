"""
RPC методы платежей.
"""

from webapp.api.rpc import RpcContext, RpcRouter, success
from webapp.api.schemas import PaymentCreateParams


router = RpcRouter(prefix="payment")


@router.method("create", PaymentCreateParams)
async def create(ctx: RpcContext, params: PaymentCreateParams) -> dict:
    """Намерение оплаты: запись PENDING и алерт администратору."""
    await ctx.services.payments.create(
        user_id=params.user_id,
        payment_id=params.id,
        title=params.title,
        price=params.price,
        currency=params.currency,
    )
    return success(True)
