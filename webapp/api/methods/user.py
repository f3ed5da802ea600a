"""
RPC методы пользователя: регистрация, сессии, анкета.
"""

from loguru import logger

from services.exceptions import NotFoundError
from webapp.api.rpc import RpcContext, RpcRouter, success
from webapp.api.schemas import (
    CloseSessionParams,
    ProfileOut,
    ProfileOwnerOut,
    ProfileWithOwnerOut,
    SessionOut,
    UpsertProfileParams,
    UserAddParams,
    UserIdParams,
    UserOut,
    WebAppSessionOut,
)


router = RpcRouter(prefix="user")


@router.method("add", UserAddParams)
async def add(ctx: RpcContext, params: UserAddParams) -> dict:
    """
    Регистрация при открытии Mini App.

    Returns:
        {status: 200, user, session} | {status: 404, result} | {status: 400, message}
    """
    try:
        user, webapp_session = await ctx.services.users.add_user(
            telegram_id=params.telegram_id,
            username=params.username,
            avatar=params.avatar,
            first_name=params.first_name,
            last_name=params.last_name,
            language_code=params.language_code,
            is_premium=params.is_premium,
        )
    except NotFoundError as e:
        return {"status": 404, "result": e.message}
    except Exception as e:
        logger.exception(f"user.add failed for {params.telegram_id}: {e}")
        return {"status": 400, "message": "An error occurred"}

    session_out = SessionOut(session_id=webapp_session.id, expires_at=webapp_session.expires_at)
    return {
        "status": 200,
        "user": UserOut.model_validate(user).dump(),
        "session": session_out.dump(),
    }


@router.method("get", UserIdParams)
async def get(ctx: RpcContext, params: UserIdParams) -> dict:
    user = await ctx.services.users.get_user(params.user_id)
    return success(UserOut.model_validate(user).dump())


@router.method("closeWebAppSession", CloseSessionParams)
async def close_web_app_session(ctx: RpcContext, params: CloseSessionParams) -> dict:
    if not params.session_id:
        return {"status": 404, "message": "sessionId not found"}

    try:
        webapp_session = await ctx.services.users.close_session(params.session_id)
    except NotFoundError as e:
        return {"status": 404, "message": e.message}
    except Exception as e:
        logger.exception(f"Error closing session {params.session_id}: {e}")
        return {"status": 500, "error": "Internal Server Error"}

    return {"status": 200, "result": WebAppSessionOut.model_validate(webapp_session).dump()}


@router.method("upsertUserProfile", UpsertProfileParams)
async def upsert_user_profile(ctx: RpcContext, params: UpsertProfileParams) -> dict:
    """Сохранение анкеты. Анкета уходит на модерацию."""
    profile, user = await ctx.services.profiles.upsert_profile(
        user_id=params.user_id,
        nickname=params.nickname,
        age=params.age,
        telegram=params.telegram,
        skills=params.skills,
    )
    return {
        "profile": ProfileOut.model_validate(profile).dump(),
        "user": ProfileOwnerOut.model_validate(user).dump(),
    }


@router.method("getUserProfile", UserIdParams)
async def get_user_profile(ctx: RpcContext, params: UserIdParams):
    profile = await ctx.services.profiles.get_profile(params.user_id)
    if profile is None:
        return None
    return ProfileWithOwnerOut.model_validate(profile).dump()
