"""
RPC методы вопросов.
"""

from webapp.api.rpc import RpcContext, RpcRouter, success
from webapp.api.schemas import (
    ListQuestionsParams,
    QuestionCreateParams,
    QuestionDetailOut,
    QuestionIdParams,
    QuestionOut,
)


router = RpcRouter(prefix="question")


@router.method("create", QuestionCreateParams)
async def create(ctx: RpcContext, params: QuestionCreateParams) -> dict:
    question = await ctx.services.questions.submit_question(
        text=params.question,
        submitter_id=params.user_id,
        is_private=params.is_private,
        ip_address=params.ip_address or ctx.client_ip,
        user_agent=params.user_agent or ctx.user_agent,
    )
    return success(
        {"questionId": question.id, "createdAt": question.created_at.isoformat()},
        status=201,
    )


@router.method("getQuestions", ListQuestionsParams)
async def get_questions(ctx: RpcContext, params: ListQuestionsParams) -> dict:
    """Публичная лента вопросов или вопросы одного пользователя."""
    result = await ctx.services.questions.list_questions(
        status=params.status,
        user_id=params.user_id,
        page=params.page,
        limit=params.limit,
    )
    return success({
        "questions": [QuestionOut.model_validate(q).dump() for q in result["questions"]],
        "pagination": result["pagination"],
    })


@router.method("getQuestionById", QuestionIdParams)
async def get_question_by_id(ctx: RpcContext, params: QuestionIdParams) -> dict:
    """Приватный вопрос отдаётся только автору (userId)."""
    question = await ctx.services.questions.get_question(params.id, requester_id=params.user_id)
    return success(QuestionDetailOut.model_validate(question).dump())
