"""
RPC методы жалоб.
"""

from webapp.api.rpc import RpcContext, RpcRouter, success
from webapp.api.schemas import (
    EntityIdParams,
    ListReportsParams,
    ReportCreateParams,
    ReportDetailOut,
    ReportOut,
)


router = RpcRouter(prefix="report")


@router.method("create", ReportCreateParams)
async def create(ctx: RpcContext, params: ReportCreateParams) -> dict:
    report = await ctx.services.reports.submit_report(
        message=params.message,
        submitter_id=params.user_id,
        ip_address=params.ip_address or ctx.client_ip,
        user_agent=params.user_agent or ctx.user_agent,
    )
    return success(
        {"reportId": report.id, "createdAt": report.created_at.isoformat()},
        status=201,
    )


@router.method("getAll", ListReportsParams)
async def get_all(ctx: RpcContext, params: ListReportsParams) -> dict:
    result = await ctx.services.reports.list_reports(
        status=params.status,
        user_id=params.user_id,
        page=params.page,
        limit=params.limit,
    )
    return success({
        "reports": [ReportOut.model_validate(r).dump() for r in result["reports"]],
        "pagination": result["pagination"],
    })


@router.method("getById", EntityIdParams)
async def get_by_id(ctx: RpcContext, params: EntityIdParams) -> dict:
    report = await ctx.services.reports.get_report(params.id)
    return success(ReportDetailOut.model_validate(report).dump())
