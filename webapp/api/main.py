"""
FastAPI WebApp for DeadDDoS.
JSON-RPC API для Mini App и вебхук Telegram.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from telegram import Update

from bot.main import attach_services, create_application
from config.settings import settings
from database import init_db, close_db
from database.session import check_db_connection
from webapp.api.methods import payment, question, report, user
from webapp.api.rpc import JsonRpcDispatcher, RpcContext, PARSE_ERROR, rpc_error


dispatcher = JsonRpcDispatcher()
dispatcher.include_router(user.router)
dispatcher.include_router(report.router)
dispatcher.include_router(question.router)
dispatcher.include_router(payment.router)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Старт: логирование, БД, бот. Остановка в обратном порядке."""
    logger.add(
        "logs/webapp_{time}.log",
        rotation="1 day",
        retention="30 days",
        level=settings.LOG_LEVEL,
    )

    await init_db()

    application = create_application(with_lifecycle=False)
    await application.initialize()
    attach_services(application)
    await application.start()

    if settings.TELEGRAM_WEBHOOK_URL:
        await application.bot.set_webhook(settings.TELEGRAM_WEBHOOK_URL)
        logger.info(f"Webhook set: {settings.TELEGRAM_WEBHOOK_URL}")

    app.state.telegram = application
    app.state.services = application.bot_data["services"]
    logger.info(f"RPC methods: {', '.join(dispatcher.method_names)}")

    try:
        yield
    finally:
        await application.stop()
        await application.shutdown()
        await close_db()
        logger.info("WebApp stopped")


app = FastAPI(title="DeadDDoS WebApp", lifespan=lifespan)

# CORS для Telegram WebApp
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/api")
async def rpc_endpoint(request: Request) -> Response:
    """Точка входа JSON-RPC: одиночный запрос или пакет."""
    try:
        payload = await request.json()
    except ValueError:
        return JSONResponse(rpc_error(None, PARSE_ERROR))

    ctx = RpcContext(
        services=request.app.state.services,
        client_ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    response = await dispatcher.handle(payload, ctx)

    if response is None:
        return Response(status_code=204)
    return JSONResponse(response)


@app.post("/api/telegram")
async def telegram_webhook(request: Request) -> dict:
    """Обновления Telegram в режиме вебхука."""
    application = request.app.state.telegram
    update = Update.de_json(await request.json(), application.bot)
    await application.process_update(update)
    return {"ok": True}


@app.get("/health")
async def health():
    """Health check."""
    db_ok = await check_db_connection()
    return {"status": "ok" if db_ok else "degraded", "database": db_ok}
