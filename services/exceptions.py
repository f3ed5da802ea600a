"""
Workflow exceptions.
Ошибки сервисного слоя. Граница (RPC-метод или обработчик бота)
переводит их в ответ клиенту.
"""


class WorkflowError(Exception):
    """Базовая ошибка сервисного слоя."""

    status = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class NotFoundError(WorkflowError):
    """Сущность с таким ID не найдена."""

    status = 404


class PermissionDeniedError(WorkflowError):
    """У актора нет роли ADMIN/MODERATOR."""

    status = 403


class ValidationFailureError(WorkflowError):
    """Отсутствует или некорректно обязательное поле."""

    status = 400


class AlreadyTerminalError(WorkflowError):
    """Сущность уже в конечном статусе и не может быть обработана повторно."""

    status = 409


class UpstreamFailureError(WorkflowError):
    """Ошибка хранилища или Telegram API."""

    status = 502
