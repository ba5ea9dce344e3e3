"""
Ошибки розыгрыша.

У каждой ошибки есть стабильный ``code`` (строка), по нему HTTP-слой выбирает
статус, а тесты проверяют причину без сравнения текстов.
"""


class DrawError(Exception):
    code = "DrawError"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.code)
        self.message = message or self.code


class ValidationError(DrawError):
    code = "ValidationError"


class UidTooLong(ValidationError):
    code = "UidTooLong"


class AuthorizationError(DrawError):
    code = "AuthorizationError"


class InvalidOwner(AuthorizationError):
    code = "InvalidOwner"


class InvalidSigner(AuthorizationError):
    code = "InvalidSigner"


class StorageError(DrawError):
    """Хранилище, часы или оракул не ответили: розыгрыш прерывается целиком."""
    code = "StorageError"


class RangeExhausted(StorageError):
    code = "RangeExhausted"
