from typing import Any, Iterable, Type, TypeVar
from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


class FieldError(BaseModel):
    field: str
    message: str


def field_errors(errors: Iterable[dict]) -> list[FieldError]:
    """
    Превращает ошибки pydantic/FastAPI в плоский список ошибок по полям.
    Префикс "body" из локации FastAPI отбрасывается.
    """
    result = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if len(loc) > 1 and loc[0] == "body":
            loc = loc[1:]
        result.append(FieldError(field=".".join(loc) or "body", message=error.get("msg", "")))
    return result


def validate_payload(schema: Type[ModelT], payload: Any) -> tuple[ModelT | None, list[FieldError]]:
    """
    Проверяет тело запроса до обращения к хранилищу.
    Возвращает (модель, []) или (None, [ошибки]).
    """
    if not isinstance(payload, dict):
        return None, [FieldError(field="body", message="Ожидается JSON-объект")]

    try:
        return schema.model_validate(payload), []
    except ValidationError as exc:
        return None, field_errors(exc.errors())


def error_detail(errors: list[FieldError]) -> dict:
    """Тело ответа 400: сообщение о первом некорректном поле и полный список"""
    first = errors[0]
    return {
        "message": f"Некорректное поле '{first.field}': {first.message}",
        "errors": [e.model_dump() for e in errors],
    }
