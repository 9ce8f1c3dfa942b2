"""Результат поиска по id: Found(value) или NOT_FOUND.

Отсутствие записи — это нормальный исход, а не ошибка хранилища,
поэтому он возвращается значением, а не исключением.
"""
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T


class NotFound:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = NotFound()

Lookup = Union[Found[T], NotFound]
