"""Базовый репозиторий."""

from typing import Any, Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from pr_reviewer.core.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class RepositoryError(Exception):
    """Базовая ошибка уровня хранилища."""


class BaseRepository(Generic[ModelType]):
    """
    Общие операции над одной моделью.
    Сессия принадлежит запросу, репозиторий только добавляет в неё изменения
    и сбрасывает их в БД. Коммит делает сервис, откат владелец сессии.
    """

    def __init__(self, model: type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    async def get(self, pk: Any, reload: bool = False) -> ModelType | None:
        """Получить запись по первичному ключу."""
        return await self.session.get(self.model, pk, populate_existing=reload)

    async def exists(self, pk: Any) -> bool:
        """Проверить, что запись с таким ключом есть в БД."""
        return await self.get(pk, reload=True) is not None

    async def add(self, **fields) -> ModelType:
        """Добавить запись и сбросить её в БД."""
        instance = self.model(**fields)
        self.session.add(instance)
        await self.session.flush()
        return instance

    async def save(self, instance: ModelType, **fields) -> ModelType:
        """Поменять поля записи и сбросить изменения в БД."""
        for name, value in fields.items():
            setattr(instance, name, value)
        await self.session.flush()
        return instance
