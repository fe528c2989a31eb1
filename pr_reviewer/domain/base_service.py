"""Базовый класс для сервисов."""

from sqlalchemy.ext.asyncio import AsyncSession


class BaseService:
    """
    Базовый класс для всех сервисов.
    Сервис не хранит состояние сущностей между вызовами: каждая операция
    заново читает всё нужное через репозитории своей сессии.
    Изменяющая операция фиксирует транзакцию сама, до возврата результата.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def commit(self):
        """Зафиксировать изменения; ошибка фиксации уходит вызывающему как есть."""
        await self.session.commit()
