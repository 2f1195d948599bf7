"""
Скрипт для инициализации базы данных.

Создаёт таблицы напрямую через SQLAlchemy
(то же самое делает lifespan приложения при старте).

    python init_db.py           # создать недостающие таблицы
    python init_db.py --reset   # удалить все таблицы и создать заново
"""

import asyncio
import sys

from solo_api.core.config import settings
from solo_api.core.database import drop_db, init_db


async def main(reset: bool = False):
    if reset:
        print(f"Удаление таблиц в {settings.DATABASE_URL} ...")
        await drop_db()
    print(f"Создание таблиц в {settings.DATABASE_URL} ...")
    await init_db()
    print("✓ Таблицы созданы успешно!")


if __name__ == "__main__":
    asyncio.run(main(reset="--reset" in sys.argv[1:]))
