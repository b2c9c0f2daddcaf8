import logging

from app.core.config import settings
from app.core.database import AsyncSessionLocal, Base, make_engine
from app.core.seed import seed_demo_data

# Импортируем модели чтобы они попали в metadata перед созданием таблиц
from app.models import food_truck  # noqa: F401
from app.models import menu  # noqa: F401
from app.models import order  # noqa: F401
from app.models import review  # noqa: F401
from app.models import schedule  # noqa: F401
from app.models import location_ping  # noqa: F401

logger = logging.getLogger(__name__)


async def init_db():
    """Инициализация базы данных и создание таблиц"""
    # Гарантируем наличие директории для файла базы данных
    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    # Создаем временный движок для инициализации
    engine = make_engine(settings.DATABASE_URL)

    async with engine.begin() as conn:
        # Создаем все таблицы
        await conn.run_sync(Base.metadata.create_all)

    # Закрываем движок
    await engine.dispose()

    if settings.SEED_DEMO_DATA:
        async with AsyncSessionLocal() as session:
            created = await seed_demo_data(session)
        if created:
            logger.info("Seeded %d demo food trucks", created)
