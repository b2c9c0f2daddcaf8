import asyncio
import logging
import sys
from pathlib import Path

# Корень server_py в PYTHONPATH, чтобы импортировался пакет app
sys.path.append(str(Path(__file__).resolve().parent))

import uvicorn
from app.core.config import settings
from app.core.init_db import init_db

logger = logging.getLogger("rueating")


def main() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL)

    # Таблицы и демо-траки (если SEED_DEMO_DATA) до старта сервера
    asyncio.run(init_db())
    logger.info("Starting %s on %s:%s", settings.PROJECT_NAME, settings.SERVER_HOST, settings.SERVER_PORT)

    uvicorn.run(
        "app.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()
