# main.py
import uvicorn

from marketplace.config.settings import get_settings
from marketplace.main import app

settings = get_settings()

if __name__ == "__main__":
    uvicorn.run(
        "marketplace.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload and not settings.is_production,
        log_level=settings.log_level.lower(),
    )
