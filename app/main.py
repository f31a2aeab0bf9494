"""
Application entrypoint.

Re-exports the FastAPI `app` instance from `app.api.main` and registers
the method routers.
"""

from app.api.main import app  # noqa: F401
from app.utils.logger import get_logger, setup_logging
from app.config import get_config

config = get_config()
setup_logging(config)
logger = get_logger(__name__)

from app.api import slots as slots_api  # noqa: E402
from app.api import templates as templates_api  # noqa: E402
from app.api import users as users_api  # noqa: E402

app.include_router(slots_api.router)
app.include_router(templates_api.router)
app.include_router(users_api.router)
