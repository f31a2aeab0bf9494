"""
Run FastAPI HTTP Server

Starts the FastAPI server for the bot authoring methods.
"""

import os
import uvicorn
from app.config import get_config

if __name__ == "__main__":
    config = get_config()

    # PaaS hosts provide PORT / HOST, use them if available
    port = int(os.environ.get("PORT", config.server.port))
    host = os.environ.get("HOST", config.server.host)

    uvicorn.run(
        "app.main:app",
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
