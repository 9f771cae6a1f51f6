"""
Entry point for the group chat HTTP API.

Usage:
    python run_fastapi.py

Or with uvicorn directly (the app is built by a factory):
    uvicorn groupchat.fastapi_app:create_fastapi_app --factory --port 8000

Background tasks run according to TASK_BACKEND. With TASK_BACKEND=redis,
start run_worker.py next to this process.
"""

import os

from dotenv import load_dotenv

load_dotenv()

import uvicorn

from groupchat.config.settings import get_config

if __name__ == "__main__":
    config = get_config()
    reload = config.APP_ENV == "development"
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", 8000))

    print(
        f"Starting group chat API ({config.APP_ENV}) on http://{host}:{port} "
        f"[storage={config.STORAGE_BACKEND}, tasks={config.TASK_BACKEND}, "
        f"push={config.PUSH_BACKEND}]"
    )

    uvicorn.run(
        "groupchat.fastapi_app:create_fastapi_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=config.LOG_LEVEL.lower(),
    )
