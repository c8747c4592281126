#!/usr/bin/env python3
"""
Startup script for the TaskDesk API
Host, port and reload come from HOST / PORT / RELOAD (see taskdesk.config.settings)
"""

import uvicorn

from taskdesk.config.settings import settings


def main():
    print("Starting TaskDesk API Server...")
    print(f"Host: {settings.HOST}")
    print(f"Port: {settings.PORT}")
    print(f"Reload: {settings.RELOAD}")
    print(f"Database: {settings.DATABASE_URL.split('@')[-1]}")
    print("=" * 50)

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
