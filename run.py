#!/usr/bin/env python3
"""
Simple launcher script for Schedura API.
Run this from the root directory to start the application.
"""

import uvicorn
from schedura.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    print("Starting Schedura API with auto-reload...")
    print(f"API Documentation: http://localhost:{settings.port}/docs")
    print(f"Health Check: http://localhost:{settings.port}/health")
    print("Press Ctrl+C to stop the server")
    print("-" * 50)

    # Use import string format for reload to work properly
    uvicorn.run(
        "schedura.main:app",  # This is the import string format
        host=settings.host,
        port=settings.port,
        reload=True,
        reload_dirs=["schedura"],  # Watch the package directory for changes
        log_level=settings.log_level.lower()
    )
