#!/usr/bin/env python3
"""
FastAPI server runner for the TripCraft backend
"""

import os

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "app.api:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", 8000)),
        reload=True,  # Enable auto-reload for development
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
