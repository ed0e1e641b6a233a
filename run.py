#!/usr/bin/env python3
"""
Run script for the Natro webhook relay
"""
import uvicorn

from relay.config.settings import settings

if __name__ == "__main__":
    uvicorn.run("relay.main:app", host=settings.host, port=settings.port, reload=settings.debug)
