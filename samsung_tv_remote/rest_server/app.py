#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A REST FastAPI server that controls a Samsung TV.
"""

from __future__ import annotations

from fastapi import FastAPI

import time
import os
import json
import threading

from contextlib import asynccontextmanager

from .logger import logger
from ..internal_types import *
from .. import (
    SamsungTvSession,
    SamsungTvClientConfig,
    AuthResult,
    samsung_tv_connect,
  )

from .api import router as api_router

@asynccontextmanager
async def fastapi_lifetime(app: FastAPI) -> AsyncIterator[None]:
    """
    A context manager that initializes and cleans up for FastAPI.
    """
    session: Optional[SamsungTvSession] = None
    try:
        logger.info("TV REST server starting up--initializing...")
        config_file = os.environ.get("SAMSUNG_TV_REMOTE_CONFIG", None)
        if config_file is None:
            if os.path.exists("samsung_tv_remote_config.json"):
                config_file = "samsung_tv_remote_config.json"
        if config_file is None:
            raw_config: JsonableDict = {}
        else:
            with open(config_file, "r") as f:
                raw_config = json.load(f)
        tv_config = SamsungTvClientConfig.from_jsonable(raw_config)
        app.state.launch_time = time.monotonic()
        app.state.tv_lock = threading.Lock()
        session = samsung_tv_connect(config=tv_config)
        app.state.tv_session = session
        logger.info(f"Waiting for TV user to authorize {tv_config.controller_name!r}...")
        result = session.authenticate()
        if result != AuthResult.ALLOWED:
            logger.warning(f"TV did not authorize this controller: {result.value}")
        logger.info(f"Serving API for TV at {session}...")

        logger.info("TV REST server initialization done; starting server...")
        yield
    finally:
        logger.info("TV REST server shutting down--cleaning up...")
        if session is not None:
            session.close()

tv_api = FastAPI(lifespan=fastapi_lifetime)
tv_api.include_router(api_router)
