#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A REST FastAPI server that controls an NEC projector.

The projector connection is configured from the JSON file named by the
NEC_PROJECTOR_CONFIG environment variable (or ./nec_projector_config.json if it
exists); see NecProjectorClientConfig.from_jsonable for the recognized keys.
"""

from __future__ import annotations

import os
import json

from contextlib import asynccontextmanager

from fastapi import FastAPI

from .logger import logger
from ..internal_types import *
from ..client import NecProjectorClient, NecProjectorClientConfig

from .api import router as api_router

@asynccontextmanager
async def fastapi_lifetime(app: FastAPI) -> AsyncIterator[None]:
    """
    A context manager that initializes and cleans up for FastAPI.
    """
    nec_client: Optional[NecProjectorClient] = None
    try:
        logger.info("Projector REST server starting up--initializing...")
        config_file = os.environ.get("NEC_PROJECTOR_CONFIG", None)
        if config_file is None:
            if os.path.exists("nec_projector_config.json"):
                config_file = "nec_projector_config.json"
        raw_config: JsonableDict
        if config_file is None:
            raw_config = {}
        else:
            with open(config_file, "r") as f:
                raw_config = json.load(f)
        nec_config = NecProjectorClientConfig.from_jsonable(raw_config)
        nec_client = await NecProjectorClient.create(config=nec_config)
        app.state.nec_client = nec_client
        logger.info(f"Serving API for projector at {nec_client}...")

        logger.info("Projector REST server initialization done; starting server...")
        yield
    finally:
        logger.info("Projector REST server shutting down--cleaning up...")
        if nec_client is not None:
            await nec_client.aclose()

proj_api = FastAPI(lifespan=fastapi_lifetime)
proj_api.include_router(api_router)
