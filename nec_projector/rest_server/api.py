#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
REST API routes for the NEC projector server.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from .logger import logger
from ..internal_types import *
from ..exceptions import NecProjectorError, UnknownActionError
from ..client import NecProjectorClient
from ..protocol import Applied, Action, get_all_commands

router = APIRouter(prefix="/api/v1")

def get_projector_client(request: Request) -> NecProjectorClient:
    return request.app.state.nec_client

@router.get("/status", response_model=None)
async def get_status(client: NecProjectorClient = Depends(get_projector_client)) -> JsonableDict:
    """Returns the last known projector status without contacting the projector."""
    return client.controller.state.as_jsonable()

@router.post("/status/refresh", response_model=None)
async def refresh_status(client: NecProjectorClient = Depends(get_projector_client)) -> JsonableDict:
    """Sends a running status request and returns the refreshed status."""
    return await run_action(Action.RUNNING_STATUS.value, client)

@router.get("/actions", response_model=None)
async def list_actions() -> List[JsonableDict]:
    """Lists the commands that can be sent with POST /actions/{action}."""
    return [
        dict(name=meta.name, description=meta.description, suspect=meta.suspect)
        for meta in get_all_commands()
      ]

@router.post("/actions/{action}", response_model=None)
async def run_action(action: str, client: NecProjectorClient = Depends(get_projector_client)) -> JsonableDict:
    """Sends a command to the projector.

    Responds 404 for an unknown action, 409 if the projector rejects the command
    or its reply cannot be decoded, and 502 if the projector cannot be reached.
    """
    try:
        result = await client.transact(action)
    except UnknownActionError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except NecProjectorError as e:
        logger.warning(f"Transport failure sending {action}: {e}")
        raise HTTPException(status_code=502, detail=str(e)) from e
    if not isinstance(result, Applied):
        raise HTTPException(status_code=409, detail=result.as_jsonable())
    response: JsonableDict = dict(result=result.as_jsonable())
    response.update(client.controller.state.as_jsonable())
    return response
