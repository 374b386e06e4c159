#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A REST FastAPI server that controls a Samsung TV.

The TV session is blocking and not thread-safe, so all routes are plain (threadpool)
functions and every use of the session is serialized by app.state.tv_lock.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

import time

from .logger import logger
from ..internal_types import *
from .. import (
    __version__ as pkg_version,
    SamsungTvSession,
    full_class_name,
  )
from ..util import error_message

router = APIRouter(prefix="/api/v1")

def _error_data(exc: BaseException) -> JsonableDict:
    return dict(
        error=full_class_name(exc),
        error_message=error_message(exc),
      )

@router.get("/")
def root(request: Request):
    session: SamsungTvSession = request.app.state.tv_session
    return { "message": f"Hello World! Serving TV at {session}" }

@router.get("/version")
def version():
    """Returns the samsung-tv-remote package version"""
    return { "version": pkg_version }

@router.get("/config")
def config_data(request: Request) -> Dict[str, Any]:
    """Returns the current configuration of samsung-tv-remote."""
    session: SamsungTvSession = request.app.state.tv_session
    return dict(config=session.config.to_jsonable())

@router.get("/ping")
def ping(request: Request) -> Dict[str, Any]:
    """Returns the health status of the API server and the TV."""
    session: SamsungTvSession = request.app.state.tv_session
    launch_time: float = request.app.state.launch_time
    up_time = time.monotonic() - launch_time
    result: Dict[str, Any] = dict(server_status="OK", up_time=up_time, session_state=session.state.name)
    try:
        with request.app.state.tv_lock:
            session.check_connection()
    except Exception as exc:
        result["tv_status"] = "ERROR"
        result["tv_error"] = full_class_name(exc)
        result["tv_error_message"] = error_message(exc)
    else:
        result["tv_status"] = "OK"
    return result

@router.post("/authenticate")
def authenticate(request: Request) -> Dict[str, Any]:
    """Asks the TV user to authorize this controller and waits for the answer."""
    session: SamsungTvSession = request.app.state.tv_session
    logger.info("Authenticating with TV")
    try:
        with request.app.state.tv_lock:
            result = session.authenticate()
    except Exception as exc:
        return _error_data(exc)
    return dict(result=result.value)

def send_one_key_code(session: SamsungTvSession, key_code: str, wait: bool) -> JsonableDict:
    response_data: JsonableDict = dict(key_code=key_code)
    try:
        if wait:
            session.send_key_code(key_code)
        else:
            session.send_key_code_async(key_code)
    except Exception as exc:
        response_data.update(_error_data(exc))
    return response_data

@router.post("/key/{key_code}")
def send_key(
        key_code: str,
        request: Request,
        wait: bool=True,
      ) -> Dict[str, Any]:
    """Sends a single key code to the TV. If wait is true, waits for the TV to confirm delivery."""
    session: SamsungTvSession = request.app.state.tv_session
    logger.info(f"Sending key code {key_code}")
    with request.app.state.tv_lock:
        return send_one_key_code(session, key_code, wait)

@router.post("/keys/{key_codes}")
def send_keys(
        key_codes: str,
        request: Request,
        wait: bool=True,
        continue_on_error: bool=False,
      ) -> Dict[str, Any]:
    """Sends one or more key codes (comma-delimited) and returns a list of results.

    If continue_on_error is true, then remaining key codes are sent after a failure;
    otherwise sending stops at the first error encountered. In any case, results from
    all key codes attempted are returned.
    """
    session: SamsungTvSession = request.app.state.tv_session
    codes = [code for code in key_codes.split(',') if code != '']
    logger.info(f"Sending key codes {codes} with continue_on_error={continue_on_error}")
    response_datas: List[JsonableDict] = []
    with request.app.state.tv_lock:
        for key_code in codes:
            response_data = send_one_key_code(session, key_code, wait)
            response_datas.append(response_data)
            if "error" in response_data and (not continue_on_error or session.is_closed):
                break
    return { "responses": response_datas }

@router.get("/log")
def diagnostic_log(request: Request) -> Dict[str, Any]:
    """Returns the session diagnostic log (empty unless verbose is configured)."""
    session: SamsungTvSession = request.app.state.tv_session
    return dict(log=session.get_log())
