# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A REST FastAPI server that controls a Samsung TV.
"""
import os
import sys
import uvicorn
import logging
from dotenv import load_dotenv

def run() -> int:
    load_dotenv()

    logging.basicConfig(level=logging.getLevelName(os.environ.get("SAMSUNG_TV_REMOTE_LOG_LEVEL", "INFO").upper()))

    from samsung_tv_remote.rest_server.app import tv_api
    port = int(os.environ.get("SAMSUNG_TV_REST_PORT", "8000"))
    uvicorn.run(tv_api, host="0.0.0.0", port=port, log_config=None)
    return 0

if __name__ == "__main__":
    rc = run()
    sys.exit(rc)
