import os
import platform
import time
from typing import Any, Dict

from rowdycup.metrics import BUILD_VERSION, GIT_SHA


async def health() -> Dict[str, Any]:
    return {
        "status": "ok",
        "version": BUILD_VERSION,
        "git": GIT_SHA,
        "ts": time.time(),
        "env": {
            "seed_demo": os.getenv("ROWDYCUP_SEED_DEMO", "false"),
            "require_api_key": os.getenv("REQUIRE_API_KEY", "false"),
        },
        "runtime": {
            "python": platform.python_version(),
        },
    }
