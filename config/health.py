from __future__ import annotations

from typing import Any

import redis
from django.conf import settings
from django.db import connection
from django.db import transaction
from django.http import JsonResponse

from roamease.realtime.socketio import get_gateway
from roamease.realtime.socketio import is_initialized


def check_db() -> dict[str, Any]:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}
    else:
        return {"ok": True}


def check_redis() -> dict[str, Any] | None:
    url = getattr(settings, "REDIS_URL", None)
    if not url:
        return None
    try:
        client = redis.Redis.from_url(
            url,
            socket_timeout=0.5,
            socket_connect_timeout=0.5,
        )
        client.ping()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}
    else:
        return {"ok": True}


def realtime_status() -> dict[str, Any]:
    if not is_initialized():
        return {"initialized": False, "online_users": 0}
    return {"initialized": True, "online_users": len(get_gateway().registry)}


# ATOMIC_REQUESTS would open a savepoint before check_db() gets to run.
@transaction.non_atomic_requests
def health(request):
    db = check_db()
    components: dict[str, Any] = {"db": db}

    # Redis is optional: checked only when REDIS_URL is set, and never fatal.
    redis_info = check_redis()
    if redis_info is not None:
        components["redis"] = redis_info

    if not db["ok"]:
        status, http_status = "down", 503
    elif redis_info is not None and not redis_info["ok"]:
        status, http_status = "degraded", 200
    else:
        status, http_status = "ok", 200

    components["realtime"] = realtime_status()

    return JsonResponse(
        {"status": status, "components": components},
        status=http_status,
    )
