import time

from django.conf import settings
from django.db import connections
from django.db.utils import OperationalError
from django.http import JsonResponse

from .logger import get_logger

try:
    import redis as redis_lib
except ImportError:  # pragma: no cover
    redis_lib = None

logger = get_logger(__name__).bind(component="common", layer="health")


def _redis_ping(url: str, timeout: float = 0.3):
    if redis_lib is None:
        return {"status": "skipped", "detail": "redis client not installed"}
    try:
        client = redis_lib.from_url(
            url, socket_connect_timeout=timeout, socket_timeout=timeout
        )
        ok = bool(client.ping())
    except Exception as exc:  # pragma: no cover - network dependent
        logger.warning("Redis ping failed", error=str(exc))
        return {"status": "fail", "error": str(exc)}
    if not ok:
        logger.warning("Redis ping returned a falsy reply")
    return {"status": "ok" if ok else "fail"}


def _db_check(alias: str = "default"):
    started = time.monotonic()
    try:
        with connections[alias].cursor() as cursor:
            cursor.execute("SELECT 1")
    except OperationalError as exc:
        logger.warning("Database unreachable", alias=alias, error=str(exc))
        return {"status": "fail", "error": str(exc)}
    latency = round((time.monotonic() - started) * 1000, 2)
    logger.debug("Database reachable", alias=alias, latency_ms=latency)
    return {"status": "ok", "latency_ms": latency}


def live_health(request):
    """Liveness probe."""
    return JsonResponse({"status": "alive"})


def ready_health(request):
    """Readiness probe: the cart store database and, when configured, Redis."""
    checks = {"database": _db_check()}
    redis_url = getattr(settings, "HEALTH_REDIS_URL", None)
    checks["redis"] = (
        _redis_ping(redis_url)
        if redis_url
        else {"status": "skipped", "detail": "REDIS_URL not set"}
    )
    failing = sorted(name for name, result in checks.items() if result["status"] == "fail")
    overall = "degraded" if failing else "ok"
    logger.info("Readiness evaluated", status=overall, failing=failing)
    return JsonResponse(
        {"status": overall, "checks": checks}, status=503 if failing else 200
    )
