"""
Health API endpoints
"""

import asyncio
import time
from datetime import datetime, timezone
from typing import Any, Dict, List

import psutil
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from blueprint.core.config import config
from blueprint.core.logger import logger
from blueprint.db.database import ping_database

router = APIRouter()

start_time = time.time()

MEMORY_THRESHOLD_PERCENT = 90
DISK_THRESHOLD_PERCENT = 85


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "service": config.service_name,
        "timestamp": _now(),
        "version": config.service_version,
    }


@router.get("/health/alive")
def liveness_check():
    """Liveness probe - check if the app is running"""
    return {
        "status": "alive",
        "service": config.service_name,
        "timestamp": _now(),
        "uptime": round(time.time() - start_time, 2),
    }


@router.get("/health/ready")
async def readiness_check(request: Request):
    """Readiness probe - the database is critical, the broker and host resources only degrade"""
    checks = await perform_health_checks(request)
    failed = [check for check in checks if check["status"] == "unhealthy"]

    if not failed:
        return {
            "status": "ready",
            "service": config.service_name,
            "timestamp": _now(),
            "checks": checks,
        }

    logger.warning(
        f"Readiness check failed - {len(failed)} checks failed",
        metadata={"failed_checks": [check["name"] for check in failed], "event": "readiness_check_failed"}
    )
    return JSONResponse(
        status_code=503,
        content={
            "status": "not ready",
            "service": config.service_name,
            "timestamp": _now(),
            "checks": checks,
            "errors": [f"{check['name']}: {check.get('error', 'Unknown error')}" for check in failed],
        },
    )


async def perform_health_checks(request: Request) -> List[Dict[str, Any]]:
    """Run all dependency checks concurrently"""
    results = await asyncio.gather(
        check_database_health(),
        check_message_broker_health(request),
        check_system_resources(),
        return_exceptions=True,
    )

    checks = []
    for result in results:
        if isinstance(result, Exception):
            checks.append({"name": "unknown_check", "status": "unhealthy", "error": str(result), "timestamp": _now()})
        else:
            checks.append(result)
    return checks


async def check_database_health() -> Dict[str, Any]:
    """Check relational database connectivity"""
    check_start = time.time()
    try:
        await ping_database()
        response_time_ms = round((time.time() - check_start) * 1000, 2)
        logger.debug(
            "Database health check passed",
            metadata={"response_time_ms": response_time_ms, "event": "health_check_database_success"}
        )
        return {"name": "database", "status": "healthy", "response_time_ms": response_time_ms, "timestamp": _now()}

    except Exception as e:
        response_time_ms = round((time.time() - check_start) * 1000, 2)
        logger.error(
            f"Database health check failed: {e}",
            metadata={"response_time_ms": response_time_ms, "event": "health_check_database_failed"}
        )
        return {
            "name": "database",
            "status": "unhealthy",
            "error": str(e),
            "response_time_ms": response_time_ms,
            "timestamp": _now(),
        }


async def check_message_broker_health(request: Request) -> Dict[str, Any]:
    """Report the event publisher connection; publishing is best-effort so this never fails readiness"""
    publisher = getattr(request.app.state, "event_publisher", None)
    if publisher is not None and publisher.is_healthy():
        return {"name": "message_broker", "status": "healthy", "queue": config.items_queue_name, "timestamp": _now()}

    return {
        "name": "message_broker",
        "status": "degraded",
        "error": "Event publisher is not connected",
        "queue": config.items_queue_name,
        "timestamp": _now(),
    }


async def check_system_resources() -> Dict[str, Any]:
    """Check system resources (memory and disk space)"""
    try:
        process = psutil.Process()
        memory_info = process.memory_info()
        system_memory = psutil.virtual_memory()
        disk_usage = psutil.disk_usage("/")

        warnings = []
        if system_memory.percent > MEMORY_THRESHOLD_PERCENT:
            warnings.append(f"High system memory usage: {system_memory.percent:.1f}%")
        if disk_usage.percent > DISK_THRESHOLD_PERCENT:
            warnings.append(f"High disk usage: {disk_usage.percent:.1f}%")

        result = {
            "name": "system_resources",
            "status": "degraded" if warnings else "healthy",
            "metrics": {
                "process_memory_mb": round(memory_info.rss / 1024 / 1024, 2),
                "system_memory_percent": round(system_memory.percent, 2),
                "disk_usage_percent": round(disk_usage.percent, 2),
                "uptime_seconds": round(time.time() - start_time, 2),
            },
            "timestamp": _now(),
        }
        if warnings:
            result["warnings"] = warnings
        return result

    except Exception as e:
        logger.error(f"System resources check failed: {e}", metadata={"event": "health_check_resources_failed"})
        return {"name": "system_resources", "status": "degraded", "error": str(e), "timestamp": _now()}
