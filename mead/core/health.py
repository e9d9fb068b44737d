"""Health checks for the explorer service and its upstream collections.

Example:
    from mead.core.health import HealthChecker, source_check

    checker = HealthChecker(version="1.0.0")
    checker.add_check("conditions", source_check(conditions_source))
    report = await checker.check_all()
"""

import asyncio
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from mead.core.errors import ConfigurationError, ExplorerError, classify_error
from mead.core.logging import get_logger
from mead.ports.sources import CollectionSource

logger = get_logger(__name__)

DEFAULT_CHECK_TIMEOUT = 10.0


class ServiceStatus(Enum):
    """Status of an individual service."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"
    UNKNOWN = "unknown"


@dataclass
class ServiceCheck:
    """Result of a single service health check."""

    name: str
    status: ServiceStatus
    latency_ms: float | None = None
    message: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class HealthReport:
    """Aggregated health report for all services."""

    status: ServiceStatus
    timestamp: str
    checks: list[ServiceCheck]
    version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "status": self.status.value,
            "timestamp": self.timestamp,
            "version": self.version,
            "checks": [
                {
                    "name": check.name,
                    "status": check.status.value,
                    "latency_ms": check.latency_ms,
                    "message": check.message,
                    "details": check.details,
                }
                for check in self.checks
            ],
        }


HealthCheckFunc = Callable[[], Coroutine[Any, Any, ServiceCheck]]


class HealthChecker:
    """Runs registered health checks and aggregates their results.

    Args:
        version: Application version to include in health reports.
        timeout: Seconds a single check may take before it counts as unhealthy.
    """

    def __init__(
        self,
        version: str | None = None,
        timeout: float = DEFAULT_CHECK_TIMEOUT,
    ) -> None:
        self._checks: dict[str, HealthCheckFunc] = {}
        self._version = version
        self._timeout = timeout

    @property
    def names(self) -> list[str]:
        return list(self._checks)

    def add_check(self, name: str, check_func: HealthCheckFunc) -> None:
        self._checks[name] = check_func

    def remove_check(self, name: str) -> None:
        self._checks.pop(name, None)

    async def check_one(self, name: str) -> ServiceCheck:
        """Run a single health check.

        Raises:
            KeyError: If no check is registered with that name.
        """
        if name not in self._checks:
            raise KeyError(f"No health check registered for: {name}")

        check_func = self._checks[name]
        loop = asyncio.get_running_loop()
        start = loop.time()

        try:
            result = await asyncio.wait_for(check_func(), timeout=self._timeout)
            elapsed = (loop.time() - start) * 1000
            if result.latency_ms is None:
                result.latency_ms = round(elapsed, 2)
            return result
        except TimeoutError:
            elapsed = (loop.time() - start) * 1000
            return ServiceCheck(
                name=name,
                status=ServiceStatus.UNHEALTHY,
                latency_ms=round(elapsed, 2),
                message="Health check timed out",
            )
        except Exception as ex:
            elapsed = (loop.time() - start) * 1000
            return ServiceCheck(
                name=name,
                status=ServiceStatus.UNHEALTHY,
                latency_ms=round(elapsed, 2),
                message=str(ex),
            )

    async def check_all(self) -> HealthReport:
        """Run all registered checks concurrently."""
        timestamp = datetime.now(UTC).isoformat()

        if not self._checks:
            return HealthReport(
                status=ServiceStatus.HEALTHY,
                timestamp=timestamp,
                checks=[],
                version=self._version,
            )

        results = await asyncio.gather(
            *(self.check_one(name) for name in self._checks),
            return_exceptions=True,
        )

        checks: list[ServiceCheck] = []
        for name, result in zip(self._checks.keys(), results, strict=True):
            if isinstance(result, BaseException):
                checks.append(
                    ServiceCheck(
                        name=name,
                        status=ServiceStatus.UNHEALTHY,
                        message=str(result),
                    )
                )
            else:
                checks.append(result)

        if all(c.status == ServiceStatus.HEALTHY for c in checks):
            overall = ServiceStatus.HEALTHY
        elif any(c.status == ServiceStatus.UNHEALTHY for c in checks):
            overall = ServiceStatus.UNHEALTHY
        elif any(c.status == ServiceStatus.DEGRADED for c in checks):
            overall = ServiceStatus.DEGRADED
        else:
            overall = ServiceStatus.UNKNOWN

        return HealthReport(
            status=overall,
            timestamp=timestamp,
            checks=checks,
            version=self._version,
        )


def source_check(source: CollectionSource[Any]) -> HealthCheckFunc:
    """Build a health check that lists an upstream collection.

    The check is healthy when the list endpoint answers with a decodable
    collection and unhealthy otherwise, including when no base URL is set.
    """
    name = source.kind.name

    async def check() -> ServiceCheck:
        try:
            items = await source.fetch_collection()
        except ConfigurationError as ex:
            return ServiceCheck(
                name=name,
                status=ServiceStatus.UNHEALTHY,
                message="Not configured",
                details={"setting": ex.setting},
            )
        except ExplorerError as ex:
            logger.warning("upstream_unhealthy", collection=name, error=str(ex))
            return ServiceCheck(
                name=name,
                status=ServiceStatus.UNHEALTHY,
                message=str(ex),
                details={"category": classify_error(ex).name},
            )
        return ServiceCheck(
            name=name,
            status=ServiceStatus.HEALTHY,
            message="Reachable",
            details={"items": len(items)},
        )

    return check
