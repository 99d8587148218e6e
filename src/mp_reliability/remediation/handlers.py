"""Remediation – side-effect handlers dispatched by implementation type.

The built-in handlers simulate their side effect and report what they would
have changed as ``artifacts``; production deployments register real ones
with :meth:`HandlerRegistry.register`.  The circuit-breaker handler is the
exception: it force-opens the named breaker in the injected
:class:`CircuitBreakerRegistry`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from mp_reliability.kernel.errors import InfrastructureError
from mp_reliability.observability.logging import get_logger
from mp_reliability.remediation.action import ImplementationType, RemediationAction
from mp_reliability.resilience.circuit_breaker import CircuitBreakerRegistry

__all__ = [
    "HandlerOutcome",
    "HandlerRegistry",
    "RemediationHandler",
    "RemediationHandlerError",
]

logger = get_logger(__name__)


class RemediationHandlerError(InfrastructureError):
    """A remediation side effect could not be applied."""

    default_code = "remediation_handler_error"


@dataclass(frozen=True)
class HandlerOutcome:
    success: bool
    message: str
    artifacts: dict[str, Any] = field(default_factory=dict)


RemediationHandler = Callable[[RemediationAction], Awaitable[HandlerOutcome]]
CustomHandler = Callable[[dict[str, Any]], Awaitable[HandlerOutcome]]


class HandlerRegistry:
    """Maps :class:`ImplementationType` (and custom action names) to handlers."""

    def __init__(self, breakers: CircuitBreakerRegistry | None = None) -> None:
        self._breakers = breakers or CircuitBreakerRegistry()
        self._handlers: dict[ImplementationType, RemediationHandler] = {
            ImplementationType.CIRCUIT_BREAKER: self._activate_circuit_breaker,
            ImplementationType.LOAD_SHEDDING: self._activate_load_shedding,
            ImplementationType.AUTO_SCALE: self._auto_scale,
            ImplementationType.ROLLBACK: self._rollback,
            ImplementationType.NOTIFICATION: self._notify,
            ImplementationType.FREEZE: self._freeze,
            ImplementationType.CUSTOM: self._custom,
        }
        self._custom_handlers: dict[str, CustomHandler] = {
            "scale_db_pool": _scale_db_pool,
        }

    @property
    def breakers(self) -> CircuitBreakerRegistry:
        return self._breakers

    def register(self, implementation_type: ImplementationType, handler: RemediationHandler) -> None:
        self._handlers[ImplementationType(implementation_type)] = handler

    def register_custom(self, name: str, handler: CustomHandler) -> None:
        self._custom_handlers[name] = handler

    def validation_errors(self, action: RemediationAction) -> list[dict[str, Any]]:
        """Problems that would make *action* undispatchable."""
        impl = action.implementation
        try:
            impl_type = ImplementationType(impl.type)
        except ValueError:
            return [{"field": "implementation.type", "message": f"unsupported type {impl.type!r}"}]
        if impl_type not in self._handlers:
            return [{"field": "implementation.type", "message": f"no handler for {impl_type.value!r}"}]
        if impl_type is ImplementationType.CUSTOM:
            custom = impl.parameters.get("action")
            if custom not in self._custom_handlers:
                return [{"field": "implementation.parameters.action",
                         "message": f"unknown custom action {custom!r}"}]
        return []

    async def dispatch(self, action: RemediationAction) -> HandlerOutcome:
        impl = action.implementation
        try:
            impl_type = ImplementationType(impl.type)
        except ValueError as exc:
            raise RemediationHandlerError(f"Unsupported remediation type: {impl.type}") from exc
        handler = self._handlers.get(impl_type)
        if handler is None:
            raise RemediationHandlerError(f"No handler registered for {impl_type.value}")
        logger.info(
            "remediation.dispatch",
            action_id=action.id,
            type=impl_type.value,
            parameters=impl.parameters,
        )
        return await handler(action)

    # ------------------------------------------------------------------
    # Built-in handlers
    # ------------------------------------------------------------------

    async def _activate_circuit_breaker(self, action: RemediationAction) -> HandlerOutcome:
        params = action.implementation.parameters
        service = params.get("service", "default")
        breaker = self._breakers.get(service)
        breaker.force_open(reason=f"remediation:{action.id}")
        return HandlerOutcome(
            success=True,
            message=f"Circuit breaker for '{service}' activated",
            artifacts={
                "service": service,
                "circuit_breaker_state": breaker.state.value,
                "failure_threshold": params.get("failure_threshold"),
                "timeout_ms": params.get("timeout_ms"),
            },
        )

    async def _activate_load_shedding(self, action: RemediationAction) -> HandlerOutcome:
        params = action.implementation.parameters
        shed = params.get("shed_percentage", 0)
        ceiling = params.get("max_shed_percentage", 100)
        if not 0 < shed <= ceiling:
            raise RemediationHandlerError(
                f"Shed percentage {shed}% outside (0, {ceiling}]"
            )
        return HandlerOutcome(
            success=True,
            message=f"Load shedding activated at {shed}%",
            artifacts={
                "shed_percentage": shed,
                "critical_endpoints": params.get("critical_endpoints", []),
                "non_critical_patterns": params.get("non_critical_patterns", []),
            },
        )

    async def _auto_scale(self, action: RemediationAction) -> HandlerOutcome:
        params = action.implementation.parameters
        return HandlerOutcome(
            success=True,
            message="Auto scaling initiated",
            artifacts={
                "scale_type": params.get("scale_type"),
                "target_utilization": params.get("target_utilization"),
                "max_replicas": params.get("max_replicas"),
            },
        )

    async def _rollback(self, action: RemediationAction) -> HandlerOutcome:
        params = action.implementation.parameters
        logger.warning("remediation.rollback", action_id=action.id, strategy=params.get("rollback_strategy"))
        return HandlerOutcome(
            success=True,
            message="Emergency rollback completed",
            artifacts={
                "rollback_strategy": params.get("rollback_strategy"),
                "verification_steps": params.get("verification_steps", []),
            },
        )

    async def _notify(self, action: RemediationAction) -> HandlerOutcome:
        params = action.implementation.parameters
        return HandlerOutcome(
            success=True,
            message="Incident notifications queued",
            artifacts={
                "channels": params.get("channels", []),
                "escalation_policy": params.get("escalation_policy"),
                "runbook": params.get("runbook"),
            },
        )

    async def _freeze(self, action: RemediationAction) -> HandlerOutcome:
        params = action.implementation.parameters
        duration = params.get("duration", 0)
        logger.warning("remediation.freeze", action_id=action.id, duration=duration)
        return HandlerOutcome(
            success=True,
            message=f"Deployment freeze activated for {duration} seconds",
            artifacts={
                "freeze_types": params.get("freeze_types", []),
                "duration": duration,
                "exemptions": params.get("exemptions", []),
            },
        )

    async def _custom(self, action: RemediationAction) -> HandlerOutcome:
        params = action.implementation.parameters
        name = params.get("action")
        handler = self._custom_handlers.get(name)
        if handler is None:
            raise RemediationHandlerError(f"Unknown custom action: {name}")
        return await handler(params)


async def _scale_db_pool(params: dict[str, Any]) -> HandlerOutcome:
    current = params["current_pool_size"]
    new_size = min(current + params["scale_increment"], params["max_pool_size"])
    return HandlerOutcome(
        success=new_size > current,
        message=f"Database connection pool scaled from {current} to {new_size}",
        artifacts={
            "old_pool_size": current,
            "new_pool_size": new_size,
            "max_pool_size": params["max_pool_size"],
        },
    )
