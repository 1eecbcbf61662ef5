from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel

from holiday_scope.models.enums import Weekday


class LeavePolicyInfo(BaseModel):
    """Leave policy metadata from the host leave module."""

    id: int
    name: str
    # None means the configured default weekend; an empty list means no weekend.
    weekends: list[Weekday] | None = None


class LeaveBalance(BaseModel):
    """Entitlement and already-scheduled days for an employee and policy."""

    entitlement: float = 0
    scheduled: float = 0

    @property
    def available(self) -> float:
        return self.entitlement - self.scheduled


@runtime_checkable
class LeavePolicyService(Protocol):
    """Interface for the host's leave policies and balances."""

    async def get_policy(self, policy_id: int) -> LeavePolicyInfo | None:
        """Fetch a leave policy. Returns None if not found."""
        ...

    async def get_balance(self, employee_id: int, policy_id: int) -> LeaveBalance | None:
        """Fetch an employee's balance for a policy. Returns None if none exists."""
        ...


class InMemoryLeavePolicyService:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._policies: dict[int, LeavePolicyInfo] = {}
        self._balances: dict[tuple[int, int], LeaveBalance] = {}

    def seed(self, policy: LeavePolicyInfo) -> None:
        """Seed a policy for testing."""
        self._policies[policy.id] = policy

    def seed_balance(self, employee_id: int, policy_id: int, balance: LeaveBalance) -> None:
        """Seed an employee balance for testing."""
        self._balances[(employee_id, policy_id)] = balance

    async def get_policy(self, policy_id: int) -> LeavePolicyInfo | None:
        """Fetch a leave policy. Returns None if not found."""
        return self._policies.get(policy_id)

    async def get_balance(self, employee_id: int, policy_id: int) -> LeaveBalance | None:
        """Fetch an employee's balance for a policy. Returns None if none exists."""
        return self._balances.get((employee_id, policy_id))


_leave_policy_service: LeavePolicyService = InMemoryLeavePolicyService()


def get_leave_policy_service() -> LeavePolicyService:
    """FastAPI dependency for the Leave Policy Service."""
    return _leave_policy_service


def set_leave_policy_service(service: LeavePolicyService) -> None:
    """Override the service (for testing or production wiring)."""
    global _leave_policy_service
    _leave_policy_service = service
