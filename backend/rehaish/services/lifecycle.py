"""Status transition tables and lease date arithmetic.

All lifecycle rules live here so that routers and services never compare
status strings on their own.
"""

import calendar
from datetime import date
from typing import Optional

from rehaish.core.errors import InvalidTransition
from rehaish.models.enums import ApplicationStatus, LeaseStatus
from rehaish.schemas.lease import LeaseMetrics

# PENDING is the only non-terminal application state
APPLICATION_TRANSITIONS: dict[ApplicationStatus, frozenset[ApplicationStatus]] = {
    ApplicationStatus.PENDING: frozenset(
        {ApplicationStatus.APPROVED, ApplicationStatus.REJECTED, ApplicationStatus.WITHDRAWN}
    ),
    ApplicationStatus.APPROVED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
    ApplicationStatus.WITHDRAWN: frozenset(),
}

LEASE_TRANSITIONS: dict[LeaseStatus, frozenset[LeaseStatus]] = {
    LeaseStatus.PENDING_SIGNATURE: frozenset({LeaseStatus.ACTIVE, LeaseStatus.TERMINATED}),
    LeaseStatus.ACTIVE: frozenset({LeaseStatus.TERMINATED, LeaseStatus.COMPLETED}),
    LeaseStatus.TERMINATED: frozenset(),
    LeaseStatus.COMPLETED: frozenset(),
}


def ensure_application_transition(
    current: ApplicationStatus,
    target: ApplicationStatus,
    *,
    code: str = "INVALID_STATUS_TRANSITION",
) -> None:
    """Raise InvalidTransition unless `current -> target` is allowed."""
    if target in APPLICATION_TRANSITIONS[current]:
        return
    raise InvalidTransition(
        f"Application cannot move from {current.value} to {target.value}",
        code=code,
        data={
            "current_status": current.value,
            "allowed_status": ApplicationStatus.PENDING.value,
        },
    )


def ensure_lease_transition(current: LeaseStatus, target: LeaseStatus) -> None:
    """Raise InvalidTransition unless `current -> target` is allowed."""
    allowed = LEASE_TRANSITIONS[current]
    if target in allowed:
        return
    raise InvalidTransition(
        f"Cannot change lease status from {current.value} to {target.value}",
        data={
            "current_status": current.value,
            "requested_status": target.value,
            "allowed_transitions": sorted(s.value for s in allowed),
        },
    )


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Inclusive-bounds overlap: touching ranges overlap."""
    return start_a <= end_b and end_a >= start_b


def next_due_date(payment_due_day: int, today: date) -> date:
    """Next occurrence of the due day on or after `today`.

    Short months clamp the due day to their last day (31 -> 30 Apr, 28/29 Feb).
    """
    def _clamped(year: int, month: int) -> date:
        last_day = calendar.monthrange(year, month)[1]
        return date(year, month, min(payment_due_day, last_day))

    due = _clamped(today.year, today.month)
    if due >= today:
        return due
    if today.month == 12:
        return _clamped(today.year + 1, 1)
    return _clamped(today.year, today.month + 1)


def compute_lease_metrics(
    status: LeaseStatus,
    end_date: date,
    payment_due_day: int,
    total_paid: int,
    total_payments: int,
    today: Optional[date] = None,
) -> LeaseMetrics:
    """Derived lease figures; due date and expiry only for ACTIVE leases."""
    today = today or date.today()
    metrics = LeaseMetrics(total_paid=total_paid, total_payments=total_payments)
    if status == LeaseStatus.ACTIVE:
        metrics.next_payment_due = next_due_date(payment_due_day, today)
        metrics.days_until_expiry = (end_date - today).days
    return metrics
