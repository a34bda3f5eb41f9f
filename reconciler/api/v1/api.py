"""
V1 API router aggregator: wires all endpoint modules together.
"""

from fastapi import APIRouter

from reconciler.api.v1.endpoints import attendance, employees, friday_policy, rules

api_router = APIRouter()

# Employees and the punch / employee import boundary
api_router.include_router(employees.router)

# Special rules and adjustments
api_router.include_router(rules.router)

# Processing, listing, Friday toggle, health
api_router.include_router(attendance.router)

# Friday policy settings and report
api_router.include_router(friday_policy.router)
