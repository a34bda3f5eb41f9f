"""
Special rules & adjustments endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reconciler.api.v1.deps import get_db
from reconciler.models.rules import Adjustment, SpecialRule
from reconciler.schemas.rules import (
    AdjustmentCreate,
    AdjustmentRead,
    DeleteResponse,
    SpecialRuleCreate,
    SpecialRuleRead,
)

router = APIRouter(tags=["rules"])
logger = logging.getLogger(__name__)


# ── Special rules ───────────────────────────────────────────────────
@router.get("/rules", response_model=list[SpecialRuleRead])
async def list_rules(db: AsyncSession = Depends(get_db)) -> list[SpecialRule]:
    result = await db.execute(select(SpecialRule).order_by(SpecialRule.id))
    return list(result.scalars().all())


@router.post("/rules", response_model=SpecialRuleRead, status_code=201)
async def create_rule(
    body: SpecialRuleCreate,
    db: AsyncSession = Depends(get_db),
) -> SpecialRule:
    rule = SpecialRule(**body.model_dump(mode="json"))
    db.add(rule)
    await db.commit()
    await db.refresh(rule)
    logger.info("Created %s rule '%s' (scope %s)", rule.rule_type, rule.name, rule.scope)
    return rule


@router.delete("/rules/{rule_id}", response_model=DeleteResponse)
async def delete_rule(
    rule_id: int,
    db: AsyncSession = Depends(get_db),
) -> DeleteResponse:
    result = await db.execute(select(SpecialRule).where(SpecialRule.id == rule_id))
    rule = result.scalar_one_or_none()
    if rule is None:
        raise HTTPException(status_code=404, detail="Rule not found")

    await db.delete(rule)
    await db.commit()
    logger.info("Deleted rule %d", rule_id)
    return DeleteResponse(success=True, message=f"Rule '{rule.name}' deleted")


# ── Adjustments ─────────────────────────────────────────────────────
@router.get("/adjustments", response_model=list[AdjustmentRead])
async def list_adjustments(
    employee_code: str | None = None,
    db: AsyncSession = Depends(get_db),
) -> list[Adjustment]:
    stmt = select(Adjustment).order_by(Adjustment.id)
    if employee_code:
        stmt = stmt.where(Adjustment.employee_code == employee_code)
    result = await db.execute(stmt)
    return list(result.scalars().all())


@router.post("/adjustments", response_model=AdjustmentRead, status_code=201)
async def create_adjustment(
    body: AdjustmentCreate,
    db: AsyncSession = Depends(get_db),
) -> Adjustment:
    adj = Adjustment(**body.model_dump(mode="json"))
    db.add(adj)
    await db.commit()
    await db.refresh(adj)
    logger.info(
        "Created %s adjustment for %s (%s..%s)", adj.type, adj.employee_code, adj.start_date, adj.end_date
    )
    return adj
