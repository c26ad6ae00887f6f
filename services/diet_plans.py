"""
Saved diet plans: at most `max_diet_plans`, newest first, one selected.

The in-memory list is the working copy. Mutations read the persisted list
first if the store was never loaded, and each is followed by a
whole-list write to ``savedDietPlans``. A failed write raises StorageError
and leaves the in-memory change in place until the next successful write.
"""
from __future__ import annotations

import logging
from datetime import date

from config import settings
from core.errors import PlanLimitReached
from core.models.diet_plan import DietPlan, DietPlanDraft
from core.models.entries import new_id
from services.storage import DIET_PLANS_KEY, JsonListStore, KeyValueStore

_LOG = logging.getLogger(__name__)


class DietPlanStore:
    def __init__(self, kv: KeyValueStore, limit: int | None = None) -> None:
        self._store = JsonListStore(kv, DIET_PLANS_KEY, DietPlan)
        self._limit = limit or settings.max_diet_plans
        self._plans: list[DietPlan] = []
        self._selected_id: str | None = None
        self._loaded = False

    # ─────────────────────────── read side ────────────────────────── #
    @property
    def plans(self) -> list[DietPlan]:
        return list(self._plans)

    @property
    def selected(self) -> DietPlan | None:
        return next((p for p in self._plans if p.id == self._selected_id), None)

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def is_full(self) -> bool:
        return len(self._plans) >= self._limit

    async def load(self) -> list[DietPlan]:
        self._plans = await self._store.load()
        self._selected_id = self._plans[0].id if self._plans else None
        self._loaded = True
        return self.plans

    async def ensure_loaded(self) -> None:
        if not self._loaded:
            await self.load()

    # ─────────────────────────── mutations ────────────────────────── #
    async def add(self, plan: DietPlanDraft, today: date | None = None) -> DietPlan:
        await self.ensure_loaded()
        if self.is_full:
            _LOG.info("Diet plan rejected: %d of %d slots used", len(self._plans), self._limit)
            raise PlanLimitReached(self._limit)

        if not isinstance(plan, DietPlan):
            plan = DietPlan(
                id=new_id(),
                name=f"Diet Plan {len(self._plans) + 1}",
                created_at=(today or date.today()).isoformat(),
                **plan.model_dump(),
            )
        self._plans.insert(0, plan)
        self._selected_id = plan.id
        await self._persist()
        return plan

    async def remove(self, plan_id: str) -> bool:
        await self.ensure_loaded()
        kept = [p for p in self._plans if p.id != plan_id]
        if len(kept) == len(self._plans):
            return False
        self._plans = kept
        if self._selected_id == plan_id:
            self._selected_id = kept[0].id if kept else None
        await self._persist()
        return True

    def select(self, plan_id: str) -> DietPlan:
        plan = self._find(plan_id)
        self._selected_id = plan.id
        return plan

    async def toggle_expanded(self, plan_id: str) -> DietPlan:
        await self.ensure_loaded()
        plan = self._find(plan_id)
        flipped = plan.model_copy(update={"is_expanded": not plan.is_expanded})
        self._plans = [flipped if p.id == plan_id else p for p in self._plans]
        await self._persist()
        return flipped

    # ─────────────────────────── helpers ──────────────────────────── #
    def _find(self, plan_id: str) -> DietPlan:
        for p in self._plans:
            if p.id == plan_id:
                return p
        raise KeyError(f"Diet plan {plan_id} not found")

    async def _persist(self) -> None:
        await self._store.save(self._plans)
