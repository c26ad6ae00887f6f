"""
core/food_catalog.py
────────────────────────────────────────────────────────────────────────
Static Indian food table for offline food logging.

Every row is per the reference quantity written in its name
("Roti (1 medium)", "Paneer (100g)", ...). `FoodCatalog.search()` is a
plain substring filter, not a relevance ranking: rows come back in table
order.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import pandas as pd

from core.models.meal import FoodItem

_LOG = logging.getLogger(__name__)

SEARCH_LIMIT = 10

_COLUMNS = ["name", "calories", "protein", "carbs", "fat", "fiber", "category"]

# name, kcal, protein g, carbs g, fat g, fiber g, category
_INDIAN_FOODS: List[tuple] = [
    # Rice & Grains
    ("Basmati Rice (1 cup cooked)", 210, 4.3, 45, 0.4, 0.6, "Grains"),
    ("Brown Rice (1 cup cooked)", 216, 5, 45, 1.8, 3.5, "Grains"),
    ("Quinoa (1 cup cooked)", 222, 8, 39, 3.6, 5, "Grains"),
    ("Roti (1 medium)", 104, 3.5, 18, 2.5, 2.7, "Grains"),
    ("Naan (1 piece)", 262, 9, 45, 5, 2, "Grains"),
    ("Paratha (1 medium)", 126, 3, 18, 4.5, 2.5, "Grains"),
    # Dals & Legumes
    ("Moong Dal (1 cup cooked)", 212, 14.2, 38.7, 0.8, 15.4, "Legumes"),
    ("Toor Dal (1 cup cooked)", 203, 11.4, 37, 0.7, 11.8, "Legumes"),
    ("Chana Dal (1 cup cooked)", 269, 12.8, 45, 4.3, 12.2, "Legumes"),
    ("Masoor Dal (1 cup cooked)", 230, 17.9, 39.9, 0.8, 15.6, "Legumes"),
    ("Rajma (1 cup cooked)", 245, 15, 45, 1, 13.1, "Legumes"),
    ("Chole (1 cup)", 269, 14.5, 45, 4.3, 12.5, "Legumes"),
    # Vegetables
    ("Aloo Sabzi (1 cup)", 134, 3.1, 31, 0.1, 2.9, "Vegetables"),
    ("Bhindi Sabzi (1 cup)", 33, 1.9, 7.5, 0.2, 3.2, "Vegetables"),
    ("Palak Sabzi (1 cup)", 41, 5.4, 6.8, 0.7, 4.3, "Vegetables"),
    ("Gobi Sabzi (1 cup)", 29, 2.3, 5.9, 0.3, 2.5, "Vegetables"),
    ("Baingan Bharta (1 cup)", 88, 2.5, 16, 2.3, 6.6, "Vegetables"),
    ("Karela Sabzi (1 cup)", 24, 2.6, 4.3, 0.2, 2.6, "Vegetables"),
    # Meat & Fish
    ("Chicken Curry (1 cup)", 219, 25.9, 5.1, 10.9, 1.4, "Meat"),
    ("Mutton Curry (1 cup)", 292, 25.6, 3.9, 19.3, 1.2, "Meat"),
    ("Fish Curry (1 cup)", 158, 22.1, 4.2, 5.7, 1.1, "Fish"),
    ("Tandoori Chicken (100g)", 150, 27.3, 0, 4.1, 0, "Meat"),
    ("Grilled Fish (100g)", 128, 25.4, 0, 2.9, 0, "Fish"),
    # Dairy
    ("Paneer (100g)", 265, 18.3, 1.2, 20.8, 0, "Dairy"),
    ("Curd (1 cup)", 98, 11, 12, 0.4, 0, "Dairy"),
    ("Milk (1 cup)", 103, 8, 12, 2.4, 0, "Dairy"),
    ("Lassi (1 glass)", 108, 2.5, 12, 5.5, 0, "Dairy"),
    # Snacks
    ("Samosa (1 piece)", 308, 5.1, 28, 19.6, 2.4, "Snacks"),
    ("Pakora (5 pieces)", 157, 4.1, 13, 10.1, 2.1, "Snacks"),
    ("Dhokla (2 pieces)", 160, 4, 27, 4, 2, "Snacks"),
    ("Idli (2 pieces)", 78, 2, 17, 0.2, 0.8, "Snacks"),
    ("Dosa (1 medium)", 168, 4, 28, 4, 1.2, "Snacks"),
    ("Upma (1 cup)", 183, 4.4, 32, 4.6, 1.9, "Snacks"),
    # Fruits
    ("Apple (1 medium)", 95, 0.5, 25, 0.3, 4.4, "Fruits"),
    ("Banana (1 medium)", 105, 1.3, 27, 0.4, 3.1, "Fruits"),
    ("Mango (1 cup sliced)", 107, 1, 28, 0.5, 3, "Fruits"),
    ("Orange (1 medium)", 62, 1.2, 15.4, 0.2, 3.1, "Fruits"),
    ("Papaya (1 cup)", 55, 0.9, 14, 0.2, 2.5, "Fruits"),
    # Beverages
    ("Chai (1 cup)", 40, 1.5, 6, 1.5, 0, "Beverages"),
    ("Coffee (1 cup)", 2, 0.3, 0, 0, 0, "Beverages"),
    ("Fresh Lime Water (1 glass)", 25, 0.1, 6.5, 0, 0.1, "Beverages"),
    ("Coconut Water (1 cup)", 46, 1.7, 8.9, 0.5, 2.6, "Beverages"),
]


def default_foods() -> pd.DataFrame:
    return pd.DataFrame(_INDIAN_FOODS, columns=_COLUMNS)


class FoodCatalog:
    def __init__(self, foods_df: pd.DataFrame | None = None, limit: int = SEARCH_LIMIT) -> None:
        foods = default_foods() if foods_df is None else foods_df
        missing = [c for c in _COLUMNS if c not in foods.columns]
        if missing:
            raise KeyError(f"Food DataFrame missing columns: {missing}")
        self._foods = foods[_COLUMNS].reset_index(drop=True)
        self._limit = limit

    def __len__(self) -> int:
        return len(self._foods)

    # ─────────────────────────────── search ───────────────────────── #
    def search(self, query: str) -> List[FoodItem]:
        """Case-insensitive substring match on name or category, table order."""
        if not (query or "").strip():
            return []
        # blankness is judged on the trimmed text, the match on the raw text
        term = query.lower()

        df = self._foods
        hit = df["name"].str.lower().str.contains(term, regex=False) | df[
            "category"
        ].str.lower().str.contains(term, regex=False)
        matches = df[hit].head(self._limit)
        _LOG.debug("Food search %r matched %d rows", term, len(matches))
        return self._items(matches)

    # ──────────────────────────── browsing ────────────────────────── #
    def by_category(self, category: str) -> List[FoodItem]:
        return self._items(self._foods[self._foods["category"] == category])

    def categories(self) -> List[str]:
        return list(self._foods["category"].drop_duplicates())

    def get(self, name: str) -> FoodItem | None:
        rows = self._foods[self._foods["name"] == name]
        if rows.empty:
            return None
        return self._items(rows.head(1))[0]

    @staticmethod
    def _items(df: pd.DataFrame) -> List[FoodItem]:
        records: List[Dict[str, Any]] = df.to_dict(orient="records")
        return [FoodItem(**r) for r in records]
