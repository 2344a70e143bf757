"""
Policy Grouping — сжатие аллокаций в таблицу множителей

Вход: плоский список аллокаций (policy, asset, price, quantity, multipliers).
Выход: минимальная таблица, которую принимает контракт vault.

Правило:
- Все активы policy по одной цене → одна запись уровня policy
  (policy, None, floor(Σ(multiplier × quantity) / Σ quantity))
- Две и более различных цены → по записи на каждый asset, без агрегации

Взвешенное по количеству floor-среднее гарантирует, что агрегат проходит
валидацию при умножении на суммарное количество у держателя.
Правило «одна цена ⇒ всегда агрегировать» сохраняется даже там, где
оно меняет округление относительно записей уровня asset.

Порядок вывода детерминирован: policy по возрастанию, внутри policy —
(price, asset_id). Результат не зависит от порядка входа.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Sequence

from vault_engine.core.domain.multiplier import MultiplierEntry
from vault_engine.core.math.rational import ZERO, floor_div, safe_ratio, scaled_round


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass(frozen=True)
class AllocationItem:
    """Аллокация на одну позицию актива (множители на единицу)."""

    policy_id: str
    asset_id: str | None
    price: Decimal
    quantity: int
    vt_multiplier: int
    ada_multiplier: int | None = None


@dataclass(frozen=True)
class GroupingStats:
    """Статистика сжатия."""

    original_item_count: int
    total_entries: int
    grouped_policies: int
    asset_level_entries: int
    compression_ratio: Decimal  # original_item_count / total_entries

    # Policy, где агрегат усреднил различающиеся множители активов
    averaged_policies: tuple[str, ...]


@dataclass(frozen=True)
class MultiplierTable:
    """Упорядоченная таблица множителей в форме datum."""

    entries: tuple[MultiplierEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def lookup(self, policy_id: str, asset_id: str | None) -> int | None:
        """
        Множитель, который контракт применит к (policy, asset).

        Запись уровня asset приоритетнее записи уровня policy.

        Returns:
            Множитель или None, если policy отсутствует в таблице
        """
        policy_level: int | None = None
        for entry in self.entries:
            if entry.policy_id != policy_id:
                continue
            if asset_id is not None and entry.asset_id == asset_id:
                return entry.multiplier
            if entry.asset_id is None:
                policy_level = entry.multiplier
        return policy_level

    def multipliers(self) -> list[int]:
        return [entry.multiplier for entry in self.entries]

    def with_entry(self, entry: MultiplierEntry) -> "MultiplierTable":
        """Новая таблица с записью в конце."""
        return MultiplierTable(entries=self.entries + (entry,))

    def to_datum(self) -> list[list]:
        return [entry.to_datum() for entry in self.entries]


@dataclass(frozen=True)
class GroupedMultipliers:
    """Результат группировки: VT и ADA таблицы + статистика."""

    vt_table: MultiplierTable
    ada_table: MultiplierTable
    stats: GroupingStats


# =============================================================================
# HELPERS
# =============================================================================


def _weighted_floor(items: Sequence[AllocationItem], ada: bool = False) -> int:
    """floor(Σ(multiplier × quantity) / Σ quantity)."""
    total_quantity = sum(item.quantity for item in items)
    if ada:
        weighted = sum((item.ada_multiplier or 0) * item.quantity for item in items)
    else:
        weighted = sum(item.vt_multiplier * item.quantity for item in items)
    return floor_div(weighted, total_quantity)


def _asset_sort_key(asset_items: Sequence[AllocationItem]) -> tuple[Decimal, str]:
    return min(item.price for item in asset_items), asset_items[0].asset_id


# =============================================================================
# ENGINE
# =============================================================================


class PolicyGroupingEngine:
    """
    Группировка аллокаций по (policy, price), затем по policy.

    Чистая функция входа; логирование — единственный side effect.
    """

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger(__name__)

    def group(self, items: Iterable[AllocationItem]) -> GroupedMultipliers:
        """
        Сжатие аллокаций в VT и ADA таблицы множителей.

        Args:
            items: Аллокации (порядок не важен)

        Returns:
            GroupedMultipliers с таблицами и статистикой

        Raises:
            ValueError: если в policy с разными ценами есть аллокация без asset_id
        """
        items = list(items)
        include_ada = any(item.ada_multiplier is not None for item in items)

        by_policy: dict[str, list[AllocationItem]] = defaultdict(list)
        for item in items:
            by_policy[item.policy_id].append(item)

        vt_entries: list[MultiplierEntry] = []
        ada_entries: list[MultiplierEntry] = []
        grouped_policies = 0
        asset_level_entries = 0
        averaged_policies: list[str] = []

        for policy_id in sorted(by_policy):
            policy_items = by_policy[policy_id]
            prices = {item.price for item in policy_items}

            if len(prices) == 1:
                # Одна цена: одна запись уровня policy
                grouped_policies += 1
                vt_entries.append(
                    MultiplierEntry(policy_id=policy_id, asset_id=None, multiplier=_weighted_floor(policy_items))
                )
                if include_ada:
                    ada_entries.append(
                        MultiplierEntry(
                            policy_id=policy_id, asset_id=None, multiplier=_weighted_floor(policy_items, ada=True)
                        )
                    )
                if len({item.vt_multiplier for item in policy_items}) > 1:
                    averaged_policies.append(policy_id)
                continue

            # Разные цены: запись на каждый asset, asset_id обязателен
            if any(item.asset_id is None for item in policy_items):
                raise ValueError(
                    f"Policy {policy_id} has {len(prices)} distinct prices but an allocation "
                    "without asset_id: asset-level entries need an asset name"
                )

            by_asset: dict[str, list[AllocationItem]] = defaultdict(list)
            for item in policy_items:
                by_asset[item.asset_id].append(item)

            for asset_items in sorted(by_asset.values(), key=_asset_sort_key):
                asset_id = asset_items[0].asset_id
                asset_level_entries += 1
                vt_entries.append(
                    MultiplierEntry(policy_id=policy_id, asset_id=asset_id, multiplier=_weighted_floor(asset_items))
                )
                if include_ada:
                    ada_entries.append(
                        MultiplierEntry(
                            policy_id=policy_id, asset_id=asset_id, multiplier=_weighted_floor(asset_items, ada=True)
                        )
                    )

            self.logger.debug(
                "Policy %s has %d distinct prices: emitted %d asset-level entries",
                policy_id,
                len(prices),
                len(by_asset),
            )

        stats = GroupingStats(
            original_item_count=len(items),
            total_entries=len(vt_entries),
            grouped_policies=grouped_policies,
            asset_level_entries=asset_level_entries,
            compression_ratio=scaled_round(safe_ratio(len(items), len(vt_entries), fallback=ZERO), 2),
            averaged_policies=tuple(averaged_policies),
        )

        self.logger.info(
            "Grouped %d allocations into %d entries (%d policy-level, %d asset-level)",
            stats.original_item_count,
            stats.total_entries,
            stats.grouped_policies,
            stats.asset_level_entries,
        )

        return GroupedMultipliers(
            vt_table=MultiplierTable(entries=tuple(vt_entries)),
            ada_table=MultiplierTable(entries=tuple(ada_entries)),
            stats=stats,
        )


def group_multipliers(
    items: Iterable[AllocationItem], logger: logging.Logger | None = None
) -> GroupedMultipliers:
    """Группировка аллокаций (см. PolicyGroupingEngine.group)."""
    return PolicyGroupingEngine(logger=logger).group(items)
