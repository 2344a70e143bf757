"""
Distribution Calculator — расчёт распределения VT/ADA и таблиц множителей

Вычисляет, сколько vault token (VT) и ADA получает каждый участник, так что
on-chain валидатор, пересчитывающий minted == quantity × multiplier, получает
ровно те же целые числа.

Операции:
- calculate_acquirer_tokens — VT acquirer за отправленные ADA
- calculate_contributor_tokens — VT и ADA contributor за внесённые активы
- calculate_lp_tokens — FDV, размер пула ликвидности, цена VT
- calculate_acquire_multipliers — таблица множителей фазы acquire
- calculate_contributor_multipliers — таблица множителей contributors
- calculate_expansion_multipliers — таблица множителей фазы expansion
- calculate_optimal_decimals — выбор decimals VT без потери аллокаций
- check_acquire_reserve — покрывают ли acquirers резерв vault

Граничные случаи:
- Acquirers = 0%: FDV = стоимость внесённых активов, фазы acquire нет
- Acquirers = 100%: contributors получают только ADA, VT = 0
- LP = 0%: пула нет, цена = FDV / supply
- Комбинации (0% acquirers + 0% LP)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Итог claim = Σ quantity × multiplier по итоговой таблице (recompute-then-store)
2. VT acquirer и скорректированный VT пула кратны парным lovelace
3. Нулевые знаменатели (TVL, сумма пользователя, LP VT, acquired ADA) дают 0
   или равное деление, а не ошибку
4. Все acquirers разделяют один множитель, иначе AcquirerMultiplierMismatch
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Sequence

from vault_engine.core.contracts.validators import validate_multiplier_datum
from vault_engine.core.domain.asset import ContributedAsset
from vault_engine.core.domain.claim import Claim
from vault_engine.core.domain.multiplier import MultiplierEntry
from vault_engine.core.domain.units import (
    LOVELACE_PER_ADA,
    MAX_VT_DECIMALS,
    PLATFORM_MIN_DECIMALS,
    ada_to_lovelace,
    decimal_multiplier,
)
from vault_engine.core.math.rational import (
    ONE,
    ZERO,
    Number,
    RoundingScale,
    decimal_places_to_lift,
    floor_div,
    floor_to_int,
    round_to_int,
    safe_ratio,
    scaled_round,
    to_decimal,
    validate_fraction,
    validate_non_negative,
    with_rational_context,
)
from vault_engine.distribution.policy_grouping import (
    AllocationItem,
    GroupingStats,
    MultiplierTable,
    PolicyGroupingEngine,
)


# =============================================================================
# ENUMS & EXCEPTIONS
# =============================================================================


class PriceType(str, Enum):
    """Метод цены expansion"""

    MARKET = "market"  # vt_price — текущая цена VT в ADA (делитель)
    LIMIT = "limit"  # vt_price — заранее решённое количество VT на единицу


class AcquirerMultiplierMismatch(Exception):
    """
    Acquirer claims разрешаются в разные множители.

    Datum хранит одну запись acquirers (ключ из пустых строк), поэтому
    различающиеся множители были бы молча потеряны.
    """

    pass


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class DistributionConfig:
    """Конфигурация калькулятора.

    Шкалы округления заданы явно для каждого вида величины.
    """

    ratio_scale: int = RoundingScale.RATIO
    currency_scale: int = RoundingScale.CURRENCY
    lp_ada_scale: int = RoundingScale.LP_ADA

    # Decimal optimizer
    base_decimals: int = PLATFORM_MIN_DECIMALS
    max_decimals: int = MAX_VT_DECIMALS
    lp_precision_threshold: Decimal = Decimal("0.01")  # доля, теряемая floor(rawRatio)
    lp_precision_extra_decimals: int = 2


# =============================================================================
# RESULTS
# =============================================================================


@dataclass(frozen=True)
class AcquirerTokenResult:
    """VT acquirer: vt_received = multiplier × lovelace_sent."""

    vt_received: int
    multiplier: int
    lovelace_sent: int


@dataclass(frozen=True)
class ContributorTokenResult:
    """VT и ADA contributor за одну транзакцию."""

    vt_amount: int
    lovelace_amount: int
    proportion_of_user_total: Decimal  # доля транзакции во вкладе пользователя
    user_total_vt_tokens: int


@dataclass(frozen=True)
class LiquidityPoolResult:
    """Размер пула ликвидности."""

    lp_ada_amount: Decimal
    lp_vt_amount: Decimal
    vt_price: Decimal  # ADA за VT
    fdv: Decimal
    adjusted_vt_lp_amount: int  # ada_pair_multiplier × acquired lovelace
    ada_pair_multiplier: int
    raw_pair_ratio: Decimal  # lp_vt / acquired lovelace до floor

    @property
    def has_pool(self) -> bool:
        return self.lp_vt_amount > 0


@dataclass(frozen=True)
class MultiplierResult:
    """Таблицы множителей и пересчитанные суммы claims."""

    vt_table: MultiplierTable
    ada_table: MultiplierTable
    recalculated_amounts: Mapping[str, int]
    recalculated_lovelace: Mapping[str, int]
    stats: GroupingStats

    # Наименьший положительный VT на единицу до floor (для decimal optimizer)
    min_raw_multiplier: Decimal | None = None
    skipped_assets: tuple[str, ...] = field(default=())

    def apply_to_claims(self, claims: Iterable[Claim]) -> list[Claim]:
        """
        Перезапись сумм claims пересчитанными значениями.

        Claims без пересчёта возвращаются без изменений.

        Raises:
            ClaimAlreadyRecalculated: если claim уже пересчитан
        """
        updated: list[Claim] = []
        for claim in claims:
            if claim.id not in self.recalculated_amounts:
                updated.append(claim)
                continue
            updated.append(
                claim.with_recalculated_amounts(
                    self.recalculated_amounts[claim.id],
                    self.recalculated_lovelace.get(claim.id),
                )
            )
        return updated

    def to_datum(self, validate: bool = True) -> Dict[str, Any]:
        """
        Таблицы в wire-формате datum контракта.

        Raises:
            ValidationError: если datum не соответствует схеме
        """
        datum = {
            "acquire_multiplier": self.vt_table.to_datum(),
            "ada_distribution": self.ada_table.to_datum(),
        }
        if validate:
            validate_multiplier_datum(datum)
        return datum


@dataclass(frozen=True)
class ReserveCheck:
    """Проверка резерва acquire."""

    required_ada: Decimal
    acquired_ada: Decimal
    met: bool


# =============================================================================
# CALCULATOR
# =============================================================================


class DistributionCalculator:
    """Калькулятор распределения VT/ADA.

    Все операции чистые: единственный side effect — логирование через
    внедрённый logger.
    """

    def __init__(self, config: DistributionConfig | None = None, logger: logging.Logger | None = None):
        """Инициализация калькулятора.

        Args:
            config: конфигурация (опционально, используется default)
            logger: logger для событий расчёта (опционально)
        """
        self.config = config or DistributionConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.grouping = PolicyGroupingEngine(logger=logger)

    # -------------------------------------------------------------------------
    # Acquirers
    # -------------------------------------------------------------------------

    @with_rational_context
    def calculate_acquirer_tokens(
        self,
        *,
        ada_sent: Number,
        total_acquired_ada: Number,
        lp_vt_amount: Number,
        vt_supply: Number,
        assets_offered_percent: Number,
        vt_price: Number = 0,
    ) -> AcquirerTokenResult:
        """
        VT для одного acquirer.

        pct = round(ada_sent / total_acquired, 25)
        raw_vt = round(pct × offered × (supply − lp_vt), 25)
        multiplier = floor(raw_vt / lovelace_sent)
        vt_received = multiplier × lovelace_sent

        Floor с обратным умножением гарантирует, что результат — ровно
        целые lovelace × целый множитель.

        Args:
            ada_sent: ADA, отправленные acquirer
            total_acquired_ada: ADA от всех acquirers
            lp_vt_amount: VT в пуле ликвидности
            vt_supply: Total supply (base units)
            assets_offered_percent: Доля VT для acquirers (0..1)
            vt_price: Справочная цена VT в ADA (только для лога)

        Returns:
            AcquirerTokenResult
        """
        sent = validate_non_negative(ada_sent, "ada_sent")
        total = validate_non_negative(total_acquired_ada, "total_acquired_ada")
        offered = validate_fraction(assets_offered_percent, "assets_offered_percent")
        supply = validate_non_negative(vt_supply, "vt_supply")
        lp_vt = validate_non_negative(lp_vt_amount, "lp_vt_amount")
        if lp_vt > supply:
            raise ValueError(f"lp_vt_amount {lp_vt} exceeds vt_supply {supply}")

        ratio = self.config.ratio_scale
        percent_of_total = scaled_round(safe_ratio(sent, total), ratio)
        raw_vt = scaled_round(percent_of_total * offered * (supply - lp_vt), ratio)

        lovelace_sent = ada_to_lovelace(sent)
        multiplier = floor_div(raw_vt, lovelace_sent) if lovelace_sent > 0 else 0

        self.logger.debug(
            "Acquirer tokens: sent=%s ADA (%s of total), raw_vt=%s, multiplier=%d, vt_price=%s",
            sent,
            percent_of_total,
            raw_vt,
            multiplier,
            vt_price,
        )

        return AcquirerTokenResult(
            vt_received=multiplier * lovelace_sent,
            multiplier=multiplier,
            lovelace_sent=lovelace_sent,
        )

    # -------------------------------------------------------------------------
    # Contributors
    # -------------------------------------------------------------------------

    @with_rational_context
    def calculate_contributor_tokens(
        self,
        *,
        tx_contributed_value: Number,
        user_total_value: Number,
        total_tvl: Number,
        lp_vt_amount: Number,
        lp_ada_amount: Number,
        total_acquired_ada: Number,
        vt_supply: Number,
        assets_offered_percent: Number,
    ) -> ContributorTokenResult:
        """
        VT и ADA contributor за одну транзакцию вклада.

        share = user_total / TVL (0 при пустом TVL)
        user_total_vt = round((supply − lp_vt) × (1 − offered) × share, 25)
        vt = floor(user_total_vt × tx_value / user_total)
        lovelace = floor(share × (acquired − lp_ada) × proportion × 1_000_000)

        При offered >= 1 contributors получают 0 VT, но ADA выплачиваются.

        Returns:
            ContributorTokenResult
        """
        tx_value = validate_non_negative(tx_contributed_value, "tx_contributed_value")
        user_total = validate_non_negative(user_total_value, "user_total_value")
        tvl = validate_non_negative(total_tvl, "total_tvl")
        lp_vt = validate_non_negative(lp_vt_amount, "lp_vt_amount")
        lp_ada = validate_non_negative(lp_ada_amount, "lp_ada_amount")
        acquired = validate_non_negative(total_acquired_ada, "total_acquired_ada")
        supply = validate_non_negative(vt_supply, "vt_supply")
        offered = validate_non_negative(assets_offered_percent, "assets_offered_percent")

        proportion = scaled_round(safe_ratio(tx_value, user_total), self.config.ratio_scale)

        if offered >= ONE:
            # Все VT уходят acquirers
            user_total_vt = ZERO
            vt_amount = 0
            self.logger.info("Contributors get 0 VT (acquirers take the whole offering). They will receive ADA only.")
        else:
            user_total_vt = scaled_round(
                safe_ratio((supply - lp_vt) * (ONE - offered) * user_total, tvl),
                self.config.ratio_scale,
            )
            vt_amount = floor_div(user_total_vt * tx_value, user_total) if user_total > 0 else 0

        # share × proportion = tx_value / TVL
        ada_for_contributors = acquired - lp_ada
        if ada_for_contributors < 0:
            self.logger.warning(
                "LP ADA %s exceeds acquired ADA %s: contributors receive no ADA", lp_ada, acquired
            )
            ada_for_contributors = ZERO

        if tvl > 0 and user_total > 0:
            lovelace_amount = floor_div(tx_value * ada_for_contributors * LOVELACE_PER_ADA, tvl)
        else:
            lovelace_amount = 0

        return ContributorTokenResult(
            vt_amount=max(vt_amount, 0),
            lovelace_amount=lovelace_amount,
            proportion_of_user_total=proportion,
            user_total_vt_tokens=round_to_int(user_total_vt),
        )

    # -------------------------------------------------------------------------
    # Liquidity pool
    # -------------------------------------------------------------------------

    @with_rational_context
    def calculate_lp_tokens(
        self,
        *,
        total_acquired_ada: Number,
        vt_supply: Number,
        assets_offered_percent: Number,
        lp_percent: Number,
        total_contributed_value_ada: Number = 0,
    ) -> LiquidityPoolResult:
        """
        FDV, размер пула ликвидности и цена VT.

        Ветки (по порядку):
        (a) offered == 0 → FDV = стоимость вкладов; при lp == 0 или FDV == 0
            пула нет, цена = FDV / supply
        (b) иначе FDV = round(acquired / offered, 2)
        (c) lp == 0 → пула нет, цена = round(FDV / supply, 25)
        (d) lp_ada = round(lp × FDV / 2, 6), lp_vt = round(lp × supply / 2, 25),
            цена = lp_ada / lp_vt, ada_pair_multiplier = floor(lp_vt / acquired lovelace)

        Returns:
            LiquidityPoolResult (raw_pair_ratio — до floor, для decimal optimizer)
        """
        acquired = validate_non_negative(total_acquired_ada, "total_acquired_ada")
        supply = to_decimal(vt_supply)
        if supply <= 0:
            raise ValueError(f"vt_supply must be positive, got {vt_supply}")
        offered = validate_fraction(assets_offered_percent, "assets_offered_percent")
        lp = validate_fraction(lp_percent, "lp_percent")
        contributed = validate_non_negative(total_contributed_value_ada, "total_contributed_value_ada")

        ratio = self.config.ratio_scale

        if offered == 0:
            # Нет acquirers: FDV — стоимость внесённых активов
            fdv = contributed
            self.logger.info("No acquirers scenario: using TVL (%s ADA) as FDV", contributed)

            if lp == 0 or fdv == 0:
                vt_price = scaled_round(fdv / supply, ratio) if fdv > 0 else ZERO
                self.logger.info("No LP scenario: VT price = %s ADA (FDV %s / supply %s)", vt_price, fdv, supply)
                return self._empty_pool(fdv, vt_price)
        else:
            fdv = scaled_round(acquired / offered, self.config.currency_scale)

        if lp == 0:
            vt_price = scaled_round(fdv / supply, ratio)
            self.logger.info("No LP scenario: VT price = %s ADA (FDV %s / supply %s)", vt_price, fdv, supply)
            return self._empty_pool(fdv, vt_price)

        # LP — доля FDV, поровну ADA и VT
        lp_ada_amount = scaled_round(lp * fdv / 2, self.config.lp_ada_scale)
        lp_vt_amount = scaled_round(lp * supply / 2, ratio)
        vt_price = scaled_round(lp_ada_amount / lp_vt_amount, ratio) if lp_vt_amount > 0 else ZERO

        acquired_lovelace = ada_to_lovelace(acquired)
        raw_pair_ratio = safe_ratio(lp_vt_amount, acquired_lovelace)
        ada_pair_multiplier = floor_div(lp_vt_amount, acquired_lovelace) if acquired_lovelace > 0 else 0

        self.logger.info(
            "LP sized: FDV=%s ADA, lp_ada=%s, lp_vt=%s, price=%s, pair_multiplier=%d",
            fdv,
            lp_ada_amount,
            lp_vt_amount,
            vt_price,
            ada_pair_multiplier,
        )

        return LiquidityPoolResult(
            lp_ada_amount=lp_ada_amount,
            lp_vt_amount=lp_vt_amount,
            vt_price=vt_price,
            fdv=fdv,
            adjusted_vt_lp_amount=ada_pair_multiplier * acquired_lovelace,
            ada_pair_multiplier=ada_pair_multiplier,
            raw_pair_ratio=raw_pair_ratio,
        )

    @staticmethod
    def _empty_pool(fdv: Decimal, vt_price: Decimal) -> LiquidityPoolResult:
        return LiquidityPoolResult(
            lp_ada_amount=ZERO,
            lp_vt_amount=ZERO,
            vt_price=vt_price,
            fdv=fdv,
            adjusted_vt_lp_amount=0,
            ada_pair_multiplier=0,
            raw_pair_ratio=ZERO,
        )

    # -------------------------------------------------------------------------
    # Multipliers
    # -------------------------------------------------------------------------

    @with_rational_context
    def calculate_acquire_multipliers(
        self,
        contributor_claims: Sequence[Claim],
        acquirer_claims: Sequence[Claim] = (),
        include_ada: bool = True,
    ) -> MultiplierResult:
        """
        Таблица множителей фазы acquire.

        Аллокации contributors сжимаются Policy Grouping; при наличии acquirers
        в конец добавляется одна запись с пустым ключом.

        Args:
            contributor_claims: Claims contributors (с транзакциями и активами)
            acquirer_claims: Claims acquirers (пусто при 0% acquirers)
            include_ada: Строить ADA-таблицу по currency_amount

        Returns:
            MultiplierResult; пересчитаны claims contributors и acquirers

        Raises:
            AcquirerMultiplierMismatch: если acquirers разрешаются в разные множители
        """
        result = self._claim_multipliers(contributor_claims, include_ada)
        if not acquirer_claims:
            return result

        multiplier = self._acquirer_multiplier(acquirer_claims)
        amounts = dict(result.recalculated_amounts)
        for claim in acquirer_claims:
            amounts[claim.id] = multiplier * ada_to_lovelace(claim.transaction.amount)

        self.logger.info("Acquirer multiplier %d appended for %d claim(s)", multiplier, len(acquirer_claims))

        return MultiplierResult(
            vt_table=result.vt_table.with_entry(MultiplierEntry.for_acquirers(multiplier)),
            ada_table=result.ada_table,
            recalculated_amounts=amounts,
            recalculated_lovelace=result.recalculated_lovelace,
            stats=result.stats,
            min_raw_multiplier=result.min_raw_multiplier,
        )

    @with_rational_context
    def calculate_contributor_multipliers(
        self, contributor_claims: Sequence[Claim], include_ada: bool = False
    ) -> MultiplierResult:
        """Таблица множителей contributors без записи acquirers."""
        return self._claim_multipliers(contributor_claims, include_ada)

    def _claim_multipliers(self, claims: Sequence[Claim], include_ada: bool) -> MultiplierResult:
        """
        Аллокации по claims → Policy Grouping → пересчёт claims.

        Доля актива = стоимость актива / стоимость транзакции
        (1 / число активов, если стоимость 0).
        VT на единицу = floor(floor(доля × claim.amount) / quantity).
        """
        items: list[AllocationItem] = []
        min_raw: Decimal | None = None

        for claim in claims:
            assets = claim.transaction.assets
            if not assets:
                self.logger.warning("Claim %s has no contributed assets, skipping", claim.id)
                continue

            values = [asset.total_value() for asset in assets]
            total_value = sum(values, ZERO)
            asset_count = len(assets)

            for asset, value in zip(assets, values):
                if total_value > 0:
                    vt_share = floor_div(value * claim.amount, total_value)
                    ada_share = floor_div(value * claim.currency_amount, total_value)
                    raw_per_unit = safe_ratio(value * claim.amount, total_value * asset.quantity)
                else:
                    vt_share = floor_div(claim.amount, asset_count)
                    ada_share = floor_div(claim.currency_amount, asset_count)
                    raw_per_unit = safe_ratio(claim.amount, asset_count * asset.quantity)

                if raw_per_unit > 0 and (min_raw is None or raw_per_unit < min_raw):
                    min_raw = raw_per_unit

                items.append(
                    AllocationItem(
                        policy_id=asset.policy_id,
                        asset_id=asset.asset_id,
                        price=asset.unit_price(),
                        quantity=asset.quantity,
                        vt_multiplier=floor_div(vt_share, asset.quantity),
                        ada_multiplier=floor_div(ada_share, asset.quantity) if include_ada else None,
                    )
                )

        grouped = self.grouping.group(items)
        ada_table = grouped.ada_table if include_ada else MultiplierTable()
        amounts, lovelace = self._recompute_claims(claims, grouped.vt_table, ada_table if include_ada else None)

        return MultiplierResult(
            vt_table=grouped.vt_table,
            ada_table=ada_table,
            recalculated_amounts=amounts,
            recalculated_lovelace=lovelace,
            stats=grouped.stats,
            min_raw_multiplier=min_raw,
        )

    def _recompute_claims(
        self,
        claims: Iterable[Claim],
        vt_table: MultiplierTable,
        ada_table: MultiplierTable | None,
    ) -> tuple[dict[str, int], dict[str, int]]:
        """
        Пересчёт claims как Σ quantity × multiplier по итоговой таблице.

        Множитель берётся тот же, что применит контракт: запись asset,
        иначе запись policy.
        """
        amounts: dict[str, int] = {}
        lovelace: dict[str, int] = {}

        for claim in claims:
            if not claim.transaction.assets:
                continue

            vt_total = 0
            ada_total = 0
            for asset in claim.transaction.assets:
                vt_total += asset.quantity * (vt_table.lookup(asset.policy_id, asset.asset_id) or 0)
                if ada_table is not None:
                    ada_total += asset.quantity * (ada_table.lookup(asset.policy_id, asset.asset_id) or 0)

            amounts[claim.id] = vt_total
            if ada_table is not None:
                lovelace[claim.id] = ada_total

            if vt_total != claim.amount:
                self.logger.debug("Claim %s recalculated: %d → %d VT base units", claim.id, claim.amount, vt_total)

        return amounts, lovelace

    def _resolve_acquirer_multiplier(self, claim: Claim) -> int:
        """Сохранённый множитель claim, иначе floor(amount / lovelace отправлено)."""
        if claim.multiplier:
            return claim.multiplier
        lovelace_sent = ada_to_lovelace(claim.transaction.amount)
        return floor_div(claim.amount, lovelace_sent) if lovelace_sent > 0 else 0

    def _acquirer_multiplier(self, acquirer_claims: Sequence[Claim]) -> int:
        """
        Единый множитель acquirers.

        Raises:
            AcquirerMultiplierMismatch: если claims разрешаются в разные множители
        """
        resolved = [(claim.id, self._resolve_acquirer_multiplier(claim)) for claim in acquirer_claims]
        multiplier = resolved[0][1]
        mismatched = [f"{claim_id}={value}" for claim_id, value in resolved if value != multiplier]
        if mismatched:
            raise AcquirerMultiplierMismatch(
                f"Acquirer claims must share one multiplier: expected {multiplier} "
                f"(claim {resolved[0][0]}), got {', '.join(mismatched)}"
            )
        return multiplier

    @with_rational_context
    def calculate_expansion_multipliers(
        self,
        *,
        assets: Sequence[ContributedAsset],
        vt_price: Number,
        decimals: int,
        price_type: PriceType = PriceType.MARKET,
        price_overrides: Mapping[str, Number] | None = None,
        claims: Sequence[Claim] = (),
    ) -> MultiplierResult:
        """
        Таблица множителей фазы expansion (без контекста claims).

        MARKET: VT на единицу = floor(effective_price / vt_price × 10^decimals)
        LIMIT:  VT на единицу = floor(vt_price × 10^decimals) (vt_price — решённое
                количество VT, а не делитель)

        effective_price = override (по asset unit, затем по policy id),
        иначе floor price, иначе рыночная цена. Активы без цены пропускаются.

        Args:
            assets: Внесённые в expansion активы
            vt_price: Цена VT (MARKET) или VT на единицу (LIMIT)
            decimals: Decimals vault token
            price_type: Метод цены
            price_overrides: Цены-override в ADA
            claims: Expansion claims для пересчёта по итоговой таблице

        Raises:
            ValueError: если vt_price <= 0
        """
        price = to_decimal(vt_price)
        if price <= 0:
            raise ValueError(f"vt_price must be positive for expansion, got {vt_price}")

        scale = decimal_multiplier(decimals)
        overrides = {unit: to_decimal(value) for unit, value in (price_overrides or {}).items()}

        items: list[AllocationItem] = []
        skipped: list[str] = []
        min_raw: Decimal | None = None

        for asset in assets:
            effective_price = overrides.get(asset.unit) or overrides.get(asset.policy_id) or asset.unit_price()
            if effective_price <= 0:
                # Покрытие оракула может отставать от онбординга активов
                skipped.append(asset.unit)
                self.logger.debug("Skipping unpriced expansion asset %s", asset.unit)
                continue

            if price_type == PriceType.LIMIT:
                raw_per_unit = price * scale
            else:
                raw_per_unit = effective_price / price * scale

            if raw_per_unit > 0 and (min_raw is None or raw_per_unit < min_raw):
                min_raw = raw_per_unit

            items.append(
                AllocationItem(
                    policy_id=asset.policy_id,
                    asset_id=asset.asset_id,
                    price=effective_price,
                    quantity=asset.quantity,
                    vt_multiplier=floor_to_int(raw_per_unit)
                    if price_type == PriceType.LIMIT
                    else floor_div(effective_price * scale, price),
                )
            )

        if skipped:
            self.logger.info("Expansion: %d unpriced asset(s) skipped", len(skipped))

        grouped = self.grouping.group(items)
        amounts, _ = self._recompute_claims(claims, grouped.vt_table, None)

        return MultiplierResult(
            vt_table=grouped.vt_table,
            ada_table=MultiplierTable(),
            recalculated_amounts=amounts,
            recalculated_lovelace={},
            stats=grouped.stats,
            min_raw_multiplier=min_raw,
            skipped_assets=tuple(skipped),
        )

    # -------------------------------------------------------------------------
    # Decimals
    # -------------------------------------------------------------------------

    @with_rational_context
    def calculate_optimal_decimals(
        self,
        min_multiplier: Number | None = None,
        lp_raw_ratio: Number | None = None,
    ) -> int:
        """
        Decimals vault token, при которых аллокации не обнуляются.

        Старт с base_decimals (6, минимум платформы):
        - min_multiplier в (0, 1) floor'ится в 0 → +ceil(-log10(min_multiplier))
        - floor(lp_raw_ratio) теряет > 1% значения → +2
        Итог = min(base + max(underflow, lp), max_decimals). Берётся больший
        триггер, а не сумма.

        Args:
            min_multiplier: Наименьший множитель до floor
            lp_raw_ratio: lp_vt / acquired lovelace до floor

        Returns:
            Число decimals
        """
        cfg = self.config

        underflow_extra = 0
        if min_multiplier is not None:
            minimum = to_decimal(min_multiplier)
            if 0 < minimum < 1:
                underflow_extra = decimal_places_to_lift(minimum)
                self.logger.warning(
                    "Multiplier underflow detected: min_multiplier=%s. Increasing decimals by %d",
                    minimum,
                    underflow_extra,
                )

        lp_extra = 0
        if lp_raw_ratio is not None:
            raw = to_decimal(lp_raw_ratio)
            if raw > 0:
                precision_loss = (raw - floor_to_int(raw)) / raw
                if precision_loss > cfg.lp_precision_threshold:
                    lp_extra = cfg.lp_precision_extra_decimals
                    self.logger.info(
                        "LP pair ratio %s loses %s to flooring: adding %d decimals", raw, precision_loss, lp_extra
                    )

        target = cfg.base_decimals + max(underflow_extra, lp_extra)
        final = min(target, cfg.max_decimals)

        if cfg.base_decimals + underflow_extra > cfg.max_decimals:
            self.logger.error(
                "Cannot fully prevent multiplier underflow: need %d decimals, capped at %d (min_multiplier=%s)",
                cfg.base_decimals + underflow_extra,
                final,
                min_multiplier,
            )

        return final

    # -------------------------------------------------------------------------
    # Reserve
    # -------------------------------------------------------------------------

    @with_rational_context
    def check_acquire_reserve(
        self,
        *,
        total_contributed_value_ada: Number,
        assets_offered_percent: Number,
        acquire_reserve_percent: Number,
        total_acquired_ada: Number,
    ) -> ReserveCheck:
        """
        Покрывают ли acquirers резерв: acquired >= TVL × offered × reserve.
        """
        tvl = validate_non_negative(total_contributed_value_ada, "total_contributed_value_ada")
        offered = validate_fraction(assets_offered_percent, "assets_offered_percent")
        reserve = validate_fraction(acquire_reserve_percent, "acquire_reserve_percent")
        acquired = validate_non_negative(total_acquired_ada, "total_acquired_ada")

        required = tvl * offered * reserve
        met = acquired >= required
        if not met:
            self.logger.warning("Acquire reserve not met: acquired %s ADA < required %s ADA", acquired, required)

        return ReserveCheck(required_ada=required, acquired_ada=acquired, met=met)
