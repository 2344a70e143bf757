"""
Distribution Simulation — сквозной расчёт распределения vault в памяти

Связывает операции DistributionCalculator в порядке перехода vault
из фазы acquire:

1. Итоги: ADA от acquirers, стоимость вкладов (TVL)
2. Пул ликвидности (FDV, lp_ada, lp_vt, цена VT)
3. Claims acquirers (пропуск транзакций без ADA, общий минимальный множитель)
4. Claims contributors (пропуск транзакций без стоимости)
5. Таблицы множителей + пересчёт claims (recompute-then-store)
6. Оптимальные decimals и проверка резерва acquire

Ничего не сохраняет и не отправляет: результат — DistributionPlan.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, Sequence

from vault_engine.core.domain.claim import Claim, ClaimType, Transaction, TransactionType
from vault_engine.core.domain.vault import VaultParameters
from vault_engine.core.math.rational import ZERO, with_rational_context
from vault_engine.distribution.calculator import (
    AcquirerTokenResult,
    DistributionCalculator,
    LiquidityPoolResult,
    MultiplierResult,
    ReserveCheck,
)


@dataclass(frozen=True)
class DistributionPlan:
    """Результат симуляции распределения vault."""

    total_acquired_ada: Decimal
    total_contributed_value_ada: Decimal
    base_supply: int

    liquidity_pool: LiquidityPoolResult
    multipliers: MultiplierResult
    claims: tuple[Claim, ...]  # уже пересчитанные по таблице
    reserve: ReserveCheck

    current_decimals: int
    optimal_decimals: int

    @property
    def needs_decimals_update(self) -> bool:
        return self.optimal_decimals != self.current_decimals

    def claims_of(self, claim_type: ClaimType) -> list[Claim]:
        return [claim for claim in self.claims if claim.type == claim_type]

    def to_datum(self) -> Dict[str, Any]:
        return self.multipliers.to_datum()


class DistributionSimulator:
    """
    Симулятор распределения по транзакциям vault.

    Транзакции — подтверждённые contribute/acquire в порядке создания.
    """

    def __init__(self, calculator: DistributionCalculator | None = None, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger(__name__)
        self.calculator = calculator or DistributionCalculator(logger=logger)

    @with_rational_context
    def simulate(self, parameters: VaultParameters, transactions: Iterable[Transaction]) -> DistributionPlan:
        """
        Полный расчёт распределения.

        Args:
            parameters: Параметры vault (проценты долями)
            transactions: Транзакции contribute и acquire

        Returns:
            DistributionPlan с пересчитанными claims
        """
        transactions = list(transactions)
        acquisitions = [tx for tx in transactions if tx.type == TransactionType.ACQUIRE]
        contributions = [tx for tx in transactions if tx.type == TransactionType.CONTRIBUTE]

        self.logger.info(
            "Simulating distribution: %d acquire, %d contribute transactions",
            len(acquisitions),
            len(contributions),
        )

        total_acquired = sum((tx.amount for tx in acquisitions), ZERO)
        tx_values = {tx.id: tx.assets_value() for tx in contributions}
        total_tvl = sum(tx_values.values(), ZERO)

        user_totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for tx in contributions:
            user_totals[tx.user_id] += tx_values[tx.id]

        base_supply = parameters.base_supply
        offered = parameters.assets_offered_percent

        lp = self.calculator.calculate_lp_tokens(
            total_acquired_ada=total_acquired,
            vt_supply=base_supply,
            assets_offered_percent=offered,
            lp_percent=parameters.lp_percent,
            total_contributed_value_ada=total_tvl,
        )

        acquirer_claims = self._acquirer_claims(acquisitions, total_acquired, lp, base_supply, offered)
        contributor_claims = self._contributor_claims(
            contributions, tx_values, user_totals, total_tvl, total_acquired, lp, base_supply, offered
        )

        multipliers = self.calculator.calculate_acquire_multipliers(
            contributor_claims, acquirer_claims, include_ada=True
        )
        claims = multipliers.apply_to_claims(contributor_claims + acquirer_claims)

        optimal_decimals = self.calculator.calculate_optimal_decimals(
            min_multiplier=multipliers.min_raw_multiplier,
            lp_raw_ratio=lp.raw_pair_ratio if lp.has_pool else None,
        )

        reserve = self.calculator.check_acquire_reserve(
            total_contributed_value_ada=total_tvl,
            assets_offered_percent=offered,
            acquire_reserve_percent=parameters.acquire_reserve_percent,
            total_acquired_ada=total_acquired,
        )

        if optimal_decimals != parameters.decimals:
            self.logger.warning(
                "Vault decimals %d differ from optimal %d", parameters.decimals, optimal_decimals
            )

        return DistributionPlan(
            total_acquired_ada=total_acquired,
            total_contributed_value_ada=total_tvl,
            base_supply=base_supply,
            liquidity_pool=lp,
            multipliers=multipliers,
            claims=tuple(claims),
            reserve=reserve,
            current_decimals=parameters.decimals,
            optimal_decimals=optimal_decimals,
        )

    def _acquirer_claims(
        self,
        acquisitions: Sequence[Transaction],
        total_acquired: Decimal,
        lp: LiquidityPoolResult,
        base_supply: int,
        offered: Decimal,
    ) -> list[Claim]:
        """
        Claims acquirers с единым множителем.

        Множители отдельных транзакций могут разойтись на 1 из-за floor;
        все acquirers получают минимальный:
            amount = min(multiplier) × lovelace_sent
        """
        priced: list[tuple[Transaction, AcquirerTokenResult]] = []
        for tx in acquisitions:
            if tx.amount <= 0:
                self.logger.debug("Skipping acquire transaction %s without ADA", tx.id)
                continue

            tokens = self.calculator.calculate_acquirer_tokens(
                ada_sent=tx.amount,
                total_acquired_ada=total_acquired,
                lp_vt_amount=lp.lp_vt_amount,
                vt_supply=base_supply,
                assets_offered_percent=offered,
                vt_price=lp.vt_price,
            )
            priced.append((tx, tokens))

        if not priced:
            return []

        multiplier = min(tokens.multiplier for _, tokens in priced)
        if any(tokens.multiplier != multiplier for _, tokens in priced):
            self.logger.info("Acquirer multipliers normalized to minimum %d", multiplier)

        return [
            Claim(
                id=tx.id,
                owner=tx.user_id,
                type=ClaimType.ACQUISITION,
                amount=multiplier * tokens.lovelace_sent,
                multiplier=multiplier,
                transaction=tx,
            )
            for tx, tokens in priced
        ]

    def _contributor_claims(
        self,
        contributions: Sequence[Transaction],
        tx_values: dict[str, Decimal],
        user_totals: dict[str, Decimal],
        total_tvl: Decimal,
        total_acquired: Decimal,
        lp: LiquidityPoolResult,
        base_supply: int,
        offered: Decimal,
    ) -> list[Claim]:
        claims: list[Claim] = []
        for tx in contributions:
            tx_value = tx_values[tx.id]
            if tx_value <= 0:
                self.logger.debug("Skipping contribute transaction %s without priced assets", tx.id)
                continue

            tokens = self.calculator.calculate_contributor_tokens(
                tx_contributed_value=tx_value,
                user_total_value=user_totals[tx.user_id],
                total_tvl=total_tvl,
                lp_vt_amount=lp.lp_vt_amount,
                lp_ada_amount=lp.lp_ada_amount,
                total_acquired_ada=total_acquired,
                vt_supply=base_supply,
                assets_offered_percent=offered,
            )
            claims.append(
                Claim(
                    id=tx.id,
                    owner=tx.user_id,
                    type=ClaimType.CONTRIBUTION,
                    amount=tokens.vt_amount,
                    currency_amount=tokens.lovelace_amount,
                    transaction=tx,
                )
            )
        return claims
