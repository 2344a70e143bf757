"""
Тесты для Distribution Calculator

Проверяет:
1. VT acquirers (кратность lovelace, нулевые знаменатели)
2. VT и ADA contributors (0% / 100% acquirers, точные третьи доли)
3. Пул ликвидности (все ветки FDV / LP)
4. Таблицы множителей acquire/contributor/expansion и recompute-then-store
5. Инвариант единого множителя acquirers
6. Decimal optimizer и проверку резерва acquire
"""

import logging
from decimal import Decimal

import pytest

from vault_engine.core.domain import (
    Claim,
    ClaimType,
    ContributedAsset,
    Transaction,
    TransactionType,
)
from vault_engine.distribution.calculator import (
    AcquirerMultiplierMismatch,
    DistributionCalculator,
    DistributionConfig,
    PriceType,
)

POLICY_A = "a" * 56
POLICY_B = "b" * 56

BASE_SUPPLY = 1_000_000_000_000  # 1M VT × 10^6


@pytest.fixture
def calculator() -> DistributionCalculator:
    return DistributionCalculator()


def contribution_claim(
    claim_id: str,
    assets: tuple[ContributedAsset, ...],
    amount: int,
    currency_amount: int = 0,
    owner: str = "user-1",
) -> Claim:
    return Claim(
        id=claim_id,
        owner=owner,
        type=ClaimType.CONTRIBUTION,
        amount=amount,
        currency_amount=currency_amount,
        transaction=Transaction(id=f"tx-{claim_id}", user_id=owner, type=TransactionType.CONTRIBUTE, assets=assets),
    )


def acquirer_claim(claim_id: str, ada_sent: str, amount: int, multiplier: int | None = None) -> Claim:
    return Claim(
        id=claim_id,
        owner=f"owner-{claim_id}",
        type=ClaimType.ACQUISITION,
        amount=amount,
        multiplier=multiplier,
        transaction=Transaction(
            id=f"tx-{claim_id}", user_id=f"owner-{claim_id}", type=TransactionType.ACQUIRE, amount=Decimal(ada_sent)
        ),
    )


def nft(policy: str, asset: str, price: str, quantity: int = 1) -> ContributedAsset:
    return ContributedAsset(policy_id=policy, asset_id=asset, quantity=quantity, floor_price=Decimal(price))


# =============================================================================
# ACQUIRER TOKENS
# =============================================================================


class TestAcquirerTokens:
    """Тесты для calculate_acquirer_tokens"""

    def test_single_acquirer_takes_whole_offering(self, calculator: DistributionCalculator) -> None:
        """raw = 1 × 0.2 × (1e12 − 5e10) = 1.9e11 → multiplier = 190 на lovelace"""
        result = calculator.calculate_acquirer_tokens(
            ada_sent=1000,
            total_acquired_ada=1000,
            lp_vt_amount=50_000_000_000,
            vt_supply=BASE_SUPPLY,
            assets_offered_percent="0.2",
        )

        assert result.multiplier == 190
        assert result.lovelace_sent == 1_000_000_000
        assert result.vt_received == 190_000_000_000

    def test_result_is_multiple_of_lovelace(self, calculator: DistributionCalculator) -> None:
        result = calculator.calculate_acquirer_tokens(
            ada_sent=1000,
            total_acquired_ada=3000,
            lp_vt_amount=50_000_000_000,
            vt_supply=BASE_SUPPLY,
            assets_offered_percent="0.2",
        )

        # raw ≈ 6.333e10 → floor(63.33) = 63
        assert result.multiplier == 63
        assert result.vt_received == result.multiplier * result.lovelace_sent
        assert result.vt_received % result.lovelace_sent == 0

    def test_zero_sent(self, calculator: DistributionCalculator) -> None:
        result = calculator.calculate_acquirer_tokens(
            ada_sent=0,
            total_acquired_ada=1000,
            lp_vt_amount=0,
            vt_supply=BASE_SUPPLY,
            assets_offered_percent="0.2",
        )
        assert (result.vt_received, result.multiplier, result.lovelace_sent) == (0, 0, 0)

    def test_zero_total_acquired(self, calculator: DistributionCalculator) -> None:
        result = calculator.calculate_acquirer_tokens(
            ada_sent=10,
            total_acquired_ada=0,
            lp_vt_amount=0,
            vt_supply=BASE_SUPPLY,
            assets_offered_percent="0.2",
        )
        assert result.vt_received == 0
        assert result.multiplier == 0

    def test_lp_larger_than_supply_rejected(self, calculator: DistributionCalculator) -> None:
        with pytest.raises(ValueError):
            calculator.calculate_acquirer_tokens(
                ada_sent=10,
                total_acquired_ada=10,
                lp_vt_amount=BASE_SUPPLY + 1,
                vt_supply=BASE_SUPPLY,
                assets_offered_percent="0.2",
            )

    def test_negative_input_rejected(self, calculator: DistributionCalculator) -> None:
        with pytest.raises(ValueError):
            calculator.calculate_acquirer_tokens(
                ada_sent=-1,
                total_acquired_ada=10,
                lp_vt_amount=0,
                vt_supply=BASE_SUPPLY,
                assets_offered_percent="0.2",
            )


# =============================================================================
# CONTRIBUTOR TOKENS
# =============================================================================


class TestContributorTokens:
    """Тесты для calculate_contributor_tokens"""

    def test_proportional_split(self, calculator: DistributionCalculator) -> None:
        """user_total_vt = 9.5e11 × 0.8 × 200/400 = 3.8e11; tx — половина"""
        result = calculator.calculate_contributor_tokens(
            tx_contributed_value=100,
            user_total_value=200,
            total_tvl=400,
            lp_vt_amount=50_000_000_000,
            lp_ada_amount=0,
            total_acquired_ada=1000,
            vt_supply=BASE_SUPPLY,
            assets_offered_percent="0.2",
        )

        assert result.vt_amount == 190_000_000_000
        assert result.user_total_vt_tokens == 380_000_000_000
        assert result.proportion_of_user_total == Decimal("0.5")
        # 100/400 × 1000 ADA
        assert result.lovelace_amount == 250_000_000

    def test_all_vt_offered_to_acquirers(self, calculator: DistributionCalculator) -> None:
        """offered = 1.0 → 0 VT, ADA всё равно выплачиваются"""
        result = calculator.calculate_contributor_tokens(
            tx_contributed_value=100,
            user_total_value=100,
            total_tvl=400,
            lp_vt_amount=0,
            lp_ada_amount=0,
            total_acquired_ada=1000,
            vt_supply=BASE_SUPPLY,
            assets_offered_percent=1,
        )

        assert result.vt_amount == 0
        assert result.user_total_vt_tokens == 0
        assert result.lovelace_amount == 250_000_000

    def test_almost_all_offered_still_positive(self, calculator: DistributionCalculator) -> None:
        result = calculator.calculate_contributor_tokens(
            tx_contributed_value=100,
            user_total_value=100,
            total_tvl=400,
            lp_vt_amount=0,
            lp_ada_amount=0,
            total_acquired_ada=1000,
            vt_supply=BASE_SUPPLY,
            assets_offered_percent="0.999999",
        )

        assert result.vt_amount == 250_000

    def test_thirds_are_exact(self, calculator: DistributionCalculator) -> None:
        """1/3 TVL от 300 ADA = ровно 100 ADA, без потери lovelace"""
        result = calculator.calculate_contributor_tokens(
            tx_contributed_value=100,
            user_total_value=100,
            total_tvl=300,
            lp_vt_amount=0,
            lp_ada_amount=0,
            total_acquired_ada=300,
            vt_supply=300,
            assets_offered_percent=0,
        )

        assert result.lovelace_amount == 100_000_000
        assert result.vt_amount == 100

    def test_lp_ada_reduces_contributor_ada(self, calculator: DistributionCalculator) -> None:
        result = calculator.calculate_contributor_tokens(
            tx_contributed_value=50,
            user_total_value=100,
            total_tvl=100,
            lp_vt_amount=0,
            lp_ada_amount=200,
            total_acquired_ada=1000,
            vt_supply=BASE_SUPPLY,
            assets_offered_percent="0.5",
        )

        # 50/100 × (1000 − 200) ADA
        assert result.lovelace_amount == 400_000_000

    def test_empty_tvl(self, calculator: DistributionCalculator) -> None:
        result = calculator.calculate_contributor_tokens(
            tx_contributed_value=0,
            user_total_value=0,
            total_tvl=0,
            lp_vt_amount=0,
            lp_ada_amount=0,
            total_acquired_ada=1000,
            vt_supply=BASE_SUPPLY,
            assets_offered_percent="0.2",
        )

        assert result.vt_amount == 0
        assert result.lovelace_amount == 0
        assert result.proportion_of_user_total == Decimal(0)

    def test_lp_ada_above_acquired_clamped(self, calculator: DistributionCalculator, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            result = calculator.calculate_contributor_tokens(
                tx_contributed_value=100,
                user_total_value=100,
                total_tvl=100,
                lp_vt_amount=0,
                lp_ada_amount=500,
                total_acquired_ada=0,
                vt_supply=BASE_SUPPLY,
                assets_offered_percent=0,
            )

        assert result.lovelace_amount == 0
        assert "exceeds acquired ADA" in caplog.text


# =============================================================================
# LIQUIDITY POOL
# =============================================================================


class TestLiquidityPool:
    """Тесты для calculate_lp_tokens"""

    def test_standard_pool(self, calculator: DistributionCalculator) -> None:
        """supply 1M, offered 20%, LP 10%, acquired 100k ADA"""
        result = calculator.calculate_lp_tokens(
            total_acquired_ada=100_000,
            vt_supply=1_000_000,
            assets_offered_percent="0.2",
            lp_percent="0.1",
        )

        assert result.fdv == Decimal(500_000)
        assert result.lp_ada_amount == Decimal(25_000)
        assert result.lp_vt_amount == Decimal(50_000)
        assert result.vt_price == Decimal("0.5")
        assert result.has_pool

    def test_no_acquirers_no_lp(self, calculator: DistributionCalculator) -> None:
        """offered 0, вклады 80k ADA, LP 0 → FDV = TVL, пула нет"""
        result = calculator.calculate_lp_tokens(
            total_acquired_ada=0,
            vt_supply=1_000_000,
            assets_offered_percent=0,
            lp_percent=0,
            total_contributed_value_ada=80_000,
        )

        assert result.fdv == Decimal(80_000)
        assert result.lp_ada_amount == 0
        assert result.lp_vt_amount == 0
        assert result.adjusted_vt_lp_amount == 0
        assert result.vt_price == Decimal(80_000) / Decimal(1_000_000)
        assert not result.has_pool

    def test_no_acquirers_empty_vault(self, calculator: DistributionCalculator) -> None:
        result = calculator.calculate_lp_tokens(
            total_acquired_ada=0,
            vt_supply=1_000_000,
            assets_offered_percent=0,
            lp_percent="0.1",
            total_contributed_value_ada=0,
        )

        assert result.fdv == 0
        assert result.vt_price == 0
        assert not result.has_pool

    def test_no_acquirers_with_lp(self, calculator: DistributionCalculator) -> None:
        """Пул из стоимости вкладов: ADA-пары нет, множитель 0"""
        result = calculator.calculate_lp_tokens(
            total_acquired_ada=0,
            vt_supply=1_000_000,
            assets_offered_percent=0,
            lp_percent="0.1",
            total_contributed_value_ada=80_000,
        )

        assert result.lp_ada_amount == Decimal(4_000)
        assert result.lp_vt_amount == Decimal(50_000)
        assert result.ada_pair_multiplier == 0
        assert result.raw_pair_ratio == 0

    def test_no_lp(self, calculator: DistributionCalculator) -> None:
        result = calculator.calculate_lp_tokens(
            total_acquired_ada=100_000,
            vt_supply=1_000_000,
            assets_offered_percent="0.2",
            lp_percent=0,
        )

        assert result.fdv == Decimal(500_000)
        assert result.vt_price == Decimal("0.5")
        assert result.lp_vt_amount == 0

    def test_adjusted_lp_is_multiple_of_acquired_lovelace(self, calculator: DistributionCalculator) -> None:
        """lp_vt = 5e10, acquired = 3e9 lovelace → ratio 16.67 → 16"""
        result = calculator.calculate_lp_tokens(
            total_acquired_ada=3000,
            vt_supply=BASE_SUPPLY,
            assets_offered_percent="0.2",
            lp_percent="0.1",
        )

        assert result.ada_pair_multiplier == 16
        assert result.adjusted_vt_lp_amount == 16 * 3_000_000_000
        assert result.adjusted_vt_lp_amount <= result.lp_vt_amount
        assert 16 < result.raw_pair_ratio < 17

    @pytest.mark.parametrize("supply", [0, -5])
    def test_invalid_supply(self, calculator: DistributionCalculator, supply: int) -> None:
        with pytest.raises(ValueError):
            calculator.calculate_lp_tokens(
                total_acquired_ada=1, vt_supply=supply, assets_offered_percent="0.2", lp_percent="0.1"
            )

    def test_invalid_lp_percent(self, calculator: DistributionCalculator) -> None:
        with pytest.raises(ValueError):
            calculator.calculate_lp_tokens(
                total_acquired_ada=1, vt_supply=100, assets_offered_percent="0.2", lp_percent="1.5"
            )


# =============================================================================
# ACQUIRE / CONTRIBUTOR MULTIPLIERS
# =============================================================================


class TestAcquireMultipliers:
    """Тесты для calculate_acquire_multipliers / calculate_contributor_multipliers"""

    def test_mixed_price_claim(self, calculator: DistributionCalculator) -> None:
        """Цены 10 и 30, amount 400 → доли 100 и 300, две записи уровня asset"""
        claim = contribution_claim("c1", (nft(POLICY_A, "01", "10"), nft(POLICY_A, "02", "30")), 400)

        result = calculator.calculate_acquire_multipliers([claim])

        assert result.vt_table.to_datum() == [[POLICY_A, "01", 100], [POLICY_A, "02", 300]]
        assert result.recalculated_amounts == {"c1": 400}
        assert result.stats.asset_level_entries == 2

    def test_ada_per_unit(self, calculator: DistributionCalculator) -> None:
        claim = contribution_claim(
            "c1", (nft(POLICY_A, "01", "10"), nft(POLICY_A, "02", "30")), 400, currency_amount=1_000
        )

        result = calculator.calculate_acquire_multipliers([claim])

        assert result.ada_table.to_datum() == [[POLICY_A, "01", 250], [POLICY_A, "02", 750]]
        assert result.recalculated_lovelace == {"c1": 1_000}

    def test_recomputed_totals_use_final_table(self, calculator: DistributionCalculator) -> None:
        """Итог claim = Σ quantity × multiplier, даже если он отличается от исходного"""
        first = contribution_claim("c1", (nft(POLICY_A, "01", "10"), nft(POLICY_A, "02", "10", quantity=2)), 301)
        second = contribution_claim("c2", (nft(POLICY_A, "03", "10"),), 150, owner="user-2")

        result = calculator.calculate_acquire_multipliers([first, second])

        # Одна цена → запись уровня policy: floor((100×1 + 100×2 + 150×1) / 4) = 112
        assert result.vt_table.to_datum() == [[POLICY_A, None, 112]]
        assert result.recalculated_amounts == {"c1": 336, "c2": 112}
        for claim in (first, second):
            expected = sum(
                asset.quantity * result.vt_table.lookup(asset.policy_id, asset.asset_id)
                for asset in claim.transaction.assets
            )
            assert result.recalculated_amounts[claim.id] == expected

    def test_unpriced_assets_split_equally(self, calculator: DistributionCalculator) -> None:
        claim = contribution_claim(
            "c1", (ContributedAsset(policy_id=POLICY_A, asset_id="01"), ContributedAsset(policy_id=POLICY_B)), 400
        )

        result = calculator.calculate_acquire_multipliers([claim])

        assert result.vt_table.multipliers() == [200, 200]
        assert result.recalculated_amounts["c1"] == 400

    def test_claim_without_assets_skipped(self, calculator: DistributionCalculator) -> None:
        empty = contribution_claim("c0", (), 100)
        claim = contribution_claim("c1", (nft(POLICY_A, "01", "10"),), 50)

        result = calculator.calculate_acquire_multipliers([empty, claim])

        assert "c0" not in result.recalculated_amounts
        assert result.recalculated_amounts["c1"] == 50

    def test_acquirer_entry_appended(self, calculator: DistributionCalculator) -> None:
        claim = contribution_claim("c1", (nft(POLICY_A, "01", "10"),), 50)
        acquirers = [
            acquirer_claim("a1", "1000", 190_000_000_000, multiplier=190),
            acquirer_claim("a2", "5", 950_000_000, multiplier=190),
        ]

        result = calculator.calculate_acquire_multipliers([claim], acquirers)

        assert result.vt_table.to_datum()[-1] == ["", "", 190]
        assert result.recalculated_amounts["a1"] == 190_000_000_000
        assert result.recalculated_amounts["a2"] == 950_000_000

    def test_acquirer_multiplier_derived_from_amount(self, calculator: DistributionCalculator) -> None:
        acquirers = [acquirer_claim("a1", "1000", 190_000_000_000)]

        result = calculator.calculate_acquire_multipliers([], acquirers)

        assert result.vt_table.to_datum() == [["", "", 190]]

    def test_acquirer_multiplier_mismatch(self, calculator: DistributionCalculator) -> None:
        acquirers = [
            acquirer_claim("a1", "1000", 190_000_000_000, multiplier=190),
            acquirer_claim("a2", "1000", 191_000_000_000, multiplier=191),
        ]

        with pytest.raises(AcquirerMultiplierMismatch, match="a2=191"):
            calculator.calculate_acquire_multipliers([], acquirers)

    def test_min_raw_multiplier_reported(self, calculator: DistributionCalculator) -> None:
        """amount 1 на стоимость 40 → 0.25 и 0.75 VT на единицу (обе floor в 0)"""
        claim = contribution_claim("c1", (nft(POLICY_A, "01", "10"), nft(POLICY_A, "02", "30")), 1)

        result = calculator.calculate_acquire_multipliers([claim])

        assert result.min_raw_multiplier == Decimal("0.25")
        assert result.vt_table.multipliers() == [0, 0]

    def test_apply_to_claims(self, calculator: DistributionCalculator) -> None:
        first = contribution_claim("c1", (nft(POLICY_A, "01", "10"), nft(POLICY_A, "02", "10", quantity=2)), 301)
        untouched = contribution_claim("c9", (nft(POLICY_B, "01", "10"),), 7)

        result = calculator.calculate_acquire_multipliers([first])
        updated = result.apply_to_claims([first, untouched])

        assert updated[0].amount == 300
        assert updated[0].recalculated
        assert updated[1] is untouched

    def test_to_datum_validates(self, calculator: DistributionCalculator) -> None:
        claim = contribution_claim("c1", (nft(POLICY_A, "01", "10"),), 50, currency_amount=10)
        acquirers = [acquirer_claim("a1", "1", 3_000_000, multiplier=3)]

        datum = calculator.calculate_acquire_multipliers([claim], acquirers).to_datum()

        assert datum == {
            "acquire_multiplier": [[POLICY_A, None, 50], ["", "", 3]],
            "ada_distribution": [[POLICY_A, None, 10]],
        }

    def test_contributor_multipliers_without_ada(self, calculator: DistributionCalculator) -> None:
        claim = contribution_claim("c1", (nft(POLICY_A, "01", "10"),), 50, currency_amount=10)

        result = calculator.calculate_contributor_multipliers([claim])

        assert len(result.ada_table) == 0
        assert result.recalculated_lovelace == {}
        assert result.apply_to_claims([claim])[0].currency_amount == 10


# =============================================================================
# EXPANSION MULTIPLIERS
# =============================================================================


class TestExpansionMultipliers:
    """Тесты для calculate_expansion_multipliers"""

    @pytest.fixture
    def assets(self) -> list[ContributedAsset]:
        return [
            nft(POLICY_A, "01", "10"),
            nft(POLICY_A, "02", "10"),
            ContributedAsset(policy_id=POLICY_B, asset_id="01"),
        ]

    def test_market_pricing(self, calculator: DistributionCalculator, assets) -> None:
        """floor(10 / 0.5 × 10^6) = 20_000_000 VT base units на единицу"""
        result = calculator.calculate_expansion_multipliers(assets=assets, vt_price="0.5", decimals=6)

        assert result.vt_table.to_datum() == [[POLICY_A, None, 20_000_000]]
        assert result.skipped_assets == (POLICY_B + "01",)
        assert len(result.ada_table) == 0

    def test_limit_pricing(self, calculator: DistributionCalculator, assets) -> None:
        result = calculator.calculate_expansion_multipliers(
            assets=assets, vt_price=3, decimals=2, price_type=PriceType.LIMIT
        )

        assert result.vt_table.to_datum() == [[POLICY_A, None, 300]]

    def test_override_by_unit_splits_policy(self, calculator: DistributionCalculator, assets) -> None:
        result = calculator.calculate_expansion_multipliers(
            assets=assets, vt_price="0.5", decimals=6, price_overrides={POLICY_A + "01": 30}
        )

        assert result.vt_table.to_datum() == [
            [POLICY_A, "02", 20_000_000],
            [POLICY_A, "01", 60_000_000],
        ]

    def test_override_by_policy_prices_collection(self, calculator: DistributionCalculator, assets) -> None:
        result = calculator.calculate_expansion_multipliers(
            assets=assets, vt_price="0.5", decimals=6, price_overrides={POLICY_B: 1}
        )

        assert result.vt_table.lookup(POLICY_B, "01") == 2_000_000
        assert result.skipped_assets == ()

    def test_claims_recomputed(self, calculator: DistributionCalculator, assets) -> None:
        claim = Claim(
            id="e1",
            owner="user-1",
            type=ClaimType.EXPANSION,
            amount=1,
            transaction=Transaction(
                id="tx-e1",
                user_id="user-1",
                type=TransactionType.CONTRIBUTE,
                assets=(nft(POLICY_A, "01", "10", quantity=2),),
            ),
        )

        result = calculator.calculate_expansion_multipliers(
            assets=assets, vt_price="0.5", decimals=6, claims=[claim]
        )

        assert result.recalculated_amounts == {"e1": 40_000_000}

    @pytest.mark.parametrize("price", [0, "-1"])
    def test_non_positive_vt_price_rejected(self, calculator: DistributionCalculator, assets, price) -> None:
        with pytest.raises(ValueError):
            calculator.calculate_expansion_multipliers(assets=assets, vt_price=price, decimals=6)


# =============================================================================
# DECIMAL OPTIMIZER
# =============================================================================


class TestOptimalDecimals:
    """Тесты для calculate_optimal_decimals"""

    def test_platform_default(self, calculator: DistributionCalculator) -> None:
        assert calculator.calculate_optimal_decimals() == 6
        assert calculator.calculate_optimal_decimals(min_multiplier=5) == 6

    def test_underflow_lift(self, calculator: DistributionCalculator) -> None:
        assert calculator.calculate_optimal_decimals(min_multiplier="0.25") == 7
        assert calculator.calculate_optimal_decimals(min_multiplier="0.05") == 8

    def test_capped_at_max(self, calculator: DistributionCalculator, caplog) -> None:
        with caplog.at_level(logging.ERROR):
            assert calculator.calculate_optimal_decimals(min_multiplier="0.0001") == 8
        assert "Cannot fully prevent multiplier underflow" in caplog.text

    def test_lp_precision_loss(self, calculator: DistributionCalculator) -> None:
        # 16.67 теряет 4% при floor
        assert calculator.calculate_optimal_decimals(lp_raw_ratio=Decimal(50) / Decimal(3)) == 8
        # 100.5 теряет 0.5%
        assert calculator.calculate_optimal_decimals(lp_raw_ratio="100.5") == 6
        assert calculator.calculate_optimal_decimals(lp_raw_ratio=50) == 6

    def test_larger_trigger_wins(self) -> None:
        """max(1, 2), а не сумма"""
        calculator = DistributionCalculator(DistributionConfig(max_decimals=12))
        assert calculator.calculate_optimal_decimals(min_multiplier="0.5", lp_raw_ratio="1.5") == 8


# =============================================================================
# ACQUIRE RESERVE
# =============================================================================


class TestAcquireReserve:
    """Тесты для check_acquire_reserve"""

    def test_reserve_met(self, calculator: DistributionCalculator) -> None:
        check = calculator.check_acquire_reserve(
            total_contributed_value_ada=1000,
            assets_offered_percent="0.2",
            acquire_reserve_percent="0.5",
            total_acquired_ada=100,
        )

        assert check.required_ada == Decimal(100)
        assert check.met

    def test_reserve_not_met(self, calculator: DistributionCalculator) -> None:
        check = calculator.check_acquire_reserve(
            total_contributed_value_ada=1000,
            assets_offered_percent="0.2",
            acquire_reserve_percent="0.5",
            total_acquired_ada="99.99",
        )

        assert not check.met

    def test_zero_reserve_always_met(self, calculator: DistributionCalculator) -> None:
        check = calculator.check_acquire_reserve(
            total_contributed_value_ada=1000,
            assets_offered_percent="0.2",
            acquire_reserve_percent=0,
            total_acquired_ada=0,
        )

        assert check.met
