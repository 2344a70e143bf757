"""
VaultParameters — Параметры токеномики vault

Задаются один раз при публикации vault и далее только читаются.
Проценты хранятся долями [0, 1].
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from vault_engine.core.domain.units import decimal_multiplier
from vault_engine.core.math.rational import Number, to_decimal, with_rational_context


class VaultParameters(BaseModel):
    """
    Модель параметров vault.

    vt_supply — целые токены; для расчёта claims используется base_supply
    (vt_supply × 10^decimals), с которым работает mint-политика.
    """

    vt_supply: int = Field(..., gt=0, description="Total VT supply (целые токены)")
    assets_offered_percent: Decimal = Field(
        ..., ge=0, le=1, description="Доля VT, предлагаемая acquirers"
    )
    lp_percent: Decimal = Field(..., ge=0, le=1, description="Доля FDV в пул ликвидности")
    decimals: int = Field(6, ge=0, le=18, description="Decimals vault token")
    acquire_reserve_percent: Decimal = Field(
        Decimal(0), ge=0, le=1, description="Резерв: доля offered value, которую должны покрыть acquirers"
    )

    model_config = {"frozen": True}

    @property
    def base_supply(self) -> int:
        """Supply в base units: vt_supply × 10^decimals."""
        return self.vt_supply * decimal_multiplier(self.decimals)

    @classmethod
    @with_rational_context
    def from_percentages(
        cls,
        vt_supply: int,
        tokens_for_acquires: Number,
        liquidity_pool_contribution: Number,
        decimals: int = 6,
        acquire_reserve: Number = 0,
    ) -> "VaultParameters":
        """
        Построение из процентов 0..100, как они хранятся у vault.

        Examples:
            >>> VaultParameters.from_percentages(1_000_000, 20, 10).assets_offered_percent
            Decimal('0.20')
        """
        hundredth = Decimal("0.01")
        return cls(
            vt_supply=vt_supply,
            assets_offered_percent=to_decimal(tokens_for_acquires) * hundredth,
            lp_percent=to_decimal(liquidity_pool_contribution) * hundredth,
            decimals=decimals,
            acquire_reserve_percent=to_decimal(acquire_reserve) * hundredth,
        )
