"""
ContributedAsset — Модель внесённого в vault актива

Immutable Pydantic модель одной позиции вклада: policy, asset name,
количество и цены (floor price для NFT, рыночная/DEX цена для FT).
"""

from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from vault_engine.core.domain.units import ASSET_NAME_PATTERN, POLICY_ID_PATTERN, asset_unit
from vault_engine.core.math.rational import ZERO, with_rational_context


class ContributedAsset(BaseModel):
    """
    Модель внесённого актива.

    Immutable модель (frozen=True), read-only вход для калькулятора.
    asset_id=None означает «любой asset под policy».
    """

    policy_id: str = Field(..., pattern=POLICY_ID_PATTERN, description="Policy ID (56 hex)")
    asset_id: str | None = Field(
        None, pattern=ASSET_NAME_PATTERN, description="Asset name (hex), None = любой под policy"
    )
    quantity: int = Field(1, ge=1, description="Количество единиц")

    # Цены в ADA за единицу
    floor_price: Decimal | None = Field(None, ge=0, description="Floor price (NFT коллекции)")
    dex_price: Decimal | None = Field(None, ge=0, description="Рыночная цена (DEX, для FT)")

    model_config = {"frozen": True}

    @field_validator("floor_price", "dex_price")
    @classmethod
    def validate_finite_price(cls, v: Decimal | None) -> Decimal | None:
        """Цена должна быть конечной."""
        if v is not None and not v.is_finite():
            raise ValueError(f"price must be finite, got {v}")
        return v

    @property
    def unit(self) -> str:
        """Asset unit (policy_id + asset name)."""
        return asset_unit(self.policy_id, self.asset_id)

    def unit_price(self) -> Decimal:
        """
        Эффективная цена единицы: floor price, иначе DEX цена, иначе 0.

        Нулевой floor price не считается ценой и уступает DEX цене.
        """
        if self.floor_price:
            return self.floor_price
        if self.dex_price:
            return self.dex_price
        return ZERO

    @with_rational_context
    def total_value(self) -> Decimal:
        """Стоимость позиции в ADA: quantity × unit_price."""
        return self.unit_price() * self.quantity
