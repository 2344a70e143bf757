"""
UnspentOutput — Модель неизрасходованного выхода (UTXO)

Снимок на момент выборки, никогда не изменяется.
Повторное использование уже потраченных UTXO исключает вызывающий код.
"""

from pydantic import BaseModel, Field, field_validator

from vault_engine.core.domain.units import TX_HASH_PATTERN


class UnspentOutput(BaseModel):
    """
    Модель UTXO.

    assets — asset unit (policy_id + asset name hex) → количество.
    datum_tag — inline datum (hex), если есть.
    """

    tx_hash: str = Field(..., pattern=TX_HASH_PATTERN, description="Хеш транзакции (64 hex)")
    output_index: int = Field(..., ge=0, description="Индекс выхода")
    lovelace: int = Field(..., ge=0, description="ADA в lovelace")
    assets: dict[str, int] = Field(default_factory=dict, description="asset unit → количество")
    datum_tag: str | None = Field(None, description="Inline datum (hex)")

    model_config = {"frozen": True}

    @field_validator("assets")
    @classmethod
    def validate_asset_quantities(cls, v: dict[str, int]) -> dict[str, int]:
        """Количества активов строго положительны."""
        for unit, quantity in v.items():
            if quantity <= 0:
                raise ValueError(f"asset {unit} quantity must be positive, got {quantity}")
        return v

    @property
    def ref(self) -> str:
        """Ссылка на выход: '<tx_hash>#<output_index>'."""
        return f"{self.tx_hash}#{self.output_index}"

    def quantity_of(self, unit: str) -> int:
        """Количество asset unit в этом выходе (0, если отсутствует)."""
        return self.assets.get(unit, 0)


class AssetRequirement(BaseModel):
    """Требуемое количество asset unit для входов транзакции."""

    unit: str = Field(..., min_length=1, description="Asset unit")
    required_quantity: int = Field(..., gt=0, description="Требуемое количество")

    model_config = {"frozen": True}
