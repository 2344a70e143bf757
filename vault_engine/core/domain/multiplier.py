"""
MultiplierEntry — Элемент on-chain таблицы множителей

Формат datum фиксирован контрактом: упорядоченный список троек
(policy_id, asset_name | None, multiplier). Контракт проверяет
minted == quantity × multiplier для каждого входа.
"""

from typing import Final

from pydantic import BaseModel, Field, model_validator

# Ключ записи acquirers: пустые policy и asset name
ACQUIRER_POLICY_ID: Final[str] = ""
ACQUIRER_ASSET_ID: Final[str] = ""


class MultiplierEntry(BaseModel):
    """
    Запись таблицы множителей.

    asset_id=None — запись уровня policy (все активы policy по одной цене).
    asset_id="" вместе с policy_id="" — запись acquirers.
    """

    policy_id: str = Field(..., pattern=r"^([0-9a-f]{56})?$", description="Policy ID или '' для acquirers")
    asset_id: str | None = Field(None, pattern=r"^([0-9a-f]{2}){0,32}$", description="Asset name или None")
    multiplier: int = Field(..., ge=0, description="Целый множитель")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_acquirer_key(self) -> "MultiplierEntry":
        """Пустой policy_id допустим только для записи acquirers."""
        if self.policy_id == ACQUIRER_POLICY_ID and self.asset_id != ACQUIRER_ASSET_ID:
            raise ValueError("empty policy_id is reserved for the acquirer entry (asset_id must be '')")
        return self

    @classmethod
    def for_acquirers(cls, multiplier: int) -> "MultiplierEntry":
        """Запись acquirers (ключ из пустых строк)."""
        return cls(policy_id=ACQUIRER_POLICY_ID, asset_id=ACQUIRER_ASSET_ID, multiplier=multiplier)

    @property
    def is_policy_level(self) -> bool:
        return self.asset_id is None

    @property
    def is_acquirer_entry(self) -> bool:
        return self.policy_id == ACQUIRER_POLICY_ID

    def to_datum(self) -> list:
        """Тройка в wire-формате datum: [policy_id, asset_name | None, multiplier]."""
        return [self.policy_id, self.asset_id, self.multiplier]
