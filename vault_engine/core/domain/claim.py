"""
Claim — Модель права участника на распределение

Claim создаётся при записи вклада или покупки, пересчитывается ровно один раз
(qty × multiplier, как считает контракт) и только после этого исполняется.

Immutable Pydantic модели: пересчёт создаёт новый экземпляр.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from vault_engine.core.domain.asset import ContributedAsset
from vault_engine.core.math.rational import ZERO, with_rational_context


# =============================================================================
# ENUMS
# =============================================================================


class ClaimStatus(str, Enum):
    """Статус claim"""

    AVAILABLE = "available"
    PENDING = "pending"
    CLAIMED = "claimed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ClaimStatus.CLAIMED, ClaimStatus.FAILED)


class ClaimType(str, Enum):
    """Тип claim"""

    CONTRIBUTION = "contribution"
    ACQUISITION = "acquisition"
    LIQUIDITY_POOL = "liquidity-pool"
    TERMINATION = "termination"
    EXPANSION = "expansion"


class TransactionType(str, Enum):
    """Тип исходной транзакции vault"""

    CONTRIBUTE = "contribute"
    ACQUIRE = "acquire"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class ClaimAlreadyRecalculated(Exception):
    """
    Повторный пересчёт claim.

    Сумма claim перезаписывается ровно один раз: второй пересчёт означает,
    что orchestrator применяет таблицу множителей дважды.
    """

    pass


# =============================================================================
# TRANSACTION MODEL
# =============================================================================


class Transaction(BaseModel):
    """
    Исходная транзакция vault (вклад или покупка).

    amount — ADA, отправленные acquirer (для contribute обычно 0).
    """

    id: str = Field(..., min_length=1, description="Идентификатор транзакции")
    user_id: str = Field(..., min_length=1, description="Владелец транзакции")
    type: TransactionType = Field(..., description="contribute/acquire")
    amount: Decimal = Field(Decimal(0), ge=0, description="ADA отправлено (acquire)")
    assets: tuple[ContributedAsset, ...] = Field(default=(), description="Внесённые активы")

    model_config = {"frozen": True}

    @with_rational_context
    def assets_value(self) -> Decimal:
        """Суммарная стоимость внесённых активов в ADA."""
        return sum((asset.total_value() for asset in self.assets), ZERO)


# =============================================================================
# CLAIM MODEL
# =============================================================================


class Claim(BaseModel):
    """
    Модель claim.

    amount — VT в base units, currency_amount — lovelace.
    multiplier — сохранённый множитель acquirer (VT на lovelace).
    """

    id: str = Field(..., min_length=1, description="Идентификатор claim")
    owner: str = Field(..., min_length=1, description="Владелец (user id)")
    type: ClaimType = Field(..., description="Тип claim")
    status: ClaimStatus = Field(ClaimStatus.PENDING, description="Статус claim")

    amount: int = Field(0, ge=0, description="VT к получению (base units)")
    currency_amount: int = Field(0, ge=0, description="ADA к получению (lovelace)")
    multiplier: int | None = Field(None, ge=0, description="Множитель acquirer")

    transaction: Transaction = Field(..., description="Исходная транзакция")
    recalculated: bool = Field(False, description="Суммы пересчитаны по таблице множителей")

    model_config = {"frozen": True}

    def with_recalculated_amounts(self, amount: int, currency_amount: int | None = None) -> "Claim":
        """
        Новый экземпляр с суммами, пересчитанными как Σ qty × multiplier.

        Args:
            amount: VT (base units) по таблице множителей
            currency_amount: lovelace по ADA-таблице (None — не менять)

        Raises:
            ClaimAlreadyRecalculated: если claim уже пересчитан
            ValueError: если claim в терминальном статусе или сумма отрицательна
        """
        if self.recalculated:
            raise ClaimAlreadyRecalculated(f"Claim {self.id} amounts were already recalculated")
        if self.status.is_terminal:
            raise ValueError(f"Claim {self.id} is {self.status.value} and cannot be recalculated")
        if amount < 0 or (currency_amount is not None and currency_amount < 0):
            raise ValueError(f"Recalculated amounts must be non-negative for claim {self.id}")

        update: dict = {"amount": amount, "recalculated": True}
        if currency_amount is not None:
            update["currency_amount"] = currency_amount
        return self.model_copy(update=update)
