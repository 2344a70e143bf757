"""
Domain models для vault-engine

Immutable Pydantic модели входов и выходов движка распределения.
"""

from vault_engine.core.domain.asset import ContributedAsset
from vault_engine.core.domain.claim import (
    Claim,
    ClaimAlreadyRecalculated,
    ClaimStatus,
    ClaimType,
    Transaction,
    TransactionType,
)
from vault_engine.core.domain.multiplier import ACQUIRER_ASSET_ID, ACQUIRER_POLICY_ID, MultiplierEntry
from vault_engine.core.domain.units import (
    LOVELACE_PER_ADA,
    LOVELACE_UNIT,
    MAX_VT_DECIMALS,
    PLATFORM_MIN_DECIMALS,
    ada_to_lovelace,
    asset_unit,
    decimal_multiplier,
    lovelace_to_ada,
    split_asset_unit,
    to_base_units,
)
from vault_engine.core.domain.utxo import AssetRequirement, UnspentOutput
from vault_engine.core.domain.vault import VaultParameters

__all__ = [
    # Assets & claims
    "ContributedAsset",
    "Claim",
    "ClaimAlreadyRecalculated",
    "ClaimStatus",
    "ClaimType",
    "Transaction",
    "TransactionType",
    # Multipliers
    "MultiplierEntry",
    "ACQUIRER_POLICY_ID",
    "ACQUIRER_ASSET_ID",
    # Vault
    "VaultParameters",
    # UTXO
    "UnspentOutput",
    "AssetRequirement",
    # Units
    "LOVELACE_PER_ADA",
    "LOVELACE_UNIT",
    "PLATFORM_MIN_DECIMALS",
    "MAX_VT_DECIMALS",
    "ada_to_lovelace",
    "lovelace_to_ada",
    "decimal_multiplier",
    "to_base_units",
    "asset_unit",
    "split_asset_unit",
]
