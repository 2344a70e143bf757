"""
UTXO — выбор входов транзакции и адаптер ответа chain indexer
"""

from vault_engine.utxo.indexer import UnspentChecker, parse_address_utxo, parse_address_utxos
from vault_engine.utxo.selector import (
    AssetShortfall,
    CollectedAsset,
    InsufficientAdaError,
    InsufficientAssetsError,
    UtxoSelectionError,
    UtxoSelectionResult,
    UtxoSelector,
    UtxoSelectorConfig,
)

__all__ = [
    "UnspentChecker",
    "parse_address_utxo",
    "parse_address_utxos",
    "AssetShortfall",
    "CollectedAsset",
    "InsufficientAdaError",
    "InsufficientAssetsError",
    "UtxoSelectionError",
    "UtxoSelectionResult",
    "UtxoSelector",
    "UtxoSelectorConfig",
]
