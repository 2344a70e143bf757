"""
Contracts — JSON Schema валидация wire-формата (datum контракта, ответы индексатора)
"""

from vault_engine.core.contracts.validators import (
    BUNDLED_SCHEMA_DIR,
    AddressUtxoValidator,
    ContractValidator,
    MultiplierDatumValidator,
    SchemaLoader,
    ValidationError,
    validate_address_utxo,
    validate_multiplier_datum,
)

__all__ = [
    "BUNDLED_SCHEMA_DIR",
    "SchemaLoader",
    "ContractValidator",
    "MultiplierDatumValidator",
    "AddressUtxoValidator",
    "ValidationError",
    "validate_multiplier_datum",
    "validate_address_utxo",
]
