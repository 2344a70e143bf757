"""
Wire-контракты vault-engine (JSON Schema, Draft 2020-12)

Схемы лежат в пакете рядом с модулем (contracts/schema/*.json):
- multiplier_datum — таблицы множителей в datum контракта vault
- address_utxo — один UTXO адреса в ответе chain indexer

Скомпилированный validator на схему создаётся один раз и переиспользуется.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, List

from jsonschema import Draft202012Validator, SchemaError, ValidationError

# Каталог схем внутри пакета
BUNDLED_SCHEMA_DIR = Path(__file__).parent / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Чтение и компиляция JSON Schema из каталога.

    Каждая схема проходит meta-validation при первом обращении.
    """

    def __init__(self, schema_dir: Path | None = None):
        self.schema_dir = schema_dir or BUNDLED_SCHEMA_DIR
        if not self.schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {self.schema_dir}")

        self._schemas: Dict[str, Dict[str, Any]] = {}
        self._validators: Dict[str, Draft202012Validator] = {}

    def available(self) -> List[str]:
        """Имена схем в каталоге (без расширения), по алфавиту."""
        return sorted(path.stem for path in self.schema_dir.glob("*.json"))

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Схема по имени.

        Raises:
            FileNotFoundError: нет файла <schema_name>.json
            ValueError: файл не является корректной JSON Schema
        """
        cached = self._schemas.get(schema_name)
        if cached is not None:
            return cached

        path = self.schema_dir / f"{schema_name}.json"
        if not path.is_file():
            raise FileNotFoundError(f"Schema not found: {path}")

        schema = json.loads(path.read_text(encoding="utf-8"))
        try:
            Draft202012Validator.check_schema(schema)
        except SchemaError as e:
            raise ValueError(f"{path.name} is not a valid Draft 2020-12 schema: {e.message}") from e

        self._schemas[schema_name] = schema
        return schema

    def validator_for(self, schema_name: str) -> Draft202012Validator:
        """Скомпилированный validator (кэшируется)."""
        validator = self._validators.get(schema_name)
        if validator is None:
            validator = Draft202012Validator(self.load_schema(schema_name))
            self._validators[schema_name] = validator
        return validator


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Validator одного wire-контракта."""

    schema_name: str = ""

    def __init__(self, loader: SchemaLoader | None = None):
        self._validator = (loader or _SCHEMA_LOADER).validator_for(self.schema_name)

    @property
    def schema(self) -> Dict[str, Any]:
        return self._validator.schema

    def validate(self, data: Any) -> None:
        """
        Raises:
            ValidationError: первое найденное нарушение схемы
        """
        self._validator.validate(data)

    def is_valid(self, data: Any) -> bool:
        return self._validator.is_valid(data)

    def iter_errors(self, data: Any) -> Iterator[ValidationError]:
        return self._validator.iter_errors(data)

    def describe_errors(self, data: Any) -> List[str]:
        """
        Все нарушения в виде '<json path>: <сообщение>' (для логов).

        Пустой список означает валидный payload.
        """
        return [f"{error.json_path}: {error.message}" for error in self.iter_errors(data)]


class MultiplierDatumValidator(ContractValidator):
    """
    Datum с таблицами множителей.

    Форма фиксирована контрактом vault: изменение требует upgrade контракта.
    """

    schema_name = "multiplier_datum"


class AddressUtxoValidator(ContractValidator):
    """UTXO адреса в формате ответа индексатора."""

    schema_name = "address_utxo"


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_multiplier_datum(data: Dict[str, Any]) -> None:
    """
    Raises:
        ValidationError: datum не соответствует multiplier_datum.json
    """
    MultiplierDatumValidator().validate(data)


def validate_address_utxo(data: Dict[str, Any]) -> None:
    """
    Raises:
        ValidationError: payload не соответствует address_utxo.json
    """
    AddressUtxoValidator().validate(data)


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
