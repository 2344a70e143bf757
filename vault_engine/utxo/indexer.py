"""
Indexer adapter — UTXO адреса из ответа chain indexer (формат Blockfrost)

Payload одного UTXO:
    {
        "tx_hash": "<64 hex>",
        "output_index": 0,
        "amount": [{"unit": "lovelace", "quantity": "5000000"}, ...],
        "inline_datum": "<hex>" | null
    }

Каждый payload валидируется против address_utxo.json до конверсии.
"""

from typing import Any, Iterable, Mapping, Protocol

from vault_engine.core.contracts.validators import AddressUtxoValidator
from vault_engine.core.domain.units import LOVELACE_UNIT
from vault_engine.core.domain.utxo import UnspentOutput


class UnspentChecker(Protocol):
    """Проверка on-chain: выход (tx_hash, output_index) ещё не потрачен."""

    def __call__(self, tx_hash: str, output_index: int) -> bool: ...


def parse_address_utxo(payload: Mapping[str, Any], validator: AddressUtxoValidator | None = None) -> UnspentOutput:
    """
    Конверсия одного UTXO из ответа индексатора.

    Количества одного unit в нескольких записях amount суммируются.

    Raises:
        ValidationError: если payload не соответствует схеме
    """
    (validator or AddressUtxoValidator()).validate(payload)

    lovelace = 0
    assets: dict[str, int] = {}
    for item in payload["amount"]:
        quantity = int(item["quantity"])
        if item["unit"] == LOVELACE_UNIT:
            lovelace += quantity
        elif quantity > 0:
            assets[item["unit"]] = assets.get(item["unit"], 0) + quantity

    return UnspentOutput(
        tx_hash=payload["tx_hash"],
        output_index=payload["output_index"],
        lovelace=lovelace,
        assets=assets,
        datum_tag=payload.get("inline_datum"),
    )


def parse_address_utxos(payloads: Iterable[Mapping[str, Any]]) -> list[UnspentOutput]:
    """Конверсия списка UTXO адреса с сохранением порядка индексатора."""
    validator = AddressUtxoValidator()
    return [parse_address_utxo(payload, validator) for payload in payloads]
