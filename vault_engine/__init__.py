"""
vault-engine — off-chain distribution engine для tokenized-asset vaults.

Вычисляет распределение vault token (VT) и ADA между contributors, acquirers
и пулом ликвидности так, чтобы on-chain валидатор получил те же целые числа,
и подбирает UTXO для входов транзакций.
"""

__version__ = "0.1.0"
