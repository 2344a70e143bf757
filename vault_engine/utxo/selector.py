"""
UTXO Selector — выбор входов транзакции под требования к активам

Вход: UTXO адреса (в фиксированном порядке), минимум ADA, опциональный
порог high-ADA пула (fee/collateral), требуемые активы, лимит входов.

Алгоритм (один проход, greedy first-fit):
1. Пропуск UTXO ниже минимума ADA, с зарезервированным datum,
   из exclusion set вызывающего кода, либо уже потраченных (если запрошена проверка)
2. Каждый оставшийся UTXO проверяется по всем неудовлетворённым целям:
   содержит актив → добавить к сумме, пометить «required»;
   иначе → кандидат в padding
3. Без целей — остановка, когда generic pool достиг лимита;
   проверка существования идёт внутри прохода и тоже останавливается
4. После прохода любая недобранная цель → InsufficientAssetsError

Выбор:
- без целей → первые max_inputs валидных UTXO
- с целями → все required (никогда не отбрасываются, даже сверх лимита)
  + padding до лимита

Порядок входа определяет результат: повторный запуск на том же списке
даёт идентичный выбор.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from itertools import islice
from typing import Final, Generator, Iterable, Sequence

from vault_engine.core.domain.utxo import AssetRequirement, UnspentOutput
from vault_engine.utxo.indexer import UnspentChecker


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

DEFAULT_MAX_INPUTS: Final[int] = 200

# Порог отдельного пула UTXO для fee/collateral (4 ADA)
DEFAULT_ADA_FILTER_THRESHOLD: Final[int] = 4_000_000


# =============================================================================
# EXCEPTIONS
# =============================================================================


class UtxoSelectionError(Exception):
    """Базовая ошибка выбора UTXO."""

    pass


@dataclass(frozen=True)
class AssetShortfall:
    """Недобор по одному активу."""

    unit: str
    required: int
    found: int

    @property
    def missing(self) -> int:
        return self.required - self.found


class InsufficientAssetsError(UtxoSelectionError):
    """
    После полного прохода хотя бы одна цель не набрана.

    shortfalls перечисляет каждый недобор (unit, required, found).
    """

    def __init__(self, shortfalls: Sequence[AssetShortfall]):
        self.shortfalls = tuple(shortfalls)
        details = ", ".join(f"{s.unit}: required {s.required}, found {s.found}" for s in self.shortfalls)
        super().__init__(f"Insufficient assets: {details}")


class InsufficientAdaError(UtxoSelectionError):
    """Ни один UTXO не прошёл минимум ADA."""

    pass


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class UtxoSelectorConfig:
    """Конфигурация UTXO Selector"""

    max_inputs: int = DEFAULT_MAX_INPUTS

    # Зарезервированные inline datum (UTXO с ними не тратятся).
    # None: зарезервирован любой inline datum (UTXO, привязанные к контракту).
    # frozenset: только перечисленные теги; пустой набор отключает фильтр.
    reserved_datum_tags: frozenset[str] | None = None

    # Параллельные проверки существования (1 — последовательно)
    verification_workers: int = 1


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class CollectedAsset:
    """Сбор по одной цели."""

    unit: str
    required: int
    collected: int
    inputs: tuple[str, ...]  # refs UTXO, давших актив

    @property
    def satisfied(self) -> bool:
        return self.collected >= self.required


@dataclass(frozen=True)
class UtxoSelectionResult:
    """Результат выбора UTXO."""

    utxos: tuple[UnspentOutput, ...]  # generic pool валидных UTXO
    high_ada_utxos: tuple[UnspentOutput, ...]  # пул выше ada_filter_threshold
    selected: tuple[UnspentOutput, ...]  # входы транзакции
    required_inputs: tuple[UnspentOutput, ...]
    padding_inputs: tuple[UnspentOutput, ...]
    collected: tuple[CollectedAsset, ...]

    @property
    def total_lovelace(self) -> int:
        """ADA (lovelace) во выбранных входах."""
        return sum(utxo.lovelace for utxo in self.selected)

    @property
    def selected_refs(self) -> list[str]:
        return [utxo.ref for utxo in self.selected]


# =============================================================================
# SELECTOR
# =============================================================================


class UtxoSelector:
    """
    Greedy выбор входов транзакции.

    Не хранит состояния между вызовами: каждый select() независим.
    Retry после конфликта (UTXO потрачен) — забота вызывающего кода,
    который повторяет select() с обновлённым exclude.
    """

    def __init__(self, config: UtxoSelectorConfig | None = None, logger: logging.Logger | None = None):
        self.config = config or UtxoSelectorConfig()
        self.logger = logger or logging.getLogger(__name__)

    def select(
        self,
        utxos: Iterable[UnspentOutput],
        targets: Sequence[AssetRequirement] = (),
        min_ada: int = 0,
        ada_filter_threshold: int | None = None,
        max_inputs: int | None = None,
        validate_existence: bool = False,
        unspent_checker: UnspentChecker | None = None,
        exclude: Iterable[str] = (),
    ) -> UtxoSelectionResult:
        """
        Выбор входов транзакции.

        Args:
            utxos: UTXO адреса в фиксированном порядке
            targets: Требуемые активы (unit, количество)
            min_ada: Минимум lovelace для UTXO
            ada_filter_threshold: Порог high-ADA пула (None — пул не строится)
            max_inputs: Лимит входов (None — из конфигурации)
            validate_existence: Проверять, что UTXO ещё не потрачен
            unspent_checker: Проверка (tx_hash, output_index) -> bool
            exclude: Refs '<tx_hash>#<index>', уже использованные вызывающим кодом

        Returns:
            UtxoSelectionResult

        Raises:
            ValueError: если лимит < 1 или проверка запрошена без checker
            InsufficientAdaError: если ни один UTXO не прошёл фильтры
            InsufficientAssetsError: если цель не набрана после полного прохода
        """
        cap = self.config.max_inputs if max_inputs is None else max_inputs
        if cap < 1:
            raise ValueError(f"max_inputs must be >= 1, got {cap}")
        if validate_existence and unspent_checker is None:
            raise ValueError("validate_existence requires an unspent_checker")

        excluded = set(exclude)
        candidates: Generator[UnspentOutput, None, None] = (
            utxo for utxo in utxos if self._passes_filters(utxo, min_ada, excluded)
        )
        if validate_existence:
            candidates = self._iter_unspent(candidates, unspent_checker)

        remaining = {target.unit: target.required_quantity for target in targets}
        collected_qty = {target.unit: 0 for target in targets}
        collected_refs: dict[str, list[str]] = {target.unit: [] for target in targets}

        pool: list[UnspentOutput] = []
        required: list[UnspentOutput] = []
        padding: list[UnspentOutput] = []

        try:
            for utxo in candidates:
                pool.append(utxo)

                if not targets:
                    if len(pool) >= cap:
                        break
                    continue

                is_required = False
                for unit, still_needed in remaining.items():
                    if still_needed <= 0:
                        continue
                    quantity = utxo.quantity_of(unit)
                    if quantity > 0:
                        collected_qty[unit] += quantity
                        collected_refs[unit].append(utxo.ref)
                        remaining[unit] = still_needed - quantity
                        is_required = True

                if is_required:
                    required.append(utxo)
                else:
                    padding.append(utxo)
        finally:
            candidates.close()

        if not pool:
            raise InsufficientAdaError(f"No UTXO meets the minimum ADA floor of {min_ada} lovelace")

        shortfalls = [
            AssetShortfall(unit=target.unit, required=target.required_quantity, found=collected_qty[target.unit])
            for target in targets
            if remaining[target.unit] > 0
        ]
        if shortfalls:
            raise InsufficientAssetsError(shortfalls)

        if targets:
            padding_inputs = padding[: max(cap - len(required), 0)]
            selected_refs = {utxo.ref for utxo in required} | {utxo.ref for utxo in padding_inputs}
            # Входы в исходном порядке прохода
            selected = [utxo for utxo in pool if utxo.ref in selected_refs]
            if len(required) > cap:
                self.logger.warning(
                    "Required inputs (%d) exceed max_inputs (%d): selecting all required inputs",
                    len(required),
                    cap,
                )
        else:
            padding_inputs = []
            selected = pool[:cap]

        high_ada: list[UnspentOutput] = []
        if ada_filter_threshold is not None:
            high_ada = [utxo for utxo in pool if utxo.lovelace >= ada_filter_threshold]

        self.logger.info(
            "Selected %d input(s): %d required, %d padding (pool %d, cap %d)",
            len(selected),
            len(required),
            len(padding_inputs),
            len(pool),
            cap,
        )

        return UtxoSelectionResult(
            utxos=tuple(pool),
            high_ada_utxos=tuple(high_ada),
            selected=tuple(selected),
            required_inputs=tuple(required),
            padding_inputs=tuple(padding_inputs),
            collected=tuple(
                CollectedAsset(
                    unit=target.unit,
                    required=target.required_quantity,
                    collected=collected_qty[target.unit],
                    inputs=tuple(collected_refs[target.unit]),
                )
                for target in targets
            ),
        )

    def _passes_filters(self, utxo: UnspentOutput, min_ada: int, excluded: set[str]) -> bool:
        if utxo.lovelace < min_ada:
            return False
        if self._is_reserved(utxo.datum_tag):
            self.logger.debug("Skipping UTXO %s with reserved datum", utxo.ref)
            return False
        if utxo.ref in excluded:
            return False
        return True

    def _is_reserved(self, datum_tag: str | None) -> bool:
        if datum_tag is None:
            return False
        reserved = self.config.reserved_datum_tags
        return reserved is None or datum_tag in reserved

    def _iter_unspent(
        self, candidates: Iterable[UnspentOutput], checker: UnspentChecker
    ) -> Generator[UnspentOutput, None, None]:
        """
        Ленивая проверка существования: только UTXO, до которых дошёл проход.

        Проверки идут пачками по verification_workers (параллельно внутри пачки),
        результаты читаются в порядке входа. После остановки прохода новые
        проверки не запускаются. Ошибки checker не перехватываются.
        """

        def check(utxo: UnspentOutput) -> bool:
            return checker(utxo.tx_hash, utxo.output_index)

        workers = self.config.verification_workers
        if workers <= 1:
            for utxo in candidates:
                if check(utxo):
                    yield utxo
                else:
                    self.logger.info("Dropping spent UTXO %s", utxo.ref)
            return

        candidates = iter(candidates)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            while True:
                batch = list(islice(candidates, workers))
                if not batch:
                    return
                for utxo, is_unspent in zip(batch, executor.map(check, batch)):
                    if is_unspent:
                        yield utxo
                    else:
                        self.logger.info("Dropping spent UTXO %s", utxo.ref)
