"""
Batch QA Processor
Runs the width check over a batch of translations
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence

from qa.models import StringConstraint, Translation, Verdict
from qa.pixel_calculator import PixelWidthCalculator
from qa.width_evaluator import WidthEvaluator

logger = logging.getLogger(__name__)

ConstraintResolver = Callable[[int], Awaitable[Optional[StringConstraint]]]


class BatchQAProcessor:
    """
    Produces exactly one Verdict per submitted translation.

    Constraint lookups run concurrently (bounded by ``concurrency``). A lookup
    that raises is logged and treated as unconstrained; it never affects the
    other translations of the batch.
    """

    def __init__(
        self,
        calculator: Optional[PixelWidthCalculator] = None,
        evaluator: Optional[WidthEvaluator] = None,
        concurrency: int = 5,
        log: Optional[logging.Logger] = None,
    ):
        self.calculator = calculator or PixelWidthCalculator()
        self.evaluator = evaluator or WidthEvaluator()
        self.concurrency = max(1, concurrency)
        self.log = log or logger

    async def process(
        self,
        translations: Sequence[Translation],
        resolve_constraint: ConstraintResolver,
        target_language: Optional[str] = None,
    ) -> List[Verdict]:
        """
        Check every translation of the batch.

        Args:
            translations: Translations to check
            resolve_constraint: Async lookup ``string_id -> StringConstraint | None``
            target_language: Language code, for logging only

        Returns:
            Verdicts in input order
        """
        self.log.info(
            f"[QA] Processing {len(translations)} translations ({target_language or 'unknown language'})"
        )

        semaphore = asyncio.Semaphore(self.concurrency)

        async def check(translation: Translation) -> Verdict:
            async with semaphore:
                constraint = await self._resolve(resolve_constraint, translation)
            return self.check_translation(translation, constraint)

        verdicts = list(await asyncio.gather(*(check(t) for t in translations)))

        passed_count = sum(1 for v in verdicts if v.passed)
        failed_count = len(verdicts) - passed_count
        self.log.info(f"[QA] Completed: {passed_count} passed, {failed_count} failed")

        return verdicts

    def check_translation(
        self,
        translation: Translation,
        constraint: Optional[StringConstraint]
    ) -> Verdict:
        if constraint is None or not constraint.is_constrained:
            width = self.calculator.measure(translation.text)
            max_width = None
        else:
            width = self.calculator.measure(translation.text, constraint.font, constraint.font_size)
            max_width = constraint.max_width_pixels

        result = self.evaluator.evaluate(width, max_width)

        if not result.passed:
            self.log.warning(
                f"[QA] Translation {translation.id} failed: {result.width}px exceeds "
                f"{result.max_width}px by {result.excess}px"
            )

        return Verdict(
            translation_id=translation.id,
            passed=result.passed,
            message=result.message,
        )

    async def _resolve(
        self,
        resolve_constraint: ConstraintResolver,
        translation: Translation
    ) -> Optional[StringConstraint]:
        try:
            return await resolve_constraint(translation.source_string_id)
        except Exception as e:
            self.log.warning(
                f"[QA] Constraint lookup failed for string {translation.source_string_id} "
                f"(translation {translation.id}): {e}"
            )
            return None
