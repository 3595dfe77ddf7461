"""
Width Evaluator
Compares a measured width with a string's maximum allowed width
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class WidthCheck:
    passed: bool
    width: int
    max_width: Optional[int] = None
    message: Optional[str] = None

    @property
    def excess(self) -> int:
        if self.max_width is None:
            return 0
        return max(0, self.width - self.max_width)


class WidthEvaluator:
    """
    Pass/fail rule for translation width.

    An unknown maximum never blocks a translation.
    """

    MESSAGE_TEMPLATE = (
        "Translation text width ({width}px) exceeds maximum allowed width "
        "({max_width}px) by {excess} pixels"
    )

    def evaluate(self, width: int, max_width: Optional[int]) -> WidthCheck:
        if max_width is None or width <= max_width:
            return WidthCheck(passed=True, width=width, max_width=max_width)

        excess = width - max_width
        return WidthCheck(
            passed=False,
            width=width,
            max_width=max_width,
            message=self.MESSAGE_TEMPLATE.format(
                width=width, max_width=max_width, excess=excess
            ),
        )
