"""
Text Length QA Module

Pixel-width QA check for Crowdin translations.

Modules:
- models: Translation, StringConstraint, Verdict
- pixel_calculator: Measure rendered text width
- width_evaluator: Compare width against a maximum
- string_metadata_client: Fetch per-string width constraints
- batch_processor: Run the check over a batch

Usage:
    from qa import BatchQAProcessor, StringMetadataClient

    client = StringMetadataClient(base_url)
    processor = BatchQAProcessor()
    verdicts = await processor.process(
        translations,
        lambda string_id: client.get_constraint(string_id, project_id, jwt_token),
    )
"""

from qa.models import StringConstraint, Translation, Verdict
from qa.pixel_calculator import PixelWidthCalculator
from qa.width_evaluator import WidthCheck, WidthEvaluator
from qa.string_metadata_client import ConstraintParser, StringMetadataClient
from qa.batch_processor import BatchQAProcessor

__all__ = [
    'Translation',
    'StringConstraint',
    'Verdict',
    'PixelWidthCalculator',
    'WidthCheck',
    'WidthEvaluator',
    'ConstraintParser',
    'StringMetadataClient',
    'BatchQAProcessor',
]
