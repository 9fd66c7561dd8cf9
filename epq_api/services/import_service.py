"""
Question import service.

Prepares raw question versions for storage: normalizes blank notation,
checks blank configuration and flags questions whose text repeats within
the batch.
"""

from typing import Any, Dict, List

from epq.answer import DiagnosticCollector
from epq.blanks import (
    BlankConfigurationReport,
    NormalizationResult,
    hash_question_text,
    normalize_question_blanks,
    normalize_question_text,
    process_question_for_import,
    validate_blank_configuration,
)

from ..models.domain import PreparedQuestion, QuestionImport
from ..core.config import Settings, settings as default_settings
from ..core.errors import BlankConfigurationError
from ..core.logging import get_context_logger

logger = get_context_logger(__name__)


class QuestionImportService:
    """
    Service for question import preparation.

    In strict mode a batch containing any blank configuration mismatch is
    rejected as a whole; otherwise mismatches are reported per question.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict

        logger.info(
            "QuestionImportService initialized",
            extra_data={"strict": strict}
        )

    async def normalize_text(self, question_text: str) -> NormalizationResult:
        """Normalize blank notation in one question text"""
        return normalize_question_blanks(question_text)

    async def check_configuration(
        self,
        question_text: str,
        blanks: List[Dict[str, Any]],
    ) -> BlankConfigurationReport:
        """Compare configured blanks against the blanks in a question text"""
        report = validate_blank_configuration(question_text, blanks)
        if not report.is_valid:
            logger.warning(
                "Blank configuration mismatch",
                extra_data=report.model_dump()
            )
        return report

    async def prepare_questions(self, questions: List[QuestionImport]) -> List[PreparedQuestion]:
        """
        Prepare a batch of question versions for import.

        Args:
            questions: Raw question versions

        Returns:
            One PreparedQuestion per input, in order

        Raises:
            BlankConfigurationError: In strict mode, if any question's
                blanks do not match its text
        """
        logger.info(
            "Preparing questions for import",
            extra_data={"num_questions": len(questions), "strict": self.strict}
        )

        prepared: List[PreparedQuestion] = []
        first_seen: Dict[str, int] = {}

        for index, question in enumerate(questions):
            collector = DiagnosticCollector()
            record = process_question_for_import(
                question.model_dump(exclude_none=True), observer=collector
            )

            text_hash = hash_question_text(record.get("question_text"))
            # Questions without text are never duplicates of each other
            duplicate_of = None
            if normalize_question_text(record.get("question_text")):
                duplicate_of = first_seen.setdefault(text_hash, index)

            blank_report = None
            if isinstance(record.get("blanks"), list):
                blank_report = validate_blank_configuration(
                    record.get("question_text"), record["blanks"]
                )

            prepared.append(
                PreparedQuestion(
                    question=record,
                    text_hash=text_hash,
                    blank_report=blank_report,
                    duplicate_of=None if duplicate_of == index else duplicate_of,
                    diagnostics=collector.diagnostics,
                )
            )

        mismatched = [
            {"index": index, **item.blank_report.model_dump()}
            for index, item in enumerate(prepared)
            if item.blank_report is not None and not item.blank_report.is_valid
        ]

        logger.info(
            "Prepared questions for import",
            extra_data={
                "num_questions": len(prepared),
                "num_mismatched": len(mismatched),
                "num_duplicates": sum(1 for p in prepared if p.duplicate_of is not None),
            }
        )

        if mismatched and self.strict:
            raise BlankConfigurationError(mismatched)

        return prepared


# Factory function
def get_import_service(settings: Settings | None = None) -> QuestionImportService:
    """Create import service instance"""
    return QuestionImportService(strict=(settings or default_settings).STRICT_IMPORTS)
