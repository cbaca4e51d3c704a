from datetime import datetime
from typing import List
import logging

logger = logging.getLogger(__name__)

RULE = "=" * 50


class ReportGenerator:
    """
    Formats generated interview questions as a plain-text report.
    """

    @staticmethod
    def generate_txt_report(questions: List[str], source_title: str, generated_at: datetime = None) -> str:
        """
        Args:
            questions: Interview questions, in display order.
            source_title: Title of the resume the questions were generated from.
            generated_at: Timestamp to print (defaults to now).

        Returns:
            Formatted report text.
        """
        generated_at = generated_at or datetime.now()
        lines = [
            "RESUME INTERVIEW QUESTIONS",
            RULE,
            f"Generated on: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
            f"Source:       {source_title}",
            f"Questions:    {len(questions)}",
            RULE,
            "",
        ]

        if not questions:
            lines.append("No questions generated.")
        else:
            lines.extend(f"{idx}. {question}" for idx, question in enumerate(questions, 1))

        lines.append("")
        return "\n".join(lines)
