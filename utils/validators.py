import re
from typing import Optional

class LoanPeriodValidator:
    """Parses the loan period typed at the prompt.

    Only whole numbers are accepted. Zero and negative values are valid and
    produce a due date of today or in the past.
    """

    _INT_RE = re.compile(r"^[+-]?\d+$")

    @staticmethod
    def is_valid_loan_period(raw: Optional[str]) -> bool:
        if raw is None:
            return False
        return bool(LoanPeriodValidator._INT_RE.match(raw.strip()))

    @staticmethod
    def parse_loan_period(raw: Optional[str]) -> int:
        if not LoanPeriodValidator.is_valid_loan_period(raw):
            raise ValueError(f"Invalid loan period {raw!r}: enter a whole number of days.")
        return int(raw.strip())

class TextValidator:
    """Basic checks for names, titles and authors."""

    @staticmethod
    def _is_non_blank(text: Optional[str]) -> bool:
        return text is not None and bool(text.strip())

    @staticmethod
    def validate_name(name: Optional[str]) -> bool:
        return TextValidator._is_non_blank(name)

    @staticmethod
    def validate_title(title: Optional[str]) -> bool:
        return TextValidator._is_non_blank(title)

    @staticmethod
    def validate_author(author: Optional[str]) -> bool:
        # must not be digits only
        if not TextValidator._is_non_blank(author):
            return False
        return not author.strip().isdigit()
