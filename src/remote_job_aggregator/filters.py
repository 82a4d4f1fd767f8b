import re
import unicodedata


class BeginnerFilter:
    """
    Keeps job postings that look approachable for beginners.

    A posting passes when it mentions any beginner keyword, or when it
    mentions no seniority keyword at all: postings without seniority
    signals are included by default.

    Handles Unicode stylized text by normalizing to NFKD form before matching.
    """

    BEGINNER_KEYWORDS = [
        "entry",
        "junior",
        "beginner",
        "entry-level",
        "trainee",
        "associate",
        "intern",
        "no experience",
        "new grad",
        "graduate",
        "starter",
        "assistant",
        "coordinator",
    ]

    SENIOR_KEYWORDS = [
        "senior",
        "lead",
        "principal",
        "director",
        "manager",
        "head of",
        "chief",
        "5+ years",
        "3+ years",
        "experienced",
        "expert",
        "architect",
    ]

    def __init__(self) -> None:
        # Beginner terms also match plurals and "-ship" forms ("internship", "graduates")
        self.beginner_regex = self._compile(self.BEGINNER_KEYWORDS, suffix=r"(?:s|ship|ships)?")
        self.senior_regex = self._compile(self.SENIOR_KEYWORDS)

    @staticmethod
    def _compile(keywords: list[str], suffix: str = "") -> re.Pattern[str]:
        # Trailing lookahead instead of \b so "5+ years" can match
        return re.compile(
            r"\b(?:" + "|".join(re.escape(kw) for kw in keywords) + r")" + suffix + r"(?!\w)",
            re.IGNORECASE,
        )

    @staticmethod
    def normalize_text(text: str) -> str:
        """Normalize Unicode text to NFKD form so stylized characters match ASCII keywords."""
        return unicodedata.normalize("NFKD", text)

    def has_beginner_keyword(self, text: str) -> bool:
        if not text:
            return False
        return bool(self.beginner_regex.search(self.normalize_text(text)))

    def has_senior_keyword(self, text: str) -> bool:
        if not text:
            return False
        return bool(self.senior_regex.search(self.normalize_text(text)))

    def is_beginner_friendly(self, text: str) -> bool:
        """Check whether the combined posting text passes the beginner filter."""
        if not text:
            return True

        return self.has_beginner_keyword(text) or not self.has_senior_keyword(text)
