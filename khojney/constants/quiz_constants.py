"""Quiz-related constants shared across UI and core layers."""

DEFAULT_TIME_PER_QUESTION_SECONDS: int = 15
DEFAULT_AUTO_ADVANCE_DELAY_SECONDS: float | None = 1.5
TIME_WARNING_WINDOW_SECONDS: int = 5
MIN_OPTIONS_PER_QUESTION: int = 2
MAX_OPTIONS_PER_QUESTION: int = 8

DEFAULT_USER_ID: str = "guest"
DEFAULT_QUIZ_MODE: str = "Practice"
QUIZ_MODES: tuple[str, ...] = ("Practice", "Exam", "Speed Run")
DIFFICULTY_LEVELS: tuple[str, ...] = ("easy", "medium", "hard")
QUESTION_LIMIT_CHOICES: tuple[int, ...] = (5, 10, 20)

FEATURED_CATEGORY_SLUGS: tuple[str, ...] = ("general-knowledge", "science")
