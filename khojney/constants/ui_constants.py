"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "Khojney Quiz"
RESULTS_URL_PLACEHOLDER: str = "http://127.0.0.1:8000/results/"

CATEGORY_PANEL_TITLE: str = "Choose a category"
START_BUTTON_TEXT: str = "Start Quiz"
ALL_DIFFICULTIES_LABEL: str = "Any difficulty"
ALL_QUESTIONS_LABEL: str = "All questions"
FEATURED_MARKER: str = "★"

NEXT_QUESTION_BUTTON: str = "Next Question"
FINISH_QUIZ_BUTTON: str = "Finish Quiz"
QUIT_BUTTON: str = "Quit"
TIME_UP_MESSAGE: str = "Time's up!"
QUESTION_COUNTER_TEMPLATE: str = "Question {current} of {total}"
REMAINING_TEMPLATE: str = "{seconds}s"

RETRY_SAVE_BUTTON: str = "Retry saving"
BACK_TO_CATEGORIES_BUTTON: str = "Back to categories"
SAVE_FAILED_MESSAGE: str = "Your score is ready, but saving it failed. You can retry saving."
SAVE_OK_MESSAGE: str = "Result saved."
NO_CATEGORIES_MESSAGE: str = "No question categories found."
QUIT_CONFIRM_MESSAGE: str = "Quit this attempt? Your progress will be lost."
