"""Static metadata describing Khojney."""

APP_NAME = "Khojney"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "Khojney is a timed quiz trainer for exam preparation. Pick a category, answer "
    "each question before the countdown runs out, and review your score afterwards."
)

HELP_TEXT = (
    "Each question has a fixed time budget. Click an option or press its number key "
    "(1, 2, 3, ...) to lock in your answer; once locked it cannot be changed. "
    "If time runs out the question counts as unanswered. Press Enter or Space to go on.\n\n"
    "Question banks are plain .txt files, one per category:\n\n"
    "# General Knowledge\n"
    "Q: What is $2 + 2$?\n"
    "A: 3\nB: 4\nC: 5\n"
    "CORRECT: B\nDIFFICULTY: easy\nEXPLANATION: Two plus two is four."
)
