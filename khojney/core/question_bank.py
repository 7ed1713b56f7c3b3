"""Loading question banks from human-friendly text files.

Each category lives in its own ``<slug>.txt`` file. Blocks are separated by
blank lines or ``---``:

    # General Knowledge
    Q: Question text (supports markdown + LaTeX). Additional lines until the
       next marker are treated as part of the question.
    A: First option text
    B: Second option text
    C: Third option text      (2 to 8 options, letters A-H)
    CORRECT: B
    DIFFICULTY: easy          (optional)
    EXPLANATION: Why B is right. May continue on following lines. (optional)
    ID: gk-001                (optional, defaults to "<slug>-<n>")

The first ``#`` line before any block names the category. Other ``#`` lines
between blocks are comments; inside a block they are ordinary text, so a
markdown heading or "#1" in a question is kept.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable
from pathlib import Path

from khojney.constants.quiz_constants import MAX_OPTIONS_PER_QUESTION
from khojney.core.models import Category, Option, Question, QuestionValidationError
from khojney.core.shuffle import shuffled

logger = logging.getLogger(__name__)

_OPTION_LETTERS = "ABCDEFGH"[:MAX_OPTIONS_PER_QUESTION]


class QuestionBankError(Exception):
    """Raised when a question bank file cannot be parsed."""


class UnknownCategoryError(KeyError):
    """Raised when a category slug is not part of the bank."""


class QuestionBank:
    """All categories available to the quiz client."""

    def __init__(self, categories: Iterable[Category] = ()) -> None:
        self._categories: dict[str, Category] = {}
        for category in categories:
            self.add(category)

    def add(self, category: Category) -> None:
        if category.slug in self._categories:
            raise QuestionBankError(f"Duplicate category '{category.slug}'.")
        self._categories[category.slug] = category

    def categories(self) -> list[Category]:
        """Featured categories first, then alphabetical by name."""
        return sorted(self._categories.values(), key=lambda c: (not c.featured, c.name.lower()))

    def get_category(self, slug: str) -> Category:
        try:
            return self._categories[slug]
        except KeyError:
            raise UnknownCategoryError(slug) from None

    def select_questions(
        self,
        slug: str,
        limit: int | None = None,
        difficulty: str | None = None,
        rng: random.Random | None = None,
    ) -> list[Question]:
        """Pick the questions for one attempt.

        Filters by difficulty, then draws ``limit`` questions at random when
        the category holds more than that.
        """
        questions = list(self.get_category(slug).questions)
        if difficulty:
            wanted = difficulty.lower()
            questions = [q for q in questions if (q.difficulty or "").lower() == wanted]
        if limit is not None and len(questions) > limit:
            questions = shuffled(questions, rng)[:limit]
        return questions

    def __len__(self) -> int:
        return len(self._categories)


def load_question_bank(directory: Path, featured: Iterable[str] = ()) -> QuestionBank:
    featured_slugs = set(featured)
    bank = QuestionBank()
    for path in sorted(directory.glob("*.txt")):
        bank.add(load_category(path, featured=path.stem in featured_slugs))
    logger.info("Loaded %d categories from %s", len(bank), directory)
    return bank


def load_category(file_path: Path, featured: bool = False) -> Category:
    text = file_path.read_text(encoding="utf-8")
    slug = file_path.stem
    name, blocks = _split_blocks(text)
    if not blocks:
        raise QuestionBankError(f"{file_path.name}: no questions found.")
    questions: list[Question] = []
    for number, block in enumerate(blocks, start=1):
        try:
            questions.append(_parse_block(block, default_id=f"{slug}-{number}"))
        except (QuestionBankError, QuestionValidationError) as exc:
            raise QuestionBankError(f"{file_path.name}, question {number}: {exc}") from exc
    ids = [q.id for q in questions]
    if len(set(ids)) != len(ids):
        raise QuestionBankError(f"{file_path.name}: question ids must be unique.")
    return Category(
        slug=slug,
        name=name or slug.replace("-", " ").title(),
        questions=tuple(questions),
        featured=featured,
    )


def _split_blocks(text: str) -> tuple[str | None, list[str]]:
    name: str | None = None
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped.startswith("#") and not current_block:
            if name is None and not blocks and not current_block:
                name = stripped.lstrip("#").strip() or None
            continue
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())
    return name, [block for block in blocks if block]


def _parse_block(block: str, default_id: str) -> Question:
    question_lines: list[str] = []
    explanation_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letter: str | None = None
    difficulty: str | None = None
    question_id = default_id
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        if upper.startswith("DIFFICULTY:"):
            difficulty = line.split(":", 1)[1].strip().lower() or None
            current_section = None
            continue

        if upper.startswith("EXPLANATION:"):
            explanation_lines = [line.split(":", 1)[1].strip()]
            current_section = "EXPLANATION"
            continue

        if upper.startswith("ID:"):
            question_id = line.split(":", 1)[1].strip()
            if not question_id:
                raise QuestionBankError("ID must not be empty.")
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in _OPTION_LETTERS and line[1] == ":":
            letter = line[0].upper()
            if letter in options:
                raise QuestionBankError(f"Option {letter} is defined twice.")
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section == "EXPLANATION":
            explanation_lines.append(line)
        elif current_section in options:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuestionBankError(f"Encountered text outside of a known section: '{line}'.")

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuestionBankError("Question text missing (Q: ...)")

    letters = [letter for letter in _OPTION_LETTERS if letter in options]
    if letters != list(_OPTION_LETTERS[: len(letters)]):
        raise QuestionBankError("Options must use consecutive letters starting at A.")
    if any(not options[letter].strip() for letter in letters):
        raise QuestionBankError("Option text cannot be empty.")

    if correct_letter is None:
        raise QuestionBankError("CORRECT is required.")
    if correct_letter not in letters:
        raise QuestionBankError(f"CORRECT must be one of {', '.join(letters)}.")

    return Question(
        id=question_id,
        text=question_text,
        options=tuple(
            Option(
                id=f"{question_id}:{letter}",
                text=options[letter].strip(),
                is_correct=letter == correct_letter,
            )
            for letter in letters
        ),
        explanation="\n".join(explanation_lines).strip(),
        difficulty=difficulty,
    )
