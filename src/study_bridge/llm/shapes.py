"""Per-capability fallback shapes for unstructured provider replies.

Each capability owns one adapter that turns raw text into an object
matching its output model. Adapters always return a complete shape;
the tier only changes placeholder contents (the rescue tier uses
cheaper, mostly empty stubs).

FALLBACK_SHAPES maps capability names to adapters. The normalizer's
superset (used when the caller names no capability) is the merge of
every adapter, filtered to the tier's key list below.
"""

from typing import Any

from study_bridge.llm.schemas import NormalizationTier, ShapeAdapter

BRIDGE_EXPLANATION = "Logic processed via direct bridge."
GENERATED_TITLE = "AI Generated Response"

FULL = NormalizationTier.FULL


def tutor(text: str, tier: NormalizationTier) -> dict[str, Any]:
    return {"answer": text}


def summarizer(text: str, tier: NormalizationTier) -> dict[str, Any]:
    return {"summary": text}


def humanizer(text: str, tier: NormalizationTier) -> dict[str, Any]:
    return {"humanizedText": text}


def mnemonics(text: str, tier: NormalizationTier) -> dict[str, Any]:
    return {"mnemonic": text, "explanation": BRIDGE_EXPLANATION}


def creative_writer(text: str, tier: NormalizationTier) -> dict[str, Any]:
    return {"title": GENERATED_TITLE, "content": text}


def career_navigator(text: str, tier: NormalizationTier) -> dict[str, Any]:
    careers: list[dict[str, Any]] = []
    if tier == FULL:
        careers = [
            {"title": "Strategic Path", "description": text, "milestones": ["Research"]}
        ]
    return {"analysis": text, "suggestedCareers": careers}


def code_mentor(text: str, tier: NormalizationTier) -> dict[str, Any]:
    return {"explanation": BRIDGE_EXPLANATION, "optimizedCode": text, "tips": []}


def dictionary(text: str, tier: NormalizationTier) -> dict[str, Any]:
    return {
        "originalWord": "",
        "translation": "AI Translation",
        "definition": text,
        "partOfSpeech": "",
        "examples": [],
        "synonyms": [],
        "antonyms": [],
        "wordForms": [],
    }


def flashcards(text: str, tier: NormalizationTier) -> dict[str, Any]:
    cards = [{"front": "Inquiry", "back": text}] if tier == FULL else []
    return {"cards": cards}


def quiz(text: str, tier: NormalizationTier) -> dict[str, Any]:
    questions: list[dict[str, Any]] = []
    if tier == FULL:
        questions = [
            {
                "questionText": "Contextual check",
                "options": ["A", "B", "C", "D"],
                "correctAnswerIndex": 0,
                "explanation": text,
            }
        ]
    return {"questions": questions}


def lesson_planner(text: str, tier: NormalizationTier) -> dict[str, Any]:
    if tier == FULL:
        return {
            "title": GENERATED_TITLE,
            "objectives": ["Analyze core concepts"],
            "materialsNeeded": ["Notes"],
            "schedule": [
                {"time": "0-10m", "activity": "Introduction", "description": text}
            ],
            "assessment": "Reflective discussion",
        }
    return {
        "title": GENERATED_TITLE,
        "objectives": ["Analyze concepts"],
        "materialsNeeded": ["Textbook"],
        "schedule": [{"time": "0-10m", "activity": "Overview", "description": text}],
        "assessment": "Evaluation",
    }


def presentation(text: str, tier: NormalizationTier) -> dict[str, Any]:
    slides: list[dict[str, Any]] = []
    if tier == FULL:
        slides = [
            {
                "title": "Key Concepts",
                "content": [text],
                "visualSuggestion": "Relevant diagram",
            }
        ]
    return {"title": GENERATED_TITLE, "slides": slides}


def problem_solver(text: str, tier: NormalizationTier) -> dict[str, Any]:
    if tier == FULL:
        return {"solution": text, "steps": [text], "keyConcepts": ["Science", "Logic"]}
    return {"solution": text, "steps": [], "keyConcepts": []}


def researcher(text: str, tier: NormalizationTier) -> dict[str, Any]:
    if tier == FULL:
        return {
            "title": GENERATED_TITLE,
            "sections": [{"title": "Overview", "content": text}],
            "references": ["Academic Study"],
        }
    return {
        "title": GENERATED_TITLE,
        "sections": [{"title": "Summary", "content": text}],
        "references": ["Rescue Link"],
    }


def portfolio(text: str, tier: NormalizationTier) -> dict[str, Any]:
    return {
        "professionalSummary": text,
        "coreSkills": [],
        "academicHighlights": [],
        "projectShowcase": [],
    }


FALLBACK_SHAPES: dict[str, ShapeAdapter] = {
    "tutor": tutor,
    "summarizer": summarizer,
    "humanizer": humanizer,
    "mnemonics": mnemonics,
    "creative_writer": creative_writer,
    "career_navigator": career_navigator,
    "code_mentor": code_mentor,
    "dictionary": dictionary,
    "flashcards": flashcards,
    "quiz": quiz,
    "lesson_planner": lesson_planner,
    "presentation": presentation,
    "problem_solver": problem_solver,
    "researcher": researcher,
    "portfolio": portfolio,
}

# Keys kept in the superset for each tier. Anything an adapter emits
# outside these lists only appears when that capability is named.
SUPERSET_KEYS: dict[NormalizationTier, frozenset[str]] = {
    NormalizationTier.FULL: frozenset(
        {
            "answer",
            "summary",
            "humanizedText",
            "mnemonic",
            "explanation",
            "content",
            "title",
            "analysis",
            "solution",
            "professionalSummary",
            "definition",
            "translation",
            "originalWord",
            "partOfSpeech",
            "optimizedCode",
            "tips",
            "coreSkills",
            "academicHighlights",
            "projectShowcase",
            "sections",
            "references",
            "suggestedCareers",
            "cards",
            "questions",
            "slides",
            "steps",
            "keyConcepts",
            "objectives",
            "materialsNeeded",
            "schedule",
            "assessment",
            "examples",
            "synonyms",
            "antonyms",
            "wordForms",
        }
    ),
    NormalizationTier.REDUCED: frozenset(
        {
            "answer",
            "summary",
            "humanizedText",
            "mnemonic",
            "content",
            "analysis",
            "solution",
            "definition",
            "sections",
            "references",
            "suggestedCareers",
            "cards",
            "questions",
            "slides",
            "steps",
            "keyConcepts",
            "objectives",
            "materialsNeeded",
            "schedule",
            "assessment",
        }
    ),
}
