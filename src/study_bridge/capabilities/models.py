"""Input/output contracts for every capability.

Field names are snake_case in Python and camelCase on the wire
(``humanized_text`` <-> ``humanizedText``); both spellings validate.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CapabilityInput(CamelModel):
    """Common routing fields accepted by every capability."""

    provider: str | None = None
    model: str | None = None


# -- tutor / summarizer / humanizer ---------------------------------------


class TutorInput(CapabilityInput):
    question: str
    course_material: str | None = None


class TutorOutput(CamelModel):
    answer: str


class SummarizerInput(CapabilityInput):
    text: str


class SummarizerOutput(CamelModel):
    summary: str


class HumanizerInput(CapabilityInput):
    text: str
    tone: Literal["friendly", "professional", "inspiring"] = "professional"


class HumanizerOutput(CamelModel):
    humanized_text: str


# -- memory & writing -----------------------------------------------------


class MnemonicsInput(CapabilityInput):
    terms: str
    style: Literal["Acronym", "Story", "Rhyme", "Sentence"] = "Acronym"


class MnemonicsOutput(CamelModel):
    mnemonic: str
    explanation: str


class CreativeWriterInput(CapabilityInput):
    type: Literal["Essay", "Poem", "Story", "Letter", "Article", "Report", "Speech"]
    topic: str
    tone: Literal["Academic", "Creative", "Professional", "Casual"] = "Academic"
    additional_details: str | None = None


class CreativeWriterOutput(CamelModel):
    title: str
    content: str


# -- career & portfolio ---------------------------------------------------


class CareerNavigatorInput(CapabilityInput):
    subjects: list[str]
    interests: str
    goal: str | None = None


class CareerPath(CamelModel):
    title: str
    description: str
    milestones: list[str]


class CareerNavigatorOutput(CamelModel):
    analysis: str
    suggested_careers: list[CareerPath]


class Achievement(CamelModel):
    title: str
    description: str


class PortfolioInput(CapabilityInput):
    subjects: list[str]
    achievements: list[Achievement]
    target_role: str | None = None


class AcademicHighlight(CamelModel):
    subject: str
    impact: str


class ProjectShowcase(CamelModel):
    name: str
    skills_used: str
    summary: str


class PortfolioOutput(CamelModel):
    professional_summary: str
    core_skills: list[str]
    academic_highlights: list[AcademicHighlight]
    project_showcase: list[ProjectShowcase]


# -- code & language ------------------------------------------------------


class CodeMentorInput(CapabilityInput):
    code_snippet: str
    language: str
    query: str


class CodeMentorOutput(CamelModel):
    explanation: str
    optimized_code: str
    tips: list[str]


class DictionaryInput(CapabilityInput):
    word: str
    target_language: str


class WordForm(CamelModel):
    form: str
    meaning: str


class DictionaryOutput(CamelModel):
    original_word: str
    translation: str
    pronunciation: str | None = None
    definition: str
    part_of_speech: str
    examples: list[str]
    synonyms: list[str]
    antonyms: list[str]
    word_forms: list[WordForm]


# -- study material -------------------------------------------------------


class FlashcardsInput(CapabilityInput):
    text: str
    count: int = Field(ge=1, le=10)


class Flashcard(CamelModel):
    front: str
    back: str


class FlashcardsOutput(CamelModel):
    cards: list[Flashcard]


class QuizInput(CapabilityInput):
    source_text: str
    num_questions: int = Field(ge=1, le=10)


class QuizQuestion(CamelModel):
    question_text: str
    options: list[str] = Field(min_length=4, max_length=4)
    correct_answer_index: int = Field(ge=0, le=3)
    explanation: str


class QuizOutput(CamelModel):
    questions: list[QuizQuestion]


class LessonPlannerInput(CapabilityInput):
    topic: str
    grade_level: str
    duration: int = Field(ge=15, le=180)


class LessonActivity(CamelModel):
    time: str
    activity: str
    description: str


class LessonPlannerOutput(CamelModel):
    title: str
    objectives: list[str]
    materials_needed: list[str]
    schedule: list[LessonActivity]
    assessment: str


class PresentationInput(CapabilityInput):
    topic: str
    target_audience: str
    slide_count: int = Field(ge=3, le=15)


class Slide(CamelModel):
    title: str
    content: list[str]
    visual_suggestion: str


class PresentationOutput(CamelModel):
    title: str
    slides: list[Slide]


class ProblemSolverInput(CapabilityInput):
    description: str


class ProblemSolverOutput(CamelModel):
    solution: str
    steps: list[str]
    key_concepts: list[str]


class ResearcherInput(CapabilityInput):
    topic: str
    depth: Literal["concise", "detailed", "encyclopedic"] = "detailed"


class ResearchSection(CamelModel):
    title: str
    content: str


class ResearcherOutput(CamelModel):
    title: str
    sections: list[ResearchSection]
    references: list[str]
