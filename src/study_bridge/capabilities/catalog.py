"""Capability catalogue: contracts, prompt files and prompt variables.

Adding a capability:

1. Define input/output models in models.py
2. Add prompts/<name>.yaml
3. Add a fallback shape to llm/shapes.py
4. Register a CapabilityDefinition below
"""

import json
from collections.abc import Callable
from dataclasses import dataclass

from pydantic import BaseModel

from study_bridge.capabilities import models as m

VariablesFn = Callable[[m.CapabilityInput], dict[str, str]]

_ROUTING_FIELDS = frozenset({"provider", "model"})


def default_variables(data: m.CapabilityInput) -> dict[str, str]:
    """Every input field as text; None becomes an empty string."""
    return {
        name: "" if value is None else str(value)
        for name, value in data.model_dump(exclude=_ROUTING_FIELDS).items()
    }


@dataclass(frozen=True)
class CapabilityDefinition:
    """One AI-assisted feature.

    Attributes:
        name: Identifier used by the API and the shape registry.
        input_model: Validates caller payloads.
        output_model: Declared output contract.
        prompt_file: YAML template, relative to the prompts directory.
        variables: Maps a validated input to template variables.
    """

    name: str
    input_model: type[m.CapabilityInput]
    output_model: type[BaseModel]
    prompt_file: str
    variables: VariablesFn = default_variables


def _tutor_variables(data: m.CapabilityInput) -> dict[str, str]:
    assert isinstance(data, m.TutorInput)
    context = f"Context: {data.course_material}\n\n" if data.course_material else ""
    return {"context": context, "question": data.question}


def _career_variables(data: m.CapabilityInput) -> dict[str, str]:
    assert isinstance(data, m.CareerNavigatorInput)
    return {
        "subjects": ", ".join(data.subjects),
        "interests": data.interests,
        "goal": data.goal or "None",
    }


def _portfolio_variables(data: m.CapabilityInput) -> dict[str, str]:
    assert isinstance(data, m.PortfolioInput)
    achievements = [a.model_dump() for a in data.achievements]
    return {
        "target_role": data.target_role or "General",
        "subjects": ", ".join(data.subjects),
        "achievements": json.dumps(achievements, ensure_ascii=False),
    }


def _definition(
    name: str,
    input_model: type[m.CapabilityInput],
    output_model: type[BaseModel],
    variables: VariablesFn = default_variables,
) -> CapabilityDefinition:
    return CapabilityDefinition(
        name=name,
        input_model=input_model,
        output_model=output_model,
        prompt_file=f"{name}.yaml",
        variables=variables,
    )


CAPABILITIES: dict[str, CapabilityDefinition] = {
    d.name: d
    for d in (
        _definition("tutor", m.TutorInput, m.TutorOutput, _tutor_variables),
        _definition("summarizer", m.SummarizerInput, m.SummarizerOutput),
        _definition("humanizer", m.HumanizerInput, m.HumanizerOutput),
        _definition("mnemonics", m.MnemonicsInput, m.MnemonicsOutput),
        _definition(
            "creative_writer", m.CreativeWriterInput, m.CreativeWriterOutput
        ),
        _definition(
            "career_navigator",
            m.CareerNavigatorInput,
            m.CareerNavigatorOutput,
            _career_variables,
        ),
        _definition("code_mentor", m.CodeMentorInput, m.CodeMentorOutput),
        _definition("dictionary", m.DictionaryInput, m.DictionaryOutput),
        _definition("flashcards", m.FlashcardsInput, m.FlashcardsOutput),
        _definition("quiz", m.QuizInput, m.QuizOutput),
        _definition("lesson_planner", m.LessonPlannerInput, m.LessonPlannerOutput),
        _definition("presentation", m.PresentationInput, m.PresentationOutput),
        _definition("problem_solver", m.ProblemSolverInput, m.ProblemSolverOutput),
        _definition("researcher", m.ResearcherInput, m.ResearcherOutput),
        _definition(
            "portfolio", m.PortfolioInput, m.PortfolioOutput, _portfolio_variables
        ),
    )
}
