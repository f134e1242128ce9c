"""
Data models for the TrainKit generation pipeline.

Wire format (upstream JSON, HTTP bodies, packaged data assets) is camelCase;
Python attributes are snake_case.  Both spellings are accepted on input.

The Pydantic models enforce *shape* only (types, required fields, positive
durations).  Count ranges are requested from the model in the prompt and
checked afterwards as guardrail warnings — see guardrails.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ─── Contracted count ranges ────────────────────────────────────────────────

OBJECTIVES_RANGE   = (3, 5)
MODULES_RANGE      = (4, 6)
ENHANCEMENTS_RANGE = (3, 4)

# what the live Kit Generator asks for
LIVE_SLIDES_RANGE     = (8, 12)
LIVE_FLASHCARDS_RANGE = (10, 15)

# what any kit (live or fallback) is accepted with
KIT_SLIDES_RANGE     = (5, 12)
KIT_FLASHCARDS_RANGE = (5, 15)


# ─── Enumerations ────────────────────────────────────────────────────────────

class GenerationSource(str, Enum):
    """Where a plan or kit came from."""
    LIVE     = "live"       # completion endpoint
    FALLBACK = "fallback"   # curated table or keyword template


# ─── Caller input ────────────────────────────────────────────────────────────

@dataclass
class TrainingRequest:
    """Raw wizard input — nothing inferred yet."""
    industry:      str                    # e.g. "Healthcare"
    topic:         str                    # e.g. "Patient Safety"
    document_text: Optional[str] = None   # text already extracted from an upload


# ─── Plan ────────────────────────────────────────────────────────────────────

class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class TrainingModule(_WireModel):
    title:            str
    description:      str
    duration_minutes: int = Field(alias="durationMinutes", gt=0)


class TrainingPlan(_WireModel):
    """Negotiated scope of one training session (output of Plan Generator)."""
    title:                  str = Field(min_length=1)
    target_audience:        str = Field(alias="targetAudience", min_length=1)
    learning_objectives:    list[str] = Field(alias="learningObjectives")
    modules:                list[TrainingModule]
    suggested_enhancements: list[str] = Field(
        default_factory=list, alias="suggestedEnhancements",
    )

    @property
    def total_duration_minutes(self) -> int:
        return sum(m.duration_minutes for m in self.modules)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


# ─── Kit ─────────────────────────────────────────────────────────────────────

class Slide(_WireModel):
    title:              str
    content:            list[str]
    speaker_notes:      str = Field(default="", alias="speakerNotes")
    visual_search_term: str = Field(default="", alias="visualSearchTerm")


class Flashcard(_WireModel):
    front: str
    back:  str


class GeneratedKit(_WireModel):
    """Deliverable materials derived from exactly one TrainingPlan."""
    slides:                     list[Slide]
    flashcards:                 list[Flashcard]
    handout_markdown:           str = Field(alias="handoutMarkdown")
    facilitator_guide_markdown: str = Field(alias="facilitatorGuideMarkdown")
    background_image_prompt:    str = Field(default="", alias="backgroundImagePrompt")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)
