"""
fallback_content.py – Canned TrainingPlan / GeneratedKit content (no LLM needed).

Keeps the UI renderable when live generation is skipped: missing credentials,
FORCE_MOCK_MODE, or an explicit request from the caller.

Lookup order for a kit:
  1. Curated table — exact industry, then exact topic   (data/curated_kits.json)
  2. Keyword-theme template — topic and industry matched case-insensitively
     by substring against known theme keys, default vocabulary otherwise
     (data/themes.json)

Every (industry, topic) pair has an answer, and the same pair always gives
the same answer: no dates, no randomness, no network.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from trainkit.models import GeneratedKit, TrainingPlan

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).parent / "data"

GENERIC_SLIDE_COUNT     = 6
GENERIC_FLASHCARD_COUNT = 5


# ── Data assets ───────────────────────────────────────────────────────────────

@lru_cache(maxsize=None)
def _load_json(name: str) -> dict:
    with open(_DATA_DIR / name, encoding="utf-8") as fh:
        return json.load(fh)


def load_curated_kits() -> dict[str, dict[str, dict]]:
    """industry → topic → kit (camelCase wire dicts)."""
    return _load_json("curated_kits.json")


def load_themes() -> dict:
    return _load_json("themes.json")


# ── Theme vocabulary ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ThemeVocabulary:
    """Words interpolated into the generic templates."""
    themes:          tuple[str, ...]
    visual_keywords: tuple[str, ...]
    activities:      tuple[str, ...]
    examples:        tuple[str, ...]
    challenges:      tuple[str, ...]
    topic_key:       Optional[str] = None   # matched theme key, None = default
    industry_key:    Optional[str] = None


def _match_key(text: str, table: dict[str, dict]) -> Optional[str]:
    """First table key contained in *text*, case-insensitive."""
    lowered = text.lower()
    return next((key for key in table if key.lower() in lowered), None)


def _slug(text: str) -> str:
    return re.sub(r"\s+", "-", text.strip().lower())


# ── Provider ──────────────────────────────────────────────────────────────────

class FallbackContentProvider:
    """
    Pure, total lookup of fallback content.

    ``curated`` and ``themes`` default to the packaged JSON assets; pass
    replacements to serve a different content library.
    """

    def __init__(self, curated: dict | None = None, themes: dict | None = None) -> None:
        self._curated = curated if curated is not None else load_curated_kits()
        self._themes  = themes if themes is not None else load_themes()

    # ── Public interface ──────────────────────────────────────────────────────

    def curated_kit(self, industry: str, topic: str) -> Optional[GeneratedKit]:
        """Exact two-level lookup; None on a miss at either level."""
        by_topic = self._curated.get(industry)
        if by_topic is None:
            return None
        entry = by_topic.get(topic)
        if entry is None:
            return None
        # fresh model per call; callers may mutate it
        return GeneratedKit.model_validate(entry)

    def fallback_kit(self, industry: str, topic: str) -> GeneratedKit:
        kit = self.curated_kit(industry, topic)
        if kit is not None:
            logger.info("Fallback kit: curated entry for %r / %r", industry, topic)
            return kit
        vocab = self.theme_for(industry, topic)
        logger.info(
            "Fallback kit: template for %r / %r (topic theme=%s, industry context=%s)",
            industry, topic, vocab.topic_key or "default", vocab.industry_key or "default",
        )
        return _template_kit(industry, topic, vocab)

    def fallback_plan(self, industry: str, topic: str) -> TrainingPlan:
        return _template_plan(industry, topic, self.theme_for(industry, topic))

    def theme_for(self, industry: str, topic: str) -> ThemeVocabulary:
        topics     = self._themes.get("topics", {})
        industries = self._themes.get("industries", {})
        defaults   = self._themes["defaults"]

        topic_key    = _match_key(topic, topics)
        industry_key = _match_key(industry, industries)
        t = topics[topic_key] if topic_key else defaults["topic"]
        i = industries[industry_key] if industry_key else defaults["industry"]

        return ThemeVocabulary(
            themes          = tuple(t["themes"]),
            visual_keywords = tuple(t["visualKeywords"]),
            activities      = tuple(t["activities"]),
            examples        = tuple(i["examples"]),
            challenges      = tuple(i["challenges"]),
            topic_key       = topic_key,
            industry_key    = industry_key,
        )


@lru_cache(maxsize=1)
def default_provider() -> FallbackContentProvider:
    return FallbackContentProvider()


def fallback_kit(industry: str, topic: str) -> GeneratedKit:
    """Module-level shortcut using the packaged content library."""
    return default_provider().fallback_kit(industry, topic)


def fallback_plan(industry: str, topic: str) -> TrainingPlan:
    return default_provider().fallback_plan(industry, topic)


# ── Templates ─────────────────────────────────────────────────────────────────

def _template_plan(industry: str, topic: str, v: ThemeVocabulary) -> TrainingPlan:
    return TrainingPlan.model_validate({
        "title":          f"{topic} for {industry} Professionals",
        "targetAudience": f"{industry} team members and managers who apply {topic} in their daily work",
        "learningObjectives": [
            f"Explain the core principles of {topic} as they apply to {industry}",
            f"Apply {v.themes[0]} techniques to a realistic {v.examples[0]} scenario",
            f"Identify at least three opportunities to address {v.challenges[0]} in their own role",
            "Create a personal 30-60-90 day action plan",
        ],
        "modules": [
            {
                "title": f"Introduction to {topic} in {industry}",
                "description": f"Why {topic} matters, with a look at {v.challenges[0]} and {v.challenges[1]}.",
                "durationMinutes": 15,
            },
            {
                "title": f"Understanding {v.themes[0]}",
                "description": f"Core framework and common misconceptions, illustrated with {v.examples[0]}.",
                "durationMinutes": 20,
            },
            {
                "title": f"Practical Application: {v.themes[1]}",
                "description": f"Step-by-step methodology and an {industry} case study.",
                "durationMinutes": 25,
            },
            {
                "title": f"Advanced Topics: {v.themes[2]}",
                "description": f"Scaling beyond the basics and integrating with existing {v.examples[1]}.",
                "durationMinutes": 20,
            },
            {
                "title": f"Interactive Activity: {v.activities[0]}",
                "description": "Hands-on practice, peer feedback and action planning.",
                "durationMinutes": 20,
            },
        ],
        "suggestedEnhancements": [
            f"Add a short pre-session survey on current {v.themes[0]} practices",
            f"Include a {v.activities[1]} follow-up session after 30 days",
            f"Invite an internal {industry} practitioner to share a real case",
        ],
    })


def _template_slides(industry: str, topic: str, v: ThemeVocabulary) -> list[dict]:
    return [
        {
            "title": f"{topic} in {industry}: Welcome & Overview",
            "content": [
                f"Tailored training for {industry} professionals",
                f"Industry-specific challenges: {v.challenges[0]} and {v.challenges[1]}",
                "Real-world applications in your daily work",
                "Expected outcomes and measurable goals",
            ],
            "speakerNotes": (
                f"Start with a brief poll: \"How many of you have experienced {v.challenges[0]} "
                "in the past month?\" Use this to gauge experience level and adjust delivery accordingly."
            ),
            "visualSearchTerm": f"{industry} {v.visual_keywords[0]} professional setting",
        },
        {
            "title": f"Understanding {v.themes[0]}",
            "content": [
                "Core principles and framework",
                f"Industry example: {v.examples[0]}",
                "Common misconceptions debunked",
                "The ROI of proper implementation",
            ],
            "speakerNotes": (
                "Use the whiteboard to map out the framework. Ask participants to share their "
                "current approaches - this creates engagement and reveals knowledge gaps."
            ),
            "visualSearchTerm": f"{v.visual_keywords[1]} concept diagram blueprint",
        },
        {
            "title": f"Practical Application: {v.themes[1]}",
            "content": [
                "Step-by-step methodology",
                f"{industry} case study walkthrough",
                "Tools and resources available",
                "Checkpoint: Quick knowledge check",
            ],
            "speakerNotes": (
                "Split into groups of 3-4. Assign each group a mini scenario from the handout. "
                "Give them 10 minutes to develop a solution using the methodology just presented."
            ),
            "visualSearchTerm": f"{industry} team working {v.visual_keywords[2]}",
        },
        {
            "title": f"Advanced Topics: {v.themes[2]}",
            "content": [
                "Scaling beyond the basics",
                "Handling exception scenarios",
                f"Integration with existing {v.examples[1]}",
                "Measuring success metrics",
            ],
            "speakerNotes": (
                "This is where experienced participants shine. Encourage them to share real "
                "challenges they've faced and overcome."
            ),
            "visualSearchTerm": f"{v.visual_keywords[3]} advanced technology innovation",
        },
        {
            "title": f"Interactive Activity: {v.activities[0]}",
            "content": [
                "Hands-on practice session",
                f"Work on realistic {industry} scenario",
                "Peer feedback and discussion",
                "Identify gaps and next steps",
            ],
            "speakerNotes": (
                "Monitor the room closely during this activity. Look for struggling participants "
                "and offer guidance."
            ),
            "visualSearchTerm": f"diverse team {v.activities[0]} workshop collaboration",
        },
        {
            "title": "Action Planning & Next Steps",
            "content": [
                "Key takeaways summary",
                "30-60-90 day implementation plan",
                "Resources: Internal wiki, mentorship program",
                "Q&A and closing thoughts",
            ],
            "speakerNotes": (
                "End with the \"one thing\" exercise: everyone commits to one specific action they'll "
                "take this week and shares it with a partner for accountability."
            ),
            "visualSearchTerm": "success achievement goal planning roadmap",
        },
    ]


def _template_flashcards(industry: str, topic: str, v: ThemeVocabulary) -> list[dict]:
    return [
        {
            "front": f"What is the primary benefit of {topic} in {industry}?",
            "back": (
                f"Improved {v.challenges[2]}, leading to better {v.examples[2]} "
                "and overall organizational efficiency."
            ),
        },
        {
            "front": f"Name two key {v.themes[0]} principles",
            "back": (
                "1) Continuous improvement through feedback loops\n"
                "2) Data-driven decision making based on measurable outcomes"
            ),
        },
        {
            "front": f"Common mistake when implementing {topic}",
            "back": (
                "Skipping the planning phase and jumping straight to execution without "
                "stakeholder buy-in or proper resource allocation."
            ),
        },
        {
            "front": f"How to measure success in {industry}?",
            "back": (
                f"Track KPIs like: reduction in {v.challenges[0]}, improved {v.examples[0]} "
                "efficiency, and employee satisfaction scores."
            ),
        },
        {
            "front": f"Best practice for {v.themes[1]}",
            "back": (
                "Start with a pilot program in one department, gather feedback, iterate, then "
                "scale organization-wide with documented lessons learned."
            ),
        },
    ]


def _template_handout(industry: str, topic: str, v: ThemeVocabulary) -> str:
    return "\n".join([
        f"# {topic} in {industry}: Participant Workbook",
        "",
        "## Session Overview",
        f"**Today's Focus:** Practical application of {topic} principles in {industry} environments.",
        "",
        "## Learning Objectives",
        f"- Understand core {topic} concepts",
        f"- Apply best practices to real {industry} scenarios",
        "- Create a personal implementation roadmap",
        "",
        "---",
        "",
        "## Part 1: Key Concepts",
        "",
        f"### The {topic} Framework",
        f"{topic} in {industry} is built on three pillars:",
        "",
        f"1. **{v.themes[0]}** - focus on {v.examples[0]}, continuous improvement, data-driven decisions",
        f"2. **{v.themes[1]}** - integration with {v.examples[1]}, stakeholder alignment, risk mitigation",
        f"3. **{v.themes[2]}** - scalable processes, change management, sustainability planning",
        "",
        f"### Why This Matters in {industry}",
        f"- **Challenge:** {v.challenges[0]} - **Solution:** systematic approach to {v.themes[0]}",
        f"- **Challenge:** {v.challenges[1]} - **Solution:** {v.themes[1]} methodology",
        f"- **Challenge:** {v.challenges[2]} - **Solution:** proactive {v.themes[2]}",
        "",
        "---",
        "",
        "## Part 2: Case Study Analysis",
        "",
        f"### Scenario: {industry} Company X",
        f"Company X faced significant {v.challenges[0]} issues. They implemented {topic} principles and saw:",
        f"- 40% reduction in {v.challenges[1]}",
        f"- Improved {v.examples[2]} efficiency",
        "- Higher employee satisfaction",
        "",
        "**Discussion Questions:**",
        "1. What were the key success factors?",
        "2. What obstacles did they likely face?",
        "3. How could this apply to your organization?",
        "",
        "---",
        "",
        "## Part 3: Hands-On Activity",
        "",
        f"### {v.activities[0]} Exercise",
        f"Your {industry} team is experiencing {v.challenges[0]}. "
        f"Propose a solution using {topic} principles.",
        "",
        "**Your Solution:**",
        "_____________________________________________________________________",
        "_____________________________________________________________________",
        "",
        "---",
        "",
        "## Part 4: Personal Action Plan",
        "",
        "| Window | One thing I will do | Success metric |",
        "|---|---|---|",
        "| Week 1-4 (Foundation) | | |",
        "| Week 5-8 (Build) | | |",
        "| Week 9-12 (Scale) | | |",
        "",
        "## Quick Reference",
        "",
        "**Do:** start small and iterate, gather feedback early, document lessons learned.",
        "",
        "**Don't:** skip stakeholder alignment, ignore existing processes, work in silos.",
        "",
        "## Support",
        f"- {industry} knowledge base and mentorship program",
        f"- Chat channel: #{_slug(topic)}",
    ])


def _template_facilitator_guide(industry: str, topic: str, v: ThemeVocabulary) -> str:
    return "\n".join([
        f"# Facilitator Guide: {topic} for {industry}",
        "",
        "## Course Overview",
        f"**Industry:** {industry}  ",
        f"**Topic:** {topic}  ",
        "**Duration:** 90 Minutes  ",
        "**Audience:** Mid to senior-level professionals  ",
        f"**Prerequisites:** Basic understanding of {v.examples[0]}",
        "",
        "## Learning Objectives",
        "By the end of this session, participants will:",
        f"1. Understand the core principles of {topic} as applied to {industry}",
        "2. Identify at least 3 opportunities to apply these concepts in their work",
        "3. Create a personal action plan for implementation",
        "",
        "## Pre-Session Setup (30 min before)",
        "- [ ] Test all AV equipment",
        "- [ ] Print handouts (1 per participant + 2 extras)",
        "- [ ] Set up breakout groups (3-4 people each)",
        f"- [ ] Prepare {v.activities[0]} materials",
        "",
        "## Detailed Delivery Timeline",
        "",
        "### 00-10 min: Opening & Icebreaker",
        f"- **Icebreaker:** \"Share one {v.challenges[0]} challenge you've faced this month\"",
        "- Set ground rules and preview agenda",
        "",
        "### 10-25 min: Foundation & Theory (Slides 1-2)",
        f"- Present fundamental principles with {industry}-specific examples",
        "- **Interactive poll:** \"Have you tried this before?\"",
        "",
        "### 25-45 min: Practical Application (Slides 3-4)",
        f"- Walk through case study from {industry}",
        "- **Group Activity:** small groups solve a mini-scenario (15 min)",
        "",
        "### 45-70 min: Hands-On Practice (Slide 5)",
        f"- Explain the {v.activities[0]} exercise; circulate and coach",
        "- Debrief as a group: \"What surprised you?\"",
        "",
        "### 70-85 min: Action Planning (Slide 6)",
        "- Participants write their \"one thing\" commitment and pair & share",
        "",
        "### 85-90 min: Closing",
        "- Final questions, resources, evaluation survey",
        "",
        "## Dealing with Difficult Situations",
        "- **Dominant participant:** \"Thanks for that input. Let's hear from someone who hasn't shared yet.\"",
        "- **Low energy:** 2-minute standing stretch",
        "- **Running behind:** shorten the final Q&A; never rush the hands-on activity",
        "",
        "## Post-Session Follow-Up",
        "- [ ] Send summary email within 24 hours",
        "- [ ] Share slide deck and resources",
        "- [ ] Collect and review evaluation feedback",
    ])


def _template_kit(industry: str, topic: str, v: ThemeVocabulary) -> GeneratedKit:
    return GeneratedKit.model_validate({
        "slides":                   _template_slides(industry, topic, v),
        "flashcards":               _template_flashcards(industry, topic, v),
        "handoutMarkdown":          _template_handout(industry, topic, v),
        "facilitatorGuideMarkdown": _template_facilitator_guide(industry, topic, v),
        "backgroundImagePrompt": (
            f"{industry} {topic} {v.visual_keywords[0]} professional corporate modern"
        ),
    })
