"""
Tests for the canned content provider: curated lookup, keyword-theme
templates, determinism.
"""
from factories import make_kit_payload

from trainkit.fallback_content import (
    GENERIC_FLASHCARD_COUNT,
    GENERIC_SLIDE_COUNT,
    FallbackContentProvider,
    fallback_kit,
    fallback_plan,
    load_curated_kits,
    load_themes,
)
from trainkit.models import GeneratedKit, TrainingPlan


# ─── Packaged assets ───────────────────────────────────────────────────────────

class TestPackagedAssets:
    def test_curated_entries_are_valid_kits(self):
        for industry, topics in load_curated_kits().items():
            for topic, entry in topics.items():
                kit = GeneratedKit.model_validate(entry)
                assert kit.slides, f"{industry}/{topic} has no slides"
                assert kit.flashcards, f"{industry}/{topic} has no flashcards"

    def test_theme_entries_have_four_items(self):
        themes = load_themes()
        for key, t in themes["topics"].items():
            for field in ("themes", "visualKeywords", "activities"):
                assert len(t[field]) >= 4, f"{key}.{field}"
        for key, i in themes["industries"].items():
            for field in ("examples", "challenges"):
                assert len(i[field]) >= 4, f"{key}.{field}"


# ─── Curated lookup ────────────────────────────────────────────────────────────

class TestCuratedKit:
    def test_exact_hit(self, provider):
        kit = provider.curated_kit("Healthcare", "Patient Safety")
        assert kit is not None
        assert len(kit.slides) == 8
        assert len(kit.flashcards) == 10
        assert kit.slides[0].title == "Patient Safety Training"

    def test_miss_on_topic(self, provider):
        assert provider.curated_kit("Healthcare", "Underwater Basket Weaving") is None

    def test_miss_on_industry(self, provider):
        assert provider.curated_kit("Aerospace", "Patient Safety") is None

    def test_lookup_is_exact(self, provider):
        assert provider.curated_kit("healthcare", "patient safety") is None

    def test_each_call_returns_fresh_object(self, provider):
        first = provider.curated_kit("Healthcare", "Patient Safety")
        first.slides.clear()
        second = provider.curated_kit("Healthcare", "Patient Safety")
        assert len(second.slides) == 8

    def test_custom_library(self):
        provider = FallbackContentProvider(curated={"Aviation": {"Checklists": make_kit_payload()}})
        assert len(provider.curated_kit("Aviation", "Checklists").slides) == 10


# ─── Fallback kit ──────────────────────────────────────────────────────────────

class TestFallbackKit:
    def test_curated_preferred(self, provider):
        kit = provider.fallback_kit("Technology", "Cybersecurity Basics")
        assert kit == provider.curated_kit("Technology", "Cybersecurity Basics")

    def test_unknown_pair_gets_generic_template(self, provider):
        kit = provider.fallback_kit("Aerospace", "Underwater Basket Weaving")
        assert len(kit.slides) == GENERIC_SLIDE_COUNT == 6
        assert len(kit.flashcards) == GENERIC_FLASHCARD_COUNT == 5
        assert kit.handout_markdown.strip()
        assert kit.facilitator_guide_markdown.strip()
        assert kit.background_image_prompt

    def test_template_interpolates_labels(self, provider):
        kit = provider.fallback_kit("Aerospace", "Underwater Basket Weaving")
        assert kit.slides[0].title == "Underwater Basket Weaving in Aerospace: Welcome & Overview"
        assert kit.slides[-1].title == "Action Planning & Next Steps"
        assert "Aerospace" in kit.handout_markdown
        assert kit.background_image_prompt.startswith("Aerospace Underwater Basket Weaving ")

    def test_deterministic(self, provider):
        assert provider.fallback_kit("Aerospace", "Agile Delivery") == \
            provider.fallback_kit("Aerospace", "Agile Delivery")

    def test_topic_theme_matched_case_insensitively(self, provider):
        vocab = provider.theme_for("Aerospace", "intro to agile ceremonies")
        assert vocab.topic_key == "Agile"
        kit = provider.fallback_kit("Aerospace", "intro to agile ceremonies")
        assert vocab.themes[0] in kit.slides[1].title

    def test_industry_context_matched(self, provider):
        vocab = provider.theme_for("Retail Banking and Finance", "Leadership")
        assert vocab.industry_key == "Finance"
        assert vocab.topic_key == "Leadership"

    def test_unknown_uses_defaults(self, provider):
        vocab = provider.theme_for("Aerospace", "Knitting")
        assert vocab.topic_key is None
        assert vocab.industry_key is None
        assert len(vocab.themes) >= 3

    def test_empty_labels_still_produce_a_kit(self, provider):
        kit = provider.fallback_kit("", "")
        assert len(kit.slides) == GENERIC_SLIDE_COUNT

    def test_module_level_shortcut(self):
        assert fallback_kit("Healthcare", "Patient Safety").slides[0].title == "Patient Safety Training"


# ─── Fallback plan ─────────────────────────────────────────────────────────────

class TestFallbackPlan:
    def test_counts_within_ranges(self, provider):
        plan = provider.fallback_plan("Aerospace", "Cybersecurity")
        assert isinstance(plan, TrainingPlan)
        assert len(plan.learning_objectives) == 4
        assert len(plan.modules) == 5
        assert len(plan.suggested_enhancements) == 3
        assert plan.total_duration_minutes == 100

    def test_labels_in_title(self, provider):
        plan = provider.fallback_plan("Retail", "Customer Service")
        assert plan.title == "Customer Service for Retail Professionals"

    def test_deterministic(self):
        assert fallback_plan("Retail", "Safety") == fallback_plan("Retail", "Safety")
