"""
Tests for prompt decomposition.

Tests cover:
- Image URL extraction and de-duplication
- Flag extraction (values, colon form, valueless flags, duplicates)
- Each description isolation step on fixed inputs
- Full analysis of realistic prompts
- Totality and idempotence
"""

import dataclasses

import pytest
from mjtoolbox.decompose import (
    DESCRIPTION_STEPS,
    IMAGE_URL_PATTERN,
    analyze,
    extract_image_urls,
    extract_parameters,
    isolate_description,
    split_descriptions,
    strip_bare_numbers,
    strip_flags,
    strip_image_urls,
    strip_mentions,
    strip_parentheticals,
    strip_ratios,
    strip_trailing_comma,
)
from mjtoolbox.models import ExtractedParameter, PromptAnalysis


CAT_URL = "https://cdn.midjourney.com/abc/0_1.png"


class TestImageUrlExtraction:
    """Test image reference detection."""

    def test_direct_image_link(self):
        """A URL ending in an image extension is found."""
        assert extract_image_urls(f"{CAT_URL} a cat") == (CAT_URL,)

    def test_duplicates_removed_in_order(self):
        """Repeated URLs appear once, in first-seen order."""
        other = "https://example.com/dog.jpg"
        text = f"{CAT_URL} {other} {CAT_URL}"
        assert extract_image_urls(text) == (CAT_URL, other)

    def test_short_link(self):
        """s.mj.run short links are image references."""
        assert extract_image_urls("https://s.mj.run/Xy12ab a cat") == ("https://s.mj.run/Xy12ab",)

    def test_query_string_kept(self):
        """A query string after the extension is part of the URL."""
        url = "https://example.com/x.webp?width=300&h=2"
        assert extract_image_urls(f"{url} cat") == (url,)

    def test_extension_case_insensitive(self):
        """Upper-case extensions are recognised."""
        assert extract_image_urls("http://example.com/A.JPEG") == ("http://example.com/A.JPEG",)

    def test_non_image_url_ignored(self):
        """Page URLs are not image references."""
        assert extract_image_urls("see https://example.com/page") == ()

    def test_every_entry_matches_pattern(self):
        """Every extracted URL matches the image pattern in full."""
        text = f"{CAT_URL} https://s.mj.run/abc https://example.com/p.gif?x=1 text"
        for url in extract_image_urls(text):
            assert IMAGE_URL_PATTERN.fullmatch(url)


class TestParameterExtraction:
    """Test --flag extraction."""

    def test_space_separated_values(self):
        """Flags with space-separated values are extracted in order."""
        params = extract_parameters("a cat --ar 16:9 --v 6.0")
        assert params == (
            ExtractedParameter("ar", "16:9", True),
            ExtractedParameter("v", "6.0", True),
        )

    def test_colon_value(self):
        """A colon may separate flag and value."""
        assert extract_parameters("--chaos:20") == (ExtractedParameter("chaos", "20"),)

    def test_valueless_flag_does_not_swallow_next(self):
        """A flag without value leaves the next flag intact."""
        params = extract_parameters("a cat --tile --ar 2:1")
        assert [(p.name, p.value) for p in params] == [("tile", ""), ("ar", "2:1")]

    def test_duplicates_preserved(self):
        """Each occurrence is kept, even for the same name."""
        params = extract_parameters("--v 5.2 --v 6.0")
        assert [p.value for p in params] == ["5.2", "6.0"]

    def test_always_enabled(self):
        """Extraction never produces a disabled parameter."""
        assert all(p.enabled for p in extract_parameters("--ar 1:1 --tile --seed 42"))

    def test_trailing_flag_without_value(self):
        """A flag at the very end has an empty value."""
        assert extract_parameters("cat --tile") == (ExtractedParameter("tile", ""),)


class TestDescriptionSteps:
    """Each isolation step on fixed input/output pairs."""

    def test_strip_image_urls(self):
        assert strip_image_urls(f"{CAT_URL} a cat", (CAT_URL,)) == " a cat"

    def test_strip_image_urls_standalone(self):
        """Without known URLs the pattern is applied."""
        assert strip_image_urls(f"a {CAT_URL} cat") == "a  cat"

    def test_strip_flags_cuts_at_first_marker(self):
        assert strip_flags("a cat --ar 16:9 with a hat --v 6") == "a cat "

    def test_strip_flags_without_marker(self):
        """No '--' means no truncation."""
        assert strip_flags("a cat - a dog") == "a cat - a dog"

    def test_strip_mentions(self):
        assert strip_mentions("by @artist(style) today") == "by  today"

    def test_strip_mentions_without_group(self):
        assert strip_mentions("hi @someone there") == "hi  there"

    def test_strip_ratios(self):
        assert strip_ratios("wide 16:9 shot") == "wide  shot"

    def test_strip_bare_numbers(self):
        """Standalone numbers go, digits inside words stay."""
        assert strip_bare_numbers("3 cats and 2.5 dogs in V6") == " cats and  dogs in V6"

    def test_strip_parentheticals(self):
        assert strip_parentheticals("a cat (very fluffy) sleeps") == "a cat  sleeps"

    def test_strip_trailing_comma(self):
        assert strip_trailing_comma("  a cat, ") == "a cat"

    def test_ratio_runs_before_numbers(self):
        """Ratios are removed whole, leaving no stray colon."""
        names = [name for name, _ in DESCRIPTION_STEPS]
        assert names.index("strip_ratios") < names.index("strip_bare_numbers")
        assert isolate_description("wide 16:9") == "wide"

    def test_split_descriptions(self):
        assert split_descriptions(" one \n\n  \n two ") == ("one", "two")


class TestAnalyze:
    """Full decomposition of realistic prompts."""

    def test_full_prompt(self):
        """Images, description and parameters are separated."""
        text = f"{CAT_URL} {CAT_URL} A cat on a roof, --ar 16:9 --stylize 250"
        analysis = analyze(text)

        assert analysis.image_urls == (CAT_URL,)
        assert analysis.descriptions == ("A cat on a roof",)
        assert analysis.parameter_names() == ["ar", "stylize"]

    def test_text_after_flag_not_description(self):
        """Free text following a flag is dropped from the description."""
        analysis = analyze("A cat --ar 16:9 with a hat")
        assert analysis.descriptions == ("A cat",)
        assert analysis.parameters[0].value == "16:9"

    def test_flags_after_cut_still_extracted(self):
        """All flags are captured, even past the description cut point."""
        analysis = analyze("A cat --ar 16:9 text --chaos 20 --v 6.0")
        assert analysis.parameter_names() == ["ar", "chaos", "v"]

    def test_no_flags_no_truncation(self):
        """Without flags the whole text remains description."""
        analysis = analyze("A cat - with a hat, on a mat")
        assert analysis.descriptions == ("A cat - with a hat, on a mat",)

    def test_multiline(self):
        """Each non-empty line is its own description entry."""
        analysis = analyze("A cat on a roof.\n\n  At night.  \n--ar 16:9")
        assert analysis.descriptions == ("A cat on a roof.", "At night.")
        assert analysis.description_text == "A cat on a roof.\nAt night."

    def test_noise_removed(self):
        """Mentions, ratios, numbers and asides are not description."""
        analysis = analyze("portrait (close up) 16:9 of 2 women")
        assert analysis.descriptions == ("portrait   of  women",)

    @pytest.mark.parametrize("text", ["", None, "   \n  ", "--ar 16:9"])
    def test_no_description(self, text):
        """Inputs without description text yield no descriptions."""
        assert analyze(text).descriptions == ()

    def test_empty_is_empty(self):
        assert analyze("") == PromptAnalysis()
        assert analyze("").is_empty

    def test_idempotent(self):
        """Analysing the same text twice gives equal results."""
        text = f"{CAT_URL} A cat. --ar 16:9 --tile"
        assert analyze(text) == analyze(text)

    def test_no_duplicate_images(self):
        text = " ".join([CAT_URL] * 5)
        urls = analyze(text).image_urls
        assert len(urls) == len(set(urls))

    def test_to_dict(self):
        data = analyze("A cat --ar 1:1").to_dict()
        assert data == {
            "image_urls": [],
            "descriptions": ["A cat"],
            "parameters": [{"name": "ar", "value": "1:1", "enabled": True}],
        }

    def test_analysis_is_immutable(self):
        """Parameters inside an analysis cannot be changed in place."""
        analysis = analyze("A cat --ar 1:1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            analysis.parameters[0].value = "16:9"
        assert hash(analysis) == hash(analyze("A cat --ar 1:1"))
