"""
test_site_analysis.py — Unit tests for the site-analysis request builder and response validation.

Tests cover:
  - build_site_analysis_prompt: work type, facilities, dimensions, verbatim-catalog instruction
  - SiteAnalyzer.analyze: flat BOM and per-facility results
  - Rejection of responses that do not fit the schema (severity, missing lists, non-JSON)
  - Caller errors (bad work type, empty image) raised before any external call
"""

import asyncio
import base64

import pytest

from app.services.errors import AnalysisFailedError, ExternalCapabilityError
from app.services.site_analysis import SiteAnalyzer, build_site_analysis_prompt

IMAGE = b"\xff\xd8\xff\xe0fake-jpeg-bytes"

FLAT_RESPONSE = {
    "summary": "Canopy sheets are corroded and two yard lights are out.",
    "problems": [
        {"category": "Civil", "description": "Rusted canopy roofing near DU 2", "severity": "High"},
        {"category": "Electrical", "description": "Yard lights not working", "severity": "Medium"},
    ],
    "bom": [
        {"item": "Profile roofing sheet", "unit": "m²", "quantity": 40, "estimatedScope": "Replace corroded sheets"},
        {"item": "LED Yard light 100 W", "unit": "each", "quantity": 2, "estimatedScope": "Replace failed fittings"},
    ],
}

FACILITY_RESPONSE = {
    "summary": "Canopy needs repainting.",
    "problems": [{"category": "Civil", "description": "Peeling paint", "severity": "Low"}],
    "facilityEstimates": [
        {"facility": "Canopy", "items": [
            {"item": "Enamel paint", "unit": "m²", "quantity": 300, "estimatedScope": "Repaint columns"},
        ]},
    ],
}


def _analyze(llm, **kwargs):
    kwargs.setdefault("mime_type", "image/jpeg")
    kwargs.setdefault("work_type", "Repair")
    image = kwargs.pop("image", IMAGE)
    return asyncio.run(SiteAnalyzer(llm).analyze(image, **kwargs))


# ===========================================================================
# Class 1: Prompt construction
# ===========================================================================

class TestBuildPrompt:

    def test_flat_prompt_asks_for_bom(self, sample_items):
        prompt = build_site_analysis_prompt("Maintenance", [], {}, sample_items)
        assert "Work type: Maintenance." in prompt
        assert "Bill of Materials" in prompt
        assert "'bom'" in prompt

    def test_facility_prompt_lists_facilities_and_dimensions(self, sample_items):
        prompt = build_site_analysis_prompt(
            "Repair",
            ["Canopy", "Electrification"],
            {"Canopy": "24 m x 18 m, 6 m clear height"},
            sample_items,
        )
        assert "Canopy, Electrification" in prompt
        assert "   - Canopy: 24 m x 18 m, 6 m clear height" in prompt
        assert "Electrification:" not in prompt
        assert "'facilityEstimates'" in prompt

    def test_catalog_names_are_embedded_for_verbatim_use(self, sample_items):
        prompt = build_site_analysis_prompt("Repair", [], {}, sample_items)
        assert "verbatim" in prompt
        for item in sample_items:
            assert item.name in prompt

    def test_empty_catalog_omits_verbatim_instruction(self):
        prompt = build_site_analysis_prompt("Repair", [], {}, [])
        assert "verbatim from this Schedule of Rates" not in prompt

    def test_problem_categories_are_named(self):
        prompt = build_site_analysis_prompt("Repair", [], {}, [])
        assert "a category (Civil, Electrical, Mechanical, Safety, General) and a severity (Low, Medium, High)" in prompt


# ===========================================================================
# Class 2: Analyze
# ===========================================================================

class TestAnalyze:

    def test_flat_result(self, fake_llm, sample_items):
        fake_llm.queue(FLAT_RESPONSE)
        result = _analyze(fake_llm, catalog=sample_items)
        assert result.summary.startswith("Canopy sheets")
        assert [p.severity for p in result.problems] == ["High", "Medium"]
        assert [w.item for w in result.bom] == ["Profile roofing sheet", "LED Yard light 100 W"]
        assert result.facility_estimates is None

    def test_facility_result(self, fake_llm, sample_items):
        fake_llm.queue(FACILITY_RESPONSE)
        result = _analyze(fake_llm, facilities=["Canopy"], catalog=sample_items)
        assert result.bom is None
        assert result.facility_estimates[0].facility == "Canopy"
        assert result.facility_estimates[0].items[0].quantity == 300

    def test_image_is_sent_base64_with_mime_type(self, fake_llm):
        fake_llm.queue(FLAT_RESPONSE)
        _analyze(fake_llm, mime_type="image/png")
        call = fake_llm.calls[0]
        assert call["kind"] == "vision"
        assert call["mime_type"] == "image/png"
        assert call["json_mode"] is True
        assert base64.b64decode(call["images"][0]) == IMAGE

    def test_duplicate_facilities_are_collapsed(self, fake_llm):
        fake_llm.queue(FACILITY_RESPONSE)
        _analyze(fake_llm, facilities=["Canopy", "Canopy"])
        assert "these facilities, list the work items needed: Canopy." in fake_llm.calls[0]["prompt"]

    def test_fenced_json_is_accepted(self, fake_llm):
        fake_llm.queue('```json\n{"summary": "ok", "problems": [], "bom": []}\n```')
        result = _analyze(fake_llm)
        assert result.bom == []

    def test_names_outside_catalog_are_passed_through(self, fake_llm, sample_items):
        """Pricing decides whether a name matches; analysis does not filter."""
        fake_llm.queue({"summary": "s", "problems": [], "bom": [
            {"item": "Invented widget", "unit": "each", "quantity": 1},
        ]})
        result = _analyze(fake_llm, catalog=sample_items)
        assert result.bom[0].item == "Invented widget"


# ===========================================================================
# Class 3: Failure modes
# ===========================================================================

class TestAnalyzeFailures:

    def test_invalid_severity_is_rejected(self, fake_llm):
        bad = dict(FLAT_RESPONSE, problems=[{"category": "Civil", "description": "x", "severity": "Critical"}])
        fake_llm.queue(bad)
        with pytest.raises(AnalysisFailedError, match="Analysis failed"):
            _analyze(fake_llm)

    def test_missing_bom_and_facility_estimates_is_rejected(self, fake_llm):
        fake_llm.queue({"summary": "s", "problems": []})
        with pytest.raises(AnalysisFailedError):
            _analyze(fake_llm)

    def test_non_positive_quantity_is_rejected(self, fake_llm):
        fake_llm.queue({"summary": "s", "problems": [], "bom": [{"item": "Enamel paint", "quantity": 0}]})
        with pytest.raises(AnalysisFailedError):
            _analyze(fake_llm)

    def test_infinite_quantity_is_rejected(self, fake_llm):
        fake_llm.queue('{"summary": "s", "problems": [], "bom": [{"item": "Enamel paint", "quantity": 1e999}]}')
        with pytest.raises(AnalysisFailedError):
            _analyze(fake_llm)

    def test_non_json_is_rejected(self, fake_llm):
        fake_llm.queue("The canopy looks fine to me.")
        with pytest.raises(AnalysisFailedError):
            _analyze(fake_llm)

    def test_transport_failure(self, fake_llm):
        fake_llm.queue(ExternalCapabilityError("provider down"))
        with pytest.raises(AnalysisFailedError):
            _analyze(fake_llm)

    def test_unknown_work_type_makes_no_call(self, fake_llm):
        with pytest.raises(ValueError, match="Unknown work type"):
            _analyze(fake_llm, work_type="Demolition")
        assert fake_llm.calls == []

    def test_empty_image_makes_no_call(self, fake_llm):
        with pytest.raises(ValueError, match="empty"):
            _analyze(fake_llm, image=b"")
        assert fake_llm.calls == []
