"""Tests for RecoveryService and missing-section detection."""

import json

import pytest

from mythforge.memory.default_content import DEFAULT_ENTITIES
from mythforge.memory.myth_response import GenerationResponse
from mythforge.services import RecoveryService
from mythforge.services.recovery_service import (
    find_missing_sections,
    merge_by_key,
    merge_response_sections,
)
from mythforge.settings import DEFAULT_THRESHOLDS, Thresholds
from tests.shared.sample_responses import build_response


@pytest.fixture
def service(tmp_settings) -> RecoveryService:
    """Recovery service with default settings."""
    return RecoveryService(tmp_settings)


class TestFindMissingSections:
    """Tests for find_missing_sections."""

    def test_complete_response_has_nothing_missing(self, complete_response):
        """A full response should have no missing or incomplete sections."""
        assert find_missing_sections(complete_response, DEFAULT_THRESHOLDS) == ([], [])

    def test_absent_sections_are_missing(self):
        """Sections not present should be reported missing."""
        missing, incomplete = find_missing_sections(
            {"story": {"text": "x" * 300}}, DEFAULT_THRESHOLDS
        )
        assert missing == ["entities", "worldMap", "analysis", "ancientLanguage"]
        assert incomplete == []

    def test_short_sections_are_incomplete(self):
        """Sections below their minimums should be reported incomplete."""
        response = build_response(story_words=10, entities=2, locations=1, vocabulary=3, timeline=1)
        missing, incomplete = find_missing_sections(response, DEFAULT_THRESHOLDS)
        assert missing == []
        assert incomplete == ["story", "entities", "worldMap", "analysis", "ancientLanguage"]

    def test_analysis_needs_symbols_and_social_code(self):
        """Analysis without symbols or a full social code should be incomplete."""
        response = build_response()
        del response["analysis"]["symbols"]
        assert find_missing_sections(response, DEFAULT_THRESHOLDS)[1] == ["analysis"]

        response = build_response()
        del response["analysis"]["socialCode"]["forbidden"]
        assert find_missing_sections(response, DEFAULT_THRESHOLDS)[1] == ["analysis"]


class TestRecover:
    """Tests for RecoveryService.recover."""

    def test_valid_json(self, service, complete_response):
        """Valid JSON should be recovered untouched."""
        outcome = service.recover(json.dumps(complete_response))
        assert outcome.response == complete_response
        assert outcome.strategy == "outer_braces"
        assert not outcome.salvaged
        assert outcome.status.is_recovered

    def test_truncated_json_is_completed(self, service):
        """Truncated text should be repaired and backfilled."""
        outcome = service.recover('{"story": {"title": "The Low Tide", "text": "Once the sea')
        assert outcome.response["story"]["title"] == "The Low Tide"
        assert outcome.response["story"]["text"] == "Once the sea"
        assert outcome.response["entities"] == DEFAULT_ENTITIES
        assert outcome.strategy == "truncated_tail+balanced"

    def test_salvages_sections_when_parsing_fails(self, service):
        """Sections should be salvaged individually when no strategy succeeds."""
        complete = build_response()
        raw = (
            '{"story": ' + json.dumps(complete["story"]) + ", "
            '"entities": [bad], '
            '"worldMap": {"locations": []}}'
        )

        outcome = service.recover(raw)

        assert outcome.salvaged
        assert outcome.strategy == "section_salvage"
        assert outcome.recovered == {"story": complete["story"], "worldMap": {"locations": []}}
        assert outcome.response["story"] == complete["story"]
        assert outcome.response["entities"] == DEFAULT_ENTITIES
        assert outcome.status.recovered_sections == ["story", "worldMap"]
        assert outcome.status.missing_sections == ["entities", "analysis", "ancientLanguage"]
        assert outcome.status.incomplete_sections == ["worldMap"]
        assert not outcome.status.is_recovered

    def test_status_reflects_text_before_backfill(self, service):
        """Sections filled from defaults should be reported missing, not recovered."""
        outcome = service.recover('{"story":{"text":"Hello')

        assert outcome.recovered == {"story": {"text": "Hello"}}
        assert outcome.status.recovered_sections == ["story"]
        assert outcome.status.missing_sections == [
            "entities",
            "worldMap",
            "analysis",
            "ancientLanguage",
        ]
        assert outcome.status.incomplete_sections == ["story"]
        assert not outcome.status.is_recovered
        assert outcome.response["entities"] == DEFAULT_ENTITIES

    def test_threshold_override_keeps_repaired_lists(self, service):
        """Lists meeting an overridden minimum should survive a repaired parse."""
        raw = (
            '{"story":{"text":"Hello"},'
            '"entities":[{"name":"Vaeloth"},{"name":"Orrim"},{"name":"Sethra"}],'
            '"worldMap":{"locations":[{"name":"Mirr'
        )

        outcome = service.recover(raw, Thresholds(min_entities=3))

        assert [entity["name"] for entity in outcome.response["entities"]] == [
            "Vaeloth",
            "Orrim",
            "Sethra",
        ]
        assert "entities" not in outcome.status.incomplete_sections

    def test_nothing_recoverable_yields_placeholder(self, service):
        """Text without any structure should still yield a full response."""
        outcome = service.recover("I cannot write that myth.")
        assert outcome.strategy == "placeholder"
        assert outcome.salvaged
        assert outcome.response["story"]["title"] == "Incomplete Legend"
        assert outcome.status.missing_sections == [
            "story",
            "entities",
            "worldMap",
            "analysis",
            "ancientLanguage",
        ]
        assert isinstance(outcome.model, GenerationResponse)

    def test_empty_input(self, service):
        """None and empty text should be handled like unrecoverable text."""
        assert service.recover(None).strategy == "placeholder"
        assert service.recover("").response["story"]["title"] == "Incomplete Legend"

    def test_settings_thresholds_applied(self, tmp_settings):
        """Configured minimums should govern backfilling."""
        tmp_settings.min_entities = 2
        raw = json.dumps(build_response(entities=2))
        outcome = RecoveryService(tmp_settings).recover(raw)
        assert len(outcome.response["entities"]) == 2


class TestMergeByKey:
    """Tests for merge_by_key."""

    def test_generated_record_replaces_original_in_place(self):
        """Records sharing a key should be deduplicated, keeping the original order."""
        original = [{"name": "Vaeloth", "type": "spirit"}, {"name": "Orrim"}]
        generated = [{"name": "Vaeloth", "type": "titan"}, {"name": "Sethra"}]

        assert merge_by_key(original, generated, "name") == [
            {"name": "Vaeloth", "type": "titan"},
            {"name": "Orrim"},
            {"name": "Sethra"},
        ]

    def test_empty_side_returns_other(self):
        """An empty list on either side should return the other list untouched."""
        records = [{"word": "velthar"}, {"meaning": "no word"}]
        assert merge_by_key([], records, "word") == records
        assert merge_by_key(records, None, "word") == records

    def test_records_without_key_dropped(self):
        """Records lacking the key should be dropped when both sides have records."""
        assert merge_by_key(
            [{"word": "velthar"}, {"meaning": "orphan"}], [{"word": "oskuun"}], "word"
        ) == [{"word": "velthar"}, {"word": "oskuun"}]

    def test_keyed_mapping_read_as_list(self):
        """A list serialized as a keyed object should be merged by its values."""
        assert merge_by_key({"0": {"title": "Dawn"}}, [{"title": "Dusk"}], "title") == [
            {"title": "Dawn"},
            {"title": "Dusk"},
        ]


class TestMergeResponseSections:
    """Tests for merge_response_sections."""

    def test_regenerated_sections_fill_partial_response(self):
        """Sections from a retry should be merged into what was recovered."""
        original = build_response(entities=2, locations=0, vocabulary=0, timeline=0)
        del original["ancientLanguage"]
        generated = build_response()
        del generated["story"]

        merged = merge_response_sections(generated, original)

        assert merged["story"] == original["story"]
        assert [entity["name"] for entity in merged["entities"]] == [
            entity["name"] for entity in generated["entities"]
        ]
        assert merged["worldMap"]["locations"] == generated["worldMap"]["locations"]
        assert merged["ancientLanguage"]["vocabulary"] == generated["ancientLanguage"]["vocabulary"]
        assert merged["ancientLanguage"]["languageName"] == (
            generated["ancientLanguage"]["languageName"]
        )
        assert len(merged["analysis"]["timeline"]) == 5
        assert find_missing_sections(merged, DEFAULT_THRESHOLDS) == ([], [])

    def test_symbols_deduplicated_and_conflicts_concatenated(self):
        """Keyed analysis lists dedupe while unkeyed ones accumulate."""
        original = {
            "analysis": {
                "symbols": [{"symbol": "tide", "meaning": "old"}],
                "relationships": [{"from": "a", "to": "b"}],
            }
        }
        generated = {
            "analysis": {
                "symbols": [{"symbol": "tide", "meaning": "new"}, {"symbol": "salt"}],
                "relationships": [{"from": "b", "to": "c"}],
            }
        }

        analysis = merge_response_sections(generated, original)["analysis"]

        assert analysis["symbols"] == [{"symbol": "tide", "meaning": "new"}, {"symbol": "salt"}]
        assert analysis["relationships"] == [{"from": "a", "to": "b"}, {"from": "b", "to": "c"}]
        assert analysis["archetypeConflicts"] == []
        assert analysis["socialCode"] == {"sacred": "", "forbidden": "", "forgivable": ""}
        assert "characters" not in analysis

    def test_extras_combined_with_generated_winning(self):
        """Extras should combine, preferring generated values."""
        merged = merge_response_sections(
            {"extras": {"tone": "grim", "era": "first"}}, {"extras": {"tone": "bright", "seed": 4}}
        )
        assert merged["extras"] == {"tone": "grim", "seed": 4, "era": "first"}

    def test_empty_inputs_give_blank_shape(self):
        """Merging nothing should still give every section."""
        merged = merge_response_sections({}, None)
        assert merged["story"] == {"title": "", "text": "", "mood": "standard"}
        assert merged["entities"] == []
        assert merged["worldMap"]["locations"] == []
        assert merged["extras"] == {}

    def test_inputs_not_modified(self):
        """The merged response should not share structure with its inputs."""
        original = build_response(entities=1)
        generated = build_response(entities=0)
        snapshot = json.dumps(original)

        merged = merge_response_sections(generated, original)
        merged["entities"][0]["name"] = "Changed"

        assert json.dumps(original) == snapshot
