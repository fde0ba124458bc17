"""Tests for placement response parsing and validation."""

from __future__ import annotations

import pytest

from sseol.placement.validator import (
    DEFAULT_CONFIDENCE,
    DEFAULT_REASON,
    parse_placement_document,
    validate_placements,
)
from tests.conftest import make_scenes


class TestParseDocument:
    def test_strict_json(self):
        assert parse_placement_document('{"placements": [{"imageIndex": 0}]}') == [{"imageIndex": 0}]

    def test_json_inside_prose(self):
        text = 'Here you go:\n```json\n{"placements": [{"imageIndex": 1}]}\n```\nDone.'
        assert parse_placement_document(text) == [{"imageIndex": 1}]

    @pytest.mark.parametrize("text", ["not json", "", "{broken", "{ nope }"])
    def test_unparsable(self, text):
        assert parse_placement_document(text) is None

    def test_missing_placements_array(self):
        assert parse_placement_document('{"result": []}') is None

    def test_placements_not_a_list(self):
        assert parse_placement_document('{"placements": {"imageIndex": 0}}') is None

    def test_top_level_array_rejected(self):
        assert parse_placement_document('[{"imageIndex": 0}]') is None

    def test_empty_placements_array_is_valid_document(self):
        assert parse_placement_document('{"placements": []}') == []


class TestValidateEntries:
    def test_clamps_out_of_range_entry(self):
        scenes = make_scenes(2, 3)
        raw = [{
            "imageIndex": 1,
            "type": "statement-scope",
            "sceneIndex": 99,
            "statementIndices": [-1, 50],
            "confidence": 5,
            "reason": "",
        }]
        (p,) = validate_placements(raw, scenes, image_count=2)
        assert p.image_index == 1
        assert p.type == "statement-scope"
        assert p.scene_index == 1
        assert p.statement_indices == [2]
        assert p.confidence == 1.0
        assert p.reason == DEFAULT_REASON

    def test_first_duplicate_wins(self):
        raw = [
            {"imageIndex": 0, "sceneIndex": 0, "confidence": 0.2, "reason": "first"},
            {"imageIndex": 0, "sceneIndex": 1, "confidence": 0.99, "reason": "second"},
        ]
        placements = validate_placements(raw, make_scenes(1, 1), image_count=1)
        assert len(placements) == 1
        assert placements[0].reason == "first"
        assert placements[0].scene_index == 0

    @pytest.mark.parametrize("entry", [
        "oops",
        None,
        42,
        ["imageIndex", 0],
        {"sceneIndex": 0},
        {"imageIndex": -1},
        {"imageIndex": 3},
        {"imageIndex": "0"},
        {"imageIndex": True},
        {"imageIndex": 1.5},
    ])
    def test_invalid_entries_dropped(self, entry):
        assert validate_placements([entry], make_scenes(2), image_count=3) == []

    def test_bad_entry_does_not_abort_batch(self):
        raw = ["junk", {"imageIndex": 9}, {"imageIndex": 2, "sceneIndex": 1}]
        placements = validate_placements(raw, make_scenes(1, 1), image_count=3)
        assert [p.image_index for p in placements] == [2]

    def test_integral_float_index_accepted(self):
        (p,) = validate_placements([{"imageIndex": 1.0}], make_scenes(1), image_count=2)
        assert p.image_index == 1

    def test_fractional_scene_index_treated_as_missing(self):
        (p,) = validate_placements([{"imageIndex": 0, "sceneIndex": 1.5}], make_scenes(1, 1, 1), image_count=1)
        assert p.scene_index == 0

    def test_fractional_statement_index_dropped(self):
        raw = [{"imageIndex": 0, "type": "statement-scope", "sceneIndex": 0, "statementIndices": [2.7]}]
        (p,) = validate_placements(raw, make_scenes(4), image_count=1)
        assert p.statement_indices == [0]

    def test_integral_float_statement_index_kept(self):
        raw = [{"imageIndex": 0, "type": "statement-scope", "sceneIndex": 0, "statementIndices": [2.0, 1.2]}]
        (p,) = validate_placements(raw, make_scenes(4), image_count=1)
        assert p.statement_indices == [2]

    def test_defaults_for_missing_fields(self):
        (p,) = validate_placements([{"imageIndex": 0}], make_scenes(2), image_count=1)
        assert p.scene_index == 0
        assert p.type == "scene-scope"
        assert p.statement_indices is None
        assert p.confidence == DEFAULT_CONFIDENCE
        assert p.reason == DEFAULT_REASON

    def test_non_numeric_scene_index_defaults_to_zero(self):
        (p,) = validate_placements([{"imageIndex": 0, "sceneIndex": "2"}], make_scenes(1, 1, 1), image_count=1)
        assert p.scene_index == 0

    def test_negative_scene_and_confidence_clamped(self):
        (p,) = validate_placements(
            [{"imageIndex": 0, "sceneIndex": -4, "confidence": -0.5}], make_scenes(2), image_count=1,
        )
        assert p.scene_index == 0
        assert p.confidence == 0.0

    @pytest.mark.parametrize("type_value", ["statement", "phrase", None, 1, "STATEMENT-SCOPE"])
    def test_unknown_type_becomes_scene_scope(self, type_value):
        raw = [{"imageIndex": 0, "type": type_value, "statementIndices": [1]}]
        (p,) = validate_placements(raw, make_scenes(3), image_count=1)
        assert p.type == "scene-scope"
        assert p.statement_indices is None

    def test_statement_indices_filtered_and_deduplicated(self):
        raw = [{
            "imageIndex": 0,
            "type": "statement-scope",
            "sceneIndex": 0,
            "statementIndices": [1, "2", None, 7, 1, 9],
        }]
        (p,) = validate_placements(raw, make_scenes(4), image_count=1)
        assert p.statement_indices == [1, 3]

    def test_statement_indices_empty_after_filter_default_to_zero(self):
        raw = [{"imageIndex": 0, "type": "statement-scope", "statementIndices": [-3, "x"]}]
        (p,) = validate_placements(raw, make_scenes(2), image_count=1)
        assert p.statement_indices == [0]

    def test_statement_scope_without_indices_defaults_to_zero(self):
        raw = [{"imageIndex": 0, "type": "statement-scope", "sceneIndex": 1}]
        (p,) = validate_placements(raw, make_scenes(1, 2), image_count=1)
        assert p.type == "statement-scope"
        assert p.statement_indices == [0]

    def test_statement_scope_on_empty_scene_downgraded(self):
        raw = [{"imageIndex": 0, "type": "statement-scope", "sceneIndex": 1, "statementIndices": [0]}]
        (p,) = validate_placements(raw, make_scenes(2, 0), image_count=1)
        assert p.type == "scene-scope"
        assert p.scene_index == 1
        assert p.statement_indices is None

    def test_acceptance_order_preserved(self):
        raw = [{"imageIndex": 2}, {"imageIndex": 0}, {"imageIndex": 1}]
        placements = validate_placements(raw, make_scenes(1), image_count=3)
        assert [p.image_index for p in placements] == [2, 0, 1]

    def test_collisions_on_same_scene_are_allowed(self):
        raw = [
            {"imageIndex": 0, "sceneIndex": 0, "type": "scene-scope"},
            {"imageIndex": 1, "sceneIndex": 0, "type": "scene-scope"},
        ]
        placements = validate_placements(raw, make_scenes(2), image_count=2)
        assert [p.scene_index for p in placements] == [0, 0]
