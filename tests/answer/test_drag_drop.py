"""Tests for drag-and-drop evaluation in its three stored formats."""

import pytest

from examgrade.answer import grade_answer
from examgrade.answer.evaluators.drag_drop import DragDropEvaluator
from examgrade.answer.normalize import build_drag_drop
from examgrade.answer.question import MappingQuestion, MatchingQuestion, OrderingQuestion, StudentResponse


class TestFormatSelection:
    """Test how the stored ``type`` field selects the sub-format."""

    @pytest.mark.parametrize(
        "data, expected",
        [
            ({"type": "matching"}, MatchingQuestion),
            ({"type": "ordering"}, OrderingQuestion),
            ({"type": "mapping"}, MappingQuestion),
            ({}, MappingQuestion),
            ({"type": "something-else"}, MappingQuestion),
        ],
    )
    def test_builder_by_type(self, data, expected):
        """Test builder by type."""
        assert isinstance(build_drag_drop(data), expected)

    def test_drag_and_drop_alias(self, matching_data):
        """Test drag and drop alias."""
        result = grade_answer("drag-and-drop", matching_data, {"Dog": "Bark", "Cat": "Meow", "Cow": "Moo"}, 3)

        assert result.is_correct is True
        assert result.formatted_answer["question_type"] == "drag_and_drop"


class TestMatching:
    """Test matching questions (left items onto right items)."""

    def test_all_pairs_correct(self, matching_data, assert_well_formed):
        """Test all pairs correct."""
        answer = {"Cow": "Moo", "Dog": "Bark", "Cat": "Meow"}
        result = assert_well_formed(grade_answer("drag-drop", matching_data, answer, 3), 3)

        assert result.is_correct is True
        assert result.points_earned == 3
        formatted = result.formatted_answer
        assert formatted["question_content"] == "Drag and drop matching question"
        assert formatted["drag_items"] == [
            {"id": "drag1", "text": "Dog"},
            {"id": "drag2", "text": "Cat"},
            {"id": "drag3", "text": "Cow"},
        ]
        assert formatted["drop_targets"][2] == {"id": "drop3", "text": "Moo"}
        assert formatted["correct_pairs"] == [
            {"drag_id": "drag1", "drop_id": "drop1"},
            {"drag_id": "drag2", "drop_id": "drop2"},
            {"drag_id": "drag3", "drop_id": "drop3"},
        ]
        assert {"drag_id": "drag3", "drop_id": "drop3"} in formatted["student_pairs"]

    def test_one_wrong_pair_earns_nothing(self, matching_data, assert_well_formed):
        """Test one wrong pair earns nothing."""
        answer = {"Dog": "Meow", "Cat": "Bark", "Cow": "Moo"}
        result = assert_well_formed(grade_answer("drag-drop", matching_data, answer, 3), 3)

        assert result.is_correct is False
        assert result.points_earned == 0
        assert {"drag_id": "drag1", "drop_id": "drop2"} in result.formatted_answer["student_pairs"]

    def test_missing_pair_earns_nothing(self, matching_data):
        """Test missing pair earns nothing."""
        result = grade_answer("drag-drop", matching_data, {"Dog": "Bark", "Cat": "Meow"}, 3)
        assert result.is_correct is False

    def test_unknown_items_are_ignored(self, matching_data):
        """Test unknown items are ignored."""
        answer = {"Dog": "Bark", "Cat": "Meow", "Cow": "Moo", "Horse": "Neigh"}
        result = grade_answer("drag-drop", matching_data, answer, 3)

        assert result.is_correct is True
        assert len(result.formatted_answer["student_pairs"]) == 3

    def test_list_pairs_in_answer_key(self):
        """Test list pairs in answer key."""
        data = {
            "type": "matching",
            "leftItems": ["H2O", "NaCl"],
            "rightItems": ["Water", "Salt"],
            "correctPairs": [["H2O", "Water"], ["NaCl", "Salt"]],
        }
        assert grade_answer("drag-drop", data, {"NaCl": "Salt", "H2O": "Water"}, 2).is_correct is True

    def test_boolean_targets_are_not_numeric_items(self):
        """Test boolean targets are not numeric items."""
        data = {
            "type": "matching",
            "leftItems": ["x", "y"],
            "rightItems": [0, 1],
            "correctPairs": [["x", 0], ["y", 1]],
        }
        result = grade_answer("drag-drop", data, {"x": False, "y": True}, 2)

        assert result.is_correct is False
        assert result.formatted_answer["student_pairs"] == []

    def test_non_mapping_answer(self, matching_data):
        """Test non mapping answer."""
        result = grade_answer("drag-drop", matching_data, ["Dog", "Bark"], 3)

        assert result.is_correct is False
        assert result.formatted_answer["student_pairs"] == []

    def test_empty_answer_key_never_awards_credit(self):
        """Test empty answer key never awards credit."""
        data = {"type": "matching", "leftItems": ["a"], "rightItems": ["b"], "correctPairs": []}
        assert grade_answer("drag-drop", data, {}, 2).is_correct is False

    def test_duplicate_items_are_rejected(self, assert_well_formed):
        """Items are identified by text, so duplicates would make pairs ambiguous."""
        data = {
            "type": "matching",
            "leftItems": ["Dog", "Dog"],
            "rightItems": ["Bark", "Woof"],
            "correctPairs": [["Dog", "Bark"]],
        }
        result = assert_well_formed(grade_answer("drag-drop", data, {"Dog": "Bark"}, 2), 2)

        assert result.is_correct is False
        assert "Duplicate left item 'Dog'" in result.error


class TestOrdering:
    """Test ordering questions."""

    @pytest.fixture
    def ordering_data(self):
        return {"type": "ordering", "correctOrder": ["Plan", "Build", "Test", "Release"]}

    def test_exact_sequence(self, ordering_data, assert_well_formed):
        """Test exact sequence."""
        answer = ["Plan", "Build", "Test", "Release"]
        result = assert_well_formed(grade_answer("drag-drop", ordering_data, answer, 4), 4)

        assert result.is_correct is True
        assert result.points_earned == 4
        formatted = result.formatted_answer
        assert formatted["question_content"] == "Drag and drop ordering question"
        assert formatted["student_order"] == answer
        assert formatted["correct_order"] == answer
        assert formatted["drag_items"][0] == {"id": "drag1", "text": "Plan"}

    def test_swapped_items_earn_nothing(self, ordering_data):
        """Test swapped items earn nothing."""
        result = grade_answer("drag-drop", ordering_data, ["Plan", "Test", "Build", "Release"], 4)

        assert result.is_correct is False
        assert result.points_earned == 0

    def test_incomplete_sequence(self, ordering_data):
        """Test incomplete sequence."""
        assert grade_answer("drag-drop", ordering_data, ["Plan", "Build"], 4).is_correct is False

    def test_items_key_as_answer_key(self):
        """Test items key as answer key."""
        data = {"type": "ordering", "items": [3, 1, 2]}
        assert grade_answer("drag-drop", data, [3, 1, 2], 1).is_correct is True

    def test_booleans_do_not_stand_in_for_numbers(self):
        """Test booleans do not stand in for numbers."""
        data = {"type": "ordering", "correctOrder": [1, 0]}

        assert grade_answer("drag-drop", data, [True, False], 2).is_correct is False
        assert grade_answer("drag-drop", data, [1, 0], 2).is_correct is True

    def test_wrapped_answer(self, ordering_data):
        """Test wrapped answer."""
        answer = {"rawAnswer": ["Plan", "Build", "Test", "Release"], "timeSpent": 12}
        result = grade_answer("drag-drop", ordering_data, answer, 4)

        assert result.is_correct is True
        assert result.formatted_answer["time_taken_to_answer"] == 12

    def test_non_list_answer(self, ordering_data):
        """Test non list answer."""
        result = grade_answer("drag-drop", ordering_data, "Plan", 4)

        assert result.is_correct is False
        assert result.formatted_answer["student_order"] == []

    def test_empty_order_never_awards_credit(self):
        """Test empty order never awards credit."""
        assert grade_answer("drag-drop", {"type": "ordering"}, [], 1).is_correct is False


class TestMapping:
    """Test generic mapping questions."""

    @pytest.fixture
    def mapping_data(self):
        return {"correctMappings": {"item1": "zoneA", "item2": "zoneB"}}

    def test_all_keys_placed(self, mapping_data, assert_well_formed):
        """Test all keys placed."""
        result = assert_well_formed(
            grade_answer("drag-drop", mapping_data, {"item2": "zoneB", "item1": "zoneA"}, 6), 6
        )

        assert result.is_correct is True
        assert result.points_earned == 6
        formatted = result.formatted_answer
        assert formatted["question_content"] == "Drag and drop question"
        assert formatted["correct_placements"] == 2
        assert formatted["total_placements"] == 2
        assert formatted["drag_drop_results"]["item1"] == {
            "assigned_target": "zoneA",
            "correct_target": "zoneA",
            "is_correct": True,
        }

    def test_partial_placement_earns_nothing(self, mapping_data, assert_well_formed):
        """Test partial placement earns nothing."""
        result = assert_well_formed(
            grade_answer("drag-drop", mapping_data, {"item1": "zoneA", "item2": "zoneA"}, 6), 6
        )

        assert result.is_correct is False
        assert result.points_earned == 0
        assert result.formatted_answer["correct_placements"] == 1
        assert result.formatted_answer["drag_drop_results"]["item2"]["is_correct"] is False

    def test_missing_key_is_reported_unassigned(self, mapping_data):
        """Test missing key is reported unassigned."""
        result = grade_answer("drag-drop", mapping_data, {"item1": "zoneA"}, 6)

        assert result.is_correct is False
        assert result.formatted_answer["drag_drop_results"]["item2"]["assigned_target"] is None

    def test_extra_keys_are_listed_but_ignored(self, mapping_data):
        """Test extra keys are listed but ignored."""
        answer = {"item1": "zoneA", "item2": "zoneB", "item9": "zoneC"}
        result = grade_answer("drag-drop", mapping_data, answer, 6)

        assert result.is_correct is True
        texts = [entry["text"] for entry in result.formatted_answer["drag_items"]]
        assert texts == ["item1", "item2", "item9"]
        targets = [entry["text"] for entry in result.formatted_answer["drop_targets"]]
        assert targets == ["zoneA", "zoneB", "zoneC"]

    def test_numeric_student_keys_match_string_keys(self):
        """Test numeric student keys match string keys."""
        data = {"correctMappings": {"1": "left", "2": "right"}}
        assert grade_answer("drag-drop", data, {1: "left", 2: "right"}, 2).is_correct is True

    def test_boolean_target_is_not_numeric_target(self):
        """Test boolean target is not numeric target."""
        data = {"correctMappings": {"item1": 1}}
        result = grade_answer("drag-drop", data, {"item1": True}, 2)

        assert result.is_correct is False
        assert result.formatted_answer["correct_placements"] == 0

    def test_targets_with_stored_item_ids(self):
        """Test targets with stored item ids."""
        data = {
            "dragDropTargets": [
                {"id": "t1", "correctItemId": "i1"},
                {"id": "t2", "correctItemId": "i2"},
                {"id": "t3"},
            ]
        }
        assert grade_answer("drag-drop", data, {"i1": "t1", "i2": "t2"}, 2).is_correct is True

    def test_empty_mappings_never_award_credit(self):
        """Test empty mappings never award credit."""
        result = grade_answer("drag-drop", {"correctMappings": {}}, {}, 2)

        assert result.is_correct is False
        assert result.formatted_answer["total_placements"] == 0


class TestDragDropEvaluatorDirect:
    """Test the evaluator outside the engine."""

    def test_question_text_overrides_content(self):
        """Test question text overrides content."""
        evaluator = DragDropEvaluator(
            question=OrderingQuestion(correct_order=["a", "b"]),
            total_marks=2,
            question_text="Sort the letters",
        )
        result = evaluator.evaluate(StudentResponse(value=["a", "b"]))

        assert result.is_correct is True
        assert result.formatted_answer["question_content"] == "Sort the letters"
