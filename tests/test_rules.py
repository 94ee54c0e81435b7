"""Tests for legal action computation."""

import unittest

from dungeon_arena.engine.generate import level_from_ascii
from dungeon_arena.engine.reducer import create_game, execute_action
from dungeon_arena.engine.rules import coerce_action, is_action_legal, legal_action_set, legal_actions
from dungeon_arena.engine.types import Action, DoorOpenMode


class TestCoerceAction(unittest.TestCase):
    def test_tokens(self):
        cases = {
            "UP": Action.UP,
            "down": Action.DOWN,
            " Left ": Action.LEFT,
            "r": Action.RIGHT,
            "U": Action.UP,
            "i": Action.INTERACT,
            "interact": Action.INTERACT,
        }
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                self.assertEqual(coerce_action(raw), expected)

    def test_unrecognized(self):
        for raw in ("north", "", "UPP", None, 3):
            with self.subTest(raw=raw):
                self.assertIsNone(coerce_action(raw))

    def test_action_passes_through(self):
        self.assertIs(coerce_action(Action.LEFT), Action.LEFT)


class TestLegalActionSet(unittest.TestCase):
    def test_interact_mode(self):
        actions = legal_action_set(DoorOpenMode.INTERACT)
        self.assertEqual(set(actions), set(Action))

    def test_auto_mode(self):
        actions = legal_action_set(DoorOpenMode.AUTO)
        self.assertNotIn(Action.INTERACT, actions)
        self.assertEqual(len(actions), 4)

    def test_is_action_legal(self):
        state = create_game(level_from_ascii(["#@G#"]), door_mode=DoorOpenMode.AUTO)
        self.assertTrue(is_action_legal(state, Action.UP))
        self.assertFalse(is_action_legal(state, Action.INTERACT))


class TestLegalActions(unittest.TestCase):
    def test_preview_marks_noops(self):
        state = create_game(level_from_ascii(["#@.G#"]))

        summaries = {summary.type: summary for summary in legal_actions(state)}

        self.assertEqual(set(summaries), set(Action))
        self.assertTrue(summaries[Action.LEFT].no_op)
        self.assertEqual(summaries[Action.LEFT].description, "moved left (no-op: blocked)")
        self.assertFalse(summaries[Action.RIGHT].no_op)
        self.assertEqual(summaries[Action.RIGHT].description, "moved right")
        self.assertTrue(summaries[Action.INTERACT].no_op)

    def test_preview_does_not_touch_state(self):
        state = create_game(level_from_ascii(["#@r.#"]))
        before = state.model_dump()

        legal_actions(state)

        self.assertEqual(state.model_dump(), before)
        self.assertEqual(state.turn, 0)

    def test_auto_mode_has_no_interact(self):
        state = create_game(level_from_ascii(["#@G#"]), door_mode=DoorOpenMode.AUTO)
        types = [summary.type for summary in legal_actions(state)]
        self.assertNotIn(Action.INTERACT, types)

    def test_finished_game_has_no_actions(self):
        state = create_game(level_from_ascii(["#@G#"]))
        finished = execute_action(state, Action.RIGHT).new_state
        self.assertEqual(legal_actions(finished), [])


if __name__ == "__main__":
    unittest.main()
