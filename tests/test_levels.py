"""Tests for level sources and text snapshots."""

import unittest

from dungeon_arena.engine.generate import create_blank_level, create_demo_level, level_from_ascii
from dungeon_arena.engine.reducer import create_game, execute_action
from dungeon_arena.engine.snapshot import game_state_to_ascii, state_summary
from dungeon_arena.engine.types import Action, GridSize, KeyColor, Level, Position, TileType


class TestGenerate(unittest.TestCase):
    def test_blank_level_has_wall_border(self):
        level = create_blank_level(5, 4, name="Box")

        self.assertEqual(level.name, "Box")
        self.assertEqual(level.grid_size, GridSize(width=5, height=4))
        self.assertEqual(level.player_start, Position(x=1, y=1))
        self.assertEqual(level.max_turns, 200)
        self.assertTrue(level.id.startswith("custom_"))
        self.assertEqual(level.layout[0], ["WALL"] * 5)
        self.assertEqual(level.layout[3], ["WALL"] * 5)
        self.assertEqual(level.layout[1], ["WALL", "EMPTY", "EMPTY", "EMPTY", "WALL"])

    def test_demo_level(self):
        state = create_game(create_demo_level())

        self.assertEqual(
            game_state_to_ascii(state),
            "\n".join([
                "##########",
                "#@.......#",
                "#......r.#",
                "#..##....#",
                "#..#..O..#",
                "#....D...#",
                "#..T...G.#",
                "##########",
            ]),
        )

    def test_level_from_ascii(self):
        level = level_from_ascii(["#@r#", "#G"], level_id="tiny", max_turns=30)

        self.assertEqual(level.id, "tiny")
        self.assertEqual(level.player_start, Position(x=1, y=0))
        self.assertEqual(level.grid_size, GridSize(width=4, height=2))
        self.assertEqual(level.layout[0], ["WALL", "EMPTY", "KEY_RED", "WALL"])
        self.assertEqual(level.layout[1], ["WALL", "GOAL", "EMPTY", "EMPTY"])
        self.assertEqual(level.max_turns, 30)

    def test_level_from_ascii_requires_player(self):
        with self.assertRaises(ValueError):
            level_from_ascii(["#..#"])


class TestSnapshot(unittest.TestCase):
    def test_every_tile_kind_has_one_glyph(self):
        rows = ["@.#GrbgyDEFHOTAZ"]
        state = create_game(level_from_ascii(rows))
        self.assertEqual(game_state_to_ascii(state), rows[0])

    def test_player_glyph_overrides_tile(self):
        level = Level(
            id="on_goal",
            name="On goal",
            grid_size=GridSize(width=3, height=2),
            player_start=Position(x=1, y=0),
            layout=[["WALL", "GOAL", "EMPTY"], ["TRAP", "BLOCK", "PORTAL_A"]],
        )
        self.assertEqual(game_state_to_ascii(create_game(level)), "#@.\nTOA")

    def test_snapshot_follows_player(self):
        state = create_game(level_from_ascii(["#@..#"]))
        state = execute_action(state, Action.RIGHT).new_state
        self.assertEqual(game_state_to_ascii(state), "#.@.#")

    def test_state_summary(self):
        state = create_game(level_from_ascii(["#@r.G#"]))
        self.assertEqual(state_summary(state), "turn=0/200 pos=(1,0) keys=none status=active")

        state = execute_action(state, Action.RIGHT).new_state
        self.assertEqual(state.inventory.keys, [KeyColor.RED])
        self.assertEqual(state_summary(state), "turn=1/200 pos=(2,0) keys=red status=active")

        state = execute_action(execute_action(state, Action.RIGHT).new_state, Action.RIGHT).new_state
        self.assertTrue(state_summary(state).endswith("status=solved"))
        self.assertEqual(state.grid[0][4].type, TileType.GOAL)


if __name__ == "__main__":
    unittest.main()
