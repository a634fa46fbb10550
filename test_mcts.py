#!/usr/bin/env python
"""
Tests for the MCTS engine and agents.
"""
import io
import random
import unittest

from forest_ai.core.actions import Wait, Grow, Seed, Complete
from forest_ai.core.board import Board, Cell
from forest_ai.core.constants import ME, OPPONENT, NO_NEIGHBOR, MAX_DAY
from forest_ai.core.game import GameState, create_initial_state
from forest_ai.core.player import Player
from forest_ai.core.tree import Tree
from forest_ai.mcts import (
    MCTSAgent, MCTSAgentFactory, RandomAgent, MCTSNode, MCTSConfig,
    SearchError, mcts_search, select_node, backpropagate, fallback_action, evaluate_state
)
from forest_ai.mcts.policies import order_for_expansion, opponent_action
from forest_ai.mcts.search import count_nodes, get_principal_variation


def two_cell_board() -> Board:
    return Board([
        Cell(index=0, richness=1, neighbors=(1, NO_NEIGHBOR, NO_NEIGHBOR, NO_NEIGHBOR, NO_NEIGHBOR, NO_NEIGHBOR)),
        Cell(index=1, richness=1, neighbors=(NO_NEIGHBOR, NO_NEIGHBOR, NO_NEIGHBOR, 0, NO_NEIGHBOR, NO_NEIGHBOR)),
    ])


def harvest_state(day: int = MAX_DAY - 1) -> GameState:
    """A mature tree on the last day: completing it is clearly best."""
    return GameState(
        board=two_cell_board(),
        day=day,
        nutrients=20,
        players=[Player(id=ME, sun=10), Player(id=OPPONENT)],
        trees={0: Tree(cell_index=0, size=3, owner=ME)},
        possible_actions=[Complete(target=0), Wait()],
    )


def valued_state(my_score=0, my_sun=0, opponent_score=0, opponent_sun=0, trees=None) -> GameState:
    return GameState(
        board=two_cell_board(),
        players=[
            Player(id=ME, sun=my_sun, score=my_score),
            Player(id=OPPONENT, sun=opponent_sun, score=opponent_score),
        ],
        trees=trees or {},
    )


class TestEvaluation(unittest.TestCase):
    """Test case for the leaf evaluation."""

    def test_clear_lead(self):
        self.assertAlmostEqual(evaluate_state(valued_state(my_score=10)), 1.005)
        self.assertAlmostEqual(evaluate_state(valued_state(opponent_score=10)), -1.005)

    def test_narrow_lead(self):
        self.assertAlmostEqual(evaluate_state(valued_state(my_score=2)), 0.7)
        self.assertAlmostEqual(evaluate_state(valued_state(opponent_score=2)), -0.7)

    def test_sun_counts_for_a_third(self):
        self.assertAlmostEqual(evaluate_state(valued_state(my_sun=3)), 0.6)

    def test_ties(self):
        self.assertEqual(evaluate_state(valued_state()), 0.0)
        tree = {0: Tree(cell_index=0, size=1, owner=ME)}
        self.assertAlmostEqual(evaluate_state(valued_state(my_score=4, opponent_score=4, trees=tree)), 0.254)
        tree = {0: Tree(cell_index=0, size=1, owner=OPPONENT)}
        self.assertAlmostEqual(evaluate_state(valued_state(trees=tree)), -0.25)

    def test_bigger_lead_ranks_higher(self):
        self.assertGreater(
            evaluate_state(valued_state(my_score=30)),
            evaluate_state(valued_state(my_score=20)),
        )


class TestNode(unittest.TestCase):
    """Test case for tree nodes."""

    def setUp(self):
        self.state = create_initial_state(rng=random.Random(2))
        self.config = MCTSConfig(exploration_weight=0.0, seed=1)

    def make_children(self, root, stats):
        for action, (visits, reward) in zip([Wait(), Grow(target=1), Grow(target=2)], stats):
            child = MCTSNode(self.state, parent=root, action=action, config=self.config, rng=root.rng)
            child.visits = visits
            child.total_reward = reward
            root.children.append(child)
        root.visits = sum(child.visits for child in root.children)

    def test_zero_exploration_picks_highest_mean(self):
        root = MCTSNode(self.state, config=self.config)
        self.make_children(root, [(3, 0.3), (4, 2.0), (3, 2.7)])
        self.assertEqual(root.select_child().action, Grow(target=2))

    def test_unvisited_child_first(self):
        root = MCTSNode(self.state, config=self.config)
        self.make_children(root, [(3, 2.9), (0, 0.0), (3, 0.0)])
        self.assertEqual(root.select_child(exploration_weight=1.0).action, Grow(target=1))

    def test_exploration_favours_rarely_visited(self):
        root = MCTSNode(self.state, config=self.config)
        self.make_children(root, [(90, 45.0), (5, 2.0), (5, 2.0)])
        self.assertEqual(root.select_child(exploration_weight=0.0).action, Wait())
        self.assertNotEqual(root.select_child(exploration_weight=2.0).action, Wait())

    def test_best_child_by_visits_then_mean(self):
        root = MCTSNode(self.state, config=self.config)
        self.make_children(root, [(5, 1.0), (5, 4.0), (4, 4.0)])
        self.assertEqual(root.best_action(), Grow(target=1))

    def test_select_without_children(self):
        root = MCTSNode(self.state, config=self.config)
        with self.assertRaises(SearchError):
            root.select_child()
        self.assertIsNone(root.best_action())

    def test_expand_each_action_once(self):
        root = MCTSNode(self.state, config=self.config)
        legal = self.state.legal_actions()
        for _ in legal:
            root.expand()

        self.assertCountEqual([child.action for child in root.children], legal)
        self.assertTrue(root.is_fully_expanded())
        with self.assertRaises(SearchError):
            root.expand()

    def test_expansion_order_prefers_complete(self):
        actions = [Wait(), Seed(source=0, target=1), Grow(target=2), Complete(target=3)]
        ordered = order_for_expansion(actions, True, random.Random(0))
        self.assertEqual(ordered[-1], Complete(target=3))
        self.assertEqual(ordered[0], Wait())
        self.assertCountEqual(order_for_expansion(actions, False, random.Random(0)), actions)

    def test_backpropagate_updates_path(self):
        root = MCTSNode(self.state, config=self.config)
        child = root.expand()
        grandchild = child.expand()

        backpropagate(grandchild, 0.5)
        backpropagate(child, -1.0)

        self.assertEqual((root.visits, root.total_reward), (2, -0.5))
        self.assertEqual((child.visits, child.total_reward), (2, -0.5))
        self.assertEqual((grandchild.visits, grandchild.total_reward), (1, 0.5))
        self.assertEqual(grandchild.depth(), 2)

    def test_terminal_node(self):
        state = harvest_state(day=MAX_DAY)
        node = MCTSNode(state, config=self.config)
        self.assertTrue(node.is_terminal())
        self.assertEqual(node.untried_actions, [])
        self.assertIs(node.tree_policy(), node)
        self.assertEqual(node.simulate()[1], 0)

    def test_node_without_actions(self):
        state = harvest_state()
        state.possible_actions = []
        node = MCTSNode(state, config=self.config)
        with self.assertRaises(SearchError):
            node.tree_policy()

    def test_simulation_does_not_touch_node_state(self):
        node = MCTSNode(self.state, config=MCTSConfig(seed=4))
        snapshot = self.state.clone()
        reward, steps = node.simulate()
        self.assertEqual(self.state, snapshot)
        self.assertEqual(steps, MAX_DAY)
        self.assertTrue(-2.0 < reward < 2.0)


class TestOpponentModel(unittest.TestCase):
    """Test case for the opponent's simulated response."""

    def setUp(self):
        self.state = create_initial_state(rng=random.Random(6))

    def test_inert_opponent(self):
        config = MCTSConfig(opponent_policy="inert")
        self.assertIsNone(opponent_action(self.state, config, random.Random(0)))

    def test_symmetric_opponent_plays_legal_moves(self):
        config = MCTSConfig(opponent_policy="symmetric")
        rng = random.Random(0)
        for _ in range(20):
            action = opponent_action(self.state, config, rng)
            self.assertTrue(action.validate(self.state, OPPONENT))

    def test_waiting_opponent_does_nothing(self):
        self.state.opponent.is_waiting = True
        self.assertIsNone(opponent_action(self.state, MCTSConfig(), random.Random(0)))


class TestSearch(unittest.TestCase):
    """Test case for the search loop."""

    def test_select_node_expands_before_descending(self):
        root = MCTSNode(harvest_state(), config=MCTSConfig(seed=0))

        first = select_node(root)
        second = select_node(root)
        self.assertEqual([first.action, second.action], [Complete(target=0), Wait()])
        self.assertTrue(root.is_fully_expanded())

        # Every child ends the game, so selection stops at one of them
        third = select_node(root)
        self.assertIn(third, root.children)
        self.assertTrue(third.is_terminal())
        self.assertEqual(len(root.children), 2)

    def test_complete_beats_wait_on_last_day(self):
        for iterations in (1, 2, 3, 10, 50):
            action, stats, _ = mcts_search(harvest_state(), MCTSConfig(iterations=iterations, seed=iterations))
            self.assertEqual(action, Complete(target=0), f"{iterations} iterations")
            self.assertEqual(stats["iterations"], iterations)

    def test_waiting_pays_off_early_in_the_game(self):
        # Harvests are expanded first, so a single iteration still completes
        action, _, _ = mcts_search(harvest_state(day=0), MCTSConfig(iterations=1, seed=0))
        self.assertEqual(action, Complete(target=0))

        # With more budget the rollouts see the sun a mature tree earns before harvesting
        for iterations in (2, 10, 50):
            for seed in range(3):
                action, _, root = mcts_search(harvest_state(day=0), MCTSConfig(iterations=iterations, seed=seed))
                self.assertEqual(action, Wait(), f"{iterations} iterations, seed {seed}")
                self.assertEqual(len(root.children), 2)

    def test_root_children_are_unique_candidates(self):
        state = create_initial_state(rng=random.Random(8))
        state.me.sun = 10
        _, _, root = mcts_search(state, MCTSConfig(iterations=60, seed=3))

        actions = [child.action for child in root.children]
        self.assertEqual(len(actions), len(set(actions)))
        for action in actions:
            self.assertIn(action, state.legal_actions())

    def test_each_iteration_adds_one_node(self):
        state = create_initial_state(rng=random.Random(9))
        action, stats, root = mcts_search(state, MCTSConfig(iterations=20, seed=5))
        self.assertEqual(stats["node_count"], 21)
        self.assertEqual(count_nodes(root), 21)
        self.assertEqual(root.visits, 20)
        self.assertEqual(sum(child.visits for child in root.children), 20)
        self.assertIn(action, state.legal_actions())
        self.assertFalse(stats["used_fallback"])

    def test_same_seed_same_search(self):
        state = create_initial_state(rng=random.Random(10))
        state.me.sun = 12
        first = mcts_search(state, MCTSConfig(iterations=80, seed=42))
        second = mcts_search(state, MCTSConfig(iterations=80, seed=42))
        self.assertEqual(first[0], second[0])
        self.assertEqual(dict(first[1]["action_visits"]), dict(second[1]["action_visits"]))

    def test_time_limit_stops_search(self):
        state = create_initial_state(rng=random.Random(11))
        config = MCTSConfig(iterations=10 ** 7, time_limit=0.05, seed=1)
        action, stats, _ = mcts_search(state, config)
        self.assertTrue(stats["stopped_early"])
        self.assertLess(stats["iterations"], 10 ** 7)
        self.assertIn(action, state.legal_actions())

    def test_terminal_root_falls_back(self):
        state = harvest_state(day=MAX_DAY)
        action, stats, root = mcts_search(state, MCTSConfig(iterations=5, seed=0))
        self.assertEqual(action, Wait())
        self.assertTrue(stats["used_fallback"])
        self.assertEqual(root.children, [])

    def test_principal_variation(self):
        _, _, root = mcts_search(harvest_state(), MCTSConfig(iterations=10, seed=0))
        variation = get_principal_variation(root)
        self.assertEqual(variation[0][0], Complete(target=0))

    def test_fallback_action(self):
        self.assertEqual(fallback_action([]), Wait())
        self.assertEqual(fallback_action([Grow(target=1), Wait()]), Wait())
        self.assertEqual(fallback_action([Grow(target=1), Seed(source=1, target=2)]), Grow(target=1))


class TestConfig(unittest.TestCase):
    """Test case for search configuration."""

    def test_validation(self):
        for kwargs in [
            {"iterations": 0},
            {"exploration_weight": -1.0},
            {"max_depth": 0},
            {"time_limit": 0.0},
            {"simulation_policy": "greedy"},
            {"opponent_policy": "random"},
        ]:
            with self.assertRaises(ValueError, msg=str(kwargs)):
                MCTSConfig(**kwargs)

    def test_zero_exploration_allowed(self):
        self.assertEqual(MCTSConfig(exploration_weight=0.0).exploration_weight, 0.0)

    def test_presets(self):
        self.assertEqual(MCTSConfig.fast().iterations, 100)
        self.assertEqual(MCTSConfig.deep().iterations, 5000)
        self.assertEqual(MCTSConfig.default(), MCTSConfig())

    def test_from_dict(self):
        config = MCTSConfig.from_dict({"iterations": 7, "verbose": True, "time_limit": None})
        self.assertEqual(config.iterations, 7)
        self.assertIsNone(config.time_limit)
        self.assertEqual(MCTSConfig.from_dict(config.to_dict()), config)


class TestAgents(unittest.TestCase):
    """Test case for the agents."""

    def test_agent_harvests(self):
        agent = MCTSAgent(MCTSConfig(iterations=20, seed=1))
        self.assertEqual(agent.select_action(harvest_state()), Complete(target=0))
        self.assertEqual(agent.get_last_statistics()["iterations"], 20)
        self.assertEqual(len(agent.action_history), 1)

    def test_unusable_host_actions_leave_wait(self):
        board = Board([Cell(index=0, richness=1, neighbors=(NO_NEIGHBOR,) * 6)])
        state = GameState(
            board=board,
            players=[Player(id=ME, sun=10), Player(id=OPPONENT)],
            possible_actions=[Grow(target=0), Wait()],
        )
        agent = MCTSAgent(MCTSConfig(iterations=10, seed=0))
        self.assertEqual(agent.select_action(state), Wait())
        self.assertTrue(agent.last_stats["forced_move"])

    def test_no_candidates(self):
        # Nothing passes validation: fall back on the host's own list
        state = harvest_state()
        state.possible_actions = [Grow(target=1)]
        agent = MCTSAgent(MCTSConfig(iterations=10, seed=0))
        self.assertEqual(agent.select_action(state), Grow(target=1))
        self.assertTrue(agent.last_stats["used_fallback"])

        state.possible_actions = []
        self.assertEqual(agent.select_action(state), Wait())
        self.assertTrue(agent.last_stats["used_fallback"])

    def test_same_seed_same_choice(self):
        state = create_initial_state(rng=random.Random(12))
        state.me.sun = 9
        first = MCTSAgent(MCTSConfig(iterations=50, seed=7)).select_action(state)
        second = MCTSAgent(MCTSConfig(iterations=50, seed=7)).select_action(state)
        self.assertEqual(first, second)

    def test_plays_second_seat(self):
        state = create_initial_state(rng=random.Random(13))
        state.opponent.sun = 10
        agent = MCTSAgent(MCTSConfig(iterations=30, seed=2))
        action = agent.select_action(state, OPPONENT)
        self.assertTrue(action.validate(state, OPPONENT))

    def test_verbose_output(self):
        output = io.StringIO()
        agent = MCTSAgent(MCTSConfig(iterations=5, seed=0), name="Tester", verbose=True, output=output)
        agent.select_action(harvest_state())
        self.assertIn("Tester selected: COMPLETE 0", output.getvalue())
        self.assertIn("Iterations: 5", output.getvalue())

    def test_reset_statistics(self):
        agent = MCTSAgent(MCTSConfig(iterations=5, seed=0))
        agent.select_action(harvest_state())
        self.assertTrue(agent.get_action_statistics())
        agent.reset_statistics()
        self.assertEqual(agent.action_history, [])
        self.assertEqual(agent.get_principal_variation(), [])

    def test_random_agent(self):
        state = create_initial_state(rng=random.Random(14))
        agent = RandomAgent(seed=0)
        for _ in range(10):
            self.assertIn(agent.select_action(state, OPPONENT), state.get_valid_actions(OPPONENT))

    def test_factory(self):
        self.assertEqual(MCTSAgentFactory.create_fast().config.iterations, 100)
        self.assertEqual(MCTSAgentFactory.create_strong().config.iterations, 5000)
        custom = MCTSAgentFactory.create_custom(iterations=25, time_limit=0.5, seed=3)
        self.assertEqual(custom.config.iterations, 25)
        self.assertEqual(custom.config.time_limit, 0.5)


if __name__ == "__main__":
    unittest.main()
