"""Tests for rule_based_pcg.model.agent module."""

from __future__ import annotations

from collections import Counter
from typing import List

import numpy as np
import pytest

from rule_based_pcg.model.agent import (
    AgentPosition,
    Direction,
    DrunkAgentParams,
    DrunkAgentPass,
    StepTrace,
    WalkState,
    drunk_agent,
)
from rule_based_pcg.model.grid import CellState, TileGrid


def make_params(**overrides) -> DrunkAgentParams:
    values = dict(
        walks=5,
        steps=10,
        room_size_x=5,
        room_size_y=3,
        prob_generate_room=0.1,
        prob_increase_room=0.05,
        prob_change_direction=0.2,
        prob_increase_change=0.03,
    )
    values.update(overrides)
    return DrunkAgentParams(**values)


class TestDirection:
    def test_offsets_are_unit_moves(self) -> None:
        for direction in Direction:
            assert abs(direction.dx) + abs(direction.dy) == 1

    def test_random_covers_all_directions(self) -> None:
        rng = np.random.default_rng(0)
        counts = Counter(Direction.random(rng) for _ in range(400))
        assert set(counts) == set(Direction)
        assert min(counts.values()) > 60


class TestWalkState:
    def test_initial_uses_base_probabilities(self) -> None:
        params = make_params(prob_generate_room=0.25, prob_change_direction=0.15)
        state = WalkState.initial(params, np.random.default_rng(0))
        assert state.room_prob == 0.25
        assert state.change_prob == 0.15
        assert isinstance(state.direction, Direction)


class TestDrunkAgentEndToEnd:
    def test_single_step_with_certain_room(self) -> None:
        grid = TileGrid(4, 4)
        position = AgentPosition(2, 2)
        params = make_params(walks=1, steps=1, room_size_x=3, room_size_y=3,
                             prob_generate_room=1.0, prob_change_direction=0.0)
        DrunkAgentPass().apply(grid, params, position, np.random.default_rng(0))

        expected = np.zeros((4, 4), dtype=np.int8)
        expected[1:4, 1:4] = 1
        np.testing.assert_array_equal(grid.cells, expected)
        assert grid.get(2, 2) is CellState.BLOCKED
        assert abs(position.x - 2) + abs(position.y - 2) == 1

    def test_functional_form_matches_class(self) -> None:
        params = make_params()
        grid_a = TileGrid.random(20, 10, np.random.default_rng(9))
        grid_b = grid_a.copy()
        pos_a, pos_b = AgentPosition(10, 5), AgentPosition(10, 5)
        DrunkAgentPass().apply(grid_a, params, pos_a, np.random.default_rng(4))
        drunk_agent(grid_b, params, pos_b, np.random.default_rng(4))
        assert grid_a == grid_b
        assert pos_a == pos_b


class TestRoomCarving:
    def test_room_clamped_at_corner(self) -> None:
        grid = TileGrid(10, 10)
        params = make_params(room_size_x=5, room_size_y=3)
        covered = DrunkAgentPass().carve_room(grid, AgentPosition(0, 0), params)
        assert covered == 6
        assert grid.cells[0:3, 0:2].all()
        assert grid.count(CellState.BLOCKED) == 6

    def test_room_size_x_spans_rows(self) -> None:
        grid = TileGrid(10, 10)
        params = make_params(room_size_x=7, room_size_y=1)
        DrunkAgentPass().carve_room(grid, AgentPosition(5, 5), params)
        expected = np.zeros((10, 10), dtype=np.int8)
        expected[2:9, 5] = 1
        np.testing.assert_array_equal(grid.cells, expected)

    @pytest.mark.parametrize("x,y", [(10, 10), (0, 3), (19, 0), (4, 11)])
    def test_room_matches_row_major_loop(self, x: int, y: int) -> None:
        width, height = 20, 12
        params = make_params(room_size_x=7, room_size_y=2)
        grid = TileGrid(width, height)
        DrunkAgentPass().carve_room(grid, AgentPosition(x, y), params)

        # Row index i over [0, H) uses room_size_x, column j over [0, W) room_size_y
        expected = np.zeros((height, width), dtype=np.int8)
        half_i, half_j = params.room_size_x // 2, params.room_size_y // 2
        for i in range(max(0, y - half_i), min(height - 1, y + half_i) + 1):
            for j in range(max(0, x - half_j), min(width - 1, x + half_j) + 1):
                expected[i, j] = 1
        np.testing.assert_array_equal(grid.cells, expected)

    def test_zero_room_size_carves_agent_cell(self) -> None:
        grid = TileGrid(5, 5)
        params = make_params(room_size_x=0, room_size_y=0)
        DrunkAgentPass().carve_room(grid, AgentPosition(2, 3), params)
        assert grid.count(CellState.BLOCKED) == 1
        assert grid.get(2, 3) is CellState.BLOCKED

    def test_large_rooms_never_leave_grid(self) -> None:
        grid = TileGrid(6, 4)
        params = make_params(walks=4, steps=20, room_size_x=15, room_size_y=15,
                             prob_generate_room=1.0)
        DrunkAgentPass().apply(grid, params, AgentPosition(0, 3),
                               np.random.default_rng(2))
        assert grid.cells.shape == (4, 6)
        assert grid.count(CellState.OPEN) == 0


class TestBounds:
    @pytest.mark.parametrize("seed", range(5))
    def test_agent_stays_in_bounds(self, seed: int) -> None:
        grid = TileGrid(5, 3)
        position = AgentPosition(0, 0)
        trace: List[StepTrace] = []
        params = make_params(walks=7, steps=15, prob_change_direction=0.0,
                             prob_increase_change=0.0)
        DrunkAgentPass().apply(grid, params, position,
                               np.random.default_rng(seed), trace)
        assert len(trace) == 7 * 15
        for record in trace:
            assert grid.in_bounds(record.x, record.y)
        assert grid.in_bounds(position.x, position.y)
        assert any(record.bounced for record in trace)

    def test_bounce_keeps_position(self) -> None:
        grid = TileGrid(1, 1)
        position = AgentPosition(0, 0)
        trace: List[StepTrace] = []
        DrunkAgentPass().apply(grid, make_params(walks=2, steps=3), position,
                               np.random.default_rng(0), trace)
        assert all(record.bounced for record in trace)
        assert position.as_tuple() == (0, 0)

    def test_rejects_start_outside_grid(self) -> None:
        with pytest.raises(ValueError):
            DrunkAgentPass().apply(TileGrid(4, 4), make_params(),
                                   AgentPosition(4, 0), np.random.default_rng(0))


class TestRamps:
    @pytest.mark.parametrize("seed", range(5))
    def test_ramps_grow_until_trigger_then_reset(self, seed: int) -> None:
        params = make_params(walks=6, steps=12)
        trace: List[StepTrace] = []
        DrunkAgentPass().apply(TileGrid(15, 10), params, AgentPosition(7, 5),
                               np.random.default_rng(seed), trace)

        assert trace[0].room_prob == params.prob_generate_room
        assert trace[0].change_prob == params.prob_change_direction

        for prev, cur in zip(trace, trace[1:]):
            if prev.room_carved:
                assert cur.room_prob == params.prob_generate_room
            else:
                assert cur.room_prob == pytest.approx(
                    prev.room_prob + params.prob_increase_room)

            if prev.direction_changed or prev.bounced:
                assert cur.change_prob == params.prob_change_direction
            else:
                assert cur.change_prob == pytest.approx(
                    prev.change_prob + params.prob_increase_change)

    def test_ramps_reset_between_invocations(self) -> None:
        params = make_params(walks=2, steps=10, prob_generate_room=0.0,
                             prob_increase_room=0.01)
        agent = DrunkAgentPass()
        grid = TileGrid(30, 30)
        position = AgentPosition(15, 15)
        rng = np.random.default_rng(1)

        first: List[StepTrace] = []
        agent.apply(grid, params, position, rng, first)
        second: List[StepTrace] = []
        agent.apply(grid, params, position, rng, second)

        assert max(r.room_prob for r in first) > params.prob_generate_room
        assert second[0].room_prob == params.prob_generate_room
        assert second[0].change_prob == params.prob_change_direction

    def test_probabilities_above_one_always_trigger(self) -> None:
        params = make_params(walks=1, steps=6, prob_generate_room=0.0,
                             prob_increase_room=1.1)
        trace: List[StepTrace] = []
        DrunkAgentPass().apply(TileGrid(10, 10), params, AgentPosition(5, 5),
                               np.random.default_rng(0), trace)
        assert any(r.room_prob > 1.0 for r in trace)
        for record in trace:
            if record.room_prob > 1.0:
                assert record.room_carved


class TestWalks:
    def test_each_walk_draws_a_new_direction(self) -> None:
        params = make_params(walks=40, steps=1, prob_change_direction=0.0,
                             prob_increase_change=0.0, prob_generate_room=0.0,
                             prob_increase_room=0.0)
        trace: List[StepTrace] = []
        DrunkAgentPass().apply(TileGrid(101, 101), params, AgentPosition(50, 50),
                               np.random.default_rng(7), trace)
        assert not any(record.bounced for record in trace)
        assert len({record.direction for record in trace}) > 1

    def test_direction_constant_within_walk_without_changes(self) -> None:
        params = make_params(walks=5, steps=8, prob_change_direction=0.0,
                             prob_increase_change=0.0)
        trace: List[StepTrace] = []
        DrunkAgentPass().apply(TileGrid(101, 101), params, AgentPosition(50, 50),
                               np.random.default_rng(3), trace)
        for walk in range(5):
            directions = {r.direction for r in trace if r.walk == walk}
            assert len(directions) == 1

    def test_zero_walks_or_steps_is_noop(self) -> None:
        for params in (make_params(walks=0), make_params(steps=0)):
            grid = TileGrid(6, 6)
            position = AgentPosition(3, 3)
            DrunkAgentPass().apply(grid, params, position, np.random.default_rng(0))
            assert grid.count(CellState.BLOCKED) == 0
            assert position.as_tuple() == (3, 3)


class TestCarving:
    def test_visited_cells_hold_carve_value(self) -> None:
        grid = TileGrid(20, 10)
        trace: List[StepTrace] = []
        DrunkAgentPass().apply(grid, make_params(), AgentPosition(10, 5),
                               np.random.default_rng(11), trace)
        for record in trace:
            assert grid.get(record.x, record.y) is CellState.BLOCKED

    def test_carve_open_on_blocked_grid(self) -> None:
        grid = TileGrid.from_array(np.ones((10, 20), dtype=np.int8))
        trace: List[StepTrace] = []
        DrunkAgentPass(CellState.OPEN).apply(grid, make_params(),
                                             AgentPosition(10, 5),
                                             np.random.default_rng(11), trace)
        for record in trace:
            assert grid.get(record.x, record.y) is CellState.OPEN
        assert grid.count(CellState.OPEN) > 0

    def test_position_updated_by_reference(self) -> None:
        position = AgentPosition(10, 5)
        trace: List[StepTrace] = []
        DrunkAgentPass().apply(TileGrid(20, 10), make_params(), position,
                               np.random.default_rng(5), trace)
        last = trace[-1]
        if last.bounced:
            assert position.as_tuple() == (last.x, last.y)
        else:
            moved = Direction[last.direction]
            assert position.as_tuple() == (last.x + moved.dx, last.y + moved.dy)


class TestParamsValidate:
    @pytest.mark.parametrize("field", ["walks", "steps", "room_size_x", "room_size_y",
                                       "prob_generate_room", "prob_increase_change"])
    def test_negative_values_rejected(self, field: str) -> None:
        with pytest.raises(ValueError):
            make_params(**{field: -1}).validate()

    def test_valid_params_pass(self) -> None:
        make_params(prob_generate_room=1.5).validate()
