"""
Tests for warp navigation.

Tests cover:
- Step count, energy cost and stardate rules
- Obstacles and quadrant crossings
- Automatic repair and random device events
- Klingon fire before moving, low energy and dead in space

Run with: python -m pytest tests/test_movement.py -v
"""

import pytest

from startrek.config import MissionParameters
from startrek.constants import Device, SectorContent
from startrek.errors import InvalidInputError, WarpEnginesDamagedError
from startrek.events import GameEventType
from startrek.galaxy import GalacticRecord, Galaxy, QuadrantSummary, all_quadrant_positions
from startrek.movement import navigate, random_device_event
from startrek.navigation import Position
from startrek.quadrant import Quadrant
from startrek.rng import SequenceRandom
from startrek.ship import ShipState
from startrek.state import MissionState


HOME = Position(4, 4)
NO_EVENT = 0.5


@pytest.fixture
def make_state():
    """Factory for a hand-built game state in quadrant 4,4."""
    def _create(
        draws=(),
        sector=Position(4, 4),
        klingons=(),
        starbases=(),
        stars=(),
        energy=3000.0,
        shields=0.0,
    ):
        cells = {pos: QuadrantSummary(0, 0, 1) for pos in all_quadrant_positions()}
        cells[HOME] = QuadrantSummary(len(klingons), len(starbases), len(stars))
        cells[Position(8, 8)] = QuadrantSummary(2, 0, 1)

        quadrant = Quadrant()
        quadrant.set(sector, SectorContent.ENTERPRISE)
        for klingon in klingons:
            quadrant.add_klingon(klingon)
        for base in starbases:
            quadrant.add_starbase(base)
        for star in stars:
            quadrant.add_star(star)

        return MissionState(
            params=MissionParameters(starting_stardate=2000.0),
            galaxy=Galaxy(cells),
            record=GalacticRecord(),
            ship=ShipState(HOME, sector, energy=energy, shields=shields),
            quadrant=quadrant,
            rng=SequenceRandom(draws),
            stardate=2000.0,
        )
    return _create


def event_types(state):
    return [event.event_type for event in state.events]


class TestBasicMoves:
    """Tests for energy, time and position after a move."""

    def test_warp_one_east_crosses_quadrant(self, make_state):
        """Warp 1 course 1: eight steps, cost 3, one stardate."""
        state = make_state(
            draws=[NO_EVENT, 0.875, 0.875],  # event roll, then star placement
            sector=Position(1, 4),
        )

        result = navigate(state, 1.0, 1.0)

        assert result.steps == 8
        assert result.energy_cost == 3
        assert state.ship.energy == 2997.0
        assert state.stardate == 2001.0
        assert result.crossed_quadrant
        assert state.ship.quadrant == Position(5, 4)
        assert state.ship.sector == Position(1, 4)
        assert Position(5, 4) in state.record
        assert state.quadrant.stars == [Position(8, 8)]
        assert event_types(state).count(GameEventType.STARDATE_ADVANCED) == 1

    def test_half_warp_gains_energy(self, make_state):
        """Warp 0.5: four steps, energy +1, no stardate change."""
        state = make_state(draws=[NO_EVENT], sector=Position(2, 4))

        result = navigate(state, 1.0, 0.5)

        assert result.steps == 4
        assert result.energy_cost == -1
        assert state.ship.energy == 3001.0
        assert state.stardate == 2000.0
        assert not result.stardate_advanced
        assert state.ship.sector == Position(6, 4)
        assert state.quadrant.get(Position(6, 4)) == SectorContent.ENTERPRISE
        assert state.quadrant.is_empty(Position(2, 4))

    def test_diagonal_move(self, make_state):
        state = make_state(draws=[NO_EVENT], sector=Position(2, 6))
        navigate(state, 2.0, 0.375)
        assert state.ship.sector == Position(5, 3)

    def test_warp_zero_does_nothing(self, make_state):
        state = make_state(draws=[])
        state.ship.damage_device(Device.COMPUTER, 2)

        result = navigate(state, 1.0, 0.0)

        assert result.steps == 0
        assert state.ship.energy == 3000.0
        assert state.ship.devices[Device.COMPUTER] == -2
        assert state.events == []

    @pytest.mark.parametrize("course,warp", [(0.5, 1.0), (9.0, 1.0), (1.0, 8.5), (1.0, -1.0)])
    def test_invalid_input(self, make_state, course, warp):
        state = make_state(draws=[])
        with pytest.raises(InvalidInputError):
            navigate(state, course, warp)


class TestObstacles:
    """Tests for blocked navigation."""

    def test_stops_before_star(self, make_state):
        state = make_state(draws=[NO_EVENT], sector=Position(2, 4), stars=[Position(5, 4)])

        result = navigate(state, 1.0, 0.5)

        assert result.blocked_at == Position(5, 4)
        assert state.ship.sector == Position(4, 4)
        assert state.ship.energy == 3001.0
        assert GameEventType.NAVIGATION_BLOCKED in event_types(state)
        assert state.quadrant.get(Position(5, 4)) == SectorContent.STAR

    def test_blocked_full_warp_still_costs_a_stardate(self, make_state):
        state = make_state(draws=[NO_EVENT], stars=[Position(6, 4)])
        result = navigate(state, 1.0, 1.0)
        assert state.ship.sector == Position(5, 4)
        assert not result.crossed_quadrant
        assert state.stardate == 2001.0


class TestDeviceEvents:
    """Tests for automatic repair and random device events."""

    def test_damaged_engines_cap_warp(self, make_state):
        state = make_state(draws=[])
        state.ship.damage_device(Device.WARP_ENGINES, 1)
        with pytest.raises(WarpEnginesDamagedError) as exc_info:
            navigate(state, 1.0, 0.5)
        assert exc_info.value.max_warp == 0.2
        assert state.ship.sector == HOME

    def test_damaged_engines_allow_slow_move(self, make_state):
        state = make_state(draws=[NO_EVENT])
        state.ship.damage_device(Device.WARP_ENGINES, 1)

        result = navigate(state, 1.0, 0.2)

        assert result.steps == 1
        assert result.repaired == [Device.WARP_ENGINES]
        assert state.ship.devices[Device.WARP_ENGINES] == 0
        assert state.ship.sector == Position(5, 4)

    def test_random_damage_draw_order(self, make_state):
        """Trigger, device, coin, severity."""
        state = make_state(draws=[0.1, 0.3, 0.4, 0.7])

        result = navigate(state, 1.0, 0.125)

        assert state.rng.draws_made == 4
        assert result.device_event.device == Device.LONG_RANGE_SENSORS
        assert result.device_event.delta == -4
        assert state.ship.devices[Device.LONG_RANGE_SENSORS] == -4
        assert GameEventType.DEVICE_DAMAGED in event_types(state)

    def test_random_improvement(self, make_state):
        state = make_state(draws=[0.2, 0.0, 0.5, 0.99])
        event = random_device_event(state)
        assert event.improved
        assert state.ship.devices[Device.WARP_ENGINES] == 5

    def test_no_event_above_threshold(self, make_state):
        state = make_state(draws=[0.21])
        assert random_device_event(state) is None
        assert state.rng.draws_made == 1

    def test_repair_happens_before_event(self, make_state):
        """A device damaged by this move's event is not repaired by it."""
        state = make_state(draws=[0.1, 0.875, 0.0, 0.0])
        state.ship.damage_device(Device.COMPUTER, 2)

        navigate(state, 1.0, 0.125)

        assert state.ship.devices[Device.COMPUTER] == -2


class TestEnergyAndCombat:
    """Tests for Klingon fire and energy checks during navigation."""

    def test_klingons_fire_before_moving(self, make_state):
        state = make_state(
            draws=[0.5, NO_EVENT],
            sector=Position(2, 4),
            klingons=[Position(2, 8)],
            shields=500.0,
        )

        result = navigate(state, 1.0, 0.5)

        assert result.volley.hits == [pytest.approx(50.0)]
        assert state.ship.shields == pytest.approx(450.0)
        assert state.ship.sector == Position(6, 4)
        types = event_types(state)
        assert types.index(GameEventType.ENTERPRISE_HIT) < types.index(GameEventType.SHIP_MOVED)

    def test_destroyed_before_moving(self, make_state):
        state = make_state(draws=[0.5], klingons=[Position(5, 4)], shields=10.0)
        result = navigate(state, 1.0, 1.0)
        assert result.ship_destroyed
        assert state.ship.sector == HOME
        assert state.ship.energy == 3000.0

    def test_low_energy_with_shields_stalls(self, make_state):
        state = make_state(draws=[], energy=0.0, shields=100.0)
        result = navigate(state, 1.0, 1.0)
        assert result.stalled
        assert state.ship.sector == HOME
        assert event_types(state) == [GameEventType.LOW_ENERGY]

    def test_dead_in_space(self, make_state):
        state = make_state(draws=[0.0, 0.0], klingons=[Position(5, 4)], energy=0.0)
        result = navigate(state, 1.0, 1.0)
        assert result.dead_in_space
        assert not result.ship_destroyed
        assert GameEventType.DEAD_IN_SPACE in event_types(state)


class TestArrival:
    """Tests for starbases and alerts on arrival."""

    def test_arrival_next_to_starbase_does_not_resupply(self, make_state):
        state = make_state(
            draws=[NO_EVENT], sector=Position(2, 4), starbases=[Position(7, 4)],
            energy=2000.0, shields=500.0,
        )
        state.ship.torpedoes = 3

        navigate(state, 1.0, 0.5)

        assert state.is_docked
        assert state.ship.energy == 2001.0
        assert state.ship.shields == 500.0
        assert state.ship.torpedoes == 3
        assert GameEventType.DOCKED not in event_types(state)

    def test_red_alert_on_entering_klingon_quadrant(self, make_state):
        state = make_state(
            draws=[NO_EVENT, 0.0, 0.0, 0.125, 0.0, 0.25, 0.0, 0.375, 0.0],
            sector=Position(8, 8),
        )
        state.galaxy.cells[Position(5, 5)] = QuadrantSummary(2, 0, 1)
        state.ship.shields = 200.0

        result = navigate(state, 8.0, 1.0)

        assert result.crossed_quadrant
        assert state.ship.quadrant == Position(5, 5)
        assert len(state.quadrant.klingons) == 2
        assert GameEventType.RED_ALERT in event_types(state)
