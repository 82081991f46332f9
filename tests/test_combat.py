"""Tests for Step 3: Combat Resolution."""

import pytest

from lostship.engine.combat import (
    CombatSession,
    Target,
    apply_damage,
    damage_scout,
    enemy_hits,
    enemy_targeting,
    mining_laser_damage,
    scout_attack_damage,
)
from lostship.engine.results import ErrorType
from lostship.models import (
    Expedition,
    Pilot,
    PilotStatus,
    Rank,
    Ship,
    ShipDamage,
    SubsystemStatus,
    ThreatTier,
)
from lostship.utils import ScriptedRNG

MK1, MK2, MK3 = ThreatTier.MK1, ThreatTier.MK2, ThreatTier.MK3


def engaged_session(threats, expedition=None):
    """Create an expedition and a battle that has just started."""
    expedition = expedition or Expedition.new()
    session = CombatSession.open(expedition.flight_order, threats)
    session.engage()
    session.update_turn_state(expedition)
    return expedition, session


def all_scouts_miss(expedition, session):
    """Every scout attacks fighter 0 and misses."""
    rng = ScriptedRNG([1] * 6)
    for position in range(6):
        result = session.scout_attack(expedition, position, 0, rng)
        assert result.accepted


# =========================================================================
# OUTCOME TABLES
# =========================================================================


@pytest.mark.parametrize("hp, damage", [(5, 2), (2, 2), (1, 3), (0, 1), (8, 0)])
def test_apply_damage_clamps_at_zero(hp, damage):
    assert apply_damage(hp, damage) == max(hp - damage, 0)
    assert apply_damage(hp, damage) >= 0


class TestScoutAttackTable:
    """Test the scout attack damage table."""

    def test_six_with_normal_pilot_deals_two(self):
        assert scout_attack_damage(Ship(name="Wren"), Pilot(name="Reyes"), ScriptedRNG([6])) == 2

    def test_five_deals_one(self):
        assert scout_attack_damage(Ship(name="Wren"), Pilot(name="Reyes"), ScriptedRNG([5])) == 1

    def test_low_rolls_miss(self):
        for roll in (1, 2, 3, 4):
            assert scout_attack_damage(
                Ship(name="Wren"), Pilot(name="Reyes"), ScriptedRNG([roll])
            ) == 0

    def test_six_with_injured_pilot_deals_one(self):
        pilot = Pilot(name="Reyes", status=PilotStatus.INJURED)
        assert scout_attack_damage(Ship(name="Wren"), pilot, ScriptedRNG([6])) == 1

    def test_veteran_bonus(self):
        pilot = Pilot(name="Reyes", kills=3, rank=Rank.VETERAN)
        assert scout_attack_damage(Ship(name="Wren"), pilot, ScriptedRNG([4])) == 1

    def test_ace_bonus(self):
        pilot = Pilot(name="Reyes", kills=6, rank=Rank.ACE)
        assert scout_attack_damage(Ship(name="Wren"), pilot, ScriptedRNG([4])) == 2

    def test_ace_overshoot_misses(self):
        """5 + 2 = 7 is off the table."""
        pilot = Pilot(name="Reyes", kills=6, rank=Rank.ACE)
        assert scout_attack_damage(Ship(name="Wren"), pilot, ScriptedRNG([5])) == 0

    def test_damaged_ship_penalty(self):
        ship = Ship(name="Wren", damage=ShipDamage.HALF)
        assert scout_attack_damage(ship, Pilot(name="Reyes"), ScriptedRNG([5])) == 0
        assert scout_attack_damage(ship, Pilot(name="Reyes"), ScriptedRNG([6])) == 1


@pytest.mark.parametrize(
    "roll, upgraded, damage",
    [
        (1, False, 0),
        (3, False, 0),
        (4, False, 1),
        (5, False, 1),
        (3, True, 1),
        (5, True, 2),
        (6, True, 3),
    ],
)
def test_mining_laser_table(roll, upgraded, damage):
    assert mining_laser_damage(upgraded, ScriptedRNG([roll])) == damage


def test_enemy_hits_above_three():
    assert not enemy_hits(ScriptedRNG([3]))
    assert enemy_hits(ScriptedRNG([4]))


class TestEnemyTargeting:
    """Test the enemy targeting table."""

    def test_first_round_uses_one_die(self):
        rng = ScriptedRNG([1])
        assert enemy_targeting(1, rng) == Target.SUPERFICIAL
        assert rng.calls == [6]

    @pytest.mark.parametrize(
        "roll, target",
        [
            (2, Target.FIFTH_SCOUT),
            (3, Target.FOURTH_SCOUT),
            (4, Target.THIRD_SCOUT),
            (5, Target.SECOND_SCOUT),
            (6, Target.LEAD_SCOUT),
        ],
    )
    def test_first_round_scout_targets(self, roll, target):
        assert enemy_targeting(1, ScriptedRNG([roll])) == target

    @pytest.mark.parametrize(
        "rolls, target",
        [
            ([3, 4], Target.HULL),
            ([4, 4], Target.ENGINES),
            ([4, 5], Target.MINING_LASER),
            ([5, 5], Target.SCOUT_BAY),
            ([5, 6], Target.SICK_BAY),
            ([6, 6], Target.SENSORS),
        ],
    )
    def test_later_rounds_use_two_dice(self, rolls, target):
        rng = ScriptedRNG(rolls)
        assert enemy_targeting(2, rng) == target
        assert rng.calls == [6, 6]

    def test_out_of_range_defaults_to_hull(self):
        assert enemy_targeting(3, ScriptedRNG([6, 7])) == Target.HULL


class TestScoutDamageTable:
    """Test the scout damage table."""

    def test_superficial(self):
        ship, pilot = Ship(name="Wren"), Pilot(name="Reyes")
        assert damage_scout(ship, pilot, ScriptedRNG([1])) == "Superficial damage."
        assert ship.damage == ShipDamage.NORMAL
        assert pilot.status == PilotStatus.NORMAL

    def test_pilot_injured_then_killed(self):
        ship, pilot = Ship(name="Wren"), Pilot(name="Reyes")
        damage_scout(ship, pilot, ScriptedRNG([2]))
        assert pilot.status == PilotStatus.INJURED
        damage_scout(ship, pilot, ScriptedRNG([2]))
        assert pilot.status == PilotStatus.KIA

    def test_pilot_killed(self):
        ship, pilot = Ship(name="Wren"), Pilot(name="Reyes")
        damage_scout(ship, pilot, ScriptedRNG([3]))
        assert pilot.status == PilotStatus.KIA
        assert ship.damage == ShipDamage.NORMAL

    def test_ship_half_then_destroyed(self):
        ship, pilot = Ship(name="Wren"), Pilot(name="Reyes")
        damage_scout(ship, pilot, ScriptedRNG([4]))
        assert ship.damage == ShipDamage.HALF
        damage_scout(ship, pilot, ScriptedRNG([4]))
        assert ship.damage == ShipDamage.DESTROYED

    def test_ship_inoperable(self):
        ship, pilot = Ship(name="Wren"), Pilot(name="Reyes")
        damage_scout(ship, pilot, ScriptedRNG([5]))
        assert ship.damage == ShipDamage.INOPERABLE

    def test_inoperable_hit_never_repairs_destroyed(self):
        ship = Ship(name="Wren", damage=ShipDamage.DESTROYED)
        damage_scout(ship, Pilot(name="Reyes"), ScriptedRNG([5]))
        assert ship.damage == ShipDamage.DESTROYED

    def test_scout_destroyed_and_pilot_killed(self):
        ship, pilot = Ship(name="Wren"), Pilot(name="Reyes")
        assert damage_scout(ship, pilot, ScriptedRNG([6])) == "Scout destroyed, pilot KIA."
        assert ship.damage == ShipDamage.DESTROYED
        assert pilot.status == PilotStatus.KIA


# =========================================================================
# COMBAT SESSION
# =========================================================================


class TestSessionSetup:
    """Test opening and engaging a combat session."""

    def test_open_sets_every_flag(self):
        expedition = Expedition.new()
        session = CombatSession.open(expedition.flight_order, [MK2, MK1])
        assert session.rounds == 1
        assert session.scout_turns == [True] * 6
        assert session.enemy_turns == [True, True]
        assert not session.engaged
        assert [f.hp for f in session.enemy_stats] == [5, 2]

    def test_no_action_before_engage(self):
        expedition = Expedition.new()
        session = CombatSession.open(expedition.flight_order, [MK1])
        result = session.scout_attack(expedition, 0, 0, ScriptedRNG([6]))
        assert not result.accepted
        assert result.error_type == ErrorType.WRONG_PHASE
        assert session.enemy_stats[0].hp == 2

    def test_engage_clears_flags(self):
        _, session = engaged_session([MK1])
        assert session.engaged
        assert session.scout_half
        assert session.scout_turns == [False] * 6
        assert session.enemy_turns == [False]

    def test_formation_is_a_snapshot(self):
        expedition = Expedition.new()
        session = CombatSession.open(expedition.flight_order, [MK1])
        expedition.flight_order.reverse()
        assert session.formation == [0, 1, 2, 3, 4, 5]


class TestScoutHalf:
    """Test scout attacks and the mining laser."""

    def test_attack_marks_turn_and_deals_damage(self):
        expedition, session = engaged_session([MK2])
        result = session.scout_attack(expedition, 0, 0, ScriptedRNG([6]))
        assert result.accepted
        assert session.enemy_stats[0].hp == 3
        assert session.scout_turns[0]

    def test_miss_still_uses_turn(self):
        expedition, session = engaged_session([MK2])
        session.scout_attack(expedition, 2, 0, ScriptedRNG([1]))
        assert session.scout_turns[2]
        assert session.enemy_stats[0].hp == 5

    def test_scout_cannot_attack_twice(self):
        expedition, session = engaged_session([MK2])
        session.scout_attack(expedition, 0, 0, ScriptedRNG([1]))
        result = session.scout_attack(expedition, 0, 0, ScriptedRNG([6]))
        assert not result.accepted
        assert result.error_type == ErrorType.INVALID_SELECTION
        assert session.enemy_stats[0].hp == 5

    @pytest.mark.parametrize("position", [6, -1, 10])
    def test_invalid_scout_position(self, position):
        expedition, session = engaged_session([MK1])
        result = session.scout_attack(expedition, position, 0, ScriptedRNG([6]))
        assert result.error_type == ErrorType.INVALID_SELECTION

    @pytest.mark.parametrize("enemy_index", [1, -1])
    def test_invalid_enemy_index(self, enemy_index):
        expedition, session = engaged_session([MK1])
        result = session.scout_attack(expedition, 0, enemy_index, ScriptedRNG([6]))
        assert result.error_type == ErrorType.INVALID_SELECTION
        assert not session.scout_turns[0]

    def test_cannot_target_destroyed_fighter(self):
        expedition, session = engaged_session([MK1, MK1])
        session.enemy_stats[0].hp = 0
        result = session.scout_attack(expedition, 0, 0, ScriptedRNG([6]))
        assert not result.accepted
        assert "destroyed" in result.message

    def test_cannot_target_withdrawn_fighter(self):
        expedition, session = engaged_session([MK1, MK1])
        session.enemy_stats[1].fuel = 0
        result = session.scout_attack(expedition, 0, 1, ScriptedRNG([6]))
        assert not result.accepted
        assert "withdrawn" in result.message

    def test_kill_credits_pilot(self):
        expedition, session = engaged_session([MK1, MK1])
        session.scout_attack(expedition, 0, 0, ScriptedRNG([6]))
        pilot = expedition.pilot_of(session.formation[0])
        assert session.enemy_stats[0].defeated
        assert pilot.kills == 1

    def test_last_kill_resolves_battle(self):
        expedition, session = engaged_session([MK1])
        session.scout_attack(expedition, 0, 0, ScriptedRNG([6]))
        assert session.is_resolved
        result = session.scout_attack(expedition, 1, 0, ScriptedRNG([6]))
        assert result.error_type == ErrorType.WRONG_PHASE

    def test_disabled_scouts_are_skipped(self):
        expedition = Expedition.new()
        expedition.ships[1].damage = ShipDamage.DESTROYED
        expedition.ships[2].damage = ShipDamage.INOPERABLE
        expedition.pilots[3].kill()
        expedition, session = engaged_session([MK1], expedition)
        assert session.scout_turns == [False, True, True, True, False, False]
        result = session.scout_attack(expedition, 1, 0, ScriptedRNG([6]))
        assert not result.accepted
        assert "cannot fly" in result.message

    def test_laser_unavailable_in_first_round(self):
        expedition, session = engaged_session([MK1])
        result = session.fire_mining_laser(expedition, 0, ScriptedRNG([5]))
        assert result.error_type == ErrorType.WRONG_PHASE
        assert session.enemy_stats[0].hp == 2

    def test_laser_fires_once_per_round(self):
        expedition, session = engaged_session([MK3])
        session.rounds = 2
        result = session.fire_mining_laser(expedition, 0, ScriptedRNG([5]))
        assert result.accepted
        assert session.enemy_stats[0].hp == 7
        assert session.laser_fired
        assert session.scout_turns == [False] * 6
        result = session.fire_mining_laser(expedition, 0, ScriptedRNG([5]))
        assert result.error_type == ErrorType.INVALID_SELECTION

    def test_upgraded_laser(self):
        expedition = Expedition.new()
        expedition.mining_laser.upgrade = True
        expedition, session = engaged_session([MK3], expedition)
        session.rounds = 2
        session.fire_mining_laser(expedition, 0, ScriptedRNG([5]))
        assert session.enemy_stats[0].hp == 6

    def test_inoperable_laser_cannot_fire(self):
        expedition = Expedition.new()
        expedition.mining_laser.status = SubsystemStatus.INOPERABLE
        expedition, session = engaged_session([MK3], expedition)
        session.rounds = 2
        result = session.fire_mining_laser(expedition, 0, ScriptedRNG([5]))
        assert not result.accepted
        assert "inoperable" in result.message


class TestHalfTransitions:
    """Test the scout half / enemy half state machine."""

    def test_first_round_flips_when_scouts_done(self):
        expedition, session = engaged_session([MK1])
        all_scouts_miss(expedition, session)
        assert not session.scout_half
        assert session.scout_turns == [False] * 6

    def test_flip_happens_once(self):
        expedition, session = engaged_session([MK1])
        all_scouts_miss(expedition, session)
        session.update_turn_state(expedition)
        session.update_turn_state(expedition)
        assert not session.scout_half
        assert session.rounds == 1

    def test_later_rounds_wait_for_laser(self):
        expedition, session = engaged_session([MK3])
        session.rounds = 2
        all_scouts_miss(expedition, session)
        assert session.scout_half
        session.fire_mining_laser(expedition, 0, ScriptedRNG([1]))
        assert not session.scout_half

    def test_hold_laser_ends_scout_half(self):
        expedition, session = engaged_session([MK3])
        session.rounds = 2
        all_scouts_miss(expedition, session)
        result = session.hold_laser(expedition)
        assert result.accepted
        assert not session.scout_half

    def test_hold_laser_in_first_round_rejected(self):
        expedition, session = engaged_session([MK3])
        assert session.hold_laser(expedition).error_type == ErrorType.INVALID_SELECTION

    def test_dead_laser_does_not_block(self):
        expedition = Expedition.new()
        expedition.mining_laser.status = SubsystemStatus.INOPERABLE
        expedition, session = engaged_session([MK3], expedition)
        session.rounds = 2
        all_scouts_miss(expedition, session)
        assert not session.scout_half

    def test_all_scouts_disabled_flips_at_once(self):
        expedition = Expedition.new()
        for ship in expedition.ships:
            ship.damage = ShipDamage.DESTROYED
        expedition, session = engaged_session([MK1], expedition)
        assert not session.scout_half

    def test_grounded_scouts_and_dead_laser_keep_rounds_turning(self):
        expedition = Expedition.new()
        for ship in expedition.ships:
            ship.damage = ShipDamage.DESTROYED
        expedition.mining_laser.status = SubsystemStatus.INOPERABLE
        expedition, session = engaged_session([MK1], expedition)
        session.resolve_enemy_turn(expedition, ScriptedRNG([1]))
        assert session.rounds == 2
        assert session.scout_half
        assert session.scout_turns == [True] * 6

        result = session.resolve_enemy_turn(expedition, ScriptedRNG([1]))
        assert result.accepted
        assert session.rounds == 3
        assert session.enemy_stats[0].fuel == 1

    def test_enemy_cannot_act_in_scout_half(self):
        expedition, session = engaged_session([MK1])
        result = session.resolve_enemy_turn(expedition, ScriptedRNG([5]))
        assert result.error_type == ErrorType.WRONG_PHASE

    def test_end_of_round_bookkeeping(self):
        expedition, session = engaged_session([MK1])
        all_scouts_miss(expedition, session)
        result = session.resolve_enemy_turn(expedition, ScriptedRNG([2]))
        assert result.message == "Miss!"
        assert session.rounds == 2
        assert session.scout_half
        assert session.enemy_turns == [False]
        assert not session.laser_fired
        assert session.enemy_stats[0].fuel == 2

    def test_one_enemy_per_advance(self):
        expedition, session = engaged_session([MK1, MK1])
        session.scout_half = False
        session.resolve_enemy_turn(expedition, ScriptedRNG([1]))
        assert session.enemy_turns == [True, False]
        assert not session.scout_half
        session.resolve_enemy_turn(expedition, ScriptedRNG([1]))
        assert session.scout_half
        assert session.rounds == 2

    def test_destroyed_enemy_is_skipped(self):
        expedition, session = engaged_session([MK1, MK1])
        session.enemy_stats[0].hp = 0
        session.scout_half = False
        session.update_turn_state(expedition)
        rng = ScriptedRNG([1])
        session.resolve_enemy_turn(expedition, rng)
        assert rng.remaining == 0
        assert session.rounds == 2
        assert session.enemy_stats[0].fuel == 3
        assert session.enemy_stats[1].fuel == 2

    def test_fuel_exhaustion_resolves_battle(self):
        expedition, session = engaged_session([MK1])
        session.enemy_stats[0].fuel = 1
        session.scout_half = False
        session.resolve_enemy_turn(expedition, ScriptedRNG([1]))
        assert session.enemy_stats[0].withdrawn
        assert session.is_resolved


class TestEnemyFire:
    """Test enemy hits landing on scouts and the colony ship."""

    def test_first_round_hit_on_lead_scout(self):
        expedition, session = engaged_session([MK1])
        session.scout_half = False
        session.resolve_enemy_turn(expedition, ScriptedRNG([5, 6, 3]))
        lead_pilot = expedition.pilot_of(session.formation[0])
        assert lead_pilot.status == PilotStatus.KIA
        assert session.hits_taken == 1

    def test_fifth_scout_slot(self):
        expedition, session = engaged_session([MK1])
        session.scout_half = False
        session.resolve_enemy_turn(expedition, ScriptedRNG([4, 2, 5]))
        assert expedition.ships[session.formation[4]].damage == ShipDamage.INOPERABLE

    def test_superficial_hit(self):
        expedition, session = engaged_session([MK1])
        session.scout_half = False
        result = session.resolve_enemy_turn(expedition, ScriptedRNG([4, 1]))
        assert "superficial" in result.message
        assert session.hits_taken == 0

    def test_superficial_scout_damage_not_counted(self):
        expedition, session = engaged_session([MK1])
        session.scout_half = False
        result = session.resolve_enemy_turn(expedition, ScriptedRNG([4, 6, 1]))
        assert "Superficial damage." in result.message
        assert session.hits_taken == 0

    def test_hit_on_dead_subsystem_not_counted(self):
        expedition, session = engaged_session([MK1])
        expedition.engine.status = SubsystemStatus.INOPERABLE
        session.rounds = 2
        session.scout_half = False
        session.resolve_enemy_turn(expedition, ScriptedRNG([4, 4, 4]))
        assert session.hits_taken == 0

    def test_hull_hit(self):
        expedition, session = engaged_session([MK1])
        session.rounds = 2
        session.scout_half = False
        session.resolve_enemy_turn(expedition, ScriptedRNG([4, 3, 4]))
        assert expedition.hull_damage == 1

    def test_subsystem_hit(self):
        expedition, session = engaged_session([MK1])
        session.rounds = 2
        session.scout_half = False
        session.resolve_enemy_turn(expedition, ScriptedRNG([4, 4, 4]))
        assert expedition.engine.status == SubsystemStatus.SERVICEABLE

    def test_every_gun_fires(self):
        expedition, session = engaged_session([MK3])
        session.rounds = 2
        session.scout_half = False
        rng = ScriptedRNG([4, 3, 4, 1, 4, 5, 5, 2])
        result = session.resolve_enemy_turn(expedition, rng)
        assert rng.remaining == 0
        assert expedition.hull_damage == 1
        assert expedition.scout_bay.status == SubsystemStatus.SERVICEABLE
        assert result.message.count("Miss!") == 2
