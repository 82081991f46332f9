"""Pydantic read-only snapshot schemas for the presentation layer."""

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from ..models.expedition import SUBSYSTEM_NAMES, Expedition
from ..models.leap import Leap

if TYPE_CHECKING:
    from ..engine.combat import CombatSession


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class SubSystemView(_Frozen):
    """One colony ship subsystem."""

    name: str
    status: str
    upgrade: bool


class PilotView(_Frozen):
    """One pilot on the crew roster."""

    name: str
    kills: int
    rank: str
    status: str
    injury_timer: int


class ScoutView(_Frozen):
    """One scout in flight order."""

    position: int
    ship_index: int
    ship_name: str
    damage: str
    pilot: PilotView
    can_act: bool


class FighterView(_Frozen):
    """One enemy fighter."""

    model: str
    hp: int
    guns: int
    fuel: int
    active: bool


class CombatView(_Frozen):
    """State of the battle in progress."""

    rounds: int
    status_line: str
    scout_half: bool
    laser_fired: bool
    engaged: bool
    resolved: bool
    scout_turns: list[bool]
    enemy_turns: list[bool]
    enemies: list[FighterView]
    combat_text: str


class LeapView(_Frozen):
    """One entry of the leap log."""

    number: int
    combat_rounds: int
    parts_found: int
    fuel_found: int
    threats: list[str]
    damage_taken: int
    scan_result: str | None = None


class ExpeditionSnapshot(_Frozen):
    """Everything a display needs, detached from the live game state."""

    step: int
    step_label: str
    fuel: int
    parts: int
    hull_damage: int
    hull_capacity: int
    hull_upgrade: bool
    leaps_since_incident: int
    subsystems: list[SubSystemView]
    scouts: list[ScoutView]
    pilots: list[PilotView]
    leaps: list[LeapView] = Field(default_factory=list)
    combat: CombatView | None = None
    message: str = ""
    game_over: bool = False

    @classmethod
    def capture(cls, expedition: Expedition) -> "ExpeditionSnapshot":
        return cls(
            step=expedition.step.value,
            step_label=expedition.step.label,
            fuel=expedition.fuel,
            parts=expedition.parts,
            hull_damage=expedition.hull_damage,
            hull_capacity=expedition.hull_capacity,
            hull_upgrade=expedition.hull_upgrade,
            leaps_since_incident=expedition.leaps_since_incident,
            subsystems=[
                SubSystemView(name=name, status=str(sub.status), upgrade=sub.upgrade)
                for name, sub in zip(SUBSYSTEM_NAMES, expedition.subsystems)
            ],
            scouts=[
                ScoutView(
                    position=scout.position,
                    ship_index=expedition.flight_order[scout.position],
                    ship_name=scout.ship.name,
                    damage=str(scout.ship.damage),
                    pilot=_pilot_view(scout.pilot),
                    can_act=scout.can_act,
                )
                for scout in expedition.formation()
            ],
            pilots=[_pilot_view(pilot) for pilot in expedition.pilots],
            leaps=[_leap_view(leap) for leap in expedition.leaps],
            combat=_combat_view(expedition.combat) if expedition.combat else None,
            message=expedition.message,
            game_over=expedition.game_over,
        )


def _pilot_view(pilot) -> PilotView:
    return PilotView(
        name=pilot.name,
        kills=pilot.kills,
        rank=str(pilot.rank),
        status=str(pilot.status),
        injury_timer=pilot.injury_timer,
    )


def _leap_view(leap: Leap) -> LeapView:
    return LeapView(
        number=leap.number,
        combat_rounds=leap.combat_rounds,
        parts_found=leap.parts_found,
        fuel_found=leap.fuel_found,
        threats=[str(t) for t in leap.threats],
        damage_taken=leap.damage_taken,
        scan_result=leap.scan_result,
    )


def _combat_view(session: "CombatSession") -> CombatView:
    return CombatView(
        rounds=session.rounds,
        status_line=session.status_line,
        scout_half=session.scout_half,
        laser_fired=session.laser_fired,
        engaged=session.engaged,
        resolved=session.is_resolved,
        scout_turns=list(session.scout_turns),
        enemy_turns=list(session.enemy_turns),
        enemies=[
            FighterView(
                model=str(f.model), hp=f.hp, guns=f.guns, fuel=f.fuel, active=f.active
            )
            for f in session.enemy_stats
        ],
        combat_text=session.combat_text,
    )
