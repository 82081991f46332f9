"""Game configuration constants."""

# Expedition starting state
STARTING_FUEL = 6
STARTING_PARTS = 6
ROSTER_SIZE = 6  # Scouts and pilots; also the largest enemy formation

# Hull
HULL_CAPACITY = 6
HULL_CAPACITY_UPGRADED = 7

# Pilot ranks (kills needed)
VETERAN_KILLS = 3
ACE_KILLS = 6

# Fighter base stats per tier: (hp, guns, fuel)
MK1_STATS = (2, 1, 3)
MK2_STATS = (5, 2, 4)
MK3_STATS = (8, 4, 5)

# Repair and upgrade costs (parts)
INOPERABLE_SCOUT_REPAIR_COST = 1
DESTROYED_SCOUT_REBUILD_COST = 6
SUBSYSTEM_REPAIR_COST_PER_RUNG = 2
HULL_REPAIR_COST_PER_POINT = 1
UPGRADE_COST = 4

# Sick bay recovery time in leaps, by sick bay status name
SICK_BAY_RECOVERY_LEAPS = {
    "NORMAL": 1,
    "SERVICEABLE": 2,
    "BARELY_FUNCTIONING": 3,
}

# Renaming
MAX_NAME_LENGTH = 24

# Testing
RNG_SEED_DEFAULT = 42  # Default seed for testing
