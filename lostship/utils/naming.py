"""Default names for the colony ship's scouts and pilots."""

SHIP_NAMES = [
    "Kestrel",
    "Wren",
    "Osprey",
    "Merlin",
    "Heron",
    "Swift",
]

PILOT_NAMES = [
    "Okafor",
    "Lindqvist",
    "Reyes",
    "Tanaka",
    "Brandt",
    "Moreau",
]


def default_ship_name(index: int) -> str:
    """Return the commissioning name of the scout in hangar slot ``index``."""
    return SHIP_NAMES[index % len(SHIP_NAMES)]


def default_pilot_name(index: int) -> str:
    """Return the name of the pilot in crew slot ``index``."""
    return PILOT_NAMES[index % len(PILOT_NAMES)]
