"""Competitive rank ladder.

Ranks are a closed enumeration. Their order comes from the explicit
``LADDER`` table below; the string values are storage labels only and must
never be compared lexicographically (``"gold_i" < "gold_iv"`` as strings).
"""

from enum import StrEnum

from roster_tiers.exceptions import UnknownRankError

DIVISIONS_PER_BAND = 4


class Rank(StrEnum):
    IRON_IV = "iron_iv"
    IRON_III = "iron_iii"
    IRON_II = "iron_ii"
    IRON_I = "iron_i"
    BRONZE_IV = "bronze_iv"
    BRONZE_III = "bronze_iii"
    BRONZE_II = "bronze_ii"
    BRONZE_I = "bronze_i"
    SILVER_IV = "silver_iv"
    SILVER_III = "silver_iii"
    SILVER_II = "silver_ii"
    SILVER_I = "silver_i"
    GOLD_IV = "gold_iv"
    GOLD_III = "gold_iii"
    GOLD_II = "gold_ii"
    GOLD_I = "gold_i"
    PLATINUM_IV = "platinum_iv"
    PLATINUM_III = "platinum_iii"
    PLATINUM_II = "platinum_ii"
    PLATINUM_I = "platinum_i"
    EMERALD_IV = "emerald_iv"
    EMERALD_III = "emerald_iii"
    EMERALD_II = "emerald_ii"
    EMERALD_I = "emerald_i"
    DIAMOND_IV = "diamond_iv"
    DIAMOND_III = "diamond_iii"
    DIAMOND_II = "diamond_ii"
    DIAMOND_I = "diamond_i"
    MASTER = "master"
    GRANDMASTER = "grandmaster"
    CHALLENGER = "challenger"

    @property
    def ordinal(self) -> int:
        return RANK_ORDINALS[self]

    @property
    def is_apex(self) -> bool:
        return self in APEX_RANKS

    @property
    def band(self) -> str:
        return self.value.split("_")[0]

    @property
    def division(self) -> int | None:
        """Division number 4 (weakest) to 1 (strongest); None for apex ranks."""
        if self.is_apex:
            return None
        return _NUMERAL_DIVISIONS[self.value.split("_")[1]]

    @property
    def display_name(self) -> str:
        if self.is_apex:
            return self.band.capitalize()
        band, numeral = self.value.split("_")
        return f"{band.capitalize()} {numeral.upper()}"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Rank):
            return NotImplemented
        return self.ordinal < other.ordinal

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Rank):
            return NotImplemented
        return self.ordinal <= other.ordinal

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Rank):
            return NotImplemented
        return self.ordinal > other.ordinal

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Rank):
            return NotImplemented
        return self.ordinal >= other.ordinal


_NUMERAL_DIVISIONS = {"iv": 4, "iii": 3, "ii": 2, "i": 1}

# Weakest to strongest.
LADDER: tuple[Rank, ...] = (
    Rank.IRON_IV,
    Rank.IRON_III,
    Rank.IRON_II,
    Rank.IRON_I,
    Rank.BRONZE_IV,
    Rank.BRONZE_III,
    Rank.BRONZE_II,
    Rank.BRONZE_I,
    Rank.SILVER_IV,
    Rank.SILVER_III,
    Rank.SILVER_II,
    Rank.SILVER_I,
    Rank.GOLD_IV,
    Rank.GOLD_III,
    Rank.GOLD_II,
    Rank.GOLD_I,
    Rank.PLATINUM_IV,
    Rank.PLATINUM_III,
    Rank.PLATINUM_II,
    Rank.PLATINUM_I,
    Rank.EMERALD_IV,
    Rank.EMERALD_III,
    Rank.EMERALD_II,
    Rank.EMERALD_I,
    Rank.DIAMOND_IV,
    Rank.DIAMOND_III,
    Rank.DIAMOND_II,
    Rank.DIAMOND_I,
    Rank.MASTER,
    Rank.GRANDMASTER,
    Rank.CHALLENGER,
)

APEX_RANKS: frozenset[Rank] = frozenset({Rank.MASTER, Rank.GRANDMASTER, Rank.CHALLENGER})
DIVISIONED_RANKS: tuple[Rank, ...] = tuple(r for r in LADDER if r not in APEX_RANKS)

RANK_ORDINALS: dict[Rank, int] = {rank: i for i, rank in enumerate(LADDER)}

if len(LADDER) != 31 or set(LADDER) != set(Rank) or len(RANK_ORDINALS) != len(LADDER):
    raise RuntimeError("Rank ladder must list each of the 31 ranks exactly once")
if LADDER[-len(APEX_RANKS) :] != (Rank.MASTER, Rank.GRANDMASTER, Rank.CHALLENGER):
    raise RuntimeError("Apex ranks must sit above every divisioned rank")


def rank_from_str(raw: str) -> Rank:
    """Parse a stored or user-typed rank label.

    Accepts the storage form (``gold_iii``) as well as display forms such as
    ``"Gold III"`` or ``" MASTER "``.
    """
    normalized = "_".join(raw.strip().lower().split())
    try:
        return Rank(normalized)
    except ValueError:
        raise UnknownRankError(raw) from None
