from enum import StrEnum


class MeldKind(StrEnum):
    TRIPLET = "triplet"
    RUN = "run"


class CheckOutcome(StrEnum):
    WIN_FIRST_TURN = "win_first_turn"  # tenhou: complete on the deal, before any discard
    WIN = "win"
    MISJUDGE = "misjudge"


class CommandKind(StrEnum):
    HELP = "help"
    START = "start"
    DROP = "drop"
    CHECK = "check"
