"""Command grammar for inbound message content.

Commands are matched at the end of the content so a mention prefix
(``nostr:npub1... drop 3``) is ignored. Matching is case-sensitive.
"""

import re

from pydantic import BaseModel, ConfigDict

from game.logic.enums import CommandKind

# word boundaries are ASCII: a command typed right after Japanese text still matches
_HELP_RE = re.compile(r"\bhelp\Z", re.ASCII)
_START_RE = re.compile(r"\bstart\Z", re.ASCII)
_DROP_RE = re.compile(r"\bdrop ([0-9]+)\Z", re.ASCII)
_CHECK_RE = re.compile(r"\bcheck\Z", re.ASCII)

# longer selectors are out of range anyway; keep int() away from huge inputs
_MAX_POSITION_DIGITS = 9

HELP_TEXT = """
This is a small Mahjong game. The game is played by mentions to me. I deal Mahjong tiles and you specify the tiles with the "drop" command to discard. If you want to judge, execute the "check" command.

start
  Start the game.
drop NUM
  Drop the NUM tile.
check
  Judge the tiles.
"""


class Command(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: CommandKind
    position: int | None = None  # 1-based, drop only


def parse_command(content: str) -> Command | None:
    """Classify message content, or return None when no command matches."""
    if _HELP_RE.search(content):
        return Command(kind=CommandKind.HELP)
    if _START_RE.search(content):
        return Command(kind=CommandKind.START)
    if match := _DROP_RE.search(content):
        digits = match.group(1).lstrip("0") or "0"
        position = int(digits) if len(digits) <= _MAX_POSITION_DIGITS else 0
        return Command(kind=CommandKind.DROP, position=position)
    if _CHECK_RE.search(content):
        return Command(kind=CommandKind.CHECK)
    return None
