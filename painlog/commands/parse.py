"""Parse object for the command system.

Each command module's parse(text, lexicon, now) returns a Parse (or None).
The planner keeps the highest-scoring Parse per command and ranks them.
"""

from dataclasses import dataclass, field


@dataclass
class Parse:
    command: str          # intent, e.g. "navigate_diary", "create_reminder"
    score: float          # 0.0–1.0
    args: dict = field(default_factory=dict)
    missing: list = field(default_factory=list)  # required slots not found
    module: object = None  # reference to the module, set by planner
