from painlog.commands import (
    navigate, query, note, reminder, rate, medication, delete, pain_entry,
)

ALL_COMMANDS = [
    navigate, query, note, reminder, rate, medication, delete, pain_entry,
]
