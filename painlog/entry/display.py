"""Human-readable renderings of parsed slots."""

_DOSE_LABELS = {
    1: "¼ Tablette",
    2: "½ Tablette",
    3: "¾ Tablette",
    4: "1 Tablette",
    6: "1½ Tabletten",
    8: "2 Tabletten",
}


def format_dose_quarters(quarters):
    """Format a dose in quarter-tablet units: 2 -> "½ Tablette"."""
    if quarters in _DOSE_LABELS:
        return _DOSE_LABELS[quarters]
    tablets = quarters / 4
    amount = f"{tablets:g}".replace(".", ",")
    return f"{amount} Tablette{'n' if quarters > 4 else ''}"


def format_time_display(time):
    """Format a ParsedTime: its matched phrase, "jetzt", or "YYYY-MM-DD HH:MM"."""
    if time.display:
        return time.display
    if time.is_now:
        return "jetzt"
    return f"{time.date.isoformat()} {time.clock}"
