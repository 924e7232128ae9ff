"""Entry point for `python -m painlog`.

    python -m painlog -parse <text>    winning command parse, test_cases.txt format
    python -m painlog -entry <text>    the VoiceParseResult of a dictated entry
    python -m painlog -plan <text>     the plan and the policy decision
    python -m painlog                  interactive prompt

Any of them may be preceded by -meds "Ibuprofen 400 mg;Sumatriptan 50 mg".
"""

import sys

from painlog.entry import build_lexicon


def _print_arg(key, val):
    if hasattr(val, "hour"):
        # datetime-like: print dotted attributes
        print(f"{key}.hour: {val.hour}")
        print(f"{key}.minute: {val.minute}")
    elif isinstance(val, list):
        print(f"{key}: {'nonempty' if val else 'empty'}")
    elif isinstance(val, bool):
        print(f"{key}: {'true' if val else 'false'}")
    elif val is None:
        print(f"{key}: none")
    else:
        print(f"{key}: {val}")


def _parse_cmd(text, lexicon):
    """Parse a single input and print the result in test_cases.txt format."""
    from painlog.commands import ALL_COMMANDS as modules
    from painlog.commands.planner import canonicalize

    canonical = canonicalize(text)
    parses = []
    for mod in modules:
        p = mod.parse(canonical, lexicon, None)
        if p is not None:
            p.module = mod
            parses.append(p)

    print(f"> {text}")

    if not parses:
        print("module: none")
        return

    parses.sort(key=lambda p: -p.score)
    best = parses[0]
    print(f"module: {best.module.__name__.split('.')[-1]}")
    print(f"command: {best.command}")
    for key, val in best.args.items():
        _print_arg(key, val)
    if best.missing:
        print(f"# missing: {', '.join(best.missing)}")


def _entry_cmd(text, lexicon):
    from painlog.entry import format_dose_quarters, format_time_display, parse

    r = parse(text, lexicon)
    print(f"> {text}")
    print(f"entry_type: {r.entry_type} ({r.confidence:.2f})"
          f"{', toggle' if r.type_can_be_toggled else ''}"
          f"{', review' if r.needs_review else ''}")
    print(f"time: {format_time_display(r.time)} [{r.time.kind}, {r.time.confidence}]")
    if r.pain.value is None:
        print("pain: none")
    else:
        print(f"pain: {r.pain.value} ({r.pain.confidence:.2f}, {r.pain.evidence!r})")
    for m in r.medications:
        print(f"medication: {m.name}, {format_dose_quarters(m.dose_quarters)} ({m.confidence:.2f})")
    print(f"note: {r.note!r}")


def _plan_cmd(text, lexicon, source="typed"):
    from painlog.commands.router import dispatch

    plan, decision = dispatch(text, lexicon, source)
    print(f"> {text}")
    print(f"kind: {plan.kind}")
    if plan.intent:
        print(f"intent: {plan.intent} ({plan.confidence:.2f}), risk {plan.risk}")
        print(f"summary: {plan.summary}")
    if plan.missing:
        print(f"missing: {', '.join(plan.missing)}")
    if plan.question:
        print(f"question: {plan.question}")
    for s in plan.suggestions:
        print(f"  try: {s}")
    print(f"decision: {decision.decision} ({decision.reason})")


def _interactive(lexicon):
    print("painlog: type a command, empty line to quit.")
    while True:
        try:
            text = input("> ").strip()
        except EOFError:
            break
        if not text:
            break
        _plan_cmd(text, lexicon)
        print()


def main(argv):
    lexicon = build_lexicon(())
    if len(argv) >= 2 and argv[0] == "-meds":
        lexicon = build_lexicon([m.strip() for m in argv[1].split(";") if m.strip()])
        argv = argv[2:]

    if len(argv) >= 2 and argv[0] == "-parse":
        _parse_cmd(" ".join(argv[1:]), lexicon)
    elif len(argv) >= 2 and argv[0] == "-entry":
        _entry_cmd(" ".join(argv[1:]), lexicon)
    elif len(argv) >= 2 and argv[0] == "-plan":
        _plan_cmd(" ".join(argv[1:]), lexicon)
    else:
        _interactive(lexicon)


if __name__ == "__main__" or not sys.argv[0]:
    main(sys.argv[1:])
