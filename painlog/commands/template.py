"""Command templates for the fixed phrasings of voice commands.

A template is a line of German with two kinds of markup:

    [füge|füg]   one of the words or phrases; a group is never optional
    $name        the text in between, returned under "name"

Everything else must appear as written, ignoring case and extra spaces.
Trailing "?!.," on the input is dropped before matching.

    >>> p = TemplatePattern("[füge|füg] medikament $name hinzu")
    >>> p.match("füge medikament Ibuprofen 400 hinzu")
    {'name': 'Ibuprofen 400'}

Captures are non-greedy unless the pattern is built with greedy=True, which
suits a field that runs to the end of the utterance ("notiz $text").
"""

import re


class TemplatePattern:

    def __init__(self, template, greedy=False):
        self.template = template
        self._regex, self._group_map = _compile(template, greedy)

    def match(self, text):
        """Fields captured from text, or None if it doesn't fit."""
        m = self._regex.match(text.strip().rstrip("?!.,"))
        if m is None:
            return None
        fields = {}
        for group_num, field_name in self._group_map.items():
            value = m.group(group_num)
            if value is not None:
                fields[field_name] = value.strip()
        return fields

    def __repr__(self):
        return f"TemplatePattern({self.template!r})"


def match_any(patterns, text):
    """(tag, fields) for the first (TemplatePattern, tag) pair that fits, else None."""
    for pattern, tag in patterns:
        fields = pattern.match(text)
        if fields is not None:
            return tag, fields
    return None


# --- Compilation internals ---

class _Compiler:
    """Tracks capturing group numbers while compiling one template."""

    def __init__(self, greedy=False):
        self.greedy = greedy
        self.group_count = 0
        self.group_map = {}  # group_number -> field_name

    def compile_template(self, template):
        return '^' + self._fragment(template) + '$', self.group_map

    def _fragment(self, s):
        parts = []
        i = 0
        while i < len(s):
            ch = s[i]
            if ch == '[':
                j = _closing_bracket(s, i)
                alts = _split_alternatives(s[i + 1:j])
                parts.append('(?:' + '|'.join(self._fragment(a) for a in alts) + ')')
                i = j + 1
            elif ch == '$' and re.match(r'\$[a-zA-Z_]', s[i:i + 2]):
                m = re.match(r'\$([a-zA-Z_]\w*)', s[i:])
                self.group_count += 1
                self.group_map[self.group_count] = m.group(1)
                parts.append('(.+)' if self.greedy else '(.+?)')
                i += m.end()
            elif ch in ' \t':
                while i < len(s) and s[i] in ' \t':
                    i += 1
                parts.append(r'\s+')
            else:
                parts.append(re.escape(ch))
                i += 1
        return ''.join(parts)


def _closing_bracket(s, start):
    depth = 0
    for j in range(start, len(s)):
        if s[j] == '[':
            depth += 1
        elif s[j] == ']':
            depth -= 1
            if depth == 0:
                return j
    return len(s) - 1


def _split_alternatives(text):
    """Split on top-level | characters, respecting nested brackets."""
    alts = []
    depth = 0
    current = []
    for ch in text:
        if ch == '[':
            depth += 1
        elif ch == ']':
            depth -= 1
        elif ch == '|' and depth == 0:
            alts.append(''.join(current))
            current = []
            continue
        current.append(ch)
    alts.append(''.join(current))
    return alts


def _compile(template, greedy=False):
    """Compile a template string to a (compiled_regex, group_map) tuple."""
    pattern_str, group_map = _Compiler(greedy).compile_template(template)
    return re.compile(pattern_str, re.IGNORECASE), group_map


# --- Standalone tests ---

if __name__ == "__main__":
    passed = 0
    failed = 0

    def check(label, got, expected):
        global passed, failed
        if got == expected:
            passed += 1
            print(f"  PASS: {label}")
        else:
            failed += 1
            print(f"  FAIL: {label}")
            print(f"        expected: {expected}")
            print(f"        got:      {got}")

    print("=== TemplatePattern tests ===\n")

    p = TemplatePattern("[notiz|neue notiz] $text", greedy=True)
    check("capture rest", p.match("notiz stress bei der arbeit"),
          {"text": "stress bei der arbeit"})
    check("alt prefix", p.match("neue notiz wetter"), {"text": "wetter"})
    check("no match", p.match("öffne notizen"), None)

    p = TemplatePattern("[füge|füg] medikament $name hinzu")
    check("field in middle", p.match("füge medikament Ibuprofen 400 hinzu"),
          {"name": "Ibuprofen 400"})
    check("every literal word required", p.match("füge das medikament Naproxen hinzu"),
          None)
    check("case insensitive", p.match("FÜGE Medikament Aspirin HINZU"),
          {"name": "Aspirin"})

    check("no fields", TemplatePattern("[hilfe|was kann ich sagen]").match("was kann ich sagen"), {})
    check("no partial match", TemplatePattern("hilfe").match("hilfe bitte"), None)
    check("flexible whitespace", TemplatePattern("öffne tagebuch").match("öffne   tagebuch"), {})

    patterns = [
        (TemplatePattern("[merke|merk] dir $text", greedy=True), "remember"),
        (TemplatePattern("[notiere|notier] $text", greedy=True), "note"),
    ]
    check("match_any: first", match_any(patterns, "merk dir kaffee getrunken"),
          ("remember", {"text": "kaffee getrunken"}))
    check("match_any: second", match_any(patterns, "notiere wetterumschwung"),
          ("note", {"text": "wetterumschwung"}))
    check("match_any: none", match_any(patterns, "öffne tagebuch"), None)

    p = TemplatePattern("[neues medikament $name|$name als neues medikament]")
    check("field in alt 1", p.match("neues medikament Aimovig"), {"name": "Aimovig"})
    check("field in alt 2", p.match("Aimovig als neues medikament"), {"name": "Aimovig"})

    print(f"\n{passed} passed, {failed} failed out of {passed + failed} tests")
