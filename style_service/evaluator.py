"""
Checks computed element styles against a style guide.

A style guide (rule table) maps a lowercase tag name to the accepted values
of each style property. The browser side hands us one snapshot per element;
we return only the elements that break the guide.
"""
import json
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional

# (rule table key, CSS property name), in reporting order
STYLE_PROPERTIES = (
    ('color', 'color'),
    ('fontFamily', 'font-family'),
    ('fontSize', 'font-size'),
    ('fontStyle', 'font-style'),
    ('lineHeight', 'line-height'),
    ('fontWeight', 'font-weight'),
    ('textTransform', 'text-transform'),
    ('letterSpacing', 'letter-spacing'),
)

FONT_WEIGHT_KEYWORDS = {
    'thin': '100', 'hairline': '100',
    'extralight': '200', 'ultralight': '200',
    'light': '300',
    'normal': '400', 'regular': '400',
    'medium': '500',
    'semibold': '600', 'demibold': '600',
    'bold': '700',
    'extrabold': '800', 'ultrabold': '800',
    'black': '900', 'heavy': '900',
}

MAX_TEXT_LENGTH = 80


def shorten_text(text, limit=MAX_TEXT_LENGTH):
    text = (text or '').strip()
    if len(text) > limit:
        return text[:limit] + '...'
    return text


@dataclass
class ElementStyleSnapshot:
    tag_name: str
    text: str = ''
    color: str = ''
    font_family: str = ''
    font_size: str = ''
    font_style: str = ''
    line_height: str = ''
    font_weight: str = ''
    text_transform: str = ''
    letter_spacing: str = ''

    @classmethod
    def from_dict(cls, data: Dict) -> 'ElementStyleSnapshot':
        """Build a snapshot from the camelCase record the page script returns."""
        return cls(
            tag_name=str(data.get('tagName') or '').lower(),
            text=shorten_text(data.get('textContent')),
            color=data.get('color') or '',
            font_family=data.get('fontFamily') or '',
            font_size=data.get('fontSize') or '',
            font_style=data.get('fontStyle') or '',
            line_height=data.get('lineHeight') or '',
            font_weight=data.get('fontWeight') or '',
            text_transform=data.get('textTransform') or '',
            letter_spacing=data.get('letterSpacing') or '',
        )

    def computed(self, key):
        """Computed value for a rule table key such as ``fontSize``."""
        attribute = ''.join('_' + c.lower() if c.isupper() else c for c in key)
        return getattr(self, attribute, '')


@dataclass
class PropertyMismatch:
    property: str
    expected: str
    found: str


@dataclass
class ElementMismatches:
    tag: str
    text: str
    mismatches: List[PropertyMismatch] = field(default_factory=list)


def _candidates(expected) -> list:
    if not expected:
        return []
    if isinstance(expected, (list, tuple)):
        return list(expected)
    return [expected]


def _value(computed) -> Optional[str]:
    if computed is None or computed == '':
        return None
    return computed if isinstance(computed, str) else str(computed)


def resolve_rule(tag_name, table) -> Dict:
    """Rule for ``tag_name``, falling back to ``default`` and then to no rule."""
    rule = table.get(tag_name)
    if rule is None:
        rule = table.get('default')
    return rule if isinstance(rule, dict) else {}


def check_font_family(computed, expected) -> bool:
    """Only the primary family counts; a browser fallback font is a failure."""
    candidates = _candidates(expected)
    if not candidates:
        return True
    computed = _value(computed)
    if computed is None:
        return False

    def normalize(name):
        return str(name).lower().replace('"', '').replace("'", '')

    actual_fonts = [font.strip() for font in normalize(computed).split(',')]
    return actual_fonts[0] in [normalize(font) for font in candidates]


def check_style_value(computed, expected) -> bool:
    candidates = _candidates(expected)
    if not candidates:
        return True
    computed = _value(computed)
    if computed is None:
        return False
    # Keyword weights are mapped for every property, not just font-weight.
    computed = FONT_WEIGHT_KEYWORDS.get(computed.lower(), computed)
    return computed in candidates


def evaluate_element(snapshot: ElementStyleSnapshot, table) -> List[PropertyMismatch]:
    rule = resolve_rule(snapshot.tag_name, table)
    mismatches = []
    for key, css_name in STYLE_PROPERTIES:
        expected = rule.get(key)
        found = snapshot.computed(key)
        check = check_font_family if key == 'fontFamily' else check_style_value
        if not check(found, expected):
            mismatches.append(PropertyMismatch(
                property=css_name,
                expected=' or '.join(str(value) for value in _candidates(expected)),
                found=found,
            ))
    return mismatches


def evaluate_page(snapshots, table) -> List[ElementMismatches]:
    """
    Evaluate every snapshot in order and keep the ones with mismatches.

    An empty result means the page conforms to the style guide.
    """
    report = []
    for snapshot in snapshots:
        mismatches = evaluate_element(snapshot, table)
        if mismatches:
            report.append(ElementMismatches(tag=snapshot.tag_name, text=snapshot.text,
                                            mismatches=mismatches))
    return report


def report_to_dicts(report: List[ElementMismatches]) -> List[Dict]:
    return [asdict(entry) for entry in report]


def format_report(report: List[ElementMismatches]) -> str:
    return json.dumps(report_to_dicts(report), indent=2, ensure_ascii=False)
