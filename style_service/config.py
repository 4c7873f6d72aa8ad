"""
Run settings and style guide loading.

Everything is read from environment variables so the same scripts can be
pointed at another store or style guide without code changes.
"""
import copy
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_TARGET_URL = 'https://randys-worldwide.myshopify.com/'
DEFAULT_ELEMENT_SELECTOR = 'p, span, h1, h2, h3, h4, h5, h6, a, li, button, label, td, th, dd, dt, div'
DEFAULT_TIMEOUT_MS = 120000

DEFAULT_LOGIN_BUTTON_TEXT = 'Login using password'
DEFAULT_PASSWORD_INPUT_NAME = 'password'

DEFAULT_TEXT_TARGET_URL = 'https://rel.net/'
DEFAULT_TEXT_TO_VERIFY = (
    "If you're seeking deep, immersive bass for your home theater, tight and precise bass "
    "for music, or a versatile subwoofer that excels in both, our comparison tool is designed "
    "to help you find the perfect subwoofer to meet your specific needs."
)

# Desktop typography. Line heights are font size times the design's
# line-height percentage, weights are numeric (900 = ExtraBold).
DEFAULT_STYLE_EXPECTATIONS = {
    'h1': {
        'color': ['rgb(35, 31, 32)'],
        'fontFamily': ['Saira'],
        'fontSize': ['72px', '50px'],
        'fontStyle': ['italic'],
        'fontWeight': ['900'],
        'lineHeight': ['79.2px', '55px'],
        'textTransform': ['uppercase'],
        'letterSpacing': None,
    },
    'h2': {
        'color': ['rgb(35, 31, 32)'],
        'fontFamily': ['Saira'],
        'fontSize': ['36px'],
        'fontStyle': ['italic'],
        'fontWeight': ['900'],
        'lineHeight': ['39.6px'],
        'textTransform': ['uppercase'],
        'letterSpacing': None,
    },
    'h3': {
        'color': ['rgb(35, 31, 32)'],
        'fontFamily': ['Saira'],
        'fontSize': ['30px'],
        'fontStyle': ['italic'],
        'fontWeight': ['900'],
        'lineHeight': ['33px'],
        'textTransform': ['uppercase'],
        'letterSpacing': None,
    },
    'h4': {
        'color': ['rgb(35, 31, 32)'],
        'fontFamily': ['Saira'],
        'fontSize': ['26px'],
        'fontStyle': ['italic'],
        'fontWeight': ['900'],
        'lineHeight': ['28.6px'],
        'textTransform': ['uppercase'],
        'letterSpacing': None,
    },
    'h5': {
        'color': ['rgb(35, 31, 32)'],
        'fontFamily': ['Inter'],
        'fontSize': ['20px'],
        'fontStyle': ['normal'],
        'fontWeight': ['700'],
        'lineHeight': ['26px'],
        'textTransform': ['none'],
        'letterSpacing': None,
    },
    'h6': {
        'color': ['rgb(35, 31, 32)'],
        'fontFamily': ['Inter'],
        'fontSize': ['15px'],
        'fontStyle': ['normal'],
        'fontWeight': ['500'],
        'lineHeight': ['18px'],
        'textTransform': ['uppercase'],
        'letterSpacing': ['0.6px'],
    },
    'p': {
        'color': ['rgb(35, 31, 32)'],
        'fontFamily': ['Inter'],
        'fontSize': ['17px', '15px'],
        'fontStyle': ['normal'],
        'fontWeight': ['400'],
        'lineHeight': ['27.2px', '24px'],
        'textTransform': ['none'],
        'letterSpacing': None,
    },
    # Generic containers inherit from too many places to pin down.
    'default': {
        'color': None,
        'fontFamily': None,
        'fontSize': None,
        'fontStyle': None,
        'fontWeight': None,
        'lineHeight': None,
        'textTransform': None,
        'letterSpacing': None,
    },
}


class ConfigurationLoadError(Exception):
    """Raised when an external style guide cannot be read or parsed."""


def default_style_expectations() -> Dict:
    return copy.deepcopy(DEFAULT_STYLE_EXPECTATIONS)


def parse_style_expectations(raw: str) -> Dict:
    try:
        table = json.loads(raw)
    except ValueError as e:
        raise ConfigurationLoadError(f"Invalid style expectations JSON: {e}") from e
    if not isinstance(table, dict):
        raise ConfigurationLoadError("Style expectations must be a JSON object keyed by tag name")
    return {str(tag).lower(): rule for tag, rule in table.items()}


def read_style_expectations(path: str) -> Dict:
    file_path = os.path.abspath(path)
    if not os.path.exists(file_path):
        raise ConfigurationLoadError(f"Style expectations file not found: {file_path}")
    try:
        with open(file_path, encoding='utf-8') as f:
            raw = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationLoadError(f"Could not read style expectations file {file_path}: {e}") from e
    return parse_style_expectations(raw)


def load_style_expectations(environ=None) -> Dict:
    """
    Load the style guide for this run.

    Sources, first one set wins:
      1. STYLE_EXPECTATIONS_JSON - the table as an inline JSON string
      2. STYLE_EXPECTATIONS_PATH - path to a JSON file
      3. the built-in DEFAULT_STYLE_EXPECTATIONS

    A broken external source never fails the run; it is logged and the
    built-in table is used instead.
    """
    environ = os.environ if environ is None else environ
    try:
        if environ.get('STYLE_EXPECTATIONS_JSON'):
            table = parse_style_expectations(environ['STYLE_EXPECTATIONS_JSON'])
            logger.info("Loaded style expectations from STYLE_EXPECTATIONS_JSON environment variable.")
            return table
        if environ.get('STYLE_EXPECTATIONS_PATH'):
            table = read_style_expectations(environ['STYLE_EXPECTATIONS_PATH'])
            logger.info("Loaded style expectations from file: %s", environ['STYLE_EXPECTATIONS_PATH'])
            return table
    except ConfigurationLoadError as e:
        logger.warning("%s. Using default expectations.", e)
        return default_style_expectations()

    logger.info("Using default hardcoded style expectations.")
    return default_style_expectations()


def parse_target_urls(value: str) -> List[str]:
    return [url.strip() for url in value.split(',') if url.strip()]


def _timeout_from_env(environ) -> int:
    raw = environ.get('TEST_TIMEOUT_MS')
    if not raw:
        return DEFAULT_TIMEOUT_MS
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid TEST_TIMEOUT_MS=%r, using %d.", raw, DEFAULT_TIMEOUT_MS)
        return DEFAULT_TIMEOUT_MS


@dataclass
class ValidationSettings:
    target_urls: List[str] = field(default_factory=lambda: [DEFAULT_TARGET_URL])
    element_selector: str = DEFAULT_ELEMENT_SELECTOR
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    login_password: Optional[str] = None
    login_button_text: str = DEFAULT_LOGIN_BUTTON_TEXT
    password_input_name: str = DEFAULT_PASSWORD_INPUT_NAME
    text_target_url: str = DEFAULT_TEXT_TARGET_URL
    text_to_verify: str = DEFAULT_TEXT_TO_VERIFY

    @classmethod
    def from_env(cls, environ=None) -> 'ValidationSettings':
        environ = os.environ if environ is None else environ
        urls_input = environ.get('TARGET_URLS') or environ.get('TARGET_URL') or DEFAULT_TARGET_URL
        return cls(
            target_urls=parse_target_urls(urls_input),
            element_selector=environ.get('ELEMENT_SELECTOR') or DEFAULT_ELEMENT_SELECTOR,
            timeout_ms=_timeout_from_env(environ),
            login_password=environ.get('LOGIN_PASSWORD') or None,
            login_button_text=environ.get('LOGIN_BUTTON_TEXT') or DEFAULT_LOGIN_BUTTON_TEXT,
            password_input_name=environ.get('PASSWORD_INPUT_NAME') or DEFAULT_PASSWORD_INPUT_NAME,
            text_target_url=environ.get('TEXT_TARGET_URL') or DEFAULT_TEXT_TARGET_URL,
            text_to_verify=environ.get('TEXT_TO_VERIFY') or DEFAULT_TEXT_TO_VERIFY,
        )
