"""
Playwright side of the style checks.

Drives the page (navigation, storefront password wall), pulls computed
styles out of the DOM and hands them to the evaluator.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import List

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page, expect
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from style_service.evaluator import ElementMismatches, ElementStyleSnapshot, evaluate_page, format_report

logger = logging.getLogger(__name__)

# Returns null for hidden, empty and icon-only elements so they never reach the evaluator.
EXTRACT_STYLES_SCRIPT = """
el => {
    const style = window.getComputedStyle(el);
    const text = (el.textContent || "").trim();
    const tagName = el.tagName.toLowerCase();
    const isLikelyIconElement = tagName === 'i' || el.classList.contains('icon');
    if (!el.checkVisibility() || text.length === 0 || isLikelyIconElement) return null;
    return {
        tagName,
        textContent: text,
        color: style.color,
        fontFamily: style.fontFamily,
        fontSize: style.fontSize,
        fontStyle: style.fontStyle,
        lineHeight: style.lineHeight,
        fontWeight: style.fontWeight,
        textTransform: style.textTransform,
        letterSpacing: style.letterSpacing
    };
}
"""


@dataclass
class PageStyleResult:
    url: str
    checked: int = 0
    report: List[ElementMismatches] = field(default_factory=list)

    @property
    def passed(self):
        return not self.report

    def failure_message(self):
        return (f"[{self.url}] Style validation failed. Found {len(self.report)} elements "
                f"with mismatched styles:\n{format_report(self.report)}")


def navigate(page: Page, url, timeout_ms):
    logger.info("[%s] Attempting to navigate...", url)
    # 'load' waits for web fonts, which the computed styles depend on.
    page.goto(url, wait_until='load', timeout=timeout_ms - 5000)
    logger.info("[%s] Navigation successful.", url)
    page.wait_for_timeout(1500)


def login_if_required(page: Page, settings, url=''):
    """Get past a storefront password wall. Returns True if a login was made."""
    login_button = page.locator(f"text={settings.login_button_text}")
    if not settings.login_password:
        if login_button.is_visible():
            logger.warning("[%s] Login page is showing but LOGIN_PASSWORD is not set. "
                           "Styles will be checked on the login page.", url)
        return False

    logger.info("[%s] Checking for login page...", url)
    password_input = page.locator(f'input[name="{settings.password_input_name}"]')
    try:
        login_button.wait_for(state='visible', timeout=5000)
    except PlaywrightTimeoutError:
        logger.info("[%s] No login page detected or login button not found.", url)
        return False

    logger.info("[%s] Login button found. Proceeding with login...", url)
    login_button.click()
    password_input.wait_for(state='visible', timeout=10000)
    password_input.fill(settings.login_password)
    # Enter instead of the submit button, which overlays tend to intercept.
    password_input.press('Enter')
    page.wait_for_load_state('load')
    page.wait_for_load_state('networkidle')
    logger.info("[%s] Login submitted. Page loaded after login.", url)
    page.wait_for_timeout(1000)
    return True


def collect_snapshots(page: Page, selector) -> List[ElementStyleSnapshot]:
    elements = page.locator(selector).all()
    logger.info("Found %d potential elements to analyze.", len(elements))

    snapshots = []
    for element in elements:
        try:
            details = element.evaluate(EXTRACT_STYLES_SCRIPT)
        except PlaywrightError as e:
            if page.is_closed():
                logger.warning("Stopping element checks, target was closed: %s", e.message)
                break
            logger.error("Error checking element: %s", e.message)
            continue
        if details is None:
            continue
        snapshots.append(ElementStyleSnapshot.from_dict(details))
    return snapshots


def validate_page_styles(page: Page, url, expectations, settings) -> PageStyleResult:
    navigate(page, url, settings.timeout_ms)
    login_if_required(page, settings, url)

    snapshots = collect_snapshots(page, settings.element_selector)
    logger.info("[%s] Analyzed %d visible elements with text content.", url, len(snapshots))
    return PageStyleResult(url=url, checked=len(snapshots), report=evaluate_page(snapshots, expectations))


def text_locator(page: Page, text):
    escaped = text.replace('\\', '\\\\').replace('"', '\\"')
    return page.locator(f':text-is("{escaped}")')


def verify_text_visible(page: Page, url, text, timeout_ms=60000):
    """Exact, case-sensitive match of a whole text block."""
    logger.info("Navigating to %s...", url)
    page.goto(url, wait_until='networkidle', timeout=timeout_ms)
    expect(text_locator(page, text)).to_be_visible(timeout=timeout_ms)
    logger.info("Assertion successful: Text block is visible.")


def verify_title(page: Page, url, pattern):
    page.goto(url)
    expect(page.locator('h1')).to_be_visible()
    expect(page).to_have_title(re.compile(pattern))
