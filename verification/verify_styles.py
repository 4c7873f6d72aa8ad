from playwright.sync_api import Page, Error, sync_playwright
import logging
import os
import sys

# Run from the repo root without installing the package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from style_service.browser import validate_page_styles
from style_service.config import ValidationSettings, load_style_expectations


def check_styles(page: Page, settings, expectations):
    """Validate every target URL and return the failure messages."""
    failures = []
    for target_url in settings.target_urls:
        try:
            result = validate_page_styles(page, target_url, expectations, settings)
        except Error as e:
            print(f"[{target_url}] Could not validate styles: {e.message}")
            failures.append(f"[{target_url}] {e.message}")
            continue

        print(f"[{target_url}] Analyzed {result.checked} visible elements with text content.")
        if result.passed:
            print(f"✅ [{target_url}] Style validation successful!")
        else:
            print(result.failure_message())
            failures.append(result.failure_message())
    return failures


def test_styles(page: Page):
    settings = ValidationSettings.from_env()
    page.set_default_timeout(settings.timeout_ms)
    failures = check_styles(page, settings, load_style_expectations())
    assert not failures, "\n\n".join(failures)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    settings = ValidationSettings.from_env()
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=True)
        page = browser.new_page()
        page.set_default_timeout(settings.timeout_ms)
        try:
            failures = check_styles(page, settings, load_style_expectations())
        finally:
            browser.close()
    sys.exit(1 if failures else 0)
