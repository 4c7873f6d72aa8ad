from playwright.sync_api import Page, sync_playwright
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from style_service.browser import verify_title

# Smoke check that the browser setup works at all
SMOKE_URL = os.environ.get("SMOKE_URL", "https://example.com")
SMOKE_TITLE = os.environ.get("SMOKE_TITLE", "Example Domain")


def test_smoke_title(page: Page):
    verify_title(page, SMOKE_URL, SMOKE_TITLE)


if __name__ == "__main__":
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=True)
        page = browser.new_page()
        try:
            test_smoke_title(page)
            print(f"{SMOKE_URL} has the expected title.")
        except AssertionError as e:
            print(f"Test failed: {e}")
            sys.exit(1)
        finally:
            browser.close()
