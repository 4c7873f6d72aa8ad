from playwright.sync_api import Page, sync_playwright
import logging
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from style_service.browser import verify_text_visible
from style_service.config import ValidationSettings


def test_text_block_visible(page: Page):
    settings = ValidationSettings.from_env()
    verify_text_visible(page, settings.text_target_url, settings.text_to_verify)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=True)
        page = browser.new_page()
        try:
            test_text_block_visible(page)
            print("Text block is visible.")
        except AssertionError as e:
            print(f"Test failed: {e}")
            sys.exit(1)
        finally:
            browser.close()
