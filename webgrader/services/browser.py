"""
Browser Capability
==================
The check templates only talk to a page through the BrowserPage surface
below: navigate, wait, locate elements by CSS selector, read attributes /
text / computed styles, click, resize and dismiss dialogs.

SeleniumPage implements that surface on top of a Chrome WebDriver.
"""

import re
import time
import logging

from selenium import webdriver
from selenium.common.exceptions import NoAlertPresentException, TimeoutException
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.common.by import By
from selenium.webdriver.support.ui import WebDriverWait

logger = logging.getLogger(__name__)

DEFAULT_VIEWPORT = (1280, 720)


class BrowserPage:
    """Capability surface a check needs from a browser page."""

    @property
    def url(self) -> str:
        raise NotImplementedError

    def goto(self, url: str, timeout_ms: int):
        """Load `url`; raise if the load does not finish within `timeout_ms`."""
        raise NotImplementedError

    def wait_until_ready(self, timeout_ms: int) -> bool:
        """Wait for the page to settle. Returns False on timeout instead of raising."""
        raise NotImplementedError

    def query_all(self, selector: str, within=None) -> list:
        raise NotImplementedError

    def get_attribute(self, element, name: str):
        raise NotImplementedError

    def text_content(self, element) -> str:
        raise NotImplementedError

    def computed_style(self, element, prop: str) -> str:
        raise NotImplementedError

    def is_visible(self, element) -> bool:
        raise NotImplementedError

    def click(self, element):
        raise NotImplementedError

    def set_viewport(self, width: int, height: int):
        raise NotImplementedError

    def wait(self, ms: int):
        raise NotImplementedError

    def dismiss_dialog(self):
        """Accept an open alert/confirm dialog and return its text, or None."""
        raise NotImplementedError


def css_property_name(prop: str) -> str:
    """backgroundColor -> background-color"""
    return re.sub(r"([A-Z])", lambda m: "-" + m.group(1).lower(), prop)


class SeleniumPage(BrowserPage):
    """BrowserPage backed by a Selenium WebDriver."""

    def __init__(self, driver):
        self.driver = driver

    @property
    def url(self) -> str:
        return self.driver.current_url

    def goto(self, url: str, timeout_ms: int):
        self.driver.set_page_load_timeout(timeout_ms / 1000)
        self.driver.get(url)

    def wait_until_ready(self, timeout_ms: int) -> bool:
        """
        Approximate "network idle": document is complete and the number of
        loaded resources stopped growing between two polls.
        """
        seen = {"resources": -1}

        def _settled(driver):
            state = driver.execute_script("return document.readyState")
            if state != "complete":
                return False
            count = driver.execute_script(
                "return performance.getEntriesByType('resource').length"
            )
            stable = count == seen["resources"]
            seen["resources"] = count
            return stable

        try:
            WebDriverWait(self.driver, timeout_ms / 1000, poll_frequency=0.5).until(_settled)
            return True
        except TimeoutException:
            logger.info("Page at %s not idle after %sms, continuing", self.url, timeout_ms)
            return False

    def query_all(self, selector: str, within=None) -> list:
        root = within if within is not None else self.driver
        return root.find_elements(By.CSS_SELECTOR, selector)

    def get_attribute(self, element, name: str):
        return element.get_dom_attribute(name)

    def text_content(self, element) -> str:
        return element.get_property("textContent") or ""

    def computed_style(self, element, prop: str) -> str:
        return element.value_of_css_property(css_property_name(prop))

    def is_visible(self, element) -> bool:
        return element.is_displayed()

    def click(self, element):
        element.click()

    def set_viewport(self, width: int, height: int):
        self.driver.set_window_size(width, height)

    def wait(self, ms: int):
        time.sleep(ms / 1000)

    def dismiss_dialog(self):
        try:
            alert = self.driver.switch_to.alert
        except NoAlertPresentException:
            return None
        text = alert.text
        alert.accept()
        return text


def create_driver(mode: str = "headless") -> webdriver.Chrome:
    """
    Create and configure a Chrome WebDriver for a grading run.

    Args:
        mode: "headless" runs invisibly; "headed" and "interactive" open a window

    Returns:
        A fresh driver with no persisted profile, so no session leaks between students
    """
    options = Options()

    if mode == "headless":
        options.add_argument("--headless=new")

    options.add_argument("--no-sandbox")
    options.add_argument("--disable-dev-shm-usage")
    options.add_argument("--disable-gpu")
    options.add_argument(f"--window-size={DEFAULT_VIEWPORT[0]},{DEFAULT_VIEWPORT[1]}")

    options.add_experimental_option("excludeSwitches", ["enable-automation"])
    options.add_experimental_option('useAutomationExtension', False)

    driver = webdriver.Chrome(options=options)
    return driver
