"""
Crawl configuration.

Values are resolved in this order: explicit overrides (the CLI), then
ALLOTMENT_* environment variables (a .env file is honoured), then the
defaults in utils/constants.py.
"""

import os
from typing import Any, Callable, Dict, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from allotment_scraper.utils.constants import (
    TARGET_URL,
    MOBILE_USER_AGENT,
    DEFAULT_OUTPUT_DIR,
    COLLEGE_SELECTOR,
    BRANCH_SELECTOR,
    SUBMIT_BUTTON_SELECTOR,
    RESULTS_TABLE_SELECTOR,
    ALLOTMENT_LINK_SELECTOR,
    COLLEGE_PLACEHOLDER_VALUE,
    BRANCH_PLACEHOLDER_VALUE,
    DEFAULT_NAVIGATION_TIMEOUT,
    DEFAULT_ELEMENT_TIMEOUT,
    DEFAULT_RESULTS_TIMEOUT,
)


class FormSelectors(BaseModel):
    """DOM contract of the allotment form."""
    entry_link: str = ALLOTMENT_LINK_SELECTOR
    top_level: str = COLLEGE_SELECTOR
    second_level: str = BRANCH_SELECTOR
    submit: str = SUBMIT_BUTTON_SELECTOR
    results_table: str = RESULTS_TABLE_SELECTOR
    top_placeholder: str = COLLEGE_PLACEHOLDER_VALUE
    second_placeholder: str = BRANCH_PLACEHOLDER_VALUE


class CrawlSettings(BaseModel):
    target_url: str = TARGET_URL
    output_dir: str = DEFAULT_OUTPUT_DIR
    headless: bool = True
    user_agent: str = MOBILE_USER_AGENT
    navigation_timeout_ms: int = Field(default=DEFAULT_NAVIGATION_TIMEOUT, gt=0)
    element_timeout_ms: int = Field(default=DEFAULT_ELEMENT_TIMEOUT, gt=0)
    results_timeout_ms: int = Field(default=DEFAULT_RESULTS_TIMEOUT, gt=0)
    selectors: FormSelectors = Field(default_factory=FormSelectors)


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


# setting name -> (environment variable, parser)
_ENV_SETTINGS: Dict[str, Tuple[str, Callable[[str], Any]]] = {
    "target_url": ("ALLOTMENT_TARGET_URL", str.strip),
    "output_dir": ("ALLOTMENT_OUTPUT_DIR", str.strip),
    "headless": ("ALLOTMENT_HEADLESS", _parse_bool),
    "user_agent": ("ALLOTMENT_USER_AGENT", str.strip),
    "navigation_timeout_ms": ("ALLOTMENT_NAVIGATION_TIMEOUT_MS", int),
    "element_timeout_ms": ("ALLOTMENT_ELEMENT_TIMEOUT_MS", int),
    "results_timeout_ms": ("ALLOTMENT_RESULTS_TIMEOUT_MS", int),
}


def load_settings(**overrides: Any) -> CrawlSettings:
    """
    Build settings from the environment plus explicit overrides.

    Overrides whose value is None are ignored, so argparse namespaces can be
    passed through without filtering.

    Raises:
        ValueError: An environment variable holds an unparsable value.
    """
    load_dotenv()

    values: Dict[str, Any] = {}
    for name, (env_var, parse) in _ENV_SETTINGS.items():
        raw = os.getenv(env_var)
        if raw is None or raw.strip() == "":
            continue
        try:
            values[name] = parse(raw)
        except ValueError as e:
            raise ValueError(f"Invalid value for {env_var}: {e}") from e

    values.update({k: v for k, v in overrides.items() if v is not None})
    return CrawlSettings(**values)
