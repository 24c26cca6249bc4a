"""
Data schemas for the scraping wrapper.

This module defines Pydantic models for browser options, operations and
operation scenarios, ensuring data validation for everything that is read
from configuration or scenario files.
"""

from pathlib import Path
from typing import Optional, List, Dict, Any, Tuple, Union
from enum import Enum

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


class OperationMethod(str, Enum):
    """Operation types."""
    GO = "go"
    CLICK = "click"
    FILL = "fill"


class ScrapeOption(BaseModel):
    """
    Options for a scraping session.

    ``dom_defs`` maps short names to CSS selectors so that operations can
    refer to elements by name instead of by selector.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "dom_defs": {"search_text_area": "[title=\"Search\"]"},
                "headless": False,
                "window_size": [1920, 1080],
            }
        }
    )

    dom_defs: Dict[str, str] = Field(default_factory=dict, description="DOM definition name -> CSS selector")
    headless: bool = Field(True, description="Run the browser without a window")
    window_size: Optional[Tuple[int, int]] = Field(None, description="Window size as (width, height)")

    timeout: int = Field(30000, gt=0, description="Default navigation timeout in milliseconds")
    element_timeout: int = Field(1000, gt=0, description="Element wait per attempt in milliseconds")
    retries: int = Field(5, ge=0, description="Attempts per wrapped call")
    retry_delay: float = Field(2.0, ge=0, description="Seconds between attempts")
    user_agent: Optional[str] = Field(None, description="User agent override")

    @field_validator('dom_defs', mode='before')
    @classmethod
    def parse_dom_defs(cls, v):
        """Treat an empty YAML section as no definitions."""
        if v is None:
            return {}
        return v

    @field_validator('window_size')
    @classmethod
    def check_window_size(cls, v):
        """Both window dimensions must be positive."""
        if v is not None and (v[0] <= 0 or v[1] <= 0):
            raise ValueError("window_size dimensions must be positive")
        return v

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ScrapeOption":
        """
        Build options from a configuration dictionary.

        Args:
            config: Configuration with optional ``browser``, ``retry`` and
                ``dom_defs`` sections

        Returns:
            Validated ScrapeOption
        """
        browser_config = config.get('browser') or {}
        retry_config = config.get('retry') or {}

        values: Dict[str, Any] = {'dom_defs': config.get('dom_defs')}
        for key in ('headless', 'window_size', 'timeout', 'element_timeout', 'user_agent'):
            if browser_config.get(key) is not None:
                values[key] = browser_config[key]
        if retry_config.get('retries') is not None:
            values['retries'] = retry_config['retries']
        if retry_config.get('delay') is not None:
            values['retry_delay'] = retry_config['delay']

        return cls(**values)

    @property
    def viewport(self) -> Optional[Dict[str, int]]:
        """Playwright viewport derived from ``window_size``."""
        if self.window_size is None:
            return None
        width, height = self.window_size
        return {'width': width, 'height': height}


class Operation(BaseModel):
    """A single step performed by ``ScrapingWrapper.operate``."""

    method: OperationMethod = Field(..., description="Type of operation")
    target: str = Field(..., min_length=1, description="URL for go, DOM definition name otherwise")
    content: Optional[str] = Field(None, description="Text typed by fill")

    @field_validator('method', mode='before')
    @classmethod
    def parse_method(cls, v):
        """Accept method names in any case."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class Scenario(BaseModel):
    """
    A set of operations defined in advance, plus the texts to read afterwards.
    """

    dom_defs: Dict[str, str] = Field(default_factory=dict, description="Scenario-specific DOM definitions")
    operations: List[Operation] = Field(default_factory=list, description="Operations in execution order")
    extract: List[str] = Field(default_factory=list, description="DOM definition names to read inner text from")

    @field_validator('dom_defs', 'operations', 'extract', mode='before')
    @classmethod
    def parse_empty_sections(cls, v, info):
        """Treat empty YAML sections as empty collections."""
        if v is None:
            return {} if info.field_name == 'dom_defs' else []
        return v

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "Scenario":
        """
        Load a scenario from a YAML file.

        Args:
            path: Path to the scenario file

        Returns:
            Validated Scenario
        """
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        # model_validate reports a non-mapping document as a ValidationError
        return cls.model_validate(data)
