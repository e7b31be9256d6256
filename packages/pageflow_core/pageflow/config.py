"""
Document options.

Mirrors the option names callers pass in (``header-text``,
``show-header-on`` ...) and turns them into engine inputs: page
geometry, visibility policies and logo references.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .engine.geometry import PageGeometry
from .engine.visibility import VisibilityPolicy, VisibilitySpec
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_HEADER_TEXT = "Company Name - Report"
DEFAULT_FILENAME = "report.pdf"

# Option names as they appear in external configuration
OPTION_ALIASES = {
    "logo-reference": "logo_url",
    "logo-url": "logo_url",
    "logourl": "logo_url",
    "logo-data": "logo_data",
    "logobase64": "logo_data",
    "header-text": "header_text",
    "headertext": "header_text",
    "footer-logo-reference": "footer_logo_url",
    "footer-logo-url": "footer_logo_url",
    "footerlogourl": "footer_logo_url",
    "footer-logo-data": "footer_logo_data",
    "footerlogobase64": "footer_logo_data",
    "header-visibility": "show_header_on",
    "show-header-on": "show_header_on",
    "showheaderon": "show_header_on",
    "footer-visibility": "show_footer_on",
    "show-footer-on": "show_footer_on",
    "showfooteron": "show_footer_on",
    "page-format": "page_format",
    "header-height": "header_height",
    "footer-height": "footer_height",
    "image-timeout": "image_timeout",
}


@dataclass
class DocumentOptions:
    """Options for one document generation.

    ``*_data`` (base64 / data URI) takes precedence over ``*_url`` for
    both logos. Visibility accepts a rule name, a page list or a callable.
    """

    filename: str = DEFAULT_FILENAME
    logo_url: Optional[str] = None
    logo_data: Optional[str] = None
    header_text: str = DEFAULT_HEADER_TEXT
    footer_logo_url: Optional[str] = None
    footer_logo_data: Optional[str] = None
    show_header_on: VisibilitySpec = "all"
    show_footer_on: VisibilitySpec = "all"
    page_format: str = "a4"
    margin: float = 15.0
    header_height: float = 25.0
    footer_height: float = 30.0
    image_timeout: Optional[float] = None

    def __post_init__(self) -> None:
        if self.image_timeout is not None and self.image_timeout <= 0:
            raise ConfigurationError("image_timeout must be positive", str(self.image_timeout))
        # Fail early on bad rules instead of at first page emission
        self.header_policy()
        self.footer_policy()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DocumentOptions":
        """Build options from a mapping with snake_case or hyphenated keys."""
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            normalized = OPTION_ALIASES.get(key.lower(), key.replace("-", "_"))
            if normalized not in known:
                raise ConfigurationError(f"Unknown option '{key}'")
            kwargs[normalized] = value
        return cls(**kwargs)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "DocumentOptions":
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationError(f"Cannot read options file {path}", str(exc)) from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"Options file {path} must contain a JSON object")
        return cls.from_dict(data)

    def merged(self, **overrides: Any) -> "DocumentOptions":
        """Copy with non-None overrides applied."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update({key: value for key, value in overrides.items() if value is not None})
        return DocumentOptions(**values)

    @property
    def header_logo(self) -> Optional[str]:
        return self.logo_data or self.logo_url

    @property
    def footer_logo(self) -> Optional[str]:
        return self.footer_logo_data or self.footer_logo_url

    def build_geometry(self) -> PageGeometry:
        return PageGeometry.from_format(
            self.page_format,
            margin=float(self.margin),
            header_height=float(self.header_height),
            footer_height=float(self.footer_height),
        )

    def header_policy(self) -> VisibilityPolicy:
        return VisibilityPolicy.from_spec(self.show_header_on)

    def footer_policy(self) -> VisibilityPolicy:
        return VisibilityPolicy.from_spec(self.show_footer_on)
