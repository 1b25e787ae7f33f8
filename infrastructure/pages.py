"""HTML pages served on the redirect path.

The intermediate page tries to open the native app through the deep link and,
if the page is still visible after ``timeout_ms``, navigates to the web
fallback. Templates live in ``templates/pages`` and are rendered with Jinja2
(autoescaped; URLs injected into scripts go through ``tojson``).
"""

import os

from jinja2 import Environment, FileSystemLoader, select_autoescape

_DEFAULT_TEMPLATE_DIR = os.path.join(
    os.path.dirname(os.path.dirname(__file__)),
    "templates",
    "pages",
)

PLATFORM_LABELS = {
    "youtube": "YouTube",
    "instagram": "Instagram",
}


class PageRenderer:
    def __init__(
        self,
        template_dir: str = _DEFAULT_TEMPLATE_DIR,
        timeout_ms: int = 2000,
        app_name: str = "Deep Link Shortener",
    ) -> None:
        self.timeout_ms = timeout_ms
        self.app_name = app_name
        self._jinja = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def intermediate(self, deep_link: str, fallback_url: str, platform: str) -> str:
        template = self._jinja.get_template("intermediate.html")
        return template.render(
            deep_link=deep_link,
            fallback_url=fallback_url,
            platform=PLATFORM_LABELS.get(platform, platform.title()),
            timeout_ms=self.timeout_ms,
            app_name=self.app_name,
        )

    def not_found(self) -> str:
        return self._jinja.get_template("not_found.html").render(app_name=self.app_name)

    def error(self) -> str:
        return self._jinja.get_template("error.html").render(app_name=self.app_name)
