"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from themeplane.index.models import FileRecord  # noqa: E402


HEADER_LIQUID = """<header class="site-header">
  {% render 'logo' %}
  <a href="/cart" class="cart-link">{{ 'general.cart' | t }}</a>
</header>
{% schema %}
{"name": "Header", "settings": [{"id": "show_logo", "type": "checkbox"}]}
{% endschema %}
"""

THEME_CSS = """.site-header { display: flex; }
.cart-link:hover { color: red; }
.logo { width: 120px; }
"""


@pytest.fixture
def theme_files() -> list[FileRecord]:
    """A small theme: header section, logo snippet, stylesheet, locale and template."""
    return [
        FileRecord.from_path("sections/header.liquid", HEADER_LIQUID),
        FileRecord.from_path("snippets/logo.liquid", '<img class="logo" src="">'),
        FileRecord.from_path("assets/theme.css", THEME_CSS),
        FileRecord.from_path("locales/en.default.json", '{"general": {"cart": "Cart"}}'),
        FileRecord.from_path(
            "templates/index.json",
            '{"sections": {"header": {"type": "header"}}, "order": ["header"]}',
        ),
    ]
