"""Common literal values used across polyglot_pages.

These constants keep dictionary section names, filenames and asset rules
centralized so the extraction, rendering and verification stages agree on
them without drifting.

Examples
--------
>>> from polyglot_pages import _constants
>>> _constants.LOCALE_FILE_TEMPLATE.format(code="de")
'de.json'
>>> _constants.SHARED_SCOPE
'shared'
"""

SHARED_SCOPE = "shared"
META_SECTION = "_meta"
LOCALE_FILE_TEMPLATE = "{code}.json"
SITEMAP_FILENAME = "sitemap.xml"
ROBOTS_FILENAME = "robots.txt"
X_DEFAULT_HREFLANG = "x-default"

ASSET_EXTENSIONS = (
    "css",
    "js",
    "svg",
    "png",
    "jpg",
    "jpeg",
    "webp",
    "json",
    "ico",
    "xml",
    "txt",
)
ASSET_PATH_PREFIXES = ("/images/", "/_vercel/", "/favicon", "/apple-touch")
