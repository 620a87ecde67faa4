"""Common literal values used across sitesmith.

These constants keep filenames and layout paths centralized so the pipeline,
server, and tests can import the same values without drifting. Intended for
internal use within the sitesmith package.

Examples
--------
>>> from sitesmith import _constants
>>> _constants.SITE_INDEX_TEMPLATE.format(site_id="a1b2c3d4")
'dist/a1b2c3d4/index.html'
"""

SECTIONS_CATALOG = "sections.json"
THEME_VARIABLES_CATALOG = "bootstrap-variables.json"
SITE_LOG = "sites.jsonl"
DIST_DIR = "dist"

INDEX_FILENAME = "index.html"
CSS_FILENAME = "css/style.min.css"
JS_FILENAME = "js/script.min.js"
META_FILENAME = "meta.json"
SITE_INDEX_TEMPLATE = DIST_DIR + "/{site_id}/" + INDEX_FILENAME

DEFAULT_PRIMARY_COLOR = "#007bff"
DEFAULT_FONT_FAMILY = "Arial, sans-serif"
DEFAULT_SITE_TITLE = "My Site"
