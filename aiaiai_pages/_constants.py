"""Common literal values used across aiaiai_pages.

These constants keep filenames and output locations centralized so the build
pipeline, the print flow, and tests can import the same values without
drifting. Intended for internal use within the aiaiai_pages package.

Examples
--------
>>> from aiaiai_pages import _constants
>>> _constants.PAGE_FILENAME_TEMPLATE.format(slug="opdracht-1")
'opdracht-1.html'
>>> "/".join(_constants.MANIFEST_PATH_PARTS)
'assets/json/assignments.json'
"""

FRONT_PAGE_ENDPOINT = "frontpage"
PAGES_ENDPOINT = "pages"
FRONT_PAGE_NAME = "index"
PAGE_FILENAME_TEMPLATE = "{slug}.html"
MEDIA_PATH_PARTS = ("assets", "collection")
MANIFEST_PATH_PARTS = ("assets", "json", "assignments.json")
BASE_TEMPLATE = "template.html"
ASSIGNMENT_TEMPLATE = "assignment.html"
DEFAULT_PAGE_SIZE = 100
DEFAULT_TIMEOUT = 30.0
