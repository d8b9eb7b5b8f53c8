"""Constants for convmd."""

# Application constants
APP_NAME = "convmd"

# Default paths
DEFAULT_LOG_DIR = ".logs"
DEFAULT_CONFIG_FILE = "convmd.yaml"

# Input discovery
MARKDOWN_EXTENSIONS = (".md", ".markdown")

# Jekyll output dialect
DEFAULT_ASSET_DIR = "/assets/img"
DEFAULT_JEKYLL_LAYOUT = "post"
DEFAULT_JEKYLL_MATHJAX = True
OUTPUT_SUFFIX = ".md"

# mistune plugins enabled when parsing document bodies
MARKDOWN_PLUGINS = (
    "strikethrough",
    "table",
    "footnotes",
    "task_lists",
    "math",
)
