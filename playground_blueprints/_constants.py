"""Common literal values used across playground_blueprints.

These constants keep option names, cache keys, and Playground URLs centralized
so the assembler, merge engine, and tests can import the same values without
drifting. Intended for internal use within the playground_blueprints package.

Examples
--------
>>> from playground_blueprints import _constants
>>> _constants.SELF_SLUG
'blueprint-extractor'
>>> _constants.SELECTION_KEY_TEMPLATE.format(key="pages")
'blueprint_extractor_pages'
"""

SELF_SLUG = "blueprint-extractor"
SELF_IGNORED_SLUGS = ("blueprint-extractor", "blueprint-extractor-main")
SELF_PLUGIN_URL = (
    "https://github-proxy.com/proxy/?repo=akirk/blueprint-extractor&branch=main"
)

PLUGIN_CACHE_KEY = "blueprint_extractor_plugin_zip"
THEME_CACHE_KEY = "expose_blueprints_theme_exists"
CACHE_TTL_SECONDS = 24 * 60 * 60

PLUGIN_REGISTRY = "wordpress.org/plugins"
THEME_REGISTRY = "wordpress.org/themes"
REGISTRY_DOWNLOAD_PREFIX = "https://downloads.wordpress.org/plugin/"
GITHUB_PROXY_TEMPLATE = "https://github-proxy.com/proxy/?repo={repo}&release={ref}"

PLAYGROUND_URL = "https://playground.wordpress.net/"
CORS_PROXY_URL = "https://playground.wordpress.net/cors-proxy.php?"
UPLOADS_PATH = "/wordpress/wp-content/uploads"

OPTION_LANDING_PAGE = "blueprint_extractor_initial_landing_page"
OPTION_INITIAL_OPTIONS = "blueprint_extractor_initial_options"
OPTION_INITIAL_CONSTANTS = "blueprint_extractor_initial_constants"
OPTION_DEFAULT_CHECKED = "blueprint_extractor_default_checked"
OPTION_NAME = "blueprint_extractor_name"

SELECTION_KEY_TEMPLATE = "blueprint_extractor_{key}"
SELECTION_SCHEMA_VERSION = 1

SITE_OPTION_NAMES = ("blogname", "blogdescription", "permalink_structure")
PURGED_POST_TYPES = ("post", "page", "attachment", "revision", "nav_menu_item")
PHP_EXTENSION_BUNDLES = ("kitchen-sink",)

SENSITIVE_CONSTANTS = frozenset(
    {"DB_NAME", "DB_USER", "DB_PASSWORD", "DB_HOST", "DB_CHARSET", "DB_COLLATE"}
)
CORE_OPTIONS = frozenset(
    {
        "home",
        "WPLANG",
        "blogname",
        "blogdescription",
        "site_icon",
        "siteurl",
        "stylesheet",
        "start_of_week",
        "timezone_string",
        "date_format",
        "time_format",
        "gmt_offset",
        "permalink_structure",
        "rss_use_excerpt",
        "comment_registration",
        "blog_charset",
        "posts_per_page",
        "rewrite_rules",
        "sidebars_widgets",
        "admin_email",
        "page_on_front",
        "page_for_posts",
        "show_on_front",
        "active_plugins",
    }
)
RESERVED_OPTION_PREFIXES = ("wp_", "_")
VENDORED_DIRECTORIES = frozenset({"vendor", "node_modules"})
