"""Host names, sub-paths and file names recognised by the about-ui source."""

# Hosts
CHROME_URLS_HOST = "chrome-urls"
CREDITS_HOST = "credits"
OS_CREDITS_HOST = "os-credits"
CROSTINI_CREDITS_HOST = "crostini-credits"
TERMS_HOST = "terms"
LINUX_PROXY_CONFIG_HOST = "linux-proxy-config"

# Script paths served with a JavaScript MIME type
CREDITS_JS_PATH = "credits.js"
STATS_JS_PATH = "stats.js"
STRINGS_JS_PATH = "strings.js"
KEYBOARD_UTILS_PATH = "keyboard_utils.js"

# Terms sub-paths (ChromeOS)
OEM_EULA_PATH = "oem"
ARC_TERMS_PATH = "arc/terms"
ARC_PRIVACY_POLICY_PATH = "arc/privacy_policy"

# Offline Play Store documents, relative to the demo resources directory
ARC_TERMS_PATH_FORMAT = "arc_tos/{locale}/terms.html"
ARC_PRIVACY_POLICY_PATH_FORMAT = "arc_tos/{locale}/privacy_policy.pdf"

# Crostini
TERMINA_COMPONENT_NAME = "cros-termina"
TERMINA_CREDITS_PATH = "about_os_credits.html"
