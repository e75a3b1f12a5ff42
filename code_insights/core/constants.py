"""
Constants
Centralised storage for Bitbucket Code Insights API values and defaults.
"""
# Plain http on purpose: the forward proxy terminates TLS.
DEFAULT_BASE_URL = "http://api.bitbucket.org/2.0/"
DEFAULT_PROXY_URL = "http://localhost:29418"
DEFAULT_HTTP_TIMEOUT = 30.0

REPORT_TYPE = "BUG"
ANNOTATION_TYPE = "BUG"

# Bitbucket rejects bulk annotation requests with more than 100 items.
MAX_ANNOTATIONS_PER_REQUEST = 100
