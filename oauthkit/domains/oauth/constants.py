"""Parameter names and fixed values of the OAuth wire protocols."""

# OAuth 1.0a
CONSUMER_KEY = "oauth_consumer_key"
NONCE = "oauth_nonce"
SIGNATURE = "oauth_signature"
SIGNATURE_METHOD = "oauth_signature_method"
TIMESTAMP = "oauth_timestamp"
TOKEN = "oauth_token"
TOKEN_SECRET = "oauth_token_secret"
VERSION = "oauth_version"
CALLBACK = "oauth_callback"
VERIFIER = "oauth_verifier"

PARAM_PREFIX = "oauth_"
SCOPE = "scope"

# OAuth 2.0
ACCESS_TOKEN = "access_token"
CLIENT_ID = "client_id"
CLIENT_SECRET = "client_secret"
CODE = "code"
REDIRECT_URI = "redirect_uri"
GRANT_TYPE = "grant_type"
REFRESH_TOKEN = "refresh_token"
RESPONSE_TYPE = "response_type"
EXPIRES_IN = "expires_in"

AUTHORIZATION_HEADER = "Authorization"
CONTENT_TYPE_HEADER = "Content-Type"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# 1.0a parameters that must be present on every signed request
SIGNED_PARAMETER_KEYS = frozenset(
    {CONSUMER_KEY, NONCE, TIMESTAMP, SIGNATURE_METHOD, VERSION, SIGNATURE}
)
