"""
Podcast Tracker OAuth constants
"""

# Public, non-secret identifiers for the live environment
DEFAULT_COGNITO_DOMAIN = "https://podcast-tracker-auth2.auth.eu-north-1.amazoncognito.com"
DEFAULT_COGNITO_CLIENT_ID = "4n34nq1h9pnpo41dvcvg0c2uhu"
DEFAULT_COGNITO_REDIRECT_URI = "http://localhost:4321/auth/callback"
DEFAULT_COGNITO_LOGOUT_URI = "http://localhost:4321/"
DEFAULT_OAUTH_SCOPES = "openid email profile"
DEFAULT_IDENTITY_PROVIDER = "Google"

# Cognito hosted UI endpoints (relative to the domain)
AUTHORIZE_PATH = "/oauth2/authorize"
TOKEN_PATH = "/oauth2/token"
LOGOUT_PATH = "/logout"

# Custom claim set by the pre-token-generation trigger
APPROVED_CLAIM = "custom:approved"

# Session lifecycle
REFRESH_SKEW_MS = 45_000
DEFAULT_EXPIRES_IN = 3600
DEFAULT_TOKEN_TYPE = "Bearer"

# OAuth callback server
CALLBACK_TIMEOUT_SECONDS = 180.0

LOGIN_HINT = "Run: podcast-tracker auth login"

# GraphQL API (AppSync)
DEFAULT_API_URL = "https://jsdj6tjxp5fsjfn5gpr6a7hamu.appsync-api.eu-north-1.amazonaws.com/graphql"
