"""oauthkit: OAuth 1.0a / 2.0 client signing and token exchange."""
