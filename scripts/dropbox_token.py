#!/usr/bin/env python3
"""
Script to run the Dropbox authorization-code flow from a terminal.

Prints the consent URL, then exchanges the code Dropbox shows (or appends
to the redirect URI) for an access token. Useful for testing app
credentials without running the web service.
"""

import argparse
import asyncio
import sys

from dotenv import load_dotenv

from dropbox_oauth.core.exceptions import OAuthFlowError
from dropbox_oauth.oauth.callbacks import JSONCallbacks
from dropbox_oauth.oauth.config import DropboxOAuthConfig
from dropbox_oauth.oauth.handler import DropboxOAuth2Handler

# Load environment variables from .env file
load_dotenv()


async def exchange(handler: DropboxOAuth2Handler, code: str) -> int:
    try:
        token = await handler.exchange_token(code)
    except OAuthFlowError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if token.is_error:
        print(f"Dropbox rejected the code: {token.error}: {token.error_description}", file=sys.stderr)
        return 1

    print(f"UID: {token.uid}")
    print(f"Access token: {token.access_token}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Exchange a Dropbox authorization code.")
    parser.add_argument("--code", help="Authorization code (prompted for if omitted).")
    args = parser.parse_args()

    config = DropboxOAuthConfig.from_env()
    if not config.is_configured():
        print("Error: Ensure DROPBOX_APP_KEY and DROPBOX_APP_SECRET are in your .env file.")
        return 1

    handler = DropboxOAuth2Handler(config, JSONCallbacks())

    code = args.code
    if not code:
        print(f"Open this URL and approve access:\n\n  {handler.build_authorize_url()}\n")
        code = input("Authorization code: ").strip()

    if not code:
        print("Error: no authorization code given.", file=sys.stderr)
        return 1

    return asyncio.run(exchange(handler, code))


if __name__ == "__main__":
    sys.exit(main())
