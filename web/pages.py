"""HTML pages rendered by the OAuth callback route"""

from html import escape
from typing import Optional

_STYLE = """
    body { font-family: Arial, sans-serif; max-width: 640px; margin: 50px auto; padding: 20px; }
    .success { color: #1a73e8; }
    .error { color: #d93025; background-color: #fce8e6; padding: 15px; border-radius: 5px; }
    .info { background-color: #e8f0fe; padding: 15px; border-radius: 5px; margin: 20px 0; }
    .url-box { background-color: #f1f3f4; padding: 10px; border-radius: 5px; margin: 10px 0;
               font-family: monospace; word-break: break-all; border: 1px solid #dadce0; }
"""


def _page(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
    <head>
        <meta charset="UTF-8">
        <title>{escape(title)}</title>
        <style>{_STYLE}</style>
    </head>
    <body>
{body}
    </body>
</html>
"""


def render_success_page(user_name: str, user_id: str) -> str:
    return _page("Authorization complete", f"""
        <h1 class="success">X authorization complete</h1>
        <div class="info">
            <p>Credentials for <strong>@{escape(user_name)}</strong> ({escape(user_id)}) were saved.</p>
            <p>Scheduled posts will now pick content from the channel sheets.</p>
        </div>
        <p>You can close this window.</p>
""")


def render_error_page(error: str, description: Optional[str] = None) -> str:
    detail = f"<p>{escape(description)}</p>" if description else ""
    return _page("Authorization error", f"""
        <h1>Authorization error</h1>
        <div class="error">
            <p>Authorization was denied: {escape(error)}</p>
            {detail}
        </div>
        <p>Reload this page to start again.</p>
""")


def render_failure_page(message: str, callback_url: str) -> str:
    return _page("Error", f"""
        <h1>Something went wrong</h1>
        <div class="error"><p><strong>Error:</strong> {escape(message)}</p></div>
        <p>Check the configuration:</p>
        <ul>
            <li>CLIENT_ID and CLIENT_SECRET are set</li>
            <li>The backing store identifier is set</li>
            <li>The callback URL below is registered in the X developer portal</li>
        </ul>
        <h3>Callback URL</h3>
        <div class="url-box">{escape(callback_url)}</div>
""")


def render_start_page(callback_url: str, authorization_url: Optional[str], error: Optional[str] = None) -> str:
    if authorization_url:
        auth_block = f"""
        <h3>Authorization URL</h3>
        <p>Open this link to authorize an X account:</p>
        <div class="url-box"><a href="{escape(authorization_url)}" target="_blank">{escape(authorization_url)}</a></div>
"""
    else:
        auth_block = f"""
        <div class="error"><p>Could not create an authorization URL: {escape(error or "unknown error")}</p></div>
"""
    return _page("X OAuth 2.0 authorization", f"""
        <h1>X OAuth 2.0 authorization</h1>
        <h3>Callback URL</h3>
        <p>Register this URL as the callback in the X developer portal:</p>
        <div class="url-box">{escape(callback_url)}</div>
{auth_block}
        <div class="info">
            <p>Sign-in uses <strong>OAuth 2.0 + PKCE</strong>. Requested access: read and write
            posts, read your profile, offline access (refresh token).</p>
        </div>
""")
