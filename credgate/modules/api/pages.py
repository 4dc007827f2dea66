"""Static HTML served by the API."""

from html import escape
from typing import Optional

ERROR_MESSAGES = {
    "token_expired": "Your session has expired, please log in again.",
}

LOGIN_PAGE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>credgate - Login</title>
</head>
<body>
  <h1>credgate</h1>
  {notice}
  <form id="login">
    <input type="password" name="password" placeholder="Access password" autofocus>
    <button type="submit">Log in</button>
  </form>
  <p id="result"></p>
  <script>
    document.getElementById("login").addEventListener("submit", async (event) => {{
      event.preventDefault();
      const response = await fetch("/login", {{
        method: "POST",
        headers: {{"Content-Type": "application/json"}},
        body: JSON.stringify({{password: event.target.password.value}}),
      }});
      const body = await response.json();
      if (response.ok) {{
        window.location.href = "/admin";
      }} else {{
        document.getElementById("result").textContent = body.error;
      }}
    }});
  </script>
</body>
</html>
"""


def render_login_page(error: Optional[str] = None) -> str:
    """Render the login page, with a notice for known error codes."""
    notice = ""
    if error:
        message = ERROR_MESSAGES.get(error, error)
        notice = f'<p class="error">{escape(message)}</p>'
    return LOGIN_PAGE.format(notice=notice)
