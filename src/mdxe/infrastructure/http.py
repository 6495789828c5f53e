"""HTTP session factory for remote artifact fetches."""

from __future__ import annotations

import requests

from mdxe import __version__

USER_AGENT = f"mdxe/{__version__}"


def build_session() -> requests.Session:
    """A ``requests`` session with mdxe's default headers.

    Redirects are followed by requests; callers re-check the final URL's
    host against the allow-list.
    """
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT, "Accept": "*/*"})
    return session
