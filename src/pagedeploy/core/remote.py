"""Remote URL rewriting for deploy-key authentication."""

import re

_HTTP_URL = re.compile(r"^https?://(?:[^@/]+@)?(?P<host>[^/:]+)(?::\d+)?/(?P<path>.+)$")
_GIT_URL = re.compile(r"^git://(?P<host>[^/:]+)(?::\d+)?/(?P<path>.+)$")


def to_ssh_url(url: str) -> str:
    """Rewrite an http(s):// or git:// remote URL to scp-style SSH form.

    Examples:
        >>> to_ssh_url("https://github.com/owner/site.git")
        'git@github.com:owner/site.git'
        >>> to_ssh_url("git@github.com:owner/site.git")
        'git@github.com:owner/site.git'

    URLs already in SSH form (and local paths) are returned unchanged.
    Credentials embedded in an https URL are dropped.
    """
    url = url.strip()
    for pattern in (_HTTP_URL, _GIT_URL):
        match = pattern.match(url)
        if match is not None:
            return f"git@{match.group('host')}:{match.group('path')}"
    return url
