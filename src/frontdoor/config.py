"""Site configuration.

SiteConfig is a frozen dataclass, assembled once at startup from the
command line, then passed by reference into every component. No
process-wide mutable flags.
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path

from frontdoor.errors import ConfigurationError

DEFAULT_HTTP_ADDR = ":31798"
DEFAULT_GITWEB_FILES = "/usr/share/gitweb/static"
LEGACY_GITWEB_FILES = "/usr/share/gitweb"  # Old Debian/Ubuntu location


@dataclass(frozen=True, slots=True)
class SiteConfig:
    """Site configuration. Immutable after creation.

    All fields have defaults matching the production deployment.
    Override what you need::

        config = SiteConfig(root="/srv/site", gerrit_host="review.internal")
    """

    # Listeners
    http_addr: str = DEFAULT_HTTP_ADDR
    https_addr: str = ""
    tls_cert_file: str = ""
    tls_key_file: str = ""
    read_timeout: float = 5 * 60.0
    write_timeout: float = 30 * 60.0

    # Website root (parent of "static", "content", "talks", and "tmpl")
    root: str | Path = ""

    # Source browser (blank gitweb_script disables /code/)
    gitweb_script: str = "/usr/lib/cgi-bin/gitweb.cgi"
    gitweb_files: str = DEFAULT_GITWEB_FILES
    gitweb_repo: str = "camlistore.git"

    # Logging
    log_dir: str = ""
    log_stdout: bool = True

    # Code review host (blank disables /r/ and the mirror sync)
    gerrit_user: str = "ubuntu"
    gerrit_host: str = ""
    gerrit_port: int = 8000
    mirror_interval: float = 10.0

    # Build status (both required)
    buildbot_backend: str = ""
    buildbot_host: str = ""

    # Package documentation backend for /pkg/ and /cmd/ (blank disables)
    docs_backend: str = ""

    # Hostnames
    canonical_host: str = "camlistore.org"
    secondary_host: str = "www.camlistore.org"

    # Filtering heuristics
    bot_agents: tuple[str, ...] = ("Baidu", "bingbot", "Ezooms", "Googlebot")
    protected_path: str = "/code/"
    corrupt_sequence: str = "%3B"

    # Redirect targets
    issue_tracker_url: str = "https://code.google.com/p/camlistore/issues/detail?id="

    # Diagnostics
    diag_interface: str = "eth0"

    # -- Derived values --

    @property
    def root_dir(self) -> Path:
        return Path(self.root or os.getcwd())

    @property
    def content_dir(self) -> Path:
        return self.root_dir / "content"

    @property
    def template_dir(self) -> Path:
        return self.root_dir / "tmpl"

    @property
    def static_dir(self) -> Path:
        return self.root_dir / "static"

    @property
    def talks_dir(self) -> Path:
        return self.root_dir / "talks"

    @property
    def mirror_dir(self) -> Path:
        return self.root_dir / "latestgits"

    @property
    def gitweb_config(self) -> Path:
        return self.root_dir / "gitweb-camli.conf"

    @property
    def https_enabled(self) -> bool:
        return bool(self.https_addr)

    @property
    def logging_enabled(self) -> bool:
        return bool(self.log_dir) or self.log_stdout

    @property
    def gerrit_url(self) -> str:
        return f"http://{self.gerrit_host}:{self.gerrit_port}/"

    # -- Operations --

    def resolved(self) -> "SiteConfig":
        """Return a copy with startup-time defaults filled in.

        A blank root becomes the working directory. When the gitweb
        asset directory is the default and missing, the legacy location
        is used instead.
        """
        config = self
        if not config.root:
            config = replace(config, root=Path(os.getcwd()))
        if config.gitweb_files == DEFAULT_GITWEB_FILES and not Path(config.gitweb_files).is_dir():
            config = replace(config, gitweb_files=LEGACY_GITWEB_FILES)
        return config

    def gitweb_env(self) -> dict[str, str]:
        """Environment overlay passed to every gitweb CGI invocation."""
        return {
            "GITWEB_CONFIG": str(self.gitweb_config),
            "CAMWEB_ROOT": str(self.root_dir),
            "CAMWEB_GITDIR": str(self.mirror_dir),
        }


def split_addr(addr: str) -> tuple[str, int]:
    """Split a listen address into ``(host, port)``.

    An empty host binds every interface::

        split_addr(":31798")          -> ("0.0.0.0", 31798)
        split_addr("127.0.0.1:8443")  -> ("127.0.0.1", 8443)
    """
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit():
        msg = f"Invalid listen address {addr!r}; expected [host]:port"
        raise ConfigurationError(msg)
    return host.strip("[]") or "0.0.0.0", int(port)
