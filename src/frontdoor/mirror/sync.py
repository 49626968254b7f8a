"""Periodic mirror of the code-review host's git store.

The mirror directory is what the source browser reads. It is written
only by this loop.
"""

import logging
import subprocess
from pathlib import Path

import anyio

from frontdoor.config import SiteConfig

logger = logging.getLogger("frontdoor.mirror")


class MirrorSync:
    """Run ``rsync`` against the remote git store on a fixed interval.

    A failed run (non-zero exit or missing binary) is logged and the
    loop carries on after the usual delay. The loop ends when its task
    is cancelled (app shutdown) or ``stop()`` is called.

    Usage::

        sync = MirrorSync.from_config(config)
        app.background(sync.run)
    """

    __slots__ = ("_dest", "_interval", "_remote", "_runs", "_stop")

    def __init__(self, remote: str, dest: str | Path, *, interval: float = 10.0) -> None:
        self._remote = remote
        self._dest = Path(dest)
        self._interval = interval
        self._runs = 0
        self._stop: anyio.Event | None = None

    @classmethod
    def from_config(cls, config: SiteConfig) -> "MirrorSync":
        return cls(
            f"{config.gerrit_user}@{config.gerrit_host}:gerrit/git/",
            config.mirror_dir,
            interval=config.mirror_interval,
        )

    @property
    def runs(self) -> int:
        """Completed sync attempts, successful or not."""
        return self._runs

    def command(self) -> list[str]:
        return ["rsync", "-avPW", self._remote, f"{self._dest}/"]

    async def sync_once(self) -> bool:
        """Run one sync. Returns True on success."""
        try:
            await anyio.run_process(self.command(), check=True, stdout=subprocess.DEVNULL)
        except subprocess.CalledProcessError as exc:
            logger.error(
                "rsync %s -> %s failed: exit status %d", self._remote, self._dest, exc.returncode
            )
            return False
        except OSError as exc:
            logger.error("rsync %s -> %s failed: %s", self._remote, self._dest, exc)
            return False
        finally:
            self._runs += 1
        return True

    async def run(self) -> None:
        """Sync forever, sleeping *interval* seconds between runs."""
        self._stop = anyio.Event()
        while not self._stop.is_set():
            await self.sync_once()
            with anyio.move_on_after(self._interval):
                await self._stop.wait()

    def stop(self) -> None:
        """Ask a running loop to finish after the current sync."""
        if self._stop is not None:
            self._stop.set()


def prepare_mirror_dir(path: str | Path) -> None:
    """Create the mirror directory (mode 0700) if it is missing.

    Failure is logged, not raised: the source browser then shows an
    empty repository list.
    """
    try:
        Path(path).mkdir(mode=0o700, exist_ok=True)
    except OSError as exc:
        logger.warning("cannot create mirror directory %s: %s", path, exc)
