"""Background mirroring of the remote git store."""

from frontdoor.mirror.sync import MirrorSync, prepare_mirror_dir

__all__ = ["MirrorSync", "prepare_mirror_dir"]
