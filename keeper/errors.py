"""Exception hierarchy shared by the merge pipeline."""


class KeeperError(Exception):
    """Base exception for merge pipeline failures."""
    pass
