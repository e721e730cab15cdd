class SyncError(Exception):
    """Base class for every failure surfaced by a roster sync run."""


class ConfigurationError(SyncError):
    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("Invalid configuration: " + "; ".join(self.problems))


class UpstreamLookupError(SyncError):
    pass


class ReconciliationError(SyncError):
    pass


class NotificationError(SyncError):
    pass


class RunDeadlineExceeded(SyncError):
    pass
