from __future__ import annotations


class OutageWatchError(RuntimeError):
    pass


class FetchFailure(OutageWatchError):
    pass


class MissingDataError(OutageWatchError):
    pass


class CredentialMissingError(OutageWatchError):
    pass


class NotificationTransportFailure(OutageWatchError):
    pass
