from __future__ import annotations


class NovaError(Exception):
    """Base class for errors surfaced by the orchestration layer."""

    status_code = 500


class TransportFailure(NovaError):
    """The remote generative service call failed outright."""

    status_code = 502


class NoAssetProduced(NovaError):
    """The remote job finished but returned no retrievable asset."""

    status_code = 502


class PollTimeout(NovaError):
    status_code = 504


class MaintenanceRefusal(NovaError):
    status_code = 503

    def __init__(self, message: str = "Maintenance Mode") -> None:
        super().__init__(message)


class AttachmentTooLarge(NovaError):
    status_code = 413

    def __init__(self, filename: str, limit_bytes: int) -> None:
        self.filename = filename
        self.limit_bytes = limit_bytes
        super().__init__(f"{filename} exceeds the {limit_bytes / (1024 * 1024):g}MB limit.")


class TurnInProgress(NovaError):
    status_code = 409

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"a turn is already in progress for session {session_id}")


class MessageFrozen(NovaError):
    status_code = 409


class SessionNotFound(NovaError):
    status_code = 404

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__("session not found")


class PersonaNotFound(NovaError):
    status_code = 404

    def __init__(self, persona_id: str) -> None:
        self.persona_id = persona_id
        super().__init__("persona not found")


class JobNotFound(NovaError):
    status_code = 404

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__("video job not found")
