"""Exception hierarchy for the evaluation pipeline."""


class FitledgerError(Exception):
    """Base for all errors raised by fitledger."""


class PersistenceError(FitledgerError):
    """The record store failed to commit."""


class SessionNotCompletedError(FitledgerError, ValueError):
    """A session without a completion time was handed to the evaluator."""

    def __init__(self, session_id):
        self.session_id = session_id
        super().__init__(f"Session {session_id} has no completion time")
