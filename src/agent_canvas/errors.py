"""Exception types raised by the workflow engine and its collaborators."""


class WorkflowError(Exception):
    """Run-level failure reported to whoever started the run."""


class NoTriggerError(WorkflowError):
    """The graph has no Trigger node to start from."""


class StepLimitExceeded(WorkflowError):
    """The run executed more work items than MAX_STEPS allows."""


class GraphError(ValueError):
    """An edit would break a graph invariant (self-loop, unknown node, duplicate id)."""


class InvocationError(Exception):
    """The text-generation provider could not produce an answer for one node."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
