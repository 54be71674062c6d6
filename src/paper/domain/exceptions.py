"""Domain exceptions."""


class PaperError(Exception):
    """Base exception for platform and workspace errors."""


class PlatformError(PaperError):
    """A chat platform call failed for a transient or unclassified reason.

    Callers may retry on the next natural trigger.
    """


class ChannelNotAccessibleError(PaperError):
    """The channel cannot be accessed.

    Raised when the bot was removed from the channel, the channel was
    archived, or it was deleted. Terminal for the channel.
    """

    def __init__(self, channel_id: str, message: str = "") -> None:
        """Initialize.

        Args:
            channel_id: ID of the inaccessible channel.
            message: Error message (optional).
        """
        self.channel_id = channel_id
        super().__init__(message or f"Channel {channel_id} is not accessible")


class CanvasNotFoundError(PaperError):
    """The cached canvas ID no longer refers to a live canvas."""

    def __init__(self, canvas_id: str, message: str = "") -> None:
        """Initialize.

        Args:
            canvas_id: The stale canvas ID.
            message: Error message (optional).
        """
        self.canvas_id = canvas_id
        super().__init__(message or f"Canvas {canvas_id} not found")


class CanvasAlreadyExistsError(PaperError):
    """Canvas creation was rejected because the channel already has one."""

    def __init__(self, channel_id: str) -> None:
        self.channel_id = channel_id
        super().__init__(f"Channel {channel_id} already has a canvas")


class CanvasPermissionError(PaperError):
    """Writing canvases is not permitted for this workspace or token."""


class WorkspaceNotInstalledError(PaperError):
    """No installation record exists for the workspace."""

    def __init__(self, workspace_id: str) -> None:
        """Initialize.

        Args:
            workspace_id: ID of the workspace that is not installed.
        """
        self.workspace_id = workspace_id
        super().__init__(f"Workspace {workspace_id} is not installed")
