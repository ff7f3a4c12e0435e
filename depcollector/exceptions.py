"""Custom exceptions for depcollector."""


class CollectorError(Exception):
    """Base exception for all collection errors."""


class UnsupportedManifestError(CollectorError):
    """Raised when no collector handles the given manifest file."""

    def __init__(self, manifest: str):
        self.manifest = manifest
        super().__init__(f"No dependency collector registered for '{manifest}'")


class GoToolchainError(CollectorError):
    """Raised when Go imports cannot be listed for a go.mod manifest."""

    def __init__(self, executable: str, message: str):
        self.executable = executable
        super().__init__(message)


class GoExecutableNotFoundError(GoToolchainError):
    """Raised when the configured Go executable cannot be found."""

    def __init__(self, executable: str):
        super().__init__(executable, f"Unable to locate '{executable}'")


class GoCommandError(GoToolchainError):
    """Raised when ``go list`` runs but exits with a failure."""

    def __init__(self, executable: str):
        super().__init__(
            executable,
            f"Unable to execute '{executable} list' command, "
            f"run '{executable} mod tidy' to know more",
        )
