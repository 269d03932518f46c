"""Custom exceptions for vm-launch."""


class LaunchError(RuntimeError):
    """Raised on unrecoverable configuration or launch errors."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code
