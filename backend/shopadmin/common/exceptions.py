"""
Custom Exception Classes for the Admin Settings API

Hierarchical exception structure. Services raise these internally and
convert them into result values (a bool or a RelayResult) at their boundary.
"""


class ShopAdminError(Exception):
    """Base exception for all settings API errors"""

    def __init__(self, message: str, recoverable: bool = True):
        self.message = message
        self.recoverable = recoverable
        super().__init__(message)


class ConfigWriteError(ShopAdminError):
    """The env file could not be persisted"""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(f"Config Write Error: {message}", recoverable=True)


class RelayError(ShopAdminError):
    """Analytics event relay errors"""

    def __init__(self, message: str, provider: str, recoverable: bool = True):
        self.provider = provider
        super().__init__(message, recoverable)


class RelayNotConfiguredError(RelayError):
    """Provider is turned off or missing its credentials"""

    def __init__(self, provider: str):
        super().__init__(
            f"{provider} is disabled or not configured properly",
            provider,
            recoverable=False,
        )


class MissingClientIdError(RelayError):
    """Measurement protocol event posted without a visitor client id"""

    def __init__(self, provider: str):
        super().__init__("Client ID not set", provider, recoverable=False)


class MissingEventNameError(RelayError):
    """Measurement protocol event posted without a name"""

    def __init__(self, provider: str):
        super().__init__("Event name not set", provider, recoverable=False)


class RelayTransportError(RelayError):
    """Network, DNS or timeout failure talking to the provider"""

    def __init__(self, message: str, provider: str):
        super().__init__(message, provider, recoverable=True)


class MailerError(ShopAdminError):
    """Test email could not be delivered"""

    def __init__(self, message: str, mailer: str | None = None):
        self.mailer = mailer
        super().__init__(message, recoverable=True)
