"""
HELA Exceptions

Custom exception classes for the HELA client. Every error that aborts a
command derives from HelaError; the CLI layer reports the message and exits
with a non-zero status.
"""


class HelaError(Exception):
    """Base exception for the HELA client."""
    pass


# ── Configuration ─────────────────────────────────────────────────────

class ConfigurationError(HelaError):
    """Configuration error."""
    pass


class NoNetworksConfigured(ConfigurationError):
    """Neither a --network flag nor a default network is set."""

    def __init__(self):
        super().__init__("no networks configured")


class NetworkNotFound(ConfigurationError):
    """The selected network has no entry in the configuration."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"network '{name}' does not exist")


class RuntimeNotFound(ConfigurationError):
    """The selected runtime has no entry under the network."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"runtime '{name}' does not exist")


class AccountNotFound(ConfigurationError):
    """The selected account is not in the wallet."""

    def __init__(self, name: str = ""):
        self.name = name
        if name:
            super().__init__(f"account '{name}' does not exist in the wallet")
        else:
            super().__init__("no accounts configured in your wallet")


# ── User input ────────────────────────────────────────────────────────

class InputError(HelaError):
    """Invalid user input."""
    pass


class UnknownAction(InputError):
    """Action name does not match any proposal action."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"unknown action: '{value}'")


class UnknownRole(InputError):
    """Role name does not match any assignable role."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"unknown role: '{value}'")


class UnknownVoteOption(InputError):
    """Vote option is not one of yes/no/abstain."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"unknown vote option: '{value}'")


class InvalidProposalFields(InputError):
    """Proposal data carries fields that are illegal or missing for its action."""
    pass


class InvalidProposalID(InputError):
    """Proposal ID is not a decimal unsigned 32-bit integer."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"invalid proposal ID: {value}")


class UnresolvableAddress(InputError):
    """Value is neither a known account name nor a valid address."""

    def __init__(self, value: str, reason: str = ""):
        self.value = value
        message = f"unresolvable address '{value}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class InvalidAmount(InputError):
    """Amount cannot be expressed in the denomination's base units."""
    pass


# ── Operational ───────────────────────────────────────────────────────

class OperationalError(HelaError):
    """A command cannot proceed in the selected context."""
    pass


class NoParaTimeConfigured(OperationalError):
    """A write was attempted without a runtime selected."""

    def __init__(self):
        super().__init__("no runtime configured, transactions require a runtime")


class TransactionConfigError(OperationalError):
    """Transaction options are inconsistent (e.g. offline without gas limit)."""
    pass


# ── Keys and addresses ────────────────────────────────────────────────

class InvalidKeyError(HelaError):
    """Invalid cryptographic key."""
    pass


class InvalidAddressError(HelaError):
    """Invalid address format."""
    pass
