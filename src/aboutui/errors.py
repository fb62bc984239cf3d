"""
=============================================================================
ERRORS
=============================================================================

Exceptions raised by the about-ui content source.

None of these describe a failed *request*. Missing files, unmounted
components and unready customization documents all degrade to fallback
content and are never raised. The exceptions below signal programming or
configuration mistakes, and they are raised loudly so they surface in tests:

    ┌──────────────────────────┬──────────────────────────────────────────┐
    │ Exception                │ Raised when                              │
    ├──────────────────────────┼──────────────────────────────────────────┤
    │ ConfigError              │ AboutConfig.validate() rejects a value   │
    │ WrongContextError        │ main-context-only code runs elsewhere    │
    │ CallbackAlreadyRunError  │ a response callback is run twice         │
    └──────────────────────────┴──────────────────────────────────────────┘

=============================================================================
"""


class AboutUIError(Exception):
    """Base class for all about-ui errors."""


class ConfigError(AboutUIError, ValueError):
    """
    Invalid configuration value.

    Subclasses ValueError so callers that validated configuration with
    ``except ValueError`` keep working.
    """


class WrongContextError(AboutUIError, RuntimeError):
    """
    Code with main-context affinity ran on another thread.

    Loader start and response steps touch state that is only ever read on
    the main context, so running them elsewhere is a bug in the caller.
    """

    def __init__(self, context_name: str, operation: str = ""):
        self.context_name = context_name
        self.operation = operation
        where = f" ({operation})" if operation else ""
        super().__init__(f"Must be called on the {context_name!r} context{where}")


class CallbackAlreadyRunError(AboutUIError, RuntimeError):
    """A single-shot response callback was run a second time."""
