# ltr/utils/errors.py
class LtrError(RuntimeError):
    """
    Base class of every error raised on purpose by ltr.
    Should NOT print traceback (reported by the CLI as a one-liner).
    """


class ConfigurationError(LtrError):
    """
    Raised for invalid user-provided config:
    unknown model / algorithm / metric / reader / learning-rate name,
    or a malformed hyperparameter (hidden width <= 0, cutoff <= 0, ...).
    Fatal at startup, never retried.
    """


class DataError(LtrError):
    """
    Raised when a dataset is unreadable or yields zero documents.
    Fatal, surfaced before any training begins.
    """
