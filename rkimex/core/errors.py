"""Exception hierarchy for rkimex.

Configuration problems are raised before stepping starts. Convergence
failures inside a step are retryable and handled by the integrator; the
fatal run failures derive from IntegrationError.
"""


class RkimexError(Exception):
    """Base exception for all rkimex errors."""


class ConfigurationError(RkimexError, ValueError):
    """Raised when a scheme, configuration or module wiring is invalid."""


class IntegratorStateError(RkimexError, RuntimeError):
    """Raised when the integrator is used in the wrong lifecycle state."""


class ConvergenceError(RkimexError, ArithmeticError):
    """Raised when a Newton iteration for an implicit stage does not converge."""

    def __init__(self, message: str, iterations: int = 0, residual: float = float("nan")):
        super().__init__(message)
        self.iterations = iterations
        self.residual = residual


class IntegrationError(RkimexError, RuntimeError):
    """Base class for fatal failures during a run."""


class RetryBudgetExceededError(IntegrationError):
    """Raised when a step is rejected more times in a row than allowed."""


class StepSizeUnderflowError(IntegrationError):
    """Raised when the step size collapses below rounding level."""


class PropertyLookupError(RkimexError, LookupError):
    """Raised when a property is missing or stored under another kind."""


class PropertyWriteError(RkimexError, ValueError):
    """Raised when a write-once property is written twice."""


class InterpolationRangeError(RkimexError, ValueError):
    """Raised when dense output is requested outside [0, 1]."""
