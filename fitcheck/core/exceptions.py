class FitCheckError(Exception):
    """Base class for all FitCheck domain exceptions.

    Every custom exception in this module inherits from here so that a
    single ``except FitCheckError`` clause can catch any domain error.
    """

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(detail)


class RuleNotFoundError(FitCheckError):
    """Raised when a scoring rule (positive or negative) does not exist."""

    def __init__(self, detail: str = "Scoring rule not found"):
        super().__init__(detail)


class EngagementTypeNotFoundError(FitCheckError):
    """Raised when an engagement type does not exist."""

    def __init__(self, detail: str = "Engagement type not found"):
        super().__init__(detail)


class SignalNotFoundError(FitCheckError):
    """Raised when an intent signal does not exist."""

    def __init__(self, detail: str = "Signal not found"):
        super().__init__(detail)


class DisqualificationNotFoundError(FitCheckError):
    """Raised when a lead has no disqualification record."""

    def __init__(self, detail: str = "Lead is not disqualified"):
        super().__init__(detail)


class ProspectNotFoundError(FitCheckError):
    """Raised when a saved prospect does not exist in the workspace."""

    def __init__(self, detail: str = "Prospect not found"):
        super().__init__(detail)


class InvalidRequestError(FitCheckError):
    """Raised when a request passes schema parsing but fails a domain check.

    ``errors`` holds one message per failed check so callers can show
    all problems at once.
    """

    def __init__(self, detail: str = "Validation failed", errors=None):
        self.errors = list(errors or [])
        super().__init__(detail)


class InvalidSignalError(InvalidRequestError):
    """Raised when a logged intent signal fails validation."""


class ConfirmationRequiredError(FitCheckError):
    """Raised when a destructive operation is issued without confirmation."""

    def __init__(self, detail: str = "This operation requires confirm=true"):
        super().__init__(detail)


class CompareLimitError(FitCheckError):
    """Raised when more than three prospects are selected for comparison."""

    def __init__(self, detail: str = "You can compare up to 3 prospects at a time."):
        super().__init__(detail)


class ScoringDisabledError(FitCheckError):
    """Raised when a scoring model is used while switched off in settings."""

    def __init__(self, detail: str = "Scoring model is not enabled"):
        super().__init__(detail)


class ModelNotTrainedError(FitCheckError):
    """Raised when prediction is requested before the model is trained."""

    def __init__(self, detail: str = "Model is not trained yet"):
        super().__init__(detail)


class TrainingDataError(FitCheckError):
    """Raised when there is no historical deal data to train on."""

    def __init__(self, detail: str = "No historical deals found"):
        super().__init__(detail)


class EnrichmentError(FitCheckError):
    """Raised when the enrichment waterfall gathers no usable source."""

    def __init__(
        self,
        detail: str = "Could not gather data from any source. Please check the URL and try again.",
    ):
        super().__init__(detail)


class AIGatewayError(FitCheckError):
    """Raised when the AI gateway fails or returns unusable content."""

    def __init__(self, detail: str = "AI gateway error"):
        super().__init__(detail)


class AIRateLimitError(AIGatewayError):
    """Raised when the AI gateway answers HTTP 429."""

    def __init__(
        self, detail: str = "Rate limits exceeded. Please try again in a moment."
    ):
        super().__init__(detail)


class AICreditsExhaustedError(AIGatewayError):
    """Raised when the AI gateway answers HTTP 402."""

    def __init__(
        self, detail: str = "AI credits exhausted. Please add credits to continue."
    ):
        super().__init__(detail)
