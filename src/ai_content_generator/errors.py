class GenerationError(Exception):
    """Base error for a failed generation action.

    ``message`` is safe to show to the user; low-level details stay in the logs.
    """

    default_message = "An unknown error occurred while generating content."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(GenerationError):
    default_message = (
        "API Key is missing. For security, the key is not hardcoded. "
        "Please configure the API_KEY as an environment variable to use the generator."
    )


class AuthenticationError(GenerationError):
    default_message = "The provided API key is not valid. Please check your configuration."


class CommunicationError(GenerationError):
    default_message = "An error occurred while communicating with the AI. Please check the console and try again."


class ValidationError(GenerationError):
    default_message = "Prompt cannot be empty."


class GenerationInProgressError(GenerationError):
    default_message = "A generation is already in progress."
