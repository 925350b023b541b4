"""Exception hierarchy shared by services, repository and API layer."""


class CareerPilotError(Exception):
    """Base class for all application errors."""


# --- AI boundary ---

class AIServiceError(CareerPilotError):
    """Generation failed. Always retryable; the credential may need replacing."""

    retryable = True


class MissingCredentialError(AIServiceError):
    def __init__(self, message: str = "Gemini API key is missing. Please configure it in Settings."):
        super().__init__(message)


class GenerationError(AIServiceError):
    pass


# --- Persistence boundary ---

class PersistenceError(CareerPilotError):
    pass


class UserNotFoundError(PersistenceError):
    def __init__(self, email: str):
        super().__init__(f"User not found: {email}")
        self.email = email


class UserExistsError(PersistenceError):
    def __init__(self, email: str):
        super().__init__("User already exists")
        self.email = email


class InvalidCredentialsError(PersistenceError):
    def __init__(self):
        super().__init__("Invalid credentials")


# --- Profile / task editing ---

class ItemNotFoundError(CareerPilotError):
    def __init__(self, collection: str, item_id: str):
        super().__init__(f"No item '{item_id}' in {collection}")
        self.collection = collection
        self.item_id = item_id


class DuplicateSkillError(CareerPilotError):
    def __init__(self, name: str):
        super().__init__(f"Skill already exists: {name}")
        self.name = name


class InvalidUploadError(CareerPilotError):
    """Uploaded file is of the wrong type, too large or unreadable."""
