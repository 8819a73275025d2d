"""
Exception classes for mongo-helping-hand.
"""


class HelpingHandError(Exception):
    """Base exception for all helping-hand errors."""
    pass


class ConfigurationError(HelpingHandError):
    """Raised when a repository cannot be constructed from its arguments."""
    pass


class MissingArgumentError(ConfigurationError):
    """Raised when a required constructor argument is empty or missing."""

    def __init__(self, argument: str):
        super().__init__(f"Argument '{argument}' is required and cannot be empty")
        self.argument = argument


class ValidationError(HelpingHandError, ValueError):
    """Raised when input validation fails."""
    pass


class InvalidIdentityError(ValidationError):
    """Raised when an identity string is not a well-formed ObjectId."""

    def __init__(self, object_id):
        super().__init__(f"Object id {object_id!r} does not parse")
        self.object_id = object_id


class UnknownFieldError(ValidationError):
    """Raised when a field name does not exist on the entity type."""

    def __init__(self, field_name: str, entity_type: type):
        super().__init__(
            f"Field '{field_name}' does not exist on {entity_type.__name__}"
        )
        self.field_name = field_name
        self.entity_type = entity_type
