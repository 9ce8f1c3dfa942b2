class ValidationFailed(ValueError):
    pass

class EventNotFound(ValueError):
    pass

class AlreadyRegistered(ValueError):
    pass

class InvalidCredential(ValueError):
    pass

class RoleNotAllowed(ValueError):
    pass
