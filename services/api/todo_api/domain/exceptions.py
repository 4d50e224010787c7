from todo_api.common.exceptions import AppBaseException, ErrorKind

class DomainLayerException(AppBaseException):
    '''Base for domain layer'''


### Kinds
class InvalidArgument(DomainLayerException):
    '''A supplied value violates a static constraint'''
    kind = ErrorKind.INVALID_ARGUMENT

class InvalidState(DomainLayerException):
    '''Operation is not allowed in the current state of the entity'''
    kind = ErrorKind.INVALID_STATE

class NotFound(DomainLayerException):
    '''Referenced entity does not exist'''
    kind = ErrorKind.NOT_FOUND

class Conflict(DomainLayerException):
    '''Operation collides with the persisted state'''
    kind = ErrorKind.CONFLICT


### Access related
class AccessException(DomainLayerException):
    '''Base for all exceptions related to access issues'''
    kind = ErrorKind.FORBIDDEN

Forbidden = AccessException

class ActionNotAllowedForRole(AccessException):
    """Raised when action is not allowed for current user"""

class NotResourceOwner(AccessException):
    """Raised when current user does not own the resource being accessed"""


### Model related
class ModelIntegrityError(Conflict):
    '''Base for integrity violation exceptons. Use as adapter for repositories' integrity exceptions'''
    def __init__(self, *args, orig: Exception|None = None):
        super().__init__(*args)
        self.orig = orig

class VersionConflict(Conflict):
    '''Raised when the stored record has been changed since it was loaded'''


####### Roles

class RoleValueError(InvalidArgument):
    '''Unknown role code'''


####### Todos

class BaseTodoException(DomainLayerException):
    '''Base for todo exceptions'''

class TodoValueError(BaseTodoException, InvalidArgument):
    '''Use within Todo domain model methods as ValueError'''

class TodoStateError(BaseTodoException, InvalidState):
    '''Raised on forbidden Todo state transitions'''

class TodoDoesNotExist(BaseTodoException, NotFound):
    '''Raised when todo does not exist'''

class TodoIntegrityError(BaseTodoException, ModelIntegrityError):
    '''Raised when todo model integrity gets violated, e.g. the owner row is missing'''


####### Users

class BaseUserException(DomainLayerException):
    '''Base for user Exceptions'''

class UserValueError(BaseUserException, InvalidArgument):
    '''Use within User Domain model methods as ValueError'''

class UserStateError(BaseUserException, InvalidState):
    '''Raised when a deleted user gets mutated or password state forbids the action'''

class UserDoesNotExist(BaseUserException, NotFound):
    '''Raised when user does not exist'''

class UserIntegrityError(BaseUserException, ModelIntegrityError):
    '''Raised when user model integrity gets violated'''

class UserAlreadyExists(UserIntegrityError):
    '''Raised when user with such ID/Username already exists'''
