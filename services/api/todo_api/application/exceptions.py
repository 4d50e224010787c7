from todo_api.common.exceptions import AppBaseException, ErrorKind

class ApplicationLayerException(AppBaseException):
    '''Base for application layer'''


### Auth
class AuthBaseException(ApplicationLayerException):
    '''Base for authentication failures'''
    kind = ErrorKind.UNAUTHORIZED

class CredentialsException(AuthBaseException):
    '''Could not validate credentials'''

class InvalidTokenError(AuthBaseException):
    '''Token is malformed, has a bad signature or carries unusable claims'''

class TokenExpiredException(AuthBaseException):
    '''Token has expired'''

class PasswordNotInitialized(ApplicationLayerException):
    '''Account still uses a temporary password'''
    kind = ErrorKind.FORBIDDEN
