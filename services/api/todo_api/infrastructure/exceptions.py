from todo_api.common.exceptions import AppBaseException

class CustomStorageException(AppBaseException):
    """Base for exceptions raised manually in storage services (databases)"""

### Startup
class StorageBootError(CustomStorageException):
    '''Storage service failed to boot within given time'''

class StorageNotInitialized(CustomStorageException):
    '''Storage service has been booted successfully, yet seems not to be initialized entirely'''
