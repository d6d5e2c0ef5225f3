class DNE(Exception):
    """ the requested thread does not exist """
    def __init__(self, message="Thread not found"):
        super().__init__(message)
        self.message = message


class BadInput(Exception):
    """ a submission that fails validation; nothing is stored """
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class BadMedia(BadInput):
    def __init__(self, message):
        super().__init__(message)


class StorageError(Exception):
    """ the store or the blob store failed a read or write """
    def __init__(self, message):
        super().__init__(message)
        self.message = message
