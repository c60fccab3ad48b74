class ChordError(Exception):
    pass


class ChordConfigError(ChordError):
    pass


class NotRunningError(ChordError):
    def __init__(self):
        return super().__init__("Recognizer is not bound to a key event source")
