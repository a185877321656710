class HandwritingError(Exception):
    pass


class FontUnavailable(HandwritingError):
    def __init__(self, font_id: str, reason: str = "") -> None:
        self.font_id = font_id
        self.reason = reason
        super().__init__(f"Font '{font_id}' is unavailable{': ' + reason if reason else ''}")


class FontNotReady(HandwritingError):
    def __init__(self, font_id: str) -> None:
        self.font_id = font_id
        super().__init__(f"Font '{font_id}' has not finished loading")


class ExportTargetMissing(HandwritingError):
    pass


class PersistenceMiss(HandwritingError):
    pass


class PersistenceCorrupt(HandwritingError):
    pass
