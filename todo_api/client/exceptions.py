class NotAuthenticatedError(Exception):
    pass


class TodoClientError(Exception):
    def __init__(self, status: int, detail: str):
        self.status = status
        self.detail = detail
        super().__init__(f"{status}: {detail}")
