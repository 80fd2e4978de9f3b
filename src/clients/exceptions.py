class ClientError(Exception):
    """Base class for client data-access failures."""


class ClientNotFoundError(ClientError):
    def __init__(self, client_id: int, company_id: int):
        super().__init__(f"Client {client_id} not found for company {company_id}")
        self.client_id = client_id
        self.company_id = company_id


class ClientWriteError(ClientError):
    """The database rejected a write after all transaction attempts."""


class UnsupportedSortFieldError(ClientError):
    def __init__(self, field: str):
        super().__init__(f"Unsupported sort field: {field}")
        self.field = field
