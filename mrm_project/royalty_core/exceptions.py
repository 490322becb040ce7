
class ClientNotFound(Exception):
    """Raised when a referenced clientId is not in the client registry."""

    def __init__(self, client_id):
        self.client_id = client_id
        super().__init__(f"Client {client_id} not found")


class EntryNotFound(Exception):
    """Raised when no royalty entry exists for (clientId, month, year)."""

    def __init__(self, client_id, month, year):
        self.client_id = client_id
        self.month = month
        self.year = year
        super().__init__(f"Entry not found for {client_id} {month} {year}")
