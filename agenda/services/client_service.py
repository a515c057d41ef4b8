# services/client_service.py
from .storage_gateway import StorageGateway


def find_or_create_client(gateway: StorageGateway, name, phone=''):
    """
    Looks up a Client by name, ignoring case. If not found, creates a new
    record with the provided name and phone. Returns the Client instance.
    """
    existing_client = gateway.find_client_by_name(name)
    if existing_client:
        return existing_client

    # If client doesn't exist, create a new one
    client_id = gateway.add_client({'name': name, 'phone': phone or ''})
    return gateway.get_client(client_id)
