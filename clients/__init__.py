# Infrastructure clients
from clients.service_order_client import ServiceOrderClient, PersistenceError
