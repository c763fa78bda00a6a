"""
Messaging module initialization
"""

from .broker import RabbitMQBroker, declare_items_queue, items_queue_arguments

__all__ = ["RabbitMQBroker", "declare_items_queue", "items_queue_arguments"]
