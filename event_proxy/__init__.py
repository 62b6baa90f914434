"""
SendGrid event proxy - forwards SendGrid Event Webhook callbacks to bounce,
complaint and delivery queues as provider-agnostic notifications.
"""
__version__ = "1.0.0"
