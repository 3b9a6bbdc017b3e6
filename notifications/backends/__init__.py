"""
WhatsApp gateway backends.

Works like Django's email backends: WHATSAPP_BACKEND names the class to use
and every backend exposes send_message(phone, message).
"""
from django.conf import settings
from django.utils.module_loading import import_string


class BaseWhatsAppBackend:

    def __init__(self, fail_silently=False, **kwargs):
        self.fail_silently = fail_silently

    def send_message(self, phone, message):
        """Send one message; return the gateway message id, if any"""
        raise NotImplementedError('subclasses of BaseWhatsAppBackend must override send_message()')


def get_whatsapp_backend(backend=None, **kwargs):
    klass = import_string(backend or settings.WHATSAPP_BACKEND)
    return klass(**kwargs)
