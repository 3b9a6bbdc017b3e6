"""
In-memory WhatsApp backend for tests: messages are appended to ``outbox``.
"""
from . import BaseWhatsAppBackend

outbox = []


class WhatsAppBackend(BaseWhatsAppBackend):

    def send_message(self, phone, message):
        outbox.append({'phone': phone, 'message': message})
        return str(len(outbox))
