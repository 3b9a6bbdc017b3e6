import logging
import uuid

from . import BaseWhatsAppBackend

logger = logging.getLogger(__name__)


class WhatsAppBackend(BaseWhatsAppBackend):
    """Write messages to the log instead of sending them"""

    def send_message(self, phone, message):
        message_id = uuid.uuid4().hex
        logger.info('WhatsApp to %s [%s]: %s', phone, message_id, message)
        return message_id
