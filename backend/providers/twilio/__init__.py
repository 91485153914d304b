from backend.providers.twilio.sms import SmsDeliveryError, TwilioSmsClient

__all__ = ["SmsDeliveryError", "TwilioSmsClient"]
