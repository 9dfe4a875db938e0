"""
Services

- settings.py - Runtime settings loaded from the env file
- env_store.py - Read/write access to the env file
- event_relay.py - Facebook Pixel / Google Analytics event relays
- mailer.py - Test email delivery
"""
