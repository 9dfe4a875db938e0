"""
API Routers

- mail.py - SMTP mail settings
- facebook_pixel.py - Facebook Pixel settings and test event
- google_analytics.py - Google Analytics settings and test event
- tracking.py - Public tracking ids and server-side event forwarding
"""
