"""Constants for Leviton Decora Smart integration."""

DOMAIN = "leviton_decora_smart"
VERSION = "1.0.0"

# Configuration
CONF_EMAIL = "email"
CONF_PASSWORD = "password"

# Accessory context keys
CONTEXT_DEVICE = "device"
CONTEXT_TOKEN = "token"

# Accessory persistence
STORAGE_VERSION = 1
STORAGE_KEY = f"{DOMAIN}.accessories"

# Device brightness levels are percentages
BRIGHTNESS_SCALE = (1, 100)

SERVICE_REMOVE_ACCESSORIES = "remove_accessories"

STARTUP_MESSAGE = f"""
-------------------------------------------------------------------
Leviton Decora Smart
Version: {VERSION}
This is a custom integration for Home Assistant
-------------------------------------------------------------------
"""
