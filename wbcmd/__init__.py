"""Switch test bench relays over MQTT."""
