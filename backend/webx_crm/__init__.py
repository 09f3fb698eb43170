"""webxperts CRM backend."""
