"""Services for ccpulse."""
