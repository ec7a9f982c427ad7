"""Text helpers shared by the email parser."""
